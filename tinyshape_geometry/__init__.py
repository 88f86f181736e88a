"""
Geometry Layer
==============

Bounded Context: Shape description and cache keys.

Responsibilities:
- Immutable shape parameters (ShapeParameters, StateColorMap, Stroke)
- Fluent builder (ShapeBuilder)
- Fingerprint derivation
- NO rendering, NO caching
"""

from tinyshape_geometry.params import (
    CORNER_RADII_COUNT,
    InteractionState,
    ShapeBuilder,
    ShapeKind,
    ShapeParameters,
    StateColorMap,
    Stroke,
    parse_corner_radii,
)
from tinyshape_geometry.fingerprint import fingerprint, fill_repr, radii_repr

__all__ = [
    "CORNER_RADII_COUNT",
    "InteractionState",
    "ShapeBuilder",
    "ShapeKind",
    "ShapeParameters",
    "StateColorMap",
    "Stroke",
    "parse_corner_radii",
    "fingerprint",
    "fill_repr",
    "radii_repr",
]
