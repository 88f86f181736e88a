"""
Rendering Layer
===============

Bounded Context: Turning shape parameters into realized resources.

    tinyshape_render/
    ├── engine.py       # ConstructionEngine (plain / overlay / degraded)
    ├── interfaces.py   # ShapeRenderer, Platform protocols
    ├── raster.py       # RasterRenderer, RenderedShape, OverlayShape
    ├── platform.py     # StaticPlatform
    ├── colors.py       # ARGB helpers, lighten/darken, state color maps
    └── resources.py    # ResourceTable (symbolic colors/dimensions)
"""

from tinyshape_render.colors import (
    OPAQUE_BLACK,
    build_state_color_map,
    darken,
    lighten,
    parse_color,
)
from tinyshape_render.engine import (
    ConfigurationError,
    ConstructionEngine,
    ConstructionMode,
)
from tinyshape_render.interfaces import Platform, ShapeRenderer
from tinyshape_render.platform import StaticPlatform
from tinyshape_render.raster import OverlayShape, RasterRenderer, RenderedShape
from tinyshape_render.resources import ResourceTable, parse_dimension

__all__ = [
    "OPAQUE_BLACK",
    "build_state_color_map",
    "darken",
    "lighten",
    "parse_color",
    "ConfigurationError",
    "ConstructionEngine",
    "ConstructionMode",
    "Platform",
    "ShapeRenderer",
    "StaticPlatform",
    "OverlayShape",
    "RasterRenderer",
    "RenderedShape",
    "ResourceTable",
    "parse_dimension",
]
