"""
Collaborator Interfaces
=======================

Protocols the construction engine depends on. RasterRenderer and
StaticPlatform are the bundled implementations; callers embedding
tinyshape in another toolkit provide their own.
"""

from typing import Any, Protocol, Tuple

from tinyshape_geometry.params import ShapeKind, StateColorMap, Stroke


class ShapeRenderer(Protocol):
    """Native 2D shape primitive."""

    supports_state_fill: bool
    """Whether render_shape accepts a StateColorMap as fill."""

    def render_shape(
        self,
        kind: ShapeKind,
        width: int,
        height: int,
        fill: int | StateColorMap,
        stroke: Stroke | None = None,
        radii: Tuple[float, ...] | None = None,
    ) -> Any:
        """Paint one shape and return the realized resource."""
        ...

    def render_overlay(self, state_colors: StateColorMap, content: Any, mask: Any) -> Any:
        """Combine content and mask into a state-reactive overlay resource."""
        ...


class Platform(Protocol):
    """Capability and unit queries."""

    def supports_overlay_effect(self) -> bool:
        ...

    def is_dark_mode(self) -> bool:
        ...

    def dp_to_px(self, value: float) -> int:
        ...
