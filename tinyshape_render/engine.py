"""
Construction Engine
===================

Decides what to build for a cache miss: a plain shape, an overlay
composite, or the plain shape when the overlay cannot be rendered.

Decision order:
1. Substitute the default size for non-positive width/height
2. Overlay not requested -> plain content
3. Platform without overlay support -> plain content (degraded)
4. Resolve the state color map (caller's, override color, or derived
   pressed color); strict mode refuses when nothing is resolvable
5. Content layer + black mask -> overlay composite

Thread Safety:
- Stateless apart from immutable collaborators; safe to call concurrently
"""

from enum import Enum
from typing import Any, Callable, Optional

from tinyshape_geometry.params import ShapeParameters, StateColorMap
from tinyshape_logging import LogEvent, StructuredLogger, create_logger
from tinyshape_render.colors import (
    OPAQUE_BLACK,
    TRANSPARENT,
    build_state_color_map,
    darken,
    lighten,
)
from tinyshape_render.interfaces import Platform, ShapeRenderer
from tinyshape_render.platform import StaticPlatform
from tinyshape_render.raster import RasterRenderer

DEFAULT_SIZE_DP = 20
PRESSED_ADJUST_FRACTION = 0.1


class ConfigurationError(Exception):
    """Raised when a strict-mode overlay has no resolvable colors."""
    pass


class ConstructionMode(str, Enum):
    """How missing overlay inputs are handled."""

    LENIENT = "lenient"
    """Synthesize a state color map from whatever is available."""

    STRICT = "strict"
    """Fail with ConfigurationError when no color information exists."""


ContentProvider = Callable[[ShapeParameters], Any]


class ConstructionEngine:
    """
    Builds realized resources from ShapeParameters.

    Usage:
        engine = ConstructionEngine(
            renderer=RasterRenderer(),
            platform=StaticPlatform(dark_mode=True),
            mode=ConstructionMode.STRICT,
        )
        resource = engine.build(params)
    """

    def __init__(
        self,
        renderer: Optional[ShapeRenderer] = None,
        platform: Optional[Platform] = None,
        mode: ConstructionMode = ConstructionMode.LENIENT,
        default_size_dp: float = DEFAULT_SIZE_DP,
        pressed_adjust_fraction: float = PRESSED_ADJUST_FRACTION,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize construction engine.

        Args:
            renderer: Rendering primitive (default: RasterRenderer)
            platform: Capability/density queries (default: StaticPlatform)
            mode: Lenient or strict overlay handling
            default_size_dp: Size used for unset width/height
            pressed_adjust_fraction: Lighten/darken amount for derived pressed colors
            logger: Structured logger (default: "engine" component)
        """
        if default_size_dp <= 0:
            raise ValueError(f"default_size_dp must be positive, got {default_size_dp}")
        if not 0.0 < pressed_adjust_fraction <= 1.0:
            raise ValueError(
                f"pressed_adjust_fraction must be in (0.0, 1.0], got {pressed_adjust_fraction}"
            )

        self.renderer = renderer or RasterRenderer()
        self.platform = platform or StaticPlatform()
        self.mode = ConstructionMode(mode)
        self.default_size_dp = default_size_dp
        self.pressed_adjust_fraction = pressed_adjust_fraction
        self.logger = logger or create_logger("engine")

    def default_size_px(self) -> int:
        return self.platform.dp_to_px(self.default_size_dp)

    def effective_size(self, params: ShapeParameters) -> tuple[int, int]:
        """(width, height) with the default size substituted for unset values."""
        default = self.default_size_px()
        width = params.width if params.width > 0 else default
        height = params.height if params.height > 0 else default
        return width, height

    def build(
        self,
        params: ShapeParameters,
        content_provider: Optional[ContentProvider] = None,
    ) -> Any:
        """
        Build the resource for params.

        Args:
            params: Shape parameters
            content_provider: Source for the plain content layer of an
                overlay (e.g. a nested cached lookup); defaults to
                painting it directly

        Returns:
            Plain shape or overlay composite

        Raises:
            ConfigurationError: Strict mode overlay without color information
        """
        if not params.overlay_requested:
            return self.build_content(params)

        if not self.platform.supports_overlay_effect():
            self.logger.warning(
                event=LogEvent.OVERLAY_DEGRADED,
                message="Overlay effect not supported, returning plain shape",
                metadata={'kind': params.kind.name},
            )
            return self._content(params, content_provider)

        # Resolved before any content lookup so a refusal leaves caches untouched
        state_colors = self.resolve_state_colors(params)

        content = self._content(params, content_provider)
        mask = self.build_mask(params)
        return self.renderer.render_overlay(state_colors, content, mask)

    def build_content(self, params: ShapeParameters) -> Any:
        """Paint the plain shape (no overlay)."""
        width, height = self.effective_size(params)
        if params.state_colors is not None and self.renderer.supports_state_fill:
            fill = params.state_colors
        else:
            fill = params.solid
        return self.renderer.render_shape(
            params.kind, width, height, fill, params.stroke, params.radii,
        )

    def build_mask(self, params: ShapeParameters) -> Any:
        """Same outline filled with opaque black; bounds the overlay."""
        width, height = self.effective_size(params)
        return self.renderer.render_shape(
            params.kind, width, height, OPAQUE_BLACK, params.stroke, params.radii,
        )

    def resolve_state_colors(self, params: ShapeParameters) -> StateColorMap:
        """
        State color map for an overlay.

        Raises:
            ConfigurationError: Strict mode with no map, no override color
                and no solid color
        """
        if params.state_colors is not None:
            return params.state_colors

        if (
            self.mode == ConstructionMode.STRICT
            and params.overlay_color == TRANSPARENT
            and params.solid == TRANSPARENT
        ):
            error = ConfigurationError(
                "Overlay requested without a state color map, overlay color "
                "or solid color; set one of them or use lenient mode"
            )
            self.logger.error(
                event=LogEvent.CONSTRUCTION_ERROR,
                message="Refusing to synthesize overlay colors",
                metadata={'kind': params.kind.name, 'mode': self.mode.value},
                exc_info=error,
            )
            raise error

        if params.overlay_color != TRANSPARENT:
            pressed = params.overlay_color
        elif self.platform.is_dark_mode():
            pressed = lighten(params.solid, self.pressed_adjust_fraction)
        else:
            pressed = darken(params.solid, self.pressed_adjust_fraction)

        self.logger.warning(
            event=LogEvent.OVERLAY_STATE_MAP_SYNTHESIZED,
            message="Overlay requested without a state color map; set one explicitly",
            metadata={'solid': params.solid, 'pressed': pressed},
        )
        return build_state_color_map(
            default=params.solid,
            pressed=pressed,
            focused=pressed,
            other=params.solid,
        )

    def _content(self, params: ShapeParameters, content_provider: Optional[ContentProvider]) -> Any:
        plain = params.without_overlay()
        if content_provider is not None:
            return content_provider(plain)
        return self.build_content(plain)
