"""
Shape Parameters Module
=======================

Immutable description of a shape request plus the fluent builder that
produces it.

Design:
- Frozen dataclasses (safe to share between threads once built)
- Builder collects values, build() snapshots them
- Fail-fast validation in __post_init__
"""

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Iterable, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from tinyshape_cache.service import ShapeCacheService


CORNER_RADII_COUNT = 8


class ShapeKind(IntEnum):
    """Shape outline painted by the renderer."""

    RECTANGLE = 0
    """Rectangle, possibly with rounded corners."""

    OVAL = 1
    """Ellipse inscribed in the bounds."""

    LINE = 2
    """Horizontal line through the vertical center."""

    RING = 3
    """Annulus centered in the bounds."""


class InteractionState(str, Enum):
    """Interaction states a state color map can distinguish."""

    PRESSED = "pressed"
    FOCUSED = "focused"
    DEFAULT = "default"


@dataclass(frozen=True)
class StateColorMap:
    """
    Immutable state -> ARGB color association.

    Attributes:
        entries: (state, color) pairs, first match wins
        default: Color used for states without an entry
    """

    entries: Tuple[Tuple[InteractionState, int], ...]
    default: int

    def __post_init__(self):
        object.__setattr__(self, 'entries', tuple(
            (InteractionState(state), int(color)) for state, color in self.entries
        ))
        object.__setattr__(self, 'default', int(self.default))

    def color_for(self, state: InteractionState) -> int:
        """Color shown in the given state."""
        for entry_state, color in self.entries:
            if entry_state == state:
                return color
        return self.default

    def to_key(self) -> str:
        """Stable serialization used in fingerprints (no '|' characters)."""
        parts = [f"{state.value}={color & 0xFFFFFFFF:#010x}" for state, color in self.entries]
        parts.append(f"*={self.default & 0xFFFFFFFF:#010x}")
        return "{" + ",".join(parts) + "}"


@dataclass(frozen=True)
class Stroke:
    """Outline width (px) and ARGB color."""

    width: int
    color: int


@dataclass(frozen=True)
class ShapeParameters:
    """
    Everything needed to materialize one shape.

    Width/height <= 0 mean "use the default size". A zero overlay_color
    means no override was supplied. Colors are stored as unsigned 32-bit
    ARGB, so -1 and 0xFFFFFFFF are the same color.
    """

    kind: ShapeKind = ShapeKind.RECTANGLE
    solid: int = 0
    state_colors: StateColorMap | None = None
    stroke_width: int = 0
    stroke_color: int = 0
    corner_radius: float = 0.0
    corner_radii: Tuple[float, ...] | None = None
    width: int = 0
    height: int = 0
    overlay_requested: bool = False
    overlay_color: int = 0

    def __post_init__(self):
        """Normalize and validate values."""
        object.__setattr__(self, 'kind', ShapeKind(self.kind))
        for name in ('solid', 'stroke_color', 'overlay_color'):
            object.__setattr__(self, name, int(getattr(self, name)) & 0xFFFFFFFF)

        if self.stroke_width < 0:
            raise ValueError(f"stroke_width must be >= 0, got {self.stroke_width}")

        if self.corner_radius < 0:
            raise ValueError(f"corner_radius must be >= 0, got {self.corner_radius}")

        if self.corner_radii is not None:
            radii = tuple(float(r) for r in self.corner_radii)
            if not radii:
                radii = None
            elif len(radii) != CORNER_RADII_COUNT:
                raise ValueError(
                    f"corner_radii must hold {CORNER_RADII_COUNT} values "
                    f"(x/y per corner), got {len(radii)}"
                )
            elif any(r < 0 for r in radii):
                raise ValueError(f"corner_radii must be >= 0, got {radii}")
            object.__setattr__(self, 'corner_radii', radii)

    @property
    def stroke(self) -> Stroke | None:
        """Stroke to paint, or None when stroke_width is 0."""
        if self.stroke_width > 0:
            return Stroke(width=self.stroke_width, color=self.stroke_color)
        return None

    @property
    def radii(self) -> Tuple[float, ...] | None:
        """
        Effective corner radii: the explicit sequence when set, else the
        uniform radius expanded to 8 values when > 0, else None.
        """
        if self.corner_radii is not None:
            return self.corner_radii
        if self.corner_radius > 0:
            return (float(self.corner_radius),) * CORNER_RADII_COUNT
        return None

    def without_overlay(self) -> "ShapeParameters":
        """Same base shape with the overlay request removed."""
        return replace(self, overlay_requested=False, overlay_color=0)


class ShapeBuilder:
    """
    Fluent builder for ShapeParameters.

    Usage:
        drawable = (
            service.builder()
            .shape(ShapeKind.RECTANGLE)
            .solid(0xFF2196F3)
            .corner_radius(8)
            .ripple()
            .materialize()
        )
    """

    def __init__(self, service: "ShapeCacheService | None" = None):
        self.service = service
        self._values: dict = {}

    def shape(self, kind: ShapeKind | int) -> "ShapeBuilder":
        """Set the shape kind."""
        self._values['kind'] = ShapeKind(kind)
        return self

    def solid(self, color: int) -> "ShapeBuilder":
        """Set the solid ARGB fill color."""
        self._values['solid'] = int(color)
        return self

    def color_state_list(self, state_colors: StateColorMap | None) -> "ShapeBuilder":
        """Set a state dependent fill (takes precedence over solid)."""
        self._values['state_colors'] = state_colors
        return self

    def stroke(self, width: int) -> "ShapeBuilder":
        """Set the stroke width in pixels."""
        self._values['stroke_width'] = int(width)
        return self

    def stroke_color(self, color: int) -> "ShapeBuilder":
        """Set the stroke ARGB color."""
        self._values['stroke_color'] = int(color)
        return self

    def corner_radius(self, radius: float) -> "ShapeBuilder":
        """Set a uniform corner radius in pixels."""
        self._values['corner_radius'] = float(radius)
        return self

    def corner_radii(self, radii: Sequence[float] | None) -> "ShapeBuilder":
        """Set per-corner radii (x/y for top-left, top-right, bottom-right, bottom-left)."""
        self._values['corner_radii'] = None if radii is None else tuple(radii)
        return self

    def width(self, width: int) -> "ShapeBuilder":
        """Set the width in pixels."""
        self._values['width'] = int(width)
        return self

    def height(self, height: int) -> "ShapeBuilder":
        """Set the height in pixels."""
        self._values['height'] = int(height)
        return self

    def size(self, width: int, height: int) -> "ShapeBuilder":
        """Set width and height in pixels."""
        return self.width(width).height(height)

    def ripple(self, enabled: bool = True) -> "ShapeBuilder":
        """Request (or cancel) the pressed-state overlay."""
        self._values['overlay_requested'] = bool(enabled)
        return self

    def ripple_color(self, color: int) -> "ShapeBuilder":
        """Request the overlay with an explicit pressed color."""
        self._values['overlay_requested'] = True
        self._values['overlay_color'] = int(color)
        return self

    def build(self) -> ShapeParameters:
        """Snapshot the current values into immutable parameters."""
        return ShapeParameters(**self._values)

    def materialize(self, bypass_cache: bool = False):
        """
        Build the parameters and fetch the resource from the bound service.

        Args:
            bypass_cache: Construct a fresh, uncached resource

        Raises:
            RuntimeError: If the builder is not bound to a cache service
        """
        if self.service is None:
            raise RuntimeError(
                "ShapeBuilder is not bound to a cache service; "
                "use ShapeCacheService.builder() or tinyshape_cache.setup()"
            )
        return self.service.materialize(self.build(), bypass_cache=bypass_cache)


def parse_corner_radii(values: Iterable[float] | None) -> Tuple[float, ...] | None:
    """Accept 1 value (uniform), 4 values (one per corner) or 8 values."""
    if values is None:
        return None
    radii = tuple(float(v) for v in values)
    if len(radii) == 1:
        return radii * CORNER_RADII_COUNT
    if len(radii) == 4:
        return tuple(r for r in radii for _ in range(2))
    return radii
