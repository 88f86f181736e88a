"""
Test Construction Engine
========================

Plain vs overlay vs degraded construction, state color map synthesis,
strict mode and the raster renderer.

Usage:
    pytest test_construction.py
"""

import threading

import numpy as np
import pytest

from tinyshape_geometry import InteractionState, ShapeKind, ShapeParameters
from tinyshape_render import (
    OPAQUE_BLACK,
    ConfigurationError,
    ConstructionEngine,
    ConstructionMode,
    OverlayShape,
    RasterRenderer,
    RenderedShape,
    StaticPlatform,
    build_state_color_map,
    darken,
    lighten,
    parse_color,
)
from tinyshape_render.colors import to_bgra
from tinyshape_logging import create_logger

QUIET = create_logger("engine_test", level=50)

BLUE = 0xFF2196F3
DARK_BLUE = 0xFF1565C0
BUTTON_STATES = build_state_color_map(BLUE, DARK_BLUE, DARK_BLUE, BLUE)


class RecordingRenderer(RasterRenderer):
    """Raster renderer that records every render_shape call."""

    def __init__(self, supports_state_fill: bool = True):
        self.supports_state_fill = supports_state_fill
        self.calls = []
        self._lock = threading.Lock()

    def render_shape(self, kind, width, height, fill, stroke=None, radii=None):
        with self._lock:
            self.calls.append({
                'kind': kind,
                'width': width,
                'height': height,
                'fill': fill,
                'stroke': stroke,
                'radii': radii,
            })
        return super().render_shape(kind, width, height, fill, stroke, radii)


def make_engine(renderer=None, mode=ConstructionMode.LENIENT, **platform) -> ConstructionEngine:
    return ConstructionEngine(
        renderer=renderer or RecordingRenderer(),
        platform=StaticPlatform(**platform),
        mode=mode,
        logger=QUIET,
    )


# Plain construction ------------------------------------------------------------------
def test_default_size_substitution():
    """Unset dimensions become 20 dp converted with the platform density."""
    print("\n" + "=" * 60)
    print("TEST: Default size")
    print("=" * 60)

    engine = make_engine(density=2.0)
    shape = engine.build(ShapeParameters(solid=BLUE))

    assert (shape.width, shape.height) == (40, 40)
    assert shape.pixels.shape == (40, 40, 4)

    half = engine.build(ShapeParameters(solid=BLUE, width=30, height=-1))
    assert (half.width, half.height) == (30, 40)
    print("✓ 20dp at density 2.0 -> 40px")


def test_stroke_only_when_positive():
    renderer = RecordingRenderer()
    engine = make_engine(renderer)

    engine.build(ShapeParameters(solid=BLUE, stroke_color=0xFF000000, width=10, height=10))
    engine.build(ShapeParameters(solid=BLUE, stroke_width=2, stroke_color=0xFF000000, width=10, height=10))

    assert renderer.calls[0]['stroke'] is None
    assert renderer.calls[1]['stroke'].width == 2
    assert renderer.calls[1]['stroke'].color == 0xFF000000


def test_radii_preference():
    renderer = RecordingRenderer()
    engine = make_engine(renderer)
    radii = (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0)

    engine.build(ShapeParameters(corner_radius=4.0, corner_radii=radii, width=20, height=20))
    engine.build(ShapeParameters(corner_radius=4.0, width=20, height=20))
    engine.build(ShapeParameters(corner_radius=0.0, width=20, height=20))

    assert renderer.calls[0]['radii'] == radii
    assert renderer.calls[1]['radii'] == (4.0,) * 8
    assert renderer.calls[2]['radii'] is None


def test_state_fill_preferred_when_supported():
    supported = RecordingRenderer(supports_state_fill=True)
    unsupported = RecordingRenderer(supports_state_fill=False)
    params = ShapeParameters(solid=BLUE, state_colors=BUTTON_STATES, width=10, height=10)

    make_engine(supported).build(params)
    make_engine(unsupported).build(params)

    assert supported.calls[0]['fill'] is BUTTON_STATES
    assert unsupported.calls[0]['fill'] == BLUE


# Overlay construction ----------------------------------------------------------------
def test_overlay_uses_caller_state_map_and_black_mask():
    renderer = RecordingRenderer()
    engine = make_engine(renderer)
    params = ShapeParameters(
        solid=BLUE, state_colors=BUTTON_STATES, overlay_requested=True,
        corner_radius=6, width=30, height=20,
    )

    overlay = engine.build(params)

    assert isinstance(overlay, OverlayShape)
    assert overlay.state_colors is BUTTON_STATES
    assert renderer.calls[1]['fill'] == OPAQUE_BLACK
    assert renderer.calls[1]['radii'] == renderer.calls[0]['radii']
    assert (overlay.mask.width, overlay.mask.height) == (30, 20)


def test_overlay_color_override():
    overlay = make_engine().build(ShapeParameters(
        solid=BLUE, overlay_requested=True, overlay_color=DARK_BLUE, width=10, height=10,
    ))

    states = overlay.state_colors
    assert states.color_for(InteractionState.PRESSED) == DARK_BLUE
    assert states.color_for(InteractionState.FOCUSED) == DARK_BLUE
    assert states.color_for(InteractionState.DEFAULT) == BLUE


def test_pressed_color_darkened_in_light_mode():
    overlay = make_engine(dark_mode=False).build(ShapeParameters(
        solid=0xFF646464, overlay_requested=True, width=10, height=10,
    ))
    assert overlay.state_colors.color_for(InteractionState.PRESSED) == 0xFF5A5A5A
    assert overlay.state_colors.color_for(InteractionState.DEFAULT) == 0xFF646464


def test_pressed_color_lightened_in_dark_mode():
    overlay = make_engine(dark_mode=True).build(ShapeParameters(
        solid=0xFF373737, overlay_requested=True, width=10, height=10,
    ))
    assert overlay.state_colors.color_for(InteractionState.PRESSED) == 0xFF4B4B4B


def test_overlay_dropped_without_capability():
    """Degraded result equals the plain shape."""
    engine = make_engine(overlay_supported=False)
    params = ShapeParameters(solid=BLUE, overlay_requested=True, width=12, height=12)

    degraded = engine.build(params)
    plain = engine.build(params.without_overlay())

    assert isinstance(degraded, RenderedShape)
    assert degraded == plain
    assert np.array_equal(degraded.pixels, plain.pixels)


def test_content_provider_supplies_content_layer():
    engine = make_engine()
    shared = engine.build_content(ShapeParameters(solid=BLUE, width=10, height=10))
    requested = []

    def provider(plain):
        requested.append(plain)
        return shared

    overlay = engine.build(
        ShapeParameters(solid=BLUE, overlay_requested=True, overlay_color=DARK_BLUE, width=10, height=10),
        content_provider=provider,
    )

    assert overlay.content is shared
    assert requested[0].overlay_requested is False
    assert requested[0].overlay_color == 0


# Strict mode ---------------------------------------------------------------------------
def test_strict_mode_without_colors_fails():
    print("\n" + "=" * 60)
    print("TEST: Strict mode")
    print("=" * 60)

    engine = make_engine(mode=ConstructionMode.STRICT)
    calls = []

    with pytest.raises(ConfigurationError):
        engine.build(
            ShapeParameters(overlay_requested=True, width=10, height=10),
            content_provider=calls.append,
        )
    assert calls == []
    print("✓ ConfigurationError raised before any content lookup")


@pytest.mark.parametrize("params", [
    ShapeParameters(solid=BLUE, overlay_requested=True),
    ShapeParameters(overlay_requested=True, overlay_color=DARK_BLUE),
    ShapeParameters(overlay_requested=True, state_colors=BUTTON_STATES),
])
def test_strict_mode_with_any_color_builds(params):
    overlay = make_engine(mode=ConstructionMode.STRICT).build(params)
    assert isinstance(overlay, OverlayShape)


def test_strict_mode_degrades_without_capability():
    engine = make_engine(mode=ConstructionMode.STRICT, overlay_supported=False)
    shape = engine.build(ShapeParameters(overlay_requested=True, width=10, height=10))
    assert isinstance(shape, RenderedShape)


def test_lenient_mode_synthesizes_from_transparent():
    overlay = make_engine().build(ShapeParameters(overlay_requested=True, width=10, height=10))
    assert overlay.state_colors.color_for(InteractionState.PRESSED) == 0


def test_engine_rejects_invalid_settings():
    with pytest.raises(ValueError):
        ConstructionEngine(default_size_dp=0, logger=QUIET)
    with pytest.raises(ValueError):
        ConstructionEngine(pressed_adjust_fraction=1.5, logger=QUIET)


# Colors --------------------------------------------------------------------------------
def test_color_helpers():
    assert to_bgra(BLUE) == (0xF3, 0x96, 0x21, 0xFF)
    assert darken(0x80FFFFFF, 0.5) == 0x80808080
    assert lighten(0xFF000000, 1.0) == 0xFFFFFFFF
    assert parse_color("#2196F3") == BLUE
    assert parse_color("#802196F3") == 0x802196F3
    assert parse_color(BLUE) == BLUE

    with pytest.raises(ValueError):
        parse_color("2196F3")
    with pytest.raises(ValueError):
        parse_color("#12345")
    with pytest.raises(ValueError):
        darken(BLUE, 2.0)


# Raster renderer -----------------------------------------------------------------------
def test_raster_oval_fills_center_and_leaves_corners_clear():
    shape = RasterRenderer().render_shape(ShapeKind.OVAL, 40, 40, 0xFFFF0000)

    assert tuple(shape.pixels[20, 20]) == (0, 0, 255, 255)
    assert shape.pixels[0, 0, 3] == 0
    assert shape.pixels.flags.writeable is False


def test_raster_rounded_rectangle_corners():
    renderer = RasterRenderer()
    square = renderer.render_shape(ShapeKind.RECTANGLE, 40, 40, BLUE)
    rounded = renderer.render_shape(ShapeKind.RECTANGLE, 40, 40, BLUE, radii=(12.0,) * 8)

    assert square.pixels[1, 1, 3] == 255
    assert rounded.pixels[0, 0, 3] == 0
    assert rounded.pixels[20, 20, 3] == 255


def test_raster_line_needs_stroke():
    from tinyshape_geometry import Stroke

    renderer = RasterRenderer()
    bare = renderer.render_shape(ShapeKind.LINE, 30, 10, BLUE)
    stroked = renderer.render_shape(ShapeKind.LINE, 30, 10, BLUE, stroke=Stroke(width=2, color=0xFF000000))

    assert not bare.pixels.any()
    assert stroked.pixels[:, 15, 3].max() > 0


def test_raster_ring_leaves_center_clear():
    ring = RasterRenderer().render_shape(ShapeKind.RING, 45, 45, BLUE)

    assert ring.pixels[22, 22, 3] == 0
    assert ring.pixels[:, 22, 3].max() == 255


def test_raster_rejects_empty_canvas():
    with pytest.raises(ValueError):
        RasterRenderer().render_shape(ShapeKind.OVAL, 0, 10, BLUE)


def test_overlay_pressed_pixels_are_tinted():
    overlay = make_engine().build(ShapeParameters(
        solid=0xFFFFFFFF, overlay_requested=True, overlay_color=0xFF000000, width=20, height=20,
    ))

    default = overlay.pixels_for(InteractionState.DEFAULT)
    pressed = overlay.pixels_for(InteractionState.PRESSED)

    assert np.array_equal(default, overlay.pixels)
    assert pressed[10, 10, 0] < default[10, 10, 0]
    assert pressed.flags.writeable


def main():
    """Run the parameter-free tests."""
    print("\n🎸 tinyshape_render - Construction Tests")
    print("=" * 60)

    test_default_size_substitution()
    test_stroke_only_when_positive()
    test_radii_preference()
    test_state_fill_preferred_when_supported()
    test_overlay_uses_caller_state_map_and_black_mask()
    test_overlay_color_override()
    test_pressed_color_darkened_in_light_mode()
    test_pressed_color_lightened_in_dark_mode()
    test_overlay_dropped_without_capability()
    test_content_provider_supplies_content_layer()
    test_strict_mode_without_colors_fails()
    test_color_helpers()
    test_raster_oval_fills_center_and_leaves_corners_clear()
    test_raster_rounded_rectangle_corners()
    test_overlay_pressed_pixels_are_tinted()

    print("\n" + "=" * 60)
    print("✅ ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
