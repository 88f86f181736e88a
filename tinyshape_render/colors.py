"""
Color Helpers
=============

ARGB integer colors (0xAARRGGBB) and the derivations the construction
engine needs: lighter/darker pressed variants and state color maps.

Channel math goes through supervision's Color so the renderer and the
color helpers agree on channel order.
"""

from typing import Tuple

import supervision as sv

from tinyshape_geometry.params import InteractionState, StateColorMap

OPAQUE_BLACK = 0xFF000000
TRANSPARENT = 0x00000000


def split_argb(argb: int) -> Tuple[sv.Color, int]:
    """
    Split an ARGB integer into an RGB color and its alpha.

    Args:
        argb: Color as 0xAARRGGBB (negative Java-style ints accepted)

    Returns:
        (sv.Color, alpha in [0, 255])
    """
    value = int(argb) & 0xFFFFFFFF
    color = sv.Color(
        r=(value >> 16) & 0xFF,
        g=(value >> 8) & 0xFF,
        b=value & 0xFF,
    )
    return color, (value >> 24) & 0xFF


def join_argb(color: sv.Color, alpha: int) -> int:
    """Pack an RGB color and alpha back into 0xAARRGGBB."""
    return (
        (int(alpha) & 0xFF) << 24
        | (int(color.r) & 0xFF) << 16
        | (int(color.g) & 0xFF) << 8
        | (int(color.b) & 0xFF)
    )


def to_bgra(argb: int) -> Tuple[int, int, int, int]:
    """OpenCV channel order for a 4-channel canvas."""
    color, alpha = split_argb(argb)
    b, g, r = color.as_bgr()
    return int(b), int(g), int(r), int(alpha)


def _check_fraction(fraction: float) -> None:
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be in [0.0, 1.0], got {fraction}")


def darken(argb: int, fraction: float) -> int:
    """Move each channel toward black by fraction; alpha is preserved."""
    _check_fraction(fraction)
    color, alpha = split_argb(argb)
    darker = sv.Color(
        r=round(color.r * (1.0 - fraction)),
        g=round(color.g * (1.0 - fraction)),
        b=round(color.b * (1.0 - fraction)),
    )
    return join_argb(darker, alpha)


def lighten(argb: int, fraction: float) -> int:
    """Move each channel toward white by fraction; alpha is preserved."""
    _check_fraction(fraction)
    color, alpha = split_argb(argb)
    lighter = sv.Color(
        r=round(color.r + (255 - color.r) * fraction),
        g=round(color.g + (255 - color.g) * fraction),
        b=round(color.b + (255 - color.b) * fraction),
    )
    return join_argb(lighter, alpha)


def build_state_color_map(default: int, pressed: int, focused: int, other: int) -> StateColorMap:
    """
    Build a state color map.

    Args:
        default: Color for the resting state
        pressed: Color while pressed
        focused: Color while focused
        other: Fallback for any other state
    """
    return StateColorMap(
        entries=(
            (InteractionState.PRESSED, pressed),
            (InteractionState.FOCUSED, focused),
            (InteractionState.DEFAULT, default),
        ),
        default=other,
    )


def parse_color(value) -> int:
    """
    Parse a color literal.

    Accepts ints (returned unchanged), "#RRGGBB" / "#RGB" (opaque) and
    "#AARRGGBB".

    Raises:
        ValueError: If the literal is malformed
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        return value & 0xFFFFFFFF

    text = str(value).strip()
    if not text.startswith("#"):
        raise ValueError(f"Invalid color: {value!r} (expected '#RRGGBB' or '#AARRGGBB')")

    digits = text[1:]
    try:
        if len(digits) == 8:
            alpha = int(digits[:2], 16)
            color = sv.Color.from_hex("#" + digits[2:])
        elif len(digits) in (3, 6):
            alpha = 0xFF
            color = sv.Color.from_hex(text)
        else:
            raise ValueError(f"Invalid color: {value!r} (expected 3, 6 or 8 hex digits)")
    except ValueError as e:
        raise ValueError(f"Invalid color: {value!r}: {e}") from e

    return join_argb(color, alpha)
