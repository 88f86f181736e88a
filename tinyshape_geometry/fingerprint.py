"""
Fingerprint Builder
===================

Pure derivation of the cache key for a ShapeParameters.

Key layout (fields joined with '|'):

    kind | fill | stroke_width | stroke_color | radii [| overlay=<flag>:<color>]

Sub-fields never contain '|', so adjacent fields cannot run together
("3" + "12" and "31" + "2" stay distinct). Width and height are not part
of the key.
"""

from tinyshape_geometry.params import ShapeParameters

FIELD_SEPARATOR = "|"
RADII_SEPARATOR = ","
RADII_TOLERANCE = 0.01


def fill_repr(params: ShapeParameters) -> str:
    """State color map serialization, or the decimal solid color."""
    if params.state_colors is not None:
        return params.state_colors.to_key()
    return str(params.solid)


def radii_repr(params: ShapeParameters) -> str:
    """
    Corner radii serialization.

    A radii sequence whose entries all lie within RADII_TOLERANCE of the
    first entry collapses to that single value, so it keys identically to
    the equivalent uniform radius.
    """
    radii = params.corner_radii
    if radii is None:
        return repr(float(params.corner_radius))

    first = radii[0]
    if all(abs(first - r) < RADII_TOLERANCE for r in radii):
        return repr(first)
    return RADII_SEPARATOR.join(repr(r) for r in radii)


def fingerprint(params: ShapeParameters, include_overlay: bool = False) -> str:
    """
    Deterministic cache key for params.

    Args:
        params: Shape parameters
        include_overlay: Append the overlay request and override color
            (keyed-by-effect policy)

    Returns:
        Fingerprint string
    """
    fields = [
        str(int(params.kind)),
        fill_repr(params),
        str(params.stroke_width),
        str(params.stroke_color),
        radii_repr(params),
    ]
    if include_overlay:
        fields.append(f"overlay={int(params.overlay_requested)}:{params.overlay_color}")
    return FIELD_SEPARATOR.join(fields)
