"""
Raster Renderer
===============

Default rendering primitive: paints shapes on transparent BGRA canvases.

Design:
- Stateless renderer (safe to share between threads)
- Immutable results (frozen dataclass, read-only pixel buffers)
- OpenCV drawing on numpy arrays
"""

from dataclasses import dataclass, field
from typing import Tuple

import cv2
import numpy as np

from tinyshape_geometry.params import InteractionState, ShapeKind, StateColorMap, Stroke
from tinyshape_render.colors import to_bgra

ARC_STEP_DEGREES = 10
OVERLAY_TINT_OPACITY = 0.4


@dataclass(frozen=True)
class RenderedShape:
    """
    Immutable painted shape.

    Attributes:
        kind: Shape outline
        width: Canvas width in pixels
        height: Canvas height in pixels
        fill: Solid ARGB color or state color map used for the fill
        stroke: Outline, if any
        radii: Corner radii (8 values), if any
        pixels: HxWx4 uint8 BGRA buffer (read-only)
    """

    kind: ShapeKind
    width: int
    height: int
    fill: int | StateColorMap
    stroke: Stroke | None
    radii: Tuple[float, ...] | None
    pixels: np.ndarray = field(compare=False, repr=False)

    def __post_init__(self):
        self.pixels.flags.writeable = False


@dataclass(frozen=True)
class OverlayShape:
    """
    Immutable state-reactive composite.

    Attributes:
        state_colors: Colors per interaction state
        content: Base shape shown in every state
        mask: Same outline in opaque black, bounds the overlay tint
    """

    state_colors: StateColorMap
    content: RenderedShape
    mask: RenderedShape

    @property
    def width(self) -> int:
        return self.content.width

    @property
    def height(self) -> int:
        return self.content.height

    @property
    def pixels(self) -> np.ndarray:
        """Resting-state pixels (the content layer)."""
        return self.content.pixels

    def pixels_for(self, state: InteractionState) -> np.ndarray:
        """
        Pixels shown in the given state.

        Non-default states tint the content with the state color, limited
        to the mask outline.

        Returns:
            New HxWx4 uint8 BGRA array owned by the caller
        """
        if state == InteractionState.DEFAULT:
            return self.content.pixels.copy()

        tint = np.array(to_bgra(self.state_colors.color_for(state)), dtype=np.float32)
        tint[3] = 255.0
        coverage = self.mask.pixels[..., 3:4].astype(np.float32) / 255.0 * OVERLAY_TINT_OPACITY

        base = self.content.pixels.astype(np.float32)
        blended = base * (1.0 - coverage) + tint * coverage
        return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


class RasterRenderer:
    """
    Paints shapes with OpenCV.

    Usage:
        renderer = RasterRenderer()
        shape = renderer.render_shape(ShapeKind.OVAL, 40, 40, 0xFFFF0000)
        shape.pixels.shape  # (40, 40, 4)
    """

    supports_state_fill = True

    def render_shape(
        self,
        kind: ShapeKind,
        width: int,
        height: int,
        fill: int | StateColorMap,
        stroke: Stroke | None = None,
        radii: Tuple[float, ...] | None = None,
    ) -> RenderedShape:
        """
        Paint one shape on a transparent canvas.

        Args:
            kind: Shape outline
            width: Canvas width in pixels (> 0)
            height: Canvas height in pixels (> 0)
            fill: ARGB color, or a state color map (its DEFAULT color is painted)
            stroke: Optional outline
            radii: Optional corner radii (RECTANGLE only)

        Returns:
            RenderedShape with read-only pixels
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas must have positive dimensions, got {width}x{height}")

        canvas = np.zeros((height, width, 4), dtype=np.uint8)
        fill_color = fill.color_for(InteractionState.DEFAULT) if isinstance(fill, StateColorMap) else fill
        fill_bgra = to_bgra(fill_color)

        if kind == ShapeKind.RECTANGLE:
            self._draw_rectangle(canvas, fill_bgra, stroke, radii)
        elif kind == ShapeKind.OVAL:
            self._draw_oval(canvas, fill_bgra, stroke)
        elif kind == ShapeKind.LINE:
            self._draw_line(canvas, stroke)
        elif kind == ShapeKind.RING:
            self._draw_ring(canvas, fill_bgra, stroke)
        else:
            raise ValueError(f"Unsupported shape kind: {kind}")

        return RenderedShape(
            kind=kind,
            width=width,
            height=height,
            fill=fill,
            stroke=stroke,
            radii=radii,
            pixels=canvas,
        )

    def render_overlay(
        self,
        state_colors: StateColorMap,
        content: RenderedShape,
        mask: RenderedShape,
    ) -> OverlayShape:
        """Combine content and mask into an OverlayShape."""
        if (content.width, content.height) != (mask.width, mask.height):
            raise ValueError(
                f"Mask size {mask.width}x{mask.height} does not match "
                f"content size {content.width}x{content.height}"
            )
        return OverlayShape(state_colors=state_colors, content=content, mask=mask)

    # Drawing ---------------------------------------------------------------------
    @staticmethod
    def _inset(stroke: Stroke | None) -> int:
        # Keep a centered stroke inside the canvas
        return stroke.width // 2 if stroke is not None else 0

    def _draw_rectangle(self, canvas, fill_bgra, stroke, radii) -> None:
        height, width = canvas.shape[:2]
        outline = self._rounded_outline(width, height, radii, self._inset(stroke))

        cv2.fillPoly(canvas, [outline], color=fill_bgra, lineType=cv2.LINE_AA)
        if stroke is not None:
            cv2.polylines(
                canvas, [outline], isClosed=True,
                color=to_bgra(stroke.color), thickness=stroke.width, lineType=cv2.LINE_AA,
            )

    @staticmethod
    def _rounded_outline(width: int, height: int, radii, inset: int) -> np.ndarray:
        """
        Closed clockwise outline of a rectangle with elliptical corners.

        radii order: top-left, top-right, bottom-right, bottom-left (x, y each).
        Radii are clamped to half the side.
        """
        left, top = inset, inset
        right, bottom = width - 1 - inset, height - 1 - inset
        half_w = max((right - left) / 2.0, 0.0)
        half_h = max((bottom - top) / 2.0, 0.0)

        radii = radii or (0.0,) * 8
        rx = [min(max(radii[i * 2], 0.0), half_w) for i in range(4)]
        ry = [min(max(radii[i * 2 + 1], 0.0), half_h) for i in range(4)]

        # (center, axes, start angle) for each corner, clockwise from top-left
        corners = [
            ((left + rx[0], top + ry[0]), (rx[0], ry[0]), 180),
            ((right - rx[1], top + ry[1]), (rx[1], ry[1]), 270),
            ((right - rx[2], bottom - ry[2]), (rx[2], ry[2]), 0),
            ((left + rx[3], bottom - ry[3]), (rx[3], ry[3]), 90),
        ]

        arcs = []
        for (cx, cy), (ax, ay), start in corners:
            arcs.append(cv2.ellipse2Poly(
                (int(round(cx)), int(round(cy))),
                (int(round(ax)), int(round(ay))),
                0, start, start + 90, ARC_STEP_DEGREES,
            ))
        return np.concatenate(arcs).astype(np.int32).reshape((-1, 1, 2))

    def _draw_oval(self, canvas, fill_bgra, stroke) -> None:
        height, width = canvas.shape[:2]
        inset = self._inset(stroke)
        center = (int(round((width - 1) / 2)), int(round((height - 1) / 2)))
        axes = (
            max(int(round((width - 1) / 2)) - inset, 0),
            max(int(round((height - 1) / 2)) - inset, 0),
        )

        cv2.ellipse(canvas, center, axes, 0, 0, 360, fill_bgra, thickness=-1, lineType=cv2.LINE_AA)
        if stroke is not None:
            cv2.ellipse(
                canvas, center, axes, 0, 0, 360,
                to_bgra(stroke.color), thickness=stroke.width, lineType=cv2.LINE_AA,
            )

    def _draw_line(self, canvas, stroke) -> None:
        # A line is only visible through its stroke
        if stroke is None:
            return
        height, width = canvas.shape[:2]
        y = int(round((height - 1) / 2))
        cv2.line(
            canvas, (0, y), (width - 1, y),
            to_bgra(stroke.color), thickness=stroke.width, lineType=cv2.LINE_AA,
        )

    def _draw_ring(self, canvas, fill_bgra, stroke) -> None:
        height, width = canvas.shape[:2]
        side = min(width, height)
        inner_radius = side / 3.0
        thickness = max(int(round(side / 9.0)), 1)
        center = (int(round((width - 1) / 2)), int(round((height - 1) / 2)))

        cv2.circle(
            canvas, center, int(round(inner_radius + thickness / 2.0)),
            fill_bgra, thickness=thickness, lineType=cv2.LINE_AA,
        )
        if stroke is not None:
            stroke_bgra = to_bgra(stroke.color)
            for radius in (inner_radius, inner_radius + thickness):
                cv2.circle(
                    canvas, center, int(round(radius)),
                    stroke_bgra, thickness=stroke.width, lineType=cv2.LINE_AA,
                )
