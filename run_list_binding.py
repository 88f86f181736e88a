"""
List Binding Demo
=================

Simulates list rows being rebound from several threads and shows how few
shapes are actually constructed.

Architecture:
- geometry: ShapeBuilder -> ShapeParameters (immutable)
- cache: ShapeCacheService (get-or-construct, LRU)
- render: ConstructionEngine + RasterRenderer
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path

import cv2

from tinyshape_cache import ShapeCacheConfig, ShapeCacheService
from tinyshape_geometry import InteractionState, ShapeKind
from tinyshape_render import StaticPlatform

ROW_COUNT = 500
WORKERS = 8

ROW_STYLES = [
    # (solid, corner radius, stroke)
    (0xFFFFFFFF, 0, 0),
    (0xFFF5F5F5, 0, 0),
    (0xFF2196F3, 8, 0),
    (0xFFE3F2FD, 8, 1),
    (0xFFFFEBEE, 12, 2),
]


def bind_row(service: ShapeCacheService, position: int):
    """Fetch the background and avatar shapes for one row."""
    solid, radius, stroke = ROW_STYLES[position % len(ROW_STYLES)]

    background = (
        service.builder()
        .shape(ShapeKind.RECTANGLE)
        .solid(solid)
        .corner_radius(radius)
        .stroke(stroke)
        .stroke_color(0xFFBDBDBD)
        .size(320, 56)
        .ripple()
        .materialize()
    )
    avatar = (
        service.builder()
        .shape(ShapeKind.OVAL)
        .solid(0xFF90CAF9 if position % 2 else 0xFFA5D6A7)
        .size(40, 40)
        .materialize()
    )
    return background, avatar


def main():
    """Bind rows concurrently and report cache statistics."""
    config = ShapeCacheConfig(
        capacity=16,
        platform=StaticPlatform(overlay_supported=True, dark_mode=False, density=2.0),
        log_level="ERROR",
    )
    service = ShapeCacheService(config=config)

    print("🎬 Binding rows...")
    print(f"  Rows: {ROW_COUNT}")
    print(f"  Workers: {WORKERS}")
    print()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        rows = list(pool.map(lambda p: bind_row(service, p), range(ROW_COUNT)))

    stats = service.stats()
    print("✓ Binding completed!")
    print(f"  Cached shapes: {stats['size']}/{stats['capacity']}")
    print(f"  Hits: {stats['hits']}  Misses: {stats['misses']}  Shared builds: {stats['shared_builds']}")
    print(f"  Uncached overlays: {stats['bypasses']}")

    output_dir = Path("./runs/list_binding") / datetime.now().strftime('%Y%m%d_%H%M%S')
    output_dir.mkdir(parents=True, exist_ok=True)
    background, avatar = rows[2]
    cv2.imwrite(str(output_dir / "row_default.png"), background.pixels_for(InteractionState.DEFAULT))
    cv2.imwrite(str(output_dir / "row_pressed.png"), background.pixels_for(InteractionState.PRESSED))
    cv2.imwrite(str(output_dir / "avatar.png"), avatar.pixels)
    print(f"  Output: {output_dir}")


if __name__ == "__main__":
    main()
