"""
tinyshape CLI - Main entry point.

Renders shape descriptions written in YAML to PNG files and prints their
cache fingerprints.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import cv2
import yaml

from tinyshape_cache import OverlayPolicy, ShapeCacheConfig, ShapeCacheService
from tinyshape_geometry import (
    InteractionState,
    ShapeBuilder,
    ShapeKind,
    ShapeParameters,
    parse_corner_radii,
)
from tinyshape_logging import LogEvent, create_logger
from tinyshape_render import OverlayShape, ResourceTable, StaticPlatform, build_state_color_map


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary with the file contents

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
        return config or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")


def parse_shape_kind(value: Any) -> ShapeKind:
    """Accept a ShapeKind name ("oval") or its integer value."""
    if isinstance(value, str):
        try:
            return ShapeKind[value.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Invalid shape: {value}. "
                f"Must be one of {[k.name.lower() for k in ShapeKind]}"
            )
    return ShapeKind(value)


def shape_from_dict(data: Dict[str, Any], resources: ResourceTable) -> ShapeParameters:
    """
    Build ShapeParameters from a shape description.

    Example YAML:
        shape: rectangle
        solid: "@color/primary"
        stroke: 1dp
        stroke_color: "#FF000000"
        corner_radii: [8, 8, 0, 0]    # 1, 4 or 8 values
        width: 120
        height: 48
        ripple: true
        ripple_color: "#FF1565C0"
        state_colors:
          pressed: "#FF1565C0"
          focused: "#FF1565C0"
          default: "#FF2196F3"
          other: "#FF2196F3"
    """
    builder = ShapeBuilder().shape(parse_shape_kind(data.get("shape", "rectangle")))

    if "solid" in data:
        builder.solid(resources.color(data["solid"]))

    state_data = data.get("state_colors")
    if state_data:
        default = resources.color(state_data["default"])
        pressed = resources.color(state_data.get("pressed", state_data["default"]))
        builder.color_state_list(build_state_color_map(
            default=default,
            pressed=pressed,
            focused=resources.color(state_data.get("focused", state_data.get("pressed", state_data["default"]))),
            other=resources.color(state_data.get("other", state_data["default"])),
        ))

    if "stroke" in data:
        builder.stroke(int(round(resources.dimension(data["stroke"]))))
    if "stroke_color" in data:
        builder.stroke_color(resources.color(data["stroke_color"]))
    if "corner_radius" in data:
        builder.corner_radius(resources.dimension(data["corner_radius"]))
    if "corner_radii" in data:
        builder.corner_radii(parse_corner_radii(
            resources.dimension(r) for r in data["corner_radii"]
        ))
    if "width" in data:
        builder.width(int(round(resources.dimension(data["width"]))))
    if "height" in data:
        builder.height(int(round(resources.dimension(data["height"]))))

    if data.get("ripple"):
        builder.ripple()
    if "ripple_color" in data:
        builder.ripple_color(resources.color(data["ripple_color"]))

    return builder.build()


def load_resources(resources_path: Optional[str], platform: StaticPlatform) -> ResourceTable:
    if resources_path is None:
        return ResourceTable(platform=platform)
    return ResourceTable.from_yaml(Path(resources_path), platform=platform)


def load_cache_config(config_path: Optional[str]) -> ShapeCacheConfig:
    """Cache config from YAML, or defaults when no path is given."""
    if config_path is None:
        return ShapeCacheConfig()
    try:
        return ShapeCacheConfig.from_yaml(Path(config_path))
    except (FileNotFoundError, ValueError, TypeError) as e:
        create_logger("cli").error(
            event=LogEvent.CONFIG_ERROR,
            message="Failed to load cache config",
            metadata={"path": config_path},
            exc_info=e,
        )
        raise


def render_command(args: argparse.Namespace) -> None:
    """Materialize a shape and write its pixels to a PNG file."""
    config = load_cache_config(args.config)
    resources = load_resources(args.resources, config.platform)
    params = shape_from_dict(load_yaml_config(args.shape), resources)

    service = ShapeCacheService(config=config)
    resource = service.materialize(params, bypass_cache=args.no_cache)

    state = InteractionState(args.state)
    if isinstance(resource, OverlayShape):
        pixels = resource.pixels_for(state)
    else:
        pixels = resource.pixels

    if not cv2.imwrite(str(args.output), pixels):
        raise ValueError(f"Could not write image: {args.output}")

    print(f"{args.output}: {type(resource).__name__} {pixels.shape[1]}x{pixels.shape[0]} [{service.key_for(params)}]")


def fingerprint_command(args: argparse.Namespace) -> None:
    """Print the cache key a render with the same config would use."""
    config = load_cache_config(args.config)
    if args.keyed:
        config = replace(config, overlay_policy=OverlayPolicy.KEYED_BY_EFFECT)
    resources = load_resources(args.resources, config.platform)
    params = shape_from_dict(load_yaml_config(args.shape), resources)
    print(ShapeCacheService(config=config).key_for(params))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyshape-cli",
        description="tinyshape CLI - Render cached shape resources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render a shape description to PNG
  tinyshape-cli render shapes/button.yaml --output button.png

  # Render the pressed state with a cache config and resource table
  tinyshape-cli render shapes/button.yaml --output pressed.png \\
      --config config/cache.yaml --resources res/values.yaml --state pressed

  # Print the cache fingerprint render would use with the same config
  tinyshape-cli fingerprint shapes/button.yaml --config config/cache.yaml --keyed
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    render = subparsers.add_parser('render', help='Render shape YAML to PNG')
    render.add_argument('shape', help='Path to shape description YAML')
    render.add_argument('--output', '-o', required=True, help='Output PNG path')
    render.add_argument('--config', help='Path to cache config YAML')
    render.add_argument('--resources', help='Path to resource table YAML')
    render.add_argument(
        '--state',
        choices=[s.value for s in InteractionState],
        default=InteractionState.DEFAULT.value,
        help='Interaction state to render for overlays (default: default)'
    )
    render.add_argument('--no-cache', action='store_true', help='Bypass the cache')

    fp = subparsers.add_parser('fingerprint', help='Print shape cache fingerprint')
    fp.add_argument('shape', help='Path to shape description YAML')
    fp.add_argument('--config', help='Path to cache config YAML (density, overlay policy)')
    fp.add_argument('--resources', help='Path to resource table YAML')
    fp.add_argument(
        '--keyed',
        action='store_true',
        help='Include overlay fields regardless of the configured overlay policy'
    )

    return parser


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == 'render':
            render_command(args)
        elif args.command == 'fingerprint':
            fingerprint_command(args)
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
