"""
Resource lookup: symbolic color and dimension identifiers.

YAML layout:

    colors:
      primary: "#2196F3"
      scrim: "#80000000"
    dimensions:
      corner: 8dp
      hairline: 1px
"""

import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tinyshape_render.colors import parse_color
from tinyshape_render.interfaces import Platform
from tinyshape_render.platform import StaticPlatform

_DIMENSION_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(dp|dip|px)?\s*$")
_COLOR_PREFIX = "@color/"
_DIMEN_PREFIX = "@dimen/"


def parse_dimension(value: Any, platform: Platform) -> float:
    """
    Parse "<n>dp", "<n>px" or a bare number (pixels).

    Raises:
        ValueError: If the literal is malformed
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    match = _DIMENSION_PATTERN.match(str(value))
    if match is None:
        raise ValueError(f"Invalid dimension: {value!r} (expected '<n>dp' or '<n>px')")

    number = float(match.group(1))
    if match.group(2) in ("dp", "dip"):
        return float(platform.dp_to_px(number))
    return number


class ResourceTable:
    """
    Symbolic color/dimension lookup.

    Usage:
        table = ResourceTable.from_yaml(Path("res.yaml"))
        table.resolve_color("@color/primary")   # 0xFF2196F3
        table.resolve_dimension("corner")       # 16.0 at density 2
    """

    def __init__(
        self,
        colors: Optional[Dict[str, Any]] = None,
        dimensions: Optional[Dict[str, Any]] = None,
        platform: Optional[Platform] = None,
    ):
        self.platform = platform or StaticPlatform()
        self._colors = {name: parse_color(value) for name, value in (colors or {}).items()}
        self._dimensions = {
            name: parse_dimension(value, self.platform)
            for name, value in (dimensions or {}).items()
        }

    @classmethod
    def from_yaml(cls, yaml_path: Path, platform: Optional[Platform] = None) -> "ResourceTable":
        """
        Load a resource table from YAML.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML or a value is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Resource file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        return cls(
            colors=data.get("colors", {}),
            dimensions=data.get("dimensions", {}),
            platform=platform,
        )

    def resolve_color(self, identifier: str) -> int:
        """
        ARGB color for identifier ("name" or "@color/name").

        Raises:
            KeyError: If the color is unknown
        """
        name = identifier[len(_COLOR_PREFIX):] if identifier.startswith(_COLOR_PREFIX) else identifier
        if name not in self._colors:
            raise KeyError(
                f"Color '{name}' not defined. "
                f"Available colors: {', '.join(sorted(self._colors)) or '(none)'}"
            )
        return self._colors[name]

    def resolve_dimension(self, identifier: str) -> float:
        """
        Pixel value for identifier ("name" or "@dimen/name").

        Raises:
            KeyError: If the dimension is unknown
        """
        name = identifier[len(_DIMEN_PREFIX):] if identifier.startswith(_DIMEN_PREFIX) else identifier
        if name not in self._dimensions:
            raise KeyError(
                f"Dimension '{name}' not defined. "
                f"Available dimensions: {', '.join(sorted(self._dimensions)) or '(none)'}"
            )
        return self._dimensions[name]

    def color(self, value: Any) -> int:
        """Resolve a color reference or parse a literal."""
        if isinstance(value, str) and value.startswith(_COLOR_PREFIX):
            return self.resolve_color(value)
        return parse_color(value)

    def dimension(self, value: Any) -> float:
        """Resolve a dimension reference or parse a literal."""
        if isinstance(value, str) and value.startswith(_DIMEN_PREFIX):
            return self.resolve_dimension(value)
        return parse_dimension(value, self.platform)
