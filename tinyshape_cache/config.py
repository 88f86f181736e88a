"""
Configuration schema for the shape cache.

Defines cache capacity, overlay keying policy, construction mode and the
platform description, loadable from YAML.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

from tinyshape_render.engine import ConstructionMode, DEFAULT_SIZE_DP, PRESSED_ADJUST_FRACTION
from tinyshape_render.platform import StaticPlatform

DEFAULT_CAPACITY = 30


class OverlayPolicy(str, Enum):
    """Whether overlay requests participate in cache keys."""

    UNKEYED_FORCED_BYPASS = "unkeyed_forced_bypass"
    """Overlay composites are never cached; their plain content is."""

    KEYED_BY_EFFECT = "keyed_by_effect"
    """Overlay state is part of the fingerprint; composites are cached."""


@dataclass(frozen=True)
class ShapeCacheConfig:
    """
    Shape cache configuration.

    Immutable after construction (frozen dataclass). A missing or
    non-positive capacity falls back to DEFAULT_CAPACITY.
    """

    capacity: int | None = DEFAULT_CAPACITY
    overlay_policy: OverlayPolicy = OverlayPolicy.UNKEYED_FORCED_BYPASS
    construction_mode: ConstructionMode = ConstructionMode.LENIENT
    default_size_dp: float = DEFAULT_SIZE_DP
    pressed_adjust_fraction: float = PRESSED_ADJUST_FRACTION
    log_level: str = "INFO"
    platform: StaticPlatform = field(default_factory=StaticPlatform)

    def __post_init__(self):
        """Normalize enums and validate values."""
        if self.capacity is None or self.capacity <= 0:
            object.__setattr__(self, 'capacity', DEFAULT_CAPACITY)

        try:
            object.__setattr__(self, 'overlay_policy', OverlayPolicy(self.overlay_policy))
        except ValueError:
            raise ValueError(
                f"Invalid overlay_policy: {self.overlay_policy}. "
                f"Must be one of {[p.value for p in OverlayPolicy]}"
            )

        try:
            object.__setattr__(self, 'construction_mode', ConstructionMode(self.construction_mode))
        except ValueError:
            raise ValueError(
                f"Invalid construction_mode: {self.construction_mode}. "
                f"Must be one of {[m.value for m in ConstructionMode]}"
            )

        if self.default_size_dp <= 0:
            raise ValueError(
                f"default_size_dp must be positive, got {self.default_size_dp}"
            )

        if not 0.0 < self.pressed_adjust_fraction <= 1.0:
            raise ValueError(
                f"pressed_adjust_fraction must be in (0.0, 1.0], got {self.pressed_adjust_fraction}"
            )

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        level = str(self.log_level).upper()
        if level not in valid_levels:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. Must be one of {sorted(valid_levels)}"
            )
        object.__setattr__(self, 'log_level', level)

    @property
    def logging_level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ShapeCacheConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            capacity: 64
            overlay_policy: "keyed_by_effect"
            construction_mode: "strict"
            default_size_dp: 20
            pressed_adjust_fraction: 0.1
            log_level: "INFO"

            platform:
              overlay_supported: true
              dark_mode: false
              density: 2.0

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML or a value is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}")

        platform_data = data.get("platform", {}) or {}
        platform = StaticPlatform(**platform_data)

        return cls(
            capacity=data.get("capacity", DEFAULT_CAPACITY),
            overlay_policy=data.get("overlay_policy", OverlayPolicy.UNKEYED_FORCED_BYPASS),
            construction_mode=data.get("construction_mode", ConstructionMode.LENIENT),
            default_size_dp=data.get("default_size_dp", DEFAULT_SIZE_DP),
            pressed_adjust_fraction=data.get("pressed_adjust_fraction", PRESSED_ADJUST_FRACTION),
            log_level=data.get("log_level", "INFO"),
            platform=platform,
        )
