"""
Static platform description.

Capabilities are fixed values read from configuration instead of being
probed at runtime.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StaticPlatform:
    """
    Platform capabilities and display density.

    Attributes:
        overlay_supported: Whether overlay (ripple) effects can be rendered
        dark_mode: Whether the UI runs in dark mode
        density: Pixels per density-independent unit
    """

    overlay_supported: bool = True
    dark_mode: bool = False
    density: float = 1.0

    def __post_init__(self):
        """Validate platform values."""
        if self.density <= 0:
            raise ValueError(f"density must be positive, got {self.density}")

    def supports_overlay_effect(self) -> bool:
        return self.overlay_supported

    def is_dark_mode(self) -> bool:
        return self.dark_mode

    def dp_to_px(self, value: float) -> int:
        """Convert density-independent units to whole pixels (rounded half up)."""
        return int(value * self.density + 0.5)
