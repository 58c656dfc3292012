"""
Configuration for the Halo Timer application.
All values are fixed at startup; nothing is persisted.
"""

import os
from dataclasses import dataclass

LOG_LEVEL_ENV = "HALO_TIMER_LOG_LEVEL"


@dataclass(frozen=True)
class TimerConfig:
    """Durations, bounds and animation constants for the session machine."""
    session_seconds: int = 25 * 60
    break_seconds: int = 5 * 60
    min_session_seconds: int = 1
    max_session_seconds: int = 6 * 60 * 60
    min_break_seconds: int = 1
    max_break_seconds: int = 60 * 60
    glide_speed: float = 0.05
    tick_interval: float = 1.0  # seconds
    frame_interval_ms: int = 16
    max_typed_digits: int = 3

    def __post_init__(self):
        """Validate the defaults against their own bounds."""
        if not self.min_session_seconds <= self.session_seconds <= self.max_session_seconds:
            raise ValueError(
                f"session_seconds must be within "
                f"[{self.min_session_seconds}, {self.max_session_seconds}]"
            )
        if not self.min_break_seconds <= self.break_seconds <= self.max_break_seconds:
            raise ValueError(
                f"break_seconds must be within "
                f"[{self.min_break_seconds}, {self.max_break_seconds}]"
            )
        if not 0.0 < self.glide_speed <= 1.0:
            raise ValueError("glide_speed must be in (0, 1]")
        if self.tick_interval <= 0:
            raise ValueError("tick_interval must be greater than zero")


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed screen geometry the region table is computed from."""
    width: int = 400
    height: int = 600
    halo_offset_y: int = -40
    halo_diameter: int = 300
    column_gap: int = 100

    @property
    def halo_center(self) -> tuple:
        return (self.width / 2, self.height / 2 + self.halo_offset_y)

    @property
    def halo_radius(self) -> float:
        return self.halo_diameter / 2


def log_level_from_env(default: str = "INFO") -> str:
    """Read the log level name from the environment."""
    level = os.environ.get(LOG_LEVEL_ENV, default).strip().upper()
    return level or default
