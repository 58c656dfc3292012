"""
Hit-test layout table for the Halo Timer screen.
Computes every interactive region once from fixed layout constants and
resolves pointer positions into region names.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .config import LayoutConfig

# Setup screen: study duration arrows
SESSION_HOUR_UP = "session_hour_up"
SESSION_HOUR_DOWN = "session_hour_down"
SESSION_MINUTE_UP = "session_minute_up"
SESSION_MINUTE_DOWN = "session_minute_down"
SESSION_SECOND_UP = "session_second_up"
SESSION_SECOND_DOWN = "session_second_down"

# Setup screen: break duration arrows (no hour column)
BREAK_MINUTE_UP = "break_minute_up"
BREAK_MINUTE_DOWN = "break_minute_down"
BREAK_SECOND_UP = "break_second_up"
BREAK_SECOND_DOWN = "break_second_down"

MINUTES_INPUT = "minutes_input"
START_BUTTON = "start_button"

# Timer screen
TIMER_BACK = "timer_back"
TIMER_RESET = "timer_reset"
TIMER_BREAK = "timer_break"

# Break screen
BREAK_BACK = "break_back"
BREAK_END = "break_end"

# Confirmation popup
POPUP_BOX = "popup_box"
POPUP_YES = "popup_yes"
POPUP_NO = "popup_no"

# Arrow geometry
ARROW_WIDTH = 40
ARROW_HEIGHT = 24

# Vertical positions (top edges / text baselines) of the setup screen
SESSION_LABEL_Y = 70
SESSION_UP_Y = 95
SESSION_TEXT_Y = 140
SESSION_DOWN_Y = 165
BREAK_LABEL_Y = 225
BREAK_UP_Y = 250
BREAK_TEXT_Y = 295
BREAK_DOWN_Y = 320
INPUT_LABEL_Y = 380

BUTTON_HEIGHT = 44
BOTTOM_BUTTON_Y = 500


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle. Edges belong to the rectangle."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, px: float, py: float) -> bool:
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )


def _centered(cx: float, y: float, width: float, height: float) -> Rect:
    return Rect(cx - width / 2, y, width, height)


def _compute_regions(config: LayoutConfig) -> dict:
    """Build the full region table for the given geometry."""
    cx = config.width / 2
    gap = config.column_gap
    regions = {}

    # Study arrows: hour / minute / second columns around the text column
    study_columns = (
        (SESSION_HOUR_UP, SESSION_HOUR_DOWN, cx - gap),
        (SESSION_MINUTE_UP, SESSION_MINUTE_DOWN, cx),
        (SESSION_SECOND_UP, SESSION_SECOND_DOWN, cx + gap),
    )
    for up_name, down_name, column_x in study_columns:
        regions[up_name] = _centered(column_x, SESSION_UP_Y, ARROW_WIDTH, ARROW_HEIGHT)
        regions[down_name] = _centered(column_x, SESSION_DOWN_Y, ARROW_WIDTH, ARROW_HEIGHT)

    # Break arrows: minute / second columns only
    break_columns = (
        (BREAK_MINUTE_UP, BREAK_MINUTE_DOWN, cx - gap / 2),
        (BREAK_SECOND_UP, BREAK_SECOND_DOWN, cx + gap / 2),
    )
    for up_name, down_name, column_x in break_columns:
        regions[up_name] = _centered(column_x, BREAK_UP_Y, ARROW_WIDTH, ARROW_HEIGHT)
        regions[down_name] = _centered(column_x, BREAK_DOWN_Y, ARROW_WIDTH, ARROW_HEIGHT)

    regions[MINUTES_INPUT] = _centered(cx, INPUT_LABEL_Y + 15, 100, 40)
    regions[START_BUTTON] = _centered(cx, BOTTOM_BUTTON_Y - 10, 150, 50)

    # Timer screen: three buttons spaced at quarter widths
    timer_width = 90
    quarter = config.width / 4
    regions[TIMER_BACK] = _centered(quarter, BOTTOM_BUTTON_Y, timer_width, BUTTON_HEIGHT)
    regions[TIMER_RESET] = _centered(2 * quarter, BOTTOM_BUTTON_Y, timer_width, BUTTON_HEIGHT)
    regions[TIMER_BREAK] = _centered(3 * quarter, BOTTOM_BUTTON_Y, timer_width, BUTTON_HEIGHT)

    # Break screen: two buttons centred as a pair
    break_width = 120
    regions[BREAK_BACK] = _centered(cx - 70, BOTTOM_BUTTON_Y, break_width, BUTTON_HEIGHT)
    regions[BREAK_END] = _centered(cx + 70, BOTTOM_BUTTON_Y, break_width, BUTTON_HEIGHT)

    # Confirmation popup
    box = _centered(cx, 200, 300, 180)
    regions[POPUP_BOX] = box
    regions[POPUP_YES] = _centered(cx - 65, box.y + 110, 110, BUTTON_HEIGHT)
    regions[POPUP_NO] = _centered(cx + 65, box.y + 110, 110, BUTTON_HEIGHT)

    return regions


class Layout:
    """
    Immutable table of named screen regions.

    The table is computed once in the constructor. Viewport changes are not
    supported; build a new Layout instead.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self._regions = MappingProxyType(_compute_regions(self.config))

    @property
    def regions(self) -> Mapping[str, Rect]:
        """Read-only view of the region table."""
        return self._regions

    @property
    def halo_center(self) -> Tuple[float, float]:
        return self.config.halo_center

    @property
    def halo_diameter(self) -> int:
        return self.config.halo_diameter

    def __getitem__(self, name: str) -> Rect:
        return self._regions[name]

    def hit_test(
        self,
        point: Tuple[float, float],
        names: Optional[Iterable[str]] = None,
    ) -> Optional[str]:
        """
        Return the name of the region containing point, or None.

        Args:
            point: (x, y) in screen coordinates.
            names: Optional candidate regions; others are ignored.
        """
        px, py = point
        candidates = self._regions.keys() if names is None else names
        for name in candidates:
            rect = self._regions.get(name)
            if rect is not None and rect.contains(px, py):
                return name
        return None

    def ring_hit_test(self, point: Tuple[float, float]) -> bool:
        """Check if point lies within the halo radius (inclusive)."""
        cx, cy = self.config.halo_center
        return math.hypot(point[0] - cx, point[1] - cy) <= self.config.halo_radius
