"""
Declarative draw list for the Halo Timer screen.
The session machine describes what to draw; a renderer paints it.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .layout import Rect
from .models import Mode

# Colors - bright on dark background
BACKGROUND = "#1e1e1e"
TEXT_COLOR = "#e0e0e0"
MUTED_TEXT = "#a0a0a0"
STUDY_COLOR = "#66BB6A"
BREAK_COLOR = "#42A5F5"
PAUSED_COLOR = "#FFA726"
TRACK_COLOR = "#404040"
ARROW_COLOR = "#4CAF50"
BUTTON_COLOR = "#404040"
START_COLOR = "#4CAF50"
DANGER_COLOR = "#f44336"
INPUT_ACTIVE_COLOR = "#4CAF50"
INPUT_IDLE_COLOR = "#2d2d2d"
DIM_COLOR = "#000000"
DIM_ALPHA = 180


@dataclass(frozen=True)
class HaloItem:
    """Circular progress ring: remaining arc in color, elapsed in track_color."""
    center: Tuple[float, float]
    diameter: float
    remaining_fraction: float
    color: str
    track_color: str = TRACK_COLOR


@dataclass(frozen=True)
class TextItem:
    """Text centred horizontally on position."""
    position: Tuple[float, float]
    text: str
    size: int = 14
    color: str = TEXT_COLOR
    bold: bool = False


@dataclass(frozen=True)
class ButtonItem:
    region: Rect
    label: str
    fill: str = BUTTON_COLOR


@dataclass(frozen=True)
class TriangleItem:
    region: Rect
    color: str
    pointing_up: bool


@dataclass(frozen=True)
class InputBoxItem:
    """Typed-minutes field. Shows the buffer while active."""
    region: Rect
    text: str
    active: bool


@dataclass(frozen=True)
class PopupItem:
    """Dimmed full-screen overlay with a message box and two buttons."""
    screen: Rect
    box: Rect
    message: str
    yes: ButtonItem
    no: ButtonItem
    dim_color: str = DIM_COLOR
    dim_alpha: int = DIM_ALPHA


DrawItem = Union[HaloItem, TextItem, ButtonItem, TriangleItem, InputBoxItem, PopupItem]


@dataclass(frozen=True)
class RenderFrame:
    """Everything the renderer needs for one frame."""
    mode: Mode
    items: Tuple[DrawItem, ...]
    background: str = BACKGROUND

    def of_type(self, kind) -> Tuple[DrawItem, ...]:
        return tuple(item for item in self.items if isinstance(item, kind))

    def popup(self) -> Optional[PopupItem]:
        popups = self.of_type(PopupItem)
        return popups[0] if popups else None


def format_hms(seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_ms(seconds: int) -> str:
    """Format seconds as MM:SS. Minutes are not wrapped into hours."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"
