"""
Data models for the Halo Timer application.
Uses enums and dataclasses for clean, type-annotated state descriptions.
"""

from dataclasses import dataclass
from enum import Enum, auto


class Mode(Enum):
    """Screens of the session state machine. Exactly one is active."""
    SETUP = auto()
    TIMER = auto()
    BREAK = auto()
    CONFIRM_RESET = auto()
    CONFIRM_BACK = auto()


class Action(Enum):
    """Semantic actions the state machine understands."""
    START = "start"
    ADJUST_SESSION = "adjust_session"
    ADJUST_BREAK = "adjust_break"
    ACTIVATE_INPUT = "activate_input"
    COMMIT_INPUT = "commit_input"
    BACK = "back"
    RESET = "reset"
    BREAK = "break"
    TOGGLE_RING = "toggle_ring"
    END_BREAK = "end_break"
    CONFIRM = "confirm"
    CANCEL = "cancel"


# Popup modes draw on top of the timer screen
CONFIRM_MODES = frozenset({Mode.CONFIRM_RESET, Mode.CONFIRM_BACK})


@dataclass(frozen=True)
class TransitionResult:
    """Result envelope returned after dispatching an action."""
    action: Action
    accepted: bool
    previous: Mode
    mode: Mode

    @property
    def changed_mode(self) -> bool:
        return self.previous != self.mode


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Read-only view of the machine's fields.
    Used by the host and by tests; never written back.
    """
    mode: Mode
    session_seconds: int
    break_seconds: int
    time_left: int
    break_left: int
    running: bool
    display_time: float
    display_break_time: float
    input_active: bool
    typed_minutes: str

    @property
    def remaining_fraction(self) -> float:
        """Fraction of the study session still to go (0.0 - 1.0)."""
        if self.session_seconds == 0:
            return 0.0
        return max(0.0, min(1.0, self.display_time / self.session_seconds))

    @property
    def break_remaining_fraction(self) -> float:
        """Fraction of the break still to go (0.0 - 1.0)."""
        if self.break_seconds == 0:
            return 0.0
        return max(0.0, min(1.0, self.display_break_time / self.break_seconds))
