"""
Session state machine for the Halo Timer application.
Owns the current screen, the study and break durations, countdown progress
and typed-minutes input. Every mutation goes through the transition table.
"""

import logging
import time
from types import MappingProxyType
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from . import layout as regions
from .config import TimerConfig
from .layout import Layout, Rect
from .models import Action, CONFIRM_MODES, Mode, SessionSnapshot, TransitionResult
from .render import (
    ARROW_COLOR,
    BREAK_COLOR,
    ButtonItem,
    DANGER_COLOR,
    HaloItem,
    InputBoxItem,
    MUTED_TEXT,
    PAUSED_COLOR,
    PopupItem,
    RenderFrame,
    START_COLOR,
    STUDY_COLOR,
    TextItem,
    TriangleItem,
    format_hms,
    format_ms,
)

logger = logging.getLogger(__name__)

KEY_BACKSPACE = "backspace"
KEY_ENTER = "enter"
DIGIT_KEYS = frozenset("0123456789")

# (mode, action) -> (target mode, effect method name)
# A target of None means the effect returns the mode to enter.
TRANSITIONS = MappingProxyType({
    (Mode.SETUP, Action.START): (Mode.TIMER, "_start_session"),
    (Mode.SETUP, Action.ADJUST_SESSION): (Mode.SETUP, "_adjust_session"),
    (Mode.SETUP, Action.ADJUST_BREAK): (Mode.SETUP, "_adjust_break"),
    (Mode.SETUP, Action.ACTIVATE_INPUT): (Mode.SETUP, "_activate_input"),
    (Mode.SETUP, Action.COMMIT_INPUT): (Mode.SETUP, "_commit_input"),
    (Mode.TIMER, Action.BACK): (Mode.CONFIRM_BACK, "_remember_origin"),
    (Mode.TIMER, Action.RESET): (Mode.CONFIRM_RESET, None),
    (Mode.TIMER, Action.BREAK): (Mode.BREAK, "_start_break"),
    (Mode.TIMER, Action.TOGGLE_RING): (Mode.TIMER, "_toggle_running"),
    (Mode.BREAK, Action.END_BREAK): (Mode.TIMER, "_end_break"),
    (Mode.BREAK, Action.BACK): (Mode.CONFIRM_BACK, "_remember_origin"),
    (Mode.CONFIRM_RESET, Action.CONFIRM): (Mode.TIMER, "_reset_session"),
    (Mode.CONFIRM_RESET, Action.CANCEL): (Mode.TIMER, None),
    (Mode.CONFIRM_BACK, Action.CONFIRM): (Mode.SETUP, "_return_to_setup"),
    (Mode.CONFIRM_BACK, Action.CANCEL): (None, "_resume_origin"),
})

# Region -> (action, parameters)
REGION_ACTIONS = MappingProxyType({
    regions.SESSION_HOUR_UP: (Action.ADJUST_SESSION, {"delta": 3600}),
    regions.SESSION_HOUR_DOWN: (Action.ADJUST_SESSION, {"delta": -3600}),
    regions.SESSION_MINUTE_UP: (Action.ADJUST_SESSION, {"delta": 60}),
    regions.SESSION_MINUTE_DOWN: (Action.ADJUST_SESSION, {"delta": -60}),
    regions.SESSION_SECOND_UP: (Action.ADJUST_SESSION, {"delta": 1}),
    regions.SESSION_SECOND_DOWN: (Action.ADJUST_SESSION, {"delta": -1}),
    regions.BREAK_MINUTE_UP: (Action.ADJUST_BREAK, {"delta": 60}),
    regions.BREAK_MINUTE_DOWN: (Action.ADJUST_BREAK, {"delta": -60}),
    regions.BREAK_SECOND_UP: (Action.ADJUST_BREAK, {"delta": 1}),
    regions.BREAK_SECOND_DOWN: (Action.ADJUST_BREAK, {"delta": -1}),
    regions.MINUTES_INPUT: (Action.ACTIVATE_INPUT, {}),
    regions.START_BUTTON: (Action.START, {}),
    regions.TIMER_BACK: (Action.BACK, {}),
    regions.TIMER_RESET: (Action.RESET, {}),
    regions.TIMER_BREAK: (Action.BREAK, {}),
    regions.BREAK_BACK: (Action.BACK, {}),
    regions.BREAK_END: (Action.END_BREAK, {}),
    regions.POPUP_YES: (Action.CONFIRM, {}),
    regions.POPUP_NO: (Action.CANCEL, {}),
})

SESSION_ARROWS = (
    regions.SESSION_HOUR_UP, regions.SESSION_HOUR_DOWN,
    regions.SESSION_MINUTE_UP, regions.SESSION_MINUTE_DOWN,
    regions.SESSION_SECOND_UP, regions.SESSION_SECOND_DOWN,
)
BREAK_ARROWS = (
    regions.BREAK_MINUTE_UP, regions.BREAK_MINUTE_DOWN,
    regions.BREAK_SECOND_UP, regions.BREAK_SECOND_DOWN,
)
POPUP_BUTTONS = (regions.POPUP_YES, regions.POPUP_NO)

# Regions that accept clicks in each mode
MODE_REGIONS = MappingProxyType({
    Mode.SETUP: SESSION_ARROWS + BREAK_ARROWS + (regions.MINUTES_INPUT, regions.START_BUTTON),
    Mode.TIMER: (regions.TIMER_BACK, regions.TIMER_RESET, regions.TIMER_BREAK),
    Mode.BREAK: (regions.BREAK_BACK, regions.BREAK_END),
    Mode.CONFIRM_RESET: POPUP_BUTTONS,
    Mode.CONFIRM_BACK: POPUP_BUTTONS,
})


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class SessionMachine(QObject):
    """
    Study/break session state machine.

    Modes:
        SETUP: Durations are adjusted, typed minutes entered
        TIMER: Study countdown, paused or running
        BREAK: Break countdown, always running
        CONFIRM_RESET: Popup asking to reset the study countdown
        CONFIRM_BACK: Popup asking to return to setup

    Signals:
        mode_changed: Emitted when the mode changes (provides old, new)
        session_finished: Emitted when the study countdown reaches zero
        break_finished: Emitted when the break countdown reaches zero
    """

    # Signals
    mode_changed = Signal(Mode, Mode)  # old_mode, new_mode
    session_finished = Signal()
    break_finished = Signal()

    def __init__(
        self,
        config: Optional[TimerConfig] = None,
        layout: Optional[Layout] = None,
        clock: Callable[[], float] = time.monotonic,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize the session machine in SETUP mode.

        Args:
            config: Durations, bounds and animation constants.
            layout: Region table used to resolve pointer clicks.
            clock: Monotonic time source in seconds.
            parent: Optional Qt parent object.
        """
        super().__init__(parent)

        self._config = config or TimerConfig()
        self._layout = layout or Layout()
        self._clock = clock

        self._mode = Mode.SETUP
        self._back_origin = Mode.TIMER

        # Durations
        self._session_seconds = self._config.session_seconds
        self._break_seconds = self._config.break_seconds

        # Countdown state
        self._time_left = self._session_seconds
        self._break_left = self._break_seconds
        self._running = False
        self._tick_anchor = self._clock()

        # Animated values shown on the halo
        self._display_time = float(self._time_left)
        self._display_break_time = float(self._break_left)

        # Typed-minutes input
        self._input_active = False
        self._typed_minutes = ""

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def layout(self) -> Layout:
        return self._layout

    def snapshot(self) -> SessionSnapshot:
        """Return a read-only copy of the current state."""
        return SessionSnapshot(
            mode=self._mode,
            session_seconds=self._session_seconds,
            break_seconds=self._break_seconds,
            time_left=self._time_left,
            break_left=self._break_left,
            running=self._running,
            display_time=self._display_time,
            display_break_time=self._display_break_time,
            input_active=self._input_active,
            typed_minutes=self._typed_minutes,
        )

    # ----- Actions -----

    def dispatch(self, action: Action, **params) -> TransitionResult:
        """
        Apply an action through the transition table.

        Pairs missing from the table leave the state untouched and are
        reported as not accepted.
        """
        previous = self._mode
        entry = TRANSITIONS.get((previous, action))
        if entry is None:
            logger.debug("Ignoring %s in %s", action.value, previous.name)
            return TransitionResult(action, False, previous, previous)

        target, effect_name = entry
        override = None
        if effect_name is not None:
            override = getattr(self, effect_name)(**params)
        self._mode = target if target is not None else (override or Mode.TIMER)

        logger.debug("%s: %s -> %s", action.value, previous.name, self._mode.name)
        if self._mode != previous:
            self.mode_changed.emit(previous, self._mode)
        return TransitionResult(action, True, previous, self._mode)

    def start(self) -> TransitionResult:
        return self.dispatch(Action.START)

    def adjust_session(self, delta: int) -> TransitionResult:
        return self.dispatch(Action.ADJUST_SESSION, delta=delta)

    def adjust_break(self, delta: int) -> TransitionResult:
        return self.dispatch(Action.ADJUST_BREAK, delta=delta)

    def activate_input(self) -> TransitionResult:
        return self.dispatch(Action.ACTIVATE_INPUT)

    def commit_input(self) -> TransitionResult:
        return self.dispatch(Action.COMMIT_INPUT)

    def back(self) -> TransitionResult:
        return self.dispatch(Action.BACK)

    def reset(self) -> TransitionResult:
        return self.dispatch(Action.RESET)

    def take_break(self) -> TransitionResult:
        return self.dispatch(Action.BREAK)

    def toggle_ring(self) -> TransitionResult:
        return self.dispatch(Action.TOGGLE_RING)

    def end_break(self) -> TransitionResult:
        return self.dispatch(Action.END_BREAK)

    def confirm(self) -> TransitionResult:
        return self.dispatch(Action.CONFIRM)

    def cancel(self) -> TransitionResult:
        return self.dispatch(Action.CANCEL)

    # ----- Input events -----

    def pointer_click(self, x: float, y: float) -> Optional[TransitionResult]:
        """
        Resolve a click into an action for the current mode.

        Returns:
            The dispatch result, or None if the click hit nothing.
        """
        point = (x, y)
        region = self._layout.hit_test(point, MODE_REGIONS[self._mode])

        # Clicking anywhere but the field commits typed minutes
        if self._input_active and region != regions.MINUTES_INPUT:
            self.commit_input()

        if region is not None:
            action, params = REGION_ACTIONS[region]
            return self.dispatch(action, **params)

        if self._layout.ring_hit_test(point):
            if self._mode == Mode.TIMER:
                return self.toggle_ring()
            if self._mode == Mode.BREAK:
                return self.end_break()
        return None

    def key_press(self, code: str) -> bool:
        """
        Feed a key into the typed-minutes field.

        Args:
            code: "0"-"9", "backspace" or "enter".

        Returns:
            True if the key was consumed.
        """
        if self._mode != Mode.SETUP or not self._input_active:
            return False

        if code in DIGIT_KEYS:
            if len(self._typed_minutes) < self._config.max_typed_digits:
                self._typed_minutes += code
            return True
        if code == KEY_BACKSPACE:
            self._typed_minutes = self._typed_minutes[:-1]
            return True
        if code == KEY_ENTER:
            self.commit_input()
            return True
        return False

    def frame_tick(self, now: Optional[float] = None):
        """
        Per-frame step: process at most one elapsed tick, then glide.
        Never blocks; call it from the host's animation timer.
        """
        if now is None:
            now = self._clock()

        # Advance the anchor by one interval so missed ticks are caught up
        # one per frame without drifting
        if now - self._tick_anchor >= self._config.tick_interval:
            self._tick_anchor += self._config.tick_interval
            self._on_tick()

        self.glide()

    def glide(self):
        """Move display values one step toward their targets."""
        speed = self._config.glide_speed
        self._display_time += (self._display_target() - self._display_time) * speed
        self._display_break_time += (
            self._break_display_target() - self._display_break_time
        ) * speed

    # ----- Tick handling -----

    def _on_tick(self):
        """Handle one elapsed second."""
        if self._mode == Mode.TIMER and self._running:
            was_counting = self._time_left > 0
            self._time_left = max(0, self._time_left - 1)
            if self._time_left == 0:
                self._running = False
                if was_counting:
                    logger.info("Study session finished")
                    self.session_finished.emit()

        elif self._mode == Mode.BREAK:
            self._break_left = max(0, self._break_left - 1)
            if self._break_left == 0:
                logger.info("Break finished, resuming study session")
                self.break_finished.emit()
                self.dispatch(Action.END_BREAK)

    def _display_target(self) -> float:
        if self._mode == Mode.SETUP:
            return float(self._session_seconds)
        return float(self._time_left)

    def _break_display_target(self) -> float:
        if self._mode == Mode.BREAK:
            return float(self._break_left)
        return float(self._break_seconds)

    def _record_tick_anchor(self):
        self._tick_anchor = self._clock()

    # ----- Transition effects -----

    def _start_session(self):
        if self._input_active:
            self._commit_input()
        self._time_left = self._session_seconds
        self._display_time = float(self._time_left)
        self._running = True
        self._record_tick_anchor()
        logger.info("Study session started: %ss", self._session_seconds)

    def _adjust_session(self, delta: int):
        if self._input_active:
            self._commit_input()
        self._set_session_seconds(self._session_seconds + delta)
        self._clear_input()

    def _adjust_break(self, delta: int):
        self._break_seconds = clamp(
            self._break_seconds + delta,
            self._config.min_break_seconds,
            self._config.max_break_seconds,
        )
        self._display_break_time = float(self._break_seconds)

    def _activate_input(self):
        self._typed_minutes = ""
        self._input_active = True

    def _commit_input(self):
        typed = self._typed_minutes
        self._clear_input()
        if not typed.isdigit():
            logger.debug("Discarding typed minutes %r", typed)
            return
        self._set_session_seconds(int(typed) * 60)

    def _remember_origin(self):
        self._back_origin = self._mode

    def _resume_origin(self) -> Mode:
        return self._back_origin

    def _start_break(self):
        self._running = False
        self._break_left = self._break_seconds
        self._display_break_time = float(self._break_left)
        self._record_tick_anchor()
        logger.info("Break started: %ss", self._break_seconds)

    def _end_break(self):
        self._running = True
        self._record_tick_anchor()

    def _toggle_running(self):
        self._running = not self._running

    def _reset_session(self):
        self._time_left = self._session_seconds
        self._display_time = float(self._time_left)
        self._running = False
        logger.info("Study session reset")

    def _return_to_setup(self):
        self._running = False
        self._clear_input()

    def _set_session_seconds(self, seconds: int):
        self._session_seconds = clamp(
            seconds,
            self._config.min_session_seconds,
            self._config.max_session_seconds,
        )
        self._display_time = float(self._session_seconds)

    def _clear_input(self):
        self._input_active = False
        self._typed_minutes = ""

    # ----- Rendering -----

    def render(self) -> RenderFrame:
        """Describe the current screen. Pure function of state."""
        if self._mode == Mode.SETUP:
            items = self._setup_items()
        elif self._mode == Mode.BREAK:
            items = self._break_items()
        elif self._mode == Mode.CONFIRM_BACK and self._back_origin == Mode.BREAK:
            items = self._break_items()
        else:
            items = self._timer_items()

        if self._mode in CONFIRM_MODES:
            items.append(self._popup_item())
        return RenderFrame(mode=self._mode, items=tuple(items))

    def _setup_items(self) -> list:
        lay = self._layout
        cx = lay.config.width / 2
        gap = lay.config.column_gap
        items = []

        items.append(TextItem((cx, regions.SESSION_LABEL_Y), "Study", 16, MUTED_TEXT, True))
        items.extend(self._arrow_items(SESSION_ARROWS))
        hours, rest = divmod(self._session_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        items.extend(self._field_items(
            regions.SESSION_TEXT_Y,
            ((cx - gap, hours), (cx, minutes), (cx + gap, seconds)),
        ))

        items.append(TextItem((cx, regions.BREAK_LABEL_Y), "Break", 16, MUTED_TEXT, True))
        items.extend(self._arrow_items(BREAK_ARROWS))
        minutes, seconds = divmod(self._break_seconds, 60)
        items.extend(self._field_items(
            regions.BREAK_TEXT_Y,
            ((cx - gap / 2, minutes), (cx + gap / 2, seconds)),
        ))

        items.append(TextItem((cx, regions.INPUT_LABEL_Y), "Study minutes", 12, MUTED_TEXT))
        items.append(InputBoxItem(
            region=lay[regions.MINUTES_INPUT],
            text=self._typed_minutes if self._input_active else "",
            active=self._input_active,
        ))
        items.append(ButtonItem(lay[regions.START_BUTTON], "Start", START_COLOR))
        return items

    def _arrow_items(self, names) -> list:
        return [
            TriangleItem(self._layout[name], ARROW_COLOR, name.endswith("_up"))
            for name in names
        ]

    def _field_items(self, y: float, fields) -> list:
        """Two-digit fields under their arrow columns, joined by colons."""
        items = [TextItem((x, y), f"{value:02d}", 32, bold=True) for x, value in fields]
        for (left, _), (right, _) in zip(fields, fields[1:]):
            items.append(TextItem(((left + right) / 2, y), ":", 32, bold=True))
        return items

    def _timer_items(self) -> list:
        lay = self._layout
        cx, cy = lay.halo_center
        color = STUDY_COLOR if self._running else PAUSED_COLOR
        snap = self.snapshot()

        if self._time_left == 0:
            status = "Session complete"
        elif self._running:
            status = "Tap the ring to pause"
        else:
            status = "Paused - tap the ring to resume"

        return [
            HaloItem(lay.halo_center, lay.halo_diameter, snap.remaining_fraction, color),
            TextItem((cx, cy), format_hms(self._time_left), 36, color, True),
            TextItem((cx, cy + 40), status, 12, MUTED_TEXT),
            ButtonItem(lay[regions.TIMER_BACK], "Back"),
            ButtonItem(lay[regions.TIMER_RESET], "Reset", DANGER_COLOR),
            ButtonItem(lay[regions.TIMER_BREAK], "Break", BREAK_COLOR),
        ]

    def _break_items(self) -> list:
        lay = self._layout
        cx, cy = lay.halo_center
        snap = self.snapshot()
        return [
            HaloItem(lay.halo_center, lay.halo_diameter, snap.break_remaining_fraction, BREAK_COLOR),
            TextItem((cx, cy - 40), "Break", 16, MUTED_TEXT, True),
            TextItem((cx, cy), format_ms(self._break_left), 36, BREAK_COLOR, True),
            TextItem((cx, cy + 40), "Tap the ring to end the break", 12, MUTED_TEXT),
            ButtonItem(lay[regions.BREAK_BACK], "Back"),
            ButtonItem(lay[regions.BREAK_END], "End Break", START_COLOR),
        ]

    def _popup_item(self) -> PopupItem:
        lay = self._layout
        if self._mode == Mode.CONFIRM_RESET:
            message = "Reset the study timer?"
        else:
            message = "Go back to setup?"
        return PopupItem(
            screen=Rect(0, 0, lay.config.width, lay.config.height),
            box=lay[regions.POPUP_BOX],
            message=message,
            yes=ButtonItem(lay[regions.POPUP_YES], "Yes", DANGER_COLOR),
            no=ButtonItem(lay[regions.POPUP_NO], "No"),
        )
