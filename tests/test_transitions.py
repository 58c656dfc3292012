"""Tests for the session transition table and pointer routing."""

import pytest

from conftest import click
from core import layout as regions
from core.models import Action, Mode
from core.session import REGION_ACTIONS, SessionMachine, TRANSITIONS


def enter_break(machine):
    machine.start()
    machine.take_break()


class TestTransitionTable:
    def test_every_effect_exists(self):
        for (mode, action), (target, effect) in TRANSITIONS.items():
            if effect is not None:
                assert callable(getattr(SessionMachine, effect)), (mode, action)
            if target is None:
                assert effect is not None, (mode, action)

    def test_every_region_maps_to_a_table_action(self):
        table_actions = {action for _, action in TRANSITIONS}
        for region, (action, _) in REGION_ACTIONS.items():
            assert action in table_actions, region

    @pytest.mark.parametrize("action", [
        Action.BACK, Action.RESET, Action.BREAK, Action.TOGGLE_RING,
        Action.END_BREAK, Action.CONFIRM, Action.CANCEL,
    ])
    def test_unlisted_pairs_are_rejected_in_setup(self, machine, action):
        before = machine.snapshot()
        result = machine.dispatch(action)
        assert not result.accepted
        assert result.mode == Mode.SETUP
        assert machine.snapshot() == before

    def test_start_rejected_while_timing(self, machine):
        machine.start()
        result = machine.start()
        assert not result.accepted
        assert machine.mode == Mode.TIMER


class TestSetupToTimer:
    def test_initial_mode_is_setup(self, machine):
        assert machine.mode == Mode.SETUP
        assert not machine.snapshot().running

    def test_start(self, machine):
        machine.adjust_session(-1000)
        result = machine.start()
        snap = machine.snapshot()
        assert result.accepted
        assert result.previous == Mode.SETUP
        assert snap.mode == Mode.TIMER
        assert snap.time_left == 500
        assert snap.display_time == 500.0
        assert snap.running

    def test_start_button_click(self, machine):
        result = click(machine, regions.START_BUTTON)
        assert result.action == Action.START
        assert machine.mode == Mode.TIMER


class TestTimerScreen:
    def test_toggle_ring_flips_running(self, machine):
        machine.start()
        machine.toggle_ring()
        assert not machine.snapshot().running
        machine.toggle_ring()
        assert machine.snapshot().running

    def test_ring_click_toggles(self, machine):
        machine.start()
        result = machine.pointer_click(200, 260)
        assert result.action == Action.TOGGLE_RING
        assert not machine.snapshot().running

    def test_click_outside_everything_is_noop(self, machine):
        machine.start()
        before = machine.snapshot()
        assert machine.pointer_click(2, 2) is None
        assert machine.snapshot() == before

    @pytest.mark.parametrize("running", [True, False])
    def test_back_always_asks_for_confirmation(self, machine, running):
        machine.start()
        if not running:
            machine.toggle_ring()
        result = click(machine, regions.TIMER_BACK)
        assert result.mode == Mode.CONFIRM_BACK

    def test_break(self, machine):
        machine.start()
        result = click(machine, regions.TIMER_BREAK)
        snap = machine.snapshot()
        assert result.mode == Mode.BREAK
        assert not snap.running
        assert snap.break_left == 300
        assert snap.display_break_time == 300.0

    def test_timer_keeps_its_progress_through_a_break(self, short_machine, clock):
        short_machine.start()
        clock.advance(1.0)
        short_machine.frame_tick()
        short_machine.take_break()
        short_machine.end_break()
        snap = short_machine.snapshot()
        assert snap.mode == Mode.TIMER
        assert snap.time_left == 4
        assert snap.running


class TestBreakScreen:
    def test_end_break_resumes_timer(self, machine):
        enter_break(machine)
        result = click(machine, regions.BREAK_END)
        assert result.mode == Mode.TIMER
        assert machine.snapshot().running

    def test_ring_click_ends_break(self, machine):
        enter_break(machine)
        result = machine.pointer_click(200, 260)
        assert result.action == Action.END_BREAK
        assert machine.mode == Mode.TIMER

    def test_back_asks_for_confirmation(self, machine):
        enter_break(machine)
        result = click(machine, regions.BREAK_BACK)
        assert result.mode == Mode.CONFIRM_BACK


class TestConfirmReset:
    def test_confirm_resets_countdown(self, short_machine, clock):
        short_machine.start()
        clock.advance(1.0)
        short_machine.frame_tick()
        short_machine.reset()
        assert short_machine.mode == Mode.CONFIRM_RESET

        result = click(short_machine, regions.POPUP_YES)
        snap = short_machine.snapshot()
        assert result.mode == Mode.TIMER
        assert snap.time_left == 5
        assert snap.display_time == 5.0
        assert not snap.running

    def test_cancel_keeps_countdown(self, short_machine, clock):
        short_machine.start()
        clock.advance(1.0)
        short_machine.frame_tick()
        short_machine.reset()

        result = click(short_machine, regions.POPUP_NO)
        snap = short_machine.snapshot()
        assert result.mode == Mode.TIMER
        assert snap.time_left == 4
        assert snap.running

    def test_clicks_outside_popup_buttons_ignored(self, machine):
        machine.start()
        machine.reset()
        assert machine.pointer_click(200, 260) is None
        assert machine.mode == Mode.CONFIRM_RESET


class TestConfirmBack:
    def test_cancel_returns_to_timer(self, machine):
        machine.start()
        machine.back()
        result = machine.cancel()
        assert result.mode == Mode.TIMER
        assert machine.snapshot().running

    def test_confirm_returns_to_setup(self, machine):
        machine.start()
        machine.back()
        result = machine.confirm()
        snap = machine.snapshot()
        assert result.mode == Mode.SETUP
        assert not snap.running
        assert not snap.input_active
        assert snap.typed_minutes == ""

    def test_cancel_from_break_returns_to_break(self, machine):
        enter_break(machine)
        machine.back()
        result = click(machine, regions.POPUP_NO)
        assert result.mode == Mode.BREAK

    def test_confirm_from_break_returns_to_setup(self, machine):
        enter_break(machine)
        machine.back()
        result = click(machine, regions.POPUP_YES)
        assert result.mode == Mode.SETUP
        assert not machine.snapshot().running


class TestModeChangedSignal:
    def test_emits_old_and_new_mode(self, machine):
        changes = []
        machine.mode_changed.connect(lambda old, new: changes.append((old, new)))
        machine.start()
        machine.toggle_ring()
        machine.take_break()
        assert changes == [
            (Mode.SETUP, Mode.TIMER),
            (Mode.TIMER, Mode.BREAK),
        ]

    def test_not_emitted_for_rejected_actions(self, machine):
        changes = []
        machine.mode_changed.connect(lambda old, new: changes.append((old, new)))
        machine.confirm()
        assert changes == []
