"""Tests for setup-screen duration adjustment and typed minutes."""

import random

import pytest

from conftest import click
from core import layout as regions
from core.config import TimerConfig
from core.models import Action, Mode

SESSION_DELTAS = (3600, -3600, 60, -60, 1, -1)
BREAK_DELTAS = (60, -60, 1, -1)


def type_keys(machine, keys):
    for key in keys:
        machine.key_press(key)


class TestAdjustSession:
    def test_defaults(self, machine):
        snap = machine.snapshot()
        assert snap.mode == Mode.SETUP
        assert snap.session_seconds == 1500
        assert snap.break_seconds == 300

    def test_adds_delta_and_snaps_display(self, machine):
        result = machine.adjust_session(3600)
        snap = machine.snapshot()
        assert result.accepted
        assert snap.session_seconds == 5100
        assert snap.display_time == 5100.0

    def test_clamps_to_six_hours(self, machine):
        for _ in range(10):
            machine.adjust_session(3600)
        assert machine.snapshot().session_seconds == 21600

    def test_clamps_to_one_second(self, machine):
        machine.adjust_session(-3600)
        assert machine.snapshot().session_seconds == 1
        machine.adjust_session(-1)
        assert machine.snapshot().session_seconds == 1

    def test_random_walk_stays_in_bounds(self, machine):
        rng = random.Random(7)
        for _ in range(500):
            machine.adjust_session(rng.choice(SESSION_DELTAS))
            assert 1 <= machine.snapshot().session_seconds <= 21600

    def test_commits_active_input_first(self, machine):
        machine.activate_input()
        type_keys(machine, "10")
        machine.adjust_session(1)
        snap = machine.snapshot()
        assert snap.session_seconds == 601
        assert not snap.input_active
        assert snap.typed_minutes == ""

    def test_rejected_outside_setup(self, machine):
        machine.start()
        result = machine.adjust_session(60)
        assert not result.accepted
        assert machine.snapshot().session_seconds == 1500

    @pytest.mark.parametrize("region,expected", [
        (regions.SESSION_HOUR_UP, 5100),
        (regions.SESSION_HOUR_DOWN, 1),
        (regions.SESSION_MINUTE_UP, 1560),
        (regions.SESSION_MINUTE_DOWN, 1440),
        (regions.SESSION_SECOND_UP, 1501),
        (regions.SESSION_SECOND_DOWN, 1499),
    ])
    def test_arrow_clicks(self, machine, region, expected):
        result = click(machine, region)
        assert result.action == Action.ADJUST_SESSION
        assert machine.snapshot().session_seconds == expected


class TestAdjustBreak:
    def test_adds_delta_and_snaps_display(self, machine):
        machine.adjust_break(60)
        snap = machine.snapshot()
        assert snap.break_seconds == 360
        assert snap.display_break_time == 360.0

    def test_clamps_to_one_hour(self, machine):
        for _ in range(100):
            machine.adjust_break(60)
        assert machine.snapshot().break_seconds == 3600

    def test_clamps_to_one_second(self, machine):
        for _ in range(10):
            machine.adjust_break(-60)
        assert machine.snapshot().break_seconds == 1

    def test_random_walk_stays_in_bounds(self, machine):
        rng = random.Random(11)
        for _ in range(500):
            machine.adjust_break(rng.choice(BREAK_DELTAS))
            assert 1 <= machine.snapshot().break_seconds <= 3600

    @pytest.mark.parametrize("region,expected", [
        (regions.BREAK_MINUTE_UP, 360),
        (regions.BREAK_MINUTE_DOWN, 240),
        (regions.BREAK_SECOND_UP, 301),
        (regions.BREAK_SECOND_DOWN, 299),
    ])
    def test_arrow_clicks(self, machine, region, expected):
        click(machine, region)
        assert machine.snapshot().break_seconds == expected


class TestTypedMinutes:
    def test_commit_25_minutes(self, machine):
        machine.activate_input()
        type_keys(machine, "25")
        machine.commit_input()
        assert machine.snapshot().session_seconds == 1500

    def test_commit_zero_clamps_to_one_second(self, machine):
        machine.activate_input()
        type_keys(machine, "0")
        machine.commit_input()
        assert machine.snapshot().session_seconds == 1

    def test_commit_large_value_clamps_to_six_hours(self, machine):
        machine.activate_input()
        type_keys(machine, "999")
        machine.commit_input()
        assert machine.snapshot().session_seconds == 21600

    def test_commit_empty_leaves_duration(self, machine):
        machine.adjust_session(7)
        machine.activate_input()
        result = machine.commit_input()
        snap = machine.snapshot()
        assert result.accepted
        assert snap.session_seconds == 1507
        assert not snap.input_active

    def test_commit_snaps_display(self, machine):
        machine.activate_input()
        type_keys(machine, "40")
        machine.commit_input()
        assert machine.snapshot().display_time == 2400.0

    def test_buffer_holds_at_most_three_digits(self, machine):
        machine.activate_input()
        type_keys(machine, "1234")
        assert machine.snapshot().typed_minutes == "123"

    def test_backspace_removes_last_digit(self, machine):
        machine.activate_input()
        type_keys(machine, ["4", "5", "backspace"])
        assert machine.snapshot().typed_minutes == "4"
        type_keys(machine, ["backspace", "backspace"])
        assert machine.snapshot().typed_minutes == ""

    def test_enter_commits(self, machine):
        machine.activate_input()
        type_keys(machine, ["5", "enter"])
        snap = machine.snapshot()
        assert snap.session_seconds == 300
        assert not snap.input_active
        assert snap.typed_minutes == ""

    def test_activation_clears_buffer(self, machine):
        machine.activate_input()
        type_keys(machine, "12")
        machine.activate_input()
        assert machine.snapshot().typed_minutes == ""
        assert machine.snapshot().input_active

    def test_keys_ignored_while_inactive(self, machine):
        assert not machine.key_press("5")
        assert machine.snapshot().typed_minutes == ""

    def test_unknown_keys_ignored(self, machine):
        machine.activate_input()
        assert not machine.key_press("a")
        assert machine.snapshot().typed_minutes == ""

    def test_keys_ignored_outside_setup(self, machine):
        machine.start()
        assert not machine.key_press("5")

    def test_clicking_field_activates_input(self, machine):
        result = click(machine, regions.MINUTES_INPUT)
        assert result.action == Action.ACTIVATE_INPUT
        assert machine.snapshot().input_active

    def test_clicking_outside_field_commits(self, machine):
        click(machine, regions.MINUTES_INPUT)
        type_keys(machine, "15")
        assert machine.pointer_click(2, 2) is None
        snap = machine.snapshot()
        assert snap.session_seconds == 900
        assert not snap.input_active

    def test_start_commits_pending_input(self, machine):
        machine.activate_input()
        type_keys(machine, "30")
        machine.start()
        snap = machine.snapshot()
        assert snap.mode == Mode.TIMER
        assert snap.session_seconds == 1800
        assert snap.time_left == 1800
        assert not snap.input_active


class TestTimerConfig:
    def test_rejects_default_outside_bounds(self):
        with pytest.raises(ValueError):
            TimerConfig(session_seconds=0)
        with pytest.raises(ValueError):
            TimerConfig(break_seconds=3601)

    def test_rejects_invalid_glide_speed(self):
        with pytest.raises(ValueError):
            TimerConfig(glide_speed=0.0)
