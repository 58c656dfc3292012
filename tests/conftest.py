"""
Shared pytest fixtures and configuration.
"""

import os

import pytest

# Widgets are only built headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.config import TimerConfig
from core.layout import Layout
from core.session import SessionMachine


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def layout():
    return Layout()


@pytest.fixture
def machine(clock, layout):
    """A machine with the default 25/5 minute durations."""
    return SessionMachine(config=TimerConfig(), layout=layout, clock=clock)


@pytest.fixture
def short_machine(clock, layout):
    """A machine with a 5 second study session and 3 second break."""
    config = TimerConfig(session_seconds=5, break_seconds=3)
    return SessionMachine(config=config, layout=layout, clock=clock)


def click(machine, region_name):
    """Click the centre of a named region."""
    x, y = machine.layout[region_name].center
    return machine.pointer_click(x, y)


def run_ticks(machine, clock, count):
    """Advance one second and step one frame, count times."""
    for _ in range(count):
        clock.advance(1.0)
        machine.frame_tick()
