"""Pytest configuration and fixtures."""

import os

import pytest

# Keep test output free of harness logs
os.environ.setdefault("TRANSITION_HARNESS_DISABLE_CONSOLE_LOGGING", "1")

from tests.fixtures.manual_clock import ManualFrameClock  # noqa: E402
from transition_harness.config import HarnessSettings, reset_settings  # noqa: E402
from transition_harness.scheduling import LoopFrameClock, TaskScheduler  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test start from default settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> HarnessSettings:
    return HarnessSettings()


@pytest.fixture
def errors() -> list[tuple[int, Exception]]:
    """Collects errors reported by scheduled callbacks."""
    return []


@pytest.fixture
def manual_clock() -> ManualFrameClock:
    return ManualFrameClock()


@pytest.fixture
def manual_scheduler(manual_clock, errors):
    """Scheduler on a manual clock that records callback errors."""
    with TaskScheduler(clock=manual_clock, error_sink=lambda task_id, error: errors.append((task_id, error))) as scheduler:
        yield scheduler


@pytest.fixture
def loop_scheduler(errors):
    """Scheduler on the asyncio frame clock at 60 frames per second."""
    with TaskScheduler(
        clock=LoopFrameClock(frame_interval_ms=1000 / 60),
        error_sink=lambda task_id, error: errors.append((task_id, error)),
    ) as scheduler:
        yield scheduler
