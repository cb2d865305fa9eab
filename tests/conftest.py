"""Shared test fixtures for HabitClock tests."""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from habitclock.engine import ManualTicker
from habitclock.store import Store
from habitclock.tracker import Tracker


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary data root with a config file and planner dir."""
    root = tmp_path / "data"
    root.mkdir()
    (root / "config.yaml").write_text(
        yaml.dump({"timezone": "UTC", "log_level": "debug"}, default_flow_style=False),
        encoding="utf-8",
    )
    planner = tmp_path / "planner"
    planner.mkdir()
    (planner / "2024-03-01.md").write_text(
        """# Friday

## Schedule
- [ ] 09:00-10:00 Deep focus #paper #code
- [x] Inbox zero #admin
Not a task line
""",
        encoding="utf-8",
    )

    os.environ["HABITCLOCK_ROOT"] = str(root)
    yield root
    if "HABITCLOCK_ROOT" in os.environ:
        del os.environ["HABITCLOCK_ROOT"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_tracker(workspace: Path, clock: FakeClock):
    """Factory for trackers sharing one store, ticked by hand.

    The ManualTicker of the most recent tracker is exposed as ``.ticker``.
    """

    def factory(day: date = date(2024, 3, 1)) -> Tracker:
        def ticker_factory(callback):
            factory.ticker = ManualTicker(callback)
            return factory.ticker

        return Tracker(
            store=Store(workspace),
            clock=clock,
            ticker_factory=ticker_factory,
            today=lambda: day,
        )

    factory.ticker = None
    return factory
