"""Application state for HabitClock.

Tracker composes the timer engine, the habit ledger, the planner parser
and the store behind the one surface the UI talks to. Every intent and
every tick runs under a single re-entrant lock, and every intent ends with
a full snapshot write.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import date, datetime
from pathlib import Path

from habitclock.engine import ThreadTicker, Ticker, TimerEngine
from habitclock.habits import HabitLedger, month_days
from habitclock.models import (
    Chore,
    Habit,
    HabitLog,
    PersistedSnapshot,
    SessionLog,
    SessionSettings,
    SessionState,
    mode_info,
)
from habitclock.planner import load_chores_for_day
from habitclock.store import Store
from habitclock.workspace import now_local

logger = logging.getLogger(__name__)

TickerFactory = Callable[[Callable[[], None]], Ticker]


class Tracker:
    def __init__(
        self,
        store: Store | None = None,
        clock: Callable[[], datetime] | None = None,
        ticker_factory: TickerFactory | None = None,
        today: Callable[[], date] | None = None,
    ):
        self.store = store or Store()
        self._clock = clock or (lambda: now_local(self.store.root))
        self._today = today or (lambda: self._clock().date())
        self._lock = threading.RLock()

        snapshot = self.store.load_snapshot()
        if ticker_factory is None:
            ticker = ThreadTicker(self._on_tick, lock=self._lock)
        else:
            ticker = ticker_factory(self._on_tick)
        self.engine = TimerEngine(
            snapshot.settings,
            snapshot.session_state,
            ticker=ticker,
            clock=self._clock,
        )
        self.ledger = HabitLedger(snapshot.habits, snapshot.habit_logs)
        self.chore_directory_path = snapshot.chore_directory_path
        self.chores: list[Chore] = []

        self.load_todays_chores()
        self.engine.resume_ticking()
        logger.info("Tracker ready: %s, %d habit(s)", self.engine.mode, len(self.ledger.habits))

    # ── Read-only projections ────────────────────────────────

    @property
    def settings(self) -> SessionSettings:
        return self.engine.settings

    @property
    def session_state(self) -> SessionState:
        return self.engine.state

    @property
    def formatted_time_remaining(self) -> str:
        return self.engine.formatted_time_remaining

    @property
    def menu_title(self) -> str:
        return self.engine.menu_title

    @property
    def mode_display_name(self) -> str:
        return mode_info(self.engine.mode).display_name

    @property
    def habits(self) -> list[Habit]:
        return list(self.ledger.habits)

    @property
    def habit_logs(self) -> list[HabitLog]:
        return list(self.ledger.logs)

    def today(self) -> date:
        return self._today()

    def habit_log(self, habit_id: str, day: date | datetime) -> HabitLog | None:
        return self.ledger.get_log(habit_id, day)

    def intensity(self, day: date | datetime) -> float:
        return self.ledger.intensity(day)

    def month_days(self, day: date | datetime) -> list[date]:
        return month_days(day)

    def snapshot(self) -> PersistedSnapshot:
        return PersistedSnapshot(
            settings=self.engine.settings,
            session_state=self.engine.state,
            chore_directory_path=self.chore_directory_path,
            habits=list(self.ledger.habits),
            habit_logs=list(self.ledger.logs),
        )

    # ── Session intents ──────────────────────────────────────

    def start(self) -> None:
        with self._lock:
            self.engine.start()
            self._persist()

    def pause(self) -> None:
        with self._lock:
            self.engine.pause()
            self._persist()

    def stop(self) -> None:
        with self._lock:
            self.engine.stop()
            self._persist()

    def restart(self) -> None:
        """Drop the current session and begin a fresh work session."""
        with self._lock:
            self.stop()
            self.start()

    def complete_current_session(self, name: str = "", labels: Iterable[str] = ()) -> SessionLog | None:
        with self._lock:
            log = self.engine.complete_current_session(name, list(labels))
            if log is not None:
                self.store.append_session_log(log)
            self._persist()
            return log

    def update_settings(self, work_minutes: int, rest_minutes: int) -> bool:
        """Change the work/rest lengths; non-positive values are ignored.

        A running countdown keeps its remaining time; the new lengths apply
        from the next session.
        """
        if not _is_positive_int(work_minutes) or not _is_positive_int(rest_minutes):
            return False
        with self._lock:
            self.engine.settings.work_minutes = work_minutes
            self.engine.settings.rest_minutes = rest_minutes
            self._persist()
        return True

    def _on_tick(self) -> None:
        with self._lock:
            log = self.engine.tick()
            if log is not None:
                self.store.append_session_log(log)
                self._persist()

    # ── Habit intents ────────────────────────────────────────

    def add_habit(self, habit: Habit) -> Habit | None:
        if not habit.name.strip():
            return None
        with self._lock:
            self.ledger.add_habit(habit)
            self._persist()
        return habit

    def remove_habits(self, ids: Iterable[str]) -> None:
        with self._lock:
            self.ledger.remove_habits(ids)
            self._persist()

    def log_habit(
        self,
        habit_id: str,
        day: date | datetime,
        bool_value: bool | None = None,
        number_value: float | None = None,
    ) -> HabitLog | None:
        with self._lock:
            if self.ledger.find_habit(habit_id) is None:
                logger.debug("Ignoring log for unknown habit %s", habit_id)
                return None
            entry = self.ledger.log_habit(habit_id, day, bool_value, number_value)
            self._persist()
            return entry

    # ── Planner ──────────────────────────────────────────────

    def set_chore_directory(self, path: str) -> list[Chore]:
        with self._lock:
            self.chore_directory_path = path.strip()
            self._persist()
            return self.load_todays_chores()

    def load_todays_chores(self) -> list[Chore]:
        """Today's planner chores, or [] when none can be found."""
        with self._lock:
            if not self.chore_directory_path:
                self.chores = []
            else:
                directory = Path(self.chore_directory_path).expanduser()
                self.chores = load_chores_for_day(directory, self._today())
            return list(self.chores)

    # ── Lifecycle ────────────────────────────────────────────

    def close(self) -> None:
        """Stop ticking without touching the session state."""
        with self._lock:
            if self.engine.ticker is not None:
                self.engine.ticker.cancel()

    def _persist(self) -> None:
        self.store.save_snapshot(self.snapshot())


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
