"""Habit definitions and per-day habit logs for HabitClock."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable
from datetime import date, datetime

from habitclock.models import (
    FREQ_DAILY,
    METRIC_YES_NO,
    Habit,
    HabitColor,
    HabitLog,
    new_id,
)

logger = logging.getLogger(__name__)


def as_day(value: date | datetime) -> date:
    """Calendar day of *value*; a datetime loses its time of day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def new_habit(
    name: str,
    frequency: str = FREQ_DAILY,
    metric: str = METRIC_YES_NO,
    color: HabitColor | None = None,
) -> Habit:
    """Build a habit with a fresh id and a trimmed name."""
    return Habit(
        id=new_id(),
        name=name.strip(),
        frequency=frequency,
        metric=metric,
        color=color or HabitColor(),
    )


def month_days(day: date | datetime) -> list[date]:
    """Every date in the month containing *day*."""
    d = as_day(day)
    _, count = calendar.monthrange(d.year, d.month)
    return [date(d.year, d.month, n) for n in range(1, count + 1)]


class HabitLedger:
    """Habits plus their logs, with at most one log per habit per day."""

    def __init__(self, habits: Iterable[Habit] = (), logs: Iterable[HabitLog] = ()):
        self.habits: list[Habit] = list(habits)
        self.logs: list[HabitLog] = list(logs)

    def find_habit(self, habit_id: str) -> Habit | None:
        for h in self.habits:
            if h.id == habit_id:
                return h
        return None

    def add_habit(self, habit: Habit) -> None:
        self.habits.append(habit)
        logger.info("Added habit %r (%s, %s)", habit.name, habit.frequency, habit.metric)

    def remove_habits(self, ids: Iterable[str]) -> None:
        """Remove habits, then drop every log left without a habit."""
        doomed = set(ids)
        self.habits = [h for h in self.habits if h.id not in doomed]
        surviving = {h.id for h in self.habits}
        before = len(self.logs)
        self.logs = [x for x in self.logs if x.habit_id in surviving]
        logger.info("Removed %d habit(s) and %d log(s)", len(doomed), before - len(self.logs))

    def log_habit(
        self,
        habit_id: str,
        day: date | datetime,
        bool_value: bool | None = None,
        number_value: float | None = None,
    ) -> HabitLog:
        """Record the value for (habit, day), replacing any earlier log whole."""
        d = as_day(day)
        self.logs = [x for x in self.logs if not (x.habit_id == habit_id and x.date == d)]
        entry = HabitLog(
            id=new_id(),
            habit_id=habit_id,
            date=d,
            bool_value=bool_value,
            number_value=number_value,
        )
        self.logs.append(entry)
        return entry

    def get_log(self, habit_id: str, day: date | datetime) -> HabitLog | None:
        d = as_day(day)
        for x in self.logs:
            if x.habit_id == habit_id and x.date == d:
                return x
        return None

    # ── Calendar ─────────────────────────────────────────────

    def logs_on(self, day: date | datetime) -> list[HabitLog]:
        d = as_day(day)
        return [x for x in self.logs if x.date == d]

    def achieved_count(self, day: date | datetime) -> int:
        """Logs on *day* that are a 'yes' or a positive number."""
        return sum(1 for x in self.logs_on(day) if x.achieved)

    def intensity(self, day: date | datetime) -> float:
        """Share of habits achieved on *day*, capped at 1.0."""
        return min(self.achieved_count(day) / max(1, len(self.habits)), 1.0)
