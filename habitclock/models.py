"""Typed dataclasses for HabitClock data model.

All persisted models use from_dict/to_dict for JSON serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
Timestamps are ISO-8601 strings with second precision.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any


def new_id() -> str:
    return str(uuid.uuid4()).upper()


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; None for empty values."""
    if not value:
        return None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_day(value: Any, tz: tzinfo | None = None) -> date:
    """Parse 'YYYY-MM-DD' or a full timestamp into a calendar day.

    Aware timestamps are converted to ``tz`` (the system zone when None)
    before taking the date.
    """
    s = str(value)
    if len(s) == 10:
        return date.fromisoformat(s)
    dt = parse_timestamp(s)
    if dt is None:
        raise ValueError(f"Invalid day: {value!r}")
    if dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.date()


# ── Session modes ─────────────────────────────────────────────


MODE_IDLE = "idle"
MODE_WORK = "work"
MODE_REST = "rest"
VALID_MODES = {MODE_IDLE, MODE_WORK, MODE_REST}


@dataclass(frozen=True)
class ModeInfo:
    badge: str
    display_name: str
    default_name: str


MODE_INFO: dict[str, ModeInfo] = {
    MODE_IDLE: ModeInfo(badge="⏱", display_name="Idle", default_name="Session"),
    MODE_WORK: ModeInfo(badge="🧠", display_name="Work", default_name="Work Session"),
    MODE_REST: ModeInfo(badge="☕", display_name="Rest", default_name="Rest Session"),
}


def mode_info(mode: str) -> ModeInfo:
    return MODE_INFO.get(mode, MODE_INFO[MODE_IDLE])


# ── Settings & state ──────────────────────────────────────────


DEFAULT_WORK_MINUTES = 50
DEFAULT_REST_MINUTES = 10


def _positive_int(value: Any, default: int) -> int:
    n = int(value) if value is not None else default
    return n if n > 0 else default


@dataclass
class SessionSettings:
    work_minutes: int = DEFAULT_WORK_MINUTES
    rest_minutes: int = DEFAULT_REST_MINUTES

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SessionSettings:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            work_minutes=_positive_int(d.get("workMinutes"), DEFAULT_WORK_MINUTES),
            rest_minutes=_positive_int(d.get("restMinutes"), DEFAULT_REST_MINUTES),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"workMinutes": self.work_minutes, "restMinutes": self.rest_minutes}

    def minutes_for(self, mode: str) -> int:
        return self.work_minutes if mode == MODE_WORK else self.rest_minutes


@dataclass
class SessionState:
    mode: str = MODE_IDLE
    seconds_remaining: int = 0
    is_paused: bool = False
    session_started_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.mode != MODE_IDLE and not self.is_paused

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SessionState:
        if not d or not isinstance(d, dict):
            return cls()
        mode = str(d.get("mode", MODE_IDLE))
        if mode not in VALID_MODES:
            mode = MODE_IDLE
        return cls(
            mode=mode,
            seconds_remaining=max(0, int(d.get("secondsRemaining", 0) or 0)),
            is_paused=bool(d.get("isPaused", False)),
            session_started_at=parse_timestamp(d.get("sessionStartedAt")),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "mode": self.mode,
            "secondsRemaining": self.seconds_remaining,
            "isPaused": self.is_paused,
        }
        if self.session_started_at is not None:
            d["sessionStartedAt"] = format_timestamp(self.session_started_at)
        return d


# ── Session log ───────────────────────────────────────────────


CSV_HEADER = ["id", "mode", "name", "labels", "start", "end", "configuredMinutes"]


@dataclass(frozen=True)
class SessionLog:
    id: str
    mode: str
    name: str
    labels: list[str]
    start: datetime
    end: datetime
    configured_minutes: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SessionLog:
        return cls(
            id=str(d["id"]),
            mode=str(d["mode"]),
            name=str(d.get("name", "")),
            labels=[str(x) for x in (d.get("labels") or [])],
            start=parse_timestamp(d["start"]),
            end=parse_timestamp(d["end"]),
            configured_minutes=int(d.get("configuredMinutes", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "mode": self.mode,
            "name": self.name,
            "labels": list(self.labels),
            "start": format_timestamp(self.start),
            "end": format_timestamp(self.end),
            "configuredMinutes": self.configured_minutes,
        }

    def to_csv_row(self) -> list[str]:
        """Row in CSV_HEADER order; labels are joined with '|'."""
        return [
            self.id,
            self.mode,
            self.name,
            "|".join(self.labels),
            format_timestamp(self.start),
            format_timestamp(self.end),
            str(self.configured_minutes),
        ]


# ── Planner chore ─────────────────────────────────────────────


@dataclass(frozen=True)
class Chore:
    time_range: str = ""
    title: str = ""
    labels: list[str] = field(default_factory=list)
    id: str = field(default_factory=new_id, compare=False)


# ── Habits ────────────────────────────────────────────────────


FREQ_DAILY = "daily"
FREQ_WEEKLY = "weekly"
FREQ_MONTHLY = "monthly"
VALID_FREQUENCIES = [FREQ_DAILY, FREQ_WEEKLY, FREQ_MONTHLY]

METRIC_YES_NO = "yesNo"
METRIC_NUMBER = "number"
VALID_METRICS = [METRIC_YES_NO, METRIC_NUMBER]

METRIC_DISPLAY_NAMES = {METRIC_YES_NO: "Yes / No", METRIC_NUMBER: "Numeric"}


@dataclass(frozen=True)
class HabitColor:
    red: float = 0.2
    green: float = 0.58
    blue: float = 0.94
    opacity: float = 1.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HabitColor:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            red=float(d.get("red", 0.2)),
            green=float(d.get("green", 0.58)),
            blue=float(d.get("blue", 0.94)),
            opacity=float(d.get("opacity", 1.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"red": self.red, "green": self.green, "blue": self.blue, "opacity": self.opacity}

    def to_hex(self) -> str:
        """'#rrggbb' for terminal rendering; opacity is dropped."""
        channels = (self.red, self.green, self.blue)
        return "#" + "".join(f"{round(min(max(c, 0.0), 1.0) * 255):02x}" for c in channels)


@dataclass(frozen=True)
class Habit:
    id: str
    name: str
    frequency: str = FREQ_DAILY
    metric: str = METRIC_YES_NO
    color: HabitColor = field(default_factory=HabitColor)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        frequency = str(d.get("frequency", FREQ_DAILY))
        metric = str(d.get("metric", METRIC_YES_NO))
        return cls(
            id=str(d["id"]),
            name=str(d.get("name", "")),
            frequency=frequency if frequency in VALID_FREQUENCIES else FREQ_DAILY,
            metric=metric if metric in VALID_METRICS else METRIC_YES_NO,
            color=HabitColor.from_dict(d.get("color") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "frequency": self.frequency,
            "metric": self.metric,
            "color": self.color.to_dict(),
        }


@dataclass(frozen=True)
class HabitLog:
    id: str
    habit_id: str
    date: date
    bool_value: bool | None = None
    number_value: float | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any], tz: tzinfo | None = None) -> HabitLog:
        bool_value = d.get("boolValue")
        number_value = d.get("numberValue")
        return cls(
            id=str(d["id"]),
            habit_id=str(d["habitID"]),
            date=parse_day(d["date"], tz),
            bool_value=bool(bool_value) if bool_value is not None else None,
            number_value=float(number_value) if number_value is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "habitID": self.habit_id,
            "date": self.date.isoformat(),
        }
        if self.bool_value is not None:
            d["boolValue"] = self.bool_value
        if self.number_value is not None:
            d["numberValue"] = self.number_value
        return d

    @property
    def achieved(self) -> bool:
        return self.bool_value is True or (self.number_value or 0) > 0


# ── Snapshot ──────────────────────────────────────────────────


def _records(d: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """The list of JSON objects under ``key``; any other shape is a TypeError."""
    items = d.get(key) or []
    if not isinstance(items, list) or not all(isinstance(x, dict) for x in items):
        raise TypeError(f"{key} must be a list of objects")
    return items


@dataclass
class PersistedSnapshot:
    settings: SessionSettings = field(default_factory=SessionSettings)
    session_state: SessionState = field(default_factory=SessionState)
    chore_directory_path: str = ""
    habits: list[Habit] = field(default_factory=list)
    habit_logs: list[HabitLog] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any], tz: tzinfo | None = None) -> PersistedSnapshot:
        if not isinstance(d, dict):
            raise TypeError(f"Snapshot must be a JSON object, got {type(d).__name__}")
        return cls(
            settings=SessionSettings.from_dict(d.get("settings") or {}),
            session_state=SessionState.from_dict(d.get("sessionState") or {}),
            chore_directory_path=str(d.get("choreDirectoryPath", "") or ""),
            habits=[Habit.from_dict(h) for h in _records(d, "habits")],
            habit_logs=[HabitLog.from_dict(x, tz) for x in _records(d, "habitLogs")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "sessionState": self.session_state.to_dict(),
            "choreDirectoryPath": self.chore_directory_path,
            "habits": [h.to_dict() for h in self.habits],
            "habitLogs": [x.to_dict() for x in self.habit_logs],
        }


# ── Config ────────────────────────────────────────────────────


@dataclass
class Config:
    timezone: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls()
        tz = d.get("timezone")
        return cls(
            timezone=str(tz) if tz else None,
            log_level=str(d.get("log_level", "INFO") or "INFO").upper(),
        )
