"""Tests for habitclock/models.py — dataclass serialization."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from habitclock.models import (
    MODE_IDLE,
    MODE_REST,
    MODE_WORK,
    Config,
    Habit,
    HabitColor,
    HabitLog,
    PersistedSnapshot,
    SessionLog,
    SessionSettings,
    SessionState,
    mode_info,
    parse_day,
)

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def test_mode_lookup_table():
    assert mode_info(MODE_IDLE).badge == "⏱"
    assert mode_info(MODE_WORK).display_name == "Work"
    assert mode_info(MODE_WORK).default_name == "Work Session"
    assert mode_info(MODE_REST).default_name == "Rest Session"
    assert mode_info("bogus") == mode_info(MODE_IDLE)


def test_settings_defaults_and_bad_values():
    assert SessionSettings.from_dict({}) == SessionSettings(50, 10)
    s = SessionSettings.from_dict({"workMinutes": 0, "restMinutes": 15})
    assert s.work_minutes == 50
    assert s.rest_minutes == 15


def test_settings_minutes_for():
    s = SessionSettings(25, 5)
    assert s.minutes_for(MODE_WORK) == 25
    assert s.minutes_for(MODE_REST) == 5


def test_session_state_omits_missing_start():
    d = SessionState().to_dict()
    assert d == {"mode": "idle", "secondsRemaining": 0, "isPaused": False}


def test_session_state_round_trip():
    state = SessionState(MODE_WORK, 1234, True, T0)
    d = state.to_dict()
    assert d["sessionStartedAt"] == "2024-03-01T09:00:00+00:00"
    assert SessionState.from_dict(d) == state


def test_session_state_unknown_mode_is_idle():
    assert SessionState.from_dict({"mode": "nap", "secondsRemaining": -3}) == SessionState()


def test_session_log_round_trip():
    log = SessionLog("ID-1", MODE_WORK, "Write", ["a", "b"], T0, T0 + timedelta(minutes=50), 50)
    assert SessionLog.from_dict(log.to_dict()) == log


def test_session_log_accepts_zulu_timestamps():
    log = SessionLog.from_dict({
        "id": "x",
        "mode": "rest",
        "name": "Break",
        "labels": [],
        "start": "2024-03-01T09:00:00Z",
        "end": "2024-03-01T09:10:00Z",
        "configuredMinutes": 10,
    })
    assert log.start == T0
    assert log.end - log.start == timedelta(minutes=10)


def test_session_log_csv_row():
    log = SessionLog("ID-1", MODE_WORK, "Focus, deep", ["a", "b"], T0, T0, 50)
    assert log.to_csv_row() == [
        "ID-1",
        "work",
        "Focus, deep",
        "a|b",
        "2024-03-01T09:00:00+00:00",
        "2024-03-01T09:00:00+00:00",
        "50",
    ]


def test_habit_round_trip():
    habit = Habit("H1", "Read", "weekly", "number", HabitColor(0.1, 0.2, 0.3, 0.5))
    d = habit.to_dict()
    assert d["color"] == {"red": 0.1, "green": 0.2, "blue": 0.3, "opacity": 0.5}
    assert Habit.from_dict(d) == habit


def test_habit_unknown_enums_fall_back():
    habit = Habit.from_dict({"id": "H1", "name": "X", "frequency": "hourly", "metric": "scale"})
    assert habit.frequency == "daily"
    assert habit.metric == "yesNo"
    assert habit.color == HabitColor()


def test_habit_color_hex():
    assert HabitColor(1.0, 0.0, 0.5, 1.0).to_hex() == "#ff0080"
    assert HabitColor(2.0, -1.0, 0.0, 1.0).to_hex() == "#ff0000"


def test_habit_log_round_trip_and_optional_keys():
    entry = HabitLog("L1", "H1", date(2024, 1, 1), bool_value=True)
    d = entry.to_dict()
    assert d == {"id": "L1", "habitID": "H1", "date": "2024-01-01", "boolValue": True}
    assert HabitLog.from_dict(d) == entry

    numeric = HabitLog("L2", "H1", date(2024, 1, 2), number_value=2.5)
    assert "boolValue" not in numeric.to_dict()
    assert HabitLog.from_dict(numeric.to_dict()) == numeric


def test_habit_log_achieved():
    assert HabitLog("a", "h", date(2024, 1, 1), bool_value=True).achieved
    assert not HabitLog("a", "h", date(2024, 1, 1), bool_value=False).achieved
    assert HabitLog("a", "h", date(2024, 1, 1), number_value=1).achieved
    assert not HabitLog("a", "h", date(2024, 1, 1), number_value=0).achieved


def test_parse_day_forms():
    assert parse_day("2024-01-05") == date(2024, 1, 5)
    assert parse_day("2024-01-05T00:00:00") == date(2024, 1, 5)
    with pytest.raises(ValueError):
        parse_day("yesterday")


def test_parse_day_converts_to_given_zone():
    stamp = "2024-03-01T23:30:00-05:00"
    assert parse_day(stamp, ZoneInfo("UTC")) == date(2024, 3, 2)
    assert parse_day(stamp, ZoneInfo("America/New_York")) == date(2024, 3, 1)
    assert parse_day("2024-03-01", ZoneInfo("Asia/Tokyo")) == date(2024, 3, 1)


def test_snapshot_round_trip():
    snap = PersistedSnapshot(
        settings=SessionSettings(45, 15),
        session_state=SessionState(MODE_REST, 300, False, T0),
        chore_directory_path="/tmp/planner",
        habits=[Habit("H1", "Run"), Habit("H2", "Pages", metric="number")],
        habit_logs=[
            HabitLog("L1", "H1", date(2024, 3, 1), bool_value=True),
            HabitLog("L2", "H2", date(2024, 3, 1), number_value=12.0),
        ],
    )
    assert PersistedSnapshot.from_dict(snap.to_dict()) == snap


def test_snapshot_rejects_non_object():
    with pytest.raises(TypeError):
        PersistedSnapshot.from_dict([])


def test_config_from_dict():
    assert Config.from_dict({}) == Config(None, "INFO")
    assert Config.from_dict({"timezone": "Europe/Berlin", "log_level": "debug"}) == Config(
        "Europe/Berlin", "DEBUG"
    )
