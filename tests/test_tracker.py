"""Tests for habitclock/tracker.py — the application state facade."""

import json
from datetime import date

from habitclock.habits import new_habit
from habitclock.models import MODE_IDLE, MODE_REST, MODE_WORK, SessionState
from habitclock.store import Store


def _snapshot(workspace):
    return json.loads((workspace / "snapshot.json").read_text(encoding="utf-8"))


def test_fresh_start_uses_defaults(make_tracker):
    t = make_tracker()
    assert t.settings.work_minutes == 50
    assert t.settings.rest_minutes == 10
    assert t.session_state == SessionState()
    assert t.menu_title == "⏱ Idle"
    assert t.mode_display_name == "Idle"
    assert t.chores == []


def test_malformed_snapshot_starts_with_defaults(make_tracker, workspace):
    (workspace / "snapshot.json").write_text(json.dumps({"habits": ["oops"]}), encoding="utf-8")
    t = make_tracker()
    assert t.habits == []
    assert t.session_state == SessionState()


def test_every_intent_writes_snapshot(make_tracker, workspace):
    t = make_tracker()
    t.start()
    assert _snapshot(workspace)["sessionState"]["mode"] == "work"
    t.pause()
    assert _snapshot(workspace)["sessionState"]["isPaused"] is True
    t.stop()
    assert _snapshot(workspace)["sessionState"] == {
        "isPaused": False,
        "mode": "idle",
        "secondsRemaining": 0,
    }


def test_ticks_are_not_persisted(make_tracker, workspace):
    t = make_tracker()
    t.start()
    make_tracker.ticker.advance(5)
    assert t.session_state.seconds_remaining == 50 * 60 - 5
    assert _snapshot(workspace)["sessionState"]["secondsRemaining"] == 50 * 60


def test_stop_twice_is_idempotent(make_tracker, workspace):
    t = make_tracker()
    t.start()
    t.stop()
    first = _snapshot(workspace)
    t.stop()
    assert _snapshot(workspace) == first
    assert not (workspace / "session_logs.json").exists()


def test_automatic_completion_logs_and_persists(make_tracker, workspace, clock):
    t = make_tracker()
    assert t.update_settings(1, 2)
    t.start()
    for _ in range(60):
        clock.advance(1)
        make_tracker.ticker.advance(1)

    logs = Store(workspace).load_session_logs()
    assert len(logs) == 1
    assert logs[0].mode == MODE_WORK
    assert logs[0].configured_minutes == 1
    assert t.session_state.mode == MODE_REST
    assert t.session_state.seconds_remaining == 120
    assert _snapshot(workspace)["sessionState"]["mode"] == "rest"
    assert (workspace / "session_logs.csv").exists()


def test_complete_with_name_and_labels(make_tracker, workspace):
    t = make_tracker()
    t.start()
    log = t.complete_current_session("Focus, deep", ["paper", "code"])
    assert log.name == "Focus, deep"
    stored = Store(workspace).load_session_logs()
    assert stored == [log]
    assert t.session_state.mode == MODE_REST


def test_complete_while_idle_logs_nothing(make_tracker, workspace):
    t = make_tracker()
    assert t.complete_current_session("x") is None
    assert Store(workspace).load_session_logs() == []


def test_restart_begins_fresh_work(make_tracker):
    t = make_tracker()
    t.start()
    t.complete_current_session()
    assert t.session_state.mode == MODE_REST
    t.restart()
    assert t.session_state.mode == MODE_WORK
    assert t.session_state.seconds_remaining == 50 * 60


def test_update_settings_rejects_bad_values(make_tracker, workspace):
    t = make_tracker()
    assert t.update_settings(0, 10) is False
    assert t.update_settings(25, -1) is False
    assert t.update_settings(True, 5) is False
    assert t.settings.work_minutes == 50
    assert t.update_settings(25, 5) is True
    assert _snapshot(workspace)["settings"] == {"restMinutes": 5, "workMinutes": 25}


def test_state_survives_restart(make_tracker):
    t = make_tracker()
    habit = t.add_habit(new_habit("Run"))
    t.log_habit(habit.id, date(2024, 3, 1), True)
    t.update_settings(40, 8)
    t.start()
    t.close()

    again = make_tracker()
    assert again.settings.work_minutes == 40
    assert again.session_state.mode == MODE_WORK
    assert again.session_state.seconds_remaining == 40 * 60
    assert [h.name for h in again.habits] == ["Run"]
    assert again.habit_log(habit.id, date(2024, 3, 1)).bool_value is True
    # A running session resumes ticking on load.
    assert make_tracker.ticker.active


def test_paused_session_does_not_tick_after_reload(make_tracker):
    t = make_tracker()
    t.start()
    t.pause()
    make_tracker()
    assert not make_tracker.ticker.active


def test_add_habit_guards_blank_name(make_tracker, workspace):
    t = make_tracker()
    assert t.add_habit(new_habit("   ")) is None
    assert t.habits == []


def test_habit_log_replace_through_facade(make_tracker, workspace):
    t = make_tracker()
    a = t.add_habit(new_habit("A"))
    t.log_habit(a.id, date(2024, 1, 1), True, None)
    t.log_habit(a.id, date(2024, 1, 1), False, None)
    logs = _snapshot(workspace)["habitLogs"]
    assert len(logs) == 1
    assert logs[0]["boolValue"] is False
    assert logs[0]["date"] == "2024-01-01"


def test_log_for_unknown_habit_is_ignored(make_tracker):
    t = make_tracker()
    assert t.log_habit("missing", date(2024, 1, 1), True) is None
    assert t.habit_logs == []


def test_remove_habits_cascades(make_tracker, workspace):
    t = make_tracker()
    a = t.add_habit(new_habit("A"))
    b = t.add_habit(new_habit("B"))
    t.log_habit(a.id, date(2024, 1, 1), True)
    t.log_habit(b.id, date(2024, 1, 1), True)
    t.remove_habits([a.id])
    assert [h.id for h in t.habits] == [b.id]
    assert [x.habit_id for x in t.habit_logs] == [b.id]
    assert [x["habitID"] for x in _snapshot(workspace)["habitLogs"]] == [b.id]


def test_intensity_projection(make_tracker):
    t = make_tracker()
    a = t.add_habit(new_habit("A"))
    t.add_habit(new_habit("B"))
    t.log_habit(a.id, date(2024, 3, 1), True)
    assert t.intensity(date(2024, 3, 1)) == 0.5
    assert len(t.month_days(date(2024, 3, 1))) == 31


def test_chores_loaded_from_markdown_file(make_tracker, workspace):
    t = make_tracker()
    chores = t.set_chore_directory(str(workspace.parent / "planner"))
    assert [c.title for c in chores] == ["Deep focus", "Inbox zero"]
    assert chores[0].time_range == "09:00-10:00"
    assert _snapshot(workspace)["choreDirectoryPath"] == str(workspace.parent / "planner")


def test_chores_loaded_from_extensionless_file(make_tracker, tmp_path):
    planner = tmp_path / "bare"
    planner.mkdir()
    (planner / "2024-03-01").write_text("- [ ] Stretch #health\n", encoding="utf-8")
    t = make_tracker()
    chores = t.set_chore_directory(str(planner))
    assert len(chores) == 1
    assert chores[0].title == "Stretch"


def test_chores_loaded_on_startup(make_tracker, workspace):
    make_tracker().set_chore_directory(str(workspace.parent / "planner"))
    again = make_tracker()
    assert len(again.chores) == 2
    assert make_tracker(day=date(2024, 3, 2)).chores == []


def test_no_directory_means_no_chores(make_tracker):
    t = make_tracker()
    assert t.set_chore_directory("") == []
    assert t.load_todays_chores() == []


def test_mode_display_during_session(make_tracker):
    t = make_tracker()
    t.start()
    assert t.mode_display_name == "Work"
    assert t.formatted_time_remaining == "50:00"
    assert t.menu_title == "🧠 50:00"
    t.stop()
    assert t.session_state.mode == MODE_IDLE
