#!/usr/bin/env python3
"""HabitClock TUI — session timer and habit calendar powered by Textual."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, timedelta

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.timer import Timer
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Select,
    Static,
    TabbedContent,
    TabPane,
)

from habitclock import (
    METRIC_DISPLAY_NAMES,
    METRIC_NUMBER,
    MODE_IDLE,
    VALID_FREQUENCIES,
    VALID_METRICS,
    Chore,
    HabitColor,
    Tracker,
    load_config,
    new_habit,
    setup_logging,
)


class IntervalTicker:
    """Tick source on the Textual event loop via App.set_interval."""

    def __init__(self, app: App, callback: Callable[[], None]):
        self.app = app
        self.callback = callback
        self._timer: Timer | None = None

    def start(self) -> None:
        self.cancel()
        self._timer = self.app.set_interval(1.0, self.callback)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None


PALETTE = {
    "Blue": HabitColor(),
    "Green": HabitColor(0.2, 0.75, 0.35, 1.0),
    "Orange": HabitColor(0.95, 0.55, 0.15, 1.0),
    "Purple": HabitColor(0.6, 0.35, 0.85, 1.0),
    "Red": HabitColor(0.9, 0.25, 0.25, 1.0),
}

HEAT = " ░▒▓█"


def _parse_labels(text: str) -> list[str]:
    return [p.strip() for p in text.split(",") if p.strip()]


def render_month(tracker: Tracker, selected: date) -> str:
    """Month grid (Mon-Sun) with one heat glyph per day."""
    days = tracker.month_days(selected)
    lines = [selected.strftime("%B %Y"), " Mo  Tu  We  Th  Fr  Sa  Su"]
    row = ["    "] * days[0].weekday()
    for d in days:
        glyph = HEAT[round(tracker.intensity(d) * (len(HEAT) - 1))]
        cell = f"{d.day:>2}{glyph} "
        if d == selected:
            cell = f"[reverse]{cell}[/reverse]"
        row.append(cell)
        if len(row) == 7:
            lines.append("".join(row))
            row = []
    if row:
        lines.append("".join(row))
    return "\n".join(lines)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

.row {
    height: auto;
}

.row Input {
    width: 1fr;
}

#countdown {
    text-style: bold;
    color: $accent;
    padding: 1 2;
}

#timer-pane, #habit-pane {
    width: 1fr;
    min-width: 40;
    padding: 0 1;
}

#chore-pane, #calendar-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

#chores {
    height: 1fr;
}

#habit-table {
    height: 1fr;
}
"""


class ChoreItem(ListItem):
    def __init__(self, chore: Chore) -> None:
        text = chore.title or "(untitled)"
        if chore.time_range:
            text = f"{chore.time_range}  {text}"
        if chore.labels:
            text += "  " + " ".join(f"#{x}" for x in chore.labels)
        super().__init__(Label(text))
        self.chore = chore


# ── Main app ───────────────────────────────────────────────────


class HabitClockApp(App):
    """HabitClock — work/rest sessions and habit logging."""

    TITLE = "Habit Tracker"
    CSS = CSS

    BINDINGS = [
        Binding("f2", "toggle_habit", "Toggle habit"),
        Binding("f3", "pause", "Pause"),
        Binding("ctrl+q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.tracker: Tracker | None = None
        self._selected_chore: Chore | None = None
        self._selected_habit_id: str | None = None
        self._selected_day = date.today()

    def compose(self) -> ComposeResult:
        yield Header()
        with TabbedContent():
            with TabPane("Session Tracker", id="session-tab"):
                with Horizontal():
                    with VerticalScroll(id="timer-pane"):
                        yield Label("Timer", classes="section-title")
                        yield Static(id="mode")
                        yield Static(id="countdown")
                        with Horizontal(classes="row"):
                            yield Input(placeholder="Work min", id="work-minutes")
                            yield Input(placeholder="Rest min", id="rest-minutes")
                            yield Button("Apply", id="apply-settings")
                        with Horizontal(classes="row"):
                            yield Button("Start", id="start", variant="primary")
                            yield Button("Pause", id="pause")
                            yield Button("Stop", id="stop")
                        yield Label("Session Metadata", classes="section-title")
                        yield Input(placeholder="Session name", id="session-name")
                        yield Input(placeholder="Labels (comma separated)", id="session-labels")
                        yield Button("Complete current session", id="complete")
                    with Vertical(id="chore-pane"):
                        yield Label("Today's Planner Chores", classes="section-title")
                        with Horizontal(classes="row"):
                            yield Input(placeholder="Planner directory", id="planner-dir")
                            yield Button("Load", id="load-chores")
                        yield Static(id="chores-empty")
                        yield ListView(id="chores")
            with TabPane("Habits", id="habits-tab"):
                with Horizontal():
                    with VerticalScroll(id="habit-pane"):
                        yield Label("Habit Builder", classes="section-title")
                        yield Input(placeholder="Habit name", id="habit-name")
                        yield Select(
                            [(f.capitalize(), f) for f in VALID_FREQUENCIES],
                            value=VALID_FREQUENCIES[0],
                            allow_blank=False,
                            id="habit-frequency",
                        )
                        yield Select(
                            [(METRIC_DISPLAY_NAMES[m], m) for m in VALID_METRICS],
                            value=VALID_METRICS[0],
                            allow_blank=False,
                            id="habit-metric",
                        )
                        yield Select(
                            [(name, name) for name in PALETTE],
                            value="Blue",
                            allow_blank=False,
                            id="habit-color",
                        )
                        yield Button("Add habit", id="add-habit", variant="primary")
                        yield Label("Log", classes="section-title")
                        yield DataTable(id="habit-table", cursor_type="row")
                        with Horizontal(classes="row"):
                            yield Input(placeholder="Value", id="habit-value")
                            yield Button("Save", id="save-value")
                            yield Button("Delete habit", id="delete-habit", variant="error")
                    with Vertical(id="calendar-pane"):
                        yield Label("Calendar", classes="section-title")
                        with Horizontal(classes="row"):
                            yield Button("<", id="prev-day")
                            yield Input(placeholder="YYYY-MM-DD", id="selected-day")
                            yield Button(">", id="next-day")
                        yield Static(id="calendar")
        yield Footer()

    def on_mount(self) -> None:
        self.tracker = Tracker(ticker_factory=lambda cb: IntervalTicker(self, cb))
        self._selected_day = self.tracker.today()
        self.query_one("#habit-table", DataTable).add_columns("Habit", "Frequency", "Type", "Value")
        self.query_one("#work-minutes", Input).value = str(self.tracker.settings.work_minutes)
        self.query_one("#rest-minutes", Input).value = str(self.tracker.settings.rest_minutes)
        self.query_one("#planner-dir", Input).value = self.tracker.chore_directory_path
        self._refresh_session()
        self._rebuild_chores()
        self._refresh_habits()
        self.set_interval(0.5, self._refresh_session)

    # ── Session tab ────────────────────────────────────────────

    def _refresh_session(self) -> None:
        t = self.tracker
        if t is None:
            return
        idle = t.session_state.mode == MODE_IDLE
        self.sub_title = t.menu_title
        self.query_one("#mode", Static).update(t.mode_display_name)
        self.query_one("#countdown", Static).update(t.formatted_time_remaining)
        self.query_one("#start", Button).label = "Start" if idle else "Restart"
        self.query_one("#pause", Button).label = "Resume" if t.session_state.is_paused else "Pause"
        for button_id in ("#pause", "#stop", "#complete"):
            self.query_one(button_id, Button).disabled = idle

    def _rebuild_chores(self) -> None:
        chores = self.tracker.chores
        list_view = self.query_one("#chores", ListView)
        list_view.clear()
        for chore in chores:
            list_view.append(ChoreItem(chore))
        self._selected_chore = None
        self.query_one("#chores-empty", Static).update(
            "" if chores else
            "No matching planner markdown for today. You can still use custom names and labels."
        )

    @on(ListView.Selected, "#chores")
    def _on_chore_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ChoreItem):
            self._selected_chore = event.item.chore

    @on(Button.Pressed, "#apply-settings")
    def _on_apply_settings(self) -> None:
        try:
            work = int(self.query_one("#work-minutes", Input).value)
            rest = int(self.query_one("#rest-minutes", Input).value)
        except ValueError:
            self.notify("Minutes must be whole numbers.", severity="warning")
            return
        if not self.tracker.update_settings(work, rest):
            self.notify("Minutes must be positive.", severity="warning")

    @on(Button.Pressed, "#start")
    def _on_start(self) -> None:
        self.tracker.restart()
        self._refresh_session()

    @on(Button.Pressed, "#pause")
    def _on_pause(self) -> None:
        self.action_pause()

    @on(Button.Pressed, "#stop")
    def _on_stop(self) -> None:
        self.tracker.stop()
        self._refresh_session()

    @on(Button.Pressed, "#complete")
    def _on_complete(self) -> None:
        custom_name = self.query_one("#session-name", Input).value
        custom_labels = _parse_labels(self.query_one("#session-labels", Input).value)
        chore = self._selected_chore
        name = chore.title if chore else custom_name
        labels = chore.labels if chore and chore.labels else custom_labels
        log = self.tracker.complete_current_session(name, labels)
        if log is not None:
            self.notify(f"Logged {log.name} ({log.configured_minutes} min)", title="Session")
        self._refresh_session()

    @on(Button.Pressed, "#load-chores")
    def _on_load_chores(self) -> None:
        self.tracker.set_chore_directory(self.query_one("#planner-dir", Input).value)
        self._rebuild_chores()

    # ── Habits tab ─────────────────────────────────────────────

    def _refresh_habits(self) -> None:
        t = self.tracker
        table = self.query_one("#habit-table", DataTable)
        table.clear()
        for habit in t.habits:
            entry = t.habit_log(habit.id, self._selected_day)
            if entry is None:
                value = "-"
            elif habit.metric == METRIC_NUMBER:
                value = "-" if entry.number_value is None else f"{entry.number_value:g}"
            else:
                value = "yes" if entry.bool_value else "no"
            table.add_row(
                f"[{habit.color.to_hex()}]●[/] {habit.name}",
                habit.frequency.capitalize(),
                METRIC_DISPLAY_NAMES[habit.metric],
                value,
                key=habit.id,
            )
        self.query_one("#selected-day", Input).value = self._selected_day.isoformat()
        self.query_one("#calendar", Static).update(render_month(t, self._selected_day))

    @on(DataTable.RowHighlighted, "#habit-table")
    def _on_habit_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._selected_habit_id = event.row_key.value if event.row_key else None

    @on(Button.Pressed, "#add-habit")
    def _on_add_habit(self) -> None:
        name_input = self.query_one("#habit-name", Input)
        habit = new_habit(
            name_input.value,
            frequency=self.query_one("#habit-frequency", Select).value,
            metric=self.query_one("#habit-metric", Select).value,
            color=PALETTE[self.query_one("#habit-color", Select).value],
        )
        if self.tracker.add_habit(habit) is None:
            self.notify("Habit name cannot be empty.", severity="warning")
            return
        name_input.value = ""
        self._refresh_habits()

    @on(Button.Pressed, "#delete-habit")
    def _on_delete_habit(self) -> None:
        if self._selected_habit_id:
            self.tracker.remove_habits([self._selected_habit_id])
            self._selected_habit_id = None
            self._refresh_habits()

    @on(Button.Pressed, "#save-value")
    def _on_save_value(self) -> None:
        if not self._selected_habit_id:
            return
        try:
            value = float(self.query_one("#habit-value", Input).value)
        except ValueError:
            self.notify("Enter a number.", severity="warning")
            return
        self.tracker.log_habit(self._selected_habit_id, self._selected_day, number_value=value)
        self._refresh_habits()

    def action_toggle_habit(self) -> None:
        if not self._selected_habit_id:
            return
        entry = self.tracker.habit_log(self._selected_habit_id, self._selected_day)
        done = bool(entry and entry.bool_value)
        self.tracker.log_habit(self._selected_habit_id, self._selected_day, bool_value=not done)
        self._refresh_habits()

    @on(Button.Pressed, "#prev-day")
    def _on_prev_day(self) -> None:
        self._select_day(self._selected_day - timedelta(days=1))

    @on(Button.Pressed, "#next-day")
    def _on_next_day(self) -> None:
        self._select_day(self._selected_day + timedelta(days=1))

    @on(Input.Submitted, "#selected-day")
    def _on_day_submitted(self, event: Input.Submitted) -> None:
        try:
            self._select_day(date.fromisoformat(event.value.strip()))
        except ValueError:
            self.notify("Use YYYY-MM-DD.", severity="warning")

    def _select_day(self, day: date) -> None:
        self._selected_day = day
        self._refresh_habits()

    # ── App actions ────────────────────────────────────────────

    def action_pause(self) -> None:
        if self.tracker.session_state.mode != MODE_IDLE:
            self.tracker.pause()
            self._refresh_session()

    def action_quit_app(self) -> None:
        if self.tracker is not None:
            self.tracker.close()
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    setup_logging(load_config().log_level)
    app = HabitClockApp()
    app.run()


if __name__ == "__main__":
    main()
