"""HabitClock core library: session timer, habit ledger and storage.

Public API re-exports for convenient imports:
    from habitclock import Tracker, Store, parse_chores, ...
"""

# Workspace & paths
from habitclock.workspace import (
    data_root,
    load_config,
    get_user_timezone,
    now_local,
    config_path,
    snapshot_path,
    session_logs_json_path,
    session_logs_csv_path,
)

# Logging
from habitclock.logs import setup_logging

# Planner parsing
from habitclock.planner import (
    parse_chore_line,
    parse_chores,
    read_chores,
    candidate_filenames,
    load_chores_for_day,
)

# Storage
from habitclock.store import Store, csv_line

# Timer
from habitclock.engine import TimerEngine, ManualTicker, ThreadTicker

# Habits
from habitclock.habits import HabitLedger, new_habit, month_days

# Application state
from habitclock.tracker import Tracker

# Models
from habitclock.models import (
    MODE_IDLE,
    MODE_WORK,
    MODE_REST,
    MODE_INFO,
    ModeInfo,
    mode_info,
    SessionSettings,
    SessionState,
    SessionLog,
    Chore,
    HabitColor,
    Habit,
    HabitLog,
    PersistedSnapshot,
    Config,
    FREQ_DAILY,
    FREQ_WEEKLY,
    FREQ_MONTHLY,
    VALID_FREQUENCIES,
    METRIC_YES_NO,
    METRIC_NUMBER,
    VALID_METRICS,
    METRIC_DISPLAY_NAMES,
)
