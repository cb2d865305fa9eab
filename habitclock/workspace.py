"""Data root, config, timezone and path helpers for HabitClock."""

from __future__ import annotations

import logging
import os
from datetime import datetime, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from platformdirs import user_data_dir

from habitclock.fileio import read_yaml
from habitclock.models import Config

APP_NAME = "HabitTracker"

logger = logging.getLogger(__name__)


def data_root() -> Path:
    """Directory holding the snapshot, session logs and config.yaml."""
    override = os.environ.get("HABITCLOCK_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    return Path(user_data_dir(APP_NAME, appauthor=False))


def load_config(root: Path | None = None) -> Config:
    """Read config.yaml; a missing or malformed file gives the defaults."""
    path = config_path(root)
    try:
        return Config.from_dict(read_yaml(path))
    except Exception as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return Config()


def get_user_timezone(root: Path | None = None) -> tzinfo:
    """Timezone from config.yaml, defaulting to the system local zone."""
    name = load_config(root).timezone
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r in config, using local time", name)
    return datetime.now().astimezone().tzinfo


def now_local(root: Path | None = None) -> datetime:
    """Current time in the user's timezone, truncated to whole seconds."""
    return datetime.now(get_user_timezone(root)).replace(microsecond=0)


# ── Path helpers ──────────────────────────────────────────────

def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "config.yaml"


def snapshot_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "snapshot.json"


def session_logs_json_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "session_logs.json"


def session_logs_csv_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "session_logs.csv"
