"""Snapshot and session-log storage for HabitClock.

The store keeps no state besides its root directory: every load re-reads
the file and every save rewrites it. Read failures fall back to defaults and
write failures are logged and dropped, so callers never see storage errors.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from habitclock.fileio import append_text, read_json, write_json_atomic
from habitclock.models import CSV_HEADER, PersistedSnapshot, SessionLog
from habitclock.workspace import (
    data_root,
    get_user_timezone,
    session_logs_csv_path,
    session_logs_json_path,
    snapshot_path,
)

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, ValueError, TypeError, KeyError, AttributeError)


def csv_line(fields: list[str]) -> str:
    """One CSV record; fields with comma, quote or newline are quoted."""
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(fields)
    return buf.getvalue()


class Store:
    def __init__(self, root: Path | None = None):
        self.root = root if root is not None else data_root()

    @property
    def snapshot_path(self) -> Path:
        return snapshot_path(self.root)

    @property
    def sessions_json_path(self) -> Path:
        return session_logs_json_path(self.root)

    @property
    def sessions_csv_path(self) -> Path:
        return session_logs_csv_path(self.root)

    # ── Snapshot ─────────────────────────────────────────────

    def load_snapshot(self) -> PersistedSnapshot:
        """The persisted snapshot, or defaults if missing or corrupt."""
        path = self.snapshot_path
        try:
            data = read_json(path)
            if data is None:
                return PersistedSnapshot()
            return PersistedSnapshot.from_dict(data, get_user_timezone(self.root))
        except _READ_ERRORS as e:
            logger.warning("Snapshot %s unreadable, using defaults: %s", path, e)
            return PersistedSnapshot()

    def save_snapshot(self, snapshot: PersistedSnapshot) -> bool:
        try:
            write_json_atomic(self.snapshot_path, snapshot.to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not write snapshot %s: %s", self.snapshot_path, e)
            return False
        return True

    # ── Session logs ─────────────────────────────────────────

    def load_session_logs(self) -> list[SessionLog]:
        path = self.sessions_json_path
        try:
            data = read_json(path)
            if data is None:
                return []
            if not isinstance(data, list):
                raise TypeError("session log file is not a JSON array")
            return [SessionLog.from_dict(d) for d in data]
        except _READ_ERRORS as e:
            logger.warning("Session logs %s unreadable, starting empty: %s", path, e)
            return []

    def append_session_log(self, log: SessionLog) -> bool:
        """Add *log* to the JSON array and the CSV file.

        Returns False if either write failed.
        """
        ok = True
        logs = self.load_session_logs()
        logs.append(log)
        try:
            write_json_atomic(self.sessions_json_path, [x.to_dict() for x in logs])
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not write session logs %s: %s", self.sessions_json_path, e)
            ok = False

        try:
            append_text(
                self.sessions_csv_path,
                csv_line(log.to_csv_row()),
                header=csv_line(CSV_HEADER),
            )
        except OSError as e:
            logger.warning("Could not append to %s: %s", self.sessions_csv_path, e)
            ok = False
        return ok
