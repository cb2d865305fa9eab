"""Planner markdown parsing for HabitClock.

A planner file holds one day's tasks as checkbox items::

    - [ ] 09:00-10:00 Deep focus #paper #code
    - [x] Inbox zero #admin

Each item becomes a Chore offered as a session name and label source.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

from habitclock.models import Chore

logger = logging.getLogger(__name__)

CHECKBOX_PREFIX = "- ["
_MARKER = re.compile(r"^- \[[^\]]*\]")


def parse_chore_line(line: str) -> Chore | None:
    """Parse one planner line, or None if it is not a checkbox item."""
    trimmed = line.strip()
    if not trimmed.startswith(CHECKBOX_PREFIX):
        return None

    cleaned = _MARKER.sub("", trimmed, count=1).strip()
    parts = cleaned.split(" ")

    time_range = parts[0] if "-" in parts[0] else ""
    tokens = [p for p in parts[1 if time_range else 0:] if p]

    labels = [t[1:] for t in tokens if t.startswith("#")]
    title = " ".join(t for t in tokens if not t.startswith("#"))
    return Chore(time_range=time_range, title=title, labels=labels)


def parse_chores(text: str) -> list[Chore]:
    """Extract chores from planner text, in line order.

    Lines that are not checkbox items are skipped.
    """
    out = []
    for line in text.splitlines():
        chore = parse_chore_line(line)
        if chore is not None:
            out.append(chore)
    return out


def read_chores(path: Path) -> list[Chore] | None:
    """Parse a planner file; None if it is missing or unreadable."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Planner file %s not readable: %s", path, e)
        return None
    return parse_chores(text)


def candidate_filenames(day: date) -> list[str]:
    """'YYYY-MM-DD.md' first, then the bare 'YYYY-MM-DD'."""
    stem = day.isoformat()
    return [f"{stem}.md", stem]


def load_chores_for_day(directory: Path, day: date) -> list[Chore]:
    """Chores from the first candidate file with a non-empty parse, else []."""
    for name in candidate_filenames(day):
        chores = read_chores(directory / name)
        if chores:
            logger.info("Loaded %d chores from %s", len(chores), directory / name)
            return chores
    return []
