"""Work/rest session timer for HabitClock.

The engine owns the SessionState and never schedules anything itself: a
Ticker calls back once per second, and every state-changing call cancels
the ticker and starts it again only if the session is running.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from habitclock.models import (
    MODE_IDLE,
    MODE_REST,
    MODE_WORK,
    SessionLog,
    SessionSettings,
    SessionState,
    mode_info,
    new_id,
)

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class Ticker(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


class ManualTicker:
    """Tick source driven by hand (tests, replays)."""

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.active = False
        self.starts = 0

    def start(self) -> None:
        self.active = True
        self.starts += 1

    def cancel(self) -> None:
        self.active = False

    def advance(self, ticks: int = 1) -> None:
        """Fire *ticks* callbacks, stopping early if the ticker is cancelled."""
        for _ in range(ticks):
            if not self.active:
                return
            self.callback()


class ThreadTicker:
    """Once-a-second callback on a chain of threading.Timer objects.

    Each start() bumps a generation counter; a timer from an older
    generation exits without calling back, so a cancelled chain never
    fires. The callback runs while holding *lock*.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        lock: threading.RLock | None = None,
        interval: float = TICK_SECONDS,
    ):
        self.callback = callback
        self.lock = lock or threading.RLock()
        self.interval = interval
        self._generation = 0
        self._timer: threading.Timer | None = None

    def start(self) -> None:
        with self.lock:
            self.cancel()
            self._schedule(self._generation)

    def cancel(self) -> None:
        with self.lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self, generation: int) -> None:
        timer = threading.Timer(self.interval, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self.lock:
            if generation != self._generation:
                return
            # Reschedule first: the callback may cancel and restart us.
            self._schedule(generation)
            self.callback()


def _system_clock() -> datetime:
    return datetime.now().astimezone().replace(microsecond=0)


class TimerEngine:
    """Idle / work / rest state machine with a whole-second countdown."""

    def __init__(
        self,
        settings: SessionSettings,
        state: SessionState | None = None,
        ticker: Ticker | None = None,
        clock: Callable[[], datetime] = _system_clock,
    ):
        self.settings = settings
        self.state = state or SessionState()
        self.ticker = ticker
        self.clock = clock

    # ── Projections ──────────────────────────────────────────

    @property
    def mode(self) -> str:
        return self.state.mode

    @property
    def formatted_time_remaining(self) -> str:
        s = max(0, self.state.seconds_remaining)
        return f"{s // 60:02d}:{s % 60:02d}"

    @property
    def menu_title(self) -> str:
        if self.state.mode == MODE_IDLE:
            return f"{mode_info(MODE_IDLE).badge} Idle"
        return f"{mode_info(self.state.mode).badge} {self.formatted_time_remaining}"

    # ── Intents ──────────────────────────────────────────────

    def start(self) -> None:
        if self.state.mode == MODE_IDLE:
            self.state.mode = MODE_WORK
            self.state.seconds_remaining = self.settings.work_minutes * 60
            self.state.session_started_at = self.clock()
            logger.info("Started work session (%d min)", self.settings.work_minutes)
        self.state.is_paused = False
        self.reschedule()

    def pause(self) -> None:
        """Toggle pause; the countdown resumes from where it stopped."""
        self.state.is_paused = not self.state.is_paused
        self.reschedule()

    def stop(self) -> None:
        if self.ticker is not None:
            self.ticker.cancel()
        if self.state.mode != MODE_IDLE:
            logger.info("Stopped %s session", self.state.mode)
        self.state = SessionState()

    def tick(self) -> SessionLog | None:
        """Advance one second. Returns the log of an automatic completion.

        The tick that runs the countdown out completes the session, so a
        one-minute session ends on its 60th tick.
        """
        if not self.state.is_running:
            return None
        if self.state.seconds_remaining > 0:
            self.state.seconds_remaining -= 1
        if self.state.seconds_remaining > 0:
            return None
        return self.complete_current_session(mode_info(self.state.mode).default_name, [])

    def complete_current_session(self, name: str, labels: list[str]) -> SessionLog | None:
        """Close the running session and flip work <-> rest.

        Returns the new SessionLog, or None when idle.
        """
        if self.state.mode == MODE_IDLE:
            return None

        end = self.clock()
        mode = self.state.mode
        log = SessionLog(
            id=new_id(),
            mode=mode,
            name=name.strip() or mode_info(mode).default_name,
            labels=list(labels),
            start=self.state.session_started_at or end,
            end=end,
            configured_minutes=self.settings.minutes_for(mode),
        )
        logger.info("Completed %s session %r", mode, log.name)
        self._switch_mode()
        return log

    def resume_ticking(self) -> None:
        """Restart ticking for a state restored from disk."""
        self.reschedule()

    def reschedule(self) -> None:
        if self.ticker is None:
            return
        self.ticker.cancel()
        if self.state.is_running:
            self.ticker.start()

    def _switch_mode(self) -> None:
        if self.state.mode == MODE_WORK:
            self.state.mode = MODE_REST
            self.state.seconds_remaining = self.settings.rest_minutes * 60
        else:
            self.state.mode = MODE_WORK
            self.state.seconds_remaining = self.settings.work_minutes * 60
        self.state.session_started_at = self.clock()
        self.state.is_paused = False
        self.reschedule()
