"""
Background spreadsheet pushes after record writes.

Requests are debounced; at most one push runs at a time, and any requests
that arrive while a push is running collapse into a single follow-up push.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from volunteer_tracker import audit
from volunteer_tracker.db.database import new_session
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.services import sheets_sync
from volunteer_tracker.utils.config import get_config
from volunteer_tracker.utils.feature_flags import auto_sync_enabled

logger = logging.getLogger(__name__)


class AutoSyncScheduler:
    def __init__(self, runner: Callable[[], None], debounce_seconds: float = 3.0):
        self._runner = runner
        self._debounce_seconds = debounce_seconds
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._running = False
        self._pending = False
        self._idle = threading.Event()
        self._idle.set()

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def request(self) -> None:
        """Schedule a push after the debounce window, restarting the window."""
        with self._lock:
            self._idle.clear()
            if self._running:
                self._pending = True
                return
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self._debounce_seconds, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._running:
                return
            self._timer = None
            self._running = True
        while True:
            try:
                self._runner()
            except Exception as exc:
                logger.error("auto_sync_failed error=%s", exc)
            with self._lock:
                if not self._pending:
                    self._running = False
                    if self._timer is None:
                        self._idle.set()
                    return
                self._pending = False

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no push is scheduled or running."""
        return self._idle.wait(timeout)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            self._pending = False
            if not self._running:
                self._idle.set()


def run_auto_sync() -> None:
    """Push to the spreadsheet if auto-sync is switched on and configured."""
    db = new_session()
    try:
        if not settings_repo.get_bool_setting(db, settings_repo.AUTO_SYNC_ENABLED):
            return
        if not sheets_sync.sheets_configured(db):
            logger.debug("auto_sync_skipped reason=not_configured")
            return
        report = sheets_sync.run_push(db, actor=audit.ACTOR_SYSTEM)
        logger.info("auto_sync_complete volunteers=%d timestamp=%s", report.volunteers_written, report.timestamp)
    finally:
        db.close()


_scheduler: Optional[AutoSyncScheduler] = None
_scheduler_lock = threading.Lock()


def get_auto_sync_scheduler() -> AutoSyncScheduler:
    global _scheduler
    with _scheduler_lock:
        if _scheduler is None:
            _scheduler = AutoSyncScheduler(run_auto_sync, get_config().sync_debounce_seconds)
        return _scheduler


def request_auto_sync() -> None:
    """Ask for a background push after a successful write."""
    if not auto_sync_enabled():
        return
    get_auto_sync_scheduler().request()


def reset_auto_sync_scheduler_for_tests() -> None:
    global _scheduler
    with _scheduler_lock:
        if _scheduler is not None:
            _scheduler.cancel()
        _scheduler = None
