"""Global exam clock.

The in-process record is authoritative while the process lives; the persisted
global Timer row is a fallback read when the record is inactive, e.g. after a
restart. The record is shared by every request thread and guarded by a lock.
"""

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

import pytz
from sqlalchemy.exc import SQLAlchemyError

from config import DEFAULT_GLOBAL_TIMER_SECONDS, PERSISTED_GLOBAL_TIMER_SECONDS
from utils.timer_manager import TimerManager

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def _iso(value: datetime) -> str:
    return value.isoformat()


def _parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = pytz.utc.localize(parsed)
    return parsed


@dataclass(frozen=True)
class GlobalTimerState:
    """Snapshot of the in-process global timer."""

    active: bool = False
    start_time: Optional[datetime] = None
    duration_seconds: int = 0
    created_by: Optional[str] = None

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=self.duration_seconds)


INACTIVE = GlobalTimerState()


def timer_snapshot(
    start: datetime, duration_seconds: int, now: datetime
) -> Dict[str, Any]:
    """Expiry / remaining-time view of a clock started at ``start``."""
    end = start + timedelta(seconds=duration_seconds)
    if now >= end:
        return {
            "active": False,
            "expired": True,
            "startTime": _iso(start),
            "endTime": _iso(end),
            "currentTime": _iso(now),
            "message": "Global timer has expired",
        }
    return {
        "active": True,
        "startTime": _iso(start),
        "endTime": _iso(end),
        "currentTime": _iso(now),
        "remainingSeconds": math.floor((end - now).total_seconds()),
        "duration": duration_seconds,
        "message": "Global timer is active",
    }


class GlobalTimerAuthority:
    """Owns the in-process global timer record.

    Args:
        clock: Returns the current aware datetime; injectable for tests.
    """

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self._lock = threading.Lock()
        self._state = INACTIVE

    @property
    def state(self) -> GlobalTimerState:
        with self._lock:
            return self._state

    def rehydrate(self, timer_manager: TimerManager) -> bool:
        """Restore the in-process record from a persisted, unexpired global timer.

        Returns:
            True if a running global timer was restored.
        """
        record = timer_manager.get_global_timer()
        if record is None:
            return False
        start = _parse_iso(record.start_time)
        duration = record.duration_seconds or PERSISTED_GLOBAL_TIMER_SECONDS
        if self.clock() >= start + timedelta(seconds=duration):
            return False
        with self._lock:
            self._state = GlobalTimerState(
                active=True,
                start_time=start,
                duration_seconds=duration,
                created_by=record.created_by,
            )
        logger.info("Restored global timer started at %s", record.start_time)
        return True

    def start_global(
        self,
        timer_manager: TimerManager,
        created_by: str,
        duration_seconds: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Start the global timer and discard every per-user timer.

        Callers must have checked the actor is the administrator.
        """
        duration = duration_seconds or DEFAULT_GLOBAL_TIMER_SECONDS
        start = self.clock()
        with self._lock:
            self._state = GlobalTimerState(
                active=True,
                start_time=start,
                duration_seconds=duration,
                created_by=created_by,
            )
        cleared = timer_manager.delete_user_timers()
        timer_manager.save_global_timer(start, duration, created_by)
        logger.info(
            "Global timer started by %s for %ds; cleared %d user timers",
            created_by, duration, cleared,
        )
        return {
            "message": "Global timer started",
            "active": True,
            "startTime": _iso(start),
            "duration": duration,
            "currentTime": _iso(self.clock()),
        }

    def stop_global(self, timer_manager: TimerManager, stopped_by: str) -> Dict[str, Any]:
        """Deactivate the global timer. Per-user timers are left as they are."""
        with self._lock:
            self._state = INACTIVE
        timer_manager.delete_global_timer()
        logger.info("Global timer stopped by %s", stopped_by)
        return {"message": "Global timer stopped", "active": False}

    def active_state(self) -> Optional[GlobalTimerState]:
        """The in-process record if it is active and not yet expired.

        An expired record is flipped to inactive as a side effect.
        """
        now = self.clock()
        with self._lock:
            state = self._state
            if not state.active:
                return None
            if now >= state.end_time:
                self._state = INACTIVE
                logger.info("Global timer expired at %s", _iso(state.end_time))
                return None
            return state

    def get_global_status(self, timer_manager: TimerManager) -> Dict[str, Any]:
        """Current view of the global clock.

        Falls back to the persisted record when the in-process record is
        inactive. Store errors on that path are logged and reported as
        "no active timer" rather than failing the request.
        """
        now = self.clock()
        with self._lock:
            state = self._state
            if state.active:
                snapshot = timer_snapshot(state.start_time, state.duration_seconds, now)
                if snapshot.get("expired"):
                    self._state = INACTIVE
                    logger.info("Global timer expired at %s", snapshot["endTime"])
                else:
                    snapshot["createdBy"] = state.created_by
                return snapshot

        try:
            record = timer_manager.get_global_timer()
        except SQLAlchemyError as e:
            logger.warning("Global timer fallback lookup failed, reporting inactive: %s", e)
            record = None
        if record is not None:
            duration = record.duration_seconds or PERSISTED_GLOBAL_TIMER_SECONDS
            return timer_snapshot(_parse_iso(record.start_time), duration, now)

        return {"active": False, "message": "No global timer is currently active"}

    def start_or_get_user_timer(
        self, timer_manager: TimerManager, user_id: str
    ) -> Dict[str, Any]:
        """Timer info for a quiz taker.

        While a global timer runs its start and duration are returned and
        per-user timers are ignored; otherwise the user's own timer is
        returned, created on first use.
        """
        state = self.active_state()
        if state is not None:
            return {
                "startTime": _iso(state.start_time),
                "currentTime": _iso(self.clock()),
                "isGlobal": True,
                "duration": state.duration_seconds,
            }
        timer = timer_manager.get_or_create_user_timer(user_id, self.clock())
        return {
            "startTime": _parse_iso(timer.start_time).isoformat(),
            "currentTime": _iso(self.clock()),
            "isGlobal": False,
        }
