"""Timer persistence.

Stores per-user timers and the single global timer record.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.timer import TimerModel

logger = logging.getLogger(__name__)


class TimerManager:
    """Manages Timer rows using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_timer(self, user_id: str) -> Optional[TimerModel]:
        return (
            self.db.query(TimerModel)
            .filter(TimerModel.user_id == user_id, TimerModel.is_global.is_(False))
            .first()
        )

    def get_or_create_user_timer(self, user_id: str, now: datetime) -> TimerModel:
        """Return the user's timer, creating it with ``now`` as start if absent."""
        timer = self.get_user_timer(user_id)
        if timer is not None:
            return timer
        timer = TimerModel(user_id=user_id, is_global=False, start_time=now.isoformat())
        self.db.add(timer)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent first request already created it
            self.db.rollback()
            return self.get_user_timer(user_id)
        logger.info("Started timer for user %s", user_id)
        return timer

    def delete_user_timers(self) -> int:
        """Delete every per-user timer; returns the number removed."""
        deleted = (
            self.db.query(TimerModel)
            .filter(TimerModel.is_global.is_(False))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def get_global_timer(self) -> Optional[TimerModel]:
        return self.db.query(TimerModel).filter(TimerModel.is_global.is_(True)).first()

    def save_global_timer(
        self, start: datetime, duration_seconds: int, created_by: Optional[str]
    ) -> TimerModel:
        """Create or replace the single global timer record."""
        timer = self.get_global_timer()
        if timer is None:
            timer = TimerModel(
                is_global=True,
                user_id=None,
                start_time=start.isoformat(),
                duration_seconds=duration_seconds,
                created_by=created_by,
            )
            self.db.add(timer)
            try:
                self.db.commit()
                return timer
            except IntegrityError:
                # A concurrent start inserted the global row first
                self.db.rollback()
                timer = self.get_global_timer()
        timer.start_time = start.isoformat()
        timer.duration_seconds = duration_seconds
        timer.created_by = created_by
        self.db.commit()
        return timer

    def delete_global_timer(self) -> None:
        self.db.query(TimerModel).filter(TimerModel.is_global.is_(True)).delete(
            synchronize_session=False
        )
        self.db.commit()
