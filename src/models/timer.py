"""Timer database model.

A row is either a per-user timer (``user_id`` set) or the single global
timer (``is_global`` true, no owner).
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, text
from .base import Base


class TimerModel(Base):
    __tablename__ = "timers"
    __table_args__ = (
        # At most one global row
        Index(
            "uq_timers_single_global",
            "is_global",
            unique=True,
            sqlite_where=text("is_global = 1"),
            postgresql_where=text("is_global"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=True,
    )
    is_global = Column(Boolean, nullable=False, default=False, index=True)
    start_time = Column(String, nullable=False)  # ISO format string
    duration_seconds = Column(Integer, nullable=True)  # global timer only
    created_by = Column(String, nullable=True)  # username of the admin
