"""Response database model.

One row per (user, year level); draft saves and final submits update it in place.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from .base import Base


class ResponseModel(Base):
    __tablename__ = "responses"
    __table_args__ = (
        UniqueConstraint("user_id", "year_level", name="uq_responses_user_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    year_level = Column(Integer, nullable=False)
    answers = Column(Text, nullable=False)  # serialized question id -> answer mapping
    completed = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(String, nullable=False)  # ISO format string
