"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, String
from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    warnings = Column(Integer, nullable=False, default=0)
    fullscreen_violations = Column(Integer, nullable=False, default=0)
    token = Column(String, nullable=True)  # last issued bearer token
    create_at = Column(String, nullable=False)  # ISO format string
