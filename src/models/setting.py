"""Application setting model (key/value)."""

from sqlalchemy import JSON, Column, String
from .base import Base


class SettingModel(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True, index=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(String, nullable=False)  # ISO format string
    updated_by = Column(String, nullable=True)  # user_id of the updater
