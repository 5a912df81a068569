"""Key/value application settings."""

import logging
from datetime import datetime
from typing import Any, Optional

import pytz
from sqlalchemy.orm import Session

from models.setting import SettingModel

logger = logging.getLogger(__name__)


class SettingManager:
    """Reads and writes settings rows; keys are unique."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[SettingModel]:
        return self.db.query(SettingModel).filter(SettingModel.key == key).first()

    def get_value(self, key: str, default: Any = None) -> Any:
        """Return the setting's value, or ``default`` when it does not exist."""
        model = self.get(key)
        if model is None:
            return default
        return model.value

    def set_value(self, key: str, value: Any, updated_by: Optional[str] = None) -> SettingModel:
        """Create or update a setting."""
        now = datetime.now(pytz.utc).isoformat()
        model = self.get(key)
        if model is None:
            model = SettingModel(key=key, value=value, updated_at=now, updated_by=updated_by)
            self.db.add(model)
        else:
            model.value = value
            model.updated_at = now
            model.updated_by = updated_by
        self.db.commit()
        self.db.refresh(model)
        logger.info("Setting %s updated to %r", key, value)
        return model

    def count(self) -> int:
        return self.db.query(SettingModel).count()
