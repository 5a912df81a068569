"""Quiz availability gating.

A single persisted switch decides whether ordinary users may fetch questions
or start timers; the administrator always passes.
"""

from config import QUIZ_ENABLED_DEFAULT, QUIZ_ENABLED_KEY
from schemas.user import User
from utils.setting_manager import SettingManager
from utils.user_manager import is_admin

ENABLED_MESSAGE = "Quiz is enabled. You can start now."
DISABLED_MESSAGE = "Please wait for the administrator to enable the quiz."
GATED_MESSAGE = "Quiz is not yet enabled by the administrator"


def quiz_enabled_setting(setting_manager: SettingManager) -> bool:
    """The stored switch value, or the configured default when absent."""
    return bool(setting_manager.get_value(QUIZ_ENABLED_KEY, QUIZ_ENABLED_DEFAULT))


def is_quiz_enabled(user: User, setting_manager: SettingManager) -> bool:
    """Whether ``user`` may currently interact with quiz content.

    Store errors propagate to the caller; they are never read as "enabled".
    """
    if is_admin(user):
        return True
    return quiz_enabled_setting(setting_manager)
