from .base import Base
from .user import UserModel
from .question import QuestionModel
from .response import ResponseModel
from .timer import TimerModel
from .setting import SettingModel

__all__ = [
    "Base",
    "UserModel",
    "QuestionModel",
    "ResponseModel",
    "TimerModel",
    "SettingModel",
]
