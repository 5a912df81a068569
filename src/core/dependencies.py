"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes:
request-scoped managers and the process-wide timer authority and cache.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import question_manager
from utils import response_cache
from utils import response_manager
from utils import setting_manager
from utils import timer_authority
from utils import timer_manager
from utils import user_manager

# Process-wide singletons; reset on process start
_timer_authority_instance: timer_authority.GlobalTimerAuthority = None
_question_cache_instance: response_cache.ResponseCache = None


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_question_manager(
    db: Session = Depends(get_db),
) -> question_manager.QuestionManager:
    """Get QuestionManager instance with request-scoped DB session."""
    return question_manager.QuestionManager(db)


def get_response_manager(
    db: Session = Depends(get_db),
) -> response_manager.ResponseManager:
    """Get ResponseManager instance with request-scoped DB session."""
    return response_manager.ResponseManager(db)


def get_setting_manager(db: Session = Depends(get_db)) -> setting_manager.SettingManager:
    """Get SettingManager instance with request-scoped DB session."""
    return setting_manager.SettingManager(db)


def get_timer_manager(db: Session = Depends(get_db)) -> timer_manager.TimerManager:
    """Get TimerManager instance with request-scoped DB session."""
    return timer_manager.TimerManager(db)


def get_timer_authority() -> timer_authority.GlobalTimerAuthority:
    """Get GlobalTimerAuthority singleton instance.

    Returns:
        GlobalTimerAuthority instance (singleton).
    """
    global _timer_authority_instance
    if _timer_authority_instance is None:
        _timer_authority_instance = timer_authority.GlobalTimerAuthority()
    return _timer_authority_instance


def get_question_cache() -> response_cache.ResponseCache:
    """Get the question listing cache singleton instance."""
    global _question_cache_instance
    if _question_cache_instance is None:
        _question_cache_instance = response_cache.ResponseCache()
    return _question_cache_instance


# Type aliases for dependency injection
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
QuestionManagerDep = Annotated[
    question_manager.QuestionManager, Depends(get_question_manager)
]
ResponseManagerDep = Annotated[
    response_manager.ResponseManager, Depends(get_response_manager)
]
SettingManagerDep = Annotated[
    setting_manager.SettingManager, Depends(get_setting_manager)
]
TimerManagerDep = Annotated[timer_manager.TimerManager, Depends(get_timer_manager)]
TimerAuthorityDep = Annotated[
    timer_authority.GlobalTimerAuthority, Depends(get_timer_authority)
]
QuestionCacheDep = Annotated[
    response_cache.ResponseCache, Depends(get_question_cache)
]
