"""Conversions between ORM models and Pydantic schemas."""

import json
import logging
from typing import Any, List

from models.question import QuestionModel
from models.user import UserModel
from schemas.quiz import QuestionOut
from schemas.user import User

logger = logging.getLogger(__name__)


def user_to_model(user: User) -> UserModel:
    return UserModel(
        user_id=user.user_id,
        username=user.username,
        password_hash=user.password_hash,
        warnings=user.warnings,
        fullscreen_violations=user.fullscreen_violations,
        token=user.token,
        create_at=user.create_at,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        username=model.username,
        password_hash=model.password_hash,
        warnings=model.warnings or 0,
        fullscreen_violations=model.fullscreen_violations or 0,
        token=model.token,
        create_at=model.create_at,
    )


def parse_options(raw: str) -> List[Any]:
    """Decode a question's serialized option list; malformed text yields []."""
    try:
        options = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Malformed question options: %r", raw)
        return []
    return options if isinstance(options, list) else []


def model_to_question_out(model: QuestionModel) -> QuestionOut:
    """Build the redacted view of a question (no correct answer)."""
    return QuestionOut(
        id=model.id,
        year_level=model.year_level,
        question=model.question,
        options=parse_options(model.options),
        difficulty=model.difficulty,
        question_type=model.question_type,
    )
