"""Question storage and paginated, redacted delivery."""

import json
import logging
import math
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from config import VALID_YEAR_LEVELS
from core.exceptions import ValidationError
from models.question import QuestionModel
from schemas.admin import QuestionCreate
from schemas.quiz import Pagination, QuestionPage
from utils.converters import model_to_question_out

logger = logging.getLogger(__name__)


def validate_year_level(year: Any) -> int:
    """Coerce ``year`` to an int and check it is a known year level.

    Booleans are rejected rather than read as 0 or 1.

    Raises:
        ValidationError: If it is not one of the configured year levels.
    """
    year_level = None
    if not isinstance(year, bool):
        try:
            year_level = int(year)
        except (TypeError, ValueError):
            pass
    if year_level not in VALID_YEAR_LEVELS:
        levels = ", ".join(str(y) for y in sorted(VALID_YEAR_LEVELS))
        raise ValidationError(
            f"Invalid year selection. Please select Year {levels}",
            error=f"year={year!r}",
        )
    return year_level


class QuestionManager:
    """Manages question documents using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def list_questions(self, year: Any, page: int, limit: int) -> QuestionPage:
        """Return one page of a year's questions without correct answers.

        Args:
            year: Year level; validated before any query runs.
            page: 1-based page number.
            limit: Page size.

        Raises:
            ValidationError: On an unknown year level or non-positive paging.
        """
        year_level = validate_year_level(year)
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers")

        query = self.db.query(QuestionModel).filter(QuestionModel.year_level == year_level)
        total = query.count()
        models = (
            query.order_by(QuestionModel.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        logger.info(
            "Fetched %d questions for year %d (page %d, limit %d)",
            len(models), year_level, page, limit,
        )
        return QuestionPage(
            questions=[model_to_question_out(m) for m in models],
            pagination=Pagination(
                total=total,
                page=page,
                limit=limit,
                pages=math.ceil(total / limit),
            ),
        )

    def questions_by_year(self) -> Dict[int, List[QuestionModel]]:
        """All questions, grouped by year level, in insertion order."""
        grouped: Dict[int, List[QuestionModel]] = {year: [] for year in VALID_YEAR_LEVELS}
        for model in self.db.query(QuestionModel).order_by(QuestionModel.id).all():
            grouped.setdefault(model.year_level, []).append(model)
        return grouped

    def count(self) -> int:
        return self.db.query(QuestionModel).count()

    def add_questions(self, questions: List[QuestionCreate]) -> List[QuestionModel]:
        """Insert questions.

        Raises:
            ValidationError: If any question names an unknown year level.
        """
        models = []
        for q in questions:
            models.append(
                QuestionModel(
                    year_level=validate_year_level(q.year_level),
                    question=q.question,
                    options=json.dumps(q.options, ensure_ascii=False),
                    correct_answer=q.correct_answer,
                    difficulty=q.difficulty,
                    question_type=q.question_type,
                )
            )
        self.db.add_all(models)
        self.db.commit()
        logger.info("Added %d questions", len(models))
        return models

    def delete_year(self, year: Any) -> int:
        """Delete every question of a year level; returns the number removed."""
        year_level = validate_year_level(year)
        deleted = (
            self.db.query(QuestionModel)
            .filter(QuestionModel.year_level == year_level)
            .delete()
        )
        self.db.commit()
        logger.info("Deleted %d questions for year %d", deleted, year_level)
        return deleted
