"""Answer session store.

One Response row per (user, year level). Draft saves update answers without
touching the completed flag; final submits force ``completed=True``. Both are
upserts, so repeated calls overwrite rather than duplicate. Concurrent writers
for the same pair race with last-write-wins semantics.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import SerializationError
from models.question import QuestionModel
from models.response import ResponseModel
from schemas.quiz import RawAnswers, StructuredAnswers, YearScore
from utils.question_manager import validate_year_level

logger = logging.getLogger(__name__)

Answers = Union[RawAnswers, StructuredAnswers]


def decode_answers(raw: Optional[str]) -> Dict[str, Any]:
    """Parse a stored answer mapping.

    Raises:
        SerializationError: If ``raw`` is not a JSON object.
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise SerializationError("Stored answers are not valid JSON", error=str(e)) from e
    if not isinstance(parsed, dict):
        raise SerializationError("Stored answers are not a mapping")
    return parsed


def load_answers(raw: Optional[str]) -> Dict[str, Any]:
    """Parse a stored answer mapping, degrading to {} on malformed data."""
    try:
        return decode_answers(raw)
    except SerializationError as e:
        logger.warning("%s; treating as no answers", e.message)
        return {}


def score_answers(answers: Dict[str, Any], questions: Iterable[QuestionModel]) -> int:
    """Count questions whose submitted answer equals the correct answer as text."""
    score = 0
    for question in questions:
        submitted = answers.get(str(question.id))
        if submitted is not None and str(submitted) == question.correct_answer:
            score += 1
    return score


def score_response(model: ResponseModel, questions: Iterable[QuestionModel]) -> int:
    """Score a stored response; malformed answers score 0."""
    return score_answers(load_answers(model.answers), questions)


class ResponseManager:
    """Manages Response rows using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def get_response(self, user_id: str, year: int) -> Optional[ResponseModel]:
        return (
            self.db.query(ResponseModel)
            .filter(ResponseModel.user_id == user_id, ResponseModel.year_level == year)
            .first()
        )

    def _upsert(
        self, user_id: str, year: int, answers: str, completed: Optional[bool]
    ) -> ResponseModel:
        now = datetime.now(pytz.utc).isoformat()
        model = self.get_response(user_id, year)
        if model is None:
            model = ResponseModel(
                user_id=user_id,
                year_level=year,
                answers=answers,
                completed=bool(completed),
                submitted_at=now,
            )
            self.db.add(model)
            try:
                self.db.commit()
                return model
            except IntegrityError:
                # Another request created the row first; update it instead
                self.db.rollback()
                model = self.get_response(user_id, year)
        model.answers = answers
        model.submitted_at = now
        if completed is not None:
            model.completed = completed
        self.db.commit()
        return model

    def save_draft(self, user_id: str, year: Any, payload: Answers) -> ResponseModel:
        """Persist in-progress answers.

        An already completed response keeps its completed flag; only the
        answers and timestamp change.
        """
        year_level = validate_year_level(year)
        model = self._upsert(user_id, year_level, payload.canonical(), completed=None)
        logger.info("Saved draft answers for user %s, year %d", user_id, year_level)
        return model

    def submit_final(self, user_id: str, year: Any, payload: Answers) -> ResponseModel:
        """Persist final answers and mark the response completed."""
        year_level = validate_year_level(year)
        model = self._upsert(user_id, year_level, payload.serialized(), completed=True)
        logger.info("Submitted answers for user %s, year %d", user_id, year_level)
        return model

    def get_saved_answers(self, user_id: str, year: Any) -> Dict[str, Any]:
        """Return the stored mapping, or {} when absent or unparsable."""
        year_level = validate_year_level(year)
        model = self.get_response(user_id, year_level)
        if model is None:
            return {}
        return load_answers(model.answers)

    def compute_score(
        self, user_id: str, year: Any, questions: List[QuestionModel]
    ) -> Optional[Dict[str, int]]:
        """Score a completed response against ``questions``.

        Returns:
            ``{"score", "totalQuestions"}``, or None when no completed
            response exists for the pair.
        """
        year_level = validate_year_level(year)
        return self._completed_score(self.get_response(user_id, year_level), questions)

    def _completed_score(
        self, model: Optional[ResponseModel], questions: List[QuestionModel]
    ) -> Optional[Dict[str, int]]:
        if model is None or not model.completed:
            return None
        return {
            "score": score_response(model, questions),
            "totalQuestions": len(questions),
        }

    def list_results(
        self, user_id: str, questions_by_year: Dict[int, List[QuestionModel]]
    ) -> Dict[int, YearScore]:
        """Scores for each of the user's completed responses, keyed by year."""
        results: Dict[int, YearScore] = {}
        models = (
            self.db.query(ResponseModel)
            .filter(ResponseModel.user_id == user_id)
            .order_by(ResponseModel.year_level)
            .all()
        )
        for model in models:
            score = self._completed_score(
                model, questions_by_year.get(model.year_level, [])
            )
            if score is None:
                continue
            results[model.year_level] = YearScore(**score, submittedAt=model.submitted_at)
        return results

    def list_all(self) -> List[ResponseModel]:
        return self.db.query(ResponseModel).all()
