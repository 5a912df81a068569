"""Quiz schema definitions.

Request and response bodies for question delivery, answer save/submit,
timers and results.
"""

import json
import logging
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, Discriminator, Field, RootModel, StrictInt, Tag

logger = logging.getLogger(__name__)


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class RawAnswers(RootModel[Annotated[str, Field(min_length=1)]]):
    """Answers sent as already-serialized text."""

    def canonical(self) -> str:
        """Re-serialize the text when it holds a JSON mapping, else keep it verbatim."""
        try:
            parsed = json.loads(self.root)
        except ValueError:
            logger.warning("Answer payload is not valid JSON, storing it verbatim")
            return self.root
        if not isinstance(parsed, dict):
            logger.warning("Answer payload is not a JSON object, storing it verbatim")
            return self.root
        return _dumps(parsed)

    def serialized(self) -> str:
        return _dumps(self.root)


class StructuredAnswers(RootModel[Dict[str, Any]]):
    """Answers sent as a question id -> answer mapping."""

    def canonical(self) -> str:
        return _dumps(self.root)

    def serialized(self) -> str:
        return _dumps(self.root)


def _answers_kind(value: Any) -> str:
    if isinstance(value, (str, RawAnswers)):
        return "raw"
    return "structured"


AnswersPayload = Annotated[
    Union[
        Annotated[RawAnswers, Tag("raw")],
        Annotated[StructuredAnswers, Tag("structured")],
    ],
    Discriminator(_answers_kind),
]


class SaveAnswersRequest(BaseModel):
    year: Union[StrictInt, str]
    answers: AnswersPayload


class AnswersResponse(BaseModel):
    answers: Dict[str, Any]


class TabWarningRequest(BaseModel):
    warningCount: int = Field(ge=0)


class QuestionOut(BaseModel):
    """A question as delivered to quiz takers (no correct answer)."""

    id: int
    year_level: int
    question: str
    options: List[Any]
    difficulty: str
    question_type: str


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class QuestionPage(BaseModel):
    questions: List[QuestionOut]
    pagination: Pagination


class QuizStatusResponse(BaseModel):
    enabled: bool
    message: str


class GlobalTimerStartRequest(BaseModel):
    duration: Optional[int] = Field(default=None, gt=0)


class GlobalTimerStatus(BaseModel):
    active: bool
    expired: Optional[bool] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    currentTime: Optional[str] = None
    remainingSeconds: Optional[int] = None
    duration: Optional[int] = None
    createdBy: Optional[str] = None
    message: str


class TimerStartResponse(BaseModel):
    startTime: str
    currentTime: str
    isGlobal: bool
    duration: Optional[int] = None


class YearScore(BaseModel):
    score: int
    totalQuestions: int
    submittedAt: str
    completed: bool = True


class ResultsUser(BaseModel):
    username: str
    warnings: int
    fullscreenViolations: int


class ResultsResponse(BaseModel):
    user: ResultsUser
    scores: Dict[int, YearScore]
