"""Admin schema definitions."""

import json
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, StrictBool, field_validator


class QuizStatusUpdateRequest(BaseModel):
    enabled: Optional[StrictBool] = None


class AdminQuizStatusResponse(BaseModel):
    enabled: bool
    updated_at: Optional[str] = None


class QuestionCreate(BaseModel):
    year_level: int
    question: str = Field(min_length=1)
    options: List[str] = Field(default_factory=list)
    correct_answer: str
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    question_type: Literal["mcq", "numerical", "string"] = "mcq"

    @field_validator("options", mode="before")
    @classmethod
    def parse_serialized_options(cls, value):
        """Accept the options list as JSON text as well."""
        if isinstance(value, str):
            return json.loads(value)
        return value


class QuestionBatchRequest(BaseModel):
    questions: List[QuestionCreate] = Field(min_length=1)


class YearResult(BaseModel):
    attempted: bool = False
    completed: bool = False
    score: int = 0
    total: int = 0


class UserResult(BaseModel):
    username: str
    years: Dict[int, YearResult]
    totalScore: int
    warnings: int
    fullscreenViolations: int


class ResultsExportResponse(BaseModel):
    generated_at: str
    results: List[UserResult]
