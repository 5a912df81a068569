"""Quiz routes.

This module handles HTTP endpoints for quiz takers: availability, timers,
question delivery, answer save/submit, results and violation logging.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from api.routes.auth import get_current_user, require_admin
from config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from core.dependencies import (
    QuestionCacheDep,
    QuestionManagerDep,
    ResponseManagerDep,
    SettingManagerDep,
    TimerAuthorityDep,
    TimerManagerDep,
    UserManagerDep,
)
from core.exceptions import AuthorizationError
from schemas.quiz import (
    AnswersResponse,
    GlobalTimerStartRequest,
    GlobalTimerStatus,
    QuizStatusResponse,
    ResultsResponse,
    ResultsUser,
    SaveAnswersRequest,
    TabWarningRequest,
    TimerStartResponse,
)
from schemas.user import User
from utils import quiz_gate
from utils.question_manager import validate_year_level

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quiz", tags=["Quiz"])


def require_quiz_enabled(
    setting_manager: SettingManagerDep,
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject ordinary users while the quiz is switched off."""
    if not quiz_gate.is_quiz_enabled(current_user, setting_manager):
        raise AuthorizationError(quiz_gate.GATED_MESSAGE, error="Quiz disabled")
    return current_user


@router.get("/status", response_model=QuizStatusResponse, summary="Quiz availability")
def quiz_status(
    setting_manager: SettingManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuizStatusResponse:
    enabled = quiz_gate.is_quiz_enabled(current_user, setting_manager)
    return QuizStatusResponse(
        enabled=enabled,
        message=quiz_gate.ENABLED_MESSAGE if enabled else quiz_gate.DISABLED_MESSAGE,
    )


@router.get(
    "/timer/global-status",
    response_model=GlobalTimerStatus,
    response_model_exclude_none=True,
    summary="Global timer status",
)
def global_timer_status(
    timer_authority: TimerAuthorityDep,
    timer_manager: TimerManagerDep,
    current_user: User = Depends(get_current_user),
) -> GlobalTimerStatus:
    return GlobalTimerStatus(**timer_authority.get_global_status(timer_manager))


@router.get(
    "/timer/start",
    response_model=TimerStartResponse,
    response_model_exclude_none=True,
    summary="Start or get the caller's timer",
)
def start_timer(
    timer_authority: TimerAuthorityDep,
    timer_manager: TimerManagerDep,
    current_user: User = Depends(require_quiz_enabled),
) -> TimerStartResponse:
    return TimerStartResponse(
        **timer_authority.start_or_get_user_timer(timer_manager, current_user.user_id)
    )


@router.post("/timer/global-start", summary="Start the global timer")
def start_global_timer(
    timer_authority: TimerAuthorityDep,
    timer_manager: TimerManagerDep,
    req: Optional[GlobalTimerStartRequest] = None,
    current_user: User = Depends(require_admin),
) -> dict:
    """Start the exam-wide clock; every individual timer is discarded."""
    return timer_authority.start_global(
        timer_manager,
        created_by=current_user.username,
        duration_seconds=req.duration if req else None,
    )


@router.post("/timer/global-stop", summary="Stop the global timer")
def stop_global_timer(
    timer_authority: TimerAuthorityDep,
    timer_manager: TimerManagerDep,
    current_user: User = Depends(require_admin),
) -> dict:
    return timer_authority.stop_global(timer_manager, stopped_by=current_user.username)


@router.get("/results", response_model=ResultsResponse, summary="Caller's scores")
def results(
    question_manager: QuestionManagerDep,
    response_manager: ResponseManagerDep,
    current_user: User = Depends(get_current_user),
) -> ResultsResponse:
    """Scores of the caller's completed responses, per year level."""
    scores = response_manager.list_results(
        current_user.user_id, question_manager.questions_by_year()
    )
    return ResultsResponse(
        user=ResultsUser(
            username=current_user.username,
            warnings=current_user.warnings,
            fullscreenViolations=current_user.fullscreen_violations,
        ),
        scores=scores,
    )


@router.get("/answers/{year}", response_model=AnswersResponse, summary="Saved answers")
def saved_answers(
    year: str,
    response_manager: ResponseManagerDep,
    current_user: User = Depends(get_current_user),
) -> AnswersResponse:
    return AnswersResponse(
        answers=response_manager.get_saved_answers(current_user.user_id, year)
    )


@router.post("/tab-warning", summary="Record tab-switch warnings")
def tab_warning(
    req: TabWarningRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    warnings = user_manager.set_warnings(current_user.user_id, req.warningCount)
    return {"message": "Warning logged successfully", "warnings": warnings}


@router.post("/fullscreen-violation", summary="Record a fullscreen exit")
def fullscreen_violation(
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    violations = user_manager.increment_fullscreen_violations(current_user.user_id)
    return {"message": "Fullscreen violation logged", "violations": violations}


@router.post("/save", summary="Save draft answers")
def save_answers(
    req: SaveAnswersRequest,
    response_manager: ResponseManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    response_manager.save_draft(current_user.user_id, req.year, req.answers)
    return {"message": "Answers saved successfully"}


@router.post("/submit", summary="Submit final answers")
def submit_answers(
    req: SaveAnswersRequest,
    response_manager: ResponseManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    response_manager.submit_final(current_user.user_id, req.year, req.answers)
    return {"message": "Quiz submitted successfully"}


# Registered last: the path parameter would otherwise shadow the routes above
@router.get("/{year}", summary="Questions for a year level")
def list_questions(
    year: str,
    request: Request,
    question_manager: QuestionManagerDep,
    question_cache: QuestionCacheDep,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    current_user: User = Depends(require_quiz_enabled),
) -> dict:
    """Paginated questions without correct answers, cached per request path."""
    validate_year_level(year)

    cache_key = request.url.path
    if request.url.query:
        cache_key = f"{cache_key}?{request.url.query}"
    cached = question_cache.get(cache_key)
    if cached is not None:
        return cached

    payload = question_manager.list_questions(year, page, limit).model_dump()
    question_cache.set(cache_key, payload)
    return payload
