"""Admin routes.

User administration, the quiz switch, question maintenance and the results
report. Every endpoint requires the administrator identity.
"""

import logging
from datetime import datetime

import pytz
from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require_admin
from config import QUIZ_ENABLED_DEFAULT, QUIZ_ENABLED_KEY, QUESTION_CACHE_PREFIX
from core.dependencies import (
    QuestionCacheDep,
    QuestionManagerDep,
    ResponseManagerDep,
    SettingManagerDep,
    UserManagerDep,
)
from core.exceptions import NotFoundError
from schemas.admin import (
    AdminQuizStatusResponse,
    QuestionBatchRequest,
    QuizStatusUpdateRequest,
    ResultsExportResponse,
    UserResult,
    YearResult,
)
from schemas.user import (
    BulkCreateResult,
    BulkCreateUsersRequest,
    BulkCreateUsersResponse,
    CreateUserRequest,
    User,
    UserListResponse,
    UserSummary,
)
from utils.response_manager import score_response
from utils.user_manager import UserAlreadyExistsError, UserNotFoundError, is_admin

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Create a user")
def create_user(req: CreateUserRequest, user_manager: UserManagerDep) -> dict:
    if not req.username or not req.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required",
        )
    try:
        user = user_manager.create_user(req.username, req.password)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"message": "User created successfully", "userId": user.user_id}


@router.post("/users/bulk", response_model=BulkCreateUsersResponse, summary="Create users")
def bulk_create_users(
    req: BulkCreateUsersRequest, user_manager: UserManagerDep
) -> BulkCreateUsersResponse:
    """Create several users; each entry succeeds or fails on its own."""
    if not req.users:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Users array is required",
        )
    results = []
    for entry in req.users:
        if not entry.username or not entry.password:
            results.append(
                BulkCreateResult(
                    username=entry.username,
                    success=False,
                    error="Invalid data: username or password missing",
                )
            )
            continue
        try:
            user = user_manager.create_user(entry.username, entry.password)
        except UserAlreadyExistsError as e:
            results.append(
                BulkCreateResult(username=entry.username, success=False, error=str(e))
            )
            continue
        results.append(BulkCreateResult(username=user.username, success=True, id=user.user_id))

    succeeded = sum(1 for r in results if r.success)
    return BulkCreateUsersResponse(
        message=f"Created {succeeded} users, {len(results) - succeeded} failed",
        results=results,
    )


@router.get("/users", response_model=UserListResponse, summary="List users")
def list_users(user_manager: UserManagerDep) -> UserListResponse:
    return UserListResponse(
        users=[
            UserSummary(
                id=u.user_id,
                username=u.username,
                warnings=u.warnings,
                fullscreenViolations=u.fullscreen_violations,
                created_at=u.create_at,
            )
            for u in user_manager.list_users()
        ]
    )


@router.delete("/users/{user_id}", summary="Delete a user")
def delete_user(user_id: str, user_manager: UserManagerDep) -> dict:
    """Delete a user with their responses and timer. The admin cannot be deleted."""
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", error=f"user_id={user_id}")
    if is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The admin account cannot be deleted",
        )
    try:
        user_manager.delete_user(user_id)
    except UserNotFoundError as e:
        raise NotFoundError("User not found", error=f"user_id={user_id}") from e
    return {"message": "User deleted successfully"}


@router.get("/quiz-status", response_model=AdminQuizStatusResponse, summary="Quiz switch")
def get_quiz_status(setting_manager: SettingManagerDep) -> AdminQuizStatusResponse:
    setting = setting_manager.get(QUIZ_ENABLED_KEY)
    if setting is None:
        return AdminQuizStatusResponse(enabled=QUIZ_ENABLED_DEFAULT)
    return AdminQuizStatusResponse(enabled=bool(setting.value), updated_at=setting.updated_at)


@router.post("/quiz-status", summary="Enable or disable the quiz")
def set_quiz_status(
    req: QuizStatusUpdateRequest,
    setting_manager: SettingManagerDep,
    current_user: User = Depends(require_admin),
) -> dict:
    if req.enabled is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quiz status must be a boolean",
        )
    setting_manager.set_value(QUIZ_ENABLED_KEY, req.enabled, updated_by=current_user.user_id)
    return {
        "message": (
            "Quiz is now enabled for all users"
            if req.enabled
            else "Quiz is now disabled for all users"
        ),
        "status": req.enabled,
    }


@router.post("/questions", status_code=status.HTTP_201_CREATED, summary="Add questions")
def add_questions(
    req: QuestionBatchRequest,
    question_manager: QuestionManagerDep,
    question_cache: QuestionCacheDep,
) -> dict:
    models = question_manager.add_questions(req.questions)
    question_cache.invalidate_prefix(QUESTION_CACHE_PREFIX)
    return {"message": f"Added {len(models)} questions", "ids": [m.id for m in models]}


@router.delete("/questions/{year}", summary="Delete a year's questions")
def delete_questions(
    year: str,
    question_manager: QuestionManagerDep,
    question_cache: QuestionCacheDep,
) -> dict:
    deleted = question_manager.delete_year(year)
    question_cache.invalidate_prefix(QUESTION_CACHE_PREFIX)
    return {"message": f"Deleted {deleted} questions", "deleted": deleted}


@router.get("/results", response_model=ResultsExportResponse, summary="All users' results")
def export_results(
    user_manager: UserManagerDep,
    question_manager: QuestionManagerDep,
    response_manager: ResponseManagerDep,
) -> ResultsExportResponse:
    """Per-user, per-year scores of every response, submitted or not."""
    questions_by_year = question_manager.questions_by_year()
    responses = {
        (r.user_id, r.year_level): r for r in response_manager.list_all()
    }

    results = []
    for user in user_manager.list_users():
        years = {}
        for year, questions in sorted(questions_by_year.items()):
            year_result = YearResult()
            response = responses.get((user.user_id, year))
            if response is not None:
                year_result = YearResult(
                    attempted=True,
                    completed=bool(response.completed),
                    score=score_response(response, questions),
                    total=len(questions),
                )
            years[year] = year_result
        results.append(
            UserResult(
                username=user.username,
                years=years,
                totalScore=sum(y.score for y in years.values()),
                warnings=user.warnings,
                fullscreenViolations=user.fullscreen_violations,
            )
        )

    logger.info("Built results report for %d users", len(results))
    return ResultsExportResponse(
        generated_at=datetime.now(pytz.utc).isoformat(), results=results
    )
