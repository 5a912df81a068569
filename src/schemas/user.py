"""User schema definitions.

This module defines the User data model and the authentication and
user-administration request/response bodies.
"""

import uuid
from datetime import datetime
from typing import List, Optional

import pytz
from pydantic import BaseModel, Field


class User(BaseModel):
    user_id: str = Field(
        description="The unique identifier for the user.",
        default_factory=lambda: str(uuid.uuid4()),
    )
    username: str = Field(description="Unique login name.")
    password_hash: str = Field(description="Bcrypt hash of the password.")
    warnings: int = Field(default=0, description="Cumulative tab-switch warnings.")
    fullscreen_violations: int = Field(
        default=0, description="Cumulative fullscreen exits."
    )
    token: Optional[str] = Field(
        default=None, description="The last bearer token issued at login."
    )
    create_at: str = Field(
        description="The time when the user was created.",
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )


class UserRef(BaseModel):
    """Public identity returned by auth endpoints."""

    id: str
    username: str


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserRef


class CurrentUserResponse(BaseModel):
    user: UserRef


class CreateUserRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class BulkCreateUsersRequest(BaseModel):
    users: List[CreateUserRequest] = Field(default_factory=list)


class BulkCreateResult(BaseModel):
    username: Optional[str] = None
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None


class BulkCreateUsersResponse(BaseModel):
    message: str
    results: List[BulkCreateResult]


class UserSummary(BaseModel):
    """A user row as listed to the administrator."""

    id: str
    username: str
    warnings: int
    fullscreenViolations: int
    created_at: str


class UserListResponse(BaseModel):
    users: List[UserSummary]
