"""Authentication routes.

This module handles HTTP endpoints for login, token verification and logout,
and provides the bearer-token dependencies other routers use.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, Header
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_HOURS, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from schemas.user import CurrentUserResponse, LoginRequest, LoginResponse, User, UserRef
from utils.user_manager import is_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        user_id: Identifier stored in the ``sub`` claim.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    expire = datetime.now(pytz.utc) + (
        expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    )
    return jwt.encode({"sub": user_id, "exp": expire}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _extract_token(authorization: Optional[str]) -> str:
    """Accept both ``Bearer <token>`` and a bare token."""
    if not authorization:
        raise AuthenticationError("Authentication required")
    token = authorization[7:] if authorization.startswith("Bearer ") else authorization
    token = token.strip()
    if not token:
        raise AuthenticationError("Token missing")
    return token


def get_current_user(
    user_manager: UserManagerDep,
    authorization: Optional[str] = Header(default=None),
) -> User:
    """Get current authenticated user.

    Args:
        user_manager: Injected UserManager instance.
        authorization: The Authorization header.

    Returns:
        Current User object.

    Raises:
        AuthenticationError: If the token is missing or invalid, or the user is gone.
    """
    token = _extract_token(authorization)
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.info("Token verification failed: %s", e)
        raise AuthenticationError("Invalid token", error=str(e)) from e
    user_id = payload.get("sub")
    user = user_manager.get_user_by_id(user_id) if user_id else None
    if user is None:
        raise AuthenticationError("User not found")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only the administrator identity."""
    if not is_admin(current_user):
        raise AuthorizationError("Admin access required")
    return current_user


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> LoginResponse:
    """Login with username and password.

    Args:
        req: Login request with username and password.
        user_manager: Injected UserManager instance.

    Returns:
        LoginResponse with the bearer token and user identity.

    Raises:
        ValidationError: If a field is missing.
        AuthenticationError: On bad credentials.
    """
    if not req.username or not req.password:
        raise ValidationError("Username and password are required")

    user = user_manager.get_user_by_username(req.username)
    if user is None or not user_manager.verify_password(req.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    token = create_access_token(user.user_id)
    user_manager.set_token(user.user_id, token)
    logger.info("User %s logged in", user.username)

    return LoginResponse(token=token, user=UserRef(id=user.user_id, username=user.username))


@router.get("/verify", response_model=CurrentUserResponse, summary="Verify token")
def verify(current_user: User = Depends(get_current_user)) -> CurrentUserResponse:
    """Return the identity behind the presented token."""
    return CurrentUserResponse(
        user=UserRef(id=current_user.user_id, username=current_user.username)
    )


@router.post("/logout", summary="Log out")
def logout(
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    """Clear the stored token of the current user."""
    user_manager.set_token(current_user.user_id, None)
    logger.info("User %s logged out", current_user.username)
    return {"message": "Logout successful"}
