"""User management utilities.

This module provides user management functionality including user storage,
password hashing, bearer token bookkeeping and violation counters.
"""

import logging
from typing import List, Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import ADMIN_USERNAME, BCRYPT_ROUNDS
from models.response import ResponseModel
from models.timer import TimerModel
from models.user import UserModel
from schemas.user import User
from utils.converters import model_to_user, user_to_model

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Exception raised when a user is not found."""

    pass


class UserAlreadyExistsError(Exception):
    """Exception raised when trying to create a user that already exists."""

    pass


def is_admin(user: User) -> bool:
    """Whether the user is the administrator identity."""
    return user.username == ADMIN_USERNAME


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        # Truncate password if it exceeds bcrypt's 72-byte limit
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > 72:
            logger.warning(
                "Password exceeds 72 bytes (%d bytes), truncating", len(password_bytes)
            )
            password_bytes = password_bytes[:72]

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(self, username: str, password: str) -> User:
        """Create a new user.

        Args:
            username: Username for the new user.
            password: Plain text password.

        Returns:
            Created User object.

        Raises:
            UserAlreadyExistsError: If username already exists.
        """
        existing = self.db.query(UserModel).filter(UserModel.username == username).first()
        if existing:
            raise UserAlreadyExistsError("Username already exists")

        user = User(username=username, password_hash=self.hash_password(password))

        # The unique constraint catches two requests racing past the check above
        try:
            model = user_to_model(user)
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError("Username already exists") from e

        logger.info("Created user: %s", username)
        return user

    def _get_model(self, user_id: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise UserNotFoundError(user_id)
        return model

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get a user by username.

        Args:
            username: Username to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.username == username).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def list_users(self, include_admin: bool = False) -> List[User]:
        """List users ordered by creation time.

        Args:
            include_admin: Whether to include the administrator account.
        """
        query = self.db.query(UserModel)
        if not include_admin:
            query = query.filter(UserModel.username != ADMIN_USERNAME)
        return [model_to_user(m) for m in query.order_by(UserModel.create_at).all()]

    def set_token(self, user_id: str, token: Optional[str]) -> None:
        """Store (or clear, with None) the user's current bearer token."""
        model = self._get_model(user_id)
        model.token = token
        self.db.commit()

    def set_warnings(self, user_id: str, warning_count: int) -> int:
        model = self._get_model(user_id)
        model.warnings = warning_count
        self.db.commit()
        logger.info("User %s warnings set to %d", model.username, warning_count)
        return model.warnings

    def increment_fullscreen_violations(self, user_id: str) -> int:
        model = self._get_model(user_id)
        model.fullscreen_violations = (model.fullscreen_violations or 0) + 1
        self.db.commit()
        logger.info(
            "User %s fullscreen violations now %d",
            model.username,
            model.fullscreen_violations,
        )
        return model.fullscreen_violations

    def delete_user(self, user_id: str) -> None:
        """Delete a user together with their responses and per-user timer.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        model = self._get_model(user_id)
        self.db.query(ResponseModel).filter(ResponseModel.user_id == user_id).delete()
        self.db.query(TimerModel).filter(TimerModel.user_id == user_id).delete()
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted user: %s", model.username)
