"""Custom exception classes for the Quiz Service.

Every exception carries the HTTP status it maps to, so the application-level
handler can render it as a JSON ``{message, error?}`` body.
"""

from typing import Optional


class QuizServiceError(Exception):
    """Base exception for all Quiz Service errors."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        """Initialize the exception.

        Args:
            message: Human readable message returned to the client.
            error: Optional detail string.
        """
        self.message = message
        self.error = error
        super().__init__(message)


class ValidationError(QuizServiceError):
    """Raised when request input is missing or invalid."""

    status_code = 400


class AuthenticationError(QuizServiceError):
    """Raised for bad credentials or a missing/invalid token."""

    status_code = 401


class AuthorizationError(QuizServiceError):
    """Raised when the caller may not perform the action."""

    status_code = 403


class NotFoundError(QuizServiceError):
    """Raised when a required document does not exist."""

    status_code = 404


class PersistenceError(QuizServiceError):
    """Raised when the store is unavailable or a write fails."""

    status_code = 500


class SerializationError(QuizServiceError):
    """Raised when an answer payload cannot be parsed.

    Always recovered where it is raised; never reaches a client.
    """

    status_code = 500
