"""Configuration module for the Quiz Service.

This module provides centralized configuration management, including directory
paths, API server settings, authentication, quiz defaults and caching.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import FrozenSet, List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (SQLite database lives here by default)
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / "data")))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/quiz_service.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "5000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "10"))

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# The administrator is identified by username
ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin123")

# --- Quiz Configuration ---

# Year levels a question or response may belong to
VALID_YEAR_LEVELS: FrozenSet[int] = frozenset({1, 2, 3})

# Setting key for the global quiz switch
QUIZ_ENABLED_KEY = "quiz_enabled"

# Value assumed when the quiz_enabled setting does not exist. Used by the
# gating check, the user status endpoint and the admin status endpoint alike.
QUIZ_ENABLED_DEFAULT: bool = os.getenv("QUIZ_ENABLED_DEFAULT", "false").lower() == "true"

# --- Timer Configuration ---

# Duration used when an admin starts a global timer without one
DEFAULT_GLOBAL_TIMER_SECONDS: int = int(os.getenv("DEFAULT_GLOBAL_TIMER_SECONDS", "3600"))

# Duration assumed for a persisted global timer record that has none stored
PERSISTED_GLOBAL_TIMER_SECONDS: int = int(
    os.getenv("PERSISTED_GLOBAL_TIMER_SECONDS", "3600")
)

# --- Question Delivery Configuration ---

QUESTION_CACHE_TTL_SECONDS: int = int(os.getenv("QUESTION_CACHE_TTL_SECONDS", "600"))
DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "10"))
MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))

# Path prefix of cached question listings
QUESTION_CACHE_PREFIX = "/api/quiz/"
