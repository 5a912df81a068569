"""Shared fixtures: in-memory database, controllable clock and API client."""

import os
from datetime import datetime, timedelta

# Must be set before config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["QUIZ_ENABLED_DEFAULT"] = "false"

import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from config import ADMIN_USERNAME, QUIZ_ENABLED_KEY
from core.database import get_db
from core.dependencies import get_question_cache, get_timer_authority
from models.base import Base
from utils.question_manager import QuestionManager
from utils.response_cache import ResponseCache
from utils.setting_manager import SettingManager
from utils.timer_authority import GlobalTimerAuthority
from utils.user_manager import UserManager
from schemas.admin import QuestionCreate

ADMIN_PASSWORD = "admin-pass"
USER_PASSWORD = "secret123"


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 9, 0, tzinfo=pytz.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer_authority(clock):
    return GlobalTimerAuthority(clock=clock)


@pytest.fixture
def question_cache(clock):
    return ResponseCache(ttl_seconds=600, clock=clock)


@pytest.fixture
def users(db):
    """Admin plus two quiz takers; returns username -> user_id."""
    manager = UserManager(db)
    created = {
        ADMIN_USERNAME: manager.create_user(ADMIN_USERNAME, ADMIN_PASSWORD),
        "alice": manager.create_user("alice", USER_PASSWORD),
        "bob": manager.create_user("bob", USER_PASSWORD),
    }
    return {name: user.user_id for name, user in created.items()}


@pytest.fixture
def questions(db):
    """Three year-1 questions and one year-2 question."""
    manager = QuestionManager(db)
    return manager.add_questions(
        [
            QuestionCreate(
                year_level=1,
                question="2 + 2?",
                options=["3", "4", "5"],
                correct_answer="4",
            ),
            QuestionCreate(
                year_level=1,
                question="Capital of France?",
                options=["Paris", "Rome"],
                correct_answer="Paris",
            ),
            QuestionCreate(
                year_level=1,
                question="6 * 7?",
                correct_answer="42",
                question_type="numerical",
            ),
            QuestionCreate(
                year_level=2,
                question="FIFO structure?",
                options=["Stack", "Queue"],
                correct_answer="Queue",
            ),
        ]
    )


@pytest.fixture
def enable_quiz(db):
    def _set(enabled: bool = True) -> None:
        SettingManager(db).set_value(QUIZ_ENABLED_KEY, enabled)

    return _set


@pytest.fixture
def client(session_factory, timer_authority, question_cache):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_timer_authority] = lambda: timer_authority
    app.dependency_overrides[get_question_cache] = lambda: question_cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client, users):
    """Log a user in and return request headers carrying the token."""

    def _login(username: str) -> dict:
        password = ADMIN_PASSWORD if username == ADMIN_USERNAME else USER_PASSWORD
        response = client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
