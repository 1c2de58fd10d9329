import os
# Override settings before any app imports so the app binds to a throwaway SQLite file
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["DEPLOYMENT_ENV"] = "test"
# Lowest bcrypt cost keeps the suite fast; production uses the configured default.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("DATABASE_PUBLIC_URL", None)

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from quizportal.platform.config import settings
from quizportal.platform.database import Base, get_db
from quizportal.main import app
from quizportal.platform.middleware import _rate_limit_store
from quizportal.models.user import User

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    # Clear in-memory rate limit state between tests to prevent 429 bleed-through
    _rate_limit_store.clear()
    with TestClient(app, follow_redirects=False) as c:
        yield c
    app.dependency_overrides.clear()
    _rate_limit_store.clear()


# ---------------------------------------------------------------------------
# Factory helpers: create test entities quickly and consistently
# ---------------------------------------------------------------------------

_counter = 0


def _unique_id() -> str:
    global _counter
    _counter += 1
    return f"{_counter}-{uuid.uuid4().hex[:8]}"


def register_user(client, user_id=None, email=None, password="TestPass123!", name="Test User"):
    """Register a user via the JSON API. Returns the response."""
    user_id = user_id or f"user-{_unique_id()}"
    email = email or f"{user_id}@test.com"
    return client.post(
        "/register",
        json={"id": user_id, "name": name, "email": email, "password": password},
    )


def login_user(client, user_id, password="TestPass123!"):
    """Log in via the JSON API. The client keeps the session cookie."""
    return client.post("/login", json={"id": user_id, "password": password})


def signed_in_user(client, user_id=None, password="TestPass123!", name="Test User"):
    """Register and log in a user; returns the external id."""
    user_id = user_id or f"user-{_unique_id()}"
    reg = register_user(client, user_id=user_id, password=password, name=name)
    assert reg.status_code == 302, f"Registration failed: {reg.text}"
    resp = login_user(client, user_id, password)
    assert resp.status_code == 302, f"Login failed: {resp.text}"
    return user_id


def session_cookie(client):
    return client.cookies.get(settings.SESSION_COOKIE_NAME)


def submit_assessment(client, subject="ml", answers=None, correct=None):
    """Submit one quiz attempt. Defaults to a two-question quiz with one right answer."""
    correct = correct if correct is not None else ["A", "B"]
    answers = answers if answers is not None else ["A", "C"]
    payload = {
        "subject": subject,
        "answers": answers,
        "questions": [{"question": f"Q{i + 1}", "correctAnswer": key} for i, key in enumerate(correct)],
    }
    return client.post("/api/assessment", json=payload)


def get_user_from_db(external_id: str):
    db = TestingSessionLocal()
    try:
        return db.query(User).filter(User.external_id == external_id).first()
    finally:
        db.close()
