import os
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure tests never touch a real database or the inference API
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("HUGGING_FACE_API_KEY", None)

from symptom_intake.app import app
from symptom_intake.auth.jwt import create_access_token, hash_password
from symptom_intake.db.session import Base, get_db
from symptom_intake.models.user import User
from symptom_intake.utils.rate_limit import limiter


# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def create_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture(autouse=True)
def reset_rate_limiter(monkeypatch):
    monkeypatch.delenv("HUGGING_FACE_API_KEY", raising=False)
    limiter.reset()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_user(email=None, password="secret123"):
    db = TestingSessionLocal()
    try:
        user = User(
            id=str(uuid.uuid4()),
            email=email or f"{uuid.uuid4().hex[:10]}@example.com",
            hashed_password=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    finally:
        db.close()


def headers_for(user_id: str):
    token = create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def auth_headers(user):
    return headers_for(user.id)
