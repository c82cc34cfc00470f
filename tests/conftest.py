import itertools
import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.database import get_db
from models.base import Base

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register and log in a user; returns the user dict and auth headers."""

    def _register(role: str, name: str = None, password: str = "secret123") -> dict:
        n = next(_counter)
        name = name or f"{role.capitalize()} {n}"
        email = f"{role}{n}@example.com"
        resp = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()

        login = client.post("/api/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.text
        # Tests authenticate explicitly with headers, not the login cookie
        client.cookies.clear()
        return {
            "user": body["user"],
            "message": body["message"],
            "email": email,
            "headers": {"Authorization": f"Bearer {login.json()['token']}"},
        }

    return _register


@pytest.fixture
def teacher(register):
    return register("teacher")


@pytest.fixture
def student(register):
    return register("student")


@pytest.fixture
def parent(register):
    return register("parent")


@pytest.fixture
def make_class(client):
    def _make_class(owner: dict, name: str = "Algebra", grade: str = "Grade 8") -> dict:
        resp = client.post(
            "/api/classes",
            json={"name": name, "grade": grade},
            headers=owner["headers"],
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["class"]

    return _make_class
