"""
Integration test fixtures. Overrides get_db for API tests with in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture
def override_get_db():
    """Create in-memory engine and session factory for API tests."""
    from cybersafe.config import Base
    import cybersafe.models  # noqa: F401
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from cybersafe.api import app
    from cybersafe.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


REGISTRATION = {
    "username": "trainee",
    "password": "s3cret-pass",
    "fullname": "Test Trainee",
    "gender": "other",
    "email": "trainee@example.com",
}


@pytest.fixture
def registration():
    return dict(REGISTRATION)


@pytest.fixture
def auth_client(api_client, registration):
    """API client holding the session cookie of a freshly registered user."""
    response = api_client.post("/api/register", json=registration)
    assert response.status_code == 201
    return api_client
