"""
Pytest configuration and shared fixtures for the test suite.
Points the app at an in-memory database before anything imports the config.
"""
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NO_COLOR", "1")

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """Create an in-memory SQLite engine shared across threads."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session with the full schema."""
    from cybersafe.config import Base
    import cybersafe.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def test_user(db_session):
    """A registered user with no progress rows yet."""
    from cybersafe.models.models import User
    user = User(
        username="alice",
        hashed_password="not-a-real-hash",
        fullname="Alice Example",
        gender="female",
        email="alice@example.com",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user
