"""
Central pytest configuration for the Kiliniks backend tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import os
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Test database configuration (set early so lazily-built engines use it)
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["EVENT_PUBLISHER"] = "console"
os.environ.pop("DB_SECRET_ARN", None)

from kiliniks.db import base as _models  # noqa: E402,F401
from kiliniks.db.session import Base, create_tables, drop_tables, reset_engine  # noqa: E402
from kiliniks.domain.interfaces import IEventPublisher  # noqa: E402
from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)

# =====================================================
# DATABASE FIXTURES
# =====================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Provide an isolated database session for repository tests."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =====================================================
# FLASK APPLICATION FIXTURES
# =====================================================


@pytest.fixture
def event_publisher():
    """Publisher double recording every published event."""
    return Mock(spec=IEventPublisher)


@pytest.fixture
def app(event_publisher):
    """Create a Flask application bound to a fresh in-memory database."""
    from kiliniks.main import create_app

    reset_engine()
    create_tables()

    app = create_app(event_publisher=event_publisher)
    app.config.update({"TESTING": True})

    yield app

    drop_tables()
    reset_engine()


@pytest.fixture
def client(app):
    """Create a test client for the Flask application."""
    return app.test_client()
