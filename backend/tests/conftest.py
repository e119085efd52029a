"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- Event store and service
- Sample payload factories
- FastAPI test client
"""

import os
import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['CALENDAR_DB_URL'] = 'sqlite:///:memory:'
os.environ['CALENDAR_ENV'] = 'test'

from backend.src.models import Base, Event
from backend.src.schemas.event import EventPayload
from backend.src.services.event_service import EventService
from backend.src.services.event_store import SqlAlchemyEventStore


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def event_store(test_db_session):
    """Create a SqlAlchemyEventStore bound to the test session."""
    return SqlAlchemyEventStore(test_db_session)


@pytest.fixture
def event_service(event_store):
    """Create an EventService writing through the test store."""
    return EventService(store=event_store)


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_event_data():
    """Factory for creating sample event request bodies (camelCase JSON)."""
    def _create(
        title='Team Sync',
        start='2024-01-01T09:00:00',
        end='2024-01-01T10:00:00',
        **extra
    ):
        data = {
            'title': title,
            'start': start,
            'end': end,
        }
        data.update(extra)
        return data
    return _create


@pytest.fixture
def sample_payload():
    """Factory for creating validated EventPayload instances."""
    def _create(
        title='Team Sync',
        start=datetime(2024, 1, 1, 9, 0),
        end=datetime(2024, 1, 1, 10, 0),
        **extra
    ):
        return EventPayload(title=title, start=start, end=end, **extra)
    return _create


@pytest.fixture
def sample_event(test_db_session):
    """Factory for creating Event rows directly in the database."""
    def _create(
        title='Stored Event',
        start=datetime(2024, 3, 1, 14, 0),
        end=datetime(2024, 3, 1, 15, 0),
        **kwargs
    ):
        event = Event(title=title, start=start, end=end, **kwargs)
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)
        return event
    return _create


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_client(test_db_session):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.main import app
    from backend.src.db.database import get_db

    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
