"""
Shared fixtures for FactLens tests
"""

import os

# Required configuration must exist before the app modules are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GOOGLE_FACT_CHECK_API_KEY", "test-google-key")
os.environ.setdefault("GNEWS_API_KEY", "test-gnews-key")
os.environ.setdefault("CLAIMBUSTER_API_KEY", "test-claimbuster-key")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.image_resolver import PublisherImages
from database import Base, get_db
from helpers import PUBLISHER_IMAGES, FakeClock
from main import app


@pytest.fixture
def publisher_images() -> PublisherImages:
    return PublisherImages(PUBLISHER_IMAGES)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db_session():
    """Isolated in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def api_client(db_session):
    """TestClient with the database swapped out; lifespan is not run."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.services = MagicMock()
    client = TestClient(app, raise_server_exceptions=False)
    try:
        yield client
    finally:
        app.dependency_overrides.clear()
        del app.state.services
