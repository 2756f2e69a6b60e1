"""Pytest configuration and fixtures."""

import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_ingest_config
from app.config import IngestConfig, settings
from app.database import Base, get_db
from app.main import app
from app.security import create_access_token
from app.services.video_service import create_video


@pytest.fixture
def test_engine():
    """Create test database engine."""
    # Use in-memory SQLite for tests
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_db(test_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def ingest_config(tmp_path):
    """Small ceilings and a local video backend under tmp_path."""
    return IngestConfig(
        assets_root=str(tmp_path / "assets"),
        staging_dir=str(tmp_path / "staging"),
        video_storage_provider="local",
        max_thumbnail_bytes=32 * 1024,
        max_video_bytes=64 * 1024,
        stage_chunk_bytes=4096,
    )


@pytest.fixture
def client_with_db(test_db, ingest_config):
    """Create a test client with database and config overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ingest_config] = lambda: ingest_config
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner_id():
    return uuid.uuid4()


def make_auth_headers(user_id: uuid.UUID) -> dict:
    token = create_access_token(
        user_id, settings.jwt_secret, settings.jwt_issuer, timedelta(hours=1)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(owner_id):
    """Bearer headers for the video owner."""
    return make_auth_headers(owner_id)


@pytest.fixture
def video_id(test_db, owner_id):
    """ID of a fresh video draft owned by owner_id."""
    return create_video(test_db, user_id=owner_id, title="Boots", description="A video about boots").id
