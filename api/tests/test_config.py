"""Tests for settings."""

from app.config import Settings


def test_database_url_uses_psycopg2_driver():
    settings = Settings(
        postgres_user="tubely",
        postgres_password="secret",
        postgres_host="db",
        postgres_port=5432,
        postgres_db="tubely",
    )
    assert settings.database_url == "postgresql+psycopg2://tubely:secret@db:5432/tubely"


def test_ingest_config_snapshot():
    settings = Settings(max_thumbnail_bytes=1234, max_video_bytes=5678)
    config = settings.ingest_config()
    assert config.max_thumbnail_bytes == 1234
    assert config.max_video_bytes == 5678
