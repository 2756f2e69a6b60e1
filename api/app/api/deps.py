"""API dependencies."""

import uuid
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.config import IngestConfig, settings
from app.database import get_db
from app.exceptions import AuthError, InvalidIdentifierError
from app.security import get_bearer_token, validate_access_token
from app.services.ingest_service import MediaIngestService
from app.storage import factory
from app.storage.base import BaseStorageDriver

__all__ = [
    "get_db",
    "get_ingest_config",
    "get_thumbnail_storage",
    "get_video_storage",
    "get_current_user_id",
    "get_ingest_service",
    "parse_video_id",
]


@lru_cache
def get_ingest_config() -> IngestConfig:
    """Get the ingestion configuration, built once per process."""
    return settings.ingest_config()


def get_thumbnail_storage(
    config: IngestConfig = Depends(get_ingest_config),
) -> BaseStorageDriver:
    """Get thumbnail storage driver."""
    return factory.get_thumbnail_storage(config)


def get_video_storage(
    config: IngestConfig = Depends(get_ingest_config),
) -> BaseStorageDriver:
    """Get video storage driver."""
    return factory.get_video_storage(config)


def get_current_user_id(authorization: str = Header(None)) -> uuid.UUID:
    """Get the authenticated user ID from the bearer token."""
    try:
        token = get_bearer_token(authorization)
        return validate_access_token(token, settings.jwt_secret, settings.jwt_issuer)
    except AuthError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_ingest_service(
    db: Session = Depends(get_db),
    config: IngestConfig = Depends(get_ingest_config),
    thumbnail_storage: BaseStorageDriver = Depends(get_thumbnail_storage),
    video_storage: BaseStorageDriver = Depends(get_video_storage),
) -> MediaIngestService:
    """Get the ingestion pipeline for this request."""
    return MediaIngestService(db, config, thumbnail_storage, video_storage)


def parse_video_id(video_id: str) -> uuid.UUID:
    """Parse a path video ID.

    Raises:
        InvalidIdentifierError: If video_id is not a UUID
    """
    try:
        return uuid.UUID(video_id)
    except ValueError:
        raise InvalidIdentifierError("Invalid ID")
