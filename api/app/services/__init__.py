"""Business logic services."""

from app.services.ingest_service import MediaIngestService, reconcile_locations
from app.services.media_types import AssetClass, validate_media_type
from app.services.storage_keys import generate_storage_key
from app.services.video_service import create_video, get_video, update_video

__all__ = [
    "MediaIngestService",
    "reconcile_locations",
    "AssetClass",
    "validate_media_type",
    "generate_storage_key",
    "create_video",
    "get_video",
    "update_video",
]
