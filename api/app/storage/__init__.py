"""Storage drivers for uploaded media."""

from app.storage.base import BaseStorageDriver, StorageError
from app.storage.factory import get_thumbnail_storage, get_video_storage

__all__ = ["BaseStorageDriver", "StorageError", "get_thumbnail_storage", "get_video_storage"]
