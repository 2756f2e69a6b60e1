"""Media ingestion pipeline.

Each upload runs through the same stages, strictly in order:

    validate content type -> generate key -> stage -> store -> reconcile

Any stage raises an ``IngestError`` subclass and aborts the request. The
staged temporary file is removed whatever happens, and the metadata
record is only written after the durable store has accepted the bytes.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from app.config import IngestConfig
from app.exceptions import (
    ClientInputError,
    IngestError,
    OwnershipError,
    UnsupportedMediaTypeError,
    VideoNotFoundError,
)
from app.models.video import Video
from app.services.media_types import (
    SNIFF_BYTES,
    AssetClass,
    sniff_image_type,
    validate_media_type,
)
from app.services.staging import AsyncReadable, StagedUpload, stage_upload
from app.services.storage_keys import generate_storage_key
from app.services.video_service import get_video, update_video
from app.storage.base import BaseStorageDriver

logger = logging.getLogger(__name__)


def get_owned_video(db: Session, video_id: uuid.UUID, user_id: uuid.UUID) -> Video:
    """Fetch a video and check that user_id owns it.

    Raises:
        VideoNotFoundError: If the video does not exist
        OwnershipError: If the video belongs to someone else
    """
    video = get_video(db, video_id)
    if video is None:
        raise VideoNotFoundError(f"Video {video_id} not found")
    if video.user_id != user_id:
        raise OwnershipError("Incorrect user")
    return video


def reconcile_locations(
    db: Session,
    video_id: uuid.UUID,
    user_id: uuid.UUID,
    thumbnail_url: Optional[str] = None,
    video_url: Optional[str] = None,
) -> Video:
    """Record freshly stored locations on a video.

    The record is re-read here rather than reused from the start of the
    request, then written back whole by ``update_video``. Concurrent
    writers to the same record are last-writer-wins.

    Args:
        db: Database session
        video_id: Video to update
        user_id: Authenticated user
        thumbnail_url: New thumbnail location, if any
        video_url: New video location, if any

    Returns:
        The updated Video

    Raises:
        VideoNotFoundError: If the video is gone
        OwnershipError: If user_id does not own it
        MissingThumbnailError: If the result would have no thumbnail
        MetadataStoreError: If the write fails
    """
    video = get_owned_video(db, video_id, user_id)

    # Work on a detached copy so nothing is flushed before update_video
    db.expunge(video)
    if thumbnail_url is not None:
        video.thumbnail_url = thumbnail_url
    if video_url is not None:
        video.video_url = video_url

    return update_video(db, video)


class MediaIngestService:
    """Runs thumbnail and video uploads through the ingestion pipeline."""

    def __init__(
        self,
        db: Session,
        config: IngestConfig,
        thumbnail_storage: BaseStorageDriver,
        video_storage: BaseStorageDriver,
    ):
        self.db = db
        self.config = config
        self.thumbnail_storage = thumbnail_storage
        self.video_storage = video_storage

    async def attach_thumbnail(
        self,
        video_id: uuid.UUID,
        user_id: uuid.UUID,
        upload: AsyncReadable,
        content_type: Optional[str],
    ) -> Video:
        """Store a thumbnail image and point the video at it."""
        logger.info(f"Uploading thumbnail for video {video_id} by user {user_id}")
        get_owned_video(self.db, video_id, user_id)

        media_type = validate_media_type(content_type, AssetClass.THUMBNAIL)
        key = generate_storage_key(media_type)

        async with stage_upload(
            upload,
            media_type,
            max_bytes=self.config.max_thumbnail_bytes,
            chunk_size=self.config.stage_chunk_bytes,
            staging_dir=self.config.staging_dir,
        ) as staged:
            if self.config.sniff_thumbnail_content:
                await self._check_image_content(staged)
            location = await self.thumbnail_storage.upload_fileobj(key, staged.file, media_type)

        return self._reconcile(video_id, user_id, key, thumbnail_url=location)

    async def attach_video(
        self,
        video_id: uuid.UUID,
        user_id: uuid.UUID,
        upload: AsyncReadable,
        content_type: Optional[str],
    ) -> Video:
        """Store a video file and point the video record at it."""
        logger.info(f"Uploading video file for video {video_id} by user {user_id}")
        video = get_owned_video(self.db, video_id, user_id)
        if video.thumbnail_url is None:
            # The store would refuse the final write; fail before uploading anything
            raise ClientInputError("Upload a thumbnail before uploading the video")

        media_type = validate_media_type(content_type, AssetClass.VIDEO)
        key = generate_storage_key(media_type)

        async with stage_upload(
            upload,
            media_type,
            max_bytes=self.config.max_video_bytes,
            chunk_size=self.config.stage_chunk_bytes,
            staging_dir=self.config.staging_dir,
        ) as staged:
            logger.info(f"Staged {staged.size_bytes} bytes for video {video_id}")
            location = await self.video_storage.upload_fileobj(key, staged.file, media_type)

        return self._reconcile(video_id, user_id, key, video_url=location)

    async def _check_image_content(self, staged: StagedUpload) -> None:
        head = await staged.file.read(SNIFF_BYTES)
        await staged.file.seek(0)
        detected = sniff_image_type(head)
        if detected != staged.media_type:
            raise UnsupportedMediaTypeError(
                f"File content does not match declared type {staged.media_type}"
            )

    def _reconcile(self, video_id: uuid.UUID, user_id: uuid.UUID, key: str, **locations: str) -> Video:
        try:
            return reconcile_locations(self.db, video_id, user_id, **locations)
        except IngestError:
            logger.error(
                f"Metadata update failed for video {video_id}; stored object {key} is orphaned",
                exc_info=True,
            )
            raise
