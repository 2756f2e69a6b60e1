"""Video metadata store."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import MetadataStoreError, MissingThumbnailError, VideoNotFoundError
from app.models.video import Video

logger = logging.getLogger(__name__)


def get_video(db: Session, video_id: uuid.UUID) -> Optional[Video]:
    """Get video by ID.

    Args:
        db: Database session
        video_id: Video ID

    Returns:
        Video if found, None otherwise
    """
    return db.get(Video, video_id, populate_existing=True)


def get_videos(db: Session, user_id: uuid.UUID) -> List[Video]:
    """List a user's videos, newest first.

    Args:
        db: Database session
        user_id: Owner ID

    Returns:
        List of Video
    """
    return (
        db.query(Video)
        .filter(Video.user_id == user_id)
        .order_by(Video.created_at.desc())
        .all()
    )


def create_video(db: Session, user_id: uuid.UUID, title: str, description: str = "") -> Video:
    """Create a video draft with no media attached.

    Args:
        db: Database session
        user_id: Owner ID
        title: Video title
        description: Video description

    Returns:
        Created Video

    Raises:
        MetadataStoreError: If the insert fails
    """
    video = Video(user_id=user_id, title=title, description=description)
    try:
        db.add(video)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise MetadataStoreError(f"Could not create video: {e}") from e
    db.refresh(video)
    return video


def update_video(db: Session, video: Video) -> Video:
    """Write every mutable field of a video back in one statement.

    The thumbnail location must be set: the store refuses to persist a
    record without one, whatever the caller checked beforehand.

    Args:
        db: Database session
        video: Working copy of the record (detached or attached)

    Returns:
        The freshly loaded Video

    Raises:
        MissingThumbnailError: If video.thumbnail_url is None
        VideoNotFoundError: If no row matches video.id
        MetadataStoreError: If the update fails

    Examples:
        >>> video.thumbnail_url = "/assets/abc.png"
        >>> update_video(db, video).thumbnail_url
        '/assets/abc.png'
    """
    if video.thumbnail_url is None:
        raise MissingThumbnailError("thumbnail URL is required")

    stmt = (
        update(Video)
        .where(Video.id == video.id)
        .values(
            title=video.title,
            description=video.description,
            thumbnail_url=video.thumbnail_url,
            video_url=video.video_url,
            user_id=video.user_id,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )

    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise MetadataStoreError(f"Could not update video {video.id}: {e}") from e

    if result.rowcount == 0:
        raise VideoNotFoundError(f"Video {video.id} not found")

    stored = db.get(Video, video.id, populate_existing=True)
    logger.debug(f"Updated video {video.id}")
    return stored


def delete_video(db: Session, video_id: uuid.UUID) -> bool:
    """Delete video by ID.

    Args:
        db: Database session
        video_id: Video ID

    Returns:
        True if deleted, False if not found
    """
    video = db.get(Video, video_id)
    if not video:
        return False

    try:
        db.delete(video)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise MetadataStoreError(f"Could not delete video {video_id}: {e}") from e
    return True
