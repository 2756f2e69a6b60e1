"""Video endpoints."""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id, get_db, get_ingest_service, parse_video_id
from app.exceptions import IngestError, MissingUploadError
from app.schemas.video import VideoCreate, VideoResponse
from app.services.ingest_service import MediaIngestService, get_owned_video
from app.services.video_service import create_video, delete_video, get_videos

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(e: IngestError) -> HTTPException:
    if e.status_code >= 500:
        logger.error(f"Request failed: {e}", exc_info=True)
    else:
        logger.info(f"Request rejected ({e.status_code}): {e}")
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
def create_video_draft(
    video_in: VideoCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a video record with no media attached yet."""
    try:
        video = create_video(db, user_id=user_id, title=video_in.title, description=video_in.description)
    except IngestError as e:
        raise _http_error(e)
    logger.info(f"Created video {video.id} for user {user_id}")
    return VideoResponse.model_validate(video)


@router.get("", response_model=List[VideoResponse])
def list_videos(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the caller's videos, newest first."""
    return [VideoResponse.model_validate(v) for v in get_videos(db, user_id)]


@router.get("/{video_id}", response_model=VideoResponse)
def get_video_by_id(
    video_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get one of the caller's videos."""
    try:
        video = get_owned_video(db, parse_video_id(video_id), user_id)
    except IngestError as e:
        raise _http_error(e)
    return VideoResponse.model_validate(video)


@router.delete("/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_video_by_id(
    video_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a video record. Stored media objects are left in place."""
    try:
        video = get_owned_video(db, parse_video_id(video_id), user_id)
        delete_video(db, video.id)
    except IngestError as e:
        raise _http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{video_id}/thumbnail", response_model=VideoResponse)
async def upload_thumbnail(
    video_id: str,
    thumbnail: Optional[UploadFile] = File(None, description="JPEG or PNG image"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: MediaIngestService = Depends(get_ingest_service),
):
    """Upload a thumbnail for a video.

    - Checks the caller owns the video
    - Accepts image/jpeg and image/png only
    - Stores the image in the public assets directory
    - Points the video's thumbnail_url at it
    """
    try:
        vid = parse_video_id(video_id)
        if thumbnail is None:
            raise MissingUploadError("Missing multipart field 'thumbnail'")
        video = await service.attach_thumbnail(vid, user_id, thumbnail, thumbnail.content_type)
    except IngestError as e:
        raise _http_error(e)
    finally:
        if thumbnail is not None:
            await thumbnail.close()

    return VideoResponse.model_validate(video)


@router.post("/{video_id}/video", response_model=VideoResponse)
async def upload_video(
    video_id: str,
    video: Optional[UploadFile] = File(None, description="MP4 video"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    service: MediaIngestService = Depends(get_ingest_service),
):
    """Upload the video file for a video.

    - Checks the caller owns the video and that it already has a thumbnail
    - Accepts video/mp4 only, up to the configured ceiling
    - Stores the file in object storage
    - Points the video's video_url at it
    """
    try:
        vid = parse_video_id(video_id)
        if video is None:
            raise MissingUploadError("Missing multipart field 'video'")
        updated = await service.attach_video(vid, user_id, video, video.content_type)
    except IngestError as e:
        raise _http_error(e)
    finally:
        if video is not None:
            await video.close()

    return VideoResponse.model_validate(updated)
