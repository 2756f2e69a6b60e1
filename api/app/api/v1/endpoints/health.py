"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_thumbnail_storage, get_video_storage
from app.storage.base import BaseStorageDriver

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/healthz")
async def healthz():
    """Simple health check for Kubernetes/Docker."""
    return {"status": "ok"}


@router.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    assets: BaseStorageDriver = Depends(get_thumbnail_storage),
    videos: BaseStorageDriver = Depends(get_video_storage),
):
    """Report database, assets directory and video storage reachability."""
    db_status = "disconnected"
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        db_status = f"error: {str(e)}"

    assets_status = "ok" if await assets.test_connection() else "unavailable"
    videos_status = "ok" if await videos.test_connection() else "unavailable"

    healthy = db_status == "connected" and assets_status == "ok" and videos_status == "ok"
    overall_status = "ok" if healthy else "degraded"

    return {
        "status": overall_status,
        "db": db_status,
        "assets": assets_status,
        "videos": videos_status,
    }
