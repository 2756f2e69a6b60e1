"""API v1 router."""

from fastapi import APIRouter

from app.api.v1.endpoints import health, videos

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(videos.router, prefix="/videos", tags=["videos"])
