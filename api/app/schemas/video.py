"""Video schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VideoBase(BaseModel):
    """Base video schema."""

    title: str = Field(..., description="Video title", min_length=1, max_length=255)
    description: str = Field(default="", description="Video description")


class VideoCreate(VideoBase):
    """Schema for creating a video draft.

    The owner comes from the bearer token, not from the body.
    """

    pass


class VideoResponse(VideoBase):
    """Schema for video response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
