"""Video model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid

from app.database import Base


class Video(Base):
    """Asset record for one uploaded video and its thumbnail."""

    __tablename__ = "videos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    thumbnail_url = Column(String(1000), nullable=True)
    video_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title}, user_id={self.user_id})>"
