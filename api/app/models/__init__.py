"""SQLAlchemy models."""

from app.database import Base
from app.models.video import Video

__all__ = [
    "Base",
    "Video",
]
