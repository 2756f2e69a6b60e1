"""Content-type validation for uploaded media."""

import io
import re
from enum import Enum
from typing import Dict, FrozenSet, Optional

from PIL import Image, UnidentifiedImageError

from app.exceptions import UnsupportedMediaTypeError


class AssetClass(str, Enum):
    """Kind of media attached to a video record."""

    VIDEO = "video"
    THUMBNAIL = "thumbnail"


ALLOWED_MEDIA_TYPES: Dict[AssetClass, FrozenSet[str]] = {
    AssetClass.VIDEO: frozenset({"video/mp4"}),
    AssetClass.THUMBNAIL: frozenset({"image/jpeg", "image/png"}),
}

# RFC 7231 token characters on both sides of the slash
_MEDIA_TYPE_RE = re.compile(r"^[a-z0-9!#$&^_.+-]+/[a-z0-9!#$&^_.+-]+$")

# Pillow format name -> media type
_PIL_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg"}

SNIFF_BYTES = 64 * 1024


def parse_media_type(content_type: Optional[str]) -> str:
    """Normalize a Content-Type header value to its bare media type.

    Args:
        content_type: Raw header value, e.g. "image/PNG; charset=binary"

    Returns:
        Lowercased type/subtype without parameters

    Raises:
        UnsupportedMediaTypeError: If the value is missing or malformed

    Examples:
        >>> parse_media_type("Image/PNG; q=1")
        'image/png'
    """
    if not content_type:
        raise UnsupportedMediaTypeError("Missing Content-Type")

    media_type = content_type.split(";", 1)[0].strip().lower()
    if not _MEDIA_TYPE_RE.match(media_type):
        raise UnsupportedMediaTypeError(f"Invalid Content-Type: {content_type!r}")
    return media_type


def validate_media_type(content_type: Optional[str], asset_class: AssetClass) -> str:
    """Accept or reject a declared content type for an asset class.

    Only the declared header is trusted here; the bytes are not inspected.

    Args:
        content_type: Raw Content-Type of the multipart field
        asset_class: VIDEO or THUMBNAIL

    Returns:
        The normalized media type

    Raises:
        UnsupportedMediaTypeError: If the type is not on the allow-list

    Examples:
        >>> validate_media_type("video/mp4", AssetClass.VIDEO)
        'video/mp4'
        >>> validate_media_type("image/gif", AssetClass.THUMBNAIL)
        Traceback (most recent call last):
        UnsupportedMediaTypeError: ...
    """
    media_type = parse_media_type(content_type)
    allowed = ALLOWED_MEDIA_TYPES[asset_class]
    if media_type not in allowed:
        raise UnsupportedMediaTypeError(
            f"Invalid file type for {asset_class.value}: {media_type} "
            f"(allowed: {', '.join(sorted(allowed))})"
        )
    return media_type


def sniff_image_type(head: bytes) -> Optional[str]:
    """Identify an image from its leading bytes with Pillow.

    Args:
        head: First bytes of the file (SNIFF_BYTES is enough for PNG/JPEG)

    Returns:
        Media type Pillow detected, or None if unrecognized
    """
    try:
        with Image.open(io.BytesIO(head)) as img:
            return _PIL_FORMATS.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None
