"""Storage key generation."""

import base64
import secrets

from app.exceptions import KeyGenerationError

KEY_ENTROPY_BYTES = 32


def file_extension(media_type: str) -> str:
    """Return the subtype of a media type as a file extension.

    Examples:
        >>> file_extension("image/png")
        'png'
    """
    return media_type.split("/", 1)[1]


def generate_storage_key(media_type: str) -> str:
    """Generate a random, URL-safe storage key for an accepted upload.

    Args:
        media_type: Validated media type

    Returns:
        "<43 url-safe base64 chars>.<subtype>"

    Raises:
        KeyGenerationError: If the OS entropy source fails
    """
    try:
        random_bytes = secrets.token_bytes(KEY_ENTROPY_BYTES)
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(f"Could not generate storage key: {e}") from e

    name = base64.urlsafe_b64encode(random_bytes).rstrip(b"=").decode("ascii")
    return f"{name}.{file_extension(media_type)}"
