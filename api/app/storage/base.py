"""Base storage driver interface."""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Dict

from app.exceptions import UpstreamError


class BaseStorageDriver(ABC):
    """Base class for storage drivers.

    All storage drivers must implement this interface to provide
    unified access to the durable backends (local directory tree, S3).
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize storage driver with configuration.

        Args:
            config: Storage configuration dict with provider-specific settings
        """
        self.config = config

    @abstractmethod
    async def upload_fileobj(self, key: str, fileobj: Any, content_type: str) -> str:
        """Stream a seekable file to the backend under key.

        Args:
            key: Storage key (relative to the driver's root or prefix)
            fileobj: Open binary file positioned at its start, sync or async
            content_type: Media type to tag the object with

        Returns:
            Public location of the stored object (path or URL)

        Raises:
            StorageError: If the transfer fails
        """
        pass

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Render the externally resolvable location for a key."""
        pass

    @abstractmethod
    async def test_connection(self) -> bool:
        """Test if storage is accessible.

        Returns:
            True if connection successful, False otherwise
        """
        pass


async def read_chunk(fileobj: Any, size: int) -> bytes:
    """Read from either an aiofiles handle or a plain file object."""
    data = fileobj.read(size)
    if inspect.isawaitable(data):
        data = await data
    return data


class StorageError(UpstreamError):
    """Base exception for storage operations."""

    pass
