"""Local filesystem storage driver."""

import logging
import os
from pathlib import Path
from typing import Any, Dict

import aiofiles

from app.storage.base import BaseStorageDriver, StorageError, read_chunk

logger = logging.getLogger(__name__)

COPY_CHUNK_BYTES = 1 << 20


class LocalStorageDriver(BaseStorageDriver):
    """Local filesystem storage driver.

    Configuration:
        base_path: Directory the objects are written under
        public_prefix: URL path the directory is served at (default: /assets)

    Example:
        >>> driver = LocalStorageDriver({"base_path": "./assets"})
        >>> await driver.upload_fileobj("abc.png", staged.file, "image/png")
        '/assets/abc.png'
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.base_path = Path(config["base_path"]).resolve()
        self.public_prefix = config.get("public_prefix", "/assets").rstrip("/")

    def _validate_path(self, file_path: str) -> Path:
        """Validate path is within base_path (prevent directory traversal).

        Args:
            file_path: Relative file path

        Returns:
            Absolute Path object

        Raises:
            StorageError: If path tries to escape base_path
        """
        full_path = (self.base_path / file_path).resolve()

        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise StorageError(
                f"Path {file_path} attempts to escape base directory"
            )

        return full_path

    def public_url(self, key: str) -> str:
        return f"{self.public_prefix}/{key.lstrip('/')}"

    async def upload_fileobj(self, key: str, fileobj: Any, content_type: str) -> str:
        """Copy a file into the storage directory.

        The content type is implied by the key's extension on disk. A
        partially written file is removed before the error is raised.

        Args:
            key: Destination path relative to base_path
            fileobj: Source file positioned at its start
            content_type: Media type (not persisted by this driver)

        Returns:
            Public path of the stored file
        """
        full_path = self._validate_path(key)

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(full_path, "wb") as f:
                while True:
                    chunk = await read_chunk(fileobj, COPY_CHUNK_BYTES)
                    if not chunk:
                        break
                    await f.write(chunk)
        except OSError as e:
            full_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {key}: {e}") from e

        logger.info(f"Stored {content_type} object at {full_path}")
        return self.public_url(key)

    async def test_connection(self) -> bool:
        """Test if base path exists and is writable.

        Returns:
            True if base_path exists and is writable
        """
        try:
            return self.base_path.is_dir() and os.access(self.base_path, os.W_OK)
        except OSError:
            return False
