"""Staging of upload bodies to temporary local files.

Uploads are copied chunk by chunk into a temporary file so that no payload
is ever held in memory whole, and so that the storage drivers get a
seekable source of known length. The file lives only as long as the
``stage_upload`` context: it is removed on every exit path, including
cancellation when the client goes away.
"""

import logging
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Protocol

import aiofiles
from starlette.requests import ClientDisconnect

from app.exceptions import PayloadTooLargeError, StagingError

logger = logging.getLogger(__name__)

STAGING_PREFIX = "tubely-upload-"


class AsyncReadable(Protocol):
    """Anything with an async ``read(size)``, e.g. starlette's UploadFile."""

    async def read(self, size: int = -1) -> bytes: ...


@dataclass
class StagedUpload:
    """Upload copied to a temporary file, rewound to offset 0."""

    path: Path
    file: Any  # aiofiles binary file handle
    media_type: str
    size_bytes: int


@asynccontextmanager
async def stage_upload(
    source: AsyncReadable,
    media_type: str,
    max_bytes: int,
    chunk_size: int = 1 << 20,
    staging_dir: Optional[str] = None,
) -> AsyncIterator[StagedUpload]:
    """Copy an upload to a temporary file and yield it.

    Args:
        source: Upload stream
        media_type: Validated media type, used for the file suffix
        max_bytes: Ceiling on the total copied size
        chunk_size: Bytes read per iteration
        staging_dir: Directory for the temporary file (system temp if None)

    Yields:
        StagedUpload positioned at offset 0

    Raises:
        PayloadTooLargeError: As soon as the copy exceeds max_bytes
        StagingError: If reading the source or writing the file fails
    """
    if staging_dir:
        Path(staging_dir).mkdir(parents=True, exist_ok=True)

    suffix = "." + media_type.split("/", 1)[1]
    try:
        fd, name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix=suffix, dir=staging_dir)
    except OSError as e:
        raise StagingError(f"Could not save upload to server: {e}") from e
    os.close(fd)
    path = Path(name)

    try:
        async with aiofiles.open(path, "w+b") as f:
            size = 0
            try:
                while True:
                    chunk = await source.read(chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > max_bytes:
                        raise PayloadTooLargeError(
                            f"Upload exceeds maximum size of {max_bytes} bytes"
                        )
                    await f.write(chunk)
                await f.flush()
                await f.seek(0)
            except (OSError, ClientDisconnect) as e:
                raise StagingError(f"Could not copy upload: {e}") from e

            logger.debug(f"Staged {size} bytes of {media_type} at {path}")
            yield StagedUpload(path=path, file=f, media_type=media_type, size_bytes=size)
    finally:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed staging file {path}")
