"""S3-compatible storage driver (AWS S3, Cloudflare R2, MinIO, etc)."""

import logging
from typing import Any, Dict

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from app.storage.base import BaseStorageDriver, StorageError

logger = logging.getLogger(__name__)


class S3StorageDriver(BaseStorageDriver):
    """S3-compatible storage driver.

    Supports:
    - AWS S3
    - Cloudflare R2
    - MinIO
    - Any S3-compatible API

    Configuration:
        bucket_name: Bucket name
        region: AWS region (default: us-east-1)
        aws_access_key_id: Access key (default credential chain if absent)
        aws_secret_access_key: Secret key
        endpoint_url: Custom endpoint URL (for R2, MinIO, etc)
        public_base_url: Base URL objects are served from, overrides the default
        base_path: Prefix path within bucket (optional)

    Example:
        >>> driver = S3StorageDriver({"bucket_name": "tubely-videos", "region": "us-east-2"})
        >>> driver.public_url("abc.mp4")
        'https://tubely-videos.s3.us-east-2.amazonaws.com/abc.mp4'
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.bucket_name = config["bucket_name"]
        self.region = config.get("region") or "us-east-1"
        self.base_path = (config.get("base_path") or "").strip("/")
        self.endpoint_url = config.get("endpoint_url")
        self.public_base_url = config.get("public_base_url")

        # S3 client configuration
        self.s3_config: Dict[str, Any] = {"region_name": self.region}
        if config.get("aws_access_key_id"):
            self.s3_config["aws_access_key_id"] = config["aws_access_key_id"]
            self.s3_config["aws_secret_access_key"] = config.get("aws_secret_access_key")

        # Support custom endpoint (Cloudflare R2, MinIO, etc)
        if self.endpoint_url:
            self.s3_config["endpoint_url"] = self.endpoint_url

        self.session = aioboto3.Session()

    def _get_full_key(self, key: str) -> str:
        """Get full S3 key with base_path prefix.

        Args:
            key: Relative key

        Returns:
            Full S3 key
        """
        if self.base_path:
            return f"{self.base_path}/{key}".strip("/")
        return key.strip("/")

    def public_url(self, key: str) -> str:
        full_key = self._get_full_key(key)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{full_key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{full_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{full_key}"

    async def upload_fileobj(self, key: str, fileobj: Any, content_type: str) -> str:
        """Upload a file to S3.

        Large files go up as a multipart upload; aioboto3 handles the
        split and accepts both sync and async file objects.

        Args:
            key: Object key (base_path is prepended)
            fileobj: Source file positioned at its start
            content_type: Content-Type stored on the object

        Returns:
            Public URL of the object
        """
        full_key = self._get_full_key(key)

        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.upload_fileobj(
                    fileobj,
                    self.bucket_name,
                    full_key,
                    ExtraArgs={"ContentType": content_type},
                )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload {full_key} to S3: {e}") from e

        logger.info(f"Uploaded {content_type} object to s3://{self.bucket_name}/{full_key}")
        return self.public_url(key)

    async def test_connection(self) -> bool:
        """Test S3 connection by checking if bucket exists.

        Returns:
            True if bucket is accessible
        """
        try:
            async with self.session.client("s3", **self.s3_config) as s3:
                await s3.head_bucket(Bucket=self.bucket_name)
            return True

        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            logger.warning(f"S3 bucket {self.bucket_name} not reachable ({error_code}): {e}")
            return False

        except BotoCoreError as e:
            logger.warning(f"S3 connection failed: {e}")
            return False
