"""Storage driver factory."""

from typing import Any, Dict, Optional

from app.config import IngestConfig
from app.storage.base import BaseStorageDriver, StorageError
from app.storage.local_driver import LocalStorageDriver
from app.storage.s3_driver import S3StorageDriver


def get_thumbnail_storage(config: IngestConfig) -> BaseStorageDriver:
    """Get the driver thumbnails are stored with.

    Thumbnails always live in the local assets directory, which the app
    serves publicly.

    Args:
        config: Ingestion configuration

    Returns:
        LocalStorageDriver rooted at config.assets_root
    """
    return LocalStorageDriver(
        {"base_path": config.assets_root, "public_prefix": config.assets_url_path}
    )


def get_video_storage(config: IngestConfig) -> BaseStorageDriver:
    """Get the driver videos are stored with.

    Args:
        config: Ingestion configuration

    Returns:
        S3StorageDriver, or LocalStorageDriver when the provider is "local"

    Raises:
        StorageError: If the provider is not supported
    """
    credentials = None
    if config.aws_access_key_id:
        credentials = {
            "aws_access_key_id": config.aws_access_key_id,
            "aws_secret_access_key": config.aws_secret_access_key,
        }

    if config.video_storage_provider == "s3":
        return get_storage_driver_from_config(
            provider="s3",
            base_path=config.s3_prefix,
            credentials=credentials,
            bucket_name=config.s3_bucket,
            region=config.s3_region,
            endpoint_url=config.s3_endpoint_url,
            public_base_url=config.s3_public_base_url,
        )
    return get_storage_driver_from_config(
        provider=config.video_storage_provider,
        base_path=config.assets_root,
        public_prefix=config.assets_url_path,
    )


def get_storage_driver_from_config(
    provider: str, base_path: str, credentials: Optional[dict] = None, **options: Any
) -> BaseStorageDriver:
    """Get storage driver from explicit configuration.

    Args:
        provider: Storage provider (local, s3)
        base_path: Base path for storage (directory, or key prefix for S3)
        credentials: Optional credentials dict
        **options: Provider-specific settings (bucket_name, region, ...)

    Returns:
        Configured storage driver instance

    Example:
        >>> driver = get_storage_driver_from_config(
        ...     provider="local",
        ...     base_path="/tmp/assets"
        ... )
    """
    driver_config: Dict[str, Any] = {"base_path": base_path}
    driver_config.update({k: v for k, v in options.items() if v is not None})

    if credentials:
        driver_config.update(credentials)

    provider = provider.lower()

    if provider == "local":
        return LocalStorageDriver(driver_config)
    elif provider == "s3":
        if not driver_config.get("bucket_name"):
            raise StorageError("Missing required S3 configuration: ['bucket_name']")
        return S3StorageDriver(driver_config)
    else:
        raise StorageError(f"Unsupported storage provider: {provider}")
