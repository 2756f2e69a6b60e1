"""Tests for storage drivers."""

import asyncio
import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from pydantic import ValidationError

from app.config import IngestConfig
from app.storage.base import StorageError
from app.storage.factory import get_storage_driver_from_config, get_thumbnail_storage, get_video_storage
from app.storage.local_driver import LocalStorageDriver
from app.storage.s3_driver import S3StorageDriver


class TestLocalStorageDriver:
    """Tests for LocalStorageDriver."""

    def test_upload_writes_file(self, tmp_path):
        driver = LocalStorageDriver({"base_path": str(tmp_path)})
        location = asyncio.run(driver.upload_fileobj("abc.png", io.BytesIO(b"png-bytes"), "image/png"))

        assert location == "/assets/abc.png"
        assert (tmp_path / "abc.png").read_bytes() == b"png-bytes"

    def test_custom_public_prefix(self, tmp_path):
        driver = LocalStorageDriver({"base_path": str(tmp_path), "public_prefix": "/static/"})
        assert driver.public_url("k.jpeg") == "/static/k.jpeg"

    def test_rejects_traversal(self, tmp_path):
        driver = LocalStorageDriver({"base_path": str(tmp_path / "root")})
        with pytest.raises(StorageError):
            asyncio.run(driver.upload_fileobj("../escape.png", io.BytesIO(b"x"), "image/png"))
        assert not (tmp_path / "escape.png").exists()

    def test_read_failure_removes_partial_file(self, tmp_path):
        class Broken:
            def __init__(self):
                self.calls = 0

            def read(self, size):
                self.calls += 1
                if self.calls == 1:
                    return b"half"
                raise OSError("disk gone")

        driver = LocalStorageDriver({"base_path": str(tmp_path)})
        with pytest.raises(StorageError):
            asyncio.run(driver.upload_fileobj("partial.mp4", Broken(), "video/mp4"))
        assert not (tmp_path / "partial.mp4").exists()

    def test_connection(self, tmp_path):
        assert asyncio.run(LocalStorageDriver({"base_path": str(tmp_path)}).test_connection())
        missing = LocalStorageDriver({"base_path": str(tmp_path / "missing")})
        assert not asyncio.run(missing.test_connection())


def _mock_s3_session(driver: S3StorageDriver) -> AsyncMock:
    s3 = AsyncMock()
    client_cm = MagicMock()
    client_cm.__aenter__ = AsyncMock(return_value=s3)
    client_cm.__aexit__ = AsyncMock(return_value=False)
    driver.session = MagicMock()
    driver.session.client.return_value = client_cm
    return s3


class TestS3StorageDriver:
    """Tests for S3StorageDriver."""

    def test_public_url_default(self):
        driver = S3StorageDriver({"bucket_name": "tubely-videos", "region": "us-east-2"})
        assert driver.public_url("abc.mp4") == "https://tubely-videos.s3.us-east-2.amazonaws.com/abc.mp4"

    def test_public_url_with_prefix(self):
        driver = S3StorageDriver({"bucket_name": "b", "region": "eu-west-1", "base_path": "/videos/"})
        assert driver.public_url("abc.mp4") == "https://b.s3.eu-west-1.amazonaws.com/videos/abc.mp4"

    def test_public_url_custom_endpoint(self):
        driver = S3StorageDriver({"bucket_name": "b", "endpoint_url": "http://minio:9000/"})
        assert driver.public_url("abc.mp4") == "http://minio:9000/b/abc.mp4"

    def test_public_url_override(self):
        driver = S3StorageDriver(
            {"bucket_name": "b", "endpoint_url": "http://minio:9000", "public_base_url": "https://cdn.example.com"}
        )
        assert driver.public_url("abc.mp4") == "https://cdn.example.com/abc.mp4"

    def test_upload_tags_content_type(self):
        driver = S3StorageDriver({"bucket_name": "tubely-videos", "region": "us-east-1"})
        s3 = _mock_s3_session(driver)
        body = io.BytesIO(b"mp4")

        location = asyncio.run(driver.upload_fileobj("abc.mp4", body, "video/mp4"))

        assert location == "https://tubely-videos.s3.us-east-1.amazonaws.com/abc.mp4"
        s3.upload_fileobj.assert_awaited_once_with(
            body, "tubely-videos", "abc.mp4", ExtraArgs={"ContentType": "video/mp4"}
        )
        driver.session.client.assert_called_once_with("s3", region_name="us-east-1")

    def test_upload_failure_is_storage_error(self):
        driver = S3StorageDriver({"bucket_name": "b"})
        s3 = _mock_s3_session(driver)
        s3.upload_fileobj.side_effect = ClientError(
            {"Error": {"Code": "500", "Message": "boom"}}, "PutObject"
        )

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(driver.upload_fileobj("abc.mp4", io.BytesIO(b"x"), "video/mp4"))
        assert exc_info.value.status_code == 500

    def test_connection_ok(self):
        driver = S3StorageDriver({"bucket_name": "tubely-videos"})
        s3 = _mock_s3_session(driver)

        assert asyncio.run(driver.test_connection()) is True
        s3.head_bucket.assert_awaited_once_with(Bucket="tubely-videos")

    @pytest.mark.parametrize("code", ["404", "403", "500"])
    def test_connection_bucket_errors(self, code):
        driver = S3StorageDriver({"bucket_name": "missing"})
        s3 = _mock_s3_session(driver)
        s3.head_bucket.side_effect = ClientError(
            {"Error": {"Code": code, "Message": "nope"}}, "HeadBucket"
        )

        assert asyncio.run(driver.test_connection()) is False

    def test_connection_botocore_error(self):
        driver = S3StorageDriver({"bucket_name": "b"})
        s3 = _mock_s3_session(driver)
        s3.head_bucket.side_effect = EndpointConnectionError(endpoint_url="http://minio:9000")

        assert asyncio.run(driver.test_connection()) is False

    def test_credentials_passed_through(self):
        driver = S3StorageDriver(
            {"bucket_name": "b", "aws_access_key_id": "AKIA", "aws_secret_access_key": "secret"}
        )
        assert driver.s3_config["aws_access_key_id"] == "AKIA"
        assert driver.s3_config["aws_secret_access_key"] == "secret"


class TestFactory:
    """Tests for the storage factory."""

    def test_thumbnail_storage_is_local(self, tmp_path):
        config = IngestConfig(assets_root=str(tmp_path))
        driver = get_thumbnail_storage(config)
        assert isinstance(driver, LocalStorageDriver)
        assert driver.base_path == tmp_path.resolve()

    def test_video_storage_s3(self, tmp_path):
        config = IngestConfig(assets_root=str(tmp_path), s3_bucket="vids", s3_region="us-west-2")
        driver = get_video_storage(config)
        assert isinstance(driver, S3StorageDriver)
        assert driver.public_url("k.mp4") == "https://vids.s3.us-west-2.amazonaws.com/k.mp4"

    def test_video_storage_local(self, tmp_path):
        config = IngestConfig(assets_root=str(tmp_path), video_storage_provider="local")
        assert isinstance(get_video_storage(config), LocalStorageDriver)

    def test_s3_requires_bucket(self):
        with pytest.raises(StorageError):
            get_storage_driver_from_config(provider="s3", base_path="")

    def test_unsupported_provider(self):
        with pytest.raises(StorageError):
            get_storage_driver_from_config(provider="dropbox", base_path="/tmp")

    def test_config_is_immutable(self, tmp_path):
        config = IngestConfig(assets_root=str(tmp_path))
        with pytest.raises(ValidationError):
            config.max_video_bytes = 1
