from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from oss2.exceptions import AccessDenied, NoSuchKey, RequestError

from omnistore.storage.cloud_storage import (
    FileDeleteConfig,
    FileDownloadConfig,
    FileUploadConfig,
    HealthStatus,
    SignedUrlConfig,
    StorageProvider,
)
from omnistore.storage.errors import StorageError
from omnistore.storage.oss_storage import OSSStorage


def no_such_key() -> NoSuchKey:
    return NoSuchKey(404, {}, b"", {"Code": "NoSuchKey", "Message": "The specified key does not exist."})


class TestOSSStorage:
    """Test suite for the Alibaba Cloud OSS adapter."""

    @pytest.mark.asyncio
    async def test_upload(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.put_object.return_value = MagicMock(etag='"5B3C1A2E053D763E1B002CC607C5A0FE"')

        result = await oss_storage.upload(
            FileUploadConfig(
                key="docs/a file.txt",
                data=b"hello",
                content_type="text/plain",
                metadata={"author": "jane"},
                cache_control="no-cache",
                content_encoding="gzip",
            )
        )

        assert result.success
        assert result.provider == StorageProvider.OSS
        assert result.etag == "5B3C1A2E053D763E1B002CC607C5A0FE"
        assert result.url == "https://test-bucket.oss-cn-hangzhou.aliyuncs.com/docs/a%20file.txt"
        oss_bucket.put_object.assert_called_once_with(
            "docs/a file.txt",
            b"hello",
            headers={
                "Content-Type": "text/plain",
                "Cache-Control": "no-cache",
                "Content-Encoding": "gzip",
                "x-oss-meta-author": "jane",
            },
        )

    @pytest.mark.asyncio
    async def test_upload_access_denied_is_failed_result(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.put_object.side_effect = AccessDenied(
            403, {}, b"", {"Code": "AccessDenied", "Message": "You have no right to access this object."}
        )

        result = await oss_storage.upload(FileUploadConfig(key="a.txt", data=b"x"))

        assert not result.success
        assert result.error == "You have no right to access this object."

    @pytest.mark.asyncio
    async def test_upload_request_error_raises(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.put_object.side_effect = RequestError(ConnectionError("connection refused"))

        with pytest.raises(StorageError) as exc_info:
            await oss_storage.upload(FileUploadConfig(key="a.txt", data=b"x"))

        assert exc_info.value.is_retryable

    @pytest.mark.asyncio
    async def test_download(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        response = MagicMock()
        response.read.return_value = b"hello"
        response.content_type = "text/plain"
        response.content_length = 5
        response.etag = '"ETAG"'
        response.last_modified = 1714564800
        response.headers = {"Content-Type": "text/plain", "x-oss-meta-author": "jane"}
        oss_bucket.get_object.return_value = response

        result = await oss_storage.download(FileDownloadConfig(key="docs/a.txt"))

        assert result.success
        assert result.data == b"hello"
        assert result.size == 5
        assert result.etag == "ETAG"
        assert result.last_modified == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert result.metadata == {"author": "jane"}

    @pytest.mark.asyncio
    async def test_download_missing_key(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.get_object.side_effect = no_such_key()

        result = await oss_storage.download(FileDownloadConfig(key="missing.txt"))

        assert not result.success
        assert result.error == "The specified key does not exist."

    @pytest.mark.asyncio
    async def test_delete_missing_key_succeeds(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        """Test that OSS answers 204 for missing objects and the delete succeeds."""
        oss_bucket.delete_object.return_value = MagicMock(status=204)

        result = await oss_storage.delete(FileDeleteConfig(key="missing.txt"))

        assert result.success
        oss_bucket.delete_object.assert_called_once_with("missing.txt")

    @pytest.mark.asyncio
    async def test_signed_read_url(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        signed = "https://test-bucket.oss-cn-hangzhou.aliyuncs.com/a.txt?OSSAccessKeyId=id&Expires=1&Signature=sig"
        oss_bucket.sign_url.return_value = signed

        result = await oss_storage.get_signed_url(SignedUrlConfig(key="a.txt", expires_in=120))

        assert result.url == signed
        oss_bucket.sign_url.assert_called_once_with("GET", "a.txt", 120)

    @pytest.mark.asyncio
    async def test_signed_write_url(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.sign_url.return_value = "https://signed"

        await oss_storage.get_signed_url(SignedUrlConfig(key="a.png", operation="write", content_type="image/png"))

        oss_bucket.sign_url.assert_called_once_with("PUT", "a.png", 3600, headers={"Content-Type": "image/png"})

    @pytest.mark.asyncio
    async def test_health(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        info = await oss_storage.health()

        assert info.status == HealthStatus.HEALTHY
        oss_bucket.get_bucket_info.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_health_failure(self, oss_storage: OSSStorage, oss_bucket: MagicMock) -> None:
        oss_bucket.get_bucket_info.side_effect = RequestError(TimeoutError("timed out"))

        info = await oss_storage.health()

        assert info.status == HealthStatus.UNHEALTHY
        assert info.error
