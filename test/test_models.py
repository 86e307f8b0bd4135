import pydantic
import pytest

from omnistore.storage.cloud_storage import (
    FileDeleteResult,
    FileDownloadResult,
    FileUploadResult,
    HealthStatus,
    SignedUrlOperation,
    SignedUrlResult,
    StorageHealthInfo,
    StorageProvider,
)


class TestResultModels:
    """Test suite for the uniform result models."""

    def test_successful_upload_result(self) -> None:
        result = FileUploadResult(success=True, key="a.txt", provider=StorageProvider.S3, etag="abc")

        assert result.error is None
        assert result.url is None
        assert result.timestamp.tzinfo is not None, "Timestamps must be timezone aware"

    @pytest.mark.parametrize("model", [FileUploadResult, FileDownloadResult, FileDeleteResult, SignedUrlResult])
    def test_failed_result_requires_error(self, model: type) -> None:
        """Test that a failure without an error message cannot be built."""
        with pytest.raises(pydantic.ValidationError, match="non-empty error message"):
            model(success=False, key="a.txt", provider=StorageProvider.GCS)

    def test_failed_result_rejects_blank_error(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            FileDeleteResult(success=False, key="a.txt", provider=StorageProvider.AZURE, error="   ")

    def test_failed_result_with_error(self) -> None:
        result = FileDownloadResult(success=False, key="a.txt", provider="oss", error="File not found: a.txt")

        assert result.provider == StorageProvider.OSS
        assert result.data is None
        assert result.metadata == {}

    def test_provider_accepts_string_value(self) -> None:
        result = FileDeleteResult(success=True, key="a.txt", provider="r2")

        assert result.provider is StorageProvider.R2
        assert result.provider == "r2"


class TestHealthInfo:
    """Test suite for StorageHealthInfo."""

    def test_healthy(self) -> None:
        info = StorageHealthInfo(provider=StorageProvider.B2, status=HealthStatus.HEALTHY, response_time=12.5)

        assert info.is_healthy
        assert info.error is None

    def test_unhealthy(self) -> None:
        info = StorageHealthInfo(provider=StorageProvider.S3, status="unhealthy", error="connection refused")

        assert not info.is_healthy
        assert info.response_time is None


def test_enum_values() -> None:
    assert [p.value for p in StorageProvider] == ["s3", "gcs", "azure", "r2", "b2", "oss"]
    assert SignedUrlOperation("write") is SignedUrlOperation.WRITE
