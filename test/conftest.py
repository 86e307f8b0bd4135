from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from omnistore.storage.azure_storage import AzureBlobStorage
from omnistore.storage.gcs_storage import GCSStorage
from omnistore.storage.oss_storage import OSSStorage
from omnistore.storage.s3_storage import S3Storage
from omnistore.utils.env_config import AppSettings


@pytest.fixture(autouse=True)
def mock_logger(mocker: Any) -> MagicMock:
    return mocker.patch.object(structlog, "get_logger", return_value=MagicMock())


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Build an httpx transport answering every request with a fixed response."""

    def _make(status_code: int = 200, content: bytes = b"", headers: dict[str, str] | None = None):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, content=content, headers=headers or {})

        return httpx.MockTransport(handler)

    return _make


# Vendor client doubles


@pytest.fixture
def s3_client() -> MagicMock:
    client = MagicMock()
    client.put_object.return_value = {"ETag": '"abc123"'}
    client.generate_presigned_url.return_value = (
        "https://test-bucket.s3.amazonaws.com/docs/a.txt?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Signature=deadbeef"
    )
    client.head_bucket.return_value = {}
    client.delete_object.return_value = {}
    return client


@pytest.fixture
def s3_storage(s3_client: MagicMock, logger: MagicMock) -> S3Storage:
    return S3Storage(s3_client, "test-bucket", logger=logger)


@pytest.fixture(scope="session")
def rsa_private_key_pem() -> str:
    """PKCS#8 PEM of a throwaway RSA key, the shape found in service account JSON."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def gcs_bucket() -> MagicMock:
    bucket = MagicMock()
    bucket.name = "test-bucket"
    bucket.exists.return_value = True
    bucket.blob.return_value.etag = "gcs-etag"
    return bucket


@pytest.fixture
def gcs_storage(gcs_bucket: MagicMock, logger: MagicMock) -> GCSStorage:
    return GCSStorage(gcs_bucket, logger=logger)


@pytest.fixture
def azure_container() -> MagicMock:
    container = MagicMock()
    container.container_name = "test-container"
    container.account_name = "testaccount"
    container.credential = MagicMock(account_name="testaccount", account_key="dGVzdGtleQ==")
    container.exists.return_value = True
    return container


@pytest.fixture
def azure_storage(azure_container: MagicMock, logger: MagicMock) -> AzureBlobStorage:
    return AzureBlobStorage(azure_container, logger=logger)


@pytest.fixture
def oss_bucket() -> MagicMock:
    bucket = MagicMock()
    bucket.bucket_name = "test-bucket"
    bucket.endpoint = "https://oss-cn-hangzhou.aliyuncs.com"
    return bucket


@pytest.fixture
def oss_storage(oss_bucket: MagicMock, logger: MagicMock) -> OSSStorage:
    return OSSStorage(oss_bucket, logger=logger)


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable AppSettings reads so defaults apply."""
    for name in (
        "STORAGE_PROVIDER",
        "STORAGE_BUCKET",
        "STORAGE_REGION",
        "STORAGE_ENDPOINT",
        "STORAGE_ACCESS_KEY_ID",
        "STORAGE_SECRET_ACCESS_KEY",
        "STORAGE_FORCE_PATH_STYLE",
        "STORAGE_ACCOUNT_ID",
        "STORAGE_PROJECT_ID",
        "STORAGE_KEY_FILENAME",
        "STORAGE_API_ENDPOINT",
        "STORAGE_CONTAINER",
        "STORAGE_CONNECTION_STRING",
        "STORAGE_ACCOUNT_NAME",
        "STORAGE_ACCOUNT_KEY",
        "STORAGE_SAS_TOKEN",
        "STORAGE_STS_TOKEN",
        "STORAGE_INTERNAL",
        "STORAGE_SECURE",
        "STORAGE_FETCH_TIMEOUT",
        "LOG_LEVEL",
        "LOG_JSON_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_settings() -> MagicMock:
    settings = MagicMock(spec=AppSettings)
    settings.storage_provider = "s3"
    settings.storage_fetch_timeout = 12.0
    settings.get_storage_config.return_value = {
        "bucket": "test-bucket",
        "region": "us-east-1",
        "credentials": {"access_key_id": "AKIATEST", "secret_access_key": "secret"},
    }
    return settings
