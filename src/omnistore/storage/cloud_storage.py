"""
Abstract cloud storage interface shared by every provider adapter.

This module defines the operation configs, the uniform result models and the
``CloudStorage`` base class. The base class owns the control flow every
adapter shares (logging, failure classification, result construction, URL
fetching, expiry arithmetic, health timing); concrete adapters only implement
the vendor-specific hooks.
"""

import asyncio
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, ClassVar

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ObjectNotFoundError, SignedUrlUnavailableError, StorageError


class StorageProvider(str, Enum):
    """Supported object storage back ends."""

    S3 = "s3"
    GCS = "gcs"
    AZURE = "azure"
    R2 = "r2"
    B2 = "b2"
    OSS = "oss"


class SignedUrlOperation(str, Enum):
    """Access granted by a signed URL."""

    READ = "read"
    WRITE = "write"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


# Operation configs. Plain dataclasses so that malformed values reach the
# validators instead of failing at construction time.


@dataclass
class FileUploadConfig:
    """Upload ``data`` to ``key``."""

    key: str
    data: bytes | str
    content_type: str | None = None
    metadata: dict[str, str] | None = None
    cache_control: str | None = None
    content_encoding: str | None = None


@dataclass
class UrlUploadConfig:
    """Fetch ``url`` and upload the body to ``key``."""

    key: str
    url: str
    content_type: str | None = None
    metadata: dict[str, str] | None = None
    cache_control: str | None = None


@dataclass
class FileDownloadConfig:
    key: str


@dataclass
class FileDeleteConfig:
    key: str


@dataclass
class SignedUrlConfig:
    """Issue a time-limited URL for ``key``."""

    key: str
    expires_in: int | float | None = None
    operation: SignedUrlOperation | str | None = None
    content_type: str | None = None


# Uniform results


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageResult(BaseModel):
    """Fields shared by every operation result."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    key: str
    provider: StorageProvider
    timestamp: datetime = Field(default_factory=_utcnow)
    error: str | None = None

    @model_validator(mode="after")
    def _failure_carries_error(self) -> "StorageResult":
        if not self.success and not (self.error and self.error.strip()):
            raise ValueError("A failed result must carry a non-empty error message")
        return self


class FileUploadResult(StorageResult):
    etag: str | None = None
    url: str | None = None


class FileDownloadResult(StorageResult):
    data: bytes | None = None
    content_type: str | None = None
    size: int | None = None
    last_modified: datetime | None = None
    etag: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class FileDeleteResult(StorageResult):
    pass


class SignedUrlResult(StorageResult):
    url: str | None = None
    expires_at: datetime | None = None


class StorageHealthInfo(BaseModel):
    """Outcome of a provider connectivity check."""

    provider: StorageProvider
    status: HealthStatus
    response_time: float | None = None  # milliseconds
    error: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY


# Values handed back by the vendor hooks


@dataclass
class ObjectWrite:
    """What the vendor confirmed after a write."""

    etag: str | None = None
    url: str | None = None


@dataclass
class StoredObject:
    """An object read back from storage."""

    data: bytes
    content_type: str | None = None
    size: int | None = None
    last_modified: datetime | None = None
    etag: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


class CloudStorage(ABC):
    """
    Abstract base class for cloud storage adapters.

    Subclasses declare their identity and the vendor exception families they
    raise, then implement five hooks. Failure handling is the same for every
    adapter:

    - exceptions listed in ``service_errors`` (the vendor answered with an
      error), ``ObjectNotFoundError`` and ``SignedUrlUnavailableError``
      become ``success=False`` results;
    - anything else is normalized to ``StorageError`` and raised, flagged
      retryable when it belongs to ``transport_errors``;
    - ``health()`` never raises.
    """

    provider: ClassVar[StorageProvider]
    service_errors: ClassVar[tuple[type[BaseException], ...]] = ()
    transport_errors: ClassVar[tuple[type[BaseException], ...]] = ()
    default_expires_in: ClassVar[int] = 3600

    def __init__(
        self,
        bucket_name: str,
        logger: Any | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
        fetch_timeout: float = 30.0,
    ):
        """
        Initialize the adapter.

        Args:
            bucket_name: Bucket (or container) every operation targets
            logger: Structured logger; defaults to this module's structlog logger
            http_transport: Transport for ``upload_from_url`` fetches
            fetch_timeout: Timeout in seconds for ``upload_from_url`` fetches
        """
        self.bucket_name = bucket_name
        self.logger = logger if logger is not None else structlog.get_logger(__name__)
        self._http_transport = http_transport
        self._fetch_timeout = fetch_timeout

    @property
    def name(self) -> str:
        return self.provider.value

    # Vendor hooks

    @abstractmethod
    async def _put_object(self, config: FileUploadConfig) -> ObjectWrite:
        """Write the object and return what the vendor confirmed."""

    @abstractmethod
    async def _get_object(self, key: str) -> StoredObject:
        """Read the object; raise ObjectNotFoundError or a service error when absent."""

    @abstractmethod
    async def _delete_object(self, key: str) -> None:
        """Remove the object."""

    @abstractmethod
    async def _sign_url(
        self,
        key: str,
        expires_in: int,
        expires_at: datetime,
        operation: SignedUrlOperation,
        content_type: str | None,
    ) -> str:
        """Return the vendor-signed URL exactly as the SDK produced it."""

    @abstractmethod
    async def _probe(self) -> None:
        """Cheapest call proving connectivity and credentials; raise on failure."""

    # Public contract

    async def upload(self, config: FileUploadConfig) -> FileUploadResult:
        """Upload bytes or text to storage."""
        self.logger.debug("Provider uploading file", provider=self.name, bucket=self.bucket_name, key=config.key)

        try:
            written = await self._put_object(config)
            result = FileUploadResult(
                success=True,
                key=config.key,
                provider=self.provider,
                etag=written.etag,
                url=written.url,
            )
        except self._expected_errors as error:
            message = self._failure_message(error, "upload", config.key)
            return FileUploadResult(success=False, key=config.key, provider=self.provider, error=message)
        except Exception as error:
            raise self._escalate(error, "upload", config.key)

        self.logger.debug("Provider file uploaded", provider=self.name, key=config.key, etag=written.etag)
        return result

    async def upload_from_url(self, config: UrlUploadConfig) -> FileUploadResult:
        """
        Fetch ``config.url`` and upload the body through the regular write path.

        A source answering 4xx/5xx yields ``success=False`` with a message
        starting ``Failed to download file from URL``; a source that cannot be
        reached raises a retryable ``StorageError``. Write failures behave
        exactly like ``upload``.
        """
        self.logger.debug("Provider uploading from URL", provider=self.name, key=config.key, url=config.url)

        try:
            response = await self._fetch_url(config.url)
        except httpx.HTTPError as error:
            raise self._escalate(
                error,
                "upload_from_url",
                config.key,
                is_retryable=isinstance(error, httpx.TransportError),
            )

        if response.is_error:
            message = f"Failed to download file from URL: {response.status_code} {response.reason_phrase}".rstrip()
            self.logger.error(
                "Provider URL fetch failed",
                provider=self.name,
                key=config.key,
                url=config.url,
                status_code=response.status_code,
            )
            return FileUploadResult(success=False, key=config.key, provider=self.provider, error=message)

        content_type = config.content_type or response.headers.get("content-type")
        return await self.upload(
            FileUploadConfig(
                key=config.key,
                data=response.content,
                content_type=content_type,
                metadata=config.metadata,
                cache_control=config.cache_control,
            )
        )

    async def download(self, config: FileDownloadConfig) -> FileDownloadResult:
        """Download an object; a missing object is a failed result, not an exception."""
        self.logger.debug("Provider downloading file", provider=self.name, bucket=self.bucket_name, key=config.key)

        try:
            stored = await self._get_object(config.key)
            result = FileDownloadResult(
                success=True,
                key=config.key,
                provider=self.provider,
                data=stored.data,
                content_type=stored.content_type,
                size=stored.size,
                last_modified=stored.last_modified,
                etag=stored.etag,
                metadata=stored.metadata,
            )
        except self._expected_errors as error:
            message = self._failure_message(error, "download", config.key)
            return FileDownloadResult(success=False, key=config.key, provider=self.provider, error=message)
        except Exception as error:
            raise self._escalate(error, "download", config.key)

        self.logger.debug(
            "Provider file downloaded",
            provider=self.name,
            key=config.key,
            size_bytes=stored.size,
            content_type=stored.content_type,
        )
        return result

    async def delete(self, config: FileDeleteConfig) -> FileDeleteResult:
        """Delete an object. Whether a missing key is an error is provider-specific."""
        self.logger.debug("Provider deleting file", provider=self.name, bucket=self.bucket_name, key=config.key)

        try:
            await self._delete_object(config.key)
        except self._expected_errors as error:
            message = self._failure_message(error, "delete", config.key)
            return FileDeleteResult(success=False, key=config.key, provider=self.provider, error=message)
        except Exception as error:
            raise self._escalate(error, "delete", config.key)

        self.logger.debug("Provider file deleted", provider=self.name, key=config.key)
        return FileDeleteResult(success=True, key=config.key, provider=self.provider)

    async def get_signed_url(self, config: SignedUrlConfig) -> SignedUrlResult:
        """Issue a signed URL valid for ``expires_in`` seconds (default one hour)."""
        expires_in = math.ceil(config.expires_in) if config.expires_in else self.default_expires_in
        operation = SignedUrlOperation(config.operation or SignedUrlOperation.READ)
        self.logger.debug(
            "Provider generating signed URL",
            provider=self.name,
            key=config.key,
            operation=operation.value,
            expires_in_sec=expires_in,
        )

        expires_at = _utcnow() + timedelta(seconds=expires_in)
        try:
            url = await self._sign_url(config.key, expires_in, expires_at, operation, config.content_type)
            result = SignedUrlResult(
                success=True,
                key=config.key,
                provider=self.provider,
                url=url,
                expires_at=expires_at,
            )
        except self._expected_errors as error:
            message = self._failure_message(error, "get_signed_url", config.key)
            return SignedUrlResult(success=False, key=config.key, provider=self.provider, error=message)
        except Exception as error:
            raise self._escalate(error, "get_signed_url", config.key)

        self.logger.debug("Provider signed URL generated", provider=self.name, key=config.key, expires_at=expires_at)
        return result

    async def health(self) -> StorageHealthInfo:
        """Check connectivity; failures are reported, never raised."""
        self.logger.debug("Provider health check", provider=self.name, bucket=self.bucket_name)
        started = time.perf_counter()

        try:
            await self._probe()
        except Exception as error:
            storage_error = StorageError.from_exception(
                error, self.provider, is_retryable=isinstance(error, self.transport_errors)
            )
            self.logger.error("Provider health check failed", provider=self.name, error=storage_error.message)
            return StorageHealthInfo(
                provider=self.provider,
                status=HealthStatus.UNHEALTHY,
                error=storage_error.message,
            )

        response_time = (time.perf_counter() - started) * 1000
        self.logger.debug("Provider health check passed", provider=self.name, response_time_ms=response_time)
        return StorageHealthInfo(
            provider=self.provider,
            status=HealthStatus.HEALTHY,
            response_time=response_time,
        )

    # Private helper methods

    @property
    def _expected_errors(self) -> tuple[type[BaseException], ...]:
        return (*self.service_errors, ObjectNotFoundError, SignedUrlUnavailableError)

    def _failure_message(self, error: BaseException, operation: str, key: str) -> str:
        storage_error = StorageError.from_exception(error, self.provider)
        self.logger.error(
            f"Provider {operation} failed",
            provider=self.name,
            key=key,
            error=storage_error.message,
            status_code=storage_error.status_code,
        )
        return storage_error.message

    def _escalate(
        self,
        error: BaseException,
        operation: str,
        key: str | None,
        is_retryable: bool | None = None,
    ) -> StorageError:
        """Normalize an unexpected failure into the StorageError the caller re-raises."""
        if is_retryable is None:
            is_retryable = isinstance(error, self.transport_errors)
        storage_error = StorageError.from_exception(error, self.provider, is_retryable=is_retryable)
        if storage_error is not error:
            storage_error.__cause__ = error
        self.logger.error(
            f"Provider {operation} raised",
            provider=self.name,
            key=key,
            error=storage_error.message,
            retryable=storage_error.is_retryable,
        )
        return storage_error

    async def _run_sync(self, func, *args, **kwargs):
        """Run a blocking SDK call in the default executor."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    async def _fetch_url(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            transport=self._http_transport,
            timeout=self._fetch_timeout,
            follow_redirects=True,
        ) as client:
            return await client.get(url)

    @staticmethod
    def _unquote(etag: Any) -> str | None:
        return str(etag).strip('"') if etag else None

    @staticmethod
    def _payload(data: bytes | bytearray | memoryview | str) -> bytes:
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)


__all__ = [
    "StorageProvider",
    "SignedUrlOperation",
    "HealthStatus",
    "FileUploadConfig",
    "UrlUploadConfig",
    "FileDownloadConfig",
    "FileDeleteConfig",
    "SignedUrlConfig",
    "StorageResult",
    "FileUploadResult",
    "FileDownloadResult",
    "FileDeleteResult",
    "SignedUrlResult",
    "StorageHealthInfo",
    "ObjectWrite",
    "StoredObject",
    "CloudStorage",
]
