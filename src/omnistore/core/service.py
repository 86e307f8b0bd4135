"""
Public entry point for storage operations.
"""

from typing import Any

import structlog

from ..factories.storage_factory import create_storage, resolve_provider
from ..storage.cloud_storage import (
    CloudStorage,
    FileDeleteConfig,
    FileDeleteResult,
    FileDownloadConfig,
    FileDownloadResult,
    FileUploadConfig,
    FileUploadResult,
    SignedUrlConfig,
    SignedUrlResult,
    StorageHealthInfo,
    StorageProvider,
    UrlUploadConfig,
)
from ..utils.env_config import AppSettings, get_settings
from ..utils.validators import OperationValidator


class StorageService:
    """
    Provider-agnostic storage facade.

    Validates every request, delegates to the adapter built for the configured
    provider, and logs the outcome. Results come back exactly as the adapter
    produced them; exceptions are logged and re-raised unchanged.

    Example:
        storage = StorageService("s3", {"bucket": "assets", "region": "eu-west-1"})
        result = await storage.upload(FileUploadConfig(key="a.txt", data=b"hello"))
    """

    def __init__(
        self,
        provider: StorageProvider | str,
        config: Any = None,
        *,
        logger: Any | None = None,
        http_transport: Any | None = None,
        fetch_timeout: float = 30.0,
    ) -> None:
        """Build the adapter for ``provider``; construction errors propagate."""
        self.provider = resolve_provider(provider)
        self.logger = logger if logger is not None else structlog.get_logger(__name__)
        self._storage: CloudStorage = create_storage(
            self.provider,
            config,
            logger=self.logger,
            http_transport=http_transport,
            fetch_timeout=fetch_timeout,
        )
        self.logger.debug("Storage service initialized", provider=self.provider.value)

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None, **kwargs) -> "StorageService":
        """Create a service from environment settings (``get_settings()`` when omitted)."""
        settings = settings or get_settings()
        kwargs.setdefault("fetch_timeout", settings.storage_fetch_timeout)
        return cls(settings.storage_provider, settings.get_storage_config(), **kwargs)

    def get_provider_name(self) -> str:
        return self.provider.value

    async def upload(self, config: FileUploadConfig) -> FileUploadResult:
        """Upload bytes or text to ``config.key``."""
        OperationValidator.validate_upload(config)
        self.logger.info("Uploading file", provider=self.provider.value, key=config.key)

        try:
            result = await self._storage.upload(config)
        except Exception as e:
            self.logger.error("Upload failed", provider=self.provider.value, key=config.key, error=str(e))
            raise

        self._log_result("Upload", result)
        return result

    async def upload_from_url(self, config: UrlUploadConfig) -> FileUploadResult:
        """Fetch ``config.url`` and store the body at ``config.key``."""
        OperationValidator.validate_url_upload(config)
        self.logger.info("Uploading file from URL", provider=self.provider.value, key=config.key, url=config.url)

        try:
            result = await self._storage.upload_from_url(config)
        except Exception as e:
            self.logger.error(
                "URL upload failed", provider=self.provider.value, key=config.key, url=config.url, error=str(e)
            )
            raise

        self._log_result("URL upload", result)
        return result

    async def download(self, config: FileDownloadConfig) -> FileDownloadResult:
        OperationValidator.validate_download(config)
        self.logger.info("Downloading file", provider=self.provider.value, key=config.key)

        try:
            result = await self._storage.download(config)
        except Exception as e:
            self.logger.error("Download failed", provider=self.provider.value, key=config.key, error=str(e))
            raise

        self._log_result("Download", result)
        return result

    async def delete(self, config: FileDeleteConfig) -> FileDeleteResult:
        OperationValidator.validate_delete(config)
        self.logger.info("Deleting file", provider=self.provider.value, key=config.key)

        try:
            result = await self._storage.delete(config)
        except Exception as e:
            self.logger.error("Delete failed", provider=self.provider.value, key=config.key, error=str(e))
            raise

        self._log_result("Delete", result)
        return result

    async def get_signed_url(self, config: SignedUrlConfig) -> SignedUrlResult:
        """Issue a time-limited URL for ``config.key``."""
        OperationValidator.validate_signed_url(config)
        self.logger.debug("Generating signed URL", provider=self.provider.value, key=config.key)

        try:
            result = await self._storage.get_signed_url(config)
        except Exception as e:
            self.logger.error("Signed URL generation failed", provider=self.provider.value, key=config.key, error=str(e))
            raise

        self._log_result("Signed URL generation", result)
        return result

    async def health(self) -> StorageHealthInfo:
        """Check provider connectivity. Never raises."""
        info = await self._storage.health()
        if info.is_healthy:
            self.logger.info(
                "Storage health check passed", provider=self.provider.value, response_time_ms=info.response_time
            )
        else:
            self.logger.error("Storage health check failed", provider=self.provider.value, error=info.error)
        return info

    def _log_result(self, operation: str, result: Any) -> None:
        if result.success:
            self.logger.info(f"{operation} succeeded", provider=self.provider.value, key=result.key)
        else:
            self.logger.error(f"{operation} failed", provider=self.provider.value, key=result.key, error=result.error)


__all__ = ["StorageService"]
