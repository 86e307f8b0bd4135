"""
Example application demonstrating the storage service.

This example shows how to:
1. Configure logging and build a StorageService from environment settings
2. Upload bytes and a remote file
3. Download, sign and delete objects
4. Tell failed results apart from raised errors

Set STORAGE_PROVIDER, STORAGE_BUCKET and the provider credentials (see
omnistore.utils.env_config) in the environment or a .env file, then run:

    python examples/storage_usage_example.py
"""

import asyncio

import structlog

from omnistore import (
    FileDeleteConfig,
    FileDownloadConfig,
    FileUploadConfig,
    OmnistoreError,
    SignedUrlConfig,
    StorageError,
    StorageService,
    UrlUploadConfig,
)
from omnistore.utils.env_config import get_settings
from omnistore.utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)


async def run_demo(storage: StorageService) -> None:
    """Walk through every storage operation once."""
    health = await storage.health()
    logger.info("Health", status=health.status.value, response_time_ms=health.response_time, error=health.error)
    if not health.is_healthy:
        return

    upload = await storage.upload(
        FileUploadConfig(
            key="examples/hello.txt",
            data="Hello from omnistore!",
            content_type="text/plain",
            metadata={"source": "storage_usage_example"},
        )
    )
    logger.info("Uploaded", key=upload.key, success=upload.success, etag=upload.etag, error=upload.error)

    remote = await storage.upload_from_url(
        UrlUploadConfig(key="examples/logo.png", url="https://www.python.org/static/img/python-logo.png")
    )
    logger.info("Uploaded from URL", key=remote.key, success=remote.success, error=remote.error)

    download = await storage.download(FileDownloadConfig(key="examples/hello.txt"))
    if download.success:
        logger.info("Downloaded", key=download.key, size_bytes=download.size, content=download.data.decode())

    signed = await storage.get_signed_url(SignedUrlConfig(key="examples/hello.txt", expires_in=600))
    logger.info("Signed URL", url=signed.url, expires_at=signed.expires_at, error=signed.error)

    for key in ("examples/hello.txt", "examples/logo.png"):
        deleted = await storage.delete(FileDeleteConfig(key=key))
        logger.info("Deleted", key=key, success=deleted.success)


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json_format)

    try:
        storage = StorageService.from_settings(settings)
        logger.info("Storage ready", provider=storage.get_provider_name())
        await run_demo(storage)
    except StorageError as e:
        logger.error("Storage call failed", error=e.message, retryable=e.is_retryable)
    except OmnistoreError as e:
        logger.error("Configuration problem", error=e.message)


if __name__ == "__main__":
    asyncio.run(main())
