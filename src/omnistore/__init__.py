"""
omnistore: one asynchronous interface for object storage across S3, R2, B2,
Google Cloud Storage, Azure Blob Storage and Alibaba Cloud OSS.
"""

from .core.service import StorageService
from .factories.storage_factory import create_storage
from .storage import (
    FileDeleteConfig,
    FileDeleteResult,
    FileDownloadConfig,
    FileDownloadResult,
    FileUploadConfig,
    FileUploadResult,
    HealthStatus,
    ObjectNotFoundError,
    OmnistoreError,
    ProviderError,
    SignedUrlConfig,
    SignedUrlOperation,
    SignedUrlResult,
    StorageError,
    StorageHealthInfo,
    StorageProvider,
    UrlUploadConfig,
    ValidationError,
    is_provider_error,
    is_storage_error,
    is_validation_error,
    normalize_error,
)

__version__ = "0.1.0"

__all__ = [
    "StorageService",
    "create_storage",
    "StorageProvider",
    "SignedUrlOperation",
    "HealthStatus",
    "FileUploadConfig",
    "UrlUploadConfig",
    "FileDownloadConfig",
    "FileDeleteConfig",
    "SignedUrlConfig",
    "FileUploadResult",
    "FileDownloadResult",
    "FileDeleteResult",
    "SignedUrlResult",
    "StorageHealthInfo",
    "OmnistoreError",
    "ValidationError",
    "ProviderError",
    "StorageError",
    "ObjectNotFoundError",
    "normalize_error",
    "is_storage_error",
    "is_validation_error",
    "is_provider_error",
]
