"""
Provider-agnostic object storage layer.

This module provides the abstract ``CloudStorage`` contract, the uniform
operation configs and results, error normalization, and one adapter per
supported back end: AWS S3 (and any S3-compatible endpoint), Cloudflare R2,
Backblaze B2, Google Cloud Storage, Azure Blob Storage and Alibaba Cloud OSS.
"""

from .azure_storage import AzureBlobStorage
from .cloud_storage import (
    CloudStorage,
    FileDeleteConfig,
    FileDeleteResult,
    FileDownloadConfig,
    FileDownloadResult,
    FileUploadConfig,
    FileUploadResult,
    HealthStatus,
    SignedUrlConfig,
    SignedUrlOperation,
    SignedUrlResult,
    StorageHealthInfo,
    StorageProvider,
    StorageResult,
    UrlUploadConfig,
)
from .errors import (
    ObjectNotFoundError,
    OmnistoreError,
    ProviderError,
    SignedUrlUnavailableError,
    StorageError,
    ValidationError,
    is_provider_error,
    is_storage_error,
    is_validation_error,
    normalize_error,
)
from .gcs_storage import GCSStorage
from .oss_storage import OSSStorage
from .provider_configs import (
    AzureConfig,
    B2Config,
    GCSConfig,
    OSSConfig,
    OSSCredentials,
    R2Config,
    S3Config,
    S3Credentials,
)
from .s3_storage import B2Storage, R2Storage, S3Storage

__all__ = [
    # Abstract interface
    "CloudStorage",
    # Concrete implementations
    "S3Storage",
    "R2Storage",
    "B2Storage",
    "GCSStorage",
    "AzureBlobStorage",
    "OSSStorage",
    # Operation configs
    "FileUploadConfig",
    "UrlUploadConfig",
    "FileDownloadConfig",
    "FileDeleteConfig",
    "SignedUrlConfig",
    # Results and enums
    "StorageResult",
    "FileUploadResult",
    "FileDownloadResult",
    "FileDeleteResult",
    "SignedUrlResult",
    "StorageHealthInfo",
    "StorageProvider",
    "SignedUrlOperation",
    "HealthStatus",
    # Provider configuration
    "S3Config",
    "S3Credentials",
    "R2Config",
    "B2Config",
    "GCSConfig",
    "AzureConfig",
    "OSSConfig",
    "OSSCredentials",
    # Exceptions
    "OmnistoreError",
    "ValidationError",
    "ProviderError",
    "StorageError",
    "ObjectNotFoundError",
    "SignedUrlUnavailableError",
    "normalize_error",
    "is_storage_error",
    "is_validation_error",
    "is_provider_error",
]
