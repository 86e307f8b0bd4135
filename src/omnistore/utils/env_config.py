"""
Environment-based configuration for applications embedding omnistore.

Settings are read from environment variables (and a ``.env`` file, loaded the
first time ``get_settings`` runs). The storage core never reads them on its
own; ``StorageService.from_settings`` is the bridge.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, "").lower()
    return value in ("true", "1", "yes", "on") if value else default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float value from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _drop_unset(values: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in values.items() if value is not None and value != ""}


@dataclass
class AppSettings:
    """Application settings from environment variables."""

    # Storage selection
    storage_provider: str = field(default_factory=lambda: os.getenv("STORAGE_PROVIDER", "s3"))
    storage_bucket: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_BUCKET"))
    storage_region: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_REGION"))
    storage_endpoint: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_ENDPOINT"))

    # S3-compatible (s3, r2, b2) and OSS credentials
    storage_access_key_id: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_ACCESS_KEY_ID"))
    storage_secret_access_key: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_SECRET_ACCESS_KEY"))
    storage_force_path_style: bool = field(default_factory=lambda: get_env_bool("STORAGE_FORCE_PATH_STYLE"))
    storage_account_id: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_ACCOUNT_ID"))

    # Google Cloud Storage
    storage_project_id: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_PROJECT_ID"))
    storage_key_filename: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_KEY_FILENAME"))
    storage_api_endpoint: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_API_ENDPOINT"))

    # Azure Blob Storage
    storage_container: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_CONTAINER"))
    storage_connection_string: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_CONNECTION_STRING"))
    storage_account_name: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_ACCOUNT_NAME"))
    storage_account_key: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_ACCOUNT_KEY"))
    storage_sas_token: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_SAS_TOKEN"))

    # Alibaba Cloud OSS
    storage_sts_token: Optional[str] = field(default_factory=lambda: os.getenv("STORAGE_STS_TOKEN"))
    storage_internal: bool = field(default_factory=lambda: get_env_bool("STORAGE_INTERNAL"))
    storage_secure: bool = field(default_factory=lambda: get_env_bool("STORAGE_SECURE", True))

    # URL uploads
    storage_fetch_timeout: float = field(default_factory=lambda: get_env_float("STORAGE_FETCH_TIMEOUT", 30.0))

    # Logging Configuration
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json_format: bool = field(default_factory=lambda: get_env_bool("LOG_JSON_FORMAT", False))

    def __post_init__(self):
        """Normalize values after initialization."""
        self.storage_provider = (self.storage_provider or "").strip().lower()
        self.log_level = (self.log_level or "INFO").upper()

        if not self.storage_bucket and not self.storage_container:
            logger.warning("Neither STORAGE_BUCKET nor STORAGE_CONTAINER is set")

    def _s3_credentials(self) -> Optional[dict[str, str]]:
        if self.storage_access_key_id and self.storage_secret_access_key:
            return {
                "access_key_id": self.storage_access_key_id,
                "secret_access_key": self.storage_secret_access_key,
            }
        return None

    def get_storage_config(self) -> dict[str, Any]:
        """
        Get the provider-specific storage configuration as a dictionary.

        Keys match the provider's config model; unset values are omitted so
        the model defaults apply.
        """
        provider = self.storage_provider

        if provider in ("s3", "r2", "b2"):
            config = {
                "bucket": self.storage_bucket,
                "region": self.storage_region,
                "endpoint": self.storage_endpoint,
                "force_path_style": self.storage_force_path_style,
                "credentials": self._s3_credentials(),
            }
            if provider == "r2":
                config["account_id"] = self.storage_account_id
            return _drop_unset(config)

        if provider == "gcs":
            return _drop_unset(
                {
                    "bucket": self.storage_bucket,
                    "project_id": self.storage_project_id,
                    "key_filename": self.storage_key_filename,
                    "api_endpoint": self.storage_api_endpoint,
                }
            )

        if provider == "azure":
            return _drop_unset(
                {
                    "container": self.storage_container or self.storage_bucket,
                    "connection_string": self.storage_connection_string,
                    "account_name": self.storage_account_name,
                    "account_key": self.storage_account_key,
                    "sas_token": self.storage_sas_token,
                    "endpoint": self.storage_endpoint,
                }
            )

        if provider == "oss":
            credentials = None
            if self.storage_access_key_id and self.storage_secret_access_key:
                credentials = _drop_unset(
                    {
                        "access_key_id": self.storage_access_key_id,
                        "access_key_secret": self.storage_secret_access_key,
                        "sts_token": self.storage_sts_token,
                    }
                )
            return _drop_unset(
                {
                    "bucket": self.storage_bucket,
                    "region": self.storage_region,
                    "credentials": credentials,
                    "internal": self.storage_internal,
                    "secure": self.storage_secure,
                    "endpoint": self.storage_endpoint,
                }
            )

        return {}

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration as a dictionary."""
        return {
            "level": self.log_level,
            "json_format": self.log_json_format,
        }


# Global settings instance
_settings: Optional[AppSettings] = None


def _load_env_file() -> None:
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
        logger.info(f"Loaded environment variables from: {env_file}")


def get_settings() -> AppSettings:
    """Get the global application settings instance."""
    global _settings
    if _settings is None:
        _load_env_file()
        _settings = AppSettings()
        logger.info(f"Loaded settings for storage provider: {_settings.storage_provider}")
    return _settings


def reload_settings() -> AppSettings:
    """Reload the global application settings."""
    global _settings
    _load_env_file()
    _settings = AppSettings()
    logger.info(f"Reloaded settings for storage provider: {_settings.storage_provider}")
    return _settings


__all__ = [
    "AppSettings",
    "get_settings",
    "reload_settings",
    "get_env_bool",
    "get_env_float",
]
