"""
Provider configuration models.

Each back end has its own pydantic model. Field names are snake_case but the
camelCase spelling (``accessKeyId``, ``forcePathStyle``, ...) is accepted too,
so configs can be loaded straight from JSON documents written for other tools.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class _ProviderConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, loc_by_alias=False, extra="ignore")


def _check_endpoint(value: str | None) -> str | None:
    if value and not value.startswith(("http://", "https://")):
        raise ValueError("Endpoint URL must start with http:// or https://")
    return value


# S3-compatible providers


class S3Credentials(_ProviderConfig):
    access_key_id: str = Field(min_length=1, description="Access key ID")
    secret_access_key: str = Field(min_length=1, description="Secret access key")
    session_token: str | None = Field(default=None, description="Temporary session token")


class S3Config(_ProviderConfig):
    """AWS S3 or any S3-compatible endpoint (MinIO, Ceph, ...)."""

    bucket: str = Field(min_length=1, description="Bucket name")
    region: str = Field(default="us-east-1", description="Storage region")
    credentials: S3Credentials | None = Field(
        default=None, description="Static credentials; the default AWS chain is used when omitted"
    )
    endpoint: str | None = Field(default=None, description="Endpoint URL for non-AWS providers")
    force_path_style: bool = Field(default=False, description="Use path-style addressing")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v):
        return _check_endpoint(v)


class R2Config(S3Config):
    """Cloudflare R2."""

    account_id: str = Field(min_length=1, description="Cloudflare account ID")
    region: str = Field(default="auto", description="R2 always signs for region 'auto'")


class B2Config(S3Config):
    """Backblaze B2 through its S3-compatible API."""

    region: str = Field(default="us-west-004", description="B2 region")
    credentials: S3Credentials = Field(description="Application key ID and application key")


# Google Cloud Storage


class GCSConfig(_ProviderConfig):
    bucket: str = Field(min_length=1, description="Bucket name")
    project_id: str | None = Field(default=None, description="Google Cloud project")
    key_filename: str | None = Field(default=None, description="Path to a service account JSON file")
    credentials: dict[str, Any] | None = Field(
        default=None, description="Service account info (client_email, private_key, ...)"
    )
    api_endpoint: str | None = Field(default=None, description="Custom API endpoint (emulators)")

    @field_validator("credentials")
    @classmethod
    def validate_credentials(cls, v):
        if v is None:
            return v
        return {"token_uri": GOOGLE_TOKEN_URI, **v}

    @field_validator("api_endpoint")
    @classmethod
    def validate_api_endpoint(cls, v):
        return _check_endpoint(v)


# Azure Blob Storage


class AzureConfig(_ProviderConfig):
    """
    Azure Blob Storage.

    Authentication, first match wins: ``connection_string``; ``account_name``
    with ``account_key``; ``account_name`` with ``sas_token``; ``account_name``
    alone, which relies on the ambient Azure identity.
    """

    container: str = Field(min_length=1, description="Container name")
    connection_string: str | None = Field(default=None, description="Storage account connection string")
    account_name: str | None = Field(default=None, description="Storage account name")
    account_key: str | None = Field(default=None, description="Shared account key")
    sas_token: str | None = Field(default=None, description="Account or container SAS token")
    endpoint: str | None = Field(default=None, description="Overrides https://<account>.blob.core.windows.net")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v):
        return _check_endpoint(v)

    @model_validator(mode="after")
    def validate_auth(self):
        if not self.connection_string and not self.account_name:
            raise ValueError("Either connection_string or account_name is required")
        return self

    @property
    def account_url(self) -> str:
        return self.endpoint or f"https://{self.account_name}.blob.core.windows.net"


# Alibaba Cloud OSS


class OSSCredentials(_ProviderConfig):
    access_key_id: str = Field(min_length=1, description="AccessKey ID")
    access_key_secret: str = Field(min_length=1, description="AccessKey secret")
    sts_token: str | None = Field(default=None, description="STS security token")


class OSSConfig(_ProviderConfig):
    bucket: str = Field(min_length=1, description="Bucket name")
    region: str = Field(min_length=1, description="Region, for example 'oss-cn-hangzhou'")
    credentials: OSSCredentials
    internal: bool = Field(default=False, description="Use the internal (VPC) endpoint")
    secure: bool = Field(default=True, description="Use HTTPS")
    endpoint: str | None = Field(default=None, description="Custom endpoint")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v):
        return _check_endpoint(v)

    @property
    def resolved_endpoint(self) -> str:
        if self.endpoint:
            return self.endpoint
        scheme = "https" if self.secure else "http"
        suffix = "-internal" if self.internal else ""
        return f"{scheme}://{self.region}{suffix}.aliyuncs.com"


__all__ = [
    "S3Credentials",
    "S3Config",
    "R2Config",
    "B2Config",
    "GCSConfig",
    "AzureConfig",
    "OSSCredentials",
    "OSSConfig",
]
