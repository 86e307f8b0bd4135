"""
Factory for creating storage adapters.

This is the only place vendor SDK clients are constructed. Each provider
identity maps to its config model and a builder that turns a validated config
into a client-backed adapter.
"""

from collections.abc import Callable, Mapping
from typing import Any

import boto3
import oss2
from azure.identity import DefaultAzureCredential
from azure.storage.blob import BlobServiceClient
from botocore.config import Config
from google.cloud import storage
from google.oauth2 import service_account
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..storage.azure_storage import AzureBlobStorage
from ..storage.cloud_storage import CloudStorage, StorageProvider
from ..storage.errors import ProviderError
from ..storage.gcs_storage import GCSStorage
from ..storage.oss_storage import OSSStorage
from ..storage.provider_configs import AzureConfig, B2Config, GCSConfig, OSSConfig, R2Config, S3Config
from ..storage.s3_storage import B2Storage, R2Storage, S3Storage


def _boto3_client(config: S3Config, endpoint: str | None, region: str):
    client_kwargs = {
        "region_name": region,
        "config": Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if config.force_path_style else "auto"},
        ),
    }
    if endpoint:
        client_kwargs["endpoint_url"] = endpoint
    if config.credentials:
        client_kwargs["aws_access_key_id"] = config.credentials.access_key_id
        client_kwargs["aws_secret_access_key"] = config.credentials.secret_access_key
        if config.credentials.session_token:
            client_kwargs["aws_session_token"] = config.credentials.session_token

    return boto3.client("s3", **client_kwargs)


def _build_s3(config: S3Config, **adapter_kwargs) -> S3Storage:
    client = _boto3_client(config, config.endpoint, config.region)
    return S3Storage(client, config.bucket, **adapter_kwargs)


def _build_r2(config: R2Config, **adapter_kwargs) -> R2Storage:
    endpoint = config.endpoint or f"https://{config.account_id}.r2.cloudflarestorage.com"
    client = _boto3_client(config, endpoint, "auto")
    return R2Storage(client, config.bucket, **adapter_kwargs)


def _build_b2(config: B2Config, **adapter_kwargs) -> B2Storage:
    endpoint = config.endpoint or f"https://s3.{config.region}.backblazeb2.com"
    client = _boto3_client(config, endpoint, config.region)
    return B2Storage(client, config.bucket, **adapter_kwargs)


def _build_gcs(config: GCSConfig, **adapter_kwargs) -> GCSStorage:
    credentials = None
    if config.credentials:
        credentials = service_account.Credentials.from_service_account_info(config.credentials)
    elif config.key_filename:
        credentials = service_account.Credentials.from_service_account_file(config.key_filename)

    project = config.project_id or getattr(credentials, "project_id", None)
    client_options = {"api_endpoint": config.api_endpoint} if config.api_endpoint else None
    client = storage.Client(project=project, credentials=credentials, client_options=client_options)
    return GCSStorage(client.bucket(config.bucket), **adapter_kwargs)


def _build_azure(config: AzureConfig, **adapter_kwargs) -> AzureBlobStorage:
    if config.connection_string:
        service = BlobServiceClient.from_connection_string(config.connection_string)
    elif config.account_key:
        credential = {"account_name": config.account_name, "account_key": config.account_key}
        service = BlobServiceClient(config.account_url, credential=credential)
    elif config.sas_token:
        service = BlobServiceClient(config.account_url, credential=config.sas_token)
    else:
        service = BlobServiceClient(config.account_url, credential=DefaultAzureCredential())

    return AzureBlobStorage(service.get_container_client(config.container), **adapter_kwargs)


def _build_oss(config: OSSConfig, **adapter_kwargs) -> OSSStorage:
    credentials = config.credentials
    if credentials.sts_token:
        auth = oss2.StsAuth(credentials.access_key_id, credentials.access_key_secret, credentials.sts_token)
    else:
        auth = oss2.Auth(credentials.access_key_id, credentials.access_key_secret)

    return OSSStorage(oss2.Bucket(auth, config.resolved_endpoint, config.bucket), **adapter_kwargs)


_REGISTRY: dict[StorageProvider, tuple[type[BaseModel], Callable[..., CloudStorage]]] = {
    StorageProvider.S3: (S3Config, _build_s3),
    StorageProvider.R2: (R2Config, _build_r2),
    StorageProvider.B2: (B2Config, _build_b2),
    StorageProvider.GCS: (GCSConfig, _build_gcs),
    StorageProvider.AZURE: (AzureConfig, _build_azure),
    StorageProvider.OSS: (OSSConfig, _build_oss),
}


def resolve_provider(provider: StorageProvider | str) -> StorageProvider:
    """Turn a provider identity (enum or string) into ``StorageProvider``."""
    try:
        return StorageProvider(provider)
    except (ValueError, TypeError):
        raise ProviderError(str(provider), f"Unsupported storage provider: {provider}") from None


def _load_config(provider: StorageProvider, model: type[BaseModel], config: Any) -> BaseModel:
    if isinstance(config, model):
        return config
    if config is None:
        raise ProviderError(provider.value, f"Configuration is required for {provider.value} storage")
    if isinstance(config, BaseModel):
        config = config.model_dump()
    if not isinstance(config, Mapping):
        raise ProviderError(provider.value, f"Invalid {provider.value} configuration: expected a mapping")

    try:
        return model.model_validate(dict(config))
    except PydanticValidationError as e:
        details = e.errors()[0]
        field = ".".join(str(part) for part in details["loc"]) or "config"
        raise ProviderError(
            provider.value,
            f"Invalid {provider.value} configuration: {field}: {details['msg']}",
        ) from e


def create_storage(
    provider: StorageProvider | str,
    config: BaseModel | Mapping[str, Any] | None = None,
    *,
    logger: Any | None = None,
    http_transport: Any | None = None,
    fetch_timeout: float = 30.0,
) -> CloudStorage:
    """
    Create a storage adapter for the given provider.

    Args:
        provider: Provider identity, ``StorageProvider`` or its string value
        config: Provider config model or a mapping (camelCase or snake_case keys)
        logger: Logger handed to the adapter
        http_transport: httpx transport used by ``upload_from_url``
        fetch_timeout: Timeout in seconds for ``upload_from_url`` fetches

    Returns:
        A ready-to-use adapter

    Raises:
        ProviderError: Unknown provider, or missing/invalid configuration
    """
    identity = resolve_provider(provider)
    model, builder = _REGISTRY[identity]
    provider_config = _load_config(identity, model, config)

    try:
        return builder(
            provider_config,
            logger=logger,
            http_transport=http_transport,
            fetch_timeout=fetch_timeout,
        )
    except Exception as e:
        raise ProviderError(identity.value, f"Failed to initialize {identity.value} storage: {e}") from e


__all__ = ["create_storage", "resolve_provider"]
