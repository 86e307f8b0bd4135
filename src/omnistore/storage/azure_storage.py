"""
Azure Blob Storage adapter.
"""

from datetime import datetime
from typing import Any

from azure.core.exceptions import HttpResponseError, ServiceRequestError, ServiceResponseError
from azure.storage.blob import BlobSasPermissions, ContentSettings, generate_blob_sas

from .cloud_storage import (
    CloudStorage,
    FileUploadConfig,
    ObjectWrite,
    SignedUrlOperation,
    StorageProvider,
    StoredObject,
)
from .errors import SignedUrlUnavailableError, StorageError


class AzureBlobStorage(CloudStorage):
    """
    Azure Blob Storage adapter backed by a ``ContainerClient``.

    Deleting a missing blob is reported as a failure (ResourceNotFound).
    Signed URLs are SAS tokens and can only be issued when the container
    client holds a shared account key.
    """

    provider = StorageProvider.AZURE
    service_errors = (HttpResponseError,)
    transport_errors = (ServiceRequestError, ServiceResponseError)

    def __init__(self, container_client: Any, **kwargs):
        super().__init__(container_client.container_name, **kwargs)
        self._container = container_client

    async def _put_object(self, config: FileUploadConfig) -> ObjectWrite:
        blob_client = self._container.get_blob_client(config.key)
        content_settings = ContentSettings(
            content_type=config.content_type or "application/octet-stream",
            cache_control=config.cache_control,
            content_encoding=config.content_encoding,
        )

        response = await self._run_sync(
            blob_client.upload_blob,
            self._payload(config.data),
            overwrite=True,
            content_settings=content_settings,
            metadata=dict(config.metadata) if config.metadata else None,
        )
        return ObjectWrite(etag=self._unquote(response.get("etag")))

    async def _get_object(self, key: str) -> StoredObject:
        blob_client = self._container.get_blob_client(key)
        downloader = await self._run_sync(blob_client.download_blob)
        data = await self._run_sync(downloader.readall)

        properties = downloader.properties
        return StoredObject(
            data=data,
            content_type=properties.content_settings.content_type,
            size=properties.size if properties.size is not None else len(data),
            last_modified=properties.last_modified,
            etag=self._unquote(properties.etag),
            metadata=properties.metadata or {},
        )

    async def _delete_object(self, key: str) -> None:
        await self._run_sync(self._container.get_blob_client(key).delete_blob)

    async def _sign_url(
        self,
        key: str,
        expires_in: int,
        expires_at: datetime,
        operation: SignedUrlOperation,
        content_type: str | None,
    ) -> str:
        credential = self._container.credential
        account_key = getattr(credential, "account_key", None)
        if not account_key:
            raise SignedUrlUnavailableError(
                "Signed URLs require shared key authentication (account name and key)",
                self.provider,
            )

        if operation == SignedUrlOperation.WRITE:
            permission = BlobSasPermissions(write=True, create=True)
        else:
            permission = BlobSasPermissions(read=True)

        blob_client = self._container.get_blob_client(key)
        sas_token = generate_blob_sas(
            account_name=self._container.account_name,
            container_name=self.bucket_name,
            blob_name=key,
            account_key=account_key,
            permission=permission,
            expiry=expires_at,
        )
        return f"{blob_client.url}?{sas_token}"

    async def _probe(self) -> None:
        exists = await self._run_sync(self._container.exists)
        if not exists:
            raise StorageError(f"Container '{self.bucket_name}' does not exist", self.provider, status_code=404)


__all__ = ["AzureBlobStorage"]
