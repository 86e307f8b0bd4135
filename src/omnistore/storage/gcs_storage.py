"""
Google Cloud Storage adapter.
"""

from datetime import datetime, timedelta
from typing import Any

from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import TransportError
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout

from .cloud_storage import (
    CloudStorage,
    FileUploadConfig,
    ObjectWrite,
    SignedUrlOperation,
    StorageProvider,
    StoredObject,
)
from .errors import ObjectNotFoundError, StorageError


class GCSStorage(CloudStorage):
    """
    Google Cloud Storage adapter backed by a ``google.cloud.storage.Bucket``.

    Unlike S3, deleting a missing object is reported as a failure, since the
    service answers with 404 Not Found.
    """

    provider = StorageProvider.GCS
    service_errors = (GoogleAPICallError,)
    transport_errors = (RequestsConnectionError, Timeout, TransportError)

    def __init__(self, bucket: Any, **kwargs):
        super().__init__(bucket.name, **kwargs)
        self._bucket = bucket

    async def _put_object(self, config: FileUploadConfig) -> ObjectWrite:
        blob = self._bucket.blob(config.key)
        if config.cache_control:
            blob.cache_control = config.cache_control
        if config.content_encoding:
            blob.content_encoding = config.content_encoding
        if config.metadata:
            blob.metadata = dict(config.metadata)

        await self._run_sync(
            blob.upload_from_string,
            self._payload(config.data),
            content_type=config.content_type or "application/octet-stream",
        )
        return ObjectWrite(etag=self._unquote(blob.etag))

    async def _get_object(self, key: str) -> StoredObject:
        blob = await self._run_sync(self._bucket.get_blob, key)
        if blob is None:
            raise ObjectNotFoundError(f"File not found: {key}", self.provider, status_code=404)

        data = await self._run_sync(blob.download_as_bytes)
        return StoredObject(
            data=data,
            content_type=blob.content_type,
            size=blob.size if blob.size is not None else len(data),
            last_modified=blob.updated,
            etag=self._unquote(blob.etag),
            metadata=blob.metadata or {},
        )

    async def _delete_object(self, key: str) -> None:
        await self._run_sync(self._bucket.blob(key).delete)

    async def _sign_url(
        self,
        key: str,
        expires_in: int,
        expires_at: datetime,
        operation: SignedUrlOperation,
        content_type: str | None,
    ) -> str:
        sign_args = {
            "version": "v4",
            "expiration": timedelta(seconds=expires_in),
            "method": "PUT" if operation == SignedUrlOperation.WRITE else "GET",
        }
        if operation == SignedUrlOperation.WRITE and content_type:
            sign_args["content_type"] = content_type

        return await self._run_sync(self._bucket.blob(key).generate_signed_url, **sign_args)

    async def _probe(self) -> None:
        exists = await self._run_sync(self._bucket.exists)
        if not exists:
            raise StorageError(f"Bucket '{self.bucket_name}' does not exist", self.provider, status_code=404)


__all__ = ["GCSStorage"]
