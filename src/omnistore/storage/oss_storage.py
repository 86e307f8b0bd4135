"""
Alibaba Cloud OSS adapter.
"""

from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote, urlsplit

from oss2.exceptions import RequestError, ServerError

from .cloud_storage import (
    CloudStorage,
    FileUploadConfig,
    ObjectWrite,
    SignedUrlOperation,
    StorageProvider,
    StoredObject,
)

_META_PREFIX = "x-oss-meta-"


class OSSStorage(CloudStorage):
    """
    OSS adapter backed by an ``oss2.Bucket``.

    OSS answers 204 for deletes of missing objects, so those succeed. Upload
    results carry the object's public-style URL.
    """

    provider = StorageProvider.OSS
    service_errors = (ServerError,)
    transport_errors = (RequestError,)

    def __init__(self, bucket: Any, **kwargs):
        super().__init__(bucket.bucket_name, **kwargs)
        self._bucket = bucket

    async def _put_object(self, config: FileUploadConfig) -> ObjectWrite:
        headers = {"Content-Type": config.content_type or "application/octet-stream"}
        if config.cache_control:
            headers["Cache-Control"] = config.cache_control
        if config.content_encoding:
            headers["Content-Encoding"] = config.content_encoding
        for name, value in (config.metadata or {}).items():
            headers[f"{_META_PREFIX}{name}"] = value

        result = await self._run_sync(
            self._bucket.put_object,
            config.key,
            self._payload(config.data),
            headers=headers,
        )
        return ObjectWrite(etag=self._unquote(result.etag), url=self._object_url(config.key))

    async def _get_object(self, key: str) -> StoredObject:
        result = await self._run_sync(self._bucket.get_object, key)
        data = await self._run_sync(result.read)

        metadata = {
            name[len(_META_PREFIX):]: value
            for name, value in result.headers.items()
            if name.lower().startswith(_META_PREFIX)
        }
        last_modified = None
        if result.last_modified:
            last_modified = datetime.fromtimestamp(result.last_modified, tz=timezone.utc)

        return StoredObject(
            data=data,
            content_type=result.content_type,
            size=result.content_length if result.content_length is not None else len(data),
            last_modified=last_modified,
            etag=self._unquote(result.etag),
            metadata=metadata,
        )

    async def _delete_object(self, key: str) -> None:
        await self._run_sync(self._bucket.delete_object, key)

    async def _sign_url(
        self,
        key: str,
        expires_in: int,
        expires_at: datetime,
        operation: SignedUrlOperation,
        content_type: str | None,
    ) -> str:
        if operation == SignedUrlOperation.WRITE:
            headers = {"Content-Type": content_type} if content_type else None
            return await self._run_sync(self._bucket.sign_url, "PUT", key, expires_in, headers=headers)
        return await self._run_sync(self._bucket.sign_url, "GET", key, expires_in)

    async def _probe(self) -> None:
        await self._run_sync(self._bucket.get_bucket_info)

    def _object_url(self, key: str) -> str:
        endpoint = urlsplit(self._bucket.endpoint)
        return f"{endpoint.scheme}://{self.bucket_name}.{endpoint.netloc}/{quote(key)}"


__all__ = ["OSSStorage"]
