"""
S3-compatible storage adapters.

``S3Storage`` talks to AWS S3 or any endpoint implementing the S3 API through
a boto3 client. Cloudflare R2 and Backblaze B2 speak the same protocol and
differ only in identity and in how the factory builds their client.
"""

from datetime import datetime
from typing import Any

from botocore.exceptions import ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from .cloud_storage import (
    CloudStorage,
    FileUploadConfig,
    ObjectWrite,
    SignedUrlOperation,
    StorageProvider,
    StoredObject,
)
from .errors import ObjectNotFoundError

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Storage(CloudStorage):
    """
    S3-compatible storage adapter.

    Deleting a key that does not exist succeeds, as it does in S3 itself.
    """

    provider = StorageProvider.S3
    service_errors = (ClientError,)
    transport_errors = (BotoConnectionError, HTTPClientError)

    def __init__(self, client: Any, bucket_name: str, **kwargs):
        """
        Args:
            client: boto3 S3 client
            bucket_name: Target bucket
            **kwargs: Forwarded to ``CloudStorage``
        """
        super().__init__(bucket_name, **kwargs)
        self._s3_client = client

    async def _put_object(self, config: FileUploadConfig) -> ObjectWrite:
        put_args = {
            "Bucket": self.bucket_name,
            "Key": config.key,
            "Body": self._payload(config.data),
        }
        if config.content_type:
            put_args["ContentType"] = config.content_type
        if config.metadata:
            put_args["Metadata"] = dict(config.metadata)
        if config.cache_control:
            put_args["CacheControl"] = config.cache_control
        if config.content_encoding:
            put_args["ContentEncoding"] = config.content_encoding

        response = await self._run_sync(self._s3_client.put_object, **put_args)
        return ObjectWrite(etag=self._unquote(response.get("ETag")))

    async def _get_object(self, key: str) -> StoredObject:
        try:
            response = await self._run_sync(self._s3_client.get_object, Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            self._raise_if_missing(e, key)
            raise

        data = await self._run_sync(response["Body"].read)
        return StoredObject(
            data=data,
            content_type=response.get("ContentType"),
            size=response.get("ContentLength", len(data)),
            last_modified=response.get("LastModified"),
            etag=self._unquote(response.get("ETag")),
            metadata=response.get("Metadata") or {},
        )

    async def _delete_object(self, key: str) -> None:
        await self._run_sync(self._s3_client.delete_object, Bucket=self.bucket_name, Key=key)

    async def _sign_url(
        self,
        key: str,
        expires_in: int,
        expires_at: datetime,
        operation: SignedUrlOperation,
        content_type: str | None,
    ) -> str:
        params = {"Bucket": self.bucket_name, "Key": key}
        if operation == SignedUrlOperation.WRITE:
            client_method = "put_object"
            if content_type:
                params["ContentType"] = content_type
        else:
            client_method = "get_object"

        return await self._run_sync(
            self._s3_client.generate_presigned_url,
            ClientMethod=client_method,
            Params=params,
            ExpiresIn=expires_in,
        )

    async def _probe(self) -> None:
        await self._run_sync(self._s3_client.head_bucket, Bucket=self.bucket_name)

    def _raise_if_missing(self, error: ClientError, key: str) -> None:
        error_code = error.response.get("Error", {}).get("Code", "UNKNOWN")
        if error_code in _MISSING_KEY_CODES:
            raise ObjectNotFoundError(
                f"File not found: {key}",
                self.provider,
                status_code=error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 404),
                original_error=error,
            ) from error


class R2Storage(S3Storage):
    """Cloudflare R2 through its S3-compatible endpoint."""

    provider = StorageProvider.R2


class B2Storage(S3Storage):
    """Backblaze B2 through its S3-compatible endpoint."""

    provider = StorageProvider.B2


__all__ = ["S3Storage", "R2Storage", "B2Storage"]
