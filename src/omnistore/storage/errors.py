"""
Error types and error normalization for storage operations.

Every vendor SDK raises its own exception hierarchy with its own idea of
where the HTTP status lives. ``StorageError.from_exception`` folds all of
them into one shape so callers never see a raw vendor exception.
"""

from collections.abc import Mapping
from typing import Any


class OmnistoreError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OmnistoreError):
    """Caller-supplied operation config is malformed."""

    def __init__(self, message: str, field: str, code: str | None = None):
        super().__init__(message)
        self.field = field
        self.code = code


class ProviderError(OmnistoreError):
    """Provider identity is unsupported or its configuration is unusable."""

    def __init__(self, provider: str, message: str):
        super().__init__(message)
        self.provider = provider


class StorageError(OmnistoreError):
    """Normalized vendor or network failure during a storage operation."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        original_error: Any | None = None,
        is_retryable: bool = False,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.original_error = original_error
        self.is_retryable = is_retryable

    @classmethod
    def from_exception(
        cls,
        error: Any,
        provider: str,
        is_retryable: bool = False,
    ) -> "StorageError":
        """
        Build a normalized error from any failure value.

        Args:
            error: Exception, mapping or arbitrary object describing the failure
            provider: Identity of the provider that produced the failure
            is_retryable: Caller's verdict; never inferred from the status code

        Returns:
            ``error`` itself when it is already a StorageError, otherwise a new one
        """
        if isinstance(error, StorageError):
            return error

        return cls(
            _extract_message(error),
            provider,
            status_code=_extract_status_code(error),
            original_error=error,
            is_retryable=is_retryable,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "provider": str(self.provider),
            "status_code": self.status_code,
            "is_retryable": self.is_retryable,
            "original_error": repr(self.original_error) if self.original_error is not None else None,
        }


class ObjectNotFoundError(StorageError):
    """Requested object does not exist."""

    pass


class SignedUrlUnavailableError(StorageError):
    """The configured credentials cannot produce signed URLs."""

    pass


def normalize_error(error: Any, provider: str, is_retryable: bool = False) -> StorageError:
    """Module-level alias of ``StorageError.from_exception``."""
    return StorageError.from_exception(error, provider, is_retryable)


def is_storage_error(error: Any) -> bool:
    return isinstance(error, StorageError)


def is_validation_error(error: Any) -> bool:
    return isinstance(error, ValidationError)


def is_provider_error(error: Any) -> bool:
    return isinstance(error, ProviderError)


# Field extraction helpers. These must never raise: exotic objects may have
# properties that fail on access.


def _lookup(source: Any, name: str) -> Any:
    try:
        if isinstance(source, Mapping):
            return source.get(name)
        return getattr(source, name, None)
    except Exception:
        return None


def _as_status(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _extract_status_code(error: Any) -> int | None:
    candidates = [
        _lookup(error, "statusCode"),
        _lookup(error, "status_code"),
        _lookup(error, "status"),
        _lookup(_lookup(error, "$metadata"), "httpStatusCode"),
        # botocore keeps transport metadata on ClientError.response
        _lookup(_lookup(_lookup(error, "response"), "ResponseMetadata"), "HTTPStatusCode"),
        # google-api-core exposes the HTTP status as an int ``code``
        _lookup(error, "code"),
    ]
    for candidate in candidates:
        status = _as_status(candidate)
        if status is not None:
            return status
    return None


def _extract_message(error: Any) -> str:
    message = _lookup(error, "message")
    if isinstance(message, str) and message.strip():
        return message

    try:
        text = str(error)
    except Exception:
        text = ""
    if text.strip():
        return text

    return type(error).__name__


__all__ = [
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
