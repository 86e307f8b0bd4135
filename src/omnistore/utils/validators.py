"""
Input validation for storage operations.

Every operation config is checked here before any adapter is called. The
checks are pure: no I/O, no clock, same input always gives the same verdict.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from ..storage.errors import ValidationError

# Configuration and Constants


class ValidationConfig:
    """Configuration for validation parameters."""

    MAX_SIGNED_URL_EXPIRY = 7 * 24 * 60 * 60  # 604800 seconds, the SigV4 ceiling
    ALLOWED_URL_SCHEMES = {"http", "https"}
    SIGNED_URL_OPERATIONS = {"read", "write"}
    DATA_TYPES = (bytes, bytearray, memoryview, str)


# Standardized Error Messages


class ErrorMessages:
    """Standardized error messages for consistent reporting."""

    CONFIG_MISSING = "Operation config is required"
    KEY_NOT_STRING = "{field} must be a string"
    KEY_EMPTY = "{field} cannot be empty"
    KEY_TRAVERSAL = "{field} cannot contain '..'"
    URL_EMPTY = "{field} cannot be empty"
    URL_INVALID = "{field} must be an absolute http or https URL"
    DATA_MISSING = "File data is required"
    DATA_INVALID_TYPE = "File data must be bytes or str"
    FIELD_NOT_STRING = "{field} must be a string"
    METADATA_INVALID = "Metadata must be a mapping of strings"
    METADATA_ENTRY_INVALID = "Metadata entry '{key}' must have a string key and value"
    EXPIRY_INVALID = "expires_in must be a positive number of seconds"
    EXPIRY_TOO_LONG = "expires_in cannot exceed {max_expiry} seconds (7 days)"
    OPERATION_INVALID = "operation must be one of: {allowed}"


class OperationValidator:
    """Validates storage operation configs."""

    @staticmethod
    def validate_key(key: Any, field_name: str = "key") -> None:
        """
        Validate an object key.

        Args:
            key: Object key to check
            field_name: Field reported in the error

        Raises:
            ValidationError: If the key is not a non-blank string free of '..'
        """
        if not isinstance(key, str):
            raise ValidationError(
                ErrorMessages.KEY_NOT_STRING.format(field=field_name), field=field_name, code="INVALID_TYPE"
            )

        if not key.strip():
            raise ValidationError(ErrorMessages.KEY_EMPTY.format(field=field_name), field=field_name, code="KEY_EMPTY")

        if ".." in key:
            raise ValidationError(
                ErrorMessages.KEY_TRAVERSAL.format(field=field_name), field=field_name, code="PATH_TRAVERSAL"
            )

    @staticmethod
    def validate_url(url: Any, field_name: str = "url") -> None:
        """Validate that ``url`` is an absolute http(s) URL with a host."""
        if not isinstance(url, str) or not url.strip():
            raise ValidationError(ErrorMessages.URL_EMPTY.format(field=field_name), field=field_name, code="URL_EMPTY")

        try:
            parsed = urlparse(url.strip())
        except ValueError:
            parsed = None

        if parsed is None or parsed.scheme.lower() not in ValidationConfig.ALLOWED_URL_SCHEMES or not parsed.netloc:
            raise ValidationError(
                ErrorMessages.URL_INVALID.format(field=field_name), field=field_name, code="INVALID_URL"
            )

    @staticmethod
    def validate_metadata(metadata: Any) -> None:
        """Validate optional user metadata: a mapping of string keys to string values."""
        if metadata is None:
            return

        if not isinstance(metadata, Mapping):
            raise ValidationError(ErrorMessages.METADATA_INVALID, field="metadata", code="INVALID_METADATA")

        for name, value in metadata.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise ValidationError(
                    ErrorMessages.METADATA_ENTRY_INVALID.format(key=name), field="metadata", code="INVALID_METADATA"
                )

    @staticmethod
    def validate_upload(config: Any) -> None:
        """Validate a FileUploadConfig."""
        OperationValidator._require_config(config)
        OperationValidator.validate_key(config.key)

        data = config.data
        if data is None:
            raise ValidationError(ErrorMessages.DATA_MISSING, field="data", code="DATA_MISSING")
        if not isinstance(data, ValidationConfig.DATA_TYPES):
            raise ValidationError(ErrorMessages.DATA_INVALID_TYPE, field="data", code="INVALID_TYPE")
        if len(data) == 0:
            raise ValidationError(ErrorMessages.DATA_MISSING, field="data", code="DATA_MISSING")

        OperationValidator._optional_string(config.content_type, "content_type")
        OperationValidator.validate_metadata(config.metadata)
        OperationValidator._optional_string(config.cache_control, "cache_control")
        OperationValidator._optional_string(config.content_encoding, "content_encoding")

    @staticmethod
    def validate_url_upload(config: Any) -> None:
        """Validate a UrlUploadConfig."""
        OperationValidator._require_config(config)
        OperationValidator.validate_key(config.key)
        OperationValidator.validate_url(config.url)
        OperationValidator._optional_string(config.content_type, "content_type")
        OperationValidator.validate_metadata(config.metadata)
        OperationValidator._optional_string(config.cache_control, "cache_control")

    @staticmethod
    def validate_download(config: Any) -> None:
        OperationValidator._require_config(config)
        OperationValidator.validate_key(config.key)

    @staticmethod
    def validate_delete(config: Any) -> None:
        OperationValidator._require_config(config)
        OperationValidator.validate_key(config.key)

    @staticmethod
    def validate_signed_url(config: Any) -> None:
        """
        Validate a SignedUrlConfig.

        ``expires_in`` must be a positive int or float (booleans are rejected)
        no larger than seven days; ``operation`` must be read or write.
        """
        OperationValidator._require_config(config)
        OperationValidator.validate_key(config.key)

        expires_in = config.expires_in
        if expires_in is not None:
            if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)) or not expires_in > 0:
                raise ValidationError(ErrorMessages.EXPIRY_INVALID, field="expires_in", code="INVALID_EXPIRY")
            if expires_in > ValidationConfig.MAX_SIGNED_URL_EXPIRY:
                raise ValidationError(
                    ErrorMessages.EXPIRY_TOO_LONG.format(max_expiry=ValidationConfig.MAX_SIGNED_URL_EXPIRY),
                    field="expires_in",
                    code="EXPIRY_TOO_LONG",
                )

        operation = config.operation
        if operation is not None:
            value = getattr(operation, "value", operation)
            if not isinstance(value, str) or value not in ValidationConfig.SIGNED_URL_OPERATIONS:
                raise ValidationError(
                    ErrorMessages.OPERATION_INVALID.format(
                        allowed=", ".join(sorted(ValidationConfig.SIGNED_URL_OPERATIONS))
                    ),
                    field="operation",
                    code="INVALID_OPERATION",
                )

        OperationValidator._optional_string(config.content_type, "content_type")

    # Private helper methods

    @staticmethod
    def _require_config(config: Any) -> None:
        if config is None:
            raise ValidationError(ErrorMessages.CONFIG_MISSING, field="config", code="CONFIG_MISSING")

    @staticmethod
    def _optional_string(value: Any, field_name: str) -> None:
        if value is not None and not isinstance(value, str):
            raise ValidationError(
                ErrorMessages.FIELD_NOT_STRING.format(field=field_name), field=field_name, code="INVALID_TYPE"
            )


__all__ = ["OperationValidator", "ValidationConfig", "ErrorMessages"]
