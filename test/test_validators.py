from typing import Any

import pytest

from omnistore.storage.cloud_storage import (
    FileDeleteConfig,
    FileDownloadConfig,
    FileUploadConfig,
    SignedUrlConfig,
    SignedUrlOperation,
    UrlUploadConfig,
)
from omnistore.storage.errors import ValidationError
from omnistore.utils.validators import OperationValidator


def test_key_validator_accepts_nested_keys() -> None:
    assert OperationValidator.validate_key("images/2024/photo.jpg") is None, "Valid key should pass"


@pytest.mark.parametrize("key", ["", "   ", "\t\n"])
def test_key_validator_rejects_blank(key: str) -> None:
    with pytest.raises(ValidationError, match="key cannot be empty") as exc_info:
        OperationValidator.validate_key(key)
    assert exc_info.value.field == "key"


@pytest.mark.parametrize("key", ["../etc/passwd", "a/../b", "a..b", ".."])
def test_key_validator_rejects_traversal(key: str) -> None:
    with pytest.raises(ValidationError, match=r"cannot contain '\.\.'"):
        OperationValidator.validate_key(key)


@pytest.mark.parametrize("key", [None, 123, b"bytes-key"])
def test_key_validator_rejects_non_strings(key: Any) -> None:
    with pytest.raises(ValidationError, match="key must be a string"):
        OperationValidator.validate_key(key)


def test_key_validator_reports_custom_field() -> None:
    with pytest.raises(ValidationError) as exc_info:
        OperationValidator.validate_key("", field_name="destination")
    assert exc_info.value.field == "destination"


def test_url_validator() -> None:
    assert OperationValidator.validate_url("https://example.com/image.jpg") is None
    assert OperationValidator.validate_url("http://localhost:9000/file") is None


@pytest.mark.parametrize("url", ["ftp://example.com/file", "example.com/file", "https://", "not a url", "", None])
def test_url_validator_rejects_invalid(url: Any) -> None:
    with pytest.raises(ValidationError) as exc_info:
        OperationValidator.validate_url(url)
    assert exc_info.value.field == "url"


def test_metadata_validator() -> None:
    assert OperationValidator.validate_metadata(None) is None
    assert OperationValidator.validate_metadata({"author": "jane", "source": "upload"}) is None


def test_metadata_validator_names_offending_key() -> None:
    with pytest.raises(ValidationError, match="'version'"):
        OperationValidator.validate_metadata({"author": "jane", "version": 2})


def test_metadata_validator_rejects_non_mapping() -> None:
    with pytest.raises(ValidationError, match="Metadata must be a mapping"):
        OperationValidator.validate_metadata(["author", "jane"])


def test_upload_validator() -> None:
    assert OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data=b"hello")) is None
    assert OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data="hello")) is None


@pytest.mark.parametrize("data", [None, b"", ""])
def test_upload_validator_requires_data(data: Any) -> None:
    with pytest.raises(ValidationError, match="File data is required") as exc_info:
        OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data=data))
    assert exc_info.value.field == "data"


def test_upload_validator_rejects_unsupported_data() -> None:
    with pytest.raises(ValidationError, match="File data must be bytes or str"):
        OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data=12345))


def test_upload_validator_checks_optional_fields() -> None:
    with pytest.raises(ValidationError, match="content_type must be a string"):
        OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data=b"x", content_type=7))
    with pytest.raises(ValidationError, match="cache_control must be a string"):
        OperationValidator.validate_upload(FileUploadConfig(key="a.txt", data=b"x", cache_control=3600))


def test_upload_validator_rejects_traversal_key() -> None:
    with pytest.raises(ValidationError):
        OperationValidator.validate_upload(FileUploadConfig(key="../secret", data=b"x"))


def test_url_upload_validator() -> None:
    config = UrlUploadConfig(key="images/cat.jpg", url="https://example.com/cat.jpg")
    assert OperationValidator.validate_url_upload(config) is None

    with pytest.raises(ValidationError) as exc_info:
        OperationValidator.validate_url_upload(UrlUploadConfig(key="images/cat.jpg", url="file:///etc/passwd"))
    assert exc_info.value.field == "url"


def test_download_and_delete_validators() -> None:
    assert OperationValidator.validate_download(FileDownloadConfig(key="a.txt")) is None
    assert OperationValidator.validate_delete(FileDeleteConfig(key="a.txt")) is None

    with pytest.raises(ValidationError):
        OperationValidator.validate_download(FileDownloadConfig(key="a/../b"))
    with pytest.raises(ValidationError):
        OperationValidator.validate_delete(FileDeleteConfig(key=""))


@pytest.mark.parametrize(
    "validator",
    [
        OperationValidator.validate_upload,
        OperationValidator.validate_url_upload,
        OperationValidator.validate_download,
        OperationValidator.validate_delete,
        OperationValidator.validate_signed_url,
    ],
)
def test_missing_config_is_rejected(validator: Any) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validator(None)
    assert exc_info.value.field == "config"


def test_signed_url_validator() -> None:
    assert OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt")) is None
    assert OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", expires_in=604800)) is None
    assert OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", expires_in=90.5)) is None
    assert (
        OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", operation=SignedUrlOperation.WRITE))
        is None
    )
    assert OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", operation="read")) is None


def test_signed_url_validator_rejects_long_expiry() -> None:
    with pytest.raises(ValidationError, match="cannot exceed 604800 seconds"):
        OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", expires_in=604801))


@pytest.mark.parametrize("expires_in", [0, -5, True, "3600", float("nan")])
def test_signed_url_validator_rejects_bad_expiry(expires_in: Any) -> None:
    with pytest.raises(ValidationError) as exc_info:
        OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", expires_in=expires_in))
    assert exc_info.value.field == "expires_in"


@pytest.mark.parametrize("operation", ["delete", "READ", 1])
def test_signed_url_validator_rejects_unknown_operation(operation: Any) -> None:
    with pytest.raises(ValidationError, match="operation must be one of: read, write"):
        OperationValidator.validate_signed_url(SignedUrlConfig(key="a.txt", operation=operation))
