"""
Test Upload Validation

This module tests the validation stages including:
- Path sanitization
- Transfer status extraction
- Size, type and extension checks
"""

import io

import pytest
from starlette.datastructures import UploadFile

from app.features.imageupload.file_validator import FileValidator, file_extension
from app.features.imageupload.models import UploadedImage, UploadStatus
from app.features.imageupload.path_sanitizer import sanitize_path
from app.features.imageupload.upload_service import extract_image
from app.shared.errors import (
    ClientInputError,
    ErrorKind,
    ExtensionMismatchError,
    FileTooLargeError,
    InvalidPathError,
    TransferError,
    UnsupportedTypeError,
)

MAX_SIZE = 5242880


@pytest.fixture
def validator():
    return FileValidator(MAX_SIZE)


def uploaded(data, filename="photo.jpg", status=UploadStatus.OK):
    return UploadedImage(
        filename=filename, content_type="image/jpeg", size=len(data),
        data=data, transfer_status=status,
    )


@pytest.mark.parametrize("path", [
    "9897/profile",
    "a",
    "A-Z_0-9",
    "deep/nested/dir/structure",
    "trailing/",
    "double//slash",
])
def test_sanitize_valid_path_is_identity(path):
    assert sanitize_path(path) == path


@pytest.mark.parametrize("path", [
    "",
    "/etc",
    "../../etc/passwd",
    "a/../b",
    "..",
    "a/./b",
    "a\\b",
    "name with space",
    "semi;colon",
    "tab\tchar",
    "new\nline",
    "%2e%2e/x",
])
def test_sanitize_rejects(path):
    with pytest.raises(InvalidPathError) as exc:
        sanitize_path(path)
    assert exc.value.kind is ErrorKind.INVALID_PATH
    assert exc.value.status_code == 400


@pytest.mark.parametrize("filename,expected", [
    ("photo.jpg", "jpg"),
    ("PHOTO.JPEG", "jpeg"),
    ("archive.tar.png", "png"),
    ("C:\\Users\\me\\pic.webp", "webp"),
    ("dir/sub/pic.gif", "gif"),
    ("noext", ""),
    ("", ""),
])
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_validate_accepts_jpeg(validator, jpeg_bytes):
    result = validator.validate(uploaded(jpeg_bytes))

    assert result.mime_type == "image/jpeg"
    assert result.extension == "jpg"
    assert result.data == jpeg_bytes


@pytest.mark.parametrize("kind,filename,mime", [
    ("png", "a.png", "image/png"),
    ("gif", "a.gif", "image/gif"),
    ("webp", "a.webp", "image/webp"),
    ("jpeg", "a.jpeg", "image/jpeg"),
])
def test_validate_accepts_allowed_types(validator, image_factory, kind, filename, mime):
    result = validator.validate(uploaded(image_factory(kind), filename=filename))
    assert result.mime_type == mime


@pytest.mark.parametrize("status,kind", [
    (UploadStatus.INI_SIZE, ErrorKind.INI_SIZE),
    (UploadStatus.FORM_SIZE, ErrorKind.FORM_SIZE),
    (UploadStatus.PARTIAL, ErrorKind.PARTIAL),
    (UploadStatus.NO_FILE, ErrorKind.NO_FILE),
])
def test_validate_transfer_status(validator, status, kind):
    with pytest.raises(TransferError) as exc:
        validator.validate(uploaded(b"", status=status))
    assert exc.value.kind is kind
    assert exc.value.status_code == 400


def test_validate_too_large_before_type(validator):
    # Not an image either; size wins
    with pytest.raises(FileTooLargeError):
        validator.validate(uploaded(b"x" * (MAX_SIZE + 1)))


def test_validate_unsupported_type(validator, pdf_bytes):
    with pytest.raises(UnsupportedTypeError):
        validator.validate(uploaded(pdf_bytes))


def test_validate_empty_file(validator):
    with pytest.raises(UnsupportedTypeError):
        validator.validate(uploaded(b""))


def test_validate_extension_mismatch(validator, png_bytes):
    with pytest.raises(ExtensionMismatchError):
        validator.validate(uploaded(png_bytes, filename="photo.gif"))


def test_validate_missing_extension(validator, png_bytes):
    with pytest.raises(ExtensionMismatchError):
        validator.validate(uploaded(png_bytes, filename="photo"))


def test_errors_are_client_input(validator, pdf_bytes):
    with pytest.raises(ClientInputError):
        validator.validate(uploaded(pdf_bytes))


def test_extract_image_no_file():
    upload = UploadFile(file=io.BytesIO(b""), filename="")

    image = extract_image(upload, server_max_filesize=MAX_SIZE)

    assert image.transfer_status is UploadStatus.NO_FILE


def test_extract_image_reads_payload(jpeg_bytes):
    upload = UploadFile(file=io.BytesIO(jpeg_bytes), filename="photo.jpg")

    image = extract_image(upload, server_max_filesize=MAX_SIZE)

    assert image.transfer_status is UploadStatus.OK
    assert image.data == jpeg_bytes
    assert image.size == len(jpeg_bytes)


def test_extract_image_server_limit_wins_over_form_limit():
    upload = UploadFile(file=io.BytesIO(b"x" * 100), filename="photo.jpg")

    image = extract_image(upload, server_max_filesize=50, form_max_filesize=10)

    assert image.transfer_status is UploadStatus.INI_SIZE
    assert image.data == b""


def test_extract_image_form_limit():
    upload = UploadFile(file=io.BytesIO(b"x" * 100), filename="photo.jpg")

    image = extract_image(upload, server_max_filesize=1000, form_max_filesize=99)

    assert image.transfer_status is UploadStatus.FORM_SIZE
    assert image.size == 100
