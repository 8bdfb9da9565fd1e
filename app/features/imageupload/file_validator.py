"""
File Validator Module

This module checks an uploaded file before it is stored: transfer status,
size, detected content type and extension consistency.

Features:
- Transfer status mapping
- Size limit
- Content sniffing
- Extension cross-check

Security:
- Type detected from file bytes, never from the declared content type
- Extension must independently agree with the detected type

Dependencies:
- filetype for content sniffing
- pathlib for filename parsing

Author: Snapped Development Team
"""

import logging
from pathlib import PureWindowsPath

import filetype

from app.shared.errors import (
    ErrorKind,
    ExtensionMismatchError,
    FileTooLargeError,
    TransferError,
    UnsupportedTypeError,
)

from .constants import ALLOWED_MIME_TYPES, EXTENSION_MIME_TYPES
from .models import UploadedImage, UploadStatus, ValidatedImage

logger = logging.getLogger(__name__)

TRANSFER_ERRORS = {
    UploadStatus.INI_SIZE: ErrorKind.INI_SIZE,
    UploadStatus.FORM_SIZE: ErrorKind.FORM_SIZE,
    UploadStatus.PARTIAL: ErrorKind.PARTIAL,
    UploadStatus.NO_FILE: ErrorKind.NO_FILE,
}


def detect_mime_type(data: bytes):
    """Return the MIME type sniffed from the file header, or None."""
    if not data:
        return None
    kind = filetype.guess(data)
    return kind.mime if kind else None


def file_extension(filename: str) -> str:
    """
    Return the lower-cased extension of a client filename.

    Directory parts sent by some clients (either slash style) are dropped
    before the extension is read.
    """
    name = PureWindowsPath(filename or "").name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


class FileValidator:
    """
    Uploaded file validator.

    Attributes:
        max_file_size (int): Largest accepted file in bytes
    """

    def __init__(self, max_file_size: int):
        self.max_file_size = max_file_size

    def validate(self, image: UploadedImage) -> ValidatedImage:
        """
        Validate an uploaded file.

        Args:
            image (UploadedImage): File as received

        Returns:
            ValidatedImage: Bytes with confirmed MIME type and extension

        Raises:
            TransferError: File did not arrive intact
            FileTooLargeError: File exceeds max_file_size
            UnsupportedTypeError: Detected type not an allowed image
            ExtensionMismatchError: Extension disagrees with detected type
        """
        if image.transfer_status is not UploadStatus.OK:
            raise TransferError(TRANSFER_ERRORS[image.transfer_status])

        if image.size > self.max_file_size:
            raise FileTooLargeError()

        mime_type = detect_mime_type(image.data)
        if mime_type not in ALLOWED_MIME_TYPES:
            logger.info(
                f"Rejected {image.filename!r}: detected {mime_type}, declared {image.content_type}"
            )
            raise UnsupportedTypeError()

        extension = file_extension(image.filename)
        if EXTENSION_MIME_TYPES.get(extension) != mime_type:
            logger.info(f"Rejected {image.filename!r}: extension {extension!r} vs {mime_type}")
            raise ExtensionMismatchError()

        return ValidatedImage(data=image.data, mime_type=mime_type, extension=extension)
