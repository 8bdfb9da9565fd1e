"""
Upload Errors Module

This module defines the failure taxonomy for the image upload service.
Every failure carries an ErrorKind, which fixes both the HTTP status and
the verbatim message returned to the caller.

Features:
- Error kinds with status codes
- Verbatim client messages
- Client input errors (400/405)
- Server environment errors (500)

Author: Snapped Development Team
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Upload failure kinds.

    Attributes:
        METHOD_NOT_ALLOWED: Request method other than POST
        MISSING_FIELDS: Image or path field absent
        INI_SIZE: Body exceeded the server-configured limit
        FORM_SIZE: Body exceeded the form-declared limit
        PARTIAL: Transfer was interrupted
        NO_FILE: File field sent without a file
        FILE_TOO_LARGE: File exceeded the application limit
        UNSUPPORTED_TYPE: Detected type is not an allowed image
        INVALID_PATH: Path string failed sanitization
        EXTENSION_MISMATCH: Extension disagrees with detected type
        DIRECTORY_CREATE_FAILED: Target directory could not be created
        MOVE_FAILED: File could not be placed at its destination
    """
    METHOD_NOT_ALLOWED = "method_not_allowed"
    MISSING_FIELDS = "missing_fields"
    INI_SIZE = "ini_size"
    FORM_SIZE = "form_size"
    PARTIAL = "partial"
    NO_FILE = "no_file"
    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_TYPE = "unsupported_type"
    INVALID_PATH = "invalid_path"
    EXTENSION_MISMATCH = "extension_mismatch"
    DIRECTORY_CREATE_FAILED = "directory_create_failed"
    MOVE_FAILED = "move_failed"

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self]

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    ErrorKind.METHOD_NOT_ALLOWED: "Method not allowed. Only POST requests are accepted.",
    ErrorKind.MISSING_FIELDS: "Missing required fields. Both image and path are required.",
    ErrorKind.INI_SIZE: "File exceeds upload_max_filesize directive in php.ini",
    ErrorKind.FORM_SIZE: "File exceeds MAX_FILE_SIZE directive in HTML form",
    ErrorKind.PARTIAL: "File was only partially uploaded",
    ErrorKind.NO_FILE: "No file was uploaded",
    ErrorKind.FILE_TOO_LARGE: "File size exceeds maximum allowed size of 5MB.",
    ErrorKind.UNSUPPORTED_TYPE: "Invalid file type. Only image files (JPEG, PNG, GIF, WebP) are allowed.",
    ErrorKind.INVALID_PATH: (
        "Invalid path string. Path must contain only alphanumeric characters, "
        "slashes, hyphens, and underscores."
    ),
    ErrorKind.EXTENSION_MISMATCH: "File extension does not match file type.",
    ErrorKind.DIRECTORY_CREATE_FAILED: "Failed to create directory structure.",
    ErrorKind.MOVE_FAILED: "Failed to move uploaded file to destination.",
}

ERROR_STATUS_CODES = {
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.MISSING_FIELDS: 400,
    ErrorKind.INI_SIZE: 400,
    ErrorKind.FORM_SIZE: 400,
    ErrorKind.PARTIAL: 400,
    ErrorKind.NO_FILE: 400,
    ErrorKind.FILE_TOO_LARGE: 400,
    ErrorKind.UNSUPPORTED_TYPE: 400,
    ErrorKind.INVALID_PATH: 400,
    ErrorKind.EXTENSION_MISMATCH: 400,
    ErrorKind.DIRECTORY_CREATE_FAILED: 500,
    ErrorKind.MOVE_FAILED: 500,
}


class UploadError(Exception):
    """
    Base class for upload failures.

    Subclasses pin a default kind; TransferError takes it at construction
    since one class covers several transfer outcomes.
    """
    kind: ErrorKind = None

    def __init__(self, kind: ErrorKind = None):
        if kind is not None:
            self.kind = kind
        if self.kind is None:
            raise TypeError(f"{type(self).__name__} requires an ErrorKind")
        super().__init__(self.kind.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def message(self) -> str:
        return self.kind.message


class ClientInputError(UploadError):
    """Caller-correctable failure (HTTP 400/405)."""


class MethodNotAllowedError(ClientInputError):
    kind = ErrorKind.METHOD_NOT_ALLOWED


class MissingFieldsError(ClientInputError):
    kind = ErrorKind.MISSING_FIELDS


class InvalidPathError(ClientInputError):
    kind = ErrorKind.INVALID_PATH


class TransferError(ClientInputError):
    """File did not arrive intact (server limit, form limit, partial, absent)."""


class FileTooLargeError(ClientInputError):
    kind = ErrorKind.FILE_TOO_LARGE


class UnsupportedTypeError(ClientInputError):
    kind = ErrorKind.UNSUPPORTED_TYPE


class ExtensionMismatchError(ClientInputError):
    kind = ErrorKind.EXTENSION_MISMATCH


class ServerEnvironmentError(UploadError):
    """Misconfiguration or resource exhaustion on the server (HTTP 500)."""


class DirectoryCreateError(ServerEnvironmentError):
    kind = ErrorKind.DIRECTORY_CREATE_FAILED


class MoveFailedError(ServerEnvironmentError):
    kind = ErrorKind.MOVE_FAILED
