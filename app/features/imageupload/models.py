"""
Image Upload Models Module

This module defines the data models passed between the stages of the
image upload pipeline and the response envelope returned to callers.

Data Model:
- Transfer status
- Uploaded image (request side)
- Sanitized path
- Validated image
- Upload result (response)

Dependencies:
- pydantic for the response model
- dataclasses for in-request records

Author: Snapped Development Team
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .constants import SUCCESS_MESSAGE


class UploadStatus(str, Enum):
    """
    Outcome of receiving the file part.

    Attributes:
        OK: File received in full
        INI_SIZE: Exceeded the server-configured limit
        FORM_SIZE: Exceeded the form-declared MAX_FILE_SIZE
        PARTIAL: Transfer was interrupted
        NO_FILE: Field sent without a file
    """
    OK = "ok"
    INI_SIZE = "ini_size"
    FORM_SIZE = "form_size"
    PARTIAL = "partial"
    NO_FILE = "no_file"


@dataclass(frozen=True)
class UploadedImage:
    """
    File part as received from the client.

    `data` is left empty when the transfer status is not OK, since the
    payload is never read in that case.
    """
    filename: str
    content_type: Optional[str]
    size: int
    data: bytes = b""
    transfer_status: UploadStatus = UploadStatus.OK


@dataclass(frozen=True)
class UploadRequest:
    image: UploadedImage
    path_string: str


class SanitizedPath(str):
    """Relative directory path that passed sanitization."""


@dataclass(frozen=True)
class ValidatedImage:
    data: bytes
    mime_type: str
    extension: str


class UploadResult(BaseModel):
    """
    Response envelope.

    Exactly one of `message` (success) or `error` (failure) is set;
    unset fields are dropped on serialization.

    Attributes:
        success (bool): Whether the file was stored
        message (Optional[str]): Success message
        error (Optional[str]): Failure message
        file_path (Optional[str]): Stored path relative to the service root
        filename (Optional[str]): Generated filename
    """
    model_config = ConfigDict(frozen=True)

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    file_path: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def stored(cls, file_path: str, filename: str) -> "UploadResult":
        return cls(success=True, message=SUCCESS_MESSAGE, file_path=file_path, filename=filename)

    @classmethod
    def failed(cls, error: str) -> "UploadResult":
        return cls(success=False, error=error)

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)
