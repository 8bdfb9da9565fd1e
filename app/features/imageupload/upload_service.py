"""
Upload Service Module

This module provides the business logic for handling image uploads:
it runs the request through each pipeline stage and turns the outcome
into a response envelope and status code.

Features:
- Method check
- Multipart field extraction
- Path sanitization
- File validation
- Filename generation
- Atomic storage

Data Model:
- Upload request
- Validated image
- Upload result

Dependencies:
- Starlette for request and form handling
- python-multipart for reading the Content-Type boundary
- logging for tracking
- typing for type hints

Author: Snapped Development Team
"""

import logging
import os
from typing import Optional, Tuple

from python_multipart.multipart import parse_options_header
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect, Request
from starlette.types import Message, Receive

from app.shared.config import UploadSettings
from app.shared.errors import (
    ClientInputError,
    ErrorKind,
    MethodNotAllowedError,
    MissingFieldsError,
    TransferError,
    UploadError,
)

from .constants import FORM_OVERHEAD, FORM_SIZE_FIELD, IMAGE_FIELD, PATH_FIELD
from .file_validator import FileValidator
from .filename_generator import FilenameGenerator
from .models import UploadedImage, UploadRequest, UploadResult, UploadStatus
from .path_sanitizer import sanitize_path
from .storage_writer import StorageWriter

logger = logging.getLogger(__name__)

ALLOWED_METHOD = "POST"


def _form_size_limit(value) -> Optional[int]:
    """Parse the optional MAX_FILE_SIZE form field; ignore anything non-numeric."""
    if not isinstance(value, str):
        return None
    try:
        limit = int(value.strip())
    except ValueError:
        return None
    return limit if limit > 0 else None


def _multipart_boundary(content_type: Optional[str]) -> Optional[bytes]:
    """Return the boundary of a multipart/form-data body, if it declares one."""
    media_type, options = parse_options_header(content_type)
    if media_type.lower() != b"multipart/form-data":
        return None
    return options.get(b"boundary") or None


def _replay(body: bytes) -> Receive:
    """Build a receive callable that hands an already-read body to the form parser."""
    sent = False

    async def receive() -> Message:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


def _measure(upload: UploadFile) -> int:
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def extract_image(
    upload: UploadFile,
    server_max_filesize: int,
    form_max_filesize: Optional[int] = None,
) -> UploadedImage:
    """
    Build an UploadedImage from a parsed file part.

    Args:
        upload (UploadFile): File part from the form
        server_max_filesize (int): Server-level limit in bytes
        form_max_filesize (Optional[int]): Form-declared limit in bytes

    Returns:
        UploadedImage: File view with its transfer status

    Notes:
        - Payload is only read when the transfer status is OK
        - An empty filename means the field was sent without a file
    """
    filename = upload.filename or ""
    content_type = upload.content_type

    if not filename:
        return UploadedImage(
            filename=filename, content_type=content_type, size=0,
            transfer_status=UploadStatus.NO_FILE,
        )

    size = _measure(upload)
    if size > server_max_filesize:
        status = UploadStatus.INI_SIZE
    elif form_max_filesize is not None and size > form_max_filesize:
        status = UploadStatus.FORM_SIZE
    else:
        status = UploadStatus.OK

    if status is not UploadStatus.OK:
        return UploadedImage(
            filename=filename, content_type=content_type, size=size,
            transfer_status=status,
        )

    data = upload.file.read()
    return UploadedImage(filename=filename, content_type=content_type, size=len(data), data=data)


class UploadHandler:
    """
    Image upload handler.

    Runs MethodCheck -> FieldPresenceCheck -> PathSanitize -> FileValidate
    -> FilenameGenerate -> StorageWrite, stopping at the first failure.

    Attributes:
        settings (UploadSettings): Service configuration
        validator (FileValidator): File checks
        generator (FilenameGenerator): Stored filename source
        writer (StorageWriter): Filesystem placement
    """

    def __init__(
        self,
        settings: UploadSettings,
        validator: Optional[FileValidator] = None,
        generator: Optional[FilenameGenerator] = None,
        writer: Optional[StorageWriter] = None,
    ):
        """Initialize handler and its pipeline stages from settings."""
        self.settings = settings
        self.validator = validator or FileValidator(settings.max_file_size)
        self.generator = generator or FilenameGenerator(settings.random_hex_length)
        self.writer = writer or StorageWriter(settings.upload_root)

    async def handle(self, request: Request) -> Tuple[int, UploadResult]:
        """
        Process one upload request.

        Args:
            request (Request): Incoming HTTP request

        Returns:
            Tuple[int, UploadResult]: HTTP status code and response envelope
        """
        form = None
        try:
            if request.method != ALLOWED_METHOD:
                raise MethodNotAllowedError()

            form = await self._read_form(request)
            upload_request = await self.extract_fields(form)
            return 200, await self.process(upload_request)

        except ClientInputError as e:
            logger.warning(f"Upload rejected ({e.kind.value}): {e.message}")
            return e.status_code, UploadResult.failed(e.message)
        except UploadError as e:
            logger.error(f"Upload failed ({e.kind.value}): {e.message}")
            return e.status_code, UploadResult.failed(e.message)
        finally:
            if form is not None:
                await form.close()

    async def _read_body(self, request: Request) -> bytes:
        """
        Read the raw request body, refusing anything over the server limit.

        The declared Content-Length is checked first so oversized requests are
        rejected before any of the body is read; bodies without one are counted
        as they arrive.

        Raises:
            TransferError: INI_SIZE when the body is too large, PARTIAL when
                the client disconnects
        """
        limit = self.settings.server_max_filesize + FORM_OVERHEAD
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > limit:
            logger.warning(f"Declared body of {declared} bytes exceeds {limit}")
            raise TransferError(ErrorKind.INI_SIZE)

        chunks = []
        received = 0
        try:
            async for chunk in request.stream():
                received += len(chunk)
                if received > limit:
                    logger.warning(f"Body exceeded {limit} bytes while streaming")
                    raise TransferError(ErrorKind.INI_SIZE)
                chunks.append(chunk)
        except ClientDisconnect as e:
            logger.warning("Client disconnected while sending the form")
            raise TransferError(ErrorKind.PARTIAL) from e
        return b"".join(chunks)

    async def _read_form(self, request: Request) -> FormData:
        body = await self._read_body(request)

        boundary = _multipart_boundary(request.headers.get("content-type"))
        if boundary is not None and b"--" + boundary + b"--" not in body:
            # The parser accepts a body cut off mid-part and keeps the fields it saw
            logger.warning("Multipart body ended before its closing boundary")
            raise TransferError(ErrorKind.PARTIAL)

        try:
            return await Request(request.scope, _replay(body)).form()
        except (MultiPartException, StarletteHTTPException) as e:
            # Malformed bodies do not reveal which fields arrived
            logger.warning(f"Could not parse multipart body: {str(e)}")
            raise TransferError(ErrorKind.PARTIAL) from e

    async def extract_fields(self, form: FormData) -> UploadRequest:
        """
        Pull the image and path fields out of the parsed form.

        Raises:
            MissingFieldsError: If either field is absent or image is not a file
        """
        upload = form.get(IMAGE_FIELD)
        path_string = form.get(PATH_FIELD)
        if not isinstance(upload, UploadFile) or not isinstance(path_string, str):
            raise MissingFieldsError()

        # Large parts are spooled to disk, so reading them blocks
        image = await run_in_threadpool(
            extract_image,
            upload,
            server_max_filesize=self.settings.server_max_filesize,
            form_max_filesize=_form_size_limit(form.get(FORM_SIZE_FIELD)),
        )
        return UploadRequest(image=image, path_string=path_string)

    async def process(self, upload_request: UploadRequest) -> UploadResult:
        """
        Sanitize, validate, name and store an extracted upload.

        Args:
            upload_request (UploadRequest): Extracted fields

        Returns:
            UploadResult: Success envelope

        Raises:
            UploadError: From any failing stage
        """
        sanitized = sanitize_path(upload_request.path_string)
        image = self.validator.validate(upload_request.image)
        filename = self.generator.generate(image.extension)

        await run_in_threadpool(self.writer.place, sanitized, filename, image.data)

        file_path = "/".join(
            part for part in (self.settings.upload_url_prefix, sanitized, filename) if part
        )
        logger.info(f"Image uploaded: {file_path} ({image.mime_type})")
        return UploadResult.stored(file_path=file_path, filename=filename)
