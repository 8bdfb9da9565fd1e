"""
Path Sanitizer Module

Validates the caller-supplied logical path. Paths are rejected rather than
stripped of bad characters, so a sanitized path is always exactly what the
caller sent.
"""

from app.shared.errors import InvalidPathError

from .constants import PATH_PATTERN, TRAVERSAL_SEGMENT
from .models import SanitizedPath


def sanitize_path(raw: str) -> SanitizedPath:
    """
    Validate a raw path string.

    Args:
        raw (str): Path string from the request

    Returns:
        SanitizedPath: The unchanged path

    Raises:
        InvalidPathError: For empty, absolute, traversing or
            disallowed-character paths
    """
    if not raw or not PATH_PATTERN.fullmatch(raw):
        raise InvalidPathError()

    if raw.startswith("/"):
        raise InvalidPathError()

    if TRAVERSAL_SEGMENT in raw.split("/"):
        raise InvalidPathError()

    return SanitizedPath(raw)
