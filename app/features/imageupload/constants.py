"""
Image Upload Constants Module

This module defines constants used throughout the image upload feature
for type checking, path validation and response messages.

Features:
- Allowed image MIME types
- Extension mapping
- Path character set
- Response messages

Dependencies:
- None (pure Python)

Author: Snapped Development Team
"""

import re

# Allowed image MIME types, as reported by content sniffing
ALLOWED_MIME_TYPES = frozenset([
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
])

# Extension -> MIME type; jpg and jpeg both map to image/jpeg
EXTENSION_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

# Path strings may only use these characters
PATH_PATTERN = re.compile(r"^[A-Za-z0-9/_-]+$")
TRAVERSAL_SEGMENT = ".."

# Form field names
IMAGE_FIELD = "image"
PATH_FIELD = "path"
FORM_SIZE_FIELD = "MAX_FILE_SIZE"

# Room for the path field, part headers and boundaries on top of the file itself
FORM_OVERHEAD = 64 * 1024

# Response messages
SUCCESS_MESSAGE = "Image uploaded successfully."
INTERNAL_ERROR_MESSAGE = "Internal server error."
