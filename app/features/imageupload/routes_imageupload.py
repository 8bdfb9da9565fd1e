"""
Image Upload Routes Module

This module defines the FastAPI route for single-image uploads. The route
answers every common method, HEAD and OPTIONS included, so that non-POST
requests get the JSON 405 envelope instead of the framework default.
CORS preflights are answered by the CORS middleware before they reach
the route.

Features:
- Multipart image upload
- JSON response envelope
- Method enforcement

Dependencies:
- FastAPI for routing
- logging for tracking

Author: Snapped Development Team
"""

import logging

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from app.shared.errors import ErrorKind

from . import router
from .models import UploadResult
from .upload_service import ALLOWED_METHOD, UploadHandler

__all__ = ["upload_image", "get_upload_handler", "method_not_allowed_response", "UPLOAD_PATH"]

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/upload"
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_upload_handler(request: Request) -> UploadHandler:
    """Return the handler built by create_app() for this application."""
    return request.app.state.upload_handler


def method_not_allowed_response() -> JSONResponse:
    """405 envelope for methods the route never sees."""
    return JSONResponse(
        status_code=ErrorKind.METHOD_NOT_ALLOWED.status_code,
        content=UploadResult.failed(ErrorKind.METHOD_NOT_ALLOWED.message).to_content(),
        headers={"Allow": ALLOWED_METHOD},
    )


@router.api_route(UPLOAD_PATH, methods=ROUTE_METHODS)
async def upload_image(
    request: Request,
    handler: UploadHandler = Depends(get_upload_handler),
):
    """
    Upload a single image.

    Args:
        request (Request): multipart/form-data with `image` and `path`
        handler (UploadHandler): Configured upload handler

    Returns:
        JSONResponse: Upload result envelope

    Notes:
        - 405 for non-POST methods
        - 400 for invalid input
        - 500 for storage failures
    """
    logger.info(f"Route hit: {request.method} {UPLOAD_PATH}")
    status_code, result = await handler.handle(request)

    headers = {"Allow": ALLOWED_METHOD} if status_code == 405 else None
    return JSONResponse(status_code=status_code, content=result.to_content(), headers=headers)
