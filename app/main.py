"""
Main Entry Module

This module serves as the application entry point, configuring FastAPI
and running the development server.

Features:
- Application factory
- CORS setup
- Security headers
- Request logging
- Router mounting
- Development server

Dependencies:
- FastAPI for API
- CORS middleware
- uvicorn for server
- Router modules
- Logging

Author: Snapped Development Team
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.features.imageupload import router as image_upload_router
from app.features.imageupload.constants import INTERNAL_ERROR_MESSAGE
from app.features.imageupload.models import UploadResult
from app.features.imageupload.routes_imageupload import UPLOAD_PATH, method_not_allowed_response
from app.features.imageupload.upload_service import UploadHandler
from app.shared.config import UploadSettings
from app.shared.security import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[UploadSettings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings (Optional[UploadSettings]): Configuration; read from the
            environment when omitted

    Returns:
        FastAPI: Configured application
    """
    settings = settings or UploadSettings.from_env()

    app = FastAPI(title="Image Upload API")
    app.state.settings = settings
    app.state.upload_handler = UploadHandler(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["POST"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """
        Log HTTP requests and responses.

        Notes:
            - Unexpected errors become a 500 envelope without details
        """
        logger.info(f"Incoming request: {request.method} {request.url.path}")
        try:
            response = await call_next(request)
            logger.info(f"Response status: {response.status_code}")
            return response
        except Exception as e:
            logger.error(f"Request failed: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content=UploadResult.failed(INTERNAL_ERROR_MESSAGE).to_content(),
            )

    @app.exception_handler(StarletteHTTPException)
    async def upload_method_handler(request: Request, exc: StarletteHTTPException):
        """Answer unrouted methods on /upload (TRACE, custom verbs) with the 405 envelope."""
        if exc.status_code == 405 and request.url.path == UPLOAD_PATH:
            logger.warning(f"Upload rejected: {request.method} {UPLOAD_PATH}")
            return method_not_allowed_response()
        return await http_exception_handler(request, exc)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Add routers
    app.include_router(image_upload_router)

    logger.info(f"Upload root: {settings.upload_root.resolve()}")
    return app


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = UploadSettings.from_env()
configure_logging(settings.log_level)
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
