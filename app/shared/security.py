"""
Security Middleware Module

This module provides security middleware for adding HTTP security headers
to every response of the upload API.

Features:
- HSTS (HTTP Strict Transport Security)
- Content Security Policy for a JSON-only API
- Frame Options
- Content Type Options
- Referrer Policy
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    # HSTS: Force HTTPS
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
    # The API only returns JSON, nothing may be loaded or framed
    'Content-Security-Policy': "default-src 'none'; frame-ancestors 'none'",
    # Prevent MIME type sniffing of responses
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'no-referrer',
    'X-Frame-Options': 'DENY',
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware for adding security headers to all responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Add security headers to response.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            Response with security headers
        """
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response
