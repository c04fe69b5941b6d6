"""
Response hardening for the JSON API.

Every response outside the docs UI gets a fixed set of headers: no framing,
no MIME sniffing, a Content-Security-Policy that allows loading nothing, and
no caching since schedules differ per user. HSTS is added in production only.
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

CSP_DIRECTIVES = (
    "default-src 'none'",
    "frame-ancestors 'none'",
    "base-uri 'none'",
    "form-action 'none'",
)

STATIC_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "; ".join(CSP_DIRECTIVES),
}

HSTS_HEADER = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ())
        logger.info(f"🛡️ Security headers enabled (excluded: {list(self.exclude_paths)})")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        if self.exclude_paths and request.url.path.startswith(self.exclude_paths):
            return response

        response.headers.update(STATIC_HEADERS)
        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        response.headers.setdefault("Cache-Control", "no-store")
        return response
