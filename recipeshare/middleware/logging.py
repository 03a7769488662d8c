"""
RecipeShare Backend - Access Log Middleware
============================================

What:  One access-log line per recipe API call.
How:   Times the downstream call, then logs method, path, status, elapsed
       time, request size and the request ID set by RequestIDMiddleware.

Example line:
    2024-06-10T16:00:00 [INFO] recipeshare.access: POST /add-recipe → 201 (12.4ms, 20480B in) [a1b2c3d4]

Only the declared Content-Length is recorded; bodies and uploaded image
bytes are never read here.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from recipeshare.middleware.request_id import request_id_var

logger = logging.getLogger("recipeshare.access")

# Probes and image fetches are not API calls
UNLOGGED_PREFIXES = ("/health", "/assets/")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access log; a 4xx logs as WARNING and a 5xx as ERROR."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(UNLOGGED_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        size_in = int(request.headers.get("content-length") or 0)
        logger.log(
            level_for_status(response.status_code),
            "%s %s → %d (%.1fms, %dB in) [%s]",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            size_in,
            request_id_var.get(""),
        )
        return response
