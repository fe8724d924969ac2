"""Request timing, session tracing and security-header middleware."""
import logging
import re
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("garment-calc.middleware")

SKIP_LOG_PATHS = {"/health"}

_SESSION_PATH = re.compile(r"^/api/calculator/sessions/([^/]+)")


def session_id_from_path(path: str) -> Optional[str]:
    """Calculator session id embedded in a request path, if any."""
    match = _SESSION_PATH.match(path)
    return match.group(1) if match else None


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Tags every response with X-Request-ID and X-Process-Time, and logs one
    line per calculator request (except /health) carrying the session id
    that the edit was applied to.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        start_time = time.perf_counter()
        request.state.request_id = request_id

        response: Response = await call_next(request)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)

        path = request.url.path
        if path not in SKIP_LOG_PATHS:
            extra = {
                "request_id": request_id,
                "duration_ms": duration_ms,
                "status": response.status_code,
            }
            session_id = session_id_from_path(path)
            if session_id:
                extra["session_id"] = session_id
            logger.info(f"{request.method} {path}", extra=extra)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to every response."""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
