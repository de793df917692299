"""Process-wide logging setup and the per-request access log middleware."""

import logging
import sys
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_SKIP_PATH_SUFFIXES = ("/health",)

access_logger = logging.getLogger("app.request")


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_timetable_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._timetable_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for every request except health checks."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.endswith(_SKIP_PATH_SUFFIXES):
            return await call_next(request)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            access_logger.error("%s %s -> unhandled error (%.1f ms)", request.method, path, duration_ms)
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        access_logger.info("%s %s -> %s (%.1f ms)", request.method, path, response.status_code, duration_ms)
        return response
