"""
HTTP middleware: correlation IDs and access logging.

CorrelationMiddleware must wrap RequestLoggingMiddleware so access log
lines carry the request's ID. Health probes log at DEBUG; 5xx responses
log at ERROR and 4xx at WARNING.

Dependencies: fastapi, starlette, backend.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from backend.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATH_PREFIX = "/api/v1/health"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    if path.startswith(QUIET_PATH_PREFIX):
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access log line per request, with latency."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        method, path = request.method, request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} raised {type(e).__name__}",
                extra={"method": method, "path": path, "process_time_ms": _elapsed_ms(started)},
            )
            raise

        logger.log(
            _level_for(path, response.status_code),
            f"{method} {path} -> {response.status_code}",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": _elapsed_ms(started),
                "client_host": request.client.host if request.client else None,
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID for the request and echo it in the response.

    The ID comes from the X-Correlation-ID request header when usable,
    otherwise a new UUID is generated.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
