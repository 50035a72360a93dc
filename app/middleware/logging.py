import logging
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64


def resolve_request_id(incoming: Optional[str]) -> str:
    """Reuses a caller-supplied id when it is short and printable."""
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return str(uuid.uuid4())


def response_log_level(path: str, status_code: int, duration_ms: float) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400 or duration_ms >= settings.SLOW_REQUEST_THRESHOLD_MS:
        return logging.WARNING
    if path in settings.QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with the request id the error envelope also carries."""

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        method, path = request.method, request.url.path
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            logger.error(
                f"[{request_id}] {method} {path} failed after {duration_ms}ms: {exc}",
                extra={"request_id": request_id, "method": method, "path": path, "duration_ms": duration_ms}
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        status_code = response.status_code
        slow = duration_ms >= settings.SLOW_REQUEST_THRESHOLD_MS
        logger.log(
            response_log_level(path, status_code, duration_ms),
            f"[{request_id}] {method} {path} - {status_code} ({duration_ms}ms){' SLOW' if slow else ''}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "slow": slow,
            }
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
