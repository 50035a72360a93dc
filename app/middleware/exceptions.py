from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import ConcurrencyError
from app.schemas.response import ErrorResponse, FieldError
from datetime import datetime
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
        501: "NOT_IMPLEMENTED",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _error_response(request: Request, request_id: str, status_code: int, **fields) -> JSONResponse:
    error_response = ErrorResponse(
        timestamp=datetime.utcnow().isoformat(),
        path=request.url.path,
        request_id=request_id,
        **fields
    )
    return JSONResponse(status_code=status_code, content=error_response.model_dump(exclude_none=True))

def _field_name(loc) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front of each location
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    errors = [
        FieldError(field=_field_name(err.get("loc", ())), message=err.get("msg", "Invalid value"))
        for err in exc.errors()
    ]
    logger.warning(f"[{request_id}] Validation error: {[e.model_dump() for e in errors]}", extra={"request_id": request_id})
    return _error_response(
        request, request_id, 400,
        message="Validation failed",
        code="VALIDATION_ERROR",
        errors=errors
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    error_code = getattr(exc, "code", None) or _get_error_code(exc.status_code)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    logger.warning(f"[{request_id}] HTTP {exc.status_code}: {message}", extra={"request_id": request_id})
    return _error_response(
        request, request_id, exc.status_code,
        message=message,
        code=error_code,
        details=getattr(exc, "details", None)
    )

async def stale_data_exception_handler(request: Request, exc: StaleDataError):
    # Commit-time version conflicts that escaped the service layer
    return await http_exception_handler(request, ConcurrencyError())

async def integrity_exception_handler(request: Request, exc: IntegrityError):
    request_id = _request_id(request)
    logger.warning(f"[{request_id}] Integrity error: {exc.orig}", extra={"request_id": request_id})
    return _error_response(
        request, request_id, 400,
        message="Resource conflicts with existing data",
        code="CONFLICT"
    )

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)

    if isinstance(exc, HTTPException):
        return await http_exception_handler(request, exc)

    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return _error_response(
        request, request_id, 500,
        message="An unexpected error occurred",
        code="INTERNAL_SERVER_ERROR",
        details={"error_type": type(exc).__name__}
    )
