from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for errors raised by the service layer.

    Services raise these the same way they would raise a plain HTTPException;
    the extra ``code`` and ``details`` end up in the error envelope.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, detail: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code, detail=detail)
        self.details = details


class BadRequestError(AppException):
    pass


class InvalidStateError(AppException):
    code = "INVALID_STATE"


class ConflictError(AppException):
    # Reported as 400; 409 belongs to ConcurrencyError
    code = "CONFLICT"


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class UnauthorizedError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ConcurrencyError(AppException):
    status_code = status.HTTP_409_CONFLICT
    code = "CONCURRENT_MODIFICATION"

    def __init__(self, detail: str = "Enrollment was modified concurrently, retry the request", **kwargs):
        super().__init__(detail, **kwargs)
