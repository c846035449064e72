"""Application errors and their HTTP rendering."""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    """Input rejected before any write was attempted."""

    def __init__(self, message: str, field: Optional[str] = None, bound: Optional[str] = None):
        super().__init__(message, "validation_error", status.HTTP_400_BAD_REQUEST)
        self.field = field
        self.bound = bound


class AuthError(AppError):
    """Invalid credentials, bad session or unauthenticated access."""

    def __init__(self, message: str = "Not authenticated", http_status: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(message, "auth_error", http_status)


class NotFoundError(AppError):
    """Row missing or owned by another user."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "not_found", status.HTTP_404_NOT_FOUND)


class ConsistencyError(AppError):
    """The debt changed between read and write; the caller may retry."""

    def __init__(self, message: str = "Debt was modified concurrently, please retry"):
        super().__init__(message, "conflict", status.HTTP_409_CONFLICT)


class PersistenceError(AppError):
    """Database failure, message passed through from the backend."""

    def __init__(self, message: str):
        super().__init__(message, "persistence_error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(error: AppError) -> Dict[str, Any]:
    """Create a standardized error response."""
    body: Dict[str, Any] = {"code": error.code, "message": error.message}
    if isinstance(error, ValidationError):
        if error.field is not None:
            body["field"] = error.field
        if error.bound is not None:
            body["bound"] = error.bound
    return {"detail": error.message, "error": body}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.http_status, content=error_response(exc), headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
