"""Mapping from domain errors to HTTP errors, and the JSON error body."""

import logging

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.model.errors import (
    AuthError,
    ConflictError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def http_error(error: DomainError) -> HTTPException:
    """Convert a domain error to an HTTPException. Unmapped errors become 500."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))

    logger.error("Unhandled store error", extra={"errorType": type(error).__name__, "error": str(error)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    field = ".".join(str(p) for p in errors[0].get("loc", ())[1:]) if errors else ""
    if field:
        message = f"{field}: {message}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})
