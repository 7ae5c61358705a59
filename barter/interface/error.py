"""Interface layer errors and the domain error to HTTP mapping."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from barter.domain.error import (
    ConcurrentModificationError,
    DomainError,
    InvalidStateError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)


# Most specific first: the first matching family wins
STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (ConcurrentModificationError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_for(error: DomainError) -> int:
    """HTTP status for a domain error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error as ``{"code": ..., "message": ...}``."""
    status_code = status_for(exc)
    logfire.info(
        "Domain error",
        code=exc.code,
        status_code=status_code,
        path=request.url.path,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "message": exc.message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an application."""
    app.add_exception_handler(DomainError, domain_error_handler)
