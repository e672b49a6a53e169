from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.logger import logger


class BookingError(Exception):
    """Base class for errors surfaced to API callers with a stable code."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidArgumentError(BookingError):
    code = "invalid_argument"


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class InvalidStateError(BookingError):
    code = "invalid_state"


class ConflictError(BookingError):
    # Same status as other client errors; clients branch on ``code``.
    code = "conflict"


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Storage failure on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "code": "internal"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
