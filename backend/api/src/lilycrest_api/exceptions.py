"""FastAPI exception handlers that turn domain errors into JSON responses.

Status mapping:
- 400 Bad Request: malformed identifiers
- 401 Unauthorized: no signed-in user
- 403 Forbidden: ownership, role or branch violations
- 404 Not Found: missing reservations, rooms or user records
- 409 Conflict: actions not allowed at the reservation's current stage
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from lilycrest_api.models.common import format_validation_errors
from lilycrest_shared.models.errors import BookingError, ErrorCode
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_RESERVATION_ID: HTTP_400_BAD_REQUEST,
    ErrorCode.AUTH_REQUIRED: HTTP_401_UNAUTHORIZED,
    ErrorCode.RESERVATION_ACCESS_DENIED: HTTP_403_FORBIDDEN,
    ErrorCode.ADMIN_REQUIRED: HTTP_403_FORBIDDEN,
    ErrorCode.BRANCH_ACCESS_DENIED: HTTP_403_FORBIDDEN,
    ErrorCode.NO_BRANCH_ASSIGNED: HTTP_403_FORBIDDEN,
    ErrorCode.PAYMENT_STATUS_ADMIN_ONLY: HTTP_403_FORBIDDEN,
    ErrorCode.RESERVATION_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.ROOM_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.ROOM_NOT_AVAILABLE: HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: HTTP_409_CONFLICT,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """HTTP status for an ErrorCode, 400 when unmapped."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    status_code = get_http_status_for_error(exc.code)
    logger.info(
        "booking_error",
        extra={
            "error_code": exc.code.value,
            "status_code": status_code,
            "path": request.url.path,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Wrap FastAPI's 422 body in the standard error envelope."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=format_validation_errors(list(exc.errors())).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; internal details are logged, never returned."""
    logger.exception("Unhandled exception: %s", exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error_code": "ERR_INTERNAL",
            "message": "An unexpected error occurred",
            "recovery": "Please try again later or contact support",
            "details": None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
