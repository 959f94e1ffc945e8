import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import ErrorCode, ERROR_STATUS_MAP, STATUS_CODE_MAP

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that services can raise."""

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, error_code: ErrorCode | None = None):
        if error_code is not None:
            self.error_code = error_code
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.error_code, 500)


class ValidationFailed(AppException):
    error_code = ErrorCode.VALIDATION_ERROR


class NotFound(AppException):
    error_code = ErrorCode.NOT_FOUND


class Conflict(AppException):
    error_code = ErrorCode.CONFLICT


class InsufficientStock(Conflict):
    error_code = ErrorCode.INSUFFICIENT_STOCK

    def __init__(self, batch_id: int, requested: int):
        self.batch_id = batch_id
        self.requested = requested
        super().__init__(f"Insufficient stock for batch {batch_id} (requested {requested})")


class DuplicateReceipt(Conflict):
    error_code = ErrorCode.DUPLICATE_RECEIPT


def error_body(code: ErrorCode, message, **extra) -> dict:
    body = {"code": code.value, "message": message}
    body.update(extra)
    return body


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message),
    )


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = STATUS_CODE_MAP.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=error_body(ErrorCode.VALIDATION_ERROR, "Request validation failed", errors=errors),
    )


async def integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content=error_body(ErrorCode.CONFLICT, "Request conflicts with existing data"),
    )


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content=error_body(ErrorCode.INTERNAL_ERROR, "Internal server error"),
    )
