from enum import Enum


class ErrorCode(Enum):
    VALIDATION_ERROR = "validation_error"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INSUFFICIENT_STOCK = "insufficient_stock"
    DUPLICATE_RECEIPT = "duplicate_receipt"
    INTERNAL_ERROR = "internal_error"


# Map error codes to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INSUFFICIENT_STOCK: 409,
    ErrorCode.DUPLICATE_RECEIPT: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Codes for bare HTTPExceptions raised by FastAPI or the auth dependencies
STATUS_CODE_MAP = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
}
