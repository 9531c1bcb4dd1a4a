from enum import Enum


class ErrorType(Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    DATABASE_ERROR = "database_error"
    UNAUTHORIZED = "unauthorized"
    NOT_CONFIGURED = "not_configured"
    INTERNAL_ERROR = "internal_error"


# Map error types to HTTP status codes
ERROR_STATUS_MAP = {
    ErrorType.VALIDATION: 422,
    ErrorType.CONFLICT: 409,
    ErrorType.NOT_FOUND: 404,
    ErrorType.DATABASE_ERROR: 500,
    ErrorType.UNAUTHORIZED: 401,
    ErrorType.NOT_CONFIGURED: 503,
    ErrorType.INTERNAL_ERROR: 500,
}
