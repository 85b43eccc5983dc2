"""Application exception types."""

from app.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to the `{error, code}` payload."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=message, code=code)
        super().__init__(message)


def validation_error(message: str) -> ApiError:
    return ApiError(status_code=400, code="VALIDATION_ERROR", message=message)


def unauthenticated(message: str) -> ApiError:
    return ApiError(status_code=401, code="UNAUTHENTICATED", message=message)


def forbidden(message: str = "Forbidden") -> ApiError:
    return ApiError(status_code=403, code="FORBIDDEN", message=message)


def not_found_or_forbidden(message: str = "Resource not found") -> ApiError:
    # Ownership mismatch and absence share one shape so non-owners learn nothing.
    return ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


def internal_error(message: str) -> ApiError:
    return ApiError(status_code=500, code="INTERNAL_ERROR", message=message)


__all__ = [
    "ApiError",
    "forbidden",
    "internal_error",
    "not_found_or_forbidden",
    "unauthenticated",
    "validation_error",
]
