# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Stores and services raise these typed errors; the handlers below turn them
# into an HTTP status plus a JSON error body. Nothing here is retried.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorefrontException(Exception):
    """
    Base exception for the storefront API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "STOREFRONT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to API response dict.

        The dashboard reads `error` for failed CRUD calls and `message`
        for the login/password forms, so both carry the message.
        """
        result = {
            "success": False,
            "error": self.message,
            "message": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Record Store Exceptions
# =============================================================================

class NotFoundError(StorefrontException):
    """Raised when a record id doesn't exist."""

    def __init__(self, entity: str, record_id: Any):
        super().__init__(
            message=f"{entity.capitalize()} not found",
            code="NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity} id is correct",
            details={"entity": entity, "id": record_id}
        )


class ConstraintViolationError(StorefrontException):
    """Raised when a write would break a uniqueness invariant."""

    def __init__(self, entity: str, field: str, value: Any, message: str | None = None):
        super().__init__(
            message=message or f"A {entity} with this {field} already exists",
            code="CONSTRAINT_VIOLATION",
            status_code=409,
            details={"entity": entity, "field": field, "value": value}
        )


class BackendUnavailableError(StorefrontException):
    """Raised when the underlying storage engine cannot be reached or written."""

    def __init__(self, backend: str, error: str):
        super().__init__(
            message=f"Storage backend '{backend}' is unavailable: {error}",
            code="BACKEND_UNAVAILABLE",
            status_code=503,
            suggestion="Try again later or contact support if the issue persists",
            details={"backend": backend}
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class InvalidInputError(StorefrontException):
    """Raised when a required field is missing or a value cannot be parsed."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else None
        )


class InvalidCredentialsError(StorefrontException):
    """Raised when a login or password change presents the wrong password."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# =============================================================================
# Image Store Exceptions
# =============================================================================

class UnsupportedMediaTypeError(StorefrontException):
    """Raised when an uploaded file is not an accepted image type."""

    def __init__(self, filename: str, mime_type: str, allowed: list[str]):
        super().__init__(
            message="Only image files are allowed!",
            code="UNSUPPORTED_MEDIA_TYPE",
            status_code=415,
            suggestion=f"Upload one of these image types: {', '.join(allowed)}",
            details={"filename": filename, "mime_type": mime_type, "allowed_types": allowed}
        )


class PayloadTooLargeError(StorefrontException):
    """Raised when an uploaded image exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class ImageUploadError(StorefrontException):
    """Raised when the image backend rejects or fails an upload."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload image: {error}",
            code="IMAGE_UPLOAD_FAILED",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def storefront_exception_handler(
    request: Request,
    exc: StorefrontException
) -> JSONResponse:
    """
    Convert StorefrontException to JSON response.

    Returns structured error with:
    - success: always False
    - error / message: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: [{exc.code}] {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors.

    Converts validation errors to the same body shape as StorefrontException.
    """
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Validation error",
            "message": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(error.get("loc", [])), "msg": error.get("msg")}
                for error in exc.errors()
            ],
        }
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "message": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
