"""
Global exception handling for the application.
Every service error derives from AppError and is rendered into the
standard {"error": ..., "meta": ...} envelope.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.responses import error_envelope

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input, correctable by the caller."""
    def __init__(self, message: str = "Invalid input", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictError(AppError):
    """Uniqueness violation."""
    def __init__(self, message: str = "Entity already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class InvalidTokenError(UnauthorizedException):
    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ExpiredTokenError(UnauthorizedException):
    def __init__(self, message: str = "Token has expired", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidTokenTypeError(UnauthorizedException):
    def __init__(self, message: str = "Invalid token type", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class AccountLockedError(AppError):
    """Too many failed logins; retry after the lockout window."""
    def __init__(
        self,
        message: str = "Account is temporarily locked due to multiple failed login attempts, please wait a few minutes",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, status.HTTP_423_LOCKED, details)


class CryptoError(AppError):
    """Key or ciphertext problem. Indicates config or data corruption, never user error."""
    def __init__(self, message: str = "Cryptographic failure", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class InvalidKeyError(CryptoError):
    def __init__(self, message: str = "Invalid encryption key", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class DecryptionError(CryptoError):
    def __init__(self, message: str = "Decryption failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidGeoJSONError(ValidationError):
    pass


class UnsupportedGeometryError(ValidationError):
    pass


class InvalidPolygonError(ValidationError):
    pass


class InvalidMultiPolygonError(ValidationError):
    pass


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        if isinstance(exc, CryptoError):
            logger.error("Crypto failure", error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(
                request,
                code=exc.__class__.__name__,
                message=exc.message,
                details=exc.details,
            ),
        )

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            request,
            code="InternalServerError",
            message="An unexpected error occurred. Please try again later.",
        ),
    )


def _format_validation_error(err: Dict[str, Any]) -> str:
    field = str(err["loc"][-1]) if err.get("loc") else "body"
    kind = err.get("type", "")

    if kind == "missing":
        return f"{field} field is required"
    if kind == "string_too_short":
        return f"{field} field does not meet minimum characters"
    if kind == "string_too_long":
        return f"{field} field exceed max characters"
    if kind == "value_error" and "email" in err.get("msg", "").lower():
        return f"{field} field is not a valid email"
    if kind == "string_pattern_mismatch":
        return f"{field} contains illegal characters"
    if kind in ("literal_error", "enum"):
        return f"{field} field is not a valid {field}"
    if kind == "uuid_parsing":
        return f"{field} is not a valid uuid"
    if kind == "json_invalid":
        return "invalid json body"
    return f"Error on field {field}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [_format_validation_error(err) for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            request,
            code="ValidationError",
            message=messages[0] if messages else "Invalid request",
            details={"errors": messages},
        ),
    )
