"""
Custom exception classes for the application.

Every error carries a stable code, a human-readable message, the HTTP
status the API should answer with, and optional details.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """
    Database operation failed (500).

    The raw store message is kept in ``reason`` so callers can report it
    verbatim without the "Database ... failed" prefix.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.reason = message
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, "reason": message, **(details or {})}
        )


# ===================
# PRODUCT ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found."""

    def __init__(self, identifier: str):
        super().__init__(
            resource="Product",
            identifier=identifier,
            code="PRODUCT_NOT_FOUND"
        )


# ===================
# SHOPEE IMPORT ERRORS
# ===================

class ShopeeCsvDecodeError(ValidationError):
    """Uploaded CSV could not be decoded as text."""

    def __init__(self, encoding: str, reason: str):
        super().__init__(
            code="SHOPEE_CSV_DECODE_ERROR",
            message=f"File is not valid {encoding} text",
            details={"encoding": encoding, "reason": reason}
        )


# ===================
# IMAGE ENRICHMENT ERRORS
# ===================

class EnrichmentServiceError(ExternalServiceError):
    """Image enrichment endpoint unreachable or answered without a usable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            service="image_enrichment",
            message=message,
            details={"http_status": status_code}
        )
