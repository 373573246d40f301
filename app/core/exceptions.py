"""
Base exception classes for application-wide error handling.

Every error raised by the service layer derives from BaseApplicationError so
that the API layer can turn it into a uniform JSON body without knowing which
service produced it.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Missing or malformed caller input (HTTP 400)
    ├── ConflictError - Request conflicts with existing remote state (HTTP 409)
    └── ExternalServiceError - Upstream platform failure (HTTP 502)

Usage:
    from core.exceptions import ValidationError

    raise ValidationError(
        "email is required",
        details={"missing_fields": ["email"]},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    DRF handles request-shape errors (serializer validation). These
    exceptions cover business rules enforced inside services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (subject ids, upstream codes, etc.)

    Example:
        try:
            orchestrator.charge_customer_immediately("cus_123", 500, "Order #12")
        except BaseApplicationError as e:
            logger.warning(f"Charge failed: {e.error_code}")
            return Response(e.to_dict(), status=400)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Payment method already attached",
                "error_code": "PAYMENT_METHOD_ALREADY_ATTACHED",
                "details": {"customer_id": "cus_123"}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when caller input is missing or malformed.

    Use for:
    - Required parameters left empty
    - Values outside the accepted range (negative amounts, inverted windows)
    - Preconditions the caller must fix (no payment method on file)

    Note:
        For request-body shape errors, use DRF serializer validation.
        Use this for service-layer rules.
    """

    default_error_code: str = "VALIDATION_ERROR"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with the current remote state.

    Use for:
    - Attaching a payment method that is already attached
    - Duplicate registrations detected before calling the platform

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Payment platform rejections and outages
    - Network timeouts
    - Unexpected upstream responses

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
        HTTP 502 Bad Gateway is the appropriate status.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
