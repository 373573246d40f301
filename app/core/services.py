"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views.
    Views handle HTTP concerns, services handle logic, adapters talk to
    external platforms.

Pattern Comparison:
    - Exceptions: Use for failures the caller must react to (validation,
      conflicts, upstream errors). The API layer maps them to status codes.
    - ServiceResult: Use where a failure is reported but not raised, such as
      webhook handlers whose outcome is only logged.

Usage:
    from core.services import BaseService

    class CustomerService(BaseService):
        def create_customer(self, email: str, description: str):
            self.require(email=email)
            customer = self.adapter.create_customer(email, description)
            self.get_logger().info("Created customer", extra={"customer_id": customer.id})
            return customer
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code

    Usage:
        return ServiceResult.success({"payment_intent_id": "pi_123"})
        return ServiceResult.failure("Missing object id", "INVALID_WEBHOOK_PAYLOAD")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        """Create a failed result."""
        return cls(success=False, error=error, error_code=error_code)


class BaseService:
    """
    Base class for service layer classes.

    Services receive their collaborators through the constructor and keep
    no other state, so a single instance can serve concurrent requests.

    Provides:
    - Logging setup per service
    - Required-field validation
    """

    validation_error_class: type[ValidationError] = ValidationError

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    def require(cls, **fields: Any) -> None:
        """
        Validate that required fields are provided.

        A field is missing when it is None or a blank string.

        Args:
            **fields: Field names and their values

        Raises:
            ValidationError (or validation_error_class): listing missing fields

        Example:
            cls.require(customer_id=customer_id, amount=amount_cents)
        """
        missing = [
            name
            for name, value in fields.items()
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise cls.validation_error_class(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )
