"""
Payment-specific exceptions for payment operations.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentValidationError - Missing/malformed input (also a ValidationError)
    ├── PaymentMethodConflictError - Duplicate attachment (also a ConflictError)
    ├── SignatureError - Webhook authentication failure
    └── PlatformError - Base for errors reported by Stripe
        ├── GatewayError - Opaque upstream failure (also an ExternalServiceError)
        └── PaymentDeclinedError - authentication_required / card_declined

PaymentDeclinedError is not a GatewayError. A decline means the customer has
to re-authenticate or use another card.

Usage:
    from payments.exceptions import GatewayError, PaymentDeclinedError

    try:
        orchestrator.charge_customer_immediately(customer_id, 1500, "Order #42")
    except PaymentDeclinedError as e:
        ask_customer_to_authenticate(e.stripe_code)
    except GatewayError:
        logger.exception("Charge failed upstream")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# Stripe error codes that mean the customer must act before a retry can work
DECLINE_CODES = frozenset({"authentication_required", "card_declined"})


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class PaymentValidationError(PaymentError, ValidationError):
    """
    Raised when payment input validation fails.

    Use for:
    - Missing customer, amount, currency or destination account
    - Non-positive amounts
    - Customer has no card on file for an off-session charge

    Example:
        if not customer_id:
            raise PaymentValidationError(
                "customer_id is required",
                details={"missing_fields": ["customer_id"]},
            )
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"


class PaymentMethodConflictError(PaymentError, ConflictError):
    """
    Raised when a payment method is already attached to the customer.

    Attach is checked against the customer's existing card list before
    calling Stripe, so a second attach of the same pair never reaches the
    platform.
    """

    default_error_code: str = "PAYMENT_METHOD_ALREADY_ATTACHED"


class SignatureError(PaymentError):
    """
    Raised when a webhook payload fails signature verification.

    Covers a missing or malformed Stripe-Signature header, a signature that
    does not match the raw body, a timestamp outside the tolerance window,
    and a body that is not valid JSON.
    """

    default_error_code: str = "INVALID_WEBHOOK_SIGNATURE"


# =============================================================================
# Stripe-Reported Exceptions
# =============================================================================


class PlatformError(PaymentError):
    """
    Base exception for errors reported by the Stripe API.

    Attributes:
        stripe_code: Stripe's error code (card_declined, resource_missing, ...)
        decline_code: Card decline code (if applicable)
    """

    default_error_code: str = "STRIPE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        stripe_code: str | None = None,
        decline_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if stripe_code:
            details["stripe_code"] = stripe_code
        if decline_code:
            details["decline_code"] = decline_code
        super().__init__(message, error_code=error_code, details=details)
        self.stripe_code = stripe_code
        self.decline_code = decline_code


class GatewayError(PlatformError, ExternalServiceError):
    """
    Opaque upstream failure not otherwise classified.

    Possible causes:
    - Invalid or unknown ids (customer, price, account, payment intent)
    - Payment intent already captured, expired or canceled
    - Authentication, rate limiting or connectivity problems

    Note:
        No automatic retry happens in this layer. Idempotency on retry is
        the caller's responsibility.
    """

    default_error_code: str = "GATEWAY_ERROR"


class PaymentDeclinedError(PlatformError):
    """
    Stripe reported authentication_required or card_declined.

    The customer has to authenticate (3D Secure) or supply another card;
    retrying the same request will not succeed.

    Example:
        except PaymentDeclinedError as e:
            if e.stripe_code == "authentication_required":
                message = "Please confirm this payment with your bank."
            else:
                message = "Your card was declined."
    """

    default_error_code: str = "PAYMENT_DECLINED"


__all__ = [
    "DECLINE_CODES",
    "GatewayError",
    "PaymentDeclinedError",
    "PaymentError",
    "PaymentMethodConflictError",
    "PaymentValidationError",
    "PlatformError",
    "SignatureError",
]
