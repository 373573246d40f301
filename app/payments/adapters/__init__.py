"""
Payment adapters for external services.

All Stripe API calls go through StripeAdapter to ensure consistent
authentication, error translation, timeouts and observability.

Usage:
    from payments.adapters import StripeAdapter

    adapter = StripeAdapter.from_settings()
    customer = adapter.create_customer("ada@example.com", "Ada")
"""

from payments.adapters.stripe_adapter import (
    PAGE_SIZE,
    ChargeResult,
    ConnectedAccountResult,
    CreatePaymentIntentParams,
    CustomerResult,
    PaymentIntentResult,
    PaymentMethodResult,
    PriceResult,
    SessionResult,
    StripeAdapter,
    SubscriptionResult,
    TransferResult,
    as_dict,
)

__all__ = [
    "PAGE_SIZE",
    "ChargeResult",
    "ConnectedAccountResult",
    "CreatePaymentIntentParams",
    "CustomerResult",
    "PaymentIntentResult",
    "PaymentMethodResult",
    "PriceResult",
    "SessionResult",
    "StripeAdapter",
    "SubscriptionResult",
    "TransferResult",
    "as_dict",
]
