"""
Webhook handling for payment events from Stripe.

Deliveries are verified against the raw body, then dispatched in-process to
the handler registered for their event type.

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhook/", stripe_webhook, name="stripe-webhook"),
    ]
"""

from payments.webhooks.handlers import (
    WebhookDispatchResult,
    dispatch_webhook,
    register_handler,
)
from payments.webhooks.verifier import WebhookEvent, verify_event

__all__ = [
    "WebhookDispatchResult",
    "WebhookEvent",
    "dispatch_webhook",
    "register_handler",
    "verify_event",
]
