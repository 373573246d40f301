"""
Stripe webhook signature verification.

Stripe signs every delivery with HMAC-SHA256 over "<timestamp>.<raw body>"
and sends the result in the Stripe-Signature header:

    Stripe-Signature: t=1614556800,v1=5257a869e7...,v0=6ffbb59b2...

The signature must be checked against the body exactly as received, before
any JSON parsing. Only a verified payload becomes a WebhookEvent.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

import stripe

from payments.exceptions import SignatureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookEvent:
    """
    A verified Stripe event.

    Attributes:
        stripe_event_id: Stripe event ID (evt_xxx)
        event_type: Event type (e.g. "payment_intent.succeeded")
        payload: Full event JSON
    """

    stripe_event_id: str
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def data_object(self) -> dict[str, Any]:
        return (self.payload.get("data") or {}).get("object") or {}

    def get_object_id(self) -> str | None:
        return self.data_object.get("id")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> WebhookEvent:
        event_id = payload.get("id")
        event_type = payload.get("type")
        if not event_id or not event_type:
            raise SignatureError(
                "Webhook event is missing id or type",
                details={"event_id": event_id, "event_type": event_type},
            )
        return cls(stripe_event_id=event_id, event_type=event_type, payload=payload)


def verify_event(
    payload: bytes,
    signature: str,
    secret: str,
    tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
) -> WebhookEvent:
    """
    Verify a webhook delivery and parse it into a WebhookEvent.

    Args:
        payload: Raw request body bytes
        signature: Stripe-Signature header value
        secret: Endpoint signing secret (whsec_xxx)
        tolerance: Maximum age of the signed timestamp, in seconds

    Raises:
        SignatureError: Missing or malformed header, no matching signature,
            timestamp outside tolerance, or a body that is not a JSON event
    """
    if not signature:
        raise SignatureError("Missing Stripe-Signature header")

    try:
        body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        stripe.WebhookSignature.verify_header(body, signature, secret, tolerance)
        data = json.loads(body)
    except stripe.SignatureVerificationError as e:
        logger.warning("Webhook signature verification failed", extra={"error": str(e)})
        raise SignatureError(
            "Invalid webhook signature",
            details={"error": str(e)},
        ) from e
    except ValueError as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        logger.warning("Webhook payload is not valid JSON", extra={"error": str(e)})
        raise SignatureError(
            "Invalid webhook payload",
            details={"error": str(e)},
        ) from e

    if not isinstance(data, dict):
        raise SignatureError("Invalid webhook payload")

    return WebhookEvent.from_payload(data)
