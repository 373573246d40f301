"""
Pytest fixtures for webhook tests.

Provides event payloads, verified WebhookEvent objects and a helper that
signs payloads the same way Stripe does, so verification runs for real.
"""

import hashlib
import hmac
import json
import time

import pytest
from django.test import RequestFactory

from payments.webhooks.verifier import WebhookEvent

WEBHOOK_SECRET = "whsec_test_secret"


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for the payload."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def event_payload(event_type: str, data_object: dict, event_id: str = "evt_test_123") -> dict:
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": data_object},
    }


# =============================================================================
# Request Fixtures
# =============================================================================


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


@pytest.fixture
def signed_request(rf):
    """Create a signed POST to the webhook endpoint."""

    def _create(payload: dict | str, signature: str | None = None, **kwargs):
        body = payload if isinstance(payload, str) else json.dumps(payload)
        headers = {}
        if signature is None:
            signature = sign_payload(body, **kwargs)
        if signature:
            headers["HTTP_STRIPE_SIGNATURE"] = signature
        return rf.post(
            "/api/v1/payments/webhook/",
            data=body,
            content_type="application/json",
            **headers,
        )

    return _create


# =============================================================================
# Event Fixtures
# =============================================================================


@pytest.fixture
def make_event():
    """Create a verified WebhookEvent."""

    def _create(event_type: str, data_object: dict, event_id: str = "evt_test_123"):
        return WebhookEvent.from_payload(event_payload(event_type, data_object, event_id))

    return _create


@pytest.fixture
def payment_intent_succeeded_payload():
    return event_payload(
        "payment_intent.succeeded",
        {
            "id": "pi_test_123",
            "object": "payment_intent",
            "amount": 4500,
            "amount_received": 4500,
            "currency": "eur",
            "status": "succeeded",
            "metadata": {"type": "service_booking", "serviceId": "svc_1"},
        },
    )


@pytest.fixture
def account_updated_payload():
    return event_payload(
        "account.updated",
        {
            "id": "acct_test_123",
            "object": "account",
            "details_submitted": True,
            "charges_enabled": True,
            "payouts_enabled": False,
            "requirements": {"currently_due": ["individual.verification.document"]},
        },
    )
