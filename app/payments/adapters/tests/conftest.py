"""
Pytest fixtures for Stripe adapter tests.

This module provides fixtures for testing the Stripe adapter, including
mock Stripe API responses, paginated list pages, and error conditions.

Sections:
    - Mock Stripe Objects
    - Adapter Fixtures
    - Mock Stripe Error Fixtures
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import patch

import pytest
import stripe

from payments.adapters import StripeAdapter


# =============================================================================
# Mock Stripe Objects
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


def make_page(items: list[dict[str, Any]], has_more: bool = False) -> MockStripeObject:
    """Build one page of a Stripe list response."""
    return MockStripeObject(
        {
            "object": "list",
            "data": [MockStripeObject(item) for item in items],
            "has_more": has_more,
        }
    )


@pytest.fixture
def page():
    """Factory for Stripe list pages."""
    return make_page


@pytest.fixture
def mock_payment_intent():
    """Create a mock PaymentIntent response."""

    def _create(
        id: str = "pi_test123456",
        status: str = "requires_payment_method",
        amount: int = 5000,
        currency: str = "eur",
        client_secret: str = "pi_test123456_secret_abc123",
        amount_received: int = 0,
        capture_method: str = "automatic",
        metadata: dict | None = None,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "payment_intent",
                "status": status,
                "amount": amount,
                "currency": currency,
                "client_secret": client_secret,
                "amount_received": amount_received,
                "capture_method": capture_method,
                "payment_method_types": ["card"],
                "metadata": metadata or {},
            }
        )

    return _create


@pytest.fixture
def mock_charge():
    """Create a mock Charge dict."""

    def _create(
        id: str = "ch_test123",
        amount: int = 1000,
        paid: bool = True,
        refunded: bool = False,
        amount_refunded: int = 0,
        created: int = 1_700_000_000,
    ) -> dict:
        return {
            "id": id,
            "object": "charge",
            "amount": amount,
            "paid": paid,
            "refunded": refunded,
            "amount_refunded": amount_refunded,
            "created": created,
        }

    return _create


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def mock_stripe_http_client():
    """Mock stripe.RequestsClient so no HTTP client is built."""
    with patch("stripe.RequestsClient") as mock:
        yield mock


@pytest.fixture
def adapter(mock_stripe_http_client):
    """StripeAdapter with a test key."""
    return StripeAdapter(api_key="sk_test_adapter", timeout=7)


@pytest.fixture
def mock_stripe_payment_intent(mock_payment_intent):
    """Mock stripe.PaymentIntent API."""
    with patch("stripe.PaymentIntent") as mock:
        mock.create.return_value = mock_payment_intent()
        mock.capture.return_value = mock_payment_intent(
            status="succeeded", amount_received=5000, capture_method="manual"
        )
        mock.list.return_value = make_page([])
        yield mock


@pytest.fixture
def mock_stripe_charge():
    """Mock stripe.Charge API."""
    with patch("stripe.Charge") as mock:
        mock.list.return_value = make_page([])
        yield mock


@pytest.fixture
def mock_stripe_account():
    """Mock stripe.Account API."""
    with patch("stripe.Account") as mock:
        mock.create.return_value = MockStripeObject(
            {
                "id": "acct_test123",
                "object": "account",
                "type": "express",
                "country": "FR",
                "details_submitted": False,
                "charges_enabled": False,
                "payouts_enabled": False,
                "requirements": {"currently_due": ["external_account"]},
            }
        )
        yield mock


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError."""

    def _create(
        message: str = "Your card was declined.",
        code: str = "card_declined",
        decline_code: str | None = "generic_decline",
    ) -> stripe.CardError:
        error = stripe.CardError(message=message, param=None, code=code)
        error.decline_code = decline_code
        return error

    return _create


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError."""

    def _create(
        message: str = "No such customer: 'cus_missing'",
        param: str | None = "customer",
        code: str = "resource_missing",
        json_body: dict | None = None,
    ) -> stripe.InvalidRequestError:
        return stripe.InvalidRequestError(
            message=message,
            param=param,
            code=code,
            json_body=json_body,
        )

    return _create


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError."""
    return stripe.APIConnectionError(message="Could not connect to Stripe.")


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(message="Invalid API Key provided.")
