"""
Pytest fixtures for payment service tests.

Services are exercised against a MagicMock standing in for StripeAdapter,
returning the adapter's own result dataclasses.

Sections:
    - Adapter Fixtures
    - Result Factories
"""

from unittest.mock import MagicMock

import pytest

from payments.adapters import (
    ChargeResult,
    ConnectedAccountResult,
    CustomerResult,
    PaymentIntentResult,
    PaymentMethodResult,
    StripeAdapter,
    SubscriptionResult,
    TransferResult,
)


# =============================================================================
# Adapter Fixtures
# =============================================================================


@pytest.fixture
def mock_adapter():
    """StripeAdapter double with attribute checking."""
    return MagicMock(spec=StripeAdapter)


# =============================================================================
# Result Factories
# =============================================================================


@pytest.fixture
def card():
    """Create a card PaymentMethodResult."""

    def _create(id: str = "pm_card_1", customer_id: str | None = "cus_123"):
        return PaymentMethodResult(id=id, type="card", customer_id=customer_id)

    return _create


@pytest.fixture
def payment_intent():
    """Create a PaymentIntentResult."""

    def _create(
        id: str = "pi_test_1",
        status: str = "succeeded",
        amount_cents: int = 1000,
        amount_received_cents: int | None = None,
        client_secret: str | None = "pi_test_1_secret",
        capture_method: str = "automatic",
        payment_method_types: list[str] | None = None,
    ):
        if amount_received_cents is None:
            amount_received_cents = amount_cents if status == "succeeded" else 0
        return PaymentIntentResult(
            id=id,
            status=status,
            amount_cents=amount_cents,
            currency="eur",
            amount_received_cents=amount_received_cents,
            client_secret=client_secret,
            capture_method=capture_method,
            payment_method_types=["card"] if payment_method_types is None else payment_method_types,
        )

    return _create


@pytest.fixture
def charge():
    """Create a ChargeResult."""

    def _create(
        id: str = "ch_1",
        amount_cents: int = 1000,
        paid: bool = True,
        refunded: bool = False,
        amount_refunded_cents: int = 0,
    ):
        return ChargeResult(
            id=id,
            amount_cents=amount_cents,
            paid=paid,
            refunded=refunded,
            amount_refunded_cents=amount_refunded_cents,
        )

    return _create


@pytest.fixture
def customer():
    """Create a CustomerResult."""

    def _create(id: str = "cus_123", created: int = 1_700_000_000):
        return CustomerResult(id=id, email=f"{id}@example.com", description=None, created=created)

    return _create


@pytest.fixture
def subscription():
    """Create a SubscriptionResult."""

    def _create(id: str = "sub_1", status: str = "active", trial_end: int | None = None):
        return SubscriptionResult(id=id, status=status, customer_id="cus_123", trial_end=trial_end)

    return _create


@pytest.fixture
def connected_account():
    """Create a ConnectedAccountResult with its raw Stripe payload."""

    def _create(
        id: str = "acct_1",
        details_submitted: bool = True,
        charges_enabled: bool = True,
        payouts_enabled: bool = True,
        currently_due: list[str] | None = None,
    ):
        raw = {
            "id": id,
            "details_submitted": details_submitted,
            "charges_enabled": charges_enabled,
            "payouts_enabled": payouts_enabled,
            "requirements": {"currently_due": currently_due or []},
        }
        return ConnectedAccountResult(
            id=id,
            type="express",
            country="FR",
            details_submitted=details_submitted,
            charges_enabled=charges_enabled,
            payouts_enabled=payouts_enabled,
            currently_due=currently_due or [],
            raw_response=raw,
        )

    return _create


@pytest.fixture
def transfer():
    """Create a TransferResult."""

    def _create(id: str = "tr_1", amount_cents: int = 4500, destination: str = "acct_1"):
        return TransferResult(
            id=id,
            amount_cents=amount_cents,
            currency="eur",
            destination_account=destination,
            created=1_700_000_000,
        )

    return _create
