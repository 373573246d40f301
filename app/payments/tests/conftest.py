"""
Pytest fixtures for payments API tests.

Views are exercised through DRF's APIClient with the orchestrator replaced
by a MagicMock, so no request reaches Stripe.

Usage:
    def test_charge(api_client, orchestrator):
        orchestrator.charge_customer_immediately.return_value = ChargeOutcome("pi_1", "succeeded")
        response = api_client.post("/api/v1/payments/charge/", {...}, format="json")
"""

from unittest.mock import MagicMock, patch

import pytest
from rest_framework.test import APIClient

from payments.services import PaymentOrchestrator


@pytest.fixture
def api_client():
    """DRF API client."""
    return APIClient()


@pytest.fixture
def orchestrator():
    """Orchestrator double returned to every view."""
    mock = MagicMock(spec=PaymentOrchestrator)
    with patch("payments.views.get_orchestrator", return_value=mock):
        yield mock


@pytest.fixture
def url():
    """Build a payments API path."""

    def _build(path: str) -> str:
        return f"/api/v1/payments/{path}"

    return _build
