"""
Tests for Stripe adapter.

Tests cover:
- CreatePaymentIntentParams validation and Stripe parameter building
- Construction (required key, timeout)
- Cursor pagination over full collections
- Error translation for each exception type
- Successful API operations
"""

from unittest.mock import call, patch

import pytest
import stripe
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from payments.adapters import (
    PAGE_SIZE,
    CreatePaymentIntentParams,
    PaymentIntentResult,
    StripeAdapter,
)
from payments.exceptions import GatewayError, PaymentDeclinedError

from .conftest import MockStripeObject, make_page


# =============================================================================
# CreatePaymentIntentParams Tests
# =============================================================================


class TestCreatePaymentIntentParams:
    """Tests for CreatePaymentIntentParams dataclass validation."""

    def test_valid_params(self):
        """Should create params with defaults for optional fields."""
        params = CreatePaymentIntentParams(amount_cents=5000, currency="eur")

        assert params.amount_cents == 5000
        assert params.currency == "eur"
        assert params.capture_method == "automatic"
        assert params.payment_method_types == ["card"]
        assert params.idempotency_key is None

    def test_amount_must_be_positive(self):
        """Should raise ValueError for zero or negative amount."""
        with pytest.raises(ValueError, match="amount_cents must be positive"):
            CreatePaymentIntentParams(amount_cents=0, currency="eur")

        with pytest.raises(ValueError, match="amount_cents must be positive"):
            CreatePaymentIntentParams(amount_cents=-100, currency="eur")

    def test_currency_required(self):
        """Should raise ValueError for empty currency."""
        with pytest.raises(ValueError, match="currency is required"):
            CreatePaymentIntentParams(amount_cents=5000, currency="")

    def test_capture_method_validated(self):
        """Should reject capture methods other than automatic and manual."""
        with pytest.raises(ValueError, match="capture_method"):
            CreatePaymentIntentParams(amount_cents=5000, currency="eur", capture_method="later")

    def test_off_session_params(self):
        """Should send the stored payment method instead of method types."""
        params = CreatePaymentIntentParams(
            amount_cents=2500,
            currency="eur",
            customer_id="cus_123",
            payment_method_id="pm_123",
            off_session=True,
            confirm=True,
            description="Order #12",
        )

        stripe_params = params.to_stripe_params()

        assert stripe_params["payment_method"] == "pm_123"
        assert "payment_method_types" not in stripe_params
        assert stripe_params["off_session"] is True
        assert stripe_params["confirm"] is True
        assert stripe_params["customer"] == "cus_123"
        assert stripe_params["description"] == "Order #12"

    def test_escrow_params(self):
        """Should include manual capture and the transfer destination."""
        params = CreatePaymentIntentParams(
            amount_cents=4500,
            currency="eur",
            capture_method="manual",
            transfer_data={"destination": "acct_123"},
            metadata={"type": "delivery_payment"},
        )

        stripe_params = params.to_stripe_params()

        assert stripe_params["capture_method"] == "manual"
        assert stripe_params["transfer_data"] == {"destination": "acct_123"}
        assert stripe_params["payment_method_types"] == ["card"]
        assert stripe_params["metadata"] == {"type": "delivery_payment"}
        assert "off_session" not in stripe_params
        assert "confirm" not in stripe_params


# =============================================================================
# Construction Tests
# =============================================================================


class TestStripeAdapterConstruction:
    """Tests for building the adapter."""

    def test_empty_key_rejected(self, mock_stripe_http_client):
        """Should refuse to build without a secret key."""
        with pytest.raises(ImproperlyConfigured):
            StripeAdapter(api_key="")

    def test_timeout_applied_to_http_client(self, mock_stripe_http_client):
        """Should configure the Stripe HTTP client with the timeout."""
        StripeAdapter(api_key="sk_test_x", timeout=3)

        mock_stripe_http_client.assert_called_once_with(timeout=3)

    @override_settings(STRIPE_SECRET_KEY="sk_test_settings", STRIPE_API_TIMEOUT_SECONDS=12)
    def test_from_settings(self, mock_stripe_http_client):
        """Should read key and timeout from settings."""
        adapter = StripeAdapter.from_settings()

        assert adapter.api_key == "sk_test_settings"
        assert adapter.timeout == 12

    def test_api_key_passed_on_every_call(self, adapter):
        """Should pass the API key explicitly instead of using stripe.api_key."""
        with patch("stripe.Customer") as mock_customer:
            mock_customer.create.return_value = MockStripeObject(
                {"id": "cus_1", "email": "a@example.com", "created": 1}
            )

            adapter.create_customer("a@example.com")

        mock_customer.create.assert_called_once_with(
            api_key="sk_test_adapter", email="a@example.com"
        )


# =============================================================================
# Pagination Tests
# =============================================================================


class TestPagination:
    """Tests for cursor-based traversal of Stripe collections."""

    def test_follows_cursor_until_has_more_false(self, adapter, mock_stripe_charge, mock_charge):
        """Should request pages with starting_after set to the last id."""
        mock_stripe_charge.list.side_effect = [
            make_page([mock_charge(id="ch_1"), mock_charge(id="ch_2")], has_more=True),
            make_page([mock_charge(id="ch_3")], has_more=False),
        ]

        charges = list(adapter.iter_charges(created_gte=100, created_lte=200))

        assert [c.id for c in charges] == ["ch_1", "ch_2", "ch_3"]
        assert mock_stripe_charge.list.call_args_list == [
            call(api_key="sk_test_adapter", created={"gte": 100, "lte": 200}, limit=PAGE_SIZE),
            call(
                api_key="sk_test_adapter",
                created={"gte": 100, "lte": 200},
                limit=PAGE_SIZE,
                starting_after="ch_2",
            ),
        ]

    def test_single_page(self, adapter, mock_stripe_charge, mock_charge):
        """Should make exactly one request when has_more is false."""
        mock_stripe_charge.list.return_value = make_page([mock_charge()])

        charges = list(adapter.iter_charges(created_gte=0, created_lte=10))

        assert len(charges) == 1
        assert mock_stripe_charge.list.call_count == 1

    def test_empty_page_with_has_more_stops(self, adapter, mock_stripe_charge):
        """Should stop on an empty page even if has_more is set."""
        mock_stripe_charge.list.return_value = make_page([], has_more=True)

        assert list(adapter.iter_charges(created_gte=0, created_lte=10)) == []
        assert mock_stripe_charge.list.call_count == 1

    def test_subscriptions_filtered_by_status(self, adapter):
        """Should pass the status filter to every page."""
        with patch("stripe.Subscription") as mock_subscription:
            mock_subscription.list.side_effect = [
                make_page([{"id": "sub_1", "status": "active"}], has_more=True),
                make_page([{"id": "sub_2", "status": "active"}]),
            ]

            subscriptions = list(adapter.iter_subscriptions(status="active"))

        assert [s.id for s in subscriptions] == ["sub_1", "sub_2"]
        for list_call in mock_subscription.list.call_args_list:
            assert list_call.kwargs["status"] == "active"


# =============================================================================
# Error Translation Tests
# =============================================================================


class TestStripeAdapterErrorTranslation:
    """Tests for Stripe error translation to domain exceptions."""

    @pytest.fixture
    def params(self):
        return CreatePaymentIntentParams(amount_cents=5000, currency="eur")

    def test_card_declined_error(self, adapter, mock_stripe_payment_intent, card_error, params):
        """Should translate card_declined to PaymentDeclinedError."""
        mock_stripe_payment_intent.create.side_effect = card_error()

        with pytest.raises(PaymentDeclinedError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "card_declined"
        assert exc_info.value.decline_code == "generic_decline"
        assert not isinstance(exc_info.value, GatewayError)

    def test_authentication_required_error(
        self, adapter, mock_stripe_payment_intent, card_error, params
    ):
        """Should translate authentication_required to PaymentDeclinedError."""
        mock_stripe_payment_intent.create.side_effect = card_error(
            message="This payment requires authentication.",
            code="authentication_required",
            decline_code=None,
        )

        with pytest.raises(PaymentDeclinedError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "authentication_required"

    def test_other_card_error_is_gateway_error(
        self, adapter, mock_stripe_payment_intent, card_error, params
    ):
        """Should translate card errors with other codes to GatewayError."""
        mock_stripe_payment_intent.create.side_effect = card_error(
            message="Your card has expired.", code="expired_card", decline_code=None
        )

        with pytest.raises(GatewayError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "expired_card"

    def test_invalid_request_error(
        self, adapter, mock_stripe_payment_intent, invalid_request_error, params
    ):
        """Should translate InvalidRequestError to GatewayError."""
        mock_stripe_payment_intent.create.side_effect = invalid_request_error()

        with pytest.raises(GatewayError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "resource_missing"
        assert exc_info.value.error_code == "GATEWAY_ERROR"

    def test_nested_error_detail_logged(
        self, adapter, mock_stripe_account, invalid_request_error, caplog
    ):
        """Should log the nested Stripe message without changing the raised error."""
        mock_stripe_account.create.side_effect = invalid_request_error(
            message="Invalid account token",
            param="account_token",
            code="token_invalid",
            json_body={"error": {"message": "The token ct_bad is not valid."}},
        )

        with pytest.raises(GatewayError):
            adapter.create_connected_account("custom", "FR", account_token="ct_bad")

        details = [
            r for r in caplog.records if getattr(r, "stripe_detail", None)
        ]
        assert details
        assert details[0].stripe_detail == "The token ct_bad is not valid."

    def test_api_connection_error(
        self, adapter, mock_stripe_payment_intent, api_connection_error, params
    ):
        """Should translate APIConnectionError to GatewayError."""
        mock_stripe_payment_intent.create.side_effect = api_connection_error

        with pytest.raises(GatewayError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "APIConnectionError"

    def test_authentication_error(
        self, adapter, mock_stripe_payment_intent, authentication_error, params
    ):
        """Should translate AuthenticationError to GatewayError."""
        mock_stripe_payment_intent.create.side_effect = authentication_error

        with pytest.raises(GatewayError):
            adapter.create_payment_intent(params)

    def test_unknown_error(self, adapter, mock_stripe_payment_intent, params):
        """Should wrap non-Stripe exceptions in GatewayError."""
        mock_stripe_payment_intent.create.side_effect = RuntimeError("boom")

        with pytest.raises(GatewayError) as exc_info:
            adapter.create_payment_intent(params)

        assert exc_info.value.stripe_code == "unknown_error"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


# =============================================================================
# StripeAdapter Successful Operations Tests
# =============================================================================


class TestStripeAdapterOperations:
    """Tests for successful Stripe API operations."""

    def test_create_payment_intent(self, adapter, mock_stripe_payment_intent):
        """Should create a PaymentIntent and return its result."""
        result = adapter.create_payment_intent(
            CreatePaymentIntentParams(amount_cents=5000, currency="eur", customer_id="cus_1")
        )

        assert isinstance(result, PaymentIntentResult)
        assert result.id == "pi_test123456"
        assert result.client_secret == "pi_test123456_secret_abc123"
        mock_stripe_payment_intent.create.assert_called_once()
        kwargs = mock_stripe_payment_intent.create.call_args.kwargs
        assert kwargs["amount"] == 5000
        assert kwargs["customer"] == "cus_1"

    def test_capture_payment_intent(self, adapter, mock_stripe_payment_intent):
        """Should capture by id and report the captured state."""
        result = adapter.capture_payment_intent("pi_test123456")

        mock_stripe_payment_intent.capture.assert_called_once_with(
            "pi_test123456", api_key="sk_test_adapter"
        )
        assert result.status == "succeeded"
        assert result.captured is True

    def test_create_customer_omits_empty_description(self, adapter):
        """Should not send an empty description."""
        with patch("stripe.Customer") as mock_customer:
            mock_customer.create.return_value = MockStripeObject(
                {"id": "cus_1", "email": "a@example.com", "created": 1}
            )

            adapter.create_customer("a@example.com", "")

        assert "description" not in mock_customer.create.call_args.kwargs

    def test_set_default_payment_method(self, adapter):
        """Should set the invoice default payment method."""
        with patch("stripe.Customer") as mock_customer:
            mock_customer.modify.return_value = MockStripeObject({"id": "cus_1", "created": 1})

            adapter.set_default_payment_method("cus_1", "pm_1")

        mock_customer.modify.assert_called_once_with(
            "cus_1",
            api_key="sk_test_adapter",
            invoice_settings={"default_payment_method": "pm_1"},
        )

    def test_create_subscription_with_trial(self, adapter):
        """Should send trial_end only when given."""
        with patch("stripe.Subscription") as mock_subscription:
            mock_subscription.create.return_value = MockStripeObject(
                {"id": "sub_1", "status": "trialing", "customer": "cus_1", "trial_end": 2000}
            )

            result = adapter.create_subscription("cus_1", "price_1", trial_end=2000)

        kwargs = mock_subscription.create.call_args.kwargs
        assert kwargs["items"] == [{"price": "price_1"}]
        assert kwargs["trial_end"] == 2000
        assert result.trial_end == 2000

    def test_create_connected_account_requests_capabilities(self, adapter, mock_stripe_account):
        """Should request card payments and transfers capabilities."""
        result = adapter.create_connected_account("express", "FR")

        kwargs = mock_stripe_account.create.call_args.kwargs
        assert kwargs["type"] == "express"
        assert kwargs["country"] == "FR"
        assert kwargs["capabilities"] == {
            "card_payments": {"requested": True},
            "transfers": {"requested": True},
        }
        assert "account_token" not in kwargs
        assert result.id == "acct_test123"
        assert result.currently_due == ["external_account"]

    def test_create_account_link(self, adapter):
        """Should create an onboarding link and return its URL."""
        with patch("stripe.AccountLink") as mock_link:
            mock_link.create.return_value = MockStripeObject(
                {"url": "https://connect.stripe.com/setup/e/acct_1"}
            )

            url = adapter.create_account_link("acct_1", "http://f/reauth", "http://f/return")

        assert url == "https://connect.stripe.com/setup/e/acct_1"
        assert mock_link.create.call_args.kwargs["type"] == "account_onboarding"

    def test_create_transfer(self, adapter):
        """Should create a transfer to the destination account."""
        with patch("stripe.Transfer") as mock_transfer:
            mock_transfer.create.return_value = MockStripeObject(
                {
                    "id": "tr_1",
                    "amount": 4500,
                    "currency": "eur",
                    "destination": "acct_1",
                    "created": 1_700_000_000,
                }
            )

            result = adapter.create_transfer(4500, "acct_1", "eur")

        assert result.id == "tr_1"
        assert result.destination_account == "acct_1"
        assert mock_transfer.create.call_args.kwargs["destination"] == "acct_1"

    def test_create_portal_session(self, adapter):
        """Should create a billing portal session."""
        with patch("stripe.billing_portal.Session") as mock_session:
            mock_session.create.return_value = MockStripeObject(
                {"id": "bps_1", "url": "https://billing.stripe.com/p/session/x"}
            )

            result = adapter.create_portal_session("cus_1", "http://f/account")

        assert result.url == "https://billing.stripe.com/p/session/x"
        mock_session.create.assert_called_once_with(
            api_key="sk_test_adapter", customer="cus_1", return_url="http://f/account"
        )

    def test_list_charges_for_payment_intent(self, adapter, mock_stripe_charge, mock_charge):
        """Should list one page of charges filtered by payment intent."""
        mock_stripe_charge.list.return_value = make_page(
            [mock_charge(refunded=False, amount_refunded=300)]
        )

        charges = adapter.list_charges_for_payment_intent("pi_1")

        assert charges[0].has_refund is True
        kwargs = mock_stripe_charge.list.call_args.kwargs
        assert kwargs["payment_intent"] == "pi_1"
        assert kwargs["limit"] == PAGE_SIZE


def test_stripe_error_classes_are_exported():
    """The adapter relies on the top-level Stripe error classes."""
    assert issubclass(stripe.CardError, stripe.StripeError)
    assert issubclass(stripe.SignatureVerificationError, stripe.StripeError)
