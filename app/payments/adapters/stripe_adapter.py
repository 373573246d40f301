"""
Stripe API adapter for payment operations.

This module provides the StripeAdapter class which encapsulates all
Stripe API interactions. All Stripe calls go through one adapter instance,
built once at process start and handed to every service, to ensure
consistent authentication, timeouts, error translation and observability.

Features:
- API key passed explicitly on every call (no module-level stripe.api_key)
- Configurable timeout on all API calls
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Cursor-based pagination over full collections
- No automatic retries (idempotency on retry is the caller's concern)

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key (required)
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from payments.adapters import StripeAdapter, CreatePaymentIntentParams

    adapter = StripeAdapter.from_settings()

    result = adapter.create_payment_intent(
        CreatePaymentIntentParams(
            amount_cents=5000,
            currency="eur",
            customer_id="cus_123",
            capture_method="manual",
        )
    )

    for charge in adapter.iter_charges(created_gte=start, created_lte=end):
        ...
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import stripe
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from payments.exceptions import (
    DECLINE_CODES,
    GatewayError,
    PaymentDeclinedError,
)

# Stripe's maximum page size for list endpoints
PAGE_SIZE = 100


# =============================================================================
# Data Types
# =============================================================================


def as_dict(obj: Any) -> dict[str, Any]:
    """Convert a Stripe object (or plain mapping) into a dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


@dataclass
class CreatePaymentIntentParams:
    """
    Parameters for creating a Stripe PaymentIntent.

    Attributes:
        amount_cents: Payment amount in smallest currency unit (e.g., cents)
        currency: ISO 4217 currency code
        customer_id: Stripe Customer ID
        metadata: Key-value pairs to attach to the PaymentIntent
        payment_method_id: Stored payment method to charge (off-session flows)
        payment_method_types: Allowed payment methods (default: ['card'])
        capture_method: 'automatic' or 'manual' (default: 'automatic')
        transfer_data: Connect transfer destination (optional)
        off_session: Charge without the customer present
        confirm: Confirm the PaymentIntent in the same call
        description: Free-text description shown in the dashboard
        idempotency_key: Optional key for safe caller-side retries
    """

    amount_cents: int
    currency: str
    customer_id: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    payment_method_id: str | None = None
    payment_method_types: list[str] = field(default_factory=lambda: ["card"])
    capture_method: str = "automatic"
    transfer_data: dict[str, Any] | None = None
    off_session: bool = False
    confirm: bool = False
    description: str | None = None
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.amount_cents <= 0:
            raise ValueError("amount_cents must be positive")
        if not self.currency:
            raise ValueError("currency is required")
        if self.capture_method not in ("automatic", "manual"):
            raise ValueError("capture_method must be 'automatic' or 'manual'")

    def to_stripe_params(self) -> dict[str, Any]:
        """Build keyword arguments for stripe.PaymentIntent.create."""
        params: dict[str, Any] = {
            "amount": self.amount_cents,
            "currency": self.currency,
            "metadata": self.metadata,
            "capture_method": self.capture_method,
        }
        if self.customer_id:
            params["customer"] = self.customer_id
        if self.payment_method_id:
            params["payment_method"] = self.payment_method_id
        else:
            params["payment_method_types"] = self.payment_method_types
        if self.transfer_data:
            params["transfer_data"] = self.transfer_data
        if self.off_session:
            params["off_session"] = True
        if self.confirm:
            params["confirm"] = True
        if self.description:
            params["description"] = self.description
        if self.idempotency_key:
            params["idempotency_key"] = self.idempotency_key
        return params


@dataclass
class CustomerResult:
    """
    Result from Stripe Customer operations.

    Attributes:
        id: Customer ID (cus_xxx)
        email: Contact email
        description: Free-text description
        created: Creation timestamp (Unix seconds)
        raw_response: Full Stripe response dict
    """

    id: str
    email: str | None
    description: str | None
    created: int
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> CustomerResult:
        return cls(
            id=data["id"],
            email=data.get("email"),
            description=data.get("description"),
            created=data.get("created") or 0,
            raw_response=data,
        )


@dataclass
class PaymentMethodResult:
    id: str
    type: str
    customer_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> PaymentMethodResult:
        return cls(
            id=data["id"],
            type=data.get("type") or "card",
            customer_id=data.get("customer"),
            raw_response=data,
        )


@dataclass
class SubscriptionResult:
    """
    Result from Stripe Subscription operations.

    Attributes:
        id: Subscription ID (sub_xxx)
        status: active, trialing, canceled, ...
        customer_id: Owning customer
        trial_end: Trial end (Unix seconds) if a trial was requested
        cancel_at_period_end: Whether cancellation waits for the period boundary
        raw_response: Full Stripe response dict
    """

    id: str
    status: str
    customer_id: str | None
    trial_end: int | None = None
    cancel_at_period_end: bool = False
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> SubscriptionResult:
        return cls(
            id=data["id"],
            status=data.get("status") or "",
            customer_id=data.get("customer"),
            trial_end=data.get("trial_end"),
            cancel_at_period_end=bool(data.get("cancel_at_period_end")),
            raw_response=data,
        )


@dataclass
class PaymentIntentResult:
    """
    Result from Stripe PaymentIntent operations.

    Attributes:
        id: PaymentIntent ID (pi_xxx)
        status: Current status (requires_payment_method, succeeded, etc.)
        amount_cents: Amount in cents
        amount_received_cents: Amount actually received in cents
        currency: Currency code
        client_secret: Secret for client-side confirmation
        capture_method: 'automatic' or 'manual'
        payment_method_types: Declared payment method types
        metadata: Attached metadata
        raw_response: Full Stripe response dict (for debugging)
    """

    id: str
    status: str
    amount_cents: int
    currency: str
    amount_received_cents: int = 0
    client_secret: str | None = None
    capture_method: str = "automatic"
    payment_method_types: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def captured(self) -> bool:
        return self.amount_received_cents > 0

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> PaymentIntentResult:
        return cls(
            id=data["id"],
            status=data.get("status") or "",
            amount_cents=data.get("amount") or 0,
            currency=data.get("currency") or "",
            amount_received_cents=data.get("amount_received") or 0,
            client_secret=data.get("client_secret"),
            capture_method=data.get("capture_method") or "automatic",
            payment_method_types=list(data.get("payment_method_types") or []),
            metadata=dict(data.get("metadata") or {}),
            raw_response=data,
        )


@dataclass
class ChargeResult:
    id: str
    amount_cents: int
    paid: bool
    refunded: bool
    amount_refunded_cents: int = 0
    created: int = 0
    payment_intent_id: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def has_refund(self) -> bool:
        return self.refunded or self.amount_refunded_cents > 0

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> ChargeResult:
        return cls(
            id=data["id"],
            amount_cents=data.get("amount") or 0,
            paid=bool(data.get("paid")),
            refunded=bool(data.get("refunded")),
            amount_refunded_cents=data.get("amount_refunded") or 0,
            created=data.get("created") or 0,
            payment_intent_id=data.get("payment_intent"),
            raw_response=data,
        )


@dataclass
class ConnectedAccountResult:
    """
    Result from Stripe Connect account operations.

    Attributes:
        id: Account ID (acct_xxx)
        type: express or custom
        country: Jurisdiction of the account
        details_submitted: Onboarding details submitted
        charges_enabled: Account can accept charges
        payouts_enabled: Account can receive payouts
        currently_due: Outstanding requirement keys
        raw_response: Full Stripe response dict
    """

    id: str
    type: str | None = None
    country: str | None = None
    details_submitted: bool = False
    charges_enabled: bool = False
    payouts_enabled: bool = False
    currently_due: list[str] = field(default_factory=list)
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> ConnectedAccountResult:
        requirements = data.get("requirements") or {}
        return cls(
            id=data["id"],
            type=data.get("type"),
            country=data.get("country"),
            details_submitted=data.get("details_submitted") is True,
            charges_enabled=data.get("charges_enabled") is True,
            payouts_enabled=data.get("payouts_enabled") is True,
            currently_due=list(requirements.get("currently_due") or []),
            raw_response=data,
        )


@dataclass
class TransferResult:
    """
    Result from Stripe Transfer operations.

    Attributes:
        id: Transfer ID (tr_xxx)
        amount_cents: Amount transferred in cents
        currency: Currency code
        destination_account: Destination Stripe account ID
        created: Creation timestamp (Unix seconds)
        raw_response: Full Stripe response dict
    """

    id: str
    amount_cents: int
    currency: str
    destination_account: str
    created: int = 0
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> TransferResult:
        return cls(
            id=data["id"],
            amount_cents=data.get("amount") or 0,
            currency=data.get("currency") or "",
            destination_account=data.get("destination") or "",
            created=data.get("created") or 0,
            raw_response=data,
        )


@dataclass
class PriceResult:
    id: str
    product_id: str
    unit_amount_cents: int
    currency: str
    interval: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> PriceResult:
        recurring = data.get("recurring") or {}
        return cls(
            id=data["id"],
            product_id=data.get("product") or "",
            unit_amount_cents=data.get("unit_amount") or 0,
            currency=data.get("currency") or "",
            interval=recurring.get("interval"),
            raw_response=data,
        )


@dataclass
class SessionResult:
    """Checkout or billing-portal session."""

    id: str
    url: str | None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> SessionResult:
        return cls(id=data["id"], url=data.get("url"), raw_response=data)


# =============================================================================
# Stripe Adapter
# =============================================================================


class StripeAdapter:
    """
    Adapter for Stripe API operations.

    One instance holds the credentials for the lifetime of the process and is
    injected into every service. The instance is immutable after construction
    and safe to share between request threads.

    Usage:
        adapter = StripeAdapter.from_settings()
        customer = adapter.create_customer("ada@example.com", "Ada")
        intent = adapter.capture_payment_intent("pi_xxx")
    """

    def __init__(
        self,
        api_key: str,
        timeout: int = 10,
    ):
        if not api_key:
            raise ImproperlyConfigured("STRIPE_SECRET_KEY must be set")
        self.api_key = api_key
        self.timeout = timeout
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    @classmethod
    def from_settings(cls) -> StripeAdapter:
        """Build the adapter from Django settings."""
        return cls(
            api_key=settings.STRIPE_SECRET_KEY,
            timeout=settings.STRIPE_API_TIMEOUT_SECONDS,
        )

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Call Plumbing
    # =========================================================================

    def _execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args: Any,
        log_context: dict[str, Any] | None = None,
        level: int = logging.INFO,
        **params: Any,
    ) -> dict[str, Any]:
        """
        Run one Stripe call with logging, timing and error translation.

        Args:
            operation: Operation name for logs
            func: Stripe SDK callable (e.g. stripe.Customer.create)
            *args: Positional arguments (resource ids)
            log_context: Extra logging context (subject ids)
            level: Log level for start/completion messages
            **params: Stripe request parameters

        Returns:
            Response converted to a dict

        Raises:
            PaymentDeclinedError: authentication_required or card_declined
            GatewayError: Any other failure
        """
        logger = self.get_logger()
        log_context = {"operation": operation, **(log_context or {})}

        start_time = time.time()
        logger.log(level, "Starting Stripe operation", extra=log_context)

        try:
            response = func(*args, api_key=self.api_key, **params)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_stripe_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

        duration_ms = (time.time() - start_time) * 1000
        data = as_dict(response)
        logger.log(
            level,
            "Stripe operation completed",
            extra={**log_context, "object_id": data.get("id"), "duration_ms": duration_ms},
        )
        return data

    def list_all(
        self,
        operation: str,
        list_fn: Callable[..., Any],
        log_context: dict[str, Any] | None = None,
        **params: Any,
    ) -> Iterator[dict[str, Any]]:
        """
        Iterate over a whole Stripe collection with cursor pagination.

        Requests pages of PAGE_SIZE items, using the id of the last item of
        the previous page as starting_after, while Stripe reports has_more.
        Pages are fetched one after another, never concurrently.

        Args:
            operation: Operation name for logs
            list_fn: Stripe list callable (e.g. stripe.Charge.list)
            log_context: Extra logging context
            **params: Filters passed to every page request

        Yields:
            Each item of the collection as a dict
        """
        starting_after: str | None = None
        page_number = 0

        while True:
            page_params = {**params, "limit": PAGE_SIZE}
            if starting_after:
                page_params["starting_after"] = starting_after

            page_number += 1
            page = self._execute(
                operation,
                list_fn,
                log_context={**(log_context or {}), "page": page_number},
                level=logging.DEBUG,
                **page_params,
            )
            items = [as_dict(item) for item in page.get("data") or []]
            yield from items

            if not page.get("has_more") or not items:
                break
            starting_after = items[-1]["id"]

    def _list_page(
        self,
        operation: str,
        list_fn: Callable[..., Any],
        log_context: dict[str, Any] | None = None,
        **params: Any,
    ) -> list[dict[str, Any]]:
        """Fetch a single page (no further pagination)."""
        page = self._execute(operation, list_fn, log_context=log_context, **params)
        return [as_dict(item) for item in page.get("data") or []]

    # =========================================================================
    # Customers & Payment Methods
    # =========================================================================

    def create_customer(self, email: str, description: str | None = None) -> CustomerResult:
        params = {"email": email}
        if description:
            params["description"] = description

        data = self._execute("create_customer", stripe.Customer.create, **params)
        return CustomerResult.from_stripe(data)

    def set_default_payment_method(
        self, customer_id: str, payment_method_id: str
    ) -> CustomerResult:
        """Make a payment method the customer's default for invoices."""
        data = self._execute(
            "set_default_payment_method",
            stripe.Customer.modify,
            customer_id,
            log_context={"customer_id": customer_id, "payment_method_id": payment_method_id},
            invoice_settings={"default_payment_method": payment_method_id},
        )
        return CustomerResult.from_stripe(data)

    def iter_customers(self) -> Iterator[CustomerResult]:
        for item in self.list_all("list_customers", stripe.Customer.list):
            yield CustomerResult.from_stripe(item)

    def list_payment_methods(
        self, customer_id: str, type: str = "card", limit: int = PAGE_SIZE
    ) -> list[PaymentMethodResult]:
        """
        List a customer's payment methods (single page).

        Args:
            customer_id: Stripe Customer ID
            type: Payment method type (only 'card' is handled)
            limit: Page size, capped at 100

        Returns:
            PaymentMethodResult list in Stripe's default order
        """
        items = self._list_page(
            "list_payment_methods",
            stripe.PaymentMethod.list,
            log_context={"customer_id": customer_id},
            customer=customer_id,
            type=type,
            limit=min(limit, PAGE_SIZE),
        )
        return [PaymentMethodResult.from_stripe(item) for item in items]

    def attach_payment_method(
        self, payment_method_id: str, customer_id: str
    ) -> PaymentMethodResult:
        data = self._execute(
            "attach_payment_method",
            stripe.PaymentMethod.attach,
            payment_method_id,
            log_context={"customer_id": customer_id, "payment_method_id": payment_method_id},
            customer=customer_id,
        )
        return PaymentMethodResult.from_stripe(data)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def create_subscription(
        self, customer_id: str, price_id: str, trial_end: int | None = None
    ) -> SubscriptionResult:
        params: dict[str, Any] = {
            "customer": customer_id,
            "items": [{"price": price_id}],
        }
        if trial_end is not None:
            params["trial_end"] = trial_end

        data = self._execute(
            "create_subscription",
            stripe.Subscription.create,
            log_context={"customer_id": customer_id, "price_id": price_id},
            **params,
        )
        return SubscriptionResult.from_stripe(data)

    def cancel_subscription_at_period_end(self, subscription_id: str) -> SubscriptionResult:
        data = self._execute(
            "cancel_subscription_at_period_end",
            stripe.Subscription.modify,
            subscription_id,
            log_context={"subscription_id": subscription_id},
            cancel_at_period_end=True,
        )
        return SubscriptionResult.from_stripe(data)

    def iter_subscriptions(self, status: str | None = None) -> Iterator[SubscriptionResult]:
        params = {"status": status} if status else {}
        for item in self.list_all("list_subscriptions", stripe.Subscription.list, **params):
            yield SubscriptionResult.from_stripe(item)

    # =========================================================================
    # Payment Intents & Charges
    # =========================================================================

    def create_payment_intent(self, params: CreatePaymentIntentParams) -> PaymentIntentResult:
        """
        Create a Stripe PaymentIntent.

        Args:
            params: Parameters for creating the PaymentIntent

        Returns:
            PaymentIntentResult with PaymentIntent details including client_secret

        Raises:
            PaymentDeclinedError: Card declined or authentication required
            GatewayError: Invalid parameters or platform failure
        """
        data = self._execute(
            "create_payment_intent",
            stripe.PaymentIntent.create,
            log_context={
                "customer_id": params.customer_id,
                "amount_cents": params.amount_cents,
                "currency": params.currency,
                "capture_method": params.capture_method,
            },
            **params.to_stripe_params(),
        )
        return PaymentIntentResult.from_stripe(data)

    def capture_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        """
        Capture a manual-capture PaymentIntent.

        Raises:
            GatewayError: PaymentIntent already captured, expired or canceled
        """
        data = self._execute(
            "capture_payment_intent",
            stripe.PaymentIntent.capture,
            payment_intent_id,
            log_context={"payment_intent_id": payment_intent_id},
        )
        return PaymentIntentResult.from_stripe(data)

    def list_recent_payment_intents(self, limit: int = PAGE_SIZE) -> list[PaymentIntentResult]:
        """List the most recent PaymentIntents (single page, max 100)."""
        items = self._list_page(
            "list_recent_payment_intents",
            stripe.PaymentIntent.list,
            limit=min(limit, PAGE_SIZE),
        )
        return [PaymentIntentResult.from_stripe(item) for item in items]

    def list_charges_for_payment_intent(self, payment_intent_id: str) -> list[ChargeResult]:
        items = self._list_page(
            "list_charges_for_payment_intent",
            stripe.Charge.list,
            log_context={"payment_intent_id": payment_intent_id},
            payment_intent=payment_intent_id,
            limit=PAGE_SIZE,
        )
        return [ChargeResult.from_stripe(item) for item in items]

    def iter_charges(self, created_gte: int, created_lte: int) -> Iterator[ChargeResult]:
        """Iterate over every charge created within [created_gte, created_lte]."""
        for item in self.list_all(
            "list_charges",
            stripe.Charge.list,
            log_context={"created_gte": created_gte, "created_lte": created_lte},
            created={"gte": created_gte, "lte": created_lte},
        ):
            yield ChargeResult.from_stripe(item)

    # =========================================================================
    # Connect
    # =========================================================================

    def create_connected_account(
        self,
        account_type: str,
        country: str,
        account_token: str | None = None,
    ) -> ConnectedAccountResult:
        """
        Create a Connect account requesting card payments and transfers.

        Args:
            account_type: 'express' or 'custom'
            country: Account jurisdiction (ISO 3166-1 alpha-2)
            account_token: Client-collected account token (custom accounts)
        """
        params: dict[str, Any] = {
            "type": account_type,
            "country": country,
            "capabilities": {
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
        }
        if account_token:
            params["account_token"] = account_token

        data = self._execute(
            "create_connected_account",
            stripe.Account.create,
            log_context={"account_type": account_type, "country": country},
            **params,
        )
        return ConnectedAccountResult.from_stripe(data)

    def retrieve_account(self, account_id: str) -> ConnectedAccountResult:
        data = self._execute(
            "retrieve_account",
            stripe.Account.retrieve,
            account_id,
            log_context={"account_id": account_id},
            level=logging.DEBUG,
        )
        return ConnectedAccountResult.from_stripe(data)

    def create_account_link(
        self, account_id: str, refresh_url: str, return_url: str
    ) -> str:
        data = self._execute(
            "create_account_link",
            stripe.AccountLink.create,
            log_context={"account_id": account_id},
            account=account_id,
            refresh_url=refresh_url,
            return_url=return_url,
            type="account_onboarding",
        )
        return data["url"]

    def create_transfer(
        self,
        amount_cents: int,
        destination_account: str,
        currency: str,
        metadata: dict[str, str] | None = None,
    ) -> TransferResult:
        """
        Create a transfer to a connected Stripe account.

        Raises:
            GatewayError: Invalid destination or insufficient platform balance
        """
        data = self._execute(
            "create_transfer",
            stripe.Transfer.create,
            log_context={
                "amount_cents": amount_cents,
                "destination_account": destination_account,
            },
            amount=amount_cents,
            currency=currency,
            destination=destination_account,
            metadata=metadata or {},
        )
        return TransferResult.from_stripe(data)

    # =========================================================================
    # Catalog & Hosted Sessions
    # =========================================================================

    def create_product(self, name: str) -> str:
        data = self._execute("create_product", stripe.Product.create, name=name)
        return data["id"]

    def create_price(
        self,
        product_id: str,
        unit_amount_cents: int,
        currency: str,
        interval: str = "month",
    ) -> PriceResult:
        data = self._execute(
            "create_price",
            stripe.Price.create,
            log_context={"product_id": product_id},
            product=product_id,
            unit_amount=unit_amount_cents,
            currency=currency,
            recurring={"interval": interval},
        )
        return PriceResult.from_stripe(data)

    def create_checkout_session(self, **params: Any) -> SessionResult:
        data = self._execute(
            "create_checkout_session",
            stripe.checkout.Session.create,
            log_context={"mode": params.get("mode")},
            **params,
        )
        return SessionResult.from_stripe(data)

    def create_portal_session(self, customer_id: str, return_url: str) -> SessionResult:
        data = self._execute(
            "create_portal_session",
            stripe.billing_portal.Session.create,
            log_context={"customer_id": customer_id},
            customer=customer_id,
            return_url=return_url,
        )
        return SessionResult.from_stripe(data)

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_stripe_error(
        cls,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate Stripe exceptions to domain exceptions.

        Args:
            error: The Stripe exception
            log_context: Logging context dict
            duration_ms: Operation duration for logging

        Raises:
            PaymentDeclinedError: authentication_required or card_declined
            GatewayError: Everything else
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if not isinstance(error, stripe.StripeError):
            logger.error(
                f"Unexpected error from Stripe: {type(error).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise GatewayError(
                f"Unexpected Stripe error: {error}",
                stripe_code="unknown_error",
            ) from error

        stripe_code = getattr(error, "code", None)
        decline_code = getattr(error, "decline_code", None)
        message = str(getattr(error, "user_message", None) or error)

        if stripe_code in DECLINE_CODES:
            logger.warning(
                "Payment declined by Stripe",
                extra={**log_context, "stripe_code": stripe_code, "decline_code": decline_code},
            )
            raise PaymentDeclinedError(
                message,
                stripe_code=stripe_code,
                decline_code=decline_code,
            ) from error

        if isinstance(error, stripe.AuthenticationError):
            logger.critical(
                "Stripe authentication failed - check API key",
                extra=log_context,
            )
        elif isinstance(error, (stripe.APIConnectionError, stripe.APIError)):
            logger.error(
                "Stripe unavailable",
                extra={**log_context, "stripe_code": stripe_code},
                exc_info=True,
            )
        else:
            logger.error(
                "Stripe rejected request",
                extra={**log_context, "stripe_code": stripe_code},
            )

        detail = cls._nested_error_message(error)
        if detail:
            logger.error(
                "Stripe error detail",
                extra={**log_context, "stripe_detail": detail},
            )

        raise GatewayError(
            message,
            stripe_code=stripe_code or type(error).__name__,
            decline_code=decline_code,
        ) from error

    @staticmethod
    def _nested_error_message(error: Exception) -> str | None:
        """Extract the message Stripe nests in the error body, if any."""
        json_body = getattr(error, "json_body", None) or {}
        nested = json_body.get("error") if isinstance(json_body, dict) else None
        if isinstance(nested, dict):
            return nested.get("message")
        return None
