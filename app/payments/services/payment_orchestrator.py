"""
Payment orchestrator: the single entry point for payment operations.

The orchestrator composes every payment service over one StripeAdapter and
exposes their operations as plain methods. It is built once when the
payments app is ready and reached from views through get_orchestrator().

Usage:
    from payments.apps import get_orchestrator

    orchestrator = get_orchestrator()
    customer = orchestrator.create_customer("ada@example.com", "Ada")
    orchestrator.attach_payment_method(customer.id, "pm_123")
    outcome = orchestrator.charge_customer_immediately(customer.id, 4500)
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from payments.services.charge_service import ChargeService
from payments.services.checkout_service import CheckoutService
from payments.services.connect_service import ConnectService
from payments.services.customer_service import CustomerService
from payments.services.statistics_service import StatisticsService
from payments.services.subscription_service import SubscriptionService

if TYPE_CHECKING:
    from payments.adapters import (
        ConnectedAccountResult,
        CustomerResult,
        PaymentIntentResult,
        PaymentMethodResult,
        PriceResult,
        SessionResult,
        StripeAdapter,
        SubscriptionResult,
    )
    from payments.types import (
        AccountStatusLookup,
        ChargeOutcome,
        CustomerStats,
        EscrowIntent,
        PaymentStats,
        TransferOutcome,
    )


logger = logging.getLogger(__name__)


class PaymentOrchestrator:
    """
    Facade over the payment services.

    Holds no state besides the services themselves, which share the one
    adapter passed in. Safe to share between request threads.
    """

    def __init__(self, adapter: StripeAdapter):
        self.adapter = adapter
        self.customers = CustomerService(adapter)
        self.subscriptions = SubscriptionService(adapter)
        self.charges = ChargeService(adapter)
        self.connect = ConnectService(adapter)
        self.statistics = StatisticsService(adapter, subscriptions=self.subscriptions)
        self.checkout = CheckoutService(adapter)
        logger.debug("Payment orchestrator ready")

    # =========================================================================
    # Customers & Subscriptions
    # =========================================================================

    def create_customer(self, email: str, description: str | None = None) -> CustomerResult:
        return self.customers.create_customer(email, description)

    def attach_payment_method(
        self, customer_id: str, payment_method_id: str
    ) -> PaymentMethodResult:
        return self.customers.attach_payment_method(customer_id, payment_method_id)

    def create_subscription(
        self,
        customer_id: str,
        price_id: str,
        start_date: datetime | None = None,
    ) -> SubscriptionResult:
        return self.subscriptions.create_subscription(customer_id, price_id, start_date)

    def cancel_subscription(self, subscription_id: str) -> SubscriptionResult:
        return self.subscriptions.cancel_at_period_end(subscription_id)

    # =========================================================================
    # Charges & Escrow
    # =========================================================================

    def charge_customer_immediately(
        self,
        customer_id: str,
        amount_cents: int,
        description: str | None = None,
    ) -> ChargeOutcome:
        return self.charges.charge_customer_immediately(customer_id, amount_cents, description)

    def create_escrow_intent(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        destination_account_id: str,
        metadata: dict[str, Any],
    ) -> EscrowIntent:
        return self.charges.create_escrow_intent(
            customer_id, amount_cents, currency, destination_account_id, metadata
        )

    def initiate_service_payment(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        provider_account_id: str,
        service_id: str,
    ) -> EscrowIntent:
        return self.charges.initiate_service_payment(
            customer_id, amount_cents, currency, provider_account_id, service_id
        )

    def initiate_delivery_payment(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        deliverer_account_id: str,
    ) -> EscrowIntent:
        return self.charges.initiate_delivery_payment(
            customer_id, amount_cents, currency, deliverer_account_id
        )

    def capture_escrow_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        return self.charges.capture_escrow_intent(payment_intent_id)

    # =========================================================================
    # Connected Accounts
    # =========================================================================

    def create_express_account(self) -> ConnectedAccountResult:
        return self.connect.create_express_account()

    def create_custom_account_from_token(self, account_token: str) -> ConnectedAccountResult:
        return self.connect.create_custom_account_from_token(account_token)

    def create_onboarding_link(self, account_id: str) -> str:
        return self.connect.create_onboarding_link(account_id)

    def get_account_status(self, account_id: str) -> AccountStatusLookup:
        return self.connect.get_account_status(account_id)

    def transfer_to_account(self, account_id: str, amount_cents: int) -> TransferOutcome:
        return self.connect.transfer_to_account(account_id, amount_cents)

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_total_revenue(self, start_unix: int, end_unix: int) -> Decimal:
        return self.statistics.get_total_revenue(start_unix, end_unix)

    def get_customer_stats(self) -> CustomerStats:
        return self.statistics.get_customer_stats()

    def get_active_subscriber_count(self) -> int:
        return self.statistics.get_active_subscriber_count()

    def get_payment_stats(self) -> PaymentStats:
        return self.statistics.get_payment_stats()

    # =========================================================================
    # Catalog & Checkout
    # =========================================================================

    def create_price_for_plan(self, plan_name: str, plan_price) -> PriceResult:
        return self.checkout.create_price_for_plan(plan_name, plan_price)

    def create_checkout_session(
        self,
        price_id: str,
        quantity: int = 1,
        mode: str = "payment",
        customer_id: str | None = None,
        origin: str | None = None,
    ) -> SessionResult:
        return self.checkout.create_checkout_session(
            price_id, quantity=quantity, mode=mode, customer_id=customer_id, origin=origin
        )

    def create_portal_session(self, customer_id: str, origin: str | None = None) -> SessionResult:
        return self.checkout.create_portal_session(customer_id, origin)
