"""
Payment services for coordinating Stripe operations.

This module provides:
- PaymentOrchestrator: Facade composing every service below
- CustomerService: Customers and payment methods
- SubscriptionService: Recurring billing
- ChargeService: Off-session charges and escrow intents
- ConnectService: Connected accounts and transfers
- StatisticsService: Revenue, customer and payment aggregates
- CheckoutService: Plan prices, Checkout and Billing Portal sessions

Usage:
    from payments.services import PaymentOrchestrator
    from payments.adapters import StripeAdapter

    orchestrator = PaymentOrchestrator(StripeAdapter.from_settings())
    revenue = orchestrator.get_total_revenue(start_unix, end_unix)
"""

from payments.services.charge_service import ChargeService
from payments.services.checkout_service import CheckoutService
from payments.services.connect_service import ConnectService
from payments.services.customer_service import CustomerService
from payments.services.payment_orchestrator import PaymentOrchestrator
from payments.services.statistics_service import StatisticsService
from payments.services.subscription_service import SubscriptionService

__all__ = [
    "ChargeService",
    "CheckoutService",
    "ConnectService",
    "CustomerService",
    "PaymentOrchestrator",
    "StatisticsService",
    "SubscriptionService",
]
