"""
Business statistics computed on demand from Stripe.

Nothing is cached or stored locally: every call walks the relevant Stripe
collection. Revenue and customer counts traverse every page; payment
statistics look at the 100 most recent PaymentIntents only.

Amounts are summed in cents and converted to euros once, with Decimal, so
the result is exact.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from django.conf import settings

from payments.adapters import PaymentIntentResult
from payments.services.base import PaymentService
from payments.types import CustomerStats, MethodStats, PaymentStats, RevenueWindow

NEW_CUSTOMER_WINDOW_SECONDS = 30 * 24 * 3600


class StatisticsService(PaymentService):
    """Read-only aggregates over customers, charges and payment intents."""

    def __init__(
        self,
        adapter,
        subscriptions=None,
        clock: Callable[[], float] = time.time,
        max_workers: int | None = None,
    ):
        super().__init__(adapter)
        self.subscriptions = subscriptions
        self.clock = clock
        self.max_workers = max_workers

    # =========================================================================
    # Revenue
    # =========================================================================

    def get_revenue_window(self, start_unix: int, end_unix: int) -> RevenueWindow:
        """
        Sum paid, non-refunded charges created in [start_unix, end_unix].

        Raises:
            PaymentValidationError: start after end
            GatewayError: a page request failed
        """
        self.require(start_date=start_unix, end_date=end_unix)
        if start_unix > end_unix:
            raise self.validation_error_class(
                "startDate must not be after endDate",
                details={"start": start_unix, "end": end_unix},
            )

        total_cents = 0
        for charge in self.adapter.iter_charges(start_unix, end_unix):
            if charge.paid and not charge.refunded:
                total_cents += charge.amount_cents

        self.get_logger().info(
            "Revenue computed",
            extra={"start": start_unix, "end": end_unix, "total_cents": total_cents},
        )
        return RevenueWindow(start=start_unix, end=end_unix, total_cents=total_cents)

    def get_total_revenue(self, start_unix: int, end_unix: int) -> Decimal:
        """Revenue in euros for the window (see get_revenue_window)."""
        return self.get_revenue_window(start_unix, end_unix).total_euros

    # =========================================================================
    # Customers & Subscribers
    # =========================================================================

    def get_customer_stats(self) -> CustomerStats:
        """Total customers and those created in the last 30 days."""
        threshold = int(self.clock()) - NEW_CUSTOMER_WINDOW_SECONDS
        total = new = 0
        for customer in self.adapter.iter_customers():
            total += 1
            if customer.created >= threshold:
                new += 1
        return CustomerStats(total=total, new=new)

    def get_active_subscriber_count(self) -> int:
        if self.subscriptions is not None:
            return self.subscriptions.count_active_subscribers()
        return sum(1 for _ in self.adapter.iter_subscriptions(status="active"))

    # =========================================================================
    # Payments
    # =========================================================================

    def get_payment_stats(self) -> PaymentStats:
        """
        Success rate, refund rate, average value and per-method breakdown.

        Covers the 100 most recent PaymentIntents. Whether each intent was
        refunded takes one extra Stripe call; those calls run on a small
        thread pool bounded by STRIPE_STATS_MAX_WORKERS.
        """
        intents = self.adapter.list_recent_payment_intents()
        total = len(intents)
        if total == 0:
            return PaymentStats.empty()

        refunded = sum(1 for was_refunded in self._refund_flags(intents) if was_refunded)

        succeeded = [intent for intent in intents if intent.status == "succeeded"]
        by_method: dict[str, MethodStats] = {}
        value_sum = Decimal(0)
        for intent in succeeded:
            value = Decimal(intent.amount_received_cents) / 100
            value_sum += value
            method = intent.payment_method_types[0] if intent.payment_method_types else "unknown"
            stats = by_method.setdefault(method, MethodStats(method=method))
            stats.count += 1
            stats.value += value

        average_value = value_sum / len(succeeded) if succeeded else Decimal(0)

        return PaymentStats(
            success_rate=len(succeeded) / total * 100,
            average_value=average_value,
            refund_rate=refunded / total * 100,
            by_method=list(by_method.values()),
        )

    def _refund_flags(self, intents: list[PaymentIntentResult]) -> list[bool]:
        workers = self.max_workers or settings.STRIPE_STATS_MAX_WORKERS
        if workers <= 1:
            return [self._was_refunded(intent) for intent in intents]

        with ThreadPoolExecutor(max_workers=min(workers, len(intents))) as executor:
            return list(executor.map(self._was_refunded, intents))

    def _was_refunded(self, intent: PaymentIntentResult) -> bool:
        charges = self.adapter.list_charges_for_payment_intent(intent.id)
        return any(charge.has_refund for charge in charges)
