"""
Subscription lifecycle management.

Operations:
    - create_subscription: subscribe a customer to a recurring price, with an
      optional trial until a future start date
    - cancel_at_period_end: stop renewal at the current period boundary
    - count_active_subscribers: count every subscription in 'active' status
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone

from payments.adapters import SubscriptionResult
from payments.services.base import PaymentService


class SubscriptionService(PaymentService):
    """Creates and cancels recurring billing relationships."""

    def __init__(self, adapter, clock: Callable[[], datetime] = timezone.now):
        super().__init__(adapter)
        self.clock = clock

    def create_subscription(
        self,
        customer_id: str,
        price_id: str,
        start_date: datetime | None = None,
    ) -> SubscriptionResult:
        """
        Create a subscription.

        When start_date is strictly after now, billing starts then: its Unix
        seconds (floored) are sent as trial_end. A past or present start_date
        is ignored and no trial is requested.

        Raises:
            PaymentValidationError: customer_id or price_id missing
            GatewayError: Stripe rejected the subscription (e.g. unknown price)
        """
        self.require(customer_id=customer_id, price_id=price_id)

        trial_end = None
        if start_date is not None and timezone.is_naive(start_date):
            start_date = timezone.make_aware(start_date, dt_timezone.utc)
        if start_date is not None and start_date > self.clock():
            trial_end = math.floor(start_date.timestamp())

        subscription = self.adapter.create_subscription(customer_id, price_id, trial_end=trial_end)
        self.get_logger().info(
            "Subscription created",
            extra={
                "customer_id": customer_id,
                "subscription_id": subscription.id,
                "trial_end": trial_end,
            },
        )
        return subscription

    def cancel_at_period_end(self, subscription_id: str) -> SubscriptionResult:
        """
        Cancel at the end of the current billing period.

        Access continues until the period boundary.

        Raises:
            GatewayError: unknown subscription id
        """
        self.require(subscription_id=subscription_id)
        subscription = self.adapter.cancel_subscription_at_period_end(subscription_id)
        self.get_logger().info(
            "Subscription set to cancel at period end",
            extra={"subscription_id": subscription_id},
        )
        return subscription

    def count_active_subscribers(self) -> int:
        return sum(1 for _ in self.adapter.iter_subscriptions(status="active"))
