"""
Catalog prices and Stripe-hosted sessions (Checkout and Billing Portal).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from payments.adapters import PriceResult, SessionResult
from payments.services.base import PaymentService

CHECKOUT_MODES = ("payment", "subscription")


class CheckoutService(PaymentService):
    """Creates plan prices and redirect sessions for the frontend."""

    def create_price_for_plan(self, plan_name: str, plan_price) -> PriceResult:
        """
        Create a product and its monthly recurring price.

        plan_price is in major units; it is converted to cents rounding
        half-up.

        Raises:
            PaymentValidationError: name or price missing, price not positive
            GatewayError: Stripe rejected the product or price
        """
        self.require(plan_name=plan_name, plan_price=plan_price)
        try:
            price = Decimal(str(plan_price))
        except InvalidOperation as e:
            raise self.validation_error_class(
                "planPrice must be a number",
                details={"plan_price": str(plan_price)},
            ) from e
        if not price.is_finite() or price <= 0:
            raise self.validation_error_class(
                "planPrice must be greater than zero",
                details={"plan_price": str(plan_price)},
            )

        unit_amount = int((price * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        product_id = self.adapter.create_product(plan_name)
        result = self.adapter.create_price(
            product_id,
            unit_amount,
            self.default_currency(),
            interval="month",
        )
        self.get_logger().info(
            "Plan price created",
            extra={"product_id": product_id, "price_id": result.id, "unit_amount": unit_amount},
        )
        return result

    def create_checkout_session(
        self,
        price_id: str,
        quantity: int = 1,
        mode: str = "payment",
        customer_id: str | None = None,
        origin: str | None = None,
    ) -> SessionResult:
        """
        Create a Stripe Checkout session for one price.

        Raises:
            PaymentValidationError: price missing, bad quantity or mode
            GatewayError: Stripe rejected the session
        """
        self.require(price_id=price_id)
        if mode not in CHECKOUT_MODES:
            raise self.validation_error_class(
                f"mode must be one of: {', '.join(CHECKOUT_MODES)}",
                details={"mode": mode},
            )
        if quantity < 1:
            raise self.validation_error_class(
                "quantity must be at least 1",
                details={"quantity": quantity},
            )

        base = self._origin(origin)
        params = {
            "line_items": [{"price": price_id, "quantity": quantity}],
            "payment_method_types": ["card"],
            "mode": mode,
            "success_url": f"{base}/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{base}/cancelled",
        }
        if customer_id:
            params["customer"] = customer_id

        session = self.adapter.create_checkout_session(**params)
        self.get_logger().info(
            "Checkout session created",
            extra={"session_id": session.id, "mode": mode, "customer_id": customer_id},
        )
        return session

    def create_portal_session(self, customer_id: str, origin: str | None = None) -> SessionResult:
        self.require(customer_id=customer_id)
        return self.adapter.create_portal_session(
            customer_id,
            return_url=f"{self._origin(origin)}/account",
        )

    def _origin(self, origin: str | None) -> str:
        return origin.rstrip("/") if origin else self.frontend_url()
