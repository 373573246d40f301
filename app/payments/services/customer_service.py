"""
Customer and payment-instrument registration.

Operations:
    - create_customer: register a customer on Stripe
    - attach_payment_method: attach a card once and make it the invoice default
"""

from __future__ import annotations

from payments.adapters import CustomerResult, PaymentMethodResult
from payments.exceptions import GatewayError, PaymentMethodConflictError
from payments.services.base import PaymentService


class CustomerService(PaymentService):
    """Registers customers and attaches payment methods to them."""

    def create_customer(self, email: str, description: str | None = None) -> CustomerResult:
        """
        Create a Stripe customer.

        Only presence is checked locally; Stripe validates the email format.

        Raises:
            PaymentValidationError: email missing
            GatewayError: Stripe rejected the customer
        """
        self.require(email=email)
        customer = self.adapter.create_customer(email, description)
        self.get_logger().info("Customer created", extra={"customer_id": customer.id})
        return customer

    def attach_payment_method(
        self, customer_id: str, payment_method_id: str
    ) -> PaymentMethodResult:
        """
        Attach a card to a customer and set it as the default for invoices.

        The duplicate check only looks at the first page (100 cards) of the
        customer's cards. Attach and set-default are two separate calls: if
        the second one fails the card stays attached but is not the default,
        and the GatewayError is propagated so the caller can re-query.

        Raises:
            PaymentValidationError: customer_id or payment_method_id missing
            PaymentMethodConflictError: card already attached to this customer
            GatewayError: Stripe rejected either call
        """
        self.require(customer_id=customer_id, payment_method_id=payment_method_id)
        logger = self.get_logger()
        log_context = {"customer_id": customer_id, "payment_method_id": payment_method_id}

        existing = self.adapter.list_payment_methods(customer_id, type="card")
        if any(pm.id == payment_method_id for pm in existing):
            logger.info("Payment method already attached", extra=log_context)
            raise PaymentMethodConflictError(
                "This payment method is already attached to the customer",
                details=log_context,
            )

        payment_method = self.adapter.attach_payment_method(payment_method_id, customer_id)

        try:
            self.adapter.set_default_payment_method(customer_id, payment_method_id)
        except GatewayError:
            logger.error(
                "Payment method attached but not set as default",
                extra=log_context,
            )
            raise

        logger.info("Payment method attached as default", extra=log_context)
        return payment_method
