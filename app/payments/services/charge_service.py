"""
Charge processing: immediate off-session charges and escrow intents.

Escrow intents are manual-capture PaymentIntents whose funds go to a
connected account once captured. They are authorized before the service or
delivery happens and captured only on fulfillment. Two business flows use
them, told apart only by metadata:

    service_booking   - a provider's service booked by a customer
    delivery_payment  - a deliverer's delivery

Usage:
    service = ChargeService(adapter)

    intent = service.initiate_service_payment(
        customer_id="cus_123",
        amount_cents=4500,
        currency="eur",
        provider_account_id="acct_456",
        service_id="svc_789",
    )
    # ... service rendered ...
    service.capture_escrow_intent(intent.payment_intent_id)
"""

from __future__ import annotations

from typing import Any

from payments.adapters import CreatePaymentIntentParams, PaymentIntentResult
from payments.exceptions import PaymentValidationError
from payments.services.base import PaymentService
from payments.types import ChargeOutcome, EscrowIntent

SERVICE_BOOKING = "service_booking"
DELIVERY_PAYMENT = "delivery_payment"


class ChargeService(PaymentService):
    """One-shot and manual-capture charge flows."""

    def charge_customer_immediately(
        self,
        customer_id: str,
        amount_cents: int,
        description: str | None = None,
    ) -> ChargeOutcome:
        """
        Charge the customer's stored card now, without the customer present.

        Uses the first card Stripe lists for the customer and confirms the
        PaymentIntent in the same call.

        Raises:
            PaymentValidationError: missing input, or no card on file
            PaymentDeclinedError: card declined or authentication required
            GatewayError: any other Stripe failure
        """
        self.require(customer_id=customer_id, amount=amount_cents)
        self._require_positive(amount_cents)
        logger = self.get_logger()

        cards = self.adapter.list_payment_methods(customer_id, type="card")
        if not cards:
            logger.warning("No payment method on file", extra={"customer_id": customer_id})
            raise PaymentValidationError(
                "no instrument",
                error_code="NO_PAYMENT_METHOD",
                details={"customer_id": customer_id},
            )

        intent = self.adapter.create_payment_intent(
            CreatePaymentIntentParams(
                amount_cents=amount_cents,
                currency=self.default_currency(),
                customer_id=customer_id,
                payment_method_id=cards[0].id,
                off_session=True,
                confirm=True,
                description=description,
            )
        )
        logger.info(
            "Customer charged off-session",
            extra={
                "customer_id": customer_id,
                "payment_intent_id": intent.id,
                "status": intent.status,
            },
        )
        return ChargeOutcome(payment_intent_id=intent.id, status=intent.status)

    def create_escrow_intent(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        destination_account_id: str,
        metadata: dict[str, Any],
    ) -> EscrowIntent:
        """
        Authorize a payment now and capture it later for a connected account.

        Raises:
            PaymentValidationError: any parameter missing
            GatewayError: Stripe rejected the intent
        """
        self.require(
            customer_id=customer_id,
            amount=amount_cents,
            currency=currency,
            destination_account_id=destination_account_id,
            metadata=metadata or None,
        )
        self._require_positive(amount_cents)

        intent = self.adapter.create_payment_intent(
            CreatePaymentIntentParams(
                amount_cents=amount_cents,
                currency=currency.lower(),
                customer_id=customer_id,
                capture_method="manual",
                payment_method_types=["card"],
                transfer_data={"destination": destination_account_id},
                metadata={key: str(value) for key, value in metadata.items()},
            )
        )
        self.get_logger().info(
            "Escrow intent created",
            extra={
                "customer_id": customer_id,
                "payment_intent_id": intent.id,
                "destination_account_id": destination_account_id,
                "purpose": metadata.get("type"),
            },
        )
        return EscrowIntent(payment_intent_id=intent.id, client_secret=intent.client_secret)

    def initiate_service_payment(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        provider_account_id: str,
        service_id: str,
    ) -> EscrowIntent:
        """Escrow intent for a booked service, paid out to the provider."""
        self.require(service_id=service_id)
        return self.create_escrow_intent(
            customer_id,
            amount_cents,
            currency,
            provider_account_id,
            metadata={"type": SERVICE_BOOKING, "serviceId": service_id},
        )

    def initiate_delivery_payment(
        self,
        customer_id: str,
        amount_cents: int,
        currency: str,
        deliverer_account_id: str,
    ) -> EscrowIntent:
        """Escrow intent for a delivery, paid out to the deliverer."""
        return self.create_escrow_intent(
            customer_id,
            amount_cents,
            currency,
            deliverer_account_id,
            metadata={"type": DELIVERY_PAYMENT},
        )

    def capture_escrow_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        """
        Capture a previously authorized escrow intent.

        Raises:
            PaymentValidationError: payment_intent_id missing
            GatewayError: already captured, expired or canceled upstream
        """
        self.require(payment_intent_id=payment_intent_id)
        intent = self.adapter.capture_payment_intent(payment_intent_id)
        self.get_logger().info(
            "Escrow intent captured",
            extra={"payment_intent_id": payment_intent_id, "status": intent.status},
        )
        return intent

    @staticmethod
    def _require_positive(amount_cents: int) -> None:
        if amount_cents <= 0:
            raise PaymentValidationError(
                "Amount must be a positive number of cents",
                details={"amount_cents": amount_cents},
            )
