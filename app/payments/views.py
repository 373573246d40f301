"""
DRF views for payments app.

This module provides API views for:
- Customer registration and payment methods
- Subscription management
- Immediate charges and escrow (manual-capture) payments
- Connected accounts (onboarding, status, transfers)
- Statistics
- Checkout and billing portal sessions

Every view validates its body with a serializer, calls one orchestrator
operation and renders the result as camelCase JSON. Application errors are
turned into responses by core.exception_handler.

Related files:
    - serializers.py: Request serializers
    - services/payment_orchestrator.py: PaymentOrchestrator
    - webhooks/views.py: Stripe webhook endpoint
    - urls.py: URL routing
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.apps import get_orchestrator
from payments.serializers import (
    AttachPaymentMethodSerializer,
    CaptureEscrowSerializer,
    ChargeRequestSerializer,
    CheckoutSessionSerializer,
    CreateCustomerSerializer,
    CreatePriceSerializer,
    CreateSubscriptionSerializer,
    CustomAccountSerializer,
    DeliveryPaymentSerializer,
    PortalSessionSerializer,
    RevenueRequestSerializer,
    ServicePaymentSerializer,
    TransferRequestSerializer,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Response Rendering
# =============================================================================


def render_customer(customer) -> dict:
    return {
        "id": customer.id,
        "email": customer.email,
        "description": customer.description,
        "created": customer.created,
    }


def render_subscription(subscription) -> dict:
    return {
        "id": subscription.id,
        "status": subscription.status,
        "customerId": subscription.customer_id,
        "trialEnd": subscription.trial_end,
        "cancelAtPeriodEnd": subscription.cancel_at_period_end,
    }


def render_account(account) -> dict:
    return {
        "id": account.id,
        "type": account.type,
        "country": account.country,
        "detailsSubmitted": account.details_submitted,
        "chargesEnabled": account.charges_enabled,
        "payoutsEnabled": account.payouts_enabled,
    }


def render_escrow(intent) -> dict:
    return {
        "paymentIntentId": intent.payment_intent_id,
        "clientSecret": intent.client_secret,
    }


class PaymentsAPIView(APIView):
    """Base view: no authentication, orchestrator lookup."""

    permission_classes = [AllowAny]

    @property
    def orchestrator(self):
        return get_orchestrator()


# =============================================================================
# Customers & Subscriptions
# =============================================================================


class CustomerCreateView(PaymentsAPIView):
    @extend_schema(
        summary="Create customer",
        tags=["Payments - Customers"],
        request=CreateCustomerSerializer,
    )
    def post(self, request):
        serializer = CreateCustomerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        customer = self.orchestrator.create_customer(
            data["email"],
            data["description"] or None,
        )
        return Response(render_customer(customer), status=status.HTTP_201_CREATED)


class AttachPaymentMethodView(PaymentsAPIView):
    """
    Attach a card to a customer and make it the invoice default.

    POST /api/v1/payments/customers/{customer_id}/attach-payment/

    Returns:
        {"success": true}, or 409 when the card is already attached
    """

    @extend_schema(
        summary="Attach payment method",
        tags=["Payments - Customers"],
        request=AttachPaymentMethodSerializer,
        responses={
            200: OpenApiResponse(description="Payment method attached"),
            409: OpenApiResponse(description="Payment method already attached"),
        },
    )
    def post(self, request, customer_id):
        serializer = AttachPaymentMethodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        self.orchestrator.attach_payment_method(
            customer_id,
            serializer.validated_data["paymentMethodId"],
        )
        return Response({"success": True})


class SubscriptionCreateView(PaymentsAPIView):
    @extend_schema(
        summary="Create subscription",
        tags=["Payments - Subscriptions"],
        request=CreateSubscriptionSerializer,
    )
    def post(self, request):
        serializer = CreateSubscriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        subscription = self.orchestrator.create_subscription(
            data["customerId"],
            data["priceId"],
            data.get("startDate"),
        )
        return Response(render_subscription(subscription), status=status.HTTP_201_CREATED)


class SubscriptionCancelView(PaymentsAPIView):
    @extend_schema(
        summary="Cancel subscription at period end",
        tags=["Payments - Subscriptions"],
        request=None,
    )
    def post(self, request, subscription_id):
        subscription = self.orchestrator.cancel_subscription(subscription_id)
        return Response(render_subscription(subscription))


class PriceCreateView(PaymentsAPIView):
    @extend_schema(
        summary="Create monthly plan price",
        tags=["Payments - Catalog"],
        request=CreatePriceSerializer,
    )
    def post(self, request):
        serializer = CreatePriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        price = self.orchestrator.create_price_for_plan(data["planName"], data["planPrice"])
        return Response(
            {
                "id": price.id,
                "productId": price.product_id,
                "unitAmount": price.unit_amount_cents,
                "currency": price.currency,
                "interval": price.interval,
            },
            status=status.HTTP_201_CREATED,
        )


# =============================================================================
# Charges & Escrow
# =============================================================================


class ChargeView(PaymentsAPIView):
    """
    Charge a customer's stored card off-session.

    POST /api/v1/payments/charge/

    Returns:
        {"paymentIntentId": "pi_xxx", "status": "succeeded"}
        402 when the card is declined or needs authentication
    """

    @extend_schema(
        summary="Charge customer immediately",
        tags=["Payments - Charges"],
        request=ChargeRequestSerializer,
        responses={
            200: OpenApiResponse(description="Charge confirmed"),
            400: OpenApiResponse(description="No payment method on file"),
            402: OpenApiResponse(description="Card declined or authentication required"),
        },
    )
    def post(self, request):
        serializer = ChargeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outcome = self.orchestrator.charge_customer_immediately(
            data["customerId"],
            data["amount"],
            data["description"] or None,
        )
        return Response(
            {"paymentIntentId": outcome.payment_intent_id, "status": outcome.status}
        )


class ServicePaymentView(PaymentsAPIView):
    @extend_schema(
        summary="Authorize a service booking payment",
        tags=["Payments - Escrow"],
        request=ServicePaymentSerializer,
    )
    def post(self, request):
        serializer = ServicePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        intent = self.orchestrator.initiate_service_payment(
            data["customerId"],
            data["amount"],
            data["currency"],
            data["providerAccountId"],
            data["serviceId"],
        )
        return Response(render_escrow(intent), status=status.HTTP_201_CREATED)


class DeliveryPaymentView(PaymentsAPIView):
    @extend_schema(
        summary="Authorize a delivery payment",
        tags=["Payments - Escrow"],
        request=DeliveryPaymentSerializer,
    )
    def post(self, request):
        serializer = DeliveryPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        intent = self.orchestrator.initiate_delivery_payment(
            data["customerId"],
            data["amount"],
            data["currency"],
            data["delivererAccountId"],
        )
        return Response(render_escrow(intent), status=status.HTTP_201_CREATED)


class CaptureEscrowView(PaymentsAPIView):
    @extend_schema(
        summary="Capture an authorized escrow payment",
        tags=["Payments - Escrow"],
        request=CaptureEscrowSerializer,
    )
    def post(self, request):
        serializer = CaptureEscrowSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        self.orchestrator.capture_escrow_intent(serializer.validated_data["paymentIntentId"])
        return Response({"success": True})


# =============================================================================
# Statistics
# =============================================================================


class CustomerStatsView(PaymentsAPIView):
    @extend_schema(summary="Customer counts", tags=["Payments - Statistics"])
    def get(self, request):
        stats = self.orchestrator.get_customer_stats()
        return Response({"total": stats.total, "new": stats.new})


class SubscriberStatsView(PaymentsAPIView):
    @extend_schema(summary="Active subscriber count", tags=["Payments - Statistics"])
    def get(self, request):
        return Response({"activeCount": self.orchestrator.get_active_subscriber_count()})


class PaymentStatsView(PaymentsAPIView):
    """
    Aggregates over the 100 most recent payment intents.

    GET /api/v1/payments/stats/payments/

    Returns:
        {
            "successRate": 75.0,
            "averageValue": 42.5,
            "refundRate": 10.0,
            "byMethod": [{"method": "card", "count": 3, "value": 127.5}]
        }
    """

    @extend_schema(summary="Payment statistics", tags=["Payments - Statistics"])
    def get(self, request):
        stats = self.orchestrator.get_payment_stats()
        return Response(
            {
                "successRate": stats.success_rate,
                "averageValue": float(stats.average_value),
                "refundRate": stats.refund_rate,
                "byMethod": [
                    {"method": m.method, "count": m.count, "value": float(m.value)}
                    for m in stats.by_method
                ],
            }
        )


class RevenueView(PaymentsAPIView):
    @extend_schema(
        summary="Revenue over a time window",
        tags=["Payments - Statistics"],
        request=RevenueRequestSerializer,
    )
    def post(self, request):
        serializer = RevenueRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        total = self.orchestrator.get_total_revenue(data["startDate"], data["endDate"])
        return Response({"totalRevenueEuro": float(total)})


# =============================================================================
# Connected Accounts
# =============================================================================


class ExpressAccountView(PaymentsAPIView):
    @extend_schema(summary="Create Express account", tags=["Payments - Connect"], request=None)
    def post(self, request):
        account = self.orchestrator.create_express_account()
        return Response(render_account(account), status=status.HTTP_201_CREATED)


class CustomAccountView(PaymentsAPIView):
    @extend_schema(
        summary="Create Custom account from token",
        tags=["Payments - Connect"],
        request=CustomAccountSerializer,
    )
    def post(self, request):
        serializer = CustomAccountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account = self.orchestrator.create_custom_account_from_token(
            serializer.validated_data["accountToken"]
        )
        return Response(render_account(account), status=status.HTTP_201_CREATED)


class AccountStatusView(PaymentsAPIView):
    """
    Onboarding readiness of a connected account.

    GET /api/v1/payments/connect/{account_id}/status/

    Always 200. statusKnown is false when Stripe could not be queried,
    in which case the three flags are false as well.
    """

    @extend_schema(summary="Connected account status", tags=["Payments - Connect"])
    def get(self, request, account_id):
        lookup = self.orchestrator.get_account_status(account_id)
        return Response(lookup.to_response())


class OnboardingLinkView(PaymentsAPIView):
    @extend_schema(summary="Create onboarding link", tags=["Payments - Connect"], request=None)
    def post(self, request, account_id):
        return Response({"url": self.orchestrator.create_onboarding_link(account_id)})


class TransferView(PaymentsAPIView):
    """
    Transfer funds to a connected account.

    POST /api/v1/payments/connect/{account_id}/transfer/

    A refused transfer still answers 201 with a placeholder transfer and
    "synthetic": true.
    """

    @extend_schema(
        summary="Transfer to connected account",
        tags=["Payments - Connect"],
        request=TransferRequestSerializer,
    )
    def post(self, request, account_id):
        serializer = TransferRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome = self.orchestrator.transfer_to_account(
            account_id,
            serializer.validated_data["amount"],
        )
        transfer = outcome.transfer
        if outcome.synthetic:
            logger.warning(
                "Synthetic transfer returned to client",
                extra={"account_id": account_id, "transfer_id": transfer.id},
            )
        return Response(
            {
                "id": transfer.id,
                "amount": transfer.amount_cents,
                "currency": transfer.currency,
                "destination": transfer.destination_account,
                "created": transfer.created,
                "synthetic": outcome.synthetic,
            },
            status=status.HTTP_201_CREATED,
        )


# =============================================================================
# Checkout
# =============================================================================


class CheckoutSessionView(PaymentsAPIView):
    @extend_schema(
        summary="Create Checkout session",
        tags=["Payments - Checkout"],
        request=CheckoutSessionSerializer,
    )
    def post(self, request):
        serializer = CheckoutSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = self.orchestrator.create_checkout_session(
            data["priceId"],
            quantity=data["quantity"],
            mode=data["mode"],
            customer_id=data.get("customerId") or None,
            origin=request.headers.get("Origin"),
        )
        return Response({"sessionId": session.id, "url": session.url})


class PortalSessionView(PaymentsAPIView):
    @extend_schema(
        summary="Create billing portal session",
        tags=["Payments - Checkout"],
        request=PortalSessionSerializer,
    )
    def post(self, request):
        serializer = PortalSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = self.orchestrator.create_portal_session(
            serializer.validated_data["customerId"],
            origin=request.headers.get("Origin"),
        )
        return Response({"url": session.url})
