"""
DRF serializers for payments app.

This module provides request serializers for every payments endpoint.
Field names are camelCase, matching the JSON the frontend sends.

Related files:
    - views.py: Payment API views
    - services/: Operations the validated data is passed to

Usage:
    serializer = ChargeRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
"""

from __future__ import annotations

from rest_framework import serializers


# =============================================================================
# Customers & Subscriptions
# =============================================================================


class CreateCustomerSerializer(serializers.Serializer):
    email = serializers.CharField(
        max_length=255,
        help_text="Customer email address; Stripe validates the format",
    )
    description = serializers.CharField(
        max_length=500,
        allow_blank=True,
        help_text="Free-form description stored on the customer",
    )


class AttachPaymentMethodSerializer(serializers.Serializer):
    paymentMethodId = serializers.CharField(
        max_length=255,
        help_text="Stripe PaymentMethod ID (pm_xxx)",
    )


class CreateSubscriptionSerializer(serializers.Serializer):
    """
    Serializer for subscription creation.

    Fields:
        customerId: Stripe customer ID
        priceId: Recurring price ID
        startDate: Optional ISO-8601 start; a future date defers billing
    """

    customerId = serializers.CharField(max_length=255)
    priceId = serializers.CharField(max_length=255)
    startDate = serializers.DateTimeField(required=False, allow_null=True)


class CreatePriceSerializer(serializers.Serializer):
    planName = serializers.CharField(max_length=255)
    planPrice = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Monthly price in euros",
    )


# =============================================================================
# Charges & Escrow
# =============================================================================


class ChargeRequestSerializer(serializers.Serializer):
    customerId = serializers.CharField(max_length=255)
    amount = serializers.IntegerField(min_value=1, help_text="Amount in cents")
    description = serializers.CharField(
        max_length=1000,
        allow_blank=True,
    )


class ServicePaymentSerializer(serializers.Serializer):
    """
    Serializer for a service booking escrow payment.

    Fields:
        customerId: Paying customer
        amount: Amount in cents
        currency: ISO 4217 code
        providerAccountId: Connected account paid out on capture
        serviceId: Booked service identifier, stored in metadata
    """

    customerId = serializers.CharField(max_length=255)
    amount = serializers.IntegerField(min_value=1, help_text="Amount in cents")
    currency = serializers.CharField(min_length=3, max_length=3)
    providerAccountId = serializers.CharField(max_length=255)
    serviceId = serializers.CharField(max_length=255)


class DeliveryPaymentSerializer(serializers.Serializer):
    customerId = serializers.CharField(max_length=255)
    amount = serializers.IntegerField(min_value=1, help_text="Amount in cents")
    currency = serializers.CharField(min_length=3, max_length=3)
    delivererAccountId = serializers.CharField(max_length=255)


class CaptureEscrowSerializer(serializers.Serializer):
    paymentIntentId = serializers.CharField(max_length=255)


# =============================================================================
# Statistics
# =============================================================================


class RevenueRequestSerializer(serializers.Serializer):
    startDate = serializers.IntegerField(min_value=0, help_text="Window start (Unix seconds)")
    endDate = serializers.IntegerField(min_value=0, help_text="Window end (Unix seconds)")

    def validate(self, attrs):
        if attrs["startDate"] > attrs["endDate"]:
            raise serializers.ValidationError(
                {"startDate": "startDate must not be after endDate."}
            )
        return attrs


# =============================================================================
# Connected Accounts
# =============================================================================


class CustomAccountSerializer(serializers.Serializer):
    accountToken = serializers.CharField(
        max_length=255,
        help_text="Account token collected client-side (ct_xxx)",
    )


class TransferRequestSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1, help_text="Amount in cents")


# =============================================================================
# Checkout
# =============================================================================


class CheckoutSessionSerializer(serializers.Serializer):
    priceId = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    mode = serializers.ChoiceField(
        choices=["payment", "subscription"],
        required=False,
        default="payment",
    )
    customerId = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PortalSessionSerializer(serializers.Serializer):
    customerId = serializers.CharField(max_length=255)
