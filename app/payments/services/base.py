"""
Common base for payment services.

Every payment service wraps the single StripeAdapter built at process start.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from core.services import BaseService

from payments.exceptions import PaymentValidationError

if TYPE_CHECKING:
    from payments.adapters import StripeAdapter


class PaymentService(BaseService):
    """Base class for services that call Stripe through the adapter."""

    validation_error_class = PaymentValidationError

    def __init__(self, adapter: StripeAdapter):
        self.adapter = adapter

    @staticmethod
    def frontend_url() -> str:
        """Base origin used to build redirect URLs (no trailing slash)."""
        return (settings.FRONTEND_URL or "http://localhost:3000").rstrip("/")

    @staticmethod
    def default_currency() -> str:
        return settings.STRIPE_DEFAULT_CURRENCY
