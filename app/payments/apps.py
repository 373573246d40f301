"""
Payments app configuration.

The Stripe adapter and the PaymentOrchestrator built on it are created once
here, when Django finishes loading apps, and shared by every request.
"""

from __future__ import annotations

from django.apps import AppConfig, apps


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"

    orchestrator = None

    def ready(self):
        """
        Build the process-wide orchestrator.

        Raises:
            ImproperlyConfigured: STRIPE_SECRET_KEY is empty
        """
        from payments.adapters import StripeAdapter
        from payments.services import PaymentOrchestrator

        self.orchestrator = PaymentOrchestrator(StripeAdapter.from_settings())


def get_orchestrator():
    """Return the orchestrator built when the payments app became ready."""
    return apps.get_app_config("payments").orchestrator
