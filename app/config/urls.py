"""
URL configuration for the payment orchestration service.

URL Structure:
    /                              - ReDoc API documentation
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/payments/              - Payment endpoints
        customers/                         - Create customer
        customers/{id}/attach-payment/     - Attach default card
        subscriptions/                     - Create subscription
        subscriptions/{id}/cancel/         - Cancel at period end
        prices/                            - Create monthly plan price
        charge/                            - Off-session charge
        escrow/service/                    - Authorize service booking payment
        escrow/delivery/                   - Authorize delivery payment
        escrow/capture/                    - Capture escrow payment
        stats/customers/                   - Customer counts
        stats/subscribers/                 - Active subscriber count
        stats/payments/                    - Payment statistics
        stats/revenue/                     - Revenue over a window
        connect/express/                   - Create Express account
        connect/custom/                    - Create Custom account from token
        connect/{id}/status/               - Account readiness
        connect/{id}/link/                 - Onboarding link
        connect/{id}/transfer/             - Transfer to account
        checkout/session/                  - Checkout session
        checkout/portal/                   - Billing portal session
        webhook/                           - Stripe webhook endpoint (POST)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]
