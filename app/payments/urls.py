"""
URL configuration for the payments app.

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments import views
from payments.webhooks.views import stripe_webhook

app_name = "payments"

urlpatterns = [
    # Customers & subscriptions
    path("customers/", views.CustomerCreateView.as_view(), name="customer-create"),
    path(
        "customers/<str:customer_id>/attach-payment/",
        views.AttachPaymentMethodView.as_view(),
        name="customer-attach-payment",
    ),
    path("subscriptions/", views.SubscriptionCreateView.as_view(), name="subscription-create"),
    path(
        "subscriptions/<str:subscription_id>/cancel/",
        views.SubscriptionCancelView.as_view(),
        name="subscription-cancel",
    ),
    path("prices/", views.PriceCreateView.as_view(), name="price-create"),
    # Charges & escrow
    path("charge/", views.ChargeView.as_view(), name="charge"),
    path("escrow/service/", views.ServicePaymentView.as_view(), name="escrow-service"),
    path("escrow/delivery/", views.DeliveryPaymentView.as_view(), name="escrow-delivery"),
    path("escrow/capture/", views.CaptureEscrowView.as_view(), name="escrow-capture"),
    # Statistics
    path("stats/customers/", views.CustomerStatsView.as_view(), name="stats-customers"),
    path("stats/subscribers/", views.SubscriberStatsView.as_view(), name="stats-subscribers"),
    path("stats/payments/", views.PaymentStatsView.as_view(), name="stats-payments"),
    path("stats/revenue/", views.RevenueView.as_view(), name="stats-revenue"),
    # Connected accounts
    path("connect/express/", views.ExpressAccountView.as_view(), name="connect-express"),
    path("connect/custom/", views.CustomAccountView.as_view(), name="connect-custom"),
    path(
        "connect/<str:account_id>/status/",
        views.AccountStatusView.as_view(),
        name="connect-status",
    ),
    path(
        "connect/<str:account_id>/link/",
        views.OnboardingLinkView.as_view(),
        name="connect-link",
    ),
    path(
        "connect/<str:account_id>/transfer/",
        views.TransferView.as_view(),
        name="connect-transfer",
    ),
    # Checkout
    path("checkout/session/", views.CheckoutSessionView.as_view(), name="checkout-session"),
    path("checkout/portal/", views.PortalSessionView.as_view(), name="checkout-portal"),
    # Webhook
    path("webhook/", stripe_webhook, name="stripe-webhook"),
]
