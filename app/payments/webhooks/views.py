"""
Webhook endpoint view for Stripe.

The view:
1. Verifies the signature over the raw request body
2. Dispatches the verified event to its registered handler
3. Acknowledges with {"received": true}

Usage:
    # In urls.py
    from payments.webhooks.views import stripe_webhook

    urlpatterns = [
        path("webhook/", stripe_webhook, name="stripe-webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.exceptions import SignatureError
from payments.webhooks.handlers import dispatch_webhook
from payments.webhooks.verifier import verify_event


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive, verify and dispatch a Stripe webhook event.

    Returns:
        JsonResponse with status:
        - 200: Event verified and handled (or acknowledged if unknown)
        - 400: Missing or invalid signature, or unparseable payload
        - 500: Signing secret not configured, or a handler failed;
          Stripe redelivers on non-2xx responses
    """
    secret = settings.STRIPE_WEBHOOK_SECRET
    if not secret:
        logger.error("STRIPE_WEBHOOK_SECRET is not configured")
        return JsonResponse({"error": "Webhook secret not configured"}, status=500)

    try:
        event = verify_event(
            request.body,
            request.headers.get("Stripe-Signature", ""),
            secret,
            settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS,
        )
    except SignatureError as e:
        return JsonResponse(e.to_dict(), status=400)

    logger.info(
        f"Received Stripe webhook: {event.event_type}",
        extra={
            "stripe_event_id": event.stripe_event_id,
            "event_type": event.event_type,
        },
    )

    try:
        dispatch_webhook(event)
    except Exception:
        logger.exception(
            "Webhook handler failed",
            extra={
                "stripe_event_id": event.stripe_event_id,
                "event_type": event.event_type,
            },
        )
        return JsonResponse({"error": "Webhook handler failed"}, status=500)

    return JsonResponse({"received": True})
