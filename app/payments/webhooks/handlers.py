"""
Webhook event handlers for Stripe events.

This module provides a handler registry and implementations for the Stripe
events the platform subscribes to. Nothing is stored locally: handlers
record what happened in the logs (event id and object id) and return a
ServiceResult.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    # Register a custom handler
    @register_handler("custom.event")
    def handle_custom_event(webhook_event: WebhookEvent) -> ServiceResult:
        ...

    # Dispatch an event to its handler
    dispatch = dispatch_webhook(webhook_event)
    if not dispatch.handled:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from core.services import ServiceResult

from payments.types import AccountStatus

if TYPE_CHECKING:
    from payments.webhooks.verifier import WebhookEvent


logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps event type strings to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[WebhookEvent], ServiceResult]] = {}


@dataclass(frozen=True)
class WebhookDispatchResult:
    """
    Outcome of dispatching one verified event.

    Attributes:
        handled: A handler was registered for the event type and ran
        result: The handler's ServiceResult (None when not handled)
    """

    handled: bool
    result: ServiceResult | None = None


def register_handler(event_type: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        event_type: The Stripe event type (e.g., "payment_intent.succeeded")
    """

    def decorator(func: Callable[[WebhookEvent], ServiceResult]) -> Callable:
        WEBHOOK_HANDLERS[event_type] = func
        logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(webhook_event: WebhookEvent) -> WebhookDispatchResult:
    """
    Dispatch a verified event to the handler registered for its type.

    Unknown event types are logged and acknowledged without invoking any
    handler. Exceptions raised by a handler propagate to the caller.
    """
    handler = WEBHOOK_HANDLERS.get(webhook_event.event_type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {webhook_event.event_type}",
            extra={"stripe_event_id": webhook_event.stripe_event_id},
        )
        return WebhookDispatchResult(handled=False)

    logger.info(
        f"Dispatching {webhook_event.event_type} to handler",
        extra={"stripe_event_id": webhook_event.stripe_event_id},
    )

    return WebhookDispatchResult(handled=True, result=handler(webhook_event))


def _missing_object_id(webhook_event: WebhookEvent) -> ServiceResult:
    logger.error(
        f"{webhook_event.event_type}: Could not extract object id",
        extra={"stripe_event_id": webhook_event.stripe_event_id},
    )
    return ServiceResult.failure(
        "Could not extract object id from webhook",
        error_code="INVALID_WEBHOOK_PAYLOAD",
    )


# =============================================================================
# Invoice Handlers
# =============================================================================


@register_handler("invoice.payment_succeeded")
def handle_invoice_payment_succeeded(webhook_event: WebhookEvent) -> ServiceResult:
    """Recurring payment collected for a subscription invoice."""
    invoice_id = webhook_event.get_object_id()
    if not invoice_id:
        return _missing_object_id(webhook_event)

    invoice = webhook_event.data_object
    logger.info(
        "Invoice paid",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "invoice_id": invoice_id,
            "customer_id": invoice.get("customer"),
            "subscription_id": invoice.get("subscription"),
            "amount_paid": invoice.get("amount_paid"),
        },
    )
    return ServiceResult.success(invoice_id)


@register_handler("invoice.payment_failed")
def handle_invoice_payment_failed(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Recurring payment failed.

    Stripe keeps retrying according to the account's dunning settings, so
    this only records the failure.
    """
    invoice_id = webhook_event.get_object_id()
    if not invoice_id:
        return _missing_object_id(webhook_event)

    invoice = webhook_event.data_object
    logger.warning(
        "Invoice payment failed",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "invoice_id": invoice_id,
            "customer_id": invoice.get("customer"),
            "subscription_id": invoice.get("subscription"),
            "attempt_count": invoice.get("attempt_count"),
        },
    )
    return ServiceResult.success(invoice_id)


# =============================================================================
# Payment Intent Handlers
# =============================================================================


@register_handler("payment_intent.succeeded")
def handle_payment_intent_succeeded(webhook_event: WebhookEvent) -> ServiceResult:
    payment_intent_id = webhook_event.get_object_id()
    if not payment_intent_id:
        return _missing_object_id(webhook_event)

    intent = webhook_event.data_object
    logger.info(
        "Processing payment_intent.succeeded",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "payment_intent_id": payment_intent_id,
            "amount_received": intent.get("amount_received"),
            "purpose": (intent.get("metadata") or {}).get("type"),
        },
    )
    return ServiceResult.success(payment_intent_id)


@register_handler("payment_intent.payment_failed")
def handle_payment_intent_failed(webhook_event: WebhookEvent) -> ServiceResult:
    payment_intent_id = webhook_event.get_object_id()
    if not payment_intent_id:
        return _missing_object_id(webhook_event)

    last_error = webhook_event.data_object.get("last_payment_error") or {}
    logger.warning(
        "Processing payment_intent.payment_failed",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "payment_intent_id": payment_intent_id,
            "reason": last_error.get("message", "Payment failed"),
            "decline_code": last_error.get("decline_code"),
        },
    )
    return ServiceResult.success(payment_intent_id)


@register_handler("payment_intent.amount_capturable_updated")
def handle_payment_intent_capturable(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Escrow authorization confirmed by the customer.

    The funds are held and the intent now waits for capture on fulfillment.
    """
    payment_intent_id = webhook_event.get_object_id()
    if not payment_intent_id:
        return _missing_object_id(webhook_event)

    intent = webhook_event.data_object
    metadata = intent.get("metadata") or {}
    logger.info(
        "Escrow authorized, awaiting capture",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "payment_intent_id": payment_intent_id,
            "amount_capturable": intent.get("amount_capturable"),
            "purpose": metadata.get("type"),
            "service_id": metadata.get("serviceId"),
        },
    )
    return ServiceResult.success(payment_intent_id)


# =============================================================================
# Charge Handlers
# =============================================================================


@register_handler("charge.refunded")
def handle_charge_refunded(webhook_event: WebhookEvent) -> ServiceResult:
    charge_id = webhook_event.get_object_id()
    if not charge_id:
        return _missing_object_id(webhook_event)

    charge = webhook_event.data_object
    logger.info(
        "Processing charge.refunded",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "charge_id": charge_id,
            "payment_intent_id": charge.get("payment_intent"),
            "amount_refunded": charge.get("amount_refunded"),
            "fully_refunded": charge.get("refunded", False),
        },
    )
    return ServiceResult.success(charge_id)


# =============================================================================
# Connected Account Handlers
# =============================================================================


@register_handler("account.updated")
def handle_account_updated(webhook_event: WebhookEvent) -> ServiceResult:
    """
    Handle connected account updates from Stripe.

    Fired when a connected account's onboarding state changes, such as
    onboarding completion, capability changes or a new verification
    requirement. Returns the AccountStatus derived from the payload.
    """
    account_id = webhook_event.get_object_id()
    if not account_id:
        return _missing_object_id(webhook_event)

    status = AccountStatus.from_account(webhook_event.data_object)
    logger.info(
        "Processing account.updated",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "account_id": account_id,
            "is_valid": status.is_valid,
            "is_enabled": status.is_enabled,
            "needs_id_card": status.needs_id_card,
        },
    )
    return ServiceResult.success(status)


# =============================================================================
# Subscription Handlers
# =============================================================================


@register_handler("customer.subscription.deleted")
def handle_subscription_deleted(webhook_event: WebhookEvent) -> ServiceResult:
    subscription_id = webhook_event.get_object_id()
    if not subscription_id:
        return _missing_object_id(webhook_event)

    logger.info(
        "Subscription ended",
        extra={
            "stripe_event_id": webhook_event.stripe_event_id,
            "subscription_id": subscription_id,
            "customer_id": webhook_event.data_object.get("customer"),
        },
    )
    return ServiceResult.success(subscription_id)
