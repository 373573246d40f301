"""
Payments app: orchestration layer over Stripe.

This app handles:
- Stripe customers and payment methods
- Subscription lifecycle (create, cancel at period end)
- Immediate and escrow (manual-capture) charges
- Connected accounts and transfers (marketplace payouts)
- Statistics derived from Stripe's history
- Webhook verification and dispatch

Stripe is the system of record; nothing is persisted locally.

Usage:
    from payments.apps import get_orchestrator

    orchestrator = get_orchestrator()
    outcome = orchestrator.charge_customer_immediately("cus_123", 4500, "Order #12")
"""
