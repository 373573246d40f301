"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the business domain but are
essential for application infrastructure, such as health checks.
"""

from django.apps import apps
from django.http import JsonResponse


def health_check(request):
    """
    Health check endpoint for monitoring and orchestration.

    Used by Docker health checks, Kubernetes probes and load balancers.
    No Stripe call is made: the check only confirms the payments app built
    its orchestrator at startup.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - payments: "ready" or "unavailable"

    HTTP Status Codes:
        200: All systems operational
        503: One or more systems unhealthy
    """
    ready = (
        apps.is_installed("payments")
        and apps.get_app_config("payments").orchestrator is not None
    )
    health_status = {
        "status": "healthy" if ready else "unhealthy",
        "payments": "ready" if ready else "unavailable",
    }
    return JsonResponse(health_status, status=200 if ready else 503)
