"""
Infrastructure views that sit outside the marketplace domain.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check for Docker, load balancers and uptime monitors.

    The database is required; the Redis cache is reported but a cache
    outage only degrades the service.

    Returns:
        200 {"status": "healthy", "database": "connected", "cache": "..."}
        503 when the database cannot be reached
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }
    status_code = 200

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check: database unreachable")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        status_code = 503

    # django-redis is configured with IGNORE_EXCEPTIONS, so an outage shows up
    # as a miss rather than an exception.
    cache.set("health_check", "ok", timeout=1)
    health_status["cache"] = (
        "connected" if cache.get("health_check") == "ok" else "disconnected"
    )

    return JsonResponse(health_status, status=status_code)
