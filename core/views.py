"""
Project level views: liveness message, health check and JSON error pages.
"""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)


def root(request):
    return JsonResponse({"success": True, "message": "Seva API is running"})


def health(request):
    database = "ok"
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.exception("Health check: database unavailable")
        database = "error"

    cache_state = "ok"
    try:
        cache.set("health:ping", "pong", 10)
        if cache.get("health:ping") != "pong":
            cache_state = "error"
    except Exception:
        logger.exception("Health check: cache unavailable")
        cache_state = "error"

    healthy = database == "ok"
    return JsonResponse(
        {
            "status": "ok" if healthy else "degraded",
            "timestamp": timezone.now().isoformat(),
            "database": database,
            "cache": cache_state,
        },
        status=200 if healthy else 503,
    )


def route_not_found(request, exception=None):
    return JsonResponse({"success": False, "message": "Route not found"}, status=404)


def server_error(request):
    return JsonResponse({"success": False, "message": "Internal server error"}, status=500)
