"""
Content services shared by views and management commands.
"""

import logging

from .models import Event

logger = logging.getLogger(__name__)


def delete_expired_events() -> int:
    """Delete events whose end date lies before today; returns the count."""
    deleted, _ = Event.objects.expired().delete()
    if deleted:
        logger.info("Removed %s expired event(s)", deleted)
    return deleted
