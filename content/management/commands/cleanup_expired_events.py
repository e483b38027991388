"""
Cleanup Expired Events Management Command

Deletes events whose end date lies before today. Scheduled daily at
midnight by the host cron.

Usage:
    python manage.py cleanup_expired_events [--dry-run]

Author: Seva Development Team
Version: 1.0.0
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from content.models import Event
from content.services import delete_expired_events


class Command(BaseCommand):
    help = "Deletes events that ended before today."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run", action="store_true", help="Only report what would be deleted"
        )

    def handle(self, *args, **options):
        self.stdout.write(f"Looking for events that ended before {timezone.localdate()}...")

        if options["dry_run"]:
            expired = Event.objects.expired()
            for event in expired:
                self.stdout.write(f"  would delete {event.title} (ended {event.end_date})")
            self.stdout.write(self.style.WARNING(f"{expired.count()} event(s) would be deleted."))
            return

        count = delete_expired_events()
        self.stdout.write(self.style.SUCCESS(f"Cleanup completed. {count} expired events removed."))
