"""
Cleanup Unverified Users Management Command

Deletes self registered accounts that never confirmed their signup OTP,
so the email address can register again.

Usage:
    python manage.py cleanup_unverified_users [--days 7] [--dry-run]

Author: Seva Development Team
Version: 1.0.0
"""

import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

User = get_user_model()

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Deletes accounts that did not verify their email within the given number of days."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=7, help="Age in days (default 7)")
        parser.add_argument(
            "--dry-run", action="store_true", help="Only report what would be deleted"
        )

    def handle(self, *args, **options):
        expiration_time = timezone.now() - timedelta(days=options["days"])
        self.stdout.write(
            f"Looking for unverified accounts created before "
            f"{expiration_time.strftime('%Y-%m-%d %H:%M:%S')}..."
        )

        users_to_delete = User.objects.filter(
            profile__is_verified=False,
            is_superuser=False,
            date_joined__lt=expiration_time,
        )
        count = users_to_delete.count()

        if count == 0:
            self.stdout.write(self.style.SUCCESS("No unverified accounts to delete."))
            return

        if options["dry_run"]:
            for user in users_to_delete:
                self.stdout.write(f"  would delete {user.username}")
            self.stdout.write(self.style.WARNING(f"{count} account(s) would be deleted."))
            return

        usernames = list(users_to_delete.values_list("username", flat=True))
        users_to_delete.delete()
        logger.info("Deleted %s unverified account(s): %s", count, ", ".join(usernames))
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} unverified account(s)."))
