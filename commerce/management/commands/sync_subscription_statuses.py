"""
Sync Subscription Statuses Management Command

Refreshes every AutoPay mandate that is not final from the PhonePe
subscription status API. Scheduled daily at 02:00 by the host cron.

Usage:
    python manage.py sync_subscription_statuses

Author: Seva Development Team
Version: 1.0.0
"""

from django.core.management.base import BaseCommand

from commerce.subscriptions import subscriptions_to_sync, sync_subscription
from core.exceptions import PaymentGatewayException


class Command(BaseCommand):
    help = "Refreshes AutoPay subscription states from PhonePe."

    def handle(self, *args, **options):
        memberships = list(subscriptions_to_sync())
        self.stdout.write(f"Syncing {len(memberships)} subscription(s)...")

        synced = failed = 0
        for membership in memberships:
            try:
                membership = sync_subscription(membership)
            except PaymentGatewayException as e:
                failed += 1
                self.stderr.write(f"  {membership.merchant_subscription_id}: {e.message}")
                continue
            synced += 1
            self.stdout.write(f"  {membership.merchant_subscription_id} -> {membership.status}")

        self.stdout.write(self.style.SUCCESS(f"Sync completed. {synced} synced, {failed} failed."))
