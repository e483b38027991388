"""
Notify Redemptions Management Command

Sends the pre-debit notification for ACTIVE mandates whose next billing
date lies 48 to 72 hours ahead. Scheduled daily at 03:00.

Usage:
    python manage.py notify_redemptions

Author: Seva Development Team
Version: 1.0.0
"""

from django.core.management.base import BaseCommand

from commerce.subscriptions import InactiveSubscription, notify_redemption, subscriptions_due_for_notification
from core.exceptions import PaymentGatewayException


class Command(BaseCommand):
    help = "Sends pre-debit notifications for upcoming AutoPay renewals."

    def handle(self, *args, **options):
        memberships = list(subscriptions_due_for_notification())
        self.stdout.write(f"{len(memberships)} subscription(s) due for notification...")

        notified = 0
        for membership in memberships:
            try:
                recurring = notify_redemption(membership)
            except (PaymentGatewayException, InactiveSubscription) as e:
                self.stderr.write(f"  membership {membership.pk}: {e}")
                continue
            notified += 1
            self.stdout.write(f"  {recurring.merchant_order_id} for membership {membership.pk}")

        self.stdout.write(self.style.SUCCESS(f"Notification completed. {notified} redemption(s) created."))
