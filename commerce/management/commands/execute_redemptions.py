"""
Execute Redemptions Management Command

Executes PENDING redemptions notified at least 24 hours ago. Scheduled
every 4 hours; the ``--quick`` run every 2 hours exits early when nothing
is ready.

Usage:
    python manage.py execute_redemptions [--quick]

Author: Seva Development Team
Version: 1.0.0
"""

from django.core.management.base import BaseCommand

from commerce.subscriptions import execute_redemption, redemptions_ready_for_execution
from core.exceptions import PaymentGatewayException


class Command(BaseCommand):
    help = "Executes notified AutoPay redemptions."

    def add_arguments(self, parser):
        parser.add_argument(
            "--quick", action="store_true", help="Exit immediately when no redemption is ready"
        )

    def handle(self, *args, **options):
        ready = redemptions_ready_for_execution()
        if options["quick"] and not ready.exists():
            self.stdout.write("No redemptions ready.")
            return

        executed = failed = 0
        for recurring in ready:
            try:
                execute_redemption(recurring)
            except PaymentGatewayException as e:
                failed += 1
                self.stderr.write(f"  {recurring.merchant_order_id}: {e.message}")
                continue
            executed += 1
            self.stdout.write(f"  {recurring.merchant_order_id} -> {recurring.state}")

        self.stdout.write(self.style.SUCCESS(f"Execution completed. {executed} executed, {failed} failed."))
