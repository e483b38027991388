"""
Commerce Application Configuration

Registers the commerce app: PDF books and coupons, donations and
memberships paid through PhonePe (one-time and UPI AutoPay).

Author: Seva Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class CommerceConfig(AppConfig):
    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "commerce"
    verbose_name: str = "Commerce"
