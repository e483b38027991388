"""
Accounts Application Configuration

Registers the accounts app: user profiles with roles, OTP email
verification, cookie based JWT login and user administration.

Author: Seva Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "accounts"
    verbose_name: str = "Accounts"

    def ready(self) -> None:
        # Registers the profile signal handlers
        from . import models  # noqa: F401
