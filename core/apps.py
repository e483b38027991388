"""
Core App Configuration - Seva Backend

This module contains the Django app configuration for the core application.
The core app holds the cross-application building blocks shared by the
accounts, content and commerce apps.

Features:
- Exception hierarchy and the DRF exception handler
- Cache helpers with fixed TTLs and namespace invalidation
- S3 compatible object storage service
- PhonePe payment gateway client
- Transactional email service
- Health and fallback views

Author: Seva Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Core"
