"""
Content Application Configuration

Registers the content app: landing page blocks, news, events,
foundations, directories, bhajan audio and legal pages.

Author: Seva Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class ContentConfig(AppConfig):
    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "content"
    verbose_name: str = "Website Content"
