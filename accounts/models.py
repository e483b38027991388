"""
Accounts Models

Extends Django's built-in User with a Profile holding the contact data,
the site role and the one-time codes used for email verification and
password reset. Every user gets a profile automatically through a
post_save signal.

The Django username always equals the lower-cased email address.

Author: Seva Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    ADMIN = "admin", _("Admin")
    SUBADMIN = "subadmin", _("Sub-admin")
    USER = "user", _("User")


class Profile(models.Model):
    """
    Site profile of a user account.

    Attributes:
        user: One-to-one relationship with Django User model
        name: Display name
        phone: Mobile number
        address: Optional postal address
        role: admin, subadmin or user
        is_verified: Set once the signup OTP was confirmed
        otp_code / otp_expires_at: Pending email verification code
        reset_token / reset_token_expires_at: Pending password reset
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
    )
    name = models.CharField(_("Name"), max_length=150, blank=True)
    phone = models.CharField(_("Phone"), max_length=20, blank=True)
    address = models.TextField(_("Address"), blank=True)
    role = models.CharField(
        _("Role"), max_length=10, choices=Role.choices, default=Role.USER, db_index=True
    )
    is_verified = models.BooleanField(_("Email verified"), default=False)

    otp_code = models.CharField(max_length=6, null=True, blank=True)
    otp_expires_at = models.DateTimeField(null=True, blank=True)
    reset_token = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    reset_token_expires_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")
        db_table = "accounts_profile"

    def __str__(self) -> str:
        return f"{self.user.username} Profile"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_editor(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUBADMIN)

    def otp_is_valid(self, otp: str) -> bool:
        return (
            bool(self.otp_code)
            and self.otp_code == str(otp).strip()
            and self.otp_expires_at is not None
            and self.otp_expires_at >= timezone.now()
        )

    def mark_verified(self) -> None:
        self.is_verified = True
        self.otp_code = None
        self.otp_expires_at = None
        self.save(update_fields=["is_verified", "otp_code", "otp_expires_at", "updated_at"])


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Create the profile for every new user.

    Superusers created with ``createsuperuser`` become verified admins so
    they can sign in to the API right away.
    """
    if created:
        Profile.objects.get_or_create(
            user=instance,
            defaults={
                "name": instance.get_full_name(),
                "role": Role.ADMIN if instance.is_superuser else Role.USER,
                "is_verified": instance.is_superuser,
            },
        )
