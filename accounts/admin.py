"""
Accounts Django Admin Configuration

Extends Django's UserAdmin with the site profile (role, contact data and
verification state) as an inline.

Author: Seva Development Team
Version: 1.0.0
"""

from typing import Optional

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from .models import Profile


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("name", "phone", "address", "role", "is_verified")

    def get_extra(self, request: HttpRequest, obj: Optional[User] = None, **kwargs) -> int:
        return 0


class UserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)
    list_display = ("username", "get_name", "get_role", "get_verified", "is_active", "date_joined")
    list_select_related = ("profile",)
    list_filter = ("profile__role", "profile__is_verified", "is_active", "date_joined")
    search_fields = ("username", "email", "profile__name", "profile__phone")
    ordering = ("-date_joined",)

    @admin.display(description=_("Name"))
    def get_name(self, instance: User) -> str:
        return getattr(getattr(instance, "profile", None), "name", "")

    @admin.display(description=_("Role"))
    def get_role(self, instance: User) -> Optional[str]:
        try:
            return instance.profile.get_role_display()
        except Profile.DoesNotExist:
            return None

    @admin.display(boolean=True, description=_("Verified"))
    def get_verified(self, instance: User) -> Optional[bool]:
        try:
            return instance.profile.is_verified
        except Profile.DoesNotExist:
            return None

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("profile")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)
