from rest_framework.permissions import SAFE_METHODS, BasePermission

from .models import Profile, Role

# ------------------------------------------------------------
# Helper: reads the site role from the user's profile.
# Anonymous users and users without a profile have no role.
# ------------------------------------------------------------


def get_role(user):
    if not user or not user.is_authenticated:
        return None
    try:
        return user.profile.role
    except Profile.DoesNotExist:
        return None


class IsAdminRole(BasePermission):
    """Only accounts with the admin role."""

    message = "Forbidden"

    def has_permission(self, request, view):
        return get_role(request.user) == Role.ADMIN


class IsAdminOrSubadmin(BasePermission):
    """Admins and sub-admins (content editors)."""

    message = "Forbidden"

    def has_permission(self, request, view):
        return get_role(request.user) in (Role.ADMIN, Role.SUBADMIN)


class IsUserRole(BasePermission):
    """Any signed in account, whatever its role."""

    def has_permission(self, request, view):
        return get_role(request.user) is not None


class ReadOnlyOrAdmin(BasePermission):
    """Public reads, writes for admins."""

    message = "Forbidden"

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return get_role(request.user) == Role.ADMIN


class ReadOnlyOrEditor(BasePermission):
    """Public reads, writes for admins and sub-admins."""

    message = "Forbidden"

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return get_role(request.user) in (Role.ADMIN, Role.SUBADMIN)


def is_owner_or_admin(user, user_id) -> bool:
    """True when ``user`` is the account ``user_id`` or an admin."""
    if get_role(user) == Role.ADMIN:
        return True
    try:
        return user.is_authenticated and user.pk == int(user_id)
    except (TypeError, ValueError):
        return False
