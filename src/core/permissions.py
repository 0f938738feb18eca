"""Permission classes built on the user's permission level."""

from rest_framework import permissions

PERMISSION_DENIED = "Permission denied"


class IsAdmin(permissions.BasePermission):
    """Allow only the admin account (permission level 1)."""

    message = PERMISSION_DENIED

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and getattr(user, "is_authenticated", False) and getattr(user, "is_admin", False))


class IsAdminOrReadOnly(IsAdmin):
    """Anyone may read; only the admin may write."""

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)


class IsAuthorOrAdmin(permissions.BasePermission):
    """Object-level check: the object's author or the admin."""

    message = PERMISSION_DENIED

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False
        if getattr(user, "is_admin", False):
            return True
        return getattr(obj, "user_id", None) == user.pk


__all__ = ["IsAdmin", "IsAdminOrReadOnly", "IsAuthorOrAdmin", "PERMISSION_DENIED"]
