"""Custom DRF permissions for the products app."""

from rest_framework import permissions

from accounts.models import ADMIN, DESIGNER, STAFF_ROLES


class IsCatalogEditorOrReadOnly(permissions.BasePermission):
    """Staff can read; admins and designers can write; only admins delete."""

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        role = getattr(user, 'role', None)
        if request.method in permissions.SAFE_METHODS:
            return role in STAFF_ROLES
        if request.method == 'DELETE':
            return role == ADMIN
        return role in {ADMIN, DESIGNER}
