"""Role-based DRF permissions shared by every app."""

from rest_framework import permissions


class RolePermission(permissions.BasePermission):
    """Allow authenticated users whose ``role`` is in ``allowed_roles``."""

    allowed_roles = frozenset()
    message = 'Your role is not allowed to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'role', None) in self.allowed_roles)


def role_required(*roles):
    """Build a permission class restricted to ``roles``."""
    return type('RoleRequired', (RolePermission,), {'allowed_roles': frozenset(roles)})


class HasActionRole(permissions.BasePermission):
    """Per-action role allowlist for viewsets.

    Views declare ``action_roles = {'list': {...}, 'create': {...}}``; actions
    missing from the mapping fall back to ``default_roles`` (when set) and
    otherwise only require authentication.
    """

    message = 'Your role is not allowed to perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        roles = getattr(view, 'action_roles', {}).get(getattr(view, 'action', None))
        if roles is None:
            roles = getattr(view, 'default_roles', None)
        if roles is None:
            return True
        return getattr(user, 'role', None) in roles
