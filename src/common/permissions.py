"""
Permissions built on the merged role list of ``TokenUser``.
"""

from rest_framework import permissions


class Roles:
    ADMIN = 'admin'
    PILOT = 'pilot'


def roles_of(request):
    return getattr(request.user, 'roles', None) or []


def is_service_call(request) -> bool:
    return getattr(request.user, 'is_service', False) is True


class IsAdmin(permissions.BasePermission):
    message = 'Administrator role required.'

    def has_permission(self, request, view) -> bool:
        return Roles.ADMIN in roles_of(request)


class IsAdminOrService(permissions.BasePermission):
    """Job triggers: administrators, or cron with the service token."""

    def has_permission(self, request, view) -> bool:
        return is_service_call(request) or Roles.ADMIN in roles_of(request)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Signed-in crew may read; only administrators write."""

    def has_permission(self, request, view) -> bool:
        if not (request.user and request.user.is_authenticated):
            return False
        return request.method in permissions.SAFE_METHODS or Roles.ADMIN in roles_of(request)
