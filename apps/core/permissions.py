"""
DRF permission classes for role enforcement.

This module provides:
- IsPlatformAdmin: only users whose role is ``admin`` (the review authority)
- IsAccountOwnerOrAdmin: object-level access to privileged accounts
"""
import logging
from rest_framework.permissions import BasePermission

from apps.core.logging import SecurityLogger

logger = logging.getLogger(__name__)


def _client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class IsPlatformAdmin(BasePermission):
    """
    Allow access only to authenticated users with the admin role.

    Usage in views:
        class DecisionView(APIView):
            permission_classes = [IsPlatformAdmin]
    """

    message = 'Administrator role required.'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated and getattr(user, 'is_admin', False):
            return True

        if user is not None and user.is_authenticated:
            SecurityLogger.log_permission_denied(
                user,
                required_role='admin',
                path=request.path,
                ip_address=_client_ip(request)
            )
        return False


class IsAccountOwnerOrAdmin(BasePermission):
    """
    Object-level check for privileged accounts and role requests.

    The object must expose either ``owner_id`` (accounts) or ``user_id``
    (role requests).
    """

    message = 'You do not have access to this resource.'

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        return bool(user is not None and user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        user = request.user
        if getattr(user, 'is_admin', False):
            return True

        owner_id = getattr(obj, 'owner_id', None) or getattr(obj, 'user_id', None)
        if owner_id == user.id:
            return True

        logger.warning(
            f"Object access denied for user {user.id}",
            extra={
                'user_id': str(user.id),
                'object_type': obj.__class__.__name__,
                'object_id': str(getattr(obj, 'id', '')),
                'view': view.__class__.__name__,
                'request_id': getattr(request, 'request_id', None),
            }
        )
        return False
