"""
Exception hierarchy and DRF exception handler for MotorHub.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django_ratelimit.exceptions import Ratelimited
from django.http import JsonResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_RETRY_AFTER = 60


def ratelimit_view(request, exception):
    """
    View for django-ratelimit to return 429 instead of 403.

    Called when a rate limit is exceeded outside of DRF (block=True).
    """
    from apps.core.logging import SecurityLogger

    SecurityLogger.log_rate_limit_exceeded(
        endpoint=request.path,
        ip_address=request.META.get('REMOTE_ADDR', 'unknown'),
        user_id=_user_id(request),
    )

    response = JsonResponse(
        {
            'error': 'Rate limit exceeded. Please try again later.',
            'code': 'RATE_LIMIT_EXCEEDED',
            'retry_after': RATE_LIMIT_RETRY_AFTER,
        },
        status=429
    )
    response['Retry-After'] = str(RATE_LIMIT_RETRY_AFTER)
    return response


def custom_exception_handler(exc, context):
    """
    Exception handler that logs errors and returns a consistent format.

    Every error body carries a stable ``code`` next to the human-readable
    ``error`` message.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    if isinstance(exc, Ratelimited):
        from apps.core.logging import SecurityLogger

        SecurityLogger.log_rate_limit_exceeded(
            endpoint=request.path if request else 'unknown',
            ip_address=request.META.get('REMOTE_ADDR', 'unknown') if request else 'unknown',
            user_id=_user_id(request),
        )
        response = Response(
            {
                'error': 'Rate limit exceeded. Please try again later.',
                'code': 'RATE_LIMIT_EXCEEDED',
                'request_id': request_id,
                'retry_after': RATE_LIMIT_RETRY_AFTER,
            },
            status=status.HTTP_429_TOO_MANY_REQUESTS
        )
        response['Retry-After'] = str(RATE_LIMIT_RETRY_AFTER)
        return response

    if isinstance(exc, MotorHubException):
        log_method = logger.error if exc.status_code >= 500 else logger.warning
        log_method(
            f"API Exception: {exc.__class__.__name__}: {exc.message}",
            extra={
                'code': exc.code,
                'request_id': request_id,
                'path': request.path if request else None,
                'method': request.method if request else None,
            }
        )
        return Response(
            {
                'error': exc.message,
                'code': exc.code,
                'details': exc.details,
                'request_id': request_id,
            },
            status=exc.status_code
        )

    # Call DRF's default exception handler for framework exceptions
    response = exception_handler(exc, context)

    logger.error(
        f"API Exception: {exc.__class__.__name__}",
        extra={
            'exception': str(exc),
            'request_id': request_id,
            'path': request.path if request else None,
            'method': request.method if request else None,
        },
        exc_info=response is None
    )

    if response is None:
        return Response(
            {
                'error': 'Internal server error',
                'code': 'INTERNAL_ERROR',
                'request_id': request_id,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if request_id and isinstance(response.data, dict):
        response.data['request_id'] = request_id

    return response


def _user_id(request):
    user = getattr(request, 'user', None) if request else None
    if user is not None and getattr(user, 'is_authenticated', False):
        return str(user.id)
    return None


class MotorHubException(Exception):
    """Base exception for MotorHub-specific errors."""

    code = 'ERROR'
    status_code = 400

    def __init__(self, message, details=None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def as_dict(self):
        return {'code': self.code, 'message': self.message, 'details': self.details}


class ValidationError(MotorHubException):
    """Raised when input validation fails."""
    code = 'VALIDATION_ERROR'
    status_code = 400


class DuplicateRequestError(MotorHubException):
    """Raised when a pending request of the same type already exists."""
    code = 'DUPLICATE_REQUEST'
    status_code = 409


class AlreadyHasRoleError(MotorHubException):
    """Raised when the user already holds the requested role."""
    code = 'ALREADY_HAS_ROLE'
    status_code = 409


class NotFoundError(MotorHubException):
    """Raised when a requested record does not exist."""
    code = 'NOT_FOUND'
    status_code = 404


class InvalidStatusError(MotorHubException):
    """Raised on a forbidden status value or transition."""
    code = 'INVALID_STATUS'
    status_code = 409


class InvalidTierError(MotorHubException):
    """Raised when a subscription tier name is unknown."""
    code = 'INVALID_TIER'
    status_code = 400


class ProvisioningError(MotorHubException):
    """
    Raised when creating the downstream account for an approved request fails.

    Normally recorded against the already-approved request instead of being
    propagated to the caller.
    """
    code = 'PROVISIONING_FAILED'
    status_code = 500


class QuotaExceededError(MotorHubException):
    """Advisory error carried by a refused quota check."""
    code = 'QUOTA_EXCEEDED'
    status_code = 403


class FeatureNotEnabledError(MotorHubException):
    """Raised when the subscription tier does not include a content feature."""
    code = 'FEATURE_NOT_ENABLED'
    status_code = 403


class AuthenticationError(MotorHubException):
    """Raised when authentication fails."""
    code = 'AUTHENTICATION_FAILED'
    status_code = 401


class PermissionDeniedError(MotorHubException):
    """Raised when user lacks the required role."""
    code = 'PERMISSION_DENIED'
    status_code = 403
