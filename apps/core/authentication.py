"""
Custom DRF authentication classes.

Token issuance lives with the platform's auth service; this module only
consumes the bearer tokens it hands out.
"""
import logging
import uuid

import jwt
from django.conf import settings
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework import exceptions

from apps.core.logging import SecurityLogger

logger = logging.getLogger(__name__)


def decode_access_token(token):
    """
    Validate a JWT and return its payload.

    Raises:
        jwt.InvalidTokenError: If the token is expired, malformed or forged
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[getattr(settings, 'JWT_ALGORITHM', 'HS256')]
    )


class JWTAuthentication(BaseAuthentication):
    """
    Resolve ``Authorization: Bearer <token>`` to an active user.

    The token's ``user_id`` claim identifies the user; the user's role is read
    from the database so that a freshly provisioned role takes effect without
    re-issuing the token.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid Authorization header.')

        try:
            token = auth[1].decode()
            payload = decode_access_token(token)
        except (UnicodeError, jwt.InvalidTokenError) as e:
            SecurityLogger.log_authentication_failure(
                reason=e.__class__.__name__,
                ip_address=request.META.get('REMOTE_ADDR')
            )
            raise exceptions.AuthenticationFailed('Invalid or expired token.')

        user_id = payload.get('user_id')
        if not user_id:
            raise exceptions.AuthenticationFailed('Token is missing the user_id claim.')

        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            SecurityLogger.log_authentication_failure(
                reason='InvalidUserIdClaim',
                ip_address=request.META.get('REMOTE_ADDR')
            )
            raise exceptions.AuthenticationFailed('Token carries a malformed user_id claim.')

        from apps.accounts.models import User

        user = User.objects.active().filter(id=user_id).first()
        if user is None:
            raise exceptions.AuthenticationFailed('User not found or inactive.')

        return (user, payload)

    def authenticate_header(self, request):
        return self.keyword
