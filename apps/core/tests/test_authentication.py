"""
Tests for bearer token authentication.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch

import jwt
import pytest
from django.conf import settings
from django.urls import reverse
from rest_framework.test import APIClient

from apps.core.authentication import decode_access_token


def make_token(user_id, expires_in=timedelta(hours=1), key=None):
    payload = {
        'user_id': str(user_id) if user_id else None,
        'exp': datetime.now(dt_timezone.utc) + expires_in,
    }
    return jwt.encode(payload, key or settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.mark.django_db
class TestJWTAuthentication:
    """Test resolution of Authorization: Bearer headers."""

    def _get(self, token=None, header=None):
        client = APIClient()
        if header is not None:
            client.credentials(HTTP_AUTHORIZATION=header)
        elif token is not None:
            client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client.get(reverse('role-request-mine'))

    def test_valid_token_authenticates(self, user):
        response = self._get(make_token(user.id))

        assert response.status_code == 200
        assert response.data['count'] == 0

    def test_missing_header_is_unauthenticated(self):
        response = self._get()

        assert response.status_code == 401

    def test_expired_token_rejected(self, user):
        response = self._get(make_token(user.id, expires_in=timedelta(seconds=-30)))

        assert response.status_code == 401

    def test_forged_token_rejected(self, user):
        response = self._get(make_token(user.id, key='not-the-signing-key-at-all-0000000'))

        assert response.status_code == 401

    def test_token_without_user_id_rejected(self):
        response = self._get(make_token(None))

        assert response.status_code == 401

    @pytest.mark.parametrize('claim', ['not-a-uuid', 42, '1234-abcd'])
    def test_malformed_user_id_rejected(self, user, claim):
        """A correctly signed token with a non-UUID user_id is a 401, not a 500."""
        with patch('apps.core.authentication.SecurityLogger') as security_logger:
            response = self._get(make_token(claim))

        assert response.status_code == 401
        assert security_logger.log_authentication_failure.called
        assert security_logger.log_authentication_failure.call_args.kwargs['reason'] == 'InvalidUserIdClaim'

    def test_inactive_user_rejected(self, user):
        user.is_active = False
        user.save(update_fields=['is_active'])

        response = self._get(make_token(user.id))

        assert response.status_code == 401

    def test_malformed_header_rejected(self, user):
        response = self._get(header='Bearer a b')

        assert response.status_code == 401

    def test_role_read_from_database(self, user):
        """A role granted after the token was issued applies immediately."""
        token = make_token(user.id)
        user.role = 'admin'
        user.save(update_fields=['role'])

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = client.get(reverse('role-request-stats'))

        assert response.status_code == 200


def test_decode_access_token_round_trip():
    token = make_token('2f1d3c4b-0000-4000-8000-000000000000')

    assert decode_access_token(token)['user_id'] == '2f1d3c4b-0000-4000-8000-000000000000'
