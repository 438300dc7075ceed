"""
Tests for the exception hierarchy and DRF exception handler.
"""
import pytest
from django.test import RequestFactory
from django_ratelimit.exceptions import Ratelimited
from rest_framework.exceptions import NotAuthenticated

from apps.core.exceptions import (
    custom_exception_handler,
    ratelimit_view,
    MotorHubException,
    ValidationError,
    DuplicateRequestError,
    AlreadyHasRoleError,
    NotFoundError,
    InvalidStatusError,
    InvalidTierError,
    ProvisioningError,
    QuotaExceededError,
    FeatureNotEnabledError,
    PermissionDeniedError,
)


@pytest.fixture
def request_context():
    request = RequestFactory().post('/v1/role-requests')
    request.request_id = 'req-123'
    return {'request': request}


class TestExceptionHierarchy:
    """Each error carries a stable code and HTTP status."""

    @pytest.mark.parametrize('exc_class,code,status_code', [
        (ValidationError, 'VALIDATION_ERROR', 400),
        (DuplicateRequestError, 'DUPLICATE_REQUEST', 409),
        (AlreadyHasRoleError, 'ALREADY_HAS_ROLE', 409),
        (NotFoundError, 'NOT_FOUND', 404),
        (InvalidStatusError, 'INVALID_STATUS', 409),
        (InvalidTierError, 'INVALID_TIER', 400),
        (ProvisioningError, 'PROVISIONING_FAILED', 500),
        (QuotaExceededError, 'QUOTA_EXCEEDED', 403),
        (FeatureNotEnabledError, 'FEATURE_NOT_ENABLED', 403),
        (PermissionDeniedError, 'PERMISSION_DENIED', 403),
    ])
    def test_codes(self, exc_class, code, status_code):
        exc = exc_class("message")

        assert isinstance(exc, MotorHubException)
        assert exc.code == code
        assert exc.status_code == status_code

    def test_details_default_to_empty_dict(self):
        exc = NotFoundError("missing")

        assert exc.details == {}
        assert exc.as_dict() == {'code': 'NOT_FOUND', 'message': 'missing', 'details': {}}


class TestCustomExceptionHandler:
    """Test rendering of errors."""

    def test_renders_motorhub_exception(self, request_context):
        exc = DuplicateRequestError("Already pending", details={'request_type': 'dealer'})

        response = custom_exception_handler(exc, request_context)

        assert response.status_code == 409
        assert response.data == {
            'error': 'Already pending',
            'code': 'DUPLICATE_REQUEST',
            'details': {'request_type': 'dealer'},
            'request_id': 'req-123',
        }

    def test_ratelimited_returns_429(self, request_context):
        response = custom_exception_handler(Ratelimited(), request_context)

        assert response.status_code == 429
        assert response['Retry-After'] == '60'
        assert response.data['code'] == 'RATE_LIMIT_EXCEEDED'

    def test_framework_exception_gets_request_id(self, request_context):
        response = custom_exception_handler(NotAuthenticated(), request_context)

        assert response.status_code == 401
        assert response.data['request_id'] == 'req-123'

    def test_unexpected_exception_returns_500(self, request_context):
        response = custom_exception_handler(RuntimeError("db down"), request_context)

        assert response.status_code == 500
        assert response.data['code'] == 'INTERNAL_ERROR'
        assert 'db down' not in response.data['error']


def test_ratelimit_view_returns_429():
    request = RequestFactory().post('/v1/role-requests')

    response = ratelimit_view(request, Ratelimited())

    assert response.status_code == 429
    assert response['Retry-After'] == '60'
