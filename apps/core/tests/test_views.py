"""
Tests for core views.
"""
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from apps.role_requests.services import IntakeService, ReviewService


OPEN_ACCOUNT = 'apps.role_requests.services.provisioning_service.EntitlementService.open_account'


@pytest.mark.django_db
class TestHealthCheckView:
    """Test GET /v1/health/."""

    def test_healthy(self):
        response = APIClient().get(reverse('health-check'))

        assert response.status_code == 200
        assert response.data == {
            'status': 'healthy',
            'database': 'healthy',
            'cache': 'healthy',
            'provisioning_backlog': 0,
        }

    def test_backlog_reported_without_failing(self, user, admin_user, dealer_payload):
        """Approved requests whose account was not created show up as backlog."""
        role_request = IntakeService.submit(user, 'dealer', dealer_payload)
        with patch(OPEN_ACCOUNT, side_effect=RuntimeError('Account store unavailable')):
            ReviewService.decide(role_request.id, 'approved', admin_user)

        response = APIClient().get(reverse('health-check'))

        assert response.status_code == 200
        assert response.data['status'] == 'healthy'
        assert response.data['provisioning_backlog'] == 1

    def test_backlog_clears_after_retry(self, user, admin_user, dealer_payload):
        role_request = IntakeService.submit(user, 'dealer', dealer_payload)
        with patch(OPEN_ACCOUNT, side_effect=RuntimeError('Account store unavailable')):
            ReviewService.decide(role_request.id, 'approved', admin_user)
        ReviewService.retry_provisioning(role_request.id, operator=admin_user)

        response = APIClient().get(reverse('health-check'))

        assert response.data['provisioning_backlog'] == 0

    def test_cache_failure(self):
        with patch('apps.core.views.cache') as cache:
            cache.set.side_effect = ConnectionError('refused')
            response = APIClient().get(reverse('health-check'))

        assert response.status_code == 503
        assert response.data['status'] == 'unhealthy'
        assert response.data['cache'] == 'unhealthy'
        assert response.data['errors'] == ['cache: refused']

    def test_database_failure_skips_backlog(self):
        with patch('apps.core.views.check_database', return_value='connection refused'):
            response = APIClient().get(reverse('health-check'))

        assert response.status_code == 503
        assert response.data['database'] == 'unhealthy'
        assert 'provisioning_backlog' not in response.data

    def test_response_carries_request_id(self):
        response = APIClient().get(reverse('health-check'), HTTP_X_REQUEST_ID='trace-42')

        assert response['X-Request-ID'] == 'trace-42'
