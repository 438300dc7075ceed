"""
Core API views.
"""
import logging

from django.core.cache import cache
from django.db import connection
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger(__name__)

CACHE_CHECK_KEY = 'motorhub:health'


def check_database():
    """Return None when the database answers, else the error text."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except Exception as e:
        logger.error("Database health check failed", exc_info=True)
        return str(e)
    return None


def check_cache():
    """Return None when a written key reads back, else the error text."""
    try:
        cache.set(CACHE_CHECK_KEY, 'ok', timeout=10)
        if cache.get(CACHE_CHECK_KEY) != 'ok':
            return "Unable to read test key"
    except Exception as e:
        logger.error("Cache health check failed", exc_info=True)
        return str(e)
    return None


def provisioning_backlog():
    """Number of approved role requests still waiting to be provisioned."""
    from apps.role_requests.models import RoleRequest

    return RoleRequest.objects.awaiting_reconciliation().count()


class HealthCheckView(APIView):
    """
    Report whether the service can take traffic.

    GET /v1/health/

    Returns 503 when the database or the cache is unreachable. The
    provisioning backlog is informational: approved users whose account was
    not created yet are picked up by the reconcile task, so a backlog never
    makes the service unhealthy on its own.
    """
    authentication_classes = []
    permission_classes = []

    @extend_schema(
        summary="Health check",
        description="Database and cache reachability plus the provisioning reconciliation backlog",
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'status': {'type': 'string'},
                    'database': {'type': 'string'},
                    'cache': {'type': 'string'},
                    'provisioning_backlog': {'type': 'integer'},
                }
            },
            503: {'description': 'Database or cache unavailable'}
        },
        tags=['Health']
    )
    def get(self, request):
        failures = {
            'database': check_database(),
            'cache': check_cache(),
        }
        body = {
            name: 'unhealthy' if error else 'healthy'
            for name, error in failures.items()
        }

        # The backlog query needs the database
        if failures['database'] is None:
            body['provisioning_backlog'] = provisioning_backlog()

        errors = [f"{name}: {error}" for name, error in failures.items() if error]
        if errors:
            body['status'] = 'unhealthy'
            body['errors'] = errors
            return Response(body, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        body['status'] = 'healthy'
        return Response(body, status=status.HTTP_200_OK)
