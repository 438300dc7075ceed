"""
Role requests app configuration.
"""
from django.apps import AppConfig


class RoleRequestsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.role_requests'
    verbose_name = 'Role Requests'

    def ready(self):
        """Register provisioning handlers with the request type registry."""
        import apps.role_requests.services.provisioning_service  # noqa
