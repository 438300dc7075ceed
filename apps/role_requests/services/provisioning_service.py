"""
Provisioning of approved role requests.

Each request type registers a handler that grants the role: dealer and
provider handlers open a privileged account on the default tier, ministry
and coordinator handlers update the user's embedded profile. Handlers run in
their own transaction so a failure leaves nothing half-written.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.core.exceptions import ProvisioningError
from apps.entitlements.models import PrivilegedAccount
from apps.entitlements.services import EntitlementService
from apps.role_requests.registry import RequestTypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningResult:
    success: bool
    created_entity_id: Optional[str] = None
    error: Optional[ProvisioningError] = None


class ProvisioningService:
    """Service that turns an approved request into a granted role."""

    @staticmethod
    def provision(role_request):
        """
        Run the handler registered for the request's type.

        Never raises; handler failures are returned as a ProvisioningError
        inside the result.

        Returns:
            ProvisioningResult
        """
        spec = RequestTypeRegistry.get(role_request.request_type)
        if spec is None or spec.provisioner is None:
            return ProvisioningResult(
                success=False,
                error=ProvisioningError(
                    f"No provisioner registered for request type {role_request.request_type}",
                    details={'request_type': role_request.request_type}
                )
            )

        try:
            with transaction.atomic():
                user = User.objects.select_for_update().get(id=role_request.user_id)
                entity_id = spec.provisioner(role_request, user)
        except ProvisioningError as e:
            return ProvisioningResult(success=False, error=e)
        except Exception as e:
            logger.error(
                f"Provisioning handler failed for role request {role_request.id}",
                exc_info=True,
                extra={
                    'role_request_id': str(role_request.id),
                    'request_type': role_request.request_type,
                }
            )
            return ProvisioningResult(
                success=False,
                error=ProvisioningError(
                    str(e) or e.__class__.__name__,
                    details={
                        'request_type': role_request.request_type,
                        'exception': e.__class__.__name__,
                    }
                )
            )

        return ProvisioningResult(
            success=True,
            created_entity_id=str(entity_id) if entity_id else None,
        )


def _contact_from(payload):
    contact = payload.get('contact_details') or {}
    return dict(contact) if isinstance(contact, dict) else {}


@RequestTypeRegistry.provisioner('dealer')
def provision_dealer(role_request, user):
    payload = role_request.payload
    account, _ = EntitlementService.open_account(
        owner=user,
        account_type=PrivilegedAccount.TYPE_DEALER,
        business_name=payload['business_name'],
        business_type=payload.get('business_type', ''),
        contact=_contact_from(payload),
        verified_by=role_request.reviewed_by,
    )
    user.role = User.ROLE_DEALER
    user.dealership_id = account.id
    user.save(update_fields=['role', 'dealership_id', 'updated_at'])
    return account.id


@RequestTypeRegistry.provisioner('provider')
def provision_provider(role_request, user):
    payload = role_request.payload
    account, _ = EntitlementService.open_account(
        owner=user,
        account_type=PrivilegedAccount.TYPE_PROVIDER,
        business_name=payload['business_name'],
        business_type=payload.get('business_type') or 'service',
        provider_type=payload.get('service_type', ''),
        contact=_contact_from(payload),
        verified_by=role_request.reviewed_by,
    )
    user.role = User.ROLE_PROVIDER
    user.provider_account_id = account.id
    user.save(update_fields=['role', 'provider_account_id', 'updated_at'])
    return account.id


@RequestTypeRegistry.provisioner('ministry')
def provision_ministry(role_request, user):
    payload = role_request.payload
    user.role = User.ROLE_MINISTRY
    user.ministry_info = {
        'ministry_name': payload['ministry_name'],
        'department': payload['department'],
        'position': payload['position'],
        'employee_id': payload['employee_id'],
    }
    user.save(update_fields=['role', 'ministry_info', 'updated_at'])
    return None


@RequestTypeRegistry.provisioner('coordinator')
def provision_coordinator(role_request, user):
    payload = role_request.payload
    profile = dict(user.coordinator_profile or {})
    stations = list(profile.get('stations') or [])
    if payload['station_name'] not in stations:
        stations.append(payload['station_name'])

    profile.update({
        'is_coordinator': True,
        'stations': stations,
        'approved_at': timezone.now().isoformat(),
        'approved_by': str(role_request.reviewed_by_id) if role_request.reviewed_by_id else None,
    })
    user.coordinator_profile = profile
    user.save(update_fields=['coordinator_profile', 'updated_at'])
    return None
