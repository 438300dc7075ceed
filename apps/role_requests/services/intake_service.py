"""
Role request intake.

Validates a submission, refuses duplicates and existing roles, and stores a
pending request with its review priority.
"""
import logging

from django.db import IntegrityError, transaction

from apps.core.exceptions import ValidationError, DuplicateRequestError, AlreadyHasRoleError
from apps.role_requests.models import RoleRequest, RoleRequestEvent
from apps.role_requests.registry import RequestTypeRegistry

logger = logging.getLogger(__name__)


class IntakeService:
    """Service for accepting role requests from users."""

    @classmethod
    def submit(cls, user, request_type, payload=None):
        """
        Create a pending role request.

        Args:
            user: Requesting user
            request_type: dealer, provider, ministry or coordinator
            payload: Type-specific application data

        Returns:
            RoleRequest

        Raises:
            ValidationError: Unknown type or missing required fields
            AlreadyHasRoleError: User already holds the requested role
            DuplicateRequestError: A pending request of this type exists
        """
        payload = dict(payload or {})

        spec = RequestTypeRegistry.get(request_type)
        if spec is None:
            raise ValidationError(
                f"Invalid request type: {request_type}",
                details={'request_type': request_type, 'valid_types': RequestTypeRegistry.names()}
            )

        missing = spec.missing_fields(payload)
        if missing:
            raise ValidationError(
                spec.validation_message,
                details={'missing_fields': missing}
            )

        if user.has_role(request_type):
            raise AlreadyHasRoleError(
                f"You already have {request_type} role",
                details={'request_type': request_type}
            )

        if RoleRequest.objects.has_pending(user, request_type):
            raise cls._duplicate_error(request_type)

        try:
            role_request = cls._create(user, request_type, payload, spec)
        except IntegrityError:
            # A concurrent submission won the insert
            logger.warning(
                f"Concurrent duplicate {request_type} request rejected for user {user.id}",
                extra={'user_id': str(user.id), 'request_type': request_type}
            )
            raise cls._duplicate_error(request_type)

        logger.info(
            f"Role request submitted: {request_type} by user {user.id}",
            extra={
                'role_request_id': str(role_request.id),
                'user_id': str(user.id),
                'request_type': request_type,
                'priority': role_request.priority,
                'auto_approval_eligible': role_request.auto_approval_eligible,
            }
        )
        return role_request

    @staticmethod
    @transaction.atomic
    def _create(user, request_type, payload, spec):
        role_request = RoleRequest.objects.create(
            user=user,
            request_type=request_type,
            status=RoleRequest.STATUS_PENDING,
            payload=payload,
            priority=spec.priority,
            auto_approval_eligible=bool(spec.eligibility(payload)),
        )
        RoleRequestEvent.objects.create(
            role_request=role_request,
            event_type='submitted',
            actor=user,
            to_status=RoleRequest.STATUS_PENDING,
            metadata={'priority': role_request.priority},
        )
        return role_request

    @staticmethod
    def _duplicate_error(request_type):
        return DuplicateRequestError(
            f"You already have a pending {request_type} request. "
            f"Please wait for it to be processed.",
            details={'request_type': request_type}
        )
