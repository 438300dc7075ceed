"""
Review of role requests by platform administrators.

ReviewService is the only code that changes a request's status. Approval is
committed first; provisioning runs afterwards and its outcome is recorded on
the request. A failed provisioning never reverts the approval and is picked
up again by reconciliation.
"""
import logging

from django.core.paginator import Paginator, EmptyPage
from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    InvalidStatusError, NotFoundError, PermissionDeniedError, ValidationError,
)
from apps.core.logging import SecurityLogger
from apps.role_requests.models import RoleRequest, RoleRequestEvent
from apps.role_requests.services.provisioning_service import ProvisioningService

logger = logging.getLogger(__name__)

DECISION_STATUSES = (RoleRequest.STATUS_APPROVED, RoleRequest.STATUS_REJECTED)

ORDERING_FIELDS = {'created_at', 'updated_at', 'priority', 'status', 'request_type', 'reviewed_at'}
DEFAULT_ORDERING = '-created_at'
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Filter values that mean "no filter"
ALL = 'all'


class ReviewService:
    """Service for deciding, reconciling and querying role requests."""

    @staticmethod
    def _require_admin(user, action):
        if user is None or not getattr(user, 'is_admin', False):
            SecurityLogger.log_permission_denied(user, required_role='admin', path=action)
            raise PermissionDeniedError(
                "Administrator role required",
                details={'action': action}
            )

    @staticmethod
    def get_request(request_id):
        """
        Raises:
            NotFoundError: If no request has this id
        """
        role_request = (
            RoleRequest.objects
            .select_related('user', 'reviewed_by')
            .filter(id=request_id)
            .first()
        )
        if role_request is None:
            raise NotFoundError(
                f"Request not found with id {request_id}",
                details={'request_id': str(request_id)}
            )
        return role_request

    @classmethod
    def decide(cls, request_id, status, reviewer, notes=''):
        """
        Approve or reject a pending request.

        On approval the provisioner runs after the decision is committed.
        Its failure is stored on the request and logged; the approval stands.

        Args:
            request_id: RoleRequest id
            status: 'approved' or 'rejected'
            reviewer: Administrator making the decision
            notes: Review notes

        Returns:
            RoleRequest: The decided request

        Raises:
            PermissionDeniedError: Reviewer is not an administrator
            InvalidStatusError: Bad status value or request not pending
            NotFoundError: Request does not exist
        """
        cls._require_admin(reviewer, 'decide_role_request')

        if status not in DECISION_STATUSES:
            raise InvalidStatusError(
                'Invalid status value',
                details={'status': status, 'allowed': list(DECISION_STATUSES)}
            )

        role_request = cls._commit_decision(request_id, status, reviewer, notes or '')

        logger.info(
            f"Role request {role_request.id} {status} by {reviewer.id}",
            extra={
                'role_request_id': str(role_request.id),
                'request_type': role_request.request_type,
                'status': status,
                'reviewer_id': str(reviewer.id),
            }
        )

        if status == RoleRequest.STATUS_APPROVED:
            cls._run_provisioning(role_request, actor=reviewer)

        return role_request

    @staticmethod
    @transaction.atomic
    def _commit_decision(request_id, status, reviewer, notes):
        role_request = (
            RoleRequest.objects
            .select_for_update()
            .filter(id=request_id)
            .first()
        )
        if role_request is None:
            raise NotFoundError(
                f"Request not found with id {request_id}",
                details={'request_id': str(request_id)}
            )

        if not role_request.is_pending:
            raise InvalidStatusError(
                f"Request has already been {role_request.status}",
                details={'current_status': role_request.status}
            )

        role_request.status = status
        role_request.review_notes = notes
        role_request.reviewed_by = reviewer
        role_request.reviewed_at = timezone.now()
        role_request.save(update_fields=[
            'status', 'review_notes', 'reviewed_by', 'reviewed_at', 'updated_at',
        ])

        RoleRequestEvent.objects.create(
            role_request=role_request,
            event_type=status,
            actor=reviewer,
            from_status=RoleRequest.STATUS_PENDING,
            to_status=status,
            metadata={'notes': notes},
        )
        return role_request

    @classmethod
    def _run_provisioning(cls, role_request, actor=None):
        result = ProvisioningService.provision(role_request)
        now = timezone.now()

        with transaction.atomic():
            if result.success:
                if result.created_entity_id:
                    role_request.associated_entity_id = result.created_entity_id
                role_request.provisioned_at = now
                role_request.provisioning_error = ''
                role_request.provisioning_failed_at = None
                role_request.save(update_fields=[
                    'associated_entity_id', 'provisioned_at', 'provisioning_error',
                    'provisioning_failed_at', 'updated_at',
                ])
                RoleRequestEvent.objects.create(
                    role_request=role_request,
                    event_type='provisioned',
                    actor=actor,
                    from_status=role_request.status,
                    to_status=role_request.status,
                    metadata={'entity_id': result.created_entity_id},
                )
            else:
                role_request.provisioning_error = result.error.message
                role_request.provisioning_failed_at = now
                role_request.save(update_fields=[
                    'provisioning_error', 'provisioning_failed_at', 'updated_at',
                ])
                RoleRequestEvent.objects.create(
                    role_request=role_request,
                    event_type='provisioning_failed',
                    actor=actor,
                    from_status=role_request.status,
                    to_status=role_request.status,
                    metadata={'error': result.error.message, 'details': result.error.details},
                )

        if result.success:
            logger.info(
                f"Provisioned role request {role_request.id}",
                extra={
                    'role_request_id': str(role_request.id),
                    'request_type': role_request.request_type,
                    'entity_id': result.created_entity_id,
                }
            )
        else:
            logger.error(
                f"Provisioning failed for approved role request {role_request.id}: "
                f"{result.error.message}",
                extra={
                    'role_request_id': str(role_request.id),
                    'request_type': role_request.request_type,
                    'user_id': str(role_request.user_id),
                    'error': result.error.message,
                }
            )
        return result

    @classmethod
    def retry_provisioning(cls, request_id, operator=None):
        """
        Re-run provisioning for an approved request whose last attempt failed.

        ``operator`` is None when called from the background job.

        Raises:
            PermissionDeniedError: Operator given and not an administrator
            InvalidStatusError: Request is not awaiting reconciliation
            NotFoundError: Request does not exist
        """
        if operator is not None:
            cls._require_admin(operator, 'retry_provisioning')

        # Hold the row until provisioning is recorded so two concurrent
        # retries cannot both run and overwrite each other's outcome.
        with transaction.atomic():
            role_request = (
                RoleRequest.objects
                .select_for_update()
                .filter(id=request_id)
                .first()
            )
            if role_request is None:
                raise NotFoundError(
                    f"Request not found with id {request_id}",
                    details={'request_id': str(request_id)}
                )

            if not role_request.needs_reconciliation:
                raise InvalidStatusError(
                    "Request is not awaiting provisioning reconciliation",
                    details={
                        'status': role_request.status,
                        'provisioned': role_request.provisioned_at is not None,
                    }
                )

            RoleRequestEvent.objects.create(
                role_request=role_request,
                event_type='provisioning_retried',
                actor=operator,
                from_status=role_request.status,
                to_status=role_request.status,
                metadata={'previous_error': role_request.provisioning_error},
            )
            logger.info(
                f"Retrying provisioning for role request {role_request.id}",
                extra={'role_request_id': str(role_request.id)}
            )

            cls._run_provisioning(role_request, actor=operator)

        return role_request

    @staticmethod
    def pending_reconciliation():
        """Approved requests still waiting for a successful provisioning."""
        return RoleRequest.objects.awaiting_reconciliation().select_related('user')

    @staticmethod
    def list_requests(filters=None, page=1, limit=DEFAULT_PAGE_SIZE, ordering=DEFAULT_ORDERING):
        """
        Paginated request listing for administrators.

        Args:
            filters: Optional dict with status, request_type and priority;
                the value 'all' disables a filter
            page: 1-based page number
            limit: Page size, capped at MAX_PAGE_SIZE
            ordering: Field name, '-' prefix for descending

        Returns:
            dict: {'results': [...], 'pagination': {...}}
        """
        filters = filters or {}
        queryset = RoleRequest.objects.select_related('user', 'reviewed_by')

        for field in ('status', 'request_type', 'priority'):
            value = filters.get(field)
            if value and value != ALL:
                queryset = queryset.filter(**{field: value})

        if ordering.lstrip('-') not in ORDERING_FIELDS:
            raise ValidationError(
                f"Invalid ordering: {ordering}",
                details={'allowed': sorted(ORDERING_FIELDS)}
            )
        queryset = queryset.order_by(ordering, '-id')

        try:
            page = int(page)
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("page and limit must be integers")
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        limit = min(limit, MAX_PAGE_SIZE)

        paginator = Paginator(queryset, limit)
        try:
            results = list(paginator.page(page).object_list)
        except EmptyPage:
            results = []

        return {
            'results': results,
            'pagination': {
                'current_page': page,
                'total_pages': paginator.num_pages if paginator.count else 0,
                'total': paginator.count,
                'has_next': page * limit < paginator.count,
                'has_prev': page > 1,
            },
        }

    @staticmethod
    def requests_for_user(user):
        return list(RoleRequest.objects.for_user(user).select_related('reviewed_by'))

    @staticmethod
    def statistics():
        """
        Request counts grouped by type and status, plus the five newest requests.
        """
        grouped = {}
        for row in RoleRequest.objects.counts_by_type_and_status():
            entry = grouped.setdefault(
                row['request_type'],
                {'request_type': row['request_type'], 'statuses': [], 'total': 0}
            )
            entry['statuses'].append({'status': row['status'], 'count': row['count']})
            entry['total'] += row['count']

        recent = list(
            RoleRequest.objects.select_related('user').order_by('-created_at')[:5]
        )
        return {
            'statistics': list(grouped.values()),
            'recent_requests': recent,
        }
