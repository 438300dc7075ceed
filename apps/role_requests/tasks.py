"""
Celery tasks for role request reconciliation.

Approved requests whose provisioning failed are retried periodically until
the backing account or profile exists.
"""
import logging
from celery import shared_task

from apps.core.exceptions import MotorHubException
from apps.role_requests.services import ReviewService

logger = logging.getLogger(__name__)


def reconcile_requests(limit=None):
    """
    Retry provisioning for every request awaiting reconciliation.

    Returns:
        dict: Counts of checked, provisioned and still failing requests
    """
    queryset = ReviewService.pending_reconciliation()
    if limit:
        queryset = queryset[:limit]

    checked = provisioned = failed = 0
    for role_request in queryset:
        checked += 1
        try:
            refreshed = ReviewService.retry_provisioning(role_request.id)
        except MotorHubException as e:
            # Resolved by another worker or an operator since the query ran
            logger.warning(
                f"Skipped reconciliation of role request {role_request.id}: {e.message}",
                extra={'role_request_id': str(role_request.id), 'code': e.code}
            )
            continue

        if refreshed.provisioned_at is not None:
            provisioned += 1
        else:
            failed += 1

    logger.info(
        f"Provisioning reconciliation finished: {provisioned} provisioned, {failed} still failing",
        extra={'checked': checked, 'provisioned': provisioned, 'failed': failed}
    )
    return {'checked': checked, 'provisioned': provisioned, 'failed': failed}


@shared_task
def reconcile_failed_provisioning(limit=None):
    """
    Periodic reconciliation of approved requests without a granted role.

    Scheduled by celery beat (see config/celery.py).
    """
    return reconcile_requests(limit=limit)
