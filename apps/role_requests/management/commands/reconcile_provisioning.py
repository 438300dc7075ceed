"""
Management command to retry provisioning of approved role requests.
"""
from django.core.management.base import BaseCommand, CommandError

from apps.core.exceptions import MotorHubException
from apps.role_requests.services import ReviewService
from apps.role_requests.tasks import reconcile_requests


class Command(BaseCommand):
    help = 'Retry provisioning for approved role requests whose provisioning failed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--request-id',
            help='Retry a single role request instead of all pending ones',
        )
        parser.add_argument(
            '--limit',
            type=int,
            default=None,
            help='Maximum number of requests to retry',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List requests awaiting reconciliation without retrying',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            pending = ReviewService.pending_reconciliation()
            for role_request in pending:
                self.stdout.write(
                    f"{role_request.id}  {role_request.request_type:<12} "
                    f"{role_request.user.email}  {role_request.provisioning_error}"
                )
            self.stdout.write(f"{pending.count()} request(s) awaiting reconciliation")
            return

        if options['request_id']:
            try:
                role_request = ReviewService.retry_provisioning(options['request_id'])
            except MotorHubException as e:
                raise CommandError(e.message)

            if role_request.provisioned_at:
                self.stdout.write(self.style.SUCCESS(f"Provisioned {role_request.id}"))
            else:
                self.stdout.write(self.style.ERROR(
                    f"Provisioning failed again: {role_request.provisioning_error}"
                ))
            return

        result = reconcile_requests(limit=options['limit'])
        self.stdout.write(self.style.SUCCESS(
            f"Checked {result['checked']}: {result['provisioned']} provisioned, "
            f"{result['failed']} still failing"
        ))
