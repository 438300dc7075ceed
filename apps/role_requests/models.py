"""
Role request models.

A RoleRequest is a user's application to become a dealer, service provider,
ministry official or transport coordinator. Requests are never deleted; every
status change and provisioning attempt is appended to RoleRequestEvent.
"""
from django.conf import settings
from django.db import models
from django.db.models import Q, Count
from apps.core.models import BaseModel


class RoleRequestManager(models.Manager):
    """Manager for role request queries."""

    def pending(self):
        return self.filter(status=RoleRequest.STATUS_PENDING)

    def for_user(self, user):
        return self.filter(user=user).order_by('-created_at')

    def has_pending(self, user, request_type):
        return self.pending().filter(user=user, request_type=request_type).exists()

    def awaiting_reconciliation(self):
        """Approved requests whose provisioning failed and was not retried successfully."""
        return self.filter(
            status=RoleRequest.STATUS_APPROVED,
            provisioning_failed_at__isnull=False,
            provisioned_at__isnull=True,
        ).order_by('provisioning_failed_at')

    def counts_by_type_and_status(self):
        return (
            self.values('request_type', 'status')
            .annotate(count=Count('id'))
            .order_by('request_type', 'status')
        )


class RoleRequest(BaseModel):
    """
    Application for a privileged role.

    ``status`` moves from pending to approved or rejected exactly once.
    """

    TYPE_DEALER = 'dealer'
    TYPE_PROVIDER = 'provider'
    TYPE_MINISTRY = 'ministry'
    TYPE_COORDINATOR = 'coordinator'

    REQUEST_TYPE_CHOICES = [
        (TYPE_DEALER, 'Dealer'),
        (TYPE_PROVIDER, 'Service Provider'),
        (TYPE_MINISTRY, 'Ministry Official'),
        (TYPE_COORDINATOR, 'Transport Coordinator'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='role_requests',
        help_text="User applying for the role"
    )
    request_type = models.CharField(
        max_length=20,
        choices=REQUEST_TYPE_CHOICES,
        db_index=True,
        help_text="Requested role"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
        help_text="Review status"
    )
    payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Type-specific application data"
    )
    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default='medium',
        db_index=True,
        help_text="Review priority derived from the request type"
    )
    auto_approval_eligible = models.BooleanField(
        default=False,
        help_text="Informational hint for reviewers; never approves on its own"
    )

    # Review
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_role_requests',
        help_text="Administrator who decided the request"
    )
    review_notes = models.TextField(blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    # Provisioning
    associated_entity_id = models.UUIDField(
        null=True,
        blank=True,
        help_text="Account created when the request was provisioned"
    )
    provisioning_error = models.TextField(
        blank=True,
        help_text="Last provisioning failure message"
    )
    provisioning_failed_at = models.DateTimeField(null=True, blank=True)
    provisioned_at = models.DateTimeField(null=True, blank=True)

    objects = RoleRequestManager()

    class Meta:
        db_table = 'role_requests'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'request_type'],
                condition=Q(status='pending'),
                name='unique_pending_role_request'
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'priority', 'created_at'], name='role_req_queue_idx'),
            models.Index(fields=['user', 'status'], name='role_req_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.request_type} ({self.status})"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    @property
    def needs_reconciliation(self):
        return (
            self.status == self.STATUS_APPROVED
            and self.provisioning_failed_at is not None
            and self.provisioned_at is None
        )


class RoleRequestEventManager(models.Manager):
    """Manager for role request event queries."""

    def for_request(self, role_request):
        return self.filter(role_request=role_request).order_by('created_at')

    def by_type(self, event_type):
        return self.filter(event_type=event_type)


class RoleRequestEvent(BaseModel):
    """
    Append-only audit trail for role requests.

    Written in the same transaction as the change it records.
    """

    EVENT_TYPE_CHOICES = [
        ('submitted', 'Submitted'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('provisioned', 'Provisioned'),
        ('provisioning_failed', 'Provisioning Failed'),
        ('provisioning_retried', 'Provisioning Retried'),
    ]

    role_request = models.ForeignKey(
        RoleRequest,
        on_delete=models.CASCADE,
        related_name='events',
        help_text="Request this event belongs to"
    )
    event_type = models.CharField(
        max_length=30,
        choices=EVENT_TYPE_CHOICES,
        db_index=True,
        help_text="Type of event"
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="User who caused the event (none for background jobs)"
    )
    from_status = models.CharField(max_length=20, blank=True)
    to_status = models.CharField(max_length=20, blank=True)
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Event metadata (e.g., notes, error, entity id)"
    )

    objects = RoleRequestEventManager()

    class Meta:
        db_table = 'role_request_events'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['role_request', 'created_at'], name='role_req_evt_req_idx'),
        ]

    def __str__(self):
        return f"{self.role_request_id} - {self.event_type} at {self.created_at}"
