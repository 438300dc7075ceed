"""
Listing and attached content records for privileged accounts.

Only the fields the entitlement checks depend on are kept here; search,
media storage and rendering belong to other services.
"""
from django.db import models
from apps.core.models import BaseModel


class ListingManager(models.Manager):
    """Manager for listing queries."""

    def for_account(self, account):
        return self.filter(account=account)

    def counted(self, account, statuses):
        """Listings of ``account`` whose status is in ``statuses``."""
        return self.filter(account=account, status__in=list(statuses))


class Listing(BaseModel):
    """A vehicle or service listing owned by a privileged account."""

    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('pending', 'Pending'),
        ('active', 'Active'),
        ('sold', 'Sold'),
        ('archived', 'Archived'),
    ]

    account = models.ForeignKey(
        'entitlements.PrivilegedAccount',
        on_delete=models.CASCADE,
        related_name='listings',
        help_text="Account that owns this listing"
    )
    title = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending',
        db_index=True,
        help_text="Listing lifecycle status"
    )

    objects = ListingManager()

    class Meta:
        db_table = 'listings'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['account', 'status'], name='listings_acct_status_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"


class AccountContent(BaseModel):
    """Review, podcast or video attached to a privileged account."""

    KIND_CHOICES = [
        ('review', 'Review'),
        ('podcast', 'Podcast'),
        ('video', 'Video'),
    ]

    account = models.ForeignKey(
        'entitlements.PrivilegedAccount',
        on_delete=models.CASCADE,
        related_name='content',
        help_text="Account the content is attached to"
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES, db_index=True)
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)

    class Meta:
        db_table = 'account_content'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.kind}: {self.title}"
