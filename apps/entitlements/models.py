"""
Privileged account and subscription models.

Dealer and service-provider accounts are created when a role request is
approved. Each account carries one subscription whose features always equal
the tier table entry for its tier.
"""
from django.conf import settings
from django.db import models
from apps.core.models import BaseModel
from apps.entitlements.tiers import TIER_CHOICES, DEFAULT_TIER, features_for


class PrivilegedAccountManager(models.Manager):
    """Manager for privileged account queries."""

    def for_owner(self, owner):
        """Get accounts owned by a user."""
        return self.filter(owner=owner)

    def active(self):
        """Get all active accounts."""
        return self.filter(status=PrivilegedAccount.STATUS_ACTIVE)

    def dealers(self):
        return self.filter(account_type=PrivilegedAccount.TYPE_DEALER)

    def providers(self):
        return self.filter(account_type=PrivilegedAccount.TYPE_PROVIDER)


class PrivilegedAccount(BaseModel):
    """
    A dealership or service-provider business attached to a user.

    A user holds at most one account of each type.
    """

    TYPE_DEALER = 'dealer'
    TYPE_PROVIDER = 'provider'

    ACCOUNT_TYPE_CHOICES = [
        (TYPE_DEALER, 'Dealer'),
        (TYPE_PROVIDER, 'Service Provider'),
    ]

    STATUS_ACTIVE = 'active'
    STATUS_SUSPENDED = 'suspended'
    STATUS_INACTIVE = 'inactive'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_SUSPENDED, 'Suspended'),
        (STATUS_INACTIVE, 'Inactive'),
    ]

    VERIFICATION_CHOICES = [
        ('unverified', 'Unverified'),
        ('pending', 'Pending'),
        ('verified', 'Verified'),
    ]

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='privileged_accounts',
        help_text="User who owns this account"
    )
    account_type = models.CharField(
        max_length=20,
        choices=ACCOUNT_TYPE_CHOICES,
        db_index=True,
        help_text="Dealer or service provider"
    )

    business_name = models.CharField(max_length=255)
    business_type = models.CharField(
        max_length=100,
        blank=True,
        help_text="Free-form business category (e.g. independent, franchise)"
    )
    provider_type = models.CharField(
        max_length=100,
        blank=True,
        help_text="Service category for provider accounts"
    )
    contact = models.JSONField(
        default=dict,
        blank=True,
        help_text="Phone, email and address taken from the role request"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        db_index=True,
        help_text="Operational status of the account"
    )
    verification_status = models.CharField(
        max_length=20,
        choices=VERIFICATION_CHOICES,
        default='unverified',
        help_text="Business verification state"
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Administrator who verified the account"
    )

    objects = PrivilegedAccountManager()

    class Meta:
        db_table = 'privileged_accounts'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['owner', 'account_type'],
                name='unique_account_type_per_owner'
            ),
        ]
        indexes = [
            models.Index(fields=['account_type', 'status'], name='priv_acct_type_status_idx'),
        ]

    def __str__(self):
        return f"{self.business_name} ({self.account_type})"

    def is_active(self):
        return self.status == self.STATUS_ACTIVE


class AccountSubscriptionManager(models.Manager):
    """Manager for subscription queries."""

    def active(self):
        return self.filter(status=AccountSubscription.STATUS_ACTIVE)

    def by_tier(self, tier):
        return self.filter(tier=tier)


class AccountSubscription(BaseModel):
    """
    Tiered entitlement attached to a privileged account.

    The feature columns are denormalised from the tier table so they can be
    queried, but they are recomputed from ``tier`` on every save and cannot
    drift from it.
    """

    STATUS_ACTIVE = 'active'
    STATUS_PENDING = 'pending'
    STATUS_EXPIRED = 'expired'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_PENDING, 'Pending'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    account = models.OneToOneField(
        PrivilegedAccount,
        on_delete=models.CASCADE,
        related_name='subscription',
        help_text="Account this subscription belongs to"
    )
    tier = models.CharField(
        max_length=20,
        choices=TIER_CHOICES,
        default=DEFAULT_TIER,
        db_index=True,
        help_text="Subscription tier"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        db_index=True,
        help_text="Current subscription status"
    )
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="End of the current subscription period"
    )

    # Derived from tier
    max_listings = models.PositiveIntegerField(default=0)
    allow_photography = models.BooleanField(default=False)
    allow_reviews = models.BooleanField(default=False)
    allow_podcasts = models.BooleanField(default=False)
    allow_videos = models.BooleanField(default=False)

    objects = AccountSubscriptionManager()

    class Meta:
        db_table = 'account_subscriptions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'expires_at'], name='acct_sub_status_exp_idx'),
        ]

    def __str__(self):
        return f"{self.account.business_name} - {self.tier} ({self.status})"

    def save(self, *args, **kwargs):
        self.apply_tier_features()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | set(self.features.keys())
        super().save(*args, **kwargs)

    def apply_tier_features(self):
        """Overwrite every feature column with the tier table entry."""
        for field, value in features_for(self.tier).as_dict().items():
            setattr(self, field, value)

    @property
    def features(self):
        return {
            'max_listings': self.max_listings,
            'allow_photography': self.allow_photography,
            'allow_reviews': self.allow_reviews,
            'allow_podcasts': self.allow_podcasts,
            'allow_videos': self.allow_videos,
        }

    def is_active(self):
        return self.status == self.STATUS_ACTIVE


class SubscriptionEventManager(models.Manager):
    """Manager for subscription event queries."""

    def for_subscription(self, subscription):
        return self.filter(subscription=subscription).order_by('-created_at')

    def by_type(self, event_type):
        return self.filter(event_type=event_type)


class SubscriptionEvent(BaseModel):
    """
    Audit trail for subscription lifecycle events.
    """

    EVENT_TYPE_CHOICES = [
        ('created', 'Created'),
        ('tier_changed', 'Tier Changed'),
    ]

    subscription = models.ForeignKey(
        AccountSubscription,
        on_delete=models.CASCADE,
        related_name='events',
        help_text="Subscription this event belongs to"
    )
    event_type = models.CharField(
        max_length=30,
        choices=EVENT_TYPE_CHOICES,
        db_index=True,
        help_text="Type of event"
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Event metadata (e.g., previous_tier, new_tier)"
    )

    objects = SubscriptionEventManager()

    class Meta:
        db_table = 'account_subscription_events'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['subscription', 'created_at'], name='acct_sub_evt_sub_idx'),
        ]

    def __str__(self):
        return f"{self.subscription_id} - {self.event_type} at {self.created_at}"
