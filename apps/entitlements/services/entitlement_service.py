"""
Entitlement service for privileged accounts.

Owns the subscription lifecycle of dealer and service-provider accounts and
answers the quota and feature questions asked by content collaborators
before they create anything.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from apps.core.exceptions import (
    InvalidTierError, NotFoundError, QuotaExceededError, FeatureNotEnabledError,
)
from apps.entitlements.models import PrivilegedAccount, AccountSubscription, SubscriptionEvent
from apps.entitlements.tiers import DEFAULT_TIER, FEATURE_FLAGS, TIER_TABLE, is_valid_tier

logger = logging.getLogger(__name__)

# Listing statuses that consume quota
COUNTED_LISTING_STATUSES = ('active', 'pending')

INACTIVE_REASON = 'Seller account or subscription is not active'
LIMIT_REASON = 'Maximum listings limit ({limit}) reached for current subscription tier'

DEFAULT_LISTING_COUNTER = 'apps.listings.services.count_account_listings'


@dataclass
class QuotaCheck:
    """
    Outcome of a listing quota check.

    ``error`` carries the advisory ``QuotaExceededError`` on refusal; callers
    decide whether to raise it.
    """
    allowed: bool
    reason: Optional[str] = None
    remaining_slots: Optional[int] = None
    error: Optional[QuotaExceededError] = None

    def as_dict(self):
        data = {'allowed': self.allowed}
        if self.reason is not None:
            data['reason'] = self.reason
        if self.remaining_slots is not None:
            data['remaining_slots'] = self.remaining_slots
        return data


def get_listing_counter():
    """
    Resolve the callable that counts an account's listings.

    Configured with ``ENTITLEMENTS_LISTING_COUNTER``; the callable receives
    the account and an iterable of listing statuses.
    """
    path = getattr(settings, 'ENTITLEMENTS_LISTING_COUNTER', DEFAULT_LISTING_COUNTER)
    return import_string(path)


class EntitlementService:
    """Service for tier changes, listing quotas and feature checks."""

    @staticmethod
    def subscription_period():
        return timedelta(days=getattr(settings, 'SUBSCRIPTION_PERIOD_DAYS', 30))

    @staticmethod
    def get_account(account_id):
        """
        Load an account with its subscription.

        Raises:
            NotFoundError: If no account has this id
        """
        account = (
            PrivilegedAccount.objects
            .select_related('subscription')
            .filter(id=account_id)
            .first()
        )
        if account is None:
            raise NotFoundError(
                "Account not found",
                details={'account_id': str(account_id)}
            )
        return account

    @classmethod
    @transaction.atomic
    def open_account(cls, owner, account_type, business_name, business_type='',
                     provider_type='', contact=None, verified_by=None):
        """
        Create a privileged account on the default tier.

        If the owner already has an account of this type it is returned
        unchanged, so provisioning can be retried safely.

        Returns:
            tuple: (account, created)
        """
        existing = (
            PrivilegedAccount.objects
            .select_related('subscription')
            .filter(owner=owner, account_type=account_type)
            .first()
        )
        if existing is not None:
            logger.info(
                f"Reusing existing {account_type} account for user {owner.id}",
                extra={'account_id': str(existing.id), 'user_id': str(owner.id)}
            )
            return existing, False

        now = timezone.now()
        account = PrivilegedAccount.objects.create(
            owner=owner,
            account_type=account_type,
            business_name=business_name,
            business_type=business_type or '',
            provider_type=provider_type or '',
            contact=contact or {},
            status=PrivilegedAccount.STATUS_ACTIVE,
            verification_status='verified',
            verified_at=now,
            verified_by=verified_by,
        )
        subscription = AccountSubscription.objects.create(
            account=account,
            tier=DEFAULT_TIER,
            status=AccountSubscription.STATUS_ACTIVE,
            expires_at=now + cls.subscription_period(),
        )
        SubscriptionEvent.objects.create(
            subscription=subscription,
            event_type='created',
            metadata={'tier': DEFAULT_TIER, 'account_type': account_type}
        )

        logger.info(
            f"Opened {account_type} account {account.id} on {DEFAULT_TIER} tier",
            extra={
                'account_id': str(account.id),
                'user_id': str(owner.id),
                'tier': DEFAULT_TIER,
            }
        )
        return account, True

    @classmethod
    @transaction.atomic
    def upgrade_tier(cls, account_id, new_tier):
        """
        Move an account to ``new_tier``.

        Features are replaced wholesale, so a downgrade clears flags the new
        tier does not grant. The subscription becomes active for a fresh
        period.

        Raises:
            InvalidTierError: If new_tier is not in the tier table
            NotFoundError: If the account does not exist
        """
        if not is_valid_tier(new_tier):
            raise InvalidTierError(
                f"Invalid subscription tier: {new_tier}",
                details={'tier': new_tier, 'valid_tiers': list(TIER_TABLE.keys())}
            )

        account = cls.get_account(account_id)
        subscription = (
            AccountSubscription.objects
            .select_for_update()
            .filter(account=account)
            .first()
        )
        now = timezone.now()
        if subscription is None:
            subscription = AccountSubscription(account=account)
            previous_tier = None
        else:
            previous_tier = subscription.tier

        subscription.tier = new_tier
        subscription.status = AccountSubscription.STATUS_ACTIVE
        subscription.expires_at = now + cls.subscription_period()
        subscription.save()

        SubscriptionEvent.objects.create(
            subscription=subscription,
            event_type='tier_changed',
            metadata={
                'previous_tier': previous_tier,
                'new_tier': new_tier,
            }
        )

        logger.info(
            f"Account {account.id} tier changed from {previous_tier} to {new_tier}",
            extra={
                'account_id': str(account.id),
                'previous_tier': previous_tier,
                'new_tier': new_tier,
            }
        )

        account.subscription = subscription
        return account

    @classmethod
    def can_add_listing(cls, account_id):
        """
        Check whether the account may create another listing.

        Fails closed when the account or its subscription is not active.
        This is a read-then-decide check: concurrent creators can each be
        allowed and overshoot ``max_listings`` until the next check.

        Returns:
            QuotaCheck
        """
        account = cls.get_account(account_id)
        subscription = getattr(account, 'subscription', None)

        if not account.is_active() or subscription is None or not subscription.is_active():
            return QuotaCheck(allowed=False, reason=INACTIVE_REASON)

        count = get_listing_counter()(account, COUNTED_LISTING_STATUSES)
        limit = subscription.max_listings

        if count >= limit:
            reason = LIMIT_REASON.format(limit=limit)
            logger.info(
                f"Listing quota reached for account {account.id}",
                extra={
                    'account_id': str(account.id),
                    'listing_count': count,
                    'max_listings': limit,
                    'tier': subscription.tier,
                }
            )
            return QuotaCheck(
                allowed=False,
                reason=reason,
                error=QuotaExceededError(
                    reason,
                    details={
                        'account_id': str(account.id),
                        'current_count': count,
                        'limit': limit,
                        'tier': subscription.tier,
                    }
                )
            )

        return QuotaCheck(allowed=True, remaining_slots=limit - count)

    @staticmethod
    def is_subscription_expired(account, now=None):
        """Whether the subscription period has ended. Never changes status."""
        subscription = getattr(account, 'subscription', None)
        if subscription is None or subscription.expires_at is None:
            return False
        return subscription.expires_at < (now or timezone.now())

    @staticmethod
    def has_feature(account, feature):
        subscription = getattr(account, 'subscription', None)
        if subscription is None:
            return False
        return bool(getattr(subscription, FEATURE_FLAGS[feature]))

    @classmethod
    def can_have_reviews(cls, account):
        return cls.has_feature(account, 'review')

    @classmethod
    def can_have_podcasts(cls, account):
        return cls.has_feature(account, 'podcast')

    @classmethod
    def can_have_videos(cls, account):
        return cls.has_feature(account, 'video')

    @classmethod
    def require_feature(cls, account, feature):
        """
        Refuse content creation the tier does not allow.

        Raises:
            FeatureNotEnabledError: If the subscription lacks the feature
        """
        if feature not in FEATURE_FLAGS:
            raise FeatureNotEnabledError(
                f"Unknown content feature: {feature}",
                details={'feature': feature}
            )
        if not cls.has_feature(account, feature):
            subscription = getattr(account, 'subscription', None)
            raise FeatureNotEnabledError(
                f"The current subscription tier does not include {feature} content",
                details={
                    'account_id': str(account.id),
                    'feature': feature,
                    'tier': getattr(subscription, 'tier', None),
                }
            )
