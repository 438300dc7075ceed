"""
Tests for EntitlementService.
"""
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.exceptions import (
    InvalidTierError, NotFoundError, QuotaExceededError, FeatureNotEnabledError,
)
from apps.entitlements.models import PrivilegedAccount, AccountSubscription, SubscriptionEvent
from apps.entitlements.services import EntitlementService
from apps.listings.models import Listing


def always_full(account, statuses):
    """Listing counter used to check the counter is configurable."""
    return 999


def add_listings(account, count, status='active'):
    Listing.objects.bulk_create([
        Listing(account=account, title=f'Car {i}', status=status) for i in range(count)
    ])


@pytest.mark.django_db
class TestOpenAccount:
    """Test account creation on the default tier."""

    def test_creates_basic_subscription(self, user, admin_user):
        account, created = EntitlementService.open_account(
            owner=user,
            account_type='dealer',
            business_name='Acme Motors',
            business_type='independent',
            contact={'phone': '+254712345678'},
            verified_by=admin_user,
        )

        assert created is True
        assert account.status == 'active'
        assert account.verification_status == 'verified'
        assert account.verified_by == admin_user
        assert account.contact == {'phone': '+254712345678'}

        subscription = account.subscription
        assert subscription.tier == 'basic'
        assert subscription.status == 'active'
        assert subscription.max_listings == 10
        assert subscription.allow_photography is True
        assert subscription.allow_reviews is False
        assert subscription.expires_at > timezone.now() + timedelta(days=29)

    def test_writes_created_event(self, dealer_account):
        events = SubscriptionEvent.objects.for_subscription(dealer_account.subscription)

        assert [e.event_type for e in events] == ['created']
        assert events[0].metadata['tier'] == 'basic'

    def test_idempotent_per_owner_and_type(self, user, dealer_account):
        account, created = EntitlementService.open_account(
            owner=user, account_type='dealer', business_name='Renamed Motors'
        )

        assert created is False
        assert account.id == dealer_account.id
        assert account.business_name == 'Acme Motors'
        assert PrivilegedAccount.objects.for_owner(user).count() == 1

    def test_dealer_and_provider_accounts_coexist(self, user, dealer_account):
        account, created = EntitlementService.open_account(
            owner=user, account_type='provider', business_name='Acme Towing',
            business_type='service', provider_type='towing',
        )

        assert created is True
        assert PrivilegedAccount.objects.for_owner(user).count() == 2
        assert PrivilegedAccount.objects.providers().get() == account


@pytest.mark.django_db
class TestUpgradeTier:
    """Test tier changes."""

    def test_upgrade_to_premium(self, dealer_account):
        account = EntitlementService.upgrade_tier(dealer_account.id, 'premium')

        subscription = AccountSubscription.objects.get(account=account)
        assert subscription.tier == 'premium'
        assert subscription.max_listings == 40
        assert subscription.allow_videos is True
        assert subscription.allow_reviews is True

    def test_downgrade_clears_features(self, dealer_account):
        EntitlementService.upgrade_tier(dealer_account.id, 'premium')
        EntitlementService.upgrade_tier(dealer_account.id, 'basic')

        subscription = AccountSubscription.objects.get(account=dealer_account)
        assert subscription.max_listings == 10
        assert subscription.allow_reviews is False
        assert subscription.allow_podcasts is False
        assert subscription.allow_videos is False

    def test_reactivates_and_renews(self, dealer_account):
        subscription = dealer_account.subscription
        subscription.status = AccountSubscription.STATUS_EXPIRED
        subscription.expires_at = timezone.now() - timedelta(days=3)
        subscription.save()

        EntitlementService.upgrade_tier(dealer_account.id, 'standard')

        subscription.refresh_from_db()
        assert subscription.status == 'active'
        assert subscription.expires_at > timezone.now() + timedelta(days=29)

    def test_records_tier_changed_event(self, dealer_account):
        EntitlementService.upgrade_tier(dealer_account.id, 'standard')

        event = SubscriptionEvent.objects.by_type('tier_changed').get()
        assert event.metadata == {'previous_tier': 'basic', 'new_tier': 'standard'}

    def test_invalid_tier(self, dealer_account):
        with pytest.raises(InvalidTierError):
            EntitlementService.upgrade_tier(dealer_account.id, 'gold')

        dealer_account.subscription.refresh_from_db()
        assert dealer_account.subscription.tier == 'basic'

    def test_unknown_account(self, db):
        with pytest.raises(NotFoundError):
            EntitlementService.upgrade_tier(uuid.uuid4(), 'premium')


@pytest.mark.django_db
class TestSubscriptionFeaturesFollowTier:
    """Feature columns cannot drift from the tier."""

    def test_save_recomputes_features(self, dealer_account):
        subscription = dealer_account.subscription
        subscription.max_listings = 500
        subscription.allow_videos = True
        subscription.save()

        subscription.refresh_from_db()
        assert subscription.max_listings == 10
        assert subscription.allow_videos is False

    def test_save_with_update_fields_recomputes_features(self, dealer_account):
        subscription = dealer_account.subscription
        subscription.tier = 'premium'
        subscription.save(update_fields=['tier'])

        subscription.refresh_from_db()
        assert subscription.max_listings == 40
        assert subscription.allow_videos is True


@pytest.mark.django_db
class TestCanAddListing:
    """Test listing quota checks."""

    def test_empty_account_has_full_quota(self, dealer_account):
        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is True
        assert check.remaining_slots == 10
        assert check.as_dict() == {'allowed': True, 'remaining_slots': 10}

    def test_refuses_at_limit(self, dealer_account):
        add_listings(dealer_account, 10)

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is False
        assert check.reason == 'Maximum listings limit (10) reached for current subscription tier'
        assert isinstance(check.error, QuotaExceededError)
        assert check.error.details['current_count'] == 10
        assert check.error.details['limit'] == 10

    def test_one_slot_left(self, dealer_account):
        add_listings(dealer_account, 9)

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is True
        assert check.remaining_slots == 1

    def test_pending_listings_count(self, dealer_account):
        add_listings(dealer_account, 5, status='pending')
        add_listings(dealer_account, 5, status='active')

        assert EntitlementService.can_add_listing(dealer_account.id).allowed is False

    def test_sold_and_archived_listings_do_not_count(self, dealer_account):
        add_listings(dealer_account, 6, status='sold')
        add_listings(dealer_account, 6, status='archived')

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is True
        assert check.remaining_slots == 10

    def test_premium_raises_limit(self, dealer_account):
        add_listings(dealer_account, 10)
        EntitlementService.upgrade_tier(dealer_account.id, 'premium')

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is True
        assert check.remaining_slots == 30

    def test_suspended_account_fails_closed(self, dealer_account):
        dealer_account.status = PrivilegedAccount.STATUS_SUSPENDED
        dealer_account.save(update_fields=['status'])

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is False
        assert check.reason == 'Seller account or subscription is not active'
        assert check.remaining_slots is None

    def test_inactive_subscription_fails_closed(self, dealer_account):
        subscription = dealer_account.subscription
        subscription.status = AccountSubscription.STATUS_CANCELLED
        subscription.save()

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is False
        assert check.reason == 'Seller account or subscription is not active'

    def test_check_does_not_reserve_a_slot(self, dealer_account):
        """Two checks with one slot left both pass until a listing is created."""
        add_listings(dealer_account, 9)

        first = EntitlementService.can_add_listing(dealer_account.id)
        second = EntitlementService.can_add_listing(dealer_account.id)

        assert first.allowed and second.allowed

    def test_counter_is_configurable(self, dealer_account, settings):
        settings.ENTITLEMENTS_LISTING_COUNTER = (
            'apps.entitlements.tests.test_entitlement_service.always_full'
        )

        check = EntitlementService.can_add_listing(dealer_account.id)

        assert check.allowed is False
        assert check.error.details['current_count'] == 999

    def test_unknown_account(self, db):
        with pytest.raises(NotFoundError):
            EntitlementService.can_add_listing(uuid.uuid4())


@pytest.mark.django_db
class TestSubscriptionExpiry:
    """Expiry is computed, never written."""

    def test_not_expired_within_period(self, dealer_account):
        assert EntitlementService.is_subscription_expired(dealer_account) is False

    def test_expired_after_period(self, dealer_account):
        later = dealer_account.subscription.expires_at + timedelta(seconds=1)

        assert EntitlementService.is_subscription_expired(dealer_account, now=later) is True

        dealer_account.subscription.refresh_from_db()
        assert dealer_account.subscription.status == 'active'

    def test_no_expiry_date(self, dealer_account):
        dealer_account.subscription.expires_at = None

        assert EntitlementService.is_subscription_expired(dealer_account) is False


@pytest.mark.django_db
class TestFeatureChecks:
    """Test content feature checks."""

    def test_basic_has_no_media_features(self, dealer_account):
        assert not EntitlementService.can_have_reviews(dealer_account)
        assert not EntitlementService.can_have_podcasts(dealer_account)
        assert not EntitlementService.can_have_videos(dealer_account)
        assert EntitlementService.has_feature(dealer_account, 'photography')

    def test_standard_has_reviews_and_podcasts(self, dealer_account):
        account = EntitlementService.upgrade_tier(dealer_account.id, 'standard')

        assert EntitlementService.can_have_reviews(account)
        assert EntitlementService.can_have_podcasts(account)
        assert not EntitlementService.can_have_videos(account)

    def test_require_feature_raises(self, dealer_account):
        with pytest.raises(FeatureNotEnabledError) as exc_info:
            EntitlementService.require_feature(dealer_account, 'video')

        assert exc_info.value.details['tier'] == 'basic'

    def test_require_unknown_feature(self, dealer_account):
        with pytest.raises(FeatureNotEnabledError):
            EntitlementService.require_feature(dealer_account, 'hologram')
