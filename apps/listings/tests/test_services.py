"""
Tests for quota-guarded listing and content creation.
"""
import pytest

from apps.core.exceptions import QuotaExceededError, FeatureNotEnabledError
from apps.entitlements.models import PrivilegedAccount
from apps.entitlements.services import EntitlementService
from apps.listings.models import Listing, AccountContent
from apps.listings.services import ListingService, ContentService, count_account_listings


@pytest.mark.django_db
class TestListingService:
    """Test listing creation against the quota."""

    def test_creates_within_quota(self, dealer_account):
        listing = ListingService.create_listing(dealer_account, 'Toyota Probox 2015')

        assert listing.status == 'pending'
        assert count_account_listings(dealer_account, ('active', 'pending')) == 1

    def test_eleventh_listing_refused_on_basic(self, dealer_account):
        for i in range(10):
            ListingService.create_listing(dealer_account, f'Car {i}', status='active')

        with pytest.raises(QuotaExceededError) as exc_info:
            ListingService.create_listing(dealer_account, 'One too many')

        assert exc_info.value.message == (
            'Maximum listings limit (10) reached for current subscription tier'
        )
        assert Listing.objects.for_account(dealer_account).count() == 10

    def test_sold_listing_frees_a_slot(self, dealer_account):
        listings = [
            ListingService.create_listing(dealer_account, f'Car {i}', status='active')
            for i in range(10)
        ]
        listings[0].status = 'sold'
        listings[0].save(update_fields=['status'])

        listing = ListingService.create_listing(dealer_account, 'Replacement')

        assert listing.pk is not None

    def test_suspended_account_refused(self, dealer_account):
        dealer_account.status = PrivilegedAccount.STATUS_SUSPENDED
        dealer_account.save(update_fields=['status'])

        with pytest.raises(QuotaExceededError) as exc_info:
            ListingService.create_listing(dealer_account, 'Blocked')

        assert exc_info.value.message == 'Seller account or subscription is not active'
        assert not Listing.objects.exists()


@pytest.mark.django_db
class TestContentService:
    """Test tier-gated content."""

    def test_video_refused_on_basic(self, dealer_account):
        with pytest.raises(FeatureNotEnabledError):
            ContentService.attach_content(dealer_account, 'video', 'Walkaround')

        assert not AccountContent.objects.exists()

    def test_review_allowed_on_standard(self, dealer_account):
        account = EntitlementService.upgrade_tier(dealer_account.id, 'standard')

        content = ContentService.attach_content(account, 'review', 'Great service', body='5 stars')

        assert content.kind == 'review'
        assert content.account == account

    def test_video_allowed_on_premium(self, dealer_account):
        account = EntitlementService.upgrade_tier(dealer_account.id, 'premium')

        ContentService.attach_content(account, 'video', 'Walkaround')

        assert AccountContent.objects.filter(account=account, kind='video').count() == 1

    def test_downgrade_blocks_new_content(self, dealer_account):
        EntitlementService.upgrade_tier(dealer_account.id, 'premium')
        account = EntitlementService.upgrade_tier(dealer_account.id, 'basic')

        with pytest.raises(FeatureNotEnabledError):
            ContentService.attach_content(account, 'podcast', 'Episode 1')
