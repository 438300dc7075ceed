"""
Property-based tests for listing quota decisions.

Property: for any tier and any number of counted listings, a listing is
allowed exactly when the count is below the tier's limit, and the remaining
slots add up to that limit.
"""
from types import SimpleNamespace
from unittest.mock import patch

from hypothesis import given, strategies as st

from apps.entitlements.services import EntitlementService
from apps.entitlements.services.entitlement_service import LIMIT_REASON
from apps.entitlements.tiers import TIER_TABLE, features_for


def make_account(tier, account_status='active', subscription_status='active'):
    features = features_for(tier)
    subscription = SimpleNamespace(
        tier=tier,
        max_listings=features.max_listings,
        is_active=lambda: subscription_status == 'active',
    )
    return SimpleNamespace(
        id='acct-1',
        subscription=subscription,
        is_active=lambda: account_status == 'active',
    )


def check(account, count):
    with patch.object(EntitlementService, 'get_account', return_value=account), \
            patch(
                'apps.entitlements.services.entitlement_service.get_listing_counter',
                return_value=lambda acct, statuses: count,
            ):
        return EntitlementService.can_add_listing(account.id)


@given(
    tier=st.sampled_from(sorted(TIER_TABLE)),
    count=st.integers(min_value=0, max_value=100),
)
def test_allowed_iff_below_limit(tier, count):
    limit = features_for(tier).max_listings

    result = check(make_account(tier), count)

    assert result.allowed == (count < limit)
    if result.allowed:
        assert result.remaining_slots == limit - count
        assert result.error is None
    else:
        assert result.reason == LIMIT_REASON.format(limit=limit)
        assert result.error.details['limit'] == limit


@given(
    tier=st.sampled_from(sorted(TIER_TABLE)),
    count=st.integers(min_value=0, max_value=100),
    statuses=st.sampled_from([
        ('suspended', 'active'),
        ('inactive', 'active'),
        ('active', 'expired'),
        ('active', 'cancelled'),
        ('active', 'pending'),
    ]),
)
def test_inactive_always_refused(tier, count, statuses):
    account_status, subscription_status = statuses

    result = check(make_account(tier, account_status, subscription_status), count)

    assert result.allowed is False
    assert result.reason == 'Seller account or subscription is not active'
    assert result.remaining_slots is None
