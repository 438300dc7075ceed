"""
Tests for privileged account API endpoints.
"""
import uuid

import pytest
from django.urls import reverse

from apps.listings.models import Listing


@pytest.mark.django_db
class TestAccountDetailView:
    """Test GET /v1/accounts/{id}."""

    def test_owner_sees_account(self, user_client, dealer_account):
        response = user_client.get(reverse('account-detail', args=[dealer_account.id]))

        assert response.status_code == 200
        assert response.data['business_name'] == 'Acme Motors'
        assert response.data['subscription']['tier'] == 'basic'
        assert response.data['subscription']['max_listings'] == 10
        assert response.data['subscription']['expired'] is False

    def test_admin_sees_account(self, admin_client, dealer_account):
        response = admin_client.get(reverse('account-detail', args=[dealer_account.id]))

        assert response.status_code == 200

    def test_other_user_forbidden(self, api_client, other_user, dealer_account):
        api_client.force_authenticate(user=other_user)

        response = api_client.get(reverse('account-detail', args=[dealer_account.id]))

        assert response.status_code == 403

    def test_unknown_account(self, admin_client):
        response = admin_client.get(reverse('account-detail', args=[uuid.uuid4()]))

        assert response.status_code == 404
        assert response.data['code'] == 'NOT_FOUND'

    def test_requires_authentication(self, api_client, dealer_account):
        response = api_client.get(reverse('account-detail', args=[dealer_account.id]))

        assert response.status_code == 401


@pytest.mark.django_db
class TestAccountTierView:
    """Test POST /v1/accounts/{id}/tier."""

    def test_upgrade(self, admin_client, dealer_account):
        response = admin_client.post(
            reverse('account-tier', args=[dealer_account.id]),
            {'tier': 'premium'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['subscription']['tier'] == 'premium'
        assert response.data['subscription']['max_listings'] == 40
        assert response.data['subscription']['allow_videos'] is True

    def test_invalid_tier(self, admin_client, dealer_account):
        response = admin_client.post(
            reverse('account-tier', args=[dealer_account.id]),
            {'tier': 'gold'},
            format='json',
        )

        assert response.status_code == 400
        assert response.data['code'] == 'INVALID_TIER'

    def test_missing_tier(self, admin_client, dealer_account):
        response = admin_client.post(reverse('account-tier', args=[dealer_account.id]), {}, format='json')

        assert response.status_code == 400

    def test_unknown_account(self, admin_client):
        response = admin_client.post(
            reverse('account-tier', args=['00000000-0000-0000-0000-000000000000']),
            {'tier': 'premium'},
            format='json',
        )

        assert response.status_code == 404

    def test_owner_cannot_upgrade_own_account(self, user_client, dealer_account):
        """Owners must go through billing; they cannot grant themselves a tier."""
        response = user_client.post(
            reverse('account-tier', args=[dealer_account.id]),
            {'tier': 'premium'},
            format='json',
        )

        assert response.status_code == 403
        dealer_account.subscription.refresh_from_db()
        assert dealer_account.subscription.tier == 'basic'
        assert dealer_account.subscription.max_listings == 10

    def test_other_user_cannot_change_tier(self, api_client, other_user, dealer_account):
        api_client.force_authenticate(user=other_user)

        response = api_client.post(
            reverse('account-tier', args=[dealer_account.id]),
            {'tier': 'premium'},
            format='json',
        )

        assert response.status_code == 403
        dealer_account.subscription.refresh_from_db()
        assert dealer_account.subscription.tier == 'basic'


@pytest.mark.django_db
class TestListingQuotaView:
    """Test GET /v1/accounts/{id}/listing-quota."""

    def test_quota_available(self, user_client, dealer_account):
        response = user_client.get(reverse('account-listing-quota', args=[dealer_account.id]))

        assert response.status_code == 200
        assert response.data == {'allowed': True, 'remaining_slots': 10}

    def test_quota_exhausted(self, user_client, dealer_account):
        Listing.objects.bulk_create([
            Listing(account=dealer_account, title=f'Car {i}', status='active') for i in range(10)
        ])

        response = user_client.get(reverse('account-listing-quota', args=[dealer_account.id]))

        assert response.status_code == 200
        assert response.data == {
            'allowed': False,
            'reason': 'Maximum listings limit (10) reached for current subscription tier',
        }
