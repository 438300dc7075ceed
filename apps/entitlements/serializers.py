"""
Serializers for privileged account and entitlement endpoints.
"""
from rest_framework import serializers
from apps.entitlements.models import PrivilegedAccount, AccountSubscription
from apps.entitlements.tiers import TIER_CHOICES


class AccountSubscriptionSerializer(serializers.ModelSerializer):
    """Serializer for AccountSubscription."""

    expired = serializers.SerializerMethodField()

    class Meta:
        model = AccountSubscription
        fields = [
            'tier', 'status', 'expires_at', 'expired',
            'max_listings', 'allow_photography', 'allow_reviews',
            'allow_podcasts', 'allow_videos',
        ]
        read_only_fields = fields

    def get_expired(self, obj) -> bool:
        from apps.entitlements.services import EntitlementService
        return EntitlementService.is_subscription_expired(obj.account)


class PrivilegedAccountSerializer(serializers.ModelSerializer):
    """Serializer for PrivilegedAccount with its subscription."""

    owner_email = serializers.CharField(source='owner.email', read_only=True)
    subscription = AccountSubscriptionSerializer(read_only=True)

    class Meta:
        model = PrivilegedAccount
        fields = [
            'id', 'owner', 'owner_email', 'account_type', 'business_name',
            'business_type', 'provider_type', 'contact', 'status',
            'verification_status', 'verified_at', 'subscription',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class TierUpgradeSerializer(serializers.Serializer):
    """Serializer for a tier change request."""

    tier = serializers.CharField(
        help_text=f"Target tier: one of {', '.join(t for t, _ in TIER_CHOICES)}"
    )


class QuotaCheckSerializer(serializers.Serializer):
    """Serializer for the listing quota response."""

    allowed = serializers.BooleanField()
    reason = serializers.CharField(required=False)
    remaining_slots = serializers.IntegerField(required=False)
