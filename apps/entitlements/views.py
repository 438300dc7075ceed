"""
Privileged account API views.

Account owners and administrators can inspect an account, change its tier
and ask whether another listing fits in the current quota.
"""
import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema

from apps.core.permissions import IsAccountOwnerOrAdmin, IsPlatformAdmin
from apps.entitlements.serializers import (
    PrivilegedAccountSerializer,
    TierUpgradeSerializer,
    QuotaCheckSerializer,
)
from apps.entitlements.services import EntitlementService

logger = logging.getLogger(__name__)


class AccountObjectMixin:
    """Load the account and run object-level permission checks."""

    def get_account(self, request, account_id):
        account = EntitlementService.get_account(account_id)
        self.check_object_permissions(request, account)
        return account


class AccountDetailView(AccountObjectMixin, APIView):
    """
    Get a privileged account with its subscription.

    GET /v1/accounts/{id}
    """
    permission_classes = [IsAccountOwnerOrAdmin]

    @extend_schema(
        summary="Get privileged account",
        responses={
            200: PrivilegedAccountSerializer,
            403: {'description': 'Forbidden - Not the owner or an administrator'},
            404: {'description': 'Account not found'}
        },
        tags=['Accounts']
    )
    def get(self, request, account_id):
        account = self.get_account(request, account_id)
        return Response(PrivilegedAccountSerializer(account).data)


class AccountTierView(AccountObjectMixin, APIView):
    """
    Change the subscription tier of an account.

    POST /v1/accounts/{id}/tier

    Payment is collected elsewhere; this endpoint applies the new tier, so
    only platform administrators may call it.
    """
    permission_classes = [IsPlatformAdmin]

    @extend_schema(
        summary="Change subscription tier",
        description="""
Move the account to another tier. All features are replaced with the
tier's feature set, the subscription becomes active and a new 30 day
period starts.
        """,
        request=TierUpgradeSerializer,
        responses={
            200: PrivilegedAccountSerializer,
            400: {'description': 'Invalid tier'},
            403: {'description': 'Administrator role required'},
            404: {'description': 'Account not found'}
        },
        tags=['Accounts']
    )
    def post(self, request, account_id):
        serializer = TierUpgradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        self.get_account(request, account_id)
        account = EntitlementService.upgrade_tier(account_id, serializer.validated_data['tier'])

        logger.info(
            f"Tier changed via API for account {account.id}",
            extra={
                'account_id': str(account.id),
                'user_id': str(request.user.id),
                'request_id': getattr(request, 'request_id', None),
            }
        )
        return Response(PrivilegedAccountSerializer(account).data, status=status.HTTP_200_OK)


class ListingQuotaView(AccountObjectMixin, APIView):
    """
    Check whether the account can add another listing.

    GET /v1/accounts/{id}/listing-quota
    """
    permission_classes = [IsAccountOwnerOrAdmin]

    @extend_schema(
        summary="Check listing quota",
        responses={
            200: QuotaCheckSerializer,
            404: {'description': 'Account not found'}
        },
        tags=['Accounts']
    )
    def get(self, request, account_id):
        self.get_account(request, account_id)
        result = EntitlementService.can_add_listing(account_id)
        return Response(result.as_dict())
