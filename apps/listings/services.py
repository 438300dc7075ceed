"""
Listing and content creation guarded by the entitlement engine.

The quota or feature check always runs before the record is created.
"""
import logging

from apps.core.exceptions import QuotaExceededError
from apps.entitlements.services import EntitlementService
from apps.listings.models import Listing, AccountContent

logger = logging.getLogger(__name__)


def count_account_listings(account, statuses):
    """Count listings of ``account`` in the given statuses."""
    return Listing.objects.counted(account, statuses).count()


class ListingService:
    """Service for creating listings within the account's quota."""

    @staticmethod
    def create_listing(account, title, status='pending'):
        """
        Create a listing if the account's quota allows it.

        Raises:
            QuotaExceededError: If the account is inactive or at its limit
        """
        check = EntitlementService.can_add_listing(account.id)
        if not check.allowed:
            if check.error is not None:
                raise check.error
            raise QuotaExceededError(check.reason, details={'account_id': str(account.id)})

        listing = Listing.objects.create(account=account, title=title, status=status)
        logger.info(
            f"Created listing {listing.id} for account {account.id}",
            extra={
                'account_id': str(account.id),
                'listing_id': str(listing.id),
                'remaining_slots': check.remaining_slots - 1,
            }
        )
        return listing


class ContentService:
    """Service for attaching tier-gated content to an account."""

    @staticmethod
    def attach_content(account, kind, title, body=''):
        """
        Attach review, podcast or video content.

        Raises:
            FeatureNotEnabledError: If the tier does not include ``kind``
        """
        EntitlementService.require_feature(account, kind)
        content = AccountContent.objects.create(
            account=account,
            kind=kind,
            title=title,
            body=body,
        )
        logger.info(
            f"Attached {kind} content to account {account.id}",
            extra={'account_id': str(account.id), 'content_id': str(content.id)}
        )
        return content
