"""
Services for privileged account entitlements.
"""
from .entitlement_service import EntitlementService, QuotaCheck

__all__ = [
    'EntitlementService',
    'QuotaCheck',
]
