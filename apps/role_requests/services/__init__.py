"""
Services for the role elevation workflow.
"""
from .intake_service import IntakeService
from .provisioning_service import ProvisioningService, ProvisioningResult
from .review_service import ReviewService

__all__ = [
    'IntakeService',
    'ProvisioningService',
    'ProvisioningResult',
    'ReviewService',
]
