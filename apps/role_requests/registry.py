"""
Registry of role request types.

Each request type registers its required payload fields, its review priority,
its auto-approval eligibility rule and the provisioner that runs on approval.
Intake and provisioning dispatch through this registry instead of branching
on the type name.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_years(value) -> Optional[int]:
    """
    Read the leading integer of a declared experience value.

    ``"3 years"`` gives 3, ``5`` gives 5, anything without leading digits
    gives None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def never_eligible(payload) -> bool:
    return False


def experienced_provider(payload) -> bool:
    years = parse_years(payload.get('experience'))
    return years is not None and years >= 2


@dataclass
class RequestTypeSpec:
    name: str
    required_fields: Tuple[str, ...]
    priority: str
    validation_message: str = 'Required fields are missing'
    eligibility: Callable[[Dict[str, Any]], bool] = never_eligible
    provisioner: Optional[Callable] = None

    def missing_fields(self, payload):
        missing = []
        for field in self.required_fields:
            value = payload.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field)
        return missing


class RequestTypeRegistry:
    """Registry for all role request types."""

    _types: Dict[str, RequestTypeSpec] = {}

    @classmethod
    def register(cls, spec: RequestTypeSpec):
        """Register a request type, replacing any previous registration."""
        cls._types[spec.name] = spec
        return spec

    @classmethod
    def get(cls, name) -> Optional[RequestTypeSpec]:
        return cls._types.get(name)

    @classmethod
    def names(cls):
        return list(cls._types.keys())

    @classmethod
    def provisioner(cls, name):
        """
        Decorator that attaches a provisioning handler to a request type.

        Usage:
            @RequestTypeRegistry.provisioner('dealer')
            def provision_dealer(role_request, user):
                ...
        """
        def decorator(func):
            spec = cls._types.get(name)
            if spec is None:
                raise ValueError(f"Unknown request type '{name}'")
            spec.provisioner = func
            logger.debug(f"Registered provisioner for request type: {name}")
            return func
        return decorator


RequestTypeRegistry.register(RequestTypeSpec(
    name='dealer',
    required_fields=('business_name', 'business_type', 'license_number'),
    priority='high',
    validation_message='Business name, type, and license number are required for dealer requests',
))
RequestTypeRegistry.register(RequestTypeSpec(
    name='provider',
    required_fields=('service_type', 'business_name'),
    priority='medium',
    validation_message='Service type and business name are required for provider requests',
    eligibility=experienced_provider,
))
RequestTypeRegistry.register(RequestTypeSpec(
    name='ministry',
    required_fields=('ministry_name', 'department', 'position', 'employee_id'),
    priority='high',
    validation_message='Ministry name, department, position, and employee ID are required',
))
RequestTypeRegistry.register(RequestTypeSpec(
    name='coordinator',
    required_fields=('station_name', 'transport_experience'),
    priority='medium',
    validation_message='Station name and transport experience are required for coordinator requests',
))
