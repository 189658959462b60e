"""
Camp registration engine.

Computes work-shift requirements from selected camping options, filters jobs
and options by capacity, validates each registration step, totals dues and
drives a user's registration session against the upstream registration API.
"""

from __future__ import annotations

from .catalog import CatalogSnapshot
from .client import RegistrationGateway
from .costs import calculate_total
from .errors import (
    EnrollmentError,
    FieldValueError,
    GatewayError,
    InvalidTransitionError,
    RegistrationClosedError,
    SelectionError,
    SessionClosedError,
)
from .requirements import JobRequirements, compute_requirements
from .selection import RegistrationSelection
from .session import RegistrationSession
from .steps import RegistrationStep
from .validation import SelectionValidator, ValidationResult, validate

__all__ = [
    "CatalogSnapshot",
    "EnrollmentError",
    "FieldValueError",
    "GatewayError",
    "InvalidTransitionError",
    "JobRequirements",
    "RegistrationClosedError",
    "RegistrationGateway",
    "RegistrationSelection",
    "RegistrationSession",
    "RegistrationStep",
    "SelectionError",
    "SessionClosedError",
    "SelectionValidator",
    "ValidationResult",
    "calculate_total",
    "compute_requirements",
    "validate",
]
