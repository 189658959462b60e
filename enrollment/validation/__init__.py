"""Validation module for registration steps.

Provides the keyed validation result, the per-step rules and the step-aware
validator."""

from __future__ import annotations

from .interfaces import (
    ACCEPTED_TERMS,
    CAMPING_JOBS,
    CAMPING_OPTIONS,
    EMERGENCY_CONTACT,
    FIRST_NAME,
    JOBS,
    LAST_NAME,
    PAYMENT,
    PHONE,
    PROFILE,
    SUBMIT,
    StepContext,
    ValidationResult,
    ValidationRule,
    category_key,
    field_key,
)
from .validation_pipeline import ValidationPipeline
from .validator import SelectionValidator, build_default_pipelines, validate

__all__ = [
    "ACCEPTED_TERMS",
    "CAMPING_JOBS",
    "CAMPING_OPTIONS",
    "EMERGENCY_CONTACT",
    "FIRST_NAME",
    "JOBS",
    "LAST_NAME",
    "PAYMENT",
    "PHONE",
    "PROFILE",
    "SUBMIT",
    "SelectionValidator",
    "StepContext",
    "ValidationPipeline",
    "ValidationResult",
    "ValidationRule",
    "build_default_pipelines",
    "category_key",
    "field_key",
    "validate",
]
