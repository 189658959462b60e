"""Validation interfaces and results.

Defines the contracts for registration validation rules and their results.
Results are immutable maps of stable error keys to messages so several
failures can be reported together."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..catalog import CatalogSnapshot
from ..models import ProfileData, UserAccount
from ..selection import RegistrationSelection

# Error keys
FIRST_NAME = "firstName"
LAST_NAME = "lastName"
PHONE = "phone"
EMERGENCY_CONTACT = "emergencyContact"
CAMPING_OPTIONS = "campingOptions"
JOBS = "jobs"
CAMPING_JOBS = "campingJobs"
ACCEPTED_TERMS = "acceptedTerms"

# Session-level keys for upstream failures
PROFILE = "profile"
SUBMIT = "submit"
PAYMENT = "payment"


def field_key(field_id: str) -> str:
    return f"field_{field_id}"


def category_key(category_id: str) -> str:
    return f"category_{category_id}"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating one step"""

    errors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.errors, MappingProxyType):
            object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def valid(self) -> bool:
        return not self.errors

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls()

    @classmethod
    def error(cls, key: str, message: str) -> ValidationResult:
        return cls({key: message})

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results. Keys are unique per condition, so nothing is overwritten."""
        if not other.errors:
            return self
        combined = dict(self.errors)
        combined.update(other.errors)
        return ValidationResult(combined)

    def to_dict(self) -> dict[str, object]:
        return {"valid": self.valid, "errors": dict(self.errors)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return dict(self.errors) == dict(other.errors)

    def __hash__(self) -> int:
        return hash(frozenset(self.errors.items()))


@dataclass(frozen=True)
class StepContext:
    """Everything a step validator may look at."""

    selection: RegistrationSelection
    catalog: CatalogSnapshot
    profile: ProfileData | None = None
    user: UserAccount | None = None


class ValidationRule(ABC):
    """Abstract base class for registration validation rules"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the validation rule"""
        pass

    @property
    def priority(self) -> int:
        """Priority of the rule (higher runs first)"""
        return 0

    @abstractmethod
    def validate(self, context: StepContext) -> ValidationResult:
        """Validate the selection.

        Args:
            context: Selection, catalog and user being validated

        Returns:
            ValidationResult with any keyed errors
        """
        pass
