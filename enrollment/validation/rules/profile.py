"""Profile step rule.

Checks the profile fields every registrant must fill in."""

from __future__ import annotations

from ...models import ProfileData
from ..interfaces import (
    EMERGENCY_CONTACT,
    FIRST_NAME,
    LAST_NAME,
    PHONE,
    StepContext,
    ValidationResult,
    ValidationRule,
)

# error key -> (attribute, label)
REQUIRED_PROFILE_FIELDS: dict[str, tuple[str, str]] = {
    FIRST_NAME: ("first_name", "First name"),
    LAST_NAME: ("last_name", "Last name"),
    PHONE: ("phone", "Phone"),
    EMERGENCY_CONTACT: ("emergency_contact", "Emergency contact"),
}


class RequiredProfileFieldsRule(ValidationRule):
    """One error per missing required profile field"""

    @property
    def name(self) -> str:
        return "required_profile_fields"

    def validate(self, context: StepContext) -> ValidationResult:
        profile = context.profile or ProfileData()
        errors: dict[str, str] = {}
        for key, (attribute, label) in REQUIRED_PROFILE_FIELDS.items():
            if not getattr(profile, attribute).strip():
                errors[key] = f"{label} is required"
        return ValidationResult(errors)
