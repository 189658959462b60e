"""Terms step rule."""

from __future__ import annotations

from ..interfaces import ACCEPTED_TERMS, StepContext, ValidationResult, ValidationRule


class TermsAcceptedRule(ValidationRule):
    """The registration terms must be accepted"""

    @property
    def name(self) -> str:
        return "terms_accepted"

    def validate(self, context: StepContext) -> ValidationResult:
        if context.selection.accepted_terms:
            return ValidationResult.ok()
        return ValidationResult.error(ACCEPTED_TERMS, "You must accept the terms to continue")
