"""Camping option step rule."""

from __future__ import annotations

from ...capacity import is_option_selectable
from ..interfaces import CAMPING_OPTIONS, StepContext, ValidationResult, ValidationRule


class CampingOptionSelectedRule(ValidationRule):
    """At least one enabled, non-full camping option must be selected"""

    @property
    def name(self) -> str:
        return "camping_option_selected"

    def validate(self, context: StepContext) -> ValidationResult:
        selected = context.catalog.selected_options(context.selection.camping_option_ids)
        if any(is_option_selectable(option) for option in selected):
            return ValidationResult.ok()
        return ValidationResult.error(CAMPING_OPTIONS, "Please select at least one camping option")
