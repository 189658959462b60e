"""Custom field rule.

Validates the answers to the custom fields of every selected camping option:
required fields must be answered, and present answers must respect the field's
length or numeric bounds."""

from __future__ import annotations

from decimal import Decimal

from ...field_values import FieldValue, NumberValue, TextValue, is_empty
from ...models import CustomField
from ..interfaces import StepContext, ValidationResult, ValidationRule, field_key


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def check_field(custom_field: CustomField, value: FieldValue | None) -> str | None:
    """Return an error message for one field, or None when the answer is acceptable.

    Missing and bounds problems are mutually exclusive: bounds are only checked
    for present values.
    """
    if is_empty(value):
        if custom_field.required:
            return f"{custom_field.display_name} is required"
        return None

    data_type = custom_field.data_type

    if data_type.is_text and isinstance(value, TextValue):
        if custom_field.max_length is not None and len(value.value) > custom_field.max_length:
            return f"{custom_field.display_name} must be at most {custom_field.max_length} characters"

    elif data_type.is_numeric and isinstance(value, NumberValue):
        if custom_field.min_value is not None and value.value < Decimal(str(custom_field.min_value)):
            return f"{custom_field.display_name} must be at least {_format_bound(custom_field.min_value)}"
        if custom_field.max_value is not None and value.value > Decimal(str(custom_field.max_value)):
            return f"{custom_field.display_name} must be at most {_format_bound(custom_field.max_value)}"

    return None


class CustomFieldValuesRule(ValidationRule):
    """Required and bounds checks for fields owned by selected camping options"""

    @property
    def name(self) -> str:
        return "custom_field_values"

    def validate(self, context: StepContext) -> ValidationResult:
        selection = context.selection
        errors: dict[str, str] = {}
        for custom_field in context.catalog.fields_for(selection.camping_option_ids):
            message = check_field(custom_field, selection.custom_field_values.get(custom_field.id))
            if message is not None:
                errors[field_key(custom_field.id)] = message
        return ValidationResult(errors)
