"""Typed custom field values.

Raw UI input is parsed once, at the session boundary, into one of the tagged
value types below so validators never inspect untyped data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Union

from .errors import FieldValueError
from .models import CustomField, FieldType


@dataclass(frozen=True)
class TextValue:
    value: str

    def is_empty(self) -> bool:
        return self.value == ""

    def to_wire(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: Decimal

    def is_empty(self) -> bool:
        # 0 is a real answer for numeric fields
        return False

    def to_wire(self) -> int | float:
        if self.value == self.value.to_integral_value():
            return int(self.value)
        return float(self.value)


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    def is_empty(self) -> bool:
        return False

    def to_wire(self) -> bool:
        return self.value


@dataclass(frozen=True)
class DateValue:
    value: date

    def is_empty(self) -> bool:
        return False

    def to_wire(self) -> str:
        return self.value.isoformat()


FieldValue = Union[TextValue, NumberValue, BooleanValue, DateValue]

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def is_empty(value: FieldValue | None) -> bool:
    """Empty means no answer: missing, or a blank text value."""
    return value is None or value.is_empty()


def parse_field_value(field: CustomField, raw: object) -> FieldValue | None:
    """Parse raw input for a custom field into its typed value.

    Args:
        field: The field definition the value belongs to
        raw: Raw value from the UI (string, number, bool, date or None)

    Returns:
        The typed value, or None when the input is missing/blank

    Raises:
        FieldValueError: If the input cannot be interpreted as the field's type
    """
    if raw is None:
        return None

    data_type = field.data_type

    if data_type.is_text:
        return TextValue(str(raw))

    if isinstance(raw, str) and raw.strip() == "":
        return None

    if data_type.is_numeric:
        return NumberValue(_parse_number(field, raw))

    if data_type == FieldType.BOOLEAN:
        return BooleanValue(_parse_bool(field, raw))

    if data_type == FieldType.DATE:
        return DateValue(_parse_date(field, raw))

    raise FieldValueError(field.id, f"Unsupported field type {data_type}")


def _parse_number(field: CustomField, raw: object) -> Decimal:
    if isinstance(raw, bool):
        raise FieldValueError(field.id, f"{field.display_name} must be a number")
    try:
        number = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise FieldValueError(field.id, f"{field.display_name} must be a number") from e
    if not number.is_finite():
        raise FieldValueError(field.id, f"{field.display_name} must be a number")
    if field.data_type == FieldType.INTEGER and number != number.to_integral_value():
        raise FieldValueError(field.id, f"{field.display_name} must be a whole number")
    return number


def _parse_bool(field: CustomField, raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise FieldValueError(field.id, f"{field.display_name} must be yes or no")


def _parse_date(field: CustomField, raw: object) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        # Accept both plain dates and ISO timestamps
        return date.fromisoformat(text.split("T")[0])
    except ValueError as e:
        raise FieldValueError(field.id, f"{field.display_name} must be a date (YYYY-MM-DD)") from e
