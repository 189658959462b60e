"""Registration submission payload.

Only the answers to fields owned by currently selected camping options are
sent. Answers left over from options the user deselected are dropped.
"""

from __future__ import annotations

from typing import Any

from .catalog import CatalogSnapshot
from .field_values import is_empty
from .selection import RegistrationSelection


def submitted_field_values(catalog: CatalogSnapshot, selection: RegistrationSelection) -> dict[str, Any]:
    """Wire values of non-empty answers to fields of the selected options."""
    values: dict[str, Any] = {}
    for custom_field in catalog.fields_for(selection.camping_option_ids):
        value = selection.custom_field_values.get(custom_field.id)
        if value is not None and not is_empty(value):
            values[custom_field.id] = value.to_wire()
    return values


def build_submission(catalog: CatalogSnapshot, selection: RegistrationSelection) -> dict[str, Any]:
    return {
        "campingOptions": sorted(selection.camping_option_ids),
        "jobs": sorted(selection.job_ids),
        "customFields": submitted_field_values(catalog, selection),
        "acceptedTerms": selection.accepted_terms,
    }
