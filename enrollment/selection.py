"""The registration selection under validation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .field_values import FieldValue


@dataclass
class RegistrationSelection:
    """What the user has picked so far.

    Created empty at session start and mutated only through the session's
    step handlers.
    """

    camping_option_ids: set[str] = field(default_factory=set)
    custom_field_values: dict[str, FieldValue] = field(default_factory=dict)
    job_ids: set[str] = field(default_factory=set)
    accepted_terms: bool = False

    def copy(self) -> RegistrationSelection:
        return RegistrationSelection(
            camping_option_ids=set(self.camping_option_ids),
            custom_field_values=dict(self.custom_field_values),
            job_ids=set(self.job_ids),
            accepted_terms=self.accepted_terms,
        )
