"""Registration workflow steps, in order."""

from __future__ import annotations

from enum import Enum


class RegistrationStep(str, Enum):
    PROFILE = "profile"
    CAMPING_OPTIONS = "camping_options"
    CUSTOM_FIELDS = "custom_fields"
    JOBS = "jobs"
    TERMS = "terms"
    PAYMENT = "payment"
    COMPLETE = "complete"

    @property
    def index(self) -> int:
        return _ORDER.index(self)

    @property
    def next(self) -> RegistrationStep | None:
        i = self.index
        return _ORDER[i + 1] if i + 1 < len(_ORDER) else None

    @property
    def previous(self) -> RegistrationStep | None:
        i = self.index
        return _ORDER[i - 1] if i > 0 else None

    @property
    def is_terminal(self) -> bool:
        return self is RegistrationStep.COMPLETE


_ORDER: list[RegistrationStep] = list(RegistrationStep)
