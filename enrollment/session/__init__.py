"""Registration session workflow."""

from __future__ import annotations

from .fetch_tokens import FetchGenerations
from .state_machine import CUSTOM_FIELDS_FETCH, RegistrationSession

__all__ = ["CUSTOM_FIELDS_FETCH", "FetchGenerations", "RegistrationSession"]
