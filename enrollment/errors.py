"""Exception hierarchy for the registration engine.

Validation failures are not exceptions: they are returned as keyed
ValidationResult maps. These exceptions cover misuse of a session and failures
of the upstream collaborators.
"""

from __future__ import annotations


class EnrollmentError(Exception):
    """Base exception for registration engine errors."""

    pass


class GatewayError(EnrollmentError):
    """Raised when an upstream API call fails (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SelectionError(EnrollmentError):
    """Raised when a user tries to select something that is not selectable."""

    pass


class FieldValueError(EnrollmentError):
    """Raised when raw custom field input cannot be parsed for its data type."""

    def __init__(self, field_id: str, message: str):
        super().__init__(message)
        self.field_id = field_id


class SessionClosedError(EnrollmentError):
    """Raised when a completed registration session is mutated."""

    pass


class InvalidTransitionError(EnrollmentError):
    """Raised when a transition is not allowed from the current step."""

    pass


class RegistrationClosedError(EnrollmentError):
    """Raised when the user may not register right now."""

    pass
