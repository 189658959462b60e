"""
Pydantic schemas for registration session endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from enrollment.costs import format_amount
from enrollment.session import CUSTOM_FIELDS_FETCH, RegistrationSession


class ProfileUpdate(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state_province: str | None = None
    country: str | None = None
    playa_name: str | None = None
    emergency_contact: str | None = None


class CustomFieldUpdate(BaseModel):
    value: Any = None


class TermsUpdate(BaseModel):
    accepted: bool = True


class AdvanceRequest(BaseModel):
    pay_later: bool = False


class PaymentConfirmation(BaseModel):
    reference: str = Field(min_length=1)


class SelectionResponse(BaseModel):
    camping_option_ids: list[str]
    job_ids: list[str]
    custom_fields: dict[str, Any]
    accepted_terms: bool


class RequirementsResponse(BaseModel):
    camping_shifts_required: int
    always_required_count: int
    total_required: int


class CheckoutResponse(BaseModel):
    url: str | None = None
    session_id: str | None = None


class SessionResponse(BaseModel):
    """Snapshot of a registration session for the UI."""

    id: str
    step: str
    errors: dict[str, str]
    selection: SelectionResponse
    requirements: RequirementsResponse
    available_job_ids: list[str]
    full_job_ids: list[str]
    available_camping_option_ids: list[str]
    full_camping_option_ids: list[str]
    custom_field_ids: list[str]
    total: str
    deferral_allowed: bool
    loading_custom_fields: bool
    registration_id: str | None = None
    dues_deferred: bool = False
    checkout: CheckoutResponse | None = None

    @classmethod
    def from_session(cls, session: RegistrationSession) -> SessionResponse:
        selection = session.selection
        requirements = session.requirements
        jobs = session.job_partition
        options = session.camping_option_partition
        return cls(
            id=session.id,
            step=session.step.value,
            errors=session.errors,
            selection=SelectionResponse(
                camping_option_ids=sorted(selection.camping_option_ids),
                job_ids=sorted(selection.job_ids),
                custom_fields={k: v.to_wire() for k, v in selection.custom_field_values.items()},
                accepted_terms=selection.accepted_terms,
            ),
            requirements=RequirementsResponse(
                camping_shifts_required=requirements.camping_shifts_required,
                always_required_count=requirements.always_required_count,
                total_required=requirements.total_required,
            ),
            available_job_ids=[j.id for j in jobs.available],
            full_job_ids=[j.id for j in jobs.full],
            available_camping_option_ids=[o.id for o in options.available],
            full_camping_option_ids=[o.id for o in options.full],
            custom_field_ids=[f.id for f in session.custom_fields],
            total=format_amount(session.total),
            deferral_allowed=session.deferral_allowed,
            loading_custom_fields=session.is_loading(CUSTOM_FIELDS_FETCH),
            registration_id=session.registration_id,
            dues_deferred=session.dues_deferred,
            checkout=(
                CheckoutResponse(url=session.checkout.url, session_id=session.checkout.session_id)
                if session.checkout
                else None
            ),
        )


class StepResponse(BaseModel):
    """Outcome of a forward transition."""

    valid: bool
    errors: dict[str, str]
    session: SessionResponse
