"""
Pydantic schemas for the registration API.
"""

from __future__ import annotations

from .registration import (
    AdvanceRequest,
    CheckoutResponse,
    CustomFieldUpdate,
    PaymentConfirmation,
    ProfileUpdate,
    RequirementsResponse,
    SelectionResponse,
    SessionResponse,
    StepResponse,
    TermsUpdate,
)

__all__ = [
    "AdvanceRequest",
    "CheckoutResponse",
    "CustomFieldUpdate",
    "PaymentConfirmation",
    "ProfileUpdate",
    "RequirementsResponse",
    "SelectionResponse",
    "SessionResponse",
    "StepResponse",
    "TermsUpdate",
]
