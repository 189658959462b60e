"""Payment initiation requests and the checkout sessions they produce."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .config.settings import Settings
from .costs import to_minor_units


@dataclass(frozen=True)
class PaymentRequest:
    """A card checkout for one submitted registration."""

    amount_cents: int
    currency: str
    user_id: str
    registration_id: str
    description: str
    success_url: str | None = None
    cancel_url: str | None = None

    @classmethod
    def for_registration(
        cls, total: Decimal, user_id: str, registration_id: str, settings: Settings
    ) -> PaymentRequest:
        return cls(
            amount_cents=to_minor_units(total),
            currency=settings.currency,
            user_id=user_id,
            registration_id=registration_id,
            description=settings.payment_description,
            success_url=settings.payment_success_url,
            cancel_url=settings.payment_cancel_url,
        )

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": self.amount_cents,
            "currency": self.currency,
            "userId": self.user_id,
            "registrationId": self.registration_id,
            "description": self.description,
        }
        if self.success_url:
            payload["successUrl"] = self.success_url
        if self.cancel_url:
            payload["cancelUrl"] = self.cancel_url
        return payload


@dataclass(frozen=True)
class CheckoutSession:
    """Where to send the user to complete payment."""

    url: str | None = None
    session_id: str | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> CheckoutSession:
        return cls(url=data.get("url"), session_id=data.get("sessionId"))
