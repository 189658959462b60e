"""Dues calculation for a registration."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from .catalog import CatalogSnapshot
from .models import CampingOption, UserRole

CENTS = Decimal("0.01")


def dues_for(option: CampingOption, role: UserRole) -> Decimal:
    """Dues a user with the given role pays for one camping option."""
    return option.staff_dues if role.is_staff_or_admin else option.participant_dues


def calculate_total(catalog: CatalogSnapshot, camping_option_ids: Iterable[str], role: UserRole) -> Decimal:
    """Sum dues for the selected camping options.

    Staff and admin users pay ``staff_dues``; everyone else pays
    ``participant_dues``. Ids missing from the catalog are skipped. No rounding
    is applied here.
    """
    options = catalog.option_by_id
    total = Decimal("0")
    for option_id in set(camping_option_ids):
        option = options.get(option_id)
        if option is not None:
            total += dues_for(option, role)
    return total


def format_amount(amount: Decimal) -> str:
    """Display format with two decimals (e.g. 300 -> "300.00")."""
    return f"{amount.quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"


def to_minor_units(amount: Decimal) -> int:
    """Convert a dues amount to cents for payment initiation."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
