"""Site configuration schema registry.

Defines every site configuration key the engine reads, where it comes from in
the upstream public config payload, and how it is validated.
"""

from __future__ import annotations

from typing import Any

from .types import ConfigKey, ConfigType

# =============================================================================
# SITE CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys are rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # CAMP
    # =========================================================================
    "camp.name": ConfigKey(
        key="camp.name",
        source_field="campName",
        config_type=ConfigType.STRING,
        required=True,
        description="Display name of the camp",
        check=lambda v: bool(v.strip()),
        check_message="must not be blank",
    ),
    # =========================================================================
    # REGISTRATION WINDOW
    # =========================================================================
    "registration.year": ConfigKey(
        key="registration.year",
        source_field="registrationYear",
        config_type=ConfigType.INT,
        required=True,
        description="Year registrations are taken for",
        min_value=2000,
        max_value=2100,
    ),
    "registration.open": ConfigKey(
        key="registration.open",
        source_field="registrationOpen",
        config_type=ConfigType.BOOL,
        required=True,
        description="General registration is open",
    ),
    "registration.early_open": ConfigKey(
        key="registration.early_open",
        source_field="earlyRegistrationOpen",
        config_type=ConfigType.BOOL,
        required=True,
        description="Early registration is open for users allowed early registration",
    ),
    "registration.terms": ConfigKey(
        key="registration.terms",
        source_field="registrationTerms",
        config_type=ConfigType.STRING,
        required=False,
        description="Terms shown on the terms step",
    ),
    # =========================================================================
    # DUES / PAYMENTS
    # =========================================================================
    "dues.allow_deferred": ConfigKey(
        key="dues.allow_deferred",
        source_field="allowDeferredDuesPayment",
        config_type=ConfigType.BOOL,
        required=False,
        description="Site-level permission to pay dues later (user permission also required)",
    ),
    "payments.stripe_enabled": ConfigKey(
        key="payments.stripe_enabled",
        source_field="stripeEnabled",
        config_type=ConfigType.BOOL,
        required=False,
        description="Stripe checkout is available",
    ),
    "payments.paypal_enabled": ConfigKey(
        key="payments.paypal_enabled",
        source_field="paypalEnabled",
        config_type=ConfigType.BOOL,
        required=False,
        description="PayPal checkout is available",
    ),
}


def get_all_required_keys() -> list[str]:
    """
    Get all required configuration keys.

    Returns:
        List of key names that must be present in the site configuration
    """
    return [key for key, schema in CONFIG_SCHEMA.items() if schema.required]


def validate_key(key: str, value: Any) -> str | None:
    """
    Validate a value against its schema.

    Args:
        key: The config key
        value: The value to validate

    Returns:
        None if valid, error message if invalid
    """
    schema = CONFIG_SCHEMA.get(key)
    if schema is None:
        return f"Unknown config key: {key}"
    return schema.validate(value)
