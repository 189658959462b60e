"""
SiteConfigLoader - typed, fast-fail access to the camp's site configuration.

Values come from the upstream public config payload. Any key can be
overridden by an environment variable (``registration.open`` ->
``CONFIG_REGISTRATION_OPEN``). No silent fallbacks - missing or invalid
required values fail immediately.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

from ..models import SiteConfig
from .errors import ConfigError, MissingKeyError, UnknownKeyError, ValidationError
from .schema import CONFIG_SCHEMA, get_all_required_keys

if TYPE_CHECKING:
    from ..client import RegistrationGateway

logger = logging.getLogger(__name__)


class SiteConfigLoader:
    """
    Typed accessor over a site configuration payload.

    Usage:
        loader = await SiteConfigLoader.fetch(gateway)

        year = loader.get_int("registration.year")
        is_open = loader.get_bool("registration.open")

        site = loader.to_site_config()
    """

    def __init__(self, payload: Mapping[str, Any], validate_on_init: bool = True):
        """
        Initialize the loader.

        Args:
            payload: Raw public config payload (camelCase keys)
            validate_on_init: If True, validates all required keys are present and valid
        """
        self._payload = dict(payload)
        self._validated = False
        if validate_on_init:
            self._validate_all_required_keys()

    @classmethod
    async def fetch(cls, gateway: RegistrationGateway, validate_on_init: bool = True) -> SiteConfigLoader:
        """Fetch the public config from upstream and wrap it in a loader."""
        payload = await gateway.get_public_config()
        return cls(payload, validate_on_init=validate_on_init)

    def _validate_all_required_keys(self) -> None:
        """
        Validate all required config keys exist with valid values.

        Raises:
            ConfigError: If any required keys are missing or invalid
        """
        missing_keys: list[str] = []
        invalid_values: list[str] = []
        invalid_keys: list[str] = []

        required_keys = get_all_required_keys()

        for key in required_keys:
            schema = CONFIG_SCHEMA[key]
            raw_value = self._raw(key)

            if raw_value is None:
                missing_keys.append(key)
                continue

            try:
                typed_value = schema.config_type.coerce(raw_value)
                error = schema.validate(typed_value)
                if error:
                    invalid_values.append(f"{key}: {error}")
                    invalid_keys.append(key)
            except (ValueError, TypeError) as e:
                invalid_values.append(f"{key}: type conversion failed - {e}")
                invalid_keys.append(key)

        if missing_keys or invalid_values:
            error_parts = []
            if missing_keys:
                error_parts.append(f"Missing required keys ({len(missing_keys)}): {missing_keys}")
            if invalid_values:
                error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")

            raise ConfigError(
                "Site configuration validation failed.\n" + "\n".join(error_parts),
                keys=tuple(missing_keys + invalid_keys),
            )

        self._validated = True
        logger.debug(f"Validated {len(required_keys)} required site config keys")

    def _raw(self, key: str) -> Any | None:
        schema = CONFIG_SCHEMA[key]
        env_value = os.environ.get(schema.env_var)
        if env_value is not None:
            return env_value
        return self._payload.get(schema.source_field)

    def get(self, key: str) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (e.g., "registration.open")

        Returns:
            The typed configuration value, or None for an absent optional key

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If a required key is absent
            ValidationError: If value fails validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'", keys=(key,))

        schema = CONFIG_SCHEMA[key]
        raw_value = self._raw(key)

        if raw_value is None:
            if schema.required:
                raise MissingKeyError(
                    f"Required config key '{key}' ({schema.source_field}) not in site config", keys=(key,)
                )
            return None

        try:
            typed_value = schema.config_type.coerce(raw_value)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Config key '{key}' has invalid type: {e}", keys=(key,)) from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Config key '{key}': {error}", keys=(key,))

        return typed_value

    def get_int(self, key: str, default: int | None = None) -> int:
        """Get an integer config value."""
        value = self._get_or_default(key, default)
        return cast(int, value)

    def get_bool(self, key: str, default: bool | None = None) -> bool:
        """Get a boolean config value."""
        value = self._get_or_default(key, default)
        return cast(bool, value)

    def get_str(self, key: str, default: str | None = None) -> str:
        """Get a string config value."""
        value = self._get_or_default(key, default)
        return cast(str, value)

    def _get_or_default(self, key: str, default: Any) -> Any:
        try:
            value = self.get(key)
        except MissingKeyError:
            if default is not None:
                return default
            raise
        if value is None:
            if default is None:
                raise MissingKeyError(
                    f"Optional config key '{key}' is absent and no default was given", keys=(key,)
                )
            return default
        return value

    def to_site_config(self) -> SiteConfig:
        """Typed site configuration for the registration engine."""
        return SiteConfig(
            camp_name=self.get_str("camp.name"),
            registration_year=self.get_int("registration.year"),
            registration_open=self.get_bool("registration.open"),
            early_registration_open=self.get_bool("registration.early_open"),
            allow_deferred_dues_payment=self.get_bool("dues.allow_deferred", default=False),
            stripe_enabled=self.get_bool("payments.stripe_enabled", default=False),
            paypal_enabled=self.get_bool("payments.paypal_enabled", default=False),
            registration_terms=self.get("registration.terms"),
        )
