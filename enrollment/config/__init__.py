"""
Configuration for the registration engine.

Service settings come from the environment (Settings). Site configuration comes
from the upstream public config and is read through SiteConfigLoader, which
validates it against CONFIG_SCHEMA.
"""

from __future__ import annotations

from .errors import ConfigError, MissingKeyError, UnknownKeyError, ValidationError
from .loader import SiteConfigLoader
from .schema import CONFIG_SCHEMA, get_all_required_keys, validate_key
from .settings import Settings, get_settings
from .types import ConfigKey, ConfigType

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigError",
    "ConfigKey",
    "ConfigType",
    "MissingKeyError",
    "Settings",
    "SiteConfigLoader",
    "UnknownKeyError",
    "ValidationError",
    "get_all_required_keys",
    "get_settings",
    "validate_key",
]
