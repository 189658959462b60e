"""Site configuration key definitions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


class ConfigType(Enum):
    """Value types a site configuration key can hold."""

    INT = "int"
    BOOL = "bool"
    STRING = "string"

    def coerce(self, value: Any) -> Any:
        """Convert a payload or environment value to this type.

        Raises:
            ValueError: If a string does not parse as this type
            TypeError: If the value's type cannot be converted
        """
        if self is ConfigType.INT:
            if isinstance(value, bool):
                raise TypeError("expected a number, got a boolean")
            return int(value)
        if self is ConfigType.BOOL:
            if isinstance(value, str):
                return value.strip().lower() in _TRUE_STRINGS
            return bool(value)
        return str(value)


@dataclass(frozen=True)
class ConfigKey:
    """
    One key of the site configuration.

    Attributes:
        key: Dot-notation name used by callers (e.g., "registration.open")
        source_field: camelCase field of the upstream public config payload
        config_type: Type the raw value is coerced to
        required: If True, a missing value fails the whole configuration
        description: Human-readable description
        min_value: Inclusive lower bound (INT keys)
        max_value: Inclusive upper bound (INT keys)
        check: Predicate the coerced value must satisfy
        check_message: Error text used when ``check`` rejects a value
    """

    key: str
    source_field: str
    config_type: ConfigType
    required: bool = True
    description: str = ""
    min_value: int | None = None
    max_value: int | None = None
    check: Callable[[Any], bool] | None = None
    check_message: str = "is not allowed"

    @property
    def env_var(self) -> str:
        """Environment variable that overrides this key."""
        # dues.allow_deferred -> CONFIG_DUES_ALLOW_DEFERRED
        return "CONFIG_" + self.key.upper().replace(".", "_")

    def validate(self, value: Any) -> str | None:
        """Return an error message for a rejected value, or None."""
        if self.min_value is not None and value < self.min_value:
            return f"{value} is below the minimum {self.min_value}"
        if self.max_value is not None and value > self.max_value:
            return f"{value} is above the maximum {self.max_value}"
        if self.check is not None and not self.check(value):
            return f"{value!r} {self.check_message}"
        return None
