"""Exceptions raised while reading the site configuration.

Site configuration fails fast: a missing or malformed value is an error when
it is read, never a silent default.
"""

from __future__ import annotations


class ConfigError(Exception):
    """The site configuration could not be read.

    ``keys`` names the offending configuration keys when they are known.
    """

    def __init__(self, message: str, keys: tuple[str, ...] = ()):
        super().__init__(message)
        self.keys = keys


class UnknownKeyError(ConfigError):
    """A key with no CONFIG_SCHEMA entry was requested."""


class MissingKeyError(ConfigError):
    """A key has no value and no default applies."""


class ValidationError(ConfigError):
    """A value could not be converted to its type or was rejected by its key."""
