# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

Covers both the YAML tool configuration and the key/value versions file.
Everything here means "the input is wrong, fix it and try again", so the
CLI maps the whole family to CONFIG_ERROR.
"""

from typing import Optional


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails validation.
    This covers missing required fields, type mismatches, out-of-range values
    and a versions file without a single entry.
    """


class DetectionError(ConfigError):
    """Raised when a download location matches no known MPI implementation."""

    def __init__(self, value: str, reason: Optional[str] = None) -> None:
        message = f"Cannot detect the MPI implementation from {value!r}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.value = value
        self.reason = reason


class ImplementationConflictError(ConfigError):
    """Raised when one versions file mixes two MPI implementation families."""

    def __init__(self, expected: str, found: str, value: str) -> None:
        super().__init__(
            f"Detected two implementations of MPI ({expected} and {found}) in {value!r}"
        )
        self.expected = expected
        self.found = found
        self.value = value


class DuplicateVersionError(ConfigError):
    """Raised in strict mode when two locations resolve to the same version."""

    def __init__(self, version: str, first: str, second: str) -> None:
        super().__init__(
            f"Version {version} is provided twice: {first!r} and {second!r}"
        )
        self.version = version
        self.first = first
        self.second = second
