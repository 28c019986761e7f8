"""Configuration errors. Any of these aborts resolution before templates are emitted."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base class for fatal configuration errors."""


class InvalidTripleError(ConfigurationError, ValueError):
    pass


class UnknownOsError(ConfigurationError, ValueError):
    pass


class UnknownStageError(ConfigurationError, ValueError):
    pass


class UnsupportedCompilerError(ConfigurationError, RuntimeError):
    pass
