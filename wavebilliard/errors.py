"""Errors raised by the simulation core."""


class WaveBilliardError(Exception):
    """Base class for wavebilliard errors."""
    pass


class ConfigurationError(WaveBilliardError, ValueError):
    """Inconsistent configuration, detected before any stepping."""
    pass
