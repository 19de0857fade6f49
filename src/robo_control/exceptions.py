"""
Exception types shared across robo_control.

Configuration problems are reported synchronously at construction or
generation time. Nothing in the package raises partway through a
simulation step.
"""


class ConfigurationError(ValueError):
    """Raised when a component is built from non-physical or degenerate parameters."""


def require_positive(name: str, value: float) -> float:
    """Return ``value`` as a float, raising ConfigurationError unless it is finite and > 0."""
    value = float(value)
    if not value > 0 or value == float("inf"):
        raise ConfigurationError(f"{name} must be positive and finite, got {value}")
    return value


def require_non_negative(name: str, value: float) -> float:
    """Return ``value`` as a float, raising ConfigurationError if it is negative or NaN."""
    value = float(value)
    if not value >= 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")
    return value
