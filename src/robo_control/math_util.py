"""
Scalar helpers used throughout the control and geometry code.

Wrapping Model:
    input_modulus maps any value into the window [minimum, maximum] by
    removing whole multiples of the modulus (maximum - minimum). The
    upper bound is inclusive and the lower bound exclusive, so an angle
    window of (-180, 180] maps -180 to 180.
"""

import math


def input_modulus(value: float, minimum: float, maximum: float) -> float:
    """
    Wrap ``value`` into the range defined by ``minimum`` and ``maximum``.

    Args:
        value: Value to wrap
        minimum: Lower end of the range
        maximum: Upper end of the range

    Returns:
        Equivalent value inside (minimum, maximum]
    """
    modulus = maximum - minimum

    # Wrap value if it's above the maximum input
    num_max = int((value - minimum) / modulus)
    value -= num_max * modulus

    # Wrap value if it's below the minimum input
    num_min = int((value - maximum) / modulus)
    value -= num_min * modulus

    return value


def angle_modulus(angle_radians: float) -> float:
    """Wrap an angle to (-pi, pi]."""
    return input_modulus(angle_radians, -math.pi, math.pi)


def degrees_modulus(angle_degrees: float) -> float:
    """Wrap an angle to (-180, 180]."""
    return input_modulus(angle_degrees, -180.0, 180.0)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def apply_deadband(value: float, deadband: float, max_magnitude: float = 1.0) -> float:
    """
    Zero small inputs and rescale the rest so the output stays continuous.

    Values whose magnitude is inside ``deadband`` return 0. Outside the
    deadband the remaining span is stretched back to ``max_magnitude``.
    """
    if abs(value) <= deadband:
        return 0.0
    if max_magnitude == float("inf"):
        return value - deadband if value > 0 else value + deadband
    if value > 0:
        return max_magnitude * (value - deadband) / (max_magnitude - deadband)
    return max_magnitude * (value + deadband) / (max_magnitude - deadband)


def interpolate(start: float, end: float, t: float) -> float:
    """Linear interpolation with ``t`` clamped to [0, 1]."""
    return start + (end - start) * clamp(t, 0.0, 1.0)


def sign(value: float) -> float:
    """Return -1, 0 or 1; zero maps to zero."""
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0
