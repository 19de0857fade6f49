"""
Planar rotation value type.

A Rotation2d is an angle on the unit circle. The stored angle is always
wrapped to (-pi, pi], so two rotations that differ by a full turn are the
same object value and compare equal.
"""

import math
from typing import Union

from ..math_util import angle_modulus, clamp


class Rotation2d:
    """
    Immutable 2D rotation.

    The cosine and sine of the angle are cached at construction so that
    rotating translations costs two multiplications per axis.

    Args:
        radians: Rotation angle in radians. Wrapped to (-pi, pi].
    """

    __slots__ = ("_value", "_cos", "_sin")

    def __init__(self, radians: float = 0.0):
        value = angle_modulus(float(radians))
        self._value = value
        self._cos = math.cos(value)
        self._sin = math.sin(value)

    @classmethod
    def from_degrees(cls, degrees: float) -> "Rotation2d":
        return cls(math.radians(degrees))

    @classmethod
    def from_components(cls, x: float, y: float) -> "Rotation2d":
        """Rotation pointing along the vector (x, y). The zero vector maps to 0."""
        if math.hypot(x, y) < 1e-9:
            return cls(0.0)
        return cls(math.atan2(y, x))

    @property
    def radians(self) -> float:
        return self._value

    @property
    def degrees(self) -> float:
        return math.degrees(self._value)

    @property
    def cos(self) -> float:
        return self._cos

    @property
    def sin(self) -> float:
        return self._sin

    @property
    def tan(self) -> float:
        return self._sin / self._cos

    def rotate_by(self, other: "Rotation2d") -> "Rotation2d":
        """Add two rotations; the result is wrapped back to (-pi, pi]."""
        return Rotation2d(self._value + other._value)

    def interpolate(self, end: "Rotation2d", t: float) -> "Rotation2d":
        """Shortest-arc interpolation towards ``end``; ``t`` is clamped to [0, 1]."""
        return self + (end - self) * clamp(t, 0.0, 1.0)

    def __add__(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(other)

    def __sub__(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(-other)

    def __neg__(self) -> "Rotation2d":
        return Rotation2d(-self._value)

    def __mul__(self, scalar: Union[int, float]) -> "Rotation2d":
        return Rotation2d(self._value * scalar)

    def __truediv__(self, scalar: Union[int, float]) -> "Rotation2d":
        return self * (1.0 / scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rotation2d):
            return NotImplemented
        return math.hypot(self._cos - other._cos, self._sin - other._sin) < 1e-9

    __hash__ = None

    def __repr__(self) -> str:
        return f"Rotation2d(degrees={self.degrees:.3f})"
