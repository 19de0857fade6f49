"""
2D Rigid Transform Module

This module implements the planar pose algebra used by kinematics, odometry
and trajectory generation: poses, transforms between poses, and twists
(constant-curvature motions along the SE(2) manifold).

Mathematical Framework:
    - Pose composition: p ∘ t = (p.t + R(p.θ) t.t, p.θ + t.θ)
    - Transform between poses: T(a→b) = (R(-a.θ)(b.t - a.t), b.θ - a.θ)
    - Exponential map: twist (dx, dy, dθ) → transform along a circular arc
    - Logarithm map: inverse of the exponential map

Composition is associative but not commutative. All rotations are wrapped
to (-180°, 180°] after every operation.

Author: Scientific Computing Team
License: MIT
"""

import math
from dataclasses import dataclass
from typing import Union

from .rotation import Rotation2d
from .translation import Translation2d


@dataclass(frozen=True)
class Twist2d:
    """
    Change in pose expressed in the starting pose's frame.

    Attributes:
        dx: Forward displacement [m]
        dy: Lateral displacement [m]
        dtheta: Heading change [rad]
    """

    dx: float = 0.0
    dy: float = 0.0
    dtheta: float = 0.0

    def scaled(self, factor: float) -> "Twist2d":
        return Twist2d(self.dx * factor, self.dy * factor, self.dtheta * factor)


class Transform2d:
    """
    Rigid transformation: a translation followed by a rotation.

    Args:
        translation: Translation component
        rotation: Rotation component
    """

    __slots__ = ("_translation", "_rotation")

    def __init__(self,
                 translation: Translation2d = Translation2d(),
                 rotation: Rotation2d = Rotation2d()):
        self._translation = translation
        self._rotation = rotation

    @classmethod
    def between(cls, initial: "Pose2d", final: "Pose2d") -> "Transform2d":
        """Transform that maps ``initial`` onto ``final``, expressed in ``initial``'s frame."""
        translation = (final.translation - initial.translation).rotate_by(-initial.rotation)
        return cls(translation, final.rotation - initial.rotation)

    @property
    def translation(self) -> Translation2d:
        return self._translation

    @property
    def rotation(self) -> Rotation2d:
        return self._rotation

    @property
    def x(self) -> float:
        return self._translation.x

    @property
    def y(self) -> float:
        return self._translation.y

    def inverse(self) -> "Transform2d":
        """Transform that undoes this one."""
        return Transform2d((-self._translation).rotate_by(-self._rotation), -self._rotation)

    def __add__(self, other: "Transform2d") -> "Transform2d":
        return Transform2d.between(Pose2d(), Pose2d().transform_by(self).transform_by(other))

    def __mul__(self, scalar: float) -> "Transform2d":
        return Transform2d(self._translation * scalar, self._rotation * scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform2d):
            return NotImplemented
        return self._translation == other._translation and self._rotation == other._rotation

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Transform2d(x={self.x:.4f}, y={self.y:.4f}, "
                f"rotation={self._rotation.degrees:.3f}°)")


class Pose2d:
    """
    Position and heading of a rigid body in the plane.

    Args:
        x: X position [m]
        y: Y position [m]
        rotation: Heading, either a Rotation2d or a number of degrees

    Example:
        >>> Pose2d(5, 3, 45).transform_by(Pose2d(1, 0, 0)).x  # doctest: +ELLIPSIS
        5.707...
    """

    __slots__ = ("_translation", "_rotation")

    def __init__(self, x: float = 0.0, y: float = 0.0,
                 rotation: Union[Rotation2d, float] = 0.0):
        if not isinstance(rotation, Rotation2d):
            rotation = Rotation2d.from_degrees(rotation)
        self._translation = Translation2d(float(x), float(y))
        self._rotation = rotation

    @classmethod
    def from_translation(cls, translation: Translation2d,
                         rotation: Rotation2d = Rotation2d()) -> "Pose2d":
        return cls(translation.x, translation.y, rotation)

    @property
    def x(self) -> float:
        return self._translation.x

    @property
    def y(self) -> float:
        return self._translation.y

    @property
    def translation(self) -> Translation2d:
        return self._translation

    @property
    def rotation(self) -> Rotation2d:
        return self._rotation

    @property
    def rotation_degrees(self) -> float:
        return self._rotation.degrees

    def distance_to(self, other: "Pose2d") -> float:
        """Euclidean distance between the translation components; heading is ignored."""
        return self._translation.distance(other.translation)

    def transform_by(self, other: Union[Transform2d, "Pose2d"]) -> "Pose2d":
        """
        Apply ``other`` as a rigid transform expressed in this pose's frame.

        Args:
            other: Transform2d, or a Pose2d read as the transform from the origin

        Returns:
            New pose

        Mathematical Model:
            t' = t + R(θ) other.t
            θ' = θ + other.θ
        """
        translation = self._translation + other.translation.rotate_by(self._rotation)
        return Pose2d.from_translation(translation, other.rotation.rotate_by(self._rotation))

    def relative_to(self, other: "Pose2d") -> "Pose2d":
        """This pose expressed in the frame of ``other``."""
        transform = Transform2d.between(other, self)
        return Pose2d.from_translation(transform.translation, transform.rotation)

    def exp(self, twist: Twist2d) -> "Pose2d":
        """
        Follow a constant-curvature arc described by ``twist``.

        Mathematical Model:
            s = sin(dθ)/dθ,  c = (1 - cos(dθ))/dθ
            Δx = dx·s - dy·c
            Δy = dx·c + dy·s

            Small-angle Taylor expansions are used when |dθ| < 1e-9.
        """
        dx, dy, dtheta = twist.dx, twist.dy, twist.dtheta
        sin_theta = math.sin(dtheta)
        cos_theta = math.cos(dtheta)

        if abs(dtheta) < 1e-9:
            s = 1.0 - dtheta * dtheta / 6.0
            c = 0.5 * dtheta
        else:
            s = sin_theta / dtheta
            c = (1.0 - cos_theta) / dtheta

        transform = Transform2d(
            Translation2d(dx * s - dy * c, dx * c + dy * s),
            Rotation2d.from_components(cos_theta, sin_theta),
        )
        return self.transform_by(transform)

    def log(self, end: "Pose2d") -> Twist2d:
        """Twist that carries this pose to ``end``; the inverse of :meth:`exp`."""
        transform = end.relative_to(self)
        dtheta = transform.rotation.radians
        half_dtheta = dtheta / 2.0
        cos_minus_one = transform.rotation.cos - 1.0

        if abs(cos_minus_one) < 1e-9:
            half_theta_by_tan = 1.0 - dtheta * dtheta / 12.0
        else:
            half_theta_by_tan = -(half_dtheta * transform.rotation.sin) / cos_minus_one

        translation_part = transform.translation.rotate_by(
            Rotation2d.from_components(half_theta_by_tan, -half_dtheta)
        ) * math.hypot(half_theta_by_tan, half_dtheta)

        return Twist2d(translation_part.x, translation_part.y, dtheta)

    def interpolate(self, end: "Pose2d", t: float) -> "Pose2d":
        """Move a fraction ``t`` of the way to ``end`` along the connecting twist."""
        if t <= 0.0:
            return self
        if t >= 1.0:
            return end
        return self.exp(self.log(end).scaled(t))

    def __add__(self, other: Transform2d) -> "Pose2d":
        return self.transform_by(other)

    def __sub__(self, other: "Pose2d") -> Transform2d:
        return Transform2d.between(other, self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose2d):
            return NotImplemented
        return self._translation == other._translation and self._rotation == other._rotation

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Pose2d(x={self.x:.4f}, y={self.y:.4f}, "
                f"rotation={self._rotation.degrees:.3f}°)")
