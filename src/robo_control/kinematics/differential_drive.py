"""
Differential Drive Kinematics Module

This module converts between the wheel speeds of a differential drive
robot and its chassis velocity, and integrates wheel encoder distances
into a field-relative pose.

Mathematical Framework:
    Differential drive kinematics are based on the instantaneous center
    of rotation (ICR) model:

    v = (v_L + v_R) / 2                    # Linear velocity
    ω = (v_R - v_L) / L                    # Angular velocity

    v_L = v - ω*L/2
    v_R = v + ω*L/2

    where L is the track width (distance between the left and right
    wheel contact patches). A differential drive cannot translate
    sideways, so the lateral chassis velocity is always zero.

Author: Scientific Computing Team
License: MIT
"""

import logging
from dataclasses import dataclass

from ..exceptions import require_positive
from ..geometry import Pose2d, Rotation2d, Twist2d

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChassisSpeeds:
    """
    Robot-relative chassis velocity.

    Attributes:
        vx: Forward velocity [m/s]
        vy: Sideways velocity, positive left [m/s]
        omega: Angular velocity, counter-clockwise positive [rad/s]
    """

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0


@dataclass(frozen=True)
class DifferentialDriveWheelSpeeds:
    """Left and right wheel surface speeds [m/s]."""

    left: float = 0.0
    right: float = 0.0

    def desaturate(self, max_speed: float) -> "DifferentialDriveWheelSpeeds":
        """
        Scale both wheels down so neither exceeds ``max_speed``.

        The ratio between the wheels is kept, which preserves the
        curvature of the commanded motion.
        """
        real_max = max(abs(self.left), abs(self.right))
        if real_max <= max_speed:
            return self
        scale = max_speed / real_max
        return DifferentialDriveWheelSpeeds(self.left * scale, self.right * scale)


class DifferentialDriveKinematics:
    """
    Forward and inverse kinematics of a differential drive.

    Args:
        track_width: Distance between left and right wheels [m]

    Raises:
        ConfigurationError: If the track width is not positive
    """

    def __init__(self, track_width: float):
        self.track_width = require_positive("Track width", track_width)
        self._half_track = self.track_width / 2.0

    def to_chassis_speeds(self, wheel_speeds: DifferentialDriveWheelSpeeds) -> ChassisSpeeds:
        """
        Forward kinematics: given wheel speeds, compute robot motion.

        Mathematical Model:
            v = (v_L + v_R) / 2
            ω = (v_R - v_L) / L
        """
        return ChassisSpeeds(
            vx=(wheel_speeds.left + wheel_speeds.right) / 2.0,
            vy=0.0,
            omega=(wheel_speeds.right - wheel_speeds.left) / self.track_width,
        )

    def to_wheel_speeds(self, chassis_speeds: ChassisSpeeds) -> DifferentialDriveWheelSpeeds:
        """
        Inverse kinematics: given desired robot motion, compute wheel speeds.

        The sideways component of ``chassis_speeds`` is ignored.

        Mathematical Model:
            v_L = v - ω*L/2
            v_R = v + ω*L/2
        """
        return DifferentialDriveWheelSpeeds(
            left=chassis_speeds.vx - self._half_track * chassis_speeds.omega,
            right=chassis_speeds.vx + self._half_track * chassis_speeds.omega,
        )

    def to_twist2d(self, left_distance: float, right_distance: float) -> Twist2d:
        """Displacement of the chassis given the distance each wheel has rolled."""
        return Twist2d(
            dx=(left_distance + right_distance) / 2.0,
            dy=0.0,
            dtheta=(right_distance - left_distance) / self.track_width,
        )

    def __repr__(self) -> str:
        return f"DifferentialDriveKinematics(track_width={self.track_width:.3f}m)"


class DifferentialDriveOdometry:
    """
    Field-relative pose tracking from wheel encoders and a gyro.

    Heading is taken from the gyro rather than from the wheel difference,
    since wheel scrub makes the encoder estimate of rotation unreliable.
    The translation is integrated along the arc implied by the twist.

    Args:
        kinematics: Drive kinematics (supplies the track width)
        gyro_angle: Current gyro reading
        left_distance: Current left encoder distance [m]
        right_distance: Current right encoder distance [m]
        initial_pose: Pose the robot starts at
    """

    def __init__(self,
                 kinematics: DifferentialDriveKinematics,
                 gyro_angle: Rotation2d,
                 left_distance: float = 0.0,
                 right_distance: float = 0.0,
                 initial_pose: Pose2d = Pose2d()):
        self.kinematics = kinematics
        self._pose = initial_pose
        self._gyro_offset = initial_pose.rotation - gyro_angle
        self._previous_angle = initial_pose.rotation
        self._previous_left = left_distance
        self._previous_right = right_distance

    @property
    def pose(self) -> Pose2d:
        return self._pose

    def reset_position(self,
                       gyro_angle: Rotation2d,
                       left_distance: float,
                       right_distance: float,
                       pose: Pose2d) -> None:
        """Re-seed the tracked pose, e.g. at the start of an autonomous path."""
        self._pose = pose
        self._previous_angle = pose.rotation
        self._gyro_offset = pose.rotation - gyro_angle
        self._previous_left = left_distance
        self._previous_right = right_distance
        logger.debug(f"Odometry reset to {pose}")

    def update(self, gyro_angle: Rotation2d, left_distance: float, right_distance: float) -> Pose2d:
        """
        Integrate the wheel travel since the previous update.

        Args:
            gyro_angle: Current gyro reading
            left_distance: Accumulated left encoder distance [m]
            right_distance: Accumulated right encoder distance [m]

        Returns:
            Updated field-relative pose
        """
        delta_left = left_distance - self._previous_left
        delta_right = right_distance - self._previous_right
        self._previous_left = left_distance
        self._previous_right = right_distance

        angle = gyro_angle + self._gyro_offset

        wheel_twist = self.kinematics.to_twist2d(delta_left, delta_right)
        twist = Twist2d(wheel_twist.dx, wheel_twist.dy, (angle - self._previous_angle).radians)

        new_pose = self._pose.exp(twist)
        self._previous_angle = angle
        self._pose = Pose2d.from_translation(new_pose.translation, angle)
        return self._pose
