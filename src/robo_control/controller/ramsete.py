"""
Ramsete unicycle trajectory tracker.

Mathematical Model:
    Pose error in the robot frame: (e_x, e_y, e_θ)
    k = 2ζ·sqrt(ω_ref² + b·v_ref²)

    v = v_ref·cos(e_θ) + k·e_x
    ω = ω_ref + k·e_θ + b·v_ref·sinc(e_θ)·e_y

    b > 0 tightens convergence (like a proportional term), ζ in (0, 1)
    adds damping.
"""

import math

from ..exceptions import ConfigurationError, require_positive
from ..geometry import Pose2d
from ..kinematics import ChassisSpeeds


def _sinc(x: float) -> float:
    if abs(x) < 1e-9:
        return 1.0 - x * x / 6.0
    return math.sin(x) / x


class RamseteController:
    """
    Nonlinear feedback controller for following a differential drive trajectory.

    Args:
        b: Convergence gain, > 0 [rad²/m²]
        zeta: Damping ratio, in (0, 1) [rad⁻¹]
    """

    def __init__(self, b: float = 2.0, zeta: float = 0.7):
        self.b = require_positive("Ramsete b", b)
        if not 0 < zeta < 1:
            raise ConfigurationError(f"Ramsete zeta must be in (0, 1), got {zeta}")
        self.zeta = float(zeta)
        self.enabled = True

        self._pose_error = Pose2d()
        self._pose_tolerance = Pose2d()

    def set_tolerance(self, pose_tolerance: Pose2d) -> None:
        self._pose_tolerance = pose_tolerance

    def at_reference(self) -> bool:
        error = self._pose_error
        tolerance = self._pose_tolerance
        return (abs(error.x) < tolerance.x
                and abs(error.y) < tolerance.y
                and abs(error.rotation.radians) < tolerance.rotation.radians)

    def calculate(self,
                  current_pose: Pose2d,
                  pose_ref: Pose2d,
                  linear_velocity_ref: float,
                  angular_velocity_ref: float) -> ChassisSpeeds:
        """
        Chassis speeds that steer ``current_pose`` onto the reference.

        With the controller disabled the reference velocities are passed
        through unchanged.
        """
        if not self.enabled:
            return ChassisSpeeds(linear_velocity_ref, 0.0, angular_velocity_ref)

        self._pose_error = pose_ref.relative_to(current_pose)

        e_x = self._pose_error.x
        e_y = self._pose_error.y
        e_theta = self._pose_error.rotation.radians
        v_ref = linear_velocity_ref
        omega_ref = angular_velocity_ref

        k = 2.0 * self.zeta * math.sqrt(omega_ref ** 2 + self.b * v_ref ** 2)

        return ChassisSpeeds(
            v_ref * math.cos(e_theta) + k * e_x,
            0.0,
            omega_ref + k * e_theta + self.b * v_ref * _sinc(e_theta) * e_y,
        )

    def calculate_for_state(self, current_pose: Pose2d, desired_state) -> ChassisSpeeds:
        """Track a sampled trajectory state (uses its pose, velocity and curvature)."""
        return self.calculate(current_pose,
                              desired_state.pose,
                              desired_state.velocity,
                              desired_state.velocity * desired_state.curvature)
