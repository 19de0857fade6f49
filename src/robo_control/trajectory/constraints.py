"""
Velocity constraints applied along a trajectory during time parameterization.

Each constraint reports the highest velocity it allows at a point of the
path, given the pose and curvature there. The generator takes the minimum
over all constraints and the global velocity limit.
"""

import math
from abc import ABC, abstractmethod

from ..exceptions import require_positive
from ..geometry import Pose2d
from ..kinematics import ChassisSpeeds, DifferentialDriveKinematics


class TrajectoryConstraint(ABC):
    """Base class for path velocity constraints."""

    @abstractmethod
    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        """
        Highest allowed velocity at a point of the path.

        Args:
            pose: Pose at the point
            curvature: Path curvature at the point [rad/m]
            velocity: Velocity limit before this constraint is applied [m/s]
        """


class CentripetalAccelerationConstraint(TrajectoryConstraint):
    """
    Limit the centripetal acceleration in turns.

    Mathematical Model:
        a_c = v²·κ  →  v_max = sqrt(a_c,max / |κ|)
    """

    def __init__(self, max_centripetal_acceleration: float):
        self.max_centripetal_acceleration = require_positive(
            "Maximum centripetal acceleration", max_centripetal_acceleration)

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        if abs(curvature) < 1e-12:
            return math.inf
        return math.sqrt(self.max_centripetal_acceleration / abs(curvature))


class DifferentialDriveKinematicsConstraint(TrajectoryConstraint):
    """
    Keep both wheels of a differential drive under ``max_speed``.

    In a turn the outer wheel runs faster than the chassis, so the chassis
    velocity is reduced until the outer wheel is at the limit.
    """

    def __init__(self, kinematics: DifferentialDriveKinematics, max_speed: float):
        self.kinematics = kinematics
        self.max_speed = require_positive("Maximum wheel speed", max_speed)

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        wheel_speeds = self.kinematics.to_wheel_speeds(ChassisSpeeds(velocity, 0.0, velocity * curvature))
        wheel_speeds = wheel_speeds.desaturate(self.max_speed)
        return self.kinematics.to_chassis_speeds(wheel_speeds).vx
