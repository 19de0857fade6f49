"""
Planar geometry for robo control.

Components:
    - Rotation2d: Wrapped planar angle
    - Translation2d: 2D vector in meters
    - Pose2d: Translation plus heading
    - Transform2d: Rigid transform between two poses
    - Twist2d: Constant-curvature displacement used by odometry and interpolation
"""

from .rotation import Rotation2d
from .translation import Translation2d
from .pose import Pose2d, Transform2d, Twist2d

__all__ = [
    "Rotation2d",
    "Translation2d",
    "Pose2d",
    "Transform2d",
    "Twist2d"
]
