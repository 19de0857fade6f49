"""
Trajectory generation and motion profiles.

Components:
    - TrapezoidProfile: 1-D velocity-limited motion profile
    - Trajectory: time-parameterized planar path with interpolated sampling
    - TrajectoryGenerator: spline fitting and time parameterization
    - Constraints: per-point velocity limits applied during generation
"""

from .constraints import (
    CentripetalAccelerationConstraint,
    DifferentialDriveKinematicsConstraint,
    TrajectoryConstraint,
)
from .generator import TrajectoryConfig, TrajectoryGenerator
from .trajectory import Trajectory, TrajectoryState
from .trapezoid_profile import TrapezoidProfile

__all__ = [
    'TrapezoidProfile',
    'Trajectory',
    'TrajectoryState',
    'TrajectoryConfig',
    'TrajectoryGenerator',
    'TrajectoryConstraint',
    'CentripetalAccelerationConstraint',
    'DifferentialDriveKinematicsConstraint',
]
