"""
Drive kinematics for robo control.

Components:
    - DifferentialDriveKinematics: Wheel speeds ↔ chassis speeds
    - DifferentialDriveOdometry: Encoder + gyro pose tracking
    - ChassisSpeeds, DifferentialDriveWheelSpeeds: Velocity value types
"""

from .differential_drive import (
    ChassisSpeeds,
    DifferentialDriveWheelSpeeds,
    DifferentialDriveKinematics,
    DifferentialDriveOdometry
)

__all__ = [
    "ChassisSpeeds",
    "DifferentialDriveWheelSpeeds",
    "DifferentialDriveKinematics",
    "DifferentialDriveOdometry"
]
