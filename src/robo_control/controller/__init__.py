"""
Feedback and feedforward controllers for robo control.

Components:
    - PIDController: Scalar PID with continuous input and anti-windup
    - SimpleMotorFeedforward, ElevatorFeedforward, ArmFeedforward: Voltage models
    - RamseteController: Differential drive trajectory tracker
"""

from .pid import PIDController
from .feedforward import SimpleMotorFeedforward, ElevatorFeedforward, ArmFeedforward
from .ramsete import RamseteController

__all__ = [
    "PIDController",
    "SimpleMotorFeedforward",
    "ElevatorFeedforward",
    "ArmFeedforward",
    "RamseteController"
]
