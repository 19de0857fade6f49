"""
Plant models for robo control.

Components:
    - DCMotor: Electrical/mechanical motor characterization and presets
    - LinearSystem: Continuous LTI plant with exact discrete stepping
    - LinearSystemId: Plant factories for elevators, rotational loads and flywheels
"""

from .dc_motor import DCMotor, rpm_to_radians_per_second
from .linear_system import LinearSystem, LinearSystemId, discretize_ab

__all__ = [
    "DCMotor",
    "LinearSystem",
    "LinearSystemId",
    "discretize_ab",
    "rpm_to_radians_per_second"
]
