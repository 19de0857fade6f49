"""
Mechanism simulations for robo control.

This module steps linear actuator plants forward in time with battery-limited
voltage inputs, and closes the loop around them for whole-subsystem runs.

Components:
    - LinearSystemSim: Generic stepped plant with measurement noise
    - ElevatorSim: Carriage on a drum with gravity and hard travel limits
    - DCMotorSim, FlywheelSim: Geared rotational loads
    - BatterySim, PowerBus: Loaded battery voltage and the shared bus
    - Elevator: PID + feedforward + trapezoid profile around an ElevatorSim

Mathematical Models:
    - Exact zero-order-hold discretization of continuous state space
    - Affine gravity disturbance folded into the discrete step
    - Internal-resistance battery sag
"""

from .battery import BatterySim, PowerBus, constant_voltage, NOMINAL_BATTERY_VOLTAGE
from .linear_system_sim import LinearSystemSim
from .elevator_sim import ElevatorSim, ElevatorParameters, GRAVITY
from .dc_motor_sim import DCMotorSim, FlywheelSim
from .elevator import Elevator, ElevatorConfig, SimulationLog

__all__ = [
    # Plant simulations
    "LinearSystemSim",
    "ElevatorSim",
    "DCMotorSim",
    "FlywheelSim",

    # Electrical
    "BatterySim",
    "PowerBus",
    "constant_voltage",
    "NOMINAL_BATTERY_VOLTAGE",

    # Subsystems and configuration
    "Elevator",
    "ElevatorConfig",
    "ElevatorParameters",
    "SimulationLog",
    "GRAVITY"
]
