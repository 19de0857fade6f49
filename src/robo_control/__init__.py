"""
Robo Control: Actuator Simulation and Control Primitives

A scientific Python package for simulating DC-motor driven mechanisms and
controlling them without real hardware.

This package implements:
- DC motor models and linear state-space plants
- Exactly discretized mechanism simulations with battery-limited voltage
- PID, feedforward and Ramsete controllers
- Discrete linear filters
- 2D pose algebra and differential drive kinematics
- Trapezoid profiles and spline trajectory generation

A control loop reads a simulated mechanism, computes a voltage with a PID
controller plus feedforward, writes it back, and steps the simulation by
its own fixed period. The library never reads a clock.
"""

from .exceptions import ConfigurationError
from .geometry import Pose2d, Rotation2d, Transform2d, Translation2d, Twist2d
from .kinematics import (ChassisSpeeds, DifferentialDriveKinematics,
                         DifferentialDriveOdometry, DifferentialDriveWheelSpeeds)
from .system import DCMotor, LinearSystem, LinearSystemId
from .simulation import (BatterySim, DCMotorSim, Elevator, ElevatorSim, FlywheelSim,
                         LinearSystemSim, PowerBus)
from .controller import (ArmFeedforward, ElevatorFeedforward, PIDController,
                         RamseteController, SimpleMotorFeedforward)
from .filter import LinearFilter
from .trajectory import (Trajectory, TrajectoryConfig, TrajectoryGenerator,
                         TrapezoidProfile)

# Optional visualization import (graceful failure if not available)
try:
    from .visualization.plotter import plot_trajectory, plot_simulation_log
    _has_visualization = True
except ImportError:
    plot_trajectory = None
    plot_simulation_log = None
    _has_visualization = False

__version__ = "1.0.0"
__author__ = "Robo Control Team"

__all__ = [
    "ConfigurationError",
    "Pose2d",
    "Rotation2d",
    "Transform2d",
    "Translation2d",
    "Twist2d",
    "ChassisSpeeds",
    "DifferentialDriveKinematics",
    "DifferentialDriveOdometry",
    "DifferentialDriveWheelSpeeds",
    "DCMotor",
    "LinearSystem",
    "LinearSystemId",
    "LinearSystemSim",
    "ElevatorSim",
    "DCMotorSim",
    "FlywheelSim",
    "BatterySim",
    "PowerBus",
    "Elevator",
    "PIDController",
    "SimpleMotorFeedforward",
    "ElevatorFeedforward",
    "ArmFeedforward",
    "RamseteController",
    "LinearFilter",
    "TrapezoidProfile",
    "Trajectory",
    "TrajectoryConfig",
    "TrajectoryGenerator"
]

# Add visualization to __all__ only if available
if _has_visualization:
    __all__.extend(["plot_trajectory", "plot_simulation_log"])
