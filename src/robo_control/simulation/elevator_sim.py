"""
Elevator Simulation Module

This module simulates a carriage raised by a motor-driven drum, the
canonical linear mechanism with hard travel limits and a constant gravity
load.

Mathematical Framework:
    State x = [h, v] (height [m], velocity [m/s]), input u = [V].

    ḣ = v
    v̇ = G Kt / (R r m) · V - G² Kt / (R r² m Kv) · v - g·[gravity enabled]

    The step is computed with the exact zero-order-hold discretization of
    the affine system, so settling and steady-state speed do not depend on
    the step size.

Limit Handling:
    After each step the height is compared against [min, max]. A step that
    would carry the carriage past a bound ends exactly at the bound with
    zero velocity: the hard stop dissipates the kinetic energy. The
    corresponding limit flag stays true while the carriage rests on the
    bound.

Author: Scientific Computing Team
License: MIT
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .battery import BatteryVoltageSource
from .linear_system_sim import LinearSystemSim
from ..exceptions import ConfigurationError, require_positive, require_non_negative
from ..math_util import sign
from ..system import DCMotor, LinearSystemId

logger = logging.getLogger(__name__)

GRAVITY = 9.8  # [m/s²]


@dataclass
class ElevatorParameters:
    """Physical parameters of an elevator mechanism with validation."""

    gearing: float = 10.0              # Motor rotations per drum rotation [1]
    carriage_mass: float = 4.0         # Moving mass [kg]
    drum_radius: float = 0.0508        # Drum radius [m]
    min_height: float = 0.0            # Lower travel limit [m]
    max_height: float = 1.25           # Upper travel limit [m]
    simulate_gravity: bool = True      # Apply a constant -g acceleration
    starting_height: float = 0.0       # Initial carriage height [m]
    measurement_std_dev: float = 0.0   # Position measurement noise [m]

    def __post_init__(self):
        """Validate elevator parameters."""
        require_positive("Gearing", self.gearing)
        require_positive("Carriage mass", self.carriage_mass)
        require_positive("Drum radius", self.drum_radius)
        require_non_negative("Measurement standard deviation", self.measurement_std_dev)
        if not self.min_height < self.max_height:
            raise ConfigurationError(
                f"Minimum height {self.min_height} must be below maximum height {self.max_height}")


class ElevatorSim(LinearSystemSim):
    """
    Simulated elevator with voltage clamping and hard travel limits.

    Args:
        gearbox: Motors driving the drum (already count-scaled)
        gearing: Reduction between motor and drum
        carriage_mass: Moving mass [kg]
        drum_radius: Drum radius [m]
        min_height: Lower travel limit [m]
        max_height: Upper travel limit [m]
        simulate_gravity: Whether gravity pulls the carriage down
        starting_height: Initial height [m]; clamped into the limits
        measurement_std_dev: Standard deviation of the position measurement [m]
        battery_voltage: Source of the available bus voltage
        seed: Seed for the measurement noise

    Raises:
        ConfigurationError: If any physical parameter is non-positive or the
            limits are inverted
    """

    def __init__(self,
                 gearbox: DCMotor,
                 gearing: float,
                 carriage_mass: float,
                 drum_radius: float,
                 min_height: float,
                 max_height: float,
                 simulate_gravity: bool,
                 starting_height: float,
                 measurement_std_dev: float = 0.0,
                 battery_voltage: Optional[BatteryVoltageSource] = None,
                 seed: Optional[int] = None):
        params = ElevatorParameters(gearing, carriage_mass, drum_radius, min_height,
                                    max_height, simulate_gravity, starting_height,
                                    measurement_std_dev)
        super().__init__(
            LinearSystemId.create_elevator_system(gearbox, params.carriage_mass,
                                                  params.drum_radius, params.gearing),
            [params.measurement_std_dev],
            battery_voltage,
            seed,
        )
        self.gearbox = gearbox
        self.params = params
        self._gravity = np.array([0.0, -GRAVITY]) if params.simulate_gravity else None

        self.set_state(starting_height, 0.0)

    @classmethod
    def from_parameters(cls,
                        gearbox: DCMotor,
                        params: ElevatorParameters,
                        battery_voltage: Optional[BatteryVoltageSource] = None,
                        seed: Optional[int] = None) -> "ElevatorSim":
        return cls(gearbox, params.gearing, params.carriage_mass, params.drum_radius,
                   params.min_height, params.max_height, params.simulate_gravity,
                   params.starting_height, params.measurement_std_dev, battery_voltage, seed)

    def set_state(self, position: float, velocity: float = 0.0) -> None:
        """
        Overwrite position and velocity.

        The position is still clamped into the travel limits; a clamped
        position also zeroes the velocity.
        """
        clamped = min(max(position, self.params.min_height), self.params.max_height)
        if clamped != position:
            warnings.warn(f"Elevator position {position:.3f} m outside limits "
                          f"[{self.params.min_height}, {self.params.max_height}], clamped")
            velocity = 0.0
        super().set_state([clamped, velocity])

    def set_input_voltage(self, voltage: float) -> None:
        """Command a motor voltage, clamped to ± the current battery voltage."""
        self.set_input([voltage])
        self._clamp_input(self.get_battery_voltage())

    def would_hit_lower_limit(self, position: float) -> bool:
        return position <= self.params.min_height

    def would_hit_upper_limit(self, position: float) -> bool:
        return position >= self.params.max_height

    def has_hit_lower_limit(self) -> bool:
        return self.would_hit_lower_limit(self.get_position())

    def has_hit_upper_limit(self) -> bool:
        return self.would_hit_upper_limit(self.get_position())

    def get_position(self) -> float:
        """Carriage height [m] (noise-free)."""
        return float(self._x[0])

    def get_velocity(self) -> float:
        """Carriage velocity [m/s]."""
        return float(self._x[1])

    def get_current_draw(self) -> float:
        """
        Current drawn from the bus by the gearbox [A].

        Uses the same applied voltage and motor speed as the torque in the
        last step. The sign is flipped with the applied voltage so the draw
        is positive whenever the motors are driven in either direction.

        Mathematical Model:
            ω_motor = v G / r
            I = (V - ω_motor / Kv) / R · sgn(V)
        """
        motor_velocity = self.get_velocity() * self.params.gearing / self.params.drum_radius
        voltage = self.get_input(0)
        return self.gearbox.current(voltage, motor_velocity) * sign(voltage)

    def _update_x(self, current_x: np.ndarray, u: np.ndarray, dt: float) -> np.ndarray:
        updated = self.plant.calculate_x(current_x, u, dt, self._gravity)

        if self.would_hit_lower_limit(updated[0]):
            if not self.would_hit_lower_limit(current_x[0]):
                logger.debug(f"Elevator reached lower limit {self.params.min_height} m")
            return np.array([self.params.min_height, 0.0])
        if self.would_hit_upper_limit(updated[0]):
            if not self.would_hit_upper_limit(current_x[0]):
                logger.debug(f"Elevator reached upper limit {self.params.max_height} m")
            return np.array([self.params.max_height, 0.0])
        return updated

    def __repr__(self) -> str:
        return (f"ElevatorSim(height={self.get_position():.3f}m, "
                f"velocity={self.get_velocity():.3f}m/s)")
