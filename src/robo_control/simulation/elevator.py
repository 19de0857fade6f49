"""
Elevator Subsystem Module

This module closes the loop around :class:`ElevatorSim`: a trapezoid
profile shapes the move to the goal height, a PID controller corrects the
tracking error, an elevator feedforward supplies the gravity and velocity
voltage, and a power bus feeds the loaded battery voltage back into the
simulation.

Control Law (every period T):
    r = profile(T, r_prev, goal)                  # profiled setpoint
    V = PID(h_measured, r.position) + FF(r.velocity)
    V = clamp(V, -V_bus, V_bus)

Electrical Loop:
    V_bus = max(0, 12 V - R_battery · I_elevator)

The subsystem is driven by two calls per period, mirroring a robot
program: ``reach_goal`` in the periodic control code and
``simulation_periodic`` in the simulation hook.

Author: Scientific Computing Team
License: MIT
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

import numpy as np

from .battery import PowerBus
from .elevator_sim import ElevatorSim
from ..controller import ElevatorFeedforward, PIDController
from ..exceptions import ConfigurationError, require_positive
from ..math_util import clamp
from ..system import DCMotor
from ..trajectory import TrapezoidProfile

logger = logging.getLogger(__name__)


@dataclass
class ElevatorConfig:
    """Mechanism, controller and profile constants with validation."""

    # Controller gains
    kp: float = 5.0
    ki: float = 0.0
    kd: float = 0.0

    # Feedforward gains
    ks: float = 0.0                    # [V]
    kg: float = 0.762                  # [V]
    kv: float = 0.762                  # [V/(m/s)]
    ka: float = 0.0                    # [V/(m/s²)]

    # Mechanism
    motor: str = "vex775pro"
    num_motors: int = 4
    gearing: float = 10.0
    drum_radius: float = 0.0508        # 2 in [m]
    carriage_mass: float = 4.0         # [kg]
    min_height: float = 0.0            # [m]
    max_height: float = 1.25           # [m]
    simulate_gravity: bool = True
    starting_height: float = 0.0       # [m]

    # Profile
    max_velocity: float = 2.45         # [m/s]
    max_acceleration: float = 2.45     # [m/s²]

    period: float = 0.020              # Loop period [s]
    encoder_pulses_per_revolution: int = 4096

    def __post_init__(self):
        """Validate subsystem configuration."""
        require_positive("Loop period", self.period)
        require_positive("Encoder resolution", self.encoder_pulses_per_revolution)

    @property
    def encoder_distance_per_pulse(self) -> float:
        """Carriage travel per encoder pulse [m]."""
        return 2.0 * np.pi * self.drum_radius / self.encoder_pulses_per_revolution


@dataclass
class SimulationLog:
    """Time series recorded once per simulation period."""

    time: List[float] = field(default_factory=list)
    position: List[float] = field(default_factory=list)
    velocity: List[float] = field(default_factory=list)
    setpoint: List[float] = field(default_factory=list)
    voltage: List[float] = field(default_factory=list)
    current: List[float] = field(default_factory=list)
    bus_voltage: List[float] = field(default_factory=list)

    def append(self, time: float, position: float, velocity: float, setpoint: float,
               voltage: float, current: float, bus_voltage: float) -> None:
        self.time.append(time)
        self.position.append(position)
        self.velocity.append(velocity)
        self.setpoint.append(setpoint)
        self.voltage.append(voltage)
        self.current.append(current)
        self.bus_voltage.append(bus_voltage)

    def clear(self) -> None:
        for series in fields(self):
            getattr(self, series.name).clear()

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Export every series as a numpy array."""
        return {
            'time': np.array(self.time),
            'position': np.array(self.position),
            'velocity': np.array(self.velocity),
            'setpoint': np.array(self.setpoint),
            'voltage': np.array(self.voltage),
            'current': np.array(self.current),
            'bus_voltage': np.array(self.bus_voltage),
        }

    def __len__(self) -> int:
        return len(self.time)


class Elevator:
    """
    Closed-loop elevator subsystem running on a simulated battery bus.

    Args:
        config: Subsystem constants; defaults describe a 4-motor 775pro
            elevator with a 10:1 reduction
        bus: Power bus shared with other mechanisms; a private 12 V bus
            is created if omitted

    Raises:
        ConfigurationError: If the motor preset is unknown or any constant
            is non-physical
    """

    def __init__(self, config: Optional[ElevatorConfig] = None, bus: Optional[PowerBus] = None):
        self.config = config if config is not None else ElevatorConfig()
        self.bus = bus if bus is not None else PowerBus()

        gearbox = DCMotor.from_name(self.config.motor, self.config.num_motors)
        if gearbox is None:
            raise ConfigurationError(f"Unknown motor preset: {self.config.motor}")
        self.gearbox = gearbox

        self.sim = ElevatorSim(
            gearbox,
            self.config.gearing,
            self.config.carriage_mass,
            self.config.drum_radius,
            self.config.min_height,
            self.config.max_height,
            self.config.simulate_gravity,
            self.config.starting_height,
            battery_voltage=self.bus,
        )
        self.controller = PIDController(self.config.kp, self.config.ki, self.config.kd,
                                        self.config.period)
        self.feedforward = ElevatorFeedforward(self.config.ks, self.config.kg, self.config.kv,
                                               self.config.ka, self.config.period)
        self.profile = TrapezoidProfile(
            TrapezoidProfile.Constraints(self.config.max_velocity, self.config.max_acceleration))

        self.log = SimulationLog()
        self._setpoint = TrapezoidProfile.State(self.sim.get_position(), 0.0)
        self._encoder_distance = self.sim.get_position()
        self._motor_voltage = 0.0
        self._time = 0.0

        logger.info(f"Elevator created: {self.config.num_motors}x {self.config.motor}, "
                    f"gearing {self.config.gearing}, travel "
                    f"[{self.config.min_height}, {self.config.max_height}] m")

    def reach_goal(self, goal: float) -> float:
        """
        Compute and latch the motor voltage that moves the carriage toward ``goal``.

        Args:
            goal: Goal height [m]

        Returns:
            Commanded voltage [V], clamped to the bus voltage
        """
        goal_state = TrapezoidProfile.State(goal, 0.0)
        self._setpoint = self.profile.calculate(self.config.period, self._setpoint, goal_state)

        pid_output = self.controller.calculate(self._encoder_distance, self._setpoint.position)
        feedforward_output = self.feedforward.calculate(self._setpoint.velocity)

        bus_voltage = self.bus.get_vin_voltage()
        self._motor_voltage = clamp(pid_output + feedforward_output, -bus_voltage, bus_voltage)
        return self._motor_voltage

    def simulation_periodic(self) -> None:
        """Advance the mechanism by one period and update the bus voltage."""
        self.sim.set_input_voltage(self._motor_voltage)
        self.sim.update(self.config.period)
        self._time += self.config.period

        self._encoder_distance = self._quantize(self.sim.get_position())
        current = self.sim.get_current_draw()
        bus_voltage = self.bus.apply_load([current])

        self.log.append(self._time, self._encoder_distance, self.sim.get_velocity(),
                        self._setpoint.position, self.sim.get_input(0), current, bus_voltage)

    def stop(self) -> None:
        """Zero the motor voltage and restart the profile from the current height."""
        self.controller.reset()
        self._motor_voltage = 0.0
        self.sim.set_input_voltage(0.0)
        self._setpoint = TrapezoidProfile.State(self._encoder_distance, 0.0)
        logger.info(f"Elevator stopped at {self._encoder_distance:.3f} m")

    def run(self, goal: float, duration: float) -> SimulationLog:
        """
        Drive toward ``goal`` for ``duration`` seconds of simulated time.

        Returns:
            The subsystem's log, including the new samples
        """
        require_positive("Duration", duration)
        steps = int(round(duration / self.config.period))
        for _ in range(steps):
            self.reach_goal(goal)
            self.simulation_periodic()

        logger.info(f"Elevator run finished: t={self._time:.2f}s, "
                    f"height {self.get_position():.3f} m (goal {goal:.3f} m)")
        return self.log

    def _quantize(self, position: float) -> float:
        distance_per_pulse = self.config.encoder_distance_per_pulse
        return round(position / distance_per_pulse) * distance_per_pulse

    def get_position(self) -> float:
        """Encoder-measured carriage height [m]."""
        return self._encoder_distance

    def get_velocity(self) -> float:
        return self.sim.get_velocity()

    def get_current_draw(self) -> float:
        return self.sim.get_current_draw()

    def get_battery_voltage(self) -> float:
        return self.bus.get_vin_voltage()

    def get_motor_voltage(self) -> float:
        return self._motor_voltage

    def get_setpoint(self) -> TrapezoidProfile.State:
        return self._setpoint

    def has_hit_lower_limit(self) -> bool:
        return self.sim.has_hit_lower_limit()

    def has_hit_upper_limit(self) -> bool:
        return self.sim.has_hit_upper_limit()

    def __repr__(self) -> str:
        return (f"Elevator(t={self._time:.2f}s, height={self._encoder_distance:.3f}m, "
                f"bus={self.bus.get_vin_voltage():.2f}V)")
