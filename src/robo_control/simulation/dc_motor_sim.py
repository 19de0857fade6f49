"""
Rotational mechanism simulations.

DCMotorSim models a geared rotational load with no travel limits (a
turret, a drive wheel, an intake roller): the angle is continuous and is
never wrapped or clamped. FlywheelSim drops the angle and keeps only the
angular velocity.

Both share the elevator's input contract: the commanded voltage is clamped
to the battery voltage, and the current draw is derived from the same
voltage and motor speed that produced the torque.
"""

from typing import Optional, Sequence

import numpy as np

from .battery import BatteryVoltageSource
from .linear_system_sim import LinearSystemSim
from ..exceptions import require_positive
from ..math_util import sign
from ..system import DCMotor, LinearSystemId


class DCMotorSim(LinearSystemSim):
    """
    Simulated geared rotational load.

    Args:
        gearbox: Motors driving the load
        moi: Moment of inertia of the load [kg·m²]
        gearing: Reduction between motor and load
        measurement_std_devs: Noise on [angle, angular velocity]
        battery_voltage: Source of the available bus voltage
        seed: Seed for the measurement noise
    """

    def __init__(self,
                 gearbox: DCMotor,
                 moi: float,
                 gearing: float,
                 measurement_std_devs: Optional[Sequence[float]] = None,
                 battery_voltage: Optional[BatteryVoltageSource] = None,
                 seed: Optional[int] = None):
        super().__init__(LinearSystemId.create_dc_motor_system(gearbox, moi, gearing),
                         measurement_std_devs, battery_voltage, seed)
        self.gearbox = gearbox
        self.gearing = require_positive("Gearing", gearing)
        self.moi = moi

    def set_state(self, angular_position: float, angular_velocity: float = 0.0) -> None:
        super().set_state([angular_position, angular_velocity])

    def set_input_voltage(self, voltage: float) -> None:
        self.set_input([voltage])
        self._clamp_input(self.get_battery_voltage())

    def get_angular_position(self) -> float:
        """Load angle [rad]."""
        return float(self._x[0])

    def get_angular_velocity(self) -> float:
        """Load angular velocity [rad/s]."""
        return float(self._x[1])

    def get_angular_acceleration(self) -> float:
        """Instantaneous load angular acceleration for the held input [rad/s²]."""
        return float((self.plant.A @ self._x + self.plant.B @ self._u)[1])

    def get_torque(self) -> float:
        """Torque delivered to the load [N·m]."""
        return self.get_angular_acceleration() * self.moi

    def get_current_draw(self) -> float:
        """Gearbox current draw [A], positive while driving in either direction."""
        voltage = self.get_input(0)
        motor_velocity = self.get_angular_velocity() * self.gearing
        return self.gearbox.current(voltage, motor_velocity) * sign(voltage)


class FlywheelSim(LinearSystemSim):
    """
    Simulated flywheel (velocity-only rotational load).

    Args:
        gearbox: Motors driving the flywheel
        moi: Moment of inertia of the flywheel [kg·m²]
        gearing: Reduction between motor and flywheel
        measurement_std_dev: Noise on the angular velocity measurement
        battery_voltage: Source of the available bus voltage
        seed: Seed for the measurement noise
    """

    def __init__(self,
                 gearbox: DCMotor,
                 moi: float,
                 gearing: float,
                 measurement_std_dev: float = 0.0,
                 battery_voltage: Optional[BatteryVoltageSource] = None,
                 seed: Optional[int] = None):
        super().__init__(LinearSystemId.create_flywheel_system(gearbox, moi, gearing),
                         [measurement_std_dev], battery_voltage, seed)
        self.gearbox = gearbox
        self.gearing = require_positive("Gearing", gearing)

    def set_state(self, angular_velocity: float) -> None:
        super().set_state(np.array([angular_velocity]))

    def set_input_voltage(self, voltage: float) -> None:
        self.set_input([voltage])
        self._clamp_input(self.get_battery_voltage())

    def get_angular_velocity(self) -> float:
        return float(self._x[0])

    def get_current_draw(self) -> float:
        voltage = self.get_input(0)
        return self.gearbox.current(voltage, self.get_angular_velocity() * self.gearing) * sign(voltage)
