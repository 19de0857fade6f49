"""
Generic Linear System Simulation Module

This module wraps a LinearSystem plant into a stepped simulation with a
held input, an optional noisy measurement, and battery-limited voltage
inputs. Mechanism simulations (elevator, geared rotational load,
flywheel) derive from it and add their own state interpretation and
limit handling.

Simulation Model:
    x[k+1] = f(x[k], u[k], dt)          # exact ZOH step by default
    y[k]   = C x[k] + D u[k] + n[k]     # n ~ N(0, diag(σ²))

Time-stepping is driven entirely by the caller: the simulation never reads
a clock, and each update advances exactly one caller-chosen period.

Author: Scientific Computing Team
License: MIT
"""

import logging
import math
from typing import Optional, Sequence, Union

import numpy as np

from .battery import BatteryVoltageSource, constant_voltage
from ..exceptions import ConfigurationError
from ..system import LinearSystem

logger = logging.getLogger(__name__)


class LinearSystemSim:
    """
    Stepped simulation of a linear plant.

    Args:
        system: Plant to simulate
        measurement_std_devs: Standard deviation of the Gaussian noise added
            to each output. None or zeros disables noise.
        battery_voltage: Zero-argument callable returning the voltage
            available to the plant inputs. Defaults to a constant 12 V.
        seed: Seed for the measurement noise generator

    Attributes:
        plant (LinearSystem): The simulated plant
    """

    def __init__(self,
                 system: LinearSystem,
                 measurement_std_devs: Optional[Sequence[float]] = None,
                 battery_voltage: Optional[BatteryVoltageSource] = None,
                 seed: Optional[int] = None):
        self.plant = system

        if measurement_std_devs is None:
            self._measurement_std_devs = np.zeros(system.outputs)
        else:
            self._measurement_std_devs = np.asarray(measurement_std_devs, dtype=np.float64).reshape(-1)
            if self._measurement_std_devs.shape != (system.outputs,):
                raise ConfigurationError(
                    f"Expected {system.outputs} measurement standard deviations, "
                    f"got {self._measurement_std_devs.size}")
            if np.any(self._measurement_std_devs < 0):
                raise ConfigurationError("Measurement standard deviations must be non-negative")

        self._battery_voltage = battery_voltage if battery_voltage is not None else constant_voltage()
        self._rng = np.random.default_rng(seed)

        self._x = np.zeros(system.states)
        self._u = np.zeros(system.inputs)
        self._y = np.zeros(system.outputs)

    def update(self, dt: float) -> None:
        """
        Advance the simulation by ``dt`` seconds with the current input held.

        A non-positive or non-finite ``dt`` violates the caller contract;
        the step is skipped so the state is never corrupted.
        """
        if not (math.isfinite(dt) and dt > 0):
            logger.warning(f"Skipping simulation step with invalid dt={dt}")
            return

        self._x = self._update_x(self._x, self._u, dt)
        self._y = self.plant.calculate_y(self._x, self._u)

        if np.any(self._measurement_std_devs > 0):
            self._y = self._y + self._rng.normal(0.0, self._measurement_std_devs)

    def _update_x(self, current_x: np.ndarray, u: np.ndarray, dt: float) -> np.ndarray:
        """Next state after ``dt``; subclasses add disturbances and limits."""
        return self.plant.calculate_x(current_x, u, dt)

    def get_output(self, row: Optional[int] = None) -> Union[np.ndarray, float]:
        """Current (possibly noisy) plant output, or one element of it."""
        if row is None:
            return self._y.copy()
        return float(self._y[row])

    def get_input(self, row: Optional[int] = None) -> Union[np.ndarray, float]:
        if row is None:
            return self._u.copy()
        return float(self._u[row])

    def set_input(self, u: Sequence[float]) -> None:
        """Set the input vector without clamping."""
        self._u = np.asarray(u, dtype=np.float64).reshape(self.plant.inputs)

    def get_state(self) -> np.ndarray:
        return self._x.copy()

    def set_state(self, x: Sequence[float]) -> None:
        """Overwrite the state and refresh the noise-free output to match."""
        self._x = np.asarray(x, dtype=np.float64).reshape(self.plant.states)
        self._y = self.plant.calculate_y(self._x, self._u)

    def get_battery_voltage(self) -> float:
        return float(self._battery_voltage())

    def _clamp_input(self, max_input: float) -> None:
        """
        Desaturate the input vector to ``max_input``.

        If any element exceeds the bound, every element is scaled by the
        same factor so the relative magnitudes are maintained.
        """
        max_input = max(0.0, float(max_input))
        largest = float(np.max(np.abs(self._u))) if self._u.size else 0.0
        if largest > max_input:
            logger.debug(f"Input {self._u} desaturated to ±{max_input:.3f}")
            self._u = self._u * (max_input / largest)
