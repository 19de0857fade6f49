"""
Electrical bus simulation.

The mechanism simulations clamp their input voltage to whatever the
battery can currently deliver. The battery voltage is supplied by a
zero-argument callable so the bus model stays outside the mechanism: a
PowerBus instance is one such callable, a plain ``lambda: 12.0`` is another.

Physical Model:
    V_loaded = max(0, V_nominal - R_internal · ΣI)
"""

import logging
from typing import Callable, Iterable

from ..exceptions import require_non_negative, require_positive

logger = logging.getLogger(__name__)

NOMINAL_BATTERY_VOLTAGE = 12.0
DEFAULT_BATTERY_RESISTANCE = 0.020

BatteryVoltageSource = Callable[[], float]


def constant_voltage(voltage: float = NOMINAL_BATTERY_VOLTAGE) -> BatteryVoltageSource:
    """Battery-voltage source that always reports ``voltage``."""
    voltage = require_non_negative("Battery voltage", voltage)
    return lambda: voltage


class BatterySim:
    """Loaded-battery voltage model."""

    @staticmethod
    def calculate(currents: Iterable[float],
                  nominal_voltage: float = NOMINAL_BATTERY_VOLTAGE,
                  resistance: float = DEFAULT_BATTERY_RESISTANCE) -> float:
        """
        Battery terminal voltage under load.

        Args:
            currents: Currents drawn by every load on the bus [A]
            nominal_voltage: Unloaded battery voltage [V]
            resistance: Internal resistance of the battery [Ω]

        Returns:
            Terminal voltage [V], never negative
        """
        return max(0.0, nominal_voltage - sum(currents) * resistance)


class PowerBus:
    """
    Mutable holder of the bus input voltage.

    A control loop writes the loaded battery voltage here once per period
    and every mechanism simulation sharing the bus reads it when its input
    voltage is set.

    Args:
        vin_voltage: Initial bus voltage [V]
    """

    def __init__(self, vin_voltage: float = NOMINAL_BATTERY_VOLTAGE):
        self._vin_voltage = require_non_negative("Bus voltage", vin_voltage)

    def set_vin_voltage(self, voltage: float) -> None:
        if voltage < 0:
            logger.debug(f"Bus voltage {voltage:.3f} V clamped to 0 V")
            voltage = 0.0
        self._vin_voltage = float(voltage)

    def get_vin_voltage(self) -> float:
        return self._vin_voltage

    def apply_load(self, currents: Iterable[float],
                   nominal_voltage: float = NOMINAL_BATTERY_VOLTAGE,
                   resistance: float = DEFAULT_BATTERY_RESISTANCE) -> float:
        """Set the bus to the loaded battery voltage for ``currents`` and return it."""
        require_positive("Nominal voltage", nominal_voltage)
        self.set_vin_voltage(BatterySim.calculate(currents, nominal_voltage, resistance))
        return self._vin_voltage

    def __call__(self) -> float:
        return self._vin_voltage

    def __repr__(self) -> str:
        return f"PowerBus(vin={self._vin_voltage:.3f}V)"
