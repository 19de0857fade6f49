"""
DC Motor Model Module

This module implements the steady-state electrical/mechanical model of a
brushed (or brushless, commutated) DC motor, and of gearboxes built from
several identical motors driving a common shaft.

Physical Model:
    V = I·R + ω/Kv                    # Armature voltage balance
    τ = Kt·I                           # Torque from current

    with constants derived from the datasheet characterization:
    R  = V_nominal / I_stall
    Kv = ω_free / (V_nominal - R·I_free)   # free current models friction losses
    Kt = τ_stall / I_stall

Gearbox Combination:
    N identical motors in parallel multiply stall torque, stall current and
    free current by N (so resistance divides by N); free speed and nominal
    voltage are unchanged.

Author: Scientific Computing Team
License: MIT
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..exceptions import ConfigurationError, require_positive, require_non_negative

logger = logging.getLogger(__name__)


def rpm_to_radians_per_second(rpm: float) -> float:
    return rpm * 2.0 * math.pi / 60.0


# name: (nominal voltage [V], stall torque [N·m], stall current [A], free current [A], free speed [rpm])
_PRESETS: Dict[str, Tuple[float, float, float, float, float]] = {
    "cim": (12.0, 2.42, 133.0, 2.7, 5310.0),
    "minicim": (12.0, 1.41, 89.0, 3.0, 5840.0),
    "bag": (12.0, 0.43, 53.0, 1.8, 13180.0),
    "vex775pro": (12.0, 0.71, 134.0, 0.7, 18730.0),
    "rs775125": (12.0, 0.28, 18.0, 1.6, 5800.0),
    "banebots775": (12.0, 0.72, 97.0, 2.7, 13050.0),
    "andymark9015": (12.0, 0.36, 71.0, 3.7, 14270.0),
    "banebots550": (12.0, 0.38, 84.0, 0.4, 19000.0),
    "neo": (12.0, 2.6, 105.0, 1.8, 5676.0),
    "neo550": (12.0, 0.97, 100.0, 1.4, 11000.0),
    "falcon500": (12.0, 4.69, 257.0, 1.5, 6380.0),
    "krakenx60": (12.0, 7.09, 366.0, 2.0, 6000.0),
    "neovortex": (12.0, 3.60, 211.0, 3.6, 6784.0),
    "romibuiltin": (4.5, 0.1765, 1.25, 0.13, 150.0),
}


def _normalize_preset_name(name: str) -> str:
    return name.lower().replace("_", "").replace("-", "").replace(" ", "")


@dataclass(frozen=True)
class DCMotor:
    """
    Immutable DC motor (or gearbox of identical motors) characterization.

    Attributes:
        nominal_voltage: Voltage at which the datasheet was measured [V]
        stall_torque: Torque at zero speed and nominal voltage [N·m]
        stall_current: Current at zero speed and nominal voltage [A]
        free_current: Current at free speed with no load [A]
        free_speed: Unloaded angular velocity at nominal voltage [rad/s]
        num_motors: Number of identical motors in the gearbox
        resistance: Armature resistance (derived) [Ω]
        kv: Velocity constant (derived) [rad/s per V]
        kt: Torque constant (derived) [N·m per A]

    The torque, stall current and free current fields hold gearbox totals,
    i.e. the per-motor values multiplied by ``num_motors``.
    """

    nominal_voltage: float
    stall_torque: float
    stall_current: float
    free_current: float
    free_speed: float
    num_motors: int = 1
    resistance: float = field(init=False)
    kv: float = field(init=False)
    kt: float = field(init=False)

    def __post_init__(self):
        """Validate the characterization and derive the motor constants."""
        require_positive("Nominal voltage", self.nominal_voltage)
        require_positive("Stall torque", self.stall_torque)
        require_positive("Stall current", self.stall_current)
        require_non_negative("Free current", self.free_current)
        require_positive("Free speed", self.free_speed)
        if int(self.num_motors) != self.num_motors or self.num_motors < 1:
            raise ConfigurationError(f"Motor count must be a positive integer, got {self.num_motors}")

        n = int(self.num_motors)
        object.__setattr__(self, "num_motors", n)
        object.__setattr__(self, "stall_torque", self.stall_torque * n)
        object.__setattr__(self, "stall_current", self.stall_current * n)
        object.__setattr__(self, "free_current", self.free_current * n)

        resistance = self.nominal_voltage / self.stall_current
        back_emf_at_free_speed = self.nominal_voltage - resistance * self.free_current
        if back_emf_at_free_speed <= 0:
            raise ConfigurationError(
                "Free current is too large for the stall current: "
                f"R·I_free = {resistance * self.free_current:.3f} V >= {self.nominal_voltage} V"
            )

        object.__setattr__(self, "resistance", resistance)
        object.__setattr__(self, "kv", self.free_speed / back_emf_at_free_speed)
        object.__setattr__(self, "kt", self.stall_torque / self.stall_current)

    def current(self, voltage: float, angular_velocity: float) -> float:
        """
        Current drawn at the given input voltage and shaft speed.

        Args:
            voltage: Applied voltage [V]
            angular_velocity: Shaft angular velocity [rad/s]

        Returns:
            Current [A]; negative when the motor is back-driven

        Mathematical Model:
            I = (V - ω/Kv) / R
        """
        return (voltage - angular_velocity / self.kv) / self.resistance

    def torque_for_current(self, current: float) -> float:
        """Shaft torque produced by ``current`` [N·m]."""
        return self.kt * current

    def torque(self, voltage: float, angular_velocity: float) -> float:
        """
        Shaft torque at the given input voltage and shaft speed.

        At nominal voltage and zero speed this is the stall torque; at
        nominal voltage and free speed only the friction torque
        ``Kt·I_free`` remains.
        """
        return self.torque_for_current(self.current(voltage, angular_velocity))

    def voltage(self, torque: float, angular_velocity: float) -> float:
        """Voltage needed to hold ``torque`` at ``angular_velocity`` [V]."""
        return angular_velocity / self.kv + self.resistance * torque / self.kt

    def speed(self, torque: float, voltage: float) -> float:
        """Shaft speed at which ``voltage`` produces exactly ``torque`` [rad/s]."""
        return voltage * self.kv - self.resistance * self.kv * torque / self.kt

    def with_reduction(self, gearbox_reduction: float) -> "DCMotor":
        """
        The same gearbox seen through an additional reduction.

        Output torque is multiplied and output free speed divided by the
        reduction; the electrical characteristics and the motor count are
        unchanged.
        """
        reduction = require_positive("Gearbox reduction", gearbox_reduction)
        n = self.num_motors
        return DCMotor(
            self.nominal_voltage,
            self.stall_torque / n * reduction,
            self.stall_current / n,
            self.free_current / n,
            self.free_speed / reduction,
            n,
        )

    @classmethod
    def from_name(cls, name: str, num_motors: int = 1) -> Optional["DCMotor"]:
        """
        Look up a named motor preset.

        Names are matched case-insensitively, ignoring underscores, dashes
        and spaces, so ``"vex775Pro"``, ``"VEX_775_PRO"`` and ``"vex775pro"``
        are the same preset.

        Returns:
            Configured motor, or None if no preset has that name
        """
        preset = _PRESETS.get(_normalize_preset_name(name))
        if preset is None:
            logger.warning(f"Unknown motor preset '{name}'")
            return None
        voltage, stall_torque, stall_current, free_current, free_speed_rpm = preset
        return cls(voltage, stall_torque, stall_current, free_current,
                   rpm_to_radians_per_second(free_speed_rpm), num_motors)

    @staticmethod
    def preset_names() -> Tuple[str, ...]:
        return tuple(_PRESETS)

    @classmethod
    def cim(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("cim", num_motors)

    @classmethod
    def mini_cim(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("minicim", num_motors)

    @classmethod
    def bag(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("bag", num_motors)

    @classmethod
    def vex775pro(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("vex775pro", num_motors)

    @classmethod
    def rs775_125(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("rs775125", num_motors)

    @classmethod
    def banebots_775(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("banebots775", num_motors)

    @classmethod
    def andymark_9015(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("andymark9015", num_motors)

    @classmethod
    def banebots_550(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("banebots550", num_motors)

    @classmethod
    def neo(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("neo", num_motors)

    @classmethod
    def neo550(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("neo550", num_motors)

    @classmethod
    def falcon500(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("falcon500", num_motors)

    @classmethod
    def kraken_x60(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("krakenx60", num_motors)

    @classmethod
    def neo_vortex(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("neovortex", num_motors)

    @classmethod
    def romi_builtin(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_name("romibuiltin", num_motors)
