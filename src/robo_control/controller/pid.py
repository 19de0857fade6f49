"""
PID Feedback Controller Module

This module implements a discrete scalar PID controller intended to run
once per fixed control period.

Mathematical Model:
    e[k]  = r[k] - y[k]                     (or its wrapped equivalent)
    I[k]  = clamp(I[k-1] + e[k]·T, I_min/Ki, I_max/Ki)
    D[k]  = (e[k] - e[k-1]) / T
    u[k]  = Kp·e[k] + Ki·I[k] + Kd·D[k]

Continuous Input:
    For inputs whose domain wraps (headings, turret angles), the error is
    replaced by its equivalent in [-(max-min)/2, (max-min)/2], so the
    controller always turns the short way around.

Anti-windup:
    The integral contribution Ki·I is kept inside [I_min, I_max] (±1 by
    default), and the accumulator is cleared whenever |e| exceeds the
    integration zone.

The output is not clamped; actuator limits belong to the caller.

Author: Scientific Computing Team
License: MIT
"""

import logging
import math
from typing import Optional, Tuple

from ..exceptions import ConfigurationError, require_positive, require_non_negative
from ..math_util import clamp, input_modulus

logger = logging.getLogger(__name__)


class PIDController:
    """
    Scalar PID controller with continuous input and anti-windup.

    Changing gains with :meth:`set_pid` keeps the accumulated integral and
    derivative history, so gain scheduling does not discard integral
    action. :meth:`reset` clears the history and keeps the gains.

    Args:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        period: Control period [s]

    Raises:
        ConfigurationError: If a gain is negative or the period is not positive
    """

    def __init__(self, kp: float, ki: float, kd: float, period: float = 0.02):
        self.set_pid(kp, ki, kd)
        self._period = require_positive("Period", period)

        self._maximum_integral = 1.0
        self._minimum_integral = -1.0
        self._izone = math.inf

        self._continuous_range: Optional[Tuple[float, float]] = None

        # Unset until set_tolerance is called; at_setpoint is False until then
        self._error_tolerance: Optional[float] = None
        self._error_derivative_tolerance = math.inf

        self._setpoint = 0.0
        self._measurement = 0.0
        self._have_setpoint = False
        self._have_measurement = False

        self._error = 0.0
        self._prev_error = 0.0
        self._error_derivative = 0.0
        self._total_error = 0.0

    # Gains

    def set_pid(self, kp: float, ki: float, kd: float) -> None:
        """Replace all three gains without touching the accumulated state."""
        self._kp = require_non_negative("Kp", kp)
        self._ki = require_non_negative("Ki", ki)
        self._kd = require_non_negative("Kd", kd)

    @property
    def kp(self) -> float:
        return self._kp

    @property
    def ki(self) -> float:
        return self._ki

    @property
    def kd(self) -> float:
        return self._kd

    @property
    def period(self) -> float:
        return self._period

    def set_izone(self, izone: float) -> None:
        """
        Limit integration to |error| <= izone.

        Outside the zone the accumulator is cleared, which stops large
        setpoint steps from winding up the integral.
        """
        if izone < 0:
            raise ConfigurationError(f"IZone must be non-negative, got {izone}")
        self._izone = float(izone)

    def get_izone(self) -> float:
        return self._izone

    def set_integrator_range(self, minimum_integral: float, maximum_integral: float) -> None:
        """Bound the integral contribution Ki·I to [minimum, maximum]."""
        if minimum_integral > maximum_integral:
            raise ConfigurationError(
                f"Integrator range minimum {minimum_integral} exceeds maximum {maximum_integral}")
        self._minimum_integral = float(minimum_integral)
        self._maximum_integral = float(maximum_integral)

    # Setpoint and tolerance

    def set_setpoint(self, setpoint: float) -> None:
        self._setpoint = float(setpoint)
        self._have_setpoint = True
        self._error = self._compute_error(self._setpoint, self._measurement)
        self._error_derivative = (self._error - self._prev_error) / self._period

    def get_setpoint(self) -> float:
        return self._setpoint

    def set_tolerance(self, error_tolerance: float,
                      error_derivative_tolerance: float = math.inf) -> None:
        """Configure the window used by :meth:`at_setpoint`."""
        self._error_tolerance = require_non_negative("Error tolerance", error_tolerance)
        self._error_derivative_tolerance = require_non_negative(
            "Error derivative tolerance", error_derivative_tolerance)

    def get_error_tolerance(self) -> Optional[float]:
        return self._error_tolerance

    def get_error_derivative_tolerance(self) -> float:
        return self._error_derivative_tolerance

    def at_setpoint(self) -> bool:
        """
        True when the last error and its derivative are both inside tolerance.

        Always False before a tolerance has been configured or before the
        first measurement and setpoint have been seen.
        """
        if self._error_tolerance is None:
            return False
        return (self._have_measurement and self._have_setpoint
                and abs(self._error) <= self._error_tolerance
                and abs(self._error_derivative) <= self._error_derivative_tolerance)

    # Continuous input

    def enable_continuous_input(self, minimum_input: float, maximum_input: float) -> None:
        """Treat the measurement domain as wrapping between the two bounds."""
        if not minimum_input < maximum_input:
            raise ConfigurationError(
                f"Continuous input range [{minimum_input}, {maximum_input}] is empty")
        self._continuous_range = (float(minimum_input), float(maximum_input))

    def disable_continuous_input(self) -> None:
        self._continuous_range = None

    def is_continuous_input_enabled(self) -> bool:
        return self._continuous_range is not None

    # Errors

    def get_position_error(self) -> float:
        return self._error

    def get_velocity_error(self) -> float:
        """Rate of change of the error [units/s]."""
        return self._error_derivative

    def get_accumulated_error(self) -> float:
        return self._total_error

    def _compute_error(self, setpoint: float, measurement: float) -> float:
        if self._continuous_range is None:
            return setpoint - measurement
        minimum, maximum = self._continuous_range
        error_bound = (maximum - minimum) / 2.0
        return input_modulus(setpoint - measurement, -error_bound, error_bound)

    # Control

    def calculate(self, measurement: float, setpoint: Optional[float] = None) -> float:
        """
        Compute the controller output for one period.

        Args:
            measurement: Current process variable
            setpoint: New setpoint; keeps the previous setpoint when omitted

        Returns:
            Controller output
        """
        if setpoint is not None:
            self._setpoint = float(setpoint)
            self._have_setpoint = True
        self._measurement = float(measurement)
        self._have_measurement = True
        self._prev_error = self._error

        self._error = self._compute_error(self._setpoint, self._measurement)
        self._error_derivative = (self._error - self._prev_error) / self._period

        if abs(self._error) > self._izone:
            self._total_error = 0.0
        elif self._ki != 0:
            self._total_error = clamp(
                self._total_error + self._error * self._period,
                self._minimum_integral / self._ki,
                self._maximum_integral / self._ki,
            )

        return (self._kp * self._error
                + self._ki * self._total_error
                + self._kd * self._error_derivative)

    def reset(self) -> None:
        """Clear integral and derivative history; gains and setpoint are kept."""
        self._error = 0.0
        self._prev_error = 0.0
        self._total_error = 0.0
        self._error_derivative = 0.0
        self._have_measurement = False

    def __repr__(self) -> str:
        return f"PIDController(kp={self._kp}, ki={self._ki}, kd={self._kd}, period={self._period})"
