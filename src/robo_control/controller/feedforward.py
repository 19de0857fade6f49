"""
Feedforward Voltage Models

This module implements closed-form voltage predictors for permanent-magnet
DC motor mechanisms. Given a desired velocity (and optionally acceleration),
each model returns the voltage that would produce it on an ideal plant.

Mathematical Model:
    V = kS·sgn(v) + kG·g(x) + kV·v + kA·a

    kS: static (Coulomb) friction, only in the direction of motion and zero
        at exactly zero velocity
    kG: gravity bias; constant for an elevator, kG·cos(θ) for an arm
    kV: back-EMF / viscous velocity gain
    kA: inertial acceleration gain

Discrete Plant Inversion:
    With kA > 0 the velocity dynamics are v̇ = -kV/kA·v + 1/kA·u, whose
    exact discretization over the control period T is

        v[k+1] = A_d v[k] + B_d u[k],   A_d = e^(-kV/kA·T),
        B_d = (A_d - 1)/(-kV/kA) · 1/kA

    so the voltage that moves the plant from v[k] to v[k+1] in one period is
    u = (v[k+1] - A_d v[k]) / B_d.

Author: Scientific Computing Team
License: MIT
"""

import math

from ..exceptions import require_non_negative, require_positive
from ..math_util import sign


class SimpleMotorFeedforward:
    """
    Feedforward for a mechanism with no gravity load (flywheel, drivetrain).

    Args:
        ks: Static gain [V]
        kv: Velocity gain [V/(unit/s)]
        ka: Acceleration gain [V/(unit/s²)]
        dt: Control period used by :meth:`calculate_with_velocities` [s]

    Raises:
        ConfigurationError: If kv or ka is negative or dt is not positive
    """

    def __init__(self, ks: float, kv: float, ka: float = 0.0, dt: float = 0.02):
        self.ks = float(ks)
        self.kv = require_non_negative("kV", kv)
        self.ka = require_non_negative("kA", ka)
        self.dt = require_positive("Period", dt)

    def _bias(self, velocity: float) -> float:
        """Velocity-independent part of the voltage."""
        return self.ks * sign(velocity)

    def calculate(self, velocity: float, acceleration: float = 0.0) -> float:
        """
        Voltage for the given velocity and acceleration setpoint.

        Args:
            velocity: Velocity setpoint
            acceleration: Acceleration setpoint; 0 if omitted

        Returns:
            Feedforward voltage [V]
        """
        return self._bias(velocity) + self.kv * velocity + self.ka * acceleration

    def calculate_with_velocities(self, current_velocity: float, next_velocity: float) -> float:
        """Voltage that carries the plant from ``current_velocity`` to ``next_velocity`` in one period."""
        if self.ka == 0:
            return self._bias(next_velocity) + self.kv * next_velocity

        if self.kv == 0:
            a_d = 1.0
            b_d = self.dt / self.ka
        else:
            a = -self.kv / self.ka
            a_d = math.exp(a * self.dt)
            b_d = (a_d - 1.0) / a / self.ka

        return self._bias(current_velocity) + (next_velocity - a_d * current_velocity) / b_d

    def max_achievable_velocity(self, max_voltage: float, acceleration: float) -> float:
        """Fastest steady velocity reachable with ``max_voltage`` while accelerating at ``acceleration``."""
        if self.kv == 0:
            return math.inf
        return (max_voltage - self._bias(1.0) - self.ka * acceleration) / self.kv

    def min_achievable_velocity(self, max_voltage: float, acceleration: float) -> float:
        if self.kv == 0:
            return -math.inf
        return (-max_voltage - self._bias(-1.0) - self.ka * acceleration) / self.kv

    def max_achievable_acceleration(self, max_voltage: float, velocity: float) -> float:
        if self.ka == 0:
            return math.inf
        return (max_voltage - self._bias(velocity) - self.kv * velocity) / self.ka

    def min_achievable_acceleration(self, max_voltage: float, velocity: float) -> float:
        return self.max_achievable_acceleration(-max_voltage, velocity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ks={self.ks}, kv={self.kv}, ka={self.ka})"


class ElevatorFeedforward(SimpleMotorFeedforward):
    """
    Feedforward for an elevator: a constant gravity bias on top of the
    simple motor model.

    Args:
        ks: Static gain [V]
        kg: Gravity gain [V]
        kv: Velocity gain [V/(m/s)]
        ka: Acceleration gain [V/(m/s²)]
        dt: Control period [s]
    """

    def __init__(self, ks: float, kg: float, kv: float, ka: float = 0.0, dt: float = 0.02):
        super().__init__(ks, kv, ka, dt)
        self.kg = float(kg)

    def _bias(self, velocity: float) -> float:
        return self.ks * sign(velocity) + self.kg

    def __repr__(self) -> str:
        return f"ElevatorFeedforward(ks={self.ks}, kg={self.kg}, kv={self.kv}, ka={self.ka})"


class ArmFeedforward:
    """
    Feedforward for a single jointed arm, where the gravity torque varies
    with the cosine of the arm angle (0 rad = horizontal).

    Args:
        ks: Static gain [V]
        kg: Gravity gain at horizontal [V]
        kv: Velocity gain [V/(rad/s)]
        ka: Acceleration gain [V/(rad/s²)]
        dt: Control period [s]
    """

    def __init__(self, ks: float, kg: float, kv: float, ka: float = 0.0, dt: float = 0.02):
        self.ks = float(ks)
        self.kg = float(kg)
        self.kv = require_non_negative("kV", kv)
        self.ka = require_non_negative("kA", ka)
        self.dt = require_positive("Period", dt)

    def calculate(self, angle: float, velocity: float, acceleration: float = 0.0) -> float:
        """
        Mathematical Model:
            V = kS·sgn(ω) + kG·cos(θ) + kV·ω + kA·α
        """
        return (self.ks * sign(velocity) + self.kg * math.cos(angle)
                + self.kv * velocity + self.ka * acceleration)

    def max_achievable_velocity(self, max_voltage: float, angle: float, acceleration: float) -> float:
        if self.kv == 0:
            return math.inf
        return (max_voltage - self.ks - self.kg * math.cos(angle) - self.ka * acceleration) / self.kv

    def min_achievable_velocity(self, max_voltage: float, angle: float, acceleration: float) -> float:
        if self.kv == 0:
            return -math.inf
        return (-max_voltage + self.ks - self.kg * math.cos(angle) - self.ka * acceleration) / self.kv

    def max_achievable_acceleration(self, max_voltage: float, angle: float, velocity: float) -> float:
        if self.ka == 0:
            return math.inf
        return (max_voltage - self.ks * sign(velocity) - self.kg * math.cos(angle)
                - self.kv * velocity) / self.ka

    def min_achievable_acceleration(self, max_voltage: float, angle: float, velocity: float) -> float:
        return self.max_achievable_acceleration(-max_voltage, angle, velocity)
