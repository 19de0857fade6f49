"""
Linear State-Space Plant Module

This module implements continuous-time linear time-invariant plants and
their exact discretization, plus factory functions that build the plants of
common motor-driven mechanisms from a DCMotor characterization.

Mathematical Framework:
    Continuous dynamics:   ẋ = A x + B u + d
    Output equation:       y = C x + D u

    Zero-order-hold discretization over a step T (u and d held constant):

        exp([[A, B], [0, 0]] T) = [[A_d, B_d], [0, I]]

        x[k+1] = A_d x[k] + B_d u[k]

    A constant disturbance d (e.g. gravity) is folded in as an extra input
    column with a fixed value of 1, so it is integrated exactly as well.

Author: Scientific Computing Team
License: MIT
"""

import logging
from typing import Dict, Optional, Tuple

import numpy as np
import scipy.linalg

from .dc_motor import DCMotor
from ..exceptions import ConfigurationError, require_positive

logger = logging.getLogger(__name__)


def discretize_ab(A: np.ndarray, B: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Discretize a continuous (A, B) pair with a zero-order hold.

    Args:
        A: Continuous system matrix (n x n)
        B: Continuous input matrix (n x m)
        dt: Discretization timestep [s]

    Returns:
        Tuple of (A_d, B_d)
    """
    states = A.shape[0]
    inputs = B.shape[1]

    M = np.zeros((states + inputs, states + inputs))
    M[:states, :states] = A
    M[:states, states:] = B

    phi = scipy.linalg.expm(M * dt)
    return phi[:states, :states], phi[:states, states:]


class LinearSystem:
    """
    Continuous-time linear plant with exact discrete stepping.

    Args:
        A: System matrix (states x states)
        B: Input matrix (states x inputs)
        C: Output matrix (outputs x states)
        D: Feedthrough matrix (outputs x inputs)

    Raises:
        ConfigurationError: If the matrix dimensions are inconsistent or
            contain non-finite entries
    """

    def __init__(self, A: np.ndarray, B: np.ndarray, C: np.ndarray, D: np.ndarray):
        self.A = np.atleast_2d(np.asarray(A, dtype=np.float64))
        self.B = np.atleast_2d(np.asarray(B, dtype=np.float64))
        self.C = np.atleast_2d(np.asarray(C, dtype=np.float64))
        self.D = np.atleast_2d(np.asarray(D, dtype=np.float64))

        states = self.A.shape[0]
        if self.A.shape != (states, states):
            raise ConfigurationError(f"A must be square, got shape {self.A.shape}")
        if self.B.shape[0] != states:
            raise ConfigurationError(f"B must have {states} rows, got shape {self.B.shape}")
        if self.C.shape[1] != states:
            raise ConfigurationError(f"C must have {states} columns, got shape {self.C.shape}")
        if self.D.shape != (self.C.shape[0], self.B.shape[1]):
            raise ConfigurationError(
                f"D must have shape {(self.C.shape[0], self.B.shape[1])}, got {self.D.shape}")
        for name, matrix in (("A", self.A), ("B", self.B), ("C", self.C), ("D", self.D)):
            if not np.all(np.isfinite(matrix)):
                raise ConfigurationError(f"{name} contains non-finite entries")

        # Discretizations keyed by (dt, disturbance); the control period is
        # normally fixed so this stays tiny
        self._discrete_cache: Dict[Tuple[float, Optional[bytes]], Tuple[np.ndarray, np.ndarray]] = {}

    @property
    def states(self) -> int:
        return self.A.shape[0]

    @property
    def inputs(self) -> int:
        return self.B.shape[1]

    @property
    def outputs(self) -> int:
        return self.C.shape[0]

    def _discretization(self, dt: float, disturbance: Optional[np.ndarray]):
        key = (dt, None if disturbance is None else disturbance.tobytes())
        cached = self._discrete_cache.get(key)
        if cached is not None:
            return cached

        if disturbance is None:
            B = self.B
        else:
            B = np.hstack([self.B, disturbance.reshape(-1, 1)])
        cached = discretize_ab(self.A, B, dt)

        if len(self._discrete_cache) > 16:
            self._discrete_cache.clear()
        self._discrete_cache[key] = cached
        return cached

    def calculate_x(self,
                    x: np.ndarray,
                    u: np.ndarray,
                    dt: float,
                    disturbance: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Advance the state by one zero-order-hold step.

        Args:
            x: Current state vector
            u: Input vector, held constant over the step
            dt: Step length [s]
            disturbance: Optional constant additive term of ẋ

        Returns:
            State after ``dt`` seconds
        """
        x = np.asarray(x, dtype=np.float64).reshape(self.states)
        u = np.asarray(u, dtype=np.float64).reshape(self.inputs)
        if disturbance is not None:
            disturbance = np.asarray(disturbance, dtype=np.float64).reshape(self.states)
            u = np.append(u, 1.0)

        A_d, B_d = self._discretization(float(dt), disturbance)
        return A_d @ x + B_d @ u

    def calculate_y(self, x: np.ndarray, u: np.ndarray) -> np.ndarray:
        """Output y = C x + D u."""
        x = np.asarray(x, dtype=np.float64).reshape(self.states)
        u = np.asarray(u, dtype=np.float64).reshape(self.inputs)
        return self.C @ x + self.D @ u

    def __repr__(self) -> str:
        return f"LinearSystem(states={self.states}, inputs={self.inputs}, outputs={self.outputs})"


class LinearSystemId:
    """Factories for the plants of common motor-driven mechanisms."""

    @staticmethod
    def create_elevator_system(motor: DCMotor,
                               mass: float,
                               radius: float,
                               gearing: float) -> LinearSystem:
        """
        Elevator carriage lifted by a drum.

        States: [position (m), velocity (m/s)]. Input: [voltage (V)].
        Output: [position (m)].

        Mathematical Model:
            ω_motor = G v / r
            F = G τ_motor / r
            a = G Kt / (R r m) · V - G² Kt / (R r² m Kv) · v
        """
        mass = require_positive("Carriage mass", mass)
        radius = require_positive("Drum radius", radius)
        gearing = require_positive("Gearing", gearing)

        velocity_gain = -(gearing ** 2) * motor.kt / (motor.resistance * radius ** 2 * mass * motor.kv)
        input_gain = gearing * motor.kt / (motor.resistance * radius * mass)

        return LinearSystem(
            np.array([[0.0, 1.0], [0.0, velocity_gain]]),
            np.array([[0.0], [input_gain]]),
            np.array([[1.0, 0.0]]),
            np.array([[0.0]]),
        )

    @staticmethod
    def create_dc_motor_system(motor: DCMotor, moi: float, gearing: float) -> LinearSystem:
        """
        Rotational load on a geared motor shaft.

        States: [angle (rad), angular velocity (rad/s)]. Input: [voltage (V)].
        Outputs: [angle (rad), angular velocity (rad/s)].
        """
        moi = require_positive("Moment of inertia", moi)
        gearing = require_positive("Gearing", gearing)

        velocity_gain = -(gearing ** 2) * motor.kt / (motor.kv * motor.resistance * moi)
        input_gain = gearing * motor.kt / (motor.resistance * moi)

        return LinearSystem(
            np.array([[0.0, 1.0], [0.0, velocity_gain]]),
            np.array([[0.0], [input_gain]]),
            np.eye(2),
            np.zeros((2, 1)),
        )

    @staticmethod
    def create_flywheel_system(motor: DCMotor, moi: float, gearing: float) -> LinearSystem:
        """
        Flywheel velocity plant.

        States: [angular velocity (rad/s)]. Input: [voltage (V)].
        Output: [angular velocity (rad/s)].
        """
        moi = require_positive("Moment of inertia", moi)
        gearing = require_positive("Gearing", gearing)

        return LinearSystem(
            np.array([[-(gearing ** 2) * motor.kt / (motor.kv * motor.resistance * moi)]]),
            np.array([[gearing * motor.kt / (motor.resistance * moi)]]),
            np.array([[1.0]]),
            np.array([[0.0]]),
        )
