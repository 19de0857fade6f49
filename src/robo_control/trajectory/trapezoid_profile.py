"""
One-dimensional trapezoidal motion profile.

A trapezoid profile moves a single degree of freedom (elevator height, arm
angle) from a current state to a goal state with bounded velocity and
acceleration: accelerate at the maximum, cruise at the maximum velocity,
then decelerate into the goal. Short moves never reach cruise speed and
the trapezoid degenerates into a triangle.

Mathematical Model:
    t_a = v_max / a_max                          # time to reach cruise
    d_full = d_cut_begin + Δx + d_cut_end        # distance of a full trapezoid
                                                 # from rest to rest
    d_cruise = d_full - t_a²·a_max
    d_cruise < 0  →  t_a = sqrt(d_full / a_max), d_cruise = 0

    d_cut_* account for the non-zero initial and final velocities by
    "cutting" the corresponding part of a rest-to-rest trapezoid away.

The profile is recomputed from the current state on every call, so it can
be fed the measured state each period.
"""

import math
from dataclasses import dataclass

from ..exceptions import require_positive


@dataclass
class Constraints:
    """Velocity and acceleration limits with validation."""

    max_velocity: float
    max_acceleration: float

    def __post_init__(self):
        """Validate profile constraints."""
        require_positive("Maximum velocity", self.max_velocity)
        require_positive("Maximum acceleration", self.max_acceleration)


@dataclass(frozen=True)
class State:
    """Profile state: position and velocity."""

    position: float = 0.0
    velocity: float = 0.0


class TrapezoidProfile:
    """
    Trapezoidal velocity profile for a single degree of freedom.

    Args:
        constraints: Velocity and acceleration limits
    """

    Constraints = Constraints
    State = State

    def __init__(self, constraints: Constraints):
        self.constraints = constraints
        self._direction = 1.0
        self._current = State()
        self._end_accel = 0.0
        self._end_full_speed = 0.0
        self._end_decel = 0.0

    @staticmethod
    def _should_flip_acceleration(initial: State, goal: State) -> bool:
        return initial.position > goal.position

    def _direct(self, state: State) -> State:
        return State(state.position * self._direction, state.velocity * self._direction)

    def calculate(self, t: float, current: State, goal: State) -> State:
        """
        State of the profile ``t`` seconds after ``current``.

        Args:
            t: Time since ``current`` [s]
            current: Starting state
            goal: Desired final state

        Returns:
            Profiled position and velocity at time ``t``
        """
        max_velocity = self.constraints.max_velocity
        max_acceleration = self.constraints.max_acceleration

        self._direction = -1.0 if self._should_flip_acceleration(current, goal) else 1.0
        self._current = self._direct(current)
        goal = self._direct(goal)

        if abs(self._current.velocity) > max_velocity:
            self._current = State(self._current.position,
                                  math.copysign(max_velocity, self._current.velocity))

        # Deal with a possibly truncated motion profile (with nonzero initial or
        # final velocity) by calculating the parameters as if the profile began
        # and ended at zero velocity
        cutoff_begin = self._current.velocity / max_acceleration
        cutoff_dist_begin = cutoff_begin * cutoff_begin * max_acceleration / 2.0

        cutoff_end = goal.velocity / max_acceleration
        cutoff_dist_end = cutoff_end * cutoff_end * max_acceleration / 2.0

        full_trapezoid_dist = (cutoff_dist_begin + (goal.position - self._current.position)
                               + cutoff_dist_end)
        acceleration_time = max_velocity / max_acceleration

        full_speed_dist = full_trapezoid_dist - acceleration_time * acceleration_time * max_acceleration

        # Triangle profile: cruise speed is never reached
        if full_speed_dist < 0:
            acceleration_time = math.sqrt(max(full_trapezoid_dist, 0.0) / max_acceleration)
            full_speed_dist = 0.0

        self._end_accel = acceleration_time - cutoff_begin
        self._end_full_speed = self._end_accel + full_speed_dist / max_velocity
        self._end_decel = self._end_full_speed + acceleration_time - cutoff_end

        position = self._current.position
        velocity = self._current.velocity
        if t < self._end_accel:
            velocity += t * max_acceleration
            position += (self._current.velocity + t * max_acceleration / 2.0) * t
        elif t < self._end_full_speed:
            velocity = max_velocity
            position += ((self._current.velocity + self._end_accel * max_acceleration / 2.0)
                         * self._end_accel + max_velocity * (t - self._end_accel))
        elif t <= self._end_decel:
            time_left = self._end_decel - t
            velocity = goal.velocity + time_left * max_acceleration
            position = goal.position - (goal.velocity + time_left * max_acceleration / 2.0) * time_left
        else:
            position, velocity = goal.position, goal.velocity

        return self._direct(State(position, velocity))

    def time_left_until(self, target: float) -> float:
        """Time from the last ``calculate`` start state until the profile reaches ``target``."""
        max_velocity = self.constraints.max_velocity
        max_acceleration = self.constraints.max_acceleration

        position = self._current.position * self._direction
        velocity = self._current.velocity * self._direction

        end_accel = self._end_accel * self._direction
        end_full_speed = self._end_full_speed * self._direction - end_accel

        if target < position:
            end_accel = -end_accel
            end_full_speed = -end_full_speed
            velocity = -velocity

        end_accel = max(end_accel, 0.0)
        end_full_speed = max(end_full_speed, 0.0)

        acceleration = max_acceleration
        deceleration = -max_acceleration

        dist_to_target = abs(target - position)
        if dist_to_target < 1e-6:
            return 0.0

        accel_dist = velocity * end_accel + 0.5 * acceleration * end_accel * end_accel

        if end_accel > 0:
            decel_velocity = math.sqrt(abs(velocity * velocity + 2 * acceleration * accel_dist))
        else:
            decel_velocity = velocity

        full_speed_dist = max_velocity * end_full_speed

        if accel_dist > dist_to_target:
            accel_dist = dist_to_target
            full_speed_dist = 0.0
            decel_dist = 0.0
        elif accel_dist + full_speed_dist > dist_to_target:
            full_speed_dist = dist_to_target - accel_dist
            decel_dist = 0.0
        else:
            decel_dist = dist_to_target - full_speed_dist - accel_dist

        accel_time = (-velocity + math.sqrt(abs(velocity * velocity + 2 * acceleration * accel_dist))) / acceleration
        decel_time = (-decel_velocity + math.sqrt(abs(decel_velocity * decel_velocity
                                                      + 2 * deceleration * decel_dist))) / deceleration
        full_speed_time = full_speed_dist / max_velocity

        return accel_time + full_speed_time + decel_time

    def total_time(self) -> float:
        """Duration of the profile computed by the last ``calculate`` call [s]."""
        return self._end_decel

    def is_finished(self, t: float) -> bool:
        return t >= self.total_time()
