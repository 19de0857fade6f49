"""
Time-parameterized planar trajectory.

A trajectory is an ordered sequence of sampled states, each carrying the
time it is reached, the path velocity and acceleration at that time, the
pose and the path curvature. Between two samples the acceleration is held
constant, so sampling an arbitrary time interpolates with the constant
acceleration kinematics v = v0 + a·Δt, s = v0·Δt + a·Δt²/2.
"""

from dataclasses import dataclass, field, replace
from typing import List, Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..geometry import Pose2d, Transform2d
from ..math_util import interpolate


@dataclass(frozen=True)
class TrajectoryState:
    """
    One sample of a trajectory.

    Attributes:
        time: Time since the start of the trajectory [s]
        velocity: Path velocity [m/s]
        acceleration: Path acceleration held until the next sample [m/s²]
        pose: Robot pose
        curvature: Path curvature [rad/m]
    """

    time: float = 0.0
    velocity: float = 0.0
    acceleration: float = 0.0
    pose: Pose2d = field(default_factory=Pose2d)
    curvature: float = 0.0

    def interpolate(self, end: "TrajectoryState", t: float) -> "TrajectoryState":
        """State a fraction ``t`` of the time from this sample to ``end``."""
        new_time = interpolate(self.time, end.time, t)
        delta_t = new_time - self.time

        if delta_t < 0:
            return end.interpolate(self, 1.0 - t)

        reversing = self.velocity < 0 or (abs(self.velocity) < 1e-9 and self.acceleration < 0)

        new_velocity = self.velocity + self.acceleration * delta_t
        new_distance = (self.velocity * delta_t + 0.5 * self.acceleration * delta_t ** 2) * (-1.0 if reversing else 1.0)

        segment_length = self.pose.distance_to(end.pose)
        if segment_length < 1e-9:
            fraction = t
        else:
            fraction = new_distance / segment_length

        return TrajectoryState(
            new_time,
            new_velocity,
            self.acceleration,
            self.pose.interpolate(end.pose, fraction),
            interpolate(self.curvature, end.curvature, fraction),
        )


class Trajectory:
    """
    Sequence of time-stamped states with interpolated sampling.

    Args:
        states: Samples in non-decreasing time order (at least one)

    Raises:
        ConfigurationError: If ``states`` is empty or out of time order
    """

    State = TrajectoryState

    def __init__(self, states: Sequence[TrajectoryState]):
        states = list(states)
        if not states:
            raise ConfigurationError("A trajectory needs at least one state")

        times = np.array([state.time for state in states], dtype=np.float64)
        if np.any(np.diff(times) < 0):
            raise ConfigurationError("Trajectory states must be in non-decreasing time order")

        self._states = states
        self._times = times

    @property
    def total_time(self) -> float:
        return self._states[-1].time

    def get_total_time(self) -> float:
        return self.total_time

    def get_states(self) -> List[TrajectoryState]:
        return list(self._states)

    @property
    def initial_pose(self) -> Pose2d:
        return self._states[0].pose

    def get_state(self, t: float) -> TrajectoryState:
        """
        State at time ``t``, clamped to the trajectory's time range.

        Args:
            t: Time since the start of the trajectory [s]
        """
        if t <= self._states[0].time:
            return self._states[0]
        if t >= self.total_time:
            return self._states[-1]

        high = int(np.searchsorted(self._times, t, side="left"))
        high_state = self._states[high]
        low_state = self._states[high - 1]

        if abs(high_state.time - low_state.time) < 1e-9:
            return high_state

        return low_state.interpolate(high_state, (t - low_state.time) / (high_state.time - low_state.time))

    sample = get_state

    def transform_by(self, transform: Transform2d) -> "Trajectory":
        """Move the whole trajectory so it starts at ``initial_pose + transform``."""
        first_pose = self._states[0].pose
        new_first_pose = first_pose + transform

        states = [replace(self._states[0], pose=new_first_pose)]
        for state in self._states[1:]:
            states.append(replace(state, pose=new_first_pose + (state.pose - first_pose)))
        return Trajectory(states)

    def relative_to(self, pose: Pose2d) -> "Trajectory":
        """Express every state in the frame of ``pose``."""
        return Trajectory([replace(state, pose=state.pose.relative_to(pose)) for state in self._states])

    def __len__(self) -> int:
        return len(self._states)

    def __repr__(self) -> str:
        return f"Trajectory(states={len(self._states)}, total_time={self.total_time:.3f}s)"
