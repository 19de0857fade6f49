"""
Trajectory Generation Module

This module builds time-parameterized trajectories through a list of
waypoints. Generation runs in three stages:

    1. Path fitting: a piecewise cubic Hermite curve
       (scipy.interpolate.CubicHermiteSpline) through start → interior
       waypoints → end. End tangents follow the start and end headings;
       each interior tangent bisects the unit chords on either side of its
       point, or is normal to the incoming chord where the path doubles
       back, so the curve never stops at a waypoint.
    2. Parameterization: the spline is subdivided until consecutive
       samples are close in the local frame, giving poses and curvatures.
    3. Time parameterization: forward and backward passes over the samples
       bound the velocity by the configured maximum, by every constraint,
       and by the acceleration limit in both directions.

A path whose start and end headings both point against the direction of
travel is driven backward: the curve is fitted with the headings flipped,
the poses are flipped back, and velocity and acceleration are negated.

Mathematical Model:
    Forward pass:   v_i = min(v_max,i, sqrt(v_{i-1}² + 2·a_max·Δs_i))
    Backward pass:  v_i = min(v_i,     sqrt(v_{i+1}² + 2·a_max·Δs_{i+1}))
    Segment timing: a_i = (v_i² - v_{i-1}²) / (2·Δs_i)
                    Δt_i = 2·Δs_i / (v_i + v_{i-1})

Curvature of the parametric curve (x(u), y(u)):
    κ = (x'·y'' - y'·x'') / (x'² + y'²)^(3/2)

Author: Scientific Computing Team
License: MIT
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.interpolate import CubicHermiteSpline

from ..exceptions import ConfigurationError, require_non_negative, require_positive
from ..geometry import Pose2d, Rotation2d, Transform2d, Translation2d
from .constraints import TrajectoryConstraint
from .trajectory import Trajectory, TrajectoryState

logger = logging.getLogger(__name__)

# Subdivision thresholds in the local frame of each sample
MAX_DX = 0.127
MAX_DY = 0.00127
MAX_DTHETA = 0.0872
MAX_ITERATIONS = 5000

# Tangent length relative to the adjacent chord
TANGENT_SCALE = 1.2

# Unit-chord sum below which a waypoint counts as a reversal
REVERSAL_TOLERANCE = 1e-9

_FLIP = Transform2d(Translation2d(), Rotation2d.from_degrees(180.0))


@dataclass
class TrajectoryConfig:
    """Limits for trajectory generation with validation."""

    max_velocity: float                  # Maximum path velocity [m/s]
    max_acceleration: float              # Maximum path acceleration [m/s²]
    start_velocity: float = 0.0          # Velocity at the start pose [m/s]
    end_velocity: float = 0.0            # Velocity at the end pose [m/s]
    constraints: List[TrajectoryConstraint] = field(default_factory=list)
    reversed: bool = False               # Drive the path backward

    def __post_init__(self):
        """Validate configuration against physical constraints."""
        require_positive("Maximum velocity", self.max_velocity)
        require_positive("Maximum acceleration", self.max_acceleration)
        require_non_negative("Start velocity", self.start_velocity)
        require_non_negative("End velocity", self.end_velocity)
        if self.start_velocity > self.max_velocity or self.end_velocity > self.max_velocity:
            raise ConfigurationError(
                f"Start/end velocity ({self.start_velocity}, {self.end_velocity}) "
                f"exceeds maximum velocity {self.max_velocity}")

    def add_constraint(self, constraint: TrajectoryConstraint) -> "TrajectoryConfig":
        self.constraints.append(constraint)
        return self


class TrajectoryGenerator:
    """Builds trajectories from waypoints and a :class:`TrajectoryConfig`."""

    @staticmethod
    def generate_trajectory(start: Pose2d,
                            interior_waypoints: Sequence[Translation2d],
                            end: Pose2d,
                            config: TrajectoryConfig) -> Trajectory:
        """
        Generate a trajectory from ``start`` through the interior waypoints to ``end``.

        Args:
            start: Starting pose; its heading fixes the initial tangent
            interior_waypoints: Points the path passes through, in order
            end: Final pose; its heading fixes the final tangent
            config: Velocity and acceleration limits

        Returns:
            Time-parameterized trajectory whose first and last poses are
            ``start`` and ``end``

        Raises:
            ConfigurationError: If fewer than two distinct points are given
                or the spline cannot be parameterized
        """
        points = _distinct_points([start.translation, *interior_waypoints, end.translation])
        if len(points) < 2:
            raise ConfigurationError("A trajectory needs at least two distinct points")

        backward = config.reversed or _drives_backward(start, end, points)
        if backward:
            path_start, path_end = start.transform_by(_FLIP), end.transform_by(_FLIP)
        else:
            path_start, path_end = start, end

        samples = _parameterize_spline(_fit_spline(points, path_start.rotation, path_end.rotation))
        if backward:
            samples = [(pose.transform_by(_FLIP), -curvature) for pose, curvature in samples]

        # Endpoints are exactly the requested poses
        samples[0] = (start, samples[0][1])
        samples[-1] = (end, samples[-1][1])

        trajectory = TrajectoryGenerator.time_parameterize(samples, config, backward)
        logger.info(f"Generated {'backward ' if backward else ''}trajectory through "
                    f"{len(points)} points: {len(trajectory)} states, {trajectory.total_time:.3f}s")
        return trajectory

    @staticmethod
    def time_parameterize(samples: Sequence[Tuple[Pose2d, float]],
                          config: TrajectoryConfig,
                          backward: Optional[bool] = None) -> Trajectory:
        """
        Assign velocities and times to a sampled path.

        Args:
            samples: (pose, curvature) pairs along the path
            config: Velocity and acceleration limits
            backward: Negate velocity and acceleration; defaults to
                ``config.reversed``

        Returns:
            Trajectory obeying the velocity ceiling at every sample and the
            acceleration ceiling on every interval
        """
        if backward is None:
            backward = config.reversed
        direction = -1.0 if backward else 1.0

        n = len(samples)
        max_acceleration = config.max_acceleration

        distances = np.zeros(n)
        for i in range(1, n):
            distances[i] = samples[i][0].distance_to(samples[i - 1][0])

        velocity_limits = np.empty(n)
        for i, (pose, curvature) in enumerate(samples):
            limit = config.max_velocity
            for constraint in config.constraints:
                limit = min(limit, constraint.max_velocity(pose, curvature, config.max_velocity))
            velocity_limits[i] = max(limit, 0.0)

        velocities = np.empty(n)
        velocities[0] = min(config.start_velocity, velocity_limits[0])
        for i in range(1, n):
            reachable = math.sqrt(velocities[i - 1] ** 2 + 2.0 * max_acceleration * distances[i])
            velocities[i] = min(velocity_limits[i], reachable)

        velocities[-1] = min(velocities[-1], config.end_velocity)
        for i in range(n - 2, -1, -1):
            stoppable = math.sqrt(velocities[i + 1] ** 2 + 2.0 * max_acceleration * distances[i + 1])
            velocities[i] = min(velocities[i], stoppable)

        times = np.zeros(n)
        accelerations = np.zeros(n)
        for i in range(1, n):
            ds = distances[i]
            if ds > 0:
                accelerations[i - 1] = (velocities[i] ** 2 - velocities[i - 1] ** 2) / (2.0 * ds)
            velocity_sum = velocities[i] + velocities[i - 1]
            dt = 2.0 * ds / velocity_sum if velocity_sum > 1e-12 else 0.0
            times[i] = times[i - 1] + dt

        states = [
            TrajectoryState(float(times[i]), direction * float(velocities[i]),
                            direction * float(accelerations[i]), pose, float(curvature))
            for i, (pose, curvature) in enumerate(samples)
        ]
        logger.debug(f"Time parameterization: path length {distances.sum():.3f}m, "
                     f"peak velocity {velocities.max():.3f}m/s")
        return Trajectory(states)


def _distinct_points(points: Sequence[Translation2d]) -> List[Translation2d]:
    """Drop points that coincide with their predecessor."""
    distinct = []
    for point in points:
        if not distinct or point.distance(distinct[-1]) > 1e-9:
            distinct.append(point)
    return distinct


def _drives_backward(start: Pose2d, end: Pose2d, points: Sequence[Translation2d]) -> bool:
    """True when both end headings point against the direction of travel."""
    first = points[1] - points[0]
    last = points[-1] - points[-2]
    return (first.x * start.rotation.cos + first.y * start.rotation.sin < 0
            and last.x * end.rotation.cos + last.y * end.rotation.sin < 0)


def _fit_spline(points: Sequence[Translation2d],
                start_heading: Rotation2d,
                end_heading: Rotation2d) -> CubicHermiteSpline:
    """
    Piecewise cubic Hermite curve through ``points`` on the uniform knots 0..n-1.

    Every tangent is TANGENT_SCALE times the adjacent chord long (the
    shorter chord at interior points).
    """
    knots = np.arange(len(points), dtype=np.float64)
    values = np.array([[p.x, p.y] for p in points])

    chords = np.diff(values, axis=0)
    lengths = np.linalg.norm(chords, axis=1)
    units = chords / lengths[:, np.newaxis]

    tangents = np.empty_like(values)
    tangents[0] = np.array([start_heading.cos, start_heading.sin]) * TANGENT_SCALE * lengths[0]
    tangents[-1] = np.array([end_heading.cos, end_heading.sin]) * TANGENT_SCALE * lengths[-1]

    for i in range(1, len(points) - 1):
        direction = units[i - 1] + units[i]
        norm = np.linalg.norm(direction)
        if norm < REVERSAL_TOLERANCE:
            # Path doubles back: turn left through the point
            direction = np.array([-units[i - 1][1], units[i - 1][0]])
        else:
            direction = direction / norm
        tangents[i] = direction * TANGENT_SCALE * min(lengths[i - 1], lengths[i])

    return CubicHermiteSpline(knots, values, tangents)


def _spline_sample(spline: CubicHermiteSpline, u: float) -> Tuple[Pose2d, float]:
    x, y = spline(u)
    dx, dy = spline(u, 1)
    ddx, ddy = spline(u, 2)

    speed_squared = dx * dx + dy * dy
    if speed_squared < 1e-18:
        curvature = 0.0
    else:
        curvature = (dx * ddy - dy * ddx) / speed_squared ** 1.5

    pose = Pose2d.from_translation(Translation2d(float(x), float(y)),
                                   Rotation2d.from_components(float(dx), float(dy)))
    return pose, float(curvature)


def _parameterize_spline(spline: CubicHermiteSpline) -> List[Tuple[Pose2d, float]]:
    """
    Sample every spline segment, subdividing until consecutive poses are
    within the local-frame thresholds.
    """
    segments = len(spline.x) - 1
    samples = [_spline_sample(spline, 0.0)]
    iterations = 0

    for segment in range(segments):
        # Stack of intervals still to emit, processed front to back
        pending = [(float(segment), float(segment + 1))]
        while pending:
            u0, u1 = pending.pop()
            start_pose = _spline_sample(spline, u0)[0]
            end_sample = _spline_sample(spline, u1)
            twist = start_pose.log(end_sample[0])

            if abs(twist.dy) > MAX_DY or abs(twist.dx) > MAX_DX or abs(twist.dtheta) > MAX_DTHETA:
                middle = (u0 + u1) / 2.0
                pending.append((middle, u1))
                pending.append((u0, middle))
            else:
                samples.append(end_sample)

            iterations += 1
            if iterations >= MAX_ITERATIONS * segments:
                raise ConfigurationError("Could not parameterize a malformed spline")

    return samples
