"""
Plotting helpers for trajectories and mechanism simulation logs.

Functions:
    plot_trajectory: Path of a trajectory colored by velocity, with headings
        and the velocity/acceleration profiles over time
    plot_simulation_log: Height, voltage, current and bus voltage of a
        recorded elevator run

Both return the matplotlib Figure and never call ``plt.show``; the caller
decides whether to display or save it.

Author: Scientific Computing Team
License: MIT
"""

import logging
from typing import Optional, Tuple

import matplotlib.gridspec as gridspec
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from ..simulation.elevator import SimulationLog
from ..trajectory import Trajectory

logger = logging.getLogger(__name__)


def _trajectory_arrays(trajectory: Trajectory):
    states = trajectory.get_states()
    return (
        np.array([s.time for s in states]),
        np.array([s.pose.x for s in states]),
        np.array([s.pose.y for s in states]),
        np.array([s.pose.rotation.radians for s in states]),
        np.array([s.velocity for s in states]),
        np.array([s.acceleration for s in states]),
    )


def plot_trajectory(trajectory: Trajectory,
                    title: str = "Trajectory",
                    heading_stride: int = 20,
                    figure_size: Tuple[int, int] = (14, 6)) -> plt.Figure:
    """
    Plot a trajectory's path and its time profiles.

    Args:
        trajectory: Trajectory to draw
        title: Figure title
        heading_stride: Draw a heading arrow every this many states; 0 disables
        figure_size: Figure size in inches

    Returns:
        Figure with the XY path on the left and velocity/acceleration on the right
    """
    times, xs, ys, headings, velocities, accelerations = _trajectory_arrays(trajectory)

    figure = plt.figure(figsize=figure_size)
    gs = gridspec.GridSpec(2, 2, figure=figure, hspace=0.3, wspace=0.25)
    ax_path = figure.add_subplot(gs[:, 0])
    ax_velocity = figure.add_subplot(gs[0, 1])
    ax_acceleration = figure.add_subplot(gs[1, 1], sharex=ax_velocity)

    # Path colored by velocity
    points = np.column_stack([xs, ys]).reshape(-1, 1, 2)
    segments = np.concatenate([points[:-1], points[1:]], axis=1)
    if len(segments):
        collection = LineCollection(segments, cmap='viridis', linewidths=2)
        collection.set_array(velocities[:-1])
        ax_path.add_collection(collection)
        figure.colorbar(collection, ax=ax_path, label='Velocity (m/s)')

    if heading_stride > 0:
        idx = np.arange(0, len(xs), heading_stride)
        ax_path.quiver(xs[idx], ys[idx], np.cos(headings[idx]), np.sin(headings[idx]),
                       angles='xy', scale=25, width=0.004, color='tab:gray', alpha=0.7)

    ax_path.plot(xs[0], ys[0], 'go', markersize=8, label='Start')
    ax_path.plot(xs[-1], ys[-1], 'rs', markersize=8, label='End')
    ax_path.set_xlabel('X Position (m)')
    ax_path.set_ylabel('Y Position (m)')
    ax_path.set_title(title, fontweight='bold')
    ax_path.set_aspect('equal', adjustable='datalim')
    ax_path.autoscale_view()
    ax_path.grid(True, alpha=0.3)
    ax_path.legend(loc='best')

    ax_velocity.plot(times, velocities, 'b-', linewidth=2)
    ax_velocity.set_ylabel('Velocity (m/s)')
    ax_velocity.grid(True, alpha=0.3)

    ax_acceleration.step(times, accelerations, 'r-', where='post', linewidth=1.5)
    ax_acceleration.set_xlabel('Time (s)')
    ax_acceleration.set_ylabel('Acceleration (m/s²)')
    ax_acceleration.grid(True, alpha=0.3)

    logger.debug(f"Plotted trajectory with {len(times)} states")
    return figure


def plot_simulation_log(log: SimulationLog,
                        goal: Optional[float] = None,
                        title: str = "Elevator Simulation",
                        figure_size: Tuple[int, int] = (12, 9)) -> plt.Figure:
    """
    Plot a recorded elevator run.

    Args:
        log: Recorded samples
        goal: Goal height drawn as a reference line, if given
        title: Figure title
        figure_size: Figure size in inches

    Returns:
        Figure with height, voltage and electrical panels sharing the time axis
    """
    data = log.to_arrays()
    time = data['time']

    figure, (ax_height, ax_voltage, ax_current) = plt.subplots(3, 1, figsize=figure_size, sharex=True)
    figure.suptitle(title, fontweight='bold')

    ax_height.plot(time, data['position'], 'b-', linewidth=2, label='Height')
    ax_height.plot(time, data['setpoint'], 'g--', linewidth=1.5, label='Profiled setpoint')
    if goal is not None:
        ax_height.axhline(goal, color='r', linestyle=':', label='Goal')
    ax_height.set_ylabel('Height (m)')
    ax_height.grid(True, alpha=0.3)
    ax_height.legend(loc='best')

    ax_voltage.plot(time, data['voltage'], 'm-', linewidth=1.5, label='Motor voltage')
    ax_voltage.plot(time, data['bus_voltage'], 'k-', linewidth=1.0, label='Bus voltage')
    ax_voltage.set_ylabel('Voltage (V)')
    ax_voltage.grid(True, alpha=0.3)
    ax_voltage.legend(loc='best')

    ax_current.plot(time, data['current'], 'r-', linewidth=1.5)
    ax_current.set_xlabel('Time (s)')
    ax_current.set_ylabel('Current (A)')
    ax_current.grid(True, alpha=0.3)

    figure.tight_layout()
    logger.debug(f"Plotted simulation log with {len(log)} samples")
    return figure
