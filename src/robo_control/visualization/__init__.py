"""
Visualization components for robo control.

This module plots generated trajectories and recorded mechanism runs.
"""

from .plotter import plot_trajectory, plot_simulation_log

__all__ = [
    "plot_trajectory",
    "plot_simulation_log"
]
