"""
Signal filters for robo control.

Components:
    - LinearFilter: General IIR/FIR difference equation with moving average,
      single-pole IIR and high-pass factories
    - MovingAverageFilter: O(1) running-sum moving average
"""

from .linear_filter import LinearFilter, MovingAverageFilter

__all__ = [
    "LinearFilter",
    "MovingAverageFilter"
]
