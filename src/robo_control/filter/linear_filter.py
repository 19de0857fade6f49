"""
Discrete Linear Filter Module

This module implements linear digital filters over scalar sample streams,
defined by the general difference equation

    y[n] = Σ b_i·x[n-i]  -  Σ a_j·y[n-1-j]

where b are the feedforward gains and a the feedback gains. Factory
methods build the common cases:

    moving_average(N):        b_i = 1/N, no feedback (FIR)
    single_pole_iir(τ, T):    g = exp(-T/τ),  y[n] = (1-g)·x[n] + g·y[n-1]
    high_pass(τ, T):          g = exp(-T/τ),  y[n] = g·x[n] - g·x[n-1] + g·y[n-1]

Every filter starts from an all-zero history, and ``calculate`` both
updates the history and returns the new output, so calling it twice with
the same input generally gives two different results.
"""

import math
from collections import deque
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError, require_positive


class LinearFilter:
    """
    General IIR/FIR filter.

    Args:
        ff_gains: Feedforward gains b_0..b_n (at least one)
        fb_gains: Feedback gains a_0..a_m (may be empty)

    Raises:
        ConfigurationError: If no feedforward gains are given
    """

    def __init__(self, ff_gains: Sequence[float], fb_gains: Sequence[float]):
        if len(ff_gains) == 0:
            raise ConfigurationError("A linear filter needs at least one feedforward gain")

        self._ff_gains = np.asarray(ff_gains, dtype=np.float64)
        self._fb_gains = np.asarray(fb_gains, dtype=np.float64)
        self._inputs = deque([0.0] * len(ff_gains), maxlen=len(ff_gains))
        self._outputs = deque([0.0] * len(fb_gains), maxlen=len(fb_gains))
        self._last_output = 0.0

    @classmethod
    def moving_average(cls, taps: int) -> "LinearFilter":
        """
        Mean of the last ``taps`` inputs (missing history counts as zero).

        Raises:
            ConfigurationError: If ``taps`` is not a positive integer
        """
        if int(taps) != taps or taps < 1:
            raise ConfigurationError(f"Moving average needs a positive integer tap count, got {taps}")
        return MovingAverageFilter(int(taps))

    @classmethod
    def single_pole_iir(cls, time_constant: float, period: float) -> "LinearFilter":
        """
        First-order low-pass filter.

        Args:
            time_constant: Filter time constant τ [s]
            period: Sample period T [s]
        """
        time_constant = require_positive("Time constant", time_constant)
        period = require_positive("Period", period)
        gain = math.exp(-period / time_constant)
        return cls([1.0 - gain], [-gain])

    @classmethod
    def high_pass(cls, time_constant: float, period: float) -> "LinearFilter":
        """First-order high-pass filter; passes changes, rejects the DC level."""
        time_constant = require_positive("Time constant", time_constant)
        period = require_positive("Period", period)
        gain = math.exp(-period / time_constant)
        return cls([gain, -gain], [-gain])

    def calculate(self, value: float) -> float:
        """Push a new sample and return the filtered output."""
        self._inputs.appendleft(float(value))

        output = float(np.dot(self._ff_gains, np.asarray(self._inputs)))
        if len(self._fb_gains):
            output -= float(np.dot(self._fb_gains, np.asarray(self._outputs)))
            self._outputs.appendleft(output)

        self._last_output = output
        return output

    def last_value(self) -> float:
        """Most recent output, without pushing a new sample."""
        return self._last_output

    def reset(self) -> None:
        """Clear the input and output history to zero."""
        self._inputs.extend([0.0] * self._inputs.maxlen)
        if self._outputs.maxlen:
            self._outputs.extend([0.0] * self._outputs.maxlen)
        self._last_output = 0.0


class MovingAverageFilter(LinearFilter):
    """
    Moving average kept as a circular buffer plus running sum.

    The running sum is recomputed from the buffer once per ``taps``
    samples, which keeps each update O(1) amortized and stops floating
    point drift from accumulating. The general difference-equation
    history is not kept; the window is the only sample state.
    """

    def __init__(self, taps: int):
        self._last_output = 0.0
        self._taps = taps
        self._window = deque([0.0] * taps, maxlen=taps)
        self._sum = 0.0
        self._since_resync = 0

    @property
    def taps(self) -> int:
        return self._taps

    def calculate(self, value: float) -> float:
        value = float(value)
        self._sum += value - self._window[0]
        self._window.append(value)

        self._since_resync += 1
        if self._since_resync >= self._taps:
            self._sum = math.fsum(self._window)
            self._since_resync = 0

        self._last_output = self._sum / self._taps
        return self._last_output

    def reset(self) -> None:
        self._window.extend([0.0] * self._taps)
        self._sum = 0.0
        self._since_resync = 0
        self._last_output = 0.0
