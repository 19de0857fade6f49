import pytest
import numpy as np
import math
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_control.exceptions import ConfigurationError
from robo_control.filter import LinearFilter, MovingAverageFilter


class TestMovingAverage:
    """Test the moving average FIR filter"""

    def test_zero_initialized_history(self):
        """Test missing history counts as zero while the window fills"""
        filt = LinearFilter.moving_average(3)

        assert filt.calculate(3.0) == pytest.approx(1.0)
        assert filt.calculate(6.0) == pytest.approx(3.0)
        assert filt.calculate(9.0) == pytest.approx(6.0)
        assert filt.calculate(12.0) == pytest.approx(9.0)

    def test_factory_returns_moving_average(self):
        filt = LinearFilter.moving_average(5)
        assert isinstance(filt, MovingAverageFilter)
        assert filt.taps == 5

    def test_long_run_does_not_drift(self):
        """Test the running sum stays exact over many samples"""
        filt = LinearFilter.moving_average(10)
        for _ in range(10000):
            output = filt.calculate(0.1)

        assert output == pytest.approx(0.1, abs=1e-12)

    def test_matches_numpy_convolution(self):
        rng = np.random.default_rng(7)
        samples = rng.normal(size=50)
        filt = LinearFilter.moving_average(4)

        outputs = [filt.calculate(x) for x in samples]
        expected = np.convolve(samples, np.full(4, 0.25))[:50]
        np.testing.assert_allclose(outputs, expected, atol=1e-12)

    def test_window_is_the_only_history(self):
        """Test the moving average keeps its samples in the window alone"""
        filt = LinearFilter.moving_average(3)
        assert filt.last_value() == 0.0
        assert not hasattr(filt, '_inputs')
        assert not hasattr(filt, '_ff_gains')

        filt.calculate(6.0)
        assert filt.last_value() == pytest.approx(2.0)

        filt.reset()
        assert filt.last_value() == 0.0
        assert filt.calculate(3.0) == pytest.approx(1.0)

    def test_invalid_taps(self):
        with pytest.raises(ConfigurationError):
            LinearFilter.moving_average(0)
        with pytest.raises(ConfigurationError):
            LinearFilter.moving_average(2.5)


class TestIIRFilters:
    """Test single-pole low-pass and high-pass filters"""

    def test_single_pole_step_response(self):
        filt = LinearFilter.single_pole_iir(0.1, 0.02)
        gain = math.exp(-0.02 / 0.1)

        assert filt.calculate(1.0) == pytest.approx(1.0 - gain)
        assert filt.calculate(1.0) == pytest.approx((1.0 - gain) * (1.0 + gain))

        for _ in range(200):
            output = filt.calculate(1.0)
        assert output == pytest.approx(1.0, abs=1e-6)

    def test_high_pass_rejects_constant(self):
        """Test a step passes at first and then decays away"""
        filt = LinearFilter.high_pass(0.1, 0.02)
        gain = math.exp(-0.02 / 0.1)

        assert filt.calculate(1.0) == pytest.approx(gain)
        assert filt.calculate(1.0) == pytest.approx(gain ** 2)

        for _ in range(200):
            output = filt.calculate(1.0)
        assert output == pytest.approx(0.0, abs=1e-6)

    def test_general_difference_equation(self):
        filt = LinearFilter([0.5, 0.5], [])
        assert filt.calculate(2.0) == pytest.approx(1.0)
        assert filt.calculate(4.0) == pytest.approx(3.0)

    def test_last_value_and_reset(self):
        filt = LinearFilter.single_pole_iir(0.1, 0.02)
        output = filt.calculate(5.0)
        assert filt.last_value() == output

        filt.reset()
        assert filt.last_value() == 0.0
        assert filt.calculate(5.0) == pytest.approx(output)

    def test_invalid_configuration(self):
        with pytest.raises(ConfigurationError):
            LinearFilter([], [0.5])
        with pytest.raises(ConfigurationError):
            LinearFilter.single_pole_iir(0.0, 0.02)
        with pytest.raises(ConfigurationError):
            LinearFilter.high_pass(0.1, -0.02)
