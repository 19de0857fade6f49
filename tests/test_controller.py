import pytest
import numpy as np
import math
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_control.exceptions import ConfigurationError
from robo_control.controller import (ArmFeedforward, ElevatorFeedforward, PIDController,
                                     RamseteController, SimpleMotorFeedforward)
from robo_control.geometry import Pose2d
from robo_control.trajectory import TrajectoryState


class TestPIDController:
    """Test PID output, continuous input and anti-windup"""

    def test_proportional_output(self):
        controller = PIDController(2.0, 0.0, 0.0)
        assert controller.calculate(1.0, 3.0) == pytest.approx(4.0)
        assert controller.get_setpoint() == 3.0

    def test_setpoint_is_kept_between_calls(self):
        controller = PIDController(1.0, 0.0, 0.0)
        controller.set_setpoint(5.0)
        assert controller.calculate(2.0) == pytest.approx(3.0)
        assert controller.calculate(4.0) == pytest.approx(1.0)

    def test_continuous_input_takes_short_way(self):
        """Test 179 -> -179 degrees is a +2 degree error, not -358"""
        controller = PIDController(0.5, 0.0, 0.0)
        controller.enable_continuous_input(-180.0, 180.0)

        assert controller.is_continuous_input_enabled()
        assert controller.calculate(179.0, -179.0) == pytest.approx(2.0 * 0.5)
        assert controller.get_position_error() == pytest.approx(2.0)

    def test_disable_continuous_input(self):
        controller = PIDController(1.0, 0.0, 0.0)
        controller.enable_continuous_input(-180.0, 180.0)
        controller.disable_continuous_input()
        assert controller.calculate(179.0, -179.0) == pytest.approx(-358.0)

    def test_integral_accumulates(self):
        controller = PIDController(0.0, 1.0, 0.0, period=0.02)
        for _ in range(10):
            output = controller.calculate(0.0, 1.0)

        assert output == pytest.approx(0.2)
        assert controller.get_accumulated_error() == pytest.approx(0.2)

    def test_integrator_clamped_to_default_range(self):
        """Test the integral contribution saturates at +-1 by default"""
        controller = PIDController(0.0, 1.0, 0.0)
        for _ in range(200):
            output = controller.calculate(0.0, 1.0)

        assert output == pytest.approx(1.0)

    def test_integrator_range(self):
        controller = PIDController(0.0, 2.0, 0.0)
        controller.set_integrator_range(-0.5, 0.5)
        for _ in range(200):
            output = controller.calculate(0.0, 10.0)

        assert output == pytest.approx(0.5)

    def test_izone_resets_integral(self):
        controller = PIDController(0.0, 1.0, 0.0)
        controller.set_izone(0.5)
        controller.calculate(0.0, 0.2)
        assert controller.get_accumulated_error() > 0

        controller.calculate(0.0, 2.0)
        assert controller.get_accumulated_error() == 0.0

    def test_derivative(self):
        controller = PIDController(0.0, 0.0, 1.0, period=0.02)

        assert controller.calculate(0.0, 1.0) == pytest.approx(50.0)
        assert controller.calculate(0.0, 1.0) == pytest.approx(0.0)
        assert controller.get_velocity_error() == pytest.approx(0.0)

    def test_at_setpoint_requires_tolerance(self):
        """Test at_setpoint stays False until a tolerance is configured"""
        controller = PIDController(1.0, 0.0, 0.0)
        controller.calculate(1.0, 1.0)
        assert not controller.at_setpoint()

        controller.set_tolerance(0.1)
        controller.calculate(0.95, 1.0)
        assert controller.at_setpoint()

        controller.calculate(0.5, 1.0)
        assert not controller.at_setpoint()

    def test_at_setpoint_checks_derivative(self):
        controller = PIDController(1.0, 0.0, 0.0)
        controller.set_tolerance(0.1, 0.5)
        controller.calculate(0.0, 1.0)
        controller.calculate(0.95, 1.0)

        assert not controller.at_setpoint()
        controller.calculate(0.95, 1.0)
        assert controller.at_setpoint()

    def test_set_pid_keeps_integral(self):
        """Test changing gains mid-run does not discard the accumulated error"""
        controller = PIDController(0.0, 1.0, 0.0, period=0.02)
        for _ in range(25):
            controller.calculate(0.0, 1.0)
        assert controller.get_accumulated_error() == pytest.approx(0.5)

        controller.set_pid(2.0, 0.5, 0.1)

        assert controller.get_accumulated_error() == pytest.approx(0.5)
        assert (controller.kp, controller.ki, controller.kd) == (2.0, 0.5, 0.1)

    def test_reset_keeps_gains_and_setpoint(self):
        controller = PIDController(1.0, 1.0, 0.0)
        controller.calculate(0.0, 1.0)
        controller.reset()

        assert controller.get_accumulated_error() == 0.0
        assert controller.get_setpoint() == 1.0
        assert controller.kp == 1.0

    def test_invalid_configuration(self):
        with pytest.raises(ConfigurationError):
            PIDController(-1.0, 0.0, 0.0)
        with pytest.raises(ConfigurationError):
            PIDController(1.0, 0.0, 0.0, period=0.0)
        with pytest.raises(ConfigurationError):
            PIDController(1.0, 0.0, 0.0).set_izone(-1.0)


class TestFeedforward:
    """Test the feedforward voltage models"""

    def test_simple_motor_feedforward(self):
        feedforward = SimpleMotorFeedforward(1.0, 2.0, 3.0)

        assert feedforward.calculate(2.0, 1.0) == pytest.approx(8.0)
        assert feedforward.calculate(-2.0) == pytest.approx(-5.0)
        assert feedforward.calculate(0.0) == 0.0

    def test_elevator_feedforward_holds_against_gravity(self):
        feedforward = ElevatorFeedforward(0.0, 0.762, 0.762)
        assert feedforward.calculate(0.0) == pytest.approx(0.762)
        assert feedforward.calculate(1.0) == pytest.approx(1.524)

    def test_with_velocities_matches_steady_state(self):
        """Test holding a constant velocity needs exactly the steady-state voltage"""
        feedforward = SimpleMotorFeedforward(0.5, 2.0, 0.1)
        assert feedforward.calculate_with_velocities(2.0, 2.0) == pytest.approx(feedforward.calculate(2.0))

    def test_with_velocities_inverts_discrete_plant(self):
        """Test the voltage drives the exact discrete plant to the next velocity"""
        ks, kv, ka, dt = 0.5, 2.0, 0.1, 0.02
        feedforward = SimpleMotorFeedforward(ks, kv, ka, dt)
        voltage = feedforward.calculate_with_velocities(1.0, 1.5)

        a_d = math.exp(-kv / ka * dt)
        b_d = (1.0 - a_d) / kv
        next_velocity = a_d * 1.0 + b_d * (voltage - ks)
        assert next_velocity == pytest.approx(1.5)

    def test_with_velocities_without_ka(self):
        feedforward = ElevatorFeedforward(0.1, 0.5, 2.0)
        assert feedforward.calculate_with_velocities(0.0, 1.0) == pytest.approx(feedforward.calculate(1.0))

    def test_achievable_limits(self):
        feedforward = ElevatorFeedforward(0.1, 0.5, 2.0, 0.2)

        assert feedforward.max_achievable_velocity(12.0, 0.0) == pytest.approx(5.7)
        assert feedforward.min_achievable_velocity(12.0, 0.0) == pytest.approx(-6.2)
        assert feedforward.max_achievable_acceleration(12.0, 1.0) == pytest.approx(47.0)
        assert feedforward.min_achievable_acceleration(12.0, 1.0) == pytest.approx(-73.0)

    def test_arm_feedforward_gravity_follows_cosine(self):
        feedforward = ArmFeedforward(0.1, 0.5, 1.0, 0.2)

        assert feedforward.calculate(0.0, 1.0, 2.0) == pytest.approx(2.0)
        assert feedforward.calculate(math.pi / 2, 0.0) == pytest.approx(0.0, abs=1e-12)
        assert feedforward.calculate(math.pi, 0.0) == pytest.approx(-0.5)

    def test_negative_gains_rejected(self):
        with pytest.raises(ConfigurationError):
            SimpleMotorFeedforward(0.0, -1.0)
        with pytest.raises(ConfigurationError):
            ElevatorFeedforward(0.0, 0.5, 1.0, -0.1)


class TestRamseteController:
    """Test the unicycle trajectory tracker"""

    def test_no_error_passes_reference_through(self):
        controller = RamseteController()
        speeds = controller.calculate(Pose2d(1.0, 1.0, 30.0), Pose2d(1.0, 1.0, 30.0), 1.5, 0.3)

        assert speeds.vx == pytest.approx(1.5)
        assert speeds.omega == pytest.approx(0.3)

    def test_lateral_error_turns_toward_path(self):
        """Test a reference to the left produces a left turn"""
        controller = RamseteController(b=2.0, zeta=0.7)
        speeds = controller.calculate(Pose2d(0.0, 0.0, 0.0), Pose2d(0.0, 1.0, 0.0), 1.0, 0.0)

        assert speeds.vx == pytest.approx(1.0)
        assert speeds.omega == pytest.approx(2.0)

    def test_at_reference(self):
        controller = RamseteController()
        controller.set_tolerance(Pose2d(0.1, 0.1, 5.0))
        controller.calculate(Pose2d(0.0, 0.0, 0.0), Pose2d(0.05, 0.0, 2.0), 1.0, 0.0)
        assert controller.at_reference()

        controller.calculate(Pose2d(0.0, 0.0, 0.0), Pose2d(0.5, 0.0, 0.0), 1.0, 0.0)
        assert not controller.at_reference()

    def test_disabled_passthrough(self):
        controller = RamseteController()
        controller.enabled = False
        speeds = controller.calculate(Pose2d(), Pose2d(3.0, 3.0, 90.0), 2.0, 0.5)

        assert speeds.vx == 2.0
        assert speeds.omega == 0.5

    def test_calculate_for_state(self):
        controller = RamseteController()
        state = TrajectoryState(time=1.0, velocity=2.0, acceleration=0.0,
                                pose=Pose2d(1.0, 0.0, 0.0), curvature=0.5)
        speeds = controller.calculate_for_state(Pose2d(1.0, 0.0, 0.0), state)

        assert speeds.vx == pytest.approx(2.0)
        assert speeds.omega == pytest.approx(1.0)

    def test_invalid_gains(self):
        with pytest.raises(ConfigurationError):
            RamseteController(b=2.0, zeta=1.5)
        with pytest.raises(ConfigurationError):
            RamseteController(b=0.0)
