import pytest
import numpy as np
import logging
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_control.exceptions import ConfigurationError
from robo_control.system import (DCMotor, LinearSystem, LinearSystemId, discretize_ab,
                                 rpm_to_radians_per_second)


class TestDCMotor:
    """Test the DC motor characterization and derived constants"""

    def test_derived_constants(self):
        """Test R, Kv and Kt are derived from the datasheet values"""
        motor = DCMotor.vex775pro()
        resistance = 12.0 / 134.0
        free_speed = rpm_to_radians_per_second(18730.0)

        assert motor.resistance == pytest.approx(resistance)
        assert motor.kt == pytest.approx(0.71 / 134.0)
        assert motor.kv == pytest.approx(free_speed / (12.0 - resistance * 0.7))

    def test_gearbox_scaling(self):
        """Test N motors multiply torque and currents but keep free speed"""
        single = DCMotor.vex775pro()
        gearbox = DCMotor.vex775pro(4)

        assert gearbox.num_motors == 4
        assert gearbox.stall_torque == pytest.approx(4 * 0.71)
        assert gearbox.stall_current == pytest.approx(4 * 134.0)
        assert gearbox.free_current == pytest.approx(4 * 0.7)
        assert gearbox.free_speed == pytest.approx(single.free_speed)
        assert gearbox.resistance == pytest.approx(single.resistance / 4)
        assert gearbox.kt == pytest.approx(single.kt)

    def test_stall_and_free_operating_points(self):
        motor = DCMotor.neo(2)

        assert motor.current(12.0, 0.0) == pytest.approx(motor.stall_current)
        assert motor.torque(12.0, 0.0) == pytest.approx(motor.stall_torque)
        assert motor.current(12.0, motor.free_speed) == pytest.approx(motor.free_current)

    def test_voltage_and_speed_invert_torque(self):
        motor = DCMotor.falcon500()
        torque = motor.torque(6.0, 100.0)

        assert motor.voltage(torque, 100.0) == pytest.approx(6.0)
        assert motor.speed(torque, 6.0) == pytest.approx(100.0)

    def test_back_driven_current_is_negative(self):
        motor = DCMotor.cim()
        assert motor.current(0.0, 100.0) < 0

    def test_preset_lookup_ignores_case_and_separators(self):
        assert DCMotor.from_name("VEX_775_PRO", 2) == DCMotor.vex775pro(2)
        assert DCMotor.from_name("kraken-x60") == DCMotor.kraken_x60()

    def test_every_preset_builds(self):
        for name in DCMotor.preset_names():
            motor = DCMotor.from_name(name)
            assert motor is not None
            assert motor.kv > 0 and motor.kt > 0 and motor.resistance > 0

    def test_unknown_preset_returns_none(self, caplog):
        """Test probing for a missing preset is not an error"""
        with caplog.at_level(logging.WARNING):
            assert DCMotor.from_name("warp_drive") is None
        assert "warp_drive" in caplog.text

    def test_invalid_motor_count(self):
        with pytest.raises(ConfigurationError):
            DCMotor.cim(0)

    def test_non_physical_characterization(self):
        """Test free current that leaves no back-EMF is rejected"""
        with pytest.raises(ConfigurationError):
            DCMotor(12.0, 1.0, 10.0, 10.0, 100.0)
        with pytest.raises(ConfigurationError):
            DCMotor(12.0, -1.0, 10.0, 1.0, 100.0)

    def test_with_reduction(self):
        motor = DCMotor.neo()
        reduced = motor.with_reduction(10.0)

        assert reduced.stall_torque == pytest.approx(motor.stall_torque * 10.0)
        assert reduced.free_speed == pytest.approx(motor.free_speed / 10.0)
        assert reduced.stall_current == pytest.approx(motor.stall_current)

    def test_with_reduction_keeps_motor_count(self):
        """Test a reduced gearbox still reports its motors and their totals"""
        gearbox = DCMotor.falcon500(2)
        reduced = gearbox.with_reduction(5.0)

        assert reduced.num_motors == 2
        assert reduced.stall_torque == pytest.approx(gearbox.stall_torque * 5.0)
        assert reduced.stall_current == pytest.approx(gearbox.stall_current)
        assert reduced.free_current == pytest.approx(gearbox.free_current)
        assert reduced.resistance == pytest.approx(gearbox.resistance)
        assert reduced.kt == pytest.approx(gearbox.kt * 5.0)


class TestLinearSystem:
    """Test the state-space plant and its exact discretization"""

    def test_discretize_double_integrator(self):
        """Test ZOH discretization of a double integrator is exact"""
        A = np.array([[0.0, 1.0], [0.0, 0.0]])
        B = np.array([[0.0], [1.0]])
        A_d, B_d = discretize_ab(A, B, 0.1)

        np.testing.assert_allclose(A_d, [[1.0, 0.1], [0.0, 1.0]], atol=1e-12)
        np.testing.assert_allclose(B_d, [[0.005], [0.1]], atol=1e-12)

    def test_calculate_x_with_disturbance(self):
        """Test a constant disturbance acts like free fall"""
        system = LinearSystem([[0.0, 1.0], [0.0, 0.0]], [[0.0], [1.0]], [[1.0, 0.0]], [[0.0]])
        x = system.calculate_x([0.0, 0.0], [0.0], 0.1, disturbance=[0.0, -9.8])

        np.testing.assert_allclose(x, [-0.049, -0.98], atol=1e-12)

    def test_calculate_y(self):
        system = LinearSystem([[0.0, 1.0], [0.0, 0.0]], [[0.0], [1.0]], [[1.0, 0.0]], [[0.5]])
        np.testing.assert_allclose(system.calculate_y([2.0, 3.0], [4.0]), [4.0])

    def test_dimension_mismatch_rejected(self):
        with pytest.raises(ConfigurationError):
            LinearSystem(np.eye(2), np.ones((3, 1)), np.eye(2), np.zeros((2, 1)))
        with pytest.raises(ConfigurationError):
            LinearSystem(np.eye(2), np.ones((2, 1)), np.eye(2), np.zeros((1, 1)))

    def test_non_finite_rejected(self):
        with pytest.raises(ConfigurationError):
            LinearSystem([[np.nan]], [[1.0]], [[1.0]], [[0.0]])

    def test_elevator_plant_coefficients(self):
        motor = DCMotor.vex775pro(4)
        system = LinearSystemId.create_elevator_system(motor, 4.0, 0.0508, 10.0)

        expected_b = 10.0 * motor.kt / (motor.resistance * 0.0508 * 4.0)
        expected_a = -(10.0 ** 2) * motor.kt / (motor.resistance * 0.0508 ** 2 * 4.0 * motor.kv)

        assert system.states == 2 and system.inputs == 1 and system.outputs == 1
        assert system.B[1, 0] == pytest.approx(expected_b)
        assert system.A[1, 1] == pytest.approx(expected_a)

    def test_dc_motor_plant_outputs_full_state(self):
        system = LinearSystemId.create_dc_motor_system(DCMotor.neo(), 0.001, 1.0)
        np.testing.assert_allclose(system.C, np.eye(2))
        assert system.outputs == 2

    def test_invalid_plant_parameters(self):
        with pytest.raises(ConfigurationError):
            LinearSystemId.create_elevator_system(DCMotor.cim(), 0.0, 0.05, 10.0)
        with pytest.raises(ConfigurationError):
            LinearSystemId.create_flywheel_system(DCMotor.cim(), 0.01, -1.0)
