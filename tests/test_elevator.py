import pytest
import numpy as np
import logging
import sys
import os

# Add the src directory to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from robo_control.exceptions import ConfigurationError
from robo_control.simulation import Elevator, ElevatorConfig, PowerBus, SimulationLog


class TestElevatorSubsystem:
    """Test the closed-loop elevator running on a simulated bus"""

    def test_reaches_goal(self):
        """Test PID + feedforward + profile settles near the goal height"""
        elevator = Elevator()
        log = elevator.run(0.75, 3.0)

        assert len(log) == 150
        assert elevator.get_position() == pytest.approx(0.75, abs=0.03)
        assert abs(elevator.get_velocity()) < 0.05
        assert not elevator.has_hit_upper_limit()

    def test_voltage_stays_within_bus(self):
        elevator = Elevator()
        data = elevator.run(1.0, 2.0).to_arrays()

        # Each command is clamped to the bus voltage of the previous period
        assert abs(data['voltage'][0]) <= 12.0 + 1e-9
        assert np.all(np.abs(data['voltage'][1:]) <= data['bus_voltage'][:-1] + 1e-9)

    def test_current_draw_sags_bus(self):
        """Test the bus voltage drops while the elevator draws current"""
        elevator = Elevator()
        data = elevator.run(1.0, 1.0).to_arrays()

        assert data['current'].max() > 0
        assert data['bus_voltage'].min() < 12.0
        assert elevator.get_battery_voltage() == pytest.approx(data['bus_voltage'][-1])

    def test_profiled_setpoint_moves_gradually(self):
        elevator = Elevator()
        elevator.reach_goal(1.0)
        first = elevator.get_setpoint()

        assert 0.0 < first.position < 0.01
        assert first.velocity == pytest.approx(elevator.config.max_acceleration * elevator.config.period)

    def test_stop_zeroes_voltage(self):
        elevator = Elevator()
        elevator.run(0.5, 0.5)
        elevator.stop()

        assert elevator.get_motor_voltage() == 0.0
        assert elevator.sim.get_input(0) == 0.0
        assert elevator.get_setpoint().velocity == 0.0
        assert elevator.controller.get_accumulated_error() == 0.0

    def test_stop_is_logged_at_info(self, caplog):
        elevator = Elevator()
        elevator.run(0.5, 0.2)

        with caplog.at_level(logging.INFO, logger="robo_control.simulation.elevator"):
            elevator.stop()

        stopped = [r for r in caplog.records if "stopped" in r.getMessage()]
        assert len(stopped) == 1
        assert stopped[0].levelno == logging.INFO

    def test_without_gravity_rests_at_bottom(self):
        elevator = Elevator(ElevatorConfig(simulate_gravity=False, kg=0.0))
        elevator.run(0.0, 0.5)

        assert elevator.get_position() == pytest.approx(0.0)
        assert elevator.has_hit_lower_limit()

    def test_shared_bus(self):
        bus = PowerBus(11.0)
        elevator = Elevator(bus=bus)
        assert elevator.get_battery_voltage() == 11.0

        elevator.run(1.0, 0.2)
        assert bus.get_vin_voltage() == elevator.get_battery_voltage()

    def test_encoder_quantization(self):
        elevator = Elevator()
        elevator.run(0.4, 1.0)

        pulses = elevator.get_position() / elevator.config.encoder_distance_per_pulse
        assert pulses == pytest.approx(round(pulses))

    def test_unknown_motor(self):
        with pytest.raises(ConfigurationError):
            Elevator(ElevatorConfig(motor="hamster_wheel"))

    def test_invalid_period(self):
        with pytest.raises(ConfigurationError):
            ElevatorConfig(period=0.0)


class TestSimulationLog:
    """Test recorded time series"""

    def test_append_and_export(self):
        log = SimulationLog()
        log.append(0.02, 0.1, 0.5, 0.12, 6.0, 40.0, 11.2)
        log.append(0.04, 0.11, 0.6, 0.14, 5.0, 35.0, 11.3)

        data = log.to_arrays()
        assert len(log) == 2
        assert set(data) == {'time', 'position', 'velocity', 'setpoint', 'voltage',
                             'current', 'bus_voltage'}
        np.testing.assert_allclose(data['current'], [40.0, 35.0])

    def test_clear(self):
        log = SimulationLog()
        log.append(0.02, 0.1, 0.5, 0.12, 6.0, 40.0, 11.2)
        log.clear()

        assert len(log) == 0
        assert log.bus_voltage == []
