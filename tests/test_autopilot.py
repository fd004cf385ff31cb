"""
Tests for the PID controller and autopilot channels.
"""

import pytest
from flightsim.autopilot import (
    PIDController,
    AutopilotChannel,
    speed_hold_channel,
    altitude_hold_channel,
)


class TestPIDTerms:
    """Individual P, I and D contributions."""

    def test_proportional_saturates(self):
        pid = PIDController(kp=1.0, ki=0.0, kd=0.0)
        output = pid.update(setpoint=10.0, measurement=0.0, dt=0.1)
        assert output == 1.0
        assert pid.p_term == pytest.approx(10.0)

    def test_integral_accumulates(self):
        pid = PIDController(kp=0.0, ki=1.0, kd=0.0, output_min=-10.0, output_max=10.0)
        outputs = [pid.update(1.0, 0.0, 0.5) for _ in range(3)]
        assert outputs == pytest.approx([0.5, 1.0, 1.5])
        assert pid.integral == pytest.approx(1.5)

    def test_derivative_skipped_on_first_update(self):
        pid = PIDController(kp=0.0, ki=0.0, kd=1.0, output_min=-100.0, output_max=100.0)
        assert pid.update(5.0, 0.0, 0.1) == 0.0
        assert pid.is_primed

    def test_derivative(self):
        pid = PIDController(kp=0.0, ki=0.0, kd=1.0, output_min=-100.0, output_max=100.0)
        pid.update(0.0, 0.0, 0.1)
        output = pid.update(0.0, 1.0, 0.1)
        assert output == pytest.approx(-10.0)
        assert pid.d_term == pytest.approx(-10.0)

    def test_derivative_zero_for_tiny_dt(self):
        pid = PIDController(kp=0.0, ki=0.0, kd=1.0, output_min=-100.0, output_max=100.0)
        pid.update(0.0, 0.0, 0.1)
        assert pid.update(0.0, 1.0, 1e-12) == 0.0

    def test_zero_gains(self):
        pid = PIDController(0.0, 0.0, 0.0)
        for _ in range(5):
            assert pid.update(3.0, -2.0, 0.1) == 0.0

    def test_output_clamped_low(self):
        pid = PIDController(kp=1.0, ki=0.0, kd=0.0, output_min=0.0, output_max=1.0)
        assert pid.update(0.0, 5.0, 0.1) == 0.0


class TestAntiWindup:

    def test_integral_bounded(self):
        pid = PIDController(kp=0.0, ki=1.0, kd=0.0, output_min=-1.0, output_max=1.0)
        for _ in range(1000):
            pid.update(10.0, 0.0, 0.1)
        assert abs(pid.integral) <= pid.max_integral
        assert pid.max_integral == pytest.approx(2.0)

    def test_recovers_quickly_after_saturation(self):
        """Bounded integral lets the output leave saturation within a few steps."""
        pid = PIDController(kp=0.0, ki=1.0, kd=0.0, output_min=-1.0, output_max=1.0)
        for _ in range(1000):
            pid.update(10.0, 0.0, 0.1)
        for _ in range(5):
            output = pid.update(-10.0, 0.0, 0.1)
        assert output < 1.0, "integral wound up past the anti-windup bound"

    def test_negative_ki_uses_magnitude(self):
        pid = PIDController(kp=0.0, ki=-1.0, kd=0.0)
        assert pid.max_integral == pytest.approx(2.0)
        for _ in range(100):
            pid.update(10.0, 0.0, 0.1)
        assert pid.integral == pytest.approx(2.0)
        assert pid.update(10.0, 0.0, 0.1) == -1.0


class TestResetAndLimits:

    def test_reset_reproduces_first_output(self):
        pid = PIDController(kp=0.5, ki=0.2, kd=0.1)
        first = pid.update(1.0, 0.2, 0.05)
        for _ in range(10):
            pid.update(1.0, 0.7, 0.05)
        pid.reset()
        assert not pid.is_primed
        assert pid.integral == 0.0
        assert pid.update(1.0, 0.2, 0.05) == first

    def test_reset_keeps_gains_and_limits(self):
        pid = PIDController(1.0, 2.0, 3.0, output_min=-5.0, output_max=7.0)
        pid.update(1.0, 0.0, 0.1)
        pid.reset()
        assert pid.gains == (1.0, 2.0, 3.0)
        assert (pid.output_min, pid.output_max) == (-5.0, 7.0)

    def test_set_output_limits(self):
        pid = PIDController(kp=1.0, ki=0.0, kd=0.0)
        pid.set_output_limits(-2.0, 2.0)
        assert pid.update(10.0, 0.0, 0.1) == 2.0

    def test_gains_read_only(self):
        pid = PIDController(1.0, 0.0, 0.0)
        with pytest.raises(AttributeError):
            pid.kp = 2.0

    def test_with_gains_is_fresh(self):
        pid = PIDController(1.0, 1.0, 0.0, output_min=0.0, output_max=3.0)
        pid.update(1.0, 0.0, 0.1)
        other = pid.with_gains(2.0, 0.5, 0.1)
        assert other is not pid
        assert other.gains == (2.0, 0.5, 0.1)
        assert other.integral == 0.0
        assert (other.output_min, other.output_max) == (0.0, 3.0)


class TestClosedLoop:

    def test_speed_control(self):
        """PI loop on a first-order plant settles on the setpoint."""
        pid = PIDController(kp=0.5, ki=0.5, kd=0.0, output_min=0.0, output_max=1.0)
        v, dt = 0.0, 0.01
        for _ in range(3000):
            u = pid.update(20.0, v, dt)
            v += (20.0 * u - 0.5 * v) * dt
        assert abs(v - 20.0) < 0.5, f"Speed {v:.2f} did not settle on 20"


class TestAutopilotChannel:

    def test_defaults(self):
        speed = speed_hold_channel()
        assert speed.setpoint == 40.0
        assert speed.controller.gains == (0.02, 0.001, 0.01)
        assert (speed.output_min, speed.output_max) == (0.0, 1.0)
        assert not speed.enabled

        alt = altitude_hold_channel()
        assert alt.setpoint == 100.0
        assert alt.controller.gains == (0.1, 0.001, 0.5)
        assert (alt.output_min, alt.output_max) == (-10.0, 15.0)

    def test_gain_edit_detected_and_rebuilt(self):
        channel = AutopilotChannel(setpoint=1.0, kp=1.0, ki=1.0, kd=0.0)
        channel.controller.update(1.0, 0.0, 0.1)
        old = channel.controller

        channel.set_gains(2.0, 1.0, 0.0)
        assert channel.gains_changed()

        channel.rebuild()
        assert channel.controller is not old
        assert channel.controller.gains == (2.0, 1.0, 0.0)
        assert channel.controller.integral == 0.0
        assert not channel.gains_changed()

    def test_rebuild_keeps_controller_limits(self):
        channel = AutopilotChannel(setpoint=1.0, kp=1.0, ki=0.0, kd=0.0)
        channel.controller.set_output_limits(-0.5, 0.5)
        channel.set_gains(2.0, 0.0, 0.0)
        channel.rebuild()
        assert (channel.controller.output_min, channel.controller.output_max) == (-0.5, 0.5)
        assert channel.controller.update(10.0, 0.0, 0.1) == 0.5

    def test_channel_output_limits(self):
        channel = speed_hold_channel()
        channel.set_output_limits(0.1, 0.8)
        assert (channel.output_min, channel.output_max) == (0.1, 0.8)
        assert (channel.controller.output_min, channel.controller.output_max) == (0.1, 0.8)

        channel.set_gains(0.05, 0.001, 0.01)
        channel.rebuild()
        assert channel.controller.update(100.0, 0.0, 0.1) == 0.8
        assert channel.controller.update(-100.0, 0.0, 0.1) == 0.1

    def test_engage_resets_controller(self):
        channel = AutopilotChannel(setpoint=1.0, kp=0.0, ki=1.0, kd=0.0)
        channel.controller.update(1.0, 0.0, 0.5)
        channel.engage()
        assert channel.enabled
        assert channel.controller.integral == 0.0
        channel.disengage()
        assert not channel.enabled
