"""
Autopilot Controllers

Provides a PID controller with integral anti-windup, and the two autopilot
channels used by the longitudinal simulator:
- Speed hold (throttle)
- Altitude hold (commanded angle of attack)

A controller's gains are fixed for its lifetime. Changing gains means building
a new controller, which deliberately discards the integral accumulated under
the old gains.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

# Guards division by Ki and by dt
_EPSILON = 1e-10


class PIDController:
    """
    PID controller with anti-windup.

    The controller starts "fresh": the first update has no previous error, so
    its derivative term is zero. After that it is "primed" until reset().
    """

    def __init__(self, kp: float, ki: float, kd: float,
                 output_min: float = -1.0, output_max: float = 1.0):
        self._kp = float(kp)
        self._ki = float(ki)
        self._kd = float(kd)

        self.output_min = float(output_min)
        self.output_max = float(output_max)

        self.reset()

    def __repr__(self) -> str:
        return (f"PIDController(kp={self._kp}, ki={self._ki}, kd={self._kd}, "
                f"output_min={self.output_min}, output_max={self.output_max})")

    @property
    def kp(self) -> float:
        return self._kp

    @property
    def ki(self) -> float:
        return self._ki

    @property
    def kd(self) -> float:
        return self._kd

    @property
    def gains(self) -> Tuple[float, float, float]:
        """(kp, ki, kd)"""
        return (self._kp, self._ki, self._kd)

    @property
    def integral(self) -> float:
        return self._integral

    @property
    def is_primed(self) -> bool:
        """True once at least one update has run since construction or reset."""
        return not self._first_update

    # Last computed terms, for tuning displays only
    @property
    def p_term(self) -> float:
        return self._p_term

    @property
    def i_term(self) -> float:
        return self._i_term

    @property
    def d_term(self) -> float:
        return self._d_term

    @property
    def terms(self) -> Tuple[float, float, float]:
        return (self._p_term, self._i_term, self._d_term)

    @property
    def max_integral(self) -> float:
        """Anti-windup bound on the accumulated integral."""
        return (self.output_max - self.output_min) / (abs(self._ki) + _EPSILON)

    def reset(self):
        """
        Return to the fresh state.

        Use when the setpoint jumps or the loop is re-engaged. Gains and
        output limits are kept.
        """
        self._integral = 0.0
        self._previous_error = 0.0
        self._first_update = True
        self._p_term = 0.0
        self._i_term = 0.0
        self._d_term = 0.0

    def set_output_limits(self, output_min: float, output_max: float):
        """Change output bounds without touching accumulated state."""
        self.output_min = float(output_min)
        self.output_max = float(output_max)

    def with_gains(self, kp: float, ki: float, kd: float) -> 'PIDController':
        """New fresh controller with these gains and the current output limits."""
        return PIDController(kp, ki, kd, self.output_min, self.output_max)

    def update(self, setpoint: float, measurement: float, dt: float) -> float:
        """
        Compute control output.

        Args:
            setpoint: Desired value
            measurement: Current measured value
            dt: Time step (s)

        Returns:
            Control output clamped to [output_min, output_max]
        """
        error = setpoint - measurement

        # Integral with anti-windup
        limit = self.max_integral
        self._integral = float(np.clip(self._integral + error * dt, -limit, limit))

        # Derivative (none on the first update)
        derivative = 0.0
        if not self._first_update and dt > _EPSILON:
            derivative = (error - self._previous_error) / dt
        self._first_update = False

        self._p_term = self._kp * error
        self._i_term = self._ki * self._integral
        self._d_term = self._kd * derivative

        output = self._p_term + self._i_term + self._d_term

        self._previous_error = error

        return float(np.clip(output, self.output_min, self.output_max))


@dataclass
class AutopilotChannel:
    """
    One autopilot loop as seen by the driver: on/off, target, requested gains.

    The driver may edit kp/ki/kd freely between ticks. The stepper calls
    gains_changed() once per tick and rebuilds the controller when they
    differ from the live controller's gains.
    """

    setpoint: float
    kp: float
    ki: float
    kd: float
    output_min: float = -1.0
    output_max: float = 1.0
    enabled: bool = False

    controller: PIDController = field(init=False, repr=False)

    def __post_init__(self):
        self.controller = PIDController(self.kp, self.ki, self.kd,
                                        self.output_min, self.output_max)

    @property
    def requested_gains(self) -> Tuple[float, float, float]:
        return (self.kp, self.ki, self.kd)

    def gains_changed(self) -> bool:
        return self.requested_gains != self.controller.gains

    def rebuild(self):
        """
        Swap in a fresh controller built from the requested gains.

        Output limits are taken from the live controller, so limits set on it
        directly survive the rebuild.
        """
        self.controller = self.controller.with_gains(self.kp, self.ki, self.kd)

    def set_gains(self, kp: float, ki: float, kd: float):
        self.kp, self.ki, self.kd = kp, ki, kd

    def set_output_limits(self, output_min: float, output_max: float):
        """Change output bounds on the channel and its live controller."""
        self.output_min, self.output_max = float(output_min), float(output_max)
        self.controller.set_output_limits(self.output_min, self.output_max)

    def engage(self):
        """Enable the loop from a fresh controller state."""
        self.enabled = True
        self.controller.reset()

    def disengage(self):
        self.enabled = False

    def reset(self):
        self.controller.reset()


def speed_hold_channel() -> AutopilotChannel:
    """Speed hold: throttle [0, 1] to hold airspeed (m/s)."""
    return AutopilotChannel(
        setpoint=40.0, kp=0.02, ki=0.001, kd=0.01,
        output_min=0.0, output_max=1.0
    )


def altitude_hold_channel() -> AutopilotChannel:
    """Altitude hold: angle of attack [-10, 15] deg to hold altitude (m)."""
    return AutopilotChannel(
        setpoint=100.0, kp=0.1, ki=0.001, kd=0.5,
        output_min=-10.0, output_max=15.0
    )
