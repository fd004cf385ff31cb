"""
Tests for simulation state containers.
"""

import numpy as np
import pytest
from flightsim.state import (
    MotionState,
    ControlInputs,
    ForceVectors,
    FlightPathTrail,
    SimulationState,
    TRAIL_CAPACITY,
)


class TestMotionState:

    def test_derived_quantities(self):
        m = MotionState(position=[5.0, 120.0], velocity=[30.0, 40.0])
        assert m.x == 5.0
        assert m.altitude == 120.0
        assert m.speed == pytest.approx(50.0)
        assert m.vertical_speed == 40.0
        assert m.climb_angle == pytest.approx(np.arctan2(40.0, 30.0))

    def test_copy_is_independent(self):
        m = MotionState(position=[1.0, 2.0])
        c = m.copy()
        c.position[0] = 99.0
        assert m.x == 1.0

    def test_lists_converted(self):
        m = MotionState(position=[1, 2], velocity=(3, 4))
        assert isinstance(m.position, np.ndarray)
        assert m.velocity.dtype == np.float64


class TestControlInputs:

    def test_alpha_radians(self):
        assert ControlInputs(alpha_deg=180.0).alpha == pytest.approx(np.pi)

    def test_clip(self):
        c = ControlInputs(throttle=1.5, alpha_deg=30.0).clip()
        assert c.throttle == 1.0
        assert c.alpha_deg == 30.0
        assert ControlInputs(throttle=-0.2).clip().throttle == 0.0


class TestForceVectors:

    def test_net(self):
        fm = ForceVectors(thrust=[10.0, 0.0], drag=[-4.0, 0.0], lift=[0.0, 50.0], weight=[0.0, -60.0])
        np.testing.assert_allclose(fm.net, [6.0, -10.0])

    def test_copy(self):
        fm = ForceVectors(thrust=[1.0, 0.0], CL=0.5)
        c = fm.copy()
        c.thrust[0] = 5.0
        assert fm.thrust[0] == 1.0
        assert c.CL == 0.5


class TestFlightPathTrail:

    def test_capacity(self):
        trail = FlightPathTrail(3)
        for i in range(5):
            trail.append(i, 10.0 * i)
        assert len(trail) == 3
        assert list(trail) == [(2.0, 20.0), (3.0, 30.0), (4.0, 40.0)]

    def test_to_array(self):
        trail = FlightPathTrail()
        assert trail.to_array().shape == (0, 2)
        trail.append(1.0, 2.0)
        np.testing.assert_array_equal(trail.to_array(), [[1.0, 2.0]])

    def test_clear(self):
        trail = FlightPathTrail()
        trail.append(1.0, 2.0)
        trail.clear()
        assert len(trail) == 0

    @pytest.mark.parametrize("capacity", [0, -3])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(ValueError):
            FlightPathTrail(capacity)


def test_simulation_state_defaults():
    state = SimulationState()
    assert state.time == 0.0
    assert not state.paused and not state.reset_requested
    assert state.trail.capacity == TRAIL_CAPACITY
    assert not state.speed_hold.enabled and not state.altitude_hold.enabled
    assert state.aircraft.name == "Ultralight"
