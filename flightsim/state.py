"""
Simulation State Representation

The longitudinal model tracks a point mass in the vertical plane:
- Position (2): downrange x, altitude (m)
- Velocity (2): vx, vz (m/s), vz positive up

SimulationState bundles the motion with everything a driver loop writes
between ticks (controls, pause/reset flags, autopilot channels) and
everything the stepper produces (forces, flight path trail).
"""

import numpy as np
from collections import deque
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .aircraft import AircraftConfig, create_default_aircraft
from .autopilot import AutopilotChannel, speed_hold_channel, altitude_hold_channel
from .environment import AtmosphericProperties


# Default flight path trail length (points)
TRAIL_CAPACITY = 1000


@dataclass
class MotionState:
    """
    Point-mass motion in the vertical plane.

    All values are in SI units (m, m/s).
    """

    # Position (m) - [x, altitude]
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))

    # Velocity (m/s) - [vx, vz]
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self):
        """Ensure arrays are numpy arrays."""
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)

    @property
    def x(self) -> float:
        """Downrange distance (m)."""
        return float(self.position[0])

    @property
    def altitude(self) -> float:
        """Altitude above ground (m)."""
        return float(self.position[1])

    @property
    def speed(self) -> float:
        """Magnitude of velocity (m/s)."""
        return float(np.linalg.norm(self.velocity))

    @property
    def vertical_speed(self) -> float:
        """Climb rate, positive up (m/s)."""
        return float(self.velocity[1])

    @property
    def climb_angle(self) -> float:
        """Flight path angle (rad)."""
        return float(np.arctan2(self.velocity[1], self.velocity[0]))

    def copy(self) -> 'MotionState':
        return MotionState(position=self.position.copy(), velocity=self.velocity.copy())


@dataclass
class ControlInputs:
    """
    Pilot (or autopilot) commands for one tick.

    throttle is normalized [0, 1]; alpha_deg is the commanded angle of
    attack in degrees.
    """

    throttle: float = 0.0
    alpha_deg: float = 0.0

    @property
    def alpha(self) -> float:
        """Commanded angle of attack (rad)."""
        return float(np.radians(self.alpha_deg))

    def clip(self) -> 'ControlInputs':
        """Return a copy with throttle limited to [0, 1]."""
        return ControlInputs(
            throttle=float(np.clip(self.throttle, 0.0, 1.0)),
            alpha_deg=self.alpha_deg
        )


@dataclass
class ForceVectors:
    """
    The four forces acting on the aircraft during one tick.

    Vectors are [x, z] in Newtons. The scalar fields record the aerodynamic
    condition they were computed at.
    """

    thrust: np.ndarray = field(default_factory=lambda: np.zeros(2))
    drag: np.ndarray = field(default_factory=lambda: np.zeros(2))
    lift: np.ndarray = field(default_factory=lambda: np.zeros(2))
    weight: np.ndarray = field(default_factory=lambda: np.zeros(2))

    # Aerodynamic state for logging
    CL: float = 0.0
    CD: float = 0.0
    airspeed: float = 0.0
    dynamic_pressure: float = 0.0

    def __post_init__(self):
        """Ensure arrays are numpy arrays."""
        self.thrust = np.asarray(self.thrust, dtype=np.float64)
        self.drag = np.asarray(self.drag, dtype=np.float64)
        self.lift = np.asarray(self.lift, dtype=np.float64)
        self.weight = np.asarray(self.weight, dtype=np.float64)

    @property
    def net(self) -> np.ndarray:
        """Sum of all forces (N)."""
        return self.thrust + self.drag + self.lift + self.weight

    def copy(self) -> 'ForceVectors':
        return ForceVectors(
            thrust=self.thrust.copy(),
            drag=self.drag.copy(),
            lift=self.lift.copy(),
            weight=self.weight.copy(),
            CL=self.CL,
            CD=self.CD,
            airspeed=self.airspeed,
            dynamic_pressure=self.dynamic_pressure
        )


class FlightPathTrail:
    """Bounded history of (x, altitude) points; oldest evicted first."""

    def __init__(self, capacity: int = TRAIL_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"Trail capacity must be positive, got {capacity}")
        self._points = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def append(self, x: float, altitude: float):
        self._points.append((float(x), float(altitude)))

    def clear(self):
        self._points.clear()

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, index: int) -> Tuple[float, float]:
        return self._points[index]

    def to_array(self) -> np.ndarray:
        """Trail as an (N, 2) array, oldest first."""
        if not self._points:
            return np.zeros((0, 2))
        return np.array(self._points, dtype=np.float64)


@dataclass
class SimulationState:
    """
    Everything one simulation run owns.

    Driver loops write controls, flags and autopilot settings into this
    object and then call dynamics.step() once per tick.
    """

    aircraft: AircraftConfig = field(default_factory=create_default_aircraft)
    motion: MotionState = field(default_factory=MotionState)
    time: float = 0.0
    controls: ControlInputs = field(default_factory=ControlInputs)

    paused: bool = False
    reset_requested: bool = False

    speed_hold: AutopilotChannel = field(default_factory=speed_hold_channel)
    altitude_hold: AutopilotChannel = field(default_factory=altitude_hold_channel)

    trail: FlightPathTrail = field(default_factory=FlightPathTrail)

    # Forces from the most recent tick
    forces: ForceVectors = field(default_factory=ForceVectors)


@dataclass(frozen=True)
class SimulationSnapshot:
    """
    Read-only view of a SimulationState for presentation layers.

    Holds copies; later ticks do not change a snapshot.
    """
    time: float
    motion: MotionState
    controls: ControlInputs
    forces: ForceVectors
    atmosphere: AtmosphericProperties
    trail: np.ndarray
    paused: bool
    speed_hold_terms: Optional[Tuple[float, float, float]] = None
    altitude_hold_terms: Optional[Tuple[float, float, float]] = None
