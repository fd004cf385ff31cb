"""
Longitudinal Point-Mass Dynamics

Implements the per-tick update of the 2-D flight model:
- Autopilot loops (speed hold -> throttle, altitude hold -> angle of attack)
- Atmosphere and aerodynamic forces
- Newton's 2nd law for a point mass
- Ground contact constraint
- Flight path trail

Forces are evaluated once per tick and held constant across the step. With
constant acceleration the four RK4 stages reduce to the exact constant
acceleration update, so step size does not change the result for a fixed
force.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Tuple, Optional

from .aircraft import AircraftConfig, create_default_aircraft
from .aerodynamics import compute_forces
from .environment import density, isa_atmosphere
from .state import (
    SimulationState,
    SimulationSnapshot,
    MotionState,
    ControlInputs,
    ForceVectors,
    FlightPathTrail,
)


# Canonical configuration after a reset
RESET_THROTTLE = 0.3
RESET_ALPHA_DEG = 5.0


@dataclass
class SimulationConfig:
    """Simulation parameters."""

    # Integration timestep (s)
    dt: float = 0.016  # ~60 Hz

    # Flight path trail length (points)
    trail_capacity: int = 1000

    # On the ground, below this speed with throttle below rest_throttle the
    # aircraft is brought to rest
    rest_speed: float = 0.1           # m/s
    rest_throttle: float = 0.01


def integrate_rk4(
    position: np.ndarray,
    velocity: np.ndarray,
    acceleration: np.ndarray,
    dt: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Advance position and velocity one RK4 step under constant acceleration.

    Args:
        position: Position (m)
        velocity: Velocity (m/s)
        acceleration: Acceleration, held constant over the step (m/s²)
        dt: Timestep (s), must be positive

    Returns:
        (new_position, new_velocity)
    """
    if not dt > 0:
        raise ValueError(f"Timestep must be positive, got {dt}")

    position = np.asarray(position, dtype=np.float64)
    velocity = np.asarray(velocity, dtype=np.float64)
    acceleration = np.asarray(acceleration, dtype=np.float64)

    # k1
    k1_vel = acceleration
    k1_pos = velocity

    # k2
    k2_vel = acceleration
    k2_pos = velocity + k1_vel * (0.5 * dt)

    # k3
    k3_vel = acceleration
    k3_pos = velocity + k2_vel * (0.5 * dt)

    # k4
    k4_vel = acceleration
    k4_pos = velocity + k3_vel * dt

    # Combine
    new_velocity = velocity + (k1_vel + 2 * k2_vel + 2 * k3_vel + k4_vel) * (dt / 6.0)
    new_position = position + (k1_pos + 2 * k2_pos + 2 * k3_pos + k4_pos) * (dt / 6.0)

    return new_position, new_velocity


def reset_simulation(state: SimulationState):
    """Put the aircraft at rest at the origin with the default controls."""
    state.motion = MotionState()
    state.controls = ControlInputs(throttle=RESET_THROTTLE, alpha_deg=RESET_ALPHA_DEG)
    state.time = 0.0
    state.trail.clear()
    state.forces = ForceVectors()
    state.speed_hold.reset()
    state.altitude_hold.reset()
    state.reset_requested = False


def apply_ground_constraint(
    motion: MotionState,
    throttle: float,
    sim_config: SimulationConfig
) -> bool:
    """
    Keep the aircraft at or above ground level.

    Not a contact model: altitude is clamped, descent is stopped, and a
    near-stationary aircraft with idle throttle is stopped entirely.

    Returns:
        True if the constraint was active
    """
    if motion.position[1] >= 0.0:
        return False

    motion.position[1] = 0.0
    if motion.velocity[1] < 0.0:
        motion.velocity[1] = 0.0
    if motion.speed < sim_config.rest_speed and throttle < sim_config.rest_throttle:
        motion.velocity[:] = 0.0
    return True


def _run_autopilot(state: SimulationState, dt: float):
    speed_hold = state.speed_hold
    if speed_hold.enabled:
        if speed_hold.gains_changed():
            speed_hold.rebuild()
        throttle = speed_hold.controller.update(speed_hold.setpoint, state.motion.speed, dt)
        state.controls.throttle = float(np.clip(throttle, 0.0, 1.0))

    altitude_hold = state.altitude_hold
    if altitude_hold.enabled:
        if altitude_hold.gains_changed():
            altitude_hold.rebuild()
        state.controls.alpha_deg = altitude_hold.controller.update(
            altitude_hold.setpoint, state.motion.altitude, dt
        )


def step(state: SimulationState, dt: float,
         sim_config: Optional[SimulationConfig] = None) -> SimulationState:
    """
    Advance the simulation by one tick.

    A pending reset is applied first. A paused simulation does not advance.

    Args:
        state: Simulation state, updated in place
        dt: Timestep (s)
        sim_config: Simulation settings

    Returns:
        The same state object
    """
    sim_config = sim_config or SimulationConfig()

    if state.reset_requested:
        reset_simulation(state)

    if state.paused:
        return state

    if not dt > 0:
        raise ValueError(f"Timestep must be positive, got {dt}")

    _run_autopilot(state, dt)

    motion = state.motion
    aircraft = state.aircraft

    rho = density(max(0.0, motion.altitude))

    forces = compute_forces(
        motion.velocity,
        state.controls.alpha,
        state.controls.throttle,
        rho,
        aircraft
    )
    state.forces = forces

    acceleration = forces.net / aircraft.mass
    motion.position, motion.velocity = integrate_rk4(
        motion.position, motion.velocity, acceleration, dt
    )

    apply_ground_constraint(motion, state.controls.throttle, sim_config)

    state.trail.append(motion.x, motion.altitude)

    state.time += dt

    return state


def snapshot(state: SimulationState) -> SimulationSnapshot:
    """Copy out what a display needs."""
    return SimulationSnapshot(
        time=state.time,
        motion=state.motion.copy(),
        controls=ControlInputs(state.controls.throttle, state.controls.alpha_deg),
        forces=state.forces.copy(),
        atmosphere=isa_atmosphere(max(0.0, state.motion.altitude)),
        trail=state.trail.to_array(),
        paused=state.paused,
        speed_hold_terms=state.speed_hold.controller.terms if state.speed_hold.enabled else None,
        altitude_hold_terms=state.altitude_hold.controller.terms if state.altitude_hold.enabled else None
    )


class FlightDynamics:
    """
    Main flight dynamics simulation engine.

    Owns one SimulationState and provides step/run interface for drivers
    that do not want to manage the state directly.
    """

    def __init__(
        self,
        aircraft: Optional[AircraftConfig] = None,
        sim_config: Optional[SimulationConfig] = None
    ):
        self.sim_config = sim_config or SimulationConfig()
        self.state = SimulationState(
            aircraft=aircraft or create_default_aircraft(),
            trail=FlightPathTrail(self.sim_config.trail_capacity)
        )

        # History (optional, for analysis)
        self.history: list = []
        self.record_history = False

    @property
    def aircraft(self) -> AircraftConfig:
        return self.state.aircraft

    @property
    def motion(self) -> MotionState:
        return self.state.motion

    @property
    def forces(self) -> ForceVectors:
        return self.state.forces

    def set_aircraft(self, aircraft: AircraftConfig):
        """Switch to a different aircraft. Motion and autopilot state are kept."""
        self.state.aircraft = aircraft

    def reset(self, initial_motion: Optional[MotionState] = None,
              controls: Optional[ControlInputs] = None):
        """
        Reset simulation.

        Without arguments the aircraft is put at rest at the origin. A given
        initial motion/controls replaces the defaults after the reset.
        """
        reset_simulation(self.state)
        if initial_motion is not None:
            self.state.motion = initial_motion.copy()
        if controls is not None:
            self.state.controls = controls.clip()
        self.history = []

    def pause(self):
        self.state.paused = True

    def resume(self):
        self.state.paused = False

    def request_reset(self):
        """Reset at the start of the next tick."""
        self.state.reset_requested = True

    def snapshot(self) -> SimulationSnapshot:
        return snapshot(self.state)

    def step(self, controls: Optional[ControlInputs] = None) -> MotionState:
        """
        Advance simulation by one timestep.

        Args:
            controls: Control inputs (uses last if None). Autopilot loops
                that are enabled override the matching input.

        Returns:
            Motion state after the step
        """
        if controls is not None:
            self.state.controls = controls.clip()

        was_paused = self.state.paused
        step(self.state, self.sim_config.dt, self.sim_config)

        if self.record_history and not was_paused:
            self.history.append(self._record())

        return self.state.motion

    def _record(self) -> dict:
        s = self.state
        fm = s.forces
        return {
            'time': s.time,
            'x': s.motion.x,
            'altitude': s.motion.altitude,
            'vx': float(s.motion.velocity[0]),
            'vz': float(s.motion.velocity[1]),
            'speed': s.motion.speed,
            'throttle': s.controls.throttle,
            'alpha_deg': s.controls.alpha_deg,
            'CL': fm.CL,
            'CD': fm.CD,
            'dynamic_pressure': fm.dynamic_pressure,
            'thrust': float(np.linalg.norm(fm.thrust)),
            'drag': float(np.linalg.norm(fm.drag)),
            'lift': float(np.linalg.norm(fm.lift)),
            'weight': float(np.linalg.norm(fm.weight)),
        }

    def run(
        self,
        duration: float,
        control_callback: Optional[Callable[[MotionState, float], ControlInputs]] = None
    ) -> list:
        """
        Run simulation for a specified duration.

        Records are appended to self.history, which is only cleared by
        reset(); a second run() continues the same history.

        Args:
            duration: Simulation duration (s)
            control_callback: Optional function(motion, time) -> ControlInputs

        Returns:
            History list of records since the last reset
        """
        if self.state.paused:
            return self.history

        self.record_history = True
        n_steps = int(round(duration / self.sim_config.dt))

        for _ in range(n_steps):
            if control_callback is not None:
                self.step(control_callback(self.state.motion, self.state.time))
            else:
                self.step()

            # Safety check
            if np.any(np.isnan(self.state.motion.position)) or np.any(np.isnan(self.state.motion.velocity)):
                print(f"Warning: NaN detected at t={self.state.time:.3f}s")
                break

        self.record_history = False
        return self.history

    def get_diagnostic_string(self) -> str:
        """Get formatted diagnostic output for debugging."""
        s = self.state
        m = s.motion
        fm = s.forces

        status = ""
        if s.paused:
            status = " | PAUSED"
        elif m.altitude <= 0.0 and m.speed == 0.0:
            status = " | ON GROUND"

        modes = []
        if s.speed_hold.enabled:
            modes.append(f"SPD {s.speed_hold.setpoint:.0f}")
        if s.altitude_hold.enabled:
            modes.append(f"ALT {s.altitude_hold.setpoint:.0f}")
        ap = f" | AP[{' '.join(modes)}]" if modes else ""

        return (
            f"t={s.time:.2f}s | "
            f"x={m.x:.1f}m | "
            f"Alt={m.altitude:.1f}m | "
            f"V={m.speed:.1f}m/s | "
            f"γ={np.degrees(m.climb_angle):.1f}° | "
            f"α={s.controls.alpha_deg:.1f}° | "
            f"T={s.controls.throttle:.0%} | "
            f"CL={fm.CL:.3f} CD={fm.CD:.4f}"
            f"{ap}{status}"
        )
