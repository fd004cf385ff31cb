"""
Trim Solver

Finds the angle of attack and throttle that hold steady, level flight at a
given airspeed and altitude. Useful for starting a run in equilibrium instead
of from rest.
"""

import numpy as np
from scipy.optimize import least_squares
from dataclasses import dataclass
from typing import Optional

from .aircraft import AircraftConfig
from .aerodynamics import compute_forces, calc_weight
from .environment import density
from .state import MotionState, ControlInputs, ForceVectors

# Search range for angle of attack, same as the altitude hold output range
ALPHA_MIN_DEG = -10.0
ALPHA_MAX_DEG = 15.0


@dataclass
class TrimResult:
    """Result of trim solution."""

    success: bool
    alpha_deg: float
    throttle: float
    residuals: np.ndarray
    forces: ForceVectors
    message: str

    @property
    def controls(self) -> ControlInputs:
        return ControlInputs(throttle=self.throttle, alpha_deg=self.alpha_deg)


def compute_level_trim(
    aircraft: AircraftConfig,
    airspeed: float,
    altitude: float = 0.0,
    tolerance: float = 0.01,
    initial_guess: Optional[ControlInputs] = None
) -> TrimResult:
    """
    Solve for level-flight angle of attack and throttle.

    With velocity along +x the net force must vanish in both axes:
        T*cos(alpha) - D = 0
        T*sin(alpha) + L - W = 0

    Args:
        aircraft: Aircraft configuration
        airspeed: True airspeed (m/s)
        altitude: Altitude (m), clamped at 0 for the density lookup
        tolerance: Allowed residual force as a fraction of weight
        initial_guess: Optional starting controls for the solver

    Returns:
        TrimResult; success is False when the aircraft cannot hold level
        flight at this speed within the alpha/throttle limits
    """
    if airspeed <= 0:
        raise ValueError(f"Airspeed must be positive, got {airspeed}")

    rho = density(max(0.0, altitude))
    velocity = np.array([airspeed, 0.0])
    weight = calc_weight(aircraft.mass)

    if initial_guess is not None:
        x0 = np.array([initial_guess.alpha, initial_guess.throttle])
    else:
        x0 = np.array([np.radians(3.0), 0.5])

    lower = [np.radians(ALPHA_MIN_DEG), 0.0]
    upper = [np.radians(ALPHA_MAX_DEG), 1.0]
    x0 = np.clip(x0, lower, upper)

    def residuals(x):
        alpha, throttle = x
        fm = compute_forces(velocity, alpha, throttle, rho, aircraft)
        # Normalized by weight so the tolerance is dimensionless
        return fm.net / weight

    result = least_squares(residuals, x0, bounds=(lower, upper),
                           method='trf', ftol=1e-12, xtol=1e-12)

    alpha, throttle = result.x
    forces = compute_forces(velocity, alpha, throttle, rho, aircraft)
    res = forces.net / weight
    success = bool(np.max(np.abs(res)) < tolerance)

    if success:
        message = f"Trimmed at {airspeed:.1f} m/s"
    else:
        message = (f"No level trim at {airspeed:.1f} m/s within "
                   f"alpha [{ALPHA_MIN_DEG:.0f}, {ALPHA_MAX_DEG:.0f}] deg and throttle [0, 1]")

    return TrimResult(
        success=success,
        alpha_deg=float(np.degrees(alpha)),
        throttle=float(throttle),
        residuals=res,
        forces=forces,
        message=message
    )


def trimmed_motion(airspeed: float, altitude: float, x: float = 0.0) -> MotionState:
    """Level flight motion state at the given airspeed and altitude."""
    return MotionState(position=[x, altitude], velocity=[airspeed, 0.0])
