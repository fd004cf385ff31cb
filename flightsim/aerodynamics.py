"""
Aerodynamics Module

Computes lift/drag coefficients and the four forces acting on the aircraft
based on:
- Angle of attack
- Airspeed and air density
- Throttle setting

Two coefficient models are supported, chosen per aircraft (see
AircraftConfig.aero_model):
- LEGACY: CL = CL_alpha*alpha, CD = CD0 + k*CL²
- TABLE:  CL and CD interpolated from an AeroDataTable. Table CD is taken as
  the total drag coefficient; CD0 is not added on top.

Force directions (x forward/downrange, z up):
- Thrust along the flow direction rotated by alpha
- Drag opposite the flow direction
- Lift perpendicular to the flow (flow direction rotated +90°)
- Weight straight down
"""

import numpy as np
from typing import Tuple

from .aircraft import AircraftConfig, AeroModel
from .data_import import AeroDataTable
from .environment import ISA_G0
from .state import ForceVectors

# Below this speed the flow direction is undefined
MIN_FLOW_SPEED = 1e-6

FORWARD = np.array([1.0, 0.0])


def lift_coefficient(alpha: float, cl_alpha: float) -> float:
    """Linear lift coefficient, alpha in radians."""
    return cl_alpha * alpha


def drag_coefficient(CL: float, cd0: float, k: float) -> float:
    """Parabolic drag polar."""
    return cd0 + k * CL**2


def table_lift_coefficient(alpha: float, table: AeroDataTable) -> float:
    if table is None or table.is_empty:
        return 0.0
    return table.cl(alpha)


def table_drag_coefficient(alpha: float, table: AeroDataTable) -> float:
    if table is None or table.is_empty:
        return 0.0
    return table.cd(alpha)


def calc_lift(rho: float, V: float, S: float, CL: float) -> float:
    """Lift force (N)."""
    return 0.5 * rho * V * V * S * CL


def calc_drag(rho: float, V: float, S: float, CD: float) -> float:
    """Drag force (N)."""
    return 0.5 * rho * V * V * S * CD


def calc_weight(mass: float, g: float = ISA_G0) -> float:
    """Weight (N)."""
    return mass * g


def calc_thrust(throttle: float, max_thrust: float) -> float:
    """Thrust (N), linear in throttle."""
    return throttle * max_thrust


def aero_coefficients(alpha: float, aircraft: AircraftConfig) -> Tuple[float, float]:
    """
    Lift and drag coefficients for the aircraft's active model.

    Args:
        alpha: Angle of attack (rad)
        aircraft: Aircraft configuration

    Returns:
        (CL, CD)
    """
    if aircraft.aero_model is AeroModel.TABLE:
        table = aircraft.aero_table
        return table_lift_coefficient(alpha, table), table_drag_coefficient(alpha, table)

    CL = lift_coefficient(alpha, aircraft.cl_alpha)
    return CL, drag_coefficient(CL, aircraft.cd0, aircraft.k)


def rotate(vector: np.ndarray, angle: float) -> np.ndarray:
    """Rotate a 2-vector counter-clockwise by angle (rad)."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([c * vector[0] - s * vector[1],
                     s * vector[0] + c * vector[1]])


def flow_direction(velocity: np.ndarray) -> np.ndarray:
    """Unit vector along velocity, or straight ahead when nearly stationary."""
    speed = np.linalg.norm(velocity)
    if speed > MIN_FLOW_SPEED:
        return velocity / speed
    return FORWARD.copy()


def compute_forces(
    velocity: np.ndarray,
    alpha: float,
    throttle: float,
    rho: float,
    aircraft: AircraftConfig
) -> ForceVectors:
    """
    Compute the thrust, drag, lift and weight vectors.

    Args:
        velocity: Velocity [vx, vz] (m/s)
        alpha: Angle of attack (rad)
        throttle: Throttle setting [0, 1]
        rho: Air density (kg/m³)
        aircraft: Aircraft configuration

    Returns:
        ForceVectors
    """
    velocity = np.asarray(velocity, dtype=np.float64)
    V = float(np.linalg.norm(velocity))
    direction = flow_direction(velocity)

    CL, CD = aero_coefficients(alpha, aircraft)

    L = calc_lift(rho, V, aircraft.wing_area, CL)
    D = calc_drag(rho, V, aircraft.wing_area, CD)
    W = calc_weight(aircraft.mass)
    T = calc_thrust(throttle, aircraft.max_thrust)

    F_thrust = rotate(direction, alpha) * T
    F_drag = direction * (-D) if V > MIN_FLOW_SPEED else np.zeros(2)
    F_lift = rotate(direction, np.pi / 2.0) * L
    F_weight = np.array([0.0, -W])

    return ForceVectors(
        thrust=F_thrust,
        drag=F_drag,
        lift=F_lift,
        weight=F_weight,
        CL=CL,
        CD=CD,
        airspeed=V,
        dynamic_pressure=0.5 * rho * V**2
    )
