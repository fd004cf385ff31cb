"""
2-D Longitudinal Flight Simulator

A point-mass flight dynamics engine for a fixed-wing aircraft in the
vertical plane: ISA atmosphere, analytic or tabulated aerodynamics, RK4
integration, and PID speed/altitude hold.
"""

__version__ = "0.3.0"

# Core simulation modules
from .environment import (
    AtmosphericProperties,
    isa_atmosphere,
    temperature,
    pressure,
    density,
    speed_of_sound,
)
from .data_import import AeroDataTable, AeroSample, AeroDataLoadError, load_aero_csv
from .aircraft import (
    AircraftConfig,
    AircraftConfigError,
    AeroModel,
    create_default_aircraft,
    list_aircraft_configs,
)
from .aerodynamics import aero_coefficients, compute_forces
from .autopilot import PIDController, AutopilotChannel
from .state import (
    MotionState,
    ControlInputs,
    ForceVectors,
    FlightPathTrail,
    SimulationState,
    SimulationSnapshot,
)
from .dynamics import (
    FlightDynamics,
    SimulationConfig,
    integrate_rk4,
    step,
    snapshot,
    reset_simulation,
)

# Analysis modules
from .trim import TrimResult, compute_level_trim, trimmed_motion
from .data_export import history_to_dataframe, trail_to_dataframe, export_history_csv
