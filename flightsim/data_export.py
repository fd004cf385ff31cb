"""
Data Export Module

Export run history and the flight path trail for analysis:
- pandas DataFrames
- CSV with a commented metadata header
"""

import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

from .state import FlightPathTrail

# Column order and units for exported history
HISTORY_COLUMNS = {
    'time': 'time_s',
    'x': 'x_m',
    'altitude': 'altitude_m',
    'vx': 'vx_m_s',
    'vz': 'vz_m_s',
    'speed': 'speed_m_s',
    'throttle': 'throttle',
    'alpha_deg': 'alpha_deg',
    'CL': 'CL',
    'CD': 'CD',
    'dynamic_pressure': 'q_bar_Pa',
    'thrust': 'thrust_N',
    'drag': 'drag_N',
    'lift': 'lift_N',
    'weight': 'weight_N',
}


def history_to_dataframe(history: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Convert FlightDynamics.run() history to a DataFrame with unit-suffixed
    column names.
    """
    df = pd.DataFrame(history, columns=list(HISTORY_COLUMNS))
    return df.rename(columns=HISTORY_COLUMNS)


def trail_to_dataframe(trail: FlightPathTrail) -> pd.DataFrame:
    """Flight path trail as x_m / altitude_m columns, oldest first."""
    return pd.DataFrame(trail.to_array(), columns=['x_m', 'altitude_m'])


def export_history_csv(
    history: List[Dict[str, Any]],
    filename: Union[str, Path],
    metadata: Optional[Dict[str, Any]] = None
) -> pd.DataFrame:
    """
    Export run history to CSV.

    Args:
        history: List of records from FlightDynamics.run()
        filename: Output filename
        metadata: Optional metadata written as header comments

    Returns:
        The exported DataFrame
    """
    if not history:
        raise ValueError("History is empty")

    df = history_to_dataframe(history)

    with open(filename, 'w', newline='') as f:
        f.write("# 2-D Longitudinal Flight Simulation\n")
        f.write(f"# Generated: {datetime.now().isoformat()}\n")

        if metadata:
            for key, value in metadata.items():
                f.write(f"# {key}: {value}\n")

        f.write("#\n")
        f.write("# Units: SI (m, s, N, Pa); angles in degrees; throttle 0-1\n")
        f.write("# Axes: x downrange, altitude up\n")
        f.write("#\n")

        df.to_csv(f, index=False)

    return df
