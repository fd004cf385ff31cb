"""
Environment Model

Provides atmospheric properties (temperature, pressure, density, speed of sound)
as functions of altitude.

Uses the International Standard Atmosphere (ISA) troposphere relations. Above
the tropopause the same formulas are simply extrapolated; callers that need
stratospheric accuracy must clamp or reject the altitude themselves.
"""

import numpy as np
from dataclasses import dataclass


# ISA Constants at sea level
ISA_T0 = 288.15      # Temperature (K)
ISA_P0 = 101325.0    # Pressure (Pa)
ISA_G0 = 9.80665     # Standard gravity (m/s²)
ISA_R = 287.0        # Specific gas constant for air (J/(kg·K))
ISA_GAMMA = 1.4      # Ratio of specific heats

# Lapse rate in troposphere (K/m)
ISA_LAPSE_RATE = 0.0065

# Tropopause altitude (m)
TROPOPAUSE_ALTITUDE = 11000.0

# Barometric exponent g/(R·L)
_PRESSURE_EXPONENT = ISA_G0 / (ISA_R * ISA_LAPSE_RATE)


@dataclass(frozen=True)
class AtmosphericProperties:
    """Atmospheric properties at a given altitude."""
    temperature: float      # K
    pressure: float         # Pa
    density: float          # kg/m³
    speed_of_sound: float   # m/s

    @property
    def temperature_celsius(self) -> float:
        """Temperature in degrees Celsius."""
        return self.temperature - 273.15


def temperature(altitude: float) -> float:
    """Temperature (K) with a linear lapse rate."""
    return ISA_T0 - ISA_LAPSE_RATE * altitude


def pressure(altitude: float) -> float:
    """Pressure (Pa) from the barometric formula."""
    return ISA_P0 * (1.0 - ISA_LAPSE_RATE * altitude / ISA_T0) ** _PRESSURE_EXPONENT


def density(altitude: float) -> float:
    """Density (kg/m³) from the ideal gas law."""
    return pressure(altitude) / (ISA_R * temperature(altitude))


def speed_of_sound(altitude: float) -> float:
    """Speed of sound (m/s)."""
    return float(np.sqrt(ISA_GAMMA * ISA_R * temperature(altitude)))


def isa_atmosphere(altitude: float) -> AtmosphericProperties:
    """
    Compute all atmospheric properties at once.

    Args:
        altitude: Geometric altitude above sea level (m)

    Returns:
        AtmosphericProperties at the given altitude
    """
    return AtmosphericProperties(
        temperature=temperature(altitude),
        pressure=pressure(altitude),
        density=density(altitude),
        speed_of_sound=speed_of_sound(altitude)
    )


def in_troposphere(altitude: float) -> bool:
    """True if the altitude lies in the modelled 0 - 11 km band."""
    return 0.0 <= altitude <= TROPOPAUSE_ALTITUDE
