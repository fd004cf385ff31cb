"""
Aircraft Configuration

Defines the physical properties of the aircraft:
- Mass and wing reference area
- Legacy analytic aerodynamic coefficients (CL_alpha, CD0, k)
- Optional tabulated aerodynamic data
- Maximum thrust

Configuration files are YAML or JSON documents using the keys

    name, mass, S, CL_alpha, CD0, k, maxThrust, aeroDataFile

where aeroDataFile (optional) is a CSV path relative to the config file.
"""

import dataclasses
import warnings
import yaml
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple, Union

from .data_import import AeroDataTable, AeroDataLoadError, load_aero_csv


class AircraftConfigError(ValueError):
    """Raised when an aircraft configuration is missing fields or invalid."""


class AeroModel(Enum):
    """Which coefficient model an aircraft uses."""
    LEGACY = auto()   # CL = CL_alpha*alpha, CD = CD0 + k*CL^2
    TABLE = auto()    # CL, CD interpolated from an AeroDataTable


# Config file key -> field name
_REQUIRED_KEYS = {
    'mass': 'mass',
    'S': 'wing_area',
    'CL_alpha': 'cl_alpha',
    'CD0': 'cd0',
    'k': 'k',
    'maxThrust': 'max_thrust',
}

CONFIG_SUFFIXES = ('.json', '.yaml', '.yml')


@dataclass(frozen=True)
class AircraftConfig:
    """
    Static description of one aircraft.

    Immutable: to change parameters build a new config (see replace()) and
    hand the whole object to the simulation.
    """

    name: str = "Ultralight"

    mass: float = 120.0        # kg
    wing_area: float = 1.60    # S (m²)

    # Legacy aerodynamic model (used if no table)
    cl_alpha: float = 5.7      # Lift curve slope (per rad)
    cd0: float = 0.025         # Parasitic drag
    k: float = 0.04            # Induced drag factor (CD = CD0 + k*CL²)

    # Propulsion
    max_thrust: float = 500.0  # N

    # Tabulated aerodynamics (overrides legacy model when non-empty)
    aero_table: Optional[AeroDataTable] = dataclasses.field(default=None, compare=False)
    aero_data_file: Optional[str] = None

    def __post_init__(self):
        if not self.mass > 0:
            raise AircraftConfigError(f"mass must be positive, got {self.mass}")
        if not self.wing_area > 0:
            raise AircraftConfigError(f"wing area must be positive, got {self.wing_area}")
        if not self.max_thrust >= 0:
            raise AircraftConfigError(f"max thrust must be non-negative, got {self.max_thrust}")

    @property
    def aero_model(self) -> AeroModel:
        if self.aero_table is not None and not self.aero_table.is_empty:
            return AeroModel.TABLE
        return AeroModel.LEGACY

    @property
    def has_aero_table(self) -> bool:
        return self.aero_model is AeroModel.TABLE

    def replace(self, **changes) -> 'AircraftConfig':
        """Return a new, re-validated config with some fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_file(cls, filepath: Union[str, Path],
                  table_cache: Optional[Dict[Path, AeroDataTable]] = None) -> 'AircraftConfig':
        """
        Load aircraft configuration from a YAML or JSON file.

        If the config names an aero data file that cannot be loaded, a warning
        is issued and the aircraft falls back to the legacy coefficients.

        Args:
            filepath: Path to config file
            table_cache: Optional dict shared between loads so presets naming
                the same data file share one table

        Raises:
            AircraftConfigError: if the file cannot be read or a required
                field is missing or invalid
        """
        path = Path(filepath)
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise AircraftConfigError(
                f"Failed to open aircraft config file: {path} (absolute path: {path.resolve()})"
            ) from e
        except yaml.YAMLError as e:
            raise AircraftConfigError(f"Failed to parse aircraft config {path}: {e}") from e

        if not isinstance(data, dict):
            raise AircraftConfigError(f"Aircraft config {path} must be a mapping of keys to values")

        config = cls._from_dict(data, default_name=path.stem)

        if config.aero_data_file:
            table_path = (path.parent / config.aero_data_file).resolve()
            table = _load_table(table_path, table_cache)
            if table is not None:
                config = config.replace(aero_table=table)

        return config

    @classmethod
    def _from_dict(cls, data: Dict[str, Any], default_name: str = "Unknown") -> 'AircraftConfig':
        """Create config from dictionary (aero table not loaded)."""
        values = {}
        for key, field_name in _REQUIRED_KEYS.items():
            if key not in data:
                raise AircraftConfigError(f"Key not found in aircraft config: {key}")
            value = data[key]
            if isinstance(value, bool):
                raise AircraftConfigError(f"Failed to parse value for key '{key}': {value!r}")
            try:
                values[field_name] = float(value)
            except (TypeError, ValueError) as e:
                raise AircraftConfigError(f"Failed to parse value for key '{key}': {value!r}") from e

        aero_file = data.get('aeroDataFile')
        if aero_file is not None and not isinstance(aero_file, str):
            raise AircraftConfigError(f"aeroDataFile must be a string, got {aero_file!r}")

        return cls(
            name=str(data.get('name', default_name)),
            aero_data_file=aero_file or None,
            **values
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        data = {
            'name': self.name,
            'mass': self.mass,
            'S': self.wing_area,
            'CL_alpha': self.cl_alpha,
            'CD0': self.cd0,
            'k': self.k,
            'maxThrust': self.max_thrust,
        }
        if self.aero_data_file:
            data['aeroDataFile'] = self.aero_data_file
        return data

    def save_yaml(self, filepath: Union[str, Path]):
        """Save configuration to YAML file."""
        with open(filepath, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _load_table(table_path: Path,
                table_cache: Optional[Dict[Path, AeroDataTable]]) -> Optional[AeroDataTable]:
    if table_cache is not None and table_path in table_cache:
        return table_cache[table_path]

    try:
        table = load_aero_csv(table_path)
    except AeroDataLoadError as e:
        warnings.warn(f"{e}; falling back to legacy aerodynamic coefficients")
        return None

    if table_cache is not None:
        table_cache[table_path] = table
    return table


def create_default_aircraft() -> AircraftConfig:
    """Generic ultralight using the legacy coefficient model."""
    return AircraftConfig()


def list_aircraft_configs(directory: Union[str, Path]) -> List[Tuple[str, Path]]:
    """
    Find aircraft config files in a directory.

    Returns:
        (display name, path) pairs sorted by file name. The display name is
        the file stem with underscores shown as spaces, title-cased.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []

    paths = sorted(p for p in directory.iterdir()
                   if p.is_file() and p.suffix.lower() in CONFIG_SUFFIXES)
    return [(p.stem.replace('_', ' ').title(), p) for p in paths]
