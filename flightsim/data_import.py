"""
Data Import Module

Aerodynamic coefficient tables loaded from tabulated (alpha, CL, CD) samples.

Sample files are plain CSV with angle of attack in degrees:

    alpha,CL,CD
    -4,-0.18,0.021
    0,0.25,0.018
    ...

The header row is optional. Angles are converted to radians and the samples
sorted by angle when the table is built. Lookups interpolate linearly between
bracketing samples and clamp to the boundary sample outside the table range.
"""

import numpy as np
import pandas as pd
from scipy.interpolate import interp1d
from pathlib import Path
from typing import Iterable, Sequence, NamedTuple, Union


class AeroDataLoadError(ValueError):
    """Raised when aerodynamic sample data is missing or malformed."""


class AeroSample(NamedTuple):
    """One tabulated point. Angle in radians."""
    alpha: float
    CL: float
    CD: float


class AeroDataTable:
    """
    Sorted lift/drag coefficient table indexed by angle of attack.

    Built once from samples and never modified afterwards; the sample arrays
    are marked read-only. Several aircraft may hold the same table.
    """

    __slots__ = ('_alpha', '_CL', '_CD', '_cl_curve', '_cd_curve')

    def __init__(self, samples: Iterable[AeroSample] = ()):
        samples = sorted(samples, key=lambda s: s.alpha)
        self._alpha = np.array([s.alpha for s in samples], dtype=np.float64)
        self._CL = np.array([s.CL for s in samples], dtype=np.float64)
        self._CD = np.array([s.CD for s in samples], dtype=np.float64)

        if len(self._alpha) > 1 and np.any(np.diff(self._alpha) == 0.0):
            dupes = np.degrees(self._alpha[1:][np.diff(self._alpha) == 0.0])
            raise AeroDataLoadError(
                f"Duplicate angle of attack in samples: {np.round(dupes, 6).tolist()} deg"
            )

        for arr in (self._alpha, self._CL, self._CD):
            arr.setflags(write=False)

        self._cl_curve = self._build_curve(self._CL)
        self._cd_curve = self._build_curve(self._CD)

    @classmethod
    def from_samples(cls, rows: Iterable[Sequence[float]]) -> 'AeroDataTable':
        """
        Build a table from (alpha_deg, CL, CD) rows.

        Raises:
            AeroDataLoadError: if there are no rows, a row does not have three
                fields, or a field is not a finite number
        """
        samples = []
        for i, row in enumerate(rows):
            if len(row) != 3:
                raise AeroDataLoadError(f"Row {i}: expected 3 values (alpha, CL, CD), got {len(row)}")
            try:
                alpha_deg, CL, CD = (float(v) for v in row)
            except (TypeError, ValueError) as e:
                raise AeroDataLoadError(f"Row {i}: non-numeric value in {list(row)}") from e
            if not np.all(np.isfinite([alpha_deg, CL, CD])):
                raise AeroDataLoadError(f"Row {i}: non-finite value in {list(row)}")
            samples.append(AeroSample(np.radians(alpha_deg), CL, CD))

        if not samples:
            raise AeroDataLoadError("No aerodynamic samples supplied")

        return cls(samples)

    def __len__(self) -> int:
        return len(self._alpha)

    def __repr__(self) -> str:
        if self.is_empty:
            return "AeroDataTable(empty)"
        return (f"AeroDataTable({len(self)} samples, "
                f"{np.degrees(self.min_alpha):.1f}° to {np.degrees(self.max_alpha):.1f}°)")

    @property
    def is_empty(self) -> bool:
        return len(self._alpha) == 0

    @property
    def min_alpha(self) -> float:
        """Smallest tabulated angle (rad), 0.0 if empty."""
        return float(self._alpha[0]) if len(self._alpha) else 0.0

    @property
    def max_alpha(self) -> float:
        """Largest tabulated angle (rad), 0.0 if empty."""
        return float(self._alpha[-1]) if len(self._alpha) else 0.0

    @property
    def samples(self) -> tuple:
        return tuple(AeroSample(float(a), float(l), float(d))
                     for a, l, d in zip(self._alpha, self._CL, self._CD))

    def _build_curve(self, values: np.ndarray):
        if len(values) < 2:
            return None
        # Outside the range hold the edge value (no slope extrapolation)
        return interp1d(self._alpha, values, bounds_error=False,
                        fill_value=(values[0], values[-1]), assume_sorted=True)

    @staticmethod
    def _interpolate(alpha: float, values: np.ndarray, curve) -> float:
        if len(values) == 0:
            return 0.0
        if curve is None:
            return float(values[0])
        return float(curve(alpha))

    def cl(self, alpha: float) -> float:
        """Lift coefficient at alpha (rad)."""
        return self._interpolate(alpha, self._CL, self._cl_curve)

    def cd(self, alpha: float) -> float:
        """Drag coefficient at alpha (rad)."""
        return self._interpolate(alpha, self._CD, self._cd_curve)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to pandas DataFrame, angles back in degrees."""
        return pd.DataFrame({
            'alpha_deg': np.degrees(self._alpha),
            'CL': self._CL,
            'CD': self._CD
        })


def load_aero_csv(filepath: Union[str, Path]) -> AeroDataTable:
    """
    Load an aerodynamic table from an alpha,CL,CD CSV file.

    A leading header row is detected by its first character being a letter.
    Blank lines and rows missing one of the three values are skipped; fields
    past the third are ignored.

    Args:
        filepath: Path to CSV file

    Returns:
        AeroDataTable

    Raises:
        AeroDataLoadError: if the file cannot be read or parsed
    """
    path = Path(filepath)

    try:
        with open(path, 'r') as f:
            first_line = next((line for line in f if line.strip()), '')
    except OSError as e:
        raise AeroDataLoadError(f"Failed to open aero data file: {path}") from e

    has_header = first_line.lstrip()[:1].isalpha()

    try:
        df = pd.read_csv(path, header=None, usecols=[0, 1, 2], dtype=str,
                         skip_blank_lines=True)
    except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise AeroDataLoadError(f"Failed to parse aero data file {path}: {e}") from e

    if has_header:
        df = df.iloc[1:]
    df = df.dropna()

    if df.empty:
        raise AeroDataLoadError(f"No valid data found in: {path}")

    return AeroDataTable.from_samples(df.itertuples(index=False, name=None))
