"""
Tests for run history export.
"""

import pandas as pd
import pytest
from flightsim.dynamics import FlightDynamics
from flightsim.data_export import (
    HISTORY_COLUMNS,
    history_to_dataframe,
    trail_to_dataframe,
    export_history_csv,
)


@pytest.fixture
def sim():
    sim = FlightDynamics()
    sim.reset()
    sim.run(0.5)
    return sim


def test_history_dataframe(sim):
    df = history_to_dataframe(sim.history)
    assert list(df.columns) == list(HISTORY_COLUMNS.values())
    assert len(df) == len(sim.history)
    assert df['time_s'].is_monotonic_increasing


def test_trail_dataframe(sim):
    df = trail_to_dataframe(sim.state.trail)
    assert list(df.columns) == ['x_m', 'altitude_m']
    assert len(df) == len(sim.state.trail)


def test_export_csv(sim, tmp_path):
    out = tmp_path / "run.csv"
    exported = export_history_csv(sim.history, out, metadata={'aircraft': 'Ultralight'})

    text = out.read_text()
    assert text.startswith("# 2-D Longitudinal Flight Simulation")
    assert "# aircraft: Ultralight" in text

    df = pd.read_csv(out, comment='#')
    assert len(df) == len(exported)
    assert df['altitude_m'].iloc[-1] == pytest.approx(exported['altitude_m'].iloc[-1])


def test_export_empty_history(tmp_path):
    with pytest.raises(ValueError):
        export_history_csv([], tmp_path / "empty.csv")
