"""
Tests for the command line entry point.
"""

import pandas as pd
from pathlib import Path
from flightsim.environment import density
from flightsim.main import main

AIRCRAFT_DIR = Path(__file__).resolve().parent.parent / "aircraft"


class TestAtmosphereCommand:

    def test_in_range(self, capsys):
        assert main(['--atmosphere', '1000']) == 0
        out = capsys.readouterr().out
        assert "Density:" in out
        assert f"{density(1000.0):.4f}" in out

    def test_out_of_range(self, capsys):
        assert main(['--atmosphere', '20000']) == 1
        assert "out of troposphere" in capsys.readouterr().out


class TestHeadlessRun:

    def test_default_aircraft(self, capsys):
        assert main(['--duration', '0.5']) == 0
        out = capsys.readouterr().out
        assert "Using default aircraft" in out
        assert "Final state" in out

    def test_trim_and_export(self, tmp_path, capsys):
        out_file = tmp_path / "run.csv"
        code = main(['--duration', '1', '--trim', '40', '--output', str(out_file)])
        assert code == 0
        assert "Starting from trim" in capsys.readouterr().out

        df = pd.read_csv(out_file, comment='#')
        assert len(df) == 62
        assert abs(df['altitude_m'].iloc[-1] - 100.0) < 1.0

    def test_table_aircraft(self, capsys):
        code = main(['--aircraft', str(AIRCRAFT_DIR / "trainer.yaml"), '--duration', '0.2'])
        assert code == 0
        assert "table aero model" in capsys.readouterr().out

    def test_autopilot_flags(self, capsys):
        code = main(['--duration', '0.2', '--speed-hold', '30', '--altitude-hold', '50'])
        assert code == 0
        assert "AP[SPD 30 ALT 50]" in capsys.readouterr().out

    def test_missing_aircraft(self, tmp_path, capsys):
        assert main(['--aircraft', str(tmp_path / "none.yaml")]) == 1
        assert "Error" in capsys.readouterr().out

    def test_bad_dt(self, capsys):
        assert main(['--dt', '0']) == 2

    def test_zero_duration(self, tmp_path, capsys):
        out_file = tmp_path / "run.csv"
        assert main(['--duration', '0', '--output', str(out_file)]) == 2
        assert "--duration must be positive" in capsys.readouterr().out
        assert not out_file.exists()

    def test_non_positive_trim_speed(self, capsys):
        assert main(['--duration', '0.1', '--trim', '0']) == 2
        assert "--trim airspeed must be positive" in capsys.readouterr().out
