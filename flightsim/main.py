"""
Main Entry Point

Run the 2-D flight simulator headless: fly a fixed duration from rest or from
trim, optionally with speed/altitude hold engaged, and print a summary.
"""

import argparse
import sys
import numpy as np

from .aircraft import AircraftConfig, AircraftConfigError, create_default_aircraft
from .dynamics import FlightDynamics, SimulationConfig
from .environment import isa_atmosphere, in_troposphere, TROPOPAUSE_ALTITUDE
from .state import ControlInputs
from .trim import compute_level_trim, trimmed_motion


def print_atmosphere(altitude: float) -> int:
    """Print ISA readings. Returns a process exit code."""
    if not in_troposphere(altitude):
        print(f"Altitude out of troposphere range (0-{TROPOPAUSE_ALTITUDE:.0f} m)")
        return 1

    atm = isa_atmosphere(altitude)
    print(f"At altitude {altitude:.1f} m:")
    print(f"  Temperature:    {atm.temperature_celsius:.2f} °C ({atm.temperature:.2f} K)")
    print(f"  Pressure:       {atm.pressure / 100:.2f} hPa")
    print(f"  Density:        {atm.density:.4f} kg/m³")
    print(f"  Speed of sound: {atm.speed_of_sound:.1f} m/s")
    return 0


def run_headless_simulation(
    aircraft: AircraftConfig,
    duration: float = 60.0,
    dt: float = 0.016,
    controls: ControlInputs = None,
    trim_speed: float = None,
    trim_altitude: float = 100.0,
    speed_hold: float = None,
    altitude_hold: float = None,
    output_file: str = None,
    verbose: bool = True
) -> FlightDynamics:
    """Run headless simulation for batch processing."""
    dynamics = FlightDynamics(aircraft, SimulationConfig(dt=dt))
    dynamics.reset(controls=controls or ControlInputs())

    if trim_speed is not None:
        trim = compute_level_trim(aircraft, trim_speed, trim_altitude)
        if trim.success:
            if verbose:
                print(f"Starting from trim: α={trim.alpha_deg:.2f}°, throttle={trim.throttle:.1%}")
            dynamics.reset(trimmed_motion(trim_speed, trim_altitude), trim.controls)
        elif verbose:
            print(f"Warning: {trim.message}, starting from rest")

    state = dynamics.state
    if speed_hold is not None:
        state.speed_hold.setpoint = speed_hold
        state.speed_hold.engage()
    if altitude_hold is not None:
        state.altitude_hold.setpoint = altitude_hold
        state.altitude_hold.engage()

    if verbose:
        print(f"Running {duration}s simulation...")

    history = dynamics.run(duration)

    if verbose:
        print(f"Simulation complete. {len(history)} data points recorded.")

    if output_file:
        from .data_export import export_history_csv
        export_history_csv(history, output_file, metadata={
            'aircraft': aircraft.name,
            'aero_model': aircraft.aero_model.name,
            'dt': dt,
        })
        if verbose:
            print(f"Exported {len(history)} records to {output_file}")

    if verbose:
        m = dynamics.motion
        print("\nFinal state:")
        print(f"  Time:     {state.time:.1f}s")
        print(f"  Distance: {m.x:.1f}m")
        print(f"  Altitude: {m.altitude:.1f}m")
        print(f"  Speed:    {m.speed:.1f}m/s ({m.speed * 3.6:.1f} km/h)")
        print(f"  Climb:    {np.degrees(m.climb_angle):.2f}°")
        print(f"  {dynamics.get_diagnostic_string()}")

    return dynamics


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2-D Longitudinal Flight Simulator")

    parser.add_argument(
        '--aircraft', '-a',
        type=str,
        help='Path to aircraft configuration (YAML or JSON)'
    )
    parser.add_argument(
        '--duration', '-d',
        type=float,
        default=60.0,
        help='Simulation duration (seconds)'
    )
    parser.add_argument(
        '--dt',
        type=float,
        default=0.016,
        help='Integration timestep (seconds)'
    )
    parser.add_argument(
        '--throttle',
        type=float,
        default=0.0,
        help='Initial throttle [0, 1]'
    )
    parser.add_argument(
        '--alpha',
        type=float,
        default=0.0,
        help='Initial angle of attack (degrees)'
    )
    parser.add_argument(
        '--trim',
        type=float,
        metavar='SPEED',
        help='Start in level trim at this airspeed (m/s) and --trim-altitude'
    )
    parser.add_argument(
        '--trim-altitude',
        type=float,
        default=100.0,
        help='Altitude for --trim (m)'
    )
    parser.add_argument(
        '--speed-hold',
        type=float,
        metavar='SPEED',
        help='Engage speed hold at this airspeed (m/s)'
    )
    parser.add_argument(
        '--altitude-hold',
        type=float,
        metavar='ALT',
        help='Engage altitude hold at this altitude (m)'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        help='CSV file for the run history'
    )
    parser.add_argument(
        '--atmosphere',
        type=float,
        metavar='ALT',
        help='Print ISA properties at this altitude and exit'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.atmosphere is not None:
        return print_atmosphere(args.atmosphere)

    if args.dt <= 0:
        print(f"Error: --dt must be positive, got {args.dt}")
        return 2
    if args.duration <= 0:
        print(f"Error: --duration must be positive, got {args.duration}")
        return 2
    if args.trim is not None and args.trim <= 0:
        print(f"Error: --trim airspeed must be positive, got {args.trim}")
        return 2

    if args.aircraft:
        try:
            aircraft = AircraftConfig.from_file(args.aircraft)
        except AircraftConfigError as e:
            print(f"Error: {e}")
            return 1
        print(f"Loaded aircraft: {aircraft.name} ({aircraft.aero_model.name.lower()} aero model)")
    else:
        aircraft = create_default_aircraft()
        print(f"Using default aircraft: {aircraft.name}")

    run_headless_simulation(
        aircraft,
        duration=args.duration,
        dt=args.dt,
        controls=ControlInputs(throttle=args.throttle, alpha_deg=args.alpha),
        trim_speed=args.trim,
        trim_altitude=args.trim_altitude,
        speed_hold=args.speed_hold,
        altitude_hold=args.altitude_hold,
        output_file=args.output
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
