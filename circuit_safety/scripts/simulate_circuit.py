#!/usr/bin/env python3
"""
Circuit Safety Simulation Script.

This script simulates a set of appliances sharing one protected circuit and
reports whether the breaker will trip or the wire overheat.

Features:
- Circuit from command line options or a YAML scenario file
- Appliances picked from the built-in catalog
- Optional degree-based temperature annotation
- CSV export of the per-minute series
- JSON summary for scripting

Usage:
    circuit-safety --rating 16 --breaker-type "Type C" --wire-size 2.5 \\
        --appliance "Washing Machine|Normal (8A)|Heavy Duty" \\
        --appliance "Electric Kettle|High (13A)|Normal Boil" --horizon 120

    # From a scenario file
    circuit-safety --scenario kitchen.yaml --csv kitchen.csv

Exit codes: 0 safe, 1 unsafe, 2 invalid configuration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from loguru import logger

from circuit_safety.catalog.appliances import APPLIANCES, consumer_from_appliance
from circuit_safety.catalog.breakers import ALLOWED_RATINGS_A, BreakerType
from circuit_safety.catalog.wires import DEFAULT_WIRE_SIZE
from circuit_safety.engine import SimulationOutcome, SimulationRequest, simulate_circuit
from circuit_safety.simulation.driver import points_frame
from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.config import CircuitConfig, ScenarioConfig
from circuit_safety.utils.errors import CircuitConfigError
from circuit_safety.utils.logging_config import setup_logging


EXIT_SAFE = 0
EXIT_UNSAFE = 1
EXIT_INVALID = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Simulate breaker trips and wire heating on a shared circuit',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Circuit arguments
    parser.add_argument(
        '--scenario', type=str, default=None,
        help='YAML scenario file (overrides the circuit options)'
    )
    parser.add_argument(
        '--rating', type=int, default=16, choices=ALLOWED_RATINGS_A,
        help='Breaker rated current in amps'
    )
    parser.add_argument(
        '--breaker-type', type=str, default=BreakerType.C.value,
        help='Breaker characteristic (Type B, Type C, Type D)'
    )
    parser.add_argument(
        '--wire-size', type=str, default=DEFAULT_WIRE_SIZE,
        help='Wire cross-section in mm²'
    )
    parser.add_argument(
        '--horizon', type=int, default=60,
        help='Minutes to simulate'
    )

    # Load arguments
    parser.add_argument(
        '--appliance', action='append', default=[], metavar='NAME|POWER LEVEL|MODE',
        help='Catalog appliance to attach (repeatable)'
    )
    parser.add_argument(
        '--list-appliances', action='store_true',
        help='Print the appliance catalog and exit'
    )

    # Output arguments
    parser.add_argument(
        '--csv', type=str, default=None,
        help='Write the per-minute series to this CSV file'
    )
    parser.add_argument(
        '--save-scenario', type=str, default=None,
        help='Write the resolved scenario to this YAML file'
    )
    parser.add_argument(
        '--json', action='store_true',
        help='Print a JSON summary instead of text'
    )

    # Misc
    parser.add_argument(
        '--temperature', action='store_true',
        help='Annotate points with the degree-based temperature model'
    )
    parser.add_argument(
        '--workers', type=int, default=None,
        help='Evaluate instants on a thread pool of this size'
    )
    parser.add_argument(
        '--log-dir', type=str, default=None,
        help='Write the library log of this run to a file in this directory'
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def parse_appliance(spec: str) -> Consumer:
    """Turn 'Name|Power level|Mode' into a consumer."""
    parts = [part.strip() for part in spec.split('|')]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(
            f"Appliance must be given as 'NAME|POWER LEVEL|MODE', got {spec!r}"
        )
    return consumer_from_appliance(*parts)


def print_catalog() -> None:
    for name, appliance in APPLIANCES.items():
        print(f"{name}: {appliance.description}")
        print(f"  power levels: {', '.join(appliance.power_levels)}")
        print(f"  modes:        {', '.join(m.name for m in appliance.operating_modes)}")


def build_scenario(args: argparse.Namespace) -> ScenarioConfig:
    """Resolve the scenario from a file or the command line."""
    if args.scenario:
        logger.info(f"Loading scenario from {args.scenario}")
        scenario = ScenarioConfig.load(Path(args.scenario))
    else:
        scenario = ScenarioConfig(
            circuit=CircuitConfig(
                rated_a=args.rating,
                breaker_type=args.breaker_type,
                wire_size=args.wire_size,
                horizon_min=args.horizon,
            ),
            name='command-line',
        )

    for spec in args.appliance:
        scenario.consumers.append(parse_appliance(spec))
    return scenario


def report(outcome: SimulationOutcome) -> None:
    """Log a text report of an outcome."""
    assessment = outcome.assessment
    logger.info(f"Wire size: {outcome.wire_size}mm²")
    logger.info(str(outcome.metrics))

    if assessment.safe:
        logger.success("Circuit is safe for the configured loads")
        return

    logger.warning("Circuit parameters exceed recommended limits:")
    for issue in assessment.issues:
        logger.warning(f"  - {issue}")
    for suggestion in outcome.recommendations:
        logger.info(f"  -> {suggestion}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level='DEBUG' if args.verbose else 'INFO')

    if args.list_appliances:
        print_catalog()
        return EXIT_SAFE

    try:
        scenario = build_scenario(args)
    except (CircuitConfigError, argparse.ArgumentTypeError) as e:
        logger.error(str(e))
        return EXIT_INVALID
    except OSError as e:
        logger.error(f"Cannot read scenario: {e}")
        return EXIT_INVALID
    except yaml.YAMLError as e:
        logger.error(f"Scenario is not valid YAML: {e}")
        return EXIT_INVALID

    if args.log_dir:
        run_log = setup_logging(
            log_dir=Path(args.log_dir),
            level=logging.DEBUG if args.verbose else logging.INFO,
            console=False,
            show_thread=bool(args.workers),
            run_name=scenario.name,
        )
        logger.info(f"Library log: {run_log}")

    if args.save_scenario:
        scenario.save(Path(args.save_scenario))
        logger.info(f"Scenario saved: {args.save_scenario}")

    request = SimulationRequest.from_scenario(
        scenario,
        with_temperature=args.temperature,
        max_workers=args.workers,
    )
    logger.info(
        f"Simulating {len(request.consumers)} consumer(s) on a {request.rated_a}A "
        f"{request.breaker_type} breaker for {request.horizon_min} min"
    )
    outcome = simulate_circuit(request)

    for issue in outcome.issues:
        log = logger.error if issue.level.value == 'ERROR' else logger.warning
        log(f"[{issue.code}] {issue.message}" + (f" ({issue.hint})" if issue.hint else ""))

    if not outcome.ok:
        return EXIT_INVALID

    if args.csv:
        points_frame(outcome.points).to_csv(args.csv, index=False)
        logger.info(f"Series written: {args.csv}")

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        report(outcome)

    return EXIT_SAFE if outcome.assessment.safe else EXIT_UNSAFE


if __name__ == '__main__':
    sys.exit(main())
