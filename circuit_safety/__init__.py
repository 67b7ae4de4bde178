"""
circuit_safety: thermal and trip simulation for shared household circuits.

Estimates whether intermittent loads on one protected circuit will trip the
breaker or overheat the wire:
1. Load Model: duty-cycled consumers with startup inrush
2. Thermal Filter: exponential lag of sustained current in the wire
3. Trip Decision: instantaneous, inrush-window and thermal I²t mechanisms
4. Assessment: pass/fail verdict over the simulated horizon

Licensed under the MIT License
"""

__version__ = "1.0.0"

from circuit_safety.utils.errors import InvalidConfiguration, OutOfRange
from circuit_safety.catalog import (
    APPLIANCES,
    CIRCUIT_BREAKERS,
    WIRE_SIZES,
    BreakerType,
    consumer_from_appliance,
)
from circuit_safety.simulation import Consumer, RiskLevel, run
from circuit_safety.decision import assess
from circuit_safety.engine import SimulationRequest, SimulationOutcome, simulate_circuit

__all__ = [
    "InvalidConfiguration",
    "OutOfRange",
    "APPLIANCES",
    "CIRCUIT_BREAKERS",
    "WIRE_SIZES",
    "BreakerType",
    "consumer_from_appliance",
    "Consumer",
    "RiskLevel",
    "run",
    "assess",
    "SimulationRequest",
    "SimulationOutcome",
    "simulate_circuit",
]
