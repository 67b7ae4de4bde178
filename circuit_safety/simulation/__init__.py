"""
Simulation Package for circuit_safety.

Components:
    - load_model: duty-cycled consumer contributions per instant
    - driver: per-minute circuit simulation producing the time series
"""

from .load_model import (
    Consumer,
    ConsumerLoad,
    evaluate,
    is_energized,
)

from .driver import (
    RiskLevel,
    BreakerStatus,
    SimulationPoint,
    SimulationSeries,
    CircuitSimulator,
    points_frame,
    run,
)


__all__ = [
    # Load model
    'Consumer',
    'ConsumerLoad',
    'evaluate',
    'is_energized',
    # Driver
    'RiskLevel',
    'BreakerStatus',
    'SimulationPoint',
    'SimulationSeries',
    'CircuitSimulator',
    'points_frame',
    'run',
]
