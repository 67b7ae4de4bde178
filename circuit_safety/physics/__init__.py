"""
Physics Module for circuit_safety.

Modules:
- thermal.py: exponential current lag (default thermal model)
- temperature.py: degree-based wire/breaker temperature model

Both expose the ``ThermalFilter`` strategy interface
``thermal_estimate(current_a, elapsed_min)``.
"""

from circuit_safety.physics.thermal import (
    ThermalFilter,
    ExponentialCurrentFilter,
    thermal_load,
)
from circuit_safety.physics.temperature import (
    TemperatureModel,
    TemperatureReading,
    WireTemperatureModel,
    BreakerTemperatureModel,
    wire_temperature,
    breaker_temperature,
    trip_probability,
    time_to_trip_from_temperature,
)

__all__ = [
    # Current lag
    'ThermalFilter',
    'ExponentialCurrentFilter',
    'thermal_load',
    # Temperature
    'TemperatureModel',
    'TemperatureReading',
    'WireTemperatureModel',
    'BreakerTemperatureModel',
    'wire_temperature',
    'breaker_temperature',
    'trip_probability',
    'time_to_trip_from_temperature',
]
