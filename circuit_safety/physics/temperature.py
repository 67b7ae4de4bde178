"""
Degree-based thermal model.

An alternative to the current-lag model that estimates absolute wire and
breaker temperatures from I²R heating, and derives a trip probability and a
time-to-trip from the breaker temperature.

Heating model (per element with thermal resistance R and capacity C):

    P      = k * R            (k = I² for the wire, (I/I_n)² for the breaker)
    ΔT_max = P * R
    τ      = C * R            (seconds)
    T(t)   = T_ambient + ΔT_max * (1 - exp(-t / τ))

The simulation driver never uses these values for its risk verdict; they are
only attached to points as an annotation when a ``TemperatureModel`` is
supplied.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np

from circuit_safety.catalog.wires import DEFAULT_WIRE_SIZE
from circuit_safety.physics.thermal import ThermalFilter


AMBIENT_TEMPERATURE_C = 25.0
AMBIENT_MAX_ALLOWED_C = 40.0

# PVC insulated copper wire
WIRE_THERMAL_RESISTANCE: Mapping[str, float] = MappingProxyType({
    '1.5': 3.8,
    '2.5': 3.2,
    '4.0': 2.8,
    '6.0': 2.4,
    '10.0': 2.0,
    '16.0': 1.8,
})
WIRE_THERMAL_CAPACITY: Mapping[str, float] = MappingProxyType({
    '1.5': 385,
    '2.5': 640,
    '4.0': 1024,
    '6.0': 1536,
    '10.0': 2560,
    '16.0': 4096,
})
WIRE_MAX_TEMPERATURE_C = 70.0    # PVC insulation limit
WIRE_RATED_TEMPERATURE_C = 50.0

BREAKER_THERMAL_RESISTANCE = 2.5   # °C/W
BREAKER_THERMAL_CAPACITY = 850.0   # J/°C
BREAKER_TRIP_TEMPERATURE_C = 60.0
BREAKER_WARNING_TEMPERATURE_C = 45.0


def _rise(power: float, resistance: float, capacity: float, elapsed_s: float) -> float:
    max_rise = power * resistance
    time_constant_s = capacity * resistance
    return float(max_rise * (1.0 - np.exp(-elapsed_s / time_constant_s)))


def wire_temperature(
    current_a: float,
    elapsed_s: float,
    wire_size: str,
    ambient_c: float = AMBIENT_TEMPERATURE_C,
) -> float:
    """Wire temperature in °C. Unknown gauges use the default gauge constants."""
    resistance = WIRE_THERMAL_RESISTANCE.get(wire_size, WIRE_THERMAL_RESISTANCE[DEFAULT_WIRE_SIZE])
    capacity = WIRE_THERMAL_CAPACITY.get(wire_size, WIRE_THERMAL_CAPACITY[DEFAULT_WIRE_SIZE])
    power = current_a ** 2 * resistance
    return ambient_c + _rise(power, resistance, capacity, elapsed_s)


def breaker_temperature(
    current_a: float,
    rated_a: float,
    elapsed_s: float,
    ambient_c: float = AMBIENT_TEMPERATURE_C,
) -> float:
    """Breaker temperature in °C."""
    power = (current_a / rated_a) ** 2 * BREAKER_THERMAL_RESISTANCE
    return ambient_c + _rise(power, BREAKER_THERMAL_RESISTANCE, BREAKER_THERMAL_CAPACITY, elapsed_s)


def trip_probability(breaker_temp_c: float, current_a: float, rated_a: float) -> float:
    """Trip probability in [0, 1] from breaker temperature and loading.

    Weighted 70/30 between how far the temperature is past the warning level
    and how far the current is past 80 % of rated.
    """
    temp_factor = max(
        0.0,
        (breaker_temp_c - BREAKER_WARNING_TEMPERATURE_C)
        / (BREAKER_TRIP_TEMPERATURE_C - BREAKER_WARNING_TEMPERATURE_C),
    )
    current_factor = max(0.0, (current_a - rated_a * 0.8) / (rated_a * 0.4))
    return min(1.0, temp_factor * 0.7 + current_factor * 0.3)


def time_to_trip_from_temperature(
    current_a: float,
    rated_a: float,
    breaker_temp_c: float,
) -> Optional[float]:
    """Seconds until a temperature-driven trip, or None below rated current."""
    if breaker_temp_c >= BREAKER_TRIP_TEMPERATURE_C or current_a >= rated_a * 1.5:
        return 0.0
    if current_a <= rated_a:
        return None

    # One hour at rated current
    capacity = rated_a ** 2 * 3600
    remaining = capacity * (1 - breaker_temp_c / BREAKER_TRIP_TEMPERATURE_C)
    return remaining / current_a ** 2


class WireTemperatureModel(ThermalFilter):
    """Wire temperature strategy, in °C."""

    unit = "°C"

    def __init__(self, wire_size: str, ambient_c: float = AMBIENT_TEMPERATURE_C):
        self.wire_size = wire_size
        self.ambient_c = ambient_c

    def thermal_estimate(self, current_a: float, elapsed_min: float) -> float:
        return wire_temperature(current_a, elapsed_min * 60, self.wire_size, self.ambient_c)


class BreakerTemperatureModel(ThermalFilter):
    """Breaker temperature strategy, in °C."""

    unit = "°C"

    def __init__(self, rated_a: float, ambient_c: float = AMBIENT_TEMPERATURE_C):
        self.rated_a = rated_a
        self.ambient_c = ambient_c

    def thermal_estimate(self, current_a: float, elapsed_min: float) -> float:
        return breaker_temperature(current_a, self.rated_a, elapsed_min * 60, self.ambient_c)


@dataclass(frozen=True)
class TemperatureReading:
    """Temperatures and breaker outlook at one instant."""
    wire_c: float
    breaker_c: float
    ambient_c: float
    max_wire_c: float
    max_breaker_c: float
    trip_probability: float
    time_to_trip_s: Optional[float]
    status: str

    def to_dict(self) -> dict:
        return {
            'wire_c': self.wire_c,
            'breaker_c': self.breaker_c,
            'ambient_c': self.ambient_c,
            'max_wire_c': self.max_wire_c,
            'max_breaker_c': self.max_breaker_c,
            'trip_probability': self.trip_probability,
            'time_to_trip_s': self.time_to_trip_s,
            'status': self.status,
        }


class TemperatureModel:
    """Combines the wire and breaker strategies into per-instant readings.

    Usage:
        model = TemperatureModel(wire_size="2.5", rated_a=16)
        reading = model.reading(current_a=20.0, elapsed_min=30)
    """

    def __init__(
        self,
        wire_size: str,
        rated_a: float,
        ambient_c: float = AMBIENT_TEMPERATURE_C,
    ):
        self.wire = WireTemperatureModel(wire_size, ambient_c)
        self.breaker = BreakerTemperatureModel(rated_a, ambient_c)
        self.rated_a = rated_a
        self.ambient_c = ambient_c

    def reading(self, current_a: float, elapsed_min: float) -> TemperatureReading:
        wire_c = self.wire.thermal_estimate(current_a, elapsed_min)
        breaker_c = self.breaker.thermal_estimate(current_a, elapsed_min)

        if breaker_c >= BREAKER_TRIP_TEMPERATURE_C:
            status = 'critical'
        elif breaker_c >= BREAKER_WARNING_TEMPERATURE_C:
            status = 'warning'
        else:
            status = 'normal'

        return TemperatureReading(
            wire_c=wire_c,
            breaker_c=breaker_c,
            ambient_c=self.ambient_c,
            max_wire_c=WIRE_MAX_TEMPERATURE_C,
            max_breaker_c=BREAKER_TRIP_TEMPERATURE_C,
            trip_probability=trip_probability(breaker_c, current_a, self.rated_a),
            time_to_trip_s=time_to_trip_from_temperature(current_a, self.rated_a, breaker_c),
            status=status,
        )
