"""
Breaker Trip Decision for circuit_safety.

Three protection mechanisms are checked in strict priority order; the first
that fires determines the reason:

1. INSTANTANEOUS - magnetic release above ``instantaneous_multiple × rated``,
   trips with no delay.
2. INRUSH - inside the inrush tolerance window after energization, current
   above ``inrush_tolerance_multiple × rated`` trips now.
3. THERMAL - above ``thermal_multiple × rated`` the bimetal element trips
   after an inverse-square delay (I²t):

       t_trip = thermal_trip_time_s / (I / I_n)²

A current large enough for rule 1 is never reported as a thermal trip.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from circuit_safety.catalog.breakers import BreakerSpec
from circuit_safety.utils.errors import InvalidConfiguration


class TripReason(str, Enum):
    """Mechanism responsible for a trip."""
    INSTANTANEOUS = "instantaneous"
    INRUSH = "inrush"
    THERMAL = "thermal"


@dataclass(frozen=True)
class TripDecision:
    """Outcome of a trip check.

    Attributes:
        will_trip: Whether the breaker trips
        reason: Mechanism that trips it, None when it holds
        time_to_trip_s: Delay until the trip, None when it holds
    """
    will_trip: bool
    reason: Optional[TripReason] = None
    time_to_trip_s: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'will_trip': self.will_trip,
            'reason': self.reason.value if self.reason else None,
            'time_to_trip_s': self.time_to_trip_s,
        }


NO_TRIP = TripDecision(will_trip=False)


def thermal_trip_time(current_a: float, rated_a: float, breaker: BreakerSpec) -> float:
    """Inverse-square thermal trip delay in seconds."""
    thermal_energy_ratio = (current_a / rated_a) ** 2
    return breaker.thermal_trip_time_s / thermal_energy_ratio


def decide(
    instant_current_a: float,
    elapsed_ms: float,
    breaker: BreakerSpec,
    rated_a: float,
) -> TripDecision:
    """Decide whether, why and when the breaker trips.

    Args:
        instant_current_a: Instantaneous circuit current
        elapsed_ms: Milliseconds since the circuit was energized
        breaker: Breaker characteristic
        rated_a: Breaker rated current

    Returns:
        TripDecision for this instant

    Raises:
        InvalidConfiguration: If the rated current is not positive
    """
    if rated_a <= 0:
        raise InvalidConfiguration(f"Rated current must be positive, got {rated_a}", field="rated_a")

    if instant_current_a > breaker.instant_trip_a(rated_a):
        return TripDecision(True, TripReason.INSTANTANEOUS, 0.0)

    if elapsed_ms <= breaker.inrush_tolerance_duration_ms:
        if instant_current_a > breaker.inrush_limit_a(rated_a):
            return TripDecision(True, TripReason.INRUSH, elapsed_ms / 1000)

    if instant_current_a > breaker.thermal_trip_a(rated_a):
        return TripDecision(
            True,
            TripReason.THERMAL,
            thermal_trip_time(instant_current_a, rated_a, breaker),
        )

    return NO_TRIP
