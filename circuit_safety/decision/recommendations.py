"""Remedial suggestions derived from an assessment's peak currents."""

from typing import Tuple

from circuit_safety.catalog.breakers import BreakerSpec, BreakerType
from circuit_safety.decision.assessment import Assessment


HARMONIC_DERATING_FRACTION = 0.8


def recommend(assessment: Assessment, breaker: BreakerSpec, rated_a: float) -> Tuple[str, ...]:
    """Suggest changes for an unsafe circuit; empty for a safe one."""
    if assessment.safe:
        return ()

    suggestions = []
    if assessment.max_instant_current_a > breaker.instant_trip_a(rated_a):
        suggestions.append(
            "Consider upgrading to a higher rated circuit breaker or stagger device startup times"
        )
    if assessment.max_thermal_load_a > breaker.thermal_trip_a(rated_a):
        suggestions.append("Reduce the continuous load or upgrade the circuit capacity")
    if (
        breaker.breaker_type is not BreakerType.D
        and assessment.max_instant_current_a > breaker.inrush_limit_a(rated_a)
    ):
        suggestions.append(f"Consider using a {BreakerType.D.value} breaker for better inrush current handling")
    if breaker.harmonic_sensitive and assessment.max_thermal_load_a > rated_a * HARMONIC_DERATING_FRACTION:
        suggestions.append("Consider derating the circuit due to harmonic-sensitive loads")
    return tuple(suggestions)
