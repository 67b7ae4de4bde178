"""
Decision Module for circuit_safety.

Modules:
- trip.py: breaker trip decision (instantaneous, inrush window, thermal I²t)
- assessment.py: aggregate safety verdict over a series
- recommendations.py: remedies for an unsafe verdict

Flow:
    instant current --> Trip Decision --> per-instant risk
                                              |
    simulated series ------------------> Assessment --> Recommendations
"""

from circuit_safety.decision.trip import (
    TripReason,
    TripDecision,
    decide,
    thermal_trip_time,
)
from circuit_safety.decision.assessment import (
    Assessment,
    assess,
)
from circuit_safety.decision.recommendations import recommend

__all__ = [
    # Trip
    'TripReason',
    'TripDecision',
    'decide',
    'thermal_trip_time',
    # Assessment
    'Assessment',
    'assess',
    'recommend',
]
