"""
Safety Assessment Aggregator for circuit_safety.

Reduces a simulated series to a single verdict. The peak instantaneous
current and the peak thermal current are compared against four independent
limits; every limit that is exceeded adds one issue, and the circuit is safe
only when there are none.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from circuit_safety.catalog.breakers import BreakerSpec
from circuit_safety.catalog.wires import DEFAULT_WIRE_SIZE, WireSpec


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assessment:
    """Aggregate verdict over a series.

    Attributes:
        safe: True iff no issue was found
        issues: Human-readable problems, in check order
        max_instant_current_a: Peak instantaneous current
        max_thermal_load_a: Peak thermal current
    """
    safe: bool
    issues: Tuple[str, ...]
    max_instant_current_a: float
    max_thermal_load_a: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'safe': self.safe,
            'issues': list(self.issues),
            'max_instant_current_a': self.max_instant_current_a,
            'max_thermal_load_a': self.max_thermal_load_a,
        }


def assess(
    series: Iterable,
    breaker: BreakerSpec,
    rated_a: float,
    wire: WireSpec,
    wire_size: str = DEFAULT_WIRE_SIZE,
) -> Assessment:
    """Assess a simulated series.

    Args:
        series: Simulation points (any iterable, consumed once)
        breaker: Breaker characteristic
        rated_a: Breaker rated current
        wire: Wire gauge data
        wire_size: Gauge label used in issue text

    Returns:
        Assessment with maxima and issues
    """
    max_instant = 0.0
    max_thermal = 0.0
    for point in series:
        max_instant = max(max_instant, point.instant_current_a)
        max_thermal = max(max_thermal, point.thermal_current_a)

    type_name = breaker.breaker_type.value
    issues = []

    if max_instant > breaker.instant_trip_a(rated_a):
        issues.append(f"Circuit breaker ({type_name}) will trip on startup currents")
    if max_thermal > breaker.thermal_trip_a(rated_a):
        issues.append(f"Circuit breaker thermal limit exceeded ({type_name} characteristics)")
    if max_thermal > wire.max_continuous_a:
        issues.append(f"Wire thermal capacity ({wire_size}mm²) exceeded for continuous operation")
    if max_thermal > wire.max_short_term_a:
        issues.append(f"Wire thermal capacity ({wire_size}mm²) exceeded for short-term operation")

    for issue in issues:
        logger.warning(f"Assessment issue: {issue}")

    return Assessment(
        safe=not issues,
        issues=tuple(issues),
        max_instant_current_a=max_instant,
        max_thermal_load_a=max_thermal,
    )
