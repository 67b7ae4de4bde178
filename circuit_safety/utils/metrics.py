"""
Series metrics for circuit_safety.

Summary statistics over a simulated series:
- Peak and mean currents
- Minutes spent at each risk level
- First trip and its mechanism
- Time above the wire's continuous rating
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import numpy as np

from circuit_safety.simulation.driver import RiskLevel, SimulationPoint


@dataclass
class SeriesMetrics:
    """Container for series summary metrics.

    Attributes:
        horizon_min: Number of simulated minutes
        peak_instant_current_a: Highest instantaneous current
        peak_thermal_current_a: Highest thermal current
        mean_instant_current_a: Mean instantaneous current
        minutes_safe: Minutes classified SAFE
        minutes_warning: Minutes classified WARNING
        minutes_critical: Minutes classified CRITICAL
        first_trip_min: Minute of the first trip, None if it never trips
        first_trip_reason: Mechanism of the first trip
        minutes_over_wire_continuous: Minutes with thermal current above the wire rating
        startup_events: Number of consumer startups
    """
    horizon_min: int
    peak_instant_current_a: float
    peak_thermal_current_a: float
    mean_instant_current_a: float
    minutes_safe: int
    minutes_warning: int
    minutes_critical: int
    first_trip_min: Optional[int]
    first_trip_reason: Optional[str]
    minutes_over_wire_continuous: int
    startup_events: int

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary."""
        return {
            'horizon_min': self.horizon_min,
            'peak_instant_current_a': self.peak_instant_current_a,
            'peak_thermal_current_a': self.peak_thermal_current_a,
            'mean_instant_current_a': self.mean_instant_current_a,
            'minutes_safe': self.minutes_safe,
            'minutes_warning': self.minutes_warning,
            'minutes_critical': self.minutes_critical,
            'first_trip_min': self.first_trip_min,
            'first_trip_reason': self.first_trip_reason,
            'minutes_over_wire_continuous': self.minutes_over_wire_continuous,
            'startup_events': self.startup_events,
        }

    def __str__(self) -> str:
        first_trip = (
            f"t={self.first_trip_min} min ({self.first_trip_reason})"
            if self.first_trip_min is not None else "none"
        )
        return (
            f"Series Metrics:\n"
            f"  Horizon:       {self.horizon_min} min\n"
            f"  Peak instant:  {self.peak_instant_current_a:.1f} A\n"
            f"  Peak thermal:  {self.peak_thermal_current_a:.1f} A\n"
            f"  Mean instant:  {self.mean_instant_current_a:.1f} A\n"
            f"  Safe/Warn/Crit: {self.minutes_safe}/{self.minutes_warning}/{self.minutes_critical} min\n"
            f"  First trip:    {first_trip}\n"
            f"  Over wire:     {self.minutes_over_wire_continuous} min\n"
            f"  Startups:      {self.startup_events}"
        )


def calculate_series_metrics(points: Iterable[SimulationPoint]) -> SeriesMetrics:
    """Calculate summary metrics for a series.

    Args:
        points: Simulation points in time order

    Returns:
        SeriesMetrics for the series (all zeros for an empty series)
    """
    points = list(points)

    instant = np.array([p.instant_current_a for p in points], dtype=np.float64)
    thermal = np.array([p.thermal_current_a for p in points], dtype=np.float64)
    wire_limit = np.array([p.wire_continuous_a for p in points], dtype=np.float64)
    risk = np.array([p.risk_level.value for p in points], dtype=object)

    first_trip = next((p for p in points if p.trip.will_trip), None)
    startups = sum(p.startups for p in points)

    return SeriesMetrics(
        horizon_min=len(points),
        peak_instant_current_a=float(instant.max()) if len(points) else 0.0,
        peak_thermal_current_a=float(thermal.max()) if len(points) else 0.0,
        mean_instant_current_a=float(instant.mean()) if len(points) else 0.0,
        minutes_safe=int(np.sum(risk == RiskLevel.SAFE.value)),
        minutes_warning=int(np.sum(risk == RiskLevel.WARNING.value)),
        minutes_critical=int(np.sum(risk == RiskLevel.CRITICAL.value)),
        first_trip_min=first_trip.time_min if first_trip is not None else None,
        first_trip_reason=first_trip.trip.reason.value if first_trip is not None else None,
        minutes_over_wire_continuous=int(np.sum(thermal > wire_limit)),
        startup_events=startups,
    )
