"""
Circuit Simulation Driver for circuit_safety.

Steps a circuit through a horizon of whole simulated minutes. At each minute
every consumer's contribution is summed, the sustained part is passed through
the thermal filter, the total (sustained + inrush) is checked against the
breaker's trip curve, and the instant is classified:

    CRITICAL  the breaker trips
    WARNING   thermal current above the wire's continuous rating
    SAFE      otherwise

Each instant depends only on the fixed inputs and its own time, so the series
can be produced lazily, restarted, indexed directly or evaluated on a worker
pool in any order.

Usage:
    series = run(consumers, get_breaker_spec("Type C"), 16, get_wire_spec("2.5"), 60)

    for point in series:          # lazy
        ...
    points = series.evaluate_parallel(max_workers=4)
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from circuit_safety.catalog.breakers import BreakerSpec
from circuit_safety.catalog.wires import WireSpec
from circuit_safety.decision.trip import TripDecision, decide
from circuit_safety.physics.temperature import TemperatureModel, TemperatureReading
from circuit_safety.physics.thermal import ExponentialCurrentFilter, ThermalFilter
from circuit_safety.simulation.load_model import Consumer, evaluate
from circuit_safety.utils.errors import InvalidConfiguration, OutOfRange


logger = logging.getLogger(__name__)


MS_PER_MINUTE = 60_000


class RiskLevel(str, Enum):
    """Risk classification of one instant."""
    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BreakerStatus:
    """Breaker loading at one instant.

    Attributes:
        thermal_load_percent: Thermal current as % of the thermal trip level
        magnetic_load_percent: Instant current as % of the magnetic trip level
        temperature: Degree-based reading, only when a temperature model is used
    """
    thermal_load_percent: float
    magnetic_load_percent: float
    temperature: Optional[TemperatureReading] = None


@dataclass(frozen=True)
class SimulationPoint:
    """One simulated minute.

    Attributes:
        time_min: Minutes since energization
        thermal_current_a: Thermally lagged sustained current
        instant_current_a: Sustained plus inrush current
        rated_current_a: Breaker rating
        instant_trip_a: Magnetic trip threshold
        thermal_trip_a: Thermal trip threshold
        wire_continuous_a: Wire continuous rating
        wire_short_term_a: Wire short-term rating
        events: Startups and threshold crossings, in consumer order
        risk_level: Classification of this instant
        trip: Breaker trip decision
        breaker_status: Breaker loading percentages
        startups: Number of consumers starting a cycle at this minute
    """
    time_min: int
    thermal_current_a: float
    instant_current_a: float
    rated_current_a: float
    instant_trip_a: float
    thermal_trip_a: float
    wire_continuous_a: float
    wire_short_term_a: float
    events: Tuple[str, ...]
    risk_level: RiskLevel
    trip: TripDecision
    breaker_status: BreakerStatus
    startups: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary."""
        d = {
            'time_min': self.time_min,
            'thermal_current_a': self.thermal_current_a,
            'instant_current_a': self.instant_current_a,
            'rated_current_a': self.rated_current_a,
            'instant_trip_a': self.instant_trip_a,
            'thermal_trip_a': self.thermal_trip_a,
            'wire_continuous_a': self.wire_continuous_a,
            'wire_short_term_a': self.wire_short_term_a,
            'events': list(self.events),
            'risk_level': self.risk_level.value,
            'will_trip': self.trip.will_trip,
            'trip_reason': self.trip.reason.value if self.trip.reason else None,
            'time_to_trip_s': self.trip.time_to_trip_s,
            'thermal_load_percent': self.breaker_status.thermal_load_percent,
            'magnetic_load_percent': self.breaker_status.magnetic_load_percent,
            'startups': self.startups,
        }
        if self.breaker_status.temperature is not None:
            for key, value in self.breaker_status.temperature.to_dict().items():
                d[f'temperature_{key}'] = value
        return d


@dataclass(frozen=True)
class _InstantState:
    sustained_a: float
    instant_a: float
    thermal_a: float
    trip: TripDecision
    risk_level: RiskLevel
    events: Tuple[str, ...] = field(default_factory=tuple)
    startups: int = 0


class CircuitSimulator:
    """Evaluates single instants of a fixed circuit configuration.

    The consumer list is copied into a tuple on construction, so later changes
    to the caller's list do not affect a run in progress.
    """

    def __init__(
        self,
        consumers: Iterable[Consumer],
        breaker: BreakerSpec,
        rated_a: float,
        wire: WireSpec,
        thermal_filter: Optional[ThermalFilter] = None,
        temperature_model: Optional[TemperatureModel] = None,
    ):
        """Initialize and validate the simulator.

        Args:
            consumers: Loads on the circuit
            breaker: Breaker characteristic
            rated_a: Breaker rated current
            wire: Wire gauge data
            thermal_filter: Current lag model in amps, defaults to the wire's exponential lag
            temperature_model: Optional degree-based annotation

        Raises:
            InvalidConfiguration: On invalid consumers, rating or wire data, or a
                thermal filter whose output is not in amps
        """
        self.consumers: Tuple[Consumer, ...] = tuple(consumers)
        self.breaker = breaker
        self.rated_a = rated_a
        self.wire = wire
        self.temperature_model = temperature_model

        if rated_a <= 0:
            raise InvalidConfiguration(f"Rated current must be positive, got {rated_a}", field="rated_a")
        wire.validate()
        for consumer in self.consumers:
            consumer.validate()

        self.thermal_filter = thermal_filter or ExponentialCurrentFilter(wire.thermal_time_constant_min)
        # Output is compared against the wire rating in amps
        if self.thermal_filter.unit != "A":
            raise InvalidConfiguration(
                f"Thermal filter must estimate current in A, {type(self.thermal_filter).__name__} "
                f"reports {self.thermal_filter.unit!r}",
                field="thermal_filter",
                hint="Use a TemperatureModel for degree-based readings",
            )

        self.instant_trip_a = breaker.instant_trip_a(rated_a)
        self.thermal_trip_a = breaker.thermal_trip_a(rated_a)

    def _state(self, t: int) -> _InstantState:
        currents: List[float] = []
        inrushes: List[float] = []
        events: List[str] = []
        startups = 0

        for consumer in self.consumers:
            load = evaluate(consumer, t)
            currents.append(load.current_a)
            inrushes.append(load.inrush_current_a)
            events.extend(load.events)
            startups += load.is_startup

        # Exactly rounded sums do not depend on consumer order
        sustained = math.fsum(currents)
        instant = sustained + math.fsum(inrushes)
        # Only sustained current heats the wire
        thermal = self.thermal_filter.thermal_estimate(sustained, t)
        trip = decide(instant, t * MS_PER_MINUTE, self.breaker, self.rated_a)

        if trip.will_trip:
            risk = RiskLevel.CRITICAL
        elif thermal > self.wire.max_continuous_a:
            risk = RiskLevel.WARNING
        else:
            risk = RiskLevel.SAFE

        return _InstantState(sustained, instant, thermal, trip, risk, tuple(events), startups)

    def point(self, t: int) -> SimulationPoint:
        """Compute the point for minute ``t`` without reference to other points."""
        state = self._state(t)
        previous = self._state(t - 1) if t > 0 else None

        events = list(state.events)
        crossings = []
        if state.trip.will_trip and (previous is None or not previous.trip.will_trip):
            crossings.append(f"Breaker trip ({state.trip.reason.value})")
        over_wire = state.thermal_a > self.wire.max_continuous_a
        if over_wire and (previous is None or previous.thermal_a <= self.wire.max_continuous_a):
            crossings.append(f"Wire continuous rating exceeded ({state.thermal_a:.1f}A)")
        for crossing in crossings:
            logger.debug(crossing, extra={"time_min": t})
        events.extend(crossings)

        temperature = None
        if self.temperature_model is not None:
            temperature = self.temperature_model.reading(state.sustained_a, t)

        status = BreakerStatus(
            thermal_load_percent=state.thermal_a / self.thermal_trip_a * 100,
            magnetic_load_percent=state.instant_a / self.instant_trip_a * 100,
            temperature=temperature,
        )

        return SimulationPoint(
            time_min=t,
            thermal_current_a=state.thermal_a,
            instant_current_a=state.instant_a,
            rated_current_a=self.rated_a,
            instant_trip_a=self.instant_trip_a,
            thermal_trip_a=self.thermal_trip_a,
            wire_continuous_a=self.wire.max_continuous_a,
            wire_short_term_a=self.wire.max_short_term_a,
            events=tuple(events),
            risk_level=state.risk_level,
            trip=state.trip,
            breaker_status=status,
            startups=state.startups,
        )


class SimulationSeries:
    """Lazy, finite, restartable sequence of simulation points.

    Every iteration starts a fresh generator; indexing computes the requested
    minute directly.
    """

    def __init__(self, simulator: CircuitSimulator, horizon_min: int):
        self.simulator = simulator
        self.horizon_min = horizon_min

    def __len__(self) -> int:
        return self.horizon_min

    def __iter__(self) -> Iterator[SimulationPoint]:
        for t in range(self.horizon_min):
            yield self.simulator.point(t)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self.simulator.point(t) for t in range(self.horizon_min)[index])
        if index < 0:
            index += self.horizon_min
        if not 0 <= index < self.horizon_min:
            raise IndexError(f"minute {index} outside horizon of {self.horizon_min}")
        return self.simulator.point(index)

    def points(self) -> Tuple[SimulationPoint, ...]:
        """Materialize the whole series in time order."""
        return tuple(self)

    def evaluate_parallel(self, max_workers: Optional[int] = None) -> Tuple[SimulationPoint, ...]:
        """Compute all instants on a thread pool.

        Results arrive in completion order and are re-sorted by time.

        Args:
            max_workers: Pool size (executor default when None)

        Returns:
            Points ordered by ``time_min``
        """
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self.simulator.point, t) for t in range(self.horizon_min)]
            points = [future.result() for future in as_completed(futures)]

        logger.debug(f"Evaluated {len(points)} instants in parallel")
        return tuple(sorted(points, key=lambda p: p.time_min))

    def arrays(self) -> Dict[str, np.ndarray]:
        """Numeric columns of the series as arrays."""
        points = self.points()
        return {
            'time_min': np.array([p.time_min for p in points], dtype=np.int64),
            'instant_current_a': np.array([p.instant_current_a for p in points], dtype=np.float64),
            'thermal_current_a': np.array([p.thermal_current_a for p in points], dtype=np.float64),
        }

    def to_frame(self) -> pd.DataFrame:
        """Tabulate the series, one row per minute."""
        return points_frame(self)


def points_frame(points: Iterable[SimulationPoint]) -> pd.DataFrame:
    """Tabulate simulation points, one row per minute.

    Events are joined with ``"; "`` so every cell is a scalar.
    """
    rows = []
    for point in points:
        row = point.to_dict()
        row['events'] = "; ".join(row['events'])
        rows.append(row)
    return pd.DataFrame(rows)


def run(
    consumers: Iterable[Consumer],
    breaker: BreakerSpec,
    rated_a: float,
    wire: WireSpec,
    horizon_min: int,
    thermal_filter: Optional[ThermalFilter] = None,
    temperature_model: Optional[TemperatureModel] = None,
) -> SimulationSeries:
    """Simulate a circuit over ``horizon_min`` whole minutes.

    All inputs are validated before the series is returned, so iterating it
    never fails on configuration.

    Args:
        consumers: Loads on the circuit
        breaker: Breaker characteristic
        rated_a: Breaker rated current
        wire: Wire gauge data
        horizon_min: Number of minutes to simulate
        thermal_filter: Optional replacement for the exponential current lag
        temperature_model: Optional degree-based annotation

    Returns:
        SimulationSeries covering minutes 0 … horizon_min - 1

    Raises:
        OutOfRange: If the horizon is not positive
        InvalidConfiguration: On any other invalid input
    """
    if isinstance(horizon_min, bool) or not isinstance(horizon_min, (int, np.integer)):
        raise InvalidConfiguration(
            f"Horizon must be a whole number of minutes, got {horizon_min!r}",
            field="horizon_min",
        )
    if horizon_min <= 0:
        raise OutOfRange(f"Horizon must be positive, got {horizon_min}", field="horizon_min")

    simulator = CircuitSimulator(
        consumers,
        breaker,
        rated_a,
        wire,
        thermal_filter=thermal_filter,
        temperature_model=temperature_model,
    )
    return SimulationSeries(simulator, int(horizon_min))
