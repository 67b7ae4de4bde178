"""
Circuit safety engine facade.

Resolves catalog keys, validates the whole request up front, runs the
simulation and assesses it. Configuration problems come back as structured
``Issue`` records on the outcome rather than as exceptions, and no partial
series is ever returned.

Usage:
    request = SimulationRequest(
        rated_a=16,
        breaker_type="Type C",
        wire_size="2.5",
        consumers=[consumer_from_appliance("Washing Machine", "Normal (8A)", "Heavy Duty")],
        horizon_min=120,
    )
    outcome = simulate_circuit(request)
    if outcome.ok and not outcome.assessment.safe:
        print(outcome.assessment.issues)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from circuit_safety.catalog.breakers import get_breaker_spec
from circuit_safety.catalog.wires import get_wire_spec, validate_wire_size
from circuit_safety.decision.assessment import Assessment, assess
from circuit_safety.decision.recommendations import recommend
from circuit_safety.physics.temperature import TemperatureModel
from circuit_safety.simulation.driver import SimulationPoint, run
from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.config import CircuitConfig, ScenarioConfig
from circuit_safety.utils.errors import CircuitConfigError, Issue, errors_only
from circuit_safety.utils.logging_config import LogContext, get_logger
from circuit_safety.utils.metrics import SeriesMetrics, calculate_series_metrics


logger = get_logger('engine')


@dataclass
class SimulationRequest:
    """Everything needed for one simulation run.

    Attributes:
        rated_a: Breaker rated current
        breaker_type: Breaker characteristic key
        wire_size: Wire gauge key (unknown gauges fall back to 2.5)
        consumers: Loads on the circuit
        horizon_min: Minutes to simulate
        with_temperature: Attach degree-based readings to each point
        max_workers: Evaluate instants on a thread pool of this size
    """
    rated_a: int = 16
    breaker_type: str = "Type C"
    wire_size: str = "2.5"
    consumers: Sequence[Consumer] = field(default_factory=list)
    horizon_min: int = 60
    with_temperature: bool = False
    max_workers: Optional[int] = None

    @property
    def circuit(self) -> CircuitConfig:
        return CircuitConfig(
            rated_a=self.rated_a,
            breaker_type=self.breaker_type,
            wire_size=self.wire_size,
            horizon_min=self.horizon_min,
        )

    def issues(self) -> List[Issue]:
        """Collect every problem with the request."""
        return ScenarioConfig(circuit=self.circuit, consumers=list(self.consumers)).issues()

    @classmethod
    def from_scenario(cls, scenario: ScenarioConfig, **kwargs) -> 'SimulationRequest':
        """Build a request from a loaded scenario."""
        return cls(
            rated_a=scenario.circuit.rated_a,
            breaker_type=scenario.circuit.breaker_type,
            wire_size=scenario.circuit.wire_size,
            consumers=list(scenario.consumers),
            horizon_min=scenario.circuit.horizon_min,
            **kwargs,
        )


@dataclass
class SimulationOutcome:
    """Result of a simulation request.

    Attributes:
        points: Simulated series in time order, None on configuration errors
        assessment: Aggregate verdict, None on configuration errors
        metrics: Series summary, None on configuration errors
        recommendations: Suggested remedies for an unsafe circuit
        issues: Configuration errors and warnings found during validation
        wire_size: Gauge actually used after the fallback
    """
    points: Optional[Tuple[SimulationPoint, ...]] = None
    assessment: Optional[Assessment] = None
    metrics: Optional[SeriesMetrics] = None
    recommendations: Tuple[str, ...] = ()
    issues: Tuple[Issue, ...] = ()
    wire_size: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the request was valid and a series was produced."""
        return self.points is not None

    @property
    def errors(self) -> List[Issue]:
        return errors_only(self.issues)

    def to_dict(self, include_points: bool = False) -> Dict[str, Any]:
        d = {
            'ok': self.ok,
            'wire_size': self.wire_size,
            'assessment': self.assessment.to_dict() if self.assessment else None,
            'metrics': self.metrics.to_dict() if self.metrics else None,
            'recommendations': list(self.recommendations),
            'issues': [issue.to_dict() for issue in self.issues],
        }
        if include_points:
            d['points'] = [p.to_dict() for p in self.points or ()]
        return d


def simulate_circuit(request: SimulationRequest) -> SimulationOutcome:
    """Validate, simulate and assess a circuit.

    Args:
        request: Simulation inputs

    Returns:
        SimulationOutcome; on invalid input only ``issues`` is populated
    """
    issues = request.issues()
    if errors_only(issues):
        for issue in errors_only(issues):
            logger.error(f"Invalid request: [{issue.code}] {issue.message}")
        return SimulationOutcome(issues=tuple(issues))

    wire_size = validate_wire_size(request.wire_size)
    try:
        breaker = get_breaker_spec(request.breaker_type)
        wire = get_wire_spec(wire_size)
        temperature_model = (
            TemperatureModel(wire_size, request.rated_a) if request.with_temperature else None
        )
        series = run(
            request.consumers,
            breaker,
            request.rated_a,
            wire,
            request.horizon_min,
            temperature_model=temperature_model,
        )
    except CircuitConfigError as e:
        logger.error(f"Invalid request: [{e.code}] {e.message}")
        return SimulationOutcome(issues=tuple(issues) + (e.to_issue(),))

    with LogContext(
        logger,
        "simulate_circuit",
        rated_a=request.rated_a,
        breaker=breaker.breaker_type.value,
        wire=wire_size,
        consumers=len(series.simulator.consumers),
        horizon_min=request.horizon_min,
    ):
        if request.max_workers:
            points = series.evaluate_parallel(request.max_workers)
        else:
            points = series.points()

        assessment = assess(points, breaker, request.rated_a, wire, wire_size=wire_size)
        metrics = calculate_series_metrics(points)

    return SimulationOutcome(
        points=points,
        assessment=assessment,
        metrics=metrics,
        recommendations=recommend(assessment, breaker, request.rated_a),
        issues=tuple(issues),
        wire_size=wire_size,
    )
