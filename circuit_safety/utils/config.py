"""
Configuration management for circuit_safety.

Dataclass-based configuration for a circuit and a complete scenario (circuit
plus consumers), with validation and YAML persistence.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from circuit_safety.catalog.breakers import ALLOWED_RATINGS_A, BreakerType
from circuit_safety.catalog.wires import DEFAULT_WIRE_SIZE, WIRE_SIZES
from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.errors import (
    INVALID_CONFIGURATION,
    OUT_OF_RANGE,
    CircuitConfigError,
    InvalidConfiguration,
    Issue,
    Level,
    raise_for_issues,
)


@dataclass
class CircuitConfig:
    """Configuration of the protected circuit.

    Attributes:
        rated_a: Breaker rated current, from the standard series
        breaker_type: Breaker characteristic key ('Type B', 'Type C', 'Type D')
        wire_size: Wire gauge key in mm²; unknown gauges fall back to 2.5
        horizon_min: Number of simulated minutes
    """
    rated_a: int = 16
    breaker_type: str = BreakerType.C.value
    wire_size: str = DEFAULT_WIRE_SIZE
    horizon_min: int = 60

    def issues(self) -> List[Issue]:
        """Collect every problem with this configuration."""
        found = []

        if isinstance(self.rated_a, bool) or self.rated_a not in ALLOWED_RATINGS_A:
            found.append(Issue(
                Level.ERROR, INVALID_CONFIGURATION,
                f"Breaker rating {self.rated_a!r}A is not a standard rating",
                field="rated_a",
                hint=f"Use one of: {', '.join(str(r) for r in ALLOWED_RATINGS_A)}",
            ))

        try:
            BreakerType.from_key(self.breaker_type)
        except CircuitConfigError as e:
            found.append(e.to_issue())

        if str(self.wire_size) not in WIRE_SIZES:
            found.append(Issue(
                Level.WARNING, INVALID_CONFIGURATION,
                f"Unknown wire size {self.wire_size!r}, using {DEFAULT_WIRE_SIZE}mm²",
                field="wire_size",
            ))

        if isinstance(self.horizon_min, bool) or not isinstance(self.horizon_min, int):
            found.append(Issue(
                Level.ERROR, INVALID_CONFIGURATION,
                f"Horizon must be a whole number of minutes, got {self.horizon_min!r}",
                field="horizon_min",
            ))
        elif self.horizon_min <= 0:
            found.append(Issue(
                Level.ERROR, OUT_OF_RANGE,
                f"Horizon must be positive, got {self.horizon_min}",
                field="horizon_min",
            ))

        return found

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            InvalidConfiguration: On an invalid rating or breaker type
            OutOfRange: On a non-positive horizon
        """
        raise_for_issues(self.issues())

    def to_dict(self) -> dict:
        breaker_type = self.breaker_type
        if isinstance(breaker_type, BreakerType):
            breaker_type = breaker_type.value
        return {
            'rated_a': self.rated_a,
            'breaker_type': str(breaker_type),
            'wire_size': str(self.wire_size),
            'horizon_min': self.horizon_min,
        }


@dataclass
class ScenarioConfig:
    """A circuit together with the consumers attached to it.

    This configuration class provides methods for saving/loading YAML
    scenario files.
    """
    circuit: CircuitConfig = field(default_factory=CircuitConfig)
    consumers: List[Consumer] = field(default_factory=list)
    name: str = "scenario"

    def issues(self) -> List[Issue]:
        found = self.circuit.issues()
        for consumer in self.consumers:
            found.extend(consumer.issues())
        return found

    def validate(self) -> None:
        """Validate the circuit and every consumer."""
        raise_for_issues(self.issues())

    def save(self, path: Path) -> None:
        """Save scenario to YAML file.

        Args:
            path: Path to save scenario
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self._to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    @classmethod
    def load(cls, path: Path) -> 'ScenarioConfig':
        """Load scenario from YAML file.

        Args:
            path: Path to scenario file

        Returns:
            ScenarioConfig instance

        Raises:
            OSError: If the file cannot be read
            yaml.YAMLError: If the file is not valid YAML
            InvalidConfiguration: If the document does not describe a scenario
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls._from_dict(config_dict)

    def _to_dict(self) -> dict:
        return {
            'name': self.name,
            'circuit': self.circuit.to_dict(),
            'consumers': [consumer.to_dict() for consumer in self.consumers],
        }

    @classmethod
    def _from_dict(cls, d: dict) -> 'ScenarioConfig':
        if not isinstance(d, dict):
            raise InvalidConfiguration(f"Scenario must be a mapping, got {type(d).__name__}")
        circuit_cfg = d.get('circuit') or {}
        if not isinstance(circuit_cfg, dict):
            raise InvalidConfiguration("Scenario 'circuit' entry must be a mapping", field="circuit")
        consumer_cfgs = d.get('consumers') or []
        if not isinstance(consumer_cfgs, list):
            raise InvalidConfiguration("Scenario 'consumers' entry must be a list", field="consumers")
        circuit = CircuitConfig(
            rated_a=circuit_cfg.get('rated_a', 16),
            breaker_type=circuit_cfg.get('breaker_type', BreakerType.C.value),
            wire_size=str(circuit_cfg.get('wire_size', DEFAULT_WIRE_SIZE)),
            horizon_min=circuit_cfg.get('horizon_min', 60),
        )
        consumers = [Consumer.from_dict(c) for c in consumer_cfgs]
        return cls(circuit=circuit, consumers=consumers, name=d.get('name', 'scenario'))
