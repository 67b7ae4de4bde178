"""
Consumer Load Model for circuit_safety.

Each consumer is an intermittent load that repeats a fixed cycle: it draws
its rated current for the first ``duty_percent`` of every cycle and nothing
for the rest. The first minute of each cycle carries an inrush surge of
``rated × (startup_multiplier - 1)`` on top of the rated current.

Time is discretized to whole simulated minutes, so a cycle start is an exact
``cycle_position == 0`` test.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Tuple

from circuit_safety.utils.errors import (
    INVALID_CONFIGURATION,
    InvalidConfiguration,
    Issue,
    Level,
    raise_for_issues,
)


_NUMERIC_DEFAULTS = {
    'rated_current_a': None,
    'duty_percent': 100.0,
    'startup_multiplier': 1.0,
    'cycle_period_min': 60.0,
}


@dataclass(frozen=True)
class Consumer:
    """One load attached to the simulated circuit.

    Attributes:
        name: Identifier used in events
        rated_current_a: Current drawn while running
        duty_percent: Share of each cycle the load is on (0-100)
        startup_multiplier: Peak/rated current ratio during inrush
        cycle_period_min: Cycle length in simulated minutes
        power_level: Display label of the selected power level
        operating_mode: Display label of the selected operating mode
    """
    name: str
    rated_current_a: float
    duty_percent: float = 100.0
    startup_multiplier: float = 1.0
    cycle_period_min: float = 60.0
    power_level: str = ""
    operating_mode: str = ""

    def issues(self) -> List[Issue]:
        """Collect every problem with this consumer's parameters."""
        found = []

        def bad(message: str, name: str) -> None:
            found.append(Issue(Level.ERROR, INVALID_CONFIGURATION, f"{self.name}: {message}", field=name))

        if self.cycle_period_min <= 0:
            bad(f"cycle period must be positive, got {self.cycle_period_min}", "cycle_period_min")
        if self.rated_current_a <= 0:
            bad(f"rated current must be positive, got {self.rated_current_a}", "rated_current_a")
        if not 0 <= self.duty_percent <= 100:
            bad(f"duty must be within 0-100%, got {self.duty_percent}", "duty_percent")
        if self.startup_multiplier < 1:
            bad(f"startup multiplier must be at least 1, got {self.startup_multiplier}", "startup_multiplier")
        return found

    def validate(self) -> None:
        """Validate consumer parameters.

        Raises:
            InvalidConfiguration: On the first invalid parameter
        """
        raise_for_issues(self.issues())

    @property
    def on_minutes(self) -> float:
        """Length of the energized part of each cycle."""
        return self.cycle_period_min * self.duty_percent / 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Consumer':
        """Create a consumer from a dictionary.

        Raises:
            InvalidConfiguration: If the entry is not a mapping, lacks ``name``
                or ``rated_current_a``, or has a non-numeric numeric field
        """
        if not isinstance(d, dict):
            raise InvalidConfiguration(f"Consumer entry must be a mapping, got {d!r}", field="consumers")
        for key in ('name', 'rated_current_a'):
            if d.get(key) is None:
                raise InvalidConfiguration(f"Consumer entry is missing {key!r}", field=key)

        name = str(d['name'])
        numbers = {}
        for key, default in _NUMERIC_DEFAULTS.items():
            value = d.get(key, default)
            try:
                numbers[key] = float(value)
            except (TypeError, ValueError):
                raise InvalidConfiguration(
                    f"{name}: {key} must be a number, got {value!r}",
                    field=key,
                ) from None

        return cls(
            name=name,
            power_level=str(d.get('power_level', '')),
            operating_mode=str(d.get('operating_mode', '')),
            **numbers,
        )


@dataclass(frozen=True)
class ConsumerLoad:
    """Contribution of one consumer at one instant.

    ``is_startup`` marks the first minute of an energized cycle.
    """
    current_a: float = 0.0
    inrush_current_a: float = 0.0
    events: Tuple[str, ...] = field(default_factory=tuple)
    is_startup: bool = False

    @property
    def is_on(self) -> bool:
        return self.current_a > 0


OFF = ConsumerLoad()


def is_energized(consumer: Consumer, time_min: float) -> bool:
    """Whether the consumer draws current at ``time_min``."""
    if consumer.cycle_period_min <= 0:
        raise InvalidConfiguration(
            f"{consumer.name}: cycle period must be positive, got {consumer.cycle_period_min}",
            field="cycle_period_min",
        )
    cycle_position = time_min % consumer.cycle_period_min
    return cycle_position < consumer.on_minutes


def evaluate(consumer: Consumer, time_min: float) -> ConsumerLoad:
    """Evaluate one consumer at a simulated instant.

    Args:
        consumer: Load to evaluate
        time_min: Simulated time in minutes

    Returns:
        ConsumerLoad with sustained current, inrush surge and startup events

    Raises:
        InvalidConfiguration: If the cycle period is not positive
    """
    if not is_energized(consumer, time_min):
        return OFF

    cycle_position = time_min % consumer.cycle_period_min
    if cycle_position != 0:
        return ConsumerLoad(current_a=consumer.rated_current_a)

    return ConsumerLoad(
        current_a=consumer.rated_current_a,
        inrush_current_a=consumer.rated_current_a * (consumer.startup_multiplier - 1),
        events=(f"{consumer.name} startup ({consumer.power_level})",),
        is_startup=True,
    )
