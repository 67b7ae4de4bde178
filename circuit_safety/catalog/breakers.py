"""
Miniature circuit breaker reference data.

Trip curves for IEC 60898 type B, C and D breakers. The rated current is
chosen by the caller and is not part of a BreakerSpec; thresholds are
expressed as multiples of it.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from circuit_safety.utils.errors import InvalidConfiguration


ALLOWED_RATINGS_A = (6, 10, 16, 20, 25, 32, 40, 50, 63)


class BreakerType(str, Enum):
    """Closed set of supported trip characteristics."""
    B = "Type B"
    C = "Type C"
    D = "Type D"

    @property
    def letter(self) -> str:
        """Single-letter curve designation."""
        return self.value[-1]

    @classmethod
    def from_key(cls, key: Union[str, 'BreakerType']) -> 'BreakerType':
        """Resolve 'Type C', 'C' or a BreakerType to a member.

        Raises:
            InvalidConfiguration: If the key names no known type
        """
        if isinstance(key, cls):
            return key
        text = str(key).strip()
        for member in cls:
            if text in (member.value, member.letter, member.name):
                return member
        raise InvalidConfiguration(
            f"Unknown breaker type {key!r}",
            field="breaker_type",
            hint=f"Use one of: {', '.join(m.value for m in cls)}",
        )


@dataclass(frozen=True)
class BreakerSpec:
    """Catalog entry for one breaker characteristic.

    Attributes:
        breaker_type: Curve designation
        instantaneous_multiple: Magnetic trip threshold (× rated)
        thermal_multiple: Sustained overload threshold (× rated)
        thermal_trip_time_s: Trip time at exactly thermal_multiple × rated
        inrush_tolerance_multiple: Current tolerated during the inrush window (× rated)
        inrush_tolerance_duration_ms: Length of the inrush window after energization
        thermal_memory: Whether the thermal element remembers previous heating
        harmonic_sensitive: Whether harmonic content causes nuisance heating
        selectivity: Qualitative selectivity class
        description: Typical application
    """
    breaker_type: BreakerType
    instantaneous_multiple: float
    thermal_multiple: float
    thermal_trip_time_s: float
    inrush_tolerance_multiple: float
    inrush_tolerance_duration_ms: float
    thermal_memory: bool = True
    harmonic_sensitive: bool = False
    selectivity: str = "Medium"
    description: str = ""

    def instant_trip_a(self, rated_a: float) -> float:
        """Magnetic trip current for a given rating."""
        return rated_a * self.instantaneous_multiple

    def thermal_trip_a(self, rated_a: float) -> float:
        """Thermal trip current for a given rating."""
        return rated_a * self.thermal_multiple

    def inrush_limit_a(self, rated_a: float) -> float:
        """Highest current tolerated inside the inrush window."""
        return rated_a * self.inrush_tolerance_multiple


CIRCUIT_BREAKERS: Mapping[BreakerType, BreakerSpec] = MappingProxyType({
    BreakerType.B: BreakerSpec(
        breaker_type=BreakerType.B,
        instantaneous_multiple=3,
        thermal_multiple=1.13,
        thermal_trip_time_s=3600,
        inrush_tolerance_multiple=3,
        inrush_tolerance_duration_ms=100,
        thermal_memory=True,
        harmonic_sensitive=True,
        selectivity='Low',
        description='Suitable for resistive loads and lighting circuits',
    ),
    BreakerType.C: BreakerSpec(
        breaker_type=BreakerType.C,
        instantaneous_multiple=5,
        thermal_multiple=1.13,
        thermal_trip_time_s=3600,
        inrush_tolerance_multiple=5,
        inrush_tolerance_duration_ms=200,
        thermal_memory=True,
        harmonic_sensitive=False,
        selectivity='Medium',
        description='Suitable for slightly inductive loads and small motors',
    ),
    BreakerType.D: BreakerSpec(
        breaker_type=BreakerType.D,
        instantaneous_multiple=10,
        thermal_multiple=1.13,
        thermal_trip_time_s=3600,
        inrush_tolerance_multiple=10,
        inrush_tolerance_duration_ms=400,
        thermal_memory=True,
        harmonic_sensitive=False,
        selectivity='High',
        description='Suitable for highly inductive loads and motors',
    ),
})


def get_breaker_spec(
    breaker_type: Union[str, BreakerType],
    catalog: Mapping[BreakerType, BreakerSpec] = CIRCUIT_BREAKERS,
) -> BreakerSpec:
    """Look up a breaker spec by type key.

    Raises:
        InvalidConfiguration: If the type is unknown or missing from the catalog
    """
    member = BreakerType.from_key(breaker_type)
    try:
        return catalog[member]
    except KeyError:
        raise InvalidConfiguration(
            f"Breaker type {member.value} is not in the catalog",
            field="breaker_type",
        ) from None


def validate_rating(rated_a: int) -> int:
    """Check a breaker rating against the standard series.

    Raises:
        InvalidConfiguration: If the rating is not a standard value
    """
    if isinstance(rated_a, bool) or rated_a not in ALLOWED_RATINGS_A:
        raise InvalidConfiguration(
            f"Breaker rating {rated_a!r}A is not a standard rating",
            field="rated_a",
            hint=f"Use one of: {', '.join(str(r) for r in ALLOWED_RATINGS_A)}",
        )
    return int(rated_a)
