"""
Wire gauge reference data.

Current limits and thermal time constants for PVC insulated copper wire,
keyed by cross-section in mm² as a string ("1.5", "2.5", ...). Unknown keys
resolve to the default gauge instead of failing.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from circuit_safety.utils.errors import InvalidConfiguration


logger = logging.getLogger(__name__)


DEFAULT_WIRE_SIZE = "2.5"


@dataclass(frozen=True)
class WireSpec:
    """Catalog entry for one wire gauge.

    Attributes:
        max_continuous_a: Current the wire carries indefinitely
        max_short_term_a: Current tolerated for short periods
        thermal_time_constant_min: First-order heating time constant
        description: Typical application
    """
    max_continuous_a: float
    max_short_term_a: float
    thermal_time_constant_min: float
    description: str = ""

    def validate(self) -> None:
        """Validate catalog values."""
        if self.thermal_time_constant_min <= 0:
            raise InvalidConfiguration(
                f"Thermal time constant must be positive, got {self.thermal_time_constant_min}",
                field="thermal_time_constant_min",
            )
        if self.max_continuous_a <= 0 or self.max_short_term_a <= 0:
            raise InvalidConfiguration("Wire current limits must be positive", field="wire")


WIRE_SIZES: Mapping[str, WireSpec] = MappingProxyType({
    '1.5': WireSpec(16, 20, 15, 'Suitable for lighting circuits and small appliances'),
    '2.5': WireSpec(20, 25, 20, 'Common size for power circuits'),
    '4.0': WireSpec(27, 34, 25, 'Suitable for higher power appliances'),
    '6.0': WireSpec(34, 43, 30, 'Used for heavy duty circuits'),
    '10.0': WireSpec(46, 58, 35, 'High current applications'),
    '16.0': WireSpec(62, 78, 40, 'Industrial applications'),
})


def validate_wire_size(
    wire_size: Optional[str],
    catalog: Mapping[str, WireSpec] = WIRE_SIZES,
) -> str:
    """Return ``wire_size`` if the catalog knows it, else the default gauge."""
    if wire_size is not None and str(wire_size) in catalog:
        return str(wire_size)
    logger.warning(f"Unknown wire size {wire_size!r}, using {DEFAULT_WIRE_SIZE}mm²")
    return DEFAULT_WIRE_SIZE


def get_wire_spec(
    wire_size: Optional[str],
    catalog: Mapping[str, WireSpec] = WIRE_SIZES,
) -> WireSpec:
    """Look up a wire spec, falling back to the default gauge."""
    return catalog[validate_wire_size(wire_size, catalog)]
