"""
Reference catalogs for circuit_safety.

Static, read-only lookup tables:
- wires.py: wire gauge current limits and thermal time constants
- breakers.py: breaker trip curves (types B, C, D)
- appliances.py: household appliance load profiles

The tables are immutable mappings of frozen dataclasses, loaded once at
import and passed by reference into the engine.
"""

from circuit_safety.catalog.wires import (
    WireSpec,
    WIRE_SIZES,
    DEFAULT_WIRE_SIZE,
    get_wire_spec,
    validate_wire_size,
)
from circuit_safety.catalog.breakers import (
    BreakerType,
    BreakerSpec,
    CIRCUIT_BREAKERS,
    ALLOWED_RATINGS_A,
    get_breaker_spec,
    validate_rating,
)
from circuit_safety.catalog.appliances import (
    ApplianceSpec,
    APPLIANCES,
    consumer_from_appliance,
    get_appliance,
)

__all__ = [
    # Wires
    'WireSpec',
    'WIRE_SIZES',
    'DEFAULT_WIRE_SIZE',
    'get_wire_spec',
    'validate_wire_size',
    # Breakers
    'BreakerType',
    'BreakerSpec',
    'CIRCUIT_BREAKERS',
    'ALLOWED_RATINGS_A',
    'get_breaker_spec',
    'validate_rating',
    # Appliances
    'ApplianceSpec',
    'APPLIANCES',
    'consumer_from_appliance',
    'get_appliance',
]
