"""
Household appliance reference data.

Typical current ranges, inrush behaviour, duty cycles and the selectable
power levels / operating modes for common appliances, plus the factory that
turns a catalog selection into a ``Consumer``.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.errors import InvalidConfiguration


_CURRENT_IN_LABEL = re.compile(r"\((\d+(?:\.\d+)?)A\)")


@dataclass(frozen=True)
class CurrentProfile:
    """Current draw of an appliance.

    Attributes:
        min_a: Lowest power setting
        max_a: Highest power setting
        typical_a: Typical continuous current
        inrush_multiple: Peak inrush as a multiple of rated current
        inrush_duration_ms: Duration of the inrush surge
    """
    min_a: float
    max_a: float
    typical_a: float
    inrush_multiple: float
    inrush_duration_ms: float


@dataclass(frozen=True)
class DutyProfile:
    """Duty cycle percentages: base cycle, typical usage and peak usage."""
    cycle: float
    typical: float
    peak: float


@dataclass(frozen=True)
class OperatingMode:
    name: str
    current_multiplier: float
    duty_multiplier: float


@dataclass(frozen=True)
class ApplianceSpec:
    """Catalog entry for one appliance."""
    current: CurrentProfile
    duty: DutyProfile
    startup_multiplier: float
    cycle_time_min: float
    power_levels: Tuple[str, ...]
    operating_modes: Tuple[OperatingMode, ...] = field(default_factory=tuple)
    description: str = ""

    def mode(self, name: str) -> Optional[OperatingMode]:
        for mode in self.operating_modes:
            if mode.name == name:
                return mode
        return None


APPLIANCES: Mapping[str, ApplianceSpec] = MappingProxyType({
    # High-power cooking
    'Induction Hob': ApplianceSpec(
        current=CurrentProfile(5, 32, 16, 1.2, 100),  # soft start
        duty=DutyProfile(70, 50, 90),
        startup_multiplier=1.2,
        cycle_time_min=30,
        power_levels=('Low (5A)', 'Medium (16A)', 'High (32A)'),
        operating_modes=(
            OperatingMode('Keep Warm', 0.2, 0.3),
            OperatingMode('Simmer', 0.4, 0.6),
            OperatingMode('Normal Cooking', 0.7, 1.0),
            OperatingMode('High Power', 1.0, 1.0),
        ),
        description='Modern electric cooktop using magnetic induction',
    ),
    'Electric Oven': ApplianceSpec(
        current=CurrentProfile(8, 16, 12, 1.5, 200),
        duty=DutyProfile(70, 60, 100),
        startup_multiplier=1.5,
        cycle_time_min=60,
        power_levels=('Low (8A)', 'Medium (12A)', 'High (16A)'),
        operating_modes=(
            OperatingMode('Light Baking', 0.5, 0.5),
            OperatingMode('Normal Baking', 0.75, 0.7),
            OperatingMode('High Temperature', 1.0, 1.0),
        ),
        description='Standard electric oven',
    ),

    # Motor-driven, high inrush
    'Washing Machine': ApplianceSpec(
        current=CurrentProfile(6, 10, 8, 6.0, 300),
        duty=DutyProfile(60, 40, 80),
        startup_multiplier=3.0,
        cycle_time_min=120,
        power_levels=('Eco (6A)', 'Normal (8A)', 'Intensive (10A)'),
        operating_modes=(
            OperatingMode('Eco Wash', 0.6, 0.5),
            OperatingMode('Quick Wash', 0.8, 0.8),
            OperatingMode('Heavy Duty', 1.0, 1.0),
        ),
        description='Standard washing machine',
    ),
    'Air Conditioner': ApplianceSpec(
        current=CurrentProfile(6, 12, 9, 8.0, 500),  # compressor
        duty=DutyProfile(80, 60, 100),
        startup_multiplier=4.0,
        cycle_time_min=30,
        power_levels=('Low Cool (6A)', 'Medium Cool (9A)', 'High Cool (12A)'),
        operating_modes=(
            OperatingMode('Energy Saver', 0.5, 0.4),
            OperatingMode('Normal Cooling', 0.75, 0.6),
            OperatingMode('Maximum Cooling', 1.0, 1.0),
        ),
        description='Split system air conditioner',
    ),
    'Heat Pump Dryer': ApplianceSpec(
        current=CurrentProfile(2, 8, 4, 4.0, 200),  # inverter compressor
        duty=DutyProfile(90, 85, 100),
        startup_multiplier=2.0,
        cycle_time_min=180,
        power_levels=('Eco (2A)', 'Normal (4A)', 'Express (6A)', 'Heavy Duty (8A)'),
        operating_modes=(
            OperatingMode('Eco Mode', 0.5, 1.2),
            OperatingMode('Normal', 1.0, 1.0),
            OperatingMode('Express', 1.5, 0.7),
            OperatingMode('Heavy Duty', 2.0, 1.1),
            OperatingMode('Air Refresh', 0.3, 0.5),
            OperatingMode('Low Heat Delicate', 0.6, 0.9),
        ),
        description='Energy-efficient heat pump clothes dryer with inverter-driven compressor',
    ),

    # Resistive heating
    'Electric Kettle': ApplianceSpec(
        current=CurrentProfile(8, 13, 10, 1.1, 50),
        duty=DutyProfile(100, 100, 100),
        startup_multiplier=1.1,
        cycle_time_min=3,
        power_levels=('Low (8A)', 'Medium (10A)', 'High (13A)'),
        operating_modes=(
            OperatingMode('Keep Warm', 0.3, 0.2),
            OperatingMode('Normal Boil', 1.0, 1.0),
        ),
        description='Electric water kettle',
    ),

    # Electronics
    'Gaming PC': ApplianceSpec(
        current=CurrentProfile(2, 6, 3.5, 2.0, 100),
        duty=DutyProfile(80, 60, 100),
        startup_multiplier=1.5,
        cycle_time_min=240,
        power_levels=('Idle (2A)', 'Gaming (4A)', 'Full Load (6A)'),
        operating_modes=(
            OperatingMode('Sleep', 0.1, 0.1),
            OperatingMode('Office Work', 0.4, 0.6),
            OperatingMode('Gaming', 0.8, 1.0),
            OperatingMode('Heavy Rendering', 1.0, 1.0),
        ),
        description='High-performance gaming computer',
    ),
    'Refrigerator': ApplianceSpec(
        current=CurrentProfile(1, 3, 1.5, 5.0, 400),
        duty=DutyProfile(30, 25, 40),
        startup_multiplier=3.0,
        cycle_time_min=20,
        power_levels=('Eco (1A)', 'Normal (1.5A)', 'Max Cool (3A)'),
        operating_modes=(
            OperatingMode('Night Mode', 0.6, 0.4),
            OperatingMode('Normal', 1.0, 1.0),
            OperatingMode('Quick Cool', 1.0, 1.5),
        ),
        description='Modern refrigerator with inverter compressor',
    ),
})


def current_from_label(label: str) -> Optional[float]:
    """Extract the amp value from a power level label like 'Normal (8A)'."""
    match = _CURRENT_IN_LABEL.search(label or "")
    return float(match.group(1)) if match else None


def get_appliance(
    name: str,
    catalog: Mapping[str, ApplianceSpec] = APPLIANCES,
) -> ApplianceSpec:
    """Look up an appliance by name.

    Raises:
        InvalidConfiguration: If the appliance is unknown
    """
    try:
        return catalog[name]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown appliance {name!r}",
            field="appliance",
            hint=f"Known appliances: {', '.join(sorted(catalog))}",
        ) from None


def consumer_from_appliance(
    name: str,
    power_level: str,
    operating_mode: str,
    catalog: Mapping[str, ApplianceSpec] = APPLIANCES,
) -> Consumer:
    """Create a consumer from a catalog selection.

    The rated current comes from the amp value embedded in the power level
    label, or the appliance's typical current when the label has none. Duty
    is the appliance's typical usage; the operating mode is kept as a label.

    Raises:
        InvalidConfiguration: For an unknown appliance, power level or mode
    """
    appliance = get_appliance(name, catalog)

    if power_level not in appliance.power_levels:
        raise InvalidConfiguration(
            f"{name}: unknown power level {power_level!r}",
            field="power_level",
            hint=f"Choose from: {', '.join(appliance.power_levels)}",
        )
    if appliance.mode(operating_mode) is None:
        raise InvalidConfiguration(
            f"{name}: unknown operating mode {operating_mode!r}",
            field="operating_mode",
            hint=f"Choose from: {', '.join(m.name for m in appliance.operating_modes)}",
        )

    current_a = current_from_label(power_level)
    if current_a is None:
        current_a = appliance.current.typical_a

    return Consumer(
        name=name,
        rated_current_a=current_a,
        duty_percent=appliance.duty.typical,
        startup_multiplier=appliance.startup_multiplier,
        cycle_period_min=appliance.cycle_time_min,
        power_level=power_level,
        operating_mode=operating_mode,
    )
