"""
Thermal lag models for circuit_safety.

The default model converts the sustained circuit current into a
"thermal-equivalent" current that approaches it exponentially as the wire
heats up:

    I_th(t) = I(t) * (1 - exp(-t / τ))

The formula is applied independently at every sample, using that sample's
current and the total time elapsed since the circuit was energized. It is not a
recursive low-pass filter over the preceding samples, so any instant can be
computed without the ones before it.

Alternate strategies (absolute temperature in °C) live in
``circuit_safety.physics.temperature`` and share the ``ThermalFilter``
interface.
"""

from abc import ABC, abstractmethod

import numpy as np

from circuit_safety.utils.errors import InvalidConfiguration


def thermal_load(
    raw_current_a: float,
    elapsed_min: float,
    time_constant_min: float,
) -> float:
    """Compute the thermally lagged current.

    Args:
        raw_current_a: Sustained current at this instant
        elapsed_min: Minutes since the circuit was energized
        time_constant_min: Thermal time constant of the conductor

    Returns:
        Thermal-equivalent current in amps, never above ``raw_current_a``

    Raises:
        InvalidConfiguration: If the time constant is not positive
    """
    if time_constant_min <= 0:
        raise InvalidConfiguration(
            f"Thermal time constant must be positive, got {time_constant_min}",
            field="thermal_time_constant_min",
        )
    return float(raw_current_a * (1.0 - np.exp(-elapsed_min / time_constant_min)))


class ThermalFilter(ABC):
    """Abstract base class for thermal estimates of a conductor."""

    unit: str = ""

    @abstractmethod
    def thermal_estimate(self, current_a: float, elapsed_min: float) -> float:
        """Estimate the thermal state after ``elapsed_min`` at ``current_a``.

        Args:
            current_a: Current through the element
            elapsed_min: Minutes since energization

        Returns:
            Thermal metric in ``self.unit``
        """
        pass

    def __call__(self, current_a: float, elapsed_min: float) -> float:
        return self.thermal_estimate(current_a, elapsed_min)


class ExponentialCurrentFilter(ThermalFilter):
    """Default first-order lag on current, in amps."""

    unit = "A"

    def __init__(self, time_constant_min: float):
        """Initialize the filter.

        Args:
            time_constant_min: Thermal time constant in minutes
        """
        if time_constant_min <= 0:
            raise InvalidConfiguration(
                f"Thermal time constant must be positive, got {time_constant_min}",
                field="thermal_time_constant_min",
            )
        self.time_constant_min = time_constant_min

    def thermal_estimate(self, current_a: float, elapsed_min: float) -> float:
        return thermal_load(current_a, elapsed_min, self.time_constant_min)

    def curve(self, current_a: np.ndarray, elapsed_min: np.ndarray) -> np.ndarray:
        """Vectorized form over matching arrays of currents and times."""
        current_a = np.asarray(current_a, dtype=np.float64)
        elapsed_min = np.asarray(elapsed_min, dtype=np.float64)
        return current_a * (1.0 - np.exp(-elapsed_min / self.time_constant_min))

    def __repr__(self) -> str:
        return f"ExponentialCurrentFilter(time_constant_min={self.time_constant_min})"
