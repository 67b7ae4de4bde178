"""
Unit tests for the thermal models.

Tests cover:
1. Exponential current lag (zero at energization, bounded by raw current)
2. Vectorized curve consistency
3. Degree-based wire and breaker temperatures
4. Trip probability and temperature-driven time to trip
"""

import numpy as np
import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circuit_safety.physics.thermal import ExponentialCurrentFilter, ThermalFilter, thermal_load
from circuit_safety.physics.temperature import (
    AMBIENT_TEMPERATURE_C,
    BREAKER_TRIP_TEMPERATURE_C,
    BreakerTemperatureModel,
    TemperatureModel,
    WireTemperatureModel,
    breaker_temperature,
    time_to_trip_from_temperature,
    trip_probability,
    wire_temperature,
)
from circuit_safety.utils.errors import InvalidConfiguration


class TestThermalLoad:
    """Test suite for the exponential current lag."""

    def test_zero_at_energization(self):
        assert thermal_load(10.0, 0, 20) == 0.0

    def test_one_time_constant(self):
        np.testing.assert_allclose(thermal_load(10.0, 20, 20), 10.0 * (1 - np.exp(-1)), rtol=1e-12)

    def test_bounded_and_monotone(self):
        values = [thermal_load(10.0, t, 20) for t in range(0, 500, 5)]
        assert all(0.0 <= v <= 10.0 for v in values)
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert values[-1] == pytest.approx(10.0, rel=1e-6)

    def test_zero_current(self):
        assert thermal_load(0.0, 30, 20) == 0.0

    def test_returns_python_float(self):
        assert isinstance(thermal_load(5.0, 3, 20), float)

    @pytest.mark.parametrize("tau", [0, -1])
    def test_non_positive_time_constant_raises(self, tau):
        with pytest.raises(InvalidConfiguration):
            thermal_load(10.0, 5, tau)


class TestExponentialCurrentFilter:

    @pytest.fixture
    def lag(self):
        return ExponentialCurrentFilter(time_constant_min=20)

    def test_is_thermal_filter(self, lag):
        assert isinstance(lag, ThermalFilter)
        assert lag.unit == "A"

    def test_matches_scalar_function(self, lag):
        assert lag(12.0, 7) == thermal_load(12.0, 7, 20)

    def test_curve_matches_scalar(self, lag):
        t = np.arange(60, dtype=np.float64)
        current = np.full_like(t, 15.0)
        expected = np.array([lag.thermal_estimate(15.0, ti) for ti in t])
        np.testing.assert_allclose(lag.curve(current, t), expected, rtol=1e-12)

    def test_invalid_time_constant(self):
        with pytest.raises(InvalidConfiguration):
            ExponentialCurrentFilter(0)


class TestTemperatureModel:
    """Test suite for the degree-based model."""

    def test_ambient_at_energization(self):
        assert wire_temperature(20.0, 0, "2.5") == AMBIENT_TEMPERATURE_C
        assert breaker_temperature(20.0, 16, 0) == AMBIENT_TEMPERATURE_C

    def test_breaker_steady_state(self):
        # (I/In)² * R * R = 2.5 * 2.5 above ambient at rated current
        np.testing.assert_allclose(breaker_temperature(16.0, 16, 1e7), 25.0 + 6.25, rtol=1e-9)

    def test_unknown_gauge_uses_default(self):
        assert wire_temperature(10.0, 600, "3.3") == wire_temperature(10.0, 600, "2.5")

    def test_strategies_take_minutes(self):
        wire = WireTemperatureModel("2.5")
        breaker = BreakerTemperatureModel(16)
        assert wire.unit == "°C"
        assert wire(10.0, 5) == wire_temperature(10.0, 300, "2.5")
        assert breaker(10.0, 5) == breaker_temperature(10.0, 16, 300)

    def test_reading_status(self):
        model = TemperatureModel("2.5", 16)
        cold = model.reading(0.0, 30)
        assert cold.status == "normal"
        assert cold.breaker_c == AMBIENT_TEMPERATURE_C
        assert cold.max_breaker_c == BREAKER_TRIP_TEMPERATURE_C
        assert cold.time_to_trip_s is None

        # 3× rated: steady state rise is 9 * 6.25 = 56.25 °C
        hot = model.reading(48.0, 10_000)
        assert hot.status == "critical"
        assert hot.time_to_trip_s == 0.0

    def test_reading_to_dict(self):
        d = TemperatureModel("1.5", 10).reading(5.0, 10).to_dict()
        assert set(d) == {
            "wire_c", "breaker_c", "ambient_c", "max_wire_c",
            "max_breaker_c", "trip_probability", "time_to_trip_s", "status",
        }


class TestTripOutlook:

    def test_probability_zero_when_cool_and_light(self):
        assert trip_probability(40.0, 5.0, 16) == 0.0

    def test_probability_weighting(self):
        # temp factor 1.0 * 0.7 + current factor 0.5 * 0.3
        assert trip_probability(60.0, 16.0, 16) == pytest.approx(0.85)

    def test_probability_capped(self):
        assert trip_probability(100.0, 100.0, 16) == 1.0

    def test_no_trip_at_or_below_rated(self):
        assert time_to_trip_from_temperature(16.0, 16, 30.0) is None

    def test_immediate_trip(self):
        assert time_to_trip_from_temperature(24.0, 16, 30.0) == 0.0
        assert time_to_trip_from_temperature(17.0, 16, 60.0) == 0.0

    def test_remaining_capacity(self):
        # 16² * 3600 * (1 - 30/60) / 20²
        assert time_to_trip_from_temperature(20.0, 16, 30.0) == pytest.approx(1152.0)
