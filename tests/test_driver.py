"""
Unit tests for the simulation driver.

Tests cover:
1. Reference scenarios (startup surge, magnetic trip, sustained overload)
2. Risk classification and threshold-crossing events
3. Lazy, restartable and order-independent evaluation
4. Input validation
5. Tabular and array exports
"""

import numpy as np
import pytest
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from circuit_safety.catalog.breakers import get_breaker_spec
from circuit_safety.catalog.wires import get_wire_spec
from circuit_safety.decision.trip import TripReason
from circuit_safety.physics.temperature import TemperatureModel, WireTemperatureModel
from circuit_safety.physics.thermal import ThermalFilter
from circuit_safety.simulation.driver import RiskLevel, SimulationSeries, points_frame, run
from circuit_safety.simulation.load_model import Consumer
from circuit_safety.utils.errors import InvalidConfiguration, OutOfRange


@pytest.fixture
def type_c():
    return get_breaker_spec("Type C")


@pytest.fixture
def wire():
    return get_wire_spec("2.5")


def steady(name, current_a, multiplier=1.0, power_level=""):
    return Consumer(
        name=name,
        rated_current_a=current_a,
        duty_percent=100,
        startup_multiplier=multiplier,
        cycle_period_min=60,
        power_level=power_level,
    )


class InstantFilter(ThermalFilter):
    """Wire current follows the load with no lag."""

    unit = "A"

    def thermal_estimate(self, current_a, elapsed_min):
        return current_a


class TestStartupSurge:
    """Single motor with a 6× startup on a 16 A Type C breaker."""

    @pytest.fixture
    def series(self, type_c, wire):
        return run([steady("Motor", 10.0, 6.0, "High")], type_c, 16, wire, 60)

    def test_surge_at_energization(self, series):
        first = series[0]
        assert first.instant_current_a == pytest.approx(60.0)
        assert first.thermal_current_a == 0.0

    def test_surge_trips_thermally(self, series):
        # 60 A is below the 80 A magnetic limit but above 1.13 × 16
        first = series[0]
        assert first.trip.reason is TripReason.THERMAL
        assert first.trip.time_to_trip_s == pytest.approx(256.0)
        assert first.risk_level is RiskLevel.CRITICAL

    def test_events_at_energization(self, series):
        assert series[0].events == ("Motor startup (High)", "Breaker trip (thermal)")

    def test_safe_after_surge(self, series):
        rest = series[1:]
        assert len(rest) == 59
        assert all(p.risk_level is RiskLevel.SAFE for p in rest)
        assert all(p.events == () for p in rest)
        assert series[1].instant_current_a == 10.0
        np.testing.assert_allclose(series[1].thermal_current_a, 10.0 * (1 - np.exp(-1 / 20)), rtol=1e-12)


class TestMagneticTrip:

    def test_instantaneous_trip(self, type_c, wire):
        series = run([steady("Compressor", 10.0, 11.0)], type_c, 16, wire, 60)
        first = series[0]
        assert first.instant_current_a == pytest.approx(110.0)
        assert first.trip.reason is TripReason.INSTANTANEOUS
        assert first.trip.time_to_trip_s == 0.0
        assert first.risk_level is RiskLevel.CRITICAL
        assert first.breaker_status.magnetic_load_percent == pytest.approx(137.5)


class TestSustainedOverload:
    """Two or three 10 A heaters on a 16 A Type C breaker."""

    def test_two_heaters_trip_every_minute(self, type_c, wire):
        series = run([steady("A", 10.0), steady("B", 10.0)], type_c, 16, wire, 60)
        points = series.points()
        assert all(p.trip.reason is TripReason.THERMAL for p in points)
        assert all(p.risk_level is RiskLevel.CRITICAL for p in points)
        assert points[0].events == ("A startup ()", "B startup ()", "Breaker trip (thermal)")
        # Trip is reported only when it starts
        assert all("Breaker trip (thermal)" not in p.events for p in points[1:])
        assert max(p.thermal_current_a for p in points) < wire.max_continuous_a

    def test_wire_crossing_event(self, type_c, wire):
        heaters = [steady(name, 10.0) for name in ("A", "B", "C")]
        series = run(heaters, type_c, 16, wire, 60)
        crossings = [
            (p.time_min, e) for p in series for e in p.events
            if e.startswith("Wire continuous rating exceeded")
        ]
        assert crossings == [(22, "Wire continuous rating exceeded (20.0A)")]


class TestWarning:
    """18 A on 1.5 mm² wire behind a 20 A breaker: hot wire, no trip."""

    @pytest.fixture
    def series(self):
        return run(
            [steady("Heater", 18.0)],
            get_breaker_spec("Type C"),
            20,
            get_wire_spec("1.5"),
            60,
        )

    def test_warning_once_wire_saturates(self, series):
        assert series[32].risk_level is RiskLevel.SAFE
        assert series[33].risk_level is RiskLevel.WARNING
        assert all(not p.trip.will_trip for p in series)

    def test_breaker_status(self, series):
        point = series[33]
        expected = point.thermal_current_a / (20 * 1.13) * 100
        assert point.breaker_status.thermal_load_percent == pytest.approx(expected)
        assert point.breaker_status.temperature is None


class TestSeriesBehaviour:
    """Test suite for laziness, restartability and ordering."""

    @pytest.fixture
    def series(self, type_c, wire):
        consumers = [
            Consumer("Fridge", 1.5, 25, 3.0, 20, "Normal (1.5A)"),
            Consumer("Washer", 8.0, 40, 3.0, 120, "Normal (8A)"),
            Consumer("Kettle", 10.0, 100, 1.1, 3, "Medium (10A)"),
        ]
        return run(consumers, type_c, 16, wire, 90)

    def test_length_and_times(self, series):
        assert len(series) == 90
        assert [p.time_min for p in series] == list(range(90))

    def test_restartable(self, series):
        assert list(series) == list(series)

    def test_idempotent_points(self, series):
        assert series.points() == series.points()

    def test_parallel_matches_serial(self, series):
        assert series.evaluate_parallel(max_workers=4) == series.points()

    def test_random_access_matches_sequence(self, series):
        points = series.points()
        for t in (0, 17, 45, 89):
            assert series[t] == points[t]
        assert series[-1] == points[-1]
        assert series[10:13] == points[10:13]

    def test_index_out_of_range(self, series):
        with pytest.raises(IndexError):
            series[90]
        with pytest.raises(IndexError):
            series[-91]

    def test_consumer_list_copied(self, type_c, wire):
        consumers = [steady("Lamp", 1.0)]
        series = run(consumers, type_c, 16, wire, 10)
        before = series.points()
        consumers.append(steady("Heater", 30.0))
        assert series.points() == before

    def test_no_consumers_is_safe(self, type_c, wire):
        series = run([], type_c, 16, wire, 5)
        assert all(p.instant_current_a == 0 and p.risk_level is RiskLevel.SAFE for p in series)

    def test_thresholds_on_every_point(self, series):
        point = series[0]
        assert point.rated_current_a == 16
        assert point.instant_trip_a == 80
        assert point.thermal_trip_a == pytest.approx(18.08)
        assert point.wire_continuous_a == 20
        assert point.wire_short_term_a == 25

    def test_consumer_order_does_not_change_currents(self, type_c, wire):
        consumers = [
            steady("A", 0.1, 3.0),
            steady("B", 0.2, 7.0),
            steady("C", 0.3, 1.5),
            Consumer("D", 0.7, 50, 2.0, 4),
        ]
        forward = run(consumers, type_c, 16, wire, 30).points()
        backward = run(list(reversed(consumers)), type_c, 16, wire, 30).points()

        assert forward[5].instant_current_a == pytest.approx(1.3)
        for a, b in zip(forward, backward):
            assert a.instant_current_a == b.instant_current_a
            assert a.thermal_current_a == b.thermal_current_a
            assert a.risk_level is b.risk_level
            assert a.trip == b.trip
            assert sorted(a.events) == sorted(b.events)

    def test_startups_counted_per_minute(self, type_c, wire):
        consumers = [
            Consumer("Pump startup (x)", 1.0, 50, 2.0, 10),
            Consumer("Fan", 0.5, 100, 1.0, 20),
        ]
        points = run(consumers, type_c, 16, wire, 30).points()
        counts = {p.time_min: p.startups for p in points if p.startups}
        assert counts == {0: 2, 10: 1, 20: 2}


class TestTemperatureAnnotation:

    def test_annotation_does_not_change_verdict(self, type_c, wire):
        consumers = [steady("A", 10.0), steady("B", 10.0)]
        plain = run(consumers, type_c, 16, wire, 30)
        annotated = run(consumers, type_c, 16, wire, 30, temperature_model=TemperatureModel("2.5", 16))

        for a, b in zip(plain, annotated):
            assert a.risk_level is b.risk_level
            assert a.trip == b.trip
            assert b.breaker_status.temperature is not None

        d = annotated[10].to_dict()
        assert "temperature_breaker_c" in d
        assert "temperature_status" in d


class TestValidation:

    def test_zero_horizon(self, type_c, wire):
        with pytest.raises(OutOfRange):
            run([], type_c, 16, wire, 0)

    def test_negative_horizon(self, type_c, wire):
        with pytest.raises(OutOfRange):
            run([], type_c, 16, wire, -10)

    def test_fractional_horizon(self, type_c, wire):
        with pytest.raises(InvalidConfiguration):
            run([], type_c, 16, wire, 1.5)

    def test_invalid_consumer_fails_before_iteration(self, type_c, wire):
        with pytest.raises(InvalidConfiguration):
            run([Consumer("Broken", 5.0, cycle_period_min=0)], type_c, 16, wire, 10)

    def test_non_positive_rating(self, type_c, wire):
        with pytest.raises(InvalidConfiguration):
            run([], type_c, 0, wire, 10)

    def test_numpy_horizon_accepted(self, type_c, wire):
        series = run([], type_c, 16, wire, np.int64(5))
        assert isinstance(series, SimulationSeries)
        assert len(series) == 5

    def test_temperature_filter_rejected(self, type_c, wire):
        with pytest.raises(InvalidConfiguration) as exc_info:
            run([steady("Lamp", 1.0)], type_c, 16, wire, 10, thermal_filter=WireTemperatureModel("2.5"))
        assert exc_info.value.field == "thermal_filter"

    def test_custom_current_filter(self, type_c, wire):
        # 25 A is under the 36.16 A thermal trip of a 32 A breaker but over the wire
        series = run([steady("Heater", 25.0)], type_c, 32, wire, 5, thermal_filter=InstantFilter())
        assert all(p.thermal_current_a == 25.0 for p in series)
        assert all(p.risk_level is RiskLevel.WARNING for p in series)
        assert series[0].events == ("Heater startup ()", "Wire continuous rating exceeded (25.0A)")


class TestExports:

    @pytest.fixture
    def series(self, type_c, wire):
        return run([steady("Motor", 10.0, 6.0, "High")], type_c, 16, wire, 20)

    def test_to_frame(self, series):
        frame = series.to_frame()
        assert len(frame) == 20
        assert list(frame["time_min"]) == list(range(20))
        assert frame.loc[0, "events"] == "Motor startup (High); Breaker trip (thermal)"
        assert frame.loc[0, "risk_level"] == "critical"
        assert not frame.loc[1, "will_trip"]

    def test_points_frame_matches_to_frame(self, series):
        frame = points_frame(series.points())
        assert frame.equals(series.to_frame())
        assert frame.loc[0, "startups"] == 1

    def test_arrays(self, series):
        arrays = series.arrays()
        np.testing.assert_array_equal(arrays["time_min"], np.arange(20))
        assert arrays["instant_current_a"][0] == pytest.approx(60.0)
        assert arrays["thermal_current_a"].dtype == np.float64
