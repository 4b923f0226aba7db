"""Tests for the departure-time optimizer."""

from collections.abc import Callable
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from commute_optimizer.adapters.google_routes import GoogleRoutesTravelTimeEstimator
from commute_optimizer.application.services import DepartureOptimizer
from commute_optimizer.domain.errors import (
    AllSamplesFailedError,
    ArrivalNotAfterDepartureError,
    DepartureInPastError,
    EstimatorError,
    InvalidTimeFormatError,
    MissingAddressError,
    NoRouteFoundError,
    NoViableOptionsError,
    OptimizationExhaustedError,
    TransportError,
    WindowTooShortError,
)
from commute_optimizer.domain.models import (
    DepartureWindow,
    OptimizerSettings,
    RouteEstimate,
    TrafficCondition,
)
from commute_optimizer.domain.time_utils import minutes_between

TZ = ZoneInfo("America/Los_Angeles")


class FixedClock:
    """Clock that always returns the same instant."""

    def __init__(self, now: datetime) -> None:
        """Initialize with the instant to report."""
        self._now = now

    def now(self) -> datetime:
        """Return the fixed instant."""
        return self._now


EstimateFn = Callable[[datetime], RouteEstimate]


class FakeEstimator:
    """Estimator that records calls and answers from a function of the departure time."""

    def __init__(self, respond: EstimateFn) -> None:
        """Initialize with a function returning an estimate or raising an EstimatorError."""
        self._respond = respond
        self.calls: list[tuple[str, str, datetime]] = []

    async def estimate(
        self, origin: str, destination: str, departure_time: datetime
    ) -> RouteEstimate:
        """Record the call and delegate to the response function."""
        self.calls.append((origin, destination, departure_time))
        return self._respond(departure_time)

    @property
    def departure_times(self) -> list[datetime]:
        """Departure instants of all calls, in call order."""
        return [call[2] for call in self.calls]


def constant_duration(seconds: int, condition: TrafficCondition = TrafficCondition.LIGHT) -> EstimateFn:
    """Response function returning the same duration for every departure."""

    def respond(_departure_time: datetime) -> RouteEstimate:
        return RouteEstimate(
            duration_seconds=seconds, distance_meters=20_000, traffic_condition=condition
        )

    return respond


def at(hour: int, minute: int) -> datetime:
    """An instant on the test day."""
    return datetime(2026, 10, 19, hour, minute, tzinfo=TZ)


@pytest.fixture
def clock() -> FixedClock:
    """Clock fixed at 07:00, an hour before the test windows open."""
    return FixedClock(at(7, 0))


class TestEndToEndScenarios:
    """Scenarios for a 08:00-09:00 window."""

    @pytest.mark.asyncio
    async def test_constant_duration_picks_earliest_departure(self, clock: FixedClock) -> None:
        """Given 1500s for every departure, when optimizing, then 08:00 is optimal after 4 calls."""
        estimator = FakeEstimator(constant_duration(1500))
        optimizer = DepartureOptimizer(estimator, clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert estimator.departure_times == [at(8, 0), at(8, 15), at(8, 30), at(8, 45)]
        assert result.optimal_departure_time == at(8, 0)
        assert result.estimated_arrival_time == at(8, 25)
        assert result.duration_seconds == 1500
        # 08:45 + 25 min arrives at 09:10, past the deadline
        assert [o.departure_time for o in result.departure_time_options] == [
            at(8, 0),
            at(8, 15),
            at(8, 30),
        ]
        assert result.samples_attempted == 4
        assert result.samples_failed == 0

    @pytest.mark.asyncio
    async def test_all_arrivals_late_raises_no_viable_options(self, clock: FixedClock) -> None:
        """Given 3600s for every departure, when optimizing, then NoViableOptionsError is raised."""
        estimator = FakeEstimator(constant_duration(3600))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(NoViableOptionsError, match="deadline exceeded"):
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert len(estimator.calls) == 4

    @pytest.mark.asyncio
    async def test_latest_not_after_earliest_makes_no_calls(self, clock: FixedClock) -> None:
        """Given latest arrival equal to earliest departure, when optimizing, then it fails fast."""
        estimator = FakeEstimator(constant_duration(600))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(ArrivalNotAfterDepartureError):
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "08:00")

        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_latest_before_earliest_makes_no_calls(self, clock: FixedClock) -> None:
        """Given latest arrival before earliest departure, when optimizing, then it fails fast."""
        estimator = FakeEstimator(constant_duration(600))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(ArrivalNotAfterDepartureError):
            await optimizer.calculate_optimal_departure_time("A", "B", "09:00", "08:00")

        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_partial_failures_are_tolerated(self, clock: FixedClock) -> None:
        """Given failures at 08:00 and 08:15, when optimizing, then the two successes are returned."""

        def respond(departure_time: datetime) -> RouteEstimate:
            if departure_time < at(8, 30):
                raise TransportError("connection reset")
            return RouteEstimate(
                duration_seconds=900,
                distance_meters=15_000,
                traffic_condition=TrafficCondition.MODERATE,
            )

        estimator = FakeEstimator(respond)
        optimizer = DepartureOptimizer(estimator, clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert len(estimator.calls) == 4
        assert [o.departure_time for o in result.departure_time_options] == [at(8, 30), at(8, 45)]
        assert result.optimal_departure_time == at(8, 30)
        assert result.traffic_condition == TrafficCondition.MODERATE
        assert result.samples_failed == 2

    @pytest.mark.asyncio
    async def test_route_with_unreadable_numbers_is_skipped(self, clock: FixedClock) -> None:
        """Given a NaN duration at 08:00, when optimizing over Google routes, then 08:15 is chosen."""
        client = MagicMock()
        client.compute_route = AsyncMock(
            side_effect=[
                {"duration": "nans", "distanceMeters": 12_000},
                {"duration": "600s", "distanceMeters": float("nan")},
                {"duration": "600s", "distanceMeters": 12_000},
            ]
        )
        optimizer = DepartureOptimizer(GoogleRoutesTravelTimeEstimator(client), clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "08:45")

        assert client.compute_route.await_count == 3
        assert result.optimal_departure_time == at(8, 30)
        assert result.distance_meters == 12_000
        assert result.samples_failed == 2


class TestSelection:
    """Tests for choosing the optimal option."""

    @pytest.mark.asyncio
    async def test_picks_shortest_duration(self, clock: FixedClock) -> None:
        """Given varying durations, when optimizing, then the shortest trip wins."""
        durations = {at(8, 0): 2400, at(8, 15): 1200, at(8, 30): 1500, at(8, 45): 600}

        def respond(departure_time: datetime) -> RouteEstimate:
            return RouteEstimate(
                duration_seconds=durations[departure_time],
                distance_meters=10_000,
                traffic_condition=TrafficCondition.HEAVY,
            )

        optimizer = DepartureOptimizer(FakeEstimator(respond), clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert result.optimal_departure_time == at(8, 45)
        assert result.estimated_arrival_time == at(8, 55)
        assert result.duration_seconds == 600

    @pytest.mark.asyncio
    async def test_ties_resolve_to_earliest_departure(self, clock: FixedClock) -> None:
        """Given equal shortest durations, when optimizing, then the earliest departure wins."""
        durations = {at(8, 0): 1800, at(8, 15): 900, at(8, 30): 900, at(8, 45): 900}

        def respond(departure_time: datetime) -> RouteEstimate:
            return RouteEstimate(
                duration_seconds=durations[departure_time],
                distance_meters=10_000,
                traffic_condition=TrafficCondition.LIGHT,
            )

        optimizer = DepartureOptimizer(FakeEstimator(respond), clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert result.optimal_departure_time == at(8, 15)

    @pytest.mark.asyncio
    async def test_arrival_exactly_at_deadline_is_viable(self, clock: FixedClock) -> None:
        """Given an arrival exactly at the latest arrival, when optimizing, then it is kept."""
        optimizer = DepartureOptimizer(FakeEstimator(constant_duration(3600)), clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:15")

        assert result.optimal_departure_time == at(8, 0)
        assert result.estimated_arrival_time == at(9, 0)
        assert len(result.departure_time_options) == 2

    @pytest.mark.asyncio
    async def test_options_are_sorted_by_departure(self, clock: FixedClock) -> None:
        """Given any mix of options, when optimizing, then options are ordered by departure."""
        optimizer = DepartureOptimizer(FakeEstimator(constant_duration(60)), clock)

        result = await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "10:00")

        departures = [o.departure_time for o in result.departure_time_options]
        assert departures == sorted(departures)


class TestExhaustion:
    """Tests for the aggregate failure cases."""

    @pytest.mark.asyncio
    async def test_all_failures_report_count_and_last_error(self, clock: FixedClock) -> None:
        """Given every call failing, when optimizing, then the error includes count and last error."""
        failures = iter(["first", "second", "third", "fourth"])

        def respond(_departure_time: datetime) -> RouteEstimate:
            raise NoRouteFoundError(f"no route ({next(failures)})")

        optimizer = DepartureOptimizer(FakeEstimator(respond), clock)

        with pytest.raises(AllSamplesFailedError) as exc_info:
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        error = exc_info.value
        assert error.error_count == 4
        assert isinstance(error.last_error, NoRouteFoundError)
        assert "4 API errors" in str(error)
        assert "no route (fourth)" in str(error)

    @pytest.mark.asyncio
    async def test_all_failed_and_none_viable_are_distinct(self, clock: FixedClock) -> None:
        """Given the two exhaustion causes, when comparing errors, then they are distinct types."""

        def fail(_departure_time: datetime) -> RouteEstimate:
            raise EstimatorError("boom")

        failing = DepartureOptimizer(FakeEstimator(fail), clock)
        too_slow = DepartureOptimizer(FakeEstimator(constant_duration(7200)), clock)

        with pytest.raises(OptimizationExhaustedError) as failed_info:
            await failing.calculate_optimal_departure_time("A", "B", "08:00", "09:00")
        with pytest.raises(OptimizationExhaustedError) as late_info:
            await too_slow.calculate_optimal_departure_time("A", "B", "08:00", "09:00")

        assert isinstance(failed_info.value, AllSamplesFailedError)
        assert isinstance(late_info.value, NoViableOptionsError)
        assert str(failed_info.value) != str(late_info.value)

    @pytest.mark.asyncio
    async def test_unexpected_exceptions_propagate(self, clock: FixedClock) -> None:
        """Given a non-estimator exception, when optimizing, then it is not swallowed."""

        def respond(_departure_time: datetime) -> RouteEstimate:
            raise RuntimeError("bug")

        optimizer = DepartureOptimizer(FakeEstimator(respond), clock)

        with pytest.raises(RuntimeError, match="bug"):
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "09:00")


class TestValidation:
    """Tests for input validation before any estimator call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("earliest", "latest"), [("8am", "09:00"), ("08:00", "25:00")])
    async def test_malformed_times_are_rejected(
        self, clock: FixedClock, earliest: str, latest: str
    ) -> None:
        """Given a malformed time, when optimizing, then InvalidTimeFormatError is raised."""
        estimator = FakeEstimator(constant_duration(600))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(InvalidTimeFormatError):
            await optimizer.calculate_optimal_departure_time("A", "B", earliest, latest)

        assert estimator.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("origin", "destination"), [("", "B"), ("A", "   ")])
    async def test_blank_addresses_are_rejected(
        self, clock: FixedClock, origin: str, destination: str
    ) -> None:
        """Given a blank address, when optimizing, then MissingAddressError is raised."""
        estimator = FakeEstimator(constant_duration(600))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(MissingAddressError):
            await optimizer.calculate_optimal_departure_time(origin, destination, "08:00", "09:00")

        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_short_window_is_rejected(self, clock: FixedClock) -> None:
        """Given a 10 minute window, when optimizing, then WindowTooShortError is raised."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)

        with pytest.raises(WindowTooShortError):
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "08:10")

        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_minimum_window_is_configurable(self, clock: FixedClock) -> None:
        """Given a 30 minute minimum, when the window is 20 minutes, then it is rejected."""
        optimizer = DepartureOptimizer(
            FakeEstimator(constant_duration(60)),
            clock,
            OptimizerSettings(min_window_minutes=30),
        )

        with pytest.raises(WindowTooShortError):
            await optimizer.calculate_optimal_departure_time("A", "B", "08:00", "08:20")

    @pytest.mark.asyncio
    async def test_window_starting_in_the_past_is_rejected(self, clock: FixedClock) -> None:
        """Given an absolute window opening 5 minutes ago, when optimizing, then it fails fast."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)
        window = DepartureWindow(
            earliest_departure=at(7, 0) - timedelta(minutes=5), latest_arrival=at(8, 0)
        )

        with pytest.raises(DepartureInPastError):
            await optimizer.optimize_window("A", "B", window)

        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_optimize_window_checks_addresses(self, clock: FixedClock) -> None:
        """Given a blank origin, when optimizing an absolute window, then MissingAddressError is raised."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)
        window = DepartureWindow(earliest_departure=at(8, 0), latest_arrival=at(9, 0))

        with pytest.raises(MissingAddressError):
            await optimizer.optimize_window(" ", "B", window)

        assert estimator.calls == []


class TestSampling:
    """Tests for candidate generation and the call budget."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("latest", "expected_calls"),
        [("08:15", 1), ("08:20", 2), ("09:00", 4), ("10:59", 12), ("12:00", 12)],
    )
    async def test_call_budget(self, clock: FixedClock, latest: str, expected_calls: int) -> None:
        """Given a window of W minutes, when optimizing, then at most min(ceil(W/15), 12) calls."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)

        await optimizer.calculate_optimal_departure_time("A", "B", "08:00", latest)

        assert len(estimator.calls) == expected_calls

    @pytest.mark.asyncio
    async def test_sampling_starts_at_now_when_earliest_has_just_passed(
        self, clock: FixedClock
    ) -> None:
        """Given an earliest departure 30s ago, when optimizing, then sampling starts at now."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)
        window = DepartureWindow(
            earliest_departure=at(7, 0) - timedelta(seconds=30), latest_arrival=at(7, 45)
        )

        await optimizer.optimize_window("A", "B", window)

        assert estimator.departure_times == [at(7, 0), at(7, 15), at(7, 30)]

    def test_sampling_starts_at_earliest_departure_when_it_is_ahead(self) -> None:
        """Given an earliest departure after now, when sampling, then samples start at it."""
        now = at(7, 0) + timedelta(seconds=30)
        optimizer = DepartureOptimizer(FakeEstimator(constant_duration(60)), FixedClock(now))
        window = optimizer.build_window("07:30", "08:30", now)

        candidates = optimizer.candidate_departures(window, now)

        assert candidates == [at(7, 30), at(7, 45), at(8, 0), at(8, 15)]

    @pytest.mark.asyncio
    async def test_optimize_window_searches_a_later_date(self, clock: FixedClock) -> None:
        """Given a window on the next day, when optimizing, then samples fall on that day."""
        estimator = FakeEstimator(constant_duration(600))
        optimizer = DepartureOptimizer(estimator, clock)
        tomorrow = timedelta(days=1)
        window = DepartureWindow(
            earliest_departure=at(8, 0) + tomorrow, latest_arrival=at(8, 30) + tomorrow
        )

        result = await optimizer.optimize_window("A", "B", window)

        assert estimator.departure_times == [at(8, 0) + tomorrow, at(8, 15) + tomorrow]
        assert result.optimal_departure_time == at(8, 0) + tomorrow

    @pytest.mark.asyncio
    async def test_calls_are_made_with_given_addresses(self, clock: FixedClock) -> None:
        """Given origin and destination, when optimizing, then each call receives them unchanged."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, clock)

        await optimizer.calculate_optimal_departure_time("Home", "Work", "08:00", "08:30")

        assert {(o, d) for o, d, _ in estimator.calls} == {("Home", "Work")}

    def test_sample_budget_respects_configured_cap(self) -> None:
        """Given a cap of 3 samples, when computing the budget for a long window, then it is 3."""
        optimizer = DepartureOptimizer(
            FakeEstimator(constant_duration(60)),
            FixedClock(at(7, 0)),
            OptimizerSettings(max_samples=3),
        )

        assert optimizer.sample_budget(180) == 3
        assert optimizer.sample_budget(31) == 3
        assert optimizer.sample_budget(30) == 2

    @pytest.mark.asyncio
    async def test_window_across_fall_back_is_sampled_by_elapsed_time(self) -> None:
        """Given 00:30 PDT to 01:30 PST on the fall-back night, when optimizing, then 8 samples run."""
        estimator = FakeEstimator(constant_duration(60))
        optimizer = DepartureOptimizer(estimator, FixedClock(datetime(2026, 10, 31, 23, 0, tzinfo=TZ)))
        window = DepartureWindow(
            earliest_departure=datetime(2026, 11, 1, 0, 30, tzinfo=TZ),
            latest_arrival=datetime(2026, 11, 1, 1, 30, fold=1, tzinfo=TZ),
        )

        result = await optimizer.optimize_window("A", "B", window)

        departures = estimator.departure_times
        assert len(departures) == 8
        assert minutes_between(departures[0], departures[-1]) == 105
        assert [d.utcoffset() for d in departures[-2:]] == [timedelta(hours=-8)] * 2
        assert len(result.departure_time_options) == 8
