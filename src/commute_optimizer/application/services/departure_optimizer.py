"""Departure-time optimizer service."""

import logging
import math
from datetime import datetime, timedelta

from commute_optimizer.domain.errors import (
    AllSamplesFailedError,
    DepartureInPastError,
    EstimatorError,
    InvalidTimeFormatError,
    MissingAddressError,
    NoViableOptionsError,
    WindowTooShortError,
)
from commute_optimizer.domain.models import (
    DepartureOption,
    DepartureWindow,
    OptimizationResult,
    OptimizerSettings,
    sort_by_departure,
)
from commute_optimizer.domain.ports import Clock, TravelTimeEstimator
from commute_optimizer.domain.time_utils import (
    add_minutes,
    as_utc,
    format_clock,
    parse_time_of_day,
)

logger = logging.getLogger(__name__)


def _require_addresses(origin: str, destination: str) -> None:
    if not origin or not origin.strip():
        raise MissingAddressError("Origin address is required.")
    if not destination or not destination.strip():
        raise MissingAddressError("Destination address is required.")


class DepartureOptimizer:
    """Finds the departure with the shortest predicted travel time.

    Candidate departures are sampled at a fixed cadence from the later of the
    earliest departure and now, up to a call budget. Estimates are fetched one
    at a time, in departure order, so at most one provider request is in
    flight.
    """

    def __init__(
        self,
        estimator: TravelTimeEstimator,
        clock: Clock,
        settings: OptimizerSettings | None = None,
    ) -> None:
        """Initialize with an estimator, a clock and an optional sampling policy."""
        self._estimator = estimator
        self._clock = clock
        self._settings = settings or OptimizerSettings()

    @property
    def settings(self) -> OptimizerSettings:
        """The sampling policy in use."""
        return self._settings

    def sample_budget(self, window_minutes: int) -> int:
        """Number of estimator calls allowed for a window of the given length."""
        interval = self._settings.sample_interval_minutes
        return max(0, min(math.ceil(window_minutes / interval), self._settings.max_samples))

    def validate_window(self, window: DepartureWindow, now: datetime) -> None:
        """Check a window is still usable at ``now``.

        Raises:
            DepartureInPastError: Earliest departure is further in the past than tolerated.
            WindowTooShortError: The remaining window is below the minimum.
        """
        tolerance = timedelta(seconds=self._settings.past_tolerance_seconds)
        if as_utc(window.earliest_departure) < as_utc(now) - tolerance:
            raise DepartureInPastError(
                f"Earliest departure ({format_clock(window.earliest_departure)}) is in the past."
            )

        remaining = window.remaining_minutes(now)
        if remaining < self._settings.min_window_minutes:
            raise WindowTooShortError(
                f"The remaining time window until latest arrival ({remaining} minutes) is too "
                f"short; at least {self._settings.min_window_minutes} minutes are required."
            )

    def build_window(
        self, earliest_departure: str, latest_arrival: str, now: datetime
    ) -> DepartureWindow:
        """Parse "HH:MM" constraints against ``now`` and validate the resulting window.

        Raises:
            InvalidTimeFormatError: A time string is malformed.
            ArrivalNotAfterDepartureError: Latest arrival is not after earliest departure.
            DepartureInPastError: Earliest departure is too far in the past.
            WindowTooShortError: The remaining window is below the minimum.
        """
        earliest = parse_time_of_day(earliest_departure, now)
        if earliest is None:
            raise InvalidTimeFormatError("earliest departure", earliest_departure)
        latest = parse_time_of_day(latest_arrival, now)
        if latest is None:
            raise InvalidTimeFormatError("latest arrival", latest_arrival)

        window = DepartureWindow(earliest_departure=earliest, latest_arrival=latest)
        self.validate_window(window, now)
        return window

    def candidate_departures(self, window: DepartureWindow, now: datetime) -> list[datetime]:
        """Departure instants to sample, in increasing order."""
        start = window.effective_start(now)
        budget = self.sample_budget(window.remaining_minutes(now))
        interval = self._settings.sample_interval_minutes

        candidates: list[datetime] = []
        for i in range(budget):
            candidate = add_minutes(start, interval * i)
            if as_utc(candidate) > as_utc(window.latest_arrival):
                break
            candidates.append(candidate)
        return candidates

    async def calculate_optimal_departure_time(
        self,
        origin: str,
        destination: str,
        earliest_departure: str,
        latest_arrival: str,
    ) -> OptimizationResult:
        """Find the departure time with the shortest travel time inside the window.

        Args:
            origin: Origin address.
            destination: Destination address.
            earliest_departure: Earliest acceptable departure, "HH:MM".
            latest_arrival: Latest acceptable arrival, "HH:MM".

        Returns:
            The optimal option plus all viable options sorted by departure time.

        Raises:
            InputValidationError: The request is invalid; no estimator call was made.
            AllSamplesFailedError: Every estimator call failed.
            NoViableOptionsError: No sampled departure arrives in time.
        """
        _require_addresses(origin, destination)
        now = self._clock.now()
        window = self.build_window(earliest_departure, latest_arrival, now)
        return await self._search(origin, destination, window, now)

    async def optimize_window(
        self, origin: str, destination: str, window: DepartureWindow
    ) -> OptimizationResult:
        """Same search as calculate_optimal_departure_time, for a window of absolute instants.

        Raises:
            InputValidationError: The request is invalid; no estimator call was made.
            AllSamplesFailedError: Every estimator call failed.
            NoViableOptionsError: No sampled departure arrives in time.
        """
        _require_addresses(origin, destination)
        now = self._clock.now()
        self.validate_window(window, now)
        return await self._search(origin, destination, window, now)

    async def _search(
        self, origin: str, destination: str, window: DepartureWindow, now: datetime
    ) -> OptimizationResult:
        candidates = self.candidate_departures(window, now)

        logger.info(
            f"Optimizing departure from {format_clock(window.effective_start(now))} "
            f"to arrive by {format_clock(window.latest_arrival)}: "
            f"{window.remaining_minutes(now)} minute window, up to {len(candidates)} samples"
        )

        options: list[DepartureOption] = []
        error_count = 0
        last_error: EstimatorError | None = None

        for departure_time in candidates:
            logger.debug(f"Estimating travel time for departure at {format_clock(departure_time)}")
            try:
                estimate = await self._estimator.estimate(origin, destination, departure_time)
            except EstimatorError as e:
                error_count += 1
                last_error = e
                logger.warning(
                    f"Estimate failed for departure at {format_clock(departure_time)}: {e}"
                )
                continue

            arrival_time = add_minutes(departure_time, estimate.duration_seconds / 60)
            if as_utc(arrival_time) > as_utc(window.latest_arrival):
                logger.debug(
                    f"Discarding departure at {format_clock(departure_time)}: arrival "
                    f"{format_clock(arrival_time)} is after {format_clock(window.latest_arrival)}"
                )
                continue

            options.append(
                DepartureOption(
                    departure_time=departure_time,
                    arrival_time=arrival_time,
                    duration_seconds=estimate.duration_seconds,
                    traffic_condition=estimate.traffic_condition,
                    distance_meters=estimate.distance_meters,
                )
            )

        logger.info(
            f"Made {len(candidates)} estimator calls with {error_count} errors, "
            f"found {len(options)} viable options"
        )

        if not options:
            if error_count > 0:
                raise AllSamplesFailedError(error_count, last_error)
            raise NoViableOptionsError(len(candidates))

        # min() keeps the first of equal durations, i.e. the earliest departure
        optimal = min(options, key=lambda option: option.duration_seconds)

        return OptimizationResult.from_options(
            optimal,
            tuple(sort_by_departure(options)),
            samples_attempted=len(candidates),
            samples_failed=error_count,
        )
