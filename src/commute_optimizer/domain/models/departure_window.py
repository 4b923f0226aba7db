"""Departure window domain model."""

from dataclasses import dataclass
from datetime import datetime

from commute_optimizer.domain.errors import ArrivalNotAfterDepartureError
from commute_optimizer.domain.time_utils import as_utc, format_clock, minutes_between


@dataclass(frozen=True)
class DepartureWindow:
    """The span between the earliest departure and the latest arrival."""

    earliest_departure: datetime
    latest_arrival: datetime

    def __post_init__(self) -> None:
        if as_utc(self.latest_arrival) <= as_utc(self.earliest_departure):
            raise ArrivalNotAfterDepartureError(
                f"Latest arrival ({format_clock(self.latest_arrival)}) must be after "
                f"earliest departure ({format_clock(self.earliest_departure)})."
            )

    @property
    def length_minutes(self) -> int:
        """Full window length in minutes."""
        return minutes_between(self.earliest_departure, self.latest_arrival)

    def effective_start(self, now: datetime) -> datetime:
        """The later of the earliest departure and ``now``."""
        return max(self.earliest_departure, now, key=as_utc)

    def remaining_minutes(self, now: datetime) -> int:
        """Minutes left to search, counted from the effective start."""
        return minutes_between(self.effective_start(now), self.latest_arrival)
