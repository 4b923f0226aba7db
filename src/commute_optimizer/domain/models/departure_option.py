"""Departure option domain model."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from commute_optimizer.domain.models.traffic_condition import TrafficCondition
from commute_optimizer.domain.time_utils import format_clock, format_clock_24h


@dataclass(frozen=True)
class DepartureOption:
    """One sampled departure that arrives before the deadline."""

    departure_time: datetime
    arrival_time: datetime
    duration_seconds: int
    traffic_condition: TrafficCondition
    distance_meters: int

    @property
    def departure_clock(self) -> str:
        """Departure as "hh:mm AM/PM"."""
        return format_clock(self.departure_time)

    @property
    def arrival_clock(self) -> str:
        """Arrival as "hh:mm AM/PM"."""
        return format_clock(self.arrival_time)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, with both clock representations."""
        return {
            "departure_time": self.departure_clock,
            "departure_time_24h": format_clock_24h(self.departure_time),
            "arrival_time": self.arrival_clock,
            "arrival_time_24h": format_clock_24h(self.arrival_time),
            "duration_seconds": self.duration_seconds,
            "traffic_condition": self.traffic_condition.value,
            "distance_meters": self.distance_meters,
        }


def _departure_sort_key(option: object) -> tuple[int, float]:
    departure_time = getattr(option, "departure_time", None)
    if not isinstance(departure_time, datetime):
        return (1, 0.0)
    try:
        return (0, departure_time.timestamp())
    except (OverflowError, OSError, ValueError):
        return (1, 0.0)


def sort_by_departure(options: Iterable[DepartureOption]) -> list[DepartureOption]:
    """Sort options by departure time ascending.

    Entries without a usable departure time go to the end in their original
    order. Never raises on a bad entry.
    """
    return sorted(options, key=_departure_sort_key)
