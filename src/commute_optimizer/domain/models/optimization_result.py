"""Optimization result domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from commute_optimizer.domain.models.departure_option import DepartureOption
from commute_optimizer.domain.models.traffic_condition import TrafficCondition
from commute_optimizer.domain.time_utils import format_clock, format_clock_24h


@dataclass(frozen=True)
class OptimizationResult:
    """The best departure found, plus every viable option that was sampled."""

    optimal_departure_time: datetime
    estimated_arrival_time: datetime
    duration_seconds: int
    traffic_condition: TrafficCondition
    distance_meters: int
    departure_time_options: tuple[DepartureOption, ...] = field(default_factory=tuple)
    samples_attempted: int = 0
    samples_failed: int = 0

    @classmethod
    def from_options(
        cls,
        optimal: DepartureOption,
        options: tuple[DepartureOption, ...],
        samples_attempted: int = 0,
        samples_failed: int = 0,
    ) -> "OptimizationResult":
        """Build a result from the chosen option and the sorted option list."""
        return cls(
            optimal_departure_time=optimal.departure_time,
            estimated_arrival_time=optimal.arrival_time,
            duration_seconds=optimal.duration_seconds,
            traffic_condition=optimal.traffic_condition,
            distance_meters=optimal.distance_meters,
            departure_time_options=options,
            samples_attempted=samples_attempted,
            samples_failed=samples_failed,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "optimal_departure_time": format_clock(self.optimal_departure_time),
            "optimal_departure_time_24h": format_clock_24h(self.optimal_departure_time),
            "estimated_arrival_time": format_clock(self.estimated_arrival_time),
            "estimated_arrival_time_24h": format_clock_24h(self.estimated_arrival_time),
            "duration_seconds": self.duration_seconds,
            "traffic_condition": self.traffic_condition.value,
            "distance_meters": self.distance_meters,
            "departure_time_options": [option.to_dict() for option in self.departure_time_options],
            "samples_attempted": self.samples_attempted,
            "samples_failed": self.samples_failed,
        }
