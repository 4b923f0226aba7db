"""Route estimate domain model."""

from dataclasses import dataclass

from commute_optimizer.domain.models.traffic_condition import TrafficCondition


@dataclass(frozen=True)
class RouteEstimate:
    """Travel time and distance for one trip leaving at one instant."""

    duration_seconds: int
    distance_meters: int
    traffic_condition: TrafficCondition
