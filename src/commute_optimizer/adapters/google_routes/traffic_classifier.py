"""Classify Google speed readings into a traffic condition."""

from collections.abc import Mapping, Sequence
from typing import Any

from commute_optimizer.adapters.google_routes.constants import SPEED_SLOW, SPEED_TRAFFIC_JAM
from commute_optimizer.domain.contracts import TrafficClassifierProtocol
from commute_optimizer.domain.models import TrafficCondition


class SpeedReadingTrafficClassifier(TrafficClassifierProtocol):
    """Ratio-of-slow-segments heuristic.

    Any jammed segment makes the route Severe. Otherwise the share of slow
    segments decides: above ``heavy_ratio`` is Heavy, above ``moderate_ratio``
    is Moderate, anything else Light. Without readings the condition is
    unknown and reported as Moderate, never Light.
    """

    def __init__(self, heavy_ratio: float = 0.5, moderate_ratio: float = 0.2) -> None:
        if not 0 <= moderate_ratio <= heavy_ratio <= 1:
            raise ValueError("expected 0 <= moderate_ratio <= heavy_ratio <= 1")
        self.heavy_ratio = heavy_ratio
        self.moderate_ratio = moderate_ratio

    def classify(self, speed_readings: Sequence[Mapping[str, Any]] | None) -> TrafficCondition:
        """Classify the speed reading intervals of one route."""
        if not speed_readings:
            return TrafficCondition.MODERATE

        speeds = [reading.get("speed") for reading in speed_readings if isinstance(reading, Mapping)]
        if not speeds:
            return TrafficCondition.MODERATE

        if SPEED_TRAFFIC_JAM in speeds:
            return TrafficCondition.SEVERE

        slow_ratio = speeds.count(SPEED_SLOW) / len(speeds)
        if slow_ratio > self.heavy_ratio:
            return TrafficCondition.HEAVY
        if slow_ratio > self.moderate_ratio:
            return TrafficCondition.MODERATE
        return TrafficCondition.LIGHT
