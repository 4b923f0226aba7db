"""Protocol for classifying raw traffic signal into a traffic condition."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from commute_optimizer.domain.models.traffic_condition import TrafficCondition


class TrafficClassifierProtocol(Protocol):
    """Maps per-segment speed readings to a coarse traffic condition."""

    def classify(self, speed_readings: Sequence[Mapping[str, Any]] | None) -> TrafficCondition:
        """Classify the readings of one route."""
        ...
