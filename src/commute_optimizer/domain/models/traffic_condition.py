"""Traffic condition domain model."""

from enum import Enum


class TrafficCondition(str, Enum):
    """Coarse, ordered classification of traffic along a route."""

    LIGHT = "Light"
    MODERATE = "Moderate"
    HEAVY = "Heavy"
    SEVERE = "Severe"

    @property
    def severity(self) -> int:
        """Ordinal rank, 0 for Light up to 3 for Severe."""
        return list(TrafficCondition).index(self)
