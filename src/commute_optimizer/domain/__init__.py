"""Domain layer - core models, errors and ports."""

from commute_optimizer.domain.models import (
    DepartureOption,
    DepartureWindow,
    OptimizationResult,
    OptimizerSettings,
    RouteEstimate,
    TrafficCondition,
)
from commute_optimizer.domain.ports import (
    Clock,
    Geocoder,
    TravelTimeEstimator,
)

__all__ = [
    "Clock",
    "DepartureOption",
    "DepartureWindow",
    "Geocoder",
    "OptimizationResult",
    "OptimizerSettings",
    "RouteEstimate",
    "TrafficCondition",
    "TravelTimeEstimator",
]
