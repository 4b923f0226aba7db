"""Domain models for departure-time optimization."""

from commute_optimizer.domain.models.departure_option import DepartureOption, sort_by_departure
from commute_optimizer.domain.models.departure_window import DepartureWindow
from commute_optimizer.domain.models.error_details import ErrorDetails
from commute_optimizer.domain.models.geocoded_address import GeocodedAddress
from commute_optimizer.domain.models.optimization_result import OptimizationResult
from commute_optimizer.domain.models.optimizer_settings import OptimizerSettings
from commute_optimizer.domain.models.route_estimate import RouteEstimate
from commute_optimizer.domain.models.traffic_condition import TrafficCondition

__all__ = [
    "DepartureOption",
    "DepartureWindow",
    "ErrorDetails",
    "GeocodedAddress",
    "OptimizationResult",
    "OptimizerSettings",
    "RouteEstimate",
    "TrafficCondition",
    "sort_by_departure",
]
