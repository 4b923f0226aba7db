"""Google Routes API adapters."""

from commute_optimizer.adapters.google_routes.routes_client import GoogleRoutesClient
from commute_optimizer.adapters.google_routes.traffic_classifier import (
    SpeedReadingTrafficClassifier,
)
from commute_optimizer.adapters.google_routes.travel_time_estimator import (
    GoogleRoutesTravelTimeEstimator,
)

__all__ = [
    "GoogleRoutesClient",
    "GoogleRoutesTravelTimeEstimator",
    "SpeedReadingTrafficClassifier",
]
