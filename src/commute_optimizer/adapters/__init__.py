"""Adapters layer - external system integrations."""

from commute_optimizer.adapters.config import AppConfig
from commute_optimizer.adapters.google_geocoding import GoogleGeocoder
from commute_optimizer.adapters.google_routes import (
    GoogleRoutesClient,
    GoogleRoutesTravelTimeEstimator,
    SpeedReadingTrafficClassifier,
)
from commute_optimizer.adapters.system_clock import SystemClock

__all__ = [
    "AppConfig",
    "GoogleGeocoder",
    "GoogleRoutesClient",
    "GoogleRoutesTravelTimeEstimator",
    "SpeedReadingTrafficClassifier",
    "SystemClock",
]
