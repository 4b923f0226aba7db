"""Ports (interfaces) for the ports-and-adapters architecture."""

from commute_optimizer.domain.ports.clock import Clock
from commute_optimizer.domain.ports.geocoder import Geocoder
from commute_optimizer.domain.ports.travel_time_estimator import TravelTimeEstimator

__all__ = [
    "Clock",
    "Geocoder",
    "TravelTimeEstimator",
]
