"""Travel time estimator backed by the Google Routes API."""

import logging
import math
from datetime import datetime
from typing import Any

from commute_optimizer.adapters.google_routes.routes_client import GoogleRoutesClient
from commute_optimizer.adapters.google_routes.traffic_classifier import (
    SpeedReadingTrafficClassifier,
)
from commute_optimizer.domain.contracts import TrafficClassifierProtocol
from commute_optimizer.domain.errors import InvalidAddressError, MalformedResponseError
from commute_optimizer.domain.models import RouteEstimate
from commute_optimizer.domain.ports import TravelTimeEstimator

logger = logging.getLogger(__name__)


def parse_duration_seconds(value: Any) -> int:
    """Parse a protobuf duration string such as "1234s" into whole seconds."""
    if not isinstance(value, str) or not value.endswith("s"):
        raise MalformedResponseError(f"Route duration has unexpected format: {value!r}")
    try:
        seconds = float(value[:-1])
    except ValueError as e:
        raise MalformedResponseError(f"Route duration has unexpected format: {value!r}") from e
    if not math.isfinite(seconds):
        raise MalformedResponseError(f"Route duration is not finite: {value!r}")
    if seconds < 0:
        raise MalformedResponseError(f"Route duration is negative: {value!r}")
    return int(seconds)


def parse_distance_meters(value: Any) -> int:
    """Validate the route distance in meters."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedResponseError(f"Route distance has unexpected value: {value!r}")
    if not math.isfinite(value) or value < 0:
        raise MalformedResponseError(f"Route distance has unexpected value: {value!r}")
    return int(value)


class GoogleRoutesTravelTimeEstimator(TravelTimeEstimator):
    """Adapter turning one computeRoutes call into a RouteEstimate."""

    def __init__(
        self,
        client: GoogleRoutesClient,
        classifier: TrafficClassifierProtocol | None = None,
    ) -> None:
        """Initialize with a routes client and an optional traffic classifier."""
        self._client = client
        self._classifier = classifier or SpeedReadingTrafficClassifier()

    async def estimate(
        self, origin: str, destination: str, departure_time: datetime
    ) -> RouteEstimate:
        """Estimate travel time for a drive leaving at ``departure_time``.

        Raises:
            EstimatorError: Any provider or validation failure, see GoogleRoutesClient.
        """
        if not origin or not origin.strip():
            raise InvalidAddressError("Origin address is missing")
        if not destination or not destination.strip():
            raise InvalidAddressError("Destination address is missing")

        route = await self._client.compute_route(origin, destination, departure_time)

        if "duration" not in route:
            raise MalformedResponseError("Route data is incomplete: missing duration")
        if "distanceMeters" not in route:
            raise MalformedResponseError("Route data is incomplete: missing distance")

        duration_seconds = parse_duration_seconds(route["duration"])
        distance_meters = parse_distance_meters(route["distanceMeters"])

        advisory = route.get("travelAdvisory")
        speed_readings = advisory.get("speedReadingIntervals") if isinstance(advisory, dict) else None
        traffic_condition = self._classifier.classify(speed_readings)

        logger.debug(
            f"Route {origin} -> {destination} at {departure_time.isoformat()}: "
            f"{duration_seconds}s, {distance_meters}m, {traffic_condition.value}"
        )

        return RouteEstimate(
            duration_seconds=duration_seconds,
            distance_meters=distance_meters,
            traffic_condition=traffic_condition,
        )
