"""Travel time estimator port."""

from datetime import datetime
from typing import Protocol

from commute_optimizer.domain.models.route_estimate import RouteEstimate


class TravelTimeEstimator(Protocol):
    """Port for estimating one trip's travel time at a given departure instant."""

    async def estimate(
        self, origin: str, destination: str, departure_time: datetime
    ) -> RouteEstimate:
        """Estimate travel time, distance and traffic for one departure.

        Raises:
            EstimatorError: If the query fails for any reason.
        """
        ...
