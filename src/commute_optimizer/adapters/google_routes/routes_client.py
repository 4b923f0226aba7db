"""HTTP client for the Google Routes API computeRoutes endpoint."""

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiohttp

from commute_optimizer.adapters.api_rate_limiter import ApiRateLimiter
from commute_optimizer.adapters.api_request_logger import log_api_request
from commute_optimizer.adapters.google_routes.constants import (
    AUTH_FAILURE_STATUSES,
    EXTRA_COMPUTATIONS,
    INVALID_REQUEST_STATUS,
    LANGUAGE_CODE,
    ROUTES_API_NAME,
    ROUTES_FIELD_MASK,
    ROUTING_PREFERENCE,
    TRAVEL_MODE,
    UNITS,
)
from commute_optimizer.domain.errors import (
    InvalidAddressError,
    MalformedResponseError,
    NoRouteFoundError,
    ProviderConfigurationError,
    TransportError,
)
from commute_optimizer.domain.models import ErrorDetails

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


def to_rfc3339(instant: datetime) -> str:
    """Serialize an instant as an absolute RFC 3339 UTC timestamp."""
    return instant.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_route_request(origin: str, destination: str, departure_time: datetime) -> dict[str, Any]:
    """Build the computeRoutes request body for a single traffic-aware drive."""
    return {
        "origin": {"address": origin},
        "destination": {"address": destination},
        "travelMode": TRAVEL_MODE,
        "routingPreference": ROUTING_PREFERENCE,
        "departureTime": to_rfc3339(departure_time),
        "computeAlternativeRoutes": False,
        "routeModifiers": {
            "avoidTolls": False,
            "avoidHighways": False,
            "avoidFerries": False,
        },
        "extraComputations": EXTRA_COMPUTATIONS,
        "languageCode": LANGUAGE_CODE,
        "units": UNITS,
    }


def _extract_error_message(body: str) -> str | None:
    """Pull the message out of a Google error payload: {"error": {"message": ...}}."""
    try:
        data = json.loads(body)
    except ValueError:
        return body.strip()[:200] or None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
    return None


class GoogleRoutesClient:
    """HTTP client for computeRoutes, mapping failures onto typed errors."""

    def __init__(
        self,
        session: "ClientSession",
        api_key: str | None,
        url: str = "https://routes.googleapis.com/directions/v2:computeRoutes",
        timeout_seconds: float = 10,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            api_key: Google Maps Platform server key.
            url: computeRoutes endpoint.
            timeout_seconds: Total timeout for one request.
            rate_limiter: Optional limiter shared by all callers of this API.
        """
        self._session = session
        self._api_key = api_key
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = rate_limiter

    async def _raise_for_status(self, response: "ClientResponse") -> None:
        """Translate a non-200 response into the matching error."""
        status = response.status
        body = await response.text()
        reason = _extract_error_message(body) or response.reason or f"HTTP {status}"
        details = ErrorDetails(provider=ROUTES_API_NAME, status_code=status, reason=reason)

        logger.error(f"Routes API request failed ({details.describe()}): {body[:500] or '(empty body)'}")

        message = f"Failed to get route information: {reason} (Status: {status})"
        if status in AUTH_FAILURE_STATUSES:
            raise ProviderConfigurationError(message, details)
        if status == INVALID_REQUEST_STATUS:
            raise InvalidAddressError(message, details)
        raise TransportError(message, details)

    @staticmethod
    def _first_route(data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise MalformedResponseError("Routes API response is not a JSON object")
        routes = data.get("routes")
        if not routes:
            raise NoRouteFoundError("No route found between these locations")
        route = routes[0] if isinstance(routes, list) else None
        if not isinstance(route, dict):
            raise MalformedResponseError("Routes API returned an unreadable route entry")
        return route

    async def compute_route(
        self, origin: str, destination: str, departure_time: datetime
    ) -> dict[str, Any]:
        """Request a route and return the first route object of the response.

        Raises:
            ProviderConfigurationError: API key missing or rejected.
            InvalidAddressError: The provider rejected the request (HTTP 400).
            NoRouteFoundError: The response contains no route.
            MalformedResponseError: The body is not valid JSON.
            TransportError: Network failure, timeout or unexpected status.
        """
        if not self._api_key:
            raise ProviderConfigurationError("Configuration error: Google Maps API key is missing")

        body = build_route_request(origin, destination, departure_time)
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": ROUTES_FIELD_MASK,
        }
        log_api_request("POST", self._url, headers=headers, payload=body)

        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        try:
            async with self._session.post(
                self._url, json=body, headers=headers, timeout=self._timeout
            ) as response:
                if response.status != 200:
                    await self._raise_for_status(response)
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(
                        f"Routes API returned invalid JSON: {e}",
                        ErrorDetails(
                            provider=ROUTES_API_NAME,
                            status_code=response.status,
                            reason="invalid JSON",
                        ),
                    ) from e
        except TimeoutError as e:
            raise TransportError(
                f"Routes API request timed out after {self._timeout_seconds}s"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Routes API request failed: {e}") from e

        return self._first_route(data)
