"""Geocoder backed by the Google Geocoding API.

API Documentation: https://developers.google.com/maps/documentation/geocoding/requests-geocoding
"""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from commute_optimizer.adapters.api_rate_limiter import ApiRateLimiter
from commute_optimizer.adapters.api_request_logger import log_api_request
from commute_optimizer.domain.errors import (
    AddressNotFoundError,
    InvalidAddressError,
    MalformedResponseError,
    ProviderConfigurationError,
    TransportError,
)
from commute_optimizer.domain.models import ErrorDetails, GeocodedAddress
from commute_optimizer.domain.ports import Geocoder

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession

GEOCODING_API_NAME = "google_geocoding"

_STATUS_OK = "OK"
_STATUS_ZERO_RESULTS = "ZERO_RESULTS"
_STATUS_REQUEST_DENIED = "REQUEST_DENIED"
_STATUS_INVALID_REQUEST = "INVALID_REQUEST"


class GoogleGeocoder(Geocoder):
    """Resolves addresses with the Geocoding API, used to validate user input."""

    def __init__(
        self,
        session: "ClientSession",
        api_key: str | None,
        url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        timeout_seconds: float = 10,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        """Initialize the geocoder.

        Args:
            session: Shared aiohttp session.
            api_key: Google Maps Platform server key.
            url: Geocoding JSON endpoint.
            timeout_seconds: Total timeout for one request.
            rate_limiter: Optional limiter shared by all geocoding callers.
        """
        self._session = session
        self._api_key = api_key
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = rate_limiter

    async def _fetch(self, address: str) -> Any:
        params = {"address": address, "key": self._api_key}
        log_api_request("GET", self._url, params=params)

        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        try:
            async with self._session.get(
                self._url, params=params, timeout=self._timeout
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    logger.error(f"Geocoding API returned status {response.status}: {body[:200]}")
                    details = ErrorDetails(
                        provider=GEOCODING_API_NAME,
                        status_code=response.status,
                        reason=response.reason or "HTTP error",
                    )
                    if response.status in (401, 403):
                        raise ProviderConfigurationError("Geocoding request was denied", details)
                    raise TransportError(
                        f"Failed to geocode address (Status: {response.status})", details
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError(f"Geocoding API returned invalid JSON: {e}") from e
        except TimeoutError as e:
            raise TransportError(
                f"Geocoding request timed out after {self._timeout_seconds}s"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Geocoding request failed: {e}") from e

    async def geocode(self, address: str) -> GeocodedAddress:
        """Resolve an address to its formatted form and coordinates.

        Raises:
            InvalidAddressError: Address is blank or rejected as invalid.
            AddressNotFoundError: The provider has no result for the address.
            ProviderConfigurationError: API key missing or rejected.
            MalformedResponseError: Result lacks address or geometry.
            TransportError: Network failure, timeout or unexpected status.
        """
        if not address or not address.strip():
            raise InvalidAddressError("Missing address parameter")
        if not self._api_key:
            raise ProviderConfigurationError("Configuration error: Google Maps API key is missing")

        data = await self._fetch(address)
        if not isinstance(data, dict):
            raise MalformedResponseError("Geocoding response is not a JSON object")

        status = data.get("status")
        results = data.get("results") or []
        if status == _STATUS_REQUEST_DENIED:
            raise ProviderConfigurationError(
                f"Geocoding request denied: {data.get('error_message', 'no details')}"
            )
        if status == _STATUS_INVALID_REQUEST:
            raise InvalidAddressError(f"Geocoding rejected address {address!r}")
        if status == _STATUS_ZERO_RESULTS or (status == _STATUS_OK and not results):
            raise AddressNotFoundError(f"No results found for the provided address: {address}")
        if status != _STATUS_OK:
            raise TransportError(
                f"Geocoding failed with status {status}",
                ErrorDetails(provider=GEOCODING_API_NAME, reason=str(status)),
            )

        if not isinstance(results, list):
            raise MalformedResponseError("Geocoding results are not a list")

        first = results[0]
        try:
            location = first["geometry"]["location"]
            return GeocodedAddress(
                formatted_address=str(first["formatted_address"]),
                latitude=float(location["lat"]),
                longitude=float(location["lng"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Geocoding result is incomplete: {e}") from e
