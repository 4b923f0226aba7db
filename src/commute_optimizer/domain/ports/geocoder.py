"""Geocoder port."""

from typing import Protocol

from commute_optimizer.domain.models.geocoded_address import GeocodedAddress


class Geocoder(Protocol):
    """Port for resolving a free-form address."""

    async def geocode(self, address: str) -> GeocodedAddress:
        """Resolve an address to its canonical form and coordinates."""
        ...
