"""Geocoded address domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeocodedAddress:
    """An address as resolved by the geocoding provider."""

    formatted_address: str
    latitude: float
    longitude: float
