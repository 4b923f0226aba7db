"""Google Geocoding API adapters."""

from commute_optimizer.adapters.google_geocoding.geocoder import GoogleGeocoder

__all__ = ["GoogleGeocoder"]
