"""Constants for the Google Routes API adapter.

API Documentation: https://developers.google.com/maps/documentation/routes/compute_route_directions
"""

ROUTES_API_NAME = "google_routes"

# Only the fields the estimator reads; the Routes API requires a field mask
ROUTES_FIELD_MASK = "routes.duration,routes.distanceMeters,routes.travelAdvisory.speedReadingIntervals"

TRAVEL_MODE = "DRIVE"
ROUTING_PREFERENCE = "TRAFFIC_AWARE"
LANGUAGE_CODE = "en-US"
UNITS = "IMPERIAL"
EXTRA_COMPUTATIONS = ["TRAFFIC_ON_POLYLINE"]

# speedReadingIntervals[].speed values
SPEED_NORMAL = "NORMAL"
SPEED_SLOW = "SLOW"
SPEED_TRAFFIC_JAM = "TRAFFIC_JAM"

AUTH_FAILURE_STATUSES = frozenset({401, 403})
INVALID_REQUEST_STATUS = 400
