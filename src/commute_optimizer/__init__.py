"""Pick the best time to leave for a trip by sampling traffic-aware travel times."""

__version__ = "0.1.0"
