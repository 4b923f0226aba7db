"""Optimizer settings domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OptimizerSettings:
    """Sampling policy for the departure-time search."""

    sample_interval_minutes: int = 15  # Spacing between candidate departures
    max_samples: int = 12  # Upper bound on estimator calls per search
    min_window_minutes: int = 15  # Shortest remaining window worth searching
    past_tolerance_seconds: int = 60  # How far in the past an earliest departure may lie
