"""Application services (use cases)."""

from commute_optimizer.application.services.departure_optimizer import DepartureOptimizer

__all__ = ["DepartureOptimizer"]
