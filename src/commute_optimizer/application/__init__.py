"""Application layer - use cases orchestrating domain ports."""

from commute_optimizer.application.services import DepartureOptimizer

__all__ = ["DepartureOptimizer"]
