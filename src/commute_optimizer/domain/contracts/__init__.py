"""Domain contracts (protocols for pluggable policies)."""

from commute_optimizer.domain.contracts.traffic_classifier import TrafficClassifierProtocol

__all__ = ["TrafficClassifierProtocol"]
