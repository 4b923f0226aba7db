"""Pacing for outgoing provider requests.

Google Maps Platform enforces per-key quotas. Every adapter that talks to the
same API shares one limiter, which spaces requests by a minimum delay.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Enforces a minimum delay between requests to one API.

    A delay of zero disables waiting but still counts requests.
    """

    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(self, api_name: str, min_delay_seconds: float = 0.0) -> None:
        """Initialize the limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum delay between requests in seconds.
        """
        self.api_name = api_name
        self.min_delay_seconds = max(0.0, min_delay_seconds)
        self.request_count = 0
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def for_api(cls, api_name: str, min_delay_seconds: float = 0.0) -> ApiRateLimiter:
        """Get the shared limiter for an API, creating it on first use.

        A later call with a longer delay tightens the shared limiter.
        """
        limiter = cls._instances.get(api_name)
        if limiter is None:
            limiter = cls(api_name, min_delay_seconds)
            cls._instances[api_name] = limiter
            logger.debug(f"Created rate limiter for {api_name} with {min_delay_seconds}s delay")
        elif min_delay_seconds > limiter.min_delay_seconds:
            limiter.min_delay_seconds = min_delay_seconds
        return limiter

    @classmethod
    def reset(cls) -> None:
        """Forget all shared limiters."""
        cls._instances.clear()

    async def acquire(self) -> None:
        """Wait until the next request may be sent."""
        async with self._lock:
            if self._last_request_time is not None and self.min_delay_seconds > 0:
                wait_time = self.min_delay_seconds - (time.monotonic() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

            self._last_request_time = time.monotonic()
            self.request_count += 1

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        return None
