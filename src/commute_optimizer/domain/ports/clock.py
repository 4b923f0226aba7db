"""Clock port."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Port for reading the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...
