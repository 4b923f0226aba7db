"""System clock adapter."""

from datetime import datetime
from zoneinfo import ZoneInfo


class SystemClock:
    """Reads the wall clock in a configured time zone."""

    def __init__(self, timezone: str | None = None) -> None:
        """Initialize with an IANA timezone name, or None for system local time."""
        self._tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)
