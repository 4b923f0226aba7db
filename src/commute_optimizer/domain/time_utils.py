"""Time-of-day parsing, formatting and date arithmetic.

Every helper that depends on the current time takes ``now`` as an argument.
Callers obtain it from a ``Clock`` so tests can pin the current time.
"""

import math
import re
from datetime import UTC, datetime, timedelta

INVALID_CLOCK_12H = "--:-- --"
INVALID_CLOCK_24H = "--:--"

QUARTER_HOUR_MINUTES = 15

_TIME_OF_DAY_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")
_TIME_12H_PATTERN = re.compile(r"\s*([0-9]{1,2}):([0-9]{2})\s*([AaPp][Mm])\s*")


def parse_time_of_day(value: str | None, now: datetime) -> datetime | None:
    """Parse an "H:MM" or "HH:MM" string into a concrete instant.

    The result is anchored to today's date (in ``now``'s time zone). If that
    instant is already strictly before ``now``, the same time tomorrow is
    returned instead.

    Returns:
        The resolved instant, or None if the string is malformed or out of range.
    """
    if not isinstance(value, str):
        return None
    match = _TIME_OF_DAY_PATTERN.fullmatch(value)
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None

    instant = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if instant < now:
        instant += timedelta(days=1)
    return instant


def parse_12_hour_time(value: str | None, now: datetime) -> datetime | None:
    """Parse an "hh:mm AM/PM" string on ``now``'s date. No rolling forward."""
    if not isinstance(value, str):
        return None
    match = _TIME_12H_PATTERN.fullmatch(value)
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (1 <= hours <= 12 and 0 <= minutes <= 59):
        return None

    is_pm = match.group(3).upper() == "PM"
    if is_pm and hours != 12:
        hours += 12
    elif not is_pm and hours == 12:
        hours = 0

    return now.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def convert_to_24_hour(value: str | None) -> str | None:
    """Convert "hh:mm AM/PM" to "HH:MM", or None if the input is invalid."""
    # Any date works as the anchor, only the clock fields are rendered
    parsed = parse_12_hour_time(value, datetime(2000, 1, 1))
    if parsed is None:
        return None
    return format_clock_24h(parsed)


def format_clock(instant: datetime | None) -> str:
    """Render an instant as 12-hour "hh:mm AM/PM" for display."""
    if not isinstance(instant, datetime):
        return INVALID_CLOCK_12H
    suffix = "PM" if instant.hour >= 12 else "AM"
    hours = instant.hour % 12 or 12
    return f"{hours:02d}:{instant.minute:02d} {suffix}"


def format_clock_24h(instant: datetime | None) -> str:
    """Render an instant as canonical 24-hour "HH:MM"."""
    if not isinstance(instant, datetime):
        return INVALID_CLOCK_24H
    return f"{instant.hour:02d}:{instant.minute:02d}"


def as_utc(instant: datetime) -> datetime:
    """The same instant in UTC, for ordering aware datetimes by elapsed time."""
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(UTC)


def add_minutes(instant: datetime, minutes: int | float) -> datetime:
    """Return ``instant`` shifted by ``minutes`` of elapsed time."""
    delta = timedelta(minutes=minutes)
    if instant.tzinfo is None:
        return instant + delta
    # Shift in UTC so DST transitions don't distort the elapsed time
    return (instant.astimezone(UTC) + delta).astimezone(instant.tzinfo)


def minutes_between(start: datetime, end: datetime) -> int:
    """Elapsed minutes from ``start`` to ``end``, rounded half up."""
    if start.tzinfo is not None and end.tzinfo is not None:
        elapsed = end.astimezone(UTC) - start.astimezone(UTC)
    else:
        elapsed = end - start
    return math.floor(elapsed.total_seconds() / 60 + 0.5)


def _truncate_to_minute(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0)


def next_quarter_hour(now: datetime) -> datetime:
    """The next 15-minute boundary after ``now``, plus a one-second buffer.

    A time already on a boundary advances to the following one, so the
    result is always strictly after ``now``.
    """
    minutes_to_add = QUARTER_HOUR_MINUTES - now.minute % QUARTER_HOUR_MINUTES
    boundary = add_minutes(_truncate_to_minute(now), minutes_to_add)
    return boundary + timedelta(seconds=1)


def default_arrival_time(now: datetime) -> datetime:
    """One hour from ``now``, rounded up to a 15-minute boundary."""
    one_hour_later = add_minutes(now, 60)
    minutes_to_add = (QUARTER_HOUR_MINUTES - one_hour_later.minute % QUARTER_HOUR_MINUTES) % (
        QUARTER_HOUR_MINUTES
    )
    return add_minutes(_truncate_to_minute(one_hour_later), minutes_to_add)
