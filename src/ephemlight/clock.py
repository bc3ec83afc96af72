"""Civil time handling: local time conversion and Julian day arithmetic."""

import logging
import math
import re
from datetime import datetime, timedelta

from pytz import utc

logger = logging.getLogger(__name__)

J2000_JD = 2451545.0

_LOCAL_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})", re.ASCII)


class InvalidTimeFormat(ValueError):
    """Local civil time string is not YYYY-MM-DDTHH:mm."""


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime. Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return utc.localize(dt)
    return dt.astimezone(utc)


def format_utc(dt: datetime) -> str:
    """Format as an ISO string with a Z suffix."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def offset_hours_from_longitude(lon_deg: float) -> int:
    """Nominal UTC offset for a longitude: one hour per 15°.

    Ignores real timezone borders and DST. 121.5°E → +8, 0° → 0, 180° → +12.
    Halves round up: 7.5°E → +1, 7.5°W → 0.
    """
    return math.floor(lon_deg / 15.0 + 0.5)


def to_utc_from_local(local: str, reference_lon_deg: float) -> datetime:
    """Convert a local civil time string to a UTC instant.

    Args:
        local: Local time in "YYYY-MM-DDTHH:mm" format.
        reference_lon_deg: Longitude whose nominal offset defines "local".

    Returns:
        Aware UTC datetime.

    Raises:
        InvalidTimeFormat: If the string does not match the pattern or
            names a date/time that does not exist.
    """
    match = _LOCAL_PATTERN.fullmatch(local)
    if match is None:
        raise InvalidTimeFormat(
            f"Invalid date format: {local!r}. Expected YYYY-MM-DDTHH:mm"
        )
    year, month, day, hour, minute = (int(g) for g in match.groups())
    try:
        wall = datetime(year, month, day, hour, minute)
    except ValueError as exc:
        raise InvalidTimeFormat(f"Invalid date: {local!r} ({exc})") from exc

    offset = offset_hours_from_longitude(reference_lon_deg)
    result = utc.localize(wall - timedelta(hours=offset))
    logger.debug(f"{local} (lon={reference_lon_deg}) -> {format_utc(result)} (offset {offset:+d}h)")
    return result


def julian_day_number(year: int, month: int, day: int) -> int:
    """Gregorian calendar date → integer Julian day number (the JD at noon)."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    return day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045


def julian_day(instant: datetime) -> float:
    """UTC instant → fractional Julian Day.

    The day number counts from noon, so the time-of-day fraction is taken
    from 12:00 UTC; 2000-01-01T12:00Z gives 2451545.0 (J2000.0).
    No leap-second adjustment.
    """
    dt = ensure_utc(instant)
    hours = (
        dt.hour
        + dt.minute / 60.0
        + dt.second / 3600.0
        + dt.microsecond / 3.6e9
    )
    return julian_day_number(dt.year, dt.month, dt.day) + (hours - 12.0) / 24.0
