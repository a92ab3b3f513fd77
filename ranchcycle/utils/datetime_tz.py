from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo

from zoneinfo import ZoneInfo

# Ranch-local calendar used for day arithmetic on aware timestamps
DEFAULT_TIMEZONE_NAME = "America/Mexico_City"
DEFAULT_TZ = ZoneInfo(DEFAULT_TIMEZONE_NAME)


def resolve_tz(name: str | None) -> tzinfo:
    if not name:
        return DEFAULT_TZ
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_date(value: date | datetime, tz: tzinfo = DEFAULT_TZ) -> date:
    """Calendar day of `value` on the ranch calendar.

    Naive datetimes are taken at face value; aware ones are converted to `tz`.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    return value


def days_between(start: date | datetime, end: date | datetime, tz: tzinfo = DEFAULT_TZ) -> int:
    return (local_date(end, tz) - local_date(start, tz)).days
