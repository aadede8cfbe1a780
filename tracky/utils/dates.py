"""Date parsing and calendar utilities.

Every function that depends on "local time" takes the viewer's timezone
explicitly. ``None`` means the machine's local zone.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, tzinfo

from dateutil import parser as dateutil_parser
from dateutil import tz

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Indexed by date.weekday() (Monday=0)
DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

LOCAL_TIMEZONE_NAMES = {"", "local"}


class InvalidTimestampError(ValueError):
    """Raised when a note timestamp cannot be interpreted as an instant."""

    pass


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve a timezone name into a tzinfo.

    None, "" and "local" give the machine's local zone; "UTC" gives UTC;
    anything else is looked up in the IANA database.

    Raises:
        ValueError: If the name is not a known timezone.
    """
    if name is None or name.strip().lower() in LOCAL_TIMEZONE_NAMES:
        return tz.tzlocal()
    if name.strip().upper() == "UTC":
        return tz.UTC
    zone = tz.gettz(name.strip())
    if zone is None:
        raise ValueError(f"Unknown timezone: '{name}'")
    return zone


def _viewer_zone(zone: tzinfo | None) -> tzinfo:
    return zone if zone is not None else tz.tzlocal()


def parse_instant(
        value: datetime | str | int | float, zone: tzinfo | None = None
) -> datetime:
    """Parse a timestamp into a timezone-aware datetime.

    Accepts:
    - datetime objects (naive ones are taken as wall-clock time in ``zone``)
    - ISO-8601 / RFC 3339 strings, with or without an offset
    - numbers, read as seconds since the Unix epoch (UTC)

    Raises:
        InvalidTimestampError: If the value cannot be parsed.
    """
    if isinstance(value, bool):
        raise InvalidTimestampError(f"Invalid timestamp: {value!r}")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=tz.UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidTimestampError(f"Invalid epoch timestamp: {value!r}") from e
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidTimestampError("Invalid timestamp: empty string")
        try:
            parsed = dateutil_parser.isoparse(text)
        except (ValueError, OverflowError) as e:
            raise InvalidTimestampError(f"Invalid timestamp: {value!r}") from e
    else:
        raise InvalidTimestampError(
            f"Invalid timestamp type {type(value).__name__}: {value!r}"
        )

    if parsed.tzinfo is None or parsed.tzinfo.utcoffset(parsed) is None:
        parsed = parsed.replace(tzinfo=_viewer_zone(zone))
    return parsed


def local_day_start(
        instant: datetime | str | int | float, zone: tzinfo | None = None
) -> date:
    """Truncate an instant to the calendar day it falls on in the viewer's zone."""
    parsed = parse_instant(instant, zone)
    return parsed.astimezone(_viewer_zone(zone)).date()


def day_key(d: date) -> str:
    """Format a date as a stable, sortable YYYY-MM-DD key."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_day_key(key: str) -> date:
    """Parse a YYYY-MM-DD key back into a date.

    Raises:
        ValueError: If the key is not a valid day key.
    """
    try:
        return date.fromisoformat(key.strip())
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid day key '{key}': expected YYYY-MM-DD") from e


def monday_of_week(d: date) -> date:
    """Return the Monday on or before ``d`` (Sunday is the last day of its week)."""
    # date.weekday() is Monday=0 ... Sunday=6
    return d - timedelta(days=d.weekday())


def week_key(d: date) -> str:
    """Return the day key of the Monday that starts the week containing ``d``."""
    return day_key(monday_of_week(d))


def iso_week_number(d: date) -> int:
    """Return the ISO-8601 week number of ``d``.

    Uses the Thursday rule: the week belongs to the year its Thursday falls in.
    """
    thursday = monday_of_week(d) + timedelta(days=3)
    jan1 = date(thursday.year, 1, 1)
    day_of_year = (thursday - jan1).days + 1
    return math.ceil(day_of_year / 7)


def same_local_day(
        a: datetime | str | int | float,
        b: datetime | str | int | float,
        zone: tzinfo | None = None,
) -> bool:
    """Check whether two instants fall on the same local calendar day."""
    return local_day_start(a, zone) == local_day_start(b, zone)


def format_week_label(monday: date, fmt: str | None = None) -> str:
    """Format the label of a week node, e.g. 'Week of Jan 29, 2024'."""
    if fmt is None:
        fmt = "%b %d, %Y"
    return f"Week of {monday.strftime(fmt)}"


def format_day_label(d: date) -> str:
    """Format the label of a day node, e.g. 'Monday 29'."""
    return f"{DAY_NAMES[d.weekday()]} {d.day}"


def format_note_time(
        instant: datetime, zone: tzinfo | None = None, fmt: str | None = None
) -> str:
    """Format a note's creation time in the viewer's zone."""
    if fmt is None:
        fmt = "%Y-%m-%d %H:%M"
    return instant.astimezone(_viewer_zone(zone)).strftime(fmt)
