"""
Helpers for Satellite field formats: timestamps, uptime durations and stringly-typed integers
"""

from datetime import datetime, timezone
from typing import Any, Optional

# e.g. 2020-06-10 10:03:19 UTC
SATELLITE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_satellite_time(value: Any) -> Optional[datetime]:
    """
    Parse a Satellite timestamp into a timezone-aware datetime

    Accepts the API's 'YYYY-MM-DD HH:MM:SS UTC' layout and ISO 8601 strings.
    Any alphabetic zone abbreviation (UTC, GMT, CEST, ...) is read with a
    zero offset.

    Args:
        value: Raw field value

    Returns:
        datetime in UTC, or None for null/empty values

    Raises:
        ValueError: If the value is not a recognised timestamp
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp type: {type(value).__name__}")

    text = value.strip()
    clock, _, zone = text.rpartition(" ")
    if clock and zone.isalpha():
        return datetime.strptime(clock, SATELLITE_TIME_FORMAT).replace(tzinfo=timezone.utc)

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_satellite_time(value: Optional[datetime]) -> str:
    """Render a datetime back into the API's layout ('' for None)"""
    if value is None:
        return ""
    return value.astimezone(timezone.utc).strftime(SATELLITE_TIME_FORMAT) + " UTC"


def format_uptime(seconds: int) -> str:
    """
    Render a number of seconds as a compact duration, e.g. 3723 -> '1h2m3s'

    Minutes and seconds are always present once a larger unit is,
    so 7200 renders as '2h0m0s' and 45 as '45s'.
    """
    sign = "-" if seconds < 0 else ""
    remaining = abs(int(seconds))
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def coerce_int_field(value: Any) -> int:
    """
    Read an integer field the API may send as a string

    Empty strings and missing values read as 0; integers pass through.

    Raises:
        ValueError: For strings that are not base-10 integers
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 10)
        except ValueError:
            raise ValueError(f"error converting {value!r} to int") from None
    return 0
