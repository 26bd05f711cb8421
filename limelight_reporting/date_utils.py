"""
Date utilities for Reporting Service parameters and results.

The service reports time ranges as seconds since epoch and expects
date-time parameters in its home timezone: MST (UTC-07:00, no daylight
saving adjustment).
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

import dateutil.parser
import pytz


SERVICE_UTC_OFFSET_MINUTES = -7 * 60
SERVICE_TIMEZONE = pytz.FixedOffset(SERVICE_UTC_OFFSET_MINUTES)

Timestamp = Union[datetime, int, float]


def epoch_to_service_datetime(value: Union[int, float, str]) -> datetime:
    """
    Convert seconds since epoch to an aware datetime in the service timezone.

    Args:
        value: Epoch seconds (numeric or numeric string, as returned in handles)

    Returns:
        datetime: Aware datetime at UTC-07:00

    Example:
        >>> epoch_to_service_datetime(0)
        datetime.datetime(1969, 12, 31, 17, 0, tzinfo=pytz.FixedOffset(-420))
    """
    return datetime.fromtimestamp(float(value), tz=SERVICE_TIMEZONE)


def to_service_datetime(value: Timestamp) -> datetime:
    """
    Normalize a datetime or epoch timestamp to the service timezone.

    Naive datetimes are interpreted as service local time.

    Args:
        value: datetime (aware or naive) or epoch seconds

    Returns:
        datetime: Aware datetime at UTC-07:00

    Raises:
        TypeError: If value is neither a datetime nor a number
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return SERVICE_TIMEZONE.localize(value)
        return value.astimezone(SERVICE_TIMEZONE)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return epoch_to_service_datetime(value)
    raise TypeError(f"Expected datetime or epoch seconds, got {type(value).__name__}")


def format_service_datetime(value: Timestamp) -> str:
    """
    Format a timestamp as xsd:dateTime in the service timezone.

    Example:
        >>> format_service_datetime(datetime(2012, 3, 1, 12, 0))
        '2012-03-01T12:00:00-07:00'
    """
    return to_service_datetime(value).replace(microsecond=0).isoformat()


def parse_service_datetime(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a date-time string returned by the service (e.g. startTime).

    Args:
        text: ISO 8601 date-time string

    Returns:
        datetime or None: Aware datetime, None for blank input
    """
    if text is None or not str(text).strip():
        return None
    parsed = dateutil.parser.parse(str(text))
    if parsed.tzinfo is None:
        return SERVICE_TIMEZONE.localize(parsed)
    return parsed


def time_range_bounds(time_range: Dict[str, Any]) -> Tuple[datetime, datetime]:
    """
    Get the start and end of a time-range handle as aware datetimes.

    Args:
        time_range: Time-range record from ReportingClient.time_ranges()

    Returns:
        Tuple of (start, end) in the service timezone

    Raises:
        KeyError: If the handle carries no start/end fields
    """
    return (
        epoch_to_service_datetime(time_range['start']),
        epoch_to_service_datetime(time_range['end']),
    )
