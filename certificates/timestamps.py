"""
Timestamp conversion helpers.

La libreria cryptography accetta datetime naive (interpretati come UTC) o aware.
Qui normalizziamo sempre in datetime UTC-aware troncati al secondo, perche'
UTCTime/GeneralizedTime nei certificati non rappresentano frazioni di secondo.
"""

from datetime import datetime, timezone
from typing import Union

from certificates.errors import TimestampConversionFailed

Timestamp = Union[datetime, int, float]


def to_utc_datetime(value: Timestamp) -> datetime:
    """
    Converts a host timestamp into a UTC-aware datetime with second precision.

    Args:
        value: Aware/naive datetime (naive = UTC) or Unix seconds

    Returns:
        UTC-aware datetime, microseconds dropped

    Raises:
        TimestampConversionFailed: If the value cannot be represented
    """
    if isinstance(value, bool) or not isinstance(value, (datetime, int, float)):
        raise TimestampConversionFailed(
            f"cannot convert {type(value).__name__} to a timestamp"
        )

    try:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                converted = value.replace(tzinfo=timezone.utc)
            else:
                converted = value.astimezone(timezone.utc)
        else:
            converted = datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampConversionFailed(f"timestamp out of range: {value!r} ({e})") from e

    return converted.replace(microsecond=0)
