"""Date manipulation utilities"""

from datetime import datetime, timezone
from typing import Union

# Default java.util.Date rendering used by the companion app's JSON serializer
JAVA_DATE_FORMATS = ("%b %d, %Y %I:%M:%S %p", "%b %d, %Y, %I:%M:%S %p")


def parse_timestamp(value: Union[str, int, float]) -> datetime:
    """
    Parse a submitted transaction date into an aware UTC datetime.

    Accepts ISO-8601 strings, the Java default date format and epoch milliseconds.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, bool):
        raise ValueError(f"Unsupported date value: {value!r}")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value}") from e

    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")

    text = value.strip().replace("\u202f", " ")  # Narrow no-break space before AM/PM on newer JDKs
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in JAVA_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        if parsed is None:
            raise ValueError(f"Unrecognised date format: {value!r}")

    return to_utc(parsed)


def to_utc(moment: datetime) -> datetime:
    """Normalise to aware UTC, treating naive datetimes as UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_same_day(moment: datetime, reference: datetime) -> bool:
    return moment.date() == reference.date()


def is_same_month(moment: datetime, reference: datetime) -> bool:
    return (moment.year, moment.month) == (reference.year, reference.month)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)
