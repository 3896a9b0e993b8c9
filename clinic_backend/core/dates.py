"""Calendar-day helpers.

Every date that crosses the HTTP or storage boundary is coerced to a naive
``datetime`` in server-local time. Calendar-day comparisons are made on that
value, never on the raw encoding.
"""

from datetime import date, datetime, time, timedelta
from typing import Any

from clinic_backend.core.errors import ValidationError

DAY_KEY_FORMAT = '%Y-%m-%d'


def _from_epoch(seconds: Any, nanos: Any) -> datetime:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        raise TypeError('seconds must be numeric')
    nanos = nanos or 0
    if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
        raise TypeError('nanoseconds must be numeric')
    return datetime.fromtimestamp(seconds) + timedelta(microseconds=nanos // 1000)


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _parse_iso(value: str) -> datetime:
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return datetime.fromisoformat(text)


def coerce_date(value: Any, field: str = 'date') -> datetime:
    """Normalize any accepted date encoding.

    Accepted: ``datetime`` (aware values are shifted to local time), ``date``,
    ISO-8601 strings, ``{"_seconds", "_nanoseconds"}`` and ``{"seconds", "nanos"}``
    mappings, and provider timestamp objects exposing ``ToDatetime()`` or
    ``to_datetime()``.
    """
    try:
        if isinstance(value, datetime):
            return _to_local_naive(value)
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        if isinstance(value, str) and value.strip():
            return _to_local_naive(_parse_iso(value))
        if isinstance(value, dict):
            if '_seconds' in value:
                return _from_epoch(value['_seconds'], value.get('_nanoseconds'))
            if 'seconds' in value:
                return _from_epoch(value['seconds'], value.get('nanos', value.get('nanoseconds')))
        to_datetime = getattr(value, 'ToDatetime', None) or getattr(value, 'to_datetime', None)
        if callable(to_datetime):
            converted = to_datetime()
            if isinstance(converted, datetime):
                return _to_local_naive(converted)
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise ValidationError(f'Invalid {field} format') from exc

    raise ValidationError(f'Invalid {field} format')


def day_key(value: Any) -> str | None:
    """Return the ``YYYY-MM-DD`` key for ``value``, or None if it is not a recognizable date."""
    try:
        return coerce_date(value).strftime(DAY_KEY_FORMAT)
    except ValidationError:
        return None


def start_of_day(value: Any) -> datetime:
    return datetime.combine(coerce_date(value).date(), time.min)


def day_bounds(value: Any) -> tuple[datetime, datetime]:
    """Inclusive start-of-day and end-of-day for the calendar day of ``value``."""
    day = coerce_date(value).date()
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def is_within_day(value: Any, bounds: tuple[datetime, datetime]) -> bool:
    try:
        moment = coerce_date(value)
    except ValidationError:
        return False
    return bounds[0] <= moment <= bounds[1]
