from datetime import date, datetime, timedelta, timezone

import pytest

from clinic_backend.core.dates import coerce_date, day_bounds, day_key, is_within_day, start_of_day
from clinic_backend.core.errors import ValidationError


class _ProtoTimestamp:
    def __init__(self, value: datetime):
        self._value = value

    def ToDatetime(self) -> datetime:
        return self._value


def test_coerce_date_passes_naive_datetime_through() -> None:
    moment = datetime(2025, 6, 1, 9, 0)

    assert coerce_date(moment) == moment


def test_coerce_date_expands_plain_date_to_midnight() -> None:
    assert coerce_date(date(2025, 6, 1)) == datetime(2025, 6, 1, 0, 0)


def test_coerce_date_parses_naive_iso_string() -> None:
    assert coerce_date('2025-06-01T09:15:00') == datetime(2025, 6, 1, 9, 15)


def test_coerce_date_shifts_utc_iso_string_to_local_time() -> None:
    expected = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)

    assert coerce_date('2025-06-01T12:00:00Z') == expected


def test_coerce_date_reads_seconds_and_nanoseconds_map() -> None:
    moment = datetime(2025, 6, 1, 9, 0)
    encoded = {'_seconds': int(moment.timestamp()), '_nanoseconds': 500_000_000}

    assert coerce_date(encoded) == moment + timedelta(milliseconds=500)


def test_coerce_date_reads_protobuf_style_map() -> None:
    moment = datetime(2025, 6, 1, 9, 0)

    assert coerce_date({'seconds': int(moment.timestamp()), 'nanos': 0}) == moment


def test_coerce_date_converts_provider_timestamp_objects() -> None:
    aware = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)

    assert coerce_date(_ProtoTimestamp(aware)) == aware.astimezone().replace(tzinfo=None)


@pytest.mark.parametrize('value', [None, '', '   ', 'not-a-date', {'_seconds': 'soon'}, 42, ['2025-06-01']])
def test_coerce_date_rejects_unrecognized_values(value) -> None:
    with pytest.raises(ValidationError) as exception_info:
        coerce_date(value, 'appointment date')

    assert exception_info.value.message == 'Invalid appointment date format'


def test_day_key_ignores_time_of_day_and_encoding() -> None:
    morning = datetime(2025, 6, 1, 0, 5)
    evening = {'_seconds': int(datetime(2025, 6, 1, 23, 55).timestamp()), '_nanoseconds': 0}

    assert day_key(morning) == day_key(evening) == day_key('2025-06-01') == '2025-06-01'


def test_day_key_returns_none_for_garbage() -> None:
    assert day_key('garbage') is None


def test_start_of_day_truncates_to_midnight() -> None:
    assert start_of_day('2025-06-01T17:45:00') == datetime(2025, 6, 1)


def test_day_bounds_cover_the_whole_calendar_day() -> None:
    start, end = day_bounds(datetime(2025, 6, 1, 14, 0))

    assert start == datetime(2025, 6, 1, 0, 0)
    assert end.date() == date(2025, 6, 1)
    assert end > datetime(2025, 6, 1, 23, 59, 59)


def test_is_within_day_checks_both_ends_and_skips_bad_values() -> None:
    bounds = day_bounds('2025-06-01')

    assert is_within_day(datetime(2025, 6, 1, 0, 0), bounds)
    assert is_within_day(datetime(2025, 6, 1, 23, 59, 59), bounds)
    assert not is_within_day(datetime(2025, 6, 2, 0, 0), bounds)
    assert not is_within_day('nonsense', bounds)
