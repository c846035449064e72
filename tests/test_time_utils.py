from datetime import UTC, date, datetime, timedelta, timezone

from backend.app.core.time import as_utc, start_of_day, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_as_utc_tags_naive_values_and_keeps_aware_ones():
    naive = datetime(2024, 3, 1, 12, 30)
    assert as_utc(naive) == datetime(2024, 3, 1, 12, 30, tzinfo=UTC)

    plus_two = datetime(2024, 3, 1, 12, 30, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(plus_two) is plus_two


def test_start_of_day_is_midnight_utc():
    value = start_of_day(date(2024, 3, 1))
    assert value == datetime(2024, 3, 1, 0, 0, tzinfo=UTC)
    assert value < as_utc(datetime(2024, 3, 1, 0, 0, 1))
