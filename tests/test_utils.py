from datetime import datetime, timezone

from watchstats.utils import format_runtime, local_date, start_of_month, to_local, weekend_span


def test_to_local_keeps_naive_datetimes():
    moment = datetime(2026, 10, 14, 23, 30)
    assert to_local(moment) == moment


def test_to_local_converts_aware_datetimes():
    moment = datetime(2026, 10, 14, 23, 30, tzinfo=timezone.utc)
    local = to_local(moment)
    assert local.tzinfo is None
    assert local == moment.astimezone().replace(tzinfo=None)
    assert local_date(moment) == local.date()


def test_start_of_month():
    assert start_of_month(datetime(2026, 2, 28, 23, 59)) == datetime(2026, 2, 1)


def test_weekend_span_on_a_weekday_is_the_upcoming_weekend():
    # Wednesday
    assert weekend_span(datetime(2026, 10, 14, 20, 0)) == (datetime(2026, 10, 17), datetime(2026, 10, 19))
    # Monday
    assert weekend_span(datetime(2026, 10, 19, 9, 0)) == (datetime(2026, 10, 24), datetime(2026, 10, 26))


def test_weekend_span_on_the_weekend_is_the_current_one():
    assert weekend_span(datetime(2026, 10, 17, 10, 0)) == (datetime(2026, 10, 17), datetime(2026, 10, 19))
    assert weekend_span(datetime(2026, 10, 18, 23, 0)) == (datetime(2026, 10, 17), datetime(2026, 10, 19))


def test_format_runtime():
    assert format_runtime(135) == "2h 15min"
    assert format_runtime(None) == "0h 0min"
    assert format_runtime(-5) == "0h 0min"
    assert format_runtime(24 * 60 + 4 * 60) == "1 day, 4h"
    assert format_runtime(3 * 24 * 60 + 4 * 60 + 20) == "3 days, 4h"
    assert format_runtime(3 * 24 * 60 + 4 * 60, compact=True) == "3d 4h"
