from datetime import timedelta

from watchstats.streak import compute_streak

from conftest import NOW


def days_ago(*offsets):
    return [NOW - timedelta(days=offset) for offset in offsets]


def test_no_records():
    assert compute_streak([], [], now=NOW) == (0, 0)


def test_single_record_today():
    assert compute_streak(days_ago(0), [], now=NOW) == (1, 1)


def test_today_and_yesterday():
    assert compute_streak(days_ago(0, 1), [], now=NOW) == (2, 2)


def test_gap_breaks_the_run():
    assert compute_streak(days_ago(0, 3), [], now=NOW) == (1, 1)


def test_historical_run_is_kept_as_longest():
    streak = compute_streak(days_ago(0, 20, 21, 22, 23, 24), [], now=NOW)
    assert streak.current == 1
    assert streak.longest == 5


def test_three_consecutive_days():
    assert compute_streak(days_ago(0, 1, 2), [], now=NOW) == (3, 3)


def test_four_consecutive_days():
    assert compute_streak(days_ago(0, 1, 2, 3), [], now=NOW) == (4, 4)


def test_streak_alive_from_yesterday():
    assert compute_streak(days_ago(1, 2), [], now=NOW) == (2, 2)


def test_streak_broken_after_two_idle_days():
    streak = compute_streak(days_ago(2, 3, 4), [], now=NOW)
    assert streak.current == 0
    assert streak.longest == 3


def test_movies_and_episodes_share_the_timeline():
    assert compute_streak(days_ago(0), days_ago(1, 2), now=NOW) == (3, 3)


def test_several_records_on_one_day_count_once():
    same_day = [NOW.replace(hour=h) for h in (9, 12, 18)]
    assert compute_streak(same_day, same_day, now=NOW) == (1, 1)
