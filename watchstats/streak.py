"""Consecutive-day viewing streaks."""
from datetime import datetime, date, timedelta
from typing import Iterable, NamedTuple, Optional

from watchstats.utils import local_date


class Streak(NamedTuple):
    current: int
    longest: int


def compute_streak(movie_dates: Iterable[datetime],
                   episode_dates: Iterable[datetime],
                   now: Optional[datetime] = None) -> Streak:
    """
    Calculates the current and longest streak over the union of movie and
    episode watch days.

    The current streak is alive while today or yesterday has activity; it is
    counted backwards from the most recent of the two. The longest streak is
    never reported below the current one.
    """
    days = {local_date(d) for d in movie_dates}
    days.update(local_date(d) for d in episode_dates)
    if not days:
        return Streak(0, 0)

    today = local_date(now or datetime.now())
    return Streak(_current_streak(days, today), _longest_streak(days, today))


def _current_streak(days: set, today: date) -> int:
    yesterday = today - timedelta(days=1)
    if today in days:
        check = today
    elif yesterday in days:
        check = yesterday
    else:
        return 0

    streak = 1
    while check - timedelta(days=1) in days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def _longest_streak(days: set, today: date) -> int:
    ordered = sorted(days, reverse=True)
    longest = 1
    run = 1
    for previous, current in zip(ordered, ordered[1:]):
        if (previous - current).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return max(longest, _current_streak(days, today))
