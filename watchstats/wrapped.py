"""Monthly "wrapped" summaries of viewing activity."""
from collections import Counter
from datetime import datetime
from typing import List

from watchstats.config import WRAPPED_TOP_GENRES_LIMIT
from watchstats.domain import WatchedMovie, WatchedSeries, WatchedEpisode, MonthlyWrappedStats
from watchstats.utils import start_of_month


def _in_month(moment: datetime, month_start: datetime) -> bool:
    return start_of_month(moment) == month_start


def monthly_stats(month: datetime,
                  movies: List[WatchedMovie],
                  series: List[WatchedSeries],
                  episodes: List[WatchedEpisode],
                  top_genres_limit: int = WRAPPED_TOP_GENRES_LIMIT) -> MonthlyWrappedStats:
    """
    Summarises the calendar month containing `month`.

    Top genres are ranked by how many of the month's movies and series carry
    them; ties keep the order genres were first seen (movies before series).
    """
    month_start = start_of_month(month)
    month_movies = [m for m in movies if _in_month(m.watched_date, month_start)]
    month_series = [s for s in series if _in_month(s.watched_date, month_start)]
    month_episodes = [e for e in episodes if _in_month(e.watched_date, month_start)]

    genres = Counter()
    for item in month_movies + month_series:
        genres.update(item.genres)

    runtime = sum(m.runtime or 0 for m in month_movies) + sum(e.runtime or 0 for e in month_episodes)

    return MonthlyWrappedStats(
        month_start=month_start,
        movies_count=len(month_movies),
        series_count=len(month_series),
        episodes_count=len(month_episodes),
        total_runtime_minutes=runtime,
        top_genres=[genre for genre, _ in genres.most_common(top_genres_limit)],
    )


def available_months(movies: List[WatchedMovie],
                     series: List[WatchedSeries],
                     episodes: List[WatchedEpisode]) -> List[datetime]:
    """Distinct months holding at least one record, most recent first."""
    months = {start_of_month(m.watched_date) for m in movies}
    months.update(start_of_month(s.watched_date) for s in series)
    months.update(start_of_month(e.watched_date) for e in episodes)
    return sorted(months, reverse=True)


def all_monthly_stats(movies: List[WatchedMovie],
                      series: List[WatchedSeries],
                      episodes: List[WatchedEpisode]) -> List[MonthlyWrappedStats]:
    return [monthly_stats(month, movies, series, episodes)
            for month in available_months(movies, series, episodes)]
