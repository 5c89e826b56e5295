"""Watch statistics for the watched-activity engine."""
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from watchstats.config import INCLUDE_SERIES_DATES, WEEK_WINDOW_DAYS, MONTH_WINDOW_DAYS
from watchstats.domain import WatchedMovie, WatchedSeries, WatchedEpisode, WatchedStats
from watchstats.streak import compute_streak
from watchstats.utils import to_local

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def count_genres(genre_lists: Iterable[Sequence[str]]) -> Tuple[Dict[str, int], Set[str]]:
    """Counts every genre of every item; keys keep first-encountered order."""
    counts: Dict[str, int] = {}
    for genres in genre_lists:
        for genre in genres:
            counts[genre] = counts.get(genre, 0) + 1
    return counts, set(counts)


def watched_since(dates: Iterable[datetime], now: datetime, days: int) -> int:
    """Number of dates within the rolling window [now - days, ...]."""
    cutoff = to_local(now) - timedelta(days=days)
    return sum(1 for d in dates if to_local(d) >= cutoff)


def recompute_stats(movies: List[WatchedMovie],
                    series: List[WatchedSeries],
                    episodes: List[WatchedEpisode],
                    previous_longest_streak: int = 0,
                    now: Optional[datetime] = None,
                    include_series_dates: bool = INCLUDE_SERIES_DATES) -> WatchedStats:
    """
    Rebuilds the whole statistics snapshot from the record lists.

    Lists are expected most-recent-first, as the store keeps them. The longest
    streak never goes below `previous_longest_streak`, so deleting old records
    does not erase a past record run.
    """
    now = now or datetime.now()
    stats = WatchedStats()

    stats.total_movies = len(movies)
    stats.total_runtime = sum(m.runtime or 0 for m in movies)
    stats.genre_counts, stats.unique_genres = count_genres(m.genres for m in movies)
    stats.movies_this_week = watched_since((m.watched_date for m in movies), now, WEEK_WINDOW_DAYS)
    stats.movies_this_month = watched_since((m.watched_date for m in movies), now, MONTH_WINDOW_DAYS)

    stats.total_series = len(series)
    stats.completed_series = sum(1 for s in series if s.is_completed)
    stats.series_genre_counts, stats.unique_series_genres = count_genres(s.genres for s in series)
    stats.series_this_week = watched_since((s.watched_date for s in series), now, WEEK_WINDOW_DAYS)
    stats.series_this_month = watched_since((s.watched_date for s in series), now, MONTH_WINDOW_DAYS)

    stats.total_episodes = len(episodes)
    stats.episodes_runtime = sum(e.runtime or 0 for e in episodes)
    stats.episodes_this_week = watched_since((e.watched_date for e in episodes), now, WEEK_WINDOW_DAYS)
    stats.episodes_this_month = watched_since((e.watched_date for e in episodes), now, MONTH_WINDOW_DAYS)

    # Series carry a single "marked watched" date, so they only join the
    # activity timeline when explicitly asked to
    activity_dates = [e.watched_date for e in episodes]
    if include_series_dates:
        activity_dates.extend(s.watched_date for s in series)

    streak = compute_streak((m.watched_date for m in movies), activity_dates, now=now)
    stats.current_streak = streak.current
    stats.longest_streak = max(streak.longest, previous_longest_streak)

    latest = [records[0].watched_date for records in (movies, episodes) if records]
    if include_series_dates and series:
        latest.append(series[0].watched_date)
    stats.last_watched_date = max(latest, key=to_local) if latest else None

    logger.debug(
        "Recomputed stats from %d movies, %d series, %d episodes (streak %d/%d)",
        len(movies), len(series), len(episodes), stats.current_streak, stats.longest_streak,
    )
    return stats


class StatsService:
    """Recomputes watch statistics with an injectable clock."""

    def __init__(self, clock: Clock = datetime.now, include_series_dates: bool = INCLUDE_SERIES_DATES):
        self.clock = clock
        self.include_series_dates = include_series_dates

    def recompute(self, movies: List[WatchedMovie], series: List[WatchedSeries],
                  episodes: List[WatchedEpisode], previous_longest_streak: int = 0) -> WatchedStats:
        return recompute_stats(
            movies,
            series,
            episodes,
            previous_longest_streak=previous_longest_streak,
            now=self.clock(),
            include_series_dates=self.include_series_dates,
        )
