import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from watchstats.achievements import AchievementEngine
from watchstats.badges import ALL_BADGES
from watchstats.config import RECENT_ITEMS_LIMIT
from watchstats.domain import (
    Badge,
    BadgeCategory,
    MonthlyWrappedStats,
    WatchedEpisode,
    WatchedMovie,
    WatchedSeries,
    WatchedStats,
)
from watchstats.interfaces import IWatchedRepository
from watchstats.stats import StatsService
from watchstats.wrapped import all_monthly_stats, available_months, monthly_stats

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _validate_rating(rating: Optional[int]) -> None:
    if rating is None:
        return
    if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
        raise ValueError(f"Rating must be an integer between 1 and 5, got {rating!r}")


def _replace_by_id(records: List[T], record: T) -> bool:
    for index, existing in enumerate(records):
        if existing.id == record.id:
            records[index] = record
            return True
    return False


class WatchedService:
    """
    Owns the watched lists and drives the analytics after every change:
    a mutation is persisted, the stats are rebuilt from the full record set
    and, for insertions, the badge catalog is evaluated.

    Calls must be serialized by the caller; each one reads and rewrites the
    whole list it touches.
    """

    def __init__(self, repository: IWatchedRepository,
                 stats_service: Optional[StatsService] = None,
                 engine: Optional[AchievementEngine] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock
        self.stats_service = stats_service or StatsService(clock=clock)
        self.engine = engine or AchievementEngine(clock=clock)
        self.recently_unlocked: Optional[Badge] = None
        self.load_data()

    def load_data(self) -> None:
        self.movies: List[WatchedMovie] = self.repository.load_watched_movies()
        self.series: List[WatchedSeries] = self.repository.load_watched_series()
        self.episodes: List[WatchedEpisode] = self.repository.load_watched_episodes()
        self.unlocked_badges: List[Badge] = self.repository.load_unlocked_badges()
        self.stats: WatchedStats = self.repository.load_stats()

    # === Movies ===

    def add_movie(self, movie: WatchedMovie) -> List[Badge]:
        """
        Records a watched movie. A movie already present (same tmdb id) is left
        untouched. Returns the badges this unlocked.
        """
        _validate_rating(movie.rating)
        if self.is_movie_watched(movie.tmdb_id):
            return []
        self.movies.insert(0, movie)
        self.repository.save_watched_movies(self.movies)
        return self._after_insert()

    def mark_movie_watched(self, payload: Dict[str, Any], rating: Optional[int] = None,
                           notes: Optional[str] = None) -> List[Badge]:
        """Records a movie from a movie-manager payload."""
        movie = WatchedMovie.from_library(payload, watched_date=self.clock())
        movie.rating = rating
        movie.notes = notes
        return self.add_movie(movie)

    def remove_movie(self, movie: WatchedMovie) -> None:
        self.movies = [m for m in self.movies if m.id != movie.id]
        self.repository.save_watched_movies(self.movies)
        self.refresh_stats()

    def update_movie(self, movie: WatchedMovie) -> None:
        """Replaces a movie's rating/notes. Stats are not affected."""
        _validate_rating(movie.rating)
        if _replace_by_id(self.movies, movie):
            self.repository.save_watched_movies(self.movies)

    def is_movie_watched(self, tmdb_id: int) -> bool:
        return any(m.tmdb_id == tmdb_id for m in self.movies)

    def recent_movies(self, limit: int = RECENT_ITEMS_LIMIT) -> List[WatchedMovie]:
        return self.movies[:limit]

    # === Series ===

    def add_series(self, series: WatchedSeries) -> List[Badge]:
        _validate_rating(series.rating)
        if self.is_series_watched(series.tvdb_id):
            return []
        self.series.insert(0, series)
        self.repository.save_watched_series(self.series)
        return self._after_insert()

    def mark_series_watched(self, payload: Dict[str, Any], rating: Optional[int] = None,
                            notes: Optional[str] = None) -> List[Badge]:
        """Records a series from a series-manager payload."""
        series = WatchedSeries.from_library(payload, watched_date=self.clock())
        series.rating = rating
        series.notes = notes
        return self.add_series(series)

    def remove_series(self, series: WatchedSeries) -> None:
        self.series = [s for s in self.series if s.id != series.id]
        self.repository.save_watched_series(self.series)
        self.refresh_stats()

    def update_series(self, series: WatchedSeries) -> None:
        _validate_rating(series.rating)
        if _replace_by_id(self.series, series):
            self.repository.save_watched_series(self.series)

    def is_series_watched(self, tvdb_id: int) -> bool:
        return any(s.tvdb_id == tvdb_id for s in self.series)

    def recent_series(self, limit: int = RECENT_ITEMS_LIMIT) -> List[WatchedSeries]:
        return self.series[:limit]

    # === Episodes ===

    def add_episode(self, episode: WatchedEpisode) -> List[Badge]:
        """
        Records a watched episode, keyed by its episode id. Callers wanting to
        avoid a second record for the same season/episode of a series should
        check `has_watched_episode` first.
        """
        _validate_rating(episode.rating)
        if self.is_episode_watched(episode.tmdb_id):
            return []
        self.episodes.insert(0, episode)
        self.repository.save_watched_episodes(self.episodes)
        return self._after_insert()

    def remove_episode(self, episode: WatchedEpisode) -> None:
        self.episodes = [e for e in self.episodes if e.id != episode.id]
        self.repository.save_watched_episodes(self.episodes)
        self.refresh_stats()

    def update_episode(self, episode: WatchedEpisode) -> None:
        _validate_rating(episode.rating)
        if _replace_by_id(self.episodes, episode):
            self.repository.save_watched_episodes(self.episodes)

    def is_episode_watched(self, tmdb_id: int) -> bool:
        return any(e.tmdb_id == tmdb_id for e in self.episodes)

    def has_watched_episode(self, series_tmdb_id: int, season_number: int, episode_number: int) -> bool:
        return any(
            e.series_tmdb_id == series_tmdb_id
            and e.season_number == season_number
            and e.episode_number == episode_number
            for e in self.episodes
        )

    def episodes_for_series(self, series_tmdb_id: int) -> List[WatchedEpisode]:
        return [e for e in self.episodes if e.series_tmdb_id == series_tmdb_id]

    def watched_episodes_count(self, series_tmdb_id: int) -> int:
        return len(self.episodes_for_series(series_tmdb_id))

    def recent_episodes(self, limit: int = RECENT_ITEMS_LIMIT) -> List[WatchedEpisode]:
        return self.episodes[:limit]

    # === Stats & badges ===

    def refresh_stats(self) -> WatchedStats:
        """Rebuilds the stats from every record and persists them."""
        self.stats = self.stats_service.recompute(
            self.movies,
            self.series,
            self.episodes,
            previous_longest_streak=self.stats.longest_streak,
        )
        self.repository.save_stats(self.stats)
        return self.stats

    def check_for_new_badges(self) -> List[Badge]:
        """
        Unlocks and persists every badge newly satisfied by the current stats.
        The first one, if any, becomes `recently_unlocked`.
        """
        candidates = self.engine.evaluate(self.stats, self.movies, self.series, self.episodes, self.unlocked_badges)
        if not candidates:
            return []

        newly_unlocked = self.engine.unlock(candidates)
        self.unlocked_badges.extend(newly_unlocked)
        self.repository.save_unlocked_badges(self.unlocked_badges)
        self.recently_unlocked = newly_unlocked[0]
        logger.info("Unlocked badges: %s", ", ".join(b.id for b in newly_unlocked))
        return newly_unlocked

    def _after_insert(self) -> List[Badge]:
        self.refresh_stats()
        return self.check_for_new_badges()

    def _unlocked_by_rule(self) -> Callable[[Badge], Optional[Badge]]:
        """
        Finds the unlocked record for a catalog badge. Records are matched by
        rule key; only records without a rule fall back to their id.
        """
        by_key = {b.key: b for b in self.unlocked_badges if b.key is not None}
        by_id = {b.id: b for b in self.unlocked_badges if b.key is None}
        return lambda badge: by_key.get(badge.key) or by_id.get(badge.id)

    def all_badges(self) -> List[Badge]:
        """The catalog with unlocked entries replaced by their unlocked record."""
        find = self._unlocked_by_rule()
        return [find(badge) or badge for badge in ALL_BADGES]

    def badge_progress(self) -> float:
        """Share of the catalog unlocked. Badges outside the catalog do not count."""
        if not ALL_BADGES:
            return 0.0
        find = self._unlocked_by_rule()
        return sum(1 for badge in ALL_BADGES if find(badge) is not None) / len(ALL_BADGES)

    def badges_for(self, category: BadgeCategory) -> List[Badge]:
        return [b for b in self.all_badges() if b.category == category]

    def badges_by_category(self) -> Dict[BadgeCategory, List[Badge]]:
        grouped: Dict[BadgeCategory, List[Badge]] = {}
        for badge in self.all_badges():
            grouped.setdefault(badge.category, []).append(badge)
        return grouped

    # === Wrapped ===

    def monthly_stats(self, month: datetime) -> MonthlyWrappedStats:
        return monthly_stats(month, self.movies, self.series, self.episodes)

    def available_months(self) -> List[datetime]:
        return available_months(self.movies, self.series, self.episodes)

    def wrapped_history(self) -> List[MonthlyWrappedStats]:
        return all_monthly_stats(self.movies, self.series, self.episodes)

    # === Reset ===

    def reset_all_data(self) -> None:
        self.repository.reset_all_data()
        self.recently_unlocked = None
        self.load_data()
