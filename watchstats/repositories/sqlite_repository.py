"""SQLite repository for watched records, unlocked badges and stats."""
import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from watchstats.badges import badge_by_id, canonical_badge_id
from watchstats.database import Database
from watchstats.domain import (
    WatchedMovie,
    WatchedSeries,
    WatchedEpisode,
    Badge,
    BadgeCategory,
    BadgeRarity,
    Condition,
    WatchedStats,
)
from watchstats.interfaces import IWatchedRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

WATCHED_MOVIES_KEY = "watchedMovies"
WATCHED_SERIES_KEY = "watchedSeries"
WATCHED_EPISODES_KEY = "watchedEpisodes"
UNLOCKED_BADGES_KEY = "unlockedBadges"
STATS_KEY = "watchedStats"

ALL_KEYS = (WATCHED_MOVIES_KEY, WATCHED_SERIES_KEY, WATCHED_EPISODES_KEY, UNLOCKED_BADGES_KEY, STATS_KEY)

# Numeric dates count seconds from 2001-01-01 UTC (the legacy app's encoder)
_REFERENCE_TIMESTAMP = 978307200


# === Encoding ===

def encode_date(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def decode_date(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(_REFERENCE_TIMESTAMP + value)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def movie_to_dict(movie: WatchedMovie) -> Dict[str, Any]:
    return {
        "id": movie.id,
        "tmdbId": movie.tmdb_id,
        "radarrId": movie.library_id,
        "title": movie.title,
        "year": movie.year,
        "posterURL": movie.poster_url,
        "fanartURL": movie.backdrop_url,
        "genres": list(movie.genres),
        "runtime": movie.runtime,
        "watchedDate": encode_date(movie.watched_date),
        "rating": movie.rating,
        "notes": movie.notes,
    }


def movie_from_dict(data: Dict[str, Any]) -> WatchedMovie:
    return WatchedMovie(
        id=str(data["id"]),
        tmdb_id=int(data["tmdbId"]),
        library_id=data.get("radarrId"),
        title=data.get("title") or "",
        year=data.get("year") or 0,
        poster_url=data.get("posterURL"),
        backdrop_url=data.get("fanartURL"),
        genres=list(data.get("genres") or []),
        runtime=data.get("runtime"),
        watched_date=decode_date(data["watchedDate"]),
        rating=data.get("rating"),
        notes=data.get("notes"),
    )


def series_to_dict(series: WatchedSeries) -> Dict[str, Any]:
    return {
        "id": series.id,
        "tvdbId": series.tvdb_id,
        "sonarrId": series.library_id,
        "title": series.title,
        "year": series.year,
        "posterURL": series.poster_url,
        "fanartURL": series.backdrop_url,
        "genres": list(series.genres),
        "totalEpisodes": series.total_episodes,
        "watchedEpisodes": series.watched_episodes,
        "watchedDate": encode_date(series.watched_date),
        "rating": series.rating,
        "notes": series.notes,
    }


def series_from_dict(data: Dict[str, Any]) -> WatchedSeries:
    return WatchedSeries(
        id=str(data["id"]),
        tvdb_id=int(data["tvdbId"]),
        library_id=data.get("sonarrId"),
        title=data.get("title") or "",
        year=data.get("year") or 0,
        poster_url=data.get("posterURL"),
        backdrop_url=data.get("fanartURL"),
        genres=list(data.get("genres") or []),
        total_episodes=data.get("totalEpisodes") or 0,
        watched_episodes=data.get("watchedEpisodes") or 0,
        watched_date=decode_date(data["watchedDate"]),
        rating=data.get("rating"),
        notes=data.get("notes"),
    )


def episode_to_dict(episode: WatchedEpisode) -> Dict[str, Any]:
    return {
        "id": episode.id,
        "tmdbId": episode.tmdb_id,
        "seriesTmdbId": episode.series_tmdb_id,
        "seriesTitle": episode.series_title,
        "seriesPosterURL": episode.series_poster_url,
        "seriesTotalEpisodes": episode.series_total_episodes,
        "episodeTitle": episode.episode_title,
        "seasonNumber": episode.season_number,
        "episodeNumber": episode.episode_number,
        "runtime": episode.runtime,
        "stillURL": episode.still_url,
        "overview": episode.overview,
        "watchedDate": encode_date(episode.watched_date),
        "rating": episode.rating,
        "notes": episode.notes,
    }


def episode_from_dict(data: Dict[str, Any]) -> WatchedEpisode:
    return WatchedEpisode(
        id=str(data["id"]),
        tmdb_id=int(data["tmdbId"]),
        series_tmdb_id=int(data["seriesTmdbId"]),
        series_title=data.get("seriesTitle") or "",
        series_poster_url=data.get("seriesPosterURL"),
        series_total_episodes=data.get("seriesTotalEpisodes"),
        episode_title=data.get("episodeTitle") or "",
        season_number=data.get("seasonNumber") or 0,
        episode_number=data.get("episodeNumber") or 0,
        runtime=data.get("runtime"),
        still_url=data.get("stillURL"),
        overview=data.get("overview"),
        watched_date=decode_date(data["watchedDate"]),
        rating=data.get("rating"),
        notes=data.get("notes"),
    )


def badge_to_dict(badge: Badge) -> Dict[str, Any]:
    return {
        "id": badge.id,
        "name": badge.name,
        "description": badge.description,
        "icon": badge.icon,
        "category": badge.category.value,
        "rarity": badge.rarity.value,
        "requirement": badge.requirement,
        "condition": badge.condition.value if badge.condition else None,
        "genre": badge.genre,
        "unlockedDate": encode_date(badge.unlocked_date),
    }


def badge_from_dict(data: Dict[str, Any]) -> Badge:
    """
    Rebuilds an unlocked badge. Catalog badges take their definition from the
    current catalog so renamed or re-described badges stay in sync.
    """
    badge_id = canonical_badge_id(str(data["id"]))
    unlocked_date = decode_date(data.get("unlockedDate"))
    known = badge_by_id(badge_id)
    if known is not None:
        return known.unlocked(unlocked_date) if unlocked_date else known

    condition = data.get("condition")
    return Badge(
        id=badge_id,
        name=data.get("name") or badge_id,
        description=data.get("description") or "",
        icon=data.get("icon") or "",
        category=BadgeCategory(data["category"]),
        rarity=BadgeRarity(data["rarity"]),
        requirement=int(data.get("requirement") or 0),
        condition=Condition(condition) if condition else None,
        genre=data.get("genre"),
        unlocked_date=unlocked_date,
    )


def stats_to_dict(stats: WatchedStats) -> Dict[str, Any]:
    return {
        "totalMovies": stats.total_movies,
        "totalRuntime": stats.total_runtime,
        "genreCounts": dict(stats.genre_counts),
        "currentStreak": stats.current_streak,
        "longestStreak": stats.longest_streak,
        "lastWatchedDate": encode_date(stats.last_watched_date),
        "moviesThisWeek": stats.movies_this_week,
        "moviesThisMonth": stats.movies_this_month,
        "uniqueGenres": sorted(stats.unique_genres),
        "totalSeries": stats.total_series,
        "completedSeries": stats.completed_series,
        "seriesGenreCounts": dict(stats.series_genre_counts),
        "uniqueSeriesGenres": sorted(stats.unique_series_genres),
        "seriesThisWeek": stats.series_this_week,
        "seriesThisMonth": stats.series_this_month,
        "totalEpisodes": stats.total_episodes,
        "episodesRuntime": stats.episodes_runtime,
        "episodesThisWeek": stats.episodes_this_week,
        "episodesThisMonth": stats.episodes_this_month,
    }


def stats_from_dict(data: Dict[str, Any]) -> WatchedStats:
    """Missing fields (snapshots written before they existed) default to zero."""
    return WatchedStats(
        total_movies=data.get("totalMovies") or 0,
        total_runtime=data.get("totalRuntime") or 0,
        genre_counts=dict(data.get("genreCounts") or {}),
        current_streak=data.get("currentStreak") or 0,
        longest_streak=data.get("longestStreak") or 0,
        last_watched_date=decode_date(data.get("lastWatchedDate")),
        movies_this_week=data.get("moviesThisWeek") or 0,
        movies_this_month=data.get("moviesThisMonth") or 0,
        unique_genres=set(data.get("uniqueGenres") or []),
        total_series=data.get("totalSeries") or 0,
        completed_series=data.get("completedSeries") or 0,
        series_genre_counts=dict(data.get("seriesGenreCounts") or {}),
        unique_series_genres=set(data.get("uniqueSeriesGenres") or []),
        series_this_week=data.get("seriesThisWeek") or 0,
        series_this_month=data.get("seriesThisMonth") or 0,
        total_episodes=data.get("totalEpisodes") or 0,
        episodes_runtime=data.get("episodesRuntime") or 0,
        episodes_this_week=data.get("episodesThisWeek") or 0,
        episodes_this_month=data.get("episodesThisMonth") or 0,
    )


def decode_records(key: str, items: Any, decoder: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Decodes a list of records, dropping the ones that cannot be read."""
    if not isinstance(items, list):
        logger.warning("Expected a list under %s, got %s", key, type(items).__name__)
        return []

    records = []
    for item in items:
        try:
            records.append(decoder(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping unreadable %s entry: %s", key, e)
    return records


class SqliteRepository(IWatchedRepository):
    """SQLite-backed store keeping one JSON document per list."""
    
    def __init__(self, db_path: Path):
        self.db = Database(db_path)

    # === Raw blob access ===

    def _read(self, key: str) -> Any:
        with self.db.connection() as conn:
            row = conn.execute("SELECT payload FROM blobs WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row['payload'])
        except json.JSONDecodeError as e:
            logger.warning("Could not decode %s: %s", key, e)
            return None

    def _write(self, key: str, payload: Any) -> None:
        with self.db.connection() as conn:
            conn.execute("""
                INSERT INTO blobs (key, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                payload=excluded.payload,
                updated_at=excluded.updated_at
            """, (key, json.dumps(payload, ensure_ascii=False), datetime.now().isoformat()))

    def _load_list(self, key: str, decoder: Callable[[Dict[str, Any]], T]) -> List[T]:
        payload = self._read(key)
        if payload is None:
            return []
        return decode_records(key, payload, decoder)

    # === Movies ===

    def load_watched_movies(self) -> List[WatchedMovie]:
        return self._load_list(WATCHED_MOVIES_KEY, movie_from_dict)

    def save_watched_movies(self, movies: List[WatchedMovie]) -> None:
        self._write(WATCHED_MOVIES_KEY, [movie_to_dict(m) for m in movies])

    # === Series ===

    def load_watched_series(self) -> List[WatchedSeries]:
        return self._load_list(WATCHED_SERIES_KEY, series_from_dict)

    def save_watched_series(self, series: List[WatchedSeries]) -> None:
        self._write(WATCHED_SERIES_KEY, [series_to_dict(s) for s in series])

    # === Episodes ===

    def load_watched_episodes(self) -> List[WatchedEpisode]:
        return self._load_list(WATCHED_EPISODES_KEY, episode_from_dict)

    def save_watched_episodes(self, episodes: List[WatchedEpisode]) -> None:
        self._write(WATCHED_EPISODES_KEY, [episode_to_dict(e) for e in episodes])

    # === Badges ===

    def load_unlocked_badges(self) -> List[Badge]:
        return self._load_list(UNLOCKED_BADGES_KEY, badge_from_dict)

    def save_unlocked_badges(self, badges: List[Badge]) -> None:
        self._write(UNLOCKED_BADGES_KEY, [badge_to_dict(b) for b in badges])

    # === Stats ===

    def load_stats(self) -> WatchedStats:
        payload = self._read(STATS_KEY)
        if not isinstance(payload, dict):
            return WatchedStats()
        try:
            return stats_from_dict(payload)
        except (TypeError, ValueError) as e:
            logger.warning("Could not decode %s: %s", STATS_KEY, e)
            return WatchedStats()

    def save_stats(self, stats: WatchedStats) -> None:
        self._write(STATS_KEY, stats_to_dict(stats))

    # === Reset ===

    def reset_all_data(self) -> None:
        with self.db.connection() as conn:
            conn.executemany("DELETE FROM blobs WHERE key = ?", [(key,) for key in ALL_KEYS])
