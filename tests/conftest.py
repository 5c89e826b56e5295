from datetime import datetime, timedelta

import pytest

from watchstats.domain import WatchedMovie, WatchedSeries, WatchedEpisode
from watchstats.repositories.sqlite_repository import SqliteRepository

# A Wednesday evening
NOW = datetime(2026, 10, 14, 20, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_movie():
    counter = iter(range(1, 100000))

    def _make(days_ago=0, genres=None, runtime=100, year=2010, watched_date=None, **kwargs):
        tmdb_id = kwargs.pop("tmdb_id", None) or next(counter)
        return WatchedMovie(
            tmdb_id=tmdb_id,
            title=kwargs.pop("title", f"Movie {tmdb_id}"),
            year=year,
            genres=list(genres or []),
            runtime=runtime,
            watched_date=watched_date or NOW - timedelta(days=days_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_series():
    counter = iter(range(1, 100000))

    def _make(days_ago=0, genres=None, total_episodes=10, watched_episodes=0, year=2010,
              watched_date=None, **kwargs):
        tvdb_id = kwargs.pop("tvdb_id", None) or next(counter)
        return WatchedSeries(
            tvdb_id=tvdb_id,
            title=kwargs.pop("title", f"Series {tvdb_id}"),
            year=year,
            genres=list(genres or []),
            total_episodes=total_episodes,
            watched_episodes=watched_episodes,
            watched_date=watched_date or NOW - timedelta(days=days_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_episode():
    counter = iter(range(1, 100000))

    def _make(days_ago=0, series_tmdb_id=500, season=1, episode=None, runtime=45,
              watched_date=None, **kwargs):
        tmdb_id = kwargs.pop("tmdb_id", None) or next(counter)
        return WatchedEpisode(
            tmdb_id=tmdb_id,
            series_tmdb_id=series_tmdb_id,
            series_title=kwargs.pop("series_title", "Some Show"),
            episode_title=kwargs.pop("episode_title", f"Episode {tmdb_id}"),
            season_number=season,
            episode_number=episode if episode is not None else tmdb_id,
            runtime=runtime,
            watched_date=watched_date or NOW - timedelta(days=days_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def repository(tmp_path):
    return SqliteRepository(tmp_path / "watched.db")
