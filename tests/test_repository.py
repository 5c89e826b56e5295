import json
from datetime import datetime, timezone

from watchstats.badges import badge_by_id
from watchstats.domain import WatchedStats
from watchstats.repositories.sqlite_repository import (
    SqliteRepository,
    STATS_KEY,
    UNLOCKED_BADGES_KEY,
    WATCHED_MOVIES_KEY,
    decode_date,
)


def write_raw(repository, key, payload):
    with repository.db.connection() as conn:
        conn.execute(
            "INSERT OR REPLACE INTO blobs (key, payload, updated_at) VALUES (?, ?, ?)",
            (key, payload, datetime.now().isoformat()),
        )


def test_empty_store(repository):
    assert repository.load_watched_movies() == []
    assert repository.load_watched_series() == []
    assert repository.load_watched_episodes() == []
    assert repository.load_unlocked_badges() == []
    assert repository.load_stats() == WatchedStats()


def test_records_survive_a_reopen(tmp_path, make_movie, make_series, make_episode):
    db_path = tmp_path / "watched.db"
    movies = [make_movie(genres=["Drama"], rating=4, notes="great"), make_movie(runtime=None)]
    series = [make_series(total_episodes=8, watched_episodes=8)]
    episodes = [make_episode(season=2, episode=3, overview="Pilot")]

    repository = SqliteRepository(db_path)
    repository.save_watched_movies(movies)
    repository.save_watched_series(series)
    repository.save_watched_episodes(episodes)

    reopened = SqliteRepository(db_path)
    assert reopened.load_watched_movies() == movies
    assert reopened.load_watched_series() == series
    assert reopened.load_watched_episodes() == episodes


def test_unlocked_badges_and_stats(repository):
    stamp = datetime(2026, 10, 14, 20, 0)
    badges = [badge_by_id("first_movie").unlocked(stamp)]
    stats = WatchedStats(total_movies=3, genre_counts={"Drama": 2}, unique_genres={"Drama"},
                         longest_streak=4, last_watched_date=stamp)

    repository.save_unlocked_badges(badges)
    repository.save_stats(stats)

    assert repository.load_unlocked_badges() == badges
    assert repository.load_stats() == stats


def test_corrupt_blob_loads_as_empty(repository):
    write_raw(repository, WATCHED_MOVIES_KEY, "{not json")
    write_raw(repository, STATS_KEY, "[]")
    assert repository.load_watched_movies() == []
    assert repository.load_stats() == WatchedStats()


def test_unreadable_entries_are_skipped(repository):
    good = {"id": "a", "tmdbId": 1, "title": "Good", "watchedDate": "2026-10-01T20:00:00"}
    missing_date = {"id": "b", "tmdbId": 2, "title": "No date"}
    bad_date = {"id": "c", "tmdbId": 3, "title": "Bad date", "watchedDate": "yesterday"}
    write_raw(repository, WATCHED_MOVIES_KEY, json.dumps([good, missing_date, bad_date, "junk"]))

    movies = repository.load_watched_movies()

    assert [m.title for m in movies] == ["Good"]
    assert movies[0].genres == []
    assert movies[0].year == 0


def test_legacy_numeric_dates():
    assert decode_date(0) == datetime.fromtimestamp(978307200)
    assert decode_date("2026-10-01T18:00:00Z") == datetime(2026, 10, 1, 18, 0, tzinfo=timezone.utc)
    assert decode_date(None) is None


def test_stats_missing_newer_fields(repository):
    write_raw(repository, STATS_KEY, json.dumps({"totalMovies": 7, "longestStreak": 3}))
    stats = repository.load_stats()
    assert stats.total_movies == 7
    assert stats.longest_streak == 3
    assert stats.total_episodes == 0
    assert stats.series_genre_counts == {}


def test_legacy_badge_ids_are_upgraded(repository):
    stored = [{"id": "streak_3", "name": "Old", "description": "", "icon": "", "category": "dedication",
               "rarity": "common", "requirement": 3, "unlockedDate": "2026-10-01T20:00:00"}]
    write_raw(repository, UNLOCKED_BADGES_KEY, json.dumps(stored))

    badges = repository.load_unlocked_badges()

    assert [b.id for b in badges] == ["dedication_streak_3"]
    assert badges[0].name == badge_by_id("dedication_streak_3").name
    assert badges[0].unlocked_date == datetime(2026, 10, 1, 20, 0)


def test_reset_all_data(repository, make_movie):
    repository.save_watched_movies([make_movie()])
    repository.save_stats(WatchedStats(total_movies=1))

    repository.reset_all_data()

    assert repository.load_watched_movies() == []
    assert repository.load_stats() == WatchedStats()
