"""Import of a legacy JSON export into the SQLite store."""
import json
import logging
from pathlib import Path
from typing import Optional

from watchstats.repositories.sqlite_repository import (
    SqliteRepository,
    WATCHED_MOVIES_KEY,
    WATCHED_SERIES_KEY,
    WATCHED_EPISODES_KEY,
    UNLOCKED_BADGES_KEY,
    STATS_KEY,
    decode_records,
    movie_from_dict,
    series_from_dict,
    episode_from_dict,
    badge_from_dict,
    stats_from_dict,
)

logger = logging.getLogger(__name__)


def migrate_json_to_sqlite(json_path: Path, db_path: Path) -> bool:
    """
    Imports a JSON export holding the watched lists, unlocked badges and stats
    (one key each) into the SQLite store.
    
    Returns:
        True if migration occurred, False if skipped (no JSON, unreadable JSON
        or the store already holds records)
    """
    json_path = Path(json_path)
    if not json_path.exists():
        logger.info("No JSON export found at %s, skipping migration.", json_path)
        return False
    
    repo = SqliteRepository(db_path)
    
    existing = len(repo.load_watched_movies()) + len(repo.load_watched_series()) + len(repo.load_watched_episodes())
    if existing > 0:
        logger.info("Store already has %d records, skipping migration.", existing)
        return False
    
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            raw_data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read JSON export %s: %s", json_path, e)
        return False
    
    if not raw_data or not isinstance(raw_data, dict):
        logger.warning("JSON export %s is empty, skipping migration.", json_path)
        return False
    
    movies = decode_records(WATCHED_MOVIES_KEY, raw_data.get(WATCHED_MOVIES_KEY, []), movie_from_dict)
    series = decode_records(WATCHED_SERIES_KEY, raw_data.get(WATCHED_SERIES_KEY, []), series_from_dict)
    episodes = decode_records(WATCHED_EPISODES_KEY, raw_data.get(WATCHED_EPISODES_KEY, []), episode_from_dict)
    badges = decode_records(UNLOCKED_BADGES_KEY, raw_data.get(UNLOCKED_BADGES_KEY, []), badge_from_dict)
    
    repo.save_watched_movies(movies)
    repo.save_watched_series(series)
    repo.save_watched_episodes(episodes)
    repo.save_unlocked_badges(badges)
    if isinstance(raw_data.get(STATS_KEY), dict):
        repo.save_stats(stats_from_dict(raw_data[STATS_KEY]))
    
    # Keep the export around, out of the way of the next run
    backup_path = json_path.with_suffix('.json.bak')
    json_path.rename(backup_path)
    logger.info(
        "Imported %d movies, %d series, %d episodes and %d badges. Export backed up to %s",
        len(movies), len(series), len(episodes), len(badges), backup_path,
    )
    
    return True


def run_migration_if_needed(json_path: Optional[Path] = None, db_path: Optional[Path] = None) -> bool:
    """Run migration with default paths if not specified."""
    from watchstats.config import JSON_EXPORT_PATH, DATABASE_PATH
    
    json_path = json_path or JSON_EXPORT_PATH
    db_path = db_path or DATABASE_PATH
    
    return migrate_json_to_sqlite(json_path, db_path)
