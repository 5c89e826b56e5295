"""
Centralized configuration for the watched-activity engine.
All magic numbers and thresholds are defined here.
"""
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# === Storage ===

DATA_DIR = Path(os.environ.get("WATCHSTATS_DATA_DIR", Path.home() / ".watchstats"))
DATABASE_PATH = Path(os.environ.get("WATCHSTATS_DATABASE", DATA_DIR / "watched.db"))

# Legacy key-value export (one JSON document holding every list)
JSON_EXPORT_PATH = Path(os.environ.get("WATCHSTATS_JSON_EXPORT", DATA_DIR / "watched.json"))

# === Logging ===

LOG_LEVEL = os.environ.get("WATCHSTATS_LOG_LEVEL", "INFO").upper()

# === Statistics ===

# Rolling windows (days) for the "this week" / "this month" counters
WEEK_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30

# Series are tracked with a single watched-on date, so by default they are left
# out of the streak and of the last activity date
INCLUDE_SERIES_DATES = _env_flag("WATCHSTATS_INCLUDE_SERIES_DATES", False)

# === Special badge thresholds ===

# Hour ranges [start, end) in local time
NIGHT_OWL_HOURS = (0, 5)
EARLY_BIRD_HOURS = (5, 7)

# A movie at least this long (minutes) unlocks "long_movie"
LONG_MOVIE_MINUTES = 180

# Released strictly before these years counts as "classic"
CLASSIC_MOVIE_YEAR = 1980
CLASSIC_SERIES_YEAR = 2000

# A series with at least this many episodes unlocks "series_long"
LONG_SERIES_EPISODES = 100

# Genres that get pre-listed genre badges in the catalog (movies and series)
MAIN_GENRES = [
    "Action",
    "Comedy",
    "Drama",
    "Horror",
    "Science Fiction",
    "Thriller",
    "Animation",
    "Romance",
]

# === Display ===

# Number of genres kept in a monthly wrapped summary
WRAPPED_TOP_GENRES_LIMIT = 5

# Default size of the "recently watched" listings
RECENT_ITEMS_LIMIT = 10


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
