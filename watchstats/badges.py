"""
Badge catalog.

Every badge is a data row: identity, display fields, category, rarity, the
requirement it compares against and the condition that produces the compared
value. The achievement engine interprets these rows; nothing here evaluates.
"""
import hashlib
import re
from typing import Dict, List, Optional, Sequence, Tuple

from watchstats.config import MAIN_GENRES
from watchstats.domain import Badge, BadgeCategory, BadgeRarity, Condition

# Bumped whenever ids, requirements or conditions change
CATALOG_VERSION = 1

COMMON = BadgeRarity.COMMON
UNCOMMON = BadgeRarity.UNCOMMON
RARE = BadgeRarity.RARE
EPIC = BadgeRarity.EPIC
LEGENDARY = BadgeRarity.LEGENDARY


def _block(category: BadgeCategory, condition: Condition,
           rows: Sequence[Tuple[str, str, str, str, BadgeRarity, int]]) -> List[Badge]:
    """Rows sharing one category and one condition."""
    return [
        Badge(id=badge_id, name=name, description=description, icon=icon,
              category=category, rarity=rarity, requirement=requirement, condition=condition)
        for badge_id, name, description, icon, rarity, requirement in rows
    ]


def _mixed(category: BadgeCategory,
           rows: Sequence[Tuple[str, str, str, str, BadgeRarity, int, Condition]]) -> List[Badge]:
    """Rows sharing one category, each with its own condition."""
    return [
        Badge(id=badge_id, name=name, description=description, icon=icon,
              category=category, rarity=rarity, requirement=requirement, condition=condition)
        for badge_id, name, description, icon, rarity, requirement, condition in rows
    ]


# === Collector (movies watched) ===

COLLECTOR_BADGES = _block(BadgeCategory.COLLECTOR, Condition.TOTAL_MOVIES, [
    ("first_movie", "First Steps", "Watch your first movie", "🎬", COMMON, 1),
    ("movies_5", "Novice", "Watch 5 movies", "🌱", COMMON, 5),
    ("movies_10", "Amateur", "Watch 10 movies", "🎞️", COMMON, 10),
    ("movies_25", "Enthusiast", "Watch 25 movies", "🍿", UNCOMMON, 25),
    ("movies_50", "Cinephile", "Watch 50 movies", "🎥", UNCOMMON, 50),
    ("movies_100", "Expert", "Watch 100 movies", "🏆", RARE, 100),
    ("movies_250", "Master", "Watch 250 movies", "👑", EPIC, 250),
    ("movies_500", "Legend", "Watch 500 movies", "⭐", EPIC, 500),
    ("movies_1000", "Film God", "Watch 1000 movies", "🌟", LEGENDARY, 1000),
])

# === Series collector (series watched) ===

SERIES_COLLECTOR_BADGES = _block(BadgeCategory.SERIES_COLLECTOR, Condition.TOTAL_SERIES, [
    ("first_series", "First Series", "Watch your first series", "📺", COMMON, 1),
    ("series_5", "Viewer", "Watch 5 series", "🎬", COMMON, 5),
    ("series_10", "Serial Fan", "Watch 10 series", "📡", COMMON, 10),
    ("series_25", "Series Addict", "Watch 25 series", "🛋️", UNCOMMON, 25),
    ("series_50", "TV Marathoner", "Watch 50 series", "🏃", UNCOMMON, 50),
    ("series_100", "TV Expert", "Watch 100 series", "🎖️", RARE, 100),
    ("series_250", "Series Master", "Watch 250 series", "👑", EPIC, 250),
    ("series_500", "TV Legend", "Watch 500 series", "🌟", LEGENDARY, 500),
])

# === Episodes watched ===

EPISODE_BADGES = _block(BadgeCategory.SERIES_COLLECTOR, Condition.TOTAL_EPISODES, [
    ("first_episode", "First Episode", "Watch your first episode", "▶️", COMMON, 1),
    ("episodes_10", "Regular Viewer", "Watch 10 episodes", "📺", COMMON, 10),
    ("episodes_50", "Binge Watcher", "Watch 50 episodes", "🎬", UNCOMMON, 50),
    ("episodes_100", "Episode Marathoner", "Watch 100 episodes", "🏃", UNCOMMON, 100),
    ("episodes_250", "Episode Expert", "Watch 250 episodes", "🎖️", RARE, 250),
    ("episodes_500", "Episode Master", "Watch 500 episodes", "👑", EPIC, 500),
    ("episodes_1000", "Series Legend", "Watch 1000 episodes", "🌟", LEGENDARY, 1000),
])

# === Total (movies + episodes) ===

TOTAL_WATCHED_BADGES = _block(BadgeCategory.COLLECTOR, Condition.TOTAL_WATCHED, [
    ("total_50", "Budding Viewer", "Watch 50 titles (movies + episodes)", "🎯", COMMON, 50),
    ("total_100", "Confirmed Fan", "Watch 100 titles (movies + episodes)", "🎪", UNCOMMON, 100),
    ("total_250", "Devotee", "Watch 250 titles (movies + episodes)", "🎭", RARE, 250),
    ("total_500", "Total Addict", "Watch 500 titles (movies + episodes)", "💎", EPIC, 500),
    ("total_1000", "Absolute Master", "Watch 1000 titles (movies + episodes)", "🏆", LEGENDARY, 1000),
])

# === Marathon ===

MARATHON_DAY_BADGES = _block(BadgeCategory.MARATHON, Condition.MOVIES_TODAY, [
    ("marathon_day_2", "Double Feature", "Watch 2 movies in one day", "🎪", COMMON, 2),
    ("marathon_day_3", "Triple Threat", "Watch 3 movies in one day", "🔥", UNCOMMON, 3),
    ("marathon_day_5", "Popcorn Machine", "Watch 5 movies in one day", "🏃‍♂️", RARE, 5),
])

MARATHON_WEEK_BADGES = _block(BadgeCategory.MARATHON, Condition.MOVIES_THIS_WEEK, [
    ("marathon_week_10", "Intense Week", "Watch 10 movies in a week", "📅", UNCOMMON, 10),
    ("marathon_week_20", "Film Obsessed", "Watch 20 movies in a week", "🤯", EPIC, 20),
])

MARATHON_BADGES = MARATHON_DAY_BADGES + MARATHON_WEEK_BADGES

# === Dedication (streak) ===

DEDICATION_BADGES = _block(BadgeCategory.DEDICATION, Condition.CURRENT_STREAK, [
    ("dedication_streak_3", "Streak Starter", "Watch something 3 days in a row", "🔗", COMMON, 3),
    ("dedication_streak_7", "Perfect Week", "Watch something 7 days in a row", "📆", UNCOMMON, 7),
    ("dedication_streak_14", "Fortnight", "Watch something 14 days in a row", "💪", RARE, 14),
    ("dedication_streak_30", "Full Month", "Watch something 30 days in a row", "🌙", EPIC, 30),
    ("dedication_streak_100", "Centurion", "Watch something 100 days in a row", "🏛️", LEGENDARY, 100),
])

# === Special (movies) ===

SPECIAL_BADGES = _mixed(BadgeCategory.SPECIAL, [
    ("night_owl", "Night Owl", "Watch a movie after midnight", "🦉", UNCOMMON, 1, Condition.NIGHT_OWL),
    ("early_bird", "Early Bird", "Watch a movie before 7am", "🐦", UNCOMMON, 1, Condition.EARLY_BIRD),
    ("weekend_warrior", "Weekend Warrior", "Watch 5 movies in one weekend", "⚔️", RARE, 5,
     Condition.WEEKEND_MOVIES),
    ("variety_lover", "Eclectic", "Watch movies from 10 different genres", "🌈", RARE, 10,
     Condition.UNIQUE_GENRES),
    ("genre_master", "Genre Master", "Watch movies from every genre", "🎓", LEGENDARY, 15,
     Condition.UNIQUE_GENRES),
    ("long_movie", "Endurance", "Watch a movie longer than 3 hours", "⏱️", UNCOMMON, 180,
     Condition.LONG_MOVIE),
    ("classic_lover", "Classic", "Watch 10 movies released before 1980", "📽️", RARE, 10,
     Condition.CLASSIC_MOVIES),
    ("modern_fan", "Contemporary", "Watch 10 movies released this year", "🆕", RARE, 10,
     Condition.CURRENT_YEAR_MOVIES),
])

# === Special (series) ===

SERIES_SPECIAL_BADGES = _mixed(BadgeCategory.SERIES_COLLECTOR, [
    ("series_binger", "Finisher", "Complete a whole series", "🔥", UNCOMMON, 1, Condition.COMPLETED_SERIES),
    ("series_binger_5", "Pro Finisher", "Complete 5 whole series", "⚡", RARE, 5, Condition.COMPLETED_SERIES),
    ("series_binger_20", "Ultimate Finisher", "Complete 20 whole series", "💫", EPIC, 20,
     Condition.COMPLETED_SERIES),
    ("series_long", "Long Haul", "Watch a series with more than 100 episodes", "📚", RARE, 100,
     Condition.LONG_SERIES),
    ("series_classic", "Nostalgic", "Watch 5 series from before 2000", "📼", UNCOMMON, 5,
     Condition.CLASSIC_SERIES),
    ("series_modern", "Trendy", "Watch 10 series released this year", "✨", RARE, 10,
     Condition.CURRENT_YEAR_SERIES),
    ("series_genre_variety", "Eclectic TV", "Watch series from 8 different genres", "🌈", RARE, 8,
     Condition.UNIQUE_SERIES_GENRES),
])

# === Genre ===

GENRE_EMOJIS: Dict[str, str] = {
    "Action": "💥",
    "Adventure": "🗺️",
    "Animation": "🎨",
    "Comedy": "😂",
    "Crime": "🔪",
    "Documentary": "📹",
    "Drama": "🎭",
    "Family": "👨‍👩‍👧‍👦",
    "Fantasy": "🧙‍♂️",
    "History": "📜",
    "Horror": "👻",
    "Music": "🎵",
    "Mystery": "🔍",
    "Romance": "💕",
    "Science Fiction": "🚀",
    "Sci-Fi": "🚀",
    "TV Movie": "📺",
    "Thriller": "😱",
    "War": "⚔️",
    "Western": "🤠",
}

# (requirement, rarity, name pattern)
_GENRE_TIERS = [
    (5, COMMON, "{genre} Fan"),
    (15, UNCOMMON, "{genre} Enthusiast"),
    (30, RARE, "{genre} Expert"),
    (50, EPIC, "{genre} Master"),
]

_SERIES_GENRE_TIERS = [
    (3, COMMON, "{genre} TV Fan"),
    (10, UNCOMMON, "{genre} TV Expert"),
    (25, RARE, "{genre} TV Master"),
]


def genre_slug(genre: str) -> str:
    """'Science Fiction' -> 'science_fiction', 'Комедия' -> 'комедия'."""
    slug = re.sub(r"[\W_]+", "_", genre.casefold()).strip("_")
    return slug or "unknown"


def genre_id_part(genre: str) -> str:
    """
    The genre segment of a badge id. When slugging drops anything besides
    spaces, a short digest of the genre is appended so that "Science Fiction"
    and "Science-Fiction" keep distinct ids. Genres differing only by case
    share an id; rule matching goes through `Badge.key`.
    """
    folded = genre.casefold()
    slug = genre_slug(genre)
    if slug == folded.replace(" ", "_"):
        return slug
    digest = hashlib.sha1(folded.encode("utf-8")).hexdigest()[:6]
    return f"{slug}_{digest}"


def genre_badges(genre: str) -> List[Badge]:
    icon = GENRE_EMOJIS.get(genre, "🎭")
    part = genre_id_part(genre)
    return [
        Badge(
            id=f"genre_{part}_{requirement}",
            name=name.format(genre=genre),
            description=f"Watch {requirement} {genre} movies",
            icon=icon,
            category=BadgeCategory.GENRE,
            rarity=rarity,
            requirement=requirement,
            condition=Condition.GENRE_COUNT,
            genre=genre,
        )
        for requirement, rarity, name in _GENRE_TIERS
    ]


def series_genre_badges(genre: str) -> List[Badge]:
    icon = GENRE_EMOJIS.get(genre, "📺")
    part = genre_id_part(genre)
    return [
        Badge(
            id=f"series_genre_{part}_{requirement}",
            name=name.format(genre=genre),
            description=f"Watch {requirement} {genre} series",
            icon=icon,
            category=BadgeCategory.SERIES_COLLECTOR,
            rarity=rarity,
            requirement=requirement,
            condition=Condition.SERIES_GENRE_COUNT,
            genre=genre,
        )
        for requirement, rarity, name in _SERIES_GENRE_TIERS
    ]


def _build_catalog() -> List[Badge]:
    badges = (
        COLLECTOR_BADGES
        + SERIES_COLLECTOR_BADGES
        + SERIES_SPECIAL_BADGES
        + EPISODE_BADGES
        + TOTAL_WATCHED_BADGES
        + MARATHON_BADGES
        + DEDICATION_BADGES
        + SPECIAL_BADGES
    )
    for genre in MAIN_GENRES:
        badges.extend(genre_badges(genre))
    for genre in MAIN_GENRES:
        badges.extend(series_genre_badges(genre))
    return badges


# Display order of the full catalog
ALL_BADGES: List[Badge] = _build_catalog()

_BY_ID: Dict[str, Badge] = {badge.id: badge for badge in ALL_BADGES}


def badge_by_id(badge_id: str) -> Optional[Badge]:
    """Catalog badge for `badge_id`, or None when it is not listed."""
    return _BY_ID.get(badge_id)


# Ids used by earlier catalog versions
LEGACY_BADGE_IDS: Dict[str, str] = {
    "streak_3": "dedication_streak_3",
    "streak_7": "dedication_streak_7",
    "streak_14": "dedication_streak_14",
    "streak_30": "dedication_streak_30",
    "streak_100": "dedication_streak_100",
}

_LEGACY_GENRE_ID = re.compile(r"^(series_genre|genre)_(.+)_(\d+)$")


def canonical_badge_id(badge_id: str) -> str:
    """
    Maps an id written by an earlier catalog version to the current one.
    Older genre ids embedded the raw lowercased genre ("genre_science fiction_5").
    """
    if badge_id in LEGACY_BADGE_IDS:
        return LEGACY_BADGE_IDS[badge_id]
    match = _LEGACY_GENRE_ID.match(badge_id)
    if match:
        prefix, genre, requirement = match.groups()
        return f"{prefix}_{genre_id_part(genre)}_{requirement}"
    return badge_id
