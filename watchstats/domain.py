import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Set, Any, NamedTuple

from watchstats.utils import format_runtime


def _new_id() -> str:
    return str(uuid.uuid4())


def _image_url(payload: Dict[str, Any], cover_type: str) -> Optional[str]:
    """Picks a remote image URL out of a library-manager `images` array."""
    for image in payload.get("images") or []:
        if image.get("coverType") == cover_type:
            return image.get("remoteUrl") or image.get("url")
    return None


@dataclass
class WatchedMovie:
    """A movie the user marked as watched."""
    tmdb_id: int
    title: str
    year: int = 0
    id: str = field(default_factory=_new_id)
    library_id: Optional[int] = None  # Radarr id, when added from the library
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    runtime: Optional[int] = None  # minutes
    watched_date: datetime = field(default_factory=datetime.now)
    rating: Optional[int] = None  # personal rating 1-5
    notes: Optional[str] = None

    @classmethod
    def from_library(cls, payload: Dict[str, Any], watched_date: Optional[datetime] = None) -> "WatchedMovie":
        """Builds a record from a movie-manager (Radarr style) movie payload."""
        return cls(
            tmdb_id=payload.get("tmdbId") or 0,
            library_id=payload.get("id"),
            title=payload.get("title") or "",
            year=payload.get("year") or 0,
            poster_url=_image_url(payload, "poster"),
            backdrop_url=_image_url(payload, "fanart"),
            genres=list(payload.get("genres") or []),
            runtime=payload.get("runtime"),
            watched_date=watched_date or datetime.now(),
        )


@dataclass
class WatchedSeries:
    """A series the user marked as watched (a single watched-on date)."""
    tvdb_id: int
    title: str
    year: int = 0
    id: str = field(default_factory=_new_id)
    library_id: Optional[int] = None  # Sonarr id
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    total_episodes: int = 0
    watched_episodes: int = 0
    watched_date: datetime = field(default_factory=datetime.now)
    rating: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.total_episodes > 0 and self.watched_episodes >= self.total_episodes

    @classmethod
    def from_library(cls, payload: Dict[str, Any], watched_date: Optional[datetime] = None) -> "WatchedSeries":
        """Builds a record from a series-manager (Sonarr style) series payload."""
        statistics = payload.get("statistics") or {}
        return cls(
            tvdb_id=payload.get("tvdbId") or 0,
            library_id=payload.get("id"),
            title=payload.get("title") or "",
            year=payload.get("year") or 0,
            poster_url=_image_url(payload, "poster"),
            backdrop_url=_image_url(payload, "fanart"),
            genres=list(payload.get("genres") or []),
            total_episodes=statistics.get("totalEpisodeCount") or 0,
            watched_episodes=statistics.get("episodeCount") or 0,
            watched_date=watched_date or datetime.now(),
        )


@dataclass
class WatchedEpisode:
    """A single watched episode. Series fields are denormalized for display."""
    tmdb_id: int  # episode id
    series_tmdb_id: int
    series_title: str
    episode_title: str
    season_number: int
    episode_number: int
    id: str = field(default_factory=_new_id)
    series_poster_url: Optional[str] = None
    series_total_episodes: Optional[int] = None
    runtime: Optional[int] = None  # minutes
    still_url: Optional[str] = None
    overview: Optional[str] = None
    watched_date: datetime = field(default_factory=datetime.now)
    rating: Optional[int] = None
    notes: Optional[str] = None

    @property
    def episode_code(self) -> str:
        return f"S{self.season_number:02d}E{self.episode_number:02d}"

    @property
    def full_title(self) -> str:
        return f"{self.episode_code} - {self.episode_title}"

    @property
    def formatted_runtime(self) -> Optional[str]:
        if not self.runtime or self.runtime <= 0:
            return None
        if self.runtime >= 60:
            return f"{self.runtime // 60}h {self.runtime % 60}min"
        return f"{self.runtime} min"


# === Badges ===

class BadgeCategory(str, Enum):
    COLLECTOR = "collector"
    SERIES_COLLECTOR = "series_collector"
    GENRE = "genre"
    MARATHON = "marathon"
    DEDICATION = "dedication"
    SPECIAL = "special"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @property
    def color(self) -> str:
        return _CATEGORY_COLORS[self]


_CATEGORY_LABELS = {
    BadgeCategory.COLLECTOR: "Collector",
    BadgeCategory.SERIES_COLLECTOR: "Series Collector",
    BadgeCategory.GENRE: "Genre",
    BadgeCategory.MARATHON: "Marathon",
    BadgeCategory.DEDICATION: "Dedication",
    BadgeCategory.SPECIAL: "Special",
}

_CATEGORY_ICONS = {
    BadgeCategory.COLLECTOR: "star.circle.fill",
    BadgeCategory.SERIES_COLLECTOR: "tv.circle.fill",
    BadgeCategory.GENRE: "theatermasks.fill",
    BadgeCategory.MARATHON: "flame.fill",
    BadgeCategory.DEDICATION: "heart.fill",
    BadgeCategory.SPECIAL: "sparkles",
}

_CATEGORY_COLORS = {
    BadgeCategory.COLLECTOR: "gold",
    BadgeCategory.SERIES_COLLECTOR: "teal",
    BadgeCategory.GENRE: "purple",
    BadgeCategory.MARATHON: "orange",
    BadgeCategory.DEDICATION: "red",
    BadgeCategory.SPECIAL: "blue",
}


class BadgeRarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @property
    def color(self) -> str:
        return _RARITY_STYLE[self][0]

    @property
    def glow_intensity(self) -> float:
        return _RARITY_STYLE[self][1]


_RARITY_STYLE = {
    BadgeRarity.COMMON: ("gray", 0.0),
    BadgeRarity.UNCOMMON: ("green", 0.2),
    BadgeRarity.RARE: ("blue", 0.4),
    BadgeRarity.EPIC: ("purple", 0.6),
    BadgeRarity.LEGENDARY: ("orange", 0.8),
}


class Condition(str, Enum):
    """What a badge measures. Interpreted by the achievement engine."""
    TOTAL_MOVIES = "total_movies"
    TOTAL_SERIES = "total_series"
    TOTAL_EPISODES = "total_episodes"
    TOTAL_WATCHED = "total_watched"
    GENRE_COUNT = "genre_count"
    SERIES_GENRE_COUNT = "series_genre_count"
    MOVIES_TODAY = "movies_today"
    MOVIES_THIS_WEEK = "movies_this_week"
    CURRENT_STREAK = "current_streak"
    NIGHT_OWL = "night_owl"
    EARLY_BIRD = "early_bird"
    WEEKEND_MOVIES = "weekend_movies"
    UNIQUE_GENRES = "unique_genres"
    LONG_MOVIE = "long_movie"
    CLASSIC_MOVIES = "classic_movies"
    CURRENT_YEAR_MOVIES = "current_year_movies"
    COMPLETED_SERIES = "completed_series"
    LONG_SERIES = "long_series"
    CLASSIC_SERIES = "classic_series"
    CURRENT_YEAR_SERIES = "current_year_series"
    UNIQUE_SERIES_GENRES = "unique_series_genres"

    @property
    def is_predicate(self) -> bool:
        """Existence checks ignore the badge requirement."""
        return self in _PREDICATE_CONDITIONS


_PREDICATE_CONDITIONS = {
    Condition.NIGHT_OWL,
    Condition.EARLY_BIRD,
    Condition.LONG_MOVIE,
    Condition.LONG_SERIES,
}


class BadgeKey(NamedTuple):
    """Composite identity of a badge rule."""
    condition: Condition
    genre: Optional[str]
    requirement: int


@dataclass(frozen=True)
class Badge:
    """
    A catalog achievement. `unlocked_date` is None until the badge is earned;
    unlocking returns a new instance.
    """
    id: str
    name: str
    description: str
    icon: str
    category: BadgeCategory
    rarity: BadgeRarity
    requirement: int
    condition: Optional[Condition] = None
    genre: Optional[str] = None
    unlocked_date: Optional[datetime] = None

    @property
    def is_unlocked(self) -> bool:
        return self.unlocked_date is not None

    @property
    def key(self) -> Optional[BadgeKey]:
        if self.condition is None:
            return None
        return BadgeKey(self.condition, self.genre, self.requirement)

    def unlocked(self, at: Optional[datetime] = None) -> "Badge":
        return replace(self, unlocked_date=at or datetime.now())


# === Statistics ===

@dataclass
class WatchedStats:
    """Snapshot derived from the full record set. Always replaced wholesale."""
    total_movies: int = 0
    total_runtime: int = 0  # minutes
    genre_counts: Dict[str, int] = field(default_factory=dict)
    current_streak: int = 0
    longest_streak: int = 0
    last_watched_date: Optional[datetime] = None
    movies_this_week: int = 0
    movies_this_month: int = 0
    unique_genres: Set[str] = field(default_factory=set)

    # Series
    total_series: int = 0
    completed_series: int = 0
    series_genre_counts: Dict[str, int] = field(default_factory=dict)
    unique_series_genres: Set[str] = field(default_factory=set)
    series_this_week: int = 0
    series_this_month: int = 0

    # Episodes
    total_episodes: int = 0
    episodes_runtime: int = 0  # minutes
    episodes_this_week: int = 0
    episodes_this_month: int = 0

    @property
    def total_watched(self) -> int:
        return self.total_movies + self.total_episodes

    @property
    def total_combined_runtime(self) -> int:
        return self.total_runtime + self.episodes_runtime

    @property
    def formatted_total_runtime(self) -> str:
        return format_runtime(self.total_runtime)

    @property
    def formatted_episodes_runtime(self) -> str:
        return format_runtime(self.episodes_runtime, compact=True)

    @property
    def formatted_combined_runtime(self) -> str:
        return format_runtime(self.total_combined_runtime)


@dataclass(frozen=True)
class MonthlyWrappedStats:
    """Viewing summary for one calendar month. Computed on demand, never stored."""
    month_start: datetime
    movies_count: int = 0
    series_count: int = 0
    episodes_count: int = 0
    total_runtime_minutes: int = 0
    top_genres: List[str] = field(default_factory=list)

    @property
    def id(self) -> datetime:
        return self.month_start

    @property
    def total_watched(self) -> int:
        return self.movies_count + self.episodes_count

    @property
    def formatted_runtime(self) -> str:
        return format_runtime(self.total_runtime_minutes)
