"""
Achievement rule engine.

Badges are catalog rows; each row names a Condition. The engine maps every
Condition to a handler that reads the statistics snapshot or the raw records
and returns the value compared against the badge requirement. Existence
conditions return a bool and ignore the requirement.

Missing data always evaluates to "not met".
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Collection, Dict, Iterable, List, Optional, Union

from watchstats import badges as catalog
from watchstats.config import (
    NIGHT_OWL_HOURS,
    EARLY_BIRD_HOURS,
    LONG_MOVIE_MINUTES,
    CLASSIC_MOVIE_YEAR,
    CLASSIC_SERIES_YEAR,
    LONG_SERIES_EPISODES,
)
from watchstats.domain import (
    Badge,
    BadgeKey,
    Condition,
    WatchedMovie,
    WatchedSeries,
    WatchedEpisode,
    WatchedStats,
)
from watchstats.utils import to_local, local_date, weekend_span

logger = logging.getLogger(__name__)


@dataclass
class EvaluationContext:
    """Everything a condition handler may look at."""
    stats: WatchedStats
    movies: List[WatchedMovie]
    series: List[WatchedSeries]
    episodes: List[WatchedEpisode]
    now: datetime


ConditionValue = Union[int, bool]
ConditionHandler = Callable[[EvaluationContext, Badge], ConditionValue]


# === Condition handlers ===

def _hour_in(moment: datetime, hours) -> bool:
    start, end = hours
    return start <= to_local(moment).hour < end


def _movies_today(ctx: EvaluationContext, badge: Badge) -> int:
    today = local_date(ctx.now)
    return sum(1 for m in ctx.movies if local_date(m.watched_date) == today)


def _weekend_movies(ctx: EvaluationContext, badge: Badge) -> int:
    saturday, monday = weekend_span(ctx.now)
    return sum(1 for m in ctx.movies if saturday <= to_local(m.watched_date) < monday)


def _classic_movies(ctx: EvaluationContext, badge: Badge) -> int:
    # year 0 means unknown and never counts as classic
    return sum(1 for m in ctx.movies if 0 < m.year < CLASSIC_MOVIE_YEAR)


def _current_year_movies(ctx: EvaluationContext, badge: Badge) -> int:
    year = to_local(ctx.now).year
    return sum(1 for m in ctx.movies if m.year == year)


def _classic_series(ctx: EvaluationContext, badge: Badge) -> int:
    return sum(1 for s in ctx.series if 0 < s.year < CLASSIC_SERIES_YEAR)


def _current_year_series(ctx: EvaluationContext, badge: Badge) -> int:
    year = to_local(ctx.now).year
    return sum(1 for s in ctx.series if s.year == year)


_HANDLERS: Dict[Condition, ConditionHandler] = {
    Condition.TOTAL_MOVIES: lambda ctx, badge: ctx.stats.total_movies,
    Condition.TOTAL_SERIES: lambda ctx, badge: ctx.stats.total_series,
    Condition.TOTAL_EPISODES: lambda ctx, badge: ctx.stats.total_episodes,
    Condition.TOTAL_WATCHED: lambda ctx, badge: ctx.stats.total_watched,
    Condition.GENRE_COUNT: lambda ctx, badge: ctx.stats.genre_counts.get(badge.genre, 0),
    Condition.SERIES_GENRE_COUNT: lambda ctx, badge: ctx.stats.series_genre_counts.get(badge.genre, 0),
    Condition.MOVIES_TODAY: _movies_today,
    Condition.MOVIES_THIS_WEEK: lambda ctx, badge: ctx.stats.movies_this_week,
    Condition.CURRENT_STREAK: lambda ctx, badge: ctx.stats.current_streak,
    Condition.NIGHT_OWL: lambda ctx, badge: any(_hour_in(m.watched_date, NIGHT_OWL_HOURS) for m in ctx.movies),
    Condition.EARLY_BIRD: lambda ctx, badge: any(_hour_in(m.watched_date, EARLY_BIRD_HOURS) for m in ctx.movies),
    Condition.WEEKEND_MOVIES: _weekend_movies,
    Condition.UNIQUE_GENRES: lambda ctx, badge: len(ctx.stats.unique_genres),
    Condition.LONG_MOVIE: lambda ctx, badge: any((m.runtime or 0) >= LONG_MOVIE_MINUTES for m in ctx.movies),
    Condition.CLASSIC_MOVIES: _classic_movies,
    Condition.CURRENT_YEAR_MOVIES: _current_year_movies,
    Condition.COMPLETED_SERIES: lambda ctx, badge: ctx.stats.completed_series,
    Condition.LONG_SERIES: lambda ctx, badge: any(s.total_episodes >= LONG_SERIES_EPISODES for s in ctx.series),
    Condition.CLASSIC_SERIES: _classic_series,
    Condition.CURRENT_YEAR_SERIES: _current_year_series,
    Condition.UNIQUE_SERIES_GENRES: lambda ctx, badge: len(ctx.stats.unique_series_genres),
}


def is_satisfied(badge: Badge, ctx: EvaluationContext) -> bool:
    """True when the badge's condition is met. Unknown conditions never are."""
    handler = _HANDLERS.get(badge.condition) if badge.condition is not None else None
    if handler is None:
        return False

    value = handler(ctx, badge)
    if value is None:
        return False
    if badge.condition.is_predicate:
        return bool(value)
    return value >= badge.requirement


def evaluation_order(stats: WatchedStats) -> Iterable[Badge]:
    """
    Yields candidate badges block by block, in the order newly unlocked
    badges are reported. Genre blocks follow the genres present in the stats.
    """
    yield from catalog.COLLECTOR_BADGES
    yield from catalog.SERIES_COLLECTOR_BADGES
    yield from catalog.EPISODE_BADGES
    yield from catalog.TOTAL_WATCHED_BADGES
    for genre in stats.genre_counts:
        yield from catalog.genre_badges(genre)
    for genre in stats.series_genre_counts:
        yield from catalog.series_genre_badges(genre)
    yield from catalog.MARATHON_DAY_BADGES
    yield from catalog.MARATHON_WEEK_BADGES
    yield from catalog.DEDICATION_BADGES
    yield from catalog.SPECIAL_BADGES
    yield from catalog.SERIES_SPECIAL_BADGES


def evaluate_badges(stats: WatchedStats,
                    movies: List[WatchedMovie],
                    series: List[WatchedSeries],
                    episodes: List[WatchedEpisode],
                    already_unlocked_ids: Collection[str] = (),
                    now: Optional[datetime] = None,
                    already_unlocked_keys: Collection[BadgeKey] = ()) -> List[Badge]:
    """
    Returns the badges whose condition is newly met, in report order.

    A badge is skipped when its rule key is in `already_unlocked_keys` or its
    id is in `already_unlocked_ids`, so feeding the result back in makes a
    second call return nothing. Within one call each rule key is reported
    once. Returned badges are not stamped; see `AchievementEngine.unlock`.
    """
    ctx = EvaluationContext(stats=stats, movies=movies, series=series, episodes=episodes,
                            now=now or datetime.now())
    skip_ids = set(already_unlocked_ids)
    skip_keys = set(already_unlocked_keys)
    newly_unlocked: List[Badge] = []

    for badge in evaluation_order(stats):
        if badge.key in skip_keys or badge.id in skip_ids:
            continue
        if is_satisfied(badge, ctx):
            newly_unlocked.append(badge)
            skip_keys.add(badge.key)

    logger.debug("Evaluated badges: %d newly unlocked", len(newly_unlocked))
    return newly_unlocked


class AchievementEngine:
    """Evaluates the badge catalog with an injectable clock."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def evaluate(self, stats: WatchedStats, movies: List[WatchedMovie], series: List[WatchedSeries],
                 episodes: List[WatchedEpisode], already_unlocked: Iterable[Badge]) -> List[Badge]:
        """
        Badges newly met given the unlocked ones. Unlocked badges are matched by
        rule key; only badges without a rule fall back to their id.
        """
        already_unlocked = list(already_unlocked)
        return evaluate_badges(
            stats, movies, series, episodes,
            already_unlocked_ids={b.id for b in already_unlocked if b.key is None},
            now=self.clock(),
            already_unlocked_keys={b.key for b in already_unlocked if b.key is not None},
        )

    def unlock(self, badges: Iterable[Badge]) -> List[Badge]:
        """Stamps every badge with the current time."""
        now = self.clock()
        return [badge.unlocked(now) for badge in badges]
