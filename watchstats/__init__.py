"""Watched-activity analytics and achievements."""

from watchstats.domain import (
    Badge,
    BadgeCategory,
    BadgeRarity,
    Condition,
    MonthlyWrappedStats,
    WatchedEpisode,
    WatchedMovie,
    WatchedSeries,
    WatchedStats,
)
from watchstats.interfaces import IWatchedRepository

__all__ = [
    "WatchedMovie",
    "WatchedSeries",
    "WatchedEpisode",
    "WatchedStats",
    "MonthlyWrappedStats",
    "Badge",
    "BadgeCategory",
    "BadgeRarity",
    "Condition",
    "IWatchedRepository",
]
