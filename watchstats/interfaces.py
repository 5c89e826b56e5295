from abc import ABC, abstractmethod
from typing import List

from watchstats.domain import WatchedMovie, WatchedSeries, WatchedEpisode, Badge, WatchedStats


class IWatchedRepository(ABC):
    """
    Persists the watched record lists, the unlocked badges and the last stats
    snapshot. Lists are kept most-recent-first. Loads never raise: unreadable
    data comes back empty.
    """

    @abstractmethod
    def load_watched_movies(self) -> List[WatchedMovie]:
        pass

    @abstractmethod
    def save_watched_movies(self, movies: List[WatchedMovie]) -> None:
        pass

    @abstractmethod
    def load_watched_series(self) -> List[WatchedSeries]:
        pass

    @abstractmethod
    def save_watched_series(self, series: List[WatchedSeries]) -> None:
        pass

    @abstractmethod
    def load_watched_episodes(self) -> List[WatchedEpisode]:
        pass

    @abstractmethod
    def save_watched_episodes(self, episodes: List[WatchedEpisode]) -> None:
        pass

    @abstractmethod
    def load_unlocked_badges(self) -> List[Badge]:
        pass

    @abstractmethod
    def save_unlocked_badges(self, badges: List[Badge]) -> None:
        pass

    @abstractmethod
    def load_stats(self) -> WatchedStats:
        pass

    @abstractmethod
    def save_stats(self, stats: WatchedStats) -> None:
        pass

    @abstractmethod
    def reset_all_data(self) -> None:
        pass
