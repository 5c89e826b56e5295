from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from watchstats.achievements import AchievementEngine
from watchstats.config import DATABASE_PATH, INCLUDE_SERIES_DATES, JSON_EXPORT_PATH
from watchstats.migration import run_migration_if_needed
from watchstats.repositories.sqlite_repository import SqliteRepository
from watchstats.services.watched import WatchedService
from watchstats.stats import StatsService


class AppContext:
    """
    Container for the application services.
    Components are built lazily on first access and share one repository.
    Hosts create their own instance and pass it where it is needed.
    """

    def __init__(self, db_path: Optional[Path] = None,
                 json_path: Optional[Path] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 include_series_dates: bool = INCLUDE_SERIES_DATES):
        self.db_path = Path(db_path) if db_path is not None else DATABASE_PATH
        self.json_path = Path(json_path) if json_path is not None else JSON_EXPORT_PATH
        self.clock = clock
        self.include_series_dates = include_series_dates
        self._repository: Optional[SqliteRepository] = None
        self._stats_service: Optional[StatsService] = None
        self._achievement_engine: Optional[AchievementEngine] = None
        self._watched_service: Optional[WatchedService] = None

    @property
    def repository(self) -> SqliteRepository:
        if self._repository is None:
            # A legacy export is imported once, before the store is first opened
            run_migration_if_needed(self.json_path, self.db_path)
            self._repository = SqliteRepository(self.db_path)
        return self._repository

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(clock=self.clock, include_series_dates=self.include_series_dates)
        return self._stats_service

    @property
    def achievement_engine(self) -> AchievementEngine:
        if self._achievement_engine is None:
            self._achievement_engine = AchievementEngine(clock=self.clock)
        return self._achievement_engine

    @property
    def watched_service(self) -> WatchedService:
        if self._watched_service is None:
            self._watched_service = WatchedService(
                self.repository,
                stats_service=self.stats_service,
                engine=self.achievement_engine,
                clock=self.clock,
            )
        return self._watched_service

    def reload(self):
        """Drops the cached service so the next access re-reads the store."""
        self._watched_service = None
