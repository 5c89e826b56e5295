from watchstats.repositories.sqlite_repository import SqliteRepository

__all__ = ["SqliteRepository"]
