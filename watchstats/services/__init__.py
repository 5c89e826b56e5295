from watchstats.services.watched import WatchedService

__all__ = ["WatchedService"]
