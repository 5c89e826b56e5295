"""SQLite database for the watched-record store."""
import sqlite3
from pathlib import Path
from contextlib import contextmanager
from typing import Generator

# Stored in PRAGMA user_version
SCHEMA_VERSION = 1

SCHEMA = """
-- One JSON document per key (watched lists, unlocked badges, stats)
CREATE TABLE IF NOT EXISTS blobs (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class Database:
    """SQLite connection manager for the blob store."""
    
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
    
    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yields a connection; commits on success, rolls back on error."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @property
    def schema_version(self) -> int:
        with self.connection() as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]
    
    def _init_schema(self) -> None:
        with self.connection() as conn:
            conn.executescript(SCHEMA)
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
