import logging
import sqlite3

import pytest

from watchstats import config
from watchstats.database import SCHEMA_VERSION, Database


def test_env_flag(monkeypatch):
    monkeypatch.setenv("WATCHSTATS_TEST_FLAG", " Yes ")
    assert config._env_flag("WATCHSTATS_TEST_FLAG") is True

    monkeypatch.setenv("WATCHSTATS_TEST_FLAG", "0")
    assert config._env_flag("WATCHSTATS_TEST_FLAG", default=True) is False

    monkeypatch.delenv("WATCHSTATS_TEST_FLAG")
    assert config._env_flag("WATCHSTATS_TEST_FLAG", default=True) is True


def test_configure_logging_accepts_level_names(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    config.configure_logging("DEBUG")
    config.configure_logging("NOT_A_LEVEL")

    assert [c["level"] for c in calls] == [logging.DEBUG, logging.INFO]


def test_database_creates_parent_directory_and_schema(tmp_path):
    db = Database(tmp_path / "nested" / "watched.db")
    assert db.db_path.exists()
    assert db.schema_version == SCHEMA_VERSION


def test_failed_transaction_is_rolled_back(tmp_path):
    db = Database(tmp_path / "watched.db")

    with pytest.raises(sqlite3.IntegrityError):
        with db.connection() as conn:
            conn.execute("INSERT INTO blobs (key, payload, updated_at) VALUES ('a', '[]', 'now')")
            conn.execute("INSERT INTO blobs (key, payload, updated_at) VALUES ('a', '[]', 'now')")

    with db.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM blobs").fetchone()[0] == 0
