import sqlite3

import pytest

from src.db import (
    InvalidDbPathError,
    close_db,
    connect_db,
    db_path,
    get_db_health,
    ping_db,
)


def test_health_before_connect_is_disconnected():
    assert get_db_health() == {"connected": False, "ready_state": "disconnected"}


def test_connect_then_ping(tmp_path):
    connect_db()

    health = get_db_health()
    assert health["connected"] is True
    assert health["ready_state"] == "connected"
    assert health["path"] == str(tmp_path / "test.db")

    ping_db()  # does not raise


def test_connect_is_idempotent():
    connect_db()
    connect_db()

    assert get_db_health()["connected"] is True


def test_close_returns_to_disconnected():
    connect_db()
    close_db()

    assert get_db_health()["ready_state"] == "disconnected"
    with pytest.raises(sqlite3.OperationalError):
        ping_db()


def test_connect_creates_parent_dirs(tmp_path, monkeypatch):
    nested = tmp_path / "a" / "b" / "news.db"
    monkeypatch.setenv("NEWS_DB_PATH", str(nested))

    connect_db()
    ping_db()

    assert nested.parent.exists()
    assert get_db_health()["path"] == str(nested)


def test_db_path_default_when_unset(monkeypatch):
    monkeypatch.delenv("NEWS_DB_PATH", raising=False)

    assert str(db_path()).replace("\\", "/").endswith("data/news.db")


def test_connect_failure_is_logged_not_raised(monkeypatch):
    def bad_path():
        raise InvalidDbPathError("NEWS_DB_PATH root missing")

    monkeypatch.setattr("src.db.db_path", bad_path)

    connect_db()

    assert get_db_health() == {"connected": False, "ready_state": "disconnected"}
