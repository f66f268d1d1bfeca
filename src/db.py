# src/db.py
"""
Process-wide SQLite connection plus the state the database probe reads.

The connection is opened at app startup (connect_db) and closed at shutdown
(close_db). Probes only read from it.
"""
from __future__ import annotations

import os
import sqlite3
import threading
from pathlib import Path

from src.logging_utils import log_event


class InvalidDbPathError(Exception):
    """Raised when NEWS_DB_PATH points to an invalid location."""
    pass


DISCONNECTED = "disconnected"
CONNECTING = "connecting"
CONNECTED = "connected"
DISCONNECTING = "disconnecting"

_lock = threading.Lock()
_conn: sqlite3.Connection | None = None
_state: str = DISCONNECTED


def db_path() -> Path:
    """DB path is configured via NEWS_DB_PATH env var, with a safe local default."""
    raw = os.environ.get("NEWS_DB_PATH", "./data/news.db")
    path = Path(raw)

    # Validate: if NEWS_DB_PATH is set, check that the root/drive exists
    if os.environ.get("NEWS_DB_PATH"):
        root = path.anchor or (path.parts[0] if path.parts else None)
        if root and not Path(root).exists():
            raise InvalidDbPathError(
                f"NEWS_DB_PATH is set to '{raw}' but the root path '{root}' doesn't exist."
            )
    return path


def get_conn() -> sqlite3.Connection:
    """Open a new SQLite connection to the DB path."""
    path = db_path()

    # Ensure parent directory exists (e.g., ./data/)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    # Probes ping from a worker thread
    return sqlite3.connect(str(path), check_same_thread=False)


def connect_db() -> None:
    """Open the shared connection. Failure leaves the state at 'disconnected' and is logged, not raised."""
    global _conn, _state
    with _lock:
        if _conn is not None:
            return
        _state = CONNECTING
        try:
            _conn = get_conn()
        except (sqlite3.Error, OSError, InvalidDbPathError) as exc:
            _conn = None
            _state = DISCONNECTED
            log_event("db_connect_failed", level="error", error_type=type(exc).__name__, error=str(exc))
            return
        _state = CONNECTED
    log_event("db_connected", path=str(db_path()))


def close_db() -> None:
    global _conn, _state
    with _lock:
        if _conn is None:
            _state = DISCONNECTED
            return
        _state = DISCONNECTING
        try:
            _conn.close()
        finally:
            _conn = None
            _state = DISCONNECTED
    log_event("db_closed")


def get_db_health() -> dict:
    """Snapshot of the shared connection: connected flag, state string, and path when connected."""
    with _lock:
        state = _state
        connected = _conn is not None and state == CONNECTED
    health = {"connected": connected, "ready_state": state}
    if connected:
        health["path"] = str(db_path())
    return health


def ping_db() -> None:
    """Cheap liveness round-trip on the shared connection. Raises sqlite3.Error if not usable."""
    with _lock:
        conn = _conn
    if conn is None:
        raise sqlite3.OperationalError("no open database connection")
    conn.execute("SELECT 1;").fetchone()
