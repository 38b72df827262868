"""SQLite-backed result cache."""

from __future__ import annotations

import sqlite3
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from DocQuery.utils.log import log


class SqliteCache:
    """Persistent result cache stored in a single SQLite table.

    Expired rows are never returned and are purged whenever a new entry is
    written. The connection is shared between threads behind a lock.

    Supports context manager protocol for automatic connection cleanup.
    """

    def __init__(self, db_path: Path, clock: Callable[[], float] = time.time) -> None:
        """Open (and create if needed) the cache database.

        Args:
            db_path: Path to database file, or ``Path(":memory:")``.
            clock: Wall-clock source in seconds.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self.conn = ensure_db(db_path)
        init_schema(self.conn)
        log.debug("SQLite cache ready: %s", db_path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            row = self.conn.execute(
                "SELECT body FROM response_cache WHERE cache_key = ? AND expires_at > ?",
                (key, self._clock()),
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, body: str, ttl: int) -> None:
        if ttl <= 0:
            return
        now = self._clock()
        with self._lock:
            self.conn.execute("DELETE FROM response_cache WHERE expires_at <= ?", (now,))
            self.conn.execute(
                """
                INSERT INTO response_cache (cache_key, body, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(cache_key) DO UPDATE SET
                  body = excluded.body,
                  expires_at = excluded.expires_at
                """,
                (key, body, now + ttl),
            )
            self.conn.commit()

    def invalidate_all(self) -> None:
        with self._lock:
            self.conn.execute("DELETE FROM response_cache")
            self.conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()

    def __enter__(self) -> SqliteCache:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def ensure_db(db_path: Path) -> sqlite3.Connection:
    """Ensure the database file's directory exists and return a connection.

    Args:
        db_path: Absolute path or project-relative path to database file.

    Returns:
        SQLite connection usable from several threads.

    Raises:
        OSError: If directory creation fails.
        sqlite3.Error: If database connection fails.
    """
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db_path), check_same_thread=False)


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the cache table and its expiry index."""
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS response_cache (
          cache_key TEXT PRIMARY KEY,
          body TEXT NOT NULL,
          expires_at REAL NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_response_cache_expires
          ON response_cache(expires_at);
    """)
    conn.commit()
