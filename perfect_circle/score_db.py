"""Database schema for best-score persistence.

This module defines the SQLite key/value table that keeps the best score
between runs, plus a ScoreStore implementation on top of it.

Tables:
    scores: One row per key with its numeric value and update time.

Usage:
    Basic initialization and usage::

        from score_db import init_db, ScoreDB, SqliteScoreStore

        init_db('scores.db').close()

        with ScoreDB('scores.db') as db:
            db.raise_score('perfectCircleBestScore', 91.5)
            print(db.get_score('perfectCircleBestScore'))

        store = SqliteScoreStore('scores.db')
        store.get()      # 91.5
"""

import logging
import sqlite3
from typing import Optional

from game_config import BEST_SCORE_KEY, DB_PATH

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS scores (
    key TEXT PRIMARY KEY,
    value REAL NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def init_db(db_path: str = DB_PATH) -> sqlite3.Connection:
    """Initialize database with schema.

    Creates the scores table if it does not exist. Safe to call multiple
    times on an existing database.

    Args:
        db_path: Path to SQLite database file. Will be created if it
            doesn't exist.

    Returns:
        Open database connection with Row factory enabled.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA)
    conn.commit()
    return conn


def get_connection(db_path: str = DB_PATH) -> sqlite3.Connection:
    """Get a database connection with Row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


class ScoreDB:
    """Context manager for score table operations.

    Attributes:
        db_path: Path to the SQLite database file.
        conn: Active database connection (set after entering context).

    Example:
        >>> with ScoreDB('scores.db') as db:
        ...     db.raise_score('perfectCircleBestScore', 88.0)
    """

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path
        self.conn = None

    def __enter__(self):
        self.conn = init_db(self.db_path)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            self.conn.close()

    def get_score(self, key: str) -> Optional[float]:
        """Value stored under ``key``, or None if absent."""
        row = self.conn.execute(
            "SELECT value FROM scores WHERE key = ?", (key,)
        ).fetchone()
        return float(row['value']) if row else None

    def raise_score(self, key: str, value: float) -> bool:
        """Store ``value`` under ``key`` unless an equal or higher value is stored.

        The comparison happens inside the single upsert statement, so
        several processes sharing the file can never lower the stored
        value.

        Returns:
            True if the row was inserted or raised, False otherwise.
        """
        cursor = self.conn.execute("""
            INSERT INTO scores (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            WHERE excluded.value > scores.value
        """, (key, float(value)))
        self.conn.commit()
        return cursor.rowcount > 0


class SqliteScoreStore:
    """ScoreStore backed by the scores table.

    Reads fall back to 0 on database errors so a broken file never stops
    play; write errors are logged and re-raised to the caller. Writes only
    ever raise the stored value.

    Args:
        db_path: Path to the SQLite database file.
        key: Row key of the best score.
    """

    def __init__(self, db_path: str = DB_PATH, key: str = BEST_SCORE_KEY):
        self.db_path = db_path
        self.key = key

    def get(self) -> float:
        try:
            with ScoreDB(self.db_path) as db:
                value = db.get_score(self.key)
        except sqlite3.Error as e:
            logger.warning("Database error reading %s from %s: %s", self.key, self.db_path, e)
            return 0.0
        return value if value is not None else 0.0

    def set(self, score: float) -> bool:
        """Store ``score``; False if another writer already stored one as high."""
        try:
            with ScoreDB(self.db_path) as db:
                written = db.raise_score(self.key, score)
        except sqlite3.Error as e:
            logger.warning("Database error writing %s to %s: %s", self.key, self.db_path, e)
            raise
        if not written:
            logger.info("Best score %s not stored: %s already holds a higher value",
                        score, self.db_path)
        return written
