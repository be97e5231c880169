"""Integration tests for best-score persistence.

Tests the scores schema, the ScoreDB context manager and SqliteScoreStore
against real SQLite files in a temporary directory.
"""

import os
import sqlite3
import tempfile
import unittest

from score_db import SCHEMA, ScoreDB, SqliteScoreStore, get_connection, init_db


class TestSchema(unittest.TestCase):
    """Tests for init_db and get_connection."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, 'scores.db')

    def tearDown(self):
        self.tmp.cleanup()

    def test_init_creates_table(self):
        """init_db creates the scores table."""
        conn = init_db(self.db_path)
        try:
            tables = {r['name'] for r in conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'")}
        finally:
            conn.close()
        self.assertIn('scores', tables)

    def test_init_is_idempotent(self):
        """Running init_db again keeps stored rows."""
        init_db(self.db_path).close()
        with ScoreDB(self.db_path) as db:
            db.raise_score('k', 1.0)
        init_db(self.db_path).close()
        with ScoreDB(self.db_path) as db:
            self.assertEqual(db.get_score('k'), 1.0)

    def test_get_connection_row_factory(self):
        """Connections return sqlite3.Row rows."""
        init_db(self.db_path).close()
        conn = get_connection(self.db_path)
        try:
            self.assertIs(conn.row_factory, sqlite3.Row)
        finally:
            conn.close()

    def test_schema_in_memory(self):
        """The schema fills in updated_at."""
        conn = sqlite3.connect(':memory:')
        conn.executescript(SCHEMA)
        conn.execute("INSERT INTO scores (key, value) VALUES ('a', 3.5)")
        row = conn.execute("SELECT value, updated_at FROM scores").fetchone()
        conn.close()
        self.assertEqual(row[0], 3.5)
        self.assertIsNotNone(row[1])


class TestScoreDB(unittest.TestCase):
    """Tests for the ScoreDB context manager."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, 'scores.db')

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_key(self):
        """An unknown key reads as None."""
        with ScoreDB(self.db_path) as db:
            self.assertIsNone(db.get_score('nothing'))

    def test_raise_only_writes_higher_values(self):
        """raise_score writes only values above the stored one."""
        with ScoreDB(self.db_path) as db:
            self.assertTrue(db.raise_score('best', 72.25))
            self.assertTrue(db.raise_score('best', 88.5))
            self.assertFalse(db.raise_score('best', 80.0))
            self.assertFalse(db.raise_score('best', 88.5))
            self.assertEqual(db.get_score('best'), 88.5)
            count = db.conn.execute("SELECT COUNT(*) FROM scores").fetchone()[0]
        self.assertEqual(count, 1)

    def test_raise_between_connections(self):
        """A lower value from a second connection leaves the row alone."""
        with ScoreDB(self.db_path) as first, ScoreDB(self.db_path) as second:
            self.assertTrue(second.raise_score('best', 90.0))
            self.assertFalse(first.raise_score('best', 80.0))
            self.assertEqual(first.get_score('best'), 90.0)

    def test_persists_across_connections(self):
        """Scores survive closing the connection."""
        with ScoreDB(self.db_path) as db:
            db.raise_score('best', 64.0)
        with ScoreDB(self.db_path) as db:
            self.assertEqual(db.get_score('best'), 64.0)

    def test_keys_are_independent(self):
        """Each key holds its own score."""
        with ScoreDB(self.db_path) as db:
            db.raise_score('a', 1.0)
            db.raise_score('b', 2.0)
            self.assertEqual(db.get_score('a'), 1.0)
            self.assertEqual(db.get_score('b'), 2.0)


class TestSqliteScoreStore(unittest.TestCase):
    """Tests for SqliteScoreStore."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, 'scores.db')

    def tearDown(self):
        self.tmp.cleanup()

    def test_default_zero(self):
        """An empty database reads as 0."""
        self.assertEqual(SqliteScoreStore(self.db_path).get(), 0.0)

    def test_round_trip(self):
        """A stored score is read back by a new store."""
        store = SqliteScoreStore(self.db_path)
        self.assertTrue(store.set(91.5))
        self.assertEqual(SqliteScoreStore(self.db_path).get(), 91.5)

    def test_second_store_keeps_higher_score(self):
        """A store never lowers a score written through another connection."""
        mine = SqliteScoreStore(self.db_path)
        theirs = SqliteScoreStore(self.db_path)
        self.assertEqual(mine.get(), 0.0)
        self.assertTrue(theirs.set(90.0))
        self.assertFalse(mine.set(80.0))
        self.assertEqual(mine.get(), 90.0)

    def test_uses_configured_key(self):
        """The store only touches its own key."""
        SqliteScoreStore(self.db_path, key='other').set(10.0)
        self.assertEqual(SqliteScoreStore(self.db_path).get(), 0.0)
        with ScoreDB(self.db_path) as db:
            self.assertEqual(db.get_score('other'), 10.0)

    def test_unreadable_database_reads_zero(self):
        """A read error is logged and treated as 0."""
        store = SqliteScoreStore(os.path.join(self.tmp.name, 'missing', 'scores.db'))
        with self.assertLogs('score_db', level='WARNING'):
            self.assertEqual(store.get(), 0.0)

    def test_unwritable_database_raises(self):
        """A write error is logged and re-raised."""
        store = SqliteScoreStore(os.path.join(self.tmp.name, 'missing', 'scores.db'))
        with self.assertLogs('score_db', level='WARNING'):
            with self.assertRaises(sqlite3.Error):
                store.set(50.0)

    def test_works_with_game_service(self):
        """The store plugs into CircleGameService."""
        from circle_lib.api.services import CircleGameService
        from circle_lib.domain.geometry import Point
        from synthetic_strokes import arc_points

        center = Point(400, 300)
        service = CircleGameService(center, store=SqliteScoreStore(self.db_path))
        service.begin()
        for p in arc_points(center, 100, 37):
            service.add_sample(p)
        self.assertTrue(service.end().new_high_score)
        self.assertEqual(SqliteScoreStore(self.db_path).get(), 100.0)


if __name__ == '__main__':
    unittest.main()
