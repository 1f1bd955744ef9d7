"""Integration tests for the connection provider and transaction scope."""

import sqlite3
import threading
from unittest.mock import MagicMock

import pytest

from classbook.database import ClassGroup, ConnectionPool, Database, Student
from classbook.errors import PersistenceError

pytestmark = pytest.mark.integration

TABLES = ["Grade", "Parent", "Student", "Teacher", "User", "absence", "class_group", "homework"]


class TestSchema:
    def test_init_schema_creates_tables(self, db: Database):
        report = db.verify()
        assert report["exists"] is True
        assert sorted(report["tables"]) == sorted(TABLES)
        assert all(count == 0 for count in report["row_counts"].values())

    def test_init_schema_is_idempotent(self, db: Database, store, class_group):
        db.init_schema()
        assert store.class_groups.count() == 1

    def test_force_drops_existing_rows(self, db: Database, store, class_group):
        db.init_schema(force=True)
        assert store.class_groups.count() == 0

    def test_verify_missing_file(self, tmp_path, settings):
        report = Database(tmp_path / "missing.db", settings).verify()
        assert report["exists"] is False

    def test_foreign_keys_enforced(self, store, class_group):
        """The store itself rejects a student whose parent does not exist."""
        orphan = Student(class_id=class_group.class_id, first_name="A", last_name="B", parent_id=999)
        with pytest.raises(PersistenceError):
            store.students.create(orphan)
        assert store.students.count() == 0


class TestTransaction:
    """Tests for Database.transaction()."""

    def test_commits_on_success(self, db: Database, store):
        with db.transaction():
            store.class_groups.create(ClassGroup(size=20, year=1, room_number=1))
            store.class_groups.create(ClassGroup(size=21, year=2, room_number=2))
        assert store.class_groups.count() == 2

    def test_rolls_back_every_statement(self, db: Database, store):
        with pytest.raises(RuntimeError, match="stop"):
            with db.transaction():
                store.class_groups.create(ClassGroup(size=20, year=1, room_number=1))
                raise RuntimeError("stop")
        assert store.class_groups.count() == 0

    def test_repositories_join_active_transaction(self, db: Database, store):
        with db.transaction() as conn:
            assert db.in_transaction
            with db.connection() as inner:
                assert inner is conn
        assert not db.in_transaction

    def test_nested_transaction_rejected(self, db: Database):
        with db.transaction():
            with pytest.raises(PersistenceError, match="already in progress"):
                with db.transaction():
                    pass

    def test_uncommitted_rows_invisible_to_other_threads(self, db: Database, store):
        seen = []

        def count_from_other_thread():
            seen.append(store.class_groups.count())

        with db.transaction():
            store.class_groups.create(ClassGroup(size=20, year=1, room_number=1))
            worker = threading.Thread(target=count_from_other_thread)
            worker.start()
            worker.join()

        assert seen == [0]
        assert store.class_groups.count() == 1


class TestConnectionPool:
    def test_rejects_parent_traversal(self, tmp_path):
        with pytest.raises(ValueError):
            ConnectionPool(tmp_path / ".." / "escape.db")

    def test_exhausted_pool_raises(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", pool_size=1, timeout=0.1)
        conn = pool.get_connection()
        try:
            with pytest.raises(PersistenceError, match="exhausted"):
                pool.get_connection()
        finally:
            pool.return_connection(conn)
            pool.close_all()

    def test_connections_reused(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", pool_size=2)
        conn = pool.get_connection()
        pool.return_connection(conn)
        assert pool.get_connection() is conn
        pool.close_all()

    def test_pragmas_applied(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", pool_size=1)
        conn = pool.get_connection()
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        assert conn.row_factory is sqlite3.Row
        pool.close_all()

    def test_dead_connection_closed_and_replaced(self, tmp_path):
        pool = ConnectionPool(tmp_path / "pool.db", pool_size=1)
        dead = MagicMock()
        dead.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        pool.return_connection(dead)

        conn = pool.get_connection()
        try:
            assert conn is not dead
            dead.close.assert_called_once()
            assert conn.execute("SELECT 1").fetchone()[0] == 1
        finally:
            pool.return_connection(conn)
            pool.close_all()
