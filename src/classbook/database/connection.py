"""Connection provider for the classbook SQLite store.

Two kinds of handle are handed out:

* ``Database.connection()`` - a pooled connection scoped to one statement
  sequence, committed on exit and rolled back on error.
* ``Database.transaction()`` - a connection in manual-commit mode held for a
  whole multi-statement flow. While it is open, ``connection()`` calls made in
  the same context (thread or task) reuse it instead of taking a new one, so
  repositories join the transaction without being told about it.
"""

import sqlite3
import threading
from contextlib import contextmanager, suppress
from contextvars import ContextVar
from pathlib import Path
from queue import Empty, Full, Queue
from typing import Iterator, Optional

from classbook.config import Settings, get_settings
from classbook.errors import PersistenceError
from classbook.logutils import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class ConnectionPool:
    """Thread-safe pool of SQLite connections with WAL mode and foreign keys."""

    def __init__(self, db_path: Path, pool_size: int = 5, timeout: float = 30.0):
        """Initialize the pool.

        Args:
            db_path: Path to the SQLite database file
            pool_size: Maximum number of idle connections kept open
            timeout: Seconds to wait for a free connection
        """
        self._db_path = self._validate_path(db_path)
        self._pool_size = pool_size
        self._timeout = timeout
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=pool_size)
        self._lock = threading.Lock()
        self._open = 0

    @staticmethod
    def _validate_path(db_path: Path) -> Path:
        """Reject relative paths that climb out of their directory."""
        if ".." in Path(db_path).parts:
            raise ValueError(f"Invalid database path: {db_path}")
        return Path(db_path).resolve()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self._db_path),
            check_same_thread=False,  # connections move between threads through the pool
            timeout=self._timeout,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA busy_timeout = 5000")
        conn.execute("PRAGMA synchronous = NORMAL")
        return conn

    def get_connection(self) -> sqlite3.Connection:
        """Take a connection from the pool, opening one if the pool has room.

        Raises:
            PersistenceError: No connection became available within the timeout
            sqlite3.Error: A new connection could not be opened
        """
        try:
            conn = self._pool.get_nowait()
        except Empty:
            with self._lock:
                if self._open < self._pool_size:
                    conn = self._create_connection()
                    self._open += 1
                    logger.debug(
                        "Opened new connection",
                        extra={"extra_data": {"open_connections": self._open}},
                    )
                    return conn
            try:
                conn = self._pool.get(block=True, timeout=self._timeout)
            except Empty:
                logger.error(
                    "Connection pool exhausted",
                    extra={"extra_data": {"timeout": self._timeout, "pool_size": self._pool_size}},
                )
                raise PersistenceError(f"Connection pool exhausted after {self._timeout}s")

        try:
            conn.execute("SELECT 1")
            return conn
        except sqlite3.Error:
            logger.debug("Dead connection detected, replacing it")
            with suppress(sqlite3.Error):
                conn.close()
            return self._create_connection()

    def return_connection(self, conn: sqlite3.Connection) -> None:
        try:
            self._pool.put_nowait(conn)
        except Full:
            conn.close()
            with self._lock:
                self._open -= 1

    def close_all(self) -> None:
        while True:
            try:
                conn = self._pool.get_nowait()
            except Empty:
                break
            conn.close()
        with self._lock:
            self._open = 0


class Database:
    """Connection provider bound to one SQLite file.

    Repositories receive a Database at construction; the Database owns the
    pool and the per-context transaction handle.

    Example:
        db = Database(Path("school.db"))
        db.init_schema()
        with db.transaction():
            user_id = users.create(user)
            parents.create(Parent(user_id=user_id, number_of_children=2))
    """

    def __init__(self, path: Optional[Path] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._pool = ConnectionPool(
            Path(path or settings.database_path),
            pool_size=settings.pool_size,
            timeout=settings.pool_timeout,
        )
        self._active: ContextVar[Optional[sqlite3.Connection]] = ContextVar(
            f"classbook_transaction_{id(self)}", default=None
        )

    @property
    def path(self) -> Path:
        return self._pool.db_path

    @property
    def in_transaction(self) -> bool:
        return self._active.get() is not None

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection for one statement sequence.

        Inside ``transaction()`` this is the transaction's connection and
        commit/rollback is left to the transaction owner.
        """
        active = self._active.get()
        if active is not None:
            yield active
            return

        conn = self._pool.get_connection()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._pool.return_connection(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block as one all-or-nothing unit.

        Takes the write lock up front (``BEGIN IMMEDIATE``) so checks made
        inside the block cannot be invalidated by another writer before the
        block commits. Any exception rolls back every statement and is
        re-raised unchanged.

        Raises:
            PersistenceError: A transaction is already open in this context,
                or the transaction could not be started
        """
        if self._active.get() is not None:
            raise PersistenceError("Transaction already in progress")

        conn = self._pool.get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            self._pool.return_connection(conn)
            raise PersistenceError(f"Could not begin transaction: {e}") from e

        token = self._active.set(conn)
        logger.debug("Transaction started")
        try:
            yield conn
            conn.commit()
            logger.debug("Transaction committed")
        except BaseException as e:
            try:
                conn.rollback()
            except sqlite3.Error as rollback_error:
                logger.error(
                    "Error rolling back transaction",
                    extra={"extra_data": {"error": str(rollback_error)}},
                )
            logger.warning(
                "Transaction rolled back",
                extra={"extra_data": {"error_type": type(e).__name__}},
            )
            raise
        finally:
            self._active.reset(token)
            self._pool.return_connection(conn)

    def init_schema(self, force: bool = False) -> Path:
        """Create the tables described in ``schema.sql``.

        Args:
            force: Drop the existing tables first

        Returns:
            Path to the database file
        """
        with self.connection() as conn:
            if force:
                conn.executescript(
                    """
                    DROP TABLE IF EXISTS homework;
                    DROP TABLE IF EXISTS absence;
                    DROP TABLE IF EXISTS Grade;
                    DROP TABLE IF EXISTS Student;
                    DROP TABLE IF EXISTS Teacher;
                    DROP TABLE IF EXISTS Parent;
                    DROP TABLE IF EXISTS class_group;
                    DROP TABLE IF EXISTS User;
                    """
                )
                logger.info("Dropped existing tables", extra={"extra_data": {"path": str(self.path)}})
            conn.executescript(SCHEMA_PATH.read_text())

        logger.info("Database initialized", extra={"extra_data": {"path": str(self.path)}})
        return self.path

    def verify(self) -> dict:
        """Report which tables exist and how many rows each holds."""
        if not self.path.exists():
            return {"exists": False, "tables": [], "error": "Database file not found"}

        try:
            with self.connection() as conn:
                cursor = conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' "
                    "AND name NOT LIKE 'sqlite_%' ORDER BY name"
                )
                tables = [row["name"] for row in cursor.fetchall()]

                counts = {}
                for table in tables:
                    # Names come from sqlite_master; bracket-quote them anyway
                    if table.replace("_", "").isalnum():
                        counts[table] = conn.execute(f"SELECT COUNT(*) FROM [{table}]").fetchone()[0]

            return {"exists": True, "path": str(self.path), "tables": tables, "row_counts": counts}
        except (sqlite3.Error, PersistenceError) as e:
            return {"exists": True, "error": str(e)}

    def close(self) -> None:
        self._pool.close_all()
