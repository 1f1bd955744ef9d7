"""Shared plumbing for the entity repositories.

Every repository maps one table to one pydantic model. Subclasses declare the
table, the primary key and a ``columns`` map of model field -> column name,
and write their own SQL; this base class turns rows into models, runs the
statements and applies the error policy:

* writes raise ``PersistenceError`` when the store fails;
* reads log the failure and return ``None`` / ``[]`` (``lookup`` reports it
  explicitly as ``Failed``).
"""

import sqlite3
from datetime import date
from enum import Enum
from typing import Any, Callable, ClassVar, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from classbook.errors import PersistenceError
from classbook.logutils import get_logger

from .connection import Database
from .results import Failed, Found, Lookup, NotFound

logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)
T = TypeVar("T")

# Failures a read swallows: driver errors, an exhausted pool and rows the
# model rejects
READ_ERRORS = (sqlite3.Error, PersistenceError, ModelValidationError)


def to_db_value(value: Any) -> Any:
    """Convert a model value to what the SQLite columns store."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


class BaseRepository(Generic[EntityT]):
    """CRUD helpers common to all classbook repositories."""

    entity_name: ClassVar[str]
    model: ClassVar[type]
    table: ClassVar[str]
    id_column: ClassVar[str]
    id_field: ClassVar[str]
    columns: ClassVar[dict[str, str]]

    def __init__(self, db: Database):
        self.db = db

    # ==================== MAPPING ====================

    def map_row(self, row: sqlite3.Row) -> EntityT:
        data = {self.id_field: row[self.id_column]}
        data.update({field: row[column] for field, column in self.columns.items()})
        return self.model.model_validate(data)

    def params_for(self, entity: EntityT) -> tuple:
        """Column values of ``entity`` in ``columns`` order."""
        return tuple(to_db_value(getattr(entity, field)) for field in self.columns)

    def entity_id(self, entity: EntityT) -> Optional[int]:
        return getattr(entity, self.id_field)

    # ==================== WRITES ====================

    def _insert(self, sql: str, params: Sequence[Any]) -> int:
        """Run an ``INSERT ... RETURNING <id>`` and return the generated id."""
        try:
            with self.db.connection() as conn:
                rows = conn.execute(sql, tuple(params)).fetchall()
                if not rows:
                    raise PersistenceError(f"Creating {self.entity_name} failed, no rows affected.")
                new_id = rows[0][0]
                if new_id is None:
                    raise PersistenceError(f"Creating {self.entity_name} failed, no ID obtained.")
        except sqlite3.Error as e:
            logger.error(
                f"Error creating {self.entity_name}",
                extra={"extra_data": {"table": self.table, "error": str(e)}},
            )
            raise PersistenceError(f"Creating {self.entity_name} failed: {e}") from e

        logger.debug(
            f"Created {self.entity_name}",
            extra={"extra_data": {self.id_field: new_id}},
        )
        return int(new_id)

    def _execute_write(self, sql: str, params: Sequence[Any], action: str, key: Any) -> bool:
        """Run an UPDATE/DELETE; True when at least one row was affected."""
        try:
            with self.db.connection() as conn:
                affected = conn.execute(sql, tuple(params)).rowcount
        except sqlite3.Error as e:
            logger.error(
                f"Error {action} {self.entity_name}",
                extra={"extra_data": {self.id_field: key, "error": str(e)}},
            )
            raise PersistenceError(f"{action.capitalize()} {self.entity_name} {key} failed: {e}") from e
        return affected > 0

    # ==================== READS ====================

    def _lookup(
        self,
        sql: str,
        params: Sequence[Any],
        key: Any,
        mapper: Optional[Callable[[sqlite3.Row], T]] = None,
    ) -> Lookup:
        mapper = mapper or self.map_row
        try:
            with self.db.connection() as conn:
                row = conn.execute(sql, tuple(params)).fetchone()
            if row is None:
                return NotFound(key)
            return Found(mapper(row))
        except READ_ERRORS as e:
            return Failed(e)

    def _fetch_one(
        self,
        sql: str,
        params: Sequence[Any],
        key: Any,
        mapper: Optional[Callable[[sqlite3.Row], T]] = None,
    ) -> Optional[Any]:
        result = self._lookup(sql, params, key, mapper)
        if isinstance(result, Failed):
            logger.error(
                f"Error retrieving {self.entity_name}",
                extra={"extra_data": {"key": key, "error": str(result.cause)}},
            )
        return result.value_or_none()

    def _fetch_all(
        self,
        sql: str,
        params: Sequence[Any] = (),
        description: str = "",
        mapper: Optional[Callable[[sqlite3.Row], T]] = None,
    ) -> list:
        mapper = mapper or self.map_row
        try:
            with self.db.connection() as conn:
                rows = conn.execute(sql, tuple(params)).fetchall()
            return [mapper(row) for row in rows]
        except READ_ERRORS as e:
            logger.error(
                f"Error retrieving {self.entity_name} list",
                extra={"extra_data": {"filter": description or "all", "error": str(e)}},
            )
            return []

    def _fetch_count(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            with self.db.connection() as conn:
                row = conn.execute(sql, tuple(params)).fetchone()
        except READ_ERRORS as e:
            logger.error(
                f"Error counting {self.entity_name} rows",
                extra={"extra_data": {"error": str(e)}},
            )
            return 0
        return int(row[0]) if row else 0

    def _probe(self, sql: str, params: Sequence[Any]) -> bool:
        """Single-row existence probe. Store failures raise PersistenceError."""
        try:
            with self.db.connection() as conn:
                return conn.execute(sql, tuple(params)).fetchone() is not None
        except sqlite3.Error as e:
            raise PersistenceError(f"Existence check on {self.table} failed: {e}") from e

    # ==================== COMMON OPERATIONS ====================

    def get_by_id(self, entity_id: int) -> Optional[EntityT]:
        return self._fetch_one(
            f"SELECT * FROM {self.table} WHERE {self.id_column} = ?", (entity_id,), entity_id
        )

    def lookup(self, entity_id: int) -> Lookup:
        """Like ``get_by_id`` but reports Found / NotFound / Failed."""
        return self._lookup(
            f"SELECT * FROM {self.table} WHERE {self.id_column} = ?", (entity_id,), entity_id
        )

    def get_all(self) -> list[EntityT]:
        return self._fetch_all(f"SELECT * FROM {self.table} ORDER BY {self.id_column}")

    def delete(self, entity_id: int) -> bool:
        return self._execute_write(
            f"DELETE FROM {self.table} WHERE {self.id_column} = ?", (entity_id,), "deleting", entity_id
        )

    def exists(self, entity_id: int) -> bool:
        return self._probe(f"SELECT 1 FROM {self.table} WHERE {self.id_column} = ?", (entity_id,))

    def count(self) -> int:
        return self._fetch_count(f"SELECT COUNT(*) FROM {self.table}")
