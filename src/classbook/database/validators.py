"""Integrity checks that span tables.

``ReferenceValidator`` answers "does the row this write points at exist?"
before a write. Every probe fetches at most one row. When the store cannot be
reached the probe raises ``PersistenceError``; it never reports an
unreachable store as a missing row.

Run the probes and the write inside ``Database.transaction()`` when the
answer must still hold at commit time.
"""

import sqlite3
from datetime import date

from classbook.errors import PersistenceError, ValidationError
from classbook.logutils import get_logger

from .connection import Database
from .models import AccountType, User

logger = get_logger(__name__)


class ReferenceValidator:
    """Existence probes used by the composite registration flows."""

    def __init__(self, db: Database):
        self.db = db

    def _probe(self, sql: str, key: int, what: str) -> bool:
        try:
            with self.db.connection() as conn:
                found = conn.execute(sql, (key,)).fetchone() is not None
        except sqlite3.Error as e:
            logger.error(
                f"Error validating {what}",
                extra={"extra_data": {"key": key, "error": str(e)}},
            )
            raise PersistenceError(f"Could not validate {what} {key}: {e}") from e
        return found

    def parent_exists(self, parent_id: int) -> bool:
        return self._probe("SELECT 1 FROM Parent WHERE parent_id = ?", parent_id, "parent")

    def class_exists(self, class_id: int) -> bool:
        return self._probe("SELECT 1 FROM class_group WHERE class_id = ?", class_id, "class")

    def is_valid_teacher_user(self, user_id: int) -> bool:
        """True when the user exists and has the TEACHER account type."""
        try:
            with self.db.connection() as conn:
                row = conn.execute(
                    "SELECT accountType FROM User WHERE user_id = ?", (user_id,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(
                "Error validating teacher user",
                extra={"extra_data": {"user_id": user_id, "error": str(e)}},
            )
            raise PersistenceError(f"Could not validate teacher user {user_id}: {e}") from e
        return row is not None and str(row["accountType"]).lower() == AccountType.TEACHER.value

    def user_exists(self, user_id: int) -> bool:
        return self._probe("SELECT 1 FROM User WHERE user_id = ?", user_id, "user")

    def student_exists(self, student_id: int) -> bool:
        return self._probe("SELECT 1 FROM Student WHERE student_id = ?", student_id, "student")

    def teacher_exists(self, teacher_id: int) -> bool:
        return self._probe("SELECT 1 FROM Teacher WHERE teacher_id = ?", teacher_id, "teacher")


def check_homework_dates(assignment_date: date, due_date: date) -> None:
    """Raise ValidationError when the due date precedes the assignment date."""
    if due_date < assignment_date:
        raise ValidationError(
            f"Due date {due_date} cannot be before assignment date {assignment_date}"
        )


def check_account_type(user: User, expected: AccountType) -> None:
    """Raise ValidationError unless ``user`` has the ``expected`` account type."""
    expected = AccountType(expected)
    if user.account_type != expected:
        raise ValidationError(f"User must have {expected.name} account type")
