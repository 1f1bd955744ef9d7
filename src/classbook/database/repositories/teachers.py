"""Teacher profiles and their joined user accounts."""

import sqlite3
from typing import Optional

from ..base import BaseRepository
from ..models import Teacher, TeacherDetails, User
from .users import UserRepository

DETAILS_SQL = """
    SELECT t.teacher_id, t.user_id, t.class_id,
           u.fullName, u.email, u.password, u.accountType, u.address, u.phone_number
    FROM Teacher t
    JOIN User u ON t.user_id = u.user_id
"""


class TeacherRepository(BaseRepository[Teacher]):
    """CRUD on the ``Teacher`` table plus teacher/user join queries."""

    entity_name = "teacher"
    model = Teacher
    table = "Teacher"
    id_column = "teacher_id"
    id_field = "teacher_id"
    columns = {"user_id": "user_id", "class_id": "class_id"}

    def create(self, teacher: Teacher) -> int:
        teacher_id = self._insert(
            "INSERT INTO Teacher (user_id, class_id) VALUES (?, ?) RETURNING teacher_id",
            self.params_for(teacher),
        )
        teacher.teacher_id = teacher_id
        return teacher_id

    def update(self, teacher: Teacher) -> bool:
        return self._execute_write(
            "UPDATE Teacher SET user_id = ?, class_id = ? WHERE teacher_id = ?",
            (*self.params_for(teacher), teacher.teacher_id),
            "updating",
            teacher.teacher_id,
        )

    def get_by_class(self, class_id: int) -> list[Teacher]:
        return self._fetch_all(
            "SELECT * FROM Teacher WHERE class_id = ? ORDER BY teacher_id",
            (class_id,),
            description=f"class_id={class_id}",
        )

    def get_by_user_id(self, user_id: int) -> Optional[Teacher]:
        return self._fetch_one("SELECT * FROM Teacher WHERE user_id = ?", (user_id,), user_id)

    # ==================== JOINED ====================

    def _map_details(self, row: sqlite3.Row) -> TeacherDetails:
        user = User.model_validate(
            {"user_id": row["user_id"]}
            | {field: row[column] for field, column in UserRepository.columns.items()}
        )
        return TeacherDetails(teacher=self.map_row(row), user=user)

    def get_details(self, teacher_id: int) -> Optional[TeacherDetails]:
        """Teacher profile together with its user account, or None."""
        return self._fetch_one(
            DETAILS_SQL + " WHERE t.teacher_id = ?", (teacher_id,), teacher_id, self._map_details
        )

    def get_details_by_class(self, class_id: int) -> list[TeacherDetails]:
        return self._fetch_all(
            DETAILS_SQL + " WHERE t.class_id = ? ORDER BY u.fullName",
            (class_id,),
            description=f"class_id={class_id}",
            mapper=self._map_details,
        )
