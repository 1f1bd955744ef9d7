"""Class groups."""

from typing import Optional

from ..base import BaseRepository
from ..models import ClassGroup


class ClassGroupRepository(BaseRepository[ClassGroup]):
    entity_name = "class group"
    model = ClassGroup
    table = "class_group"
    id_column = "class_id"
    id_field = "class_id"
    columns = {
        "size": "size",
        "year": "year",
        "room_number": "room_number",
        "teacher_id": "teacher_id",
    }

    def create(self, class_group: ClassGroup) -> int:
        class_id = self._insert(
            """
            INSERT INTO class_group (size, year, room_number, teacher_id)
            VALUES (?, ?, ?, ?)
            RETURNING class_id
            """,
            self.params_for(class_group),
        )
        class_group.class_id = class_id
        return class_id

    def update(self, class_group: ClassGroup) -> bool:
        return self._execute_write(
            """
            UPDATE class_group
            SET size = ?, year = ?, room_number = ?, teacher_id = ?
            WHERE class_id = ?
            """,
            (*self.params_for(class_group), class_group.class_id),
            "updating",
            class_group.class_id,
        )

    def get_all(self) -> list[ClassGroup]:
        return self._fetch_all("SELECT * FROM class_group ORDER BY year, class_id")

    def get_by_teacher(self, teacher_id: int) -> list[ClassGroup]:
        return self._fetch_all(
            "SELECT * FROM class_group WHERE teacher_id = ? ORDER BY year, class_id",
            (teacher_id,),
            description=f"teacher_id={teacher_id}",
        )

    def assign_teacher(self, class_id: int, teacher_id: Optional[int]) -> bool:
        """Set (or clear, with None) the form teacher of a class."""
        return self._execute_write(
            "UPDATE class_group SET teacher_id = ? WHERE class_id = ?",
            (teacher_id, class_id),
            "assigning teacher to",
            class_id,
        )
