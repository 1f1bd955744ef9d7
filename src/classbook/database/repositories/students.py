"""Students."""

from ..base import BaseRepository
from ..models import Student


class StudentRepository(BaseRepository[Student]):
    """CRUD on the ``Student`` table.

    ``create`` trusts ``class_id`` and ``parent_id``; use
    ``RegistrationService.add_student_with_validation`` to check them first.
    """

    entity_name = "student"
    model = Student
    table = "Student"
    id_column = "student_id"
    id_field = "student_id"
    columns = {
        "class_id": "class_id",
        "first_name": "f_name",
        "last_name": "l_name",
        "address": "address",
        "parent_id": "parent_id",
    }

    def create(self, student: Student) -> int:
        student_id = self._insert(
            """
            INSERT INTO Student (class_id, f_name, l_name, address, parent_id)
            VALUES (?, ?, ?, ?, ?)
            RETURNING student_id
            """,
            self.params_for(student),
        )
        student.student_id = student_id
        return student_id

    def update(self, student: Student) -> bool:
        return self._execute_write(
            """
            UPDATE Student
            SET class_id = ?, f_name = ?, l_name = ?, address = ?, parent_id = ?
            WHERE student_id = ?
            """,
            (*self.params_for(student), student.student_id),
            "updating",
            student.student_id,
        )

    def get_all(self) -> list[Student]:
        return self._fetch_all("SELECT * FROM Student ORDER BY l_name, f_name")

    def get_by_class(self, class_id: int) -> list[Student]:
        return self._fetch_all(
            "SELECT * FROM Student WHERE class_id = ? ORDER BY l_name, f_name",
            (class_id,),
            description=f"class_id={class_id}",
        )

    def get_by_parent(self, parent_id: int) -> list[Student]:
        return self._fetch_all(
            "SELECT * FROM Student WHERE parent_id = ? ORDER BY f_name",
            (parent_id,),
            description=f"parent_id={parent_id}",
        )
