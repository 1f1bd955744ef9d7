"""Grades."""

from ..base import BaseRepository
from ..models import Grade


class GradeRepository(BaseRepository[Grade]):
    """CRUD on the ``Grade`` table.

    Marks are stored as given, so a mark outside A-D/F round-trips unchanged;
    ``classbook.services.grades`` decides what counts towards an average.
    """

    entity_name = "grade"
    model = Grade
    table = "Grade"
    id_column = "grade_id"
    id_field = "grade_id"
    columns = {
        "mark": "mark",
        "subject": "subject",
        "student_id": "student_id",
        "grade_date": "grade_date",
        "comment": "comment",
        "teacher_id": "teacher_id",
    }

    def create(self, grade: Grade) -> int:
        grade_id = self._insert(
            """
            INSERT INTO Grade (mark, subject, student_id, grade_date, comment, teacher_id)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING grade_id
            """,
            self.params_for(grade),
        )
        grade.grade_id = grade_id
        return grade_id

    def update(self, grade: Grade) -> bool:
        return self._execute_write(
            """
            UPDATE Grade
            SET mark = ?, subject = ?, student_id = ?, grade_date = ?, comment = ?, teacher_id = ?
            WHERE grade_id = ?
            """,
            (*self.params_for(grade), grade.grade_id),
            "updating",
            grade.grade_id,
        )

    def get_by_student(self, student_id: int) -> list[Grade]:
        return self._fetch_all(
            "SELECT * FROM Grade WHERE student_id = ? ORDER BY grade_date DESC, grade_id DESC",
            (student_id,),
            description=f"student_id={student_id}",
        )

    def get_by_teacher(self, teacher_id: int) -> list[Grade]:
        return self._fetch_all(
            "SELECT * FROM Grade WHERE teacher_id = ? ORDER BY grade_date DESC, grade_id DESC",
            (teacher_id,),
            description=f"teacher_id={teacher_id}",
        )

    def get_by_subject(self, subject: str) -> list[Grade]:
        return self._fetch_all(
            "SELECT * FROM Grade WHERE subject = ? ORDER BY grade_date DESC, grade_id DESC",
            (subject,),
            description=f"subject={subject}",
        )
