"""Absences."""

from ..base import BaseRepository
from ..models import Absence


class AbsenceRepository(BaseRepository[Absence]):
    entity_name = "absence"
    model = Absence
    table = "absence"
    id_column = "absence_id"
    id_field = "absence_id"
    columns = {
        "student_id": "student_id",
        "absence_date": "absence_date",
        "description": "description",
        "status": "status",
    }

    def create(self, absence: Absence) -> int:
        absence_id = self._insert(
            """
            INSERT INTO absence (student_id, absence_date, description, status)
            VALUES (?, ?, ?, ?)
            RETURNING absence_id
            """,
            self.params_for(absence),
        )
        absence.absence_id = absence_id
        return absence_id

    def update(self, absence: Absence) -> bool:
        return self._execute_write(
            """
            UPDATE absence
            SET student_id = ?, absence_date = ?, description = ?, status = ?
            WHERE absence_id = ?
            """,
            (*self.params_for(absence), absence.absence_id),
            "updating",
            absence.absence_id,
        )

    def get_all(self) -> list[Absence]:
        return self._fetch_all("SELECT * FROM absence ORDER BY absence_date DESC, absence_id DESC")

    def get_by_student(self, student_id: int) -> list[Absence]:
        return self._fetch_all(
            "SELECT * FROM absence WHERE student_id = ? ORDER BY absence_date DESC, absence_id DESC",
            (student_id,),
            description=f"student_id={student_id}",
        )

    def get_by_status(self, excused: bool) -> list[Absence]:
        return self._fetch_all(
            "SELECT * FROM absence WHERE status = ? ORDER BY absence_date DESC, absence_id DESC",
            (int(excused),),
            description=f"status={int(excused)}",
        )

    def update_status(self, absence_id: int, excused: bool) -> bool:
        """Mark an absence excused (True) or unexcused (False)."""
        return self._execute_write(
            "UPDATE absence SET status = ? WHERE absence_id = ?",
            (int(excused), absence_id),
            "updating status of",
            absence_id,
        )

    def count_by_student(self, student_id: int) -> int:
        return self._fetch_count("SELECT COUNT(*) FROM absence WHERE student_id = ?", (student_id,))
