"""Homework assignments."""

from datetime import date
from typing import Optional

from ..base import BaseRepository
from ..models import Homework
from ..validators import check_homework_dates


class HomeworkRepository(BaseRepository[Homework]):
    """CRUD on the ``homework`` table.

    ``create`` and ``update`` re-check the date order before touching the
    store, since a model can be mutated after construction.
    """

    entity_name = "homework"
    model = Homework
    table = "homework"
    id_column = "homework_id"
    id_field = "homework_id"
    columns = {
        "assignment_date": "assignment_date",
        "due_date": "due_date",
        "class_id": "class_id",
        "description": "description",
        "status": "status",
    }

    def create(self, homework: Homework) -> int:
        """Insert a homework assignment.

        Raises:
            ValidationError: ``due_date`` is before ``assignment_date``.
            PersistenceError: The insert failed.
        """
        check_homework_dates(homework.assignment_date, homework.due_date)
        homework_id = self._insert(
            """
            INSERT INTO homework (assignment_date, due_date, class_id, description, status)
            VALUES (?, ?, ?, ?, ?)
            RETURNING homework_id
            """,
            self.params_for(homework),
        )
        homework.homework_id = homework_id
        return homework_id

    def update(self, homework: Homework) -> bool:
        check_homework_dates(homework.assignment_date, homework.due_date)
        return self._execute_write(
            """
            UPDATE homework
            SET assignment_date = ?, due_date = ?, class_id = ?, description = ?, status = ?
            WHERE homework_id = ?
            """,
            (*self.params_for(homework), homework.homework_id),
            "updating",
            homework.homework_id,
        )

    def get_all(self) -> list[Homework]:
        return self._fetch_all("SELECT * FROM homework ORDER BY due_date, homework_id")

    def get_by_class(self, class_id: int) -> list[Homework]:
        return self._fetch_all(
            "SELECT * FROM homework WHERE class_id = ? ORDER BY due_date, homework_id",
            (class_id,),
            description=f"class_id={class_id}",
        )

    def get_by_status(self, completed: bool) -> list[Homework]:
        return self._fetch_all(
            "SELECT * FROM homework WHERE status = ? ORDER BY due_date, homework_id",
            (int(completed),),
            description=f"status={int(completed)}",
        )

    def get_overdue(self, as_of: Optional[date] = None) -> list[Homework]:
        """Uncompleted homework due strictly before ``as_of`` (default today)."""
        as_of = as_of or date.today()
        return self._fetch_all(
            "SELECT * FROM homework WHERE due_date < ? AND status = 0 ORDER BY due_date, homework_id",
            (as_of.isoformat(),),
            description=f"overdue as of {as_of.isoformat()}",
        )

    def update_status(self, homework_id: int, completed: bool) -> bool:
        return self._execute_write(
            "UPDATE homework SET status = ? WHERE homework_id = ?",
            (int(completed), homework_id),
            "updating status of",
            homework_id,
        )
