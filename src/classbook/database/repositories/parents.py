"""Parent profiles and their joined user accounts."""

import sqlite3
from typing import Optional

from ..base import BaseRepository
from ..models import Parent, ParentDetails, User
from .users import UserRepository

DETAILS_SQL = """
    SELECT p.parent_id, p.user_id, p.no_children,
           u.fullName, u.email, u.password, u.accountType, u.address, u.phone_number
    FROM Parent p
    JOIN User u ON p.user_id = u.user_id
"""


class ParentRepository(BaseRepository[Parent]):
    """CRUD on the ``Parent`` table.

    A parent is normally created together with its user through
    ``RegistrationService.add_parent_with_validation``.
    """

    entity_name = "parent"
    model = Parent
    table = "Parent"
    id_column = "parent_id"
    id_field = "parent_id"
    columns = {"user_id": "user_id", "number_of_children": "no_children"}

    def create(self, parent: Parent) -> int:
        parent_id = self._insert(
            "INSERT INTO Parent (user_id, no_children) VALUES (?, ?) RETURNING parent_id",
            self.params_for(parent),
        )
        parent.parent_id = parent_id
        return parent_id

    def update(self, parent: Parent) -> bool:
        return self._execute_write(
            "UPDATE Parent SET user_id = ?, no_children = ? WHERE parent_id = ?",
            (*self.params_for(parent), parent.parent_id),
            "updating",
            parent.parent_id,
        )

    def get_by_user_id(self, user_id: int) -> Optional[Parent]:
        return self._fetch_one("SELECT * FROM Parent WHERE user_id = ?", (user_id,), user_id)

    # ==================== JOINED ====================

    def _map_details(self, row: sqlite3.Row) -> ParentDetails:
        user = User.model_validate(
            {"user_id": row["user_id"]}
            | {field: row[column] for field, column in UserRepository.columns.items()}
        )
        return ParentDetails(parent=self.map_row(row), user=user)

    def get_details(self, parent_id: int) -> Optional[ParentDetails]:
        return self._fetch_one(
            DETAILS_SQL + " WHERE p.parent_id = ?", (parent_id,), parent_id, self._map_details
        )

    def get_all_details(self) -> list[ParentDetails]:
        return self._fetch_all(DETAILS_SQL + " ORDER BY u.fullName", mapper=self._map_details)
