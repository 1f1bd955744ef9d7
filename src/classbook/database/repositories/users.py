"""User accounts."""

from typing import Optional

from ..base import BaseRepository
from ..models import AccountType, User
from ..results import Lookup


class UserRepository(BaseRepository[User]):
    """CRUD and lookups on the ``User`` table.

    ``password`` is stored exactly as given; hashing is the caller's job
    (see ``classbook.services.credentials``).
    """

    entity_name = "user"
    model = User
    table = "User"
    id_column = "user_id"
    id_field = "user_id"
    columns = {
        "full_name": "fullName",
        "email": "email",
        "password": "password",
        "account_type": "accountType",
        "address": "address",
        "phone_number": "phone_number",
    }

    INSERT_SQL = """
        INSERT INTO User (fullName, email, password, accountType, address, phone_number)
        VALUES (?, ?, ?, ?, ?, ?)
        RETURNING user_id
    """
    UPDATE_SQL = """
        UPDATE User
        SET fullName = ?, email = ?, password = ?, accountType = ?, address = ?, phone_number = ?
        WHERE user_id = ?
    """

    def create(self, user: User) -> int:
        """Insert a user and store the generated id on it.

        Returns:
            The new ``user_id``.

        Raises:
            PersistenceError: The insert failed (duplicate email included).
        """
        user_id = self._insert(self.INSERT_SQL, self.params_for(user))
        user.user_id = user_id
        return user_id

    def update(self, user: User) -> bool:
        return self._execute_write(
            self.UPDATE_SQL, (*self.params_for(user), user.user_id), "updating", user.user_id
        )

    def update_password(self, user_id: int, password: str) -> bool:
        """Replace the stored credential of one user."""
        return self._execute_write(
            "UPDATE User SET password = ? WHERE user_id = ?",
            (password, user_id),
            "updating password of",
            user_id,
        )

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one("SELECT * FROM User WHERE email = ?", (email,), email)

    def lookup_by_email(self, email: str) -> Lookup:
        """Find a user by email, reporting a failed read as ``Failed``."""
        return self._lookup("SELECT * FROM User WHERE email = ?", (email,), email)

    def get_by_account_type(self, account_type: AccountType) -> list[User]:
        account_type = AccountType(account_type)
        return self._fetch_all(
            "SELECT * FROM User WHERE accountType = ? ORDER BY fullName",
            (account_type.value,),
            description=f"accountType={account_type.value}",
        )

    def is_email_taken(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        """Check whether another account already uses ``email``.

        Args:
            email: Address to check.
            exclude_user_id: Ignore this user (the one being edited).

        Raises:
            PersistenceError: The store could not be queried.
        """
        if exclude_user_id is None:
            return self._probe("SELECT 1 FROM User WHERE email = ?", (email,))
        return self._probe(
            "SELECT 1 FROM User WHERE email = ? AND user_id != ?", (email, exclude_user_id)
        )

    def count_by_account_type(self, account_type: AccountType) -> int:
        return self._fetch_count(
            "SELECT COUNT(*) FROM User WHERE accountType = ?", (AccountType(account_type).value,)
        )
