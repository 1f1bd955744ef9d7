"""Integration tests for UserRepository."""

import pytest

from classbook.database import AccountType, Failed, Found, NotFound
from classbook.errors import PersistenceError

pytestmark = pytest.mark.integration


class TestUserCrud:
    """Create, read, update and delete users."""

    def test_create_and_get(self, store, make_user):
        user = make_user("ana@example.org", AccountType.PARENT)
        user_id = store.users.create(user)

        assert user.user_id == user_id
        assert store.users.get_by_id(user_id) == user

    def test_account_type_stored_lowercase(self, store, db, make_user):
        user_id = store.users.create(make_user("t@example.org", AccountType.TEACHER))
        with db.connection() as conn:
            row = conn.execute("SELECT accountType FROM User WHERE user_id = ?", (user_id,)).fetchone()
        assert row["accountType"] == "teacher"

    def test_duplicate_email_rejected(self, store, make_user):
        store.users.create(make_user("dup@example.org"))
        with pytest.raises(PersistenceError):
            store.users.create(make_user("dup@example.org"))
        assert store.users.count() == 1

    def test_strings_not_trimmed(self, store, make_user):
        user = make_user("pad@example.org", full_name="  Padded Name  ")
        store.users.create(user)
        assert store.users.get_by_id(user.user_id).full_name == "  Padded Name  "

    def test_update(self, store, make_user):
        user = make_user("ana@example.org")
        store.users.create(user)
        user.phone_number = "555-0199"

        assert store.users.update(user) is True
        assert store.users.get_by_id(user.user_id).phone_number == "555-0199"

    def test_update_missing_row(self, store, make_user):
        user = make_user("ghost@example.org")
        user.user_id = 999
        assert store.users.update(user) is False

    def test_update_password(self, store, make_user):
        user = make_user("ana@example.org")
        store.users.create(user)
        assert store.users.update_password(user.user_id, "new-value") is True
        assert store.users.get_by_id(user.user_id).password == "new-value"

    def test_delete(self, store, make_user):
        user_id = store.users.create(make_user("ana@example.org"))
        assert store.users.delete(user_id) is True
        assert store.users.get_by_id(user_id) is None
        assert store.users.delete(user_id) is False


class TestUserQueries:
    def test_get_by_email(self, store, make_user):
        store.users.create(make_user("ana@example.org"))
        assert store.users.get_by_email("ana@example.org").email == "ana@example.org"
        assert store.users.get_by_email("nobody@example.org") is None

    def test_lookup_by_email(self, store, make_user):
        store.users.create(make_user("ana@example.org"))
        assert isinstance(store.users.lookup_by_email("ana@example.org"), Found)
        assert store.users.lookup_by_email("nobody@example.org") == NotFound("nobody@example.org")

    def test_get_by_account_type(self, store, make_user):
        store.users.create(make_user("p1@example.org", AccountType.PARENT, full_name="Zed"))
        store.users.create(make_user("p2@example.org", AccountType.PARENT, full_name="Amy"))
        store.users.create(make_user("t@example.org", AccountType.TEACHER))

        parents = store.users.get_by_account_type(AccountType.PARENT)

        assert [u.full_name for u in parents] == ["Amy", "Zed"]

    def test_count_by_account_type(self, store, make_user):
        store.users.create(make_user("p1@example.org", AccountType.PARENT))
        store.users.create(make_user("t@example.org", AccountType.TEACHER))
        assert store.users.count_by_account_type(AccountType.PARENT) == 1
        assert store.users.count_by_account_type(AccountType.ADMIN) == 0

    def test_is_email_taken(self, store, make_user):
        user_id = store.users.create(make_user("ana@example.org"))
        assert store.users.is_email_taken("ana@example.org") is True
        assert store.users.is_email_taken("ana@example.org", exclude_user_id=user_id) is False
        assert store.users.is_email_taken("free@example.org") is False


class TestReadFailures:
    """Reads degrade to None / [] / 0; lookup reports Failed."""

    @pytest.fixture
    def broken_store(self, store, db):
        with db.connection() as conn:
            conn.execute("ALTER TABLE User RENAME TO User_gone")
        return store

    def test_get_by_id_returns_none(self, broken_store):
        assert broken_store.users.get_by_id(1) is None

    def test_get_all_returns_empty(self, broken_store):
        assert broken_store.users.get_all() == []

    def test_count_returns_zero(self, broken_store):
        assert broken_store.users.count() == 0

    def test_lookup_reports_failure(self, broken_store):
        result = broken_store.users.lookup_by_email("ana@example.org")
        assert isinstance(result, Failed)
        assert "no such table" in str(result.cause)

    def test_writes_raise(self, broken_store, make_user):
        with pytest.raises(PersistenceError):
            broken_store.users.create(make_user("ana@example.org"))

    def test_probe_raises(self, broken_store):
        with pytest.raises(PersistenceError):
            broken_store.users.is_email_taken("ana@example.org")
