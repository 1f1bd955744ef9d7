"""Integration tests for AuthenticationService."""

import base64
import hashlib
import sqlite3
from unittest.mock import MagicMock

import pytest

from classbook.database import AccountType, Failed
from classbook.errors import (
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    UnknownAccountError,
    ValidationError,
    WrongPasswordError,
)
from classbook.services import AuthenticationService, hash_password, needs_upgrade, parse_credential
from classbook.services.credentials import HashedCredential, pwd_context

pytestmark = pytest.mark.integration


@pytest.fixture
def auth(store, settings):
    return AuthenticationService(store.users, settings)


@pytest.fixture
def legacy_user(store, make_user):
    """A user whose password is still stored as plaintext."""
    user = make_user("legacy@example.org", AccountType.PARENT, password="secret123")
    store.users.create(user)
    return user


class TestAuthenticate:
    def test_plaintext_login_upgrades_hash(self, store, auth, legacy_user):
        """Plaintext logs in once, is rehashed, then logs in via the hash."""
        user = auth.authenticate("legacy@example.org", "secret123")

        stored = store.users.get_by_id(legacy_user.user_id).password
        assert user.user_id == legacy_user.user_id
        assert stored.startswith("$argon2")
        assert user.password == stored
        assert not needs_upgrade(parse_credential(stored))

        again = auth.authenticate("legacy@example.org", "secret123")
        assert again.password == stored

    def test_upgrade_disabled(self, store, auth, legacy_user):
        auth.authenticate("legacy@example.org", "secret123", upgrade=False)
        assert store.users.get_by_id(legacy_user.user_id).password == "secret123"

    def test_colon_pbkdf2_login_upgrades(self, store, auth, make_user):
        salt = b"fedcba9876543210"
        digest = hashlib.pbkdf2_hmac("sha1", b"secret123", salt, 10000, dklen=32)
        stored = f"10000:{base64.b64encode(salt).decode()}:{base64.b64encode(digest).decode()}"
        user = make_user("old@example.org", password=stored)
        store.users.create(user)

        auth.authenticate("old@example.org", "secret123")

        assert isinstance(parse_credential(store.users.get_by_id(user.user_id).password), HashedCredential)

    def test_deprecated_hash_upgraded(self, store, auth, make_user):
        user = make_user(
            "pb@example.org", password=pwd_context.handler("pbkdf2_sha256").hash("secret123")
        )
        store.users.create(user)

        auth.authenticate("pb@example.org", "secret123")

        assert store.users.get_by_id(user.user_id).password.startswith("$argon2")

    def test_current_hash_left_alone(self, store, auth, make_user):
        stored = hash_password("secret123")
        store.users.create(make_user("cur@example.org", password=stored))

        auth.authenticate("cur@example.org", "secret123")

        assert store.users.get_by_email("cur@example.org").password == stored

    def test_unknown_email(self, auth):
        with pytest.raises(UnknownAccountError) as exc_info:
            auth.authenticate("nobody@example.org", "secret123")
        assert isinstance(exc_info.value, NotFoundError)
        assert str(exc_info.value) == "Invalid email or password"

    def test_unknown_email_still_hashes(self, auth, monkeypatch):
        """An unknown email costs a hash check like a wrong password does."""
        calls = []
        original = pwd_context.dummy_verify

        def counting(*args, **kwargs):
            calls.append(args)
            return original(*args, **kwargs)

        monkeypatch.setattr(pwd_context, "dummy_verify", counting)

        with pytest.raises(UnknownAccountError):
            auth.authenticate("nobody@example.org", "secret123")

        assert len(calls) == 1

    def test_wrong_password(self, store, auth, legacy_user):
        with pytest.raises(WrongPasswordError) as exc_info:
            auth.authenticate("legacy@example.org", "secret124")
        assert isinstance(exc_info.value, InvalidCredentialsError)
        assert str(exc_info.value) == "Invalid email or password"
        assert store.users.get_by_id(legacy_user.user_id).password == "secret123"

    def test_failed_upgrade_does_not_fail_login(self, store, auth, legacy_user, monkeypatch):
        def refuse(user):
            raise PersistenceError("database is locked")

        monkeypatch.setattr(store.users, "update", refuse)

        user = auth.authenticate("legacy@example.org", "secret123")

        assert user.password == "secret123"
        assert store.users.get_by_id(legacy_user.user_id).password == "secret123"

    def test_read_failure_is_not_unknown_email(self, settings):
        users = MagicMock()
        users.lookup_by_email.return_value = Failed(sqlite3.OperationalError("disk I/O error"))

        with pytest.raises(PersistenceError) as exc_info:
            AuthenticationService(users, settings).authenticate("a@example.org", "secret123")

        assert not isinstance(exc_info.value, InvalidCredentialsError)
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


class TestChangePassword:
    """Tests for change_password."""

    def test_mismatch(self, auth, legacy_user):
        with pytest.raises(ValidationError, match="New passwords don't match"):
            auth.change_password(legacy_user, "secret123", "newsecret1", "newsecret2")

    def test_too_short(self, auth, legacy_user):
        with pytest.raises(ValidationError, match="New password must be at least 8 characters long"):
            auth.change_password(legacy_user, "secret123", "short", "short")

    def test_wrong_current_password(self, store, auth, legacy_user):
        with pytest.raises(ValidationError, match="Current password is incorrect"):
            auth.change_password(legacy_user, "guess", "newsecret1", "newsecret1")
        assert store.users.get_by_id(legacy_user.user_id).password == "secret123"

    def test_success_stores_new_hash(self, store, auth, legacy_user):
        updated = auth.change_password(legacy_user, "secret123", "newsecret1", "newsecret1")

        stored = store.users.get_by_id(legacy_user.user_id).password
        assert updated.password == stored
        assert auth.verify_password(stored, "newsecret1")
        assert auth.authenticate("legacy@example.org", "newsecret1").user_id == legacy_user.user_id
        with pytest.raises(WrongPasswordError):
            auth.authenticate("legacy@example.org", "secret123")

    def test_deleted_user(self, store, auth, legacy_user):
        store.users.delete(legacy_user.user_id)
        with pytest.raises(NotFoundError):
            auth.change_password(legacy_user, "secret123", "newsecret1", "newsecret1")

    def test_minimum_length_from_settings(self, store, settings, legacy_user):
        settings.min_password_length = 12
        auth = AuthenticationService(store.users, settings)
        with pytest.raises(ValidationError, match="at least 12 characters"):
            auth.change_password(legacy_user, "secret123", "newsecret1", "newsecret1")
