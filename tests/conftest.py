"""Pytest configuration and fixtures for classbook tests."""

from datetime import date
from pathlib import Path
from typing import Iterator

import pytest

from classbook.config import Settings, reset_settings, set_settings
from classbook.database import (
    AccountType,
    ClassGroup,
    Database,
    Parent,
    Student,
    Teacher,
    User,
)
from classbook.store import SchoolStore


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no database)")
    config.addinivalue_line("markers", "integration: Integration tests (temporary SQLite file)")


def build_user(
    email: str,
    account_type: AccountType = AccountType.PARENT,
    password: str = "not-a-real-hash",
    full_name: str = "Test User",
) -> User:
    return User(
        full_name=full_name,
        email=email,
        password=password,
        account_type=account_type,
        address="1 School Lane",
        phone_number="555-0100",
    )


@pytest.fixture
def make_user():
    """Factory for unsaved users: ``make_user(email, account_type, password)``."""
    return build_user


@pytest.fixture
def settings(tmp_path: Path) -> Iterator[Settings]:
    """Settings pointing at a database file inside tmp_path."""
    test_settings = Settings(
        database_path=tmp_path / "classbook.db",
        pool_size=3,
        pool_timeout=2.0,
        min_password_length=8,
    )
    set_settings(test_settings)
    yield test_settings
    reset_settings()


@pytest.fixture
def db(settings: Settings) -> Iterator[Database]:
    """Database with the classbook schema applied."""
    database = Database(settings.database_path, settings)
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def store(db: Database) -> SchoolStore:
    return SchoolStore(db)


@pytest.fixture
def class_group(store: SchoolStore) -> ClassGroup:
    group = ClassGroup(size=24, year=5, room_number=101)
    store.class_groups.create(group)
    return group


@pytest.fixture
def parent_account(store: SchoolStore) -> tuple[User, Parent]:
    """A PARENT user and its parent profile."""
    user = build_user("parent@example.org", AccountType.PARENT, full_name="Pat Parent")
    store.users.create(user)
    parent = Parent(user_id=user.user_id, number_of_children=1)
    store.parents.create(parent)
    return user, parent


@pytest.fixture
def teacher_account(store: SchoolStore, class_group: ClassGroup) -> tuple[User, Teacher]:
    """A TEACHER user and its teacher profile for ``class_group``."""
    user = build_user("teacher@example.org", AccountType.TEACHER, full_name="Terry Teacher")
    store.users.create(user)
    teacher = Teacher(user_id=user.user_id, class_id=class_group.class_id)
    store.teachers.create(teacher)
    return user, teacher


@pytest.fixture
def student(store: SchoolStore, class_group: ClassGroup, parent_account) -> Student:
    _, parent = parent_account
    pupil = Student(
        class_id=class_group.class_id,
        first_name="Sam",
        last_name="Student",
        address="1 School Lane",
        parent_id=parent.parent_id,
    )
    store.students.create(pupil)
    return pupil


@pytest.fixture
def today() -> date:
    return date(2024, 3, 15)
