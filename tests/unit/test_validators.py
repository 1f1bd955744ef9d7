"""Tests for the pure validation helpers."""

from datetime import date

import pytest

from classbook.database.models import AccountType, User
from classbook.database.validators import check_account_type, check_homework_dates
from classbook.errors import ValidationError

pytestmark = pytest.mark.unit


class TestCheckHomeworkDates:
    def test_due_before_assignment(self):
        with pytest.raises(ValidationError, match="cannot be before assignment date"):
            check_homework_dates(date(2024, 3, 10), date(2024, 3, 9))

    def test_same_day(self):
        check_homework_dates(date(2024, 3, 10), date(2024, 3, 10))


class TestCheckAccountType:
    def test_matching_type(self):
        user = User(full_name="P", email="p@example.org", password="x", account_type="parent")
        check_account_type(user, AccountType.PARENT)

    def test_mismatch_message(self):
        user = User(full_name="T", email="t@example.org", password="x", account_type="teacher")
        with pytest.raises(ValidationError, match="User must have PARENT account type"):
            check_account_type(user, AccountType.PARENT)
