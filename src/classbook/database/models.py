"""Pydantic models for classbook entities.

Ids are ``None`` until the row is inserted. Foreign keys are plain ids; no
model holds another model except the read-only join DTOs at the bottom.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class AccountType(str, Enum):
    """Account type stored in ``User.accountType`` (lowercase in the table)."""

    TEACHER = "teacher"
    PARENT = "parent"
    ADMIN = "admin"


class User(BaseModel):
    """User account. ``password`` is a hash, or plaintext for legacy rows."""

    user_id: Optional[int] = None
    full_name: str
    email: str
    password: str = Field(repr=False)
    account_type: AccountType
    address: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("account_type", mode="before")
    @classmethod
    def _normalize_account_type(cls, value: Any) -> Any:
        # Older rows were written as TEACHER / PARENT / ADMIN
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Student(BaseModel):
    """Student model."""

    student_id: Optional[int] = None
    class_id: int
    first_name: str
    last_name: str
    address: Optional[str] = None
    parent_id: int

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Teacher(BaseModel):
    """Teacher profile for a TEACHER user."""

    teacher_id: Optional[int] = None
    user_id: int
    class_id: int


class Parent(BaseModel):
    """Parent profile for a PARENT user."""

    parent_id: Optional[int] = None
    user_id: Optional[int] = None  # assigned when created together with its user
    number_of_children: int = Field(default=0, ge=0)


class ClassGroup(BaseModel):
    """Class group model."""

    class_id: Optional[int] = None
    size: int
    year: int
    room_number: int
    teacher_id: Optional[int] = None


class Grade(BaseModel):
    """A single mark. Only A, B, C, D and F count towards averages."""

    grade_id: Optional[int] = None
    mark: str = Field(min_length=1, max_length=1)
    subject: str
    student_id: int
    grade_date: date
    comment: Optional[str] = None
    teacher_id: int


class Absence(BaseModel):
    """Absence model. ``status`` is True once the absence is excused."""

    absence_id: Optional[int] = None
    student_id: int
    absence_date: date
    description: Optional[str] = None
    status: bool = False


class Homework(BaseModel):
    """Homework model. ``status`` is True once completed.

    A due date before the assignment date is refused here with
    ``pydantic.ValidationError``; the repository refuses the same dates on a
    mutated instance with ``classbook.errors.ValidationError``. Both are
    ``ValueError`` subclasses, so ``except ValueError`` covers either.
    """

    homework_id: Optional[int] = None
    assignment_date: date
    due_date: date
    class_id: int
    description: Optional[str] = None
    status: bool = False

    @model_validator(mode="after")
    def _due_after_assignment(self) -> "Homework":
        if self.due_date < self.assignment_date:
            raise ValueError(
                f"Due date {self.due_date} cannot be before assignment date {self.assignment_date}"
            )
        return self

    def is_overdue(self, as_of: Optional[date] = None) -> bool:
        return not self.status and self.due_date < (as_of or date.today())


# Join models


class TeacherDetails(BaseModel):
    """Teacher profile joined with its user account."""

    teacher: Teacher
    user: User

    @property
    def full_name(self) -> str:
        return self.user.full_name

    @property
    def email(self) -> str:
        return self.user.email


class ParentDetails(BaseModel):
    """Parent profile joined with its user account."""

    parent: Parent
    user: User

    @property
    def full_name(self) -> str:
        return self.user.full_name

    @property
    def email(self) -> str:
        return self.user.email
