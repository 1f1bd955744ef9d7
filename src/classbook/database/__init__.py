"""Persistence layer for classbook.

Example:
    from classbook.database import Database, StudentRepository

    db = Database()
    db.init_schema()
    students = StudentRepository(db)
    for student in students.get_by_class(3):
        print(student.full_name)
"""

from .connection import SCHEMA_PATH, ConnectionPool, Database
from .models import (
    AccountType,
    Absence,
    ClassGroup,
    Grade,
    Homework,
    Parent,
    ParentDetails,
    Student,
    Teacher,
    TeacherDetails,
    User,
)
from .repositories import (
    AbsenceRepository,
    ClassGroupRepository,
    GradeRepository,
    HomeworkRepository,
    ParentRepository,
    StudentRepository,
    TeacherRepository,
    UserRepository,
)
from .results import Failed, Found, Lookup, NotFound
from .validators import ReferenceValidator, check_account_type, check_homework_dates

__all__ = [
    "SCHEMA_PATH",
    "ConnectionPool",
    "Database",
    "AccountType",
    "Absence",
    "ClassGroup",
    "Grade",
    "Homework",
    "Parent",
    "ParentDetails",
    "Student",
    "Teacher",
    "TeacherDetails",
    "User",
    "AbsenceRepository",
    "ClassGroupRepository",
    "GradeRepository",
    "HomeworkRepository",
    "ParentRepository",
    "StudentRepository",
    "TeacherRepository",
    "UserRepository",
    "Found",
    "NotFound",
    "Failed",
    "Lookup",
    "ReferenceValidator",
    "check_account_type",
    "check_homework_dates",
]
