"""One repository per classbook table."""

from .absences import AbsenceRepository
from .class_groups import ClassGroupRepository
from .grades import GradeRepository
from .homework import HomeworkRepository
from .parents import ParentRepository
from .students import StudentRepository
from .teachers import TeacherRepository
from .users import UserRepository

__all__ = [
    "AbsenceRepository",
    "ClassGroupRepository",
    "GradeRepository",
    "HomeworkRepository",
    "ParentRepository",
    "StudentRepository",
    "TeacherRepository",
    "UserRepository",
]
