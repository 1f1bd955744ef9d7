"""The repositories of one store, bundled with an explicit lifetime."""

from pathlib import Path
from typing import Optional

from classbook.config import Settings
from classbook.database import (
    AbsenceRepository,
    ClassGroupRepository,
    Database,
    GradeRepository,
    HomeworkRepository,
    ParentRepository,
    ReferenceValidator,
    StudentRepository,
    TeacherRepository,
    UserRepository,
)


class SchoolStore:
    """Every repository and the validator, sharing one ``Database``.

    Example:
        with SchoolStore.open(Path("school.db")) as store:
            store.db.init_schema()
            print(store.students.count())
    """

    def __init__(self, db: Database):
        self.db = db
        self.users = UserRepository(db)
        self.students = StudentRepository(db)
        self.teachers = TeacherRepository(db)
        self.parents = ParentRepository(db)
        self.class_groups = ClassGroupRepository(db)
        self.grades = GradeRepository(db)
        self.absences = AbsenceRepository(db)
        self.homework = HomeworkRepository(db)
        self.validator = ReferenceValidator(db)

    @classmethod
    def open(cls, path: Optional[Path] = None, settings: Optional[Settings] = None) -> "SchoolStore":
        return cls(Database(path, settings))

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "SchoolStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
