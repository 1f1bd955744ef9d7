"""Grade averages."""

from typing import Iterable, Optional

from classbook.database import GradeRepository

MARK_POINTS = {"A": 5, "B": 4, "C": 3, "D": 2, "F": 1}


def is_valid_mark(mark: str) -> bool:
    """True for A, B, C, D and F only."""
    return mark in MARK_POINTS


def mark_points(mark: str) -> Optional[int]:
    return MARK_POINTS.get(mark)


def average_of(marks: Iterable[str]) -> float:
    """Mean point value of the valid marks; 0.0 when there are none."""
    points = [MARK_POINTS[mark] for mark in marks if mark in MARK_POINTS]
    if not points:
        return 0.0
    return sum(points) / len(points)


class GradeAggregator:
    """Per-student averages over stored grades.

    Marks outside A-D/F are skipped, so a student with only such marks
    averages 0.0, as does one with no grades.
    """

    def __init__(self, grades: GradeRepository):
        self.grades = grades

    is_valid_mark = staticmethod(is_valid_mark)
    mark_points = staticmethod(mark_points)
    average_of = staticmethod(average_of)

    def average_for_student(self, student_id: int) -> float:
        return average_of(grade.mark for grade in self.grades.get_by_student(student_id))
