"""Datenmodell für Studierende (regulär oder Gasthörer, Pydantic v2).

Beide Varianten teilen ein Modell; das abweichende Verhalten steht in einer
Fähigkeitstabelle, die über das Feld ``kind`` ausgewählt wird.
"""

from enum import Enum
from typing import Callable

from models.course import Course
from models.person import Person

# Gasthörer dürfen höchstens so viele Fächer gleichzeitig belegen
SPECIAL_MAX_COURSES = 2


class StudentKind(str, Enum):
    STANDARD = "standard"   # reguläre/r Studierende/r
    SPECIAL = "special"     # Gasthörer/in: keine Noten, max. 2 Fächer

    @property
    def label(self) -> str:
        return "Regulär" if self is StudentKind.STANDARD else "Gasthörer"


class Student(Person):
    """Studierende/r mit belegten Fächern und Semestersperre."""

    course_of_study: str = ""
    kind: StudentKind = StudentKind.STANDARD
    enrolled_courses: list[str] = []   # Fach-Codes, eindeutig, in Belegungsreihenfolge
    semester_locked: bool = False

    @property
    def is_special(self) -> bool:
        return self.kind is StudentKind.SPECIAL

    @property
    def receives_grades(self) -> bool:
        return _CAPABILITIES[self.kind].receives_grades

    def is_enrolled_in(self, course_code: str) -> bool:
        return course_code in self.enrolled_courses

    def can_enroll(self, course: Course) -> bool:
        """Prüft die variantenspezifische Belegungsberechtigung."""
        return _CAPABILITIES[self.kind].eligible(self, course)

    def enroll(self, course: Course) -> bool:
        """Belegt ein Fach. False bei Sperre, fehlender Berechtigung oder Doppelbelegung."""
        if self.semester_locked:
            return False
        if not self.can_enroll(course):
            return False
        if course.code in self.enrolled_courses:
            return False
        self.enrolled_courses.append(course.code)
        return True

    def withdraw(self, course: Course) -> bool:
        """Gibt ein einzelnes Fach zurück."""
        if course.code not in self.enrolled_courses:
            return False
        self.enrolled_courses.remove(course.code)
        return True

    def lock_semester(self) -> None:
        """Sperrt das Semester und verwirft alle Belegungen."""
        self.semester_locked = True
        self.enrolled_courses.clear()

    def unlock_semester(self) -> None:
        """Hebt die Sperre auf; verworfene Belegungen bleiben verworfen."""
        self.semester_locked = False

    def __str__(self) -> str:
        return f"{self.kind.label}: {self.name} ({self.id}) - {self.course_of_study}"


# ─── Fähigkeitstabelle ────────────────────────────────────────────────────────

def _prerequisites_met(student: Student, course: Course) -> bool:
    # Voraussetzung gilt als erfüllt, sobald das Fach belegt ist (nicht erst bei Bestehen)
    return set(course.prerequisites).issubset(student.enrolled_courses)


def _below_course_limit(student: Student, course: Course) -> bool:
    return len(student.enrolled_courses) < SPECIAL_MAX_COURSES


class _Capabilities:
    __slots__ = ("eligible", "receives_grades")

    def __init__(self, eligible: Callable[[Student, Course], bool],
                 receives_grades: bool) -> None:
        self.eligible = eligible
        self.receives_grades = receives_grades


_CAPABILITIES: dict[StudentKind, _Capabilities] = {
    StudentKind.STANDARD: _Capabilities(_prerequisites_met, receives_grades=True),
    StudentKind.SPECIAL: _Capabilities(_below_course_limit, receives_grades=False),
}
