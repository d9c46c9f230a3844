"""AcademicData: vollständiger Datenbestand des Fachbereichs (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.course import Course
from models.course_class import CourseClass
from models.professor import Professor
from models.student import Student


class AcademicData(BaseModel):
    """Je Entitätstyp ein maßgebliches Verzeichnis (Kennung/Code → Objekt).

    Querverweise (Fach → Kurse, Dozent → Kurse, Studierende → Fächer)
    bestehen ausschließlich aus Codes und werden hier nachgeschlagen.
    """

    students: dict[str, Student] = {}
    professors: dict[str, Professor] = {}
    courses: dict[str, Course] = {}
    classes: dict[str, CourseClass] = {}
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Nachschlagen ───

    def classes_of_course(self, course_code: str) -> list[CourseClass]:
        course = self.courses.get(course_code)
        if course is None:
            return []
        return [self.classes[c] for c in course.class_codes if c in self.classes]

    def classes_of_professor(self, professor_id: str) -> list[CourseClass]:
        professor = self.professors.get(professor_id)
        if professor is None:
            return []
        return [self.classes[c] for c in professor.class_codes if c in self.classes]

    def classes_of_student(self, student_id: str,
                           term: Optional[str] = None) -> list[CourseClass]:
        """Alle Kurse, auf deren Teilnehmerliste der Studierende steht."""
        return [
            cc for cc in self.classes.values()
            if student_id in cc.records and (term is None or cc.term == term)
        ]

    def terms(self) -> list[str]:
        return sorted({cc.term for cc in self.classes.values()})

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datenbestand."""
        num_special = sum(1 for s in self.students.values() if s.is_special)
        num_locked = sum(1 for s in self.students.values() if s.semester_locked)
        seats = sum(cc.capacity for cc in self.classes.values())
        taken = sum(cc.enrolled_count for cc in self.classes.values())
        lines = [
            f"Studierende: {len(self.students)} "
            f"({num_special} Gasthörer, {num_locked} gesperrt)",
            f"Dozenten: {len(self.professors)}",
            f"Fächer: {len(self.courses)}",
            f"Kurse: {len(self.classes)}",
            f"Belegte Plätze: {taken}/{seats}" if seats else "",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Persistenz ───

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datenbestand als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "AcademicData":
        """Lädt einen Datenbestand aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
