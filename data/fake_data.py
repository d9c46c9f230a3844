"""Testdaten-Generator für die Studienverwaltung.

Erzeugt einen realistischen Datenbestand ausschließlich über die
Verwaltungsoperationen, sodass alle Invarianten gelten.

Absichtliche Sonderfälle:
  1. Voller Kurs: ein Kurs mit kleiner Kapazität wird überbucht (Belegung abgelehnt)
  2. Gasthörer: ca. 15% der Studierenden, höchstens 2 Fächer, keine Noten
  3. Fehlzeiten: einzelne Studierende liegen unter 75% Anwesenheit
  4. Gesperrtes Semester: ein/e Studierende/r wird am Ende gesperrt
"""

import logging
import random
from typing import Optional

from config.schema import AppConfig
from config.defaults import (
    DEMO_COURSES,
    DEMO_DEPARTMENTS,
    DEMO_SCHEDULES,
    DEMO_STUDY_PROGRAMS,
    default_app_config,
)
from engine.registry import AcademicRegistry
from models.academic_data import AcademicData
from models.evaluation import EvaluationPolicy

logger = logging.getLogger(__name__)

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Andreas", "Bernd", "Christian", "Dieter", "Franz", "Jürgen", "Klaus",
    "Markus", "Norbert", "Stefan", "Tobias", "Yusuf", "Martin", "Robert",
    "Anna", "Birgit", "Christine", "Eva", "Iris", "Kathrin", "Lena",
    "Maria", "Olga", "Sandra", "Tanja", "Vera", "Xenia", "Zoe", "Monika",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hartmann", "Lange",
    "Krause", "Lehmann", "Köhler", "Kaiser", "Fuchs", "Weiß", "Vogel",
]

_TITLES = ["Prof. Dr.", "Dr.", "Prof."]


class DemoDataGenerator:
    """Generiert einen vollständigen Demo-Datenbestand (reproduzierbar per Seed)."""

    def __init__(self, config: Optional[AppConfig] = None, seed: Optional[int] = None,
                 num_students: int = 40, num_professors: int = 6) -> None:
        self.config = config or default_app_config()
        self.rng = random.Random(seed)
        self.num_students = num_students
        self.num_professors = num_professors
        self.registry = AcademicRegistry()
        self.rejected_enrollments = 0

    def _name(self) -> str:
        return f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"

    # ─── Dozenten ─────────────────────────────────────────────────────────────

    def _generate_professors(self) -> list[str]:
        ids = []
        for i in range(1, self.num_professors + 1):
            pid = f"P{i:02d}"
            name = f"{self.rng.choice(_TITLES)} {self._name()}"
            department = DEMO_DEPARTMENTS[(i - 1) % len(DEMO_DEPARTMENTS)]
            self.registry.register_professor(name, pid, department)
            ids.append(pid)
        return ids

    # ─── Fächer ───────────────────────────────────────────────────────────────

    def _generate_courses(self) -> None:
        for code, (name, hours, _) in DEMO_COURSES.items():
            self.registry.register_course(name, code, hours)
        for code, (_, _, prerequisites) in DEMO_COURSES.items():
            for prerequisite in prerequisites:
                self.registry.add_prerequisite(code, prerequisite)

    # ─── Kurse ────────────────────────────────────────────────────────────────

    def _generate_classes(self, professor_ids: list[str]) -> None:
        """1–2 Kurse pro Fach; jeder Dozent belegt jeden Termin höchstens einmal."""
        term = self.config.current_term
        used: dict[str, set[str]] = {pid: set() for pid in professor_ids}
        rotation = 0

        for code in DEMO_COURSES:
            for section in range(1, self.rng.choice([1, 1, 2]) + 1):
                pid = professor_ids[rotation % len(professor_ids)]
                rotation += 1
                free = [s for s in DEMO_SCHEDULES if s not in used[pid]]
                if not free:
                    continue
                schedule = self.rng.choice(free)
                used[pid].add(schedule)

                in_person = self.rng.random() < 0.75
                ok = self.registry.create_class(
                    code=f"{code}-{term.replace('.', '-')}-{section}",
                    course_code=code,
                    professor_id=pid,
                    term=term,
                    policy=self.rng.choice(list(EvaluationPolicy)),
                    is_in_person=in_person,
                    schedule=schedule,
                    capacity=self.rng.choice([15, 20, 25, 30, 40]),
                    room=f"H{self.rng.randint(1, 4)}-{self.rng.randint(1, 20):02d}"
                    if in_person else None,
                )
                if not ok:
                    logger.warning(f"Demo-Kurs nicht angelegt: {self.registry.last_error}")

        # Sonderfall 1: ein sehr kleiner Kurs, der sicher voll wird
        pid = professor_ids[0]
        free = [s for s in DEMO_SCHEDULES if s not in used[pid]]
        if free:
            self.registry.create_class(
                code=f"PROG1-{term.replace('.', '-')}-S", course_code="PROG1",
                professor_id=pid, term=term, policy=EvaluationPolicy.SIMPLE,
                is_in_person=True, schedule=free[0], capacity=3, room="Labor 1",
            )

    # ─── Studierende ──────────────────────────────────────────────────────────

    def _generate_students(self) -> list[str]:
        ids = []
        year = self.config.current_term.split(".")[0][-2:]
        for i in range(1, self.num_students + 1):
            sid = f"{year}{i:04d}"
            special = self.rng.random() < 0.15
            self.registry.register_student(
                self._name(), sid, self.rng.choice(DEMO_STUDY_PROGRAMS), special=special,
            )
            ids.append(sid)
        return ids

    # ─── Belegungen ───────────────────────────────────────────────────────────

    def _enroll_students(self, student_ids: list[str]) -> None:
        """Belegungen in Katalogreihenfolge, damit Voraussetzungen vorher belegt sind."""
        course_codes = list(DEMO_COURSES)
        for sid in student_ids:
            wanted = set(self.rng.sample(course_codes, k=self.rng.randint(2, 5)))
            for code in course_codes:
                if code not in wanted:
                    continue
                classes = self.registry.data.classes_of_course(code)
                if not classes:
                    continue
                cc = self.rng.choice(classes)
                if not self.registry.enroll(sid, code, cc.code):
                    self.rejected_enrollments += 1

    # ─── Bewertungen ──────────────────────────────────────────────────────────

    def _score(self) -> float:
        # halbe Noten, leicht nach oben verschoben
        return min(10.0, round(self.rng.triangular(0.0, 10.0, 7.5) * 2) / 2)

    def _record_evaluations(self) -> None:
        for cc in self.registry.list_classes():
            held = self.rng.choice([28, 30, 32])
            for sid in list(cc.roster):
                student = self.registry.get_student(sid)
                # Sonderfall 3: ~10% mit deutlichen Fehlzeiten
                low = held // 3 if self.rng.random() < 0.10 else int(held * 0.8)
                self.registry.record_attendance(cc.code, sid, held,
                                                self.rng.randint(low, held))
                if student.receives_grades:
                    self.registry.record_grades(
                        cc.code, sid,
                        self._score(), self._score(), self._score(),
                        self._score(), self._score(),
                    )

    # ─── Vollständiger Datensatz ──────────────────────────────────────────────

    def generate(self) -> AcademicData:
        """Erzeugt den vollständigen Datensatz als AcademicData-Objekt."""
        professor_ids = self._generate_professors()
        self._generate_courses()
        self._generate_classes(professor_ids)
        student_ids = self._generate_students()
        self._enroll_students(student_ids)
        self._record_evaluations()

        # Sonderfall 4
        if student_ids:
            self.registry.lock_semester(student_ids[-1])

        logger.info(
            f"Demo-Daten erzeugt: {len(student_ids)} Studierende, "
            f"{self.rejected_enrollments} abgelehnte Belegungen"
        )
        return self.registry.data

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: AcademicData) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Kategorie", style="bold cyan")
        table.add_column("Anzahl", justify="right")
        table.add_column("Details")

        num_special = sum(1 for s in data.students.values() if s.is_special)
        num_locked = sum(1 for s in data.students.values() if s.semester_locked)
        num_full = sum(1 for cc in data.classes.values() if cc.is_full)
        seats = sum(cc.enrolled_count for cc in data.classes.values())
        table.add_row("Dozenten", str(len(data.professors)), "")
        table.add_row("Fächer", str(len(data.courses)),
                      f"{sum(1 for c in data.courses.values() if c.prerequisites)} "
                      f"mit Voraussetzungen")
        table.add_row("Kurse", str(len(data.classes)), f"{num_full} voll")
        table.add_row("Studierende", str(len(data.students)),
                      f"{num_special} Gasthörer, {num_locked} gesperrt")
        table.add_row("Belegte Plätze", str(seats),
                      f"{self.rejected_enrollments} Belegungen abgelehnt")

        console.print(table)
