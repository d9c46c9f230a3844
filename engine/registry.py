"""AcademicRegistry – Verwaltungsoperationen über dem Datenbestand.

Alle Operationen liefern True/False. Bei False steht der Grund in
``last_error``. Ungültige Noten bzw. Anwesenheiten und Aufrufe für
Studierende außerhalb der Teilnehmerliste werden als Ausnahme
weitergereicht (siehe models.exceptions).
"""

import logging
from typing import Optional

from models.academic_data import AcademicData
from models.course import Course
from models.course_class import CourseClass
from models.evaluation import EvaluationPolicy, ScoreCard
from models.professor import Professor
from models.student import Student, StudentKind

logger = logging.getLogger(__name__)

# Trennzeichen der Textdateien, in Kennungen und Codes nicht erlaubt
RESERVED_CHARS = (";", ",")


def _has_reserved(key: str) -> bool:
    return any(ch in key for ch in RESERVED_CHARS)


class AcademicRegistry:
    """Verzeichnis der Studierenden, Dozenten, Fächer und Kurse.

    Verwendung:
        registry = AcademicRegistry()
        registry.register_course("Analysis 1", "CALC1", 60)
        registry.create_class("CALC1-2024-1", "CALC1", "P01", ...)
        registry.enroll("A", "CALC1", "CALC1-2024-1")
    """

    def __init__(self, data: Optional[AcademicData] = None) -> None:
        self.data = data if data is not None else AcademicData()
        self.last_error: Optional[str] = None

    def _fail(self, message: str) -> bool:
        self.last_error = message
        logger.info(f"Abgelehnt: {message}")
        return False

    def _ok(self) -> bool:
        self.last_error = None
        return True

    def _reject_key(self, label: str, key: str) -> bool:
        return self._fail(
            f"{label} '{key}' darf keines der Zeichen {' '.join(RESERVED_CHARS)} enthalten."
        )

    # ─── Nachschlagen ────────────────────────────────────────────────────────

    def get_student(self, student_id: str) -> Optional[Student]:
        return self.data.students.get(student_id)

    def get_professor(self, professor_id: str) -> Optional[Professor]:
        return self.data.professors.get(professor_id)

    def get_course(self, code: str) -> Optional[Course]:
        return self.data.courses.get(code)

    def get_class(self, code: str) -> Optional[CourseClass]:
        return self.data.classes.get(code)

    def list_students(self) -> list[Student]:
        return list(self.data.students.values())

    def list_professors(self) -> list[Professor]:
        return list(self.data.professors.values())

    def list_courses(self) -> list[Course]:
        return list(self.data.courses.values())

    def list_classes(self) -> list[CourseClass]:
        return list(self.data.classes.values())

    def classes_of_student(self, student_id: str,
                           term: Optional[str] = None) -> list[CourseClass]:
        return self.data.classes_of_student(student_id, term)

    def classes_of_professor(self, professor_id: str) -> list[CourseClass]:
        return self.data.classes_of_professor(professor_id)

    def get_score_card(self, class_code: str, student_id: str) -> Optional[ScoreCard]:
        cc = self.get_class(class_code)
        student = self.get_student(student_id)
        if cc is None or student is None:
            return None
        return cc.get_score_card(student)

    # ─── Studierende ─────────────────────────────────────────────────────────

    def register_student(self, name: str, student_id: str, course_of_study: str,
                         special: bool = False) -> bool:
        """Legt einen Studierenden an (regulär oder Gasthörer)."""
        if _has_reserved(student_id):
            return self._reject_key("Matrikelnummer", student_id)
        if student_id.strip() in self.data.students:
            return self._fail(f"Matrikelnummer {student_id} ist bereits vergeben.")
        kind = StudentKind.SPECIAL if special else StudentKind.STANDARD
        try:
            student = Student(name=name, id=student_id,
                              course_of_study=course_of_study.strip(), kind=kind)
        except ValueError as e:
            return self._fail(f"Ungültige Studierendendaten: {e}")
        self.data.students[student.id] = student
        logger.info(f"Studierende/r angelegt: {student}")
        return self._ok()

    def edit_student(self, student_id: str, name: str, course_of_study: str) -> bool:
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        try:
            student.rename(name)
        except ValueError as e:
            return self._fail(str(e))
        student.course_of_study = course_of_study.strip()
        return self._ok()

    def enroll(self, student_id: str, course_code: str, class_code: str) -> bool:
        """Belegt Fach und Kurs in einem Schritt.

        Lehnt der Kurs ab (voll oder bereits eingetragen), wird die
        Fachbelegung des Studierenden zurückgenommen.
        """
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        course = self.get_course(course_code)
        if course is None:
            return self._fail(f"Fach nicht gefunden: {course_code}")
        cc = self.get_class(class_code)
        if cc is None:
            return self._fail(f"Kurs nicht gefunden: {class_code}")
        if cc.course_code != course.code:
            return self._fail(
                f"Kurs {class_code} gehört nicht zum Fach {course_code}."
            )
        if student.semester_locked:
            return self._fail(f"Semester von {student.id} ist gesperrt.")
        if student.is_enrolled_in(course.code):
            return self._fail(f"{student.id} hat {course.code} bereits belegt.")
        if not student.enroll(course):
            if student.is_special:
                return self._fail(
                    f"Gasthörer {student.id} hat bereits die Höchstzahl an Fächern belegt."
                )
            missing = [p for p in course.prerequisites if p not in student.enrolled_courses]
            return self._fail(
                f"{student.id} erfüllt die Voraussetzungen für {course.code} nicht "
                f"(fehlend: {', '.join(missing)})."
            )
        if not cc.enroll_student(student):
            student.withdraw(course)
            if cc.is_full:
                return self._fail(f"Kurs {cc.code} ist voll ({cc.capacity} Plätze).")
            return self._fail(f"{student.id} steht bereits auf der Liste von {cc.code}.")
        logger.info(f"Belegung: {student.id} → {cc.code}")
        return self._ok()

    def withdraw(self, student_id: str, course_code: str) -> bool:
        """Gibt ein Fach zurück und trägt den Studierenden aus dessen Kursen aus."""
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        course = self.get_course(course_code)
        if course is None:
            return self._fail(f"Fach nicht gefunden: {course_code}")
        for cc in self.data.classes_of_course(course.code):
            cc.withdraw_student(student)
        if not student.withdraw(course):
            return self._fail(f"{student.id} hat {course.code} nicht belegt.")
        logger.info(f"Fach zurückgegeben: {student.id} ✗ {course.code}")
        return self._ok()

    def lock_semester(self, student_id: str) -> bool:
        """Sperrt das Semester: alle Kursplätze und Belegungen werden entfernt."""
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        for cc in self.data.classes_of_student(student.id):
            cc.withdraw_student(student)
        student.lock_semester()
        logger.info(f"Semester gesperrt: {student.id}")
        return self._ok()

    def unlock_semester(self, student_id: str) -> bool:
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        student.unlock_semester()
        return self._ok()

    # ─── Dozenten ────────────────────────────────────────────────────────────

    def register_professor(self, name: str, professor_id: str, department: str) -> bool:
        if _has_reserved(professor_id):
            return self._reject_key("Personalnummer", professor_id)
        if professor_id.strip() in self.data.professors:
            return self._fail(f"Personalnummer {professor_id} ist bereits vergeben.")
        try:
            professor = Professor(name=name, id=professor_id,
                                  department=department.strip())
        except ValueError as e:
            return self._fail(f"Ungültige Dozentendaten: {e}")
        self.data.professors[professor.id] = professor
        logger.info(f"Dozent/in angelegt: {professor}")
        return self._ok()

    def edit_professor(self, professor_id: str, name: str, department: str) -> bool:
        professor = self.get_professor(professor_id)
        if professor is None:
            return self._fail(f"Dozent/in nicht gefunden: {professor_id}")
        try:
            professor.rename(name)
        except ValueError as e:
            return self._fail(str(e))
        professor.department = department.strip()
        return self._ok()

    # ─── Fächer ──────────────────────────────────────────────────────────────

    def register_course(self, name: str, code: str, credit_hours: int) -> bool:
        code = code.strip()
        if not code or not name.strip():
            return self._fail("Name und Code des Fachs dürfen nicht leer sein.")
        if _has_reserved(code):
            return self._reject_key("Fach-Code", code)
        if code in self.data.courses:
            return self._fail(f"Fach-Code {code} ist bereits vergeben.")
        if credit_hours < 0:
            return self._fail(f"Stundenumfang muss ≥ 0 sein (ist {credit_hours}).")
        course = Course(name=name.strip(), code=code, credit_hours=credit_hours)
        self.data.courses[code] = course
        logger.info(f"Fach angelegt: {course}")
        return self._ok()

    def edit_course(self, code: str, name: str, credit_hours: int) -> bool:
        course = self.get_course(code)
        if course is None:
            return self._fail(f"Fach nicht gefunden: {code}")
        if not name.strip():
            return self._fail("Name des Fachs darf nicht leer sein.")
        if credit_hours < 0:
            return self._fail(f"Stundenumfang muss ≥ 0 sein (ist {credit_hours}).")
        course.name = name.strip()
        course.credit_hours = credit_hours
        return self._ok()

    def add_prerequisite(self, course_code: str, prerequisite_code: str) -> bool:
        course = self.get_course(course_code)
        prerequisite = self.get_course(prerequisite_code)
        if course is None or prerequisite is None:
            return self._fail(
                f"Fach oder Voraussetzung nicht gefunden: {course_code} / {prerequisite_code}"
            )
        if course.code == prerequisite.code:
            return self._fail(f"{course.code} kann nicht Voraussetzung für sich selbst sein.")
        if not course.add_prerequisite(prerequisite.code):
            return self._fail(
                f"{prerequisite.code} ist bereits Voraussetzung von {course.code}."
            )
        return self._ok()

    def remove_prerequisite(self, course_code: str, prerequisite_code: str) -> bool:
        course = self.get_course(course_code)
        if course is None:
            return self._fail(f"Fach nicht gefunden: {course_code}")
        if not course.remove_prerequisite(prerequisite_code):
            return self._fail(
                f"{prerequisite_code} ist keine Voraussetzung von {course_code}."
            )
        return self._ok()

    # ─── Kurse ───────────────────────────────────────────────────────────────

    def create_class(
        self,
        code: str,
        course_code: str,
        professor_id: str,
        term: str,
        policy: EvaluationPolicy,
        is_in_person: bool,
        schedule: str,
        capacity: int,
        room: Optional[str] = None,
    ) -> bool:
        """Legt einen Kurs an und verknüpft ihn mit Fach und Dozent.

        Terminkonflikte werden über exakte Gleichheit des Termin-Tokens
        erkannt, nicht über Zeitüberschneidung.
        """
        code = code.strip()
        if _has_reserved(code):
            return self._reject_key("Kurs-Code", code)
        if code in self.data.classes:
            return self._fail(f"Es existiert bereits ein Kurs mit dem Code {code}.")
        course = self.get_course(course_code)
        if course is None:
            return self._fail(f"Fach nicht gefunden: {course_code}")
        professor = self.get_professor(professor_id)
        if professor is None:
            return self._fail(f"Dozent/in nicht gefunden: {professor_id}")
        for existing in self.data.classes_of_professor(professor.id):
            if existing.schedule == schedule:
                return self._fail(
                    f"{professor.name} unterrichtet bereits zum Termin {schedule} "
                    f"({existing.code})."
                )
        try:
            cc = CourseClass(
                code=code, course_code=course.code, professor_id=professor.id,
                term=term.strip(), policy=policy, is_in_person=is_in_person,
                schedule=schedule, capacity=capacity,
            )
        except ValueError as e:
            return self._fail(f"Ungültige Kursdaten: {e}")
        if room:
            cc.set_room(room)

        self.data.classes[code] = cc
        course.add_class(code)
        professor.add_class(code)
        logger.info(f"Kurs angelegt: {cc}")
        return self._ok()

    def set_room(self, class_code: str, room: str) -> bool:
        cc = self.get_class(class_code)
        if cc is None:
            return self._fail(f"Kurs nicht gefunden: {class_code}")
        if not cc.set_room(room):
            return self._fail(f"Kurs {class_code} ist kein Präsenzkurs.")
        return self._ok()

    # ─── Bewertung ───────────────────────────────────────────────────────────

    def record_grades(self, class_code: str, student_id: str, p1: float, p2: float,
                      p3: float, exercise_score: float, seminar_score: float) -> bool:
        """Trägt Noten ein. Validierungs- und Listenfehler werden als Ausnahme gemeldet."""
        cc = self.get_class(class_code)
        if cc is None:
            return self._fail(f"Kurs nicht gefunden: {class_code}")
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        if not cc.record_grades(student, p1, p2, p3, exercise_score, seminar_score):
            return self._fail(f"Gasthörer {student.id} erhält keine Noten.")
        return self._ok()

    def record_attendance(self, class_code: str, student_id: str,
                          classes_held: int, classes_attended: int) -> bool:
        cc = self.get_class(class_code)
        if cc is None:
            return self._fail(f"Kurs nicht gefunden: {class_code}")
        student = self.get_student(student_id)
        if student is None:
            return self._fail(f"Studierende/r nicht gefunden: {student_id}")
        cc.record_attendance(student, classes_held, classes_attended)
        return self._ok()
