"""Konsistenzprüfung des Datenbestands.

Prüft die Invarianten zwischen Studierenden, Kursen, Fächern und Dozenten
als Sicherheitsnetz unabhängig von den Verwaltungsoperationen (z.B. nach
dem Laden handbearbeiteter Dateien).
"""

from collections import defaultdict
from typing import Literal

from pydantic import BaseModel

from models.academic_data import AcademicData
from models.evaluation import SCORE_MAX, SCORE_MIN


class ValidationViolation(BaseModel):
    """Eine einzelne Invarianten-Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "capacity_exceeded"
    description: str
    entity: str          # Kurs-Code / Matrikelnummer / Personalnummer / Fach-Code


class ValidationReport(BaseModel):
    """Ergebnis der Konsistenzprüfung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Konsistenzprüfung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=26)
        table.add_column("Entität", width=14)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ConsistencyValidator:
    """Prüft einen AcademicData-Bestand auf Invarianten-Verletzungen."""

    def validate(self, data: AcademicData) -> ValidationReport:
        violations: list[ValidationViolation] = []

        violations.extend(self._check_references(data))
        violations.extend(self._check_rosters(data))
        violations.extend(self._check_scores(data))
        violations.extend(self._check_attendance(data))
        violations.extend(self._check_locked_students(data))
        violations.extend(self._check_special_limit(data))
        violations.extend(self._check_schedule_conflicts(data))
        violations.extend(self._check_prerequisites(data))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_references(self, data: AcademicData) -> list[ValidationViolation]:
        """Kurse verweisen auf existierende Fächer und Dozenten."""
        violations: list[ValidationViolation] = []
        for cc in data.classes.values():
            if cc.course_code not in data.courses:
                violations.append(ValidationViolation(
                    severity="error", constraint="unknown_course", entity=cc.code,
                    description=f"Fach '{cc.course_code}' existiert nicht.",
                ))
            elif cc.code not in data.courses[cc.course_code].class_codes:
                violations.append(ValidationViolation(
                    severity="warning", constraint="course_link_missing", entity=cc.code,
                    description=f"Fach {cc.course_code} führt den Kurs nicht in seiner Liste.",
                ))
            if cc.professor_id not in data.professors:
                violations.append(ValidationViolation(
                    severity="error", constraint="unknown_professor", entity=cc.code,
                    description=f"Dozent/in '{cc.professor_id}' existiert nicht.",
                ))
        return violations

    def _check_rosters(self, data: AcademicData) -> list[ValidationViolation]:
        """Kapazität, Leistungsnachweise und Fachbelegung der Teilnehmer."""
        violations: list[ValidationViolation] = []
        for cc in data.classes.values():
            if len(cc.roster) > cc.capacity:
                violations.append(ValidationViolation(
                    severity="error", constraint="capacity_exceeded", entity=cc.code,
                    description=f"{len(cc.roster)} Teilnehmer bei Kapazität {cc.capacity}.",
                ))
            if set(cc.roster) != set(cc.records):
                violations.append(ValidationViolation(
                    severity="error", constraint="roster_record_mismatch", entity=cc.code,
                    description="Teilnehmerliste und Leistungsnachweise stimmen nicht überein.",
                ))
            for student_id in cc.roster:
                student = data.students.get(student_id)
                if student is None:
                    violations.append(ValidationViolation(
                        severity="error", constraint="unknown_student", entity=cc.code,
                        description=f"Teilnehmer '{student_id}' existiert nicht.",
                    ))
                elif not student.is_enrolled_in(cc.course_code):
                    violations.append(ValidationViolation(
                        severity="warning", constraint="course_not_enrolled",
                        entity=student_id,
                        description=(
                            f"Steht in {cc.code}, hat aber {cc.course_code} nicht belegt."
                        ),
                    ))
        return violations

    def _check_scores(self, data: AcademicData) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        for cc in data.classes.values():
            for student_id, card in cc.records.items():
                invalid = [v for v in card.components if not SCORE_MIN <= v <= SCORE_MAX]
                if invalid:
                    violations.append(ValidationViolation(
                        severity="error", constraint="score_out_of_range",
                        entity=student_id,
                        description=(
                            f"{cc.code}: Teilnoten außerhalb von "
                            f"[{SCORE_MIN:g}, {SCORE_MAX:g}]: {invalid}"
                        ),
                    ))
        return violations

    def _check_attendance(self, data: AcademicData) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        for cc in data.classes.values():
            for student_id, card in cc.records.items():
                if card.classes_held < 0 or not 0 <= card.classes_attended <= card.classes_held:
                    violations.append(ValidationViolation(
                        severity="error", constraint="attendance_out_of_range",
                        entity=student_id,
                        description=(
                            f"{cc.code}: {card.classes_attended} von {card.classes_held} "
                            f"Terminen besucht."
                        ),
                    ))
        return violations

    def _check_locked_students(self, data: AcademicData) -> list[ValidationViolation]:
        """Gesperrte Studierende haben weder Fachbelegungen noch Kursplätze."""
        violations: list[ValidationViolation] = []
        for student in data.students.values():
            if not student.semester_locked:
                continue
            held = data.classes_of_student(student.id)
            if student.enrolled_courses or held:
                violations.append(ValidationViolation(
                    severity="error", constraint="locked_but_enrolled", entity=student.id,
                    description=(
                        f"Semester gesperrt, aber {len(student.enrolled_courses)} Fächer / "
                        f"{len(held)} Kurse belegt."
                    ),
                ))
        return violations

    def _check_special_limit(self, data: AcademicData) -> list[ValidationViolation]:
        from models.student import SPECIAL_MAX_COURSES
        violations: list[ValidationViolation] = []
        for student in data.students.values():
            if student.is_special and len(student.enrolled_courses) > SPECIAL_MAX_COURSES:
                violations.append(ValidationViolation(
                    severity="error", constraint="special_course_limit", entity=student.id,
                    description=(
                        f"Gasthörer mit {len(student.enrolled_courses)} Fächern "
                        f"(max. {SPECIAL_MAX_COURSES})."
                    ),
                ))
        return violations

    def _check_schedule_conflicts(self, data: AcademicData) -> list[ValidationViolation]:
        """Kein Dozent hat zwei Kurse mit identischem Termin."""
        violations: list[ValidationViolation] = []
        seen: dict[tuple[str, str], list[str]] = defaultdict(list)
        for cc in data.classes.values():
            seen[(cc.professor_id, cc.schedule)].append(cc.code)
        for (professor_id, schedule), codes in seen.items():
            if len(codes) > 1:
                violations.append(ValidationViolation(
                    severity="error", constraint="professor_double_booking",
                    entity=professor_id,
                    description=f"Termin {schedule}: gleichzeitig {', '.join(codes)}.",
                ))
        return violations

    def _check_prerequisites(self, data: AcademicData) -> list[ValidationViolation]:
        violations: list[ValidationViolation] = []
        for course in data.courses.values():
            if course.code in course.prerequisites:
                violations.append(ValidationViolation(
                    severity="error", constraint="self_prerequisite", entity=course.code,
                    description="Fach ist Voraussetzung für sich selbst.",
                ))
            for code in course.prerequisites:
                if code not in data.courses:
                    violations.append(ValidationViolation(
                        severity="warning", constraint="unknown_prerequisite",
                        entity=course.code,
                        description=f"Voraussetzung '{code}' existiert nicht.",
                    ))
        return violations
