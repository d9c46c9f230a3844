"""Textdatei-Persistenz (semikolongetrennt, UTF-8, ein Datensatz pro Zeile).

Dateien im Datenverzeichnis:
  Studierende:  NORMAL|ESPECIAL;name;matrikel;studiengang[;gesperrt;fach1,fach2]
  Katalog:      ### ... ###                          (Abschnittsköpfe, ignoriert)
                PROF;name;personalnr;fachbereich
                DISC;name;code;stunden;vorauss1,vorauss2
                TURM;code;fach;dozent;semester;MEDIA_SIMPLES|MEDIA_PONDERADA;
                     true|false;termin;kapazitaet;raum
  Bewertungen:  kurs;matrikel;p1;p2;p3;uebungen;seminar;gehalten;besucht

Optionale Felder sind leere Strings, Dezimalzahlen nutzen '.' als Trenner.
Fehlende Dateien gelten beim ersten Start nicht als Fehler.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from engine.registry import AcademicRegistry
from models.academic_data import AcademicData
from models.course_class import check_attendance, check_scores
from models.evaluation import EvaluationPolicy
from models.exceptions import AcademicError
from models.student import StudentKind

logger = logging.getLogger(__name__)

SEPARATOR = ";"
LIST_SEPARATOR = ","

_KIND_TAGS = {StudentKind.STANDARD: "NORMAL", StudentKind.SPECIAL: "ESPECIAL"}
_KIND_BY_TAG = {tag: kind for kind, tag in _KIND_TAGS.items()}

_POLICY_TAGS = {
    EvaluationPolicy.SIMPLE: "MEDIA_SIMPLES",
    EvaluationPolicy.WEIGHTED: "MEDIA_PONDERADA",
}
_POLICY_BY_TAG = {tag: policy for policy, tag in _POLICY_TAGS.items()}


class TextStoreError(Exception):
    """Eine Zeile einer Datendatei ist fehlerhaft."""


class LoadReport(BaseModel):
    """Bericht über das Laden der Datendateien."""

    students_loaded: int = 0
    professors_loaded: int = 0
    courses_loaded: int = 0
    classes_loaded: int = 0
    records_loaded: int = 0
    missing_files: list[str] = []
    warnings: list[str] = []

    def print_rich(self) -> None:
        from rich.console import Console
        from rich.panel import Panel
        console = Console()
        lines = [f"[green]Studierende: {self.students_loaded}[/green]  "
                 f"[green]Dozenten: {self.professors_loaded}[/green]  "
                 f"[green]Fächer: {self.courses_loaded}[/green]  "
                 f"[green]Kurse: {self.classes_loaded}[/green]  "
                 f"[green]Bewertungen: {self.records_loaded}[/green]"]
        if self.missing_files:
            lines.append(f"\n[dim]Neu angelegt: {', '.join(self.missing_files)}[/dim]")
        if self.warnings:
            lines.append("\n[yellow]Warnungen:[/yellow]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        console.print(Panel("\n".join(lines), title="Daten geladen", border_style="cyan"))


def _field(text: Optional[str]) -> str:
    """Macht einen Text zeilen- und trennzeichensicher."""
    if text is None:
        return ""
    return text.replace(SEPARATOR, ",").replace("\n", " ").replace("\r", " ")


def _number(value: float) -> str:
    return repr(float(value))


class TextStore:
    """Liest und schreibt den Datenbestand als drei Textdateien."""

    STUDENTS_FILE = "students.txt"
    CATALOG_FILE = "catalog.txt"
    EVALUATIONS_FILE = "evaluations.txt"

    def __init__(self, directory: Path,
                 students_file: Optional[str] = None,
                 catalog_file: Optional[str] = None,
                 evaluations_file: Optional[str] = None) -> None:
        self.directory = Path(directory)
        self.students_path = self.directory / (students_file or self.STUDENTS_FILE)
        self.catalog_path = self.directory / (catalog_file or self.CATALOG_FILE)
        self.evaluations_path = self.directory / (evaluations_file or self.EVALUATIONS_FILE)
        self.last_error: Optional[str] = None
        self.last_report = LoadReport()

    @classmethod
    def from_config(cls, storage) -> "TextStore":
        """Erzeugt den Store aus einer StorageConfig."""
        return cls(Path(storage.data_dir), storage.students_file,
                   storage.catalog_file, storage.evaluations_file)

    # ─── Speichern ───────────────────────────────────────────────────────────

    def save(self, data: AcademicData) -> bool:
        """Schreibt alle drei Dateien. False bei I/O-Fehler (Grund in last_error)."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._write(self.students_path, self._student_lines(data))
            self._write(self.catalog_path, self._catalog_lines(data))
            self._write(self.evaluations_path, self._evaluation_lines(data))
        except OSError as e:
            self.last_error = f"Fehler beim Speichern: {e}"
            logger.error(self.last_error)
            return False
        self.last_error = None
        logger.info(f"Daten gespeichert: {self.directory}")
        return True

    @staticmethod
    def _write(path: Path, lines: list[str]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")

    def _student_lines(self, data: AcademicData) -> list[str]:
        lines = []
        for s in data.students.values():
            lines.append(SEPARATOR.join([
                _KIND_TAGS[s.kind],
                _field(s.name),
                _field(s.id),
                _field(s.course_of_study),
                "true" if s.semester_locked else "false",
                LIST_SEPARATOR.join(_field(c) for c in s.enrolled_courses),
            ]))
        return lines

    def _catalog_lines(self, data: AcademicData) -> list[str]:
        lines = ["### PROFESSORES ###"]
        for p in data.professors.values():
            lines.append(SEPARATOR.join(["PROF", _field(p.name), _field(p.id),
                                         _field(p.department)]))
        lines.append("### DISCIPLINAS ###")
        for c in data.courses.values():
            lines.append(SEPARATOR.join([
                "DISC", _field(c.name), _field(c.code), str(c.credit_hours),
                LIST_SEPARATOR.join(_field(p) for p in c.prerequisites),
            ]))
        lines.append("### TURMAS ###")
        for cc in data.classes.values():
            lines.append(SEPARATOR.join([
                "TURM", _field(cc.code), _field(cc.course_code), _field(cc.professor_id),
                _field(cc.term), _POLICY_TAGS[cc.policy],
                "true" if cc.is_in_person else "false",
                _field(cc.schedule), str(cc.capacity), _field(cc.room),
            ]))
        return lines

    def _evaluation_lines(self, data: AcademicData) -> list[str]:
        lines = []
        for cc in data.classes.values():
            for student_id in cc.roster:
                card = cc.records[student_id]
                lines.append(SEPARATOR.join(
                    [_field(cc.code), _field(student_id)]
                    + [_number(v) for v in card.components]
                    + [str(card.classes_held), str(card.classes_attended)]
                ))
        return lines

    # ─── Laden ───────────────────────────────────────────────────────────────

    def load(self) -> Optional[AcademicData]:
        """Lädt alle Dateien in einen neuen Datenbestand.

        Fehlerhafte Zeilen werden übersprungen und im LoadReport vermerkt.
        Gibt None zurück, wenn eine Datei nicht gelesen werden kann.
        """
        report = LoadReport()
        self.last_report = report
        registry = AcademicRegistry()
        try:
            self._load_catalog(registry, report)
            self._load_students(registry, report)
            self._load_evaluations(registry, report)
        except OSError as e:
            self.last_error = f"Fehler beim Laden: {e}"
            logger.error(self.last_error)
            return None
        for w in report.warnings:
            logger.warning(w)
        self.last_error = None
        return registry.data

    def _read_lines(self, path: Path, report: LoadReport) -> list[tuple[int, list[str]]]:
        if not path.exists():
            report.missing_files.append(path.name)
            logger.info(f"Datei fehlt (Erststart): {path}")
            return []
        rows = []
        with open(path, "r", encoding="utf-8") as f:
            for number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")
                if not line.strip() or line.startswith("###"):
                    continue
                rows.append((number, line.split(SEPARATOR)))
        return rows

    def _load_catalog(self, registry: AcademicRegistry, report: LoadReport) -> None:
        prerequisites: list[tuple[str, list[str]]] = []
        classes: list[tuple[int, list[str]]] = []

        for number, parts in self._read_lines(self.catalog_path, report):
            where = f"{self.catalog_path.name}:{number}"
            try:
                tag = parts[0]
                if tag == "PROF":
                    self._expect(parts, 4, where)
                    if registry.register_professor(parts[1], parts[2], parts[3]):
                        report.professors_loaded += 1
                    else:
                        raise TextStoreError(f"{where}: {registry.last_error}")
                elif tag == "DISC":
                    self._expect(parts, 5, where)
                    if registry.register_course(parts[1], parts[2], int(parts[3])):
                        report.courses_loaded += 1
                    else:
                        raise TextStoreError(f"{where}: {registry.last_error}")
                    codes = [c for c in parts[4].split(LIST_SEPARATOR) if c]
                    if codes:
                        prerequisites.append((parts[2].strip(), codes))
                elif tag == "TURM":
                    self._expect(parts, 10, where)
                    classes.append((number, parts))
                else:
                    raise TextStoreError(f"{where}: unbekannter Satztyp '{tag}'")
            except (TextStoreError, ValueError) as e:
                report.warnings.append(str(e))

        # Voraussetzungen erst nach allen Fächern, da Vorwärtsverweise erlaubt sind
        for course_code, codes in prerequisites:
            for code in codes:
                if not registry.add_prerequisite(course_code, code):
                    report.warnings.append(
                        f"{self.catalog_path.name}: {registry.last_error}"
                    )

        for number, parts in classes:
            where = f"{self.catalog_path.name}:{number}"
            try:
                policy = _POLICY_BY_TAG.get(parts[5])
                if policy is None:
                    raise TextStoreError(f"{where}: unbekanntes Bewertungsverfahren '{parts[5]}'")
                ok = registry.create_class(
                    code=parts[1], course_code=parts[2], professor_id=parts[3],
                    term=parts[4], policy=policy,
                    is_in_person=parts[6].strip().lower() == "true",
                    schedule=parts[7], capacity=int(parts[8]),
                    room=parts[9] or None,
                )
                if not ok:
                    raise TextStoreError(f"{where}: {registry.last_error}")
                report.classes_loaded += 1
            except (TextStoreError, ValueError) as e:
                report.warnings.append(str(e))

    def _load_students(self, registry: AcademicRegistry, report: LoadReport) -> None:
        for number, parts in self._read_lines(self.students_path, report):
            where = f"{self.students_path.name}:{number}"
            try:
                if len(parts) not in (4, 6):
                    raise TextStoreError(
                        f"{where}: 4 oder 6 Felder erwartet, {len(parts)} gefunden"
                    )
                kind = _KIND_BY_TAG.get(parts[0])
                if kind is None:
                    raise TextStoreError(f"{where}: unbekannter Studierendentyp '{parts[0]}'")
                if not registry.register_student(parts[1], parts[2], parts[3],
                                                 special=kind is StudentKind.SPECIAL):
                    raise TextStoreError(f"{where}: {registry.last_error}")
                report.students_loaded += 1
                if len(parts) == 6:
                    student = registry.get_student(parts[2].strip())
                    student.semester_locked = parts[4].strip().lower() == "true"
                    # Bestehende Belegungen werden ohne erneute Berechtigungsprüfung übernommen
                    for code in parts[5].split(LIST_SEPARATOR):
                        if not code:
                            continue
                        if registry.get_course(code) is None:
                            report.warnings.append(f"{where}: unbekanntes Fach '{code}'")
                        elif code not in student.enrolled_courses:
                            student.enrolled_courses.append(code)
            except TextStoreError as e:
                report.warnings.append(str(e))

    def _load_evaluations(self, registry: AcademicRegistry, report: LoadReport) -> None:
        for number, parts in self._read_lines(self.evaluations_path, report):
            where = f"{self.evaluations_path.name}:{number}"
            try:
                self._expect(parts, 9, where)
                cc = registry.get_class(parts[0])
                student = registry.get_student(parts[1])
                if cc is None or student is None:
                    raise TextStoreError(
                        f"{where}: Kurs '{parts[0]}' oder Studierende/r '{parts[1]}' unbekannt"
                    )
                scores = [float(v) for v in parts[2:7]]
                held, attended = int(parts[7]), int(parts[8])
                try:
                    check_scores(scores)
                    # 0 von 0: Anwesenheit noch nicht erfasst
                    if held or attended:
                        check_attendance(held, attended)
                except AcademicError as e:
                    raise TextStoreError(f"{where}: {e}") from e
                if not cc.enroll_student(student):
                    raise TextStoreError(
                        f"{where}: {student.id} konnte nicht in {cc.code} eingetragen werden"
                    )
                # Ältere Studierendendateien (4 Felder) führen keine Belegungen
                if not student.is_enrolled_in(cc.course_code):
                    student.enrolled_courses.append(cc.course_code)
                card = cc.get_score_card(student)
                card.set_scores(*scores)
                card.set_attendance(held, attended)
                report.records_loaded += 1
            except (TextStoreError, ValueError) as e:
                report.warnings.append(str(e))

    @staticmethod
    def _expect(parts: list[str], count: int, where: str) -> None:
        if len(parts) != count:
            raise TextStoreError(f"{where}: {count} Felder erwartet, {len(parts)} gefunden")
