"""Verwaltungsmenü mit drei Modi: Studierende, Fächer/Kurse, Bewertung.

Nach jeder erfolgreichen Änderung wird bei aktivem Autosave gespeichert,
beim Verlassen immer.
"""

from typing import Callable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import AppConfig
from data.text_store import TextStore
from engine.registry import AcademicRegistry
from export import reports
from export.tui_renderer import (
    render_class_rows,
    render_course_rows,
    render_professor_rows,
    render_roster_rows,
    render_student_rows,
)
from models.evaluation import PASSING_ATTENDANCE, EvaluationPolicy
from models.exceptions import AcademicError


class AdminMenu:
    """Interaktive Verwaltung über rich-Prompts."""

    def __init__(self, registry: AcademicRegistry, store: Optional[TextStore],
                 config: AppConfig, console: Optional[Console] = None) -> None:
        self.registry = registry
        self.store = store
        self.config = config
        self.console = console or Console()

    # ─── Hauptschleife ───

    def run(self) -> None:
        modes: dict[str, tuple[str, Callable[[], None]]] = {
            "1": ("Studierende", self.student_mode),
            "2": ("Fächer & Kurse", self.catalog_mode),
            "3": ("Bewertung & Anwesenheit", self.evaluation_mode),
        }
        try:
            while True:
                self.console.print()
                self.console.print(Panel(
                    f"[bold]{self.config.institution_name}[/bold]\n"
                    f"[dim]{self.registry.data.summary()}[/dim]",
                    title="[bold cyan]Studienverwaltung[/bold cyan]",
                    border_style="cyan",
                ))
                for key, (label, _) in modes.items():
                    self.console.print(f"  [bold]{key}.[/bold] {label}")
                self.console.print("  [bold]0.[/bold] Beenden")
                choice = Prompt.ask("\nAuswahl", default="0")
                if choice == "0":
                    break
                if choice in modes:
                    modes[choice][1]()
                else:
                    self.console.print("[yellow]Ungültige Auswahl.[/yellow]")
        finally:
            self._save()

    def _submenu(self, title: str,
                 actions: dict[str, tuple[str, Callable[[], None]]]) -> None:
        while True:
            self.console.print()
            self.console.print(Panel(f"[bold]{title}[/bold]", border_style="cyan"))
            for key, (label, _) in actions.items():
                self.console.print(f"  [bold]{key}.[/bold] {label}")
            self.console.print("  [bold]0.[/bold] Zurück")
            choice = Prompt.ask("\nAuswahl", default="0")
            if choice == "0":
                return
            if choice not in actions:
                self.console.print("[yellow]Ungültige Auswahl.[/yellow]")
                continue
            try:
                actions[choice][1]()
            except AcademicError as e:
                self.console.print(f"Fehler: {e}", style="red", markup=False)

    # ─── Ergebnis & Speichern ───

    def _result(self, ok: bool, success: str) -> bool:
        if ok:
            self.console.print(f"[green]✓[/green] {success}")
            if self.config.storage.autosave:
                self._save()
        else:
            self.console.print(f"Fehler: {self.registry.last_error}", style="red", markup=False)
        return ok

    def _save(self) -> None:
        if self.store is None:
            return
        if not self.store.save(self.registry.data):
            self.console.print(self.store.last_error, style="red", markup=False)

    def _table(self, title: str, header: list[str], rows: list[list[str]]) -> None:
        if not rows:
            self.console.print(f"[dim]Keine Einträge: {title}[/dim]")
            return
        table = Table(title=title, box=box.ROUNDED)
        for col in header:
            table.add_column(col)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)

    # ─── Modus 1: Studierende ───

    def student_mode(self) -> None:
        self._submenu("Studierende", {
            "1": ("Studierende/n anlegen", self.register_student),
            "2": ("Studierende/n bearbeiten", self.edit_student),
            "3": ("Studierende auflisten", self.list_students),
            "4": ("Fach belegen", self.enroll),
            "5": ("Fach zurückgeben", self.withdraw),
            "6": ("Semester sperren", self.lock_semester),
            "7": ("Semestersperre aufheben", self.unlock_semester),
        })

    def register_student(self) -> None:
        name = Prompt.ask("Name")
        student_id = Prompt.ask("Matrikelnummer")
        program = Prompt.ask("Studiengang")
        special = Confirm.ask("Gasthörer/in?", default=False)
        self._result(
            self.registry.register_student(name, student_id, program, special=special),
            "Studierende/r angelegt.",
        )

    def edit_student(self) -> None:
        student = self.registry.get_student(Prompt.ask("Matrikelnummer"))
        if student is None:
            self.console.print("[red]Fehler: Studierende/r nicht gefunden.[/red]")
            return
        name = Prompt.ask("Name", default=student.name)
        program = Prompt.ask("Studiengang", default=student.course_of_study)
        self._result(self.registry.edit_student(student.id, name, program),
                     "Studierende/r geändert.")

    def list_students(self) -> None:
        self._table("Studierende", *render_student_rows(self.registry.data))

    def enroll(self) -> None:
        student_id = Prompt.ask("Matrikelnummer")
        course_code = Prompt.ask("Fach-Code")
        classes = self.registry.data.classes_of_course(course_code)
        if classes:
            self.console.print("Kurse: " + ", ".join(
                f"{cc.code} ({cc.enrolled_count}/{cc.capacity})" for cc in classes
            ))
        class_code = Prompt.ask("Kurs-Code")
        self._result(self.registry.enroll(student_id, course_code, class_code),
                     "Belegung durchgeführt.")

    def withdraw(self) -> None:
        student_id = Prompt.ask("Matrikelnummer")
        course_code = Prompt.ask("Fach-Code")
        self._result(self.registry.withdraw(student_id, course_code),
                     "Fach zurückgegeben.")

    def lock_semester(self) -> None:
        student_id = Prompt.ask("Matrikelnummer")
        if not Confirm.ask("Alle Belegungen werden entfernt. Fortfahren?", default=False):
            return
        self._result(self.registry.lock_semester(student_id), "Semester gesperrt.")

    def unlock_semester(self) -> None:
        self._result(self.registry.unlock_semester(Prompt.ask("Matrikelnummer")),
                     "Semestersperre aufgehoben.")

    # ─── Modus 2: Fächer & Kurse ───

    def catalog_mode(self) -> None:
        self._submenu("Fächer & Kurse", {
            "1": ("Fach anlegen", self.register_course),
            "2": ("Voraussetzung hinzufügen", self.add_prerequisite),
            "3": ("Kurs anlegen", self.create_class),
            "4": ("Raum festlegen", self.set_room),
            "5": ("Fächer auflisten", self.list_courses),
            "6": ("Kurse auflisten", self.list_classes),
            "7": ("Dozent/in anlegen", self.register_professor),
            "8": ("Dozenten auflisten", self.list_professors),
        })

    def register_course(self) -> None:
        name = Prompt.ask("Name")
        code = Prompt.ask("Code")
        hours = IntPrompt.ask("Stundenumfang", default=60)
        self._result(self.registry.register_course(name, code, hours), "Fach angelegt.")

    def add_prerequisite(self) -> None:
        course_code = Prompt.ask("Fach-Code")
        prerequisite = Prompt.ask("Code der Voraussetzung")
        self._result(self.registry.add_prerequisite(course_code, prerequisite),
                     "Voraussetzung hinzugefügt.")

    def create_class(self) -> None:
        defaults = self.config.class_defaults
        code = Prompt.ask("Kurs-Code")
        course_code = Prompt.ask("Fach-Code")
        professor_id = Prompt.ask("Personalnummer Dozent/in")
        term = Prompt.ask("Semester", default=self.config.current_term)
        policy = Prompt.ask(
            "Bewertung", choices=[p.value for p in EvaluationPolicy],
            default=defaults.policy.value,
        )
        in_person = Confirm.ask("Präsenzkurs?", default=defaults.in_person)
        room = Prompt.ask("Raum", default="") if in_person else ""
        schedule = Prompt.ask("Termin (z.B. MO 14:00-15:40)")
        capacity = IntPrompt.ask("Kapazität", default=defaults.capacity)
        self._result(
            self.registry.create_class(
                code, course_code, professor_id, term, EvaluationPolicy(policy),
                in_person, schedule, capacity, room=room or None,
            ),
            "Kurs angelegt.",
        )

    def set_room(self) -> None:
        class_code = Prompt.ask("Kurs-Code")
        room = Prompt.ask("Raum")
        self._result(self.registry.set_room(class_code, room), "Raum festgelegt.")

    def list_courses(self) -> None:
        self._table("Fächer", *render_course_rows(self.registry.data))

    def list_classes(self) -> None:
        self._table("Kurse", *render_class_rows(self.registry.data))

    def register_professor(self) -> None:
        name = Prompt.ask("Name")
        professor_id = Prompt.ask("Personalnummer")
        department = Prompt.ask("Fachbereich")
        self._result(self.registry.register_professor(name, professor_id, department),
                     "Dozent/in angelegt.")

    def list_professors(self) -> None:
        self._table("Dozenten", *render_professor_rows(self.registry.data))

    # ─── Modus 3: Bewertung ───

    def evaluation_mode(self) -> None:
        self._submenu("Bewertung & Anwesenheit", {
            "1": ("Noten eintragen", self.record_grades),
            "2": ("Anwesenheit eintragen", self.record_attendance),
            "3": ("Bericht: Kurs", self.class_report),
            "4": ("Bericht: Fach", self.course_report),
            "5": ("Bericht: Dozent/in", self.professor_report),
            "6": ("Notenspiegel", self.transcript),
        })

    def _ask_class(self):
        cc = self.registry.get_class(Prompt.ask("Kurs-Code"))
        if cc is None:
            self.console.print("[red]Fehler: Kurs nicht gefunden.[/red]")
            return None
        self._table(f"Teilnehmer {cc.code} ({cc.policy.label})",
                    *render_roster_rows(cc, self.registry.data))
        return cc

    def record_grades(self) -> None:
        cc = self._ask_class()
        if cc is None:
            return
        student_id = Prompt.ask("Matrikelnummer")
        scores = [FloatPrompt.ask(label) for label in ("P1", "P2", "P3", "Übungen", "Seminar")]
        self._result(self.registry.record_grades(cc.code, student_id, *scores),
                     "Noten eingetragen.")

    def record_attendance(self) -> None:
        cc = self._ask_class()
        if cc is None:
            return
        student_id = Prompt.ask("Matrikelnummer")
        held = IntPrompt.ask("Gehaltene Termine")
        attended = IntPrompt.ask("Besuchte Termine")
        if self._result(self.registry.record_attendance(cc.code, student_id, held, attended),
                        "Anwesenheit eingetragen."):
            card = self.registry.get_score_card(cc.code, student_id)
            if card is not None and card.attendance_percentage() < PASSING_ATTENDANCE:
                self.console.print(
                    f"[yellow]⚠  Anwesenheit unter {PASSING_ATTENDANCE:.0f}% – "
                    f"Nichtbestehen wegen Fehlzeiten droht.[/yellow]"
                )

    def class_report(self) -> None:
        self.console.print(reports.class_report(self.registry.data, Prompt.ask("Kurs-Code")),
                           markup=False)

    def course_report(self) -> None:
        self.console.print(reports.course_report(self.registry.data, Prompt.ask("Fach-Code")),
                           markup=False)

    def professor_report(self) -> None:
        self.console.print(
            reports.professor_report(self.registry.data, Prompt.ask("Personalnummer")),
            markup=False,
        )

    def transcript(self) -> None:
        student_id = Prompt.ask("Matrikelnummer")
        term = Prompt.ask("Semester", default=self.config.current_term)
        details = Confirm.ask("Kursdetails anzeigen?", default=False)
        self.console.print(
            reports.student_transcript(self.registry.data, student_id, term, details),
            markup=False,
        )
