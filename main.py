"""Studienverwaltung — Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung (Wizard)
  python main.py config edit                    Konfiguration bearbeiten
  python main.py config show                    Konfiguration anzeigen
  python main.py menu                           Interaktive Verwaltung
  python main.py demo --save                    Demo-Daten erzeugen und speichern
  python main.py list <art>                     Studierende/Dozenten/Fächer/Kurse auflisten
  python main.py stats                          Kennzahlen aller Kurse
  python main.py validate                       Konsistenzprüfung
  python main.py report class <kurs>            Bericht zu einem Kurs
  python main.py report course <fach>           Bericht zu einem Fach
  python main.py report professor <nr>          Bericht zu Dozent/in
  python main.py report transcript <matrikel>   Notenspiegel
  python main.py export excel|pdf|json          Exporte
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für JSON-Schnappschüsse
DEFAULT_DATA_JSON = Path("output/academic_data.json")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config_or_abort():
    """Lädt die Konfiguration (Default wenn keine existiert) oder bricht ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        # Pydantic-Meldungen enthalten eckige Klammern
        console.print(str(e), style="red", markup=False)
        sys.exit(1)


def _load_store_or_abort(config):
    """Lädt den Datenbestand aus den Textdateien."""
    from data.text_store import TextStore
    from engine.registry import AcademicRegistry

    store = TextStore.from_config(config.storage)
    data = store.load()
    if data is None:
        console.print(store.last_error, style="red", markup=False)
        sys.exit(1)
    if store.last_report.warnings:
        store.last_report.print_rich()
    return store, AcademicRegistry(data)


def _load_data_or_abort(config, json_path: Optional[str]):
    """Datenbestand aus JSON-Schnappschuss (falls angegeben) oder Textdateien."""
    if json_path:
        from models.academic_data import AcademicData
        try:
            return AcademicData.load_json(Path(json_path))
        except FileNotFoundError as e:
            console.print(str(e), style="red", markup=False)
            sys.exit(1)
    _, registry = _load_store_or_abort(config)
    return registry.data


def _print_table(title: str, header: list[str], rows: list[list[str]]) -> None:
    table = Table(title=title, box=box.ROUNDED)
    for col in header:
        table.add_column(col)
    for row in rows:
        table.add_row(*row)
    console.print(table)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Konfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]python main.py config edit[/bold] zum Bearbeiten."
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard()
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py menu[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()

    console.print(Panel(
        f"[bold]{config.institution_name}[/bold]  |  Semester {config.current_term}",
        title="Konfiguration",
        border_style="cyan",
    ))

    sc = config.storage
    table = Table(title="Datenablage", box=box.ROUNDED)
    table.add_column("Datei")
    table.add_column("Pfad")
    table.add_row("Studierende", str(Path(sc.data_dir) / sc.students_file))
    table.add_row("Katalog", str(Path(sc.data_dir) / sc.catalog_file))
    table.add_row("Bewertungen", str(Path(sc.data_dir) / sc.evaluations_file))
    console.print(table)

    cd = config.class_defaults
    console.print(
        f"\n[bold]Autosave:[/bold] {'an' if sc.autosave else 'aus'} | "
        f"[bold]Exporte:[/bold] {config.export.output_dir} | "
        f"[bold]Log-Level:[/bold] {config.logging.level}"
    )
    console.print(
        f"[bold]Kurs-Vorgaben:[/bold] {cd.capacity} Plätze | {cd.policy.label} | "
        f"{'Präsenz' if cd.in_person else 'Online'}"
    )


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config_or_abort()
    mgr.edit_interactive(config)


# ─── MENU ─────────────────────────────────────────────────────────────────────

@click.command("menu")
def cmd_menu():
    """Startet die interaktive Verwaltung."""
    from frontend.menu import AdminMenu

    mgr, config = _load_config_or_abort()
    store, registry = _load_store_or_abort(config)
    AdminMenu(registry, store, config, console=console).run()
    console.print(f"[green]✓[/green] Daten gespeichert: {store.directory}")


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--students", "num_students", default=40, help="Anzahl Studierende.")
@click.option("--save", is_flag=True, default=False,
              help="In die Textdateien der Datenablage schreiben (überschreibt!).")
@click.option("--export-json", is_flag=True, default=False,
              help="Datensatz als JSON speichern.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_demo(seed: int, num_students: int, save: bool, export_json: bool, json_path: str):
    """Erzeugt Demo-Daten (Dozenten, Fächer, Kurse, Studierende, Bewertungen)."""
    mgr, config = _load_config_or_abort()
    from data.fake_data import DemoDataGenerator
    from data.text_store import TextStore

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = DemoDataGenerator(config, seed=seed, num_students=num_students)
    data = gen.generate()
    gen.print_summary(data)

    console.print(f"\n[dim]{data.summary()}[/dim]")

    if save:
        store = TextStore.from_config(config.storage)
        if not store.save(data):
            console.print(store.last_error, style="red", markup=False)
            sys.exit(1)
        console.print(f"[green]✓[/green] Daten gespeichert: {store.directory}")

    if export_json:
        out_path = Path(json_path)
        data.save_json(out_path)
        console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── LIST / STATS ─────────────────────────────────────────────────────────────

@click.command("list")
@click.argument("kind", type=click.Choice(["students", "professors", "courses", "classes"]))
@click.option("--json-path", default=None, help="JSON-Schnappschuss statt Textdateien.")
def cmd_list(kind: str, json_path: Optional[str]):
    """Listet Studierende, Dozenten, Fächer oder Kurse auf."""
    from export.tui_renderer import (
        render_class_rows, render_course_rows, render_professor_rows, render_student_rows,
    )
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(config, json_path)
    renderers = {
        "students": ("Studierende", render_student_rows),
        "professors": ("Dozenten", render_professor_rows),
        "courses": ("Fächer", render_course_rows),
        "classes": ("Kurse", render_class_rows),
    }
    title, render = renderers[kind]
    _print_table(title, *render(data))


@click.command("stats")
@click.option("--term", default=None, help="Nur Kurse dieses Semesters.")
@click.option("--json-path", default=None, help="JSON-Schnappschuss statt Textdateien.")
def cmd_stats(term: Optional[str], json_path: Optional[str]):
    """Zeigt Kennzahlen (Durchschnitt, Bestehensquote) aller Kurse."""
    from analysis.class_statistics import ClassStatisticsAnalyzer
    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(config, json_path)

    table = Table(title="Kurs-Kennzahlen", box=box.ROUNDED)
    for col in ["Kurs", "Semester", "Belegt", "Ø Note", "Ø Anwesenheit",
                "Bestanden", "Fehlzeiten", "Note", "Quote"]:
        table.add_column(col)
    for s in ClassStatisticsAnalyzer().analyze_all(data):
        if term is not None and s.term != term:
            continue
        table.add_row(
            s.class_code, s.term, f"{s.enrolled}/{s.capacity}",
            f"{s.mean_average:.1f}", f"{s.mean_attendance:.1f}%",
            str(s.approved), str(s.failed_attendance), str(s.failed_grade),
            f"{s.approval_rate:.0%}",
        )
    console.print(table)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.option("--json-path", default=None,
              help="JSON-Schnappschuss prüfen statt der Textdateien.")
def cmd_validate(json_path: Optional[str]):
    """Führt eine Konsistenzprüfung auf dem aktuellen Datenbestand durch."""
    from analysis.consistency import ConsistencyValidator

    mgr, config = _load_config_or_abort()
    data = _load_data_or_abort(config, json_path)

    console.print(f"\n{data.summary()}\n")
    report = ConsistencyValidator().validate(data)
    report.print_rich()

    sys.exit(0 if report.is_valid else 1)


# ─── REPORT ───────────────────────────────────────────────────────────────────

@click.group("report")
def cmd_report():
    """Textberichte zu Kursen, Fächern, Dozenten und Studierenden."""


@cmd_report.command("class")
@click.argument("class_code")
def report_class(class_code: str):
    """Bericht zu einem Kurs (Teilnehmer, Noten, Kennzahlen)."""
    from export.reports import class_report
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    console.print(class_report(registry.data, class_code), markup=False)


@cmd_report.command("course")
@click.argument("course_code")
def report_course(course_code: str):
    """Bericht zu einem Fach (alle angebotenen Kurse)."""
    from export.reports import course_report
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    console.print(course_report(registry.data, course_code), markup=False)


@cmd_report.command("professor")
@click.argument("professor_id")
def report_professor(professor_id: str):
    """Bericht zur Lehrtätigkeit eines Dozenten."""
    from export.reports import professor_report
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    console.print(professor_report(registry.data, professor_id), markup=False)


@cmd_report.command("transcript")
@click.argument("student_id")
@click.option("--term", default=None, help="Semester (Default: laufendes Semester).")
@click.option("--details", is_flag=True, default=False,
              help="Dozent, Modalität und Stundenumfang je Kurs anzeigen.")
def report_transcript(student_id: str, term: Optional[str], details: bool):
    """Notenspiegel eines Studierenden."""
    from export.reports import student_transcript
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    console.print(
        student_transcript(registry.data, student_id, term or config.current_term, details),
        markup=False,
    )


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.group("export")
def cmd_export():
    """Exportiert den Datenbestand als Excel, PDF oder JSON."""


@cmd_export.command("excel")
@click.option("--output", "-o", default=None, help="Zieldatei (.xlsx).")
@click.option("--term", default=None, help="Nur Kurse dieses Semesters.")
def export_excel(output: Optional[str], term: Optional[str]):
    """Kursübersicht und Teilnehmerlisten als Excel-Datei."""
    from export.excel_export import ExcelExporter
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)

    out_path = Path(output) if output else Path(config.export.output_dir) / "kurse.xlsx"
    ExcelExporter(registry.data, config.institution_name).export(out_path, term=term)
    console.print(f"[green]✓[/green] Excel gespeichert: {out_path}")


@cmd_export.command("pdf")
@click.option("--student", "student_id", default=None,
              help="Notenspiegel dieses Studierenden; ohne Angabe alle Kurslisten.")
@click.option("--term", default=None, help="Semester (Default: laufendes Semester).")
@click.option("--output", "-o", default=None, help="Zieldatei (.pdf).")
def export_pdf(student_id: Optional[str], term: Optional[str], output: Optional[str]):
    """Notenspiegel oder Kurslisten als PDF."""
    from export.pdf_export import PdfExporter
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    exporter = PdfExporter(registry.data, config.institution_name)
    out_dir = Path(config.export.output_dir)

    if student_id:
        term = term or config.current_term
        out_path = Path(output) if output else out_dir / f"notenspiegel_{student_id}.pdf"
        if not exporter.export_transcript(student_id, term, out_path):
            console.print(
                f"[red]Keine Kurse für {student_id} im Semester {term} gefunden.[/red]"
            )
            sys.exit(1)
    else:
        out_path = Path(output) if output else out_dir / "kurslisten.pdf"
        exporter.export_class_lists(out_path, term=term)
    console.print(f"[green]✓[/green] PDF gespeichert: {out_path}")


@cmd_export.command("json")
@click.option("--output", "-o", default=str(DEFAULT_DATA_JSON), help="Zieldatei (.json).")
def export_json(output: str):
    """Speichert den kompletten Datenbestand als JSON-Schnappschuss."""
    mgr, config = _load_config_or_abort()
    _, registry = _load_store_or_abort(config)
    registry.data.save_json(Path(output))
    console.print(f"[green]✓[/green] JSON gespeichert: {output}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Protokollierung (DEBUG).")
def cli(verbose: bool):
    """Studienverwaltung: Belegung, Bewertung und Berichte.

    Starten Sie mit: python main.py setup
    """
    from config.manager import ConfigManager
    level = "DEBUG" if verbose else "WARNING"
    if not verbose:
        try:
            level = ConfigManager().load_or_default().logging.level
        except ValueError:
            pass  # ungültige Config wird vom Befehl selbst gemeldet
    _setup_logging(level)


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen bei der Studienverwaltung![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_menu)
cli.add_command(cmd_demo)
cli.add_command(cmd_list)
cli.add_command(cmd_stats)
cli.add_command(cmd_validate)
cli.add_command(cmd_report)
cli.add_command(cmd_export)


if __name__ == "__main__":
    main()
