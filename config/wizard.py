"""Interaktiver Setup-Wizard für die Ersteinrichtung der Studienverwaltung.

Führt den Nutzer Schritt für Schritt durch alle Konfigurationsbereiche.
Nutzt rich für schöne Konsolenausgabe.
"""

from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.schema import (
    AppConfig,
    ClassDefaults,
    ExportConfig,
    LoggingConfig,
    StorageConfig,
)
from config.defaults import default_class_defaults, default_storage
from models.evaluation import EvaluationPolicy

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


# ─── SCHRITT 1: Einrichtung ───

def _wizard_institution() -> tuple[str, str]:
    _header("Schritt 1 — Einrichtung")
    _info("Name und laufendes Semester erscheinen in Berichten und Exporten.")
    name = Prompt.ask("Name der Einrichtung", default="Fachbereich Informatik")
    term = Prompt.ask("Laufendes Semester (z.B. 2024.1)", default="2024.1")
    return name, term


# ─── SCHRITT 2: Datenablage ───

def _wizard_storage(current: Optional[StorageConfig] = None) -> StorageConfig:
    _header("Schritt 2 — Datenablage")
    sc = current or default_storage()
    _info("Die Daten werden in drei Textdateien gespeichert.")

    if current is None and Confirm.ask(
        f"Standard-Ablage übernehmen? ({sc.data_dir}/)", default=True
    ):
        _success("Standard-Ablage übernommen.")
        return sc

    data_dir = Prompt.ask("Datenverzeichnis", default=sc.data_dir)
    students_file = Prompt.ask("Datei Studierende", default=sc.students_file)
    catalog_file = Prompt.ask("Datei Katalog", default=sc.catalog_file)
    evaluations_file = Prompt.ask("Datei Bewertungen", default=sc.evaluations_file)
    autosave = Confirm.ask("Nach jeder Änderung speichern?", default=sc.autosave)
    return StorageConfig(
        data_dir=data_dir,
        students_file=students_file,
        catalog_file=catalog_file,
        evaluations_file=evaluations_file,
        autosave=autosave,
    )


# ─── SCHRITT 3: Kurs-Vorgaben ───

def _wizard_class_defaults() -> ClassDefaults:
    _header("Schritt 3 — Vorgaben für neue Kurse")
    cd = default_class_defaults()
    console.print(f"  Kapazität: {cd.capacity}, "
                  f"Verfahren: {cd.policy.label}, "
                  f"{'Präsenz' if cd.in_person else 'Online'}")
    if Confirm.ask("Vorgaben übernehmen?", default=True):
        return cd

    capacity = IntPrompt.ask("Kapazität", default=cd.capacity)
    console.print("Bewertungsverfahren: [1] Einfacher Durchschnitt  "
                  "[2] Gewichteter Durchschnitt")
    policy = (EvaluationPolicy.WEIGHTED
              if Prompt.ask("Auswahl", default="1") == "2"
              else EvaluationPolicy.SIMPLE)
    in_person = Confirm.ask("Präsenzkurs als Vorgabe?", default=True)
    return ClassDefaults(capacity=capacity, policy=policy, in_person=in_person)


# ─── ZUSAMMENFASSUNG ───

def _show_summary(config: AppConfig) -> None:
    _header("Zusammenfassung")
    table = Table(box=box.ROUNDED)
    table.add_column("Bereich", style="bold")
    table.add_column("Wert")

    table.add_row("Einrichtung", config.institution_name)
    table.add_row("Semester", config.current_term)
    table.add_row("Datenverzeichnis", config.storage.data_dir)
    table.add_row("Autosave", "✓" if config.storage.autosave else "✗")
    table.add_row("Exporte", config.export.output_dir)
    table.add_row(
        "Kurs-Vorgaben",
        f"{config.class_defaults.capacity} Plätze, {config.class_defaults.policy.label}",
    )
    console.print(table)


# ─── HAUPT-WIZARD ───

def run_wizard() -> Optional[AppConfig]:
    """Führt den vollständigen interaktiven Setup-Wizard aus.

    Returns:
        Fertige AppConfig oder None, wenn der Nutzer abbricht.
    """
    console.print()
    console.print(Panel(
        "[bold]Willkommen bei der Studienverwaltung![/bold]\n\n"
        "Verwaltet Studierende, Dozenten, Fächer und Kurse,\n"
        "Belegungen, Noten und Anwesenheiten.\n\n"
        "[dim]Standard-Werte können mit Enter übernommen werden.[/dim]",
        title="[bold cyan]Studienverwaltung[/bold cyan]",
        border_style="cyan",
    ))

    if not Confirm.ask("\nMöchten Sie die Verwaltung jetzt einrichten?", default=True):
        console.print("[yellow]Einrichtung abgebrochen.[/yellow]")
        return None

    try:
        name, term = _wizard_institution()
        storage = _wizard_storage()
        class_defaults = _wizard_class_defaults()

        config = AppConfig(
            institution_name=name,
            current_term=term,
            storage=storage,
            export=ExportConfig(),
            logging=LoggingConfig(),
            class_defaults=class_defaults,
        )

        _show_summary(config)

        if not Confirm.ask("\nKonfiguration speichern?", default=True):
            console.print("[yellow]Konfiguration wird nicht gespeichert.[/yellow]")
            return None

        _success("Konfiguration wird gespeichert...")
        return config

    except KeyboardInterrupt:
        console.print("\n[yellow]Wizard abgebrochen.[/yellow]")
        return None
    except ValidationError as e:
        console.print(f"\nFehler während der Konfiguration: {e}", style="red", markup=False)
        return None
