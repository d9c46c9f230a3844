"""Konfigurationsmanager: Laden, Speichern, Validieren und interaktives Bearbeiten.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import (
    AppConfig,
    ClassDefaults,
    ExportConfig,
    LoggingConfig,
    StorageConfig,
)
from models.evaluation import EvaluationPolicy

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Studienverwaltung — Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "storage": (
        "Datenablage",
        "Drei semikolongetrennte Textdateien im Datenverzeichnis.\n"
        "Fehlende Dateien werden beim ersten Speichern angelegt.",
    ),
    "export": (
        "Exporte",
        None,
    ),
    "logging": (
        "Protokollierung",
        "DEBUG, INFO, WARNING oder ERROR. '--verbose' setzt DEBUG.",
    ),
    "class_defaults": (
        "Vorgaben für neue Kurse",
        "policy: simple = (P1+P2+P3+Ü+S)/5, weighted = (P1+2·P2+3·P3+Ü+S)/8",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "academic_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> AppConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um die Verwaltung einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return AppConfig.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> AppConfig:
        """Wie load(), liefert aber die Default-Config wenn keine Datei existiert."""
        from config.defaults import default_app_config
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return default_app_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: AppConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: AppConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        storage_map = CommentedMap(cm["storage"])
        storage_map.yaml_add_eol_comment("relativ zum Arbeitsverzeichnis", "data_dir")
        cm["storage"] = storage_map

        return cm

    # ─── Interaktives Bearbeiten ───

    def edit_interactive(self, config: AppConfig) -> AppConfig:
        """Interaktives Bearbeitungsmenü für die Konfiguration."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Einrichtung & Semester")
            console.print("  [bold]2.[/bold] Datenablage")
            console.print("  [bold]3.[/bold] Exporte & Protokollierung")
            console.print("  [bold]4.[/bold] Vorgaben für neue Kurse")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(update={
                    "institution_name": Prompt.ask(
                        "Name der Einrichtung", default=config.institution_name),
                    "current_term": Prompt.ask(
                        "Laufendes Semester", default=config.current_term),
                })
            elif choice == "2":
                config = config.model_copy(
                    update={"storage": self._edit_storage(config.storage)}
                )
            elif choice == "3":
                export, log = self._edit_output(config.export, config.logging)
                config = config.model_copy(update={"export": export, "logging": log})
            elif choice == "4":
                config = config.model_copy(
                    update={"class_defaults": self._edit_class_defaults(config.class_defaults)}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _show_section(self, section) -> None:
        table = Table(box=box.SIMPLE)
        table.add_column("Parameter", style="bold")
        table.add_column("Aktuell")
        for k, v in section.model_dump(mode="json").items():
            table.add_row(k, str(v))
        console.print(table)

    def _edit_storage(self, sc: StorageConfig) -> StorageConfig:
        """Datenablage interaktiv anpassen."""
        console.print("\n[bold]Aktuelle Datenablage:[/bold]")
        self._show_section(sc)
        if not Confirm.ask("Änderungen vornehmen?", default=False):
            return sc
        from config.wizard import _wizard_storage
        return _wizard_storage(sc)

    def _edit_output(self, ec: ExportConfig,
                     lc: LoggingConfig) -> tuple[ExportConfig, LoggingConfig]:
        console.print("\n[bold]Aktuelle Export- und Log-Einstellungen:[/bold]")
        self._show_section(ec)
        self._show_section(lc)
        output_dir = Prompt.ask("Exportverzeichnis", default=ec.output_dir)
        level = Prompt.ask(
            "Log-Level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            default=lc.level,
        )
        return ExportConfig(output_dir=output_dir), LoggingConfig(level=level)

    def _edit_class_defaults(self, cd: ClassDefaults) -> ClassDefaults:
        """Kurs-Vorgaben interaktiv anpassen."""
        console.print("\n[bold]Aktuelle Kurs-Vorgaben:[/bold]")
        self._show_section(cd)
        capacity = IntPrompt.ask("Kapazität", default=cd.capacity)
        policy = Prompt.ask(
            "Bewertungsverfahren",
            choices=[p.value for p in EvaluationPolicy],
            default=cd.policy.value,
        )
        in_person = Confirm.ask("Präsenzkurs als Vorgabe?", default=cd.in_person)
        return ClassDefaults(capacity=capacity, policy=EvaluationPolicy(policy),
                             in_person=in_person)
