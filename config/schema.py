from pydantic import BaseModel, Field, field_validator

from models.evaluation import EvaluationPolicy


# ─── DATENABLAGE ───

class StorageConfig(BaseModel):
    """Ablage der drei Textdateien des Datenbestands."""
    # Verzeichnis, in dem alle Datendateien liegen
    data_dir: str = Field("daten",
        description="Verzeichnis der Datendateien")
    # Dateiname der Studierendenliste
    students_file: str = Field("students.txt",
        description="Datei mit Studierenden")
    # Dateiname des Katalogs (Dozenten, Fächer, Kurse)
    catalog_file: str = Field("catalog.txt",
        description="Datei mit Dozenten, Fächern und Kursen")
    # Dateiname der Bewertungen (eine Zeile pro Teilnehmer und Kurs)
    evaluations_file: str = Field("evaluations.txt",
        description="Datei mit Noten und Anwesenheiten")
    # Nach jeder erfolgreichen Änderung im Menü sofort speichern
    autosave: bool = Field(True,
        description="Nach jeder Änderung automatisch speichern")

    @field_validator("students_file", "catalog_file", "evaluations_file")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v or "\\" in v:
            raise ValueError(f"Ungültiger Dateiname: '{v}' (nur Name, kein Pfad)")
        return v


# ─── EXPORT ───

class ExportConfig(BaseModel):
    """Ausgabeort für Excel-, PDF- und JSON-Exporte."""
    # Zielverzeichnis für erzeugte Dateien
    output_dir: str = Field("output",
        description="Zielverzeichnis für Exporte")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Protokollierung auf der Konsole."""
    # Mindest-Level für Meldungen (DEBUG, INFO, WARNING, ERROR)
    level: str = Field("WARNING",
        description="Log-Level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return v


# ─── KURS-VORGABEN ───

class ClassDefaults(BaseModel):
    """Vorgabewerte beim Anlegen neuer Kurse im Menü."""
    # Vorgeschlagene Kapazität eines neuen Kurses
    capacity: int = Field(40, ge=1, le=500,
        description="Vorgeschlagene Kapazität")
    # Vorgeschlagenes Bewertungsverfahren
    policy: EvaluationPolicy = Field(EvaluationPolicy.SIMPLE,
        description="Vorgeschlagenes Bewertungsverfahren")
    # Neue Kurse standardmäßig als Präsenzkurs anlegen
    in_person: bool = Field(True,
        description="Präsenzkurs als Vorgabe")


# ─── GESAMT-CONFIG ───

class AppConfig(BaseModel):
    """Gesamtkonfiguration der Studienverwaltung."""
    # Name der Einrichtung (erscheint in Berichten und Exporten)
    institution_name: str = Field("Fachbereich Informatik",
        description="Name der Einrichtung")
    # Laufendes Semester, Vorgabe für Kurse und Notenspiegel
    current_term: str = Field("2024.1",
        description="Laufendes Semester")
    # Datenablage
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # Exporte
    export: ExportConfig = Field(default_factory=ExportConfig)
    # Protokollierung
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    # Vorgaben für neue Kurse
    class_defaults: ClassDefaults = Field(default_factory=ClassDefaults)
