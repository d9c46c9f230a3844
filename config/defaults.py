from config.schema import (
    AppConfig,
    ClassDefaults,
    ExportConfig,
    LoggingConfig,
    StorageConfig,
)
from models.evaluation import EvaluationPolicy


def default_storage() -> StorageConfig:
    """Standard-Ablage: drei Textdateien im Unterordner ``daten``."""
    return StorageConfig(
        data_dir="daten",
        students_file="students.txt",
        catalog_file="catalog.txt",
        evaluations_file="evaluations.txt",
        autosave=True,
    )


def default_class_defaults() -> ClassDefaults:
    """Typischer Vorlesungskurs: 40 Plätze, einfacher Durchschnitt, Präsenz."""
    return ClassDefaults(
        capacity=40,
        policy=EvaluationPolicy.SIMPLE,
        in_person=True,
    )


def default_app_config() -> AppConfig:
    """Komplette Default-Konfiguration."""
    return AppConfig(
        institution_name="Fachbereich Informatik",
        current_term="2024.1",
        storage=default_storage(),
        export=ExportConfig(output_dir="output"),
        logging=LoggingConfig(level="WARNING"),
        class_defaults=default_class_defaults(),
    )


# ─── DEMO-KATALOG ───
# Fach-Code → (Name, Stundenumfang, Voraussetzungen).
# Reihenfolge ist relevant: Voraussetzungen stehen vor den Fächern, die sie fordern.

DEMO_COURSES: dict[str, tuple[str, int, list[str]]] = {
    "PROG1": ("Programmierung 1",            60, []),
    "CALC1": ("Analysis 1",                  60, []),
    "LINA":  ("Lineare Algebra",             60, []),
    "PROG2": ("Programmierung 2",            60, ["PROG1"]),
    "CALC2": ("Analysis 2",                  60, ["CALC1"]),
    "ALGO":  ("Algorithmen und Datenstrukturen", 60, ["PROG2"]),
    "DB":    ("Datenbanksysteme",            45, ["PROG1"]),
    "STAT":  ("Statistik",                   45, ["CALC1"]),
    "NUM":   ("Numerik",                     45, ["CALC2", "LINA"]),
    "SE":    ("Softwaretechnik",             45, ["PROG2"]),
}

# Termin-Token der Demo-Kurse (Dozenten dürfen keinen Token doppelt belegen)
DEMO_SCHEDULES: list[str] = [
    "MO 08:00-09:40", "MO 10:00-11:40", "MO 14:00-15:40",
    "DI 08:00-09:40", "DI 10:00-11:40", "DI 14:00-15:40",
    "MI 08:00-09:40", "MI 10:00-11:40",
    "DO 08:00-09:40", "DO 10:00-11:40", "DO 14:00-15:40",
    "FR 08:00-09:40", "FR 10:00-11:40",
]

DEMO_DEPARTMENTS: list[str] = ["Informatik", "Mathematik", "Statistik"]

DEMO_STUDY_PROGRAMS: list[str] = [
    "Informatik (B.Sc.)",
    "Wirtschaftsinformatik (B.Sc.)",
    "Mathematik (B.Sc.)",
    "Data Science (M.Sc.)",
]
