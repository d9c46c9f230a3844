"""Gemeinsame Hilfsfunktionen für Berichte, Excel- und PDF-Export."""

from datetime import date
from typing import Optional

from models.evaluation import ScoreCard, ScoreStatus
from models.student import Student

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "approved":          "CCFFCC",
    "failed_attendance": "FFEECC",
    "failed_grade":      "FFCCCC",
    "special":           "E0E0E0",   # Gasthörer: kein Ergebnis
    "full":              "FFFFB3",
    "header":            "4472C4",
}

_STATUS_COLOR_KEYS: dict[ScoreStatus, str] = {
    ScoreStatus.APPROVED:          "approved",
    ScoreStatus.FAILED_ATTENDANCE: "failed_attendance",
    ScoreStatus.FAILED_GRADE:      "failed_grade",
}

# Rich-Farben für die Terminal-Ausgabe
RICH_STATUS_STYLES: dict[ScoreStatus, str] = {
    ScoreStatus.APPROVED:          "green",
    ScoreStatus.FAILED_ATTENDANCE: "yellow",
    ScoreStatus.FAILED_GRADE:      "red",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


# ─── Zahlenformat ─────────────────────────────────────────────────────────────

def fmt_score(value: float) -> str:
    """Eine Nachkommastelle, z.B. 8.3125 → '8.3'."""
    return f"{value:.1f}"


def fmt_percent(value: float) -> str:
    return f"{value:.1f}%"


# ─── Ergebnis-Darstellung ─────────────────────────────────────────────────────

def status_label(student: Optional[Student], card: ScoreCard) -> str:
    """Ergebnistext; Gasthörer erhalten keine Bewertung."""
    if student is not None and not student.receives_grades:
        return "Gasthörer (ohne Bewertung)"
    return card.status().value


def status_color(student: Optional[Student], card: ScoreCard) -> str:
    """Hintergrundfarbe (RRGGBB) für eine Teilnehmerzeile."""
    if student is not None and not student.receives_grades:
        return COLORS["special"]
    return COLORS[_STATUS_COLOR_KEYS[card.status()]]


def safe_sheet_title(text: str) -> str:
    """Excel erlaubt max. 31 Zeichen und keine der Zeichen []:*?/\\."""
    for ch in "[]:*?/\\":
        text = text.replace(ch, "-")
    return text[:31]
