"""Bewertungsverfahren und Leistungsnachweis eines Studierenden in einem Kurs."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

# Bestehensgrenzen
PASSING_AVERAGE = 5.0
PASSING_ATTENDANCE = 75.0

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class EvaluationPolicy(str, Enum):
    """Durchschnittsformel eines Kurses.

    SIMPLE:   (P1 + P2 + P3 + Übungen + Seminar) / 5
    WEIGHTED: (P1 + 2·P2 + 3·P3 + Übungen + Seminar) / 8

    Die Formeln prüfen keine Wertebereiche; das übernimmt der Aufrufer.
    """

    SIMPLE = "simple"
    WEIGHTED = "weighted"

    @property
    def label(self) -> str:
        return _POLICY_LABELS[self]

    def compute(self, p1: float, p2: float, p3: float,
                exercise_score: float, seminar_score: float) -> float:
        """Berechnet den ungerundeten Enddurchschnitt."""
        return _POLICY_FORMULAS[self](p1, p2, p3, exercise_score, seminar_score)


_POLICY_FORMULAS = {
    EvaluationPolicy.SIMPLE:
        lambda p1, p2, p3, ex, sem: (p1 + p2 + p3 + ex + sem) / 5.0,
    EvaluationPolicy.WEIGHTED:
        lambda p1, p2, p3, ex, sem: (p1 + 2 * p2 + 3 * p3 + ex + sem) / 8.0,
}

_POLICY_LABELS = {
    EvaluationPolicy.SIMPLE: "Einfacher Durchschnitt",
    EvaluationPolicy.WEIGHTED: "Gewichteter Durchschnitt",
}


class ScoreStatus(str, Enum):
    """Ergebnis eines Leistungsnachweises."""

    APPROVED = "Bestanden"
    FAILED_ATTENDANCE = "Nicht bestanden (Fehlzeiten)"
    FAILED_GRADE = "Nicht bestanden (Note)"


class ScoreCard(BaseModel):
    """Noten und Anwesenheit eines Studierenden in genau einem Kurs.

    Durchschnitt und Ergebnis werden immer abgeleitet, nie gespeichert.
    """

    p1: float = 0.0
    p2: float = 0.0
    p3: float = 0.0
    exercise_score: float = 0.0   # Übungsblätter
    seminar_score: float = 0.0
    classes_held: int = 0
    classes_attended: int = 0
    policy: Optional[EvaluationPolicy] = None

    @property
    def components(self) -> tuple[float, float, float, float, float]:
        return (self.p1, self.p2, self.p3, self.exercise_score, self.seminar_score)

    def set_scores(self, p1: float, p2: float, p3: float,
                   exercise_score: float, seminar_score: float) -> None:
        """Überschreibt alle fünf Teilnoten."""
        self.p1 = p1
        self.p2 = p2
        self.p3 = p3
        self.exercise_score = exercise_score
        self.seminar_score = seminar_score

    def set_attendance(self, classes_held: int, classes_attended: int) -> None:
        self.classes_held = classes_held
        self.classes_attended = classes_attended

    def average(self) -> float:
        if self.policy is None:
            return 0.0
        return self.policy.compute(*self.components)

    def attendance_percentage(self) -> float:
        if self.classes_held == 0:
            return 0.0
        return 100.0 * self.classes_attended / self.classes_held

    def is_passing(self) -> bool:
        return (self.average() >= PASSING_AVERAGE
                and self.attendance_percentage() >= PASSING_ATTENDANCE)

    def status(self) -> ScoreStatus:
        """Ergebnis; Fehlzeiten haben Vorrang vor der Note."""
        if self.is_passing():
            return ScoreStatus.APPROVED
        if self.attendance_percentage() < PASSING_ATTENDANCE:
            return ScoreStatus.FAILED_ATTENDANCE
        return ScoreStatus.FAILED_GRADE

    def __str__(self) -> str:
        return (
            f"P1: {self.p1:.1f}, P2: {self.p2:.1f}, P3: {self.p3:.1f}, "
            f"Übungen: {self.exercise_score:.1f}, Seminar: {self.seminar_score:.1f}\n"
            f"Enddurchschnitt: {self.average():.1f}, "
            f"Anwesenheit: {self.attendance_percentage():.1f}%, "
            f"Ergebnis: {self.status().value}"
        )
