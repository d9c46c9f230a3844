"""Datenmodell für einen Kurs (konkretes Angebot eines Fachs, Pydantic v2).

Ein Kurs ist die Einheit für Belegung und Bewertung: er führt die
Teilnehmerliste, die Kapazität, den Termin und je Teilnehmer genau einen
Leistungsnachweis.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.evaluation import EvaluationPolicy, ScoreCard, SCORE_MIN, SCORE_MAX
from models.exceptions import (
    AttendanceValidationError,
    RosterStateError,
    ScoreValidationError,
)
from models.student import Student

_SCORE_NAMES = ("P1", "P2", "P3", "Übungen", "Seminar")


def check_scores(scores) -> None:
    """Prüft die fünf Teilnoten auf [0, 10] (NaN gilt als ungültig).

    Raises:
        ScoreValidationError
    """
    for label, value in zip(_SCORE_NAMES, scores):
        if not SCORE_MIN <= value <= SCORE_MAX:
            raise ScoreValidationError(
                f"Note {label} = {value} liegt außerhalb von "
                f"[{SCORE_MIN:g}, {SCORE_MAX:g}]."
            )


def check_attendance(classes_held: int, classes_attended: int) -> None:
    """Raises AttendanceValidationError bei held ≤ 0 oder attended außerhalb [0, held]."""
    if classes_held <= 0:
        raise AttendanceValidationError(
            f"Anzahl gehaltener Termine muss > 0 sein (ist {classes_held})."
        )
    if classes_attended < 0 or classes_attended > classes_held:
        raise AttendanceValidationError(
            f"Anwesenheit {classes_attended} liegt außerhalb von [0, {classes_held}]."
        )


class CourseClass(BaseModel):
    """Ein Kurs eines Fachs in einem Semester."""

    code: str = Field(frozen=True)       # z.B. "CALC1-2024-1"
    course_code: str
    professor_id: str
    term: str                            # z.B. "2024.1"
    policy: EvaluationPolicy = EvaluationPolicy.SIMPLE
    is_in_person: bool = True
    room: Optional[str] = None           # nur bei Präsenzkursen
    schedule: str                        # Termin-Token, z.B. "MO 14:00-15:40"
    capacity: int = Field(gt=0)
    roster: list[str] = []               # Matrikelnummern in Belegungsreihenfolge
    records: dict[str, ScoreCard] = {}   # Matrikelnummer → Leistungsnachweis

    @model_validator(mode="after")
    def _check_consistency(self):
        if not self.is_in_person:
            self.room = None
        if len(set(self.roster)) != len(self.roster):
            raise ValueError(f"Kurs {self.code}: doppelte Einträge in der Teilnehmerliste.")
        if len(self.roster) > self.capacity:
            raise ValueError(
                f"Kurs {self.code}: {len(self.roster)} Teilnehmer bei Kapazität {self.capacity}."
            )
        if set(self.records) != set(self.roster):
            raise ValueError(
                f"Kurs {self.code}: Leistungsnachweise passen nicht zur Teilnehmerliste."
            )
        return self

    # ─── Teilnehmerliste ───

    @property
    def enrolled_count(self) -> int:
        return len(self.roster)

    @property
    def is_full(self) -> bool:
        return len(self.roster) >= self.capacity

    @property
    def modality(self) -> str:
        return "Präsenz" if self.is_in_person else "Online"

    def has_student(self, student: Student) -> bool:
        return student.id in self.records

    def enroll_student(self, student: Student) -> bool:
        """Nimmt einen Studierenden auf. False bei voller Liste oder Doppelbelegung."""
        if self.is_full:
            return False
        if student.id in self.records:
            return False
        self.roster.append(student.id)
        self.records[student.id] = ScoreCard(policy=self.policy)
        return True

    def withdraw_student(self, student: Student) -> None:
        """Entfernt einen Studierenden samt Leistungsnachweis (no-op wenn nicht vorhanden)."""
        if student.id in self.records:
            self.roster.remove(student.id)
            del self.records[student.id]

    def set_room(self, room: str) -> bool:
        """Setzt den Raum; nur bei Präsenzkursen möglich."""
        if not self.is_in_person:
            return False
        self.room = room.strip() or None
        return True

    # ─── Bewertung ───

    def record_grades(self, student: Student, p1: float, p2: float, p3: float,
                      exercise_score: float, seminar_score: float) -> bool:
        """Trägt die fünf Teilnoten ein (überschreibt vorhandene Werte).

        Raises:
            ScoreValidationError: eine Note liegt außerhalb von [0, 10].
            RosterStateError: der Studierende ist nicht in diesem Kurs.

        Returns:
            False für Gasthörer (erhalten keine Noten), sonst True.
        """
        scores = (p1, p2, p3, exercise_score, seminar_score)
        check_scores(scores)
        if not student.receives_grades:
            return False
        card = self._card_of(student)
        card.set_scores(*scores)
        return True

    def record_attendance(self, student: Student, classes_held: int,
                          classes_attended: int) -> bool:
        """Trägt die Anwesenheit ein (überschreibt vorhandene Werte).

        Raises:
            AttendanceValidationError: held ≤ 0, attended < 0 oder attended > held.
            RosterStateError: der Studierende ist nicht in diesem Kurs.
        """
        check_attendance(classes_held, classes_attended)
        card = self._card_of(student)
        card.set_attendance(classes_held, classes_attended)
        return True

    def get_score_card(self, student: Student) -> Optional[ScoreCard]:
        return self.records.get(student.id)

    def _card_of(self, student: Student) -> ScoreCard:
        card = self.records.get(student.id)
        if card is None:
            raise RosterStateError(
                f"{student.name} ({student.id}) ist nicht im Kurs {self.code} eingeschrieben."
            )
        return card

    def __str__(self) -> str:
        where = f", Raum {self.room}" if self.room else ""
        return (
            f"{self.code} [{self.course_code}] {self.term} | {self.schedule} | "
            f"{self.modality}{where} | {self.enrolled_count}/{self.capacity}"
        )
