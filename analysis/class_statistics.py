"""Kennzahlen eines Kurses: Durchschnitt, Bestehensquote, Ergebnisverteilung.

Gasthörer erhalten keine Noten und zählen daher nicht zum Kursdurchschnitt.
"""

from pydantic import BaseModel

from models.academic_data import AcademicData
from models.course_class import CourseClass
from models.evaluation import ScoreStatus


class ClassStatistics(BaseModel):
    """Kennzahlen für einen einzelnen Kurs."""

    class_code: str
    course_code: str
    term: str
    enrolled: int
    capacity: int
    graded: int                  # reguläre Studierende mit Notenanspruch
    mean_average: float          # über reguläre Studierende, 0.0 wenn keine
    mean_attendance: float       # über alle Teilnehmer
    approved: int
    failed_attendance: int
    failed_grade: int

    @property
    def approval_rate(self) -> float:
        """Anteil bestandener unter den regulären Studierenden (0.0–1.0)."""
        return self.approved / self.graded if self.graded else 0.0

    @property
    def occupancy(self) -> float:
        return self.enrolled / self.capacity if self.capacity else 0.0


class ClassStatisticsAnalyzer:
    """Berechnet Kurs-Kennzahlen aus den Leistungsnachweisen."""

    def analyze(self, cc: CourseClass, data: AcademicData) -> ClassStatistics:
        averages: list[float] = []
        attendances: list[float] = []
        counts = {status: 0 for status in ScoreStatus}

        for student_id in cc.roster:
            card = cc.records[student_id]
            attendances.append(card.attendance_percentage())
            student = data.students.get(student_id)
            if student is None or not student.receives_grades:
                continue
            averages.append(card.average())
            counts[card.status()] += 1

        return ClassStatistics(
            class_code=cc.code,
            course_code=cc.course_code,
            term=cc.term,
            enrolled=cc.enrolled_count,
            capacity=cc.capacity,
            graded=len(averages),
            mean_average=sum(averages) / len(averages) if averages else 0.0,
            mean_attendance=sum(attendances) / len(attendances) if attendances else 0.0,
            approved=counts[ScoreStatus.APPROVED],
            failed_attendance=counts[ScoreStatus.FAILED_ATTENDANCE],
            failed_grade=counts[ScoreStatus.FAILED_GRADE],
        )

    def analyze_all(self, data: AcademicData) -> list[ClassStatistics]:
        return [
            self.analyze(cc, data)
            for cc in sorted(data.classes.values(), key=lambda c: c.code)
        ]
