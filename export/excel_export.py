"""Excel-Export des Datenbestands (openpyxl)."""

from pathlib import Path
from typing import Optional

from analysis.class_statistics import ClassStatistics, ClassStatisticsAnalyzer
from models.academic_data import AcademicData
from models.course_class import CourseClass

from export.helpers import (
    COLORS, fmt_percent, safe_sheet_title, status_color, status_label, today_str,
)


class ExcelExporter:
    """Exportiert einen AcademicData-Bestand: Übersichtsblatt plus ein Blatt pro Kurs."""

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H = 22

    def __init__(self, data: AcademicData, institution_name: str = ""):
        self.data = data
        self.institution_name = institution_name
        self.analyzer = ClassStatisticsAnalyzer()

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, term: Optional[str] = None) -> None:
        """Erstellt die Excel-Datei.

        term: optional nur Kurse dieses Semesters exportieren.
        """
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        classes = [
            cc for cc in sorted(self.data.classes.values(), key=lambda c: c.code)
            if term is None or cc.term == term
        ]
        stats = [self.analyzer.analyze(cc, self.data) for cc in classes]

        self._sheet_uebersicht(wb, stats)
        for cc in classes:
            self._sheet_kurs(wb, cc)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header(self, ws, row: int, headers: list[str]) -> None:
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[row].height = self.ROW_HEADER_H

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, w in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = w

    # ─── Sheet: Übersicht ─────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb, stats: list[ClassStatistics]) -> None:
        from openpyxl.styles import Font

        ws = wb.create_sheet(title="Übersicht")
        border = self._thin_border()

        ws.cell(row=1, column=1, value=self.institution_name or "Kursübersicht").font = \
            Font(bold=True, size=13)
        ws.cell(row=2, column=1, value=f"Erstellt: {today_str()}")
        ws.cell(row=2, column=4, value=self.data.summary().replace("\n", " | "))

        headers = ["Kurs", "Fach", "Semester", "Belegt", "Kapazität", "Bewertet",
                   "Ø Note", "Bestanden", "Fehlzeiten", "Note", "Quote"]
        row = 4
        self._write_header(ws, row, headers)
        row += 1

        for s in stats:
            values = [
                s.class_code, s.course_code, s.term, s.enrolled, s.capacity,
                s.graded, round(s.mean_average, 1), s.approved,
                s.failed_attendance, s.failed_grade,
                fmt_percent(100 * s.approval_rate),
            ]
            for col, v in enumerate(values, 1):
                ws.cell(row=row, column=col, value=v).border = border
            if s.enrolled >= s.capacity:
                ws.cell(row=row, column=4).fill = self._fill(COLORS["full"])
            row += 1

        self._set_widths(ws, [18, 10, 10, 8, 10, 9, 8, 10, 10, 8, 8])

    # ─── Sheet: Kurs ──────────────────────────────────────────────────────────

    def _sheet_kurs(self, wb, cc: CourseClass) -> None:
        from openpyxl.styles import Font

        ws = wb.create_sheet(title=safe_sheet_title(f"Kurs {cc.code}"))
        border = self._thin_border()

        course = self.data.courses.get(cc.course_code)
        professor = self.data.professors.get(cc.professor_id)
        ws.cell(row=1, column=1, value=f"{cc.code} – "
                f"{course.name if course else cc.course_code}").font = Font(bold=True, size=12)
        ws.cell(row=2, column=1, value=(
            f"Dozent/in: {professor.name if professor else cc.professor_id} | "
            f"Semester: {cc.term} | {cc.schedule} | {cc.modality} | {cc.policy.label}"
        ))

        headers = ["Matrikel", "Name", "Typ", "P1", "P2", "P3", "Übungen", "Seminar",
                   "Durchschnitt", "Gehalten", "Besucht", "Anwesenheit", "Ergebnis"]
        row = 4
        self._write_header(ws, row, headers)
        row += 1

        for student_id in cc.roster:
            student = self.data.students.get(student_id)
            card = cc.records[student_id]
            graded = student is None or student.receives_grades
            values = [
                student_id,
                student.name if student else "?",
                student.kind.label if student else "",
                *(card.components if graded else ("",) * 5),
                round(card.average(), 1) if graded else "",
                card.classes_held,
                card.classes_attended,
                round(card.attendance_percentage(), 1),
                status_label(student, card),
            ]
            for col, v in enumerate(values, 1):
                ws.cell(row=row, column=col, value=v).border = border
            ws.cell(row=row, column=len(values)).fill = self._fill(status_color(student, card))
            row += 1

        self._set_widths(ws, [12, 26, 10, 6, 6, 6, 9, 9, 12, 9, 9, 12, 30])
