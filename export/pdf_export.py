"""PDF-Export für Notenspiegel und Kurslisten (fpdf2)."""

from pathlib import Path
from typing import Optional

from models.academic_data import AcademicData
from models.course_class import CourseClass
from models.student import Student

from export.helpers import (
    COLORS, fmt_percent, fmt_score, hex_to_rgb, status_color, status_label, today_str,
)


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    return (
        text
        .replace("—", " - ")   # em dash
        .replace("–", "-")      # en dash
        .replace("─", "-")      # BOX DRAWINGS LIGHT HORIZONTAL
        .replace("│", "|")      # BOX DRAWINGS LIGHT VERTICAL
        .replace("≥", ">=")     # ≥
        .replace("≤", "<=")     # ≤
    )


# ─── A4-Hochformat-Dimensionen ────────────────────────────────────────────────
# Portrait A4: 210 × 297 mm, nutzbare Breite (Margin 15 links+rechts): 180 mm

_TRANSCRIPT_COLS = [
    ("Fach", 52), ("P1", 12), ("P2", 12), ("P3", 12), ("Üb.", 12), ("Sem.", 12),
    ("Ø", 14), ("Anw.", 18), ("Ergebnis", 36),
]
_ROSTER_COLS = [
    ("Matrikel", 24), ("Name", 50), ("Ø", 16), ("Anwesenheit", 26), ("Ergebnis", 64),
]
_ROW_H = 7          # mm
_FONT_HEADER = 9    # pt
_FONT_CONTENT = 8   # pt


class _RecordPdf:
    """Interner Wrapper um fpdf.FPDF mit Kopf- und Fußzeile."""

    def __init__(self, institution_name: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, name):
                super().__init__(orientation="P", unit="mm", format="A4")
                inner._institution = name
                inner._entity_title = ""
                inner.alias_nb_pages()
                inner.set_auto_page_break(auto=True, margin=18)
                inner.set_margins(left=15, top=24, right=15)

            def header(inner):
                inner.set_font("Helvetica", "B", 11)
                inner.set_xy(15, 8)
                inner.cell(90, 7, _pdf_safe(inner._institution), border=0, align="L")
                inner.cell(0, 7, _pdf_safe(inner._entity_title), border=0, align="R")
                inner.ln(0)
                inner.set_draw_color(150, 150, 150)
                inner.line(15, 18, inner.w - 15, 18)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    f"{today_str()}  |  Seite {inner.page_no()}/{{nb}}",
                    border=0, align="C",
                )

        self._pdf = _Pdf(institution_name)

    def set_entity(self, title: str) -> None:
        self._pdf._entity_title = title

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    # ─── Text und Tabellen ────────────────────────────────────────────────────

    def text_line(self, text: str, bold: bool = False, size: int = 10) -> None:
        pdf = self._pdf
        pdf.set_font("Helvetica", "B" if bold else "", size)
        pdf.cell(0, 6, _pdf_safe(text), border=0, align="L")
        pdf.ln(6)

    def table_row(
        self,
        cols: list[tuple[str, int]],
        values: list[str],
        header: bool = False,
        last_bg_hex: Optional[str] = None,
    ) -> None:
        """Zeichnet eine Tabellenzeile; die letzte Spalte optional eingefärbt."""
        pdf = self._pdf
        if header:
            r, g, b = hex_to_rgb(COLORS["header"])
            pdf.set_fill_color(r, g, b)
            pdf.set_text_color(255, 255, 255)
            pdf.set_font("Helvetica", "B", _FONT_HEADER)
        else:
            pdf.set_text_color(0, 0, 0)
            pdf.set_font("Helvetica", "", _FONT_CONTENT)
        pdf.set_draw_color(180, 180, 180)

        for i, ((_, w), value) in enumerate(zip(cols, values)):
            fill = header
            if not header and last_bg_hex and i == len(cols) - 1:
                r, g, b = hex_to_rgb(last_bg_hex)
                pdf.set_fill_color(r, g, b)
                fill = True
            text = _pdf_safe(value)
            while text and pdf.get_string_width(text) > w - 2:
                text = text[:-1]
            pdf.cell(w, _ROW_H, text, border=1,
                     align="L" if i == 0 else "C", fill=fill)
        pdf.ln(_ROW_H)
        pdf.set_text_color(0, 0, 0)


class PdfExporter:
    """Exportiert Notenspiegel und Kurslisten als PDF."""

    def __init__(self, data: AcademicData, institution_name: str = ""):
        self.data = data
        self.institution_name = institution_name

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_transcript(self, student_id: str, term: str, output_path: Path) -> bool:
        """Erzeugt den Notenspiegel eines Studierenden für ein Semester.

        Returns:
            False wenn der Studierende unbekannt ist oder im Semester keine Kurse hat.
        """
        student = self.data.students.get(student_id)
        classes = self.data.classes_of_student(student_id, term)
        if student is None or not classes:
            return False

        pdf = _RecordPdf(self.institution_name)
        pdf.set_entity(f"Notenspiegel {term}")
        pdf.add_page()
        self._draw_transcript(pdf, student, term, classes)
        pdf.save(output_path)
        return True

    def export_class_lists(self, output_path: Path, term: Optional[str] = None) -> None:
        """Erzeugt eine PDF mit je einer Seite pro Kurs."""
        pdf = _RecordPdf(self.institution_name)
        for cc in sorted(self.data.classes.values(), key=lambda c: c.code):
            if term is not None and cc.term != term:
                continue
            pdf.set_entity(f"Kurs {cc.code} | {cc.enrolled_count}/{cc.capacity}")
            pdf.add_page()
            self._draw_roster(pdf, cc)
        pdf.save(output_path)

    # ─── Seiteninhalt ─────────────────────────────────────────────────────────

    def _draw_transcript(self, pdf: _RecordPdf, student: Student, term: str,
                         classes: list[CourseClass]) -> None:
        pdf.text_line(f"{student.name} ({student.id})", bold=True, size=13)
        pdf.text_line(f"Studiengang: {student.course_of_study}")
        pdf.text_line(f"Semester: {term}  |  {student.kind.label}")
        pdf.text_line("")

        pdf.table_row(_TRANSCRIPT_COLS, [c for c, _ in _TRANSCRIPT_COLS], header=True)
        for cc in classes:
            card = cc.records[student.id]
            course = self.data.courses.get(cc.course_code)
            name = course.name if course else cc.course_code
            if student.receives_grades:
                scores = [fmt_score(v) for v in card.components] + [fmt_score(card.average())]
            else:
                scores = ["-"] * 6
            pdf.table_row(
                _TRANSCRIPT_COLS,
                [name] + scores + [fmt_percent(card.attendance_percentage()),
                                   status_label(student, card)],
                last_bg_hex=status_color(student, card),
            )

    def _draw_roster(self, pdf: _RecordPdf, cc: CourseClass) -> None:
        course = self.data.courses.get(cc.course_code)
        professor = self.data.professors.get(cc.professor_id)
        pdf.text_line(f"{cc.code}: {course.name if course else cc.course_code}",
                      bold=True, size=13)
        pdf.text_line(
            f"Dozent/in: {professor.name if professor else cc.professor_id}  |  "
            f"Semester: {cc.term}  |  {cc.schedule}  |  {cc.modality}"
        )
        pdf.text_line("")

        pdf.table_row(_ROSTER_COLS, [c for c, _ in _ROSTER_COLS], header=True)
        for student_id in cc.roster:
            student = self.data.students.get(student_id)
            card = cc.records[student_id]
            graded = student is None or student.receives_grades
            pdf.table_row(
                _ROSTER_COLS,
                [
                    student_id,
                    student.name if student else "?",
                    fmt_score(card.average()) if graded else "-",
                    fmt_percent(card.attendance_percentage()),
                    status_label(student, card),
                ],
                last_bg_hex=status_color(student, card),
            )
