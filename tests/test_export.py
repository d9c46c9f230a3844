"""Tests für Textberichte, Terminal-Tabellen und Export (Excel + PDF)."""

from pathlib import Path

import pytest

from engine.registry import AcademicRegistry
from export import reports
from export.excel_export import ExcelExporter
from export.helpers import (
    COLORS,
    fmt_percent,
    fmt_score,
    hex_to_rgb,
    safe_sheet_title,
    status_color,
    status_label,
)
from export.pdf_export import PdfExporter, _pdf_safe
from export.tui_renderer import (
    render_class_rows,
    render_course_rows,
    render_roster_rows,
    render_student_rows,
)
from models.evaluation import EvaluationPolicy, ScoreCard


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_registry() -> AcademicRegistry:
    reg = AcademicRegistry()
    reg.register_professor("Emmy Noether", "P01", "Mathematik")
    reg.register_course("Analysis 1", "CALC1", 60)
    reg.register_course("Analysis 2", "CALC2", 45)
    reg.add_prerequisite("CALC2", "CALC1")
    reg.create_class("CALC1-2024-1", "CALC1", "P01", "2024.1",
                     EvaluationPolicy.WEIGHTED, True, "MO 08:00-09:40", 2, room="H1-01")
    reg.create_class("CALC2-2024-2", "CALC2", "P01", "2024.2",
                     EvaluationPolicy.SIMPLE, False, "DI 08:00-09:40", 30)
    reg.register_student("Ada Lovelace", "A", "Informatik")
    reg.register_student("Gast Hörer", "G", "Philosophie", special=True)
    reg.enroll("A", "CALC1", "CALC1-2024-1")
    reg.enroll("A", "CALC2", "CALC2-2024-2")
    reg.enroll("G", "CALC1", "CALC1-2024-1")
    reg.record_grades("CALC1-2024-1", "A", 8, 7, 9, 8.5, 9)
    reg.record_attendance("CALC1-2024-1", "A", 60, 54)
    reg.record_attendance("CALC1-2024-1", "G", 60, 30)
    return reg


# ─── HILFSFUNKTIONEN ──────────────────────────────────────────────────────────

class TestHelpers:
    def test_number_format(self):
        assert fmt_score(8.3125) == "8.3"
        assert fmt_percent(66.666) == "66.7%"

    def test_hex_to_rgb(self):
        assert hex_to_rgb("4472C4") == (0x44, 0x72, 0xC4)

    def test_safe_sheet_title(self):
        title = safe_sheet_title("Kurs A/B:C*" + "x" * 40)
        assert len(title) == 31
        assert not any(ch in title for ch in "[]:*?/\\")

    def test_status_for_special_student(self):
        reg = _make_registry()
        student = reg.get_student("G")
        card = reg.get_score_card("CALC1-2024-1", "G")
        assert status_label(student, card) == "Gasthörer (ohne Bewertung)"
        assert status_color(student, card) == COLORS["special"]

    def test_status_for_regular_student(self):
        reg = _make_registry()
        student = reg.get_student("A")
        card = reg.get_score_card("CALC1-2024-1", "A")
        assert status_label(student, card) == "Bestanden"
        assert status_color(student, card) == COLORS["approved"]
        assert status_color(None, ScoreCard()) == COLORS["failed_attendance"]

    def test_pdf_safe(self):
        assert _pdf_safe("a — b ≥ c") == "a  -  b >= c"


# ─── TEXTBERICHTE ─────────────────────────────────────────────────────────────

class TestReports:
    def test_class_report(self):
        reg = _make_registry()
        text = reports.class_report(reg.data, "CALC1-2024-1")
        assert text.startswith("Bericht zum Kurs: CALC1-2024-1")
        assert "Fach: Analysis 1" in text
        assert "Dozent/in: Emmy Noether" in text
        assert "Bewertung: Gewichteter Durchschnitt" in text
        assert "Raum H1-01" in text
        assert "Studierende/r: Ada Lovelace (A)" in text
        assert "Enddurchschnitt: 8.3" in text
        assert "Teilnehmer: 2/2" in text
        assert "Kursdurchschnitt: 8.3" in text

    def test_class_report_special_without_grades(self):
        """Gasthörer erscheinen nur mit Anwesenheit und ohne Noten."""
        reg = _make_registry()
        text = reports.class_report(reg.data, "CALC1-2024-1")
        block = text.split("Studierende/r: Gast Hörer (G)\n", 1)[1].split("\n", 1)[0]
        assert block == "Anwesenheit: 50.0%, Ergebnis: Gasthörer (ohne Bewertung)"

    def test_class_report_not_found(self):
        assert reports.class_report(_make_registry().data, "NOPE") == reports.CLASS_NOT_FOUND

    def test_course_report(self):
        reg = _make_registry()
        text = reports.course_report(reg.data, "CALC1")
        assert text.startswith("Bericht zum Fach: Analysis 1 (CALC1)")
        assert "Stundenumfang: 60 Stunden" in text
        assert "Kurs: CALC1-2024-1" in text
        assert "Summe Eingeschriebene: 2" in text
        assert "Voraussetzungen: CALC1" in reports.course_report(reg.data, "CALC2")

    def test_course_report_not_found(self):
        assert reports.course_report(_make_registry().data, "X") == reports.COURSE_NOT_FOUND

    def test_professor_report(self):
        reg = _make_registry()
        text = reports.professor_report(reg.data, "P01")
        assert text.startswith("Bericht zu Dozent/in: Emmy Noether (P01)")
        assert "Fachbereich: Mathematik" in text
        assert "Stundenumfang gesamt: 105 Stunden" in text

    def test_professor_without_classes(self):
        reg = _make_registry()
        reg.register_professor("Alan Turing", "P02", "Informatik")
        assert reports.professor_report(reg.data, "P02") == reports.PROFESSOR_NOT_FOUND

    def test_transcript_filters_term(self):
        reg = _make_registry()
        text = reports.student_transcript(reg.data, "A", "2024.1")
        assert text.startswith("Notenspiegel: Ada Lovelace (A)")
        assert "Fach: Analysis 1 (CALC1)" in text
        assert "CALC2" not in text
        assert "Ergebnis: Bestanden" in text

    def test_transcript_details(self):
        reg = _make_registry()
        text = reports.student_transcript(reg.data, "A", "2024.2",
                                          include_class_details=True)
        assert "Modalität: Online" in text
        assert "Stundenumfang: 45 Stunden" in text

    def test_transcript_special_student(self):
        reg = _make_registry()
        text = reports.student_transcript(reg.data, "G", "2024.1")
        assert "Status: Gasthörer (ohne Bewertung)" in text
        assert "Enddurchschnitt" not in text

    def test_transcript_not_found(self):
        reg = _make_registry()
        assert reports.student_transcript(reg.data, "A", "2023.2") == \
            reports.TRANSCRIPT_NOT_FOUND
        assert reports.student_transcript(reg.data, "X", "2024.1") == \
            reports.TRANSCRIPT_NOT_FOUND


# ─── TERMINAL-TABELLEN ────────────────────────────────────────────────────────

class TestTuiRenderer:
    def test_student_rows(self):
        header, rows = render_student_rows(_make_registry().data)
        assert header[0] == "Matrikel"
        assert rows[0][:5] == ["A", "Ada Lovelace", "Informatik", "Regulär", "CALC1, CALC2"]

    def test_class_rows_mark_full(self):
        _, rows = render_class_rows(_make_registry().data)
        by_code = {r[0]: r for r in rows}
        assert by_code["CALC1-2024-1"][-1] == "2/2 voll"
        assert by_code["CALC2-2024-2"][5] == "Online"

    def test_course_rows(self):
        _, rows = render_course_rows(_make_registry().data)
        assert rows[1] == ["CALC2", "Analysis 2", "45", "CALC1", "1"]

    def test_roster_rows(self):
        reg = _make_registry()
        header, rows = render_roster_rows(reg.get_class("CALC1-2024-1"), reg.data)
        assert len(header) == len(rows[0])
        assert rows[0][7] == "8.3"
        assert rows[1][2:8] == ["—"] * 6


# ─── EXCEL ────────────────────────────────────────────────────────────────────

class TestExcelExport:
    def test_creates_file_with_sheets(self, tmp_path: Path):
        from openpyxl import load_workbook
        reg = _make_registry()
        path = tmp_path / "sub" / "kurse.xlsx"
        ExcelExporter(reg.data, "FB Mathematik").export(path)
        assert path.exists()

        wb = load_workbook(path)
        assert wb.sheetnames == ["Übersicht", "Kurs CALC1-2024-1", "Kurs CALC2-2024-2"]
        overview = wb["Übersicht"]
        assert overview.cell(row=1, column=1).value == "FB Mathematik"
        assert overview.cell(row=5, column=1).value == "CALC1-2024-1"
        assert overview.cell(row=5, column=4).value == 2

    def test_class_sheet_rows(self, tmp_path: Path):
        from openpyxl import load_workbook
        reg = _make_registry()
        path = tmp_path / "kurse.xlsx"
        ExcelExporter(reg.data).export(path)
        ws = load_workbook(path)["Kurs CALC1-2024-1"]
        assert ws.cell(row=5, column=1).value == "A"
        assert ws.cell(row=5, column=9).value == pytest.approx(8.3)
        assert ws.cell(row=5, column=13).value == "Bestanden"
        assert ws.cell(row=6, column=13).value == "Gasthörer (ohne Bewertung)"

    def test_term_filter(self, tmp_path: Path):
        from openpyxl import load_workbook
        path = tmp_path / "kurse.xlsx"
        ExcelExporter(_make_registry().data).export(path, term="2024.2")
        assert load_workbook(path).sheetnames == ["Übersicht", "Kurs CALC2-2024-2"]


# ─── PDF ──────────────────────────────────────────────────────────────────────

class TestPdfExport:
    def test_transcript(self, tmp_path: Path):
        path = tmp_path / "notenspiegel.pdf"
        ok = PdfExporter(_make_registry().data, "FB Mathematik").export_transcript(
            "A", "2024.1", path,
        )
        assert ok
        assert path.read_bytes().startswith(b"%PDF")

    def test_transcript_special_student(self, tmp_path: Path):
        path = tmp_path / "gast.pdf"
        assert PdfExporter(_make_registry().data).export_transcript("G", "2024.1", path)
        assert path.exists()

    def test_transcript_without_classes(self, tmp_path: Path):
        path = tmp_path / "leer.pdf"
        assert not PdfExporter(_make_registry().data).export_transcript("A", "1999.1", path)
        assert not path.exists()

    def test_class_lists(self, tmp_path: Path):
        path = tmp_path / "out" / "kurslisten.pdf"
        PdfExporter(_make_registry().data).export_class_lists(path)
        assert path.read_bytes().startswith(b"%PDF")
