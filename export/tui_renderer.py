"""Gemeinsamer Renderer für Terminal-Tabellen.

Wird von den CLI-Befehlen und vom Verwaltungsmenü (beide Rich) verwendet.
Jede Funktion liefert Kopfzeile und Zeilen als Stringlisten.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.academic_data import AcademicData
    from models.course_class import CourseClass


def render_student_rows(data: "AcademicData") -> tuple[list[str], list[list[str]]]:
    """Übersicht aller Studierenden in Anlagereihenfolge."""
    header = ["Matrikel", "Name", "Studiengang", "Typ", "Fächer", "Gesperrt"]
    rows = []
    for s in data.students.values():
        rows.append([
            s.id,
            s.name,
            s.course_of_study,
            s.kind.label,
            ", ".join(s.enrolled_courses) or "—",
            "ja" if s.semester_locked else "",
        ])
    return header, rows


def render_professor_rows(data: "AcademicData") -> tuple[list[str], list[list[str]]]:
    header = ["Personalnr.", "Name", "Fachbereich", "Kurse"]
    rows = [
        [p.id, p.name, p.department, ", ".join(p.class_codes) or "—"]
        for p in data.professors.values()
    ]
    return header, rows


def render_course_rows(data: "AcademicData") -> tuple[list[str], list[list[str]]]:
    header = ["Code", "Name", "Stunden", "Voraussetzungen", "Kurse"]
    rows = [
        [
            c.code,
            c.name,
            str(c.credit_hours),
            ", ".join(c.prerequisites) or "—",
            str(len(c.class_codes)),
        ]
        for c in data.courses.values()
    ]
    return header, rows


def render_class_rows(data: "AcademicData") -> tuple[list[str], list[list[str]]]:
    """Übersicht aller Kurse mit Belegung."""
    header = ["Code", "Fach", "Dozent/in", "Semester", "Termin",
              "Modalität", "Bewertung", "Belegt"]
    rows = []
    for cc in data.classes.values():
        professor = data.professors.get(cc.professor_id)
        modality = cc.modality + (f" ({cc.room})" if cc.room else "")
        occupancy = f"{cc.enrolled_count}/{cc.capacity}"
        if cc.is_full:
            occupancy += " voll"
        rows.append([
            cc.code,
            cc.course_code,
            professor.name if professor else cc.professor_id,
            cc.term,
            cc.schedule,
            modality,
            cc.policy.label,
            occupancy,
        ])
    return header, rows


def render_roster_rows(
    cc: "CourseClass",
    data: "AcademicData",
) -> tuple[list[str], list[list[str]]]:
    """Teilnehmerliste eines Kurses mit Noten, Durchschnitt und Ergebnis.

    Die letzte Spalte enthält den Ergebnistext; Gasthörer werden ohne
    Noten und Durchschnitt angezeigt.
    """
    from export.helpers import fmt_percent, fmt_score, status_label

    header = ["Matrikel", "Name", "P1", "P2", "P3", "Üb.", "Sem.",
              "Ø", "Anwesenheit", "Ergebnis"]
    rows = []
    for student_id in cc.roster:
        student = data.students.get(student_id)
        card = cc.records[student_id]
        name = student.name if student else "?"
        if student is not None and not student.receives_grades:
            scores = ["—"] * 6
        else:
            scores = [fmt_score(v) for v in card.components] + [fmt_score(card.average())]
        rows.append(
            [student_id, name]
            + scores
            + [fmt_percent(card.attendance_percentage()), status_label(student, card)]
        )
    return header, rows
