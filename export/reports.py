"""Textberichte über Kurse, Fächer, Dozenten und Studierende.

Alle Funktionen sind reine Leseoperationen auf AcademicData und liefern
formatierten Text. Durchschnitte und Prozentwerte mit einer Nachkommastelle.
"""

from analysis.class_statistics import ClassStatisticsAnalyzer
from export.helpers import fmt_percent, fmt_score, status_label
from models.academic_data import AcademicData

CLASS_NOT_FOUND = "Kurs nicht gefunden"
COURSE_NOT_FOUND = "Fach nicht gefunden"
PROFESSOR_NOT_FOUND = "Dozent/in nicht gefunden oder ohne Kurse"
TRANSCRIPT_NOT_FOUND = "Studierende/r nicht gefunden oder ohne Kurse im Semester"


def _professor_name(data: AcademicData, professor_id: str) -> str:
    professor = data.professors.get(professor_id)
    return professor.name if professor else professor_id


def _course_name(data: AcademicData, course_code: str) -> str:
    course = data.courses.get(course_code)
    return course.name if course else course_code


def class_report(data: AcademicData, class_code: str) -> str:
    """Teilnehmerliste eines Kurses mit allen Leistungsnachweisen und Kennzahlen."""
    cc = data.classes.get(class_code)
    if cc is None:
        return CLASS_NOT_FOUND

    lines = [
        f"Bericht zum Kurs: {cc.code}",
        f"Fach: {_course_name(data, cc.course_code)}",
        f"Dozent/in: {_professor_name(data, cc.professor_id)}",
        f"Semester: {cc.term}",
        f"Bewertung: {cc.policy.label}",
        f"Modalität: {cc.modality}" + (f", Raum {cc.room}" if cc.room else ""),
        "",
    ]

    for student_id in cc.roster:
        student = data.students.get(student_id)
        card = cc.records[student_id]
        name = student.name if student else "?"
        lines.append(f"Studierende/r: {name} ({student_id})")
        if student is not None and not student.receives_grades:
            lines.append(
                f"Anwesenheit: {fmt_percent(card.attendance_percentage())}, "
                f"Ergebnis: {status_label(student, card)}"
            )
        else:
            lines.append(str(card))
        lines.append("")

    stats = ClassStatisticsAnalyzer().analyze(cc, data)
    lines.append(f"Teilnehmer: {stats.enrolled}/{stats.capacity}")
    if stats.graded:
        lines.append(f"Kursdurchschnitt: {fmt_score(stats.mean_average)}")
        lines.append(
            f"Bestanden: {stats.approved} | "
            f"Fehlzeiten: {stats.failed_attendance} | "
            f"Note: {stats.failed_grade} | "
            f"Quote: {fmt_percent(100 * stats.approval_rate)}"
        )
    return "\n".join(lines) + "\n"


def course_report(data: AcademicData, course_code: str) -> str:
    """Fachdaten und alle angebotenen Kurse."""
    course = data.courses.get(course_code)
    if course is None:
        return COURSE_NOT_FOUND

    lines = [
        f"Bericht zum Fach: {course.name} ({course.code})",
        f"Stundenumfang: {course.credit_hours} Stunden",
    ]
    if course.prerequisites:
        lines.append(f"Voraussetzungen: {', '.join(course.prerequisites)}")
    lines.append("")

    classes = data.classes_of_course(course.code)
    for cc in classes:
        lines += [
            f"Kurs: {cc.code}",
            f"Dozent/in: {_professor_name(data, cc.professor_id)}",
            f"Semester: {cc.term}",
            f"Eingeschrieben: {cc.enrolled_count}",
            "",
        ]
    lines.append(f"Summe Eingeschriebene: {sum(cc.enrolled_count for cc in classes)}")
    return "\n".join(lines) + "\n"


def professor_report(data: AcademicData, professor_id: str) -> str:
    """Lehrtätigkeit eines Dozenten."""
    professor = data.professors.get(professor_id)
    classes = data.classes_of_professor(professor_id)
    if professor is None or not classes:
        return PROFESSOR_NOT_FOUND

    lines = [
        f"Bericht zu Dozent/in: {professor.name} ({professor.id})",
        f"Fachbereich: {professor.department}",
        "",
    ]
    hours = 0
    for cc in classes:
        course = data.courses.get(cc.course_code)
        hours += course.credit_hours if course else 0
        lines += [
            f"Kurs: {cc.code}",
            f"Fach: {_course_name(data, cc.course_code)}",
            f"Semester: {cc.term}",
            f"Eingeschrieben: {cc.enrolled_count}",
            "",
        ]
    lines.append(f"Stundenumfang gesamt: {hours} Stunden")
    return "\n".join(lines) + "\n"


def student_transcript(data: AcademicData, student_id: str, term: str,
                       include_class_details: bool = False) -> str:
    """Notenspiegel eines Studierenden für ein Semester."""
    student = data.students.get(student_id)
    classes = data.classes_of_student(student_id, term)
    if student is None or not classes:
        return TRANSCRIPT_NOT_FOUND

    lines = [
        f"Notenspiegel: {student.name} ({student.id})",
        f"Studiengang: {student.course_of_study}",
        f"Semester: {term}",
    ]
    if not student.receives_grades:
        lines.append("Status: Gasthörer (ohne Bewertung)")
    lines.append("")

    for cc in classes:
        course = data.courses.get(cc.course_code)
        lines.append(f"Fach: {_course_name(data, cc.course_code)} ({cc.course_code})")
        if include_class_details:
            lines.append(f"Dozent/in: {_professor_name(data, cc.professor_id)}")
            lines.append(f"Modalität: {cc.modality}")
            if course is not None:
                lines.append(f"Stundenumfang: {course.credit_hours} Stunden")
        card = cc.records[student.id]
        if student.receives_grades:
            lines.append(str(card))
        else:
            lines.append(f"Anwesenheit: {fmt_percent(card.attendance_percentage())}")
        lines.append("")
    return "\n".join(lines) + "\n"
