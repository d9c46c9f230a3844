"""Tests für das AcademicRegistry (Belegung, Sperre, Kursanlage, Bewertung)."""

import pytest

from engine.registry import AcademicRegistry
from models.evaluation import EvaluationPolicy, ScoreStatus
from models.exceptions import RosterStateError, ScoreValidationError


def _make_registry(capacity: int = 2) -> AcademicRegistry:
    """Katalog: CALC1 → CALC2, LINA; ein Kurs je Fach, Dozentin P01."""
    reg = AcademicRegistry()
    assert reg.register_professor("Emmy Noether", "P01", "Mathematik")
    assert reg.register_course("Analysis 1", "CALC1", 60)
    assert reg.register_course("Analysis 2", "CALC2", 60)
    assert reg.register_course("Lineare Algebra", "LINA", 60)
    assert reg.add_prerequisite("CALC2", "CALC1")
    for code, schedule in [("CALC1", "MO 08:00-09:40"), ("CALC2", "DI 08:00-09:40"),
                           ("LINA", "MI 08:00-09:40")]:
        assert reg.create_class(f"{code}-2024-1", code, "P01", "2024.1",
                                EvaluationPolicy.WEIGHTED, True, schedule, capacity)
    assert reg.register_student("Ada", "A", "Informatik")
    assert reg.register_student("Bob", "B", "Informatik")
    assert reg.register_student("Cleo", "C", "Informatik")
    assert reg.register_student("Gast", "G", "Philosophie", special=True)
    return reg


# ─── ANLAGE ───────────────────────────────────────────────────────────────────

class TestRegistration:
    def test_duplicate_student_id(self):
        reg = _make_registry()
        assert reg.register_student("Andere", "A", "Physik") is False
        assert "bereits vergeben" in reg.last_error
        assert reg.get_student("A").name == "Ada"

    def test_blank_name_rejected(self):
        reg = AcademicRegistry()
        assert reg.register_student(" ", "X", "Physik") is False
        assert reg.get_student("X") is None

    def test_special_student_kind(self):
        reg = _make_registry()
        assert reg.get_student("G").is_special
        assert not reg.get_student("A").is_special

    def test_edit_student(self):
        reg = _make_registry()
        assert reg.edit_student("A", "Ada L.", "Mathematik")
        s = reg.get_student("A")
        assert (s.name, s.course_of_study, s.id) == ("Ada L.", "Mathematik", "A")
        assert reg.edit_student("X", "Y", "Z") is False

    def test_duplicate_course_code(self):
        reg = _make_registry()
        assert reg.register_course("Noch mal", "CALC1", 30) is False
        assert reg.get_course("CALC1").name == "Analysis 1"

    def test_negative_hours_rejected(self):
        reg = AcademicRegistry()
        assert reg.register_course("X", "X", -5) is False

    def test_edit_professor(self):
        reg = _make_registry()
        assert reg.edit_professor("P01", "E. Noether", "Algebra")
        assert reg.get_professor("P01").department == "Algebra"

    @pytest.mark.parametrize("key", ["S;1", "S,1"])
    def test_separator_in_keys_rejected(self, key):
        """Trennzeichen der Textdateien sind in Kennungen und Codes unzulässig."""
        reg = _make_registry()
        assert reg.register_student("Anna", key, "Informatik") is False
        assert "darf keines der Zeichen" in reg.last_error
        assert reg.register_professor("Anna", key, "Physik") is False
        assert reg.register_course("Kurs", key, 30) is False
        assert reg.create_class(key, "LINA", "P01", "2024.1", EvaluationPolicy.SIMPLE,
                                True, "FR 08:00-09:40", 10) is False
        assert key not in reg.data.students
        assert key not in reg.data.classes

    def test_success_clears_last_error(self):
        reg = _make_registry()
        reg.register_student("X", "A", "Y")
        assert reg.last_error is not None
        assert reg.register_student("Dora", "D", "Informatik")
        assert reg.last_error is None


# ─── VORAUSSETZUNGEN ──────────────────────────────────────────────────────────

class TestPrerequisites:
    def test_unknown_course(self):
        reg = _make_registry()
        assert reg.add_prerequisite("CALC2", "NOPE") is False

    def test_self_reference(self):
        reg = _make_registry()
        assert reg.add_prerequisite("CALC1", "CALC1") is False
        assert reg.get_course("CALC1").prerequisites == []

    def test_duplicate_rejected(self):
        reg = _make_registry()
        assert reg.add_prerequisite("CALC2", "CALC1") is False
        assert "bereits Voraussetzung" in reg.last_error
        assert reg.get_course("CALC2").prerequisites == ["CALC1"]

    def test_remove(self):
        reg = _make_registry()
        assert reg.remove_prerequisite("CALC2", "CALC1")
        assert reg.remove_prerequisite("CALC2", "CALC1") is False


# ─── KURSE ────────────────────────────────────────────────────────────────────

class TestClasses:
    def test_links_created(self):
        reg = _make_registry()
        assert "CALC1-2024-1" in reg.get_course("CALC1").class_codes
        assert "CALC1-2024-1" in reg.get_professor("P01").class_codes
        assert [cc.code for cc in reg.classes_of_professor("P01")] == [
            "CALC1-2024-1", "CALC2-2024-1", "LINA-2024-1",
        ]

    def test_schedule_clash(self):
        """Gleicher Termin-Token bei derselben Person → abgelehnt."""
        reg = _make_registry()
        ok = reg.create_class("LINA-2024-2", "LINA", "P01", "2024.1",
                              EvaluationPolicy.SIMPLE, True, "MO 08:00-09:40", 30)
        assert ok is False
        assert "Termin" in reg.last_error
        assert reg.get_class("LINA-2024-2") is None

    def test_same_schedule_other_professor(self):
        reg = _make_registry()
        assert reg.register_professor("Alan Turing", "P02", "Informatik")
        assert reg.create_class("LINA-2024-2", "LINA", "P02", "2024.1",
                                EvaluationPolicy.SIMPLE, True, "MO 08:00-09:40", 30)

    def test_duplicate_class_code(self):
        reg = _make_registry()
        assert reg.create_class("CALC1-2024-1", "CALC1", "P01", "2024.1",
                                EvaluationPolicy.SIMPLE, True, "FR 10:00-11:40", 5) is False

    def test_unknown_references(self):
        reg = _make_registry()
        assert reg.create_class("X-1", "NOPE", "P01", "2024.1",
                                EvaluationPolicy.SIMPLE, True, "FR", 5) is False
        assert reg.create_class("X-1", "CALC1", "P99", "2024.1",
                                EvaluationPolicy.SIMPLE, True, "FR", 5) is False

    def test_invalid_capacity(self):
        reg = _make_registry()
        assert reg.create_class("X-1", "CALC1", "P01", "2024.1",
                                EvaluationPolicy.SIMPLE, True, "FR", 0) is False
        assert reg.get_class("X-1") is None

    def test_room_only_in_person(self):
        reg = _make_registry()
        assert reg.create_class("LINA-ONLINE", "LINA", "P01", "2024.1",
                                EvaluationPolicy.SIMPLE, False, "FR 10:00-11:40", 30,
                                room="H1")
        assert reg.get_class("LINA-ONLINE").room is None
        assert reg.set_room("LINA-ONLINE", "H2") is False
        assert reg.set_room("CALC1-2024-1", "H2")
        assert reg.get_class("CALC1-2024-1").room == "H2"


# ─── BELEGUNG ─────────────────────────────────────────────────────────────────

class TestEnrollment:
    def test_enroll_links_both_sides(self):
        reg = _make_registry()
        assert reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.get_student("A").enrolled_courses == ["CALC1"]
        assert reg.get_class("CALC1-2024-1").roster == ["A"]
        assert reg.get_score_card("CALC1-2024-1", "A") is not None

    def test_missing_prerequisite(self):
        reg = _make_registry()
        assert reg.enroll("A", "CALC2", "CALC2-2024-1") is False
        assert "CALC1" in reg.last_error
        assert reg.get_class("CALC2-2024-1").roster == []

    def test_prerequisite_met_by_enrollment(self):
        reg = _make_registry()
        assert reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.enroll("A", "CALC2", "CALC2-2024-1")

    def test_full_class_rolls_back(self):
        """Voller Kurs: die Fachbelegung des Studierenden wird zurückgenommen."""
        reg = _make_registry(capacity=2)
        assert reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.enroll("B", "CALC1", "CALC1-2024-1")
        assert reg.enroll("C", "CALC1", "CALC1-2024-1") is False
        assert "voll" in reg.last_error
        assert reg.get_student("C").enrolled_courses == []
        assert reg.get_class("CALC1-2024-1").roster == ["A", "B"]

    def test_class_of_other_course(self):
        reg = _make_registry()
        assert reg.enroll("A", "CALC1", "LINA-2024-1") is False
        assert reg.get_student("A").enrolled_courses == []

    def test_double_enroll(self):
        reg = _make_registry()
        assert reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.enroll("A", "CALC1", "CALC1-2024-1") is False
        assert reg.get_class("CALC1-2024-1").roster == ["A"]

    def test_special_student_limit(self):
        reg = _make_registry()
        assert reg.enroll("G", "CALC2", "CALC2-2024-1")   # ohne Voraussetzungen
        assert reg.enroll("G", "LINA", "LINA-2024-1")
        assert reg.enroll("G", "CALC1", "CALC1-2024-1") is False
        assert "Höchstzahl" in reg.last_error

    def test_withdraw(self):
        reg = _make_registry()
        reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.withdraw("A", "CALC1")
        assert reg.get_student("A").enrolled_courses == []
        assert reg.get_class("CALC1-2024-1").roster == []
        assert reg.withdraw("A", "CALC1") is False

    def test_unknown_entities(self):
        reg = _make_registry()
        assert reg.enroll("X", "CALC1", "CALC1-2024-1") is False
        assert reg.enroll("A", "NOPE", "CALC1-2024-1") is False
        assert reg.enroll("A", "CALC1", "NOPE") is False


# ─── SEMESTERSPERRE ───────────────────────────────────────────────────────────

class TestSemesterLock:
    def test_lock_removes_everything(self):
        reg = _make_registry()
        reg.enroll("A", "CALC1", "CALC1-2024-1")
        reg.enroll("A", "LINA", "LINA-2024-1")
        assert reg.lock_semester("A")
        assert reg.get_student("A").enrolled_courses == []
        assert reg.classes_of_student("A") == []

    def test_lock_then_enroll_rejected(self):
        reg = _make_registry()
        reg.lock_semester("A")
        assert reg.enroll("A", "CALC1", "CALC1-2024-1") is False
        assert "gesperrt" in reg.last_error

    def test_unlock_does_not_restore(self):
        reg = _make_registry()
        reg.enroll("A", "CALC1", "CALC1-2024-1")
        reg.lock_semester("A")
        assert reg.unlock_semester("A")
        assert reg.get_student("A").enrolled_courses == []
        assert reg.get_class("CALC1-2024-1").roster == []
        assert reg.enroll("A", "CALC1", "CALC1-2024-1")


# ─── BEWERTUNG ────────────────────────────────────────────────────────────────

class TestEvaluation:
    def test_grades_and_attendance(self):
        reg = _make_registry()
        reg.enroll("A", "CALC1", "CALC1-2024-1")
        assert reg.record_grades("CALC1-2024-1", "A", 8, 7, 9, 8.5, 9)
        assert reg.record_attendance("CALC1-2024-1", "A", 60, 54)
        card = reg.get_score_card("CALC1-2024-1", "A")
        assert card.average() == pytest.approx(8.3125)
        assert card.status() == ScoreStatus.APPROVED

    def test_special_student_grades_rejected(self):
        reg = _make_registry()
        reg.enroll("G", "LINA", "LINA-2024-1")
        assert reg.record_grades("LINA-2024-1", "G", 9, 9, 9, 9, 9) is False
        assert "keine Noten" in reg.last_error
        assert reg.record_attendance("LINA-2024-1", "G", 10, 10)

    def test_invalid_score_propagates(self):
        reg = _make_registry()
        reg.enroll("A", "CALC1", "CALC1-2024-1")
        with pytest.raises(ScoreValidationError):
            reg.record_grades("CALC1-2024-1", "A", 11, 0, 0, 0, 0)

    def test_not_on_roster_propagates(self):
        reg = _make_registry()
        with pytest.raises(RosterStateError):
            reg.record_attendance("CALC1-2024-1", "A", 10, 5)

    def test_unknown_class(self):
        reg = _make_registry()
        assert reg.record_grades("NOPE", "A", 1, 1, 1, 1, 1) is False
        assert reg.get_score_card("NOPE", "A") is None
