"""Tests für die Textdatei-Persistenz."""

import pytest

from data.text_store import TextStore
from engine.registry import AcademicRegistry
from models.evaluation import EvaluationPolicy


def _make_registry() -> AcademicRegistry:
    reg = AcademicRegistry()
    reg.register_professor("Emmy Noether", "P01", "Mathematik")
    reg.register_course("Analysis 1", "CALC1", 60)
    reg.register_course("Analysis 2", "CALC2", 60)
    reg.add_prerequisite("CALC2", "CALC1")
    reg.create_class("CALC1-2024-1", "CALC1", "P01", "2024.1",
                     EvaluationPolicy.WEIGHTED, True, "MO 08:00-09:40", 2, room="H1-01")
    reg.create_class("CALC2-2024-1", "CALC2", "P01", "2024.1",
                     EvaluationPolicy.SIMPLE, False, "DI 08:00-09:40", 30)
    reg.register_student("Ada Lovelace", "A", "Informatik")
    reg.register_student("Gast; mit Semikolon", "G", "Philosophie", special=True)
    reg.register_student("Gesperrt", "L", "Physik")
    reg.enroll("A", "CALC1", "CALC1-2024-1")
    reg.enroll("A", "CALC2", "CALC2-2024-1")
    reg.enroll("G", "CALC1", "CALC1-2024-1")
    reg.record_grades("CALC1-2024-1", "A", 8, 7, 9, 8.5, 9)
    reg.record_attendance("CALC1-2024-1", "A", 60, 54)
    reg.record_attendance("CALC1-2024-1", "G", 60, 30)
    reg.lock_semester("L")
    return reg


# ─── SPEICHERN & LADEN ────────────────────────────────────────────────────────

class TestRoundtrip:
    def test_save_creates_files(self, tmp_path):
        store = TextStore(tmp_path / "daten")
        assert store.save(_make_registry().data)
        for name in ("students.txt", "catalog.txt", "evaluations.txt"):
            assert (tmp_path / "daten" / name).exists()

    def test_roundtrip_preserves_data(self, tmp_path):
        """Gespeicherter und wieder geladener Bestand ist gleichwertig."""
        original = _make_registry().data
        store = TextStore(tmp_path)
        store.save(original)
        loaded = store.load()

        assert loaded is not None
        assert store.last_report.warnings == []
        assert set(loaded.students) == {"A", "G", "L"}
        assert loaded.students["G"].is_special
        assert loaded.students["L"].semester_locked
        assert loaded.students["A"].enrolled_courses == ["CALC1", "CALC2"]
        assert loaded.courses["CALC2"].prerequisites == ["CALC1"]
        assert loaded.professors["P01"].class_codes == ["CALC1-2024-1", "CALC2-2024-1"]

        cc = loaded.classes["CALC1-2024-1"]
        assert cc.policy == EvaluationPolicy.WEIGHTED
        assert cc.room == "H1-01"
        assert cc.roster == ["A", "G"]
        card = cc.records["A"]
        assert card.average() == pytest.approx(8.3125)
        assert card.attendance_percentage() == pytest.approx(90.0)
        assert cc.records["G"].classes_attended == 30

        online = loaded.classes["CALC2-2024-1"]
        assert not online.is_in_person
        assert online.room is None

    def test_separator_in_name_neutralized(self, tmp_path):
        store = TextStore(tmp_path)
        store.save(_make_registry().data)
        loaded = store.load()
        assert loaded.students["G"].name == "Gast, mit Semikolon"

    def test_wire_tags(self, tmp_path):
        store = TextStore(tmp_path)
        store.save(_make_registry().data)
        students = (tmp_path / "students.txt").read_text(encoding="utf-8")
        catalog = (tmp_path / "catalog.txt").read_text(encoding="utf-8")
        assert students.startswith("NORMAL;Ada Lovelace;A;Informatik;false;CALC1,CALC2")
        assert "ESPECIAL;" in students
        assert "PROF;Emmy Noether;P01;Mathematik" in catalog
        assert "DISC;Analysis 2;CALC2;60;CALC1" in catalog
        assert "MEDIA_PONDERADA" in catalog and "MEDIA_SIMPLES" in catalog

    def test_custom_file_names(self, tmp_path):
        store = TextStore(tmp_path, students_file="s.txt", catalog_file="k.txt",
                          evaluations_file="b.txt")
        store.save(_make_registry().data)
        assert (tmp_path / "s.txt").exists()
        assert store.load().students["A"].name == "Ada Lovelace"


# ─── ERSTSTART & FEHLERTOLERANZ ───────────────────────────────────────────────

class TestLoading:
    def test_missing_files_empty_data(self, tmp_path):
        """Fehlende Dateien: leerer Bestand, kein Fehler."""
        store = TextStore(tmp_path / "leer")
        data = store.load()
        assert data is not None
        assert data.students == {}
        assert store.last_error is None
        assert len(store.last_report.missing_files) == 3

    def test_legacy_four_column_students(self, tmp_path):
        """Studierendenzeilen ohne Sperr- und Belegungsfeld werden akzeptiert."""
        (tmp_path / "catalog.txt").write_text(
            "### PROFESSORES ###\n"
            "PROF;Emmy Noether;P01;Mathematik\n"
            "### DISCIPLINAS ###\n"
            "DISC;Analysis 1;CALC1;60;\n"
            "### TURMAS ###\n"
            "TURM;CALC1-2024-1;CALC1;P01;2024.1;MEDIA_SIMPLES;true;MO;10;H1\n",
            encoding="utf-8",
        )
        (tmp_path / "students.txt").write_text(
            "NORMAL;Ada Lovelace;A;Informatik\n", encoding="utf-8",
        )
        (tmp_path / "evaluations.txt").write_text(
            "CALC1-2024-1;A;5.0;5.0;5.0;5.0;5.0;20;18\n", encoding="utf-8",
        )
        store = TextStore(tmp_path)
        data = store.load()
        assert store.last_report.warnings == []
        student = data.students["A"]
        assert not student.semester_locked
        assert student.enrolled_courses == ["CALC1"]
        assert data.classes["CALC1-2024-1"].records["A"].average() == pytest.approx(5.0)

    def test_malformed_lines_become_warnings(self, tmp_path):
        (tmp_path / "catalog.txt").write_text(
            "DISC;Analysis 1;CALC1;viele;\n"
            "XYZ;irgendwas\n"
            "DISC;Lineare Algebra;LINA;60;\n",
            encoding="utf-8",
        )
        (tmp_path / "students.txt").write_text(
            "NORMAL;nur;drei\n"
            "ANDERS;Name;X;Fach\n"
            "NORMAL;Ada;A;Informatik;false;LINA,NOPE\n",
            encoding="utf-8",
        )
        store = TextStore(tmp_path)
        data = store.load()
        assert data is not None
        assert set(data.courses) == {"LINA"}
        assert set(data.students) == {"A"}
        assert data.students["A"].enrolled_courses == ["LINA"]
        assert len(store.last_report.warnings) == 5

    def test_unknown_class_in_evaluations(self, tmp_path):
        (tmp_path / "evaluations.txt").write_text(
            "NOPE;A;1;1;1;1;1;10;10\n", encoding="utf-8",
        )
        store = TextStore(tmp_path)
        store.load()
        assert any("NOPE" in w for w in store.last_report.warnings)

    def test_from_config(self, tmp_path):
        from config.schema import StorageConfig
        storage = StorageConfig(data_dir=str(tmp_path), students_file="s.txt")
        store = TextStore.from_config(storage)
        assert store.students_path == tmp_path / "s.txt"
        assert store.catalog_path == tmp_path / "catalog.txt"

    def test_every_line_has_expected_field_count(self, tmp_path):
        """Freitext mit Trennzeichen verschiebt keine Spalten."""
        reg = _make_registry()
        reg.get_class("CALC1-2024-1").set_room("Raum; Nord")
        store = TextStore(tmp_path)
        store.save(reg.data)
        for line in (tmp_path / "evaluations.txt").read_text(encoding="utf-8").splitlines():
            assert len(line.split(";")) == 9
        for line in (tmp_path / "catalog.txt").read_text(encoding="utf-8").splitlines():
            if line.startswith("TURM"):
                assert len(line.split(";")) == 10
        loaded = store.load()
        assert store.last_report.warnings == []
        assert loaded.classes["CALC1-2024-1"].roster == ["A", "G"]


# ─── UNGÜLTIGE BEWERTUNGSZEILEN ───────────────────────────────────────────────

_CATALOG = (
    "PROF;Emmy Noether;P01;Mathematik\n"
    "DISC;Analysis 1;CALC1;60;\n"
    "TURM;CALC1-2024-1;CALC1;P01;2024.1;MEDIA_SIMPLES;true;MO;10;H1\n"
)


def _load_with_evaluations(tmp_path, evaluations: str):
    (tmp_path / "catalog.txt").write_text(_CATALOG, encoding="utf-8")
    (tmp_path / "students.txt").write_text(
        "NORMAL;Ada Lovelace;A;Informatik;false;CALC1\n", encoding="utf-8",
    )
    (tmp_path / "evaluations.txt").write_text(evaluations, encoding="utf-8")
    store = TextStore(tmp_path)
    return store, store.load()


class TestEvaluationValues:
    @pytest.mark.parametrize("line", [
        "CALC1-2024-1;A;15.0;8;8;8;8;10;20\n",
        "CALC1-2024-1;A;8;nan;8;8;8;10;20\n",
        "CALC1-2024-1;A;8;8;8;8;-1;10;5\n",
    ])
    def test_scores_out_of_range_rejected(self, tmp_path, line):
        """Noten außerhalb von [0, 10] (auch NaN) werden nicht übernommen."""
        store, data = _load_with_evaluations(tmp_path, line)
        warnings = store.last_report.warnings
        assert len(warnings) == 1
        assert "evaluations.txt:1" in warnings[0]
        assert "außerhalb" in warnings[0]
        assert data.classes["CALC1-2024-1"].roster == []
        assert data.classes["CALC1-2024-1"].records == {}

    @pytest.mark.parametrize("held,attended", [(10, 20), (10, -1), (-5, 0)])
    def test_attendance_out_of_range_rejected(self, tmp_path, held, attended):
        store, data = _load_with_evaluations(
            tmp_path, f"CALC1-2024-1;A;5;5;5;5;5;{held};{attended}\n",
        )
        assert len(store.last_report.warnings) == 1
        assert data.classes["CALC1-2024-1"].roster == []

    def test_unrecorded_attendance_accepted(self, tmp_path):
        """0 von 0 Terminen: Anwesenheit noch nicht erfasst, kein Fehler."""
        store, data = _load_with_evaluations(tmp_path, "CALC1-2024-1;A;5;5;5;5;5;0;0\n")
        assert store.last_report.warnings == []
        card = data.classes["CALC1-2024-1"].records["A"]
        assert (card.classes_held, card.classes_attended) == (0, 0)
        assert store.last_report.records_loaded == 1
