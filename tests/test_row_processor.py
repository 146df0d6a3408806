import pytest

from import_engine.field_map import FieldMapping, MappingError
from import_engine.row_processor import InvalidGrade, NormalizedRow, RowError, normalize
from tests.helpers import MAPPING


def _row(name="Alice", sid="S1", cls="Math", grade="85", notes=None):
    row = {"Student Name": name, "Student ID": sid, "Class": cls, "Grade": grade}
    if notes is not None:
        row["notes"] = notes
    return row


def test_values_are_trimmed_and_coerced():
    result = normalize(_row("  Alice ", " S1", "Math  ", " 85.5 ", "  late  "), MAPPING)
    assert result == NormalizedRow(
        student_name="Alice", student_id_number="S1",
        class_name="Math", grade=85.5, notes="late",
    )


def test_missing_notes_column_gives_none():
    assert normalize(_row(), MAPPING).notes is None
    assert normalize(_row(notes="   "), MAPPING).notes is None


@pytest.mark.parametrize("field", ["Student Name", "Student ID", "Class", "Grade"])
def test_blank_required_value_skips_row(field):
    row = _row()
    row[field] = "   "
    assert normalize(row, MAPPING) is None


def test_absent_required_column_skips_row():
    row = _row()
    del row["Class"]
    assert normalize(row, MAPPING) is None


@pytest.mark.parametrize("grade", ["0", "100", 0, 100, "0.0", 55.25])
def test_grade_boundaries_accepted(grade):
    assert 0 <= normalize(_row(grade=grade), MAPPING).grade <= 100


@pytest.mark.parametrize("grade", ["-0.01", "100.01", "150", "abc", "nan", "inf", "85%"])
def test_invalid_grade_rejected(grade):
    with pytest.raises(InvalidGrade) as excinfo:
        normalize(_row(grade=grade), MAPPING)
    assert excinfo.value.field == "grade"
    assert str(grade) in str(excinfo.value)


def test_invalid_grade_is_a_row_error():
    assert issubclass(InvalidGrade, RowError)


def test_whole_float_ids_lose_trailing_zero():
    result = normalize(_row(sid=1001.0, grade=90.0), MAPPING)
    assert result.student_id_number == "1001"
    assert result.grade == 90.0


def test_custom_mapping_headers():
    mapping = FieldMapping(student_name="Nom", student_id_number="Matricule",
                           class_name="Cours", grade="Note")
    row = {"Nom": "Zoé", "Matricule": "M-7", "Cours": "Chimie", "Note": "12"}
    result = normalize(row, mapping)
    assert (result.student_name, result.class_name, result.grade) == ("Zoé", "Chimie", 12.0)


# ── FieldMapping ──────────────────────────────────────────────────────

def test_mapping_from_json():
    mapping = FieldMapping.from_json(
        '{"studentName": "Name", "studentIdNumber": "ID", "class": "Course", "grade": "Score"}'
    )
    assert mapping == FieldMapping("Name", "ID", "Course", "Score")
    assert mapping.to_dict()["class"] == "Course"


@pytest.mark.parametrize("text", [None, "", "{not json", "[1, 2]"])
def test_mapping_malformed_json(text):
    with pytest.raises(MappingError, match="Invalid mappings JSON format"):
        FieldMapping.from_json(text)


@pytest.mark.parametrize("missing", ["studentName", "studentIdNumber", "class", "grade"])
def test_mapping_incomplete(missing):
    data = {"studentName": "Name", "studentIdNumber": "ID", "class": "Course", "grade": "Score"}
    data[missing] = " "
    with pytest.raises(MappingError, match="All required field mappings"):
        FieldMapping.from_dict(data)
