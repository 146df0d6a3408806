"""
import_engine.row_processor - Validate and normalise one raw row.

Single-responsibility: given a header → cell dict and a FieldMapping,
either return a NormalizedRow, return None for a blank/incomplete row,
or raise RowError.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from import_engine.field_map import FieldMapping, NOTES_HEADER

GRADE_MIN = 0.0
GRADE_MAX = 100.0


class RowError(Exception):
    """Raised when a row cannot be imported."""
    field: Optional[str] = None


class InvalidGrade(RowError):
    field = "grade"

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid grade value: {value}")


@dataclass(frozen=True)
class NormalizedRow:
    student_name: str
    student_id_number: str
    class_name: str
    grade: float
    notes: Optional[str] = None


def normalize(row: dict, mapping: FieldMapping) -> Optional[NormalizedRow]:
    """
    Extract and clean the mapped fields of one row.

    Returns None when any required value is missing or blank, so the
    caller can skip the row silently.  Raises InvalidGrade when the
    grade is not a number in [0, 100].
    """
    student_name = _cell(row, mapping.student_name)
    student_id_number = _cell(row, mapping.student_id_number)
    class_name = _cell(row, mapping.class_name)
    grade_raw = _cell(row, mapping.grade)

    if not (student_name and student_id_number and class_name and grade_raw):
        return None

    grade = parse_grade(grade_raw)

    return NormalizedRow(
        student_name=student_name,
        student_id_number=student_id_number,
        class_name=class_name,
        grade=grade,
        notes=_cell(row, NOTES_HEADER) or None,
    )


def parse_grade(raw) -> float:
    """Parse a grade value, raising InvalidGrade outside [0, 100]."""
    if isinstance(raw, bool):
        raise InvalidGrade(raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidGrade(raw) from None
    if not math.isfinite(value) or value < GRADE_MIN or value > GRADE_MAX:
        raise InvalidGrade(raw)
    return value


def _cell(row: dict, header: str) -> str:
    val = row.get(header)
    if val is None:
        return ""
    if isinstance(val, float) and val.is_integer():
        # Spreadsheet IDs such as 1001 come back as 1001.0
        val = int(val)
    return str(val).strip()
