"""
import_engine.field_map - Canonical import field ↔ source column mapping.

The caller tells us which spreadsheet header holds each of the four
required fields.  Notes are never mapped; they always come from the
literal "notes" column when present.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

# Wire key (JSON sent by the upload form)  →  FieldMapping attribute
REQUIRED_FIELDS: dict[str, str] = {
    "studentName":     "student_name",
    "studentIdNumber": "student_id_number",
    "class":           "class_name",
    "grade":           "grade",
}

NOTES_HEADER = "notes"


class MappingError(Exception):
    """Raised when a field mapping is malformed or incomplete."""
    pass


@dataclass(frozen=True)
class FieldMapping:
    student_name: str
    student_id_number: str
    class_name: str
    grade: str

    @classmethod
    def from_dict(cls, data: dict) -> "FieldMapping":
        if not isinstance(data, dict):
            raise MappingError("Invalid mappings JSON format")
        values = {}
        for key, attr in REQUIRED_FIELDS.items():
            header = data.get(key)
            if not isinstance(header, str) or not header.strip():
                raise MappingError("All required field mappings must be provided")
            values[attr] = header.strip()
        return cls(**values)

    @classmethod
    def from_json(cls, text: str | None) -> "FieldMapping":
        try:
            data = json.loads(text or "")
        except (json.JSONDecodeError, TypeError) as exc:
            raise MappingError("Invalid mappings JSON format") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for key, attr in REQUIRED_FIELDS.items()}
