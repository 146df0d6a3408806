"""
import_engine.report - Structured result of an import run.

ImportStatistics is the per-run accumulator threaded through the row
loop; each run_import call owns exactly one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional

from import_engine.reconciler import RowOutcome


@dataclass
class ImportStatistics:
    total_rows: int = 0
    processed_rows: int = 0
    students_created: int = 0
    students_updated: int = 0
    classes_created: int = 0
    classes_reused: int = 0
    enrollments_created: int = 0
    enrollments_reused: int = 0
    grades_created: int = 0
    grades_updated: int = 0
    errors: int = 0

    def record(self, outcome: RowOutcome) -> None:
        """Count one successfully reconciled row."""
        self.processed_rows += 1
        self.students_created += outcome.student_created
        self.students_updated += outcome.student_updated
        self.classes_created += outcome.class_created
        self.classes_reused += outcome.class_reused
        self.enrollments_created += outcome.enrollment_created
        self.enrollments_reused += outcome.enrollment_reused
        self.grades_created += outcome.grade_created
        self.grades_updated += outcome.grade_updated


@dataclass
class ImportReport:
    statistics: ImportStatistics = field(default_factory=ImportStatistics)
    errors: list[dict] = field(default_factory=list)   # [{row, field?, message}]
    message: str = ""
    fatal: bool = False

    @property
    def success(self) -> bool:
        return not self.fatal and not self.errors

    def add_error(self, row: int, message: str, field_name: Optional[str] = None):
        entry = {"row": row, "message": message}
        if field_name:
            entry["field"] = field_name
        self.errors.append(entry)
        self.statistics.errors += 1

    def fail(self, message: str):
        """Mark the whole batch as failed before any row was attempted."""
        self.fatal = True
        self.statistics = ImportStatistics()
        self.errors = [{"row": 0, "message": message}]
        self.message = f"Import failed: {message}"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "statistics": asdict(self.statistics),
            "errors": self.errors,
        }
