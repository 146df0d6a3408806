"""
import_engine.reconciler - Resolve one normalised row against the DB.

For a single owner, each row resolves (in this order):

    student    by (owner, id_number)            create | rename | as-is
    class      by (owner, name)                 create | reuse
    enrollment by (owner, student, class)       create | reuse
    grade      by (owner, student, class)       create | overwrite

Enrollment and grade depend on the resolved student/class ids, so the
order is fixed.  Every write is flushed immediately so the table's
unique constraints fire inside the row; the caller owns the transaction
and either commits the whole row or rolls it back.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

import config
from db.models import Student, SchoolClass, Enrollment, Grade
from import_engine.row_processor import NormalizedRow


@dataclass
class RowOutcome:
    """Which entity writes one row caused."""
    student_created: bool = False
    student_updated: bool = False
    class_created: bool = False
    class_reused: bool = False
    enrollment_created: bool = False
    enrollment_reused: bool = False
    grade_created: bool = False
    grade_updated: bool = False


def reconcile(session: Session, owner_id: str, row: NormalizedRow) -> RowOutcome:
    """Apply one row for owner_id.  Raises on any database failure."""
    outcome = RowOutcome()
    student = _resolve_student(session, owner_id, row, outcome)
    school_class = _resolve_class(session, owner_id, row, outcome)
    _resolve_enrollment(session, owner_id, student, school_class, outcome)
    _resolve_grade(session, owner_id, student, school_class, row, outcome)
    return outcome


# ── Resolution steps ──────────────────────────────────────────────────

def _resolve_student(session: Session, owner_id: str, row: NormalizedRow,
                     outcome: RowOutcome) -> Student:
    student = session.query(Student).filter_by(
        owner_id=owner_id, id_number=row.student_id_number,
    ).one_or_none()

    if student is None:
        student = Student(owner_id=owner_id, name=row.student_name,
                          id_number=row.student_id_number)
        session.add(student)
        session.flush()
        outcome.student_created = True
    elif student.name != row.student_name:
        student.name = row.student_name
        session.flush()
        outcome.student_updated = True
    return student


def _resolve_class(session: Session, owner_id: str, row: NormalizedRow,
                   outcome: RowOutcome) -> SchoolClass:
    school_class = session.query(SchoolClass).filter_by(
        owner_id=owner_id, name=row.class_name,
    ).one_or_none()

    if school_class is None:
        school_class = SchoolClass(owner_id=owner_id, name=row.class_name,
                                   description=config.IMPORTED_CLASS_DESCRIPTION)
        session.add(school_class)
        session.flush()
        outcome.class_created = True
    else:
        # Description is never overwritten on reuse
        outcome.class_reused = True
    return school_class


def _resolve_enrollment(session: Session, owner_id: str, student: Student,
                        school_class: SchoolClass, outcome: RowOutcome) -> Enrollment:
    enrollment = session.query(Enrollment).filter_by(
        owner_id=owner_id, student_id=student.id, class_id=school_class.id,
    ).one_or_none()

    if enrollment is None:
        enrollment = Enrollment(owner_id=owner_id, student_id=student.id,
                                class_id=school_class.id)
        session.add(enrollment)
        session.flush()
        outcome.enrollment_created = True
    else:
        outcome.enrollment_reused = True
    return enrollment


def _resolve_grade(session: Session, owner_id: str, student: Student,
                   school_class: SchoolClass, row: NormalizedRow,
                   outcome: RowOutcome) -> Grade:
    grade = session.query(Grade).filter_by(
        owner_id=owner_id, student_id=student.id, class_id=school_class.id,
    ).one_or_none()

    if grade is None:
        grade = Grade(owner_id=owner_id, student_id=student.id,
                      class_id=school_class.id, value=row.grade,
                      notes=row.notes or "")
        session.add(grade)
        session.flush()
        outcome.grade_created = True
    else:
        grade.value = row.grade
        # Blank notes never clear what is already stored
        if row.notes:
            grade.notes = row.notes
        session.flush()
        outcome.grade_updated = True
    return grade
