"""
services.grades_service - CRUD operations on Grade records.

A grade ties one of the owner's students to one of the owner's
classes; at most one grade exists per (owner, student, class).
Creating a grade, or moving one to another student or class, also
enrolls the student when needed, so the enrollment table stays a
superset of graded pairs.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from db.models import Enrollment, Grade, SchoolClass, Student
from import_engine.row_processor import InvalidGrade, parse_grade
from services.errors import ConflictError, NotFoundError, ValidationError


def _grade_value(data: dict) -> float:
    if data.get("grade") is None:
        raise ValidationError("'grade' is required")
    try:
        return parse_grade(data["grade"])
    except InvalidGrade as exc:
        raise ValidationError(str(exc)) from exc


def _bound(raw, name: str) -> Optional[float]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return parse_grade(raw)
    except InvalidGrade as exc:
        raise ValidationError(f"'{name}' must be a number between 0 and 100") from exc


class GradesService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, owner_id: str, data: dict) -> Grade:
        """Required keys: grade, student_id, class_id.  Optional: notes."""
        value = _grade_value(data)
        student = GradesService._owned_student(session, owner_id, data.get("student_id"))
        school_class = GradesService._owned_class(session, owner_id, data.get("class_id"))

        existing = session.query(Grade).filter_by(
            owner_id=owner_id, student_id=student.id, class_id=school_class.id,
        ).one_or_none()
        if existing:
            raise ConflictError("Grade already exists for this student in this class")

        GradesService._ensure_enrolled(session, owner_id, student.id, school_class.id)

        grade = Grade(
            owner_id=owner_id, student_id=student.id, class_id=school_class.id,
            value=value, notes=str(data.get("notes") or "").strip(),
        )
        session.add(grade)
        session.flush()
        return grade

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, owner_id: str, grade_id: str) -> Grade:
        grade = session.query(Grade).filter_by(
            id=grade_id, owner_id=owner_id,
        ).one_or_none()
        if grade is None:
            raise NotFoundError("Grade not found")
        return grade

    @staticmethod
    def list(
        session: Session,
        owner_id: str,
        q: str = "",
        student_id: Optional[str] = None,
        class_id: Optional[str] = None,
        grade_min=None,
        grade_max=None,
        subject: str = "",
    ) -> list[Grade]:
        """
        All of the owner's grades, newest first.

        q matches student name, class name or notes; subject matches the
        class name only.  grade_min / grade_max are inclusive bounds and
        must lie in [0, 100].
        """
        low = _bound(grade_min, "grade_min")
        high = _bound(grade_max, "grade_max")

        query = (
            session.query(Grade)
            .join(Grade.student)
            .join(Grade.school_class)
            .filter(Grade.owner_id == owner_id)
        )
        if q:
            like = f"%{q}%"
            query = query.filter(
                Student.name.ilike(like)
                | SchoolClass.name.ilike(like)
                | Grade.notes.ilike(like)
            )
        if student_id:
            query = query.filter(Grade.student_id == student_id)
        if class_id:
            query = query.filter(Grade.class_id == class_id)
        if subject:
            query = query.filter(SchoolClass.name.ilike(f"%{subject}%"))
        if low is not None:
            query = query.filter(Grade.value >= low)
        if high is not None:
            query = query.filter(Grade.value <= high)
        return query.order_by(Grade.created_at.desc()).all()

    @staticmethod
    def for_student(session: Session, owner_id: str, student_id: str) -> list[Grade]:
        student = GradesService._owned_student(session, owner_id, student_id,
                                               missing=NotFoundError)
        return (
            session.query(Grade)
            .filter_by(owner_id=owner_id, student_id=student.id)
            .order_by(Grade.created_at.desc())
            .all()
        )

    @staticmethod
    def for_class(session: Session, owner_id: str, class_id: str) -> list[Grade]:
        school_class = GradesService._owned_class(session, owner_id, class_id,
                                                  missing=NotFoundError)
        return (
            session.query(Grade)
            .filter_by(owner_id=owner_id, class_id=school_class.id)
            .order_by(Grade.created_at.desc())
            .all()
        )

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, owner_id: str, grade_id: str, data: dict) -> Grade:
        grade = GradesService.get(session, owner_id, grade_id)

        student_id = grade.student_id
        class_id = grade.class_id
        if data.get("student_id") and data["student_id"] != grade.student_id:
            student_id = GradesService._owned_student(session, owner_id, data["student_id"]).id
        if data.get("class_id") and data["class_id"] != grade.class_id:
            class_id = GradesService._owned_class(session, owner_id, data["class_id"]).id

        if (student_id, class_id) != (grade.student_id, grade.class_id):
            clash = session.query(Grade).filter_by(
                owner_id=owner_id, student_id=student_id, class_id=class_id,
            ).one_or_none()
            if clash is not None:
                raise ConflictError("Grade already exists for this student in this class")
            GradesService._ensure_enrolled(session, owner_id, student_id, class_id)
            grade.student_id = student_id
            grade.class_id = class_id

        if "grade" in data:
            grade.value = _grade_value(data)
        if "notes" in data:
            grade.notes = str(data.get("notes") or "").strip()

        session.flush()
        session.refresh(grade)
        return grade

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, owner_id: str, grade_id: str) -> None:
        grade = GradesService.get(session, owner_id, grade_id)
        session.delete(grade)
        session.flush()

    # ── Ownership checks ───────────────────────────────────────────────

    @staticmethod
    def _ensure_enrolled(session: Session, owner_id: str,
                         student_id: str, class_id: str) -> None:
        enrolled = session.query(Enrollment).filter_by(
            owner_id=owner_id, student_id=student_id, class_id=class_id,
        ).one_or_none()
        if enrolled is None:
            session.add(Enrollment(owner_id=owner_id, student_id=student_id,
                                   class_id=class_id))

    @staticmethod
    def _owned_student(session: Session, owner_id: str, student_id,
                       missing=ValidationError) -> Student:
        student = None
        if student_id:
            student = session.query(Student).filter_by(
                id=student_id, owner_id=owner_id,
            ).one_or_none()
        if student is None:
            raise missing("Student not found or does not belong to you")
        return student

    @staticmethod
    def _owned_class(session: Session, owner_id: str, class_id,
                     missing=ValidationError) -> SchoolClass:
        school_class = None
        if class_id:
            school_class = session.query(SchoolClass).filter_by(
                id=class_id, owner_id=owner_id,
            ).one_or_none()
        if school_class is None:
            raise missing("Class not found or does not belong to you")
        return school_class
