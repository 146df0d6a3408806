"""
services.students_service - CRUD operations on Student records.

All session management is the caller's responsibility (open before,
close/commit after).  Every query is filtered by owner_id.
"""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from db.models import Student
from services.errors import ConflictError, NotFoundError, ValidationError


def _required(data: dict, key: str) -> str:
    val = str(data.get(key) or "").strip()
    if not val:
        raise ValidationError(f"'{key}' is required")
    return val


class StudentsService:

    # ── Create ─────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, owner_id: str, data: dict) -> Student:
        """Required keys: name, id_number."""
        name = _required(data, "name")
        id_number = _required(data, "id_number")

        if StudentsService.find_by_id_number(session, owner_id, id_number):
            raise ConflictError("Student with this ID number already exists")

        student = Student(owner_id=owner_id, name=name, id_number=id_number)
        session.add(student)
        session.flush()
        return student

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, owner_id: str, student_id: str) -> Student:
        student = session.query(Student).filter_by(
            id=student_id, owner_id=owner_id,
        ).one_or_none()
        if student is None:
            raise NotFoundError("Student not found")
        return student

    @staticmethod
    def find_by_id_number(session: Session, owner_id: str, id_number: str) -> Student | None:
        return session.query(Student).filter_by(
            owner_id=owner_id, id_number=id_number,
        ).one_or_none()

    @staticmethod
    def list(session: Session, owner_id: str, q: str = "") -> list[Student]:
        query = session.query(Student).filter(Student.owner_id == owner_id)
        if q:
            like = f"%{q}%"
            query = query.filter(or_(Student.name.ilike(like),
                                     Student.id_number.ilike(like)))
        return query.order_by(Student.created_at.desc()).all()

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, owner_id: str, student_id: str, data: dict) -> Student:
        student = StudentsService.get(session, owner_id, student_id)

        if "id_number" in data:
            id_number = _required(data, "id_number")
            if id_number != student.id_number:
                if StudentsService.find_by_id_number(session, owner_id, id_number):
                    raise ConflictError("Student with this ID number already exists")
                student.id_number = id_number

        if "name" in data:
            student.name = _required(data, "name")

        session.flush()
        return student

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, owner_id: str, student_id: str) -> None:
        student = StudentsService.get(session, owner_id, student_id)
        session.delete(student)
        session.flush()
