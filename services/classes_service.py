"""
services.classes_service - CRUD operations on SchoolClass records,
plus the per-class summary (average grade, roster) used by the API.
"""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from db.models import SchoolClass
from services.errors import ConflictError, NotFoundError, ValidationError


class ClassesService:

    @staticmethod
    def create(session: Session, owner_id: str, data: dict) -> SchoolClass:
        """Required key: name.  Optional: description."""
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("'name' is required")
        if ClassesService.find_by_name(session, owner_id, name):
            raise ConflictError("Class with this name already exists")

        school_class = SchoolClass(
            owner_id=owner_id, name=name,
            description=str(data.get("description") or "").strip(),
        )
        session.add(school_class)
        session.flush()
        return school_class

    @staticmethod
    def get(session: Session, owner_id: str, class_id: str) -> SchoolClass:
        school_class = session.query(SchoolClass).filter_by(
            id=class_id, owner_id=owner_id,
        ).one_or_none()
        if school_class is None:
            raise NotFoundError("Class not found")
        return school_class

    @staticmethod
    def find_by_name(session: Session, owner_id: str, name: str) -> SchoolClass | None:
        return session.query(SchoolClass).filter_by(
            owner_id=owner_id, name=name,
        ).one_or_none()

    @staticmethod
    def list(session: Session, owner_id: str, q: str = "") -> list[SchoolClass]:
        query = session.query(SchoolClass).filter(SchoolClass.owner_id == owner_id)
        if q:
            like = f"%{q}%"
            query = query.filter(or_(SchoolClass.name.ilike(like),
                                     SchoolClass.description.ilike(like)))
        return query.order_by(SchoolClass.created_at.desc()).all()

    @staticmethod
    def update(session: Session, owner_id: str, class_id: str, data: dict) -> SchoolClass:
        school_class = ClassesService.get(session, owner_id, class_id)

        if "name" in data:
            name = str(data.get("name") or "").strip()
            if not name:
                raise ValidationError("'name' is required")
            if name != school_class.name and ClassesService.find_by_name(session, owner_id, name):
                raise ConflictError("Class with this name already exists")
            school_class.name = name

        if "description" in data:
            school_class.description = str(data.get("description") or "").strip()

        session.flush()
        return school_class

    @staticmethod
    def delete(session: Session, owner_id: str, class_id: str) -> None:
        school_class = ClassesService.get(session, owner_id, class_id)
        session.delete(school_class)
        session.flush()

    # ── Summary ────────────────────────────────────────────────────────

    @staticmethod
    def summary(school_class: SchoolClass) -> dict:
        """
        Class dict extended with average_grade (2 dp, or None when
        ungraded), total_students, total_grades and the enrolled roster
        with each student's grade.
        """
        grades = list(school_class.grades)
        grade_by_student = {g.student_id: g.value for g in grades}
        average = (
            round(sum(g.value for g in grades) / len(grades), 2) if grades else None
        )

        students = []
        for enrollment in school_class.enrollments:
            s = enrollment.student
            students.append({
                "id": s.id,
                "name": s.name,
                "id_number": s.id_number,
                "enrolled_at": enrollment.enrolled_at.isoformat() if enrollment.enrolled_at else "",
                "grade": grade_by_student.get(s.id),
            })

        d = school_class.to_dict()
        d.update({
            "average_grade": average,
            "total_students": len(students),
            "total_grades": len(grades),
            "students": students,
        })
        return d
