"""
db.models - SQLAlchemy ORM declarations.

Tables
------
students         - one row per (owner, id_number).
classes          - one row per (owner, name).
student_classes  - enrollment link, one row per (owner, student, class).
grades           - at most one grade per (owner, student, class).

Every table carries owner_id; nothing is ever matched across owners.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, DateTime, Text, Float, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _iso(value: datetime | None) -> str:
    return value.isoformat() if value else ""


class Base(DeclarativeBase):
    pass


class Student(Base):
    __tablename__ = "students"

    id        = Column(String(32), primary_key=True, default=_new_id)
    owner_id  = Column(String(64), nullable=False, index=True)
    name      = Column(String(200), nullable=False)
    id_number = Column(String(100), nullable=False)

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    enrollments = relationship(
        "Enrollment", back_populates="student",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    grades = relationship(
        "Grade", back_populates="student",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "id_number", name="uq_student_owner_id_number"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "id_number": self.id_number,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class SchoolClass(Base):
    """A class (course) owned by one user.  Named to avoid the keyword."""
    __tablename__ = "classes"

    id          = Column(String(32), primary_key=True, default=_new_id)
    owner_id    = Column(String(64), nullable=False, index=True)
    name        = Column(String(200), nullable=False)
    description = Column(Text, default="")

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    enrollments = relationship(
        "Enrollment", back_populates="school_class",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    grades = relationship(
        "Grade", back_populates="school_class",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_class_owner_name"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Enrollment(Base):
    __tablename__ = "student_classes"

    id         = Column(String(32), primary_key=True, default=_new_id)
    owner_id   = Column(String(64), nullable=False, index=True)
    student_id = Column(String(32),
                        ForeignKey("students.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    class_id   = Column(String(32),
                        ForeignKey("classes.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    enrolled_at = Column(DateTime, default=_utcnow)

    student      = relationship("Student", back_populates="enrollments")
    school_class = relationship("SchoolClass", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("owner_id", "student_id", "class_id",
                         name="uq_enrollment_owner_student_class"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "class_id": self.class_id,
            "enrolled_at": _iso(self.enrolled_at),
        }


class Grade(Base):
    __tablename__ = "grades"

    id         = Column(String(32), primary_key=True, default=_new_id)
    owner_id   = Column(String(64), nullable=False, index=True)
    student_id = Column(String(32),
                        ForeignKey("students.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    class_id   = Column(String(32),
                        ForeignKey("classes.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    value = Column(Float, nullable=False)
    notes = Column(Text, default="")

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    student      = relationship("Student", back_populates="grades", lazy="joined")
    school_class = relationship("SchoolClass", back_populates="grades",
                                lazy="joined")

    __table_args__ = (
        UniqueConstraint("owner_id", "student_id", "class_id",
                         name="uq_grade_owner_student_class"),
    )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "grade": self.value,
            "notes": self.notes or "",
            "student_id": self.student_id,
            "class_id": self.class_id,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if self.student is not None:
            d["student"] = {
                "id": self.student.id,
                "name": self.student.name,
                "id_number": self.student.id_number,
            }
        if self.school_class is not None:
            d["class"] = {
                "id": self.school_class.id,
                "name": self.school_class.name,
                "description": self.school_class.description or "",
            }
        return d
