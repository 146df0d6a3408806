import pytest
from sqlalchemy.exc import IntegrityError

from db.models import Enrollment, Grade, SchoolClass, Student
from import_engine.reconciler import RowOutcome, reconcile
from import_engine.row_processor import NormalizedRow

OWNER = "owner-a"


def _row(name="Alice", sid="S1", cls="Math", grade=85.0, notes=None):
    return NormalizedRow(student_name=name, student_id_number=sid,
                         class_name=cls, grade=grade, notes=notes)


def _apply(session, row, owner=OWNER):
    outcome = reconcile(session, owner, row)
    session.commit()
    return outcome


def test_first_row_creates_everything(session):
    outcome = _apply(session, _row(notes="first try"))
    assert outcome == RowOutcome(student_created=True, class_created=True,
                                 enrollment_created=True, grade_created=True)

    grade = session.query(Grade).one()
    assert grade.value == 85.0
    assert grade.notes == "first try"
    assert grade.student.id_number == "S1"
    assert grade.school_class.description == "Imported from file"
    assert session.query(Enrollment).count() == 1


def test_repeat_row_reuses_and_updates(session):
    _apply(session, _row(grade=85.0))
    outcome = _apply(session, _row(grade=90.0))

    assert outcome == RowOutcome(class_reused=True, enrollment_reused=True,
                                 grade_updated=True)
    assert session.query(Student).count() == 1
    assert session.query(Enrollment).count() == 1
    assert session.query(Grade).one().value == 90.0


def test_changed_name_updates_student(session):
    _apply(session, _row(name="Alice"))
    outcome = _apply(session, _row(name="Alice Smith"))
    assert outcome.student_updated and not outcome.student_created
    assert session.query(Student).one().name == "Alice Smith"


def test_new_grade_without_notes_stores_empty_string(session):
    _apply(session, _row())
    assert session.query(Grade).one().notes == ""


def test_blank_notes_do_not_clear_existing(session):
    _apply(session, _row(notes="needs help"))
    _apply(session, _row(grade=70.0, notes=None))
    assert session.query(Grade).one().notes == "needs help"

    _apply(session, _row(grade=72.0, notes="improving"))
    grade = session.query(Grade).one()
    assert (grade.value, grade.notes) == (72.0, "improving")


def test_existing_class_description_is_kept(session):
    session.add(SchoolClass(owner_id=OWNER, name="Math", description="Algebra I"))
    session.commit()

    outcome = _apply(session, _row())
    assert outcome.class_reused and not outcome.class_created
    assert session.query(SchoolClass).one().description == "Algebra I"


def test_owners_are_partitioned(session):
    _apply(session, _row(), owner="owner-a")
    outcome = _apply(session, _row(), owner="owner-b")

    assert outcome == RowOutcome(student_created=True, class_created=True,
                                 enrollment_created=True, grade_created=True)
    assert session.query(Student).count() == 2
    assert session.query(SchoolClass).count() == 2
    assert session.query(Grade).filter_by(owner_id="owner-b").count() == 1


def test_same_student_in_two_classes(session):
    _apply(session, _row(cls="Math"))
    outcome = _apply(session, _row(cls="Physics"))
    assert outcome == RowOutcome(class_created=True, enrollment_created=True,
                                 grade_created=True)
    assert session.query(Grade).count() == 2


def test_unique_constraints_reject_duplicates(session):
    session.add(Student(owner_id=OWNER, name="A", id_number="S1"))
    session.add(Student(owner_id=OWNER, name="B", id_number="S1"))
    with pytest.raises(IntegrityError):
        session.flush()
    session.rollback()

    _apply(session, _row())
    student = session.query(Student).one()
    school_class = session.query(SchoolClass).one()
    session.add(Grade(owner_id=OWNER, student_id=student.id,
                      class_id=school_class.id, value=1.0))
    with pytest.raises(IntegrityError):
        session.flush()
    session.rollback()
