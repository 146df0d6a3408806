"""
api.routes_grades - /api/v1/grades CRUD endpoints.
"""

from flask import request, jsonify

from api import api_bp
from api.auth import current_owner
from api.errors import service_error
from db import get_session
from services.errors import ServiceError
from services.grades_service import GradesService


def _grade_list(grades):
    return jsonify({"total": len(grades), "grades": [g.to_dict() for g in grades]})


@api_bp.route("/grades")
def list_grades():
    """
    GET /api/v1/grades

    Optional query args:
      q            student name, class name or notes contain this text
      student_id   only this student's grades
      class_id     only this class's grades
      subject      class name contains this text
      grade_min    inclusive lower bound, 0-100
      grade_max    inclusive upper bound, 0-100
    """
    args = request.args
    session = get_session()
    try:
        grades = GradesService.list(
            session, current_owner(),
            q=args.get("q", "").strip(),
            student_id=args.get("student_id"),
            class_id=args.get("class_id"),
            grade_min=args.get("grade_min"),
            grade_max=args.get("grade_max"),
            subject=args.get("subject", "").strip(),
        )
        return _grade_list(grades)
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades/<grade_id>")
def get_grade(grade_id: str):
    session = get_session()
    try:
        return jsonify(GradesService.get(session, current_owner(), grade_id).to_dict())
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades/student/<student_id>")
def grades_for_student(student_id: str):
    session = get_session()
    try:
        return _grade_list(GradesService.for_student(session, current_owner(), student_id))
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades/class/<class_id>")
def grades_for_class(class_id: str):
    session = get_session()
    try:
        return _grade_list(GradesService.for_class(session, current_owner(), class_id))
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades", methods=["POST"])
def create_grade():
    """
    POST /api/v1/grades

    JSON body: {grade, student_id, class_id, notes?}.
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        grade = GradesService.create(session, current_owner(), data)
        session.commit()
        return jsonify(grade.to_dict()), 201
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades/<grade_id>", methods=["PUT"])
def update_grade(grade_id: str):
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        grade = GradesService.update(session, current_owner(), grade_id, data)
        session.commit()
        return jsonify(grade.to_dict())
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/grades/<grade_id>", methods=["DELETE"])
def delete_grade(grade_id: str):
    session = get_session()
    try:
        GradesService.delete(session, current_owner(), grade_id)
        session.commit()
        return jsonify({"deleted": grade_id})
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()
