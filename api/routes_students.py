"""
api.routes_students - /api/v1/students CRUD endpoints.
"""

from flask import request, jsonify

from api import api_bp
from api.auth import current_owner
from api.errors import service_error
from db import get_session
from services.errors import ServiceError
from services.students_service import StudentsService


@api_bp.route("/students")
def list_students():
    """GET /api/v1/students?q=  (matches name or ID number)"""
    q = request.args.get("q", "").strip()
    session = get_session()
    try:
        students = StudentsService.list(session, current_owner(), q)
        return jsonify({
            "total": len(students),
            "students": [s.to_dict() for s in students],
        })
    finally:
        session.close()


@api_bp.route("/students/<student_id>")
def get_student(student_id: str):
    """GET /api/v1/students/{id}"""
    session = get_session()
    try:
        student = StudentsService.get(session, current_owner(), student_id)
        d = student.to_dict()
        d["classes"] = [e.school_class.to_dict() for e in student.enrollments]
        d["grades"] = [g.to_dict() for g in student.grades]
        return jsonify(d)
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/students", methods=["POST"])
def create_student():
    """
    POST /api/v1/students

    JSON body: {name, id_number}.
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        student = StudentsService.create(session, current_owner(), data)
        session.commit()
        return jsonify(student.to_dict()), 201
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/students/<student_id>", methods=["PUT"])
def update_student(student_id: str):
    """PUT /api/v1/students/{id}  (JSON body with fields to update)"""
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        student = StudentsService.update(session, current_owner(), student_id, data)
        session.commit()
        return jsonify(student.to_dict())
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/students/<student_id>", methods=["DELETE"])
def delete_student(student_id: str):
    """DELETE /api/v1/students/{id}  (also removes its enrollments and grades)"""
    session = get_session()
    try:
        StudentsService.delete(session, current_owner(), student_id)
        session.commit()
        return jsonify({"deleted": student_id})
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()
