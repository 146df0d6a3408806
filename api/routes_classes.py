"""
api.routes_classes - /api/v1/classes CRUD endpoints.
"""

from flask import request, jsonify

from api import api_bp
from api.auth import current_owner
from api.errors import service_error
from db import get_session
from services.classes_service import ClassesService
from services.errors import ServiceError


@api_bp.route("/classes")
def list_classes():
    """GET /api/v1/classes?q=  (matches name or description)"""
    q = request.args.get("q", "").strip()
    session = get_session()
    try:
        classes = ClassesService.list(session, current_owner(), q)
        return jsonify({
            "total": len(classes),
            "classes": [ClassesService.summary(c) for c in classes],
        })
    finally:
        session.close()


@api_bp.route("/classes/<class_id>")
def get_class(class_id: str):
    """GET /api/v1/classes/{id}  (with average grade and roster)"""
    session = get_session()
    try:
        school_class = ClassesService.get(session, current_owner(), class_id)
        return jsonify(ClassesService.summary(school_class))
    except ServiceError as exc:
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/classes", methods=["POST"])
def create_class():
    """
    POST /api/v1/classes

    JSON body: {name, description?}.
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        school_class = ClassesService.create(session, current_owner(), data)
        session.commit()
        return jsonify(school_class.to_dict()), 201
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/classes/<class_id>", methods=["PUT"])
def update_class(class_id: str):
    """PUT /api/v1/classes/{id}"""
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        school_class = ClassesService.update(session, current_owner(), class_id, data)
        session.commit()
        return jsonify(school_class.to_dict())
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()


@api_bp.route("/classes/<class_id>", methods=["DELETE"])
def delete_class(class_id: str):
    """DELETE /api/v1/classes/{id}"""
    session = get_session()
    try:
        ClassesService.delete(session, current_owner(), class_id)
        session.commit()
        return jsonify({"deleted": class_id})
    except ServiceError as exc:
        session.rollback()
        return service_error(exc)
    finally:
        session.close()
