"""
api.errors - JSON error handlers for the API blueprint.
"""

from flask import jsonify

from api import api_bp
from services.errors import (
    ConflictError, NotFoundError, ServiceError, ValidationError,
)

_STATUS = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 400,
}


def service_error(exc: ServiceError):
    """Map a service-layer exception to a JSON response."""
    return jsonify({"error": str(exc)}), _STATUS.get(type(exc), 400)


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(405)
def api_method_not_allowed(_e):
    return jsonify({"error": "method not allowed"}), 405


@api_bp.errorhandler(413)
def api_too_large(_e):
    return jsonify({"error": "FileTooLarge",
                    "message": "File size too large."}), 413


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500
