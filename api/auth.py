"""
api.auth - Owner identity pass-through.

Authentication happens upstream; the proxy forwards the authenticated
user id in config.OWNER_HEADER.  Every API request must carry it.
"""

from flask import g, jsonify, request

import config
from api import api_bp


@api_bp.before_request
def _load_owner():
    owner_id = (request.headers.get(config.OWNER_HEADER) or "").strip()
    if not owner_id:
        return jsonify({"error": "missing owner identity"}), 401
    g.owner_id = owner_id


def current_owner() -> str:
    return g.owner_id
