"""
api.routes_import - /api/v1/upload endpoints.

Two-step flow for the mapping UI:
  1. POST /upload/headers  → header names of the uploaded file
  2. POST /upload/import   → run the import with the chosen mapping
"""

from __future__ import annotations

from flask import request, jsonify

import config
from api import api_bp
from api.auth import current_owner
from import_engine import (
    DecodeError, FieldMapping, MappingError, UnsupportedFormat,
    detect_kind, read_headers, run_import,
)


def _reject(code: str, message: str, status: int = 400):
    return jsonify({"error": code, "message": message}), status


def _read_upload():
    """
    Validate the multipart 'file' field.

    Returns (content, kind, None) on success or (None, None, response)
    when the request must be rejected.
    """
    f = request.files.get("file")
    if not f or not f.filename:
        return None, None, _reject("NoFileProvided", "No file uploaded")

    mimetype = (f.mimetype or "").lower()
    if mimetype not in config.ALLOWED_MIME_TYPES:
        return None, None, _reject(
            "UnsupportedFileType",
            "Invalid file type. Please upload CSV or XLSX files.",
        )

    content = f.read()
    if len(content) > config.MAX_UPLOAD_BYTES:
        limit_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
        return None, None, _reject(
            "FileTooLarge",
            f"File size too large. Maximum size is {limit_mb}MB.", 413,
        )

    try:
        kind = detect_kind(f.filename, mimetype)
    except UnsupportedFormat as exc:
        return None, None, _reject("UnsupportedFileType", str(exc))
    return content, kind, None


@api_bp.route("/upload/headers", methods=["POST"])
def upload_headers():
    """
    POST /api/v1/upload/headers

    Multipart: field name 'file' (CSV, XLS or XLSX).
    """
    content, kind, rejected = _read_upload()
    if rejected:
        return rejected

    try:
        headers = read_headers(content, kind)
    except (DecodeError, UnsupportedFormat) as exc:
        return _reject("DecodeError", f"Failed to read file headers: {exc}")

    return jsonify({
        "success": True,
        "headers": headers,
        "message": "File headers extracted successfully",
    })


@api_bp.route("/upload/import", methods=["POST"])
def upload_import():
    """
    POST /api/v1/upload/import

    Multipart: 'file' plus 'mappings', a JSON object
    {"studentName": …, "studentIdNumber": …, "class": …, "grade": …}
    naming the source column for each field.
    """
    content, kind, rejected = _read_upload()
    if rejected:
        return rejected

    try:
        mapping = FieldMapping.from_json(request.form.get("mappings"))
    except MappingError as exc:
        return _reject("InvalidMapping", str(exc))

    report = run_import(current_owner(), content, kind, mapping)
    return jsonify(report.to_dict())
