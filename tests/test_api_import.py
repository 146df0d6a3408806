import io

import pytest

import config
from tests.helpers import MAPPING_JSON, make_csv, make_damaged_xlsx, make_xlsx

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ROWS = [
    ("Alice", "S1", "Math", "85", ""),
    ("Bob", "S2", "Math", "150", ""),
]


def _upload(content, filename="grades.csv", mimetype="text/csv", **form):
    data = {"file": (io.BytesIO(content), filename, mimetype)}
    data.update(form)
    return data


# ── /upload/headers ───────────────────────────────────────────────────

def test_headers_from_csv(client, owner_headers):
    resp = client.post("/api/v1/upload/headers", headers=owner_headers,
                       data=_upload(make_csv(ROWS)))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["headers"] == ["Student Name", "Student ID", "Class", "Grade", "notes"]


def test_headers_from_xlsx(client, owner_headers):
    resp = client.post("/api/v1/upload/headers", headers=owner_headers,
                       data=_upload(make_xlsx(ROWS), "grades.xlsx", XLSX_MIME))
    assert resp.status_code == 200
    assert resp.get_json()["headers"][0] == "Student Name"


def test_headers_of_corrupt_workbook(client, owner_headers):
    resp = client.post("/api/v1/upload/headers", headers=owner_headers,
                       data=_upload(b"broken", "grades.xlsx", XLSX_MIME))
    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("Failed to read file headers")


def test_headers_of_damaged_sheet(client, owner_headers):
    raw = make_damaged_xlsx([("Alice", "S1", "Math", 85, None)])
    resp = client.post("/api/v1/upload/headers", headers=owner_headers,
                       data=_upload(raw, "grades.xlsx", XLSX_MIME))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Failed to read file headers: Failed to parse Excel file"


def test_missing_owner_is_unauthorised(client):
    resp = client.post("/api/v1/upload/headers", data=_upload(make_csv(ROWS)))
    assert resp.status_code == 401


@pytest.mark.parametrize("path", ["/api/v1/upload/headers", "/api/v1/upload/import"])
def test_no_file(client, owner_headers, path):
    resp = client.post(path, headers=owner_headers, data={"mappings": MAPPING_JSON})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "NoFileProvided"


@pytest.mark.parametrize("path", ["/api/v1/upload/headers", "/api/v1/upload/import"])
def test_disallowed_mimetype(client, owner_headers, path):
    resp = client.post(path, headers=owner_headers,
                       data=_upload(b"hello", "notes.txt", "text/plain",
                                    mappings=MAPPING_JSON))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "UnsupportedFileType"


def test_file_too_large(client, owner_headers, monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 16)
    resp = client.post("/api/v1/upload/import", headers=owner_headers,
                       data=_upload(make_csv(ROWS), mappings=MAPPING_JSON))
    assert resp.status_code == 413
    assert resp.get_json()["error"] == "FileTooLarge"


# ── /upload/import ────────────────────────────────────────────────────

def test_import_reports_statistics_and_errors(client, owner_headers):
    resp = client.post("/api/v1/upload/import", headers=owner_headers,
                       data=_upload(make_csv(ROWS), mappings=MAPPING_JSON))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is False
    assert body["statistics"]["processed_rows"] == 1
    assert body["statistics"]["students_created"] == 1
    assert body["errors"] == [
        {"row": 2, "field": "grade", "message": "Invalid grade value: 150"},
    ]

    students = client.get("/api/v1/students", headers=owner_headers).get_json()
    assert [s["id_number"] for s in students["students"]] == ["S1"]


def test_import_xlsx(client, owner_headers):
    resp = client.post("/api/v1/upload/import", headers=owner_headers,
                       data=_upload(make_xlsx([("Alice", "S1", "Math", 91, "")]),
                                    "grades.xlsx", XLSX_MIME, mappings=MAPPING_JSON))
    body = resp.get_json()
    assert body["success"] is True
    assert body["statistics"]["grades_created"] == 1


def test_import_bad_mapping_json(client, owner_headers):
    resp = client.post("/api/v1/upload/import", headers=owner_headers,
                       data=_upload(make_csv(ROWS), mappings="{oops"))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid mappings JSON format"


def test_import_incomplete_mapping(client, owner_headers):
    resp = client.post("/api/v1/upload/import", headers=owner_headers,
                       data=_upload(make_csv(ROWS),
                                    mappings='{"studentName": "Student Name"}'))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "All required field mappings must be provided"


def test_import_is_scoped_to_caller(client, owner_headers):
    client.post("/api/v1/upload/import", headers=owner_headers,
                data=_upload(make_csv(ROWS), mappings=MAPPING_JSON))
    other = client.get("/api/v1/students", headers={"X-User-Id": "owner-b"})
    assert other.get_json()["total"] == 0
