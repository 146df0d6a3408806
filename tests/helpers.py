"""Payload builders shared by the test modules."""

import csv
import io
import zipfile

import openpyxl

from import_engine.field_map import FieldMapping

HEADERS = ["Student Name", "Student ID", "Class", "Grade", "notes"]

MAPPING = FieldMapping(
    student_name="Student Name",
    student_id_number="Student ID",
    class_name="Class",
    grade="Grade",
)

MAPPING_JSON = (
    '{"studentName": "Student Name", "studentIdNumber": "Student ID", '
    '"class": "Class", "grade": "Grade"}'
)


def make_csv(rows, headers=HEADERS) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


def make_xlsx(rows, headers=HEADERS, extra_sheet=None) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(list(row))
    if extra_sheet is not None:
        other = wb.create_sheet("Other")
        for row in extra_sheet:
            other.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_damaged_xlsx(rows, headers=HEADERS) -> bytes:
    """A workbook that opens but whose first sheet's XML is cut off mid-row."""
    src = zipfile.ZipFile(io.BytesIO(make_xlsx(rows, headers)))
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as out:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = data[: data.index(b"<sheetData>") + len(b"<sheetData>") + 12]
            out.writestr(item, data)
    return buf.getvalue()
