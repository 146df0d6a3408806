"""
import_engine.file_parser - Low-level tabular file reading.

Responsibilities:
  • File-kind detection from filename extension or MIME type
  • CSV: BOM removal, header whitespace stripping (stdlib csv)
  • XLSX: first worksheet via openpyxl (read-only)
  • XLS:  first worksheet via xlrd
  • Returns plain header → raw-cell dicts; no value validation here
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Iterator, Optional

import openpyxl
import xlrd

import config

logger = logging.getLogger(__name__)

KIND_CSV  = "csv"
KIND_XLSX = "xlsx"
KIND_XLS  = "xls"

_EXTENSION_KINDS = {"csv": KIND_CSV, "xlsx": KIND_XLSX, "xls": KIND_XLS}
_MIME_KINDS = {
    config.MIME_CSV: KIND_CSV,
    config.MIME_XLSX: KIND_XLSX,
    config.MIME_XLS: KIND_XLS,
}


class UnsupportedFormat(Exception):
    """Raised when a file is neither CSV nor a spreadsheet workbook."""
    pass


class DecodeError(Exception):
    """Raised when file content cannot be read as the declared kind."""
    pass


def detect_kind(filename: Optional[str] = None, mimetype: Optional[str] = None) -> str:
    """
    Return "csv", "xlsx" or "xls".  The filename extension wins over
    the MIME type; raises UnsupportedFormat if neither is recognised.
    """
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].strip().lower()
        if ext in _EXTENSION_KINDS:
            return _EXTENSION_KINDS[ext]
    if mimetype:
        kind = _MIME_KINDS.get(mimetype.split(";", 1)[0].strip().lower())
        if kind:
            return kind
    raise UnsupportedFormat(
        "Unsupported file type. Please upload CSV or XLSX files."
    )


def read_headers(raw: bytes, kind: str) -> list[str]:
    """Return the header row only.  An empty file yields []."""
    if kind == KIND_CSV:
        text = _decode(raw)
        first = next(csv.reader(io.StringIO(text)), None)
        return [h.strip() for h in first] if first else []
    if kind in (KIND_XLSX, KIND_XLS):
        for row in _sheet_rows(raw, kind, header_only=True):
            return [_header_text(v) for v in row]
        return []
    raise UnsupportedFormat(f"Unsupported file kind: {kind}")


def read_rows(raw: bytes, kind: str) -> list[dict]:
    """
    Return every data row as a dict keyed by header name, in file order.
    Raises DecodeError for unreadable content.
    """
    if kind == KIND_CSV:
        return _csv_rows(raw)
    if kind in (KIND_XLSX, KIND_XLS):
        rows = iter(_sheet_rows(raw, kind))
        header = next(rows, None)
        if header is None:
            return []
        headers = [_header_text(v) for v in header]
        records = []
        for values in rows:
            if all(_is_blank(v) for v in values):
                continue
            records.append(dict(zip(headers, values)))
        return records
    raise UnsupportedFormat(f"Unsupported file kind: {kind}")


# ── CSV ───────────────────────────────────────────────────────────────

def _csv_rows(raw: bytes) -> list[dict]:
    text = _decode(raw)
    if not text or not text.strip():
        raise DecodeError("CSV has no header row or is empty")

    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        raise DecodeError("CSV has no header row or is empty")

    # Strip whitespace from every header
    reader.fieldnames = [h.strip() for h in reader.fieldnames]
    try:
        return list(reader)
    except csv.Error as exc:
        logger.warning(f"CSV decode failed: {exc}")
        raise DecodeError(f"Malformed CSV: {exc}") from exc


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


# ── Spreadsheets ──────────────────────────────────────────────────────

def _sheet_rows(raw: bytes, kind: str, header_only: bool = False) -> Iterator[tuple]:
    """
    Yield value tuples from the first worksheet.

    openpyxl parses sheet XML lazily, so a damaged sheet can load fine
    and only fail part-way through iteration; both stages raise DecodeError.
    """
    if kind == KIND_XLSX:
        try:
            wb = openpyxl.load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
        except Exception as exc:
            logger.warning(f"XLSX decode failed: {exc}")
            raise DecodeError("Failed to parse Excel file") from exc
        try:
            ws = wb.worksheets[0]
            max_row = 1 if header_only else None
            rows = ws.iter_rows(max_row=max_row, values_only=True)
            while True:
                try:
                    row = next(rows, None)
                except Exception as exc:
                    logger.warning(f"XLSX sheet read failed: {exc}")
                    raise DecodeError("Failed to parse Excel file") from exc
                if row is None:
                    break
                yield row
        finally:
            wb.close()
        return

    try:
        book = xlrd.open_workbook(file_contents=raw, on_demand=True)
    except Exception as exc:
        logger.warning(f"XLS decode failed: {exc}")
        raise DecodeError("Failed to parse Excel file") from exc
    try:
        try:
            sheet = book.sheet_by_index(0)
        except Exception as exc:
            logger.warning(f"XLS sheet read failed: {exc}")
            raise DecodeError("Failed to parse Excel file") from exc
        last = min(1, sheet.nrows) if header_only else sheet.nrows
        for r in range(last):
            yield tuple(sheet.row_values(r))
    finally:
        book.release_resources()


def _header_text(value) -> str:
    return "" if value is None else str(value).strip()


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
