"""
import_engine.importer - Top-level orchestrator.

Coordinates file_parser → row_processor → reconciler and produces
a structured ImportReport.  Rows are processed strictly in file order,
one committed transaction per row, so a later row always sees what
an earlier row created and a bad row never undoes a good one.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from db.engine import get_session
from import_engine.field_map import FieldMapping
from import_engine.file_parser import read_rows
from import_engine.reconciler import reconcile
from import_engine.report import ImportReport
from import_engine.row_processor import RowError, normalize

logger = logging.getLogger(__name__)


def run_import(
    owner_id: str,
    file_content: bytes,
    file_kind: str,
    field_mapping: FieldMapping,
) -> ImportReport:
    """
    Import a CSV/XLSX/XLS blob for one owner.

    Parameters
    ----------
    owner_id : authenticated user id every record is scoped to
    file_content : raw file bytes
    file_kind : "csv", "xlsx" or "xls" (see file_parser.detect_kind)
    field_mapping : which source headers hold the four required fields

    Returns
    -------
    ImportReport with statistics and per-row error details.  Only an
    unreadable file produces a failed report with no rows attempted.
    """
    report = ImportReport()
    try:
        rows = read_rows(file_content, file_kind)
    except Exception as exc:
        logger.warning(f"Import for owner {owner_id} aborted: {exc}")
        report.fail(str(exc))
        return report

    stats = report.statistics
    stats.total_rows = len(rows)
    logger.info(f"Importing {stats.total_rows} rows for owner {owner_id}")

    session = get_session()
    try:
        for row_idx, raw in enumerate(rows, start=1):
            try:
                row = normalize(raw, field_mapping)
            except RowError as exc:
                report.add_error(row_idx, str(exc), exc.field)
                continue
            if row is None:
                continue

            try:
                outcome = reconcile(session, owner_id, row)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                cause = getattr(exc, "orig", None) or exc
                logger.warning(f"Row {row_idx} rejected by database: {cause}")
                report.add_error(row_idx, f"Database error: {cause}")
                continue
            except Exception as exc:
                session.rollback()
                logger.exception(f"Row {row_idx} failed")
                report.add_error(row_idx, f"Unexpected: {exc}")
                continue

            stats.record(outcome)
    finally:
        session.close()

    report.message = (
        f"Import completed. Processed {stats.processed_rows} "
        f"of {stats.total_rows} rows."
    )
    logger.info(f"{report.message} {stats.errors} errors.")
    return report
