"""
db.engine - Engine lifecycle and session factory for GradeDB.

One process-wide engine.  init_db() may be called again with another
URL (the test suite does this per test); the previous engine's pooled
connections are released first.  Sessions never expire attributes on
commit, because routes serialise records after committing them.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import config
from db.models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

# foreign_keys is required: enrollments and grades rely on ON DELETE CASCADE
_SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)


def _on_sqlite_connect(dbapi_conn, _record) -> None:
    cur = dbapi_conn.cursor()
    for pragma in _SQLITE_PRAGMAS:
        cur.execute(pragma)
    cur.close()


def init_db(db_url: Optional[str] = None) -> Engine:
    """Bind the module to db_url (default config.DB_URL) and create tables."""
    global _engine, _SessionLocal

    dispose_db()
    db_url = db_url or config.DB_URL

    engine = create_engine(db_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _on_sqlite_connect)

    Base.metadata.create_all(engine)
    _engine = engine
    _SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    logger.debug(f"Engine ready on {engine.url.render_as_string(hide_password=True)}")
    return engine


def dispose_db() -> None:
    """Release pooled connections and forget the current engine."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def get_session() -> Session:
    """Return a new session.  Caller is responsible for .close()."""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialised - call init_db() first")
    return _SessionLocal()
