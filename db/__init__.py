"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    dispose_db()    → release the engine (tests, shutdown)
    get_session()   → new Session
    Student, SchoolClass, Enrollment, Grade → ORM models
"""

from db.engine import init_db, dispose_db, get_session  # noqa: F401
from db.models import (                              # noqa: F401
    Base, Student, SchoolClass, Enrollment, Grade,
)
