"""
services - Business-logic layer sitting between API and DB.
"""

from services.students_service import StudentsService    # noqa: F401
from services.classes_service import ClassesService      # noqa: F401
from services.grades_service import GradesService        # noqa: F401
