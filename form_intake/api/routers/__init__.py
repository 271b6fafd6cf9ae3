"""
form_intake/api/routers package marker.
"""

from form_intake.api.routers.csv_import import router as csv_import_router
from form_intake.api.routers.pages import router as pages_router
from form_intake.api.routers.submissions import router as submissions_router

__all__ = [
    "csv_import_router",
    "pages_router",
    "submissions_router",
]
