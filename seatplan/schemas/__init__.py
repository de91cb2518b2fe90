"""
Pydantic schemas package
"""

from .common import *
from .plan import *
from .views import *

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "Guest",
    "Chair",
    "Table",
    "StageSize",
    "Offset",
    "SeatRef",
    "PlanState",
    "VersionMeta",
    "SavedVersion",
    "ExportDocument",
    "SeatView",
    "TableSeating",
    "SeatMarker",
    "SeatPopover"
]
