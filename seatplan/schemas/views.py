"""
View-model schemas derived from the plan
"""

from typing import List, Optional
from pydantic import BaseModel

from seatplan.schemas.plan import Guest, TableShape

class SeatView(BaseModel):
    chair_id: str
    seat_number: int
    guest: Optional[Guest] = None

class TableSeating(BaseModel):
    """A table with its seats, as listed in the sidebar and exports"""
    table_id: str
    table_number: int
    shape: TableShape
    is_vip: bool
    seats: List[SeatView]

    @property
    def assigned_count(self) -> int:
        return sum(1 for seat in self.seats if seat.guest is not None)

class SeatMarker(BaseModel):
    """Clickable seat marker drawn around a table"""
    chair_id: str
    seat_number: int
    x: float
    y: float
    guest: Optional[Guest] = None
    label: str
    tooltip: str

class SeatPopover(BaseModel):
    """Assignment popover for one seat"""
    table_id: str
    chair_id: str
    table_number: int
    seat_number: int
    guest: Optional[Guest] = None
    can_clear: bool
    candidates: List[Guest]
