"""
Derived views of a seating plan
"""

from typing import Dict, Iterable, List, Optional

from seatplan.core.geometry import seat_marker_position
from seatplan.schemas.plan import Guest, PlanState, Table
from seatplan.schemas.views import SeatMarker, SeatPopover, SeatView, TableSeating
from seatplan.utils.avatars import initials

POPOVER_CANDIDATES = 6
SIDEBAR_UNASSIGNED = 8

class ViewService:
    """Read-only projections recomputed from the plan on every change"""

    @staticmethod
    def guest_index(plan: PlanState) -> Dict[str, Guest]:
        return {g.id: g for g in plan.guests}

    @staticmethod
    def resolve_guest(index: Dict[str, Guest], guest_id: Optional[str]) -> Optional[Guest]:
        """Chair references are plain ids; unknown ids resolve to nothing"""
        if not guest_id:
            return None
        return index.get(guest_id)

    @staticmethod
    def unassigned_guests(plan: PlanState) -> List[Guest]:
        assigned = {c.guest_id for t in plan.tables for c in t.chairs if c.guest_id}
        return [g for g in plan.guests if g.id not in assigned]

    @staticmethod
    def sidebar_guests(plan: PlanState, limit: int = SIDEBAR_UNASSIGNED) -> List[Guest]:
        return ViewService.unassigned_guests(plan)[:limit]

    @staticmethod
    def next_table_number(tables: Iterable[Table]) -> int:
        return max((t.number for t in tables), default=0) + 1

    @staticmethod
    def guests_by_table(plan: PlanState) -> List[TableSeating]:
        index = ViewService.guest_index(plan)
        return [
            TableSeating(
                table_id=table.id,
                table_number=table.number,
                shape=table.shape,
                is_vip=table.is_vip,
                seats=[
                    SeatView(
                        chair_id=chair.id,
                        seat_number=i + 1,
                        guest=ViewService.resolve_guest(index, chair.guest_id)
                    )
                    for i, chair in enumerate(table.chairs)
                ]
            )
            for table in sorted(plan.tables, key=lambda t: t.number)
        ]

    @staticmethod
    def selected_table(plan: PlanState) -> Optional[Table]:
        return next((t for t in plan.tables if t.id == plan.selected_table_id), None)

    @staticmethod
    def table_occupancy(table: Table) -> str:
        assigned = sum(1 for c in table.chairs if c.guest_id)
        return f"{assigned}/{len(table.chairs)}"

    @staticmethod
    def seat_markers(plan: PlanState, table_id: str) -> List[SeatMarker]:
        """Seat markers around a table, positioned relative to its centre"""
        table = next((t for t in plan.tables if t.id == table_id), None)
        if table is None:
            return []

        index = ViewService.guest_index(plan)
        total = len(table.chairs)
        markers = []
        for i, chair in enumerate(table.chairs):
            guest = ViewService.resolve_guest(index, chair.guest_id)
            x, y = seat_marker_position(table.shape, i, total, table.rotation)
            markers.append(SeatMarker(
                chair_id=chair.id,
                seat_number=i + 1,
                x=x,
                y=y,
                guest=guest,
                label=initials(guest.name) if guest else str(i + 1),
                tooltip=guest.name if guest else f"Seat {i + 1} (empty)"
            ))
        return markers

    @staticmethod
    def seat_popover(plan: PlanState, table_id: str, chair_id: str) -> Optional[SeatPopover]:
        table = next((t for t in plan.tables if t.id == table_id), None)
        if table is None:
            return None
        position = next((i for i, c in enumerate(table.chairs) if c.id == chair_id), None)
        if position is None:
            return None

        guest = ViewService.resolve_guest(ViewService.guest_index(plan), table.chairs[position].guest_id)
        return SeatPopover(
            table_id=table.id,
            chair_id=chair_id,
            table_number=table.number,
            seat_number=position + 1,
            guest=guest,
            can_clear=guest is not None,
            candidates=ViewService.unassigned_guests(plan)[:POPOVER_CANDIDATES]
        )
