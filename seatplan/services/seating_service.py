"""
Seating plan mutations and invariant maintenance
"""

import logging
from typing import Callable, List, Optional

from seatplan.core.config import settings
from seatplan.core.geometry import (
    DEFAULT_CHAIRS,
    DUPLICATE_OFFSET,
    MAX_CHAIRS,
    MIN_CHAIRS,
    ROTATION_STEP,
    clamp,
    compute_stage_size,
    snap,
)
from seatplan.schemas.plan import (
    Chair,
    Guest,
    Offset,
    PlanState,
    StageSize,
    Table,
)
from seatplan.services.view_service import ViewService
from seatplan.utils.ids import uid

logger = logging.getLogger(__name__)

EDITABLE_TABLE_FIELDS = {"number", "label", "shape", "number_style", "is_vip", "x", "y", "rotation"}

class SeatingService:
    """Operations on a seating plan.

    Every method takes the current ``PlanState`` and returns a new one. The
    input plan is never modified, so views built from it stay consistent.
    """

    @staticmethod
    def find_table(plan: PlanState, table_id: Optional[str]) -> Optional[Table]:
        return next((t for t in plan.tables if t.id == table_id), None)

    @staticmethod
    def _snap(plan: PlanState, n: float) -> float:
        return snap(n, settings.GRID_SIZE, plan.snap_to_grid)

    @staticmethod
    def _map_table(plan: PlanState, table_id: str, fn: Callable[[Table], Table]) -> PlanState:
        if SeatingService.find_table(plan, table_id) is None:
            return plan
        tables = [fn(t) if t.id == table_id else t for t in plan.tables]
        return plan.model_copy(update={"tables": tables})

    # -------- Tables --------

    @staticmethod
    def add_table(plan: PlanState, shape: str) -> PlanState:
        """Add a table at the centre of the visible canvas and select it"""
        if shape not in DEFAULT_CHAIRS:
            raise ValueError(f"Unknown table shape: {shape!r}")

        table_id = uid("t")
        table = Table(
            id=table_id,
            number=ViewService.next_table_number(plan.tables),
            shape=shape,
            number_style="modern" if shape == "rect" else "classic",
            is_vip=False,
            x=SeatingService._snap(plan, plan.stage_size.w * 0.5 - plan.pan.x),
            y=SeatingService._snap(plan, plan.stage_size.h * 0.5 - plan.pan.y),
            rotation=0.0,
            chairs=[Chair(id=f"{table_id}c{i + 1}") for i in range(DEFAULT_CHAIRS[shape])]
        )
        logger.info(f"Added {shape} table {table.number} at ({table.x}, {table.y})")
        return plan.model_copy(update={
            "tables": [*plan.tables, table],
            "selected_table_id": table_id
        })

    @staticmethod
    def duplicate_table(plan: PlanState, table_id: str) -> PlanState:
        """Copy a table next to its source.

        Seat assignments are copied as they are, so the same guests sit at
        both tables until someone reassigns them.
        """
        source = SeatingService.find_table(plan, table_id)
        if source is None:
            return plan

        new_id = uid("t")
        copy = source.model_copy(update={
            "id": new_id,
            "number": ViewService.next_table_number(plan.tables),
            "x": SeatingService._snap(plan, source.x + DUPLICATE_OFFSET),
            "y": SeatingService._snap(plan, source.y + DUPLICATE_OFFSET),
            "chairs": [
                Chair(id=f"{new_id}c{i + 1}", guest_id=chair.guest_id)
                for i, chair in enumerate(source.chairs)
            ]
        })
        return plan.model_copy(update={
            "tables": [*plan.tables, copy],
            "selected_table_id": new_id
        })

    @staticmethod
    def delete_table(plan: PlanState, table_id: str) -> PlanState:
        if SeatingService.find_table(plan, table_id) is None:
            return plan

        update = {"tables": [t for t in plan.tables if t.id != table_id]}
        if plan.selected_table_id == table_id:
            update["selected_table_id"] = None
        if plan.active_seat is not None and plan.active_seat.table_id == table_id:
            update["active_seat"] = None
        return plan.model_copy(update=update)

    @staticmethod
    def set_chair_count(plan: PlanState, table_id: str, count: int) -> PlanState:
        """Resize a table to ``count`` chairs, clamped to the allowed range.

        New chairs are appended empty. Removing chairs drops them from the
        end; guests seated there go back to the unassigned pool.
        """
        table = SeatingService.find_table(plan, table_id)
        if table is None:
            return plan

        target = int(clamp(int(count), MIN_CHAIRS, MAX_CHAIRS))
        existing = table.chairs
        if len(existing) == target:
            return plan

        update = {}
        if len(existing) < target:
            added = [
                Chair(id=uid(f"{table.id}c{len(existing) + i + 1}"))
                for i in range(target - len(existing))
            ]
            chairs = [*existing, *added]
        else:
            chairs = list(existing[:target])
            dropped = [c for c in existing[target:] if c.guest_id]
            if dropped:
                logger.info(f"Table {table.number}: {len(dropped)} guest(s) unseated by shrinking to {target} chairs")
            removed_ids = {c.id for c in existing[target:]}
            if (
                plan.active_seat is not None
                and plan.active_seat.table_id == table_id
                and plan.active_seat.chair_id in removed_ids
            ):
                update["active_seat"] = None

        update["tables"] = [
            t.model_copy(update={"chairs": chairs}) if t.id == table_id else t
            for t in plan.tables
        ]
        return plan.model_copy(update=update)

    @staticmethod
    def update_table(plan: PlanState, table_id: str, **fields) -> PlanState:
        """Patch editable table fields, validating the result"""
        unknown = set(fields) - EDITABLE_TABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update table fields: {', '.join(sorted(unknown))}")

        def patch(table: Table) -> Table:
            return Table.model_validate({**table.model_dump(), **fields})

        return SeatingService._map_table(plan, table_id, patch)

    @staticmethod
    def rotate_table(plan: PlanState, table_id: str, steps: int = 1) -> PlanState:
        """Turn a table by whole rotation steps; the angle is never wrapped"""
        return SeatingService._map_table(
            plan,
            table_id,
            lambda t: t.model_copy(update={"rotation": t.rotation + steps * ROTATION_STEP})
        )

    @staticmethod
    def select_table(plan: PlanState, table_id: Optional[str]) -> PlanState:
        if table_id is not None and SeatingService.find_table(plan, table_id) is None:
            return plan
        return plan.model_copy(update={"selected_table_id": table_id})

    # -------- Seats --------

    @staticmethod
    def assign_guest(
        plan: PlanState,
        table_id: str,
        chair_id: str,
        guest_id: Optional[str] = None
    ) -> PlanState:
        """Set or clear the guest on one chair.

        Does not unseat the guest elsewhere; see ``seat_guest``.
        """
        def patch(table: Table) -> Table:
            chairs = [
                c.model_copy(update={"guest_id": guest_id}) if c.id == chair_id else c
                for c in table.chairs
            ]
            return table.model_copy(update={"chairs": chairs})

        return SeatingService._map_table(plan, table_id, patch)

    @staticmethod
    def unassign_guest_everywhere(plan: PlanState, guest_id: str) -> PlanState:
        tables: List[Table] = []
        for table in plan.tables:
            if any(c.guest_id == guest_id for c in table.chairs):
                chairs = [
                    c.model_copy(update={"guest_id": None}) if c.guest_id == guest_id else c
                    for c in table.chairs
                ]
                table = table.model_copy(update={"chairs": chairs})
            tables.append(table)
        return plan.model_copy(update={"tables": tables})

    @staticmethod
    def seat_guest(plan: PlanState, table_id: str, chair_id: str, guest_id: str) -> PlanState:
        """Move a guest to a chair, leaving any previous seat empty"""
        plan = SeatingService.unassign_guest_everywhere(plan, guest_id)
        return SeatingService.assign_guest(plan, table_id, chair_id, guest_id)

    # -------- Guests --------

    @staticmethod
    def add_guest(
        plan: PlanState,
        title: str = "",
        first_name: str = "",
        last_name: str = "",
        gender: str = "female",
        photo_url: Optional[str] = None
    ) -> PlanState:
        parts = [p.strip() for p in (title, first_name, last_name) if p and p.strip()]
        name = " ".join(parts) or f"Guest {len(plan.guests) + 1}"
        guest = Guest(id=uid("g"), name=name, gender=gender, photo_url=photo_url)
        return plan.model_copy(update={"guests": [*plan.guests, guest]})

    @staticmethod
    def remove_guest(plan: PlanState, guest_id: str) -> PlanState:
        """Delete a guest, emptying any chair that referenced them"""
        plan = SeatingService.unassign_guest_everywhere(plan, guest_id)
        return plan.model_copy(update={"guests": [g for g in plan.guests if g.id != guest_id]})

    # -------- Whole plan --------

    @staticmethod
    def apply_snapshot(
        plan: PlanState,
        guests: List[Guest],
        tables: List[Table],
        stage_size: Optional[StageSize] = None,
        pan: Optional[Offset] = None,
        viewport_width: Optional[float] = None
    ) -> PlanState:
        """Replace the plan data with a loaded version"""
        tables = list(tables)
        if stage_size is None:
            size = compute_stage_size(tables, viewport_width)
            stage_size = StageSize(w=size.w, h=size.h)
        return plan.model_copy(update={
            "guests": list(guests),
            "tables": tables,
            "selected_table_id": tables[0].id if tables else None,
            "active_seat": None,
            "stage_size": stage_size,
            "pan": pan if pan is not None else Offset()
        })

    @staticmethod
    def default_plan() -> PlanState:
        """Sample plan shown before any saved version is loaded"""
        names = [
            ("g1", "Ava Johnson", "female"),
            ("g2", "Noah Williams", "male"),
            ("g3", "Sophia Brown", "female"),
            ("g4", "Liam Jones", "male"),
            ("g5", "Isabella Davis", "female"),
            ("g6", "Ethan Miller", "male"),
            ("g7", "Mia Wilson", "female"),
            ("g8", "Lucas Moore", "male"),
            ("g9", "Amelia Taylor", "female"),
            ("g10", "Benjamin Anderson", "male"),
        ]
        guests = [Guest(id=gid, name=name, gender=gender) for gid, name, gender in names]

        def chairs(table_id: str, count: int, seated: int, first_guest: int) -> List[Chair]:
            return [
                Chair(
                    id=f"{table_id}c{i + 1}",
                    guest_id=f"g{i + first_guest}" if i < seated else None
                )
                for i in range(count)
            ]

        tables = [
            Table(id="t1", number=1, shape="round", number_style="classic", is_vip=True,
                  x=240, y=210, rotation=0.0, chairs=chairs("t1", 8, 4, 1)),
            Table(id="t2", number=2, shape="round", number_style="monogram", is_vip=False,
                  x=520, y=260, rotation=0.2, chairs=chairs("t2", 10, 3, 5)),
            Table(id="t3", number=3, shape="rect", number_style="modern", is_vip=False,
                  x=350, y=430, rotation=0.0, chairs=chairs("t3", 12, 3, 8)),
        ]
        size = compute_stage_size(tables)
        return PlanState(
            guests=guests,
            tables=tables,
            stage_size=StageSize(w=size.w, h=size.h),
            selected_table_id="t1"
        )
