"""
Interaction controller: pointer gestures, seat assignment and shortcuts
"""

import logging
from dataclasses import dataclass
from typing import Optional

from seatplan.core.config import settings
from seatplan.core.geometry import MIN_STAGE_SIZE, snap
from seatplan.schemas.plan import Offset, PlanState, SeatRef, StageSize
from seatplan.schemas.views import SeatPopover
from seatplan.services.events import EventHub, KeyEvent, PointerEvent, ScopedListener
from seatplan.services.seating_service import SeatingService
from seatplan.services.view_service import ViewService

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class PanStart:
    pointer_x: float
    pointer_y: float
    pan_x: float
    pan_y: float

@dataclass(frozen=True)
class DragStart:
    table_id: str
    pointer_x: float
    pointer_y: float
    table_x: float
    table_y: float

class InteractionController:
    """Turns raw input into plan changes.

    The controller owns the current plan and replaces it after every change.
    At most one pointer gesture (pan or table drag) is active; other pointers
    are ignored until the captured one is released.
    """

    def __init__(self, plan: Optional[PlanState] = None, hub: Optional[EventHub] = None):
        self.plan = plan if plan is not None else SeatingService.default_plan()
        self.hub = hub if hub is not None else EventHub()
        self.captured_pointer: Optional[int] = None
        self.pan_start: Optional[PanStart] = None
        self.dragging: Optional[DragStart] = None
        self.dragged_guest_id: Optional[str] = None
        self.resizing_stage = False
        self._shortcuts = ScopedListener(self.hub, "keydown", self.handle_key)

    # -------- Lifetime --------

    def mount(self) -> None:
        self._shortcuts.acquire()

    def unmount(self) -> None:
        self._shortcuts.release()
        self._reset_gestures()

    @property
    def shortcuts_active(self) -> bool:
        return self._shortcuts.active

    def set_text_input_focus(self, focused: bool) -> None:
        self._shortcuts.enabled = not focused

    def replace_plan(self, plan: PlanState) -> None:
        """Swap in a new plan (e.g. a loaded version), dropping gestures"""
        self._reset_gestures()
        self.plan = plan

    def _reset_gestures(self) -> None:
        self.captured_pointer = None
        self.pan_start = None
        self.dragging = None
        self.dragged_guest_id = None
        self.resizing_stage = False

    # -------- Modes --------

    @property
    def panning(self) -> bool:
        return self.pan_start is not None

    def set_tool(self, tool: str) -> None:
        if tool not in ("select", "pan"):
            raise ValueError(f"Unknown tool: {tool!r}")
        self.plan = self.plan.model_copy(update={"tool": tool})

    def toggle_snap(self) -> None:
        self.plan = self.plan.model_copy(update={"snap_to_grid": not self.plan.snap_to_grid})

    def toggle_grid(self) -> None:
        self.plan = self.plan.model_copy(update={"show_grid": not self.plan.show_grid})

    # -------- Pointer gestures --------

    def _capture(self, event: PointerEvent) -> bool:
        if self.captured_pointer is not None:
            logger.debug(f"Pointer {event.pointer_id} ignored, pointer {self.captured_pointer} is captured")
            return False
        self.captured_pointer = event.pointer_id
        return True

    def _owns(self, event: PointerEvent) -> bool:
        return self.captured_pointer == event.pointer_id

    def stage_pointer_down(self, event: PointerEvent) -> None:
        if self.plan.tool != "pan":
            return
        if not self._capture(event):
            return
        self.pan_start = PanStart(event.client_x, event.client_y, self.plan.pan.x, self.plan.pan.y)

    def table_pointer_down(self, table_id: str, event: PointerEvent) -> None:
        if self.plan.tool != "select":
            # Not handled by the table; reaches the stage underneath
            self.stage_pointer_down(event)
            return
        table = SeatingService.find_table(self.plan, table_id)
        if table is None:
            return
        if not self._capture(event):
            return

        self.plan = SeatingService.select_table(self.plan, table_id)
        self.dragging = DragStart(table_id, event.client_x, event.client_y, table.x, table.y)

    def pointer_move(self, event: PointerEvent) -> None:
        if not self._owns(event):
            return

        if self.pan_start is not None and self.plan.tool == "pan":
            start = self.pan_start
            pan = Offset(
                x=start.pan_x + (event.client_x - start.pointer_x),
                y=start.pan_y + (event.client_y - start.pointer_y)
            )
            self.plan = self.plan.model_copy(update={"pan": pan})
        elif self.dragging is not None:
            drag = self.dragging
            enabled = self.plan.snap_to_grid
            self.plan = SeatingService.update_table(
                self.plan,
                drag.table_id,
                x=snap(drag.table_x + (event.client_x - drag.pointer_x), settings.GRID_SIZE, enabled),
                y=snap(drag.table_y + (event.client_y - drag.pointer_y), settings.GRID_SIZE, enabled)
            )

    def pointer_up(self, event: PointerEvent) -> None:
        if not self._owns(event):
            return
        self.captured_pointer = None
        self.pan_start = None
        self.dragging = None

    # -------- Stage resize --------

    def start_stage_resize(self) -> None:
        self.resizing_stage = True

    def resize_stage(self, dx: float, dy: float) -> None:
        if not self.resizing_stage:
            return
        size = self.plan.stage_size
        stage = StageSize(w=max(MIN_STAGE_SIZE[0], size.w + dx), h=max(MIN_STAGE_SIZE[1], size.h + dy))
        self.plan = self.plan.model_copy(update={"stage_size": stage})

    def end_stage_resize(self) -> None:
        self.resizing_stage = False

    # -------- Seat popover --------

    def open_seat(self, table_id: str, chair_id: str) -> None:
        """Open one seat's popover, closing any other, and select its table"""
        if ViewService.seat_popover(self.plan, table_id, chair_id) is None:
            return
        plan = SeatingService.select_table(self.plan, table_id)
        self.plan = plan.model_copy(update={"active_seat": SeatRef(table_id=table_id, chair_id=chair_id)})

    def close_seat(self) -> None:
        if self.plan.active_seat is not None:
            self.plan = self.plan.model_copy(update={"active_seat": None})

    def seat_popover(self) -> Optional[SeatPopover]:
        seat = self.plan.active_seat
        if seat is None:
            return None
        return ViewService.seat_popover(self.plan, seat.table_id, seat.chair_id)

    def assign_from_popover(self, guest_id: str) -> None:
        popover = self.seat_popover()
        if popover is None:
            return
        if guest_id not in {g.id for g in popover.candidates}:
            logger.warning(f"Guest {guest_id} is not offered for seat {popover.seat_number} of table {popover.table_number}")
            return
        self.plan = SeatingService.seat_guest(self.plan, popover.table_id, popover.chair_id, guest_id)

    def clear_seat(self, table_id: Optional[str] = None, chair_id: Optional[str] = None) -> None:
        """Empty a seat, by default the one whose popover is open"""
        if table_id is None or chair_id is None:
            if self.plan.active_seat is None:
                return
            table_id, chair_id = self.plan.active_seat.table_id, self.plan.active_seat.chair_id
        self.plan = SeatingService.assign_guest(self.plan, table_id, chair_id, None)

    # -------- Guest drag and drop --------

    def start_guest_drag(self, guest_id: str) -> None:
        if guest_id not in {g.id for g in ViewService.unassigned_guests(self.plan)}:
            return
        self.dragged_guest_id = guest_id

    def end_guest_drag(self) -> None:
        self.dragged_guest_id = None

    def can_drop_on(self, table_id: str, chair_id: str) -> bool:
        if self.dragged_guest_id is None:
            return False
        table = SeatingService.find_table(self.plan, table_id)
        if table is None:
            return False
        chair = next((c for c in table.chairs if c.id == chair_id), None)
        return chair is not None and not chair.guest_id

    def drop_on_seat(self, table_id: str, chair_id: str) -> bool:
        """Seat the dragged guest on an empty chair; occupied chairs refuse"""
        if not self.can_drop_on(table_id, chair_id):
            return False
        self.plan = SeatingService.seat_guest(self.plan, table_id, chair_id, self.dragged_guest_id)
        self.dragged_guest_id = None
        return True

    # -------- Table editing --------

    def add_table(self, shape: str) -> None:
        self.plan = SeatingService.add_table(self.plan, shape)

    def duplicate_table(self, table_id: str) -> None:
        self.plan = SeatingService.duplicate_table(self.plan, table_id)

    def delete_table(self, table_id: str) -> None:
        if self.dragging is not None and self.dragging.table_id == table_id:
            self.dragging = None
            self.captured_pointer = None
        self.plan = SeatingService.delete_table(self.plan, table_id)

    def set_chair_count(self, table_id: str, count: int) -> None:
        self.plan = SeatingService.set_chair_count(self.plan, table_id, count)

    def update_selected_table(self, **fields) -> None:
        if self.plan.selected_table_id is None:
            return
        self.plan = SeatingService.update_table(self.plan, self.plan.selected_table_id, **fields)

    def rotate_selected(self, direction: int) -> None:
        if self.plan.selected_table_id is None:
            return
        self.plan = SeatingService.rotate_table(self.plan, self.plan.selected_table_id, direction)

    def select_table(self, table_id: Optional[str]) -> None:
        self.plan = SeatingService.select_table(self.plan, table_id)

    # -------- Guests --------

    def add_guest(self, title: str = "", first_name: str = "", last_name: str = "", gender: str = "female") -> None:
        self.plan = SeatingService.add_guest(self.plan, title, first_name, last_name, gender)

    def remove_guest(self, guest_id: str) -> None:
        if self.dragged_guest_id == guest_id:
            self.dragged_guest_id = None
        self.plan = SeatingService.remove_guest(self.plan, guest_id)

    # -------- Keyboard --------

    def handle_key(self, event: KeyEvent) -> None:
        if event.key == "Escape":
            self.close_seat()
        if event.key == "Delete" and self.plan.selected_table_id:
            self.delete_table(self.plan.selected_table_id)
