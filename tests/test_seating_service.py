"""
Tests for seating service functionality
"""

import pytest

from seatplan.schemas.plan import Chair, Guest, PlanState, SeatRef, StageSize, Table
from seatplan.services.seating_service import SeatingService
from seatplan.services.view_service import ViewService

@pytest.fixture
def plan():
    """Sample plan with three tables and ten guests"""
    return SeatingService.default_plan()

@pytest.fixture
def small_plan():
    """One round table, two guests, one of them seated"""
    guests = [
        Guest(id="g1", name="Ava Johnson", gender="female"),
        Guest(id="g2", name="Noah Williams", gender="male"),
    ]
    table = Table(
        id="t1", number=1, shape="round", x=120, y=120,
        chairs=[Chair(id="c1", guest_id="g1"), Chair(id="c2")]
    )
    return PlanState(guests=guests, tables=[table], selected_table_id="t1")

def all_guest_refs(plan):
    return [c.guest_id for t in plan.tables for c in t.chairs if c.guest_id]

def test_default_plan_contents(plan):
    """Sample plan has the expected tables and seat assignments"""
    assert len(plan.guests) == 10
    assert [t.id for t in plan.tables] == ["t1", "t2", "t3"]
    assert [len(t.chairs) for t in plan.tables] == [8, 10, 12]
    assert plan.tables[0].is_vip is True
    assert plan.tables[0].chairs[0].guest_id == "g1"
    assert plan.tables[1].chairs[0].guest_id == "g5"
    assert plan.tables[2].chairs[2].guest_id == "g10"
    assert plan.selected_table_id == "t1"
    assert plan.tool == "pan"

def test_set_chair_count_clamps(plan):
    """Chair counts are clamped to between 2 and 20"""
    low = SeatingService.set_chair_count(plan, "t1", -5)
    assert len(SeatingService.find_table(low, "t1").chairs) == 2

    high = SeatingService.set_chair_count(plan, "t1", 999)
    assert len(SeatingService.find_table(high, "t1").chairs) == 20

def test_set_chair_count_grow_keeps_existing(plan):
    grown = SeatingService.set_chair_count(plan, "t1", 10)
    chairs = SeatingService.find_table(grown, "t1").chairs

    assert len(chairs) == 10
    assert chairs[:8] == SeatingService.find_table(plan, "t1").chairs
    assert all(c.guest_id is None for c in chairs[8:])
    assert len({c.id for c in chairs}) == 10

def test_shrinking_returns_guests_to_pool(plan):
    """Shrinking 8 chairs to 3 unseats the guest in chair 4"""
    before = {g.id for g in ViewService.unassigned_guests(plan)}
    shrunk = SeatingService.set_chair_count(plan, "t1", 3)

    chairs = SeatingService.find_table(shrunk, "t1").chairs
    assert [c.guest_id for c in chairs] == ["g1", "g2", "g3"]
    after = {g.id for g in ViewService.unassigned_guests(shrunk)}
    assert after == before | {"g4"}
    assert len(shrunk.guests) == len(plan.guests)

def test_shrinking_closes_popover_on_removed_chair(plan):
    plan = plan.model_copy(update={"active_seat": SeatRef(table_id="t1", chair_id="t1c6")})
    shrunk = SeatingService.set_chair_count(plan, "t1", 4)
    assert shrunk.active_seat is None

    plan = plan.model_copy(update={"active_seat": SeatRef(table_id="t1", chair_id="t1c2")})
    shrunk = SeatingService.set_chair_count(plan, "t1", 4)
    assert shrunk.active_seat == SeatRef(table_id="t1", chair_id="t1c2")

def test_seat_guest_moves_guest(small_plan):
    """Reassigning a guest leaves the old seat empty"""
    moved = SeatingService.seat_guest(small_plan, "t1", "c2", "g1")
    chairs = moved.tables[0].chairs

    assert chairs[0].guest_id is None
    assert chairs[1].guest_id == "g1"
    assert all_guest_refs(moved).count("g1") == 1

def test_mutations_leave_input_untouched(small_plan):
    SeatingService.seat_guest(small_plan, "t1", "c2", "g2")
    SeatingService.set_chair_count(small_plan, "t1", 6)
    SeatingService.remove_guest(small_plan, "g1")

    assert small_plan.tables[0].chairs == [Chair(id="c1", guest_id="g1"), Chair(id="c2")]
    assert len(small_plan.guests) == 2

def test_assign_guest_clear(small_plan):
    cleared = SeatingService.assign_guest(small_plan, "t1", "c1", None)
    assert all_guest_refs(cleared) == []

def test_remove_guest_leaves_no_dangling_reference(plan):
    removed = SeatingService.remove_guest(plan, "g2")

    assert "g2" not in {g.id for g in removed.guests}
    assert "g2" not in all_guest_refs(removed)
    guest_ids = {g.id for g in removed.guests}
    assert all(ref in guest_ids for ref in all_guest_refs(removed))

def test_add_guest_name():
    plan = PlanState()
    plan = SeatingService.add_guest(plan, "Dr.", " Jane ", "Doe")
    assert plan.guests[-1].name == "Dr. Jane Doe"

    plan = SeatingService.add_guest(plan, "", "Sam", "")
    assert plan.guests[-1].name == "Sam"

    plan = SeatingService.add_guest(plan, gender="male")
    assert plan.guests[-1].name == "Guest 3"
    assert plan.guests[-1].gender == "male"
    assert plan.guests[-1].id.startswith("g_")

def test_add_table_at_visible_centre():
    """New table lands at the snapped centre of the visible canvas"""
    plan = PlanState(stage_size=StageSize(w=1000, h=650))
    added = SeatingService.add_table(plan, "round")
    table = added.tables[0]

    assert table.x == 504
    assert table.y == 336
    assert table.number == 1
    assert len(table.chairs) == 8
    assert added.selected_table_id == table.id

def test_add_table_without_snap_and_with_pan():
    plan = PlanState(stage_size=StageSize(w=1000, h=650), snap_to_grid=False)
    plan = plan.model_copy(update={"pan": plan.pan.model_copy(update={"x": 100, "y": -50})})
    added = SeatingService.add_table(plan, "rect")
    table = added.tables[0]

    assert (table.x, table.y) == (400, 375)
    assert len(table.chairs) == 12
    assert table.number_style == "modern"

def test_add_table_rejects_unknown_shape():
    with pytest.raises(ValueError):
        SeatingService.add_table(PlanState(), "oval")

def test_table_numbers_are_next_free(plan):
    added = SeatingService.add_table(plan, "round")
    assert added.tables[-1].number == 4

    deleted = SeatingService.delete_table(added, "t1")
    again = SeatingService.add_table(deleted, "round")
    assert again.tables[-1].number == 5

def test_duplicate_table(plan):
    duplicated = SeatingService.duplicate_table(plan, "t2")
    source = SeatingService.find_table(plan, "t2")
    copy = duplicated.tables[-1]

    assert copy.id != source.id
    assert copy.number == 4
    assert (copy.x, copy.y) == (552, 312)
    assert copy.rotation == source.rotation
    assert [c.guest_id for c in copy.chairs] == [c.guest_id for c in source.chairs]
    assert {c.id for c in copy.chairs}.isdisjoint({c.id for c in source.chairs})
    assert duplicated.selected_table_id == copy.id

def test_delete_table_clears_selection_and_popover(plan):
    plan = plan.model_copy(update={"active_seat": SeatRef(table_id="t1", chair_id="t1c1")})
    deleted = SeatingService.delete_table(plan, "t1")

    assert [t.id for t in deleted.tables] == ["t2", "t3"]
    assert deleted.selected_table_id is None
    assert deleted.active_seat is None

def test_delete_missing_table_is_noop(plan):
    assert SeatingService.delete_table(plan, "nope") is plan

def test_update_table_fields(plan):
    updated = SeatingService.update_table(plan, "t3", label="Family", is_vip=True, number=9)
    table = SeatingService.find_table(updated, "t3")

    assert table.label == "Family"
    assert table.is_vip is True
    assert table.number == 9

def test_update_table_rejects_bad_fields(plan):
    with pytest.raises(ValueError):
        SeatingService.update_table(plan, "t1", chairs=[])
    with pytest.raises(ValueError):
        SeatingService.update_table(plan, "t1", shape="oval")

def test_rotate_table_accumulates(plan):
    rotated = SeatingService.rotate_table(plan, "t1", 1)
    rotated = SeatingService.rotate_table(rotated, "t1", 1)
    rotated = SeatingService.rotate_table(rotated, "t1", -3)
    assert SeatingService.find_table(rotated, "t1").rotation == pytest.approx(-0.15)

def test_apply_snapshot(plan):
    tables = [plan.tables[2]]
    applied = SeatingService.apply_snapshot(plan, plan.guests[:3], tables)

    assert applied.tables == tables
    assert applied.selected_table_id == "t3"
    assert applied.active_seat is None
    assert (applied.pan.x, applied.pan.y) == (0, 0)
    assert (applied.stage_size.w, applied.stage_size.h) == (800, 600)

    empty = SeatingService.apply_snapshot(plan, [], [], StageSize(w=1200, h=900))
    assert empty.selected_table_id is None
    assert empty.stage_size == StageSize(w=1200, h=900)
