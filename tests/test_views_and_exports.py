"""
Tests for derived views, seating exports and plan file import
"""

import io
import json
from datetime import date

import pandas as pd
import pytest

from seatplan.schemas.plan import (
    Chair,
    Guest,
    Offset,
    PlanState,
    SavedVersion,
    StageSize,
    Table,
)
from seatplan.services.export_service import ExportService
from seatplan.services.view_service import ViewService
from seatplan.utils.avatars import avatar_data_url, guest_avatar, initials

@pytest.fixture
def one_table_plan():
    """One VIP table with two seats, one assigned; one guest unassigned"""
    guests = [
        Guest(id="g1", name="Ava Johnson", gender="female"),
        Guest(id="g2", name="Noah Williams", gender="male"),
    ]
    table = Table(
        id="t1", number=1, shape="round", is_vip=True, x=100, y=100,
        chairs=[Chair(id="c1", guest_id="g1"), Chair(id="c2")]
    )
    return PlanState(guests=guests, tables=[table])

@pytest.fixture
def saved_version(one_table_plan):
    return SavedVersion(
        id="0b5c2f7e-8a1d-4c3e-9f2a-6d7b8c9e0f1a",
        name="Final Layout!",
        saved_at="2024-06-15T18:30:00.000Z",
        guests=one_table_plan.guests,
        tables=one_table_plan.tables,
    )

def test_initials():
    assert initials("Ava Johnson") == "AJ"
    assert initials("dr jane doe") == "DJ"
    assert initials("Cher") == "C"
    assert initials("   ") == "?"

def test_avatars():
    assert avatar_data_url("female").startswith("data:image/svg+xml;charset=utf-8,")
    assert avatar_data_url("female") != avatar_data_url("male")

    with_photo = Guest(id="g1", name="A", gender="male", photo_url="https://example.com/a.png")
    assert guest_avatar(with_photo) == "https://example.com/a.png"
    assert guest_avatar(with_photo.model_copy(update={"photo_url": None})) == avatar_data_url("male")

def test_unassigned_and_sidebar():
    plan = PlanState(guests=[Guest(id=f"g{i}", name=f"Guest {i}", gender="female") for i in range(12)])
    assert len(ViewService.unassigned_guests(plan)) == 12
    assert [g.id for g in ViewService.sidebar_guests(plan)] == [f"g{i}" for i in range(8)]

def test_guests_by_table_sorted_by_number(one_table_plan):
    extra = Table(id="t0", number=0, shape="rect", x=0, y=0, chairs=[Chair(id="x1")])
    plan = one_table_plan.model_copy(update={"tables": [*one_table_plan.tables, extra]})

    grouped = ViewService.guests_by_table(plan)
    assert [t.table_id for t in grouped] == ["t0", "t1"]
    assert grouped[1].assigned_count == 1
    assert grouped[1].seats[0].guest.name == "Ava Johnson"
    assert grouped[1].seats[1].guest is None

def test_dangling_guest_reference_renders_empty(one_table_plan):
    table = one_table_plan.tables[0].model_copy(update={"chairs": [Chair(id="c1", guest_id="ghost")]})
    plan = one_table_plan.model_copy(update={"tables": [table]})

    markers = ViewService.seat_markers(plan, "t1")
    assert markers[0].guest is None
    assert markers[0].label == "1"
    assert ViewService.table_occupancy(table) == "1/1"

def test_seat_markers(one_table_plan):
    markers = ViewService.seat_markers(one_table_plan, "t1")

    assert [m.seat_number for m in markers] == [1, 2]
    assert markers[0].label == "AJ"
    assert markers[0].tooltip == "Ava Johnson"
    assert markers[1].label == "2"
    assert markers[1].tooltip == "Seat 2 (empty)"
    assert markers[0].x == pytest.approx(70)
    assert markers[1].x == pytest.approx(-70)
    assert ViewService.seat_markers(one_table_plan, "missing") == []

def test_popover_candidates_limited():
    guests = [Guest(id=f"g{i}", name=f"Guest {i}", gender="male") for i in range(10)]
    table = Table(id="t1", number=1, shape="round", x=0, y=0, chairs=[Chair(id="c1")])
    plan = PlanState(guests=guests, tables=[table])

    popover = ViewService.seat_popover(plan, "t1", "c1")
    assert len(popover.candidates) == 6
    assert popover.table_number == 1
    assert ViewService.seat_popover(plan, "t1", "c9") is None

def test_next_table_number():
    assert ViewService.next_table_number([]) == 1

def test_csv_rows(one_table_plan):
    """One table with two seats plus one unassigned guest gives three rows"""
    exported = ExportService.export_csv(one_table_plan, today=date(2024, 6, 15))

    assert exported.filename == "seating-guests-2024-06-15.csv"
    assert exported.content == "\r\n".join([
        "Table Number,VIP,Seat,Guest Name,Gender",
        "1,Yes,1,Ava Johnson,female",
        "1,Yes,2,,",
        ",,,Noah Williams,male",
    ])

def test_csv_quoting():
    guests = [Guest(id="g1", name='Smith, "Jr" John', gender="male")]
    plan = PlanState(guests=guests)

    content = ExportService.export_csv(plan, today=date(2024, 1, 1)).content
    assert content.split("\r\n")[1] == ',,,"Smith, ""Jr"" John",male'

def test_csv_empty_plan():
    content = ExportService.export_csv(PlanState(), today=date(2024, 1, 1)).content
    assert content == "Table Number,VIP,Seat,Guest Name,Gender"

def test_xlsx_export_readable(one_table_plan):
    exported = ExportService.export_xlsx(one_table_plan, today=date(2024, 6, 15))
    assert exported.filename == "seating-guests-2024-06-15.xlsx"

    df = pd.read_excel(io.BytesIO(exported.content), sheet_name="Seating", dtype=str, keep_default_na=False)
    assert list(df.columns) == ExportService.COLUMNS
    assert len(df) == 3
    assert df.iloc[0]["Guest Name"] == "Ava Johnson"
    assert df.iloc[2]["Guest Name"] == "Noah Williams"

def test_plan_filename():
    assert ExportService.plan_filename("Final Layout!", "2024-06-15T18:30:00.000Z") == \
        "seating-plan-final-layout--2024-06-15.json"

def test_export_round_trip_without_stage(saved_version):
    exported = ExportService.export_version(saved_version)
    assert exported.filename == "seating-plan-final-layout--2024-06-15.json"

    data = json.loads(exported.content)
    assert data["name"] == "Final Layout!"
    assert data["savedAt"] == "2024-06-15T18:30:00.000Z"
    assert "stageSize" not in data
    assert "id" not in data
    assert data["tables"][0]["isVip"] is True

    document = ExportService.parse_import(exported.content)
    assert document.guests == saved_version.guests
    assert document.tables == saved_version.tables
    assert document.stage_size is None

def test_export_round_trip_with_stage(saved_version):
    version = saved_version.model_copy(update={
        "stage_size": StageSize(w=1200, h=800),
        "pan": Offset(x=-40, y=25)
    })
    document = ExportService.parse_import(ExportService.export_version(version).content)

    assert document.stage_size == StageSize(w=1200, h=800)
    assert document.pan == Offset(x=-40, y=25)

@pytest.mark.parametrize("text", [
    "not json",
    "[]",
    '{"guests": []}',
    '{"guests": [], "tables": {}}',
    '{"guests": [{"id": "g1"}], "tables": []}',
])
def test_import_rejects_invalid_files(text):
    with pytest.raises(ValueError):
        ExportService.parse_import(text)

def test_import_missing_lists_message():
    with pytest.raises(ValueError, match="missing guests or tables"):
        ExportService.parse_import('{"tables": []}')
