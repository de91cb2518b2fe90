"""
Seating list exports and plan file import/export
"""

import io
import json
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from seatplan.schemas.plan import ExportDocument, PlanState, SavedVersion
from seatplan.services.view_service import ViewService

CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
JSON_MEDIA_TYPE = "application/json"

@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: Union[str, bytes]
    media_type: str

class ExportService:
    """Service for generating downloadable files from a plan"""

    COLUMNS = ["Table Number", "VIP", "Seat", "Guest Name", "Gender"]

    @staticmethod
    def seating_rows(plan: PlanState) -> List[List[str]]:
        """One row per seat, grouped by table, then one per unassigned guest"""
        rows = []
        for table in ViewService.guests_by_table(plan):
            for seat in table.seats:
                rows.append([
                    str(table.table_number),
                    "Yes" if table.is_vip else "",
                    str(seat.seat_number),
                    seat.guest.name if seat.guest else "",
                    seat.guest.gender if seat.guest else ""
                ])
        for guest in ViewService.unassigned_guests(plan):
            rows.append(["", "", "", guest.name, guest.gender])
        return rows

    @staticmethod
    def seating_frame(plan: PlanState) -> pd.DataFrame:
        return pd.DataFrame(ExportService.seating_rows(plan), columns=ExportService.COLUMNS, dtype=str)

    @staticmethod
    def export_csv(plan: PlanState, today: Optional[date] = None) -> ExportFile:
        """CSV of the seating list, CRLF separated with minimal quoting"""
        df = ExportService.seating_frame(plan)
        buffer = io.StringIO()
        df.to_csv(buffer, index=False, lineterminator="\r\n")
        text = buffer.getvalue()
        if text.endswith("\r\n"):
            text = text[:-2]

        today = today or datetime.now(timezone.utc).date()
        return ExportFile(
            filename=f"seating-guests-{today.isoformat()}.csv",
            content=text,
            media_type=CSV_MEDIA_TYPE
        )

    @staticmethod
    def export_xlsx(plan: PlanState, today: Optional[date] = None) -> ExportFile:
        df = ExportService.seating_frame(plan)
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Seating')

        today = today or datetime.now(timezone.utc).date()
        return ExportFile(
            filename=f"seating-guests-{today.isoformat()}.xlsx",
            content=buffer.getvalue(),
            media_type=XLSX_MEDIA_TYPE
        )

    @staticmethod
    def plan_filename(name: str, saved_at: str) -> str:
        """``seating-plan-<slug>-<YYYY-MM-DD>.json`` for a saved version"""
        slug = re.sub(r"[^a-z0-9]", "-", name, flags=re.IGNORECASE).lower()
        saved = datetime.fromisoformat(saved_at.replace("Z", "+00:00"))
        if saved.tzinfo is not None:
            saved = saved.astimezone(timezone.utc)
        return f"seating-plan-{slug}-{saved.date().isoformat()}.json"

    @staticmethod
    def export_version(version: SavedVersion) -> ExportFile:
        document = ExportDocument(
            name=version.name,
            saved_at=version.saved_at,
            guests=version.guests,
            tables=version.tables,
            stage_size=version.stage_size,
            pan=version.pan
        )
        return ExportFile(
            filename=ExportService.plan_filename(version.name, version.saved_at),
            content=json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False),
            media_type=JSON_MEDIA_TYPE
        )

    @staticmethod
    def validate_plan_payload(data: Any) -> Dict[str, Any]:
        """Plan files must carry guests and tables lists"""
        if not isinstance(data, dict):
            raise ValueError("Invalid file format: expected a JSON object")
        if not isinstance(data.get("guests"), list) or not isinstance(data.get("tables"), list):
            raise ValueError("Invalid file format: missing guests or tables")
        return data

    @staticmethod
    def parse_import(text: Union[str, bytes]) -> ExportDocument:
        """Parse an exported plan file.

        Raises ``ValueError`` (JSON, structure or field errors) before anything
        is applied to a plan.
        """
        data = json.loads(text)
        ExportService.validate_plan_payload(data)
        return ExportDocument.model_validate(data)
