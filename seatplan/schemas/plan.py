"""
Plan-related Pydantic schemas
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

GuestGender = Literal["female", "male"]
TableShape = Literal["round", "rect"]
TableNumberStyle = Literal["classic", "monogram", "modern"]
Tool = Literal["select", "pan"]

class PlanModel(BaseModel):
    """Immutable model with camelCase JSON field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

class Guest(PlanModel):
    id: str
    name: str
    gender: GuestGender
    photo_url: Optional[str] = None

class Chair(PlanModel):
    id: str
    guest_id: Optional[str] = None

class Table(PlanModel):
    id: str
    number: int
    label: Optional[str] = None
    shape: TableShape
    number_style: TableNumberStyle = "classic"
    is_vip: bool = False
    x: float
    y: float
    rotation: float = 0.0
    chairs: List[Chair]

class StageSize(PlanModel):
    w: float
    h: float

class Offset(PlanModel):
    x: float = 0.0
    y: float = 0.0

class SeatRef(PlanModel):
    table_id: str
    chair_id: str

class PlanState(PlanModel):
    """Everything the editor works on: persisted data plus view state"""
    guests: List[Guest] = []
    tables: List[Table] = []
    stage_size: StageSize = StageSize(w=1000, h=650)
    pan: Offset = Offset()
    selected_table_id: Optional[str] = None
    active_seat: Optional[SeatRef] = None
    tool: Tool = "pan"
    snap_to_grid: bool = True
    show_grid: bool = True

class VersionMeta(PlanModel):
    id: str
    name: str
    saved_at: str

class SavedVersion(VersionMeta):
    """Full persisted snapshot of a plan"""
    guests: List[Guest]
    tables: List[Table]
    stage_size: Optional[StageSize] = None
    pan: Optional[Offset] = None

class ExportDocument(PlanModel):
    """Shape of an exported/imported plan file"""
    name: Optional[str] = None
    saved_at: Optional[str] = None
    guests: List[Guest]
    tables: List[Table]
    stage_size: Optional[StageSize] = None
    pan: Optional[Offset] = None
