"""
Table and seat geometry.

Every position here is derived from table state on demand. Chair offsets are
relative to the table centre, in canvas units; nothing is cached or stored.
"""

import math
from typing import Iterable, NamedTuple, Optional

GRID_SIZE = 24

ROUND_TABLE_SIZE = (98, 98)
RECT_TABLE_SIZE = (126, 74)

ROUND_SEAT_RADIUS = 70
RECT_SEAT_OFFSET = 18

MIN_CHAIRS = 2
MAX_CHAIRS = 20
DEFAULT_CHAIRS = {"round": 8, "rect": 12}

ROTATION_STEP = 0.15
DUPLICATE_OFFSET = 40

MIN_STAGE_SIZE = (400, 300)
MOBILE_BREAKPOINT = 768


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    w: float
    h: float


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def snap(n: float, grid_size: int = GRID_SIZE, enabled: bool = True) -> float:
    """Round to the nearest grid multiple, halves going up like Math.round"""
    if not enabled:
        return n
    return math.floor(n / grid_size + 0.5) * grid_size


def table_footprint(shape: str) -> Size:
    if shape == "rect":
        return Size(*RECT_TABLE_SIZE)
    if shape == "round":
        return Size(*ROUND_TABLE_SIZE)
    raise ValueError(f"Unknown table shape: {shape!r}")


def _check_index(index: int, total: int) -> None:
    if total < 1:
        raise ValueError(f"Table needs at least one chair, got {total}")
    if not 0 <= index < total:
        raise ValueError(f"Chair index {index} out of range for {total} chairs")


def round_chair_position(
    index: int,
    total: int,
    radius: float = ROUND_SEAT_RADIUS,
    rotation: float = 0.0
) -> Point:
    """Chair on a circle, evenly spaced and turned with the table"""
    _check_index(index, total)
    angle = (math.pi * 2 / total) * index + rotation
    return Point(math.cos(angle) * radius, math.sin(angle) * radius)


def rect_chair_position(
    index: int,
    total: int,
    width: float = RECT_TABLE_SIZE[0],
    height: float = RECT_TABLE_SIZE[1],
    offset: float = 0.0
) -> Point:
    """Chair on one of the four sides of a rectangle.

    Chairs fill the top, right, bottom and left sides in that order,
    ``ceil(total / 4)`` per side, spread from one corner to the other. A side
    holding a single chair puts it at the midpoint. ``offset`` pushes the
    chair outward from the edge.
    """
    _check_index(index, total)
    per_side = math.ceil(total / 4)
    side = index // per_side
    pos_on_side = index % per_side
    t = 0.5 if per_side <= 1 else pos_on_side / (per_side - 1)

    if side == 0:
        return Point(-width / 2 + t * width, -height / 2 - offset)
    if side == 1:
        return Point(width / 2 + offset, -height / 2 + t * height)
    if side == 2:
        return Point(-width / 2 + t * width, height / 2 + offset)
    return Point(-width / 2 - offset, -height / 2 + t * height)


def seat_marker_position(shape: str, index: int, total: int, rotation: float = 0.0) -> Point:
    """Position of the clickable seat marker.

    Rect tables place their markers without the table rotation.
    """
    if shape == "round":
        return round_chair_position(index, total, ROUND_SEAT_RADIUS, rotation)
    w, h = table_footprint(shape)
    return rect_chair_position(index, total, w, h, RECT_SEAT_OFFSET)


def chair_dot_position(shape: str, index: int, total: int, rotation: float = 0.0) -> Point:
    """Position of the decorative chair dot drawn with the table"""
    if shape == "round":
        return round_chair_position(index, total, ROUND_SEAT_RADIUS, rotation)
    w, h = table_footprint(shape)
    return rect_chair_position(index, total, w, h, 0.0)


def rotation_degrees(rotation: float) -> int:
    return math.floor(rotation * 180 / math.pi + 0.5)


def compute_stage_size(tables: Iterable, viewport_width: Optional[float] = None) -> Size:
    """Stage large enough to show every table with some padding"""
    tables = list(tables)
    is_mobile = viewport_width is not None and viewport_width < MOBILE_BREAKPOINT

    if not tables:
        if is_mobile:
            return Size(min(800, viewport_width - 32), 600)
        return Size(1000, 650)

    padding = 100 if is_mobile else 200
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for table in tables:
        w, h = table_footprint(table.shape)
        min_x = min(min_x, table.x - w / 2)
        min_y = min(min_y, table.y - h / 2)
        max_x = max(max_x, table.x + w / 2)
        max_y = max(max_y, table.y + h / 2)

    calculated_w = max_x - min_x + padding * 2
    calculated_h = max_y - min_y + padding * 2

    if is_mobile:
        return Size(max(min(800, viewport_width - 32), calculated_w), max(500, calculated_h))
    return Size(max(800, calculated_w), max(600, calculated_h))
