# geometry.py
from __future__ import annotations

import logging
import math
from typing import Iterable, List, Tuple, Union

from .errors import GeometryError, InvalidInputError
from .model import DIVISION_FACTOR, Division, JointLayout, Point

log = logging.getLogger(__name__)

# Spannagel: the flare triangle is three board heights tall and its apex
# sits half a height above the far face of the pin board.
MARK_TRIANGLE_HEIGHTS = 3.0
CENTER_LINE_HEIGHTS = 2.5

# Part lists grow with the tail count; beyond this a layout is unusable anyway.
MAX_TAILS = 10_000


def parse_division(division: Union[Division, str]) -> Division:
    """
    Accept a Division or its string value ("fine", "medium", "coarse").

    Raises:
        InvalidInputError: For unknown names.
    """
    if isinstance(division, Division):
        return division
    try:
        return Division(str(division).strip().lower())
    except ValueError:
        choices = ", ".join(d.value for d in Division)
        raise InvalidInputError(
            f"Unknown division {division!r}; expected one of {choices}"
        ) from None


def _require_positive(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(f"{name} must be > 0, got {value!r}")
    return number


def compute_layout(
    width: float,
    height: float,
    division: Union[Division, str],
    tail_pin_ratio: float,
) -> JointLayout:
    """
    Derive tail/pin counts, widths, flare angle and mark offset.

    Pattern along the joint line (left to right):

        pin, (tail, pin) * tails_count

    with the outer pins ending on the board edges. Each pin counts as one
    part and each tail as tail_pin_ratio parts:

        parts_count = pins_count + tails_count * tail_pin_ratio
        width       = parts_count * part_width

    The flare angle follows Spannagel's construction: a triangle of
    altitude 3 * height whose base, 2.5 heights down, spans the tail width.

    Args:
        width: Workpiece width along the joint line (mm).
        height: Workpiece thickness (mm).
        division: Coarseness setting or its name.
        tail_pin_ratio: Tail width divided by pin width.

    Returns:
        JointLayout with every field derived from this one snapshot. Values
        are exact floats; rounding for display is left to the caller.

    Raises:
        InvalidInputError: Non-positive or non-finite inputs.
        GeometryError: Inputs that yield no drawable flare, or more than
            MAX_TAILS tails.
    """
    width = _require_positive("width", width)
    height = _require_positive("height", height)
    tail_pin_ratio = _require_positive("tail_pin_ratio", tail_pin_ratio)
    division = parse_division(division)

    tails_raw = (width / height) * DIVISION_FACTOR[division]
    if not math.isfinite(tails_raw) or tails_raw > MAX_TAILS:
        raise GeometryError(
            f"width/height ratio {width!r}/{height!r} gives more than {MAX_TAILS} tails"
        )
    tails_count = math.floor(tails_raw)
    pins_count = tails_count + 1
    parts_count = pins_count + tails_count * tail_pin_ratio

    part_width = width / parts_count
    pin_width = part_width
    tail_width = part_width * tail_pin_ratio

    if not math.isfinite(tail_width) or tail_width <= 0:
        raise GeometryError(f"Tail width {tail_width!r} is not drawable")

    angle = math.atan((CENTER_LINE_HEIGHTS * height) / (tail_width / 2.0))
    if not 0.0 < angle < math.pi / 2.0:
        raise GeometryError(f"Flare angle {angle!r} rad outside (0, pi/2)")

    tail_mark_offset = (MARK_TRIANGLE_HEIGHTS * height) / math.tan(angle) - tail_width / 2.0

    log.debug(
        "Layout %.3fx%.3f %s ratio=%s -> %d tails, pin %.3f, tail %.3f",
        width,
        height,
        division.value,
        tail_pin_ratio,
        tails_count,
        pin_width,
        tail_width,
    )

    return JointLayout(
        width=width,
        height=height,
        division=division,
        tail_pin_ratio=tail_pin_ratio,
        tails_count=tails_count,
        pins_count=pins_count,
        parts_count=parts_count,
        part_width=part_width,
        pin_width=pin_width,
        tail_width=tail_width,
        angle=angle,
        tail_mark_offset=tail_mark_offset,
    )


def tail_marks(layout: JointLayout) -> List[Tuple[float, float]]:
    """(left, right) mark positions of each tail on the tail board center line."""
    pitch = layout.pin_width + layout.tail_width
    marks: List[Tuple[float, float]] = []
    for tail_index in range(layout.tails_count):
        mark_left = tail_index * pitch + layout.pin_width
        marks.append((mark_left, mark_left + layout.tail_width))
    return marks


def dovetail_angle_deg(layout: JointLayout) -> float:
    """Flank angle measured from the board face normal, as a woodworker reads it."""
    return 90.0 - math.degrees(layout.angle)


def smallest_pin_gap(layout: JointLayout) -> float:
    """Narrowest distance between neighbouring dovetails (at the wide face)."""
    return layout.pin_width - 2.0 * layout.tail_mark_offset


def polygon_area(points: Iterable[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise outlines."""
    pts = list(points)
    area = 0.0
    for (x0, y0), (x1, y1) in zip(pts, pts[1:] + pts[:1]):
        area += x0 * y1 - x1 * y0
    return 0.5 * area


def is_convex(points: Iterable[Point]) -> bool:
    """True when every turn of the closed outline has the same sign."""
    pts = list(points)
    if len(pts) < 3:
        return False
    sign = 0.0
    for i, (x0, y0) in enumerate(pts):
        x1, y1 = pts[(i + 1) % len(pts)]
        x2, y2 = pts[(i + 2) % len(pts)]
        cross = (x1 - x0) * (y2 - y1) - (y1 - y0) * (x2 - x1)
        if abs(cross) < 1e-12:
            continue
        if sign == 0.0:
            sign = cross
        elif (cross > 0) != (sign > 0):
            return False
    return sign != 0.0
