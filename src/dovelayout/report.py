# report.py
from __future__ import annotations

import math
from typing import List

from .geometry import smallest_pin_gap, tail_marks
from .model import JointLayout


def round_mm(value: float) -> int:
    """Round half up to whole millimetres, the way marks are read off a rule."""
    return int(math.floor(value + 0.5))


def rounded_marks(layout: JointLayout) -> List[int]:
    marks: List[int] = []
    for mark_left, mark_right in tail_marks(layout):
        marks.append(round_mm(mark_left))
        marks.append(round_mm(mark_right))
    return marks


def format_report(layout: JointLayout) -> List[str]:
    marks = rounded_marks(layout)
    marks_text = ", ".join(str(mark) for mark in marks) + " mm" if marks else "none"
    angle_deg = 90 - round_mm(math.degrees(layout.angle))
    return [
        f"Parts: {layout.parts_count:g} × {layout.part_width:.1f} mm",
        f"Dovetails: {layout.tails_count} × {round_mm(layout.tail_width)} mm "
        f"({layout.tail_width:.1f} mm)",
        f"Pins: {round_mm(layout.pin_width)} mm ({layout.pin_width:.1f} mm)",
        f"Angle: {angle_deg}°",
        f"Smallest distance between dovetails: {round_mm(smallest_pin_gap(layout))} mm",
        f"Required marks on center line of tail piece: {marks_text}",
    ]
