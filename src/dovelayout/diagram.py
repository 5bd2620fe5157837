# diagram.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

from .geometry import MARK_TRIANGLE_HEIGHTS, tail_marks
from .model import JointLayout, Point

TAIL_FILL = "#888"
PIN_FILL = "#ccc"


@dataclass(frozen=True)
class Diagram:
    """
    Flat side view in mm, y growing downwards.

    The tail board spans y in [0, 2h] and the pin board [2h, 3h]. Each
    dovetail is drawn as the full Spannagel triangle: apex on the top edge,
    base on the pin board's far face.
    """

    width: float
    height: float
    tail_board: Tuple[Point, ...]
    pin_board: Tuple[Point, ...]
    dovetails: Tuple[Tuple[Point, Point, Point], ...]


def _rect(x0: float, y0: float, x1: float, y1: float) -> Tuple[Point, ...]:
    return (Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1))


def build_diagram(layout: JointLayout) -> Diagram:
    width = layout.width
    board_top = 2.0 * layout.height
    board_bottom = board_top + layout.height

    dovetails: List[Tuple[Point, Point, Point]] = []
    spread = layout.tail_width + 2.0 * layout.tail_mark_offset
    for mark_left, _ in tail_marks(layout):
        offset = mark_left - layout.tail_mark_offset
        dovetails.append(
            (
                Point(offset + spread / 2.0, 0.0),
                Point(offset, board_bottom),
                Point(offset + spread, board_bottom),
            )
        )

    return Diagram(
        width=width,
        height=MARK_TRIANGLE_HEIGHTS * layout.height,
        tail_board=_rect(0.0, 0.0, width, board_top),
        pin_board=_rect(0.0, board_top, width, board_bottom),
        dovetails=tuple(dovetails),
    )


def _path_data(points: Sequence[Point]) -> str:
    first, rest = points[0], points[1:]
    coords = " ".join(f"{p.x:.3f} {p.y:.3f}" for p in rest)
    return f"M{first.x:.3f} {first.y:.3f} L{coords} Z"


def render_svg(diagram: Diagram) -> str:
    lines = [
        '<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{diagram.width:.3f}mm" height="{diagram.height:.3f}mm" '
        f'viewBox="0 0 {diagram.width:.3f} {diagram.height:.3f}">',
        f'  <path class="workpiece tails" fill="{TAIL_FILL}" d="{_path_data(diagram.tail_board)}" />',
        f'  <path class="workpiece pins" fill="{PIN_FILL}" d="{_path_data(diagram.pin_board)}" />',
    ]
    for triangle in diagram.dovetails:
        lines.append(f'  <path class="dovetail" fill="{TAIL_FILL}" d="{_path_data(triangle)}" />')
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def write_svg(diagram: Diagram, path: Path) -> Path:
    path = Path(path)
    path.write_text(render_svg(diagram), encoding="utf-8")
    return path
