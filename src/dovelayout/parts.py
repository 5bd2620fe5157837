# parts.py
from __future__ import annotations

import logging
import math
from typing import List, NamedTuple, Tuple, Union

from .errors import GeometryError, InvalidInputError
from .geometry import tail_marks
from .model import JointLayout, JointParts, Part, PartKind, Point, Variant

log = logging.getLogger(__name__)


class Edge(NamedTuple):
    """A part flank, as its x at the bottom face and at the top face."""

    bottom_x: float
    top_x: float


def parse_variant(variant: Union[Variant, str]) -> Variant:
    if isinstance(variant, Variant):
        return variant
    try:
        return Variant(str(variant).strip().lower())
    except ValueError:
        choices = ", ".join(v.value for v in Variant)
        raise InvalidInputError(
            f"Unknown variant {variant!r}; expected one of {choices}"
        ) from None


def _check_layout(layout: JointLayout) -> None:
    if not isinstance(layout.tails_count, int) or layout.tails_count < 0:
        raise InvalidInputError(f"tails_count must be a non-negative int, got {layout.tails_count!r}")
    if layout.pins_count != layout.tails_count + 1:
        raise InvalidInputError(
            f"pins_count {layout.pins_count} does not match tails_count {layout.tails_count}"
        )
    for name in ("width", "height", "part_width", "pin_width", "tail_width"):
        value = getattr(layout, name)
        if not math.isfinite(value) or value <= 0:
            raise InvalidInputError(f"Layout {name} must be > 0, got {value!r}")
    if not math.isfinite(layout.tail_mark_offset) or not 0.0 < layout.angle < math.pi / 2.0:
        raise GeometryError(
            f"Layout flare is not drawable: angle={layout.angle!r}, "
            f"tail_mark_offset={layout.tail_mark_offset!r}"
        )


def _check_board(board_width: float, board_height: float, board_depth: float) -> None:
    for name, value in (
        ("board_width", board_width),
        ("board_height", board_height),
        ("board_depth", board_depth),
    ):
        if not math.isfinite(value) or value <= 0:
            raise InvalidInputError(f"{name} must be > 0, got {value!r}")


def _quad(kind: PartKind, left: Edge, right: Edge, half_depth: float) -> Part:
    part = Part(
        kind=kind,
        bottom_left=Point(left.bottom_x, -half_depth),
        top_left=Point(left.top_x, half_depth),
        top_right=Point(right.top_x, half_depth),
        bottom_right=Point(right.bottom_x, -half_depth),
    )
    if right.bottom_x <= left.bottom_x or right.top_x <= left.top_x:
        raise GeometryError(
            f"{kind.name.lower()} would invert: bottom [{left.bottom_x:.4f}, "
            f"{right.bottom_x:.4f}], top [{left.top_x:.4f}, {right.top_x:.4f}]; "
            "lower the tail/pin ratio or use a finer division"
        )
    return part


def _tail_edges(
    layout: JointLayout, scale: float, board_width: float, spread: float
) -> List[Tuple[Edge, Edge]]:
    """
    Left and right flanks of each tail; the bottom face is the wide one.

    spread is the horizontal run of a flank between mid-thickness and a face.
    """
    half_width = board_width / 2.0
    edges: List[Tuple[Edge, Edge]] = []
    for mark_left, mark_right in tail_marks(layout):
        x_left = mark_left * scale - half_width
        x_right = mark_right * scale - half_width
        edges.append(
            (
                Edge(x_left - spread, x_left + spread),
                Edge(x_right + spread, x_right - spread),
            )
        )
    return edges


def pin_step(open_edge: Edge, tail: Part, half_depth: float) -> Tuple[Part, Edge]:
    """
    Close the pin that started at open_edge against the next tail.

    Returns the finished pin and the edge where the following pin starts
    (the tail's right flank).
    """
    tail_left = Edge(tail.bottom_left.x, tail.top_left.x)
    pin = _quad(PartKind.PIN, open_edge, tail_left, half_depth)
    return pin, Edge(tail.bottom_right.x, tail.top_right.x)


def close_last_pin(open_edge: Edge, board_width: float, half_depth: float) -> Part:
    """The last pin has no following tail; its right flank is the board edge."""
    board_edge = Edge(board_width / 2.0, board_width / 2.0)
    return _quad(PartKind.PIN, open_edge, board_edge, half_depth)


def _build_straight(
    layout: JointLayout, board_width: float, board_depth: float
) -> Tuple[Tuple[Part, ...], Tuple[Part, ...]]:
    scale = board_width / layout.width
    half_depth = board_depth / 2.0
    corner_offset = layout.tail_mark_offset * scale

    tails = tuple(
        _quad(PartKind.TAIL, left, right, half_depth)
        for left, right in _tail_edges(layout, scale, board_width, corner_offset)
    )

    pins: List[Part] = []
    open_edge = Edge(-board_width / 2.0, -board_width / 2.0)
    for tail in tails:
        pin, open_edge = pin_step(open_edge, tail, half_depth)
        pins.append(pin)
    pins.append(close_last_pin(open_edge, board_width, half_depth))

    return tuple(pins), tails


def _build_angled(
    layout: JointLayout, board_width: float, board_depth: float
) -> Tuple[Tuple[Part, ...], Tuple[Part, ...]]:
    scale = board_width / layout.width
    half_depth = board_depth / 2.0
    flare = half_depth / math.tan(layout.angle)

    tails = tuple(
        _quad(PartKind.TAIL, left, right, half_depth)
        for left, right in _tail_edges(layout, scale, board_width, flare)
    )
    # Plain pin board; the tails sit on it as separate solids.
    pin_board = _quad(
        PartKind.PIN,
        Edge(-board_width / 2.0, -board_width / 2.0),
        Edge(board_width / 2.0, board_width / 2.0),
        half_depth,
    )
    return (pin_board,), tails


def build_parts(
    layout: JointLayout,
    board_width: float,
    board_height: float,
    board_depth: float,
    variant: Union[Variant, str] = Variant.STRAIGHT,
) -> JointParts:
    """
    Build pin and tail outlines for extrusion along the board depth.

    Coordinates are local to the joint: x = 0 at mid-width, y = 0 at
    mid-thickness, bottom face at y = -board_depth / 2. Layout marks (mm)
    are scaled by board_width / layout.width before centering.

    Args:
        layout: Result of compute_layout().
        board_width: Board width in local units.
        board_height: Panel height away from the joint; passed through for
            the renderer to place the boards.
        board_depth: Board thickness in local units (extrusion axis).
        variant: STRAIGHT for interlocking pins and tails, ANGLED for tails
            on a plain pin board.

    Returns:
        JointParts with both sequences ordered left to right.

    Raises:
        InvalidInputError: Malformed layout or non-positive board size.
        GeometryError: Pins or tails that would invert at a face.
    """
    variant = parse_variant(variant)
    _check_layout(layout)
    _check_board(board_width, board_height, board_depth)

    if variant is Variant.STRAIGHT:
        pin_parts, tail_parts = _build_straight(layout, board_width, board_depth)
    else:
        pin_parts, tail_parts = _build_angled(layout, board_width, board_depth)

    log.debug(
        "Built %s parts: %d pins, %d tails", variant.value, len(pin_parts), len(tail_parts)
    )
    return JointParts(
        pin_parts=pin_parts,
        tail_parts=tail_parts,
        variant=variant,
        board_width=board_width,
        board_height=board_height,
        board_depth=board_depth,
    )
