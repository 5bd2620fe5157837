# model.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterator, NamedTuple, Tuple


class Division(Enum):
    FINE = "fine"
    MEDIUM = "medium"
    COARSE = "coarse"


# Tails per unit of width/height ratio; decreases from fine to coarse.
DIVISION_FACTOR: Dict[Division, float] = {
    Division.FINE: 1.0,
    Division.MEDIUM: 2.0 / 3.0,
    Division.COARSE: 0.5,
}


class Variant(Enum):
    STRAIGHT = "straight"  # pins and tails, corner offset from the mark
    ANGLED = "angled"  # tails only, flanks inclined by the flare angle


class PartKind(Enum):
    PIN = auto()
    TAIL = auto()


class AssemblyMode(Enum):
    ASSEMBLED = "assembled"
    EXPLODED = "exploded"


@dataclass(frozen=True)
class WorkpieceSpec:
    """Board dimensions entered by the user."""

    width_mm: float  # along the joint line
    height_mm: float  # board thickness


@dataclass(frozen=True)
class JointInputs:
    """One snapshot of every user-editable parameter."""

    width_mm: float
    height_mm: float
    division: Division
    tail_pin_ratio: float

    @property
    def workpiece(self) -> WorkpieceSpec:
        return WorkpieceSpec(width_mm=self.width_mm, height_mm=self.height_mm)


@dataclass(frozen=True)
class JointLayout:
    """
    Tail/pin counts and widths for one input snapshot.

    All fields are derived together by compute_layout(); never build one
    from values taken from different snapshots.
    """

    width: float
    height: float
    division: Division
    tail_pin_ratio: float
    tails_count: int
    pins_count: int
    parts_count: float  # fractional when the ratio is
    part_width: float
    pin_width: float
    tail_width: float
    angle: float  # radians, flare measured from the joint line
    tail_mark_offset: float  # per side, center-line mark -> outer corner


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Part:
    """Closed quadrilateral footprint of one pin or tail."""

    kind: PartKind
    bottom_left: Point
    top_left: Point
    top_right: Point
    bottom_right: Point

    def outline(self) -> Iterator[Point]:
        """Corners in walk order; the renderer closes back to the first."""
        yield self.bottom_left
        yield self.top_left
        yield self.top_right
        yield self.bottom_right


@dataclass(frozen=True)
class JointParts:
    pin_parts: Tuple[Part, ...]
    tail_parts: Tuple[Part, ...]
    variant: Variant
    board_width: float
    board_height: float
    board_depth: float


@dataclass(frozen=True)
class AssemblyState:
    mode: AssemblyMode = AssemblyMode.ASSEMBLED
    offset: float = 0.0  # tail board travel away from the joint line
