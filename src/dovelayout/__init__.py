from .errors import DovetailError, GeometryError, InvalidInputError
from .geometry import compute_layout
from .model import (
    DIVISION_FACTOR,
    Division,
    JointLayout,
    JointParts,
    Part,
    PartKind,
    Point,
    Variant,
    WorkpieceSpec,
)
from .parts import build_parts

__all__ = [
    "DIVISION_FACTOR",
    "Division",
    "DovetailError",
    "GeometryError",
    "InvalidInputError",
    "JointLayout",
    "JointParts",
    "Part",
    "PartKind",
    "Point",
    "Variant",
    "WorkpieceSpec",
    "build_parts",
    "compute_layout",
]
