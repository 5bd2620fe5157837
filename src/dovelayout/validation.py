from __future__ import annotations

import math
from typing import List, Optional

from .geometry import smallest_pin_gap
from .model import JointInputs, JointLayout, Variant, WorkpieceSpec


def _is_positive(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def validate_workpiece(workpiece: WorkpieceSpec) -> List[str]:
    errors: List[str] = []

    if not _is_positive(workpiece.width_mm):
        errors.append("width_mm must be > 0")

    if not _is_positive(workpiece.height_mm):
        errors.append("height_mm must be > 0")

    return errors


def validate_inputs(inputs: JointInputs) -> List[str]:
    errors = validate_workpiece(inputs.workpiece)

    if not _is_positive(inputs.tail_pin_ratio):
        errors.append("tail_pin_ratio must be > 0")

    return errors


def validate_layout(layout: JointLayout, variant: Variant = Variant.STRAIGHT) -> List[str]:
    errors: List[str] = []

    if layout.tails_count < 0:
        errors.append("tails_count must be >= 0")
        return errors

    if layout.pins_count != layout.tails_count + 1:
        errors.append("pins_count must equal tails_count + 1")

    if layout.pin_width <= 0 or layout.tail_width <= 0:
        errors.append("pin_width and tail_width must be > 0")

    if not 0.0 < layout.angle < math.pi / 2.0:
        errors.append("angle must be in (0, 90) degrees")

    # Angled preview draws no pins, so only the straight variant can invert them.
    if variant is Variant.STRAIGHT and layout.tails_count > 0:
        gap = smallest_pin_gap(layout)
        if gap <= 0:
            errors.append(
                f"Pins vanish at the wide face (gap {gap:.3f} mm); "
                "lower tail_pin_ratio below 5"
            )

    return errors


def validate_board(width: float, height: float, depth: float) -> List[str]:
    errors: List[str] = []
    if not _is_positive(width):
        errors.append("board width must be > 0")
    if not _is_positive(height):
        errors.append("board height must be > 0")
    if not _is_positive(depth):
        errors.append("board depth must be > 0")
    return errors


def validate_all(
    inputs: JointInputs,
    layout: Optional[JointLayout],
    board_width: float,
    board_height: float,
    board_depth: float,
    variant: Variant = Variant.STRAIGHT,
) -> List[str]:
    errors: List[str] = []
    errors += validate_inputs(inputs)
    if layout is not None:
        errors += validate_layout(layout, variant)
    errors += validate_board(board_width, board_height, board_depth)
    return errors
