# assembly.py
from __future__ import annotations

import math
from typing import Dict, Union

from .errors import InvalidInputError
from .model import AssemblyMode, AssemblyState, Variant
from .parts import parse_variant

# Exploded travel of the tail board, in board depths.
EXPLODED_DEPTHS: Dict[Variant, float] = {
    Variant.STRAIGHT: 3.0,
    Variant.ANGLED: 2.0,
}


def exploded_offset(depth: float, variant: Union[Variant, str] = Variant.STRAIGHT) -> float:
    if depth <= 0:
        raise InvalidInputError(f"depth must be > 0, got {depth!r}")
    return depth * EXPLODED_DEPTHS[parse_variant(variant)]


def target_offset(
    mode: AssemblyMode, depth: float, variant: Union[Variant, str] = Variant.STRAIGHT
) -> float:
    if mode is AssemblyMode.ASSEMBLED:
        return 0.0
    return exploded_offset(depth, variant)


def toggle(state: AssemblyState) -> AssemblyState:
    """Flip the requested mode; the offset is left for advance() to move."""
    mode = (
        AssemblyMode.EXPLODED if state.mode is AssemblyMode.ASSEMBLED else AssemblyMode.ASSEMBLED
    )
    return AssemblyState(mode=mode, offset=state.offset)


def advance(
    state: AssemblyState,
    depth: float,
    step: float,
    variant: Union[Variant, str] = Variant.STRAIGHT,
) -> AssemblyState:
    """
    Move the offset toward the current mode's target by at most step.

    The result is clamped to [0, exploded_offset], so a state left over
    from a deeper board snaps back inside the range.

    Args:
        state: Current mode and offset.
        depth: Board depth that sets the exploded travel.
        step: Maximum travel for this frame; easing is up to the caller.
            Zero only clamps, so repeated frame timestamps are harmless.
        variant: Selects the exploded multiplier.
    """
    if not math.isfinite(step) or step < 0:
        raise InvalidInputError(f"step must be >= 0, got {step!r}")
    maximum = exploded_offset(depth, variant)
    goal = target_offset(state.mode, depth, variant)
    offset = min(max(state.offset, 0.0), maximum)

    if offset < goal:
        offset = min(offset + step, goal)
    elif offset > goal:
        offset = max(offset - step, goal)
    return AssemblyState(mode=state.mode, offset=offset)


def settled(
    state: AssemblyState, depth: float, variant: Union[Variant, str] = Variant.STRAIGHT
) -> bool:
    return state.offset == target_offset(state.mode, depth, variant)
