# session.py
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional

from . import assembly
from .errors import DovetailError
from .geometry import compute_layout, parse_division
from .model import AssemblyState, JointInputs, JointLayout, JointParts, Variant
from .parts import build_parts, parse_variant
from .preferences import InMemoryPreferences, PreferenceStore, load_inputs, reset, store_inputs

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewSettings:
    """How workpiece millimetres map onto the 3-D preview boards."""

    variant: Variant = Variant.STRAIGHT
    scale: float = 0.1  # preview units per mm
    board_height_ratio: float = 0.7  # panel height as a fraction of board width

    def board_size(self, inputs: JointInputs) -> tuple[float, float, float]:
        """(width, height, depth) of the preview boards."""
        width = inputs.width_mm * self.scale
        return width, width * self.board_height_ratio, inputs.height_mm * self.scale


@dataclass(frozen=True)
class UpdateResult:
    ok: bool
    error: Optional[DovetailError] = None


class JointSession:
    """
    Current inputs plus the last geometry that computed cleanly.

    Every change recomputes layout and parts from scratch. Failures are
    returned, not raised, and leave the previous layout and parts in place
    so a render loop can keep drawing them.
    """

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        preview: Optional[PreviewSettings] = None,
    ) -> None:
        self.store: PreferenceStore = store if store is not None else InMemoryPreferences()
        self.preview = preview or PreviewSettings()
        self.inputs = load_inputs(self.store)
        self.assembly = AssemblyState()
        self.layout: Optional[JointLayout] = None
        self.parts: Optional[JointParts] = None
        self.last_error: Optional[DovetailError] = None
        self._recompute(self.inputs)

    def _recompute(self, inputs: JointInputs) -> UpdateResult:
        try:
            layout = compute_layout(
                inputs.width_mm, inputs.height_mm, inputs.division, inputs.tail_pin_ratio
            )
            width, height, depth = self.preview.board_size(inputs)
            parts = build_parts(layout, width, height, depth, self.preview.variant)
        except DovetailError as e:
            log.warning("Keeping previous geometry: %s", e)
            self.last_error = e
            return UpdateResult(ok=False, error=e)

        self.layout = layout
        self.parts = parts
        self.last_error = None
        return UpdateResult(ok=True)

    def update(self, **changes) -> UpdateResult:
        """
        Apply changed JointInputs fields and recompute.

        Accepted inputs are written to the preference store; rejected ones
        are kept as the current inputs but never persisted.
        """
        if "division" in changes:
            try:
                changes["division"] = parse_division(changes["division"])
            except DovetailError as e:
                log.warning("Keeping previous geometry: %s", e)
                self.last_error = e
                return UpdateResult(ok=False, error=e)

        self.inputs = dataclasses.replace(self.inputs, **changes)
        result = self._recompute(self.inputs)
        if result.ok:
            store_inputs(self.store, self.inputs)
        return result

    def set_variant(self, variant) -> UpdateResult:
        try:
            variant = parse_variant(variant)
        except DovetailError as e:
            self.last_error = e
            return UpdateResult(ok=False, error=e)
        self.preview = dataclasses.replace(self.preview, variant=variant)
        return self._recompute(self.inputs)

    def reset(self) -> UpdateResult:
        self.inputs = reset(self.store)
        return self._recompute(self.inputs)

    def toggle_assembly(self) -> AssemblyState:
        self.assembly = assembly.toggle(self.assembly)
        return self.assembly

    def tick(self, step: float) -> AssemblyState:
        """Advance the tail board one frame toward the requested mode."""
        # Animate the boards that are on screen, i.e. the last good parts.
        if self.parts is None:
            return self.assembly
        try:
            self.assembly = assembly.advance(
                self.assembly, self.parts.board_depth, step, self.parts.variant
            )
        except DovetailError as e:
            log.warning("Holding assembly offset: %s", e)
            self.last_error = e
        return self.assembly
