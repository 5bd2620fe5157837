# preferences.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import InvalidInputError
from .geometry import parse_division
from .model import Division, JointInputs

log = logging.getLogger(__name__)

WORKPIECE_WIDTH_KEY = "workpieceWidth"
WORKPIECE_HEIGHT_KEY = "workpieceHeight"
DIVISION_KEY = "division"
TAIL_PIN_RATIO_KEY = "tailPinRatio"

DEFAULT_INPUTS = JointInputs(
    width_mm=100.0,
    height_mm=15.0,
    division=Division.MEDIUM,
    tail_pin_ratio=2.0,
)


class PreferenceStore(Protocol):
    """String key/value storage for last-used parameters."""

    def read(self, key: str, default: str) -> str:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class InMemoryPreferences:
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})

    def read(self, key: str, default: str) -> str:
        return self.values.get(key, default)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFilePreferences:
    """
    Persist preferences as a flat JSON object.

    The file is rewritten on every write; a missing or unreadable file
    reads as empty so the defaults apply.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._values: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values
        values: Dict[str, str] = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                log.warning("Ignoring unreadable preferences %s: %s", self.path, e)
            else:
                if isinstance(data, dict):
                    values = {str(k): str(v) for k, v in data.items()}
                else:
                    log.warning("Ignoring preferences %s: expected a JSON object", self.path)
        self._values = values
        return values

    def read(self, key: str, default: str) -> str:
        return self._load().get(key, default)

    def write(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _read_float(store: PreferenceStore, key: str, default: float) -> float:
    raw = store.read(key, str(default))
    try:
        return float(raw)
    except ValueError:
        log.warning("Preference %s=%r is not a number; using %s", key, raw, default)
        return default


def load_inputs(store: PreferenceStore, defaults: JointInputs = DEFAULT_INPUTS) -> JointInputs:
    """Read last-used inputs, falling back to defaults per key."""
    raw_division = store.read(DIVISION_KEY, defaults.division.value)
    try:
        division = parse_division(raw_division)
    except InvalidInputError:
        log.warning("Preference %s=%r is unknown; using default", DIVISION_KEY, raw_division)
        division = defaults.division

    return JointInputs(
        width_mm=_read_float(store, WORKPIECE_WIDTH_KEY, defaults.width_mm),
        height_mm=_read_float(store, WORKPIECE_HEIGHT_KEY, defaults.height_mm),
        division=division,
        tail_pin_ratio=_read_float(store, TAIL_PIN_RATIO_KEY, defaults.tail_pin_ratio),
    )


def store_inputs(store: PreferenceStore, inputs: JointInputs) -> None:
    store.write(WORKPIECE_WIDTH_KEY, str(inputs.width_mm))
    store.write(WORKPIECE_HEIGHT_KEY, str(inputs.height_mm))
    store.write(DIVISION_KEY, inputs.division.value)
    store.write(TAIL_PIN_RATIO_KEY, str(inputs.tail_pin_ratio))


def reset(store: PreferenceStore) -> JointInputs:
    store_inputs(store, DEFAULT_INPUTS)
    return DEFAULT_INPUTS
