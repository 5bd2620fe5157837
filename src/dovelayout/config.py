from __future__ import annotations

import argparse
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Optional

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import InvalidInputError
from .geometry import parse_division
from .model import Division, JointInputs, Variant
from .parts import parse_variant
from .preferences import DEFAULT_INPUTS, JsonFilePreferences, load_inputs
from .session import PreviewSettings

log = logging.getLogger(__name__)


@dataclass
class RunConfig:
    inputs: JointInputs
    preview: PreviewSettings
    prefs_path: Optional[Path]
    svg_path: Optional[Path]
    show_parts: bool
    reset: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(
        description="Dovetail layout calculator (Spannagel method)",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="TOML config file (defaults to config.toml if present)",
    )
    p.add_argument(
        "--prefs",
        type=Path,
        help="JSON file holding last-used parameters; read first, written after a good run",
    )
    p.add_argument(
        "--reset",
        action="store_true",
        help="Restore default parameters (and save them to --prefs)",
    )

    # Workpiece / layout overrides
    p.add_argument("--width-mm", type=float, help="Workpiece width along the joint")
    p.add_argument("--height-mm", type=float, help="Workpiece thickness")
    p.add_argument("--division", choices=[d.value for d in Division])
    p.add_argument("--ratio", type=float, help="Tail to pin width ratio, e.g. 2 for 2:1")

    # Part geometry output
    p.add_argument("--variant", choices=[v.value for v in Variant])
    p.add_argument("--scale", type=float, help="Preview units per mm (default 0.1)")
    p.add_argument(
        "--parts", action="store_true", help="Print pin and tail polygons for the preview"
    )
    p.add_argument("--svg", type=Path, help="Write the flat joint diagram to this SVG file")

    p.add_argument("--log-level", default="INFO")
    return p


def _load_toml(path: Path) -> dict:
    """
    Load a TOML config file.

    Raises:
        FileNotFoundError: If the file is missing.
        tomllib.TOMLDecodeError: On parse errors.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as f:
        return tomllib.load(f)


def _dict_get_nested(data: dict, key: str, default=None):
    """Fetch a dotted-path value such as "workpiece.width_mm"."""
    parts = key.split(".")
    current_level = data
    for part in parts[:-1]:
        current_level = current_level.get(part, {})
    return current_level.get(parts[-1], default)


def _get_float(data: dict, dotted_key: str, default: float) -> float:
    value = _dict_get_nested(data, dotted_key, default)
    if isinstance(value, bool):
        raise InvalidInputError(f"{dotted_key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{dotted_key} must be a number, got {value!r}") from None


def load_config_and_args(args: argparse.Namespace) -> RunConfig:
    """
    Merge defaults, TOML config, saved preferences and CLI flags.

    Later sources win: defaults < TOML < preferences < CLI.

    Raises:
        SystemExit: On a missing explicit config, invalid enum values or
            non-numeric dimensions.
    """
    cfg_data: dict = {}
    cfg_path: Path | None = args.config
    used_default = False

    if cfg_path is None:
        default_path = Path("config.toml")
        if default_path.exists():
            cfg_path = default_path
            used_default = True

    if cfg_path is not None:
        try:
            cfg_data = _load_toml(cfg_path)
        except FileNotFoundError:
            if not used_default:
                raise SystemExit(f"Config file not found: {cfg_path}")
        except Exception as e:  # TOML parse errors, permission issues, etc.
            raise SystemExit(f"Failed to load config file {cfg_path}: {e}") from e

    try:
        inputs = JointInputs(
            width_mm=_get_float(cfg_data, "workpiece.width_mm", DEFAULT_INPUTS.width_mm),
            height_mm=_get_float(cfg_data, "workpiece.height_mm", DEFAULT_INPUTS.height_mm),
            division=parse_division(
                _dict_get_nested(cfg_data, "layout.division", DEFAULT_INPUTS.division)
            ),
            tail_pin_ratio=_get_float(
                cfg_data, "layout.tail_pin_ratio", DEFAULT_INPUTS.tail_pin_ratio
            ),
        )
        preview = PreviewSettings(
            variant=parse_variant(_dict_get_nested(cfg_data, "preview.variant", "straight")),
            scale=_get_float(cfg_data, "preview.scale", 0.1),
            board_height_ratio=_get_float(cfg_data, "preview.board_height_ratio", 0.7),
        )
    except InvalidInputError as e:
        raise SystemExit(f"Invalid config {cfg_path}: {e}") from e

    prefs_path: Optional[Path] = getattr(args, "prefs", None)
    if prefs_path is None and _dict_get_nested(cfg_data, "preferences.path") is not None:
        prefs_path = Path(_dict_get_nested(cfg_data, "preferences.path")).expanduser()

    # --reset skips saved preferences; TOML and CLI values still apply.
    reset = bool(getattr(args, "reset", False))
    if not reset and prefs_path is not None:
        inputs = load_inputs(JsonFilePreferences(prefs_path), defaults=inputs)

    # CLI overrides
    if args.width_mm is not None:
        inputs = replace(inputs, width_mm=args.width_mm)
    if args.height_mm is not None:
        inputs = replace(inputs, height_mm=args.height_mm)
    if args.division is not None:
        inputs = replace(inputs, division=parse_division(args.division))
    if args.ratio is not None:
        inputs = replace(inputs, tail_pin_ratio=args.ratio)
    if args.variant is not None:
        preview = replace(preview, variant=parse_variant(args.variant))
    if args.scale is not None:
        preview = replace(preview, scale=args.scale)

    log.debug("JointInputs: %s", asdict(inputs))
    log.debug("PreviewSettings: %s", asdict(preview))

    return RunConfig(
        inputs=inputs,
        preview=preview,
        prefs_path=prefs_path,
        svg_path=args.svg,
        show_parts=bool(args.parts),
        reset=reset,
    )
