# cli entrypoint
from __future__ import annotations

import logging
from typing import List, NoReturn

from .config import RunConfig, build_arg_parser, load_config_and_args
from .diagram import build_diagram, write_svg
from .errors import DovetailError
from .geometry import compute_layout
from .logging_utils import setup_logging
from .model import JointLayout, JointParts, Part
from .parts import build_parts
from .preferences import JsonFilePreferences, store_inputs
from .report import format_report
from .validation import validate_board, validate_inputs, validate_layout

log = logging.getLogger(__name__)


def _fail(errors: List[str]) -> NoReturn:
    for error in errors:
        print(f"ERROR: {error}")
    raise SystemExit("Validation failed; fix the parameters and try again.")


def _plan_layout(run_config: RunConfig) -> JointLayout:
    inputs = run_config.inputs
    errors = validate_inputs(inputs)
    if errors:
        _fail(errors)
    board_width, board_height, board_depth = run_config.preview.board_size(inputs)
    errors = validate_board(board_width, board_height, board_depth)
    if errors:
        _fail(errors)

    try:
        layout = compute_layout(
            inputs.width_mm, inputs.height_mm, inputs.division, inputs.tail_pin_ratio
        )
    except DovetailError as e:
        _fail([str(e)])

    return layout


def _format_part(index: int, part: Part) -> str:
    corners = " ".join(f"({p.x:.3f}, {p.y:.3f})" for p in part.outline())
    return f"{part.kind.name.lower()} {index}: {corners}"


def _print_parts(parts: JointParts) -> None:
    print(
        f"Preview ({parts.variant.value}): {parts.board_width:.3f} wide, "
        f"{parts.board_depth:.3f} deep"
    )
    for index, part in enumerate(parts.pin_parts):
        print(_format_part(index, part))
    for index, part in enumerate(parts.tail_parts):
        print(_format_part(index, part))


def main() -> None:
    """Entry point for the command-line calculator."""
    parser = build_arg_parser()
    args = parser.parse_args()

    setup_logging(args.log_level)

    run_config = load_config_and_args(args)
    layout = _plan_layout(run_config)

    for line in format_report(layout):
        print(line)

    if run_config.show_parts:
        errors = validate_layout(layout, run_config.preview.variant)
        if errors:
            _fail(errors)
        board_width, board_height, board_depth = run_config.preview.board_size(run_config.inputs)
        try:
            parts = build_parts(
                layout, board_width, board_height, board_depth, run_config.preview.variant
            )
        except DovetailError as e:
            _fail([str(e)])
        _print_parts(parts)

    if run_config.svg_path is not None:
        path = write_svg(build_diagram(layout), run_config.svg_path)
        log.info("Wrote diagram to %s", path)

    if run_config.prefs_path is not None:
        store = JsonFilePreferences(run_config.prefs_path)
        store_inputs(store, run_config.inputs)
        log.debug("Saved parameters to %s", run_config.prefs_path)


if __name__ == "__main__":
    main()
