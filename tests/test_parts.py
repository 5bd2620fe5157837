import dataclasses
import math

import pytest

from dovelayout.errors import GeometryError, InvalidInputError
from dovelayout.geometry import compute_layout, is_convex, polygon_area
from dovelayout.model import PartKind, Variant
from dovelayout.parts import Edge, build_parts, close_last_pin, pin_step


def make_layout(**overrides):
    params = dict(width=100.0, height=15.0, division="medium", tail_pin_ratio=2.0)
    params.update(overrides)
    return compute_layout(**params)


def interleave(parts):
    ordered = []
    for index, pin in enumerate(parts.pin_parts):
        ordered.append(pin)
        if index < len(parts.tail_parts):
            ordered.append(parts.tail_parts[index])
    return ordered


def mid_x(bottom, top):
    return 0.5 * (bottom.x + top.x)


def test_straight_counts_and_kinds():
    layout = make_layout()
    parts = build_parts(layout, 100.0, 70.0, 15.0, "straight")
    assert parts.variant is Variant.STRAIGHT
    assert len(parts.tail_parts) == layout.tails_count
    assert len(parts.pin_parts) == layout.pins_count
    assert all(p.kind is PartKind.PIN for p in parts.pin_parts)
    assert all(p.kind is PartKind.TAIL for p in parts.tail_parts)


def test_straight_parts_share_edges_and_close_on_board():
    parts = build_parts(make_layout(), 100.0, 70.0, 15.0, Variant.STRAIGHT)
    ordered = interleave(parts)

    assert ordered[0].bottom_left.x == -50.0
    assert ordered[0].top_left.x == -50.0
    assert ordered[-1].bottom_right.x == 50.0
    assert ordered[-1].top_right.x == 50.0

    for left, right in zip(ordered, ordered[1:]):
        assert left.bottom_right == right.bottom_left
        assert left.top_right == right.top_left

    total = sum(
        mid_x(p.bottom_right, p.top_right) - mid_x(p.bottom_left, p.top_left) for p in ordered
    )
    assert total == pytest.approx(100.0)


def test_straight_tail_shape_uses_mark_offset():
    layout = make_layout()
    parts = build_parts(layout, 100.0, 70.0, 15.0, "straight")
    tail = parts.tail_parts[0]
    offset = layout.tail_mark_offset

    assert tail.bottom_left.y == pytest.approx(-7.5)
    assert tail.top_left.y == pytest.approx(7.5)
    assert mid_x(tail.bottom_left, tail.top_left) == pytest.approx(layout.pin_width - 50.0)
    bottom_width = tail.bottom_right.x - tail.bottom_left.x
    top_width = tail.top_right.x - tail.top_left.x
    assert bottom_width == pytest.approx(layout.tail_width + 2 * offset)
    assert top_width == pytest.approx(layout.tail_width - 2 * offset)

    for part in parts.pin_parts + parts.tail_parts:
        outline = list(part.outline())
        assert is_convex(outline)
        assert polygon_area(outline) < 0.0


def test_scale_projects_marks_into_preview_units():
    layout = make_layout()
    parts = build_parts(layout, 10.0, 7.0, 1.5, "straight")
    tail = parts.tail_parts[0]
    assert mid_x(tail.bottom_left, tail.top_left) == pytest.approx(layout.pin_width * 0.1 - 5.0)
    assert tail.bottom_right.x - tail.bottom_left.x == pytest.approx(
        (layout.tail_width + 2 * layout.tail_mark_offset) * 0.1
    )
    assert parts.board_height == 7.0


def test_angled_variant_flares_by_depth_and_angle():
    layout = make_layout()
    parts = build_parts(layout, 10.0, 7.0, 1.5, "angled")
    flare = 0.75 / math.tan(layout.angle)

    assert len(parts.tail_parts) == layout.tails_count
    assert len(parts.pin_parts) == 1
    board = parts.pin_parts[0]
    assert (board.bottom_left.x, board.top_right.x) == (-5.0, 5.0)

    tail = parts.tail_parts[1]
    mark_left = (layout.pin_width * 2 + layout.tail_width) * 0.1 - 5.0
    assert tail.bottom_left.x == pytest.approx(mark_left - flare)
    assert tail.top_left.x == pytest.approx(mark_left + flare)
    bottom_width = tail.bottom_right.x - tail.bottom_left.x
    top_width = tail.top_right.x - tail.top_left.x
    assert bottom_width - top_width == pytest.approx(4 * flare)


@pytest.mark.parametrize("variant", list(Variant))
def test_zero_tails_yield_single_full_span_pin(variant):
    layout = make_layout(width=10.0, division="fine")
    parts = build_parts(layout, 10.0, 7.0, 15.0, variant)
    assert parts.tail_parts == ()
    assert len(parts.pin_parts) == 1
    pin = parts.pin_parts[0]
    assert [p.x for p in pin.outline()] == [-5.0, -5.0, 5.0, 5.0]


@pytest.mark.parametrize("variant", ["straight", "angled"])
def test_repeated_builds_are_identical(variant):
    first = build_parts(make_layout(width=347.0), 34.7, 24.29, 1.5, variant)
    second = build_parts(make_layout(width=347.0), 34.7, 24.29, 1.5, variant)
    assert first == second
    assert [list(p.outline()) for p in first.tail_parts] == [
        list(p.outline()) for p in second.tail_parts
    ]


def test_wide_tails_invert_pins_in_straight_variant_only():
    layout = make_layout(tail_pin_ratio=6.0)
    with pytest.raises(GeometryError, match="pin would invert"):
        build_parts(layout, 100.0, 70.0, 15.0, "straight")
    parts = build_parts(layout, 100.0, 70.0, 15.0, "angled")
    assert len(parts.tail_parts) == layout.tails_count


@pytest.mark.parametrize(
    "overrides",
    [
        dict(tails_count=-1, pins_count=0),
        dict(pins_count=7),
        dict(pin_width=-1.0),
        dict(tail_width=0.0),
    ],
)
def test_malformed_layout_fails_fast(overrides):
    layout = dataclasses.replace(make_layout(), **overrides)
    with pytest.raises(InvalidInputError):
        build_parts(layout, 100.0, 70.0, 15.0)


def test_bad_board_and_variant_are_rejected():
    layout = make_layout()
    with pytest.raises(InvalidInputError, match="board_depth"):
        build_parts(layout, 100.0, 70.0, 0.0)
    with pytest.raises(InvalidInputError, match="straight, angled"):
        build_parts(layout, 100.0, 70.0, 15.0, "dovetail")


def test_pin_fold_step_and_last_pin():
    parts = build_parts(make_layout(), 100.0, 70.0, 15.0)
    tail = parts.tail_parts[0]
    pin, next_edge = pin_step(Edge(-50.0, -50.0), tail, 7.5)
    assert pin == parts.pin_parts[0]
    assert next_edge == Edge(tail.bottom_right.x, tail.top_right.x)

    last = close_last_pin(next_edge, 100.0, 7.5)
    assert last.bottom_left == tail.bottom_right
    assert last.bottom_right.x == 50.0
