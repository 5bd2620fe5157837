import pytest

from dovelayout.diagram import build_diagram, render_svg, write_svg
from dovelayout.geometry import compute_layout


def test_diagram_boards_and_triangles():
    layout = compute_layout(100.0, 15.0, "medium", 2)
    diagram = build_diagram(layout)

    assert diagram.width == 100.0
    assert diagram.height == pytest.approx(45.0)
    assert diagram.tail_board[2] == (100.0, 30.0)
    assert diagram.pin_board[0] == (0.0, 30.0)
    assert diagram.pin_board[2] == (100.0, 45.0)
    assert len(diagram.dovetails) == 4

    apex, base_left, base_right = diagram.dovetails[0]
    assert apex.y == 0.0
    assert base_left.y == pytest.approx(45.0)
    assert base_left.x == pytest.approx(layout.pin_width - layout.tail_mark_offset)
    assert base_right.x - base_left.x == pytest.approx(
        layout.tail_width + 2 * layout.tail_mark_offset
    )
    assert apex.x == pytest.approx(0.5 * (base_left.x + base_right.x))


def test_triangle_meets_marks_on_pin_board_center_line():
    layout = compute_layout(100.0, 15.0, "medium", 2)
    apex, base_left, _ = build_diagram(layout).dovetails[0]
    # Interpolate the left flank at y = 2.5h.
    t = 37.5 / 45.0
    x = apex.x + (base_left.x - apex.x) * t
    assert x == pytest.approx(layout.pin_width)


def test_render_and_write_svg(tmp_path):
    layout = compute_layout(100.0, 15.0, "coarse", 2)
    svg = render_svg(build_diagram(layout))
    assert svg.startswith("<svg")
    assert svg.count('class="dovetail"') == 3
    assert 'class="workpiece pins" fill="#ccc"' in svg

    path = write_svg(build_diagram(layout), tmp_path / "joint.svg")
    assert path.read_text(encoding="utf-8") == svg


def test_zero_tail_diagram_has_only_boards():
    diagram = build_diagram(compute_layout(10.0, 15.0, "fine", 2))
    assert diagram.dovetails == ()
    assert 'class="dovetail"' not in render_svg(diagram)
