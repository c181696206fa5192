"""
Gesture tests driven through the session's pointer commands.

The session fixture shows a 200x100 white image at 100% in a 400x300
viewport, so screen (100 + x, 100 + y) is surface pixel (x, y).
"""

import pytest

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor

from pixedit.editor.session import EditorSession
from pixedit.editor.tools import CircleTool, ToolStyle, ToolType


def at(x: float, y: float) -> QPointF:
    return QPointF(100 + x, 100 + y)


def drag(session: EditorSession, *points) -> None:
    session.apply_pointer_down(at(*points[0]))
    for p in points[1:]:
        session.apply_pointer_move(at(*p))
    session.apply_pointer_up(at(*points[-1]))


def color_at(session: EditorSession, x: int, y: int) -> QColor:
    return session.merged_pixels().pixelColor(x, y)


def is_red(c: QColor) -> bool:
    return c.red() > 200 and c.green() < 60 and c.blue() < 60


def is_white(c: QColor) -> bool:
    return c.red() == 255 and c.green() == 255 and c.blue() == 255


def test_pen_stroke_is_committed(session) -> None:
    session.set_tool(ToolType.PEN)
    drag(session, (10, 10), (30, 10), (50, 10))

    assert is_red(color_at(session, 30, 10))
    assert is_white(color_at(session, 30, 40))
    assert len(session.history) == 2
    assert session.history.can_undo


def test_commit_flattens_overlay_into_base(session) -> None:
    drag(session, (10, 10), (50, 10))
    assert session.surface.overlay.pixelColor(30, 10).alpha() == 0
    assert is_red(session.surface.base.pixelColor(30, 10))


def test_click_without_movement_commits_nothing(session) -> None:
    session.apply_pointer_down(at(20, 20))
    session.apply_pointer_up(at(20, 20))
    assert len(session.history) == 1


@pytest.mark.parametrize("tool", [ToolType.PEN, ToolType.HIGHLIGHTER])
def test_freehand_click_leaves_no_mark(session, tool: ToolType) -> None:
    session.set_tool(tool)
    session.apply_pointer_down(at(60, 40))
    session.apply_pointer_up(at(60, 40))

    assert len(session.history) == 1
    assert session.surface.overlay.pixelColor(60, 40).alpha() == 0
    assert session.surface.base.pixelColor(60, 40) == QColor(Qt.GlobalColor.white)


def test_second_pointer_down_is_ignored_while_active(session) -> None:
    assert session.apply_pointer_down(at(10, 10))
    assert not session.apply_pointer_down(at(50, 50))
    assert session.renderer.stroke.start_point == QPointF(10, 10)
    session.apply_pointer_up(at(20, 10))
    assert not session.renderer.is_active


def test_pointer_leave_finishes_gesture(session) -> None:
    session.apply_pointer_down(at(10, 10))
    session.apply_pointer_move(at(60, 10))
    assert session.apply_pointer_leave()

    assert not session.renderer.is_active
    assert len(session.history) == 2
    assert is_red(color_at(session, 40, 10))


def test_pointer_down_without_image_is_ignored() -> None:
    empty = EditorSession()
    empty.set_viewport_size(400, 300)
    assert not empty.apply_pointer_down(QPointF(10, 10))
    assert not empty.apply_pointer_up(QPointF(10, 10))


def test_style_change_applies_to_next_gesture(session) -> None:
    session.set_style(ToolStyle(color=QColor(0, 0, 255), width=4))
    drag(session, (10, 50), (80, 50))
    c = color_at(session, 40, 50)
    assert c.blue() > 200 and c.red() < 60


def test_highlighter_band_is_flat_where_path_overlaps_itself(session) -> None:
    session.set_tool(ToolType.HIGHLIGHTER)

    session.apply_pointer_down(at(20, 50))
    session.apply_pointer_move(at(120, 50))
    single_alpha = session.surface.overlay.pixelColor(70, 50).alpha()
    # Back over the same segment twice
    session.apply_pointer_move(at(20, 50))
    session.apply_pointer_move(at(120, 50))
    repeated_alpha = session.surface.overlay.pixelColor(70, 50).alpha()
    session.apply_pointer_up(at(120, 50))

    assert single_alpha == repeated_alpha
    assert 70 <= single_alpha <= 82  # 0.3 opacity


def test_highlighter_single_and_repeated_passes_commit_identically(solid_image) -> None:
    def run(points) -> QColor:
        s = EditorSession()
        s.set_viewport_size(400, 300)
        s.load_image(solid_image(200, 100, 0xFFFFFFFF))
        s.set_tool(ToolType.HIGHLIGHTER)
        drag(s, *points)
        return color_at(s, 70, 50)

    once = run([(20, 50), (120, 50)])
    thrice = run([(20, 50), (120, 50), (20, 50), (120, 50)])

    assert once.rgb() == thrice.rgb()
    # Translucent red over white
    assert once.red() == 255 and 150 < once.green() < 210


def test_highlighter_band_is_three_times_wider(session) -> None:
    session.set_tool(ToolType.HIGHLIGHTER)
    session.set_style(ToolStyle(color=QColor(255, 0, 0), width=4))
    drag(session, (20, 50), (120, 50))

    # Width 4 becomes a 12 px band: y in [44, 56)
    assert not is_white(color_at(session, 70, 45))
    assert not is_white(color_at(session, 70, 54))
    assert is_white(color_at(session, 70, 40))
    assert is_white(color_at(session, 70, 60))


def test_rectangle_preview_keeps_only_final_shape(session) -> None:
    session.set_tool(ToolType.RECTANGLE)
    drag(session, (10, 10), (80, 80), (40, 40))

    # Edge of the final rectangle
    assert is_red(color_at(session, 40, 25))
    # Edge of the abandoned preview
    assert is_white(color_at(session, 80, 50))
    assert len(session.history) == 2


def test_line_tool_draws_straight_line(session) -> None:
    session.set_tool(ToolType.LINE)
    drag(session, (10, 20), (150, 90), (100, 20))

    assert is_red(color_at(session, 60, 20))
    assert is_white(color_at(session, 120, 75))


def test_circle_centered_on_press_point(session) -> None:
    session.set_tool(ToolType.CIRCLE)
    drag(session, (50, 50), (70, 50))

    assert is_red(color_at(session, 70, 50))
    assert is_red(color_at(session, 30, 50))
    assert is_red(color_at(session, 50, 70))
    assert is_white(color_at(session, 50, 50))


def test_circle_radius_is_distance_to_pointer() -> None:
    assert CircleTool.radius(QPointF(0, 0), QPointF(3, 4)) == 5


def test_set_tool_finishes_running_gesture(session) -> None:
    session.apply_pointer_down(at(10, 10))
    session.apply_pointer_move(at(60, 10))
    session.set_tool(ToolType.LINE)

    assert not session.renderer.is_active
    assert len(session.history) == 2
    assert session.tool_type is ToolType.LINE


def test_undo_is_refused_during_gesture(session) -> None:
    drag(session, (10, 10), (60, 10))
    session.apply_pointer_down(at(10, 30))
    assert not session.undo()
    session.apply_pointer_up(at(60, 30))
    assert session.undo()
