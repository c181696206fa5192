"""
Tool framework and implementations for the PixEdit editor.

Each tool turns one pointer gesture into pixel changes on the surface
overlay. Tools receive positions already converted to surface coordinates.

Tools:
- PenTool: Free-hand strokes committed segment by segment
- HighlighterTool: Wide, flat, semi-transparent marker band
- LineTool / RectangleTool / CircleTool: Shapes with live preview
- CropTool: Drag a rectangle to crop the image
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen

from pixedit.editor.surface import new_bitmap
from pixedit.services.logging_service import get_logger

if TYPE_CHECKING:
    from pixedit.editor.session import EditorSession


class ToolType(Enum):
    """Enum for tool types."""
    PEN = auto()
    HIGHLIGHTER = auto()
    LINE = auto()
    RECTANGLE = auto()
    CIRCLE = auto()
    CROP = auto()


# Highlighter band is this many times wider than the configured width
HIGHLIGHT_WIDTH_FACTOR = 3
HIGHLIGHT_OPACITY = 0.3

CROP_DIM_COLOR = QColor(0, 0, 0, 128)
CROP_BORDER_COLOR = QColor(255, 255, 255)
CROP_BORDER_WIDTH = 2


@dataclass
class ToolStyle:
    """Color and line width shared by the drawing tools."""
    color: QColor = field(default_factory=lambda: QColor(255, 0, 0))
    width: int = 2

    def clone(self) -> "ToolStyle":
        return ToolStyle(color=QColor(self.color), width=self.width)


@dataclass
class StrokeSession:
    """
    State of one gesture, alive from pointer-down to pointer-up.

    pre_snapshot, scratch and path are only used by the highlighter.
    """
    tool_type: ToolType
    start_point: QPointF
    last_point: QPointF
    pre_snapshot: Optional[QImage] = None
    scratch: Optional[QImage] = None
    path: Optional[QPainterPath] = None
    # True once the gesture has put content on the overlay
    dirty: bool = False


def make_round_pen(color: QColor, width: float) -> QPen:
    """Solid pen with round caps and joins."""
    pen = QPen(color)
    pen.setWidthF(width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


class ToolBase(ABC):
    """
    Base class for all tools.

    The stroke renderer calls on_press / on_move / on_release for the
    active gesture. on_release returns True when the gesture produced an
    edit that should be committed to history.
    """

    def __init__(self, style: Optional[ToolStyle] = None) -> None:
        self._logger = get_logger(__name__)
        self._style: ToolStyle = style.clone() if style else ToolStyle()

    @property
    @abstractmethod
    def tool_type(self) -> ToolType:
        """Return the type of this tool."""
        pass

    @property
    def cursor(self) -> Qt.CursorShape:
        """Return the cursor to use when this tool is active."""
        return Qt.CursorShape.CrossCursor

    @property
    def style(self) -> ToolStyle:
        return self._style

    @style.setter
    def style(self, value: ToolStyle) -> None:
        self._style = value.clone()

    def on_press(self, stroke: StrokeSession, session: "EditorSession") -> None:
        """Called once when the gesture starts."""
        pass

    @abstractmethod
    def on_move(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> None:
        """Extend the gesture to pos."""
        pass

    def on_release(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> bool:
        """
        Finish the gesture at pos.

        Returns True if the result should be committed to history.
        """
        if pos != stroke.last_point:
            self.on_move(stroke, pos, session)
        return stroke.dirty

    def on_cancel(self, stroke: StrokeSession, session: "EditorSession") -> None:
        """Abort the gesture without committing."""
        pass

    def _begin_paint(self, target: QImage) -> QPainter:
        painter = QPainter(target)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        return painter


class PenTool(ToolBase):
    """
    Free-hand pen.

    Every move segment is drawn straight onto the overlay at full opacity.
    """

    @property
    def tool_type(self) -> ToolType:
        return ToolType.PEN

    def on_move(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> None:
        painter = self._begin_paint(session.surface.overlay)
        painter.setPen(make_round_pen(self._style.color, self._style.width))
        painter.drawLine(stroke.last_point, pos)
        painter.end()

        stroke.last_point = QPointF(pos)
        stroke.dirty = True


class HighlighterTool(ToolBase):
    """
    Highlighter producing one flat band per gesture.

    The whole gesture path is stroked opaquely on a scratch bitmap. On every
    move the overlay goes back to its state before the gesture and the
    scratch is composited over it at HIGHLIGHT_OPACITY, so crossing the
    stroke over itself never darkens it further.
    """

    @property
    def tool_type(self) -> ToolType:
        return ToolType.HIGHLIGHTER

    def on_press(self, stroke: StrokeSession, session: "EditorSession") -> None:
        surface = session.surface
        stroke.pre_snapshot = surface.overlay_snapshot()
        stroke.scratch = new_bitmap(surface.width, surface.height)
        stroke.path = QPainterPath(stroke.start_point)

    def on_move(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> None:
        stroke.path.lineTo(pos)

        # Opaque band of the whole path so far
        stroke.scratch.fill(Qt.GlobalColor.transparent)
        painter = self._begin_paint(stroke.scratch)
        painter.setPen(make_round_pen(
            self._style.color, self._style.width * HIGHLIGHT_WIDTH_FACTOR
        ))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(stroke.path)
        painter.end()

        session.surface.restore_overlay(stroke.pre_snapshot)
        painter = QPainter(session.surface.overlay)
        painter.setOpacity(HIGHLIGHT_OPACITY)
        painter.drawImage(0, 0, stroke.scratch)
        painter.end()

        stroke.last_point = QPointF(pos)
        stroke.dirty = True

    def on_cancel(self, stroke: StrokeSession, session: "EditorSession") -> None:
        if stroke.pre_snapshot is not None:
            session.surface.restore_overlay(stroke.pre_snapshot)


class ShapeTool(ToolBase):
    """
    Base for shapes drawn from the press point to the pointer.

    Each move clears the overlay and redraws the shape, so only the last
    preview survives the gesture.
    """

    @abstractmethod
    def draw_shape(self, painter: QPainter, start: QPointF, end: QPointF) -> None:
        """Draw the outline of the shape between start and end."""
        pass

    def on_move(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> None:
        overlay = session.surface.overlay
        overlay.fill(Qt.GlobalColor.transparent)

        painter = self._begin_paint(overlay)
        pen = QPen(self._style.color)
        pen.setWidthF(self._style.width)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        self.draw_shape(painter, stroke.start_point, pos)
        painter.end()

        stroke.last_point = QPointF(pos)
        stroke.dirty = True

    def on_release(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> bool:
        # Redraw at the release point even when the pointer did not move
        self.on_move(stroke, pos, session)
        return True

    def on_cancel(self, stroke: StrokeSession, session: "EditorSession") -> None:
        session.surface.clear_overlay()


class LineTool(ShapeTool):
    """Straight line from press point to release point."""

    @property
    def tool_type(self) -> ToolType:
        return ToolType.LINE

    def draw_shape(self, painter: QPainter, start: QPointF, end: QPointF) -> None:
        painter.drawLine(start, end)


class RectangleTool(ShapeTool):
    """Outlined rectangle spanning press and release points."""

    @property
    def tool_type(self) -> ToolType:
        return ToolType.RECTANGLE

    def draw_shape(self, painter: QPainter, start: QPointF, end: QPointF) -> None:
        painter.drawRect(QRectF(start, end).normalized())


class CircleTool(ShapeTool):
    """Circle centered on the press point, passing through the pointer."""

    @property
    def tool_type(self) -> ToolType:
        return ToolType.CIRCLE

    @staticmethod
    def radius(start: QPointF, end: QPointF) -> float:
        return math.hypot(end.x() - start.x(), end.y() - start.y())

    def draw_shape(self, painter: QPainter, start: QPointF, end: QPointF) -> None:
        r = self.radius(start, end)
        painter.drawEllipse(start, r, r)


class CropTool(ToolBase):
    """
    Crop selection.

    Dragging shows a dimmed preview with the selection left clear; releasing
    crops the image to the selection. The preview is never committed.
    """

    @property
    def tool_type(self) -> ToolType:
        return ToolType.CROP

    def on_move(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> None:
        overlay = session.surface.overlay
        rect = QRectF(stroke.start_point, pos).normalized()

        overlay.fill(Qt.GlobalColor.transparent)
        painter = QPainter(overlay)
        painter.fillRect(overlay.rect(), CROP_DIM_COLOR)

        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        painter.fillRect(rect, Qt.GlobalColor.transparent)

        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
        painter.setPen(QPen(CROP_BORDER_COLOR, CROP_BORDER_WIDTH))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(rect)
        painter.end()

        stroke.last_point = QPointF(pos)

    def on_release(
        self,
        stroke: StrokeSession,
        pos: QPointF,
        session: "EditorSession"
    ) -> bool:
        # The preview is not part of the image; crop() commits on success
        session.surface.clear_overlay()
        session.crop(QRectF(stroke.start_point, pos))
        return False

    def on_cancel(self, stroke: StrokeSession, session: "EditorSession") -> None:
        session.surface.clear_overlay()


def create_tool(tool_type: ToolType, style: Optional[ToolStyle] = None) -> ToolBase:
    """
    Factory function to create tools by type.

    Args:
        tool_type: The type of tool to create.
        style: Optional initial style.

    Returns:
        A new instance of the requested tool.
    """
    tool_classes = {
        ToolType.PEN: PenTool,
        ToolType.HIGHLIGHTER: HighlighterTool,
        ToolType.LINE: LineTool,
        ToolType.RECTANGLE: RectangleTool,
        ToolType.CIRCLE: CircleTool,
        ToolType.CROP: CropTool,
    }

    if tool_type not in tool_classes:
        raise ValueError(f"Unknown tool type: {tool_type}")

    return tool_classes[tool_type](style)
