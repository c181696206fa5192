"""
Stroke renderer: the per-gesture state machine of the editor.

    Idle --pointer down--> Active(tool) --pointer move--> Active(tool)
    Active(tool) --pointer up / pointer leave--> Idle

Only one gesture can be active. Positions arriving here are already in
surface coordinates; the session converts from screen space.
"""

from typing import TYPE_CHECKING, Dict, Optional

from PySide6.QtCore import QPointF

from pixedit.editor.tools import StrokeSession, ToolBase, ToolStyle, ToolType, create_tool
from pixedit.services.logging_service import get_logger

if TYPE_CHECKING:
    from pixedit.editor.session import EditorSession


class StrokeRenderer:
    """
    Routes one gesture at a time to the active tool.

    Holds the current tool selection and the drawing style shared by all
    tools. Completed gestures that changed the overlay are committed to the
    session history.
    """

    def __init__(self, session: "EditorSession") -> None:
        self._logger = get_logger(__name__)
        self._session = session
        self._style = ToolStyle()
        self._tools: Dict[ToolType, ToolBase] = {}
        self._active_tool: ToolBase = self._get_tool(ToolType.PEN)
        self._stroke: Optional[StrokeSession] = None

    # ─── Tool Selection ───────────────────────────────────────────────────

    def _get_tool(self, tool_type: ToolType) -> ToolBase:
        if tool_type not in self._tools:
            self._tools[tool_type] = create_tool(tool_type, self._style)
        return self._tools[tool_type]

    @property
    def active_tool(self) -> ToolBase:
        return self._active_tool

    @property
    def tool_type(self) -> ToolType:
        return self._active_tool.tool_type

    def set_tool(self, tool_type: ToolType) -> None:
        """Select the tool used by the next gesture."""
        if self.is_active:
            # Finish the running gesture with the tool that started it
            self.pointer_up(self._stroke.last_point)
        self._active_tool = self._get_tool(tool_type)
        self._logger.debug(f"Active tool: {tool_type.name}")

    @property
    def style(self) -> ToolStyle:
        return self._style.clone()

    @style.setter
    def style(self, value: ToolStyle) -> None:
        self._style = value.clone()
        for tool in self._tools.values():
            tool.style = self._style

    # ─── Gesture State Machine ────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self._stroke is not None

    @property
    def stroke(self) -> Optional[StrokeSession]:
        return self._stroke

    def pointer_down(self, pos: QPointF) -> bool:
        """
        Start a gesture at pos.

        Returns False if a gesture is already running or there is no image.
        """
        if self.is_active or not self._session.has_image:
            return False

        self._stroke = StrokeSession(
            tool_type=self._active_tool.tool_type,
            start_point=QPointF(pos),
            last_point=QPointF(pos),
        )
        self._active_tool.on_press(self._stroke, self._session)
        return True

    def pointer_move(self, pos: QPointF) -> bool:
        """Extend the running gesture. Returns False when idle."""
        if not self.is_active:
            return False
        self._active_tool.on_move(self._stroke, pos, self._session)
        return True

    def pointer_up(self, pos: QPointF) -> bool:
        """
        Finish the running gesture.

        Returns True if the gesture was committed to history.
        """
        if not self.is_active:
            return False

        stroke = self._stroke
        # Back to Idle before the tool runs so crop/commit see no gesture
        self._stroke = None
        commit = self._active_tool.on_release(stroke, pos, self._session)

        if commit:
            self._session.commit()
        return commit

    def pointer_leave(self) -> bool:
        """Pointer left the canvas: finish the gesture where it last was."""
        if not self.is_active:
            return False
        return self.pointer_up(self._stroke.last_point)

    def cancel(self) -> None:
        """Drop the running gesture without committing it."""
        if not self.is_active:
            return
        stroke = self._stroke
        self._stroke = None
        self._active_tool.on_cancel(stroke, self._session)
