"""New-task submission: validate the form, call the tool, re-render."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..config import TOOL_KANBAN_BOARD
from .renderer import BoardRenderer, WidgetSurface

logger = logging.getLogger(__name__)


class SubmitState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass
class TaskForm:
    """Current values of the add-task form."""

    title: str = ""
    assignee: str = ""
    status: str = "todo"

    def reset(self) -> None:
        self.title = ""
        self.assignee = ""
        self.status = "todo"


class SubmitFlow:
    """
    Drives one submission at a time through the host's tool call.

    A submit while another is in flight is ignored. The flow always returns
    to idle, whether the call succeeded or failed.
    """

    def __init__(self, host: Any, renderer: BoardRenderer, surface: WidgetSurface) -> None:
        self.host = host
        self.renderer = renderer
        self.surface = surface
        self.state = SubmitState.IDLE

    @property
    def pending(self) -> bool:
        return self.state is SubmitState.SUBMITTING

    async def submit(self, form: TaskForm) -> bool:
        """
        Submit the form as a new task.

        Args:
            form: Form values; reset on success, left as-is otherwise

        Returns:
            True if the tool call succeeded and the board was re-rendered
        """
        if self.pending:
            return False

        call_tool = getattr(self.host, "call_tool", None)
        if not callable(call_tool):
            logger.debug("call_tool unavailable; cannot add task")
            self.surface.set_message("Write access is unavailable in this client.", "error")
            return False

        title = (form.title or "").strip()
        assignee = (form.assignee or "").strip()
        status = form.status or "todo"
        if not title or not assignee:
            self.surface.set_message("Please provide both a task and an assignee.", "error")
            return False

        self.state = SubmitState.SUBMITTING
        self.surface.set_message("Adding task…", "info")
        try:
            response = await call_tool(
                TOOL_KANBAN_BOARD,
                {"newTask": {"title": title, "assignee": assignee, "status": status}},
            )
            logger.debug(
                "call_tool response keys: %s",
                list(response) if isinstance(response, Mapping) else None,
            )

            if isinstance(response, Mapping) and response.get("toolOutput"):
                self.renderer.render(response["toolOutput"])
            elif isinstance(response, Mapping) and response.get("structuredContent"):
                self.renderer.render({"structuredContent": response["structuredContent"]})
            else:
                self.surface.set_message("Task added. Refreshing board…", "info")
                self.renderer.render(None)

            form.reset()
            self.surface.set_message("Task added successfully.", "success")
            return True
        except Exception as e:
            logger.warning("call_tool failed: %s", e)
            self.surface.set_message("Failed to add task.", "error")
            return False
        finally:
            self.state = SubmitState.IDLE
