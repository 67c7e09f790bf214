"""
Kanban widget - host-side board reconciliation.

Resolves whatever shape the host delivers into one board view, renders it,
and submits new tasks back through the host's tool call. SessionHost plays
the host's part against a live server over streamable HTTP.
"""

from .bootstrap import HostState, WidgetBootstrapper
from .renderer import BoardRenderer, WidgetSurface, render_board_html
from .resolver import ResolvedBoard, resolve_board, resolve_for_host
from .session_host import SessionHost, ToolCallError, open_session_host
from .submit import SubmitFlow, SubmitState, TaskForm

__all__ = [
    "BoardRenderer",
    "HostState",
    "ResolvedBoard",
    "SessionHost",
    "SubmitFlow",
    "SubmitState",
    "TaskForm",
    "ToolCallError",
    "WidgetBootstrapper",
    "WidgetSurface",
    "open_session_host",
    "render_board_html",
    "resolve_board",
    "resolve_for_host",
]
