"""
Board renderer - turns a ResolvedBoard into widget HTML.

`render_board_html` is pure and is also used server-side to pre-render the
widget template. `BoardRenderer` binds it to a WidgetSurface and the host,
and defers itself while the mount point is missing.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from html import escape
from typing import Any

from .resolver import ResolvedBoard, resolve_for_host

logger = logging.getLogger(__name__)

ROOT_ID = "kanban-root"
RENDER_RETRY_DELAY = 0.05  # seconds

STATUS_OPTIONS = (
    ("todo", "To do"),
    ("in-progress", "In progress"),
    ("done", "Done"),
)


def format_timestamp(iso_string: str | None) -> str:
    """Fixed English 'May 01, 02:30 PM' form in local time; '' if unparseable."""
    if not iso_string or not isinstance(iso_string, str):
        return ""
    try:
        timestamp = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except ValueError:
        return ""
    # No setlocale() anywhere, so %b and %p stay in the C locale
    return timestamp.astimezone().strftime("%b %d, %I:%M %p")


def _render_task(task: Mapping[str, Any]) -> str:
    title = escape(str(task.get("title", "")))
    assignee = escape(str(task.get("assignee", "")))
    return (
        '<li class="kanban-task">'
        f"<strong>{title}</strong>"
        f"<footer>Assigned to {assignee}</footer>"
        "</li>"
    )


def _render_column(column: Any) -> str:
    if not isinstance(column, Mapping):
        column = {}
    tasks = column.get("tasks") or []
    if not isinstance(tasks, list):
        tasks = []
    title = escape(str(column.get("title") or "Column"))
    items = "".join(_render_task(task) for task in tasks if isinstance(task, Mapping))
    return (
        '<section class="kanban-column">'
        f"<h2>{title} ({len(tasks)})</h2>"
        f'<ul role="list">{items}</ul>'
        "</section>"
    )


def render_board_html(board: ResolvedBoard) -> str:
    """Inner HTML of the mount point for a resolved board."""
    if board.is_empty:
        parts = ['<p class="kanban-empty">No tasks available.</p>']
    else:
        parts = [_render_column(column) for column in board.columns]

    synced = format_timestamp(board.last_synced_at)
    if synced:
        parts.append(f'<p class="kanban-updated">Last synced {escape(synced)}</p>')
    return "".join(parts)


def render_controls_html() -> str:
    """Task form, refresh button and message line shown above the board."""
    options = "".join(
        f'<option value="{value}">{label}</option>' for value, label in STATUS_OPTIONS
    )
    return (
        '<div class="kanban-controls">'
        '<form class="kanban-form" aria-label="Add a new task">'
        '<label class="kanban-field">Task'
        '<input name="title" type="text" placeholder="Define onboarding flow" required>'
        "</label>"
        '<label class="kanban-field">Assignee'
        '<input name="assignee" type="text" placeholder="Ada Lovelace" required>'
        "</label>"
        '<label class="kanban-field">Status'
        f'<select name="status" class="kanban-status">{options}</select>'
        "</label>"
        '<button type="submit" class="kanban-submit">Add task</button>'
        "</form>"
        '<button type="button" class="kanban-refresh">Refresh board</button>'
        '<span class="kanban-message"></span>'
        "</div>"
    )


class WidgetSurface:
    """In-memory document the widget draws into.

    `root` is None until the host mounts the container.
    """

    def __init__(self, mounted: bool = True) -> None:
        self.root: str | None = "" if mounted else None
        self.controls: str | None = None
        self.message = ""
        self.message_type = "info"

    @property
    def mounted(self) -> bool:
        return self.root is not None

    def mount(self) -> None:
        if self.root is None:
            self.root = ""

    def set_message(self, text: str, message_type: str = "info") -> None:
        self.message = text
        self.message_type = message_type

    def to_html(self) -> str:
        """Whole widget: controls (if built) followed by the mount point."""
        controls = self.controls or ""
        return f'{controls}<div id="{ROOT_ID}">{self.root or ""}</div>'


class BoardRenderer:
    """Resolves host payloads and replaces the surface's board content."""

    def __init__(
        self,
        surface: WidgetSurface,
        host: Any = None,
        before_render: Callable[[], None] | None = None,
        retry_delay: float = RENDER_RETRY_DELAY,
    ) -> None:
        self.surface = surface
        self.host = host
        self.before_render = before_render
        self.retry_delay = retry_delay

    def render(self, state: Any) -> ResolvedBoard | None:
        """
        Render `state`, replacing whatever was drawn before.

        Returns the resolved board, or None when the render was deferred
        because the mount point is not there yet.
        """
        if not self.surface.mounted:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("Root missing and no event loop to retry on; render skipped")
                return None
            logger.debug("Root missing, retrying render in %.3fs", self.retry_delay)
            loop.call_later(self.retry_delay, self.render, state)
            return None

        if self.before_render:
            self.before_render()

        board = resolve_for_host(state, self.host)
        self.surface.root = render_board_html(board)
        logger.debug("Rendered %d columns from %s", len(board.columns), board.source)
        return board
