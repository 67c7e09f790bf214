"""
Tool response envelope.

Hosts disagree on where a tool's structured result lives, so the same board
data is emitted under every location a widget might look: both key
spellings at the top level, and again inside `_meta` together with the
uncapped columns, the id index and the widget state.
"""

from typing import Any

from .board import BoardSnapshot, Status, Task
from .config import WIDGET_STATE_KEY

# Per-column cap for the structured view; the full set travels in _meta
MAX_TASKS_PER_COLUMN = 12


def format_structured_content(
    board: BoardSnapshot,
    status_filter: Status | None = None,
) -> dict[str, Any]:
    """Filtered, capped board view used as the tool's structured content."""
    columns = [
        column.to_dict(limit=MAX_TASKS_PER_COLUMN)
        for column in board.columns
        if not status_filter or column.id == status_filter
    ]
    return {
        "columns": columns,
        "lastSyncedAt": board.last_synced_at,
    }


def build_widget_state(board: BoardSnapshot) -> dict[str, Any]:
    return {
        "columns": [column.to_dict() for column in board.columns],
        "tasksById": board.tasks_by_id_dict(),
        "lastSyncedAt": board.last_synced_at,
    }


def summary_text(created_task: Task | None) -> str:
    if created_task:
        return (
            f'Added task "{created_task.title}" to {created_task.status}. '
            "Here is the updated board."
        )
    return "Here is the latest kanban snapshot."


def build_tool_response(
    board: BoardSnapshot,
    status_filter: Status | None = None,
    created_task: Task | None = None,
) -> dict[str, Any]:
    """
    Package a board snapshot into the redundant response envelope.

    Args:
        board: Snapshot taken after any mutation
        status_filter: Keep only this column in the structured view
        created_task: Task written by this call, if any

    Returns:
        Envelope dict in wire form (camelCase keys, `_meta` side channel)
    """
    structured = format_structured_content(board, status_filter)
    widget_state = build_widget_state(board)

    meta: dict[str, Any] = {
        "tasksById": widget_state["tasksById"],
        "lastSyncedAt": board.last_synced_at,
        "columnsFull": widget_state["columns"],
        WIDGET_STATE_KEY: widget_state,
        "structuredContent": structured,
    }
    if created_task:
        meta["lastCreatedTask"] = created_task.to_dict()

    return {
        "structuredContent": structured,
        "structured_content": structured,
        "content": [{"type": "text", "text": summary_text(created_task)}],
        "_meta": meta,
    }
