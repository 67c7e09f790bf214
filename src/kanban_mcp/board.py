"""
Board state - the in-memory task store and its projection into columns.

The store is process-wide and volatile: it is seeded at import time and
lives until the process exits. Every read produces a fresh snapshot.
"""

import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

Status = Literal["todo", "in-progress", "done"]

# Fixed column order and display titles
COLUMNS: tuple[tuple[Status, str], ...] = (
    ("todo", "To do"),
    ("in-progress", "In progress"),
    ("done", "Done"),
)


@dataclass(frozen=True, slots=True)
class Task:
    """A single card on the board. Replaced as a whole, never patched."""

    id: str
    title: str
    assignee: str
    status: Status

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class TaskInput(BaseModel):
    """Tool-side schema for a new or replacement task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str | None = Field(default=None, min_length=1)
    title: str = Field(min_length=1, description="Task title")
    assignee: str = Field(min_length=1, description="Who owns the task")
    status: Status = Field(description="Column to place the task in")


def normalize_task_input(task_input: TaskInput) -> Task:
    """Turn validated input into a Task, synthesizing an id when absent."""
    task_id = task_input.id or f"task-{int(time.time() * 1000)}"
    return Task(
        id=task_id,
        title=task_input.title.strip(),
        assignee=task_input.assignee.strip(),
        status=task_input.status,
    )


SEED_TASKS: tuple[Task, ...] = (
    Task("task-1", "Design empty states", "Ada", "todo"),
    Task("task-2", "Wireframe admin panel", "Grace", "in-progress"),
    Task("task-3", "QA onboarding flow", "Lin", "in-progress"),
    Task("task-4", "Finalize pricing deck", "Alan", "done"),
    Task("task-5", "Ship metrics dashboard", "Hedy", "todo"),
    Task("task-6", "Review beta feedback", "Niels", "done"),
)


class TaskStore:
    """Ordered task list, most recently written first, unique by id.

    Guarded by a lock so a store shared across threads never exposes a
    half-applied upsert.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._lock = threading.Lock()
        self._tasks: list[Task] = []
        for task in tasks:
            if any(existing.id == task.id for existing in self._tasks):
                continue
            self._tasks.append(task)

    def upsert(self, task: Task) -> Task:
        """Replace any task sharing the id, then put this one at the front."""
        with self._lock:
            self._tasks = [existing for existing in self._tasks if existing.id != task.id]
            self._tasks.insert(0, task)
        logger.info("Upserted task %s into %s", task.id, task.status)
        return task

    def all(self) -> tuple[Task, ...]:
        """Point-in-time copy of the store contents."""
        with self._lock:
            return tuple(self._tasks)

    def reset(self, tasks: Iterable[Task] = SEED_TASKS) -> None:
        """Restore the store to the given contents (seed set by default)."""
        fresh = TaskStore(tasks)
        with self._lock:
            self._tasks = fresh._tasks

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)


@dataclass(frozen=True, slots=True)
class Column:
    id: Status
    title: str
    tasks: tuple[Task, ...]

    def to_dict(self, limit: int | None = None) -> dict[str, Any]:
        tasks = self.tasks if limit is None else self.tasks[:limit]
        return {
            "id": self.id,
            "title": self.title,
            "tasks": [task.to_dict() for task in tasks],
        }


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    columns: tuple[Column, ...]
    tasks_by_id: dict[str, Task]
    last_synced_at: str

    def tasks_by_id_dict(self) -> dict[str, dict[str, str]]:
        return {task_id: task.to_dict() for task_id, task in self.tasks_by_id.items()}


def _now_iso() -> str:
    # Millisecond precision with a Z suffix, e.g. 2024-05-01T12:00:00.000Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def project_board(tasks: Iterable[Task], synced_at: str | None = None) -> BoardSnapshot:
    """
    Group tasks into the fixed status columns.

    Store order is preserved inside each column, and all three columns are
    always present even when empty.

    Args:
        tasks: Tasks in store order
        synced_at: Timestamp to stamp the snapshot with (defaults to now)

    Returns:
        A fresh BoardSnapshot
    """
    tasks = tuple(tasks)
    grouped: dict[str, list[Task]] = {status: [] for status, _ in COLUMNS}
    for task in tasks:
        grouped[task.status].append(task)

    columns = tuple(
        Column(id=status, title=title, tasks=tuple(grouped[status]))
        for status, title in COLUMNS
    )
    return BoardSnapshot(
        columns=columns,
        tasks_by_id={task.id: task for task in tasks},
        last_synced_at=synced_at or _now_iso(),
    )


# Process-wide store shared by every request
task_store = TaskStore(SEED_TASKS)
