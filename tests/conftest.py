"""Shared fixtures for kanban_mcp tests."""

import pytest

from kanban_mcp.board import SEED_TASKS, task_store


@pytest.fixture(autouse=True)
def _reset_task_store():
    """Every test starts from the seeded board."""
    task_store.reset(SEED_TASKS)
    yield
    task_store.reset(SEED_TASKS)
