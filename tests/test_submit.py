"""Tests for kanban_mcp.widget.submit module."""

import asyncio
from types import SimpleNamespace

from kanban_mcp.board import TaskInput, task_store
from kanban_mcp.server import kanban_board
from kanban_mcp.widget.renderer import BoardRenderer, WidgetSurface
from kanban_mcp.widget.submit import SubmitFlow, SubmitState, TaskForm


class FakeHost:
    """Host whose call_tool runs the real tool in-process."""

    def __init__(self, wrap: str = "toolOutput", fail: bool = False) -> None:
        self.wrap = wrap
        self.fail = fail
        self.calls: list[tuple[str, dict]] = []

    async def call_tool(self, name: str, arguments: dict) -> dict:
        self.calls.append((name, arguments))
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionError("host went away")
        result = kanban_board(newTask=TaskInput(**arguments["newTask"]))
        payload = result.model_dump(by_alias=True, exclude_none=True)
        if self.wrap == "toolOutput":
            return {"toolOutput": payload}
        if self.wrap == "structuredContent":
            return {"structuredContent": payload["structuredContent"]}
        return {}


def _flow(host) -> tuple[SubmitFlow, WidgetSurface]:
    surface = WidgetSurface()
    renderer = BoardRenderer(surface, host)
    return SubmitFlow(host, renderer, surface), surface


class TestSubmitFlow:
    """Tests for the idle/submitting state machine."""

    def test_successful_submit(self) -> None:
        """A valid form should call the tool, re-render and reset."""
        host = FakeHost()
        flow, surface = _flow(host)
        form = TaskForm(title=" Ship v2 ", assignee="Rae")

        assert asyncio.run(flow.submit(form)) is True

        assert host.calls == [
            ("kanban-board", {"newTask": {"title": "Ship v2", "assignee": "Rae", "status": "todo"}})
        ]
        assert "Ship v2" in surface.root
        assert form == TaskForm()
        assert (surface.message, surface.message_type) == ("Task added successfully.", "success")
        assert flow.state is SubmitState.IDLE

    def test_structured_content_response(self) -> None:
        host = FakeHost(wrap="structuredContent")
        flow, surface = _flow(host)

        asyncio.run(flow.submit(TaskForm(title="Ship v2", assignee="Rae", status="done")))

        assert "Ship v2" in surface.root

    def test_bare_response_rerenders_without_payload(self) -> None:
        """No usable payload should fall back to a plain render."""
        host = FakeHost(wrap="none")
        flow, surface = _flow(host)

        assert asyncio.run(flow.submit(TaskForm(title="Ship v2", assignee="Rae")))

        assert "No tasks available." in surface.root
        assert surface.message == "Task added successfully."

    def test_missing_fields_rejected(self) -> None:
        """Blank title or assignee should not reach the host."""
        host = FakeHost()
        flow, surface = _flow(host)
        form = TaskForm(title="Ship v2", assignee="   ")

        assert asyncio.run(flow.submit(form)) is False

        assert host.calls == []
        assert surface.message == "Please provide both a task and an assignee."
        assert form.title == "Ship v2"
        assert flow.state is SubmitState.IDLE

    def test_host_without_call_tool(self) -> None:
        flow, surface = _flow(SimpleNamespace())

        assert asyncio.run(flow.submit(TaskForm(title="a", assignee="b"))) is False

        assert surface.message == "Write access is unavailable in this client."
        assert surface.message_type == "error"

    def test_failed_call(self) -> None:
        """A failing call should show an error, keep the form and go idle."""
        host = FakeHost(fail=True)
        flow, surface = _flow(host)
        surface.root = "previous board"
        form = TaskForm(title="Ship v2", assignee="Rae")

        assert asyncio.run(flow.submit(form)) is False

        assert surface.message == "Failed to add task."
        assert surface.root == "previous board"
        assert form.title == "Ship v2"
        assert flow.state is SubmitState.IDLE
        assert len(task_store) == 6

    def test_single_submission_in_flight(self) -> None:
        """A second submit while one is pending should be a no-op."""
        host = FakeHost()
        flow, _surface = _flow(host)

        async def scenario() -> list[bool]:
            first = asyncio.create_task(flow.submit(TaskForm(title="One", assignee="Rae")))
            await asyncio.sleep(0)
            assert flow.pending
            second = await flow.submit(TaskForm(title="Two", assignee="Rae"))
            return [await first, second]

        assert asyncio.run(scenario()) == [True, False]
        assert len(host.calls) == 1
        assert len(task_store) == 7
