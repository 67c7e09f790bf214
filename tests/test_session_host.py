"""Tests for kanban_mcp.widget.session_host module."""

import asyncio

import httpx
import pytest
from mcp.types import CallToolResult, TextContent

from kanban_mcp.board import TaskInput
from kanban_mcp.config import TOOL_KANBAN_BOARD
from kanban_mcp.server import create_app, kanban_board, mcp
from kanban_mcp.widget import open_session_host
from kanban_mcp.widget.bootstrap import WidgetBootstrapper
from kanban_mcp.widget.session_host import SessionHost, ToolCallError
from kanban_mcp.widget.submit import TaskForm


class FakeSession:
    """Stands in for mcp.ClientSession, answering from the in-process tool."""

    def __init__(self, error: bool = False) -> None:
        self.error = error

    async def call_tool(self, name: str, arguments: dict) -> CallToolResult:
        if self.error:
            return CallToolResult(
                content=[TextContent(type="text", text="validation failed")], isError=True
            )
        new_task = arguments.get("newTask")
        result = kanban_board(
            statusFilter=arguments.get("statusFilter"),
            newTask=TaskInput(**new_task) if new_task else None,
        )
        # Round-trip through the wire form like a real client would
        return CallToolResult.model_validate(result.model_dump(by_alias=True, exclude_none=True))


class TestSessionHost:
    """Tests for the session-backed host capability object."""

    def test_records_outputs(self) -> None:
        host = SessionHost(FakeSession())

        response = asyncio.run(host.call_tool("kanban-board", {}))

        assert response["structuredContent"]["columns"]
        assert host.tool_output is response["toolOutput"]
        assert host.tool_outputs == [response["toolOutput"]]
        assert "columnsFull" in host.tool_response_metadata
        assert host.widget_state["columns"]
        assert host.metadata["lastSyncedAt"]

    def test_error_result_raises(self) -> None:
        host = SessionHost(FakeSession(error=True))

        with pytest.raises(ToolCallError, match="validation failed"):
            asyncio.run(host.call_tool("kanban-board", {}))

        assert host.tool_outputs == []

    def test_widget_round_trip(self) -> None:
        """Bootstrap, submit and refresh should all resolve through the session."""
        host = SessionHost(FakeSession())
        boot = WidgetBootstrapper(lambda: host)

        async def scenario() -> None:
            await host.call_tool("kanban-board", {"statusFilter": "done"})
            await boot.start()
            assert "Review beta feedback" in boot.surface.root
            assert "Design empty states" not in boot.surface.root
            await boot.submit(TaskForm(title="Ship v2", assignee="Rae"))

        asyncio.run(scenario())

        assert "Ship v2" in boot.surface.root
        boot.refresh()
        assert "Ship v2" in boot.surface.root


class TestOpenSessionHost:
    """Tests for connecting a SessionHost to the app over streamable HTTP."""

    def test_calls_tool_in_process(self) -> None:
        """A real client session against the ASGI app should record the output."""
        mcp._session_manager = None
        app = create_app()

        async def scenario() -> dict:
            async with mcp.session_manager.run():
                transport = httpx.ASGITransport(app=app)
                async with httpx.AsyncClient(
                    transport=transport, base_url="http://testserver"
                ) as client:
                    async with open_session_host(
                        "http://testserver/mcp", http_client=client
                    ) as host:
                        await host.call_tool(
                            TOOL_KANBAN_BOARD,
                            {"newTask": {"title": "Ship v2", "assignee": "Rae", "status": "todo"}},
                        )
                        return host.tool_output

        output = asyncio.run(scenario())

        todo = output["structuredContent"]["columns"][0]
        assert todo["tasks"][0]["title"] == "Ship v2"
        assert output["_meta"]["lastCreatedTask"]["assignee"] == "Rae"
        assert output["structured_content"] == output["structuredContent"]
