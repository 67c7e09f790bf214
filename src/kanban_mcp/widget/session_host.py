"""Host capability object backed by an MCP client session."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from mcp import ClientSession
from mcp.client.streamable_http import streamable_http_client
from mcp.types import TextContent

from ..config import WIDGET_STATE_KEY

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """The server answered a tool call with an error result."""


class SessionHost:
    """
    Exposes `call_tool` plus the output hints a widget host would.

    Each successful call is recorded as the latest tool output, appended to
    the output history, and its `_meta` becomes the response metadata.
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session
        self.tool_output: dict[str, Any] | None = None
        self.tool_outputs: list[dict[str, Any]] = []
        self.tool_response_metadata: dict[str, Any] | None = None
        self.widget_state: dict[str, Any] | None = None
        self.metadata: dict[str, Any] = {}

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        result = await self.session.call_tool(name, arguments or {})
        if result.isError:
            message = " ".join(
                block.text for block in result.content if isinstance(block, TextContent)
            )
            raise ToolCallError(message or f"Tool '{name}' failed")

        payload = result.model_dump(by_alias=True, exclude_none=True)
        meta = payload.get("_meta") or {}

        self.tool_output = payload
        self.tool_outputs.append(payload)
        self.tool_response_metadata = meta
        self.widget_state = meta.get(WIDGET_STATE_KEY)
        if meta.get("lastSyncedAt"):
            self.metadata["lastSyncedAt"] = meta["lastSyncedAt"]

        return {"toolOutput": payload, "structuredContent": payload.get("structuredContent")}


@asynccontextmanager
async def open_session_host(
    url: str,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[SessionHost]:
    """
    Connect to a streamable HTTP MCP endpoint and yield a SessionHost.

    Args:
        url: Full MCP endpoint URL, e.g. http://localhost:8000/mcp
        http_client: Preconfigured client to send requests through
    """
    async with streamable_http_client(url, http_client=http_client) as (
        read_stream,
        write_stream,
        _get_session_id,
    ):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            logger.info("Connected widget host to %s", url)
            yield SessionHost(session)
