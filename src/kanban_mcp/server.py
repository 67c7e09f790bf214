"""
Kanban MCP Server - a task board exposed as a single tool plus a widget

Keeps an in-memory task list (volatile, process-lifetime) grouped into
three status columns.

Tools:
- kanban-board: Show the board, optionally filtered to one status, and
  optionally add or replace a task first

Resources:
- ui://widget/kanban-board@v4.html: Widget template (pre-rendered board)
- ui://widget/kanban-board@v4.css / .js: Widget assets, when present

HTTP:
- POST /mcp: Streamable HTTP endpoint (stateless, JSON responses)
- GET /health: Liveness check
"""

import logging
from typing import Any

import uvicorn
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, ToolAnnotations
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .assets import build_component_html, read_text_asset
from .board import Status, TaskInput, normalize_task_input, project_board, task_store
from .config import (
    CSS_URI,
    HOST,
    JS_URI,
    LOG_LEVEL,
    MCP_PATH,
    PORT,
    SERVER_NAME,
    SERVER_VERSION,
    TEMPLATE_URI,
    TOOL_KANBAN_BOARD,
)
from .envelope import build_tool_response
from .widget.renderer import render_board_html
from .widget.resolver import resolve_board

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Loaded once; a missing file degrades to an empty block
javascript_bundle = read_text_asset("kanban.js")
stylesheet = read_text_asset("kanban.css")

# Initialize FastMCP server
mcp = FastMCP(
    SERVER_NAME,
    instructions="""Sample kanban board.

Call kanban-board to show tasks grouped by status (todo, in-progress, done).
Pass newTask to add a task, or to replace one by reusing its id.""",
    host=HOST,
    port=PORT,
    streamable_http_path=MCP_PATH,
    stateless_http=True,
    json_response=True,
)


# ============================================
# Widget Resources
# ============================================


WIDGET_META: dict[str, Any] = {
    "openai/widgetPrefersBorder": True,
    "openai/widgetDomain": "https://chatgpt.com",
    "openai/widgetDescription": "Renders a kanban layout that groups tasks by status.",
    "openai/widgetCSP": {
        "connect_domains": [],
        "resource_domains": [],
    },
    "openai/widgetAccessible": True,
}


def render_widget_html() -> str:
    """Widget fragment with the current board already drawn into the mount point."""
    envelope = build_tool_response(project_board(task_store.all()))
    board_html = render_board_html(resolve_board(envelope))
    return build_component_html(stylesheet, javascript_bundle, board_html)


@mcp.resource(
    TEMPLATE_URI,
    name="kanban-widget",
    title="Kanban board widget",
    description="Component used by the kanban-board tool",
    mime_type="text/html+skybridge",
    meta=WIDGET_META,
)
def kanban_widget() -> str:
    return render_widget_html()


if stylesheet:

    @mcp.resource(CSS_URI, name="kanban-widget-css", mime_type="text/css")
    def kanban_widget_css() -> str:
        return stylesheet


if javascript_bundle:

    @mcp.resource(JS_URI, name="kanban-widget-js", mime_type="text/javascript")
    def kanban_widget_js() -> str:
        return javascript_bundle


# ============================================
# Board Tool
# ============================================


@mcp.tool(
    name=TOOL_KANBAN_BOARD,
    title="Show kanban board",
    description="Displays the sample kanban board grouped by status.",
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
    ),
    meta={
        "openai/outputTemplate": TEMPLATE_URI,
        "openai/toolInvocation/invoking": "Loading board…",
        "openai/toolInvocation/invoked": "Board ready.",
        "openai/widgetAccessible": True,
    },
)
def kanban_board(
    statusFilter: Status | None = None,  # camelCase wire name
    newTask: TaskInput | None = None,  # camelCase wire name
) -> CallToolResult:
    """
    Show the kanban board, optionally adding or replacing a task first.

    Args:
        statusFilter: Only include this column in the structured view
            (todo, in-progress, done)
        newTask: Task to upsert; reuse an existing id to replace/move it

    Returns:
        Board snapshot, duplicated under every key a widget host may read
    """
    created_task = task_store.upsert(normalize_task_input(newTask)) if newTask else None
    board = project_board(task_store.all())
    envelope = build_tool_response(board, status_filter=statusFilter, created_task=created_task)
    return CallToolResult.model_validate(envelope)


# ============================================
# HTTP Surface
# ============================================


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request) -> Response:
    return JSONResponse({"status": "ok"})


async def internal_error(request: Request, exc: Exception) -> Response:
    """Generic 500 body; only sent if the response has not started yet."""
    logger.error("Failed to handle MCP request: %s", exc)
    return JSONResponse(
        {"error": "internal_server_error", "message": str(exc)},
        status_code=500,
    )


def create_app() -> Starlette:
    """Streamable HTTP app with the health route and error handler attached."""
    app = mcp.streamable_http_app()
    app.add_exception_handler(Exception, internal_error)
    return app


def main() -> None:
    """Entry point for the Kanban MCP server."""
    logger.info(
        "Starting %s %s on http://%s:%d%s", SERVER_NAME, SERVER_VERSION, HOST, PORT, MCP_PATH
    )
    uvicorn.run(create_app(), host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
