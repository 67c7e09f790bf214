"""Runtime configuration, read from the environment once at import."""

import os
from pathlib import Path

SERVER_NAME = "kanban-sample-server"
SERVER_VERSION = "1.0.0"

# Listener
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3333"))
MCP_PATH = "/mcp"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Widget assets
PACKAGE_ASSET_DIR = Path(__file__).resolve().parent / "static"
ASSET_DIR = Path(os.environ.get("KANBAN_ASSET_DIR", str(PACKAGE_ASSET_DIR)))

# Versioned resource identifiers; bump the suffix when the widget changes
TEMPLATE_URI = "ui://widget/kanban-board@v4.html"
CSS_URI = "ui://widget/kanban-board@v4.css"
JS_URI = "ui://widget/kanban-board@v4.js"

TOOL_KANBAN_BOARD = "kanban-board"

# Key hosts read widget state from, both in the envelope and the widget
WIDGET_STATE_KEY = "openai/widgetState"
