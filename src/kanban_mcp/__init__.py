"""
Kanban MCP - a task board exposed as a tool with a reconciling widget

- The server keeps a volatile task list and answers every call with the
  same board under several keys, so any host convention finds it.
- The widget package resolves whichever shape arrives into one board view.
"""

from .server import main

__all__ = ["main"]
