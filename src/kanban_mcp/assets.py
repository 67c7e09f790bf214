"""Widget assets and the HTML fragment served as the tool's output template."""

import logging
from pathlib import Path

from .config import ASSET_DIR

logger = logging.getLogger(__name__)


def read_text_asset(filename: str, asset_dir: Path = ASSET_DIR) -> str:
    """Read an asset as text, or return '' (with a warning) if it can't be read."""
    try:
        return (asset_dir / filename).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to load asset %s: %s", filename, e)
        return ""


def build_component_html(stylesheet: str, script: str, board_html: str = "") -> str:
    """
    Build the widget fragment.

    Args:
        stylesheet: CSS to inline; the style block is omitted when empty
        script: Script to inline; the script block is omitted when empty
        board_html: Pre-rendered content for the mount point

    Returns:
        HTML fragment with the `kanban-root` mount point
    """
    style_tag = f"<style>{stylesheet}</style>" if stylesheet else ""
    script_tag = f"<script>{script}</script>" if script else ""
    return f'\n<div id="kanban-root">{board_html}</div>\n{style_tag}\n{script_tag}\n'
