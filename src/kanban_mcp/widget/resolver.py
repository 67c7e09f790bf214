"""
Structured-content resolver.

Hosts surface a tool result in different shapes: wrapped or unwrapped,
camelCase or snake_case, inside a metadata object, inside a list of past
outputs, or only as widget state. Every "which shape is it" decision lives
here; callers only ever see a ResolvedBoard.

All functions are pure. The same inputs always resolve the same way, so the
resolver can run on bootstrap, after each tool call and on refresh.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..config import WIDGET_STATE_KEY

logger = logging.getLogger(__name__)

STRUCTURED_KEYS = ("structuredContent", "structured_content")
TOOL_OUTPUT_KEYS = ("toolOutputs", "tool_outputs")


@dataclass(frozen=True)
class ResolvedBoard:
    """Canonical board view handed to the renderer."""

    columns: list[Any] = field(default_factory=list)
    last_synced_at: str | None = None
    source: str = "none"

    @property
    def is_empty(self) -> bool:
        return not self.columns


def has_columns(candidate: Any) -> bool:
    """True when the candidate carries a non-empty `columns` list."""
    if not isinstance(candidate, Mapping):
        return False
    columns = candidate.get("columns")
    return isinstance(columns, list) and len(columns) > 0


def extract_structured(state: Any) -> Any:
    """Unwrap a structured-content field if present, else return the value."""
    if not isinstance(state, Mapping):
        return None
    for key in STRUCTURED_KEYS:
        if state.get(key):
            return state[key]
    return state


def _columns_view(columns: Any, last_synced_at: Any) -> dict[str, Any]:
    return {"columns": columns, "lastSyncedAt": last_synced_at}


def _state_candidates(state: Any) -> Iterator[tuple[str, Any]]:
    if not isinstance(state, Mapping):
        return
    for key in STRUCTURED_KEYS:
        if state.get(key):
            yield f"response.{key}", state[key]
    yield "response", state


def _metadata_candidates(metadata: Any) -> Iterator[tuple[str, Any]]:
    if not isinstance(metadata, Mapping):
        return

    for key in STRUCTURED_KEYS:
        if metadata.get(key):
            yield f"metadata.{key}", metadata[key]
    # Some hosts hand over the structured content itself as the metadata
    yield "metadata", metadata

    outputs = None
    for key in TOOL_OUTPUT_KEYS:
        if metadata.get(key):
            outputs = metadata[key]
            break
    if isinstance(outputs, list) and outputs:
        latest = outputs[-1]
        if isinstance(latest, Mapping):
            for key in STRUCTURED_KEYS:
                if latest.get(key):
                    yield f"metadata.toolOutputs[-1].{key}", latest[key]
            if latest.get("output"):
                for source, candidate in _state_candidates(latest["output"]):
                    yield f"metadata.toolOutputs[-1].output/{source}", candidate

    columns_full = metadata.get("columnsFull")
    if isinstance(columns_full, list) and columns_full:
        yield "metadata.columnsFull", _columns_view(columns_full, metadata.get("lastSyncedAt"))

    state = metadata.get(WIDGET_STATE_KEY)
    if isinstance(state, Mapping):
        yield "metadata.widgetState", _columns_view(state.get("columns"), state.get("lastSyncedAt"))


def _widget_state_candidates(widget_state: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(widget_state, Mapping):
        yield "widgetState", _columns_view(
            widget_state.get("columns"), widget_state.get("lastSyncedAt")
        )


def _side_channel_candidates(state: Any) -> Iterator[tuple[str, Any]]:
    if not isinstance(state, Mapping):
        return
    meta = state.get("_meta")
    if isinstance(meta, Mapping) and isinstance(meta.get("columnsFull"), list):
        yield "response._meta.columnsFull", _columns_view(
            meta["columnsFull"], meta.get("lastSyncedAt")
        )


def resolve_from_metadata(metadata: Any) -> Any:
    """First usable structured content found in host metadata, or None."""
    for _source, candidate in _metadata_candidates(metadata):
        if has_columns(candidate):
            return candidate
    return None


def resolve_board(
    state: Any,
    metadata: Any = None,
    widget_state: Any = None,
    fallback_synced_at: str | None = None,
) -> ResolvedBoard:
    """
    Resolve a board view from whatever the host delivered.

    Stages run in order and the first candidate with non-empty columns
    wins: the response's structured field, the raw response, host metadata
    (structured field, latest tool output, full columns, widget state), the
    host widget state, and finally the response's `_meta.columnsFull`.

    Args:
        state: Tool response or tool output, any shape (may be None)
        metadata: Host-supplied tool response metadata
        widget_state: Host-exposed widget state object
        fallback_synced_at: Timestamp to show when the winner has none

    Returns:
        ResolvedBoard; empty columns when nothing resolved
    """
    structured = extract_structured(state)
    if isinstance(structured, Mapping) and structured.get("lastSyncedAt"):
        fallback_synced_at = structured["lastSyncedAt"]

    stages = (
        _state_candidates(state),
        _metadata_candidates(metadata),
        _widget_state_candidates(widget_state),
        _side_channel_candidates(state),
    )
    for stage in stages:
        for source, candidate in stage:
            if has_columns(candidate):
                logger.debug("Resolved board columns from %s", source)
                return ResolvedBoard(
                    columns=list(candidate["columns"]),
                    last_synced_at=candidate.get("lastSyncedAt") or fallback_synced_at,
                    source=source,
                )

    logger.debug("No board columns resolved")
    return ResolvedBoard(last_synced_at=fallback_synced_at)


def resolve_for_host(state: Any, host: Any) -> ResolvedBoard:
    """Resolve using whatever hints the host capability object exposes."""
    if host is None:
        return resolve_board(state)

    host_metadata = getattr(host, "metadata", None)
    fallback = host_metadata.get("lastSyncedAt") if isinstance(host_metadata, Mapping) else None
    return resolve_board(
        state,
        metadata=getattr(host, "tool_response_metadata", None),
        widget_state=getattr(host, "widget_state", None),
        fallback_synced_at=fallback,
    )
