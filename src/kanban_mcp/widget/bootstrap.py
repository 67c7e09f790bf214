"""
Widget bootstrap.

The host injects its capability object some time after the widget loads.
The bootstrapper polls for it a bounded number of times, then does the
first render and builds the controls once.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from .renderer import BoardRenderer, WidgetSurface, render_controls_html
from .resolver import ResolvedBoard
from .submit import SubmitFlow, TaskForm

logger = logging.getLogger(__name__)

MAX_HOST_CHECKS = 200
CHECK_DELAY = 0.05  # seconds


class HostState(Enum):
    WAITING = "waiting"
    READY = "ready"
    GIVEN_UP = "given-up"


def initial_payload(host: Any) -> Any:
    """Most recent tool output the host exposes, if any."""
    for attr in ("tool_output", "last_tool_result", "latest_tool_output"):
        value = getattr(host, attr, None)
        if value:
            return value
    outputs = getattr(host, "tool_outputs", None)
    if isinstance(outputs, list) and outputs:
        return outputs[-1]
    return None


class WidgetBootstrapper:
    """Waits for the host, then wires renderer and submit flow to it."""

    def __init__(
        self,
        host_provider: Callable[[], Any],
        surface: WidgetSurface | None = None,
        max_attempts: int = MAX_HOST_CHECKS,
        check_delay: float = CHECK_DELAY,
    ) -> None:
        self.host_provider = host_provider
        self.surface = surface or WidgetSurface()
        self.max_attempts = max_attempts
        self.check_delay = check_delay
        self.state = HostState.WAITING
        self.attempts = 0
        self.host: Any = None
        self.renderer: BoardRenderer | None = None
        self.submit_flow: SubmitFlow | None = None

    async def start(self) -> HostState:
        """Poll for the host capability object and do the first render."""
        host = self.host_provider()
        while host is None:
            if self.attempts >= self.max_attempts:
                self.state = HostState.GIVEN_UP
                logger.warning("Host capability object unavailable after %d checks", self.attempts)
                return self.state
            self.attempts += 1
            await asyncio.sleep(self.check_delay)
            host = self.host_provider()

        self.host = host
        self.state = HostState.READY
        self.renderer = BoardRenderer(self.surface, host, before_render=self.build_controls)
        self.submit_flow = SubmitFlow(host, self.renderer, self.surface)

        self.refresh()
        self.build_controls()
        return self.state

    def refresh(self) -> ResolvedBoard | None:
        """Re-render from the host's latest output (manual refresh)."""
        if self.renderer is None:
            raise RuntimeError("widget host is not ready")
        payload = initial_payload(self.host)
        logger.debug("Initial payload keys: %s", list(payload) if isinstance(payload, dict) else None)
        return self.renderer.render(payload)

    def build_controls(self) -> None:
        if self.surface.controls is not None or not self.surface.mounted:
            return
        self.surface.controls = render_controls_html()

    async def submit(self, form: TaskForm) -> bool:
        if self.submit_flow is None:
            raise RuntimeError("widget host is not ready")
        return await self.submit_flow.submit(form)
