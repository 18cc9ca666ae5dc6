"""Playwright implementation of the page boundaries.

Element insertion is fire-and-forget: each insertion is scheduled as a task
so the caller never waits on network loads. Task failures are logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from handling_editor.host.metrics import METRICS_PATH
from handling_editor.host.probe import PROBE_SCRIPT
from handling_editor.interception.failsafe import ScriptLoadDecision

if TYPE_CHECKING:
    from collections.abc import Coroutine, Iterable

    from playwright.async_api import Page, Request, Route

    from handling_editor.host.probe import HostProbe
    from handling_editor.interception.failsafe import ScriptInterceptionFailsafe

logger = logging.getLogger(__name__)

_METRICS_EXPR = "window.exposedI?." + "?.".join(METRICS_PATH)

READ_METRICS_SCRIPT = f"""(keys) => {{
    const metrics = {_METRICS_EXPR};
    const out = {{}};
    for (const key of keys) {{
        const value = metrics?.[key];
        out[key] = typeof value === 'number' ? value : null;
    }}
    return out;
}}"""

WRITE_METRIC_SCRIPT = f"""([key, value]) => {{
    const metrics = {_METRICS_EXPR};
    if (typeof metrics !== 'object' || metrics === null) {{
        return false;
    }}
    metrics[key] = value;
    return true;
}}"""


class PlaywrightPage:
    """Document, host runtime and interception boundary over a Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page
        self._pending: set[asyncio.Task[Any]] = set()

    # -------------------------------------------------------------------------
    # DocumentBoundary
    # -------------------------------------------------------------------------

    def append_script(self, src: str) -> None:
        logger.info("Appending script %s", src)
        self._spawn(self._page.add_script_tag(url=src), f"script {src}")

    def append_style(self, href: str) -> None:
        logger.info("Appending style %s", href)
        self._spawn(self._page.add_style_tag(url=href), f"style {href}")

    def append_raw_script(self, code: str) -> None:
        logger.debug("Appending raw script (%d chars)", len(code))
        self._spawn(self._page.add_script_tag(content=code), "raw script")

    async def drain(self) -> None:
        """Wait for scheduled insertions to settle."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, Any], label: str) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)

        def _done(finished: asyncio.Task[Any]) -> None:
            self._pending.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.warning("Failed to append %s", label, exc_info=exc)

        task.add_done_callback(_done)

    # -------------------------------------------------------------------------
    # HostRuntime
    # -------------------------------------------------------------------------

    async def read_metrics(self, keys: Iterable[str]) -> dict[str, float | None]:
        return await self._page.evaluate(READ_METRICS_SCRIPT, list(keys))

    async def write_metric(self, key: str, value: float) -> None:
        written = await self._page.evaluate(WRITE_METRIC_SCRIPT, [key, value])
        if not written:
            logger.warning("Vehicle metrics unavailable; could not write %s", key)

    # -------------------------------------------------------------------------
    # Host readiness and interception
    # -------------------------------------------------------------------------

    async def refresh_probe(self, probe: HostProbe) -> None:
        """Read the readiness snapshot into ``probe``."""
        probe.update(await self._page.evaluate(PROBE_SCRIPT))

    async def install_interception(self, failsafe: ScriptInterceptionFailsafe) -> None:
        """Route every script request through the failsafe."""

        async def _handle(route: Route, request: Request) -> None:
            if request.resource_type != "script":
                await route.continue_()
                return
            decision = failsafe.handle_script_load(request.url)
            if decision is ScriptLoadDecision.CANCEL:
                await route.abort()
            else:
                await route.continue_()

        await self._page.route("**/*", _handle)
