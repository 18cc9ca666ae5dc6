"""Command line entry point: open the game in Chromium with the editor gated in.

Usage:
    handling-editor
    handling-editor --headless --set topSpeed=120 --set mass=900 --show
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from playwright.async_api import async_playwright

from handling_editor.app import EditorOutcome, HandlingEditor
from handling_editor.browser import PlaywrightPage
from handling_editor.errors import GateConfigurationError, HandlingValueError
from handling_editor.host.metrics import parse_handling_value
from handling_editor.host.probe import HostProbe
from handling_editor.logging_utils import configure_logging
from handling_editor.models.settings import Settings, load_settings
from handling_editor.notifications import ToastifyNotifier

logger = logging.getLogger(__name__)

EXIT_STARTED = 0
EXIT_HALTED = 1
EXIT_CONFIG_ERROR = 2


def _parse_overrides(values: list[str]) -> dict[str, float]:
    overrides: dict[str, float] = {}
    for item in values:
        key, sep, raw = item.partition("=")
        if not sep:
            msg = f"Expected KEY=VALUE, got '{item}'."
            raise HandlingValueError(msg)
        overrides[key.strip()] = parse_handling_value(key.strip(), raw.strip())
    return overrides


async def run(
    settings: Settings,
    *,
    headless: bool,
    overrides: dict[str, float],
    show: bool,
    hold_seconds: float,
    timeout_seconds: float,
) -> EditorOutcome | None:
    """Open the page, wait for the gate and apply handling overrides."""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless)
        try:
            page = await browser.new_page()
            adapter = PlaywrightPage(page)
            probe = HostProbe()
            editor = HandlingEditor(
                settings,
                document=adapter,
                notifier=ToastifyNotifier(adapter),
                runtime=adapter,
                probe=probe,
                before_tick=lambda: adapter.refresh_probe(probe),
            )
            await adapter.install_interception(editor.failsafe)
            await page.goto(settings.page_url, wait_until="commit")

            try:
                outcome = await asyncio.wait_for(editor.wait(), timeout_seconds)
            except TimeoutError:
                logger.warning(
                    "Gate did not finish within %.0fs (state: %s)",
                    timeout_seconds,
                    editor.failsafe.state.value,
                )
                editor.scheduler.stop()
                outcome = None
            logger.info("Editor outcome: %s", outcome.value if outcome else "none")

            if outcome is EditorOutcome.STARTED:
                for key, value in overrides.items():
                    await editor.session.update(key, value)
                if show:
                    values = await editor.session.load()
                    for key, value in values.items():
                        print(f"{key:>16} = {value}")

            if hold_seconds > 0:
                await asyncio.sleep(hold_seconds)
            await adapter.drain()
            return outcome
        finally:
            await browser.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Open the game with the handling editor gated behind its readiness checks"
    )
    parser.add_argument("--headless", action="store_true", help="Run Chromium headless")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Handling value to apply once the editor has started (repeatable)",
    )
    parser.add_argument("--show", action="store_true", help="Print handling values after start")
    parser.add_argument(
        "--hold",
        type=float,
        default=0.0,
        metavar="SECONDS",
        help="Keep the browser open for this long after the gate finishes",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=300.0,
        metavar="SECONDS",
        help="Give up if the gate has not finished after this long",
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        overrides = _parse_overrides(args.overrides)
    except (GateConfigurationError, HandlingValueError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)
    outcome = asyncio.run(
        run(
            settings,
            headless=args.headless,
            overrides=overrides,
            show=args.show,
            hold_seconds=args.hold,
            timeout_seconds=args.timeout,
        )
    )
    return EXIT_STARTED if outcome is EditorOutcome.STARTED else EXIT_HALTED


if __name__ == "__main__":
    sys.exit(main())
