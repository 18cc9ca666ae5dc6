"""Wire dependencies, conditions, the failsafe and the scheduler together.

Startup sequence:
1. The failsafe sees the host's primary script load, cancels it and calls
   ``HandlingEditor.initialize``.
2. ``initialize`` loads every dependency (the modified script resolves from the
   captured identifier) and starts polling the gate.
3. When every condition has passed, ``start_editor`` shows the welcome toasts
   and loads the handling values. A fatal condition halts polling instead; if
   it was the modified script, the failsafe restores the original.
"""

from __future__ import annotations

import asyncio
import logging
import re
from enum import Enum
from typing import TYPE_CHECKING

from handling_editor.gate import Condition, ConditionGate, HookSpec
from handling_editor.host.metrics import HandlingSession
from handling_editor.host.probe import HostProbe
from handling_editor.interception import InterceptionContext, ScriptInterceptionFailsafe
from handling_editor.notifications import Toast, ToastStyle
from handling_editor.resources import Dependency, ResourceLoader
from handling_editor.scheduler import PollScheduler

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from handling_editor.boundaries import DocumentBoundary, HostRuntime, Notifier
    from handling_editor.gate import GateResult
    from handling_editor.models.settings import Settings

logger = logging.getLogger(__name__)

PROJECT_LINK = (
    '<b><a style="color: #9bb5ff" href="https://github.com/Opinion/slowroads-handling-editor">'
    "Opinion's Handling Editor</a></b></br>"
)
UNSUPPORTED_VERSION_TOAST = (
    PROJECT_LINK + "Game version is not supported. "
    "Please check if the handling editor has a new release available."
)
OPEN_HINT_TOAST = (
    "You can open the handling editor by pressing the cog in the <b>top left</b> corner."
)
WELCOME_TOAST = "\U0001f527 Now playing with Opinion's handling editor. Have fun out there :)"


class EditorOutcome(str, Enum):
    """Terminal result of a startup attempt."""

    STARTED = "started"
    HALTED = "halted"
    REVERTED = "reverted"


def build_dependencies(
    settings: Settings, failsafe: ScriptInterceptionFailsafe, probe: HostProbe
) -> list[Dependency]:
    """External resources the editor needs, in load order."""
    return [
        Dependency(
            name="Modified game script",
            scripts=(failsafe.substitute_url,),
            is_loaded=lambda: probe.snapshot.runtime_exposed,
        ),
        Dependency(
            name="Toastify.js",
            scripts=(settings.toastify_script_url,),
            styles=(settings.toastify_style_url,),
            is_loaded=lambda: probe.snapshot.toastify_ready,
        ),
    ]


def build_conditions(
    settings: Settings,
    dependencies: dict[str, Dependency],
    failsafe: ScriptInterceptionFailsafe,
    probe: HostProbe,
    notifier: Notifier,
) -> list[Condition]:
    """Readiness chain; each condition assumes the ones before it hold."""
    version = settings.supported_version

    def show_unsupported_version() -> None:
        notifier.show_message(
            Toast(text=UNSUPPORTED_VERSION_TOAST, style=ToastStyle.ERROR, duration_ms=100000)
        )

    return [
        failsafe.build_condition(
            dependencies["Modified game script"].is_loaded,
            fatal_after=settings.substitute_fail_limit,
        ),
        Condition(
            name="Toastify.js",
            passes=dependencies["Toastify.js"].is_loaded,
            before_check={"message": "Waiting for Toastify.js to finish loading..."},
            on_pass={"message": "Dependency successfully loaded."},
            on_fail={"message": "Dependency has not loaded yet.", "message_once": False},
        ),
        Condition(
            name="Game version",
            passes=lambda: probe.snapshot.game_version == version,
            before_check={"message": f"Required game version: '{version}'."},
            on_pass={"message": "The game version is supported."},
            on_fail=HookSpec(
                message=(
                    "Game version is not supported. Please check if the handling "
                    "editor has a new release available."
                ),
                run=show_unsupported_version,
                fatal=True,
            ),
        ),
        Condition(
            name="Game start",
            passes=lambda: probe.snapshot.first_frame,
            before_check={"message": "Waiting for the game to start (press 'begin')..."},
            on_pass={"message": "The game has started."},
        ),
        Condition(
            name="Vehicle spawn",
            passes=lambda: probe.snapshot.vehicle_present,
            before_check={"message": "Waiting for the vehicle to spawn..."},
            on_pass={"message": "Found 'vehicleController'."},
            on_fail={
                "message": "Couldn't find 'vehicleController'. This usually takes a few seconds.",
                "message_once": False,
            },
        ),
    ]


class HandlingEditor:
    """Gate the handling editor behind the host's readiness chain."""

    def __init__(
        self,
        settings: Settings,
        *,
        document: DocumentBoundary,
        notifier: Notifier,
        runtime: HostRuntime,
        probe: HostProbe | None = None,
        before_tick: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.settings = settings
        self.probe = probe or HostProbe()
        self.notifier = notifier
        self.outcome: EditorOutcome | None = None
        self._initialized = asyncio.Event()

        context = InterceptionContext(
            original_resource_pattern=re.compile(settings.original_script_pattern),
            substitute_prefix=settings.modified_script_prefix,
            substitute_suffix=settings.modified_script_suffix,
            bypass_marker=settings.bypass_marker,
        )
        self.failsafe = ScriptInterceptionFailsafe(
            context, document=document, notifier=notifier, on_intercept=self.initialize
        )
        dependencies = build_dependencies(settings, self.failsafe, self.probe)
        self.loader = ResourceLoader(document, dependencies)
        self.gate = ConditionGate(
            build_conditions(
                settings,
                {dependency.name: dependency for dependency in dependencies},
                self.failsafe,
                self.probe,
                notifier,
            )
        )
        self.scheduler = PollScheduler(self.gate.evaluate_all, before_tick=before_tick)
        self.session = HandlingSession(runtime, notifier)

    def initialize(self) -> None:
        """Load dependencies and start polling the readiness chain."""
        logger.info("Initializing...")
        self.loader.load_all()
        logger.info("Before we start the handling editor we need to wait for some conditions...")
        self.scheduler.start(self.settings.poll_interval_ms, self.start_editor, self._on_fatal)
        self._initialized.set()

    async def start_editor(self) -> None:
        """Continuation run once every condition has passed."""
        logger.info("Passed all conditions. Starting handling editor!")
        self.notifier.show_message(Toast(text=OPEN_HINT_TOAST, duration_ms=25000))
        self.notifier.show_message(
            Toast(text=WELCOME_TOAST, style=ToastStyle.INFO, duration_ms=12000)
        )
        try:
            await self.session.load()
        except Exception:
            logger.exception("Failed to load the handling values; editor not started.")
            self.outcome = EditorOutcome.HALTED
            return
        self.outcome = EditorOutcome.STARTED

    def _on_fatal(self, result: GateResult) -> None:
        if self.failsafe.handle_gate_fatal(result):
            self.outcome = EditorOutcome.REVERTED
        else:
            self.outcome = EditorOutcome.HALTED

    async def wait(self) -> EditorOutcome | None:
        """Wait for interception, then for the gate to reach a terminal state."""
        await self._initialized.wait()
        await self.scheduler.wait()
        return self.outcome
