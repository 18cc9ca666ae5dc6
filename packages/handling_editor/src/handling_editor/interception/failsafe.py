"""Swap the host's primary script for a modified mirror, reverting on failure.

States:
- WAITING_FOR_ORIGINAL: watch script loads for the host's primary script.
- SUBSTITUTED: the original load was cancelled; the mirror is loading and the
  gate polls for it.
- REVERTED: the mirror never proved itself; the original was re-requested with
  the bypass marker. Terminal for the page lifetime.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from handling_editor.errors import GateConfigurationError
from handling_editor.gate.models import Condition, HookSpec
from handling_editor.notifications import PERSISTENT, Toast, ToastStyle

if TYPE_CHECKING:
    from collections.abc import Callable

    from handling_editor.boundaries import DocumentBoundary, Notifier
    from handling_editor.gate.models import GateResult

logger = logging.getLogger(__name__)

DEFAULT_BYPASS_MARKER = "?ignore"
SUBSTITUTE_CONDITION_NAME = "Modified game script"
REVERT_MESSAGE = (
    "<b>Opinion's Handling Editor</b></br>The modified game script could not be loaded. "
    "Falling back to the original game; the handling editor is disabled for this session."
)


class InterceptionState(str, Enum):
    """Failsafe state."""

    WAITING_FOR_ORIGINAL = "waiting_for_original"
    SUBSTITUTED = "substituted"
    REVERTED = "reverted"


class ScriptLoadDecision(str, Enum):
    """What to do with an outgoing script load."""

    PROCEED = "proceed"
    CANCEL = "cancel"


@dataclass
class InterceptionContext:
    """Pattern and URLs used to recognise and replace the host script.

    The pattern must capture the version identifier, either as a group named
    ``identifier`` or as its first group.
    """

    original_resource_pattern: re.Pattern[str]
    substitute_prefix: str
    substitute_suffix: str
    bypass_marker: str = DEFAULT_BYPASS_MARKER
    original_resource_url: str | None = None
    identifier: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.original_resource_pattern, str):
            self.original_resource_pattern = re.compile(self.original_resource_pattern)
        if self.original_resource_pattern.groups < 1:
            msg = "Original resource pattern must capture the version identifier."
            raise GateConfigurationError(msg)
        if not self.bypass_marker:
            msg = "Bypass marker must not be empty."
            raise GateConfigurationError(msg)

    @property
    def captured(self) -> bool:
        return self.original_resource_url is not None

    def capture(self, url: str) -> bool:
        """Record ``url`` and its identifier if it is the host's primary script."""
        match = self.original_resource_pattern.search(url)
        if match is None:
            return False
        groups = match.groupdict()
        identifier = groups.get("identifier") or match.group(1)
        if not identifier:
            return False
        self.original_resource_url = url
        self.identifier = identifier
        return True

    def substitute_url(self) -> str | None:
        """Mirror URL for the captured identifier, or None before capture."""
        if self.identifier is None:
            return None
        return f"{self.substitute_prefix}{self.identifier}{self.substitute_suffix}"

    def bypass_url(self) -> str | None:
        """Original URL with the bypass marker appended, or None before capture."""
        if self.original_resource_url is None:
            return None
        return f"{self.original_resource_url}{self.bypass_marker}"


class ScriptInterceptionFailsafe:
    """Decide script loads and revert to the original script on gate failure."""

    def __init__(
        self,
        context: InterceptionContext,
        *,
        document: DocumentBoundary,
        notifier: Notifier,
        on_intercept: Callable[[], None],
    ) -> None:
        self.context = context
        self._document = document
        self._notifier = notifier
        self._on_intercept = on_intercept
        self._state = InterceptionState.WAITING_FOR_ORIGINAL

    @property
    def state(self) -> InterceptionState:
        return self._state

    def handle_script_load(self, url: str) -> ScriptLoadDecision:
        """Decide an outgoing script load.

        Bypassed URLs always proceed, so a reverted reload is never captured
        a second time.
        """
        if url.endswith(self.context.bypass_marker):
            logger.info("Letting bypassed script through: %s", url)
            return ScriptLoadDecision.PROCEED
        if self._state is not InterceptionState.WAITING_FOR_ORIGINAL:
            return ScriptLoadDecision.PROCEED
        if not self.context.capture(url):
            return ScriptLoadDecision.PROCEED

        logger.info(
            "Detected game script '%s' (identifier %s); substituting %s",
            url,
            self.context.identifier,
            self.context.substitute_url(),
        )
        self._state = InterceptionState.SUBSTITUTED
        self._on_intercept()
        return ScriptLoadDecision.CANCEL

    def substitute_url(self) -> str | None:
        """Lazy resolver for the modified-script dependency."""
        return self.context.substitute_url()

    def build_condition(self, is_loaded: Callable[[], bool], fatal_after: int) -> Condition:
        """Condition that holds once the substitute exposed the host runtime."""
        return Condition(
            name=SUBSTITUTE_CONDITION_NAME,
            passes=is_loaded,
            before_check=HookSpec(message="Waiting for the modified game script to load..."),
            on_pass=HookSpec(message="Modified game script loaded."),
            on_fail=HookSpec(message="Modified game script has not loaded yet."),
            fatal_after=fatal_after,
        )

    def handle_gate_fatal(self, result: GateResult) -> bool:
        """Revert to the original script if ``result`` names the substitute condition.

        Returns:
            True if the failsafe reverted.
        """
        if result.condition != SUBSTITUTE_CONDITION_NAME:
            return False
        if self._state is not InterceptionState.SUBSTITUTED:
            return False

        bypass_url = self.context.bypass_url()
        self._state = InterceptionState.REVERTED
        logger.warning("Substitute never loaded; re-requesting original script %s", bypass_url)
        self._notifier.show_message(
            Toast(text=REVERT_MESSAGE, style=ToastStyle.ERROR, duration_ms=PERSISTENT)
        )
        if bypass_url is not None:
            self._document.append_script(bypass_url)
        return True
