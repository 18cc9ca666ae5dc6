"""Host script interception and failsafe."""

from handling_editor.interception.failsafe import (
    SUBSTITUTE_CONDITION_NAME,
    InterceptionContext,
    InterceptionState,
    ScriptInterceptionFailsafe,
    ScriptLoadDecision,
)

__all__ = [
    "SUBSTITUTE_CONDITION_NAME",
    "InterceptionContext",
    "InterceptionState",
    "ScriptInterceptionFailsafe",
    "ScriptLoadDecision",
]
