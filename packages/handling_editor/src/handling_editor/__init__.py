"""Handling editor: readiness gate, script failsafe and handling values for a browser game."""

from handling_editor.app import EditorOutcome, HandlingEditor, build_conditions, build_dependencies
from handling_editor.gate import (
    Condition,
    ConditionGate,
    ConditionState,
    GateResult,
    GateStatus,
    HookSection,
    HookSpec,
)
from handling_editor.interception import (
    InterceptionContext,
    InterceptionState,
    ScriptInterceptionFailsafe,
    ScriptLoadDecision,
)
from handling_editor.models import Settings, load_settings
from handling_editor.notifications import Toast, ToastifyNotifier, ToastStyle
from handling_editor.resources import Dependency, ResourceLoader
from handling_editor.scheduler import PollScheduler, SchedulerState

__all__ = [
    "Condition",
    "ConditionGate",
    "ConditionState",
    "Dependency",
    "EditorOutcome",
    "GateResult",
    "GateStatus",
    "HandlingEditor",
    "HookSection",
    "HookSpec",
    "InterceptionContext",
    "InterceptionState",
    "PollScheduler",
    "ResourceLoader",
    "SchedulerState",
    "ScriptInterceptionFailsafe",
    "ScriptLoadDecision",
    "Settings",
    "Toast",
    "ToastStyle",
    "ToastifyNotifier",
    "build_conditions",
    "build_dependencies",
    "load_settings",
]
