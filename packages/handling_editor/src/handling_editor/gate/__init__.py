"""Condition gate: ordered readiness checks with lifecycle hooks."""

from handling_editor.gate.condition_gate import ConditionGate
from handling_editor.gate.models import (
    Condition,
    ConditionState,
    GateResult,
    GateStatus,
    HookSection,
    HookSpec,
)

__all__ = [
    "Condition",
    "ConditionGate",
    "ConditionState",
    "GateResult",
    "GateStatus",
    "HookSection",
    "HookSpec",
]
