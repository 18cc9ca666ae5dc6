"""Condition gate models.

A condition is a named boolean gate evaluated once per poll tick. Each
condition carries up to three hook sections:

- ``before_check``: handled before the condition is evaluated
- ``on_pass``: handled after the condition passed (also on every tick after
  the first pass, since a passed condition stays passed)
- ``on_fail``: handled after the condition failed

Every section may log a message, run a side effect, and halt the gate. Messages
and side effects default to firing once; ``message_once=False`` and
``run_once=False`` make them fire on every qualifying tick.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from handling_editor.errors import GateConfigurationError


class HookSection(str, Enum):
    """Lifecycle section of a condition."""

    BEFORE_CHECK = "before_check"
    ON_PASS = "on_pass"
    ON_FAIL = "on_fail"

    @classmethod
    def coerce(cls, value: HookSection | str) -> HookSection:
        """Return the section for ``value`` or raise a configuration error."""
        try:
            return cls(value)
        except ValueError:
            msg = f"Section '{value}' is not valid."
            raise GateConfigurationError(msg) from None


class HookSpec(BaseModel, frozen=True, extra="forbid"):
    """Behaviour of one hook section."""

    message: str | None = None
    message_once: bool = Field(default=True, alias="messageOnce")
    run: Callable[[], Any] | None = None
    run_once: bool = Field(default=True, alias="runOnce")
    fatal: bool = False

    model_config = {"populate_by_name": True}


HookLike = HookSpec | Mapping[str, Any] | None


def _coerce_hook(condition_name: str, section: HookSection, value: HookLike) -> HookSpec:
    if value is None:
        return HookSpec()
    if isinstance(value, HookSpec):
        return value
    if not isinstance(value, Mapping):
        msg = (
            f"Condition '{condition_name}': section '{section.value}' must be a mapping "
            f"or HookSpec, got {type(value).__name__}."
        )
        raise GateConfigurationError(msg)
    try:
        return HookSpec.model_validate(dict(value))
    except ValidationError as exc:
        msg = f"Condition '{condition_name}': invalid '{section.value}' section: {exc}"
        raise GateConfigurationError(msg) from exc


@dataclass(frozen=True)
class Condition:
    """Named readiness check with lifecycle hooks.

    ``fatal_after`` escalates the ``on_fail`` section to fatal once the
    condition has failed that many evaluations.
    """

    name: str
    passes: Callable[[], bool]
    before_check: HookLike = None
    on_pass: HookLike = None
    on_fail: HookLike = None
    fatal_after: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            msg = f"Condition name must be a non-empty string, got {self.name!r}."
            raise GateConfigurationError(msg)
        if not callable(self.passes):
            msg = f"Condition '{self.name}': 'passes' must be callable."
            raise GateConfigurationError(msg)
        if self.fatal_after is not None and self.fatal_after < 1:
            msg = f"Condition '{self.name}': 'fatal_after' must be >= 1."
            raise GateConfigurationError(msg)
        for section in HookSection:
            hook = _coerce_hook(self.name, section, getattr(self, section.value))
            object.__setattr__(self, section.value, hook)

    def hook(self, section: HookSection | str) -> HookSpec:
        """Return the normalized hook for a section."""
        return getattr(self, HookSection.coerce(section).value)


@dataclass
class ConditionState:
    """Mutable per-condition bookkeeping owned by a ConditionGate."""

    passed: bool = False
    failures: int = 0
    before_check_message: bool = False
    before_check_run: bool = False
    on_pass_message: bool = False
    on_pass_run: bool = False
    on_fail_message: bool = False
    on_fail_run: bool = False

    def message_emitted(self, section: HookSection) -> bool:
        return getattr(self, f"{section.value}_message")

    def mark_message_emitted(self, section: HookSection) -> None:
        setattr(self, f"{section.value}_message", True)

    def has_run(self, section: HookSection) -> bool:
        return getattr(self, f"{section.value}_run")

    def mark_run(self, section: HookSection) -> None:
        setattr(self, f"{section.value}_run", True)


class GateStatus(str, Enum):
    """Outcome of a gate evaluation."""

    PENDING = "pending"
    PASSED = "passed"
    FATAL = "fatal"


@dataclass(frozen=True)
class GateResult:
    """Tri-state evaluation result returned up the call chain."""

    status: GateStatus
    condition: str | None = None
    section: HookSection | None = None
    reason: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def passed(cls, condition: str | None = None) -> GateResult:
        return cls(status=GateStatus.PASSED, condition=condition)

    @classmethod
    def pending(cls, condition: str) -> GateResult:
        return cls(status=GateStatus.PENDING, condition=condition)

    @classmethod
    def fatal(cls, condition: str, section: HookSection, reason: str) -> GateResult:
        return cls(status=GateStatus.FATAL, condition=condition, section=section, reason=reason)

    @property
    def is_passed(self) -> bool:
        return self.status is GateStatus.PASSED

    @property
    def is_pending(self) -> bool:
        return self.status is GateStatus.PENDING

    @property
    def is_fatal(self) -> bool:
        return self.status is GateStatus.FATAL
