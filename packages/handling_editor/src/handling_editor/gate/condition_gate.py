"""Ordered condition gate with sticky passes and once-only hook side effects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from handling_editor.errors import GateConfigurationError
from handling_editor.gate.models import (
    Condition,
    ConditionState,
    GateResult,
    HookSection,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class ConditionGate:
    """Evaluate an ordered list of conditions once per tick.

    Behavior:
    - Conditions are evaluated in declared order and evaluation stops at the
      first condition that does not pass.
    - Once a condition passes it stays passed; ``passes`` is not called again
      but its ``on_pass`` section is still handled on every tick.
    - A fatal section ends the evaluation with a FATAL result. No later
      section or condition is handled on that tick.
    """

    def __init__(self, conditions: Iterable[Condition] = ()) -> None:
        self._conditions: dict[str, Condition] = {}
        self._states: dict[str, ConditionState] = {}
        for condition in conditions:
            self.add(condition)

    def add(self, condition: Condition) -> None:
        """Append a condition to the end of the evaluation order."""
        if not isinstance(condition, Condition):
            msg = f"Expected a Condition, got {type(condition).__name__}."
            raise GateConfigurationError(msg)
        if condition.name in self._conditions:
            msg = f"Duplicate condition '{condition.name}'."
            raise GateConfigurationError(msg)
        self._conditions[condition.name] = condition

    @property
    def conditions(self) -> list[Condition]:
        return list(self._conditions.values())

    def get(self, name: str) -> Condition | None:
        return self._conditions.get(name)

    def state_of(self, name: str) -> ConditionState | None:
        """Return the state of a condition, or None if it was never evaluated."""
        return self._states.get(name)

    def evaluate_all(self) -> GateResult:
        """Check all conditions in order.

        Returns:
            PASSED if every condition passed, otherwise the PENDING or FATAL
            result of the first condition that did not pass.
        """
        for condition in self._conditions.values():
            result = self.check_condition(condition)
            if not result.is_passed:
                return result
        return GateResult.passed()

    def check_condition(self, condition: Condition) -> GateResult:
        """Check one condition and handle its hook sections."""
        state = self._states.setdefault(condition.name, ConditionState())

        halted = self.handle_section(condition, HookSection.BEFORE_CHECK)
        if halted is not None:
            return halted

        if state.passed or condition.passes():
            state.passed = True
            halted = self.handle_section(condition, HookSection.ON_PASS)
            return halted or GateResult.passed(condition.name)

        state.failures += 1
        halted = self.handle_section(condition, HookSection.ON_FAIL)
        return halted or GateResult.pending(condition.name)

    def handle_section(
        self, condition: Condition, section: HookSection | str
    ) -> GateResult | None:
        """Log the message, run the side effect, then report a fatal halt.

        Returns:
            A FATAL result if the section halts the gate, otherwise None.
        """
        section = HookSection.coerce(section)
        hook = condition.hook(section)
        state = self._states.setdefault(condition.name, ConditionState())

        if hook.message is not None and (
            not state.message_emitted(section) or not hook.message_once
        ):
            logger.info("%s", hook.message, extra={"condition": condition.name})
            state.mark_message_emitted(section)

        if hook.run is not None and (not state.has_run(section) or not hook.run_once):
            hook.run()
            state.mark_run(section)

        if not self._is_fatal(condition, section, state):
            return None

        reason = (
            f"Condition '{condition.name}' halted the gate in section '{section.value}'."
        )
        logger.warning(
            "Halting gate: fatal '%s' section (failures=%d)",
            section.value,
            state.failures,
            extra={"condition": condition.name},
        )
        return GateResult.fatal(condition.name, section, reason)

    @staticmethod
    def _is_fatal(condition: Condition, section: HookSection, state: ConditionState) -> bool:
        if condition.hook(section).fatal:
            return True
        return (
            section is HookSection.ON_FAIL
            and condition.fatal_after is not None
            and state.failures >= condition.fatal_after
        )
