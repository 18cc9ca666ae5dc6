from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from handling_editor.errors import GateConfigurationError
from handling_editor.gate import (
    Condition,
    ConditionGate,
    GateStatus,
    HookSection,
    HookSpec,
)


def _messages(caplog: pytest.LogCaptureFixture, text: str) -> int:
    return sum(1 for record in caplog.records if record.getMessage() == text)


def test_passed_condition_stays_passed() -> None:
    ready = {"value": True}
    passes = MagicMock(side_effect=lambda: ready["value"])
    gate = ConditionGate([Condition(name="ready", passes=passes)])

    assert gate.evaluate_all().is_passed
    ready["value"] = False

    assert gate.evaluate_all().is_passed
    assert gate.evaluate_all().is_passed
    assert passes.call_count == 1
    assert gate.state_of("ready").passed is True


def test_on_pass_hooks_fire_after_sticky_pass(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="handling_editor")
    run = MagicMock()
    gate = ConditionGate(
        [
            Condition(
                name="ready",
                passes=lambda: True,
                on_pass=HookSpec(message="passed again", message_once=False, run=run, run_once=False),
            )
        ]
    )

    for _ in range(3):
        gate.evaluate_all()

    assert _messages(caplog, "passed again") == 3
    assert run.call_count == 3


def test_message_once_defaults_to_true(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="handling_editor")
    gate = ConditionGate(
        [
            Condition(
                name="never",
                passes=lambda: False,
                before_check={"message": "checking"},
                on_fail={"message": "still waiting"},
            )
        ]
    )

    for _ in range(4):
        assert gate.evaluate_all().is_pending

    assert _messages(caplog, "checking") == 1
    assert _messages(caplog, "still waiting") == 1


def test_message_once_false_repeats(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="handling_editor")
    gate = ConditionGate(
        [
            Condition(
                name="never",
                passes=lambda: False,
                on_fail={"message": "still waiting", "messageOnce": False},
            )
        ]
    )

    for _ in range(4):
        gate.evaluate_all()

    assert _messages(caplog, "still waiting") == 4
    record = next(r for r in caplog.records if r.getMessage() == "still waiting")
    assert record.condition == "never"


def test_run_once_is_independent_of_message_once() -> None:
    run = MagicMock()
    gate = ConditionGate(
        [
            Condition(
                name="never",
                passes=lambda: False,
                on_fail=HookSpec(message="waiting", message_once=False, run=run),
            )
        ]
    )

    for _ in range(3):
        gate.evaluate_all()

    assert run.call_count == 1
    state = gate.state_of("never")
    assert state.on_fail_message is True
    assert state.on_fail_run is True
    assert state.failures == 3


def test_run_executes_after_message(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="handling_editor")
    seen: list[int] = []
    gate = ConditionGate(
        [
            Condition(
                name="ordered",
                passes=lambda: True,
                on_pass=HookSpec(
                    message="hello",
                    run=lambda: seen.append(_messages(caplog, "hello")),
                ),
            )
        ]
    )

    gate.evaluate_all()

    assert seen == [1]


def test_evaluation_stops_at_first_failure() -> None:
    later = MagicMock(return_value=True)
    gate = ConditionGate(
        [
            Condition(name="A", passes=lambda: False),
            Condition(name="B", passes=later),
        ]
    )

    result = gate.evaluate_all()

    assert result.status is GateStatus.PENDING
    assert result.condition == "A"
    later.assert_not_called()
    assert gate.state_of("B") is None


def test_fatal_on_fail_halts_gate() -> None:
    on_fail_run = MagicMock()
    later = MagicMock(return_value=True)
    gate = ConditionGate(
        [
            Condition(
                name="version",
                passes=lambda: False,
                on_fail=HookSpec(message="unsupported", run=on_fail_run, fatal=True),
            ),
            Condition(name="later", passes=later),
        ]
    )

    result = gate.evaluate_all()

    assert result.is_fatal
    assert result.condition == "version"
    assert result.section is HookSection.ON_FAIL
    assert "version" in result.reason
    on_fail_run.assert_called_once()
    later.assert_not_called()


def test_fatal_before_check_skips_evaluation() -> None:
    passes = MagicMock(return_value=True)
    on_pass = MagicMock()
    gate = ConditionGate(
        [
            Condition(
                name="blocked",
                passes=passes,
                before_check={"fatal": True},
                on_pass={"run": on_pass},
            )
        ]
    )

    result = gate.evaluate_all()

    assert result.is_fatal
    assert result.section is HookSection.BEFORE_CHECK
    passes.assert_not_called()
    on_pass.assert_not_called()


def test_fatal_after_escalates_on_fail() -> None:
    gate = ConditionGate(
        [Condition(name="slow", passes=lambda: False, fatal_after=3)]
    )

    assert gate.evaluate_all().is_pending
    assert gate.evaluate_all().is_pending
    result = gate.evaluate_all()

    assert result.is_fatal
    assert result.condition == "slow"


def test_state_created_lazily() -> None:
    gate = ConditionGate([Condition(name="lazy", passes=lambda: True)])

    assert gate.state_of("lazy") is None
    gate.evaluate_all()
    assert gate.state_of("lazy") is not None


def test_gates_do_not_share_state() -> None:
    condition = Condition(name="shared", passes=lambda: True)
    first = ConditionGate([condition])
    second = ConditionGate([condition])

    first.evaluate_all()

    assert first.state_of("shared").passed is True
    assert second.state_of("shared") is None


def test_invalid_section_name_is_configuration_error() -> None:
    condition = Condition(name="c", passes=lambda: True)
    gate = ConditionGate([condition])

    with pytest.raises(GateConfigurationError, match="onSuccess"):
        gate.handle_section(condition, "onSuccess")


def test_unknown_hook_field_is_configuration_error() -> None:
    with pytest.raises(GateConfigurationError, match="on_fail"):
        Condition(name="c", passes=lambda: True, on_fail={"throwException": True})


def test_non_mapping_hook_is_configuration_error() -> None:
    with pytest.raises(GateConfigurationError):
        Condition(name="c", passes=lambda: True, on_pass="log me")


def test_duplicate_condition_names_rejected() -> None:
    with pytest.raises(GateConfigurationError, match="Duplicate"):
        ConditionGate(
            [
                Condition(name="dup", passes=lambda: True),
                Condition(name="dup", passes=lambda: False),
            ]
        )


def test_hook_defaults() -> None:
    hook = HookSpec()

    assert hook.message is None
    assert hook.message_once is True
    assert hook.run is None
    assert hook.run_once is True
    assert hook.fatal is False
