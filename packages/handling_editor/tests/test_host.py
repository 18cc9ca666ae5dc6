from __future__ import annotations

from types import SimpleNamespace

import pytest
from handling_editor.errors import HandlingValueError
from handling_editor.host import (
    HANDLING_KEYS,
    HandlingSession,
    HostProbe,
    HostSnapshot,
    parse_handling_value,
    resolve_path,
)
from handling_editor.host.metrics import RESET_UNAVAILABLE_MESSAGE


def test_resolve_path_tolerates_missing_segments() -> None:
    root = {"current": SimpleNamespace(vehicleController=None)}

    assert resolve_path(root, "current.vehicleController") is None
    assert resolve_path(root, "current.vehicleController.vehicleDef.metrics") is None
    assert resolve_path({}, ("current", "firstFrame")) is None
    assert resolve_path(None, "current") is None


def test_resolve_path_reads_mappings_and_attributes() -> None:
    metrics = {"mass": 1200.0}
    root = {"current": SimpleNamespace(vehicleController={"vehicleDef": {"metrics": metrics}})}

    assert resolve_path(root, "current.vehicleController.vehicleDef.metrics") is metrics


def test_snapshot_from_partial_payload() -> None:
    snapshot = HostSnapshot.from_payload({"toastify": True, "version": "1.0.1"})

    assert snapshot.toastify_ready is True
    assert snapshot.game_version == "1.0.1"
    assert snapshot.runtime_exposed is False
    assert snapshot.first_frame is False
    assert snapshot.vehicle_present is False


def test_snapshot_from_garbage_payload() -> None:
    assert HostSnapshot.from_payload(None) == HostSnapshot()
    assert HostSnapshot.from_payload({"version": 101}).game_version is None


def test_probe_update_replaces_snapshot() -> None:
    probe = HostProbe()

    probe.update({"firstFrame": True, "vehicleController": True})

    assert probe.snapshot.first_frame is True
    assert probe.snapshot.vehicle_present is True


def test_parse_handling_value() -> None:
    assert parse_handling_value("mass", "950.5") == 950.5
    assert parse_handling_value("topSpeed", 80) == 80.0
    with pytest.raises(HandlingValueError, match="not a number"):
        parse_handling_value("mass", "heavy")
    with pytest.raises(HandlingValueError, match="finite"):
        parse_handling_value("mass", "nan")
    with pytest.raises(HandlingValueError, match="Unknown"):
        parse_handling_value("turbo", "1")


@pytest.mark.asyncio
async def test_session_load_records_defaults_once(runtime, notifier) -> None:
    session = HandlingSession(runtime, notifier)

    values = await session.load()
    assert set(values) == set(HANDLING_KEYS)
    assert values["mass"] == 1200.0
    assert values["drag"] is None

    runtime.metrics["mass"] = 900.0
    await session.load()
    assert session.defaults["mass"] == 1200.0
    assert session.values["mass"] == 900.0


@pytest.mark.asyncio
async def test_session_update_writes_parsed_value(runtime, notifier) -> None:
    session = HandlingSession(runtime, notifier)

    value = await session.update("topSpeed", "75")

    assert value == 75.0
    assert runtime.metrics["topSpeed"] == 75.0
    with pytest.raises(HandlingValueError):
        await session.update("topSpeed", "fast")
    assert runtime.writes == [("topSpeed", 75.0)]


@pytest.mark.asyncio
async def test_session_reset_restores_defaults(runtime, notifier) -> None:
    session = HandlingSession(runtime, notifier)
    await session.load()
    await session.update("mass", "500")

    assert await session.reset() is True

    assert runtime.metrics["mass"] == 1200.0
    assert session.values["mass"] == 1200.0
    assert notifier.toasts == []


@pytest.mark.asyncio
async def test_session_reset_without_defaults_notifies(runtime, notifier) -> None:
    session = HandlingSession(runtime, notifier)

    assert await session.reset() is False

    assert runtime.writes == []
    assert notifier.toasts[0].text == RESET_UNAVAILABLE_MESSAGE
