"""Snapshot of host readiness used by condition evaluators.

Conditions must be synchronous reads, but page state can only be read
asynchronously. The scheduler refreshes the snapshot before each tick and the
conditions read the cached values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Evaluated in the page. Every path segment is optional; absent segments mean
# "not ready yet".
PROBE_SCRIPT = """() => {
    const host = window.exposedI;
    const current = host?.current;
    return {
        toastify: typeof window.Toastify === 'function',
        runtime: typeof host !== 'undefined' && host !== null,
        version: document.getElementById('splash-version')?.innerText ?? null,
        firstFrame: current?.firstFrame === true,
        vehicleController: typeof current?.vehicleController !== 'undefined',
        metrics: typeof current?.vehicleController?.vehicleDef?.metrics === 'object',
    };
}"""

_MISSING = object()


def resolve_path(root: Any, path: str | tuple[str, ...]) -> Any:
    """Follow dotted ``path`` through mappings and attributes.

    Returns None if any segment is absent.
    """
    segments = path.split(".") if isinstance(path, str) else path
    current = root
    for segment in segments:
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        else:
            current = getattr(current, segment, _MISSING)
        if current is _MISSING:
            return None
    return current


@dataclass(frozen=True)
class HostSnapshot:
    """Readiness facts read from the page in one round trip."""

    toastify_ready: bool = False
    runtime_exposed: bool = False
    game_version: str | None = None
    first_frame: bool = False
    vehicle_present: bool = False
    metrics_present: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> HostSnapshot:
        if not isinstance(payload, Mapping):
            return cls()
        version = resolve_path(payload, "version")
        return cls(
            toastify_ready=resolve_path(payload, "toastify") is True,
            runtime_exposed=resolve_path(payload, "runtime") is True,
            game_version=version if isinstance(version, str) else None,
            first_frame=resolve_path(payload, "firstFrame") is True,
            vehicle_present=resolve_path(payload, "vehicleController") is True,
            metrics_present=resolve_path(payload, "metrics") is True,
        )


class HostProbe:
    """Holds the latest HostSnapshot; refreshed by the poll loop."""

    def __init__(self) -> None:
        self.snapshot = HostSnapshot()

    def update(self, payload: Mapping[str, Any] | None) -> HostSnapshot:
        self.snapshot = HostSnapshot.from_payload(payload)
        return self.snapshot
