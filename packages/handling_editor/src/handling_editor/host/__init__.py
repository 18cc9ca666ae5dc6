"""Host runtime readiness and metrics access."""

from handling_editor.host.metrics import HANDLING_KEYS, HandlingSession, parse_handling_value
from handling_editor.host.probe import HostProbe, HostSnapshot, resolve_path

__all__ = [
    "HANDLING_KEYS",
    "HandlingSession",
    "HostProbe",
    "HostSnapshot",
    "parse_handling_value",
    "resolve_path",
]
