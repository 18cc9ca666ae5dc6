"""Interfaces to the page, the host runtime, and the notification widget.

The gate engine only talks to the outside world through these protocols. The
Playwright adapter in ``handling_editor.browser`` implements them for a live
page; tests use small in-memory doubles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from handling_editor.notifications import Toast


class DocumentBoundary(Protocol):
    """Append-only insertion of elements into the page document."""

    def append_script(self, src: str) -> None:
        """Append an externally loaded ``<script>``."""
        ...

    def append_style(self, href: str) -> None:
        """Append a stylesheet ``<link>``."""
        ...

    def append_raw_script(self, code: str) -> None:
        """Append an inline ``<script>`` that runs with page privileges."""
        ...


class Notifier(Protocol):
    """Fire-and-forget user notification."""

    def show_message(self, toast: Toast) -> None:
        """Show a toast; nothing is returned to the caller."""
        ...


class HostRuntime(Protocol):
    """Read/write access to the vehicle metrics property bag."""

    async def read_metrics(self, keys: Iterable[str]) -> dict[str, float | None]:
        """Read the given metric keys; missing keys map to None."""
        ...

    async def write_metric(self, key: str, value: float) -> None:
        """Write one metric value."""
        ...
