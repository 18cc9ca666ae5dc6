from __future__ import annotations

import os

import pytest
from handling_editor.notifications import Toast


class FakeDocument:
    """Records appended elements in insertion order."""

    def __init__(self) -> None:
        self.elements: list[tuple[str, str]] = []

    def append_script(self, src: str) -> None:
        self.elements.append(("script", src))

    def append_style(self, href: str) -> None:
        self.elements.append(("style", href))

    def append_raw_script(self, code: str) -> None:
        self.elements.append(("raw", code))

    @property
    def scripts(self) -> list[str]:
        return [value for kind, value in self.elements if kind == "script"]

    @property
    def styles(self) -> list[str]:
        return [value for kind, value in self.elements if kind == "style"]


class FakeNotifier:
    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def show_message(self, toast: Toast) -> None:
        self.toasts.append(toast)


class FakeRuntime:
    """In-memory vehicle metrics bag."""

    def __init__(self, metrics: dict[str, float] | None = None) -> None:
        self.metrics = dict(metrics or {})
        self.writes: list[tuple[str, float]] = []

    async def read_metrics(self, keys):
        return {key: self.metrics.get(key) for key in keys}

    async def write_metric(self, key: str, value: float) -> None:
        self.writes.append((key, value))
        self.metrics[key] = value


@pytest.fixture(autouse=True)
def _clear_editor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("HANDLING_EDITOR_"):
            monkeypatch.delenv(name)


@pytest.fixture
def document() -> FakeDocument:
    return FakeDocument()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime({"accel": 1.0, "topSpeed": 50.0, "mass": 1200.0})
