from __future__ import annotations

import re

import pytest
from handling_editor.models import Settings, load_settings


def test_load_settings_defaults() -> None:
    settings = load_settings()

    assert settings.page_url == "https://slowroads.io/"
    assert settings.supported_version == "1.0.1"
    assert settings.poll_interval_ms == 100
    assert settings.bypass_marker == "?ignore"
    assert settings.log_level == "INFO"


def test_load_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HANDLING_EDITOR_POLL_INTERVAL_MS", "500")
    monkeypatch.setenv("HANDLING_EDITOR_SUPPORTED_VERSION", "1.0.2")
    monkeypatch.setenv("HANDLING_EDITOR_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.poll_interval_ms == 500
    assert settings.supported_version == "1.0.2"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("HANDLING_EDITOR_POLL_INTERVAL_MS", "0"),
        ("HANDLING_EDITOR_POLL_INTERVAL_MS", "fast"),
        ("HANDLING_EDITOR_ORIGINAL_SCRIPT_PATTERN", "main\\.chunk\\.js"),
        ("HANDLING_EDITOR_ORIGINAL_SCRIPT_PATTERN", "main.(["),
        ("HANDLING_EDITOR_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_settings_fail_fast(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        load_settings()


def test_substitute_fail_limit_rounds_up() -> None:
    assert Settings(poll_interval_ms=100, substitute_timeout_ms=15000).substitute_fail_limit == 150
    assert Settings(poll_interval_ms=100, substitute_timeout_ms=250).substitute_fail_limit == 3
    assert Settings(poll_interval_ms=500, substitute_timeout_ms=100).substitute_fail_limit == 1


def test_default_pattern_captures_identifier() -> None:
    match = re.search(
        Settings().original_script_pattern,
        "https://slowroads.io/static/js/main.e7a33c55.chunk.js",
    )

    assert match is not None
    assert match.group("identifier") == "e7a33c55"
