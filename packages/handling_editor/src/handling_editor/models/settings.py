"""Pydantic models for application settings."""

from __future__ import annotations

import math
import os
import re

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_ORIGINAL_SCRIPT_PATTERN = (
    r"^https://slowroads\.io/static/js/main\.(?P<identifier>[0-9a-f]+)\.chunk\.js$"
)
DEFAULT_MODIFIED_SCRIPT_PREFIX = (
    "https://cdn.jsdelivr.net/gh/Opinion/slowroads-handling-editor@userscript-v1.2"
    "/dist/main.modified."
)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel, frozen=True):
    """Runtime configuration loaded from environment variables."""

    page_url: str = "https://slowroads.io/"
    supported_version: str = "1.0.1"
    original_script_pattern: str = DEFAULT_ORIGINAL_SCRIPT_PATTERN
    modified_script_prefix: str = DEFAULT_MODIFIED_SCRIPT_PREFIX
    modified_script_suffix: str = ".chunk.js"
    bypass_marker: str = Field(default="?ignore", min_length=1)
    poll_interval_ms: int = Field(default=100, gt=0)
    substitute_timeout_ms: int = Field(default=15000, gt=0)
    toastify_script_url: str = "https://cdn.jsdelivr.net/npm/toastify-js"
    toastify_style_url: str = "https://cdn.jsdelivr.net/npm/toastify-js/src/toastify.min.css"
    log_level: str = "INFO"

    @field_validator("original_script_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value)
        except re.error as exc:
            msg = f"Invalid original script pattern: {exc}"
            raise ValueError(msg) from exc
        if compiled.groups < 1:
            msg = "Original script pattern must capture the version identifier."
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            msg = f"Unknown log level '{value}'."
            raise ValueError(msg)
        return level

    @property
    def substitute_fail_limit(self) -> int:
        """Failed substitute checks tolerated before reverting."""
        return max(1, math.ceil(self.substitute_timeout_ms / self.poll_interval_ms))


def load_settings() -> Settings:
    """Load settings from environment variables with defaults."""
    load_dotenv()

    return Settings(
        page_url=os.getenv("HANDLING_EDITOR_PAGE_URL", "https://slowroads.io/"),
        supported_version=os.getenv("HANDLING_EDITOR_SUPPORTED_VERSION", "1.0.1"),
        original_script_pattern=os.getenv(
            "HANDLING_EDITOR_ORIGINAL_SCRIPT_PATTERN", DEFAULT_ORIGINAL_SCRIPT_PATTERN
        ),
        modified_script_prefix=os.getenv(
            "HANDLING_EDITOR_MODIFIED_SCRIPT_PREFIX", DEFAULT_MODIFIED_SCRIPT_PREFIX
        ),
        modified_script_suffix=os.getenv("HANDLING_EDITOR_MODIFIED_SCRIPT_SUFFIX", ".chunk.js"),
        bypass_marker=os.getenv("HANDLING_EDITOR_BYPASS_MARKER", "?ignore"),
        poll_interval_ms=int(os.getenv("HANDLING_EDITOR_POLL_INTERVAL_MS", "100")),
        substitute_timeout_ms=int(os.getenv("HANDLING_EDITOR_SUBSTITUTE_TIMEOUT_MS", "15000")),
        toastify_script_url=os.getenv(
            "HANDLING_EDITOR_TOASTIFY_SCRIPT_URL", "https://cdn.jsdelivr.net/npm/toastify-js"
        ),
        toastify_style_url=os.getenv(
            "HANDLING_EDITOR_TOASTIFY_STYLE_URL",
            "https://cdn.jsdelivr.net/npm/toastify-js/src/toastify.min.css",
        ),
        log_level=os.getenv("HANDLING_EDITOR_LOG_LEVEL", "INFO"),
    )
