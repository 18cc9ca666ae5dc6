"""Logging helpers for condition-scoped messages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s %(levelname)s [handling-editor] [%(condition)s] %(name)s: %(message)s"


class ConditionContextFilter(logging.Filter):
    """Make sure every record carries a ``condition`` attribute."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Default the condition name to '-' for records outside a condition."""
        if not hasattr(record, "condition"):
            record.condition = "-"
        return True


def install_condition_log_filter(handlers: Iterable[logging.Handler] | None = None) -> None:
    """Install condition filters on handlers.

    Args:
        handlers: Optional iterable of handlers. Defaults to the root logger's handlers.
    """
    targets = list(handlers) if handlers is not None else logging.getLogger().handlers
    for handler in targets:
        if any(isinstance(flt, ConditionContextFilter) for flt in handler.filters):
            continue
        handler.addFilter(ConditionContextFilter())


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the condition-aware format."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    install_condition_log_filter()
