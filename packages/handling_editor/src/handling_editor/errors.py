"""Exception types raised by the handling editor."""

from __future__ import annotations


class HandlingEditorError(Exception):
    """Base class for handling editor errors."""


class GateConfigurationError(HandlingEditorError, ValueError):
    """Static gate or dependency configuration is malformed.

    These can never be fixed by polling again, so they abort initialization.
    """


class HandlingValueError(HandlingEditorError, ValueError):
    """A handling key or value could not be applied to the vehicle metrics."""


class SchedulerStateError(HandlingEditorError, RuntimeError):
    """Scheduler was started while running or after it stopped."""
