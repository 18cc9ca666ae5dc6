"""Binding between handling keys and the vehicle's metrics property bag."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from handling_editor.errors import HandlingValueError
from handling_editor.notifications import Toast

if TYPE_CHECKING:
    from handling_editor.boundaries import HostRuntime, Notifier

logger = logging.getLogger(__name__)

METRICS_PATH = ("current", "vehicleController", "vehicleDef", "metrics")

HANDLING_KEYS: tuple[str, ...] = (
    "accel",
    "topSpeed",
    "brake",
    "reverse",
    "aeroFactor",
    "dampening",
    "drag",
    "jerk",
    "rockFactor",
    "rollResistance",
    "slipBase",
    "slipMod",
    "maxSteer",
    "steerSpeed",
    "steerAccel",
    "steerInterval",
    "mass",
)

RESET_UNAVAILABLE_MESSAGE = "Can't reset handling. Default values have not been initialized yet."


def parse_handling_value(key: str, raw: str | float) -> float:
    """Validate ``key`` and parse ``raw`` into a finite float."""
    if key not in HANDLING_KEYS:
        msg = f"Unknown handling key '{key}'."
        raise HandlingValueError(msg)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        msg = f"Handling value for '{key}' is not a number: {raw!r}"
        raise HandlingValueError(msg) from None
    if not math.isfinite(value):
        msg = f"Handling value for '{key}' must be finite: {raw!r}"
        raise HandlingValueError(msg)
    return value


class HandlingSession:
    """Read, edit and reset vehicle handling once the gate has passed."""

    def __init__(self, runtime: HostRuntime, notifier: Notifier) -> None:
        self._runtime = runtime
        self._notifier = notifier
        self.defaults: dict[str, float | None] | None = None
        self.values: dict[str, float | None] = {}

    async def load(self) -> dict[str, float | None]:
        """Read current values; the first load also records the defaults."""
        self.values = await self._runtime.read_metrics(HANDLING_KEYS)
        if self.defaults is None:
            self.defaults = dict(self.values)
        for key, value in self.values.items():
            logger.debug("Initial value of %s is %s", key, value)
        return dict(self.values)

    async def update(self, key: str, raw: str | float) -> float:
        value = parse_handling_value(key, raw)
        await self._runtime.write_metric(key, value)
        self.values[key] = value
        logger.info("Set %s to %s", key, value)
        return value

    async def reset(self) -> bool:
        """Restore the recorded defaults.

        Returns:
            False if no defaults were recorded yet.
        """
        if self.defaults is None:
            self._notifier.show_message(Toast(text=RESET_UNAVAILABLE_MESSAGE))
            return False
        for key, value in self.defaults.items():
            if value is None:
                continue
            await self._runtime.write_metric(key, value)
        await self.load()
        logger.info("Handling reset to defaults.")
        return True
