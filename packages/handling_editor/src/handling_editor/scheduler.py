"""Fixed-interval poll scheduler driving a gate evaluation function."""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from handling_editor.errors import GateConfigurationError, SchedulerStateError
from handling_editor.gate.models import GateResult, HookSection

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 100


class SchedulerState(str, Enum):
    """Lifecycle of a PollScheduler."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class PollScheduler:
    """Call ``evaluate`` on a fixed interval until it passes or halts.

    The timer is stopped before ``on_all_pass`` or ``on_fatal`` runs, so a
    callback that triggers the scheduler again cannot fire twice.
    """

    def __init__(
        self,
        evaluate: Callable[[], GateResult],
        *,
        before_tick: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._evaluate = evaluate
        self._before_tick = before_tick
        self._state = SchedulerState.IDLE
        self._task: asyncio.Task[GateResult | None] | None = None
        self._ticks = 0
        self.result: GateResult | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def ticks(self) -> int:
        """Number of evaluations performed so far."""
        return self._ticks

    def start(
        self,
        interval_ms: int,
        on_all_pass: Callable[[], Any],
        on_fatal: Callable[[GateResult], Any] | None = None,
    ) -> asyncio.Task[GateResult | None]:
        """Begin polling on the running event loop.

        The first evaluation happens one interval after start.
        """
        if interval_ms <= 0:
            msg = f"Poll interval must be positive, got {interval_ms}."
            raise ValueError(msg)
        if self._state is not SchedulerState.IDLE:
            msg = f"Scheduler cannot be started from state '{self._state.value}'."
            raise SchedulerStateError(msg)

        self._state = SchedulerState.RUNNING
        self._task = asyncio.get_running_loop().create_task(
            self._run(interval_ms / 1000, on_all_pass, on_fatal)
        )
        return self._task

    def stop(self) -> None:
        """Cancel the timer. Safe to call from inside a tick or a callback."""
        if self._state is SchedulerState.STOPPED:
            return
        self._state = SchedulerState.STOPPED
        task = self._task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def wait(self) -> GateResult | None:
        """Wait for the poll loop to finish and return the terminal result."""
        if self._task is None:
            return self.result
        try:
            return await self._task
        except asyncio.CancelledError:
            return self.result

    def tick(self) -> GateResult:
        """Run one evaluation, converting unexpected errors into a fatal result."""
        self._ticks += 1
        try:
            result = self._evaluate()
        except GateConfigurationError:
            self.stop()
            raise
        except Exception as exc:
            logger.exception("Gate evaluation raised; halting the scheduler.")
            result = GateResult.fatal(
                condition="<evaluate>",
                section=HookSection.BEFORE_CHECK,
                reason=f"Evaluation raised {type(exc).__name__}: {exc}",
            )
        return result

    async def _run(
        self,
        interval: float,
        on_all_pass: Callable[[], Any],
        on_fatal: Callable[[GateResult], Any] | None,
    ) -> GateResult | None:
        while self._state is SchedulerState.RUNNING:
            await asyncio.sleep(interval)
            if self._state is not SchedulerState.RUNNING:
                break
            if self._before_tick is not None:
                try:
                    await self._before_tick()
                except Exception:
                    logger.warning(
                        "State refresh failed; evaluating the last known state.", exc_info=True
                    )

            result = self.tick()
            if result.is_pending:
                continue

            self.result = result
            self.stop()
            if result.is_passed:
                logger.info("All conditions passed after %d ticks.", self._ticks)
                await _guarded(on_all_pass)
            else:
                logger.warning(
                    "Gate halted by '%s' after %d ticks: %s",
                    result.condition,
                    self._ticks,
                    result.reason,
                )
                if on_fatal is not None:
                    await _guarded(on_fatal, result)
            return result
        return self.result


async def _guarded(callback: Callable[..., Any], *args: Any) -> None:
    """Run a terminal callback; its errors are logged, never raised to the caller."""
    try:
        outcome = callback(*args)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception:
        logger.exception("Scheduler callback %r raised.", getattr(callback, "__name__", callback))
