# bouncer_relay/webhooks/dispatcher.py
"""
Fire-and-forget scheduling of bouncer deliveries.

schedule() returns before the delivery starts: the task is spawned on the
next loop tick, so the hook that triggered it has already handed its result
back to the host by the time any network I/O happens.
"""

import asyncio
from typing import Set

from ..logging import get_logger
from ..models import NotificationPayload
from .executor import BouncerExecutor

logger = get_logger(__name__)


class BouncerDispatcher:
    """Schedules deliveries as independent background tasks."""

    def __init__(self, executor: BouncerExecutor):
        self.executor = executor
        self._tasks: Set[asyncio.Task] = set()
        self._scheduled = 0

    @property
    def pending(self) -> int:
        """Deliveries scheduled or in flight."""
        return self._scheduled + len(self._tasks)

    def schedule(self, payload: NotificationPayload) -> None:
        """Queue a delivery for the next loop tick. Never blocks, never raises."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("bouncer_delivery_dropped", comment_id=payload.id, reason="no_event_loop")
            return

        self._scheduled += 1
        loop.call_soon(self._spawn, payload)

    def _spawn(self, payload: NotificationPayload) -> None:
        self._scheduled -= 1
        task = asyncio.ensure_future(self.executor.deliver(payload))
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "bouncer_delivery_crashed",
                error=str(exc),
                error_type=type(exc).__name__,
            )

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self.pending:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                # Spawns queued with call_soon run on the next tick
                await asyncio.sleep(0)
