"""Fire-and-forget background work."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Runs best-effort side effects detached from the caller.

    The dispatching call returns immediately. Outcomes are only logged;
    failures never reach the code that dispatched the work.
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, name: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task | None:
        """Schedule ``coro`` on the running event loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            logger.warning("No running event loop; dropped background task %s", name)
            return None

        task = loop.create_task(coro, name=name)
        # The loop only keeps weak references to tasks
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding task, including ones they dispatch."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Background task %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background task %s failed: %s", task.get_name(), exc)
        else:
            logger.debug("Background task %s finished", task.get_name())
