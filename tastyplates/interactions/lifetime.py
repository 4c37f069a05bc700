"""Lifetime scope tying async work to the component that started it."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class Lifetime:
    """Owns the tasks of one component.

    Once closed, spawned tasks are cancelled and ``alive`` is False, so any
    continuation that checks it skips its state writes.
    """

    def __init__(self):
        self._alive = True
        self._tasks: set[asyncio.Task] = set()

    @property
    def alive(self) -> bool:
        return self._alive

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        if not self._alive:
            coro.close()
            raise RuntimeError("Cannot spawn work on a closed lifetime")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def close(self) -> None:
        if not self._alive:
            return
        self._alive = False
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Lifetime closed with {len(pending)} pending task(s)")

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
