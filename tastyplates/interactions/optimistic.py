"""Optimistic mutation: apply locally, call the server, then reconcile or revert.

Every optimistic interaction (likes, follows, wishlist) is an ``OptimisticCommand``
run by an ``OptimisticRunner``:

1. take a snapshot of the local state
2. apply the optimistic change
3. await the remote call, whose direction is decided from the snapshot
4. on success hand the server's answer to ``on_success``; on an exception
   or a result ``accepts`` refuses, hand the snapshot to ``on_failure``

At most one command per key is in flight; a second run for the same key is
skipped rather than queued.

Once the runner's lifetime is closed, results are dropped, unless the
command is ``shared``: its callbacks write state other components read, so
they still run and the run is reported as ``ABANDONED``. Callbacks check
``OptimisticRunner.live`` before touching anything component-local, such as
toasts.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from .lifetime import Lifetime

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")


class CommandResult(str, Enum):
    APPLIED = "applied"
    REVERTED = "reverted"
    SKIPPED_IN_FLIGHT = "skipped_in_flight"
    SKIPPED_UNAUTHENTICATED = "skipped_unauthenticated"
    ABANDONED = "abandoned"


class InFlightGuard:
    """Advisory per-key busy flags."""

    def __init__(self):
        self._busy: set[Hashable] = set()

    def is_busy(self, key: Hashable) -> bool:
        return key in self._busy

    def try_acquire(self, key: Hashable) -> bool:
        if key in self._busy:
            return False
        self._busy.add(key)
        return True

    def release(self, key: Hashable) -> None:
        self._busy.discard(key)


def _always(_: Any) -> bool:
    return True


@dataclass
class OptimisticCommand(Generic[S, R]):
    key: Hashable
    snapshot: Callable[[], S]
    apply: Callable[[S], None]
    remote_call: Callable[[S], Awaitable[R]]
    on_success: Callable[[R], None]
    on_failure: Callable[[S, Any], None]
    accepts: Callable[[R], bool] = field(default=_always)
    shared: bool = False


class OptimisticRunner:
    """Runs optimistic commands under an in-flight guard and a lifetime."""

    def __init__(
        self,
        guard: Optional[InFlightGuard] = None,
        lifetime: Optional[Lifetime] = None,
    ):
        self.guard = guard or InFlightGuard()
        self.lifetime = lifetime

    @property
    def live(self) -> bool:
        return self.lifetime is None or self.lifetime.alive

    async def run(self, command: OptimisticCommand[S, R]) -> CommandResult:
        if not self.guard.try_acquire(command.key):
            logger.debug(f"{command.key} already in flight; ignoring")
            return CommandResult.SKIPPED_IN_FLIGHT

        try:
            before = command.snapshot()
            command.apply(before)

            try:
                result = await command.remote_call(before)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                return self._settle_failure(command, before, e)

            if not command.accepts(result):
                return self._settle_failure(command, before, result)
            return self._settle_success(command, result)
        finally:
            self.guard.release(command.key)

    def _settle_failure(
        self, command: OptimisticCommand[S, R], before: S, cause: Any
    ) -> CommandResult:
        live = self.live
        if not live and not command.shared:
            return CommandResult.ABANDONED
        logger.warning(f"{command.key} failed, reverting: {cause!r}")
        command.on_failure(before, cause)
        return CommandResult.REVERTED if live else CommandResult.ABANDONED

    def _settle_success(self, command: OptimisticCommand[S, R], result: R) -> CommandResult:
        live = self.live
        if not live and not command.shared:
            return CommandResult.ABANDONED
        command.on_success(result)
        return CommandResult.APPLIED if live else CommandResult.ABANDONED
