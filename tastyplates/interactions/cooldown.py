"""Whole-second submission cooldown."""

from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable, Optional

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class CooldownTimer:
    """Counts down from a start value, one second at a time, to zero.

    The remaining seconds are derived from a deadline on a monotonic clock,
    so the value is right whether or not anyone drives ``run``.
    """

    def __init__(self, clock: Clock = time.monotonic, sleep: Sleep = asyncio.sleep):
        self._clock = clock
        self._sleep = sleep
        self._deadline: Optional[float] = None

    def start(self, seconds: int) -> None:
        if seconds < 0:
            raise ValueError(f"Cooldown must be >= 0. Got: {seconds}")
        self._deadline = self._clock() + seconds

    def cancel(self) -> None:
        self._deadline = None

    @property
    def remaining(self) -> int:
        if self._deadline is None:
            return 0
        left = self._deadline - self._clock()
        if left <= 0:
            self._deadline = None
            return 0
        return math.ceil(left)

    @property
    def active(self) -> bool:
        return self.remaining > 0

    async def run(self, on_tick: Optional[Callable[[int], None]] = None) -> None:
        """Report the remaining seconds once per second until zero."""
        while True:
            remaining = self.remaining
            if on_tick is not None:
                on_tick(remaining)
            if remaining == 0:
                return
            await self._sleep(1)
