"""Timer capability injected into the session state machines."""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Contract for scheduling delayed callbacks."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""


class AsyncioScheduler(Scheduler):
    """Wall-clock scheduler backed by the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)

    def now(self) -> float:
        return asyncio.get_running_loop().time()


@dataclass(order=True)
class _VirtualTimer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler(Scheduler):
    """Manually advanced clock; timers fire only inside ``advance()``."""

    def __init__(self) -> None:
        self._now = 0.0
        self._timers: list[_VirtualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _VirtualTimer(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers in order.

        Timers scheduled by a firing callback run in the same call when they
        fall due before the new time.
        """
        target = self._now + seconds
        while self._timers and self._timers[0].due <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = timer.due
            timer.callback()
        self._now = target
