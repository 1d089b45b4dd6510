"""Rate limiting policies for provider calls."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Throttle(ABC):
    """Pause policy awaited after each rate-limited call."""

    @abstractmethod
    async def wait(self) -> None:
        pass


class FixedDelayThrottle(Throttle):
    """Sleep a fixed delay after every call, whatever its outcome."""

    def __init__(
        self,
        delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self._sleep = sleep

    async def wait(self) -> None:
        if self.delay:
            logger.debug(f"Throttling for {self.delay:.1f}s")
            await self._sleep(self.delay)


class NoDelayThrottle(Throttle):
    """Throttle that never waits; counts calls instead."""

    def __init__(self):
        self.calls = 0

    async def wait(self) -> None:
        self.calls += 1
