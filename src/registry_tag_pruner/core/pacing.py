"""Linear backoff between consecutive registry requests."""

import asyncio
from typing import Awaitable, Callable

Sleep = Callable[[float], Awaitable[None]]


class RequestPacer:
    """Delays each request by ``step * count`` seconds, capped at ``max_delay``.

    A pacer is created per run and passed to each operation, so the counter
    is never shared between runs.
    """

    def __init__(
        self,
        step: float = 0.05,
        max_delay: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.step = step
        self.max_delay = max_delay
        self.count = 0
        self._sleep = sleep

    def next_delay(self) -> float:
        """Delay the next ``wait`` will apply."""
        return min(self.step * self.count, self.max_delay)

    async def wait(self) -> None:
        """Sleep before a request; the first request of a batch is not delayed."""
        delay = self.next_delay()
        self.count += 1
        if delay > 0:
            await self._sleep(delay)

    def reset(self) -> None:
        """Start a new batch."""
        self.count = 0
